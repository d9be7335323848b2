# This file is part of websterdict
# Copyright (C) 2018  Thomas Vogt
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.


import re

from websterdict.util import remove_accents

"""
Lookup keys are the only thing a query is ever matched against, so the
same two functions serve ingestion (one key per word or alias) and query
time (ordered candidates per term).
"""

APOSTROPHES = u"'‘’ʼ`"

_apostrophe_re = re.compile(u"[%s]" % re.escape(APOSTROPHES))
_separator_re = re.compile(r"[^a-z0-9]+")

def normalize_lookup_key(term):
    raw = "" if term is None else str(term).strip()
    if raw == "": return ""
    key = remove_accents(raw.casefold())
    key = _apostrophe_re.sub("", key)
    key = _separator_re.sub("-", key)
    return key.strip("-")

def lookup_candidates(term):
    base = normalize_lookup_key(term)
    if base == "": return []
    out = [base]

    def add(candidate):
        if candidate != "" and candidate not in out:
            out.append(candidate)

    if base.endswith("ies"): add(base[:-3] + "y")
    if base.endswith(("sses", "xes", "zes", "ches", "shes")): add(base[:-2])
    if base.endswith("s") and not base.endswith("ss"): add(base[:-1])
    add(base.replace("-", ""))
    return out
