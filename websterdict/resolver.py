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


from websterdict.util import EDITIONS
from websterdict.lookup import lookup_candidates

class LookupResult(object):
    def __init__(self, matched_key, entries):
        self.matched_key = matched_key
        self.entries = entries

    def __repr__(self):
        return "LookupResult(%r, %d entries)" % (self.matched_key, len(self.entries))

    def to_json(self):
        return {
            "matchedKey": self.matched_key,
            "entries": [serialize_entry(e) for e in self.entries],
        }

def serialize_entry(entry):
    return {
        "edition": entry.edition,
        "word": entry.word,
        "lookupKey": entry.lookup_key,
        "heading": entry.heading,
        "entryText": entry.entry_text,
        "sourceId": entry.source_id,
        "pronounce": entry.pronounce,
    }

def resolve(store, edition, term):
    """
    First candidate of `term` with entries in `edition` wins; its entries
    come back ordered by source id (missing ids count as 0). None when no
    candidate matches.
    """
    for lookup_key in lookup_candidates(term):
        entries = store.get(edition, lookup_key)
        if len(entries) > 0:
            entries = sorted(entries, key=lambda e: e.source_id or 0)
            return LookupResult(lookup_key, entries)
    return None

def lookup_edition(store, edition, term):
    result = resolve(store, edition, term)
    return {
        "term": term,
        "candidates": lookup_candidates(term),
        "result": result.to_json() if result is not None else None,
    }

def resolve_all(store, term):
    by_edition = {}
    for edition in EDITIONS:
        result = resolve(store, edition, term)
        by_edition[edition] = result.to_json() if result is not None else None
    return {
        "term": term,
        "candidates": lookup_candidates(term),
        "byEdition": by_edition,
    }
