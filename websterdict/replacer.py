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

from pyquery import PyQuery as pq
from lxml import etree

ENTITIES = [
    ("&nbsp;", " "),
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
]

_bare_amp_re = re.compile(r"&(?!(?:amp|lt|gt|quot|#39);)")

def decode_entities(data):
    data = "" if data is None else str(data)
    for entity, char in ENTITIES:
        data = data.replace(entity, char)
    return data

def escape_html(data):
    data = "" if data is None else str(data)
    return data.replace("&", "&amp;") \
               .replace("<", "&lt;") \
               .replace(">", "&gt;") \
               .replace('"', "&quot;") \
               .replace("'", "&#39;")

def escape_text(data):
    """ Like escape_html, but leaves references made by escape_html alone. """
    data = _bare_amp_re.sub("&amp;", data)
    return data.replace("<", "&lt;") \
               .replace(">", "&gt;") \
               .replace('"', "&quot;") \
               .replace("'", "&#39;")

def regex_replace(data, regex):
    for r in regex:
        data = re.sub(r[0], r[1], data)
    return data

def doc_from_fragment(html):
    parser = etree.HTMLParser(encoding="utf-8")
    wrapped = "<html><body>%s</body></html>" % html
    return pq(etree.fromstring(wrapped.encode("utf-8"), parser=parser))

def doc_foreign_tags(html, allowed):
    """ Names of elements in an HTML fragment that are not in `allowed`. """
    doc = doc_from_fragment(html)
    found = set()
    for el in doc("body").find("*"):
        if not isinstance(el.tag, str): continue
        if el.tag.lower() not in allowed:
            found.add(el.tag.lower())
    return sorted(found)
