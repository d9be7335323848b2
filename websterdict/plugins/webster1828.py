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


from websterdict.util import text_value, number_value
from websterdict.entry import DictionaryEntry
from websterdict.lookup import normalize_lookup_key
from websterdict.markup import sanitize
from websterdict.plugin import BasePlugin
from websterdict.stages.processor import EntryProcessor

SOURCE_TABLE = "dictionary_webster1828"

class Plugin(BasePlugin):
    edition = "1828"
    dictname = "Webster's American Dictionary of the English Language (1828)"
    sources = {"entries": "dictionary_webster1828.sql"}

    def setup(self):
        self.stages = [
            EntryProcessor(self, self.source_path("entries"), to_entries,
                           label="Processing entries"),
        ]

def to_entries(row):
    word = text_value(row.get("word")) or text_value(row.get("_word")) \
        or text_value(row.get("heading"))
    lookup_key = normalize_lookup_key(text_value(row.get("_word")) or word)
    entry_text = sanitize(text_value(row.get("content")) or text_value(row.get("string")))
    if lookup_key == "" or entry_text == "":
        return []
    return [DictionaryEntry(
        edition="1828",
        word=word or lookup_key,
        lookup_key=lookup_key,
        heading=text_value(row.get("heading")) or None,
        entry_text=entry_text,
        source_table=SOURCE_TABLE,
        source_id=number_value(row.get("id")),
        length=number_value(row.get("length")),
    )]
