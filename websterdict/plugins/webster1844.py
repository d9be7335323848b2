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

SOURCE_TABLE = "dictionary_webster1844"

class Plugin(BasePlugin):
    edition = "1844"
    dictname = "Webster's American Dictionary of the English Language (1844)"
    sources = {"entries": "dictionary_webster1844.sql"}

    def setup(self):
        self.stages = [
            EntryProcessor(self, self.source_path("entries"), to_entries,
                           label="Processing entries"),
        ]

def to_entries(row):
    word = text_value(row.get("_word"))
    lookup_key = normalize_lookup_key(word)
    entry_text = sanitize(text_value(row.get("definition")))
    if lookup_key == "" or entry_text == "":
        return []
    return [DictionaryEntry(
        edition="1844",
        word=word or lookup_key,
        lookup_key=lookup_key,
        entry_text=entry_text,
        pronounce=text_value(row.get("pronounce")) or None,
        source_table=SOURCE_TABLE,
        source_id=number_value(row.get("dictionary_webster1844_id")),
    )]
