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


from websterdict.util import text_value, number_value, warn_nl
from websterdict.entry import DictionaryEntry
from websterdict.lookup import normalize_lookup_key
from websterdict.markup import sanitize
from websterdict.plugin import BasePlugin
from websterdict.stages.processor import Processor, CollectorProcessor

SOURCE_TABLE = "dictionary_webster1913_definitions"

"""
The 1913 edition is spread over three tables: words (headword, pronunciation
and part of speech per word_id), alternative spellings (word_id -> alias)
and definitions (word_id -> text). Words and aliases are collected into
plain dicts first; only then are the definitions streamed and joined
against them, one entry per distinct lookup key of the word.
"""

class WordRecord(object):
    __slots__ = ("word", "lookup_word", "pronounce", "pos")

    def __init__(self, word, lookup_word, pronounce="", pos=""):
        self.word = word
        self.lookup_word = lookup_word
        self.pronounce = pronounce
        self.pos = pos

def word_id_of(row):
    word_id = number_value(row.get("word_id"))
    return word_id if word_id else None

def collect_word(words, row):
    word_id = word_id_of(row)
    if word_id is None: return
    word = text_value(row.get("word"))
    words[word_id] = WordRecord(
        word=word,
        lookup_word=text_value(row.get("_word")) or word,
        pronounce=text_value(row.get("pronounce")),
        pos=text_value(row.get("pos")),
    )

def collect_alias(aliases, row):
    word_id = word_id_of(row)
    if word_id is None: return
    alias = text_value(row.get("_word")) or text_value(row.get("word"))
    lookup_key = normalize_lookup_key(alias)
    if lookup_key == "": return
    # a dict keeps the aliases unique and in order of appearance
    aliases.setdefault(word_id, {})[lookup_key] = None

def build_words_map(rows):
    words = {}
    for row in rows: collect_word(words, row)
    return words

def build_alias_map(rows):
    aliases = {}
    for row in rows: collect_alias(aliases, row)
    return aliases

def map_definition(row, words, aliases):
    """
    Entries for one definition row. Returns None when the row refers to a
    word_id that is not in `words`, and [] when it yields no valid entry.
    """
    word_id = word_id_of(row)
    if word_id is None: return []
    record = words.get(word_id)
    if record is None: return None

    parts = [text_value(row.get("definition")), text_value(row.get("extra"))]
    entry_text = sanitize("\n\n".join(p for p in parts if p != ""))
    if entry_text == "": return []

    primary = normalize_lookup_key(record.lookup_word)
    if primary == "": return []

    lookup_keys = [primary]
    for alias in aliases.get(word_id, ()):
        if alias not in lookup_keys: lookup_keys.append(alias)

    return [DictionaryEntry(
        edition="1913",
        word=record.word or lookup_key,
        lookup_key=lookup_key,
        heading=record.pos or None,
        entry_text=entry_text,
        pronounce=record.pronounce or None,
        source_table=SOURCE_TABLE,
        source_id=number_value(row.get("definition_id")),
    ) for lookup_key in lookup_keys]

class DefinitionsProcessor(Processor):
    def __init__(self, plugin, path, words, aliases):
        super(DefinitionsProcessor, self).__init__(plugin, path,
                                                   label="Processing definitions")
        self.words, self.aliases = words, aliases

    def process_row(self, row):
        entries = map_definition(row, self.words, self.aliases)
        if entries is None:
            self.plugin.orphans += 1
        elif len(entries) == 0:
            self.plugin.dropped += 1
        else:
            for entry in entries:
                self.plugin.append(entry)

    def do_run(self):
        Processor.do_run(self)
        if self.plugin.orphans > 0:
            warn_nl("1913: dropped {} definitions without a matching word.".format(
                self.plugin.orphans
            ))

class Plugin(BasePlugin):
    edition = "1913"
    dictname = "Webster's Revised Unabridged Dictionary (1913)"
    sources = {
        "words": "dictionary_webster1913_words.sql",
        "definitions": "dictionary_webster1913_definitions.sql",
        "alt": "dictionary_webster1913_alt.sql",
    }
    optional_sources = ("alt",)

    def setup(self):
        words = CollectorProcessor(self, self.source_path("words"), collect_word,
                                   label="Collecting words")
        self.stages = [words]
        aliases = {}
        if self.has_source("alt"):
            alt = CollectorProcessor(self, self.source_path("alt"), collect_alias,
                                     label="Collecting alternative spellings")
            self.stages.append(alt)
            aliases = alt.data
        self.stages.append(DefinitionsProcessor(
            self, self.source_path("definitions"), words.data, aliases
        ))
