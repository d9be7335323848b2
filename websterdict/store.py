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


import os
import json
import time
import sqlite3
import threading

from websterdict.util import mkdir_p, EDITIONS
from websterdict.entry import DictionaryEntry

COLUMNS = [
    "edition", "word", "lookup_key", "heading", "entry_text",
    "source_table", "source_id", "pronounce", "length",
]

class StoreImportError(ValueError): pass

class DictionaryStore(object):
    """
    Durable home of the entries, an sqlite database with one table.

    get() and insert_or_update() are the only operations the resolver and
    the importer rely on. Each insert_or_update() is a single check-then-write
    transaction, so concurrent imports of overlapping data do not produce
    duplicates.
    """
    _lock = threading.Lock()

    def __init__(self, path):
        self.path = path
        self.setup()

    def connect(self):
        conn = sqlite3.connect(self.path, timeout=30, isolation_level=None)
        conn.row_factory = sqlite3.Row
        return conn

    def setup(self):
        dirname = os.path.dirname(self.path)
        if dirname != "": mkdir_p(dirname)
        conn = self.connect()
        try:
            c = conn.cursor()
            c.execute('''
                CREATE TABLE IF NOT EXISTS entries (
                    id INTEGER PRIMARY KEY,
                    edition TEXT NOT NULL,
                    word TEXT NOT NULL,
                    lookup_key TEXT NOT NULL,
                    heading TEXT,
                    entry_text TEXT NOT NULL,
                    source_table TEXT,
                    source_id NUMERIC,
                    pronounce TEXT,
                    length NUMERIC,
                    updated_at REAL
                )
            ''')
            c.execute('''
                CREATE INDEX IF NOT EXISTS entries_edition_lookup_idx
                ON entries (edition, lookup_key)
            ''')
        finally:
            conn.close()

    @staticmethod
    def _entry(row):
        return DictionaryEntry(**{col: row[col] for col in COLUMNS if row[col] is not None})

    def _get(self, c, edition, lookup_key):
        rows = c.execute('''
            SELECT * FROM entries WHERE edition=? AND lookup_key=?
            ORDER BY id
        ''', (edition, lookup_key)).fetchall()
        return [(row["id"], self._entry(row)) for row in rows]

    def get(self, edition, lookup_key):
        conn = self.connect()
        try:
            return [entry for _, entry in self._get(conn.cursor(), edition, lookup_key)]
        finally:
            conn.close()

    def _upsert(self, c, entry):
        values = [getattr(entry, col) for col in COLUMNS] + [time.time()]
        for rowid, existing in self._get(c, entry.edition, entry.lookup_key):
            if existing.same_record(entry):
                c.execute('''
                    UPDATE entries
                    SET edition=?, word=?, lookup_key=?, heading=?, entry_text=?,
                        source_table=?, source_id=?, pronounce=?, length=?,
                        updated_at=?
                    WHERE id=?
                ''', values + [rowid])
                return "updated"
        c.execute('''
            INSERT INTO entries (edition, word, lookup_key, heading, entry_text,
                                 source_table, source_id, pronounce, length,
                                 updated_at)
            VALUES (?,?,?,?,?,?,?,?,?,?)
        ''', values)
        return "inserted"

    def upsert_batch(self, entries):
        """ Returns (inserted, updated). All or nothing per batch. """
        result = {"inserted": 0, "updated": 0}
        with self._lock:
            conn = self.connect()
            try:
                c = conn.cursor()
                c.execute("BEGIN IMMEDIATE")
                try:
                    for entry in entries:
                        result[self._upsert(c, entry)] += 1
                except BaseException:
                    c.execute("ROLLBACK")
                    raise
                c.execute("COMMIT")
            finally:
                conn.close()
        return result["inserted"], result["updated"]

    def insert_or_update(self, entry):
        inserted, updated = self.upsert_batch([entry])
        return "inserted" if inserted else "updated"

    def import_jsonl(self, path, batch_size=100, on_batch=None):
        """ Returns (inserted, updated) for one JSONL file. """
        inserted = updated = 0
        batch = []

        def flush():
            i, u = self.upsert_batch(batch)
            del batch[:]
            if on_batch is not None: on_batch(i + u)
            return i, u

        with open(path, "r", encoding="utf-8") as f:
            for lineno, line in enumerate(f, 1):
                line = line.strip()
                if line == "": continue
                try: data = json.loads(line)
                except ValueError as e:
                    raise StoreImportError("{}:{}: invalid JSON ({})".format(path, lineno, e))
                batch.append(DictionaryEntry.from_json(data))
                if len(batch) >= batch_size:
                    i, u = flush()
                    inserted, updated = inserted + i, updated + u
        if len(batch) > 0:
            i, u = flush()
            inserted, updated = inserted + i, updated + u
        return inserted, updated

    def count_by_edition(self):
        counts = {e: 0 for e in EDITIONS}
        conn = self.connect()
        try:
            for edition, no in conn.execute('''
                SELECT edition, COUNT(*) FROM entries GROUP BY edition
            '''):
                counts[edition] = no
        finally:
            conn.close()
        return counts

    def iter_edition(self, edition):
        conn = self.connect()
        try:
            for row in conn.execute('''
                SELECT * FROM entries WHERE edition=? ORDER BY source_id, id
            ''', (edition,)):
                yield self._entry(row)
        finally:
            conn.close()

    def export(self, edition, fname, dictname=None):
        """
        Write one edition as a StarDict glossary. Entries sharing a source
        id (the 1913 alias fan-out) become one article whose other lookup
        keys are synonyms. Returns the number of articles.
        """
        from pyglossary.glossary_v2 import Glossary

        articles = []
        by_source = {}
        for entry in self.iter_edition(edition):
            key = (entry.source_table, entry.source_id)
            if entry.source_id is not None and key in by_source:
                words = by_source[key][0]
                if entry.lookup_key not in words: words.append(entry.lookup_key)
                continue
            article = ([entry.word, entry.lookup_key], entry.entry_text)
            if entry.word == entry.lookup_key: article = ([entry.word], entry.entry_text)
            articles.append(article)
            if entry.source_id is not None: by_source[key] = article

        Glossary.init()
        g = Glossary()
        for words, definition in articles:
            g.addEntry(g.newEntry(words, definition, "h"))
        g.setInfo("name", dictname or "Webster's Dictionary ({})".format(edition))
        mkdir_p(os.path.dirname(os.path.abspath(fname)))
        g.write(fname, "Stardict")
        return len(articles)
