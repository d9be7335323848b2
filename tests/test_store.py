"""Tests for the entry store and the lookup resolver."""

import json
import threading

import pytest

from websterdict.entry import DictionaryEntry
from websterdict.store import StoreImportError
from websterdict.resolver import resolve, resolve_all, lookup_edition


def entry(**kwargs):
    values = dict(edition="1828", word="Party", lookup_key="party", entry_text="<p>x</p>")
    values.update(kwargs)
    return DictionaryEntry(**values)


class TestDictionaryEntry:
    """Tests for the entry model."""

    def test_to_json_omits_absent_fields(self):
        data = entry(source_id=3).to_json()
        assert data == {
            "edition": "1828", "word": "Party", "lookupKey": "party",
            "entryText": "<p>x</p>", "sourceId": 3,
        }
        assert None not in data.values()

    def test_json_round_trip(self):
        e = entry(heading="n.", source_id=3, pronounce="par'ty", length=12)
        assert DictionaryEntry.from_json(e.to_json()) == e

    def test_unknown_field(self):
        with pytest.raises(TypeError):
            DictionaryEntry(colour="red")

    def test_same_record_by_source_id(self):
        assert entry(source_id=1).same_record(entry(source_id=1, word="Other"))
        assert not entry(source_id=1).same_record(entry(source_id=2))

    def test_same_record_by_word_and_heading(self):
        assert entry(heading="n.").same_record(entry(heading="n.", source_id=5))
        assert not entry(heading="n.").same_record(entry(heading="v."))
        assert entry().same_record(entry())

    def test_different_key_or_edition(self):
        assert not entry(source_id=1).same_record(entry(source_id=1, lookup_key="parti"))
        assert not entry(source_id=1).same_record(entry(source_id=1, edition="1844"))


class TestDictionaryStore:
    """Tests for insert_or_update and imports."""

    def test_insert_then_update(self, store):
        assert store.insert_or_update(entry(source_id=1)) == "inserted"
        assert store.insert_or_update(entry(source_id=1, entry_text="<p>y</p>")) == "updated"
        stored = store.get("1828", "party")
        assert len(stored) == 1
        assert stored[0].entry_text == "<p>y</p>"

    def test_distinct_source_ids_are_distinct_records(self, store):
        store.insert_or_update(entry(source_id=1, heading="n."))
        store.insert_or_update(entry(source_id=2, heading="v."))
        assert len(store.get("1828", "party")) == 2

    def test_records_without_source_id(self, store):
        store.insert_or_update(entry(heading="n."))
        store.insert_or_update(entry(heading="n.", entry_text="<p>new</p>"))
        store.insert_or_update(entry(heading="v."))
        stored = store.get("1828", "party")
        assert sorted(e.heading for e in stored) == ["n.", "v."]

    def test_values_round_trip(self, store):
        e = entry(heading="n.", source_id=13, pronounce="par'ty", length=41,
                  source_table="dictionary_webster1828")
        store.insert_or_update(e)
        assert store.get("1828", "party") == [e]
        assert isinstance(store.get("1828", "party")[0].source_id, int)

    def test_get_unknown(self, store):
        assert store.get("1913", "nothing") == []

    def test_reimport_adds_no_duplicates(self, store, tmp_path):
        path = tmp_path / "dictionary-all.jsonl"
        entries = [
            entry(source_id=1),
            entry(source_id=2, heading="v."),
            entry(edition="1913", word="Color", lookup_key="color", source_id=9001),
            entry(edition="1913", word="Color", lookup_key="colour", source_id=9001),
            entry(edition="1844", word="Zeal", lookup_key="zeal"),
        ]
        path.write_text("".join(json.dumps(e.to_json()) + "\n" for e in entries))
        assert store.import_jsonl(str(path), batch_size=2) == (5, 0)
        assert store.import_jsonl(str(path), batch_size=2) == (0, 5)
        assert store.count_by_edition() == {"1828": 2, "1844": 1, "1913": 2}

    def test_concurrent_imports_do_not_duplicate(self, store):
        batch = [entry(source_id=i, lookup_key="key%d" % (i % 3)) for i in range(30)]
        threads = [threading.Thread(target=store.upsert_batch, args=(batch,)) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert sum(store.count_by_edition().values()) == 30

    def test_invalid_json_line(self, store, tmp_path):
        path = tmp_path / "bad.jsonl"
        path.write_text('{"edition": "1828"}\nnot json\n')
        with pytest.raises(StoreImportError) as exc:
            store.import_jsonl(str(path))
        assert ":2:" in str(exc.value)


class TestResolver:
    """Tests for resolving terms against the store."""

    def test_morphological_candidate(self, store):
        store.insert_or_update(entry(source_id=13))
        result = resolve(store, "1828", "parties")
        assert result.matched_key == "party"
        assert [e.lookup_key for e in result.entries] == ["party"]

    def test_direct_match_wins(self, store):
        store.insert_or_update(entry(word="Parties", lookup_key="parties", source_id=1))
        store.insert_or_update(entry(source_id=2))
        assert resolve(store, "1828", "Parties").matched_key == "parties"

    def test_entries_sorted_by_source_id(self, store):
        store.insert_or_update(entry(source_id=14, heading="v."))
        store.insert_or_update(entry(heading="adj."))
        store.insert_or_update(entry(source_id=13, heading="n."))
        result = resolve(store, "1828", "party")
        assert [e.source_id for e in result.entries] == [None, 13, 14]

    def test_no_match(self, store):
        store.insert_or_update(entry(source_id=1))
        assert resolve(store, "1828", "zeal") is None
        assert resolve(store, "1844", "party") is None
        assert resolve(store, "1828", "") is None

    def test_resolve_is_read_only(self, store):
        store.insert_or_update(entry(source_id=1))
        resolve(store, "1828", "parties")
        resolve_all(store, "parties")
        assert store.count_by_edition()["1828"] == 1

    def test_resolve_all(self, store):
        store.insert_or_update(entry(source_id=1))
        store.insert_or_update(entry(edition="1913", source_id=7, heading="n."))
        res = resolve_all(store, "Parties")
        assert res["candidates"] == ["parties", "party", "partie"]
        assert res["byEdition"]["1844"] is None
        assert res["byEdition"]["1913"]["matchedKey"] == "party"
        assert res["byEdition"]["1913"]["entries"][0]["heading"] == "n."
        assert res["byEdition"]["1828"]["entries"][0]["pronounce"] is None

    def test_lookup_edition(self, store):
        res = lookup_edition(store, "1828", "zeal")
        assert res == {"term": "zeal", "candidates": ["zeal"], "result": None}
