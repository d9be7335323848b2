"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Add repository root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))


WEBSTER1828_SQL = """-- MySQL dump 10.13
DROP TABLE IF EXISTS `dictionary_webster1828`;
CREATE TABLE `dictionary_webster1828` (
  `id` int(11) NOT NULL,
  `word` varchar(255) DEFAULT NULL
);
INSERT INTO dictionary_webster1828 (id, word, _word, content) VALUES (12,'Abandon','abandon','To <i>give up</i>.');
INSERT INTO `dictionary_webster1828` (`id`, `word`, `_word`, `heading`, `content`, `length`) VALUES
(13,'Party','party','n.','A number of persons united in opinion.',41),
(14,'Party','party','v.','To divide into parties.',23),
(15,'','','','Nothing to look up.',19);
INSERT INTO dictionary_webster1828 (id, word, _word, content) VALUES (16,'Broken','broken','unterminated
"""

WEBSTER1844_SQL = """INSERT INTO dictionary_webster1844 (dictionary_webster1844_id, _word, definition, pronounce) VALUES
(1,'Charity','Love; <b>benevolence</b>.','char\\'i-ty'),
(2,'Zeal','','zeel');
"""

WEBSTER1913_WORDS_SQL = """INSERT INTO dictionary_webster1913_words (word_id, word, _word, pronounce, pos) VALUES
(500,'Color','color','kul\\'er','n.'),
(501,'Heaven','heaven',NULL,'n.');
"""

WEBSTER1913_ALT_SQL = """INSERT INTO dictionary_webster1913_alt (word_id, _word) VALUES
(500,'colour'),
(500,'Color'),
(501,'');
"""

WEBSTER1913_DEFINITIONS_SQL = """INSERT INTO dictionary_webster1913_definitions (definition_id, word_id, definition, extra) VALUES
(9001,500,'A property depending on the relations of light to the eye.','Syn. -- Hue; tint.'),
(9002,501,'The expanse of space surrounding the earth.',NULL),
(9003,777,'A definition whose word went missing.',NULL);
"""


def write_sources(root, editions=("1828", "1844", "1913"), alt=True):
    files = {}
    if "1828" in editions:
        files["dictionary_webster1828.sql"] = WEBSTER1828_SQL
    if "1844" in editions:
        files["dictionary_webster1844.sql"] = WEBSTER1844_SQL
    if "1913" in editions:
        files["dictionary_webster1913_words.sql"] = WEBSTER1913_WORDS_SQL
        files["dictionary_webster1913_definitions.sql"] = WEBSTER1913_DEFINITIONS_SQL
        if alt:
            files["dictionary_webster1913_alt.sql"] = WEBSTER1913_ALT_SQL
    for name, content in files.items():
        (root / name).write_text(content, encoding="utf-8")
    return root


class ListWriter:
    """Stands in for the JSONL writer queue."""

    def __init__(self):
        self.entries = []

    def put(self, entry):
        self.entries.append(entry)


@pytest.fixture
def source_root(tmp_path):
    """A source root holding dumps for all three editions."""
    root = tmp_path / "sql"
    root.mkdir()
    return write_sources(root)


@pytest.fixture
def list_writer():
    return ListWriter()


@pytest.fixture
def store(tmp_path):
    from websterdict.store import DictionaryStore
    return DictionaryStore(str(tmp_path / "db" / "dictionary.sqlite"))
