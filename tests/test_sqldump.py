"""Tests for the SQL dump reader."""

import io

import pytest

from websterdict.sqldump import (
    DumpParser,
    MalformedStatement,
    SourceRow,
    decode_sql_string,
    decode_sql_value,
    extract_tuples,
    parse_insert_statement,
    parse_tuple,
    split_columns,
)


def rows_of(text, parser=None):
    parser = parser or DumpParser()
    return list(parser.iter_rows(io.StringIO(text)))


class TestDecodeValue:
    """Tests for value decoding."""

    def test_escapes(self):
        assert decode_sql_string(r"""O\'Brien\'s \"word\"\n""") == "O'Brien's \"word\"\n"

    def test_control_escapes(self):
        assert decode_sql_string(r"a\tb\rc\0d\Ze\bf") == "a\tb\rc\0d\x1ae\bf"

    def test_escaped_backslash(self):
        assert decode_sql_string(r"a\\c") == "a\\c"

    def test_escapes_apply_in_order(self):
        # "\n" is replaced before "\\"
        assert decode_sql_string(r"C:\\new") == "C:\\\new"
        assert decode_sql_string(r"\''") == "'"

    def test_unknown_escape_is_kept(self):
        assert decode_sql_string(r"a\xb") == "a\\xb"

    def test_doubled_quote(self):
        assert decode_sql_string("it''s") == "it's"

    def test_quoted_value(self):
        assert decode_sql_value(r" 'O\'Brien\'s \"word\"\n' ") == "O'Brien's \"word\"\n"
        assert decode_sql_value("''") == ""

    def test_null(self):
        assert decode_sql_value("NULL") is None
        assert decode_sql_value(" null ") is None

    def test_numbers(self):
        assert decode_sql_value("12") == 12
        assert decode_sql_value("-3") == -3
        assert decode_sql_value("2.5") == 2.5
        assert isinstance(decode_sql_value("12"), int)

    def test_other_text_is_kept(self):
        assert decode_sql_value("CURRENT_TIMESTAMP") == "CURRENT_TIMESTAMP"
        assert decode_sql_value("'12'") == "12"


class TestTuples:
    """Tests for tuple splitting."""

    def test_commas_and_parens_inside_quotes(self):
        assert parse_tuple("12,'a, b (c)','d'") == [12, "a, b (c)", "d"]

    def test_escaped_quote_does_not_close_string(self):
        assert parse_tuple(r"1,'it\'s, fine',NULL") == [1, "it's, fine", None]

    def test_unterminated_string(self):
        with pytest.raises(MalformedStatement):
            parse_tuple("1,'open")

    def test_extract_tuples(self):
        block = "(1,'a (b)'),(2,'c\\')'), (3,NULL)"
        assert extract_tuples(block) == ["1,'a (b)'", "2,'c\\')'", "3,NULL"]

    def test_extract_unbalanced(self):
        with pytest.raises(MalformedStatement):
            extract_tuples("(1,'a'),(2,")


class TestStatement:
    """Tests for whole INSERT statements."""

    def test_columns_strip_backticks(self):
        assert split_columns("`id`, ` word `,_word") == ["id", "word", "_word"]

    def test_parse_insert(self):
        table, columns, tuples = parse_insert_statement(
            "INSERT INTO `t` (`id`, `w`) VALUES (1,'a'),(2,'b');"
        )
        assert table == "t"
        assert columns == ["id", "w"]
        assert tuples == [[1, "a"], [2, "b"]]

    def test_lowercase_keywords(self):
        table, _, tuples = parse_insert_statement("insert into t (id) values (7);")
        assert table == "t"
        assert tuples == [[7]]

    def test_not_an_insert(self):
        with pytest.raises(MalformedStatement):
            parse_insert_statement("INSERT INTO t VALUES (1);")


class TestDumpParser:
    """Tests for streaming rows out of a dump."""

    def test_rows_in_file_order(self):
        rows = rows_of(
            "INSERT INTO t (id, w) VALUES (1,'a'),(2,'b');\n"
            "INSERT INTO u (id) VALUES (3);\n"
        )
        assert [dict(r) for r in rows] == [{"id": 1, "w": "a"}, {"id": 2, "w": "b"}, {"id": 3}]
        assert [r.table for r in rows] == ["t", "t", "u"]
        assert isinstance(rows[0], SourceRow)

    def test_multiline_statement(self):
        rows = rows_of(
            "INSERT INTO t (id, w)\n"
            "VALUES\n"
            "(1,'line one\n"
            "line two'),\n"
            "(2,'b');\n"
        )
        assert [r["w"] for r in rows] == ["line one\nline two", "b"]

    def test_other_content_ignored(self):
        parser = DumpParser()
        rows = rows_of(
            "-- comment;\n"
            "CREATE TABLE t (id int);\n"
            "LOCK TABLES `t` WRITE;\n"
            "INSERT INTO t (id) VALUES (1);\n"
            "UNLOCK TABLES;\n",
            parser,
        )
        assert [r["id"] for r in rows] == [1]
        assert parser.statements == 1
        assert parser.skipped == 0

    def test_malformed_statement_is_skipped(self):
        skipped = []
        parser = DumpParser(on_skip=lambda lineno, reason: skipped.append(lineno))
        rows = rows_of(
            "INSERT INTO t (id) VALUES (1);\n"
            "INSERT INTO t VALUES (2);\n"
            "INSERT INTO t (id) VALUES (3,'x);\n"
            "INSERT INTO t (id) VALUES (4);\n",
            parser,
        )
        assert [r["id"] for r in rows] == [1, 4]
        assert parser.statements == 4
        assert parser.skipped == 2
        assert parser.rows == 2
        assert skipped == [2, 3]

    def test_incomplete_statement_is_discarded(self):
        parser = DumpParser()
        rows = rows_of(
            "INSERT INTO t (id) VALUES (1);\n"
            "INSERT INTO t (id) VALUES (2),\n"
            "(3)\n",
            parser,
        )
        assert [r["id"] for r in rows] == [1]
        assert parser.incomplete == 1

    def test_short_and_long_tuples_pair_positionally(self):
        rows = rows_of("INSERT INTO t (a, b) VALUES (1),(2,3,4);\n")
        assert dict(rows[0]) == {"a": 1}
        assert dict(rows[1]) == {"a": 2, "b": 3}

    def test_crlf_lines(self):
        rows = rows_of("INSERT INTO t (id, w) VALUES\r\n(1,'a');\r\n")
        assert dict(rows[0]) == {"id": 1, "w": "a"}

    def test_parse_file(self, tmp_path):
        path = tmp_path / "dump.sql"
        path.write_text("INSERT INTO t (id, w) VALUES (1,'Ærø');\n", encoding="utf-8")
        rows = list(DumpParser().parse_file(str(path)))
        assert rows[0]["w"] == "Ærø"

    def test_invalid_utf8_statement_is_skipped(self, tmp_path):
        path = tmp_path / "dump.sql"
        path.write_bytes(
            b"INSERT INTO t (id, w) VALUES (1,'a');\n"
            b"INSERT INTO t (id, w) VALUES\n"
            b"(2,'b\xff');\n"
            b"INSERT INTO t (id, w) VALUES (3,'c');\n"
        )
        skipped = []
        parser = DumpParser(on_skip=lambda lineno, reason: skipped.append((lineno, reason)))
        rows = list(parser.parse_file(str(path)))
        assert [r["id"] for r in rows] == [1, 3]
        assert parser.skipped == 1
        assert parser.statements == 3
        assert skipped == [(2, "Invalid UTF-8 on line 3.")]
