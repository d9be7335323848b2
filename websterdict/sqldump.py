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

"""
Reader for the INSERT statements of the legacy MySQL dumps.

Only the literal subset written by the dump generator is understood:

    INSERT INTO `table` (`col`, `col`, ...) VALUES (...), (...), ...;

Statements may span several lines. Anything outside INSERT statements is
ignored, and a statement that cannot be parsed is skipped and counted
without aborting the run.
"""

_insert_start_re = re.compile(r"^INSERT\s+INTO", re.IGNORECASE)
_insert_re = re.compile(
    r"INSERT\s+INTO\s+`?([a-zA-Z0-9_]+)`?\s*\(([\s\S]*?)\)\s*VALUES\s*([\s\S]*?)\s*;?\s*$",
    re.IGNORECASE
)
_null_re = re.compile(r"^null$", re.IGNORECASE)
_number_re = re.compile(r"^-?\d+(\.\d+)?$")
# applied one after another, in this order
ESCAPES = [
    ("\\0", "\0"),
    ("\\n", "\n"),
    ("\\r", "\r"),
    ("\\t", "\t"),
    ("\\b", "\b"),
    ("\\Z", "\x1a"),
    ('\\"', '"'),
    ("\\'", "'"),
    ("\\\\", "\\"),
    ("''", "'"),
]

class MalformedStatement(ValueError): pass

class SourceRow(dict):
    """ Column name -> value for one tuple of one INSERT statement. """
    def __init__(self, table, columns, values):
        super(SourceRow, self).__init__(zip(columns, values))
        self.table = table

    def __repr__(self):
        return "SourceRow(%r, %s)" % (self.table, dict.__repr__(self))

def split_columns(fragment):
    columns = [c.strip().strip("`").strip() for c in fragment.split(",")]
    return [c for c in columns if c != ""]

def decode_sql_string(value):
    # unknown escapes keep their backslash
    for escaped, char in ESCAPES:
        value = value.replace(escaped, char)
    return value

def decode_sql_value(raw):
    text = raw.strip()
    if _null_re.match(text): return None
    if len(text) >= 2 and text.startswith("'") and text.endswith("'"):
        return decode_sql_string(text[1:-1])
    m = _number_re.match(text)
    if m is not None:
        return float(text) if m.group(1) else int(text)
    return text

def parse_tuple(tuple_text):
    """ Split the inside of one tuple on top-level commas and decode. """
    values, current = [], []
    in_string = escaped = False
    for ch in tuple_text:
        if in_string:
            current.append(ch)
            if escaped: escaped = False
            elif ch == "\\": escaped = True
            elif ch == "'": in_string = False
            continue
        if ch == "'":
            in_string = True
            current.append(ch)
        elif ch == ",":
            values.append(decode_sql_value("".join(current)))
            current = []
        else:
            current.append(ch)
    if in_string:
        raise MalformedStatement("Unterminated string in tuple.")
    values.append(decode_sql_value("".join(current)))
    return values

def extract_tuples(values_block):
    """ Spans between the outermost parentheses, ignoring quoted text. """
    tuples = []
    depth, start = 0, -1
    in_string = escaped = False
    for i, ch in enumerate(values_block):
        if in_string:
            if escaped: escaped = False
            elif ch == "\\": escaped = True
            elif ch == "'": in_string = False
            continue
        if ch == "'":
            in_string = True
        elif ch == "(":
            if depth == 0: start = i + 1
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth < 0:
                raise MalformedStatement("Unbalanced ')' in VALUES.")
            if depth == 0:
                tuples.append(values_block[start:i])
                start = -1
    if in_string or depth != 0:
        raise MalformedStatement("Unterminated tuple in VALUES.")
    return tuples

def parse_insert_statement(statement):
    """ Returns (table, columns, [values, ...]); raises MalformedStatement. """
    m = _insert_re.search(statement)
    if m is None:
        raise MalformedStatement("Not an INSERT INTO ... VALUES statement.")
    table = m.group(1)
    columns = split_columns(m.group(2))
    tuples = [parse_tuple(t) for t in extract_tuples(m.group(3))]
    if len(columns) == 0 or len(tuples) == 0:
        raise MalformedStatement("No columns or no tuples in statement.")
    return table, columns, tuples

class DumpParser(object):
    """
    Streams SourceRow objects out of a dump, in file order.

    The counters are cumulative over all streams handed to iter_rows():
    statements (complete INSERT statements seen), rows (tuples yielded),
    skipped (statements that failed to parse or hold invalid UTF-8) and
    incomplete (a statement still open when its stream ended).
    """
    statements = 0
    rows = 0
    skipped = 0
    incomplete = 0

    def __init__(self, on_skip=None):
        self.on_skip = on_skip
        self._invalid = set()

    def _skip(self, lineno, reason):
        self.skipped += 1
        if self.on_skip is not None:
            self.on_skip(lineno, reason)

    def _parse(self, statement, lineno):
        self.statements += 1
        try:
            return parse_insert_statement(statement)
        except MalformedStatement as e:
            self._skip(lineno, str(e))
            return None

    def decode_lines(self, lines):
        """ Decodes byte lines strictly, remembering the ones that fail. """
        self._invalid = set()
        for lineno, line in enumerate(lines, 1):
            try: yield line.decode("utf-8")
            except UnicodeDecodeError:
                self._invalid.add(lineno)
                yield line.decode("utf-8", errors="replace")

    def statements_of(self, lines):
        """ Yields (first line number, statement text) pairs. """
        collecting = False
        statement, start, invalid = [], 0, None
        for lineno, line in enumerate(lines, 1):
            line = line.rstrip("\r\n")
            trimmed = line.strip()
            if not collecting:
                if not _insert_start_re.match(trimmed): continue
                collecting, statement, start, invalid = True, [], lineno, None
            statement.append(line)
            if invalid is None and lineno in self._invalid:
                invalid = lineno
            if trimmed.endswith(";"):
                collecting = False
                if invalid is not None:
                    self.statements += 1
                    self._skip(start, "Invalid UTF-8 on line {}.".format(invalid))
                    continue
                yield start, "\n".join(statement)
        if collecting:
            self.incomplete += 1
            if self.on_skip is not None:
                self.on_skip(start, "Statement not terminated before end of file.")

    def iter_rows(self, lines):
        for lineno, statement in self.statements_of(lines):
            parsed = self._parse(statement, lineno)
            if parsed is None: continue
            table, columns, tuples = parsed
            for values in tuples:
                self.rows += 1
                yield SourceRow(table, columns, values)

    def parse_file(self, path):
        with open(path, "rb") as f:
            for row in self.iter_rows(self.decode_lines(f)):
                yield row
        self._invalid = set()
