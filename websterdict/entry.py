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


FIELDS = [
    ("edition", "edition"),
    ("word", "word"),
    ("lookup_key", "lookupKey"),
    ("heading", "heading"),
    ("entry_text", "entryText"),
    ("source_table", "sourceTable"),
    ("source_id", "sourceId"),
    ("pronounce", "pronounce"),
    ("length", "length"),
]

class DictionaryEntry(object):
    edition = ""
    word = ""
    lookup_key = ""
    heading = None
    entry_text = ""
    source_table = None
    source_id = None
    pronounce = None
    length = None

    def __init__(self, **kwargs):
        for attr, _ in FIELDS:
            if attr in kwargs:
                setattr(self, attr, kwargs.pop(attr))
        if len(kwargs) > 0:
            raise TypeError("Unknown entry fields: %s" % ", ".join(sorted(kwargs)))

    def __repr__(self):
        return "DictionaryEntry(%s)" % ", ".join(
            "%s=%r" % (attr, getattr(self, attr)) for attr, _ in FIELDS
        )

    def __eq__(self, other):
        if not isinstance(other, DictionaryEntry): return NotImplemented
        return self.to_json() == other.to_json()

    def to_json(self):
        """ Output record: absent optionals are left out, never null. """
        out = {}
        for attr, key in FIELDS:
            value = getattr(self, attr)
            if value is None or value == "": continue
            out[key] = value
        return out

    @classmethod
    def from_json(cls, data):
        kwargs = {}
        for attr, key in FIELDS:
            if data.get(key) is not None:
                kwargs[attr] = data[key]
        return cls(**kwargs)

    def same_record(self, other):
        """
        Identity used when merging into a store: same edition and lookup
        key, and either equal source ids (when both have one) or, failing
        that, the same word and heading.
        """
        if self.edition != other.edition or self.lookup_key != other.lookup_key:
            return False
        if self.source_id is not None and other.source_id is not None:
            return self.source_id == other.source_id
        return self.word == other.word and self.heading == other.heading
