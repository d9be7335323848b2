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
from enum import Enum

from websterdict.replacer import decode_entities, escape_html, escape_text, regex_replace

"""
Turns the raw body of a dictionary entry into a small, fixed subset of HTML.

The rewrite happens in two passes. The structural pass maps legacy block
markup onto blank lines and blockquote markers. The inline pass then walks
every remaining tag: tags of the allowlist are reduced to their bare
canonical form, every other tag is escaped and wrapped in the flag marker,
so it stays visible as text instead of being interpreted or lost.
"""

class InlineTag(Enum):
    BOLD = "b"
    STRONG = "strong"
    ITALIC = "i"
    EMPHASIS = "em"
    UNDERLINE = "u"
    SUPERSCRIPT = "sup"
    SUBSCRIPT = "sub"
    SMALL = "small"
    BREAK = "br"
    FLAG = "mark"
    BLOCKQUOTE = "blockquote"

TAGS = {t.value: t for t in InlineTag}
ALLOWED_TAGS = frozenset(list(TAGS) + ["p"])

BLOCKQUOTE_OPEN = "<blockquote>"
BLOCKQUOTE_CLOSE = "</blockquote>"

_tag_re = re.compile(r"(<\/?[^>]+>)")
_tag_name_re = re.compile(r"^<\s*(/?)\s*([a-z0-9]+)\b", re.IGNORECASE)
_blockquote_block_re = re.compile(r"<blockquote>([\s\S]*?)</blockquote>")

STRUCTURE = [
    [r"\r\n?", "\n"],
    [r"(?i)\[uCode:[^\]\s,;)]*[\]\.]?", lambda m: flag(m.group(0))],
    [r"(?i)<span\b[^>]*class=[\"']term[\"'][^>]*>([\s\S]*?)</span>", r"<strong>\1</strong>"],
    [r"(?i)</?(?:div|p)\b[^>]*>", "\n\n"],
    [r"(?i)<br\s*/?>", "\n"],
    [r"(?i)<\s*blockquote\b[^>]*>", "\n\n" + BLOCKQUOTE_OPEN + "\n"],
    [r"(?i)<\s*/\s*blockquote\s*>", "\n" + BLOCKQUOTE_CLOSE + "\n\n"],
]

def flag(raw):
    return "<%s>%s</%s>" % (InlineTag.FLAG.value, escape_html(raw), InlineTag.FLAG.value)

def render_tag(tag):
    """ Canonical form of one tag occurrence, or its flagged escape. """
    m = _tag_name_re.match(tag)
    variant = TAGS.get(m.group(2).lower()) if m is not None else None
    if variant is None:
        return flag(tag)
    if variant is InlineTag.BREAK:
        return "<br>"
    closing = m.group(1) == "/"
    return "<%s%s>" % ("/" if closing else "", variant.value)

def sanitize_inline(data):
    parts = _tag_re.split(data)
    out = []
    for i, part in enumerate(parts):
        # odd indices are the captured tags
        if i % 2 == 1: out.append(render_tag(part))
        else: out.append(escape_text(part))
    return "".join(out)

def normalize_structure(data):
    data = regex_replace(decode_entities(data), STRUCTURE)
    data = sanitize_inline(data)
    data = re.sub(r"[ \t]+\n", "\n", data)
    data = re.sub(r"\n{3,}", "\n\n", data)
    return data.strip()

def inline_block(data):
    data = data.replace(BLOCKQUOTE_OPEN, "").replace(BLOCKQUOTE_CLOSE, "")
    return re.sub(r"\n+", "<br>", data.strip())

def sanitize(raw):
    data = normalize_structure(raw)
    if data == "": return ""
    blocks = []

    def paragraphs(text):
        for part in re.split(r"\n{2,}", text):
            part = inline_block(part)
            if part != "":
                blocks.append("<p>%s</p>" % part)

    cursor = 0
    for m in _blockquote_block_re.finditer(data):
        paragraphs(data[cursor:m.start()])
        inner = inline_block(m.group(1))
        if inner != "":
            blocks.append("<blockquote>%s</blockquote>" % inner)
        cursor = m.end()
    paragraphs(data[cursor:])
    return "".join(blocks)
