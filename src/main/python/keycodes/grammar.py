# SPDX-License-Identifier: GPL-2.0-or-later
"""
Textual keycode grammar.

    expr      := sentinel | literal | ident | ident "(" ident ")"
    sentinel  := "" | "-1"
    literal   := "0x" hexdigits | digits

parse_expression() turns a string into one of Plain, Composite, HexLiteral,
DecimalLiteral or Sentinel. It only recognizes the shape of the input;
resolving identifiers against the keycode table is left to the caller.
"""
import re
from collections import namedtuple

Plain = namedtuple("Plain", ["id"])
Composite = namedtuple("Composite", ["fn", "arg"])
HexLiteral = namedtuple("HexLiteral", ["value"])
DecimalLiteral = namedtuple("DecimalLiteral", ["value"])
Sentinel = namedtuple("Sentinel", [])

IDENT = "ident"
LPAREN = "("
RPAREN = ")"

TOKEN_RE = re.compile(r"\s*(?:(\w+)|(\()|(\))|(\S))")
HEX_RE = re.compile(r"^0[xX]([0-9a-fA-F]+)$")
DECIMAL_RE = re.compile(r"^[0-9]+$")


class MalformedCompositePattern(ValueError):
    pass


def tokenize(text):
    pos = 0
    text = text.rstrip()
    while pos < len(text):
        m = TOKEN_RE.match(text, pos)
        ident, lparen, rparen, other = m.groups()
        if other is not None:
            raise MalformedCompositePattern("unexpected {!r} at offset {} in {!r}".format(other, m.start(4), text))
        if ident is not None:
            yield IDENT, ident
        elif lparen is not None:
            yield LPAREN, lparen
        else:
            yield RPAREN, rparen
        pos = m.end()


def _atom(ident):
    m = HEX_RE.match(ident)
    if m:
        return HexLiteral(int(m.group(1), 16))
    if DECIMAL_RE.match(ident):
        return DecimalLiteral(int(ident))
    return Plain(ident)


def parse_expression(text):
    if text.strip() in ("", "-1"):
        return Sentinel()

    tokens = list(tokenize(text))
    kinds = [kind for kind, _ in tokens]

    if kinds == [IDENT]:
        return _atom(tokens[0][1])
    if kinds == [IDENT, LPAREN, IDENT, RPAREN]:
        return Composite(tokens[0][1], tokens[2][1])

    raise MalformedCompositePattern("{!r} is neither a keycode nor fn(keycode)".format(text))
