"""Parser del literal `Moment.from({...})`.

Por qué un parser propio:
- El literal se copia tal cual desde el reporte de triage; no es JSON (claves
  sin comillas, comillas simples, coma final) y no queremos evaluar código.
- Tokenizer + descenso recursivo: pequeño, sin dependencias, con errores que
  nombran el campo problemático.

Gramática aceptada:

    literal := "Moment" "." "from" "(" object ")"
    object  := "{" [ field ( "," field )* [ "," ] ] "}"
    field   := (IDENT | STRING) ":" value
    value   := STRING | NUMBER | IDENT | object | array
    array   := "[" [ value ( "," value )* [ "," ] ] "]"

Los campos desconocidos se aceptan y se ignoran.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any

from core.domain.models import MOMENT_FIELDS, Moment, ValueShape, coerce_float
from core.errors import ParseError

_MOMENT_PREFIX_RE = re.compile(r"^\s*Moment\s*\.\s*from\s*\(")

_TOKEN_RE = re.compile(
    r"""
      (?P<ws>\s+)
    | (?P<number>[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)
    | (?P<ident>[A-Za-z_$][A-Za-z0-9_$]*)
    | (?P<string>"(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*')
    | (?P<punct>[.(){}\[\]:,])
    """,
    re.VERBOSE | re.DOTALL,
)

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "0": "\0"}


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    pos: int


def is_moment_literal(text: str) -> bool:
    """True si `text` (entero) tiene la forma `Moment.from(...)`."""

    return bool(_MOMENT_PREFIX_RE.match(text))


def tokenize(text: str) -> list[Token]:
    tokens: list[Token] = []
    pos = 0
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if match is None:
            raise ParseError(
                f"invalid Moment: unexpected character {text[pos]!r} at position {pos}",
                token=text,
                expected=ValueShape.MOMENT.label(),
            )
        kind = match.lastgroup or ""
        if kind != "ws":
            tokens.append(Token(kind=kind, text=match.group(), pos=pos))
        pos = match.end()
    tokens.append(Token(kind="eof", text="", pos=len(text)))
    return tokens


def _unquote(raw: str) -> str:
    body = raw[1:-1]
    out: list[str] = []
    i = 0
    while i < len(body):
        ch = body[i]
        if ch == "\\" and i + 1 < len(body):
            nxt = body[i + 1]
            if nxt == "u" and re.fullmatch(r"[0-9a-fA-F]{4}", body[i + 2 : i + 6]):
                out.append(chr(int(body[i + 2 : i + 6], 16)))
                i += 6
                continue
            out.append(_ESCAPES.get(nxt, nxt))
            i += 2
            continue
        out.append(ch)
        i += 1
    return "".join(out)


class _Parser:
    def __init__(self, text: str) -> None:
        self._text = text
        self._tokens = tokenize(text)
        self._index = 0

    def _peek(self) -> Token:
        return self._tokens[self._index]

    def _next(self) -> Token:
        token = self._tokens[self._index]
        if token.kind != "eof":
            self._index += 1
        return token

    def _fail(self, message: str) -> ParseError:
        return ParseError(f"invalid Moment: {message}", token=self._text, expected=ValueShape.MOMENT.label())

    def _expect(self, kind: str, text: str | None = None) -> Token:
        token = self._next()
        if token.kind != kind or (text is not None and token.text != text):
            wanted = repr(text) if text is not None else kind
            found = repr(token.text) if token.kind != "eof" else "end of input"
            raise self._fail(f"expected {wanted} at position {token.pos}, found {found}")
        return token

    def parse(self) -> dict[str, Token]:
        self._expect("ident", "Moment")
        self._expect("punct", ".")
        self._expect("ident", "from")
        self._expect("punct", "(")
        fields = self._object(top_level=True)
        self._expect("punct", ")")
        self._expect("eof")
        return fields

    def _object(self, *, top_level: bool = False) -> dict[str, Token]:
        self._expect("punct", "{")
        fields: dict[str, Token] = {}
        while not (self._peek().kind == "punct" and self._peek().text == "}"):
            key_token = self._next()
            if key_token.kind == "ident":
                key = key_token.text
            elif key_token.kind == "string":
                key = _unquote(key_token.text)
            else:
                raise self._fail(f"expected a field name at position {key_token.pos}")
            self._expect("punct", ":")
            value = self._value()
            if top_level and key in MOMENT_FIELDS:
                if key in fields:
                    raise self._fail(f"duplicate field {key}")
                if value is None:
                    raise self._fail(f"field {key} must be a scalar value")
                fields[key] = value
            if self._peek().kind == "punct" and self._peek().text == ",":
                self._next()
                continue
            if not (self._peek().kind == "punct" and self._peek().text == "}"):
                token = self._peek()
                raise self._fail(f"expected ',' or '}}' at position {token.pos}")
        self._expect("punct", "}")
        return fields

    def _array(self) -> None:
        self._expect("punct", "[")
        while not (self._peek().kind == "punct" and self._peek().text == "]"):
            self._value()
            if self._peek().kind == "punct" and self._peek().text == ",":
                self._next()
                continue
            if not (self._peek().kind == "punct" and self._peek().text == "]"):
                raise self._fail(f"expected ',' or ']' at position {self._peek().pos}")
        self._expect("punct", "]")

    def _value(self) -> Token | None:
        """Devuelve el token escalar, o None para objetos/arrays (solo válidos en campos ignorados)."""

        token = self._peek()
        if token.kind in ("string", "number", "ident"):
            return self._next()
        if token.kind == "punct" and token.text == "{":
            self._object()
            return None
        if token.kind == "punct" and token.text == "[":
            self._array()
            return None
        found = repr(token.text) if token.kind != "eof" else "end of input"
        raise self._fail(f"expected a value at position {token.pos}, found {found}")


def _build(fields: dict[str, Token]) -> Moment:
    missing = [name for name in MOMENT_FIELDS if name not in fields]
    if missing:
        raise ParseError(
            f"invalid Moment: missing field(s) {', '.join(missing)}",
            expected=ValueShape.MOMENT.label(),
        )

    session = fields["session_id"]
    if session.kind != "string":
        raise ParseError(
            f"invalid Moment: field session_id must be a quoted string, got {session.text}",
            token=session.text,
            expected="string",
        )
    session_id = _unquote(session.text)

    raw_hash = fields["input_hash"]
    if raw_hash.kind == "string":
        input_hash = _unquote(raw_hash.text)
    elif raw_hash.kind == "number":
        # Literal numérico sin comillas: se conserva tal cual, sin pasar por int/float.
        input_hash = raw_hash.text
    else:
        raise ParseError(
            f"invalid Moment: field input_hash must be a string or number, got {raw_hash.text}",
            token=raw_hash.text,
            expected="string",
        )

    raw_vtime = fields["vtime"]
    if raw_vtime.kind == "number":
        vtime = float(raw_vtime.text)
        if not math.isfinite(vtime):
            raise ParseError(f"invalid Moment: field vtime is not finite: {raw_vtime.text}", token=raw_vtime.text, expected="float")
    elif raw_vtime.kind == "string":
        vtime = coerce_float(_unquote(raw_vtime.text), field="vtime")
    else:
        raise ParseError(
            f"invalid Moment: field vtime must be a number, got {raw_vtime.text}",
            token=raw_vtime.text,
            expected="float",
        )

    data: dict[str, Any] = {"session_id": session_id, "input_hash": input_hash, "vtime": vtime}
    return Moment.from_mapping(data)


def parse_moment(text: str) -> Moment:
    """Convierte un literal `Moment.from({...})` en un `Moment`."""

    return _build(_Parser(text.strip()).parse())
