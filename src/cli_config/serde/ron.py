# src/cli_config/serde/ron.py
"""
Codec textual RON (Rusty Object Notation).

Este módulo implementa o subconjunto de RON necessário para persistir
configurações baseadas em dataclasses:

Escrita (`to_string_pretty`):
    - structs → `(campo: valor, ...)` (ou `Nome(...)` com `struct_names=True`)
    - Optional → `Some(valor)` / `None`
    - Enum → nome do membro como identificador
    - listas → `[...]`, mapas → `{chave: valor}`, tuplas → `(a, b)`
    - indentação de 4 espaços e vírgula final em coleções multi-linha

Leitura (`loads`):
    - produz uma árvore pura (ver `cli_config.model`)
    - structs → dict, `Some(v)` → v, `None` → None, identificadores → str
    - ignora comentários `//` e `/* */` (aninhados) e atributos `#![...]`
    - aceita vírgulas finais, inteiros hex/octal/binários e strings raw

Limites explícitos:
    - Não conhece o schema (a validação é feita por `from_plain`)
    - Variantes de enum com dados não são suportadas
"""

from __future__ import annotations

import dataclasses
import json
import math
import re
import typing
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..model import field_types, is_optional, strip_optional


INDENT = "    "

_IDENT_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_NUMBER_RE = re.compile(
    r"[+-]?(?:"
    r"0x[0-9A-Fa-f_]+|0o[0-7_]+|0b[01_]+"
    r"|(?:\d[\d_]*)?\.?\d[\d_]*(?:[eE][+-]?\d+)?"
    r")"
)
_STRING_RE = re.compile(r'"(?:[^"\\]|\\.)*"', re.DOTALL)
_RAW_STRING_RE = re.compile(r'r(#*)"(.*?)"\1', re.DOTALL)
_CHAR_RE = re.compile(r"'(?:[^'\\]|\\.)+'")
_RUST_UNICODE_ESCAPE_RE = re.compile(r"\\u\{([0-9A-Fa-f]{1,6})\}")


class RonSyntaxError(ValueError):
    """Texto RON malformado; carrega linha e coluna (base 1) do problema."""

    def __init__(self, message: str, line: int, column: int):
        super().__init__(f"{message} (linha {line}, coluna {column})")
        self.line = line
        self.column = column


# ---------------------------------------------------------------------------
# Escrita
# ---------------------------------------------------------------------------

def to_string_pretty(value: Any, *, struct_names: bool = False) -> str:
    """
    Serializa `value` em RON com pretty-print.

    Args:
        value: Configuração (dataclass) ou qualquer valor suportado.
        struct_names: Prefixa structs com o nome da classe.

    Returns:
        str: Texto RON (sem newline final).

    Raises:
        TypeError: Se algum valor não possuir representação em RON.
    """
    return _write(value, None, 0, struct_names)


def _write(value: Any, hint: Any, depth: int, struct_names: bool) -> str:
    if hint is not None and is_optional(hint):
        if value is None:
            return "None"
        return f"Some({_write(value, strip_optional(hint), depth, struct_names)})"

    if value is None:
        return "None"
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        hints = field_types(type(value))
        items = [
            (f.name, _write(getattr(value, f.name), hints.get(f.name), depth + 1, struct_names))
            for f in dataclasses.fields(value)
            if f.init
        ]
        prefix = type(value).__name__ if struct_names else ""
        return prefix + _block("(", ")", [f"{k}: {v}" for k, v in items], depth)
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)

    item_hint, key_hint, value_hint = _container_hints(hint)
    if isinstance(value, tuple):
        args = typing.get_args(hint) if hint is not None else ()
        hints = list(args) if args and Ellipsis not in args else [item_hint] * len(value)
        parts = [_write(v, h, depth + 1, struct_names) for v, h in zip(value, hints)]
        return _block("(", ")", parts, depth)
    if isinstance(value, list):
        parts = [_write(v, item_hint, depth + 1, struct_names) for v in value]
        return _block("[", "]", parts, depth)
    if isinstance(value, Mapping):
        parts = [
            f"{_write(k, key_hint, depth + 1, struct_names)}: "
            f"{_write(v, value_hint, depth + 1, struct_names)}"
            for k, v in value.items()
        ]
        return _block("{", "}", parts, depth)
    raise TypeError(f"Valor sem representação RON: {type(value).__name__}")


def _container_hints(hint: Any) -> Tuple[Any, Any, Any]:
    args = typing.get_args(hint) if hint is not None else ()
    item_hint = args[0] if len(args) >= 1 else None
    key_hint = args[0] if len(args) == 2 else None
    value_hint = args[1] if len(args) == 2 and args[1] is not Ellipsis else None
    return item_hint, key_hint, value_hint


def _block(open_: str, close: str, parts: List[str], depth: int) -> str:
    if not parts:
        return open_ + close
    inner = INDENT * (depth + 1)
    body = "".join(f"{inner}{p},\n" for p in parts)
    return f"{open_}\n{body}{INDENT * depth}{close}"


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    text = repr(value)
    if "." not in text and "e" not in text and "inf" not in text:
        text += ".0"
    return text


# ---------------------------------------------------------------------------
# Leitura
# ---------------------------------------------------------------------------

def loads(text: str) -> Any:
    """
    Interpreta um documento RON e devolve sua árvore pura.

    Raises:
        RonSyntaxError: Se o texto não for RON válido.
    """
    parser = _Parser(text)
    parser.skip_attributes()
    value = parser.value()
    parser.skip_trivia()
    if not parser.at_end():
        parser.fail("conteúdo inesperado após o valor raiz")
    return value


def _json_unicode_escape(match: "re.Match[str]") -> str:
    # `\u{1F600}` (Rust) → escape JSON ou o próprio caractere fora do BMP
    code = int(match.group(1), 16)
    if code <= 0xFFFF:
        return "\\u%04x" % code
    return chr(code)


class _Parser:
    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    # -- infraestrutura ----------------------------------------------------

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def fail(self, message: str, pos: Optional[int] = None) -> typing.NoReturn:
        pos = self.pos if pos is None else pos
        line = self.text.count("\n", 0, pos) + 1
        column = pos - (self.text.rfind("\n", 0, pos) + 1) + 1
        raise RonSyntaxError(message, line, column)

    def expect(self, char: str) -> None:
        self.skip_trivia()
        if self.peek() != char:
            found = self.peek() or "fim do texto"
            self.fail(f"esperado '{char}', encontrado '{found}'")
        self.pos += 1

    def skip_trivia(self) -> None:
        text = self.text
        while self.pos < len(text):
            ch = text[self.pos]
            if ch.isspace():
                self.pos += 1
            elif text.startswith("//", self.pos):
                end = text.find("\n", self.pos)
                self.pos = len(text) if end < 0 else end + 1
            elif text.startswith("/*", self.pos):
                self.skip_block_comment()
            else:
                break

    def skip_block_comment(self) -> None:
        start = self.pos
        depth = 0
        text = self.text
        while self.pos < len(text):
            if text.startswith("/*", self.pos):
                depth += 1
                self.pos += 2
            elif text.startswith("*/", self.pos):
                depth -= 1
                self.pos += 2
                if depth == 0:
                    return
            else:
                self.pos += 1
        self.fail("comentário de bloco não terminado", start)

    def skip_attributes(self) -> None:
        """Ignora atributos de extensão `#![enable(...)]` no início do documento."""
        while True:
            self.skip_trivia()
            if not self.text.startswith("#![", self.pos):
                return
            start = self.pos
            depth = 0
            self.pos += 2
            while self.pos < len(self.text):
                ch = self.text[self.pos]
                self.pos += 1
                if ch == "[":
                    depth += 1
                elif ch == "]":
                    depth -= 1
                    if depth == 0:
                        break
            else:
                self.fail("atributo não terminado", start)

    # -- valores -----------------------------------------------------------

    def value(self) -> Any:
        self.skip_trivia()
        ch = self.peek()
        if not ch:
            self.fail("fim inesperado do texto")
        if ch == '"':
            return self.string()
        if ch == "r" and _RAW_STRING_RE.match(self.text, self.pos):
            return self.raw_string()
        if ch == "'":
            return self.char()
        if ch == "[":
            return self.list_()
        if ch == "{":
            return self.map_()
        if ch == "(":
            return self.parenthesized()
        if ch.isdigit() or ch in "+-.":
            return self.number()
        if _IDENT_RE.match(ch):
            return self.identifier_value()
        self.fail(f"caractere inesperado '{ch}'")

    def string(self) -> str:
        match = _STRING_RE.match(self.text, self.pos)
        if match is None:
            self.fail("string não terminada")
        raw = _RUST_UNICODE_ESCAPE_RE.sub(_json_unicode_escape, match.group(0))
        try:
            result = json.loads(raw, strict=False)
        except json.JSONDecodeError as err:
            self.fail(f"escape inválido na string: {err.msg}")
        self.pos = match.end()
        return result

    def raw_string(self) -> str:
        match = _RAW_STRING_RE.match(self.text, self.pos)
        assert match is not None
        self.pos = match.end()
        return match.group(2)

    def char(self) -> str:
        match = _CHAR_RE.match(self.text, self.pos)
        if match is None:
            self.fail("char malformado")
        body = match.group(0)[1:-1].replace('"', '\\"')
        try:
            result = json.loads(f'"{body}"')
        except json.JSONDecodeError as err:
            self.fail(f"escape inválido no char: {err.msg}")
        if len(result) != 1:
            self.fail("char deve conter exatamente um caractere")
        self.pos = match.end()
        return result

    def number(self) -> Any:
        start = self.pos
        text = self.text
        sign = ""
        if text[self.pos] in "+-":
            sign = text[self.pos]
            rest = text[self.pos + 1:self.pos + 4]
            if rest == "inf" or rest == "NaN":
                self.pos += 4
                return float(sign + rest.lower())
        match = _NUMBER_RE.match(text, start)
        if match is None or not match.group(0).lstrip("+-"):
            self.fail("número malformado")
        literal = match.group(0)
        self.pos = match.end()
        digits = literal.replace("_", "")
        try:
            if re.match(r"[+-]?0[xob]", digits):
                return int(digits, 0)
            if any(c in digits for c in ".eE"):
                return float(digits)
            return int(digits)
        except ValueError:
            self.fail(f"número malformado '{literal}'", start)

    def list_(self) -> List[Any]:
        self.expect("[")
        items: List[Any] = []
        while True:
            self.skip_trivia()
            if self.peek() == "]":
                self.pos += 1
                return items
            items.append(self.value())
            if not self.comma_or_close("]"):
                return items

    def map_(self) -> Dict[Any, Any]:
        self.expect("{")
        result: Dict[Any, Any] = {}
        while True:
            self.skip_trivia()
            if self.peek() == "}":
                self.pos += 1
                return result
            key_pos = self.pos
            key = self.value()
            try:
                hash(key)
            except TypeError:
                self.fail("chave de mapa deve ser um valor escalar", key_pos)
            self.expect(":")
            result[key] = self.value()
            if not self.comma_or_close("}"):
                return result

    def comma_or_close(self, close: str) -> bool:
        """Consome `,` (True: continua) ou o delimitador de fechamento (False)."""
        self.skip_trivia()
        ch = self.peek()
        if ch == ",":
            self.pos += 1
            return True
        if ch == close:
            self.pos += 1
            return False
        self.fail(f"esperado ',' ou '{close}'")

    def parenthesized(self) -> Any:
        """`(campo: v, ...)` → dict; `(a, b)` → tuple; `()` → tuple vazia."""
        self.expect("(")
        self.skip_trivia()
        if self.peek() == ")":
            self.pos += 1
            return ()
        if self.looking_at_field():
            return self.struct_fields()
        items: List[Any] = []
        while True:
            items.append(self.value())
            if not self.comma_or_close(")"):
                return tuple(items)
            self.skip_trivia()
            if self.peek() == ")":
                self.pos += 1
                return tuple(items)

    def looking_at_field(self) -> bool:
        match = _IDENT_RE.match(self.text, self.pos)
        if match is None:
            return False
        saved = self.pos
        self.pos = match.end()
        self.skip_trivia()
        is_field = self.peek() == ":"
        self.pos = saved
        return is_field

    def struct_fields(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        while True:
            self.skip_trivia()
            if self.peek() == ")":
                self.pos += 1
                return result
            name_pos = self.pos
            match = _IDENT_RE.match(self.text, self.pos)
            if match is None:
                self.fail("esperado nome de campo")
            name = match.group(0)
            if name in result:
                self.fail(f"campo duplicado '{name}'", name_pos)
            self.pos = match.end()
            self.expect(":")
            result[name] = self.value()
            if not self.comma_or_close(")"):
                return result

    def identifier_value(self) -> Any:
        match = _IDENT_RE.match(self.text, self.pos)
        assert match is not None
        ident = match.group(0)
        self.pos = match.end()
        if ident == "true":
            return True
        if ident == "false":
            return False
        if ident == "inf":
            return math.inf
        if ident == "NaN":
            return math.nan
        if ident == "None":
            return None
        saved = self.pos
        self.skip_trivia()
        if self.peek() != "(":
            self.pos = saved
            return ident
        if ident == "Some":
            self.expect("(")
            inner = self.value()
            self.skip_trivia()
            if self.peek() == ",":
                self.pos += 1
            self.expect(")")
            return inner
        # struct nomeada `Nome(...)` ou tuple struct `Nome(a, b)`
        return self.parenthesized()
