# src/cli_config/model.py
"""
Conversão entre configurações (dataclasses) e árvores puras.

Uma "árvore pura" contém apenas `dict`, `list`, `str`, `int`, `float`,
`bool` e `None`, sendo a representação intermediária compartilhada pelos
codecs RON e YAML.

Regras de conversão (v1):
    - dataclass → dict (ordem de declaração dos campos)
    - Enum      → nome do membro
    - list / tuple → list
    - dict      → dict (chaves convertidas recursivamente)
    - escalares → inalterados

No sentido inverso, a árvore é validada contra as type hints das
dataclasses. Campos ausentes recebem o default declarado; campos
desconhecidos ou de tipo incompatível levantam `SchemaMismatchError`.

Limites explícitos:
    - Não valida semântica de domínio
    - Não lê nem escreve arquivos
"""

from __future__ import annotations

import dataclasses
import sys
import types
import typing
from enum import Enum
from typing import Any, Dict, Mapping, Tuple, Type, TypeVar, Union

from .errors import SchemaMismatchError


T = TypeVar("T")

_UNION_TYPES: Tuple[Any, ...] = (Union,)
if sys.version_info >= (3, 10):
    _UNION_TYPES = (Union, types.UnionType)

_NONE_TYPE = type(None)


def is_config_dataclass(tp: Any) -> bool:
    return isinstance(tp, type) and dataclasses.is_dataclass(tp)


def field_types(cls: type) -> Dict[str, Any]:
    """Retorna as type hints resolvidas dos campos `init` de uma dataclass."""
    hints = typing.get_type_hints(cls)
    return {f.name: hints.get(f.name, Any) for f in dataclasses.fields(cls) if f.init}


def is_optional(tp: Any) -> bool:
    return typing.get_origin(tp) in _UNION_TYPES and _NONE_TYPE in typing.get_args(tp)


def strip_optional(tp: Any) -> Any:
    """`Optional[X]` → `X`; demais tipos são devolvidos sem alteração."""
    if not is_optional(tp):
        return tp
    args = [a for a in typing.get_args(tp) if a is not _NONE_TYPE]
    if len(args) == 1:
        return args[0]
    return Union[tuple(args)]


def to_plain(value: Any) -> Any:
    """
    Converte uma configuração (ou qualquer sub-valor) em árvore pura.

    Raises:
        TypeError: Se algum valor não possuir representação suportada.
    """
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            f.name: to_plain(getattr(value, f.name))
            for f in dataclasses.fields(value)
            if f.init
        }
    if isinstance(value, Enum):
        return value.name
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    if isinstance(value, Mapping):
        return {to_plain(k): to_plain(v) for k, v in value.items()}
    raise TypeError(f"Valor sem representação suportada: {type(value).__name__}")


def from_plain(tp: Type[T], data: Any, path: str = "") -> T:
    """
    Reconstrói um valor do tipo `tp` a partir de uma árvore pura.

    Args:
        tp: Tipo alvo (dataclass, Enum, Optional, List, Dict, Tuple, escalar ou Any).
        data: Árvore pura lida de um arquivo.
        path: Caminho pontuado do valor corrente (usado nas mensagens de erro).

    Raises:
        SchemaMismatchError: Se a árvore não corresponder ao tipo esperado.
    """
    if tp is Any or tp is object:
        return data

    origin = typing.get_origin(tp)
    args = typing.get_args(tp)

    if origin in _UNION_TYPES:
        if data is None and _NONE_TYPE in args:
            return None  # type: ignore[return-value]
        failures = []
        for arg in args:
            if arg is _NONE_TYPE:
                continue
            try:
                return from_plain(arg, data, path)
            except SchemaMismatchError as err:
                failures.append(err.message)
        raise SchemaMismatchError(
            f"nenhuma alternativa de {tp} aceita o valor {data!r} ({'; '.join(failures)})",
            field_path=path,
        )

    if tp is _NONE_TYPE:
        if data is not None:
            _mismatch("None", data, path)
        return None  # type: ignore[return-value]

    if is_config_dataclass(tp):
        return _dataclass_from_plain(tp, data, path)

    if isinstance(tp, type) and issubclass(tp, Enum):
        if isinstance(data, str) and data in tp.__members__:
            return tp[data]  # type: ignore[return-value]
        raise SchemaMismatchError(
            f"membro inválido {data!r} para {tp.__name__} "
            f"(esperado um de: {', '.join(tp.__members__)})",
            field_path=path,
        )

    if origin in (list, typing.List) or tp is list:
        if not isinstance(data, (list, tuple)):
            _mismatch("lista", data, path)
        item_tp = args[0] if args else Any
        return [from_plain(item_tp, v, f"{path}[{i}]") for i, v in enumerate(data)]  # type: ignore[return-value]

    if origin in (tuple, typing.Tuple) or tp is tuple:
        return _tuple_from_plain(args, data, path)  # type: ignore[return-value]

    if origin in (dict, typing.Dict) or tp is dict:
        if not isinstance(data, Mapping):
            _mismatch("mapa", data, path)
        key_tp, value_tp = args if args else (Any, Any)
        return {  # type: ignore[return-value]
            from_plain(key_tp, k, f"{path}.<key>"): from_plain(value_tp, v, f"{path}.{k}")
            for k, v in data.items()
        }

    if tp is bool:
        if not isinstance(data, bool):
            _mismatch("bool", data, path)
        return data
    if tp is int:
        if isinstance(data, bool) or not isinstance(data, int):
            _mismatch("int", data, path)
        return data
    if tp is float:
        if isinstance(data, bool) or not isinstance(data, (int, float)):
            _mismatch("float", data, path)
        return float(data)  # type: ignore[return-value]
    if tp is str:
        if not isinstance(data, str):
            _mismatch("str", data, path)
        return data

    raise SchemaMismatchError(f"tipo de campo não suportado: {tp!r}", field_path=path)


def _dataclass_from_plain(cls: type, data: Any, path: str) -> Any:
    # `()` é como o RON representa uma struct sem campos
    if isinstance(data, (list, tuple)) and len(data) == 0:
        data = {}
    if not isinstance(data, Mapping):
        _mismatch(f"struct {cls.__name__}", data, path)

    hints = field_types(cls)
    unknown = [k for k in data if k not in hints]
    if unknown:
        raise SchemaMismatchError(
            f"campos desconhecidos em {cls.__name__}: {', '.join(map(str, unknown))}",
            field_path=path,
        )

    kwargs = {}
    for f in dataclasses.fields(cls):
        if not f.init:
            continue
        field_path = f"{path}.{f.name}" if path else f.name
        if f.name in data:
            kwargs[f.name] = from_plain(hints[f.name], data[f.name], field_path)
        elif f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:  # type: ignore[misc]
            raise SchemaMismatchError(
                f"campo obrigatório ausente em {cls.__name__}", field_path=field_path
            )
    return cls(**kwargs)


def _tuple_from_plain(args: Tuple[Any, ...], data: Any, path: str) -> tuple:
    if not isinstance(data, (list, tuple)):
        _mismatch("tupla", data, path)
    if len(args) == 2 and args[1] is Ellipsis:
        return tuple(from_plain(args[0], v, f"{path}[{i}]") for i, v in enumerate(data))
    if not args:
        return tuple(data)
    if len(args) != len(data):
        raise SchemaMismatchError(
            f"tupla com {len(data)} elementos, esperado {len(args)}", field_path=path
        )
    return tuple(from_plain(a, v, f"{path}[{i}]") for i, (a, v) in enumerate(zip(args, data)))


def _mismatch(expected: str, data: Any, path: str) -> None:
    raise SchemaMismatchError(
        f"esperado {expected}, encontrado {type(data).__name__} ({data!r})",
        field_path=path,
    )
