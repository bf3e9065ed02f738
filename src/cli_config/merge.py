# src/cli_config/merge.py
"""
Utilitários de merge entre configuração carregada e overrides de linha de comando.

O merge em si pertence ao integrador (`merge_with_config` das opções de
CLI); este módulo oferece a política padrão para quem quiser reutilizá-la.

Política de merge (v1):
    - dict + dict → merge recursivo por chave
    - list        → sobrescrita total (sem merge elemento a elemento)
    - escalar     → sobrescrita direta
    - None        → nunca conflita (base None aceita qualquer override)
    - conflito de tipos → `ConfigTypeConflictError`

Invariantes:
    - Nenhum input é mutado
    - Overrides `None` ("não informado na CLI") são descartados por `merge_overrides`
    - O resultado de `merge_overrides` é uma nova configuração do mesmo tipo

Limites explícitos:
    - Não carrega arquivos de configuração
    - Não valida semântica de domínio
"""

from __future__ import annotations

from copy import deepcopy
from typing import Any, Dict, Mapping, TypeVar

from .errors import ConfigTypeConflictError
from .model import from_plain, to_plain


C = TypeVar("C")


def deep_merge(base: Dict[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Realiza um deep-merge determinístico entre dois dicionários.

    Args:
        base (Dict[str, Any]): Árvore base (ex.: configuração carregada).
        override (Mapping[str, Any]): Overrides explícitos.

    Returns:
        Dict[str, Any]: Nova árvore resultante do deep-merge.

    Raises:
        ConfigTypeConflictError: Se ocorrer conflito de tipo entre base e override.
    """
    if not isinstance(base, dict) or not isinstance(override, Mapping):
        raise ConfigTypeConflictError(
            f"Deep-merge requer dicts no nível raiz, recebido: "
            f"{type(base).__name__} vs {type(override).__name__}"
        )

    result: Dict[str, Any] = deepcopy(base)

    for key, override_value in override.items():
        if key not in result:
            result[key] = deepcopy(override_value)
            continue

        base_value = result[key]

        # dict -> merge recursivo
        if isinstance(base_value, dict) and isinstance(override_value, Mapping):
            result[key] = deep_merge(base_value, override_value)
            continue

        if base_value is not None and override_value is not None:
            _check_compatible(key, base_value, override_value)

        # list / escalar -> sobrescrita
        result[key] = deepcopy(override_value)

    return result


def _check_compatible(key: str, base_value: Any, override_value: Any) -> None:
    if isinstance(base_value, bool) or isinstance(override_value, bool):
        compatible = isinstance(base_value, bool) and isinstance(override_value, bool)
    elif isinstance(base_value, (int, float)) or isinstance(override_value, (int, float)):
        compatible = isinstance(base_value, (int, float)) and isinstance(override_value, (int, float))
    else:
        compatible = type(base_value) is type(override_value)
    if not compatible:
        raise ConfigTypeConflictError(
            f"Conflito de tipo na chave '{key}': "
            f"{type(base_value).__name__} vs {type(override_value).__name__}"
        )


def prune_unset(overrides: Mapping[str, Any]) -> Dict[str, Any]:
    """Remove recursivamente entradas `None` (e mapas que ficarem vazios)."""
    pruned: Dict[str, Any] = {}
    for key, value in overrides.items():
        if isinstance(value, Mapping):
            value = prune_unset(value)
            if not value:
                continue
        if value is None:
            continue
        pruned[key] = value
    return pruned


def merge_overrides(config: C, overrides: Mapping[str, Any]) -> C:
    """
    Aplica overrides (tipicamente vindos da CLI) sobre uma configuração.

    Exemplo:
        def merge_with_config(self, config):
            return merge_overrides(config, {"log_sub_config": {"sink": self.sink}})

    Args:
        config: Configuração carregada (dataclass raiz).
        overrides: Árvore de overrides; valores `None` são ignorados e
            Enums/dataclasses são aceitos.

    Returns:
        Nova configuração do mesmo tipo, com os overrides aplicados.

    Raises:
        ConfigTypeConflictError: Se um override conflitar com o tipo da base.
        SchemaMismatchError: Se o resultado não corresponder ao schema.
    """
    merged = deep_merge(to_plain(config), to_plain(prune_unset(overrides)))
    return from_plain(type(config), merged)
