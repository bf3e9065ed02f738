# src/cli_config/types.py
"""
Contratos estruturais entre o cli-config e a aplicação integradora.

Configuração raiz:
    Qualquer `@dataclass` cujos campos possuam defaults. A dataclass fornece
    igualdade estrutural, `repr` para depuração e o construtor default;
    a (de)serialização é feita por `cli_config.model` + codecs.

Opções de linha de comando:
    Qualquer tipo que implemente `CmdLineAndConfigIntegration` (duck typing,
    sem herança obrigatória). `cli_config.cli.CmdLineOptions` é uma base
    pronta, baseada em argparse.
"""

from __future__ import annotations

import dataclasses
from typing import Optional, Protocol, Sequence, Type, TypeVar, runtime_checkable


RootConfigT = TypeVar("RootConfigT")


@runtime_checkable
class CmdLineAndConfigIntegration(Protocol[RootConfigT]):
    """
    Capacidades que as opções de CLI expõem ao pipeline de resolução.

    Sugestão de opções para implementadores:
        -c / --config-file        → `config_file_path()`
        --show-effective-config   → `should_show_effective_config()`
        --write-effective-config  → `should_write_effective_config()`
    """

    @classmethod
    def parse_args(cls, argv: Optional[Sequence[str]] = None) -> "CmdLineAndConfigIntegration[RootConfigT]":
        """
        Constrói as opções a partir dos argumentos (sem o nome do programa).

        Entradas malformadas encerram o processo pela convenção do parser.
        """
        ...

    def config_file_path(self) -> Optional[str]:
        """
        Arquivo de configuração a ser usado; None → arquivo default.

        Formatos suportados: '.ron', '.yaml' e '.yml'. Se o arquivo não
        existir, ele é criado com os valores default.
        """
        ...

    def should_write_effective_config(self) -> bool:
        """
        USE COM CAUTELA: reescreve o arquivo de configuração com a configuração
        efetiva (arquivo + CLI). Comentários e valores sobrescritos são perdidos;
        o arquivo anterior é mantido com um '~' ao final do nome.
        """
        ...

    def should_show_effective_config(self) -> bool:
        """Exibe (stderr) a configuração efetiva em uso."""
        ...

    def merge_with_config(self, config: RootConfigT) -> RootConfigT:
        """Retorna uma nova configuração com as opções de CLI aplicadas sobre `config`."""
        ...


def require_root_config_type(config_type: Type[RootConfigT]) -> Type[RootConfigT]:
    """
    Garante que `config_type` possa atuar como configuração raiz.

    Raises:
        TypeError: Se não for uma dataclass ou algum campo não possuir default.
    """
    if not (isinstance(config_type, type) and dataclasses.is_dataclass(config_type)):
        raise TypeError(
            f"Configuração raiz deve ser uma dataclass, recebido: {config_type!r}"
        )
    missing = [
        f.name
        for f in dataclasses.fields(config_type)
        if f.init
        and f.default is dataclasses.MISSING
        and f.default_factory is dataclasses.MISSING  # type: ignore[misc]
    ]
    if missing:
        raise TypeError(
            f"Campos sem default em {config_type.__name__}: {', '.join(missing)}"
        )
    return config_type
