# src/cli_config/cli.py
"""
Pipeline de resolução da configuração efetiva.

Este módulo orquestra a combinação entre o arquivo de configuração e as
opções de linha de comando, produzindo a configuração que a aplicação
deve usar na inicialização.

Sequência (linear, sem retry):
    1. parse das opções de CLI (argparse encerra o processo se malformadas)
    2. resolução do caminho do arquivo de configuração
    3. load (ou criação do default) via `ConfigStore`
    4. merge das opções de CLI sobre a configuração carregada
    5. (opcional) exibição da configuração efetiva no stderr
    6. (opcional) reescrita do arquivo com a configuração efetiva + backup

Decisões arquiteturais:
    - Opções já interpretadas e a configuração já carregada são reutilizadas
      na documentação da reescrita (sem novo parse de argv)
    - A precedência é sempre da CLI sobre o arquivo

Limites explícitos:
    - Não define o schema da configuração
    - Não implementa o merge específico do integrador
    - Não configura logging
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import dataclass, fields
from datetime import datetime
from pprint import pformat
from typing import Optional, Sequence, TextIO, Tuple, Type, TypeVar

from .config_store import BACKUP_SUFFIX, ConfigStore
from .errors import LoadingConfigError
from .types import CmdLineAndConfigIntegration, require_root_config_type


logger = logging.getLogger(__name__)

C = TypeVar("C")
OptionsT = TypeVar("OptionsT", bound="CmdLineOptions")

# prioridade entre arquivos existentes; o primeiro é o default para criação
CONFIG_SUFFIXES: Tuple[str, ...] = (".config.ron", ".config.yaml")

_REWRITE_DATE_FORMAT = "{0:%a %b} {0.day:>2} {0:%H:%M:%S %Z %Y}"


@dataclass
class CmdLineOptions:
    """
    Base argparse para opções de CLI integradas à configuração.

    Subclasses declaram campos adicionais (dataclass) e registram os
    argumentos correspondentes em `add_arguments`; o `dest` de cada
    argumento deve coincidir com o nome do campo.

    Exemplo:
        @dataclass
        class AppOptions(CmdLineOptions):
            sink: Optional[str] = None

            @classmethod
            def add_arguments(cls, parser):
                parser.add_argument("--sink", choices=["NULL", "STDOUT"])

            def merge_with_config(self, config):
                return merge_overrides(config, {"log": {"sink": self.sink}})
    """

    config_file: Optional[str] = None
    write_effective_config: bool = False
    show_effective_config: bool = False

    @classmethod
    def build_parser(cls, prog: Optional[str] = None) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(prog=prog, description=cls.__doc__)
        parser.add_argument(
            "-c",
            "--config-file",
            dest="config_file",
            default=None,
            help=(
                "Arquivo de configuração ('.ron', '.yaml' ou '.yml'). Padrão: o nome "
                "do executável + '.config.ron'. Criado com os valores default se não existir."
            ),
        )
        parser.add_argument(
            "--write-effective-config",
            dest="write_effective_config",
            action="store_true",
            help=(
                "USE COM CAUTELA: reescreve o arquivo de configuração com a configuração "
                "efetiva; o arquivo anterior é mantido com '~' ao final do nome."
            ),
        )
        parser.add_argument(
            "--show-effective-config",
            dest="show_effective_config",
            action="store_true",
            help="Exibe no stderr a configuração efetiva (arquivo + linha de comando).",
        )
        cls.add_arguments(parser)
        return parser

    @classmethod
    def add_arguments(cls, parser: argparse.ArgumentParser) -> None:
        """Ponto de extensão para argumentos específicos da aplicação."""

    @classmethod
    def parse_args(
        cls: Type[OptionsT],
        argv: Optional[Sequence[str]] = None,
        prog: Optional[str] = None,
    ) -> OptionsT:
        namespace = cls.build_parser(prog=prog).parse_args(argv)
        names = {f.name for f in fields(cls) if f.init}
        return cls(**{k: v for k, v in vars(namespace).items() if k in names})

    def config_file_path(self) -> Optional[str]:
        return self.config_file

    def should_write_effective_config(self) -> bool:
        return self.write_effective_config

    def should_show_effective_config(self) -> bool:
        return self.show_effective_config

    def merge_with_config(self, config: C) -> C:
        """Sem opções próprias de configuração: devolve `config` inalterada."""
        return config


def parse_cmdline_args(
    options_type: Type[CmdLineAndConfigIntegration[C]],
    argv: Optional[Sequence[str]] = None,
) -> CmdLineAndConfigIntegration[C]:
    """
    Interpreta as opções de CLI (sem o nome do programa; None → `sys.argv[1:]`).

    Na maioria dos casos prefira `parse_cmdline_and_merge_with_loaded_configs`.
    """
    return options_type.parse_args(argv)


def merge_cmdline_args_with_configs(
    cmdline_options: CmdLineAndConfigIntegration[C],
    root_config: C,
) -> C:
    """Retorna a configuração efetiva: `root_config` com as opções de CLI aplicadas."""
    return cmdline_options.merge_with_config(root_config)


def default_config_file_path(
    program_name: str,
    suffixes: Sequence[str] = CONFIG_SUFFIXES,
) -> str:
    """
    Caminho de configuração quando nenhum foi informado na CLI.

    Retorna o primeiro `program_name + sufixo` existente, na ordem de
    `suffixes`; se nenhum existir, usa o primeiro sufixo.
    """
    for suffix in suffixes:
        candidate = f"{program_name}{suffix}"
        if os.path.exists(candidate):
            return candidate
    return f"{program_name}{suffixes[0]}"


def parse_cmdline_and_merge_with_loaded_configs(
    options_type: Type[CmdLineAndConfigIntegration[C]],
    config_type: Type[C],
    tail_docs: str = "",
    *,
    argv: Optional[Sequence[str]] = None,
    stderr: Optional[TextIO] = None,
) -> C:
    """
    Resolve a configuração efetiva que a aplicação deve usar.

    Args:
        options_type: Tipo das opções de CLI (implementa `CmdLineAndConfigIntegration`).
        config_type: Dataclass raiz da configuração.
        tail_docs: Documentação anexada ao arquivo quando ele é criado
            (ver `cli_config.docs`).
        argv: Vetor completo de argumentos, incluindo o nome do programa
            (default: `sys.argv`).
        stderr: Stream de diagnóstico (default: `sys.stderr`).

    Returns:
        A configuração efetiva.

    Raises:
        LoadingConfigError: Falha ao carregar a config ou ao exibi-la.
        SavingConfigError: Falha ao criar o default ou ao reescrever o arquivo.
    """
    require_root_config_type(config_type)
    argv = list(sys.argv if argv is None else argv)
    if not argv:
        raise LoadingConfigError(
            "O nome do programa não pôde ser obtido dos argumentos. "
            "Informe o arquivo de configuração a ser usado pela linha de comando."
        )
    program_name = argv[0]

    cmdline_options = parse_cmdline_args(options_type, argv[1:])
    config_file_path = cmdline_options.config_file_path()
    if config_file_path is None:
        config_file_path = default_config_file_path(program_name)
    logger.debug("Arquivo de configuração resolvido: %s", config_file_path)

    store = ConfigStore(config_type=config_type, path=config_file_path, tail_docs=tail_docs)
    loaded_config = store.load_or_create_default()
    effective_config = merge_cmdline_args_with_configs(cmdline_options, loaded_config)

    if cmdline_options.should_show_effective_config():
        _show_effective_config(effective_config, sys.stderr if stderr is None else stderr)

    if cmdline_options.should_write_effective_config():
        doc_comments = _rewrite_doc_comments(
            backup_path=str(store.backup_path()),
            cmdline_options=cmdline_options,
            loaded_config=loaded_config,
            tail_docs=tail_docs,
        )
        store.rewrite(effective_config, doc_comments)

    return effective_config


def _show_effective_config(effective_config: object, stream: TextIO) -> None:
    try:
        stream.write(f"EFFECTIVE PROGRAM CONFIGURATION: {pformat(effective_config)}\n\n")
        stream.flush()
    except (OSError, ValueError) as err:
        raise LoadingConfigError(
            "Erro ao exibir a Configuração Efetiva do Programa no stderr", cause=err
        ) from err


def format_rewrite_date(moment: datetime) -> str:
    """Data no estilo `date(1)`: dia do mês alinhado com espaço (`Tue Mar  5 ...`)."""
    return _REWRITE_DATE_FORMAT.format(moment)


def _rewrite_doc_comments(
    *,
    backup_path: str,
    cmdline_options: object,
    loaded_config: object,
    tail_docs: str,
) -> str:
    date_str = format_rewrite_date(datetime.now().astimezone())
    doc_comments = (
        f"\nReescrito a partir do merge entre a configuração anterior e as opções "
        f"de linha de comando em {date_str}\n"
        f"(arquivo de configuração anterior mantido em '{backup_path}')\n"
        f"\nCOMMAND LINE OPTIONS: {pformat(cmdline_options)}\n"
        f"\nPREVIOUS CONFIG: {pformat(loaded_config)}\n"
    )
    if tail_docs:
        doc_comments += f"\n{tail_docs}"
    return doc_comments


__all__ = [
    "BACKUP_SUFFIX",
    "CONFIG_SUFFIXES",
    "CmdLineOptions",
    "default_config_file_path",
    "format_rewrite_date",
    "merge_cmdline_args_with_configs",
    "parse_cmdline_and_merge_with_loaded_configs",
    "parse_cmdline_args",
]
