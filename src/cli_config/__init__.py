# src/cli_config/__init__.py
"""
cli-config: configuração efetiva a partir de arquivo + linha de comando.

Este pacote reconcilia um arquivo de configuração persistido (RON ou YAML)
com overrides de linha de comando, produzindo a configuração efetiva que
a aplicação consome na inicialização.

Arquitetura em alto nível:
    - serde        → codecs RON / YAML e seleção por extensão
    - docs         → documentação extraída dos fontes dos modelos de config
    - config_store → load / criação do default / save / reescrita com backup
    - cli          → pipeline de resolução (parse → load → merge → dump/rewrite)
    - merge        → política padrão de merge de overrides

Uso típico:
    DOCS = documented_config_models_from_dir(Path(__file__).parent / "config_models")
    config = parse_cmdline_and_merge_with_loaded_configs(AppOptions, AppRootConfig, DOCS)

Limites explícitos:
    - Não é um motor de templates nem um validador de schema
    - Não configura logging (apenas um NullHandler na raiz do pacote)
"""

import logging

from .cli import (
    CONFIG_SUFFIXES,
    CmdLineOptions,
    default_config_file_path,
    merge_cmdline_args_with_configs,
    parse_cmdline_and_merge_with_loaded_configs,
    parse_cmdline_args,
)
from .config_store import (
    BACKUP_SUFFIX,
    ConfigStore,
    load_from_file,
    load_or_create_default,
    path_extension,
    save_to_file,
)
from .docs import (
    documented_config_models,
    documented_config_models_from_dir,
    documented_config_models_from_package,
    read_config_model_sources,
)
from .errors import (
    ConfigError,
    ConfigTypeConflictError,
    LoadingConfigError,
    RonError,
    SavingConfigError,
    SchemaMismatchError,
    UnsupportedConfigFileFormatError,
    YamlError,
)
from .merge import deep_merge, merge_overrides
from .serde import AutomaticSerde, ConfigSerde, RonSerde, SerdeFormat, YamlSerde, select_for_extension
from .types import CmdLineAndConfigIntegration, require_root_config_type

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "AutomaticSerde",
    "BACKUP_SUFFIX",
    "CONFIG_SUFFIXES",
    "CmdLineAndConfigIntegration",
    "CmdLineOptions",
    "ConfigError",
    "ConfigSerde",
    "ConfigStore",
    "ConfigTypeConflictError",
    "LoadingConfigError",
    "RonError",
    "RonSerde",
    "SavingConfigError",
    "SchemaMismatchError",
    "SerdeFormat",
    "UnsupportedConfigFileFormatError",
    "YamlError",
    "YamlSerde",
    "deep_merge",
    "default_config_file_path",
    "documented_config_models",
    "documented_config_models_from_dir",
    "documented_config_models_from_package",
    "load_from_file",
    "load_or_create_default",
    "merge_cmdline_args_with_configs",
    "merge_overrides",
    "parse_cmdline_and_merge_with_loaded_configs",
    "parse_cmdline_args",
    "path_extension",
    "read_config_model_sources",
    "require_root_config_type",
    "save_to_file",
    "select_for_extension",
]
