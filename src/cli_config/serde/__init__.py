# src/cli_config/serde/__init__.py
"""
Camada de (de)serialização do cli-config.

Componentes:
    - ron     → codec textual RON (escrita pretty + parser)
    - codecs  → `ConfigSerde` e implementações RON / YAML / automática
"""

from .codecs import (
    AutomaticSerde,
    ConfigSerde,
    RON_DOCS_BANNER,
    RonSerde,
    SerdeFormat,
    YAML_DOCS_BANNER,
    YamlSerde,
    select_for_extension,
)

__all__ = [
    "AutomaticSerde",
    "ConfigSerde",
    "RON_DOCS_BANNER",
    "RonSerde",
    "SerdeFormat",
    "YAML_DOCS_BANNER",
    "YamlSerde",
    "select_for_extension",
]
