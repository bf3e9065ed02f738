# src/cli_config/serde/codecs.py
"""
Serializadores e desserializadores de configuração (RON e YAML).

Este módulo implementa o "Format Codec" do cli-config: a conversão entre
uma configuração (dataclass) e o texto persistido em disco, com um bloco
opcional de documentação anexado ao final do arquivo.

Formatos suportados (v1):
    - RON  (.ron)          → documentação em um único comentário `/* ... */`
    - YAML (.yaml, .yml)   → documentação com cada linha prefixada por `# `

Decisões arquiteturais:
    - O formato é selecionado exclusivamente pela extensão do arquivo
    - Extensões desconhecidas são rejeitadas imediatamente
    - Erros nativos (PyYAML, parser RON, schema) são encapsulados em
      `YamlError` / `RonError`, preservando a causa original

Invariantes:
    - deserialize(serialize(c, docs)) == c para qualquer `docs`
    - Nenhuma operação deste módulo realiza I/O

Limites explícitos:
    - Não lê nem escreve arquivos
    - Não valida semântica de domínio
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Type, TypeVar

import yaml  # PyYAML

from ..errors import (
    RonError,
    SchemaMismatchError,
    UnsupportedConfigFileFormatError,
    YamlError,
)
from ..model import from_plain, to_plain
from . import ron


C = TypeVar("C")

RON_DOCS_BANNER = "///////////////////////////// DOCS //////////////////////////////"
YAML_DOCS_BANNER = "############################# DOCS ##############################"

# caracteres que o leitor do PyYAML rejeita mesmo dentro de comentários
_YAML_NON_PRINTABLE = yaml.reader.Reader.NON_PRINTABLE


class ConfigSerde(ABC):
    """Contrato comum dos codecs de configuração."""

    @abstractmethod
    def serialize_config(self, config: Any, tail_comment: str) -> str:
        """
        Renderiza `config` com pretty-print e anexa `tail_comment` como comentário.

        Raises:
            RonError | YamlError: Se a configuração não puder ser serializada.
        """

    @abstractmethod
    def deserialize_config(self, config_type: Type[C], txt_config: str) -> C:
        """
        Interpreta `txt_config` estritamente no formato do codec.

        Raises:
            RonError | YamlError: Se o texto for malformado ou incompatível com o schema.
        """


class SerdeFormat(Enum):
    """Formatos de arquivo de configuração suportados."""

    RON = "ron"
    YAML = "yaml"

    @classmethod
    def for_file_extension(cls, file_extension: str) -> "SerdeFormat":
        try:
            return _FORMATS_BY_EXTENSION[file_extension]
        except KeyError:
            raise UnsupportedConfigFileFormatError(
                f"`cli-config`: Unsupported config file extension: '{file_extension}'. "
                "Supported extensions are '.ron', '.yaml' and '.yml'",
                extension=file_extension,
            ) from None


_FORMATS_BY_EXTENSION: Dict[str, SerdeFormat] = {
    ".ron": SerdeFormat.RON,
    ".yaml": SerdeFormat.YAML,
    ".yml": SerdeFormat.YAML,
}


class RonSerde(ConfigSerde):
    """Codec RON (ver `cli_config.serde.ron`)."""

    def __init__(self, *, struct_names: bool = False):
        self.struct_names = struct_names

    def serialize_config(self, config: Any, tail_comment: str) -> str:
        try:
            txt_config = ron.to_string_pretty(config, struct_names=self.struct_names)
        except TypeError as err:
            raise RonError(f"Erro de serialização RON para a config {config!r}", cause=err) from err

        if tail_comment:
            txt_config += "\n\n/*\n"
            txt_config += RON_DOCS_BANNER + "\n"
            txt_config += _neutralize_block_comment(tail_comment)
            txt_config += "\n*/\n"
        return txt_config

    def deserialize_config(self, config_type: Type[C], txt_config: str) -> C:
        try:
            tree = ron.loads(txt_config)
            return from_plain(config_type, tree)
        except (ron.RonSyntaxError, SchemaMismatchError) as err:
            raise RonError(
                f"Erro de desserialização RON para o tipo de config '{config_type.__name__}'",
                cause=err,
            ) from err


class YamlSerde(ConfigSerde):
    """Codec YAML baseado em PyYAML (`safe_dump` / `safe_load`)."""

    def serialize_config(self, config: Any, tail_comment: str) -> str:
        try:
            txt_config = yaml.safe_dump(
                to_plain(config),
                sort_keys=False,
                allow_unicode=True,
                default_flow_style=False,
            )
        except (TypeError, yaml.YAMLError) as err:
            raise YamlError(f"Erro de serialização YAML para a config {config!r}", cause=err) from err

        if tail_comment:
            txt_config += "\n"
            txt_config += YAML_DOCS_BANNER + "\n"
            txt_config += _yaml_comment_block(tail_comment)
        return txt_config

    def deserialize_config(self, config_type: Type[C], txt_config: str) -> C:
        try:
            tree = yaml.safe_load(txt_config)
            # documento vazio equivale a um mapa vazio (todos os defaults)
            if tree is None:
                tree = {}
            return from_plain(config_type, tree)
        except (yaml.YAMLError, SchemaMismatchError) as err:
            raise YamlError(
                f"Erro de desserialização YAML para o tipo de config '{config_type.__name__}'",
                cause=err,
            ) from err


class AutomaticSerde(ConfigSerde):
    """
    Seleciona entre `RonSerde` e `YamlSerde` a partir do formato.

    Exemplo:
        serde = AutomaticSerde.for_file_extension(".yml")
        text = serde.serialize_config(AppRootConfig(), tail_comment="")
    """

    def __init__(self, serde_format: SerdeFormat):
        self.format = serde_format
        self.ron_serde = RonSerde()
        self.yaml_serde = YamlSerde()

    @classmethod
    def for_file_extension(cls, file_extension: str) -> "AutomaticSerde":
        """
        Raises:
            UnsupportedConfigFileFormatError: Se a extensão não for '.ron', '.yaml' ou '.yml'.
        """
        return cls(SerdeFormat.for_file_extension(file_extension))

    def _delegate(self) -> ConfigSerde:
        if self.format is SerdeFormat.RON:
            return self.ron_serde
        return self.yaml_serde

    def serialize_config(self, config: Any, tail_comment: str) -> str:
        return self._delegate().serialize_config(config, tail_comment)

    def deserialize_config(self, config_type: Type[C], txt_config: str) -> C:
        return self._delegate().deserialize_config(config_type, txt_config)


def select_for_extension(file_extension: str) -> ConfigSerde:
    """Atalho para `AutomaticSerde.for_file_extension`."""
    return AutomaticSerde.for_file_extension(file_extension)


def _yaml_comment_block(text: str) -> str:
    # toda quebra de linha reconhecida pelo YAML (\r, \x85, \u2028, ...) vira "\n"
    lines = text.splitlines() or [""]
    return "\n".join("# " + _YAML_NON_PRINTABLE.sub("\ufffd", line) for line in lines)


def _neutralize_block_comment(text: str) -> str:
    # delimitadores internos abririam/fechariam comentários aninhados do RON
    return text.replace("/*", "/ *").replace("*/", "* /")


__all__ = [
    "ConfigSerde",
    "SerdeFormat",
    "RonSerde",
    "YamlSerde",
    "AutomaticSerde",
    "select_for_extension",
    "RON_DOCS_BANNER",
    "YAML_DOCS_BANNER",
]
