# src/cli_config/config_store.py
"""
Persistência canônica do arquivo de configuração.

Este módulo implementa o "Config Store": resolve o codec a partir da
extensão do arquivo, carrega uma configuração existente ou cria (e
persiste) a configuração default, e salva configurações com semântica
de backup antes da sobrescrita.

Decisões (v1):
    - Formato definido pela extensão (ver `cli_config.serde.codecs`)
    - Arquivo inexistente no load → `None` (nunca um erro)
    - Escrita em UTF-8, sobrescrevendo o conteúdo anterior
    - Backup em `<caminho>~`, substituindo um backup anterior de mesmo nome

Invariantes:
    - Todo erro carrega o caminho do arquivo e a operação tentada
    - Se o rename para o backup falhar, nada é escrito
    - Se a escrita após o backup falhar, o backup volta ao caminho original

Limites explícitos:
    - Não realiza lock de arquivo (execuções concorrentes não são protegidas)
    - Não faz retry de nenhuma operação
    - Não valida semântica de domínio
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Generic, Optional, Type, TypeVar, Union

from .errors import (
    ConfigError,
    LoadingConfigError,
    SavingConfigError,
    UnsupportedConfigFileFormatError,
)
from .serde.codecs import ConfigSerde, select_for_extension


logger = logging.getLogger(__name__)

C = TypeVar("C")
PathLike = Union[str, "os.PathLike[str]"]

BACKUP_SUFFIX = "~"


def path_extension(config_file_path: PathLike) -> Optional[str]:
    """
    Retorna o último sufixo (com o ponto) do nome do arquivo.

    Exemplos:
        - "app.config.ron" → ".ron"
        - "dir.d/app"      → None

    Returns:
        Optional[str]: Extensão incluindo o ponto, ou None se não houver.
    """
    name = Path(config_file_path).name
    idx = name.rfind(".")
    if idx < 0:
        return None
    return name[idx:]


def _serde_for(config_file_path: PathLike, error_cls: Type[ConfigError]) -> ConfigSerde:
    file_extension = path_extension(config_file_path)
    try:
        if file_extension is None:
            raise UnsupportedConfigFileFormatError(
                "Arquivos de configuração sem extensão não são suportados"
            )
        return select_for_extension(file_extension)
    except UnsupportedConfigFileFormatError as err:
        raise error_cls(
            f"Erro ao instanciar o serde automático para o arquivo '{config_file_path}'",
            cause=err,
        ) from err


def load_from_file(config_type: Type[C], config_file_path: PathLike) -> Optional[C]:
    """
    Carrega a configuração de `config_file_path`.

    Args:
        config_type: Dataclass raiz da configuração.
        config_file_path: Caminho do arquivo (.ron, .yaml ou .yml).

    Returns:
        Optional[C]: A configuração carregada, ou None se o arquivo não existir.

    Raises:
        LoadingConfigError: Extensão não suportada, falha de leitura
            (exceto arquivo inexistente) ou falha de desserialização.
    """
    serde = _serde_for(config_file_path, LoadingConfigError)

    try:
        txt_config = Path(config_file_path).read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug("Arquivo de configuração inexistente: %s", config_file_path)
        return None
    except (OSError, UnicodeDecodeError) as err:
        raise LoadingConfigError(
            f"Erro ao carregar a config de '{config_file_path}'", cause=err
        ) from err

    try:
        config = serde.deserialize_config(config_type, txt_config)
    except ConfigError as err:
        raise LoadingConfigError(
            f"Erro ao desserializar a config carregada de '{config_file_path}'", cause=err
        ) from err

    logger.debug("Config carregada de %s", config_file_path)
    return config


def save_to_file(config: object, tail_comment: str, config_file_path: PathLike) -> None:
    """
    Salva `config` em `config_file_path`, anexando `tail_comment` como documentação.

    Raises:
        SavingConfigError: Extensão não suportada, falha de serialização
            ou falha de escrita.
    """
    serde = _serde_for(config_file_path, SavingConfigError)

    try:
        txt_config = serde.serialize_config(config, tail_comment)
    except ConfigError as err:
        raise SavingConfigError(
            f"Erro ao serializar a config para salvar em '{config_file_path}'", cause=err
        ) from err

    try:
        Path(config_file_path).write_text(txt_config, encoding="utf-8")
    except (OSError, UnicodeError) as err:
        raise SavingConfigError(
            f"Erro ao salvar a config em '{config_file_path}'", cause=err
        ) from err

    logger.debug("Config salva em %s", config_file_path)


def load_or_create_default(
    config_type: Type[C],
    config_file_path: PathLike,
    tail_comment: str = "",
) -> C:
    """
    Carrega a configuração ou cria o arquivo com os valores default.

    Quando o arquivo não existe, `config_type()` é persistido (com a
    documentação em `tail_comment`) e retornado.

    Raises:
        LoadingConfigError: Falha ao carregar um arquivo existente.
        SavingConfigError: Falha ao persistir a configuração default.
    """
    config = load_from_file(config_type, config_file_path)
    if config is not None:
        return config

    default_config = config_type()
    logger.info("Criando arquivo de configuração default: %s", config_file_path)
    save_to_file(default_config, tail_comment, config_file_path)
    return default_config


class ConfigStore(Generic[C]):
    """
    Store de um arquivo de configuração específico.

    Exemplo:
        store = ConfigStore(config_type=AppRootConfig, path="app.config.ron", tail_docs=DOCS)
        config = store.load_or_create_default()
        store.rewrite(effective_config, tail_docs="...")
    """

    def __init__(
        self,
        *,
        config_type: Type[C],
        path: PathLike,
        tail_docs: str = "",
    ):
        self.config_type = config_type
        self.path = Path(path)
        self.tail_docs = tail_docs

    def backup_path(self) -> Path:
        """Caminho do backup: o caminho original com `~` ao final."""
        return self.path.with_name(self.path.name + BACKUP_SUFFIX)

    def load(self) -> Optional[C]:
        return load_from_file(self.config_type, self.path)

    def save(self, config: C, tail_docs: Optional[str] = None) -> None:
        save_to_file(config, self.tail_docs if tail_docs is None else tail_docs, self.path)

    def load_or_create_default(self) -> C:
        return load_or_create_default(self.config_type, self.path, self.tail_docs)

    def rewrite(self, config: C, tail_docs: str) -> Path:
        """
        Substitui o arquivo atual por `config`, mantendo o anterior como backup.

        Sequência:
            1. renomeia `path` → `path~` (falha aqui aborta sem escrita alguma)
            2. salva `config` em `path`
            3. se (2) falhar, renomeia `path~` de volta para `path`

        Returns:
            Path: Caminho do backup criado.

        Raises:
            SavingConfigError: Falha no rename ou na escrita.
        """
        backup_path = self.backup_path()
        try:
            os.replace(self.path, backup_path)
        except OSError as err:
            raise SavingConfigError(
                f"Erro ao reescrever o arquivo de config '{self.path}' com a nova "
                f"configuração efetiva: o arquivo não pôde ser renomeado para '{backup_path}'",
                cause=err,
            ) from err
        logger.info("Backup da config: %s -> %s", self.path, backup_path)

        try:
            self.save(config, tail_docs)
        except BaseException:
            self._restore_backup(backup_path)
            raise
        return backup_path

    def _restore_backup(self, backup_path: Path) -> None:
        try:
            os.replace(backup_path, self.path)
        except OSError:
            logger.exception(
                "Não foi possível restaurar o backup %s para %s", backup_path, self.path
            )
        else:
            logger.info("Config original restaurada a partir de %s", backup_path)
