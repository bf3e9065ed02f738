# src/cli_config/errors.py
"""
Exceções canônicas do cli-config.

Este módulo define a hierarquia oficial de exceções utilizadas durante
a seleção de formato, (de)serialização, carregamento, persistência e
merge de configurações.

Princípios fundamentais:
    - Exceções são tipadas e semânticas
    - Toda falha carrega contexto (caminho do arquivo, operação tentada)
    - A causa original é preservada em `cause` e encadeada em `__cause__`

Invariantes:
    - Todas as exceções herdam de `ConfigError`
    - "Arquivo inexistente" durante o load nunca é representado como exceção

Limites explícitos:
    - Não realiza fallback ou recovery
    - Não registra logs
"""

from __future__ import annotations

from typing import Optional


class ConfigError(Exception):
    """
    Exceção base para erros do cli-config.

    Args:
        message (str): Mensagem descritiva, orientada ao usuário.
        cause (Optional[BaseException]): Erro subjacente, quando existir.
    """

    def __init__(self, message: str, *, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        if self.cause is None:
            return self.message
        return f"{self.message}: {self.cause}"


class LoadingConfigError(ConfigError):
    """
    Falha ao ler ou desserializar um arquivo de configuração.

    Também utilizada quando a configuração efetiva não pode ser
    exibida no stream de diagnóstico.
    """


class SavingConfigError(ConfigError):
    """
    Falha ao serializar, renomear (backup) ou escrever um arquivo de configuração.
    """


class UnsupportedConfigFileFormatError(ConfigError):
    """
    Extensão de arquivo não reconhecida (ou ausente).

    Formatos suportados:
        - RON (.ron)
        - YAML (.yaml, .yml)

    Decisões arquiteturais:
        - O formato é definido exclusivamente pela extensão
        - Nenhum formato é assumido silenciosamente

    Args:
        message (str): Mensagem descritiva.
        extension (Optional[str]): Extensão rejeitada (None quando ausente).
    """

    def __init__(self, message: str, *, extension: Optional[str] = None):
        super().__init__(message)
        self.extension = extension


class RonError(ConfigError):
    """Erro de (de)serialização no formato RON."""


class YamlError(ConfigError):
    """Erro de (de)serialização no formato YAML."""


class SchemaMismatchError(ConfigError):
    """
    A árvore de valores lida do arquivo não corresponde ao schema (dataclasses).

    Exemplos:
        - campo obrigatório ausente
        - campo desconhecido
        - tipo incompatível
        - membro de Enum inexistente

    Args:
        message (str): Mensagem descritiva.
        field_path (str): Caminho pontuado do campo problemático.
    """

    def __init__(self, message: str, *, field_path: str = ""):
        super().__init__(f"{field_path}: {message}" if field_path else message)
        self.field_path = field_path


class ConfigTypeConflictError(ConfigError):
    """
    Conflito de tipos durante o deep-merge.

    Exemplo de conflito:
        - base:     {"log": {"sink": "STDOUT"}}
        - override: {"log": "DEBUG"}

    Invariantes:
        - Nenhum merge parcial é produzido em caso de conflito
    """
