# tests/conftest.py
"""
Fixtures compartilhados para testes do cli-config.

Este módulo define fixtures reutilizáveis que fornecem:
- a documentação extraída dos modelos de configuração de teste
- um "nome de programa" isolado em diretório temporário
- uma configuração não-default para testes de round-trip e reescrita

Decisões arquiteturais:
    - Os modelos de configuração de teste vivem em `tests/fixtures/config_models`
      e servem ao mesmo tempo de schema e de fonte de documentação
    - Todo I/O acontece dentro de `tmp_path`

Limites explícitos:
    - Não configura logging
    - Não depende de variáveis de ambiente
"""

from pathlib import Path

import pytest

from cli_config import documented_config_models_from_dir
from tests.fixtures.config_models.app_config import AppRootConfig, ServiceConfig
from tests.fixtures.config_models.log_config import LogConfig, Sink


CONFIG_MODELS_DIR = Path(__file__).parent / "fixtures" / "config_models"


@pytest.fixture(scope="session")
def config_docs() -> str:
    """
    Documentação extraída dos modelos de configuração de teste.

    Returns:
        str: Texto anexado aos arquivos de configuração criados nos testes.
    """
    return documented_config_models_from_dir(CONFIG_MODELS_DIR)


@pytest.fixture
def program_name(tmp_path: Path) -> str:
    """
    Nome de programa (equivalente a `argv[0]`) dentro de `tmp_path`.

    Os arquivos de configuração default são resolvidos como
    `<program_name>.config.ron` / `<program_name>.config.yaml`.
    """
    return str(tmp_path / "app")


@pytest.fixture
def custom_app_config() -> AppRootConfig:
    """Configuração com todos os tipos de campo fora de seus defaults."""
    return AppRootConfig(
        log_sub_config=LogConfig(
            sink=Sink.STDERR,
            level="DEBUG",
            muted_modules=["urllib3", "asyncio"],
        ),
        service=ServiceConfig(
            host="0.0.0.0",
            port=1234,
            sample_ratio=1.0,
            api_token='s3cr"et\nwith newline',
            rate_limits={"/health": 10, "/api/v1": 500},
            maintenance_window=(23, 1),
        ),
    )
