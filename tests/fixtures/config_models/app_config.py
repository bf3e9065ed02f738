# tests/fixtures/config_models/app_config.py
"""
Configuração raiz da aplicação usada nos testes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from .log_config import LogConfig


@dataclass
class ServiceConfig:
    """Parâmetros do serviço exposto pela aplicação."""

    # interface de escuta
    host: str = "127.0.0.1"
    port: int = 8080
    # fração de requisições amostradas para tracing
    sample_ratio: float = 0.25
    # credencial opcional; None desabilita autenticação
    api_token: Optional[str] = None
    # limites por rota
    rate_limits: Dict[str, int] = field(default_factory=lambda: {"/health": 100})
    # janela de manutenção (hora inicial, hora final)
    maintenance_window: Tuple[int, int] = (2, 4)


@dataclass
class AppRootConfig:
    """Configuração raiz, composta pelas sub-configurações."""

    log_sub_config: LogConfig = field(default_factory=LogConfig)
    service: ServiceConfig = field(default_factory=ServiceConfig)

    def describe(
        self,
        verbose: bool = False,
    ) -> str:
        return f"{self.service.host}:{self.service.port}"
