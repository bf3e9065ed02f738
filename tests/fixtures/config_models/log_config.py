# tests/fixtures/config_models/log_config.py
"""
Modelo de configuração de logging usado nos testes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class Sink(Enum):
    """Destino das mensagens de log."""

    NULL = "null"
    STDOUT = "stdout"
    STDERR = "stderr"


@dataclass
class LogConfig:
    """Especifica o que a aplicação deve fazer com suas mensagens de log."""

    # destino das mensagens (também aceito na CLI via --sink)
    sink: Optional[Sink] = None
    # nível mínimo: DEBUG, INFO, WARNING, ERROR
    level: str = "INFO"
    # módulos silenciados
    muted_modules: List[str] = field(default_factory=list)

    def is_enabled(self) -> bool:
        return self.sink is not None and self.sink is not Sink.NULL
