# tests/fixtures/cli_options.py
"""
Opções de CLI de uma aplicação fictícia, integradas a `AppRootConfig`.
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from typing import Optional

from cli_config import CmdLineOptions, merge_overrides
from tests.fixtures.config_models.app_config import AppRootConfig
from tests.fixtures.config_models.log_config import Sink


@dataclass
class AppCmdLineOptions(CmdLineOptions):
    """Aplicação de teste do cli-config."""

    sink: Optional[str] = None
    port: Optional[int] = None

    @classmethod
    def add_arguments(cls, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("--sink", choices=[s.name for s in Sink])
        parser.add_argument("--port", type=int)

    def merge_with_config(self, config: AppRootConfig) -> AppRootConfig:
        return merge_overrides(
            config,
            {
                "log_sub_config": {"sink": self.sink},
                "service": {"port": self.port},
            },
        )
