# src/cli_config/docs.py
"""
Extração de documentação a partir dos fontes dos modelos de configuração.

Os módulos Python que definem as dataclasses de configuração são
concatenados e reduzidos, via uma sequência fixa de regras de reescrita,
a "apenas declarações de campos e seus comentários/docstrings". O texto
resultante é anexado ao arquivo de configuração como documentação.

Antes da concatenação, a docstring de cada módulo é removida do início
do respectivo fonte (strings triplas no meio do módulo são mantidas).

Regras (aplicadas em ordem, cada uma sobre o resultado da anterior):
    1. shebang e declarações de encoding
    2. `__all__ = [...]` e re-exports relativos (`from .x import y`)
    3. imports (`import x`, `from x import y`, formas entre parênteses)
    4. decorators (`@dataclass`, `@dataclass(...)` mesmo com argumentos multi-linha)
    5. blocos de implementação (`def` / `async def`: assinatura com parênteses
       balanceados, possivelmente multi-linha, seguida do corpo indentado)
    6. sequências de linhas em branco → exatamente uma linha em branco

Invariantes:
    - As regras são fixas e compiladas uma única vez
    - A ordem de concatenação é a ordem recebida (ordenada nos helpers de diretório)

Limites explícitos:
    - Não interpreta Python (apenas transformação textual)
    - Não realiza I/O em `documented_config_models`
"""

from __future__ import annotations

import re
from importlib import resources
from pathlib import Path
from typing import Iterable, List, Pattern, Tuple, Union


# docstring de módulo: só no início de cada fonte, após linhas em branco ou comentários
_MODULE_DOCSTRING = re.compile(
    r"\A((?:[ \t]*(?:#[^\n]*)?\n)*)[rRuU]?(\"\"\"|''').*?\2[^\n]*",
    re.DOTALL,
)

_RULES: Tuple[Tuple[str, str], ...] = (
    # shebang e encoding
    (r"\n#![^\n]*|\n#[^\n]*coding[:=][^\n]*", ""),
    # __all__ e re-exports relativos
    (r"\n__all__\s*(?::[^=\n]*)?=\s*(?:\[.*?\]|\(.*?\))[^\n]*|\nfrom \.[^\n(]*\(.*?\)[^\n]*|\nfrom \.[^\n]*", ""),
    # imports
    (r"\nfrom [^\n(]*\(.*?\)[^\n]*|\n(?:import|from) [^\n]*", ""),
    # decorators, com argumentos possivelmente multi-linha
    (r"\n[ \t]*@[^\n(]*(?:\((?:[^()]|\([^()]*\))*\))?[^\n]*", ""),
    # funções e métodos, com o corpo indentado
    (
        r"\n([ \t]*)(?:async[ \t]+)?def[ \t]+\w+[ \t]*\((?:[^()]|\([^()]*\))*\)[^\n]*"
        r"(?:\n(?:\1[ \t]+[^\n]*|[ \t]*(?=\n)))*",
        "\n",
    ),
    # linhas em branco consecutivas
    (r"\n(?:[ \t]*\n)+", "\n\n"),
)

REPLACEMENTS: Tuple[Tuple[Pattern[str], str], ...] = tuple(
    (re.compile(pattern, re.DOTALL), replacement) for pattern, replacement in _RULES
)


def documented_config_models(sources: Iterable[str]) -> str:
    """
    Gera o texto de documentação a partir dos fontes dos modelos de configuração.

    Args:
        sources: Conteúdo de cada módulo que define modelos de configuração.

    Returns:
        str: Documentação pronta para ser anexada ao arquivo de configuração.
    """
    merged_docs = "\n" + "".join(
        "\n" + _MODULE_DOCSTRING.sub(r"\1", src, count=1) for src in sources
    )
    for regex, replacement in REPLACEMENTS:
        merged_docs = regex.sub(replacement, merged_docs)
    return merged_docs


def read_config_model_sources(
    directory: Union[str, Path],
    pattern: str = "*.py",
) -> List[str]:
    """Lê (em ordem de nome) os fontes de `directory` que casam com `pattern`."""
    paths = sorted(Path(directory).glob(pattern))
    return [p.read_text(encoding="utf-8") for p in paths if p.is_file()]


def documented_config_models_from_dir(
    directory: Union[str, Path],
    pattern: str = "*.py",
) -> str:
    return documented_config_models(read_config_model_sources(directory, pattern))


def documented_config_models_from_package(package: str) -> str:
    """
    Gera a documentação a partir dos módulos de um pacote instalado.

    Útil quando os modelos de configuração são distribuídos junto com a
    aplicação e o diretório de fontes não é conhecido em runtime.

    Args:
        package: Nome importável do pacote (ex.: "myapp.config_models").
    """
    entries = sorted(
        (entry for entry in resources.files(package).iterdir() if entry.name.endswith(".py")),
        key=lambda entry: entry.name,
    )
    return documented_config_models(entry.read_text(encoding="utf-8") for entry in entries)
