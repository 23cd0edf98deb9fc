"""Ejecuta snouty desde un checkout, sin instalar el paquete.

Uso:
- `python -m main run -w basic_test --antithesis.duration 30 ...`

Solo el código propio se resuelve desde `src/`; las dependencias (typer, httpx,
json5, ...) tienen que estar instaladas igual.
"""

from __future__ import annotations

import sys
from pathlib import Path

SRC_DIR = Path(__file__).resolve().parent / "src"


def _bootstrap() -> None:
    if str(SRC_DIR) not in sys.path:
        sys.path.insert(0, str(SRC_DIR))


if __name__ == "__main__":
    _bootstrap()

    from cli.main import app  # noqa: E402

    app(prog_name="snouty")
