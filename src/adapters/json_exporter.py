"""Exportación JSON de cómics y resultados de búsqueda.

Usa exactamente la forma pública de la API (`model_dump(mode="json")`), así
un archivo exportado por la CLI es intercambiable con una respuesta HTTP.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel


def to_json_text(model: BaseModel) -> str:
    payload: Any = model.model_dump(mode="json")
    return json.dumps(payload, ensure_ascii=False, indent=2)


def export_json(*, model: BaseModel, output_path: Path) -> Path:
    """Exporta el modelo a JSON UTF-8 con formato estable."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(to_json_text(model) + "\n", encoding="utf-8")
    return output_path
