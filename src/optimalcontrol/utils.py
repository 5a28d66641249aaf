from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from .config import ProblemConfig


def load_config(path: str | Path) -> ProblemConfig:
    data: dict[str, Any] = yaml.safe_load(Path(path).read_text())
    return ProblemConfig.model_validate(data)
