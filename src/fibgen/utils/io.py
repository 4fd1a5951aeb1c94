from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterator, List

import yaml


def load_yaml(path: str | Path) -> Dict[str, Any]:
    with Path(path).open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected mapping YAML: {path}")
    return data


def read_lines(path: str | Path) -> Iterator[str]:
    with Path(path).open("r", encoding="utf-8") as f:
        for line in f:
            yield line.rstrip("\n")


def write_lines(path: str | Path, lines: List[str]) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", encoding="utf-8", newline="\n") as f:
        for line in lines:
            f.write(line + "\n")
    return p
