"""TOML config loading for typeexpr.toml."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

CONFIG_NAME = "typeexpr.toml"


@dataclass
class TypesConfig:
    declared: list[str] = field(default_factory=list)


@dataclass
class OutputConfig:
    color: bool = True


@dataclass
class TypeExprConfig:
    types: TypesConfig = field(default_factory=TypesConfig)
    output: OutputConfig = field(default_factory=OutputConfig)


def find_config(start_path: Path | None = None) -> Path:
    """Walk up directories to find typeexpr.toml. Raises FileNotFoundError."""
    path = (start_path or Path.cwd()).resolve()
    if path.is_file():
        path = path.parent
    while True:
        candidate = path / CONFIG_NAME
        if candidate.exists():
            return candidate
        parent = path.parent
        if parent == path:
            raise FileNotFoundError(f"No {CONFIG_NAME} found in any parent directory")
        path = parent


def load_config(path: Path) -> TypeExprConfig:
    """Parse a typeexpr.toml file into a TypeExprConfig."""
    with open(path, "rb") as f:
        data = tomllib.load(f)

    config = TypeExprConfig()

    if "types" in data:
        config.types = TypesConfig(
            declared=list(data["types"].get("declared", [])),
        )

    if "output" in data:
        config.output = OutputConfig(
            color=data["output"].get("color", True),
        )

    return config
