"""Configuration model for grid assembly and logging."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any


@dataclass(slots=True)
class AssemblyConfig:
    row_workers: int = 1
    rows_per_task: int = 64

    def __post_init__(self):
        if self.row_workers < 1:
            raise ValueError(f"assembly.row_workers must be >= 1, got {self.row_workers}")
        if self.rows_per_task < 1:
            raise ValueError(f"assembly.rows_per_task must be >= 1, got {self.rows_per_task}")


@dataclass(slots=True)
class LoggingConfig:
    level: str = "INFO"
    format: str = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    datefmt: str = "%H:%M:%S"

    def apply(self) -> None:
        level = logging.getLevelName(self.level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {self.level!r}")
        logging.basicConfig(level=level, format=self.format, datefmt=self.datefmt)


@dataclass(slots=True)
class EngineConfig:
    assembly: AssemblyConfig = field(default_factory=AssemblyConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EngineConfig":
        return cls(
            assembly=AssemblyConfig(**data.get("assembly", {})),
            logging=LoggingConfig(**data.get("logging", {})),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def load_config(path: str | Path | None) -> EngineConfig:
    if path is None:
        return EngineConfig()

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    if config_path.suffix.lower() != ".json":
        raise ValueError("Only JSON config files are supported")

    with config_path.open("r", encoding="utf-8") as f:
        raw = json.load(f)
    if not isinstance(raw, dict):
        raise ValueError("Config root must be a JSON object")
    return EngineConfig.from_dict(raw)
