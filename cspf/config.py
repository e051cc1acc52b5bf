from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, field_validator


class CodecSettings(BaseModel):
    canonical: bool = True
    date_as_datetime: bool = False
    assume_utc: bool = True


class LoggingSettings(BaseModel):
    level: str = "INFO"

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        name = str(value).strip().upper()
        if not isinstance(logging.getLevelName(name), int):
            raise ValueError(f"unknown logging level: {value}")
        return name


class Settings(BaseModel):
    codec: CodecSettings = CodecSettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def load(cls, path: Path) -> "Settings":
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
        return cls.model_validate(raw or {})


def find_config(explicit_path: Optional[Path]) -> Optional[Path]:
    if explicit_path:
        return explicit_path
    cwd = Path.cwd()
    for candidate in (cwd / "cspf.yaml", cwd / "cspf.yml"):
        if candidate.exists():
            return candidate
    return None
