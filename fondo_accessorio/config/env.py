from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from decouple import config

REPO_ROOT = Path(__file__).resolve().parents[2]


@dataclass(frozen=True)
class NormativaConfig:
    yaml_path: Path


@dataclass(frozen=True)
class ScenariConfig:
    scenari_dir: Path


@dataclass(frozen=True)
class LoggingConfig:
    level: str


def _resolve(raw: str) -> Path:
    p = Path(raw).expanduser()
    return p if p.is_absolute() else REPO_ROOT / p


def load_normativa_config() -> NormativaConfig:
    return NormativaConfig(
        yaml_path=_resolve(config("FONDO_NORMATIVA_YAML", default="data/normativa.yml")),
    )


def load_scenari_config() -> ScenariConfig:
    return ScenariConfig(
        scenari_dir=_resolve(config("FONDO_SCENARI_DIR", default="scenari")),
    )


def load_logging_config() -> LoggingConfig:
    level = config("FONDO_LOG_LEVEL", default="INFO").strip().upper()
    if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        raise ValueError(f"FONDO_LOG_LEVEL non valido: {level!r}")
    return LoggingConfig(level=level)
