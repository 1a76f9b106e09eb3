from fondo_accessorio.config.env import (
    LoggingConfig,
    NormativaConfig,
    ScenariConfig,
    load_logging_config,
    load_normativa_config,
    load_scenari_config,
)
from fondo_accessorio.config.normativa import clear_normativa_cache, load_normativa, parse_normativa
from fondo_accessorio.config.scenario import load_scenario, parse_scenario

__all__ = [
    "LoggingConfig",
    "NormativaConfig",
    "ScenariConfig",
    "load_logging_config",
    "load_normativa_config",
    "load_scenari_config",
    "clear_normativa_cache",
    "load_normativa",
    "parse_normativa",
    "load_scenario",
    "parse_scenario",
]
