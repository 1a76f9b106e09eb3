from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from fondo_accessorio.config.env import load_normativa_config
from fondo_accessorio.domain.errors import NormativaNonDisponibileError
from fondo_accessorio.domain.models import Limiti, NormativeData, ValoriProCapite

logger = logging.getLogger(__name__)

REQUIRED_SECTIONS = ("riferimenti_normativi", "valori_pro_capite", "limiti")

REQUIRED_RIFERIMENTI = (
    "art23_dlgs75_2017",
    "art33_dl34_2019",
    "art14_dl25_2025",
    "art8_dl13_2023",
    "art45_dlgs36_2023",
    "art208_cds",
    "art17_ccnl2022",
    "art67_ccnl2018",
    "art79_ccnl2022",
)

_CACHE: Dict[Path, NormativeData] = {}


def _fail(msg: str, *args: Any) -> NormativaNonDisponibileError:
    text = msg % args if args else msg
    logger.error("[NORMATIVA] %s", text)
    return NormativaNonDisponibileError(text)


def _number(section: Dict[str, Any], key: str, section_name: str) -> float:
    value = section.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _fail("%s.%s mancante o non numerico: %r", section_name, key, value)
    return float(value)


def parse_normativa(data: Any, source: str = "<dict>") -> NormativeData:
    """Валідує сирий YAML і будує NormativeData (або NormativaNonDisponibileError)."""
    if not isinstance(data, dict):
        raise _fail("Очікував mapping у %s, а отримав %r", source, type(data).__name__)

    missing = [s for s in REQUIRED_SECTIONS if not isinstance(data.get(s), dict)]
    if missing:
        raise _fail("Sezioni mancanti in %s: %s", source, ", ".join(missing))

    rif = {str(k): str(v) for k, v in data["riferimenti_normativi"].items() if v is not None}
    missing_rif = [k for k in REQUIRED_RIFERIMENTI if not rif.get(k)]
    if missing_rif:
        raise _fail("Riferimenti normativi mancanti in %s: %s", source, ", ".join(missing_rif))

    vpc = data["valori_pro_capite"]
    lim = data["limiti"]

    try:
        progressioni = {
            str(area): {str(liv): float(v) for liv, v in (livelli or {}).items()}
            for area, livelli in (data.get("progression_economic_values") or {}).items()
        }
        indennita = {
            str(area): float(v) for area, v in (data.get("indennita_comparto_values") or {}).items()
        }
    except (AttributeError, TypeError, ValueError) as e:
        raise _fail("Tabelle progressioni/indennità non valide in %s: %s", source, e) from e

    return NormativeData(
        riferimenti_normativi=rif,
        valori_pro_capite=ValoriProCapite(
            art67_ccnl_2018=_number(vpc, "art67_ccnl_2018", "valori_pro_capite"),
            art79_ccnl_2022_b=_number(vpc, "art79_ccnl_2022_b", "valori_pro_capite"),
        ),
        limiti=Limiti(
            incidenza_salario_accessorio=_number(lim, "incidenza_salario_accessorio", "limiti"),
            incremento_virtuosi_dl25_2025=_number(lim, "incremento_virtuosi_dl25_2025", "limiti"),
            incremento_pnrr_dl13_2023=_number(lim, "incremento_pnrr_dl13_2023", "limiti"),
        ),
        progression_economic_values=progressioni,
        indennita_comparto_values=indennita,
    )


def load_normativa(path: Optional[Union[str, Path]] = None) -> NormativeData:
    """
    Завантажує data/normativa.yml (або FONDO_NORMATIVA_YAML).

    На відміну від необов'язкових даних, тут будь-яка проблема фатальна:
    без нормативних даних розрахунок не запускається.
    """
    p = Path(path) if path is not None else load_normativa_config().yaml_path
    p = p.resolve()

    cached = _CACHE.get(p)
    if cached is not None:
        return cached

    if not p.exists():
        raise _fail("Dati normativi non disponibili: file %s non trovato", p)

    try:
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise _fail("Impossibile leggere %s: %s", p, e) from e

    normativa = parse_normativa(data, source=str(p))
    _CACHE[p] = normativa
    logger.info("[NORMATIVA] Caricati %d riferimenti da %s", len(normativa.riferimenti_normativi), p)
    return normativa


def clear_normativa_cache() -> None:
    _CACHE.clear()
