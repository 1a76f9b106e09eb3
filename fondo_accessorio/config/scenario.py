from __future__ import annotations

import logging
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Type, TypeVar, Union

import yaml

from fondo_accessorio.domain.errors import ScenarioError
from fondo_accessorio.domain.models import (
    AnnualData,
    AreaQualifica,
    Art23EmployeeDetail,
    DipendenteInServizio,
    DistribuzioneRisorseData,
    EmployeeCategory,
    FondoDipendenteData,
    FondoDirigenzaData,
    FondoEQData,
    FondoSegretarioData,
    FundInput,
    HistoricalData,
    PersonaleServizioCount,
    ProventoSpecifico,
    RisorsaVariabileDetail,
    SimulatoreInput,
    TipologiaEnte,
)
from fondo_accessorio.utils.parse_utils import (
    clean_str,
    parse_date,
    safe_float,
    safe_int,
    to_bool_or_none,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

SECTIONS = (
    "historical",
    "annual",
    "fondo_dipendente",
    "fondo_eq",
    "fondo_segretario",
    "fondo_dirigenza",
    "distribuzione",
    "personale",
)


# ---------------------------------------------------------------------------
# Допоміжні нормалізатори
# ---------------------------------------------------------------------------

def _field_names(cls: type) -> set:
    return {f.name for f in fields(cls)}


def _check_keys(raw: Dict[str, Any], allowed: Iterable[str], section: str) -> None:
    unknown = sorted(str(k) for k in raw if k not in set(allowed))
    if unknown:
        raise ScenarioError(f"[{section}] campi sconosciuti: {', '.join(unknown)}")


def _as_mapping(raw: Any, section: str) -> Dict[str, Any]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ScenarioError(f"[{section}] atteso un mapping, trovato {type(raw).__name__}")
    return raw


def _number(value: Any, key: str, section: str) -> Optional[float]:
    if value is None or (isinstance(value, str) and value.strip() == ""):
        return None
    parsed = safe_float(value)
    if parsed is None:
        raise ScenarioError(f"[{section}] {key}: valore non numerico {value!r}")
    return parsed


def _bool(value: Any, key: str, section: str, default: Optional[bool] = None) -> Optional[bool]:
    if value is None:
        return default
    parsed = to_bool_or_none(value)
    if parsed is None:
        raise ScenarioError(f"[{section}] {key}: valore booleano non valido {value!r}")
    return parsed


def _date(value: Any, key: str, section: str):
    if value is None or (isinstance(value, str) and value.strip() == ""):
        return None
    parsed = parse_date(value)
    if parsed is None:
        raise ScenarioError(f"[{section}] {key}: data non valida {value!r} (attesa YYYY-MM-DD o DD/MM/YYYY)")
    return parsed


def _enum(enum_cls: Type[T], value: Any, key: str, section: str) -> Optional[T]:
    s = clean_str(value)
    if s is None:
        return None
    for member in enum_cls:
        if s.upper() in (member.name, str(member.value).upper()):
            return member
    raise ScenarioError(f"[{section}] {key}: valore non ammesso {value!r}")


def _numeric_record(cls: Type[T], raw: Any, section: str) -> T:
    """Ledger/record з лише числовими Optional[float] полями."""
    data = _as_mapping(raw, section)
    _check_keys(data, _field_names(cls), section)
    return cls(**{k: _number(v, k, section) for k, v in data.items()})


# ---------------------------------------------------------------------------
# Sezioni
# ---------------------------------------------------------------------------

def parse_historical(raw: Any) -> HistoricalData:
    return _numeric_record(HistoricalData, raw, "historical")


def parse_fondo_dipendente(raw: Any) -> FondoDipendenteData:
    return _numeric_record(FondoDipendenteData, raw, "fondo_dipendente")


def parse_fondo_eq(raw: Any) -> FondoEQData:
    return _numeric_record(FondoEQData, raw, "fondo_eq")


def parse_fondo_segretario(raw: Any) -> FondoSegretarioData:
    seg = _numeric_record(FondoSegretarioData, raw, "fondo_segretario")
    perc = seg.fin_percentuale_copertura_posto_segretario
    if perc is not None and not 0 <= perc <= 100:
        raise ScenarioError(f"[fondo_segretario] copertura fuori range 0..100: {perc}")
    return seg


def parse_fondo_dirigenza(raw: Any) -> FondoDirigenzaData:
    return _numeric_record(FondoDirigenzaData, raw, "fondo_dirigenza")


def _parse_detail(value: Any, key: str) -> Optional[RisorsaVariabileDetail]:
    if value is None:
        return None
    if not isinstance(value, dict):
        # numero semplice → solo "stanziate"
        return RisorsaVariabileDetail(stanziate=_number(value, key, "distribuzione"))
    _check_keys(value, _field_names(RisorsaVariabileDetail), f"distribuzione.{key}")
    return RisorsaVariabileDetail(
        stanziate=_number(value.get("stanziate"), f"{key}.stanziate", "distribuzione"),
        risparmi=_number(value.get("risparmi"), f"{key}.risparmi", "distribuzione"),
        a_bilancio=_number(value.get("a_bilancio"), f"{key}.a_bilancio", "distribuzione"),
    )


def parse_distribuzione(raw: Any) -> DistribuzioneRisorseData:
    section = "distribuzione"
    data = _as_mapping(raw, section)
    _check_keys(data, _field_names(DistribuzioneRisorseData), section)

    kwargs: Dict[str, Any] = {}
    for key, value in data.items():
        if key in ("u_diff_progressioni_storiche", "u_indennita_comparto"):
            kwargs[key] = _number(value, key, section)
        elif key == "criteri_is_consuntivo_mode":
            kwargs[key] = _bool(value, key, section, default=False)
        elif key.startswith("criteri_"):
            parsed = _number(value, key, section)
            if parsed is not None:
                kwargs[key] = parsed
        else:
            kwargs[key] = _parse_detail(value, key)
    return DistribuzioneRisorseData(**kwargs)


def _parse_art23_list(raw: Any, key: str) -> tuple:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise ScenarioError(f"[annual] {key}: attesa una lista")
    out: List[Art23EmployeeDetail] = []
    for idx, item in enumerate(raw, start=1):
        item = _as_mapping(item, f"annual.{key}[{idx}]")
        _check_keys(item, _field_names(Art23EmployeeDetail), f"annual.{key}[{idx}]")
        out.append(Art23EmployeeDetail(
            id=str(item.get("id") or idx),
            matricola=clean_str(item.get("matricola")),
            part_time_percentage=_number(item.get("part_time_percentage"), "part_time_percentage", key),
            cedolini_emessi=_number(item.get("cedolini_emessi"), "cedolini_emessi", key),
        ))
    return tuple(out)


def _parse_personale_counts(raw: Any) -> tuple:
    """personale_servizio_attuale: {DIPENDENTE: 40, EQ: 5, ...}."""
    data = _as_mapping(raw, "annual.personale_servizio_attuale")
    out = []
    for key, value in data.items():
        category = _enum(EmployeeCategory, key, "personale_servizio_attuale", "annual")
        out.append(PersonaleServizioCount(category=category, count=_number(value, str(key), "annual")))
    return tuple(out)


def _parse_proventi(raw: Any) -> tuple:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise ScenarioError("[annual] proventi_specifici: attesa una lista")
    out = []
    for idx, item in enumerate(raw, start=1):
        item = _as_mapping(item, f"annual.proventi_specifici[{idx}]")
        _check_keys(item, _field_names(ProventoSpecifico), f"annual.proventi_specifici[{idx}]")
        out.append(ProventoSpecifico(
            id=str(item.get("id") or idx),
            descrizione=clean_str(item.get("descrizione")) or "",
            importo=_number(item.get("importo"), "importo", "proventi_specifici"),
            riferimento_normativo=clean_str(item.get("riferimento_normativo")) or "",
        ))
    return tuple(out)


_ANNUAL_BOOL_FIELDS = (
    "is_ente_dissestato",
    "is_ente_strutturalmente_deficitario",
    "is_ente_riequilibrio_finanziario",
    "has_dirigenza",
    "condizioni_virtuosita_finanziaria_soddisfatte",
    "applica_incremento_pnrr3",
)

_ANNUAL_OPTIONAL_BOOL_FIELDS = (
    "rispetto_equilibrio_bilancio_precedente",
    "rispetto_debito_commerciale_precedente",
    "approvazione_rendiconto_precedente",
)

_ANNUAL_NUMBER_FIELDS = (
    "incidenza_salario_accessorio_ultimo_rendiconto",
    "incentivi_pnrr_op_misure_straordinarie",
    "fondo_stabile_2016_pnrr",
    "calcolato_incremento_pnrr3",
)


def parse_annual(raw: Any) -> AnnualData:
    section = "annual"
    data = _as_mapping(raw, section)
    # simulatore_risultati è sempre calcolato, mai letto da YAML
    allowed = _field_names(AnnualData) - {"simulatore_risultati"}
    _check_keys(data, allowed, section)

    kwargs: Dict[str, Any] = {}
    if "anno_riferimento" in data:
        anno = safe_int(data["anno_riferimento"])
        if anno is None:
            raise ScenarioError(f"[annual] anno_riferimento non valido: {data['anno_riferimento']!r}")
        kwargs["anno_riferimento"] = anno
    if "denominazione_ente" in data:
        kwargs["denominazione_ente"] = clean_str(data["denominazione_ente"])
    if "altro_tipologia_ente" in data:
        kwargs["altro_tipologia_ente"] = clean_str(data["altro_tipologia_ente"])
    if "tipologia_ente" in data:
        kwargs["tipologia_ente"] = _enum(TipologiaEnte, data["tipologia_ente"], "tipologia_ente", section)
    if "numero_abitanti" in data:
        abitanti = _number(data["numero_abitanti"], "numero_abitanti", section)
        kwargs["numero_abitanti"] = int(abitanti) if abitanti is not None else None

    for key in _ANNUAL_BOOL_FIELDS:
        if key in data:
            kwargs[key] = _bool(data[key], key, section, default=False)
    for key in _ANNUAL_OPTIONAL_BOOL_FIELDS:
        if key in data:
            kwargs[key] = _bool(data[key], key, section)
    for key in _ANNUAL_NUMBER_FIELDS:
        if key in data:
            kwargs[key] = _number(data[key], key, section)

    if "personale_servizio_attuale" in data:
        kwargs["personale_servizio_attuale"] = _parse_personale_counts(data["personale_servizio_attuale"])
    if "proventi_specifici" in data:
        kwargs["proventi_specifici"] = _parse_proventi(data["proventi_specifici"])
    for key in ("personale_2018_per_art23", "personale_anno_rif_per_art23"):
        if key in data:
            kwargs[key] = _parse_art23_list(data[key], key)
    if "simulatore_input" in data:
        sim_raw = _as_mapping(data["simulatore_input"], "annual.simulatore_input")
        _check_keys(sim_raw, _field_names(SimulatoreInput), "annual.simulatore_input")
        kwargs["simulatore_input"] = SimulatoreInput(
            **{k: _number(v, k, "annual.simulatore_input") for k, v in sim_raw.items()}
        )

    return AnnualData(**kwargs)


def parse_personale(raw: Any) -> tuple:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise ScenarioError("[personale] attesa una lista")
    out: List[DipendenteInServizio] = []
    for idx, item in enumerate(raw, start=1):
        section = f"personale[{idx}]"
        item = _as_mapping(item, section)
        _check_keys(item, _field_names(DipendenteInServizio), section)
        out.append(DipendenteInServizio(
            matricola=clean_str(item.get("matricola")),
            area=_enum(AreaQualifica, item.get("area"), "area", section),
            livello_peo=(clean_str(item.get("livello_peo")) or "").upper() or None,
            part_time_percentage=_number(item.get("part_time_percentage"), "part_time_percentage", section),
            full_year=bool(_bool(item.get("full_year"), "full_year", section, default=True)),
            data_assunzione=_date(item.get("data_assunzione"), "data_assunzione", section),
            data_cessazione=_date(item.get("data_cessazione"), "data_cessazione", section),
        ))
    return tuple(out)


# ---------------------------------------------------------------------------
# Scenario completo
# ---------------------------------------------------------------------------

def parse_scenario(raw: Any) -> FundInput:
    data = _as_mapping(raw, "scenario")
    _check_keys(data, SECTIONS, "scenario")
    return FundInput(
        historical=parse_historical(data.get("historical")),
        annual=parse_annual(data.get("annual")),
        fondo_dipendente=parse_fondo_dipendente(data.get("fondo_dipendente")),
        fondo_eq=parse_fondo_eq(data.get("fondo_eq")),
        fondo_segretario=parse_fondo_segretario(data.get("fondo_segretario")),
        fondo_dirigenza=parse_fondo_dirigenza(data.get("fondo_dirigenza")),
        distribuzione=parse_distribuzione(data.get("distribuzione")),
        personale=parse_personale(data.get("personale")),
    )


def load_scenario(path: Union[str, Path]) -> FundInput:
    p = Path(path)
    if not p.exists():
        logger.error("[SCENARIO] File non trovato: %s", p)
        raise ScenarioError(f"Scenario non trovato: {p}")

    try:
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.exception("[SCENARIO] Impossibile leggere %s: %s", p, e)
        raise ScenarioError(f"Impossibile leggere {p}: {e}") from e

    fund_input = parse_scenario(data)
    logger.info(
        "[SCENARIO] Caricato %s (%s, anno %s)",
        p.name, fund_input.annual.denominazione_ente or "ente", fund_input.annual.anno_riferimento,
    )
    return fund_input
