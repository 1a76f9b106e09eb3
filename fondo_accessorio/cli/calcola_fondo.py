# fondo_accessorio/cli/calcola_fondo.py
"""
Calcolo del fondo salario accessorio da uno scenario YAML.

    fondo-calcola scenari/esempio_comune.yml
    fondo-calcola --last --json
"""
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from fondo_accessorio.config.env import load_logging_config, load_normativa_config, load_scenari_config
from fondo_accessorio.config.normativa import load_normativa
from fondo_accessorio.config.scenario import load_scenario
from fondo_accessorio.domain.errors import FondoConfigError, FondoError, ScenarioError
from fondo_accessorio.domain.fad_totals import fad_voci_dettaglio
from fondo_accessorio.domain.models import NormativeData
from fondo_accessorio.domain.results import CalculatedFund, ComplianceCheck, FundDetailTotals
from fondo_accessorio.services.fund_service import CalcoloOutcome, esegui_calcolo
from fondo_accessorio.utils.audit import build_calculation_snapshot
from fondo_accessorio.utils.parse_utils import format_euro, prepare_for_json

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CHECK_ERRORS = 1
EXIT_CONFIG_ERROR = 2

_ICONE = {"info": "✅", "warning": "⚠️ ", "error": "⛔"}


# ---------------------------
#  helpers: scenario
# ---------------------------

def find_last_scenario(scenari_dir: Path) -> Optional[Path]:
    """Найсвіжіший *.yml / *.yaml у теці сценаріїв (за mtime)."""
    if not scenari_dir.is_dir():
        return None
    files = [p for p in scenari_dir.iterdir() if p.suffix.lower() in (".yml", ".yaml")]
    if not files:
        return None
    return max(files, key=lambda p: p.stat().st_mtime)


# ---------------------------
#  JSON
# ---------------------------

def _totali_json(t: FundDetailTotals) -> Dict[str, float]:
    return {"stabile": t.stabile, "variabile": t.variabile, "totale": t.totale}


def fund_to_json(fund: CalculatedFund) -> Dict[str, Any]:
    # prepare_for_json не бачить @property, тому totale додаємо руками
    data = prepare_for_json(fund)
    data["totale_fondo"] = fund.totale_fondo
    data["dettaglio_fondi"] = {
        "dipendente": _totali_json(fund.dettaglio_fondi.dipendente),
        "eq": _totali_json(fund.dettaglio_fondi.eq),
        "segretario": _totali_json(fund.dettaglio_fondi.segretario),
        "dirigenza": _totali_json(fund.dettaglio_fondi.dirigenza),
    }
    return data


def derived_fields_json(outcome: CalcoloOutcome) -> Dict[str, Any]:
    dip = outcome.fund_input_aggiornato.fondo_dipendente
    annual = outcome.fund_input_aggiornato.annual
    return {
        "st_incremento_decreto_pa": dip.st_incremento_decreto_pa,
        "st_riduzione_per_incremento_eq": dip.st_riduzione_per_incremento_eq,
        "vn_dl13_art8c3_incremento_pnrr_max5_stabile_2016": dip.vn_dl13_art8c3_incremento_pnrr_max5_stabile_2016,
        "calcolato_incremento_pnrr3": annual.calcolato_incremento_pnrr3,
    }


def build_json_report(outcome: CalcoloOutcome, snapshot: Dict[str, Any], write_back: bool) -> Dict[str, Any]:
    report: Dict[str, Any] = {
        "fondo": fund_to_json(outcome.fund),
        "simulatore": prepare_for_json(outcome.simulatore),
        "verifiche": prepare_for_json(outcome.checks),
        "budget_performance": prepare_for_json(outcome.budget_performance),
        "audit": snapshot,
    }
    if write_back:
        report["campi_derivati"] = derived_fields_json(outcome)
    return report


# ---------------------------
#  pretty-print
# ---------------------------

def _riga(label: str, valore: Optional[float]) -> None:
    print(f"  {label:42}: {format_euro(valore):>18}")


def print_fund(fund: CalculatedFund) -> None:
    print("=" * 80)
    print("FONDO SALARIO ACCESSORIO")
    print("-" * 80)
    _riga("Fondo base 2016", fund.fondo_base_2016)
    _riga("Limite Art. 23 c.2 modificato", fund.limite_art23c2_modificato)
    _riga("Risorse soggette al limite", fund.totale_risorse_soggette_al_limite)
    if fund.superamento_limite_2016 is not None:
        _riga("⛔ Superamento limite 2016", fund.superamento_limite_2016)

    print()
    print(f"  {'':42}  {'stabile':>14} {'variabile':>14} {'totale':>14}")
    categorie = (
        ("Personale dipendente", fund.dettaglio_fondi.dipendente),
        ("Elevate Qualificazioni", fund.dettaglio_fondi.eq),
        ("Segretario comunale", fund.dettaglio_fondi.segretario),
        ("Dirigenza", fund.dettaglio_fondi.dirigenza),
    )
    for label, t in categorie:
        print(f"  {label:42}  {t.stabile:>14,.2f} {t.variabile:>14,.2f} {t.totale:>14,.2f}")
    print(
        f"  {'TOTALE':42}  {fund.totale_componente_stabile:>14,.2f} "
        f"{fund.totale_componente_variabile:>14,.2f} {fund.totale_fondo:>14,.2f}"
    )

    componenti = list(fund.incrementi_stabili_ccnl) + [fund.adeguamento_pro_capite]
    if fund.incremento_opzionale_virtuosi is not None:
        componenti.append(fund.incremento_opzionale_virtuosi)
    componenti.extend(fund.risorse_variabili)
    if fund.incremento_determinato_art23c2 is not None:
        componenti.insert(0, fund.incremento_determinato_art23c2)

    print()
    print("  Componenti:")
    for c in componenti:
        escluso = " (escluso dal limite)" if c.escluso_dal_limite_2016 else ""
        print(f"   - [{c.tipo.value}] {c.descrizione}: {format_euro(c.importo)}{escluso}")
        if c.riferimento:
            print(f"       {c.riferimento}")


def print_checks(checks: List[ComplianceCheck]) -> None:
    print("=" * 80)
    print("VERIFICHE DI CONFORMITÀ")
    print("-" * 80)
    for c in checks:
        print(f"{_ICONE.get(c.gravita.value, '-')} {c.descrizione}")
        print(f"     attuale: {c.valore_attuale}   limite: {c.limite}")
        print(f"     {c.messaggio}")
        print(f"     {c.riferimento_normativo}")


def print_budget(outcome: CalcoloOutcome) -> None:
    b = outcome.budget_performance
    print("=" * 80)
    print("DISTRIBUZIONE FONDO DIPENDENTI")
    print("-" * 80)
    _riga("Disponibile alla contrattazione", b.disponibile_contrattazione)
    _riga("Altri utilizzi variabili", b.altri_utilizzi_variabili)
    _riga("Maggiorazione premio individuale", b.maggiorazione)
    _riga("Budget performance", b.budget_performance)
    _riga("  di cui individuale", b.performance_individuale)
    _riga("  di cui organizzativa", b.performance_organizzativa)


def print_voci_dipendente(outcome: CalcoloOutcome, normativa: NormativeData) -> None:
    fi = outcome.fund_input
    voci = fad_voci_dettaglio(
        fi.fondo_dipendente,
        outcome.simulatore,
        fi.annual.is_ente_in_condizioni_speciali,
        fi.fondo_eq.ris_incremento_con_riduzione_fondo_dipendenti,
        normativa,
    )
    print("=" * 80)
    print("VOCI FONDO PERSONALE DIPENDENTE")
    print("-" * 80)
    for v in voci:
        print(f"  [{v.tipo.value:9}] {v.descrizione[:52]:52} {format_euro(v.importo):>18}")
        print(f"              {v.riferimento}")


def print_derived(outcome: CalcoloOutcome) -> None:
    print("=" * 80)
    print("CAMPI DERIVATI (write-back)")
    print("-" * 80)
    for k, v in derived_fields_json(outcome).items():
        print(f"  {k:52}: {format_euro(v)}")


# ---------------------------
#  main
# ---------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Calcolo del fondo salario accessorio (Funzioni Locali) da uno scenario YAML."
    )
    parser.add_argument("scenario", nargs="?", help="file YAML dello scenario")
    parser.add_argument(
        "--last",
        action="store_true",
        help="usa lo scenario più recente in FONDO_SCENARI_DIR",
    )
    parser.add_argument("--normativa", help="file YAML dei dati normativi (default FONDO_NORMATIVA_YAML)")
    parser.add_argument("--json", action="store_true", help="output JSON leggibile da macchina")
    parser.add_argument("--write-back", action="store_true", help="mostra i campi derivati aggiornati")
    parser.add_argument("--dettaglio", action="store_true", help="elenca le voci del fondo personale dipendente")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        logging.basicConfig(
            level=load_logging_config().level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

        if args.scenario:
            scenario_path = Path(args.scenario)
        elif args.last:
            scenario_path = find_last_scenario(load_scenari_config().scenari_dir)
            if scenario_path is None:
                raise ScenarioError("Nessuno scenario trovato nella cartella degli scenari")
        else:
            raise ScenarioError("Indicare un file di scenario oppure --last")

        normativa_path = Path(args.normativa) if args.normativa else load_normativa_config().yaml_path
        normativa = load_normativa(normativa_path)
        fund_input = load_scenario(scenario_path)
        outcome = esegui_calcolo(fund_input, normativa)
    except (FondoConfigError, ScenarioError, ValueError) as e:
        logger.error("[CLI] %s", e)
        print(f"Errore: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    except FondoError as e:
        logger.error("[CLI] %s", e)
        print(f"Errore: {e}", file=sys.stderr)
        return EXIT_CHECK_ERRORS

    if args.json:
        snapshot = build_calculation_snapshot(fund_input, normativa_path)
        report = build_json_report(outcome, snapshot, args.write_back)
        print(json.dumps(report, ensure_ascii=False, indent=2))
    else:
        print(f"Scenario: {scenario_path}")
        print_fund(outcome.fund)
        print_checks(outcome.checks)
        print_budget(outcome)
        if args.dettaglio:
            print_voci_dipendente(outcome, normativa)
        if args.write_back:
            print_derived(outcome)
        print("=" * 80)

    return EXIT_CHECK_ERRORS if outcome.has_errors else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
