import pytest

from conftest import make_simulatore
from fondo_accessorio.domain.compliance import run_all_compliance_checks
from fondo_accessorio.domain.fund_calc import calculate_fund_completely
from fondo_accessorio.domain.models import (
    AnnualData,
    Art23EmployeeDetail,
    DistribuzioneRisorseData,
    FondoDipendenteData,
    FondoEQData,
    FundInput,
    HistoricalData,
)
from fondo_accessorio.domain.results import Gravita


def _checks(fi, normativa, simulatore=None):
    fund = calculate_fund_completely(fi, normativa, simulatore)
    return run_all_compliance_checks(fund, fi, normativa, simulatore)


def _by_id(checks):
    return {c.id: c for c in checks}


def _staff(n, cedolini=None):
    return tuple(Art23EmployeeDetail(id=str(i), cedolini_emessi=cedolini) for i in range(n))


# ---------------------------------------------------------------------------
# Limite Art. 23 c.2
# ---------------------------------------------------------------------------

def test_limite_rispettato_info(normativa):
    fi = FundInput(
        historical=HistoricalData(fondo_salario_accessorio_personale_non_dir_eq_2016=100_000),
        fondo_dipendente=FondoDipendenteData(st_art79c1_art67c1_unico_importo_2017=90_000),
    )
    c = _by_id(_checks(fi, normativa))["limite_art23_c2"]
    assert c.is_compliant is True
    assert c.gravita is Gravita.INFO
    assert c.limite == "€ 100.000,00"


def test_limite_superato_errore(normativa):
    fi = FundInput(
        historical=HistoricalData(fondo_salario_accessorio_personale_non_dir_eq_2016=100_000),
        fondo_dipendente=FondoDipendenteData(st_art79c1_art67c1_unico_importo_2017=112_000),
    )
    c = _by_id(_checks(fi, normativa))["limite_art23_c2"]
    assert c.is_compliant is False
    assert c.gravita is Gravita.ERROR
    assert "€ 12.000,00" in c.messaggio
    assert c.riferimento_normativo == "Art. 23, c.2, D.Lgs. 75/2017"


# ---------------------------------------------------------------------------
# Incremento Art. 79 c.1c
# ---------------------------------------------------------------------------

HIST_CONSISTENZA = HistoricalData(fondo_personale_non_dir_eq_2018_art23=120_000)
ANNUAL_CONSISTENZA = AnnualData(
    personale_2018_per_art23=_staff(3),
    personale_anno_rif_per_art23=_staff(4, cedolini=12),
)


@pytest.mark.parametrize(
    "inserito, gravita, frammento",
    [
        (None, Gravita.WARNING, "non inserito"),
        (30_000, Gravita.WARNING, "inferiore di € 10.000,00"),
        (40_000, Gravita.INFO, "conforme"),
        (45_000, Gravita.INFO, "conforme"),
    ],
)
def test_verifica_incremento_consistenza(normativa, inserito, gravita, frammento):
    fi = FundInput(
        historical=HIST_CONSISTENZA,
        annual=ANNUAL_CONSISTENZA,
        fondo_dipendente=FondoDipendenteData(st_art79c1c_incremento_stabile_consistenza_pers=inserito),
    )
    c = _by_id(_checks(fi, normativa))["verifica_incremento_consistenza"]
    assert c.gravita is gravita
    assert frammento in c.messaggio
    assert c.limite == "Calcolato: € 40.000,00"


def test_verifica_incremento_consistenza_assente_senza_aumento(normativa):
    fi = FundInput(historical=HIST_CONSISTENZA)
    assert "verifica_incremento_consistenza" not in _by_id(_checks(fi, normativa))


# ---------------------------------------------------------------------------
# Distribuzione dipendenti
# ---------------------------------------------------------------------------

def _fi_distribuzione(distribuzione):
    return FundInput(
        historical=HistoricalData(fondo_salario_accessorio_personale_non_dir_eq_2016=100_000),
        fondo_dipendente=FondoDipendenteData(st_art79c1_art67c1_unico_importo_2017=40_000),
        distribuzione=distribuzione,
    )


def test_distribuzione_entro_tolleranza(normativa):
    fi = _fi_distribuzione(DistribuzioneRisorseData(u_diff_progressioni_storiche=40_000.004))
    checks = _by_id(_checks(fi, normativa))
    assert checks["distribuzione_rispetto_budget"].is_compliant is True
    assert "distribuzione_stabile_supera_totale" in checks     # 40000.004 > 40000
    assert "distribuzione_superamento_budget" not in checks


def test_distribuzione_oltre_budget(normativa):
    fi = _fi_distribuzione(DistribuzioneRisorseData(u_diff_progressioni_storiche=40_001))
    checks = _by_id(_checks(fi, normativa))
    assert checks["distribuzione_stabile_supera_totale"].gravita is Gravita.ERROR
    c = checks["distribuzione_superamento_budget"]
    assert c.gravita is Gravita.ERROR
    assert "€ 1,00" in c.messaggio


def test_distribuzione_assente_senza_fondo(normativa):
    fi = FundInput(distribuzione=DistribuzioneRisorseData(u_diff_progressioni_storiche=1_000))
    ids = {c.id for c in _checks(fi, normativa)}
    assert not any(i.startswith("distribuzione_") for i in ids)


# ---------------------------------------------------------------------------
# Distribuzione EQ
# ---------------------------------------------------------------------------

def test_eq_spesa_oltre_fondo(normativa):
    fi = FundInput(fondo_eq=FondoEQData(
        ris_fondo_po_2017=100_000,
        st_art17c2_retribuzione_posizione=100_000,
        va_art17c4_retribuzione_risultato=20_000,
    ))
    checks = _by_id(_checks(fi, normativa))
    c = checks["distribuzione_eq_superamento_budget"]
    assert c.gravita is Gravita.ERROR
    assert c.is_compliant is False
    assert "€ 20.000,00" in c.messaggio
    assert "verifica_quota_minima_risultato_eq" not in checks


def test_eq_quota_minima_risultato(normativa):
    fi = FundInput(fondo_eq=FondoEQData(
        ris_fondo_po_2017=100_000,
        st_art17c2_retribuzione_posizione=50_000,
        va_art17c4_retribuzione_risultato=10_000,
    ))
    checks = _by_id(_checks(fi, normativa))
    assert checks["distribuzione_eq_rispetto_budget"].gravita is Gravita.INFO
    c = checks["verifica_quota_minima_risultato_eq"]
    assert c.gravita is Gravita.WARNING
    assert c.limite == "≥ € 15.000,00"


# ---------------------------------------------------------------------------
# Coerenza simulatore
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    "fase5, inserito, atteso",
    [
        (10_000, 20_000, True),
        (10_000, 10_000, False),
        (10_000, 5_000, False),
        (0.0, 20_000, False),
    ],
)
def test_coerenza_simulatore(normativa, fase5, inserito, atteso):
    fi = FundInput(fondo_dipendente=FondoDipendenteData(st_incremento_decreto_pa=inserito))
    checks = _by_id(_checks(fi, normativa, make_simulatore(fase5)))
    assert ("coerenza_simulatore_decreto_pa" in checks) is atteso
    if atteso:
        assert checks["coerenza_simulatore_decreto_pa"].gravita is Gravita.WARNING


def test_coerenza_simulatore_assente_senza_simulatore(normativa):
    fi = FundInput(fondo_dipendente=FondoDipendenteData(st_incremento_decreto_pa=20_000))
    assert "coerenza_simulatore_decreto_pa" not in _by_id(_checks(fi, normativa))


# ---------------------------------------------------------------------------
# Ordine della batteria
# ---------------------------------------------------------------------------

def test_ordine_verifiche(normativa):
    fi = FundInput(
        historical=HistoricalData(
            fondo_salario_accessorio_personale_non_dir_eq_2016=100_000,
            fondo_personale_non_dir_eq_2018_art23=120_000,
        ),
        annual=ANNUAL_CONSISTENZA,
        fondo_dipendente=FondoDipendenteData(
            st_art79c1_art67c1_unico_importo_2017=50_000,
            st_incremento_decreto_pa=20_000,
        ),
        fondo_eq=FondoEQData(ris_fondo_po_2017=10_000, va_art17c4_retribuzione_risultato=2_000),
    )
    ids = [c.id for c in _checks(fi, normativa, make_simulatore(10_000))]
    assert ids == [
        "limite_art23_c2",
        "verifica_incremento_consistenza",
        "distribuzione_rispetto_budget",
        "distribuzione_eq_rispetto_budget",
        "coerenza_simulatore_decreto_pa",
    ]
