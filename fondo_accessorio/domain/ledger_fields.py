# fondo_accessorio/domain/ledger_fields.py

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, Optional, Tuple

from fondo_accessorio.domain.models import NormativeData


class Sezione(Enum):
    STABILI = "stabili"
    VS_SOGGETTE = "vs_soggette"
    VN_NON_SOGGETTE = "vn_non_soggette"
    FIN_DECURTAZIONI = "fin_decurtazioni"
    CL_LIMITI = "cl_limiti"
    VARIABILI = "variabili"


# resolver(raw_value, context) -> effective value
ValueResolver = Callable[[float, Any], float]


@dataclass(frozen=True)
class FieldDescriptor:
    """
    Статичний опис одного грошового поля ledger'а.

    riferimento може містити плейсхолдери {art67_ccnl2018} тощо,
    які підставляються з NormativeData.riferimenti_normativi.
    """
    key: str
    descrizione: str
    riferimento: str
    sezione: Sezione
    is_subtractor: bool = False
    is_relevant_to_art23_limit: bool = False
    is_disabled_by_condizioni_speciali: bool = False
    resolver: Optional[ValueResolver] = None

    def raw_value(self, ledger: Any) -> float:
        value = getattr(ledger, self.key, None)
        return float(value) if value is not None else 0.0

    def signed(self, value: float) -> float:
        return -value if self.is_subtractor else value

    def riferimento_for(self, normativa: NormativeData) -> str:
        return self.riferimento.format_map(defaultdict(str, normativa.riferimenti_normativi))


def sum_fields(
    descriptors: Iterable[FieldDescriptor],
    value_of: Callable[[FieldDescriptor], float],
    *,
    sezione: Optional[Sezione] = None,
    only_relevant: bool = False,
    signed: bool = True,
) -> float:
    """
    Єдиний редуктор для всіх ledger'ів.

    - sezione: обмежити суму однією секцією;
    - only_relevant: тільки поля, що рахуються в tetto 2016;
    - signed: subtractor-поля входять зі знаком мінус
      (False → плоска сума, для секцій decurtazioni).
    """
    total = 0.0
    for d in descriptors:
        if sezione is not None and d.sezione is not sezione:
            continue
        if only_relevant and not d.is_relevant_to_art23_limit:
            continue
        value = value_of(d)
        total += d.signed(value) if signed else value
    return total


def raw_getter(ledger: Any) -> Callable[[FieldDescriptor], float]:
    return lambda d: d.raw_value(ledger)


# ---------------------------------------------------------------------------
# Fondo Elevate Qualificazioni
# ---------------------------------------------------------------------------

EQ_FIELDS: Tuple[FieldDescriptor, ...] = (
    FieldDescriptor("ris_fondo_po_2017", "Fondo PO/EQ 2017", "{art17_ccnl2022}",
                    Sezione.STABILI, is_relevant_to_art23_limit=True),
    FieldDescriptor("ris_incremento_con_riduzione_fondo_dipendenti",
                    "Incremento con riduzione del fondo dipendenti", "{art7_c4_u_ccnl2022}",
                    Sezione.STABILI, is_relevant_to_art23_limit=True),
    FieldDescriptor("ris_incremento_limite_art23c2_dl34",
                    "Incremento limite Art. 23 c.2 (Art. 33 DL 34/2019)", "{art33_dl34_2019}",
                    Sezione.STABILI, is_relevant_to_art23_limit=True),
    FieldDescriptor("fin_art23c2_adeguamento_tetto_2016",
                    "Adeguamento per rispetto tetto 2016", "{art23_dlgs75_2017}",
                    Sezione.STABILI, is_subtractor=True),
    FieldDescriptor("ris_incremento_022_monte_salari_2018",
                    "Incremento 0,22% monte salari 2018", "{art79_ccnl2022} c.3",
                    Sezione.VARIABILI),
)

EQ_UTILIZZI_KEYS: Tuple[str, ...] = (
    "st_art17c2_retribuzione_posizione",
    "st_art17c3_retribuzione_posizione_art16c4",
    "st_art17c5_interim_eq",
    "st_art23c5_maggiorazione_sedi",
    "va_art17c4_retribuzione_risultato",
)


# ---------------------------------------------------------------------------
# Fondo Segretario Comunale
# ---------------------------------------------------------------------------

SEGRETARIO_FIELDS: Tuple[FieldDescriptor, ...] = (
    FieldDescriptor("st_art3c6_ccnl2011_retribuzione_posizione", "Retribuzione di posizione",
                    "Art. 3, c.6, CCNL Segretari 01.03.2011", Sezione.STABILI,
                    is_relevant_to_art23_limit=True),
    FieldDescriptor("st_art58c1_ccnl2024_differenziale_aumento", "Differenziale aumento",
                    "Art. 58, c.1, CCNL Segretari 16.07.2024", Sezione.STABILI),
    FieldDescriptor("st_art60c1_ccnl2024_retribuzione_posizione_classi",
                    "Retribuzione di posizione per classi",
                    "Art. 60, c.1, CCNL Segretari 16.07.2024", Sezione.STABILI,
                    is_relevant_to_art23_limit=True),
    FieldDescriptor("st_art60c3_ccnl2024_maggiorazione_complessita", "Maggiorazione per complessità",
                    "Art. 60, c.3, CCNL Segretari 16.07.2024", Sezione.STABILI,
                    is_relevant_to_art23_limit=True),
    FieldDescriptor("st_art60c5_ccnl2024_allineamento_dirig_eq", "Allineamento con dirigenza/EQ",
                    "Art. 60, c.5, CCNL Segretari 16.07.2024", Sezione.STABILI,
                    is_relevant_to_art23_limit=True),
    FieldDescriptor("st_art56c1g_ccnl2024_retribuzione_aggiuntiva_convenzioni",
                    "Retribuzione aggiuntiva sedi convenzionate",
                    "Art. 56, c.1g, CCNL Segretari 16.07.2024", Sezione.STABILI),
    FieldDescriptor("st_art56c1h_ccnl2024_indennita_reggenza_supplenza",
                    "Indennità di reggenza/supplenza",
                    "Art. 56, c.1h, CCNL Segretari 16.07.2024", Sezione.STABILI),
    FieldDescriptor("va_art56c1f_ccnl2024_diritti_segreteria", "Diritti di segreteria",
                    "Art. 56, c.1f, CCNL Segretari 16.07.2024", Sezione.VARIABILI),
    FieldDescriptor("va_art56c1i_ccnl2024_altri_compensi_legge", "Altri compensi previsti da legge",
                    "Art. 56, c.1i, CCNL Segretari 16.07.2024", Sezione.VARIABILI),
    FieldDescriptor("va_art8c3_dl13_2023_incremento_pnrr", "Incremento PNRR",
                    "{art8_dl13_2023}", Sezione.VARIABILI),
    FieldDescriptor("va_art61c2_ccnl2024_retribuzione_risultato_10", "Retribuzione di risultato 10%",
                    "Art. 61, c.2, CCNL Segretari 16.07.2024", Sezione.VARIABILI,
                    is_relevant_to_art23_limit=True),
    FieldDescriptor("va_art61c2bis_ccnl2024_retribuzione_risultato_15", "Retribuzione di risultato 15%",
                    "Art. 61, c.2bis, CCNL Segretari 16.07.2024", Sezione.VARIABILI,
                    is_relevant_to_art23_limit=True),
    FieldDescriptor("va_art61c2ter_ccnl2024_superamento_limite_metropolitane",
                    "Superamento limite città metropolitane",
                    "Art. 61, c.2ter, CCNL Segretari 16.07.2024", Sezione.VARIABILI,
                    is_relevant_to_art23_limit=True),
    FieldDescriptor("va_art61c3_ccnl2024_incremento_022_monte_salari_2018",
                    "Incremento 0,22% monte salari 2018",
                    "Art. 61, c.3, CCNL Segretari 16.07.2024", Sezione.VARIABILI),
)


# ---------------------------------------------------------------------------
# Fondo Dirigenza
# ---------------------------------------------------------------------------

DIRIGENZA_FIELDS: Tuple[FieldDescriptor, ...] = (
    FieldDescriptor("st_art57c2a_ccnl2020_unico_importo_2020", "Unico importo consolidato 2020",
                    "Art. 57, c.2a, CCNL Dirigenza 17.12.2020", Sezione.STABILI,
                    is_relevant_to_art23_limit=True),
    FieldDescriptor("st_art57c2a_ccnl2020_ria_personale_cessato_2020", "RIA personale cessato 2020",
                    "Art. 57, c.2a, CCNL Dirigenza 17.12.2020", Sezione.STABILI,
                    is_relevant_to_art23_limit=True),
    FieldDescriptor("st_art56c1_ccnl2020_incremento_1_53_monte_salari_2015",
                    "Incremento 1,53% monte salari 2015",
                    "Art. 56, c.1, CCNL Dirigenza 17.12.2020", Sezione.STABILI),
    FieldDescriptor("st_art57c2c_ccnl2020_ria_cessati_dall_anno_successivo",
                    "RIA cessati dall'anno successivo",
                    "Art. 57, c.2c, CCNL Dirigenza 17.12.2020", Sezione.STABILI,
                    is_relevant_to_art23_limit=True),
    FieldDescriptor("st_art57c2e_ccnl2020_risorse_autonome_stabili", "Risorse autonome stabili",
                    "Art. 57, c.2e, CCNL Dirigenza 17.12.2020", Sezione.STABILI,
                    is_relevant_to_art23_limit=True),
    FieldDescriptor("st_art39c1_ccnl2024_incremento_2_01_monte_salari_2018",
                    "Incremento 2,01% monte salari 2018",
                    "Art. 39, c.1, CCNL Dirigenza 16.07.2024", Sezione.STABILI),
    FieldDescriptor("lim_art23c2_dlgs75_2017_adeguamento_annuale_tetto_2016",
                    "Adeguamento annuale tetto 2016", "{art23_dlgs75_2017}", Sezione.STABILI),
    FieldDescriptor("lim_art4_dl16_2014_misure_mancato_rispetto_vincoli",
                    "Misure per mancato rispetto vincoli", "{dl16_2014_art4}", Sezione.STABILI,
                    is_subtractor=True),
    FieldDescriptor("va_art57c2b_ccnl2020_risorse_legge_sponsor", "Risorse da leggi/sponsorizzazioni",
                    "Art. 57, c.2b, CCNL Dirigenza 17.12.2020", Sezione.VARIABILI),
    FieldDescriptor("va_art57c2d_ccnl2020_somme_onnicomprensivita", "Somme onnicomprensività",
                    "Art. 57, c.2d, CCNL Dirigenza 17.12.2020", Sezione.VARIABILI,
                    is_relevant_to_art23_limit=True),
    FieldDescriptor("va_art57c2e_ccnl2020_risorse_autonome_variabili", "Risorse autonome variabili",
                    "Art. 57, c.2e, CCNL Dirigenza 17.12.2020", Sezione.VARIABILI,
                    is_relevant_to_art23_limit=True),
    FieldDescriptor("va_art57c3_ccnl2020_residui_anno_precedente", "Residui anno precedente",
                    "Art. 57, c.3, CCNL Dirigenza 17.12.2020", Sezione.VARIABILI),
    FieldDescriptor("va_dl13_2023_art8c3_incremento_pnrr", "Incremento PNRR",
                    "{art8_dl13_2023}", Sezione.VARIABILI),
    FieldDescriptor("va_art39c1_ccnl2024_recupero_0_46_monte_salari_2018_2020",
                    "Recupero 0,46% monte salari 2018 (2020)",
                    "Art. 39, c.1, CCNL Dirigenza 16.07.2024", Sezione.VARIABILI),
    FieldDescriptor("va_art39c1_ccnl2024_recupero_2_01_monte_salari_2018_2021_2023",
                    "Recupero 2,01% monte salari 2018 (2021-2023)",
                    "Art. 39, c.1, CCNL Dirigenza 16.07.2024", Sezione.VARIABILI),
    FieldDescriptor("va_art39c2_ccnl2024_incremento_0_22_monte_salari_2018_valorizzazione",
                    "Incremento 0,22% monte salari 2018",
                    "Art. 39, c.2, CCNL Dirigenza 16.07.2024", Sezione.VARIABILI),
    FieldDescriptor("va_art33c2_dl34_2019_incremento_deroga", "Incremento in deroga (Art. 33 c.2)",
                    "{art33_dl34_2019}", Sezione.VARIABILI, is_relevant_to_art23_limit=True),
)
