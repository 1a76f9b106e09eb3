# fondo_accessorio/domain/models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, Optional, Tuple


class TipologiaEnte(Enum):
    COMUNE = "Comune"
    PROVINCIA = "Provincia"
    UNIONE_COMUNI = "Unione dei Comuni"
    COMUNITA_MONTANA = "Comunità Montana"
    ALTRO = "Altro"


class EmployeeCategory(Enum):
    DIPENDENTE = "DIPENDENTE"
    DIRIGENTE = "DIRIGENTE"
    EQ = "EQ"
    SEGRETARIO = "SEGRETARIO"


class AreaQualifica(Enum):
    """Aree del CCNL 16.11.2022 (ключі для таблиць progressioni / indennità)."""
    OPERATORE = "OPERATORE"
    OPERATORE_ESPERTO = "OPERATORE_ESPERTO"
    ISTRUTTORE = "ISTRUTTORE"
    FUNZIONARIO_EQ = "FUNZIONARIO_EQ"


# ---------------------------------------------------------------------------
# Dati normativi (ReferenceData)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ValoriProCapite:
    art67_ccnl_2018: float          # €/unità, incremento stabile CCNL 2018
    art79_ccnl_2022_b: float        # €/unità, Art. 79 c.1b CCNL 2022


@dataclass(frozen=True)
class Limiti:
    incidenza_salario_accessorio: float     # % max, condizione PNRR3
    incremento_virtuosi_dl25_2025: float    # 0.48
    incremento_pnrr_dl13_2023: float        # 0.05


@dataclass(frozen=True)
class NormativeData:
    """
    Статичні нормативні дані, які завантажуються з data/normativa.yml.

    Engine тільки читає ці дані; один екземпляр можна безпечно
    ділити між кількома розрахунками.
    """
    riferimenti_normativi: Dict[str, str]
    valori_pro_capite: ValoriProCapite
    limiti: Limiti
    progression_economic_values: Dict[str, Dict[str, float]] = field(default_factory=dict)
    indennita_comparto_values: Dict[str, float] = field(default_factory=dict)

    def rif(self, key: str) -> str:
        return self.riferimenti_normativi.get(key, "")


# ---------------------------------------------------------------------------
# Dati storici / annuali
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class HistoricalData:
    fondo_salario_accessorio_personale_non_dir_eq_2016: Optional[float] = None
    fondo_elevate_qualificazioni_2016: Optional[float] = None
    fondo_dirigenza_2016: Optional[float] = None
    risorse_segretario_comunale_2016: Optional[float] = None

    fondo_personale_non_dir_eq_2018_art23: Optional[float] = None
    fondo_eq_2018_art23: Optional[float] = None

    personale_servizio_2018: Optional[float] = None          # Art. 33 DL 34/2019
    spesa_stipendi_tabellari_2023: Optional[float] = None    # Art. 14 DL 25/2025
    totale_fondo_anno_precedente: Optional[float] = None     # тільки для відображення


@dataclass(frozen=True)
class Art23EmployeeDetail:
    """Один рядок списку для dipendenti equivalenti (Art. 23 c.2)."""
    id: str = ""
    matricola: Optional[str] = None
    part_time_percentage: Optional[float] = None     # 0..100, None → full time
    cedolini_emessi: Optional[float] = None          # 1..12, тільки anno di riferimento


@dataclass(frozen=True)
class PersonaleServizioCount:
    category: EmployeeCategory
    count: Optional[float] = None


@dataclass(frozen=True)
class ProventoSpecifico:
    descrizione: str
    importo: Optional[float]
    riferimento_normativo: str
    id: str = ""


@dataclass(frozen=True)
class SimulatoreInput:
    sim_stipendi_tabellari_2023: Optional[float] = None
    sim_fondo_stabile_anno_applicazione: Optional[float] = None
    sim_risorse_poeq_anno_applicazione: Optional[float] = None
    sim_spesa_personale_consuntivo_2023: Optional[float] = None
    sim_media_entrate_correnti_2021_2023: Optional[float] = None
    sim_tetto_spesa_personale_l296_06: Optional[float] = None
    sim_costo_annuo_nuove_assunzioni_piao: Optional[float] = None
    sim_percentuale_oneri_incremento: Optional[float] = 27.4


@dataclass(frozen=True)
class SimulatoreResult:
    """Усі проміжні значення симулятора + фінальний netto (fase 5)."""
    fase1_obiettivo_48: float
    fase1_fondo_attuale_complessivo: float
    fase1_incremento_potenziale_lordo: float

    fase2_spesa_personale_attuale_prevista: float
    fase2_soglia_percentuale_dm17_03_2020: float
    fase2_limite_sostenibile_dl34: float
    fase2_spazio_disponibile_dl34: float

    fase3_margine_disponibile_l296_06: float

    fase4_spazio_utilizzabile_lordo: float
    fase5_incremento_netto_effettivo_fondo: float


@dataclass(frozen=True)
class AnnualData:
    anno_riferimento: int = 2025
    denominazione_ente: Optional[str] = None
    tipologia_ente: Optional[TipologiaEnte] = None
    altro_tipologia_ente: Optional[str] = None
    numero_abitanti: Optional[int] = None

    is_ente_dissestato: bool = False
    is_ente_strutturalmente_deficitario: bool = False
    is_ente_riequilibrio_finanziario: bool = False
    has_dirigenza: bool = False

    personale_servizio_attuale: Tuple[PersonaleServizioCount, ...] = ()

    rispetto_equilibrio_bilancio_precedente: Optional[bool] = None
    rispetto_debito_commerciale_precedente: Optional[bool] = None
    incidenza_salario_accessorio_ultimo_rendiconto: Optional[float] = None
    approvazione_rendiconto_precedente: Optional[bool] = None

    proventi_specifici: Tuple[ProventoSpecifico, ...] = ()
    incentivi_pnrr_op_misure_straordinarie: Optional[float] = None
    condizioni_virtuosita_finanziaria_soddisfatte: bool = False

    personale_2018_per_art23: Tuple[Art23EmployeeDetail, ...] = ()
    personale_anno_rif_per_art23: Tuple[Art23EmployeeDetail, ...] = ()

    simulatore_input: SimulatoreInput = field(default_factory=SimulatoreInput)
    simulatore_risultati: Optional[SimulatoreResult] = None

    fondo_stabile_2016_pnrr: Optional[float] = None
    calcolato_incremento_pnrr3: Optional[float] = None
    applica_incremento_pnrr3: bool = False

    @property
    def is_ente_in_condizioni_speciali(self) -> bool:
        """Dissesto / deficit strutturale / riequilibrio: частина джерел вимикається."""
        return bool(
            self.is_ente_dissestato
            or self.is_ente_strutturalmente_deficitario
            or self.is_ente_riequilibrio_finanziario
        )

    def count_for(self, *categories: EmployeeCategory) -> float:
        return sum(
            (p.count or 0) for p in self.personale_servizio_attuale
            if not categories or p.category in categories
        )


# ---------------------------------------------------------------------------
# Ledger per categoria
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FondoDipendenteData:
    """Fondo accessorio personale dipendente (non dirigente, non EQ)."""
    # stabili
    st_art79c1_art67c1_unico_importo_2017: Optional[float] = None
    st_art79c1_art67c1_alte_professionalita_non_util: Optional[float] = None
    st_art79c1_art67c2a_incr_8320: Optional[float] = None
    st_art79c1_art67c2b_incr_stipendiali_diff: Optional[float] = None
    st_art79c1_art4c2_art67c2c_integrazione_ria: Optional[float] = None
    st_art79c1_art67c2d_risorse_riassorbite_165: Optional[float] = None
    st_art79c1_art15c1l_art67c2e_personale_trasferito: Optional[float] = None
    st_art79c1_art15c1i_art67c2f_regioni_riduzione_dirig: Optional[float] = None
    st_art79c1_art14c3_art67c2g_riduzione_straordinario: Optional[float] = None
    st_taglio_fondo_dl78_2010: Optional[float] = None
    st_riduzioni_personale_ata_po_esternalizzazioni: Optional[float] = None
    st_art67c1_decurtazione_po_ap_enti_dirigenza: Optional[float] = None
    st_art79c1b_euro_8450: Optional[float] = None
    st_art79c1c_incremento_stabile_consistenza_pers: Optional[float] = None
    st_art79c1d_differenziali_stipendiali_2022: Optional[float] = None
    st_art79c1bis_diff_stipendiali_b3_d3: Optional[float] = None
    st_incremento_decreto_pa: Optional[float] = None            # дзеркало симулятора
    st_riduzione_per_incremento_eq: Optional[float] = None      # дзеркало трансферу EQ
    # variabili soggette al limite
    vs_art4c3_art15c1k_art67c3c_recupero_evasione: Optional[float] = None
    vs_art4c2_art67c3d_integrazione_ria_mensile: Optional[float] = None
    vs_art67c3g_personale_case_gioco: Optional[float] = None
    vs_art79c2b_max_1_2_monte_salari_1997: Optional[float] = None
    vs_art67c3k_integrazione_art62c2e_personale_trasferito: Optional[float] = None
    vs_art79c2c_risorse_scelte_organizzative: Optional[float] = None
    # variabili non soggette al limite
    vn_art15c1d_art67c3a_sponsor_convenzioni: Optional[float] = None
    vn_art54_art67c3f_rimborso_spese_notifica: Optional[float] = None
    vn_art15c1k_art16_dl98_art67c3b_piani_razionalizzazione: Optional[float] = None
    vn_art15c1k_art67c3c_incentivi_tecnici_condoni: Optional[float] = None
    vn_art18h_art67c3c_incentivi_spese_giudizio_censimenti: Optional[float] = None
    vn_art15c1m_art67c3e_risparmi_straordinario: Optional[float] = None
    vn_art67c3j_regioni_citta_metro_art23c4_incr_percentuale: Optional[float] = None
    vn_art80c1_somme_non_utilizzate_stabili_prec: Optional[float] = None
    vn_l145_art1c1091_incentivi_riscossione_imu_tari: Optional[float] = None
    vn_l178_art1c870_risparmi_buoni_pasto_2020: Optional[float] = None
    vn_dl135_art11c1b_risorse_accessorie_assunzioni_deroga: Optional[float] = None
    vn_art79c3_022_monte_salari_2018_da2022_proporzionale: Optional[float] = None
    vn_art79c1b_euro_8450_una_tantum_2021_2022: Optional[float] = None
    vn_art79c3_022_monte_salari_2018_da2022_una_tantum_2022: Optional[float] = None
    vn_dl13_art8c3_incremento_pnrr_max5_stabile_2016: Optional[float] = None
    # decurtazioni
    fin_art4_dl16_misure_mancato_rispetto_vincoli: Optional[float] = None
    cl_art23c2_decurtazione_incremento_annuale_tetto_2016: Optional[float] = None


@dataclass(frozen=True)
class FondoEQData:
    """Fondo Elevate Qualificazioni: risorse + utilizzi (spesa)."""
    ris_fondo_po_2017: Optional[float] = None
    ris_incremento_con_riduzione_fondo_dipendenti: Optional[float] = None
    ris_incremento_limite_art23c2_dl34: Optional[float] = None
    ris_incremento_022_monte_salari_2018: Optional[float] = None
    fin_art23c2_adeguamento_tetto_2016: Optional[float] = None

    st_art17c2_retribuzione_posizione: Optional[float] = None
    st_art17c3_retribuzione_posizione_art16c4: Optional[float] = None
    st_art17c5_interim_eq: Optional[float] = None
    st_art23c5_maggiorazione_sedi: Optional[float] = None
    va_art17c4_retribuzione_risultato: Optional[float] = None


@dataclass(frozen=True)
class FondoSegretarioData:
    st_art3c6_ccnl2011_retribuzione_posizione: Optional[float] = None
    st_art58c1_ccnl2024_differenziale_aumento: Optional[float] = None
    st_art60c1_ccnl2024_retribuzione_posizione_classi: Optional[float] = None
    st_art60c3_ccnl2024_maggiorazione_complessita: Optional[float] = None
    st_art60c5_ccnl2024_allineamento_dirig_eq: Optional[float] = None
    st_art56c1g_ccnl2024_retribuzione_aggiuntiva_convenzioni: Optional[float] = None
    st_art56c1h_ccnl2024_indennita_reggenza_supplenza: Optional[float] = None
    va_art56c1f_ccnl2024_diritti_segreteria: Optional[float] = None
    va_art56c1i_ccnl2024_altri_compensi_legge: Optional[float] = None
    va_art8c3_dl13_2023_incremento_pnrr: Optional[float] = None
    va_art61c2_ccnl2024_retribuzione_risultato_10: Optional[float] = None
    va_art61c2bis_ccnl2024_retribuzione_risultato_15: Optional[float] = None
    va_art61c2ter_ccnl2024_superamento_limite_metropolitane: Optional[float] = None
    va_art61c3_ccnl2024_incremento_022_monte_salari_2018: Optional[float] = None
    fin_percentuale_copertura_posto_segretario: Optional[float] = 100.0


@dataclass(frozen=True)
class FondoDirigenzaData:
    st_art57c2a_ccnl2020_unico_importo_2020: Optional[float] = None
    st_art57c2a_ccnl2020_ria_personale_cessato_2020: Optional[float] = None
    st_art56c1_ccnl2020_incremento_1_53_monte_salari_2015: Optional[float] = None
    st_art57c2c_ccnl2020_ria_cessati_dall_anno_successivo: Optional[float] = None
    st_art57c2e_ccnl2020_risorse_autonome_stabili: Optional[float] = None
    st_art39c1_ccnl2024_incremento_2_01_monte_salari_2018: Optional[float] = None
    va_art57c2b_ccnl2020_risorse_legge_sponsor: Optional[float] = None
    va_art57c2d_ccnl2020_somme_onnicomprensivita: Optional[float] = None
    va_art57c2e_ccnl2020_risorse_autonome_variabili: Optional[float] = None
    va_art57c3_ccnl2020_residui_anno_precedente: Optional[float] = None
    va_dl13_2023_art8c3_incremento_pnrr: Optional[float] = None
    va_art39c1_ccnl2024_recupero_0_46_monte_salari_2018_2020: Optional[float] = None
    va_art39c1_ccnl2024_recupero_2_01_monte_salari_2018_2021_2023: Optional[float] = None
    va_art39c2_ccnl2024_incremento_0_22_monte_salari_2018_valorizzazione: Optional[float] = None
    va_art33c2_dl34_2019_incremento_deroga: Optional[float] = None
    lim_art23c2_dlgs75_2017_adeguamento_annuale_tetto_2016: Optional[float] = None
    lim_art4_dl16_2014_misure_mancato_rispetto_vincoli: Optional[float] = None


# ---------------------------------------------------------------------------
# Distribuzione risorse (utilizzi del fondo dipendenti)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RisorsaVariabileDetail:
    stanziate: Optional[float] = None
    risparmi: Optional[float] = None
    a_bilancio: Optional[float] = None


@dataclass(frozen=True)
class DistribuzioneRisorseData:
    # utilizzi parte stabile (Art. 80 c.1)
    u_diff_progressioni_storiche: Optional[float] = None
    u_indennita_comparto: Optional[float] = None
    u_incr_indennita_educatori: Optional[RisorsaVariabileDetail] = None
    u_incr_indennita_scolastico: Optional[RisorsaVariabileDetail] = None
    u_indennita_ex_8qf: Optional[RisorsaVariabileDetail] = None
    # utilizzi parte variabile (Art. 80 c.2)
    p_performance_organizzativa: Optional[RisorsaVariabileDetail] = None
    p_performance_individuale: Optional[RisorsaVariabileDetail] = None
    p_maggiorazione_performance_individuale: Optional[RisorsaVariabileDetail] = None
    p_indennita_condizioni_lavoro: Optional[RisorsaVariabileDetail] = None
    p_indennita_turno: Optional[RisorsaVariabileDetail] = None
    p_indennita_reperibilita: Optional[RisorsaVariabileDetail] = None
    p_indennita_lavoro_giorno_riposo: Optional[RisorsaVariabileDetail] = None
    p_compensi_specifiche_responsabilita: Optional[RisorsaVariabileDetail] = None
    p_indennita_funzione: Optional[RisorsaVariabileDetail] = None
    p_indennita_servizio_esterno: Optional[RisorsaVariabileDetail] = None
    p_obiettivi_polizia_locale: Optional[RisorsaVariabileDetail] = None
    p_incentivi_conto_terzi: Optional[RisorsaVariabileDetail] = None
    p_compensi_avvocatura: Optional[RisorsaVariabileDetail] = None
    p_incentivi_condono_funzioni_tecniche_pre2018: Optional[RisorsaVariabileDetail] = None
    p_incentivi_funzioni_tecniche_post2018: Optional[RisorsaVariabileDetail] = None
    p_incentivi_imu_tari: Optional[RisorsaVariabileDetail] = None
    p_compensi_messi_notificatori: Optional[RisorsaVariabileDetail] = None
    p_compensi_case_gioco: Optional[RisorsaVariabileDetail] = None
    p_compensi_case_gioco_non_coperti: Optional[RisorsaVariabileDetail] = None
    p_diff_stipendiali_anni_prec: Optional[RisorsaVariabileDetail] = None
    p_diff_stipendiali_anno_corrente: Optional[RisorsaVariabileDetail] = None
    p_piani_welfare: Optional[RisorsaVariabileDetail] = None
    # criteri di ripartizione
    criteri_is_consuntivo_mode: bool = False
    criteri_perc_perf_individuale: float = 50.0
    criteri_perc_maggiorazione_premio: float = 20.0
    criteri_perc_dipendenti_bonus: float = 5.0


# ---------------------------------------------------------------------------
# Personale in servizio (assorbimento progressioni / indennità di comparto)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DipendenteInServizio:
    matricola: Optional[str] = None
    area: Optional[AreaQualifica] = None
    livello_peo: Optional[str] = None               # "A1".."D7"
    part_time_percentage: Optional[float] = None    # None → 100
    full_year: bool = True
    data_assunzione: Optional[date] = None
    data_cessazione: Optional[date] = None


# ---------------------------------------------------------------------------
# Snapshot completo degli input
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FundInput:
    """
    Повний (незмінний) знімок вхідних даних для одного розрахунку.

    Engine нічого не мутує: похідні поля пишуться окремим кроком,
    який повертає новий FundInput (див. services.derived_fields).
    """
    historical: HistoricalData = field(default_factory=HistoricalData)
    annual: AnnualData = field(default_factory=AnnualData)
    fondo_dipendente: FondoDipendenteData = field(default_factory=FondoDipendenteData)
    fondo_eq: FondoEQData = field(default_factory=FondoEQData)
    fondo_segretario: FondoSegretarioData = field(default_factory=FondoSegretarioData)
    fondo_dirigenza: FondoDirigenzaData = field(default_factory=FondoDirigenzaData)
    distribuzione: DistribuzioneRisorseData = field(default_factory=DistribuzioneRisorseData)
    personale: Tuple[DipendenteInServizio, ...] = ()
