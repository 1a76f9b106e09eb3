# fondo_accessorio/domain/fad_fields.py
"""
Таблиця полів Fondo Accessorio Dipendente (FAD).

Кожне поле описане один раз: секція, знак, чи входить у tetto 2016,
чи вимикається для enti in dissesto / deficitari / in riequilibrio.
Два похідні поля мають власний resolver прямо тут, поруч з описом.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from fondo_accessorio.domain.ledger_fields import FieldDescriptor, Sezione

KEY_INCREMENTO_DECRETO_PA = "st_incremento_decreto_pa"
KEY_RIDUZIONE_INCREMENTO_EQ = "st_riduzione_per_incremento_eq"
KEY_ART79C1C = "st_art79c1c_incremento_stabile_consistenza_pers"
KEY_PNRR_DL13 = "vn_dl13_art8c3_incremento_pnrr_max5_stabile_2016"


@dataclass(frozen=True)
class FadContext:
    """Зовнішні значення, від яких залежить effective value окремих полів."""
    incremento_netto_simulatore: float = 0.0        # fase 5 симулятора (0, якщо немає)
    is_ente_in_condizioni_speciali: bool = False
    incremento_eq_con_riduzione: Optional[float] = None


def _resolve_incremento_decreto_pa(raw: float, ctx: FadContext) -> float:
    return raw if ctx.incremento_netto_simulatore > 0 else 0.0


def _resolve_riduzione_incremento_eq(raw: float, ctx: FadContext) -> float:
    # значення в ledger ігнорується: джерело правди: fondo EQ
    return float(ctx.incremento_eq_con_riduzione or 0.0)


_ST = Sezione.STABILI
_VS = Sezione.VS_SOGGETTE
_VN = Sezione.VN_NON_SOGGETTE


def _st(key, descr, rif, relevant=False, subtractor=False, resolver=None) -> FieldDescriptor:
    return FieldDescriptor(key, descr, rif, _ST, is_subtractor=subtractor,
                           is_relevant_to_art23_limit=relevant, resolver=resolver)


def _vs(key, descr, rif, disabled=False) -> FieldDescriptor:
    return FieldDescriptor(key, descr, rif, _VS, is_relevant_to_art23_limit=True,
                           is_disabled_by_condizioni_speciali=disabled)


def _vn(key, descr, rif, disabled=False) -> FieldDescriptor:
    return FieldDescriptor(key, descr, rif, _VN, is_disabled_by_condizioni_speciali=disabled)


FAD_FIELDS: Tuple[FieldDescriptor, ...] = (
    # --- Stabili ---
    _st("st_art79c1_art67c1_unico_importo_2017", "Unico importo consolidato 2017",
        "Art. 79 c.1 (rif. {art67_ccnl2018})", relevant=True),
    _st("st_art79c1_art67c1_alte_professionalita_non_util",
        "Alte professionalità non utilizzate (se non in unico importo)",
        "Art. 79 c.1 (rif. {art67_ccnl2018})", relevant=True),
    _st("st_art79c1_art67c2a_incr_8320", "Incremento €83,20/unità (personale 31.12.2015)",
        "Art. 79 c.1 (rif. Art. 67 c.2a CCNL 2018)"),
    _st("st_art79c1_art67c2b_incr_stipendiali_diff",
        "Incrementi stipendiali differenziali (Art. 64 CCNL 2018)",
        "Art. 79 c.1 (rif. Art. 67 c.2b CCNL 2018)"),
    _st("st_art79c1_art4c2_art67c2c_integrazione_ria",
        "Integrazione RIA personale cessato anno precedente",
        "Art. 79 c.1 (rif. Art. 67 c.2c CCNL 2018)", relevant=True),
    _st("st_art79c1_art67c2d_risorse_riassorbite_165",
        "Risorse riassorbite (Art. 2 c.3 D.Lgs 165/01)",
        "Art. 79 c.1 (rif. Art. 67 c.2d CCNL 2018)", relevant=True),
    _st("st_art79c1_art15c1l_art67c2e_personale_trasferito",
        "Risorse personale trasferito (decentramento)",
        "Art. 79 c.1 (rif. Art. 67 c.2e CCNL 2018)", relevant=True),
    _st("st_art79c1_art15c1i_art67c2f_regioni_riduzione_dirig",
        "Regioni: riduzione stabile posti dirig. (fino a 0,2% MS Dir.)",
        "Art. 79 c.1 (rif. Art. 67 c.2f CCNL 2018)", relevant=True),
    _st("st_art79c1_art14c3_art67c2g_riduzione_straordinario", "Riduzione stabile straordinario",
        "Art. 79 c.1 (rif. Art. 67 c.2g CCNL 2018)", relevant=True),
    _st("st_taglio_fondo_dl78_2010", "Taglio fondo DL 78/2010 (se non già in unico importo)",
        "Art. 9 c.2bis DL 78/2010", relevant=True, subtractor=True),
    _st("st_riduzioni_personale_ata_po_esternalizzazioni",
        "Riduzioni per pers. ATA, PO, esternalizzazioni, trasferimenti",
        "Disposizioni specifiche", relevant=True, subtractor=True),
    _st("st_art67c1_decurtazione_po_ap_enti_dirigenza",
        "Decurtazione PO/AP enti con dirigenza ({art67_ccnl2018})",
        "Art. 67 c.1 CCNL 2018", relevant=True, subtractor=True),
    _st("st_art79c1b_euro_8450", "Incremento €84,50/unità (personale 31.12.2018, da 01.01.2021)",
        "Art. 79 c.1b {art79_ccnl2022}"),
    _st(KEY_ART79C1C, "Incremento stabile per consistenza personale (Art. 23c2)",
        "Art. 79 c.1c {art79_ccnl2022}", relevant=True),
    _st("st_art79c1d_differenziali_stipendiali_2022",
        "Differenziali stipendiali personale in servizio 2022",
        "Art. 79 c.1d {art79_ccnl2022}"),
    _st("st_art79c1bis_diff_stipendiali_b3_d3", "Differenze stipendiali personale B3 e D3",
        "Art. 79 c.1-bis {art79_ccnl2022}"),
    _st(KEY_INCREMENTO_DECRETO_PA, "Incremento Decreto PA (da simulatore)",
        "{incremento_decreto_pa}", relevant=True, resolver=_resolve_incremento_decreto_pa),
    _st(KEY_RIDUZIONE_INCREMENTO_EQ, "Riduzione per incremento risorse EQ",
        "{art7_c4_u_ccnl2022}", relevant=True, subtractor=True,
        resolver=_resolve_riduzione_incremento_eq),
    # --- Variabili soggette al limite ---
    _vs("vs_art4c3_art15c1k_art67c3c_recupero_evasione", "Recupero evasione ICI, ecc.",
        "Art. 67 c.3c {art67_ccnl2018}"),
    _vs("vs_art4c2_art67c3d_integrazione_ria_mensile",
        "Integrazione RIA mensile personale cessato in anno", "Art. 67 c.3d {art67_ccnl2018}"),
    _vs("vs_art67c3g_personale_case_gioco", "Risorse personale case da gioco",
        "Art. 67 c.3g {art67_ccnl2018}", disabled=True),
    _vs("vs_art79c2b_max_1_2_monte_salari_1997", "Max 1,2% monte salari 1997",
        "Art. 79 c.2b {art79_ccnl2022}", disabled=True),
    _vs("vs_art67c3k_integrazione_art62c2e_personale_trasferito",
        "Integrazione per personale trasferito (variabile)",
        "Art. 67 c.3k {art67_ccnl2018}", disabled=True),
    _vs("vs_art79c2c_risorse_scelte_organizzative", "Risorse per scelte organizzative (anche TD)",
        "Art. 79 c.2c {art79_ccnl2022}", disabled=True),
    # --- Variabili non soggette al limite ---
    _vn("vn_art15c1d_art67c3a_sponsor_convenzioni",
        "Sponsorizzazioni, convenzioni, servizi non essenziali",
        "Art. 67 c.3a {art67_ccnl2018}", disabled=True),
    _vn("vn_art54_art67c3f_rimborso_spese_notifica", "Quota rimborso spese notifica (messi)",
        "Art. 67 c.3f {art67_ccnl2018}", disabled=True),
    _vn("vn_art15c1k_art16_dl98_art67c3b_piani_razionalizzazione",
        "Piani di razionalizzazione (Art. 16 DL 98/11)",
        "Art. 67 c.3b {art67_ccnl2018}", disabled=True),
    _vn("vn_art15c1k_art67c3c_incentivi_tecnici_condoni", "Incentivi funzioni tecniche, condoni, ecc.",
        "Art. 67 c.3c {art67_ccnl2018}"),
    _vn("vn_art18h_art67c3c_incentivi_spese_giudizio_censimenti",
        "Incentivi spese giudizio, compensi censimento/ISTAT", "Art. 67 c.3c {art67_ccnl2018}"),
    _vn("vn_art15c1m_art67c3e_risparmi_straordinario",
        "Risparmi da disciplina straordinario (Art. 14 CCNL)", "Art. 67 c.3e {art67_ccnl2018}"),
    _vn("vn_art67c3j_regioni_citta_metro_art23c4_incr_percentuale",
        "Regioni/Città Metro: Incremento % ({art23_dlgs75_2017})",
        "Art. 67 c.3j {art67_ccnl2018}", disabled=True),
    _vn("vn_art80c1_somme_non_utilizzate_stabili_prec",
        "Somme non utilizzate esercizi precedenti (stabili)", "Art. 80 c.1 {art80_ccnl2022}"),
    _vn("vn_l145_art1c1091_incentivi_riscossione_imu_tari",
        "Incentivi riscossione IMU/TARI (L. 145/18)", "L. 145/2018 Art.1 c.1091"),
    _vn("vn_l178_art1c870_risparmi_buoni_pasto_2020", "Risparmi buoni pasto 2020 (L. 178/20)",
        "L. 178/2020 Art.1 c.870", disabled=True),
    _vn("vn_dl135_art11c1b_risorse_accessorie_assunzioni_deroga",
        "Risorse accessorie per assunzioni in deroga", "DL 135/2018 Art.11 c.1b", disabled=True),
    _vn("vn_art79c3_022_monte_salari_2018_da2022_proporzionale",
        "0,22% MS 2018 (da 01.01.2022, quota proporzionale)",
        "Art. 79 c.3 {art79_ccnl2022}", disabled=True),
    _vn("vn_art79c1b_euro_8450_una_tantum_2021_2022",
        "€84,50/unità (pers. 31.12.18, una tantum 2021-22)",
        "Art. 79 c.1b {art79_ccnl2022}", disabled=True),
    _vn("vn_art79c3_022_monte_salari_2018_da2022_una_tantum_2022",
        "0,22% MS 2018 (da 01.01.2022, una tantum 2022)",
        "Art. 79 c.3 {art79_ccnl2022}", disabled=True),
    _vn(KEY_PNRR_DL13, "Incremento PNRR (max 5% fondo stabile 2016)",
        "{art8_dl13_2023}", disabled=True),
    # --- Decurtazioni finali e limiti ---
    FieldDescriptor("fin_art4_dl16_misure_mancato_rispetto_vincoli",
                    "Misure per mancato rispetto vincoli (Art. 4 DL 16/14)", "{dl16_2014_art4}",
                    Sezione.FIN_DECURTAZIONI, is_subtractor=True),
    FieldDescriptor("cl_art23c2_decurtazione_incremento_annuale_tetto_2016",
                    "Decurtazione annuale per rispetto tetto 2016", "{art23_dlgs75_2017}",
                    Sezione.CL_LIMITI, is_subtractor=True, is_relevant_to_art23_limit=True),
)

FAD_FIELDS_BY_KEY: Dict[str, FieldDescriptor] = {d.key: d for d in FAD_FIELDS}
