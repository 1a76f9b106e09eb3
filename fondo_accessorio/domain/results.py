# fondo_accessorio/domain/results.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class TipoComponente(Enum):
    STABILE = "stabile"
    VARIABILE = "variabile"


class Gravita(Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class FundComponent:
    """Іменований внесок у фонд (для відображення / звітів)."""
    descrizione: str
    importo: float
    riferimento: str
    tipo: TipoComponente
    escluso_dal_limite_2016: bool = False


@dataclass(frozen=True)
class FundDetailTotals:
    stabile: float = 0.0
    variabile: float = 0.0

    @property
    def totale(self) -> float:
        return self.stabile + self.variabile


@dataclass(frozen=True)
class DettaglioFondi:
    dipendente: FundDetailTotals
    eq: FundDetailTotals
    segretario: FundDetailTotals
    dirigenza: FundDetailTotals


@dataclass(frozen=True)
class CalculatedFund:
    """
    Повний агрегат по всіх категоріях.

    superamento_limite_2016 = None, якщо перевищення немає
    (ніколи не 0.0).
    """
    fondo_base_2016: float                          # tetto 2016 originale
    limite_art23c2_modificato: float                # tetto + adeguamento (>= fondo_base_2016)
    incremento_determinato_art23c2: Optional[FundComponent]

    totale_risorse_soggette_al_limite: float
    superamento_limite_2016: Optional[float]

    dettaglio_fondi: DettaglioFondi

    totale_componente_stabile: float
    totale_componente_variabile: float

    incrementi_stabili_ccnl: List[FundComponent] = field(default_factory=list)
    adeguamento_pro_capite: Optional[FundComponent] = None
    incremento_opzionale_virtuosi: Optional[FundComponent] = None
    risorse_variabili: List[FundComponent] = field(default_factory=list)

    @property
    def totale_fondo(self) -> float:
        return self.totale_componente_stabile + self.totale_componente_variabile


@dataclass(frozen=True)
class ComplianceCheck:
    id: str
    descrizione: str
    is_compliant: bool
    valore_attuale: str
    limite: str
    messaggio: str
    riferimento_normativo: str
    gravita: Gravita
