from fondo_accessorio.services.derived_fields import apply_derived_fields, clamp_incremento_decreto_pa
from fondo_accessorio.services.fund_service import CalcoloOutcome, applica_personale, esegui_calcolo

__all__ = [
    "apply_derived_fields",
    "clamp_incremento_decreto_pa",
    "CalcoloOutcome",
    "applica_personale",
    "esegui_calcolo",
]
