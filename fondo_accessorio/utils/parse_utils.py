# fondo_accessorio/utils/parse_utils.py
from __future__ import annotations

import dataclasses
import re
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional

CENT = Decimal("0.01")

_DATE_FORMATS = (
    (re.compile(r"^\d{4}-\d{2}-\d{2}$"), "%Y-%m-%d"),
    (re.compile(r"^\d{2}/\d{2}/\d{4}$"), "%d/%m/%Y"),
)


def clean_str(v: Any) -> Optional[str]:
    if v is None:
        return None
    s = str(v).replace("\n", " ").strip()
    return s if s != "" else None


def safe_float(v: Any) -> Optional[float]:
    """
    Лояльне перетворення в float.

    "1.234,56" (італійський формат) → 1234.56, "12,5" → 12.5, "" → None.
    """
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, (int, float)):
        return float(v)
    s = str(v).strip().replace(" ", "").replace("€", "")
    if s == "":
        return None
    if "," in s:
        # кома як десятковий роздільник, крапки як тисячі
        s = s.replace(".", "").replace(",", ".")
    try:
        return float(s)
    except ValueError:
        return None


def safe_int(v: Any) -> Optional[int]:
    f = safe_float(v)
    return int(f) if f is not None else None


def to_bool_or_none(v: Any) -> Optional[bool]:
    if v is None:
        return None
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return bool(v)
    s = str(v).strip().lower()
    if s in ("true", "yes", "y", "1", "si", "sì", "on"):
        return True
    if s in ("false", "no", "n", "0", "off"):
        return False
    return None


def parse_date(v: Any) -> Optional[date]:
    """
    Підтримка:
      - date / datetime (YAML сам парсить YYYY-MM-DD)
      - YYYY-MM-DD
      - DD/MM/YYYY
    """
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, date):
        return v

    s = clean_str(v)
    if not s:
        return None

    for pattern, fmt in _DATE_FORMATS:
        if pattern.match(s):
            try:
                return datetime.strptime(s, fmt).date()
            except ValueError:
                return None
    return None


def round_cents(value: float) -> float:
    """Округлення до центів half-up (0.005 → 0.01), без банківського округлення."""
    try:
        return float(Decimal(repr(value)).quantize(CENT, rounding=ROUND_HALF_UP))
    except InvalidOperation:
        return value


def format_euro(value: Optional[float], default: str = "N/D") -> str:
    """Відображення суми в італійському форматі: € 1.234,56."""
    if value is None:
        return f"€ {default}"
    s = f"{abs(value):,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")
    sign = "-" if value < 0 and round_cents(abs(value)) != 0 else ""
    return f"€ {sign}{s}"


def prepare_for_json(obj):
    """Рекурсивно конвертує dataclass / Decimal / Enum / date у формати, придатні для JSON."""
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: prepare_for_json(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
    if isinstance(obj, dict):
        return {k: prepare_for_json(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [prepare_for_json(i) for i in obj]
    if isinstance(obj, Decimal):
        return float(obj)
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (date, datetime)):
        return obj.isoformat()
    return obj
