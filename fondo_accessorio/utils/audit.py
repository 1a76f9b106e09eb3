from __future__ import annotations

import hashlib
import json
import subprocess
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from fondo_accessorio.utils.parse_utils import prepare_for_json

AUDIT_SCHEMA = "fondo-audit/1"


def sha256_file(path: str | Path) -> Optional[str]:
    """SHA256 файлу normativa/scenario (hex); None, якщо файлу немає."""
    p = Path(path)
    if not p.is_file():
        return None
    return hashlib.sha256(p.read_bytes()).hexdigest()


def get_git_commit(repo_dir: str | Path = ".") -> Optional[str]:
    """Короткий опис версії коду (`git describe --always --dirty`) або None поза git."""
    try:
        desc = subprocess.run(
            ["git", "describe", "--always", "--dirty", "--abbrev=12"],
            cwd=str(repo_dir),
            capture_output=True,
            text=True,
            check=True,
        ).stdout.strip()
    except (OSError, subprocess.CalledProcessError):
        return None
    return desc or None


def sha256_json(data: Any) -> str:
    """
    Стабільний sha256 вхідних даних розрахунку.
    Dataclass/Enum/date нормалізуються через prepare_for_json, ключі сортуються.
    """
    canon = json.dumps(prepare_for_json(data), ensure_ascii=False, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canon.encode("utf-8")).hexdigest()


def build_calculation_snapshot(
    fund_input: Any,
    normativa_path: str | Path | None = None,
    *,
    repo_dir: str | Path = ".",
    now: Optional[datetime] = None,
) -> dict[str, Any]:
    """
    Audit snapshot одного розрахунку: що рахували, з якими нормативними
    даними, коли і якою версією коду.
    """
    versions: dict[str, Any] = {
        "schema": AUDIT_SCHEMA,
        "git_commit": get_git_commit(repo_dir),
    }
    if normativa_path is not None:
        versions["normativa_path"] = str(normativa_path)
        versions["normativa_sha256"] = sha256_file(normativa_path)

    calcolato_il = now or datetime.now(timezone.utc)
    return {
        "input_sha256": sha256_json(fund_input),
        "calcolato_il": calcolato_il.isoformat(),
        "versions": versions,
    }
