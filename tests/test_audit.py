from datetime import datetime, timezone

from conftest import NORMATIVA_YML
from fondo_accessorio.domain.models import FondoDipendenteData, FundInput
from fondo_accessorio.utils.audit import build_calculation_snapshot, sha256_file, sha256_json


def test_sha256_json_stabile():
    a = FundInput(fondo_dipendente=FondoDipendenteData(st_art79c1_art67c1_unico_importo_2017=1_000))
    b = FundInput(fondo_dipendente=FondoDipendenteData(st_art79c1_art67c1_unico_importo_2017=1_000))
    c = FundInput(fondo_dipendente=FondoDipendenteData(st_art79c1_art67c1_unico_importo_2017=1_001))

    assert sha256_json(a) == sha256_json(b)
    assert sha256_json(a) != sha256_json(c)
    assert sha256_json({"b": 1, "a": 2}) == sha256_json({"a": 2, "b": 1})


def test_sha256_file(tmp_path):
    p = tmp_path / "x.txt"
    p.write_bytes(b"abc")
    assert sha256_file(p) == "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"


def test_snapshot_calcolo(tmp_path):
    now = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)
    snap = build_calculation_snapshot(FundInput(), NORMATIVA_YML, repo_dir=tmp_path, now=now)

    assert snap["calcolato_il"] == "2025-03-01T12:00:00+00:00"
    assert snap["input_sha256"] == sha256_json(FundInput())
    assert snap["versions"]["normativa_path"] == str(NORMATIVA_YML)
    assert snap["versions"]["normativa_sha256"] == sha256_file(NORMATIVA_YML)


def test_snapshot_normativa_assente(tmp_path):
    snap = build_calculation_snapshot(FundInput(), tmp_path / "manca.yml", repo_dir=tmp_path)
    assert snap["versions"]["normativa_sha256"] is None

    assert "normativa_path" not in build_calculation_snapshot(FundInput(), repo_dir=tmp_path)["versions"]
