import pytest
import yaml

from conftest import NORMATIVA_YML
from fondo_accessorio.config.env import load_logging_config, load_normativa_config
from fondo_accessorio.config.normativa import clear_normativa_cache, load_normativa, parse_normativa
from fondo_accessorio.domain.errors import FondoConfigError, NormativaNonDisponibileError


@pytest.fixture(autouse=True)
def _cache_pulita():
    clear_normativa_cache()
    yield
    clear_normativa_cache()


def _raw():
    with NORMATIVA_YML.open(encoding="utf-8") as f:
        return yaml.safe_load(f)


def test_file_del_repository_valido(normativa):
    assert normativa.valori_pro_capite.art67_ccnl_2018 == pytest.approx(83.20)
    assert normativa.valori_pro_capite.art79_ccnl_2022_b == pytest.approx(84.50)
    assert normativa.limiti.incidenza_salario_accessorio == 8
    assert normativa.limiti.incremento_virtuosi_dl25_2025 == pytest.approx(0.48)
    assert normativa.limiti.incremento_pnrr_dl13_2023 == pytest.approx(0.05)
    assert normativa.rif("art23_dlgs75_2017") == "Art. 23, c.2, D.Lgs. 75/2017"
    assert normativa.rif("inesistente") == ""
    assert "ISTRUTTORE" in normativa.progression_economic_values


def test_cache_restituisce_stessa_istanza():
    assert load_normativa(NORMATIVA_YML) is load_normativa(NORMATIVA_YML)


def test_file_mancante(tmp_path):
    with pytest.raises(NormativaNonDisponibileError, match="non trovato"):
        load_normativa(tmp_path / "assente.yml")


def test_yaml_non_valido(tmp_path):
    p = tmp_path / "rotto.yml"
    p.write_text("riferimenti_normativi: [non chiuso\n", encoding="utf-8")
    with pytest.raises(NormativaNonDisponibileError, match="Impossibile leggere"):
        load_normativa(p)


def test_documento_non_mapping():
    with pytest.raises(NormativaNonDisponibileError):
        parse_normativa(["a", "b"])


@pytest.mark.parametrize("sezione", ["riferimenti_normativi", "valori_pro_capite", "limiti"])
def test_sezione_mancante(sezione):
    data = _raw()
    del data[sezione]
    with pytest.raises(NormativaNonDisponibileError, match=sezione):
        parse_normativa(data)


def test_riferimento_obbligatorio_mancante():
    data = _raw()
    del data["riferimenti_normativi"]["art208_cds"]
    with pytest.raises(NormativaNonDisponibileError, match="art208_cds"):
        parse_normativa(data)


@pytest.mark.parametrize("valore", ["tanti", None, True])
def test_valore_non_numerico(valore):
    data = _raw()
    data["limiti"]["incremento_virtuosi_dl25_2025"] = valore
    with pytest.raises(NormativaNonDisponibileError, match="incremento_virtuosi_dl25_2025"):
        parse_normativa(data)


def test_tabella_progressioni_non_valida():
    data = _raw()
    data["progression_economic_values"] = {"ISTRUTTORE": {"C1": "molto"}}
    with pytest.raises(NormativaNonDisponibileError, match="progressioni"):
        parse_normativa(data)


def test_errore_normativa_e_errore_di_configurazione():
    assert issubclass(NormativaNonDisponibileError, FondoConfigError)


def test_percorso_da_ambiente(monkeypatch, tmp_path):
    p = tmp_path / "norme.yml"
    p.write_text(NORMATIVA_YML.read_text(encoding="utf-8"), encoding="utf-8")
    monkeypatch.setenv("FONDO_NORMATIVA_YAML", str(p))

    assert load_normativa_config().yaml_path == p
    assert load_normativa().rif("art208_cds") == "Art. 208, D.Lgs. 285/1992"


def test_livello_log(monkeypatch):
    monkeypatch.setenv("FONDO_LOG_LEVEL", " debug ")
    assert load_logging_config().level == "DEBUG"

    monkeypatch.setenv("FONDO_LOG_LEVEL", "chiacchierone")
    with pytest.raises(ValueError):
        load_logging_config()
