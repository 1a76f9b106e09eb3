from datetime import date

import pytest

from conftest import ESEMPIO_SCENARIO
from fondo_accessorio.config.scenario import load_scenario, parse_scenario
from fondo_accessorio.domain.errors import ScenarioError
from fondo_accessorio.domain.models import AreaQualifica, EmployeeCategory, TipologiaEnte


def test_scenario_di_esempio():
    fi = load_scenario(ESEMPIO_SCENARIO)

    assert fi.annual.tipologia_ente is TipologiaEnte.COMUNE
    assert fi.annual.numero_abitanti == 12_500
    assert fi.annual.rispetto_equilibrio_bilancio_precedente is True
    assert fi.annual.count_for(EmployeeCategory.DIPENDENTE, EmployeeCategory.EQ) == 50
    assert fi.historical.totale_fondo_anno_precedente == pytest.approx(248_500.0)
    assert fi.fondo_segretario.fin_percentuale_copertura_posto_segretario == 50
    assert fi.distribuzione.p_indennita_reperibilita.stanziate == 6_000
    assert fi.distribuzione.criteri_perc_perf_individuale == 60
    assert fi.annual.personale_anno_rif_per_art23[3].cedolini_emessi == 6

    assert len(fi.personale) == 3
    assert fi.personale[1].area is AreaQualifica.FUNZIONARIO_EQ
    assert fi.personale[2].full_year is False
    assert fi.personale[2].data_assunzione == date(2025, 7, 1)


def test_sezioni_assenti_usano_i_default():
    fi = parse_scenario({})
    assert fi.annual.anno_riferimento == 2025
    assert fi.fondo_segretario.fin_percentuale_copertura_posto_segretario == 100.0
    assert fi.personale == ()


def test_importi_in_formato_italiano():
    fi = parse_scenario({
        "historical": {"fondo_salario_accessorio_personale_non_dir_eq_2016": "1.234,56"},
        "fondo_dipendente": {"st_art79c1_art67c1_unico_importo_2017": "€ 50.000,00"},
    })
    assert fi.historical.fondo_salario_accessorio_personale_non_dir_eq_2016 == pytest.approx(1_234.56)
    assert fi.fondo_dipendente.st_art79c1_art67c1_unico_importo_2017 == pytest.approx(50_000)


def test_tipologia_per_valore():
    fi = parse_scenario({"annual": {"tipologia_ente": "unione dei comuni"}})
    assert fi.annual.tipologia_ente is TipologiaEnte.UNIONE_COMUNI


@pytest.mark.parametrize(
    "raw, frammento",
    [
        ({"storico": {}}, "campi sconosciuti: storico"),
        ({"fondo_eq": {"ris_fondo_po_2071": 1}}, "ris_fondo_po_2071"),
        ({"fondo_eq": {"ris_fondo_po_2017": "tanto"}}, "valore non numerico"),
        ({"annual": {"tipologia_ente": "Regione"}}, "valore non ammesso"),
        ({"annual": {"has_dirigenza": "forse"}}, "booleano non valido"),
        ({"annual": {"simulatore_risultati": {}}}, "simulatore_risultati"),
        ({"annual": {"personale_2018_per_art23": {"id": 1}}}, "attesa una lista"),
        ({"personale": [{"area": "ISTRUTTORE", "data_assunzione": "31/02/2025"}]}, "data non valida"),
        ({"fondo_segretario": {"fin_percentuale_copertura_posto_segretario": 120}}, "fuori range"),
        ({"distribuzione": {"p_indennita_turno": {"stanziati": 10}}}, "stanziati"),
        ([1, 2], "atteso un mapping"),
    ],
)
def test_scenario_non_valido(raw, frammento):
    with pytest.raises(ScenarioError, match=frammento):
        parse_scenario(raw)


def test_file_mancante(tmp_path):
    with pytest.raises(ScenarioError, match="non trovato"):
        load_scenario(tmp_path / "assente.yml")


def test_yaml_non_valido(tmp_path):
    p = tmp_path / "rotto.yml"
    p.write_text("annual: {anno_riferimento: 2025\n", encoding="utf-8")
    with pytest.raises(ScenarioError, match="Impossibile leggere"):
        load_scenario(p)


def test_file_vuoto(tmp_path):
    p = tmp_path / "vuoto.yml"
    p.write_text("", encoding="utf-8")
    assert load_scenario(p).annual.anno_riferimento == 2025
