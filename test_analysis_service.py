#!/usr/bin/env python3
"""
Testes do fluxo completo: análise, persistência e diagnóstico
"""
import json

import pytest

from app.core.analysis_service import AnalysisNotFoundError, AnalysisService, count_valid_rows
from app.models.diagnostico import StatusBand
from app.services.sample_data import generate_test_data


@pytest.fixture
def service():
    return AnalysisService(raw_data_preview_rows=5)


def test_create_analysis_persists_json_blobs(service):
    rows = generate_test_data(rows=20, seed=11)

    record = service.create_analysis("produtor-1", "rebanho.csv", 2048, rows)

    assert record.status == "VALIDATED"
    assert record.owner_id == "produtor-1"
    assert isinstance(record.data, str)

    data = json.loads(record.data)
    assert set(data) == {
        "rawData", "variablesInfo", "numericStats", "categoricalStats", "zootechnicalVariables",
    }
    assert len(data["rawData"]) == 5
    assert data["numericStats"]["GPD"]["validCount"] == 20
    assert data["variablesInfo"]["SEXO"]["type"] == "Qualitativa Nominal"

    metadata = json.loads(record.metadata)
    assert metadata["uploadedBy"] == "produtor-1"
    assert metadata["fileSize"] == 2048
    assert metadata["totalRows"] == 20
    assert metadata["totalColumns"] == len(rows[0])
    assert metadata["validRows"] == 20
    assert metadata["zootechnicalCount"] == 4


def test_raw_data_preview_is_json_safe(service):
    rows = [{"PESO": float("nan"), "RACA": "Nelore"}, {"PESO": 31.5, "RACA": None}]

    record = service.create_analysis("produtor-1", "nan.csv", 10, rows)

    data = json.loads(record.data)
    assert data["rawData"][0] == {"PESO": None, "RACA": "Nelore"}
    assert json.loads(record.metadata)["validRows"] == 2


def test_count_valid_rows_ignores_blank_rows():
    assert count_valid_rows([{"a": None, "b": ""}, {"a": 1, "b": None}, {}]) == 1


def test_analyses_are_scoped_to_their_owner(service):
    first = service.create_analysis("produtor-1", "a.csv", 1, [{"GPD": 1.0}])
    second = service.create_analysis("produtor-1", "b.csv", 1, [{"GPD": 1.1}])
    service.create_analysis("produtor-2", "c.csv", 1, [{"GPD": 0.9}])

    analyses = service.get_user_analyses("produtor-1")
    assert [record.id for record in analyses] == [second.id, first.id]

    assert service.get_analysis(first.id, "produtor-1") is first
    with pytest.raises(AnalysisNotFoundError):
        service.get_analysis(first.id, "produtor-2")
    with pytest.raises(AnalysisNotFoundError):
        service.get_analysis("inexistente", "produtor-1")


def test_generate_diagnostic_from_stored_analysis(service):
    rows = [{"GPD": value, "SEXO": sexo} for value, sexo in [(0.9, "Macho"), (1.1, "Fêmea"), (1.2, "Macho")]]
    record = service.create_analysis("produtor-1", "confinamento.csv", 100, rows)

    diagnostico = service.generate_diagnostic(record.id, "produtor-1")

    assert diagnostico.resumo_executivo.startswith('Análise técnica de 3 registros do dataset "confinamento.csv".')
    assert diagnostico.analise_numericas[0].status == StatusBand.EXCELENTE
    assert diagnostico.analise_categoricas[0].distribuicao == "Categoria mais frequente: Macho"
    assert "NRC - Nutrient Requirements of Beef Cattle" in diagnostico.fontes


def test_diagnostic_of_empty_dataset(service):
    record = service.create_analysis("produtor-1", "vazio.csv", 0, [])

    diagnostico = service.generate_diagnostic(record.id, "produtor-1")

    assert "0 registros" in diagnostico.resumo_executivo
    assert diagnostico.analise_numericas == []


def test_delete_analysis(service):
    record = service.create_analysis("produtor-1", "a.csv", 1, [{"GPD": 1.0}])

    with pytest.raises(AnalysisNotFoundError):
        service.delete_analysis(record.id, "produtor-2")

    service.delete_analysis(record.id, "produtor-1")
    assert service.get_user_analyses("produtor-1") == []
    with pytest.raises(AnalysisNotFoundError):
        service.generate_diagnostic(record.id, "produtor-1")


def test_user_analytics_stats(service):
    assert service.get_user_analytics_stats("ninguem") == {
        "totalAnalyses": 0,
        "totalDatasets": 0,
        "averageRowsPerDataset": 0,
        "mostRecentAnalysis": None,
    }

    service.create_analysis("produtor-1", "a.csv", 1, generate_test_data(rows=10, seed=1))
    latest = service.create_analysis("produtor-1", "b.csv", 1, generate_test_data(rows=30, seed=2))

    stats = service.get_user_analytics_stats("produtor-1")
    assert stats["totalAnalyses"] == 2
    assert stats["averageRowsPerDataset"] == 20
    assert stats["mostRecentAnalysis"] == latest.created_at


def test_to_dto_parses_blobs(service):
    record = service.create_analysis("produtor-1", "a.csv", 1, [{"CA": 7.5}, {"CA": 8.0}])

    dto = record.to_dto()

    assert dto["data"]["zootechnicalVariables"] == ["CA"]
    assert dto["metadata"]["totalRows"] == 2
    assert dto["createdAt"] == record.created_at
