#!/usr/bin/env python3
"""
Testes dos endpoints da API AgroInsight
"""
import uuid

import pytest
from fastapi.testclient import TestClient

from main import app
from app.services.sample_data import convert_to_csv, generate_test_data

BASE = "/api/v1"


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def user_id():
    return f"teste-{uuid.uuid4().hex[:8]}"


def upload(client, user_id, content: bytes, filename="rebanho.csv"):
    files = {"file": (filename, content, "text/csv")}
    return client.post(f"{BASE}/analise/upload-csv", files=files, params={"user_id": user_id})


def test_root_and_health(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["endpoints"]["health"] == "/api/v1/health"

    response = client.get(f"{BASE}/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "message": "AgroInsight Backend API is running"}


def test_upload_csv_and_fetch_diagnostic(client, user_id):
    content = convert_to_csv(generate_test_data(rows=30, seed=4)).encode("utf-8")

    response = upload(client, user_id, content)
    assert response.status_code == 201
    dataset = response.json()["dataset"]
    assert dataset["name"] == "rebanho.csv"
    assert dataset["metadata"]["totalRows"] == 30
    assert dataset["metadata"]["fileSize"] == len(content)
    assert "GPD" in dataset["data"]["numericStats"]

    response = client.get(f"{BASE}/analise/{dataset['id']}/diagnostico", params={"user_id": user_id})
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert "geradoEm" in body
    assert body["diagnostico"]["resumoExecutivo"].startswith('Análise técnica de 30 registros')
    assert len(body["diagnostico"]["recomendacoesPrioritarias"]) >= 1


def test_upload_empty_file_is_rejected(client, user_id):
    response = upload(client, user_id, b"")

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Erro na requisição", "error": "Arquivo está vazio"}


def test_create_analysis_from_rows(client, user_id):
    payload = {"name": "pesagens", "fileSize": 120, "rows": [{"PESO_NASCIMENTO_KG": 34}, {"PESO_NASCIMENTO_KG": 36}]}

    response = client.post(f"{BASE}/analise", json=payload, params={"user_id": user_id})

    assert response.status_code == 201
    dataset = response.json()["dataset"]
    assert dataset["data"]["zootechnicalVariables"] == ["PESO_NASCIMENTO_KG"]
    assert dataset["data"]["numericStats"]["PESO_NASCIMENTO_KG"]["mean"] == 35.0


def test_list_get_and_delete(client, user_id):
    created = client.post(f"{BASE}/analise", json={"name": "a", "rows": [{"GPD": 1.0}]}, params={"user_id": user_id})
    analysis_id = created.json()["dataset"]["id"]

    listing = client.get(f"{BASE}/analise", params={"user_id": user_id}).json()
    assert listing["count"] == 1
    assert listing["datasets"][0]["id"] == analysis_id

    assert client.get(f"{BASE}/analise/{analysis_id}", params={"user_id": user_id}).status_code == 200
    assert client.get(f"{BASE}/analise/{analysis_id}", params={"user_id": "outro"}).status_code == 404

    stats = client.get(f"{BASE}/analise/estatisticas", params={"user_id": user_id}).json()
    assert stats["stats"]["totalAnalyses"] == 1

    assert client.delete(f"{BASE}/analise/{analysis_id}", params={"user_id": user_id}).status_code == 200
    assert client.delete(f"{BASE}/analise/{analysis_id}", params={"user_id": user_id}).status_code == 404
    assert client.get(f"{BASE}/analise/{analysis_id}/diagnostico", params={"user_id": user_id}).status_code == 404


def test_diagnostico_from_stats(client):
    payload = {
        "numericStats": {"GPD": {"mean": 0.2, "cv": 10}, "ALTURA": {"mean": "130.00", "cv": "40.00"}},
        "categoricalStats": {"RACA": {"uniqueValues": 3, "mode": "Nelore"}},
        "datasetName": "Lote 7",
        "totalRows": 1500,
    }

    response = client.post(f"{BASE}/diagnostico", json=payload)

    assert response.status_code == 200
    diagnostico = response.json()["diagnostico"]
    assert [a["status"] for a in diagnostico["analiseNumericas"]] == ["Preocupante", "Preocupante"]
    assert diagnostico["resumoExecutivo"].startswith('Análise técnica de 1.500 registros do dataset "Lote 7".')
    assert diagnostico["analiseCategoricas"][0]["interpretacao"] == "Identificadas 3 categorias distintas."
    assert diagnostico["recomendacoesPrioritarias"][0]["prioridade"] == 1


def test_reference_table(client):
    response = client.get(f"{BASE}/referencias-zootecnicas")

    assert response.status_code == 200
    referencias = response.json()["referencias"]
    assert referencias["peso_nascimento"]["idealMin"] == 30
    assert referencias["cv_aceitavel"]["regular"] == 35


def test_download_test_data(client):
    response = client.get(f"{BASE}/dados-teste", params={"rows": 15, "seed": 1, "include_missing": False})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "attachment" in response.headers["content-disposition"]
    lines = response.text.strip().split("\n")
    assert lines[0].startswith("ID,ANIMAL,RACA")
    assert len(lines) == 16


def test_download_test_data_limits_rows(client):
    assert client.get(f"{BASE}/dados-teste", params={"rows": 10001}).status_code == 400
    assert client.get(f"{BASE}/dados-teste", params={"rows": 0}).status_code == 422
