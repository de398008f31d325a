#!/usr/bin/env python3
"""
Testes da inferência de tipos e do reconhecimento de indicadores zootécnicos
"""
import math

import pytest

from app.models.analysis import DetectedType, VariableType
from app.services.cell_values import MISSING, Number, Text, parse_cell
from app.services.indicator_matcher import (
    IndicatorType, identify_indicator_type, is_zootechnical, normalize_column_name
)
from app.services.type_inference import infer_variable_info


def cells(*values):
    return [parse_cell(value) for value in values]


@pytest.mark.parametrize("name, expected", [
    ("PESO_NASCIMENTO_KG", IndicatorType.PESO_NASCIMENTO),
    ("Peso ao Nascer", IndicatorType.PESO_NASCIMENTO),
    ("peso_birth", IndicatorType.PESO_NASCIMENTO),
    ("PESO_DESMAME_KG", IndicatorType.PESO_DESMAME),
    ("GPD", IndicatorType.GPD),
    ("Ganho de Peso Diário", IndicatorType.GPD),
    ("Conversão Alimentar", IndicatorType.CONVERSAO_ALIMENTAR),
    ("CA", IndicatorType.CONVERSAO_ALIMENTAR),
    ("Taxa de Nascimento (%)", IndicatorType.TAXA_NASCIMENTO),
    ("CATEGORIA", IndicatorType.NONE),
    ("RENDIMENTO_CARCACA", IndicatorType.NONE),
    ("PESO_ATUAL_KG", IndicatorType.NONE),
    ("SEXO", IndicatorType.NONE),
])
def test_identify_indicator_type(name, expected):
    assert identify_indicator_type(name) is expected
    assert is_zootechnical(name) == (expected is not IndicatorType.NONE)


def test_normalize_column_name_strips_accents_and_separators():
    assert normalize_column_name("Conversão_Alimentar (kg/kg)") == "conversao alimentar kg kg"


def test_parse_cell_variants():
    assert parse_cell(None) is MISSING
    assert parse_cell("   ") is MISSING
    assert parse_cell(float("nan")) is MISSING
    assert parse_cell("inf") is MISSING
    assert parse_cell(10 ** 400) is MISSING
    assert parse_cell(30) == Number(30.0)
    assert parse_cell(" 30.5 ") == Number(30.5, "30.5")
    assert parse_cell("12,5") == Number(12.5, "12,5")
    assert parse_cell(True) == Text("true")
    assert parse_cell("Nelore") == Text("Nelore")


def test_integer_column_is_discrete():
    info = infer_variable_info("IDADE_MESES", cells(3, 8, 12, None, "18"))

    assert info.detected_type == DetectedType.NUMBER
    assert info.type == VariableType.QUANTITATIVA_DISCRETA
    assert info.has_decimals is False
    assert info.valid_count == 4
    assert info.null_count == 1
    assert info.unique_values == 4


def test_decimal_column_is_continuous_and_zootechnical():
    info = infer_variable_info("GPD", cells(0.85, "1,10", 1.2, ""))

    assert info.type == VariableType.QUANTITATIVA_CONTINUA
    assert info.is_zootechnical is True
    assert info.category == IndicatorType.GPD.value
    assert info.sample_values == [0.85, 1.1, 1.2]


def test_text_column_is_nominal():
    info = infer_variable_info("RACA", cells("Nelore", "Angus", "Nelore", None))

    assert info.detected_type == DetectedType.STRING
    assert info.type == VariableType.QUALITATIVA_NOMINAL
    assert info.unique_values == 2
    assert info.is_zootechnical is False
    assert info.category is None


def test_mixed_sample_is_treated_as_text():
    info = infer_variable_info("LOTE", cells(1, "A", 2))

    assert info.detected_type == DetectedType.STRING
    assert info.valid_count == 3


def test_boolean_and_date_detection():
    assert infer_variable_info("VACINADO", cells(True, False, True)).detected_type == DetectedType.BOOLEAN
    assert infer_variable_info("VACINADO", cells("Sim", "Não")).detected_type == DetectedType.BOOLEAN

    iso = infer_variable_info("DATA", cells("2024-01-15", "2024-02-20"))
    assert iso.detected_type == DetectedType.DATE
    assert iso.type == VariableType.QUALITATIVA_NOMINAL

    br = infer_variable_info("DATA", cells("15/01/2024", "28/02/2024"))
    assert br.detected_type == DetectedType.DATE


def test_malformed_cell_after_sample_counts_as_missing():
    info = infer_variable_info("PESO_NASC", cells(30, 32, 31, "n/d", 33), sample_size=3)

    assert info.detected_type == DetectedType.NUMBER
    assert info.valid_count == 4
    assert info.null_count == 1


def test_column_without_valid_values():
    info = infer_variable_info("OBS", cells(None, "", "  "))

    assert info.detected_type == DetectedType.STRING
    assert info.valid_count == 0
    assert info.null_count == 3
    assert info.unique_values == 0


@pytest.mark.parametrize("values", [
    (1, 2, None, "x"),
    ("a", None, None),
    (1.5, math.nan, 2.5),
    (),
])
def test_null_and_valid_counts_cover_all_rows(values):
    info = infer_variable_info("COL", cells(*values))

    assert info.null_count + info.valid_count == len(values)
