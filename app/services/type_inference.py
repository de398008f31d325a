"""
Inferência do tipo das variáveis (colunas) de um dataset
"""
import re
import logging
from typing import List, Sequence, Union

import pandas as pd

from app.models.analysis import DetectedType, VariableInfo, VariableType
from app.services.cell_values import Cell, Missing, Number, Text, cell_as_text
from app.services.indicator_matcher import IndicatorType, identify_indicator_type

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_SIZE = 100
SAMPLE_VALUES_LIMIT = 5

BOOLEAN_PATTERNS = [
    {"true", "false"}, {"yes", "no"}, {"y", "n"},
    {"sim", "não"}, {"sim", "nao"}, {"s", "n"},
]

_ISO_DATE = re.compile(r"^\d{4}-\d{1,2}-\d{1,2}([ T]\d{1,2}:\d{2}(:\d{2})?)?$")
_BR_DATE = re.compile(r"^\d{1,2}[/-]\d{1,2}[/-]\d{4}$")


def _is_date_string(value: str) -> bool:
    """Verifica se o texto é uma data (ISO ou dd/mm/aaaa)"""
    if _ISO_DATE.match(value):
        return not pd.isna(pd.to_datetime(value, errors="coerce"))
    if _BR_DATE.match(value):
        return not pd.isna(pd.to_datetime(value, errors="coerce", dayfirst=True))
    return False


def _is_boolean_sample(texts: Sequence[str]) -> bool:
    unique_values = {text.lower() for text in texts}
    return any(unique_values.issubset(pattern) for pattern in BOOLEAN_PATTERNS)


def detect_primitive_type(cells: Sequence[Cell], sample_size: int = DEFAULT_SAMPLE_SIZE) -> DetectedType:
    """
    Detecta o tipo primitivo a partir de uma amostra das células não nulas

    Sem valores válidos, o tipo é 'string'.
    """
    sample = [cell for cell in cells if not isinstance(cell, Missing)][:sample_size]
    if not sample:
        return DetectedType.STRING

    if all(isinstance(cell, Number) for cell in sample):
        return DetectedType.NUMBER

    # Colunas mistas são tratadas como texto
    texts = [cell_as_text(cell) for cell in sample]
    if all(isinstance(cell, Text) for cell in sample) and _is_boolean_sample(texts):
        return DetectedType.BOOLEAN
    if all(_is_date_string(text) for text in texts):
        return DetectedType.DATE
    return DetectedType.STRING


def valid_values(cells: Sequence[Cell], detected_type: DetectedType) -> List[Union[float, str]]:
    """
    Valores válidos da coluna segundo o tipo detectado

    Em colunas numéricas, células não numéricas são tratadas como ausentes.
    """
    if detected_type == DetectedType.NUMBER:
        return [cell.value for cell in cells if isinstance(cell, Number)]
    return [cell_as_text(cell) for cell in cells if not isinstance(cell, Missing)]


def infer_variable_info(
    name: str,
    cells: Sequence[Cell],
    sample_size: int = DEFAULT_SAMPLE_SIZE
) -> VariableInfo:
    """
    Classifica uma coluna do dataset

    Args:
        name: Nome da coluna
        cells: Células já convertidas (Number | Text | Missing)
        sample_size: Quantidade de valores não nulos usados na detecção

    Returns:
        VariableInfo com tipo semântico, contagens e flag zootécnica
    """
    detected_type = detect_primitive_type(cells, sample_size)
    values = valid_values(cells, detected_type)

    has_decimals = False
    if detected_type == DetectedType.NUMBER:
        has_decimals = any(not float(value).is_integer() for value in values)
        variable_type = (
            VariableType.QUANTITATIVA_CONTINUA if has_decimals
            else VariableType.QUANTITATIVA_DISCRETA
        )
    else:
        variable_type = VariableType.QUALITATIVA_NOMINAL

    indicator = identify_indicator_type(name)
    null_count = len(cells) - len(values)
    if detected_type == DetectedType.NUMBER and null_count:
        logger.debug(f"Coluna {name}: {null_count} células ausentes ou inválidas")

    return VariableInfo(
        name=name,
        type=variable_type,
        detected_type=detected_type,
        has_decimals=has_decimals,
        unique_values=len(set(values)),
        null_count=null_count,
        valid_count=len(values),
        is_zootechnical=indicator is not IndicatorType.NONE,
        category=indicator.value if indicator is not IndicatorType.NONE else None,
        sample_values=values[:SAMPLE_VALUES_LIMIT],
    )
