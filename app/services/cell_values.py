"""
Representação explícita dos valores de célula: Number | Text | Missing
"""
import math
import numbers
import re
from dataclasses import dataclass
from typing import Any, Optional, Union

_DECIMAL_COMMA = re.compile(r"^[-+]?\d+,\d+$")


@dataclass(frozen=True)
class Number:
    value: float
    # Texto original quando a célula veio como string
    text: Optional[str] = None


@dataclass(frozen=True)
class Text:
    value: str


@dataclass(frozen=True)
class Missing:
    pass


Cell = Union[Number, Text, Missing]

MISSING = Missing()


def _parse_number(text: str):
    """Tenta converter texto em float; aceita vírgula decimal (12,5)"""
    if _DECIMAL_COMMA.match(text):
        text = text.replace(",", ".")
    try:
        return float(text)
    except ValueError:
        return None


def format_number(value: float) -> str:
    """Formata número como texto estável (30.0 -> '30')"""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def parse_cell(raw: Any) -> Cell:
    """
    Converte um valor bruto de célula em um Cell

    None, NaN, infinitos e strings em branco são Missing. Booleanos viram
    Text('true'/'false') para que a coluna seja detectada como boolean.
    """
    if raw is None:
        return MISSING
    if isinstance(raw, bool):
        return Text("true" if raw else "false")
    if isinstance(raw, numbers.Real):
        try:
            value = float(raw)
        except OverflowError:
            return MISSING
        if not math.isfinite(value):
            return MISSING
        return Number(value)
    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            return MISSING
        value = _parse_number(text)
        if value is None:
            return Text(text)
        if not math.isfinite(value):
            return MISSING
        return Number(value, text)
    return Text(str(raw))


def cell_as_text(cell: Cell) -> str:
    """Valor textual de uma célula válida (para colunas categóricas)"""
    if isinstance(cell, Number):
        return cell.text if cell.text is not None else format_number(cell.value)
    if isinstance(cell, Text):
        return cell.value
    raise ValueError("Célula ausente não possui valor textual")
