"""
Identificação de indicadores zootécnicos pelo nome da coluna

Único classificador de nomes do sistema: usado tanto pela inferência de tipos
(isZootechnical) quanto pelo motor de diagnóstico.
"""
import re
import unicodedata
from enum import Enum
from typing import Callable, List, Tuple

_SEPARATORS = re.compile(r"[^a-z0-9]+")


class IndicatorType(str, Enum):
    """Indicadores zootécnicos reconhecidos"""
    GPD = "gpd"
    PESO_NASCIMENTO = "peso_nascimento"
    PESO_DESMAME = "peso_desmame_210d"
    CONVERSAO_ALIMENTAR = "conversao_alimentar"
    TAXA_NASCIMENTO = "taxa_nascimento"
    NONE = "none"


def normalize_column_name(name: str) -> str:
    """
    Normaliza o nome da coluna para comparação

    'Peso_Nascimento (kg)' -> 'peso nascimento kg'
    """
    decomposed = unicodedata.normalize("NFKD", str(name))
    without_accents = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _SEPARATORS.sub(" ", without_accents.lower()).strip()


def _has(normalized: str, *fragments: str) -> bool:
    return all(fragment in normalized for fragment in fragments)


# Ordem importa: a primeira regra satisfeita vence
_RULES: List[Tuple[IndicatorType, Callable[[str, List[str]], bool]]] = [
    (IndicatorType.GPD,
     lambda n, tokens: "gpd" in n or _has(n, "ganho", "peso")),
    (IndicatorType.PESO_NASCIMENTO,
     lambda n, tokens: "peso" in n and ("nasc" in n or "birth" in n)),
    (IndicatorType.PESO_DESMAME,
     lambda n, tokens: "peso" in n and ("desmame" in n or "wean" in n)),
    (IndicatorType.CONVERSAO_ALIMENTAR,
     lambda n, tokens: "conversao" in n or "ca" in tokens),
    (IndicatorType.TAXA_NASCIMENTO,
     lambda n, tokens: _has(n, "taxa", "nasc")),
]


def identify_indicator_type(name: str) -> IndicatorType:
    """Retorna o indicador correspondente ao nome da coluna, ou NONE"""
    normalized = normalize_column_name(name)
    tokens = normalized.split()
    for indicator, matches in _RULES:
        if matches(normalized, tokens):
            return indicator
    return IndicatorType.NONE


def is_zootechnical(name: str) -> bool:
    return identify_indicator_type(name) is not IndicatorType.NONE
