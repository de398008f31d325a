"""
Modelos do diagnóstico zootécnico gerado por regras
"""
from enum import Enum
from typing import List

from pydantic import Field

from app.models.analysis import CamelModel


class StatusBand(str, Enum):
    """Faixa de classificação de um indicador"""
    EXCELENTE = "Excelente"
    BOM = "Bom"
    REGULAR = "Regular"
    PREOCUPANTE = "Preocupante"


class AnaliseNumerica(CamelModel):
    variavel: str
    interpretacao: str
    comparacao_literatura: str
    status: StatusBand


class AnaliseCategorica(CamelModel):
    variavel: str
    interpretacao: str
    distribuicao: str


class Recomendacao(CamelModel):
    prioridade: int
    titulo: str
    descricao: str
    justificativa: str


class Diagnostico(CamelModel):
    """Relatório diagnóstico; derivado sob demanda, nunca persistido"""
    resumo_executivo: str
    analise_numericas: List[AnaliseNumerica] = Field(default_factory=list)
    analise_categoricas: List[AnaliseCategorica] = Field(default_factory=list)
    pontos_fortes: List[str] = Field(default_factory=list)
    pontos_atencao: List[str] = Field(default_factory=list)
    recomendacoes_prioritarias: List[Recomendacao] = Field(default_factory=list)
    conclusao: str
    fontes: List[str] = Field(default_factory=list)
