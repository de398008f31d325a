"""
Modelos de requisição e resposta para a API
"""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Resposta de erro"""
    success: bool = False
    message: str
    error: str


class HealthResponse(BaseModel):
    """Resposta de health check"""
    status: str = "healthy"
    message: str = "AgroInsight Backend API is running"


class AnalysisCreateRequest(BaseModel):
    """Linhas já parseadas de um dataset"""
    name: str = Field(..., min_length=1, description="Nome do dataset")
    file_size: int = Field(default=0, ge=0, alias="fileSize")
    rows: List[Dict[str, Any]] = Field(default_factory=list, description="Linhas (coluna -> valor)")

    class Config:
        populate_by_name = True


class DatasetResponse(BaseModel):
    """Dataset analisado com os blobs desserializados"""
    success: bool = True
    dataset: Dict[str, Any]


class DatasetListResponse(BaseModel):
    success: bool = True
    datasets: List[Dict[str, Any]]
    count: int


class DiagnosticoRequest(BaseModel):
    """Estatísticas para diagnóstico sem análise persistida"""
    numeric_stats: Dict[str, Dict[str, Any]] = Field(default_factory=dict, alias="numericStats")
    categorical_stats: Dict[str, Dict[str, Any]] = Field(default_factory=dict, alias="categoricalStats")
    dataset_name: str = Field(default="Dataset", alias="datasetName")
    total_rows: int = Field(default=0, ge=0, alias="totalRows")

    class Config:
        populate_by_name = True


class DiagnosticoResponse(BaseModel):
    success: bool = True
    diagnostico: Dict[str, Any]
    gerado_em: str = Field(alias="geradoEm")
    metodo: str = "Análise baseada em referências zootécnicas (EMBRAPA, NRC)"

    class Config:
        populate_by_name = True


class AnalyticsStatsResponse(BaseModel):
    success: bool = True
    stats: Dict[str, Optional[Any]]
