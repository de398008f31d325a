"""
Endpoints da API para análise de datasets zootécnicos e diagnóstico
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, UploadFile, File, HTTPException, Query
from fastapi.responses import Response

from ..core.config import settings
from ..core.analysis_service import AnalysisNotFoundError, analysis_service
from ..services.data_analyzer import data_analyzer
from ..services.diagnostic_engine import diagnostic_engine
from ..services.reference_rules import default_rule_base
from ..services.sample_data import convert_to_csv, generate_test_data
from ..models.responses import (
    AnalysisCreateRequest, AnalyticsStatsResponse, DatasetListResponse, ErrorResponse,
    DatasetResponse, DiagnosticoRequest, DiagnosticoResponse, HealthResponse
)

logger = logging.getLogger(__name__)

# Criar router
router = APIRouter()

DEFAULT_USER = "anonimo"
NOT_FOUND = {404: {"model": ErrorResponse}}


def _diagnostico_response(diagnostico) -> DiagnosticoResponse:
    return DiagnosticoResponse(
        diagnostico=diagnostico.model_dump(mode="json", by_alias=True),
        gerado_em=datetime.now(timezone.utc).isoformat(),
    )


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint"""
    return HealthResponse()


@router.post("/analise", response_model=DatasetResponse, status_code=201)
async def create_analysis(request: AnalysisCreateRequest, user_id: str = Query(DEFAULT_USER)):
    """
    Criar análise a partir de linhas já parseadas

    Args:
        request: Nome do dataset e linhas (coluna -> valor)
        user_id: Usuário dono da análise

    Returns:
        Dataset com estatísticas e metadados
    """
    try:
        record = analysis_service.create_analysis(
            user_id, request.name, request.file_size, request.rows
        )
        return DatasetResponse(dataset=record.to_dto())

    except Exception as e:
        logger.error(f"Erro ao criar análise: {e}")
        raise HTTPException(status_code=500, detail=f"Erro interno: {str(e)}")


@router.post(
    "/analise/upload-csv",
    response_model=DatasetResponse,
    status_code=201,
    responses={400: {"model": ErrorResponse}, 413: {"model": ErrorResponse}}
)
async def upload_csv(file: UploadFile = File(...), user_id: str = Query(DEFAULT_USER)):
    """
    Upload de arquivo CSV e criação da análise

    Args:
        file: Arquivo CSV para upload
        user_id: Usuário dono da análise

    Returns:
        Dataset com estatísticas e metadados
    """
    try:
        content = await file.read()

        if not content:
            raise HTTPException(status_code=400, detail="Arquivo está vazio")

        max_size = settings.max_file_size_mb * 1024 * 1024
        if len(content) > max_size:
            raise HTTPException(
                status_code=413,
                detail=f"Arquivo muito grande. Tamanho máximo permitido: {settings.max_file_size_mb} MB"
            )

        try:
            rows = data_analyzer.load_rows_from_csv(content)
        except ValueError as ve:
            raise HTTPException(status_code=400, detail=str(ve))

        record = analysis_service.create_analysis(
            user_id, file.filename or "dataset.csv", len(content), rows
        )
        return DatasetResponse(dataset=record.to_dto())

    except HTTPException:
        raise

    except Exception as e:
        logger.error(f"Erro no upload do CSV: {e}")
        raise HTTPException(status_code=500, detail=f"Erro interno: {str(e)}")


@router.get("/analise", response_model=DatasetListResponse)
async def list_analyses(user_id: str = Query(DEFAULT_USER)):
    """Listar análises do usuário"""
    datasets = [record.to_dto() for record in analysis_service.get_user_analyses(user_id)]
    return DatasetListResponse(datasets=datasets, count=len(datasets))


@router.get("/analise/estatisticas", response_model=AnalyticsStatsResponse)
async def analytics_stats(user_id: str = Query(DEFAULT_USER)):
    """Estatísticas das análises do usuário"""
    return AnalyticsStatsResponse(stats=analysis_service.get_user_analytics_stats(user_id))


@router.get("/analise/{analysis_id}", response_model=DatasetResponse, responses=NOT_FOUND)
async def get_analysis(analysis_id: str, user_id: str = Query(DEFAULT_USER)):
    """Obter análise por ID"""
    try:
        record = analysis_service.get_analysis(analysis_id, user_id)
    except AnalysisNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return DatasetResponse(dataset=record.to_dto())


@router.get("/analise/{analysis_id}/diagnostico", response_model=DiagnosticoResponse, responses=NOT_FOUND)
async def get_diagnostico(analysis_id: str, user_id: str = Query(DEFAULT_USER)):
    """Gerar diagnóstico zootécnico de uma análise persistida"""
    try:
        diagnostico = analysis_service.generate_diagnostic(analysis_id, user_id)
        return _diagnostico_response(diagnostico)

    except AnalysisNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    except Exception as e:
        logger.error(f"❌ Erro ao gerar diagnóstico: {e}")
        raise HTTPException(status_code=500, detail="Erro ao gerar diagnóstico. Tente novamente.")


@router.delete("/analise/{analysis_id}", responses=NOT_FOUND)
async def delete_analysis(analysis_id: str, user_id: str = Query(DEFAULT_USER)):
    """Deletar análise"""
    try:
        analysis_service.delete_analysis(analysis_id, user_id)
    except AnalysisNotFoundError:
        raise HTTPException(status_code=404, detail="Análise não encontrada ou sem permissão")
    return {"success": True, "message": "Análise deletada"}


@router.post("/diagnostico", response_model=DiagnosticoResponse)
async def diagnostico_from_stats(request: DiagnosticoRequest):
    """Gerar diagnóstico diretamente a partir de estatísticas"""
    diagnostico = diagnostic_engine.gerar_diagnostico(
        request.numeric_stats,
        request.categorical_stats,
        request.dataset_name,
        request.total_rows,
    )
    return _diagnostico_response(diagnostico)


@router.get("/referencias-zootecnicas")
async def get_reference_table():
    """Tabela de valores de referência usada no diagnóstico"""
    return {"success": True, "referencias": default_rule_base.to_dict()}


@router.get("/dados-teste")
async def download_test_data(
    rows: int = Query(100, ge=1),
    include_missing: bool = Query(True),
    seed: Optional[int] = Query(None)
):
    """
    Gerar CSV de exemplo com dados zootécnicos

    Returns:
        Arquivo CSV para download
    """
    if rows > settings.test_data_max_rows:
        raise HTTPException(
            status_code=400,
            detail=f"Máximo de {settings.test_data_max_rows} linhas por arquivo"
        )

    data = generate_test_data(rows=rows, include_missing=include_missing, seed=seed)
    filename = f"dados_teste_{rows}_registros_{datetime.now().date().isoformat()}.csv"
    return Response(
        content=convert_to_csv(data),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
