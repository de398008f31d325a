"""
Serviço de análise de datasets
Contém a lógica de negócio: análise, persistência dos blobs JSON e diagnóstico
"""
import json
import math
import uuid
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence

from app.core.config import settings
from app.models.analysis import DatasetMetadata, DatasetRecord
from app.models.diagnostico import Diagnostico
from app.services.cell_values import Missing, parse_cell
from app.services.data_analyzer import DataAnalyzer, data_analyzer
from app.services.diagnostic_engine import DiagnosticRuleEngine, diagnostic_engine

logger = logging.getLogger(__name__)


class AnalysisNotFoundError(LookupError):
    """Análise inexistente ou pertencente a outro usuário"""


def count_valid_rows(rows: Sequence[Mapping[str, Any]]) -> int:
    """Linhas com pelo menos uma célula preenchida"""
    return sum(
        1 for row in rows
        if any(not isinstance(parse_cell(value), Missing) for value in row.values())
    )


def _json_safe(value: Any) -> Any:
    """Valor bruto serializável em JSON (NaN/infinito viram None)"""
    if value is None or isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    return str(value)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class AnalysisService:
    """Serviço de análises de datasets zootécnicos"""

    def __init__(
        self,
        analyzer: Optional[DataAnalyzer] = None,
        engine: Optional[DiagnosticRuleEngine] = None,
        raw_data_preview_rows: Optional[int] = None
    ):
        self.analyzer = analyzer or data_analyzer
        self.engine = engine or diagnostic_engine
        self.raw_data_preview_rows = raw_data_preview_rows or settings.raw_data_preview_rows
        # Em produção, isso seria um banco de dados; os blobs ficam como texto JSON
        self.records: Dict[str, DatasetRecord] = {}

    def create_analysis(
        self,
        user_id: str,
        file_name: str,
        file_size: int,
        rows: Sequence[Mapping[str, Any]]
    ) -> DatasetRecord:
        """
        Criar nova análise a partir das linhas do CSV

        Args:
            user_id: Usuário que enviou o arquivo
            file_name: Nome do arquivo/dataset
            file_size: Tamanho do arquivo em bytes
            rows: Linhas do dataset

        Returns:
            Registro persistido com os blobs 'data' e 'metadata'
        """
        logger.info(f"📊 Iniciando análise de dataset '{file_name}' ({len(rows)} linhas)")

        result = self.analyzer.analyze(rows)
        analysis = result.to_dict()

        preview = [
            {key: _json_safe(value) for key, value in row.items()}
            for row in rows[:self.raw_data_preview_rows]
        ]
        data = {
            "rawData": preview,
            "variablesInfo": analysis["variablesInfo"],
            "numericStats": analysis["numericStats"],
            "categoricalStats": analysis["categoricalStats"],
            "zootechnicalVariables": analysis["zootechnicalVariables"],
        }
        metadata = DatasetMetadata(
            uploaded_by=user_id,
            uploaded_at=_now_iso(),
            file_size=file_size,
            total_rows=result.total_rows,
            total_columns=result.total_columns,
            valid_rows=count_valid_rows(rows),
            zootechnical_count=len(result.zootechnical_variables),
        )

        timestamp = _now_iso()
        record = DatasetRecord(
            id=str(uuid.uuid4()),
            name=file_name,
            filename=file_name,
            owner_id=user_id,
            data=json.dumps(data, ensure_ascii=False),
            metadata=metadata.model_dump_json(by_alias=True),
            created_at=timestamp,
            updated_at=timestamp,
        )
        self.records[record.id] = record

        logger.info(f"✅ Análise criada com sucesso: {record.id}")
        return record

    def get_user_analyses(self, user_id: str) -> List[DatasetRecord]:
        """Análises do usuário, mais recentes primeiro"""
        analyses = [record for record in reversed(list(self.records.values())) if record.owner_id == user_id]
        analyses.sort(key=lambda record: record.created_at, reverse=True)
        logger.info(f"{len(analyses)} análises encontradas para usuário {user_id}")
        return analyses

    def get_analysis(self, analysis_id: str, user_id: str) -> DatasetRecord:
        """Buscar análise garantindo que pertence ao usuário"""
        record = self.records.get(analysis_id)
        if record is None or record.owner_id != user_id:
            raise AnalysisNotFoundError("Análise não encontrada")
        return record

    def generate_diagnostic(self, analysis_id: str, user_id: str) -> Diagnostico:
        """Gerar diagnóstico a partir do blob persistido da análise"""
        logger.info(f"🔍 Gerando diagnóstico para análise {analysis_id}")
        record = self.get_analysis(analysis_id, user_id)

        data = json.loads(record.data)
        metadata = json.loads(record.metadata or "{}")

        return self.engine.gerar_diagnostico(
            data.get("numericStats") or {},
            data.get("categoricalStats") or {},
            record.name,
            metadata.get("totalRows") or 0,
        )

    def delete_analysis(self, analysis_id: str, user_id: str) -> None:
        """Remover análise do usuário"""
        self.get_analysis(analysis_id, user_id)
        del self.records[analysis_id]
        logger.info(f"Análise deletada: {analysis_id}")

    def get_user_analytics_stats(self, user_id: str) -> Dict[str, Any]:
        """Estatísticas agregadas das análises do usuário"""
        analyses = self.get_user_analyses(user_id)
        total_analyses = len(analyses)
        total_rows = sum(
            json.loads(record.metadata or "{}").get("totalRows") or 0
            for record in analyses
        )

        return {
            "totalAnalyses": total_analyses,
            "totalDatasets": total_analyses,
            "averageRowsPerDataset": round(total_rows / total_analyses) if total_analyses else 0,
            "mostRecentAnalysis": analyses[0].created_at if analyses else None,
        }


# Instância global do serviço
analysis_service = AnalysisService()
