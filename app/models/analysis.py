"""
Modelos para análise de dados zootécnicos
"""
import json
from enum import Enum
from typing import Dict, List, Optional, Any, Union
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class VariableType(str, Enum):
    """Classificação semântica da variável"""
    QUANTITATIVA_CONTINUA = "Quantitativa Contínua"
    QUANTITATIVA_DISCRETA = "Quantitativa Discreta"
    QUALITATIVA_NOMINAL = "Qualitativa Nominal"
    # Nunca inferida automaticamente; exige configuração explícita
    QUALITATIVA_ORDINAL = "Qualitativa Ordinal"


class DetectedType(str, Enum):
    """Tipo primitivo detectado na amostra"""
    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    DATE = "date"


class CamelModel(BaseModel):
    """Base dos modelos serializados em camelCase (formato persistido)"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        frozen = True


class VariableInfo(CamelModel):
    """Classificação de uma coluna do dataset"""
    name: str
    type: VariableType
    detected_type: DetectedType
    has_decimals: bool = False
    unique_values: int = 0
    null_count: int = 0
    valid_count: int = 0
    is_zootechnical: bool = False
    category: Optional[str] = None
    sample_values: List[Union[float, str]] = Field(default_factory=list)


class NumericStats(CamelModel):
    """Estatísticas descritivas de uma coluna numérica"""
    count: int = 0
    valid_count: int = 0
    missing_count: int = 0
    mean: float = 0.0
    median: float = 0.0
    mode: Optional[float] = None
    std_dev: float = 0.0
    variance: float = 0.0
    min: float = 0.0
    max: float = 0.0
    range: float = 0.0
    q1: float = 0.0
    q3: float = 0.0
    iqr: float = 0.0
    # None quando a média é zero (CV indefinido)
    cv: Optional[float] = None
    skewness: Optional[float] = None
    outliers: List[float] = Field(default_factory=list)


class CategoricalStats(CamelModel):
    """Estatísticas de uma coluna categórica"""
    count: int = 0
    valid_count: int = 0
    missing_count: int = 0
    unique: int = 0
    frequencies: Dict[str, int] = Field(default_factory=dict)
    # Percentual de cada categoria sobre os valores válidos
    distribution: Dict[str, float] = Field(default_factory=dict)
    entropy: float = 0.0
    mode: Optional[str] = None


class DatasetAnalysisResult(CamelModel):
    """Resultado completo da análise de um dataset"""
    variables_info: Dict[str, VariableInfo] = Field(default_factory=dict)
    numeric_stats: Dict[str, NumericStats] = Field(default_factory=dict)
    categorical_stats: Dict[str, CategoricalStats] = Field(default_factory=dict)
    total_rows: int = 0
    total_columns: int = 0
    zootechnical_variables: List[str] = Field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Representação JSON-compatível (chaves camelCase)"""
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self) -> str:
        """Serialização determinística usada na persistência"""
        return json.dumps(self.to_dict(), ensure_ascii=False)


class DatasetMetadata(CamelModel):
    """Metadados persistidos junto ao dataset"""
    uploaded_by: str
    uploaded_at: str
    file_size: int = 0
    total_rows: int = 0
    total_columns: int = 0
    valid_rows: int = 0
    zootechnical_count: int = 0


class DatasetRecord(CamelModel):
    """Registro de dataset com os blobs JSON persistidos"""
    id: str
    name: str
    filename: str
    status: str = "VALIDATED"
    owner_id: str
    data: str
    metadata: str
    created_at: str
    updated_at: str

    def to_dto(self) -> Dict[str, Any]:
        """Converte o registro para o formato de resposta da API"""
        return {
            "id": self.id,
            "name": self.name,
            "filename": self.filename,
            "status": self.status,
            "data": json.loads(self.data),
            "metadata": json.loads(self.metadata or "{}"),
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
