"""
Serviço de análise de datasets zootécnicos
Orquestra inferência de tipos e estatísticas descritivas por coluna
"""
import io
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

import pandas as pd

from app.core.config import settings
from app.models.analysis import (
    CategoricalStats, DatasetAnalysisResult, DetectedType,
    NumericStats, VariableInfo, VariableType
)
from app.services.cell_values import parse_cell
from app.services.categorical_stats import compute_categorical_stats
from app.services.numeric_stats import compute_numeric_stats
from app.services.type_inference import infer_variable_info, valid_values

logger = logging.getLogger(__name__)

CSV_SEPARATORS = [';', ',', '\t', '|']
CSV_ENCODINGS = ['utf-8', 'latin-1', 'cp1252']
CSV_SEPARATOR_SAMPLE_SIZE = 64 * 1024


class DataAnalyzer:
    """Analisador de datasets: linhas brutas -> DatasetAnalysisResult"""

    def __init__(self, sample_size: Optional[int] = None):
        self.sample_size = sample_size or settings.type_inference_sample_size

    @staticmethod
    def collect_columns(rows: Sequence[Mapping[str, Any]]) -> List[str]:
        """União das chaves de todas as linhas, na ordem de primeira aparição"""
        columns: Dict[str, None] = {}
        for row in rows:
            for key in row.keys():
                columns.setdefault(key, None)
        return list(columns)

    def analyze(self, rows: Sequence[Mapping[str, Any]]) -> DatasetAnalysisResult:
        """
        Analisar um dataset completo

        Args:
            rows: Linhas do dataset (coluna -> valor bruto); linhas podem ter
                formatos irregulares

        Returns:
            Resultado com informações e estatísticas por coluna
        """
        columns = self.collect_columns(rows)
        total_rows = len(rows)

        variables_info: Dict[str, VariableInfo] = {}
        numeric_stats: Dict[str, NumericStats] = {}
        categorical_stats: Dict[str, CategoricalStats] = {}

        for column in columns:
            try:
                cells = [parse_cell(row.get(column)) for row in rows]
                info = infer_variable_info(column, cells, self.sample_size)
                values = valid_values(cells, info.detected_type)

                if info.detected_type == DetectedType.NUMBER:
                    numeric_stats[column] = compute_numeric_stats(values, total_rows)
                else:
                    categorical_stats[column] = compute_categorical_stats(values, total_rows)
                variables_info[column] = info

            except Exception as e:
                logger.warning(f"⚠️ Erro ao processar coluna {column}: {e}")
                # Coluna registrada como vazia para não interromper a análise
                variables_info[column] = VariableInfo(
                    name=column,
                    type=VariableType.QUALITATIVA_NOMINAL,
                    detected_type=DetectedType.STRING,
                    null_count=total_rows,
                )
                categorical_stats[column] = CategoricalStats(count=total_rows, missing_count=total_rows)

        zootechnical_variables = [
            name for name, info in variables_info.items() if info.is_zootechnical
        ]

        logger.info(
            f"📊 Dataset analisado: {total_rows} linhas, {len(columns)} colunas "
            f"({len(numeric_stats)} numéricas, {len(categorical_stats)} categóricas, "
            f"{len(zootechnical_variables)} zootécnicas)"
        )

        return DatasetAnalysisResult(
            variables_info=variables_info,
            numeric_stats=numeric_stats,
            categorical_stats=categorical_stats,
            total_rows=total_rows,
            total_columns=len(columns),
            zootechnical_variables=zootechnical_variables,
        )

    def detect_csv_separator(self, file_content: bytes) -> str:
        """
        Detecta automaticamente o separador do CSV usando apenas uma amostra pequena

        Args:
            file_content: Conteúdo do arquivo em bytes

        Returns:
            Separador detectado
        """
        sample_content = file_content[:CSV_SEPARATOR_SAMPLE_SIZE]

        try:
            text_content = sample_content.decode('utf-8')
        except UnicodeDecodeError:
            text_content = sample_content.decode('latin-1')

        lines = [line for line in text_content.splitlines() if line.strip()][:5]
        if not lines:
            return ','

        best_separator = ','
        max_columns = 1
        sample_lines = '\n'.join(lines)

        for sep in CSV_SEPARATORS:
            try:
                df_test = pd.read_csv(io.StringIO(sample_lines), sep=sep, nrows=3)
            except (pd.errors.ParserError, pd.errors.EmptyDataError):
                continue

            num_columns = len(df_test.columns)
            if num_columns > max_columns:
                # Nomes de coluna muito longos indicam separador errado
                max_col_name_length = max(len(str(col)) for col in df_test.columns)
                if max_col_name_length < 100:
                    max_columns = num_columns
                    best_separator = sep

        logger.info(f"🔍 Separador detectado: '{best_separator}' (resultou em {max_columns} colunas)")
        return best_separator

    def load_rows_from_csv(self, file_content: bytes) -> List[Dict[str, Any]]:
        """
        Converter um CSV em linhas (coluna -> valor bruto)

        Células vazias viram None. Todos os valores chegam como texto; a
        conversão numérica fica a cargo da análise.
        """
        if not file_content or not file_content.strip():
            raise ValueError("Arquivo está vazio")

        separator = self.detect_csv_separator(file_content)

        for encoding in CSV_ENCODINGS:
            try:
                df = pd.read_csv(
                    io.BytesIO(file_content),
                    sep=separator,
                    encoding=encoding,
                    dtype=str,
                    skipinitialspace=True,
                )
                logger.info(f"✅ CSV carregado com encoding '{encoding}': {len(df)} linhas, {len(df.columns)} colunas")
                break
            except UnicodeDecodeError:
                continue
            except pd.errors.EmptyDataError:
                raise ValueError("Arquivo está vazio")
            except pd.errors.ParserError as e:
                raise ValueError(f"Erro ao ler CSV: {e}")
        else:
            raise ValueError("Não foi possível decodificar o arquivo CSV")

        df.columns = [str(col).strip() for col in df.columns]
        df = df.astype(object).where(pd.notna(df), None)
        return df.to_dict(orient="records")


# Instância global do analisador
data_analyzer = DataAnalyzer()
