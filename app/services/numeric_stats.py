"""
Estatísticas descritivas para variáveis numéricas
"""
import math
from collections import Counter
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd
from scipy import stats

from app.models.analysis import NumericStats

# Método de interpolação dos quartis (Hyndman & Fan tipo 7, padrão do numpy/pandas)
QUARTILE_METHOD = "linear"
IQR_FENCE = 1.5


def _finite(value: Optional[float], default: Optional[float] = 0.0) -> Optional[float]:
    """Substitui NaN/infinito pelo valor padrão"""
    if value is None:
        return default
    value = float(value)
    return value if math.isfinite(value) else default


def calculate_mode(values: Sequence[float]) -> Optional[float]:
    """Valor mais frequente; empate resolvido pela primeira ocorrência. None se todos forem únicos"""
    if not values:
        return None
    value, frequency = Counter(values).most_common(1)[0]
    return value if frequency > 1 else None


def detect_outliers(values: Sequence[float], q1: float, q3: float) -> List[float]:
    """Valores fora da cerca [q1 - 1.5*IQR, q3 + 1.5*IQR], na ordem original"""
    iqr = q3 - q1
    lower_bound = q1 - IQR_FENCE * iqr
    upper_bound = q3 + IQR_FENCE * iqr
    return [value for value in values if value < lower_bound or value > upper_bound]


def compute_numeric_stats(values: Sequence[float], total_count: Optional[int] = None) -> NumericStats:
    """
    Calcular estatísticas de uma coluna numérica

    Args:
        values: Valores válidos (já convertidos para float)
        total_count: Total de células da coluna, incluindo ausentes

    Returns:
        NumericStats sem valores NaN/infinitos
    """
    clean = [float(v) for v in values if v is not None and math.isfinite(float(v))]
    n = len(clean)
    count = total_count if total_count is not None else n

    if n == 0:
        return NumericStats(count=count, valid_count=0, missing_count=count)

    series = pd.Series(clean, dtype="float64")
    mean = _finite(series.mean())
    median = _finite(series.median())

    # Variância populacional; com menos de 2 valores é zero
    variance = _finite(series.var(ddof=0)) if n >= 2 else 0.0
    std_dev = math.sqrt(variance)

    q1 = _finite(np.percentile(clean, 25, method=QUARTILE_METHOD))
    q3 = _finite(np.percentile(clean, 75, method=QUARTILE_METHOD))
    minimum = _finite(series.min())
    maximum = _finite(series.max())

    cv = _finite(std_dev / mean * 100, None) if mean != 0 else None

    skewness = None
    if n >= 2 and variance > 0:
        skewness = _finite(stats.skew(clean, bias=True), None)

    return NumericStats(
        count=count,
        valid_count=n,
        missing_count=max(count - n, 0),
        mean=mean,
        median=median,
        mode=calculate_mode(clean),
        std_dev=std_dev,
        variance=variance,
        min=minimum,
        max=maximum,
        range=_finite(maximum - minimum),
        q1=q1,
        q3=q3,
        iqr=_finite(q3 - q1),
        cv=cv,
        skewness=skewness,
        outliers=detect_outliers(clean, q1, q3),
    )
