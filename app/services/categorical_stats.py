"""
Estatísticas para variáveis categóricas
"""
from collections import Counter
from typing import Optional, Sequence

from scipy import stats

from app.models.analysis import CategoricalStats


def shannon_entropy(counts: Sequence[int]) -> float:
    """Entropia de Shannon em bits; zero para uma única categoria ou sem dados"""
    if len(counts) <= 1:
        return 0.0
    return float(stats.entropy(list(counts), base=2))


def compute_categorical_stats(values: Sequence[str], total_count: Optional[int] = None) -> CategoricalStats:
    """
    Calcular estatísticas de uma coluna categórica

    Frequências são exatas e sensíveis a maiúsculas. A moda em caso de empate
    é a categoria que aparece primeiro nos dados.
    """
    n = len(values)
    count = total_count if total_count is not None else n
    frequencies = Counter(values)

    mode = frequencies.most_common(1)[0][0] if n else None
    distribution = {
        value: round(frequency / n * 100, 2)
        for value, frequency in frequencies.items()
    }

    return CategoricalStats(
        count=count,
        valid_count=n,
        missing_count=max(count - n, 0),
        unique=len(frequencies),
        frequencies=dict(frequencies),
        distribution=distribution,
        entropy=shannon_entropy(list(frequencies.values())),
        mode=mode,
    )
