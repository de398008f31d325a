"""
Gerador de dados zootécnicos de exemplo
Cria planilhas CSV com dados realistas para demonstração
"""
import csv
import io
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

RACAS = ['Nelore', 'Angus', 'Brahman', 'Simental', 'Hereford', 'Gir', 'Guzerá', 'Caracu']
SEXO = ['Macho', 'Fêmea']
ESTADOS = ['MT', 'MS', 'GO', 'SP', 'MG', 'RS', 'PR', 'BA']
CATEGORIAS = ['Bezerro', 'Recria', 'Terminação', 'Reprodução']
MESES = ['Janeiro', 'Fevereiro', 'Março', 'Abril', 'Maio', 'Junho', 'Julho',
         'Agosto', 'Setembro', 'Outubro', 'Novembro', 'Dezembro']

# categoria -> (peso nascimento, peso desmame, peso atual, idade em meses)
FAIXAS_POR_CATEGORIA = {
    'Bezerro': ((28, 38), (160, 200), (200, 280), (3, 8)),
    'Recria': ((28, 38), (180, 220), (280, 380), (8, 18)),
    'Terminação': ((30, 40), (190, 230), (450, 550), (18, 30)),
    'Reprodução': ((30, 38), (180, 220), (450, 550), (30, 72)),
}
PESO_REPRODUTOR_MACHO = (700, 900)
MISSING_PROBABILITY = 0.05


class _SampleBuilder:
    """Sorteios reprodutíveis a partir de uma semente"""

    def __init__(self, seed: Optional[int], missing_probability: float):
        self.rng = np.random.default_rng(seed)
        self.missing_probability = missing_probability

    def between(self, bounds: Sequence[float], decimals: int = 2) -> float:
        value = round(float(self.rng.uniform(bounds[0], bounds[1])), decimals)
        return int(value) if decimals == 0 else value

    def choice(self, options: Sequence[str]) -> str:
        return options[int(self.rng.integers(len(options)))]

    def possibly_null(self, value: Any) -> Any:
        if self.missing_probability and self.rng.random() < self.missing_probability:
            return ''
        return value


def generate_test_data(
    rows: int = 100,
    include_numeric: bool = True,
    include_categorical: bool = True,
    include_missing: bool = False,
    seed: Optional[int] = None
) -> List[Dict[str, Any]]:
    """
    Gera dataset de bovinos de corte com valores realistas

    Args:
        rows: Quantidade de animais
        include_numeric: Incluir pesos, ganhos e medidas
        include_categorical: Incluir raça, sexo, categoria etc.
        include_missing: Deixar ~5% das células em branco
        seed: Semente para resultados reprodutíveis

    Returns:
        Lista de linhas (coluna -> valor)
    """
    builder = _SampleBuilder(seed, MISSING_PROBABILITY if include_missing else 0.0)
    maybe = builder.possibly_null
    data = []

    for i in range(1, rows + 1):
        sexo = builder.choice(SEXO)
        raca = builder.choice(RACAS)
        categoria = builder.choice(CATEGORIAS)
        nasc, desmame, atual, idade = FAIXAS_POR_CATEGORIA[categoria]
        if categoria == 'Reprodução' and sexo == 'Macho':
            atual = PESO_REPRODUTOR_MACHO

        row: Dict[str, Any] = {
            'ID': f"A{i:05d}",
            'ANIMAL': f"BOV{i:04d}",
        }

        if include_categorical:
            row['RACA'] = maybe(raca)
            row['SEXO'] = maybe(sexo)
            row['CATEGORIA'] = maybe(categoria)
            row['ESTADO'] = maybe(builder.choice(ESTADOS))
            row['MES'] = maybe(builder.choice(MESES))
            row['TRIMESTRE'] = maybe(f"Q{int(builder.rng.integers(1, 5))}")

        if include_numeric:
            row['ANO'] = maybe(builder.between((2023, 2025), 0))
            row['PESO_NASCIMENTO_KG'] = maybe(builder.between(nasc, 1))
            row['PESO_DESMAME_KG'] = maybe(builder.between(desmame, 1))
            row['PESO_ATUAL_KG'] = maybe(builder.between(atual, 1))
            row['IDADE_MESES'] = maybe(builder.between(idade, 0))
            row['GPD'] = maybe(builder.between((0.6, 1.3), 3))
            row['CA'] = maybe(builder.between((6, 10), 2))
            row['RENDIMENTO_CARCACA'] = maybe(builder.between((48, 56), 1))
            row['ESCORE_CORPORAL'] = maybe(builder.between((2.5, 4.5), 1))
            row['ALTURA_GARUPA_CM'] = maybe(builder.between((120, 150), 1))

        data.append(row)

    return data


def convert_to_csv(data: List[Dict[str, Any]]) -> str:
    """Converte linhas em CSV; cabeçalho a partir da primeira linha"""
    if not data:
        return ''

    headers = list(data[0].keys())
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator='\n')
    writer.writerow(headers)
    for row in data:
        writer.writerow([
            '' if row.get(header) is None else row.get(header)
            for header in headers
        ])
    return buffer.getvalue()
