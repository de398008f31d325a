"""
Diagnóstico zootécnico automático baseado em regras (sem IA)

Baseado em:
- EMBRAPA Gado de Corte - Parâmetros Zootécnicos
- NRC (National Research Council) - Nutrient Requirements
- Literatura científica consolidada
"""
import math
import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel

from app.models.diagnostico import (
    AnaliseCategorica, AnaliseNumerica, Diagnostico, Recomendacao, StatusBand
)
from app.services.indicator_matcher import normalize_column_name
from app.services.reference_rules import (
    CvThresholds, ReferenceRange, ReferenceRuleBase, default_rule_base
)

logger = logging.getLogger(__name__)

NUTRITION_KEYWORDS = ("peso", "gpd", "ganho")
ANALISE_DETALHADA = "Valor requer análise mais detalhada."

StatsInput = Union[BaseModel, Mapping[str, Any]]


def _as_dict(stats: StatsInput) -> Dict[str, Any]:
    """Aceita modelos ou dicionários persistidos (chaves camelCase)"""
    if isinstance(stats, BaseModel):
        return stats.model_dump(by_alias=True)
    if isinstance(stats, Mapping):
        return dict(stats)
    return {}


def _to_float(value: Any) -> Optional[float]:
    """Converte números ou strings decimais pré-formatadas; None se inválido"""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _display(raw: Any, parsed: Optional[float]) -> str:
    """Texto exibido no relatório: mantém strings já formatadas"""
    if isinstance(raw, str):
        return raw
    if parsed is None:
        return "N/A"
    return f"{parsed:.2f}"


def _format_limit(value: float) -> str:
    return f"{value:g}"


def avaliar_status(valor: float, ref: ReferenceRange) -> Tuple[StatusBand, str]:
    """
    Classifica um valor na faixa de referência do indicador

    ideal_min <= v <= ideal_max  -> Excelente
    min <= v < ideal_min         -> Bom
    ideal_max < v <= max         -> Regular
    v < min ou v > max           -> Preocupante
    """
    if ref.has_ideal_range:
        ideal = f"{_format_limit(ref.ideal_min)}-{_format_limit(ref.ideal_max)}"
        if ref.ideal_min <= valor <= ref.ideal_max:
            return StatusBand.EXCELENTE, f"Valor dentro da faixa ideal ({ideal})."
        if ref.min <= valor < ref.ideal_min:
            return StatusBand.BOM, f"Valor aceitável, mas abaixo do ideal ({ideal})."
        if ref.ideal_max < valor <= ref.max:
            return StatusBand.REGULAR, f"Valor acima do ideal, mas ainda aceitável ({ideal})."
        if valor < ref.min or valor > ref.max:
            limites = f"{_format_limit(ref.min)}-{_format_limit(ref.max)}"
            return StatusBand.PREOCUPANTE, f"Valor fora dos limites aceitáveis ({limites})."
    return StatusBand.REGULAR, ANALISE_DETALHADA


def classificar_cv(cv: float, thresholds: CvThresholds) -> StatusBand:
    """Classifica a uniformidade pelo coeficiente de variação (%)"""
    if cv < thresholds.excelente:
        return StatusBand.EXCELENTE
    if cv < thresholds.bom:
        return StatusBand.BOM
    if cv < thresholds.regular:
        return StatusBand.REGULAR
    return StatusBand.PREOCUPANTE


class DiagnosticRuleEngine:
    """Motor de regras que gera o diagnóstico a partir das estatísticas"""

    def __init__(self, rule_base: ReferenceRuleBase = default_rule_base):
        self.rule_base = rule_base

    def gerar_diagnostico(
        self,
        numeric_stats: Mapping[str, StatsInput],
        categorical_stats: Optional[Mapping[str, StatsInput]],
        dataset_name: str,
        total_rows: int
    ) -> Diagnostico:
        """
        Gerar diagnóstico zootécnico

        Args:
            numeric_stats: coluna -> NumericStats (ou dicionário persistido)
            categorical_stats: coluna -> CategoricalStats (ou dicionário)
            dataset_name: Nome exibido do dataset
            total_rows: Total de registros do dataset

        Returns:
            Diagnostico com análises, pontos fortes/atenção e recomendações
        """
        numeric_stats = numeric_stats or {}
        categorical_stats = categorical_stats or {}

        analise_numericas: List[AnaliseNumerica] = []
        pontos_fortes: List[str] = []
        pontos_atencao: List[str] = []
        fontes: Dict[str, None] = {}
        excelentes = 0
        problematicas = 0

        for variavel, raw_stats in numeric_stats.items():
            stats = _as_dict(raw_stats)
            _, ref = self.rule_base.lookup(variavel)

            indicador = ref is not None and ref.has_ideal_range
            if indicador:
                analise, fonte = self._avaliar_indicador(variavel, stats, ref, pontos_fortes, pontos_atencao)
            else:
                analise, fonte = self._avaliar_uniformidade(variavel, stats, pontos_atencao)

            if fonte:
                fontes.setdefault(fonte, None)
            # Excelente só conta para indicadores com referência; Preocupante conta sempre
            if analise.status == StatusBand.EXCELENTE and indicador:
                excelentes += 1
            elif analise.status == StatusBand.PREOCUPANTE:
                problematicas += 1
            analise_numericas.append(analise)

        analise_categoricas = [
            self._resumir_categorica(variavel, _as_dict(raw_stats))
            for variavel, raw_stats in categorical_stats.items()
        ]

        recomendacoes = self._gerar_recomendacoes(problematicas, pontos_atencao)
        total_numericas = len(numeric_stats)
        registros = f"{total_rows:,}".replace(",", ".")

        resumo_executivo = (
            f'Análise técnica de {registros} registros do dataset "{dataset_name}". '
            f"Avaliadas {total_numericas} variáveis numéricas com base em referências zootécnicas. "
            f"Resultado: {excelentes} excelente(s), {problematicas} necessita(m) intervenção."
        )

        if excelentes > problematicas * 2:
            conclusao = (
                f"O sistema/rebanho avaliado (n={total_rows}) apresenta desempenho satisfatório. "
                "As boas práticas atuais devem ser mantidas."
            )
        else:
            conclusao = (
                f"O sistema/rebanho avaliado (n={total_rows}) apresenta indicadores dentro da média. "
                "Implementar as recomendações pode resultar em ganhos de produtividade."
            )

        logger.info(
            f"✅ Diagnóstico gerado para '{dataset_name}': {total_numericas} numéricas, "
            f"{excelentes} excelente(s), {problematicas} preocupante(s)"
        )

        return Diagnostico(
            resumo_executivo=resumo_executivo,
            analise_numericas=analise_numericas,
            analise_categoricas=analise_categoricas,
            pontos_fortes=pontos_fortes or ["Dados organizados e analisáveis"],
            pontos_atencao=pontos_atencao or ["Continuar monitoramento dos indicadores"],
            recomendacoes_prioritarias=recomendacoes,
            conclusao=conclusao,
            fontes=list(fontes),
        )

    def _avaliar_indicador(
        self,
        variavel: str,
        stats: Dict[str, Any],
        ref: ReferenceRange,
        pontos_fortes: List[str],
        pontos_atencao: List[str]
    ) -> Tuple[AnaliseNumerica, Optional[str]]:
        """Compara a média com a faixa de referência da literatura"""
        mean = _to_float(stats.get("mean"))
        media = _display(stats.get("mean"), mean)

        if mean is None:
            return AnaliseNumerica(
                variavel=variavel,
                interpretacao=f"Média de {media}: {ANALISE_DETALHADA}",
                comparacao_literatura="Dados insuficientes para comparação com a literatura.",
                status=StatusBand.REGULAR,
            ), None

        status, interpretacao = avaliar_status(mean, ref)
        if status == StatusBand.EXCELENTE:
            pontos_fortes.append(f"{variavel}: {media} (Excelente)")
        elif status == StatusBand.PREOCUPANTE:
            pontos_atencao.append(f"{variavel}: {media} (Necessita atenção)")

        return AnaliseNumerica(
            variavel=variavel,
            interpretacao=f"Média de {media}: {interpretacao}",
            comparacao_literatura=f"Referência: {ref.fonte}",
            status=status,
        ), ref.fonte

    def _avaliar_uniformidade(
        self,
        variavel: str,
        stats: Dict[str, Any],
        pontos_atencao: List[str]
    ) -> Tuple[AnaliseNumerica, Optional[str]]:
        """Variável sem referência: classificação pelo CV"""
        thresholds = self.rule_base.cv_thresholds
        media = _display(stats.get("mean"), _to_float(stats.get("mean")))
        cv = _to_float(stats.get("cv"))

        if cv is None:
            return AnaliseNumerica(
                variavel=variavel,
                interpretacao=f"Média de {media}: coeficiente de variação indisponível. {ANALISE_DETALHADA}",
                comparacao_literatura="CV% não calculável para esta variável.",
                status=StatusBand.REGULAR,
            ), None

        cv_texto = _display(stats.get("cv"), cv)
        status = classificar_cv(cv, thresholds)
        excelente = _format_limit(thresholds.excelente)
        bom = _format_limit(thresholds.bom)
        regular = _format_limit(thresholds.regular)

        if status == StatusBand.EXCELENTE:
            interpretacao = f"Média de {media} com excelente uniformidade (CV={cv_texto}%)."
            comparacao = f"CV% < {excelente}% indica lote muito uniforme."
        elif status == StatusBand.BOM:
            interpretacao = f"Média de {media} com boa uniformidade (CV={cv_texto}%)."
            comparacao = f"CV% < {bom}% é aceitável."
        elif status == StatusBand.REGULAR:
            interpretacao = f"Média de {media} com variação moderada (CV={cv_texto}%)."
            comparacao = f"CV% entre {bom}-{regular}% sugere lote heterogêneo."
            pontos_atencao.append(f"{variavel}: alta variação (CV={cv_texto}%)")
        else:
            interpretacao = f"Média de {media} com variação muito alta (CV={cv_texto}%)."
            comparacao = f"CV% > {regular}% indica problemas de uniformidade."
            pontos_atencao.append(f"{variavel}: variação crítica (CV={cv_texto}%)")

        return AnaliseNumerica(
            variavel=variavel,
            interpretacao=interpretacao,
            comparacao_literatura=comparacao,
            status=status,
        ), thresholds.fonte

    @staticmethod
    def _resumir_categorica(variavel: str, stats: Dict[str, Any]) -> AnaliseCategorica:
        # Registros antigos usam 'uniqueValues'
        unique = stats.get("unique", stats.get("uniqueValues")) or 0
        mode = stats.get("mode") or "N/A"
        return AnaliseCategorica(
            variavel=variavel,
            interpretacao=f"Identificadas {unique} categorias distintas.",
            distribuicao=f"Categoria mais frequente: {mode}",
        )

    @staticmethod
    def _gerar_recomendacoes(problematicas: int, pontos_atencao: List[str]) -> List[Recomendacao]:
        recomendacoes: List[Recomendacao] = []

        if problematicas > 0:
            recomendacoes.append(Recomendacao(
                prioridade=1,
                titulo="Corrigir Indicadores Críticos",
                descricao='Focar nas variáveis identificadas como "Preocupante" na análise.',
                justificativa=f"{problematicas} indicador(es) estão fora dos padrões recomendados.",
            ))

        if any(
            keyword in normalize_column_name(ponto)
            for ponto in pontos_atencao
            for keyword in NUTRITION_KEYWORDS
        ):
            recomendacoes.append(Recomendacao(
                prioridade=2,
                titulo="Revisar Programa Nutricional",
                descricao="Avaliar qualidade e quantidade de alimentos fornecidos.",
                justificativa="Indicadores de peso/ganho abaixo do esperado sugerem deficiências nutricionais.",
            ))

        recomendacoes.append(Recomendacao(
            prioridade=len(recomendacoes) + 1,
            titulo="Estabelecer Protocolo de Monitoramento",
            descricao="Realizar avaliações periódicas dos principais indicadores.",
            justificativa="Acompanhamento contínuo permite ajustes rápidos.",
        ))
        return recomendacoes


# Motor padrão com a tabela de referências da aplicação
diagnostic_engine = DiagnosticRuleEngine()
