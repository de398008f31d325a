"""
Valores de referência zootécnicos
Fontes: EMBRAPA, NRC, ASBIA, literatura científica consolidada
"""
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from app.models.analysis import CamelModel
from app.services.indicator_matcher import IndicatorType, identify_indicator_type


class ReferenceRange(CamelModel):
    """Faixa de referência de um indicador (min <= ideal_min <= ideal_max <= max)"""
    min: float
    ideal_min: Optional[float] = None
    ideal_max: Optional[float] = None
    max: float
    fonte: str

    @property
    def has_ideal_range(self) -> bool:
        return self.ideal_min is not None and self.ideal_max is not None


class CvThresholds(CamelModel):
    """Limites de CV (%) para classificação de uniformidade"""
    excelente: float = 15
    bom: float = 25
    regular: float = 35
    fonte: str = "Análise Estatística Aplicada à Zootecnia"


@dataclass(frozen=True)
class ReferenceRuleBase:
    """Tabela imutável de referências, construída uma vez e injetada no motor"""
    ranges: Mapping[IndicatorType, ReferenceRange]
    cv_thresholds: CvThresholds = field(default_factory=CvThresholds)

    def __post_init__(self):
        # Impede mutação da tabela depois de construída
        object.__setattr__(self, "ranges", MappingProxyType(dict(self.ranges)))

    def lookup(self, name: str) -> Tuple[IndicatorType, Optional[ReferenceRange]]:
        """Indicador e faixa de referência para o nome da coluna"""
        indicator = identify_indicator_type(name)
        return indicator, self.ranges.get(indicator)

    def to_dict(self) -> Dict[str, Any]:
        table = {
            indicator.value: ref.model_dump(mode="json", by_alias=True)
            for indicator, ref in self.ranges.items()
        }
        table["cv_aceitavel"] = self.cv_thresholds.model_dump(mode="json", by_alias=True)
        return table


def build_default_rule_base() -> ReferenceRuleBase:
    """Tabela padrão de referências zootécnicas (bovinos de corte)"""
    return ReferenceRuleBase(
        ranges={
            IndicatorType.PESO_NASCIMENTO: ReferenceRange(
                min=28, ideal_min=30, ideal_max=38, max=45,
                fonte="EMBRAPA Gado de Corte (2020)",
            ),
            IndicatorType.PESO_DESMAME: ReferenceRange(
                min=160, ideal_min=180, ideal_max=250, max=280,
                fonte="Manual Brasileiro de Boas Práticas Agropecuárias",
            ),
            IndicatorType.GPD: ReferenceRange(
                min=0.4, ideal_min=0.8, ideal_max=1.4, max=1.8,
                fonte="NRC - Nutrient Requirements of Beef Cattle",
            ),
            IndicatorType.CONVERSAO_ALIMENTAR: ReferenceRange(
                min=5, ideal_min=6, ideal_max=9, max=12,
                fonte="Manual de Confinamento ASBIA",
            ),
            IndicatorType.TAXA_NASCIMENTO: ReferenceRange(
                min=70, ideal_min=85, ideal_max=95, max=100,
                fonte="EMBRAPA - Índices Reprodutivos",
            ),
        },
        cv_thresholds=CvThresholds(),
    )


# Instância padrão, somente leitura
default_rule_base = build_default_rule_base()
