"""
Resolução de períodos para relatórios.

Períodos suportados:
- ``today``  → apenas a data de hoje
- ``week``   → de hoje - 7 dias até hoje
- ``month``  → mês civil que contém hoje
- ``custom`` → início/fim informados (padrão: últimos 30 dias)

A pertinência compara somente a data civil local de ``created_at``, com
ambos os extremos inclusivos (o fim vale até o final do dia).
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

from assistencia.domain.models import parse_iso


PERIODOS = ("today", "week", "month", "custom")

PERIODO_LABELS = {
    "today": "Hoje",
    "week": "Última Semana",
    "month": "Este Mês",
}


@dataclass(frozen=True)
class Periodo:
    nome: str
    inicio: date
    fim: date

    def contem(self, created_at: str) -> bool:
        try:
            d = parse_iso(created_at).date()
        except (TypeError, ValueError):
            return False
        return self.inicio <= d <= self.fim

    @property
    def label(self) -> str:
        if self.nome in PERIODO_LABELS:
            return PERIODO_LABELS[self.nome]
        return f"{self.inicio:%d/%m/%Y} - {self.fim:%d/%m/%Y}"


def resolver_periodo(
    nome: str,
    hoje: Optional[date] = None,
    inicio: Optional[date] = None,
    fim: Optional[date] = None,
) -> Periodo:
    """Converte o nome do período em um intervalo de datas inclusivo."""
    hoje = hoje or date.today()
    if nome == "today":
        return Periodo(nome, hoje, hoje)
    if nome == "week":
        return Periodo(nome, hoje - timedelta(days=7), hoje)
    if nome == "month":
        ultimo = calendar.monthrange(hoje.year, hoje.month)[1]
        return Periodo(nome, hoje.replace(day=1), hoje.replace(day=ultimo))
    if nome == "custom":
        return Periodo(nome, inicio or (hoje - timedelta(days=30)), fim or hoje)
    raise ValueError(f"Período inválido: {nome} (use: {', '.join(PERIODOS)})")
