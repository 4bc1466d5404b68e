# assistencia/usecases/relatorios.py
"""
Relatórios da assistência:
- relatório gerencial por período (vendas, serviços, rankings, estoque baixo)
- painel do dia (dashboard)
- tabelas para exibição (colunas, linhas, mensagem)

Todas as funções são projeções puras do estado: sem dados no período, as
métricas ficam zeradas e as listas vazias (nunca há erro).
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from assistencia.config import TOP_N
from assistencia.domain.models import (
    AppState,
    Product,
    Sale,
    ServiceOrder,
    money,
    parse_iso,
)
from assistencia.domain.periodos import Periodo, resolver_periodo
from assistencia.infra.logger import log_system_event
from assistencia.usecases.ordens_servico import ordens_pendentes
from assistencia.usecases.produtos import produtos_estoque_baixo


@dataclass
class RelatorioGerencial:
    periodo: Periodo
    total_revenue: float = 0.0
    total_sales: int = 0
    average_ticket: float = 0.0
    payment_methods: Dict[str, int] = field(default_factory=dict)
    services_total: int = 0
    service_status: Dict[str, int] = field(default_factory=dict)
    service_revenue: float = 0.0
    top_products: List[Dict[str, Any]] = field(default_factory=list)
    top_customers: List[Dict[str, Any]] = field(default_factory=list)
    low_stock: List[Product] = field(default_factory=list)

    @property
    def grand_total(self) -> float:
        """Faturamento total: vendas + serviços."""
        return money(self.total_revenue + self.service_revenue)


@dataclass
class PainelDia:
    servicos_hoje: int
    vendas_hoje: int
    faturamento_hoje: float
    pendentes: List[ServiceOrder]
    estoque_baixo: List[Product]
    ordens_recentes: List[ServiceOrder]


# ----------------------
# util
# ----------------------

def _no_dia(created_at: str, hoje: date) -> bool:
    try:
        return parse_iso(created_at).date() == hoje
    except (TypeError, ValueError):
        return False


def _cronologico(created_at: str) -> datetime:
    try:
        return parse_iso(created_at)
    except (TypeError, ValueError):
        return datetime.min


def filtrar_por_periodo(registros: Sequence, periodo: Periodo) -> list:
    return [r for r in registros if periodo.contem(r.created_at)]


# ----------------------
# rankings
# ----------------------

def top_produtos(vendas: Sequence[Sale], n: int = TOP_N) -> List[Dict[str, Any]]:
    """Produtos mais vendidos por quantidade (empates na ordem em que aparecem)."""
    linhas = [
        {"id": i.product_id, "name": i.product_name, "quantity": i.quantity, "revenue": i.total}
        for s in vendas
        for i in s.items
    ]
    if not linhas:
        return []
    df = pd.DataFrame(linhas)
    agg = (
        df.groupby("id", sort=False)
        .agg(name=("name", "first"), quantity=("quantity", "sum"), revenue=("revenue", "sum"))
        .reset_index()
        .sort_values("quantity", ascending=False, kind="stable")
        .head(n)
    )
    return [
        {"id": r["id"], "name": r["name"], "quantity": int(r["quantity"]), "revenue": money(r["revenue"])}
        for r in agg.to_dict("records")
    ]


def top_clientes(vendas: Sequence[Sale], n: int = TOP_N) -> List[Dict[str, Any]]:
    """Clientes com maior faturamento (vendas sem cliente identificado são ignoradas)."""
    linhas = [
        {"id": s.customer_id, "name": s.customer_name, "revenue": s.total}
        for s in vendas
        if s.customer_id and s.customer_name
    ]
    if not linhas:
        return []
    df = pd.DataFrame(linhas)
    agg = (
        df.groupby("id", sort=False)
        .agg(name=("name", "first"), sales=("revenue", "count"), revenue=("revenue", "sum"))
        .reset_index()
        .sort_values("revenue", ascending=False, kind="stable")
        .head(n)
    )
    return [
        {"id": r["id"], "name": r["name"], "sales": int(r["sales"]), "revenue": money(r["revenue"])}
        for r in agg.to_dict("records")
    ]


# ----------------------
# 1) Relatório gerencial
# ----------------------

def relatorio_gerencial(
    state: AppState,
    periodo: str = "month",
    hoje: Optional[date] = None,
    inicio: Optional[date] = None,
    fim: Optional[date] = None,
) -> RelatorioGerencial:
    p = resolver_periodo(periodo, hoje=hoje, inicio=inicio, fim=fim)
    log_system_event("relatorio_gerencial_start", {"periodo": p.nome, "inicio": str(p.inicio), "fim": str(p.fim)})

    vendas = filtrar_por_periodo(state.sales, p)
    servicos = filtrar_por_periodo(state.service_orders, p)
    log_system_event("relatorio_gerencial_dados", {"vendas": len(vendas), "servicos": len(servicos)})

    total_revenue = money(sum(s.total for s in vendas))
    total_sales = len(vendas)
    rel = RelatorioGerencial(
        periodo=p,
        total_revenue=total_revenue,
        total_sales=total_sales,
        average_ticket=money(total_revenue / total_sales) if total_sales else 0.0,
        payment_methods=dict(Counter(s.payment_method for s in vendas)),
        services_total=len(servicos),
        service_status=dict(Counter(o.status for o in servicos)),
        service_revenue=money(sum(o.final_cost for o in servicos if o.final_cost)),
        top_products=top_produtos(vendas),
        top_customers=top_clientes(vendas),
        low_stock=produtos_estoque_baixo(state),
    )
    log_system_event("relatorio_gerencial_success", {
        "total_sales": rel.total_sales,
        "total_revenue": rel.total_revenue,
        "services_total": rel.services_total,
    })
    return rel


# ----------------------
# 2) Painel do dia
# ----------------------

def painel_do_dia(state: AppState, hoje: Optional[date] = None, recentes: int = 5) -> PainelDia:
    hoje = hoje or date.today()
    vendas = [s for s in state.sales if _no_dia(s.created_at, hoje)]
    recentes_ordens = sorted(state.service_orders, key=lambda o: _cronologico(o.created_at), reverse=True)
    return PainelDia(
        servicos_hoje=sum(1 for o in state.service_orders if _no_dia(o.created_at, hoje)),
        vendas_hoje=len(vendas),
        faturamento_hoje=money(sum(s.total for s in vendas)),
        pendentes=ordens_pendentes(state),
        estoque_baixo=produtos_estoque_baixo(state),
        ordens_recentes=recentes_ordens[:recentes],
    )


# ----------------------
# 3) Tabelas para exibição
# ----------------------

def tabela_top_produtos(rel: RelatorioGerencial) -> tuple[list[str], list[list], str | None]:
    """Retorna colunas, linhas e mensagem para exibição tabular."""
    columns = ["#", "Produto", "Vendidos", "Receita"]
    rows = [[i + 1, p["name"], p["quantity"], p["revenue"]] for i, p in enumerate(rel.top_products)]
    return columns, rows, None if rows else "Nenhuma venda no período"


def tabela_top_clientes(rel: RelatorioGerencial) -> tuple[list[str], list[list], str | None]:
    columns = ["#", "Cliente", "Compras", "Receita"]
    rows = [[i + 1, c["name"], c["sales"], c["revenue"]] for i, c in enumerate(rel.top_customers)]
    return columns, rows, None if rows else "Nenhum cliente com compras no período"


def tabela_estoque_baixo(produtos: Sequence[Product]) -> tuple[list[str], list[list], str | None]:
    columns = ["Produto", "Categoria", "Estoque", "Mínimo"]
    rows = [[p.name, p.category, p.stock, p.min_stock] for p in produtos]
    return columns, rows, None if rows else "Nenhum produto com estoque baixo"
