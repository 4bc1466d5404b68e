# assistencia/usecases/documentos.py
"""
Geração de documentos em texto:
- recibo de venda
- ordem de serviço (com cabeçalho da empresa e termos de garantia, se informados)
- relatório gerencial
- página HTML simples para impressão de qualquer um dos textos acima

Convenção: seções com cabeçalho ``=== SEÇÃO ===`` e valores em ``R$ x.xx``.
"""

from __future__ import annotations

import html
from datetime import datetime
from typing import Optional

from assistencia.config import TOP_N_IMPRESSO, CompanySettings, SystemSettings
from assistencia.domain.models import PAYMENT_LABELS, STATUS_LABELS, Sale, ServiceOrder, parse_iso
from assistencia.usecases.relatorios import RelatorioGerencial


# no relatório gerencial os status aparecem no plural
REPORT_STATUS_LABELS = {
    "analyzing": "Em Análise",
    "repairing": "Em Reparo",
    "completed": "Finalizados",
    "delivered": "Entregues",
}


def brl(valor: float) -> str:
    return f"R$ {valor:.2f}"


def data_hora(ts) -> str:
    try:
        dt = ts if isinstance(ts, datetime) else parse_iso(ts)
    except (TypeError, ValueError):
        return str(ts)
    return f"{dt:%d/%m/%Y} às {dt:%H:%M}"


def gerar_recibo_venda(venda: Sale) -> str:
    linhas = ["=== RECIBO DE VENDA ===", ""]
    linhas.append(f"Data: {data_hora(venda.created_at)}")
    if venda.customer_name:
        linhas.append(f"Cliente: {venda.customer_name}")
    linhas.append(f"Pagamento: {PAYMENT_LABELS.get(venda.payment_method, venda.payment_method)}")
    linhas += ["", "=== ITENS ==="]
    for item in venda.items:
        linhas.append(item.product_name)
        linhas.append(f"  Qtd: {item.quantity} x {brl(item.unit_price)}")
        linhas.append(f"  Total: {brl(item.total)}")
        linhas.append("")
    linhas += [
        "==================",
        f"TOTAL: {brl(venda.total)}",
        "==================",
        "",
        "Obrigado pela preferência!",
    ]
    return "\n".join(linhas)


def gerar_ordem_servico(
    ordem: ServiceOrder,
    empresa: Optional[CompanySettings] = None,
    sistema: Optional[SystemSettings] = None,
) -> str:
    """Texto da ordem de serviço.

    Com ``empresa``, o documento ganha o cabeçalho da empresa; com
    ``sistema``, a seção de termos usa o prazo de garantia configurado.
    """
    linhas = []
    if empresa is not None:
        linhas.append(empresa.name or CompanySettings().name)
        if empresa.address:
            linhas.append(empresa.address)
        if empresa.phone:
            linhas.append(f"Tel: {empresa.phone}")
        if empresa.email:
            linhas.append(f"Email: {empresa.email}")
        if empresa.cnpj:
            linhas.append(f"CNPJ: {empresa.cnpj}")
        linhas.append("")

    linhas += ["=== ORDEM DE SERVIÇO ===", ""]
    linhas.append(f"Nº: {ordem.numero}")
    linhas += [f"Data: {data_hora(ordem.created_at)}", ""]
    linhas += ["=== CLIENTE ===", f"Nome: {ordem.customer_name}", ""]
    linhas += ["=== EQUIPAMENTO ===", f"Aparelho: {ordem.device}", f"Problema: {ordem.issue}", ""]
    linhas += ["=== STATUS ===", f"Status: {STATUS_LABELS.get(ordem.status, ordem.status)}"]
    if ordem.estimated_cost:
        linhas.append(f"Orçamento: {brl(ordem.estimated_cost)}")
    if ordem.final_cost:
        linhas.append(f"Valor Final: {brl(ordem.final_cost)}")
    if ordem.completed_at:
        linhas.append(f"Concluído em: {data_hora(ordem.completed_at)}")
    if ordem.notes:
        linhas += ["", "=== OBSERVAÇÕES ===", ordem.notes]
    if sistema is not None:
        linhas += [
            "",
            "=== TERMOS E GARANTIA ===",
            f"Garantia: {sistema.default_service_warranty} dias para defeitos relacionados ao serviço executado.",
            "A garantia não cobre danos causados por mau uso, quedas, líquidos ou "
            "problemas não relacionados ao reparo realizado.",
            "O equipamento deve ser retirado em até 30 dias após a conclusão do serviço.",
        ]
    linhas += ["", "==================", "Obrigado pela confiança!"]
    return "\n".join(linhas)


def gerar_relatorio_gerencial(rel: RelatorioGerencial, agora: Optional[datetime] = None) -> str:
    agora = agora or datetime.now()
    linhas = [
        "=== RELATÓRIO GERENCIAL ===",
        f"Período: {rel.periodo.label}",
        f"Data: {data_hora(agora)}",
        "",
        "=== VENDAS ===",
        f"Total de Vendas: {rel.total_sales}",
        f"Faturamento: {brl(rel.total_revenue)}",
        f"Ticket Médio: {brl(rel.average_ticket)}",
        "",
        "=== SERVIÇOS ===",
        f"Total de Serviços: {rel.services_total}",
        f"Faturamento Serviços: {brl(rel.service_revenue)}",
    ]
    for status, qtd in rel.service_status.items():
        linhas.append(f"{REPORT_STATUS_LABELS.get(status, status)}: {qtd}")
    linhas.append("")

    if rel.top_products:
        linhas.append("=== TOP PRODUTOS ===")
        for i, p in enumerate(rel.top_products[:TOP_N_IMPRESSO], start=1):
            linhas.append(f"{i}. {p['name']}")
            linhas.append(f"   Vendidos: {p['quantity']} | Receita: {brl(p['revenue'])}")
        linhas.append("")

    if rel.low_stock:
        linhas.append("=== ESTOQUE BAIXO ===")
        for p in rel.low_stock:
            linhas.append(f"- {p.name}: {p.stock} (mín: {p.min_stock})")
        linhas.append("")

    linhas += [
        "=== RESUMO GERAL ===",
        f"Faturamento Total: {brl(rel.grand_total)}",
        f"Produtos em Estoque Baixo: {len(rel.low_stock)}",
        f"Total de Clientes Ativos: {len(rel.top_customers)}",
    ]
    return "\n".join(linhas)


def html_para_impressao(texto: str, titulo: str = "Documento") -> str:
    """Envolve o texto numa página HTML monoespaçada pronta para imprimir."""
    return (
        "<!DOCTYPE html>\n"
        "<html>\n"
        "<head>\n"
        '<meta charset="utf-8">\n'
        f"<title>{html.escape(titulo)}</title>\n"
        "<style>\n"
        "body { font-family: 'Courier New', monospace; padding: 20px; }\n"
        "pre { white-space: pre-wrap; }\n"
        "</style>\n"
        "</head>\n"
        "<body>\n"
        f"<pre>{html.escape(texto)}</pre>\n"
        "</body>\n"
        "</html>\n"
    )
