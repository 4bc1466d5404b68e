from datetime import date, datetime

from assistencia.config import CompanySettings, SystemSettings
from assistencia.domain.models import AppState, Product, Sale, SaleItem, ServiceOrder
from assistencia.usecases.documentos import (
    gerar_ordem_servico,
    gerar_recibo_venda,
    gerar_relatorio_gerencial,
    html_para_impressao,
)
from assistencia.usecases.relatorios import relatorio_gerencial


def _ordem(**kw):
    base = dict(
        id="0f8e2d1c-9b7a-4c3d-8e2f-1a2b3c4d5e6f", customer_id="c1", customer_name="Maria Souza",
        device="iPhone 12 Pro", issue="Tela trincada", status="completed",
        created_at="2024-03-10T09:15:00", estimated_cost=350.0, final_cost=320.0,
        completed_at="2024-03-12T17:40:00", notes="Cliente pediu película",
    )
    base.update(kw)
    return ServiceOrder(**base)


def test_recibo_de_venda():
    venda = Sale(
        id="s1",
        items=(SaleItem("p1", "Capinha", 2, 10.0, 20.0), SaleItem("p2", "Película", 1, 5.5, 5.5)),
        total=25.5, payment_method="pix", created_at="2024-03-15T14:30:00",
        customer_id="c1", customer_name="Maria Souza",
    )
    linhas = gerar_recibo_venda(venda).splitlines()
    assert linhas[0] == "=== RECIBO DE VENDA ==="
    assert "Data: 15/03/2024 às 14:30" in linhas
    assert "Cliente: Maria Souza" in linhas
    assert "Pagamento: PIX" in linhas
    i = linhas.index("Capinha")
    assert linhas[i + 1:i + 3] == ["  Qtd: 2 x R$ 10.00", "  Total: R$ 20.00"]
    assert "TOTAL: R$ 25.50" in linhas
    assert linhas[-1] == "Obrigado pela preferência!"


def test_recibo_sem_cliente():
    venda = Sale(id="s1", items=(), total=0.0, payment_method="cash", created_at="2024-03-15T14:30:00")
    texto = gerar_recibo_venda(venda)
    assert "Cliente:" not in texto
    assert "Pagamento: Dinheiro" in texto


def test_ordem_de_servico_simples():
    texto = gerar_ordem_servico(_ordem())
    linhas = texto.splitlines()
    assert linhas[0] == "=== ORDEM DE SERVIÇO ==="
    assert "Nº: 4D5E6F" in linhas
    assert "Nome: Maria Souza" in linhas
    assert "Aparelho: iPhone 12 Pro" in linhas
    assert "Status: Concluído" in linhas
    assert "Orçamento: R$ 350.00" in linhas
    assert "Valor Final: R$ 320.00" in linhas
    assert "Concluído em: 12/03/2024 às 17:40" in linhas
    assert "=== OBSERVAÇÕES ===" in linhas
    assert "TERMOS E GARANTIA" not in texto
    assert linhas[-1] == "Obrigado pela confiança!"


def test_ordem_de_servico_sem_valores_opcionais():
    texto = gerar_ordem_servico(_ordem(estimated_cost=None, final_cost=None, completed_at=None, notes=None,
                                       status="analyzing"))
    assert "Orçamento" not in texto
    assert "Valor Final" not in texto
    assert "OBSERVAÇÕES" not in texto
    assert "Status: Em Análise" in texto


def test_ordem_de_servico_com_empresa_e_garantia():
    empresa = CompanySettings(name="JP Assistência", address="Rua A, 10", phone="(11) 3333-4444", cnpj="12.345.678/0001-90")
    texto = gerar_ordem_servico(_ordem(), empresa, SystemSettings(default_service_warranty=120))
    linhas = texto.splitlines()
    assert linhas[0] == "JP Assistência"
    assert "Tel: (11) 3333-4444" in linhas
    assert "CNPJ: 12.345.678/0001-90" in linhas
    assert "Email:" not in texto
    assert "=== TERMOS E GARANTIA ===" in linhas
    assert "Garantia: 120 dias" in texto
    assert "30 dias" in texto


def test_relatorio_gerencial_texto():
    state = AppState(
        sales=(Sale("s1", (SaleItem("p1", "Cabo", 3, 15.0, 45.0),), 45.0, "cash", "2024-03-15T10:00:00",
                    "c1", "Maria"),),
        service_orders=(ServiceOrder("o1", "c1", "Maria", "iPhone", "Tela", "completed", "2024-03-15T09:00:00",
                                     final_cost=100.0),),
        products=(Product("p1", "Cabo", "Acessórios", 15.0, 1, 2, "2024-01-01T00:00:00"),),
    )
    rel = relatorio_gerencial(state, "today", hoje=date(2024, 3, 15))
    linhas = gerar_relatorio_gerencial(rel, agora=datetime(2024, 3, 15, 18, 0)).splitlines()
    assert linhas[:3] == ["=== RELATÓRIO GERENCIAL ===", "Período: Hoje", "Data: 15/03/2024 às 18:00"]
    assert "Total de Vendas: 1" in linhas
    assert "Faturamento: R$ 45.00" in linhas
    assert "Ticket Médio: R$ 45.00" in linhas
    assert "Faturamento Serviços: R$ 100.00" in linhas
    assert "Finalizados: 1" in linhas
    assert "1. Cabo" in linhas
    assert "   Vendidos: 3 | Receita: R$ 45.00" in linhas
    assert "- Cabo: 1 (mín: 2)" in linhas
    assert "Faturamento Total: R$ 145.00" in linhas
    assert "Produtos em Estoque Baixo: 1" in linhas
    assert "Total de Clientes Ativos: 1" in linhas


def test_relatorio_sem_dados_omite_rankings():
    rel = relatorio_gerencial(AppState(), "today", hoje=date(2024, 3, 15))
    texto = gerar_relatorio_gerencial(rel)
    assert "TOP PRODUTOS" not in texto
    assert "ESTOQUE BAIXO" not in texto
    assert "Faturamento Total: R$ 0.00" in texto


def test_html_para_impressao_escapa_texto():
    html = html_para_impressao("Cliente: <Maria & Cia>", "Recibo")
    assert "<title>Recibo</title>" in html
    assert "<pre>Cliente: &lt;Maria &amp; Cia&gt;</pre>" in html
    assert "Courier New" in html
