from datetime import date

from assistencia.domain.models import AppState, Product, Sale, SaleItem, ServiceOrder
from assistencia.usecases.relatorios import (
    painel_do_dia,
    relatorio_gerencial,
    tabela_estoque_baixo,
    tabela_top_clientes,
    tabela_top_produtos,
    top_clientes,
    top_produtos,
)


HOJE = date(2024, 3, 15)


def _venda(sid, created_at, itens, pagamento="cash", customer_id=None, customer_name=None):
    items = tuple(SaleItem(pid, nome, q, preco, round(q * preco, 2)) for pid, nome, q, preco in itens)
    return Sale(
        id=sid, items=items, total=round(sum(i.total for i in items), 2), payment_method=pagamento,
        created_at=created_at, customer_id=customer_id, customer_name=customer_name,
    )


def _ordem(oid, created_at, status, final_cost=None):
    return ServiceOrder(
        id=oid, customer_id="c1", customer_name="Maria", device="iPhone", issue="Tela",
        status=status, created_at=created_at, final_cost=final_cost,
    )


def _produto(pid, stock, min_stock):
    return Product(id=pid, name=f"Produto {pid}", category="Peças", price=1.0,
                   stock=stock, min_stock=min_stock, created_at="2024-01-01T00:00:00")


def test_sem_dados_metricas_zeradas():
    rel = relatorio_gerencial(AppState(), "today", hoje=HOJE)
    assert rel.total_revenue == 0
    assert rel.total_sales == 0
    assert rel.average_ticket == 0
    assert rel.payment_methods == {}
    assert rel.services_total == 0
    assert rel.service_revenue == 0
    assert rel.top_products == []
    assert rel.top_customers == []
    assert rel.low_stock == []
    assert rel.grand_total == 0
    assert tabela_top_produtos(rel) == (["#", "Produto", "Vendidos", "Receita"], [], "Nenhuma venda no período")


def test_metricas_do_mes():
    state = AppState(
        sales=(
            _venda("s1", "2024-03-01T09:00:00", [("p1", "Tela", 1, 300.0)], "pix", "c1", "Maria"),
            _venda("s2", "2024-03-15T18:00:00", [("p2", "Cabo", 2, 15.0)], "cash"),
            _venda("s3", "2024-03-10T11:00:00", [("p2", "Cabo", 1, 15.0)], "pix", "c2", "João"),
            _venda("s4", "2024-02-29T23:00:00", [("p1", "Tela", 5, 300.0)], "card"),
        ),
        service_orders=(
            _ordem("o1", "2024-03-02T10:00:00", "completed", 120.0),
            _ordem("o2", "2024-03-05T10:00:00", "analyzing"),
            _ordem("o3", "2024-03-06T10:00:00", "delivered", 80.0),
            _ordem("o4", "2024-01-06T10:00:00", "delivered", 999.0),
        ),
        products=(_produto("p1", 5, 5), _produto("p2", 10, 2)),
    )
    rel = relatorio_gerencial(state, "month", hoje=HOJE)
    assert rel.total_sales == 3
    assert rel.total_revenue == 345.0
    assert rel.average_ticket == 115.0
    assert rel.payment_methods == {"pix": 2, "cash": 1}
    assert rel.services_total == 3
    assert rel.service_status == {"completed": 1, "analyzing": 1, "delivered": 1}
    assert rel.service_revenue == 200.0
    assert rel.grand_total == 545.0
    assert [p["id"] for p in rel.top_products] == ["p2", "p1"]
    assert rel.top_products[0] == {"id": "p2", "name": "Cabo", "quantity": 3, "revenue": 45.0}
    assert [c["name"] for c in rel.top_customers] == ["Maria", "João"]
    assert [p.id for p in rel.low_stock] == ["p1"]
    assert rel.periodo.label == "Este Mês"


def test_top_produtos_empate_mantem_ordem_de_aparicao():
    vendas = [
        _venda("s1", "2024-03-15T10:00:00", [("a", "A", 3, 1.0), ("b", "B", 3, 2.0)]),
        _venda("s2", "2024-03-15T11:00:00", [("c", "C", 5, 1.0), ("a", "A", 0, 1.0)]),
    ]
    assert [p["id"] for p in top_produtos(vendas)] == ["c", "a", "b"]
    assert len(top_produtos(vendas, n=2)) == 2


def test_top_produtos_limite_de_dez():
    vendas = [_venda(f"s{i}", "2024-03-15T10:00:00", [(f"p{i}", f"P{i}", i + 1, 1.0)]) for i in range(12)]
    top = top_produtos(vendas)
    assert len(top) == 10
    assert top[0]["id"] == "p11"


def test_top_clientes_agrupa_e_ignora_venda_sem_cliente():
    vendas = [
        _venda("s1", "2024-03-15T10:00:00", [("a", "A", 1, 50.0)], customer_id="c1", customer_name="Maria"),
        _venda("s2", "2024-03-15T11:00:00", [("a", "A", 1, 80.0)], customer_id="c2", customer_name="João"),
        _venda("s3", "2024-03-15T12:00:00", [("a", "A", 1, 40.0)], customer_id="c1", customer_name="Maria"),
        _venda("s4", "2024-03-15T12:00:00", [("a", "A", 1, 500.0)]),
    ]
    top = top_clientes(vendas)
    assert top == [
        {"id": "c1", "name": "Maria", "sales": 2, "revenue": 90.0},
        {"id": "c2", "name": "João", "sales": 1, "revenue": 80.0},
    ]


def test_semana_inclui_limite_inferior():
    state = AppState(sales=(
        _venda("s1", "2024-03-08T08:00:00", [("a", "A", 1, 10.0)]),
        _venda("s2", "2024-03-07T22:00:00", [("a", "A", 1, 10.0)]),
    ))
    rel = relatorio_gerencial(state, "week", hoje=HOJE)
    assert rel.total_sales == 1


def test_painel_do_dia():
    state = AppState(
        sales=(
            _venda("s1", "2024-03-15T08:00:00", [("a", "A", 2, 10.0)]),
            _venda("s2", "2024-03-14T08:00:00", [("a", "A", 1, 10.0)]),
        ),
        service_orders=tuple(
            _ordem(f"o{i}", f"2024-03-{10 + i:02d}T10:00:00", "repairing" if i % 2 else "delivered")
            for i in range(6)
        ),
        products=(_produto("p1", 0, 1),),
    )
    p = painel_do_dia(state, hoje=HOJE)
    assert p.vendas_hoje == 1
    assert p.faturamento_hoje == 20.0
    assert p.servicos_hoje == 1
    assert [o.id for o in p.pendentes] == ["o1", "o3", "o5"]
    assert [o.id for o in p.ordens_recentes] == ["o5", "o4", "o3", "o2", "o1"]
    assert [x.id for x in p.estoque_baixo] == ["p1"]


def test_tabelas():
    state = AppState(
        sales=(_venda("s1", "2024-03-15T08:00:00", [("a", "A", 2, 10.0)], customer_id="c1", customer_name="Maria"),),
        products=(_produto("p1", 1, 1),),
    )
    rel = relatorio_gerencial(state, "today", hoje=HOJE)
    cols, rows, msg = tabela_top_clientes(rel)
    assert rows == [[1, "Maria", 1, 20.0]] and msg is None
    cols, rows, msg = tabela_estoque_baixo(rel.low_stock)
    assert rows == [["Produto p1", "Peças", 1, 1]]
    assert tabela_estoque_baixo([])[2] == "Nenhum produto com estoque baixo"


def test_painel_do_dia_tolera_data_invalida():
    state = AppState(service_orders=(
        _ordem("o1", "ontem", "analyzing"),
        _ordem("o2", "2024-03-15T09:00:00", "repairing"),
    ))
    p = painel_do_dia(state, hoje=HOJE)
    assert p.servicos_hoje == 1
    assert [o.id for o in p.ordens_recentes] == ["o2", "o1"]
