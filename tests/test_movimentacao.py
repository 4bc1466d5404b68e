import pytest

from assistencia.domain.erros import EstoqueInsuficiente, ProdutoInexistente, ValidacaoError
from assistencia.usecases.movimentacao import historico_movimentacoes, prever_estoque, registrar_movimentacao
from assistencia.usecases.produtos import cadastrar_produto


@pytest.fixture
def produto(container):
    return cadastrar_produto(container, "Bateria iPhone 11", "Peças", 89.9, 10, 5, "Fornecedor A")


def test_saida_maior_que_estoque_rejeitada(container, store, produto):
    gravacoes = store.writes
    with pytest.raises(EstoqueInsuficiente) as exc:
        registrar_movimentacao(container, produto.id, "out", 15, "Ajuste de inventário")
    assert exc.value.disponivel == 10
    assert container.state.product(produto.id).stock == 10
    assert container.state.stock_movements == ()
    assert store.writes == gravacoes


def test_entrada_soma_e_registra_movimento(container, produto):
    mov, atualizado = registrar_movimentacao(container, produto.id, "in", 5, "Reposição")
    assert atualizado.stock == 15
    assert mov.quantity == 5
    assert mov.type == "in"
    assert container.state.stock_movements == (mov,)


def test_saida_registra_quantidade_negativa(container, produto):
    mov, atualizado = registrar_movimentacao(container, produto.id, "out", 10, "Peça com defeito")
    assert atualizado.stock == 0
    assert mov.quantity == -10
    assert atualizado.estoque_baixo


@pytest.mark.parametrize("tipo,qtd,motivo", [("in", 0, "x"), ("out", 1, ""), ("sale", 1, "x")])
def test_formulario_invalido(container, produto, tipo, qtd, motivo):
    with pytest.raises(ValidacaoError):
        registrar_movimentacao(container, produto.id, tipo, qtd, motivo)
    assert container.state.stock_movements == ()


def test_produto_inexistente(container):
    with pytest.raises(ProdutoInexistente):
        registrar_movimentacao(container, "nao-existe", "in", 1, "Reposição")


def test_prever_estoque(produto):
    assert prever_estoque(produto, "in", 3) == 13
    assert prever_estoque(produto, "out", 3) == 7


def test_historico_mais_recentes_primeiro(container, produto):
    outro = cadastrar_produto(container, "Cabo", "Acessórios", 15.0, 2, 1)
    m1, _ = registrar_movimentacao(container, produto.id, "in", 1, "a")
    m2, _ = registrar_movimentacao(container, outro.id, "in", 1, "b")
    m3, _ = registrar_movimentacao(container, produto.id, "out", 1, "c")
    assert historico_movimentacoes(container.state) == [m3, m2, m1]
    assert historico_movimentacoes(container.state, produto.id) == [m3, m1]
