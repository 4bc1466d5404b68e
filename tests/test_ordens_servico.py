import pytest

from assistencia.domain.erros import ClienteInexistente, RegistroNaoEncontrado, ValidacaoError
from assistencia.usecases.clientes import atualizar_cliente, cadastrar_cliente
from assistencia.usecases.ordens_servico import alterar_status, buscar_ordens, ordens_pendentes, salvar_ordem_servico


@pytest.fixture
def cliente(container):
    return cadastrar_cliente(container, "João Pereira", "(21) 97777-6666", "joao@email.com")


def test_abertura_copia_nome_do_cliente(container, cliente):
    o = salvar_ordem_servico(container, cliente.id, "Samsung A52", "Não liga", estimated_cost=150)
    assert o.customer_name == "João Pereira"
    assert o.status == "analyzing"
    assert o.completed_at is None
    assert o.estimated_cost == 150.0
    assert container.state.service_orders == (o,)


def test_completed_at_definido_uma_unica_vez(container, cliente):
    o = salvar_ordem_servico(container, cliente.id, "iPhone 12", "Tela", agora="2024-03-10T09:00:00")
    o = alterar_status(container, o.id, "repairing", agora="2024-03-10T12:00:00")
    assert o.completed_at is None
    o = alterar_status(container, o.id, "completed", agora="2024-03-11T15:00:00")
    assert o.completed_at == "2024-03-11T15:00:00"
    o = alterar_status(container, o.id, "delivered", agora="2024-03-12T10:00:00")
    assert o.completed_at == "2024-03-11T15:00:00"
    assert o.created_at == "2024-03-10T09:00:00"
    assert len(container.state.service_orders) == 1


def test_nome_do_cliente_nao_acompanha_edicao_ate_salvar(container, cliente):
    o = salvar_ordem_servico(container, cliente.id, "Moto G", "Bateria")
    atualizar_cliente(container, cliente.id, "João P. Silva", cliente.phone, cliente.email)
    assert container.state.service_order(o.id).customer_name == "João Pereira"
    o = salvar_ordem_servico(container, cliente.id, "Moto G", "Bateria", "repairing", order_id=o.id)
    assert o.customer_name == "João P. Silva"


def test_erros(container, cliente):
    with pytest.raises(ClienteInexistente):
        salvar_ordem_servico(container, "nao-existe", "iPhone", "Tela")
    with pytest.raises(ValidacaoError) as exc:
        salvar_ordem_servico(container, cliente.id, "", "", "quebrado")
    assert set(exc.value.erros) == {"device", "issue", "status"}
    with pytest.raises(RegistroNaoEncontrado):
        salvar_ordem_servico(container, cliente.id, "iPhone", "Tela", order_id="nao-existe")
    with pytest.raises(RegistroNaoEncontrado):
        alterar_status(container, "nao-existe", "completed")
    assert container.state.service_orders == ()


def test_busca_e_pendentes(container, cliente):
    a = salvar_ordem_servico(container, cliente.id, "iPhone 12", "Tela quebrada")
    b = salvar_ordem_servico(container, cliente.id, "Notebook Dell", "Teclado", "completed")
    assert buscar_ordens(container.state, "dell") == [b]
    assert buscar_ordens(container.state, "joão") == [a, b]
    assert ordens_pendentes(container.state) == [a]
