"""
Testes da TUI com os prompts simulados.
"""

import io
import json
from unittest.mock import patch

import pytest
from rich.console import Console

from assistencia.adapters.tui import AssistenciaTUI
from assistencia.domain.erros import ReinicioNecessario
from assistencia.usecases.clientes import cadastrar_cliente
from assistencia.usecases.estado import criar_container
from assistencia.usecases.produtos import cadastrar_produto


def _tui(db_path):
    return AssistenciaTUI(db_path, console=Console(file=io.StringIO(), width=120))


def _saida(tui):
    return tui.console.file.getvalue()


def test_cadastrar_cliente_pelo_menu(db_path):
    tui = _tui(db_path)
    respostas = ["1", "2", "Maria", "11999990000", "maria@email.com", "0", "0"]
    with patch("assistencia.adapters.tui.Prompt.ask", side_effect=respostas):
        tui.run()
    assert [c.name for c in tui.container.state.customers] == ["Maria"]
    assert criar_container(db_path).state.customers[0].email == "maria@email.com"
    assert "Cliente cadastrado" in _saida(tui)


def test_erro_de_validacao_e_exibido_e_menu_continua(db_path):
    tui = _tui(db_path)
    respostas = ["1", "2", "", "", "", "0", "0"]
    with patch("assistencia.adapters.tui.Prompt.ask", side_effect=respostas):
        tui.run()
    assert tui.container.state.customers == ()
    assert "Erro" in _saida(tui)


def test_venda_pelo_pdv(db_path):
    produto = cadastrar_produto(criar_container(db_path), "Capinha", "Acessórios", 10.0, 10, 2)
    tui = _tui(db_path)
    respostas = ["3", "1", "", produto.id[:8], "2", "", "pix", "0", "0"]
    with patch("assistencia.adapters.tui.Prompt.ask", side_effect=respostas):
        tui.run()
    state = criar_container(db_path).state
    assert state.product(produto.id).stock == 8
    assert state.sales[0].total == 20.0
    assert "RECIBO DE VENDA" in _saida(tui)


def test_venda_acima_do_estoque_nao_entra_no_carrinho(db_path):
    produto = cadastrar_produto(criar_container(db_path), "Capinha", "Acessórios", 10.0, 1, 0)
    tui = _tui(db_path)
    respostas = ["3", "1", "", produto.id, "5", "", "0", "0"]
    with patch("assistencia.adapters.tui.Prompt.ask", side_effect=respostas):
        tui.run()
    assert criar_container(db_path).state.sales == ()
    assert "carrinho vazio" in _saida(tui)


def test_dashboard(db_path):
    tui = _tui(db_path)
    with patch("assistencia.adapters.tui.Prompt.ask", side_effect=["5", "1", "0", "0"]):
        tui.run()
    assert "Vendas hoje: 0" in _saida(tui)


def test_importar_backup_encerra_sessao_sem_sobrescrever(db_path, tmp_path):
    arquivo = tmp_path / "backup.json"
    arquivo.write_text(json.dumps({"customers": [{
        "id": "c-importado", "name": "Importado", "phone": "1", "createdAt": "2024-01-01T00:00:00",
    }]}), encoding="utf-8")
    tui = _tui(db_path)
    # depois do import, as respostas de um novo cadastro não devem ser consumidas
    respostas = ["6", "3", str(arquivo), "1", "2", "Novo", "2", "", "0", "0"]
    with patch("assistencia.adapters.tui.Prompt.ask", side_effect=respostas) as ask:
        tui.run()
    assert ask.call_count == 3
    assert "Reinicie o sistema" in _saida(tui)

    with pytest.raises(ReinicioNecessario):
        cadastrar_cliente(tui.container, "Novo", "2")
    assert [c.name for c in criar_container(db_path).state.customers] == ["Importado"]


def test_editar_cliente_pelo_menu(db_path):
    cliente = cadastrar_cliente(criar_container(db_path), "Maria", "11999990000")
    tui = _tui(db_path)
    respostas = ["1", "3", cliente.id[:8], "Maria Souza", "11888880000", "", "0", "0"]
    with patch("assistencia.adapters.tui.Prompt.ask", side_effect=respostas):
        tui.run()
    salvo = criar_container(db_path).state.customer(cliente.id)
    assert (salvo.name, salvo.phone) == ("Maria Souza", "11888880000")
    assert "Cliente atualizado" in _saida(tui)


def test_editar_produto_pelo_menu(db_path):
    produto = cadastrar_produto(criar_container(db_path), "Capinha", "Acessórios", 10.0, 10, 2)
    tui = _tui(db_path)
    respostas = ["2", "3", produto.id[:8], "Capinha Premium", "Acessórios", "12,50", "7", "3", "", "0", "0"]
    with patch("assistencia.adapters.tui.Prompt.ask", side_effect=respostas):
        tui.run()
    state = criar_container(db_path).state
    salvo = state.product(produto.id)
    assert (salvo.name, salvo.price, salvo.stock, salvo.min_stock) == ("Capinha Premium", 12.5, 7, 3)
    assert state.stock_movements == ()
