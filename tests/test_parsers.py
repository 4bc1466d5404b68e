from datetime import date

import pytest

from assistencia.adapters.parsers import parse_data, parse_dinheiro, parse_inteiro, parse_item_venda
from assistencia.domain.erros import ValidacaoError


@pytest.mark.parametrize(
    "txt,esperado",
    [
        ("10,50", 10.5),
        ("10.50", 10.5),
        ("R$ 7", 7.0),
        ("0", 0.0),
        ("", None),
        (None, None),
    ],
)
def test_parse_dinheiro(txt, esperado):
    assert parse_dinheiro(txt) == esperado


@pytest.mark.parametrize("txt", ["dez", "1.000,00", "10,5,0"])
def test_parse_dinheiro_invalido(txt):
    with pytest.raises(ValidacaoError) as exc:
        parse_dinheiro(txt, "price")
    assert "price" in exc.value.erros


def test_parse_inteiro():
    assert parse_inteiro(" 3 ") == 3
    assert parse_inteiro("") is None
    with pytest.raises(ValidacaoError):
        parse_inteiro("2.5")


@pytest.mark.parametrize(
    "txt,esperado",
    [
        ("abc123:2", ("abc123", 2)),
        ("abc123", ("abc123", 1)),
        (" abc123 : 4 ", ("abc123", 4)),
    ],
)
def test_parse_item_venda(txt, esperado):
    assert parse_item_venda(txt) == esperado


@pytest.mark.parametrize("txt", ["", ":2", "abc:x"])
def test_parse_item_venda_invalido(txt):
    with pytest.raises(ValidacaoError):
        parse_item_venda(txt)


def test_parse_data():
    assert parse_data("15/03/2024") == date(2024, 3, 15)
    assert parse_data("2024-03-15") == date(2024, 3, 15)
    assert parse_data(None) is None
    with pytest.raises(ValidacaoError):
        parse_data("31/02/2024")
