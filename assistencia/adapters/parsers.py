"""
Utilidades de parsing para os valores digitados no terminal.

Este módulo interpreta as strings informadas nos prompts e nas opções da
CLI: valores em reais (aceitando vírgula ou ponto como separador decimal),
quantidades inteiras, itens de venda no formato "<produto>:<quantidade>"
e datas no formato brasileiro ou ISO.

Entradas inválidas levantam ``ValidacaoError`` com o nome do campo.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Optional, Tuple

from assistencia.domain.erros import ValidacaoError

_NUM_RE = re.compile(r"^[-+]?\d+(?:[.,]\d+)?$")


def parse_dinheiro(txt: Optional[str], campo: str = "valor") -> Optional[float]:
    """Interpreta um valor monetário.

    Exemplos:
        "10,50"    → 10.5
        "R$ 7.00"  → 7.0
        ""         → None

    Args:
        txt: Texto digitado.
        campo: Nome do campo usado na mensagem de erro.

    Returns:
        O valor como float, ou None se o texto estiver vazio.
    """
    if txt is None:
        return None
    s = str(txt).strip()
    if s.upper().startswith("R$"):
        s = s[2:].strip()
    if not s:
        return None
    if not _NUM_RE.match(s):
        raise ValidacaoError({campo: f"Valor inválido: {txt}"})
    return float(s.replace(",", "."))


def parse_inteiro(txt: Optional[str], campo: str = "quantidade") -> Optional[int]:
    if txt is None or not str(txt).strip():
        return None
    try:
        return int(str(txt).strip())
    except ValueError:
        raise ValidacaoError({campo: f"Número inteiro inválido: {txt}"})


def parse_item_venda(txt: str) -> Tuple[str, int]:
    """Interpreta um item de venda "PRODUTO:QTD" (sem quantidade → 1).

    Exemplos:
        "abc123:2" → ("abc123", 2)
        "abc123"   → ("abc123", 1)
    """
    s = (txt or "").strip()
    if not s:
        raise ValidacaoError({"item": "Item vazio"})
    produto, _, qtd = s.partition(":")
    produto = produto.strip()
    if not produto:
        raise ValidacaoError({"item": f"Produto não informado em '{txt}'"})
    quantidade = parse_inteiro(qtd, campo="item") if qtd.strip() else 1
    return produto, quantidade


def parse_data(txt: Optional[str], campo: str = "data") -> Optional[date]:
    """Aceita "dd/mm/aaaa" ou "aaaa-mm-dd"."""
    if txt is None or not str(txt).strip():
        return None
    s = str(txt).strip()
    for fmt in ("%d/%m/%Y", "%Y-%m-%d"):
        try:
            return datetime.strptime(s, fmt).date()
        except ValueError:
            continue
    raise ValidacaoError({campo: f"Data inválida: {txt} (use dd/mm/aaaa)"})
