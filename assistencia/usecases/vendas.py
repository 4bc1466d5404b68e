# assistencia/usecases/vendas.py
"""
UC: venda no balcão.
- Carrinho: monta os itens respeitando o estoque disponível.
- finalizar_venda(): cria a venda e baixa o estoque (uma movimentação
  'sale' por item), tudo numa única operação do contêiner.
- buscar_vendas(), total_vendido(): consultas da listagem.

Obs.:
- O preço unitário e o nome do produto são copiados no momento da venda.
- O nome do cliente (se houver) também é copiado para a venda.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from assistencia.domain.erros import (
    CarrinhoVazio,
    ClienteInexistente,
    EstoqueInsuficiente,
    ValidacaoError,
)
from assistencia.domain.models import (
    AppState,
    Product,
    Sale,
    SaleItem,
    agora_iso,
    money,
    novo_id,
)
from assistencia.domain.policies import validar_pagamento
from assistencia.infra.logger import log_system_event, log_transaction, log_venda
from assistencia.usecases.estado import AppStateContainer


@dataclass
class CartItem:
    product: Product
    quantity: int

    @property
    def total(self) -> float:
        return money(self.product.price * self.quantity)


class Carrinho:
    """Itens da venda em andamento (ainda não persistidos)."""

    def __init__(self):
        self.itens: List[CartItem] = []

    def __len__(self) -> int:
        return len(self.itens)

    def _find(self, product_id: str) -> Optional[CartItem]:
        return next((i for i in self.itens if i.product.id == product_id), None)

    def adicionar(self, produto: Product, quantidade: int = 1) -> CartItem:
        """Adiciona o produto; se já estiver no carrinho, soma a quantidade."""
        if quantidade is None or quantidade <= 0:
            raise ValidacaoError({"quantity": "Quantidade deve ser maior que zero"})
        item = self._find(produto.id)
        total = quantidade + (item.quantity if item else 0)
        if total > produto.stock:
            raise EstoqueInsuficiente(produto.name, produto.stock, total)
        if item:
            item.quantity = total
            return item
        item = CartItem(produto, quantidade)
        self.itens.append(item)
        return item

    def remover(self, product_id: str) -> None:
        self.itens = [i for i in self.itens if i.product.id != product_id]

    def atualizar_quantidade(self, product_id: str, quantidade: int) -> None:
        """Altera a quantidade; zero ou negativo remove o item."""
        item = self._find(product_id)
        if item is None:
            return
        if quantidade > item.product.stock:
            raise EstoqueInsuficiente(item.product.name, item.product.stock, quantidade)
        if quantidade <= 0:
            self.remover(product_id)
            return
        item.quantity = quantidade

    @property
    def total(self) -> float:
        return money(sum(i.product.price * i.quantity for i in self.itens))


def finalizar_venda(
    container: AppStateContainer,
    carrinho: Carrinho,
    payment_method: str,
    customer_id: Optional[str] = None,
) -> Sale:
    data: Dict[str, Any] = {"itens": len(carrinho), "payment_method": payment_method, "customer_id": customer_id}
    log_system_event("venda_start", data)
    try:
        erros = validar_pagamento(payment_method)
        if erros:
            raise ValidacaoError(erros)
        if not carrinho.itens:
            raise CarrinhoVazio()

        customer_name = None
        if customer_id:
            cliente = container.state.customer(customer_id)
            if cliente is None:
                raise ClienteInexistente(customer_id)
            customer_name = cliente.name

        itens = tuple(
            SaleItem(
                product_id=i.product.id,
                product_name=i.product.name,
                quantity=i.quantity,
                unit_price=i.product.price,
                total=i.total,
            )
            for i in carrinho.itens
        )
        venda = Sale(
            id=novo_id(),
            customer_id=customer_id or None,
            customer_name=customer_name,
            items=itens,
            total=money(sum(i.unit_price * i.quantity for i in itens)),
            payment_method=payment_method,
            created_at=agora_iso(),
        )
        container.register_sale(venda)
        log_venda("finalizada", venda.id, venda.total, payment_method=payment_method)
        log_transaction("finalizar_venda", data, result={"sale_id": venda.id, "total": venda.total})
        return venda
    except Exception as e:
        log_transaction("finalizar_venda", data, error=str(e))
        log_system_event("venda_error", {"error": str(e)}, level="error")
        raise


def buscar_vendas(state: AppState, termo: str = "") -> List[Sale]:
    """Filtra por nome do cliente ou nome de produto vendido."""
    t = (termo or "").strip().lower()
    if not t:
        return list(state.sales)
    return [
        s for s in state.sales
        if (s.customer_name and t in s.customer_name.lower())
        or any(t in i.product_name.lower() for i in s.items)
    ]


def total_vendido(state: AppState) -> float:
    return money(sum(s.total for s in state.sales))
