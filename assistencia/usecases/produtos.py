# assistencia/usecases/produtos.py
"""
UC: cadastro e consulta de produtos.
- cadastrar_produto(): valida e inclui (estoque inicial informado no cadastro).
- atualizar_produto(): valida e substitui pelo id (mantém createdAt).
- buscar_produtos(), produtos_estoque_baixo(), produtos_disponiveis().
"""

from __future__ import annotations

from dataclasses import replace
from typing import List, Optional

from assistencia.domain.erros import RegistroNaoEncontrado, ValidacaoError
from assistencia.domain.models import AppState, Product, agora_iso, money, novo_id
from assistencia.domain.policies import validar_produto
from assistencia.infra.logger import log_transaction
from assistencia.usecases.estado import AppStateContainer


def _opcional(x: Optional[str]) -> Optional[str]:
    s = (x or "").strip()
    return s or None


def cadastrar_produto(
    container: AppStateContainer,
    name: str,
    category: str,
    price: float,
    stock: int,
    min_stock: int,
    supplier: Optional[str] = None,
) -> Product:
    erros = validar_produto(name, category, price, stock, min_stock, supplier)
    if erros:
        log_transaction("cadastrar_produto", {"name": name}, error=str(erros))
        raise ValidacaoError(erros)
    produto = Product(
        id=novo_id(),
        name=name.strip(),
        category=category.strip(),
        price=money(price),
        stock=int(stock),
        min_stock=int(min_stock),
        supplier=_opcional(supplier),
        created_at=agora_iso(),
    )
    container.add_product(produto)
    log_transaction("cadastrar_produto", {"id": produto.id, "name": produto.name}, result="success")
    return produto


def atualizar_produto(
    container: AppStateContainer,
    product_id: str,
    name: str,
    category: str,
    price: float,
    stock: int,
    min_stock: int,
    supplier: Optional[str] = None,
) -> Product:
    """Edição do cadastro; o estoque informado substitui o atual sem gerar movimentação."""
    atual = container.state.product(product_id)
    if atual is None:
        raise RegistroNaoEncontrado("products", product_id)
    erros = validar_produto(name, category, price, stock, min_stock, supplier)
    if erros:
        raise ValidacaoError(erros)
    produto = replace(
        atual,
        name=name.strip(),
        category=category.strip(),
        price=money(price),
        stock=int(stock),
        min_stock=int(min_stock),
        supplier=_opcional(supplier),
    )
    container.update_product(produto)
    log_transaction("atualizar_produto", {"id": product_id}, result="success")
    return produto


def buscar_produtos(state: AppState, termo: str = "") -> List[Product]:
    t = (termo or "").strip().lower()
    if not t:
        return list(state.products)
    return [
        p for p in state.products
        if t in p.name.lower() or t in p.category.lower() or (p.supplier and t in p.supplier.lower())
    ]


def produtos_estoque_baixo(state: AppState) -> List[Product]:
    """Produtos com estoque menor ou igual ao mínimo."""
    return [p for p in state.products if p.estoque_baixo]


def produtos_disponiveis(state: AppState) -> List[Product]:
    """Produtos que podem ir para o carrinho (estoque > 0)."""
    return [p for p in state.products if p.stock > 0]
