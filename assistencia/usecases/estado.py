"""
Contêiner de estado da aplicação.

Fonte única das cinco coleções e único ponto que altera dados persistidos.

Fluxo de cada operação:
1) valida a regra de negócio contra o estado atual (rejeição antes de
   qualquer alteração);
2) produz um novo ``AppState`` (o anterior continua válido para leitura);
3) chama o gancho ``on_change`` com o estado completo (persistência).

Observações:
- ``update_*`` com id inexistente é rejeitado (``RegistroNaoEncontrado``).
- Ordens de serviço exigem cliente existente (``ClienteInexistente``).
- ``register_stock_movement`` e ``register_sale`` aplicam movimentação e
  atualização de estoque numa única transição.
- Após importar um backup o contêiner é bloqueado (``bloquear``): novas
  alterações levantam ``ReinicioNecessario`` até reiniciar.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import replace
from typing import Callable, Dict, Optional

from assistencia.config import DB_PATH
from assistencia.domain.erros import (
    ClienteInexistente,
    EstoqueInsuficiente,
    ProdutoInexistente,
    RegistroDuplicado,
    RegistroNaoEncontrado,
    ReinicioNecessario,
)
from assistencia.domain.models import (
    AppState,
    Customer,
    Product,
    Sale,
    ServiceOrder,
    StockMovement,
    agora_iso,
    novo_id,
)
from assistencia.domain.policies import estoque_suficiente, novo_estoque
from assistencia.infra.logger import log_estoque, log_system_event, log_venda
from assistencia.infra.migrations import apply_migrations
from assistencia.infra.repositories import StateRepo
from assistencia.infra.storage import KeyValueStore, SqliteStore


OnChange = Callable[[AppState], None]


def _append(colecao: str, itens: tuple, rec) -> tuple:
    if any(i.id == rec.id for i in itens):
        raise RegistroDuplicado(colecao, rec.id)
    return itens + (rec,)


def _replace_by_id(colecao: str, itens: tuple, rec) -> tuple:
    if not any(i.id == rec.id for i in itens):
        raise RegistroNaoEncontrado(colecao, rec.id)
    return tuple(rec if i.id == rec.id else i for i in itens)


class AppStateContainer:
    def __init__(self, state: Optional[AppState] = None, on_change: Optional[OnChange] = None):
        self._state = state or AppState()
        self._on_change = on_change
        self._bloqueio: Optional[str] = None

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def bloqueado(self) -> bool:
        return self._bloqueio is not None

    def bloquear(self, motivo: str) -> None:
        """Rejeita alterações até a próxima inicialização.

        Usado quando o armazenamento foi substituído por fora (importação de
        backup): gravar o estado em memória apagaria os dados importados.
        """
        self._bloqueio = motivo
        log_system_event("state_locked", {"motivo": motivo})

    def _commit(self, novo: AppState, operacao: str) -> AppState:
        if self._bloqueio is not None:
            raise ReinicioNecessario(self._bloqueio)
        self._state = novo
        if self._on_change is not None:
            self._on_change(novo)
        log_system_event("state_commit", {"operation": operacao})
        return novo

    def _require_customer(self, customer_id: Optional[str]) -> None:
        if self._state.customer(customer_id) is None:
            raise ClienteInexistente(customer_id)

    # ---------------- clientes ----------------

    def add_customer(self, c: Customer) -> AppState:
        s = self._state
        return self._commit(replace(s, customers=_append("customers", s.customers, c)), "add_customer")

    def update_customer(self, c: Customer) -> AppState:
        s = self._state
        return self._commit(replace(s, customers=_replace_by_id("customers", s.customers, c)), "update_customer")

    # ---------------- ordens de serviço ----------------

    def add_service_order(self, o: ServiceOrder) -> AppState:
        self._require_customer(o.customer_id)
        s = self._state
        novo = replace(s, service_orders=_append("serviceOrders", s.service_orders, o))
        return self._commit(novo, "add_service_order")

    def update_service_order(self, o: ServiceOrder) -> AppState:
        self._require_customer(o.customer_id)
        s = self._state
        novo = replace(s, service_orders=_replace_by_id("serviceOrders", s.service_orders, o))
        return self._commit(novo, "update_service_order")

    # ---------------- produtos ----------------

    def add_product(self, p: Product) -> AppState:
        s = self._state
        return self._commit(replace(s, products=_append("products", s.products, p)), "add_product")

    def update_product(self, p: Product) -> AppState:
        s = self._state
        return self._commit(replace(s, products=_replace_by_id("products", s.products, p)), "update_product")

    # ---------------- vendas / movimentações (somente inclusão) ----------------

    def add_sale(self, sale: Sale) -> AppState:
        s = self._state
        return self._commit(replace(s, sales=_append("sales", s.sales, sale)), "add_sale")

    def add_stock_movement(self, m: StockMovement) -> AppState:
        s = self._state
        novo = replace(s, stock_movements=_append("stockMovements", s.stock_movements, m))
        return self._commit(novo, "add_stock_movement")

    def load_all(self, snapshot: AppState) -> AppState:
        return self._commit(snapshot, "load_all")

    # ---------------- operações compostas ----------------

    def register_stock_movement(self, m: StockMovement) -> AppState:
        """Registra a movimentação e o novo estoque do produto juntos.

        Movimentações negativas maiores que o estoque atual são rejeitadas
        sem alterar nada.
        """
        s = self._state
        produto = s.product(m.product_id)
        if produto is None:
            raise ProdutoInexistente(m.product_id)
        if m.quantity < 0 and not estoque_suficiente(produto.stock, -m.quantity):
            raise EstoqueInsuficiente(produto.name, produto.stock, -m.quantity)

        atualizado = replace(produto, stock=novo_estoque(produto.stock, m.quantity))
        novo = replace(
            s,
            products=_replace_by_id("products", s.products, atualizado),
            stock_movements=_append("stockMovements", s.stock_movements, m),
        )
        log_estoque(m.type, m.product_id, m.quantity, stock=atualizado.stock, reason=m.reason)
        return self._commit(novo, "register_stock_movement")

    def register_sale(self, sale: Sale) -> AppState:
        """Registra a venda, uma movimentação ``sale`` por item e o estoque.

        O estoque é verificado por produto (somando linhas repetidas) antes
        de qualquer alteração.
        """
        s = self._state
        pedidos: Dict[str, int] = OrderedDict()
        for item in sale.items:
            pedidos[item.product_id] = pedidos.get(item.product_id, 0) + item.quantity
        for product_id, qtd in pedidos.items():
            produto = s.product(product_id)
            if produto is None:
                raise ProdutoInexistente(product_id)
            if not estoque_suficiente(produto.stock, qtd):
                raise EstoqueInsuficiente(produto.name, produto.stock, qtd)

        quem = sale.customer_name or "Cliente não informado"
        motivo = f"Venda #{sale.id[-6:]} - {quem}"
        produtos = {p.id: p for p in s.products}
        movimentos = []
        for item in sale.items:
            p = produtos[item.product_id]
            produtos[p.id] = replace(p, stock=novo_estoque(p.stock, -item.quantity))
            movimentos.append(
                StockMovement(
                    id=novo_id(),
                    product_id=item.product_id,
                    type="sale",
                    quantity=-item.quantity,
                    reason=motivo,
                    created_at=sale.created_at or agora_iso(),
                )
            )

        novo = replace(
            s,
            sales=_append("sales", s.sales, sale),
            products=tuple(produtos[p.id] for p in s.products),
            stock_movements=s.stock_movements + tuple(movimentos),
        )
        for m in movimentos:
            log_estoque(m.type, m.product_id, m.quantity, sale_id=sale.id)
        log_venda("register", sale.id, sale.total, itens=len(sale.items))
        return self._commit(novo, "register_sale")


def criar_container(db_path: str = DB_PATH, store: Optional[KeyValueStore] = None) -> AppStateContainer:
    """Raiz de composição: carrega o estado salvo e liga a persistência.

    Com ``store`` informado (ex.: ``MemoryStore`` em testes), ``db_path`` é
    ignorado e nenhuma migração é aplicada.
    """
    if store is None:
        apply_migrations(db_path)
        store = SqliteStore(db_path)
    repo = StateRepo(store)
    state = repo.load()
    log_system_event("state_loaded", {
        "customers": len(state.customers),
        "products": len(state.products),
        "sales": len(state.sales),
    })
    return AppStateContainer(state, on_change=repo.save)
