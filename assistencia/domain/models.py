"""
Modelos (dataclasses) do domínio.

Observações importantes:
- Todos os registros são imutáveis (frozen); alterações produzem uma nova
  instância via ``dataclasses.replace``.
- O formato JSON persistido usa as chaves camelCase do armazenamento
  original (``createdAt``, ``minStock`` ...). Campos opcionais ``None`` são
  omitidos na serialização; chaves desconhecidas são ignoradas na leitura.
- Nomes de cliente/produto copiados para ordens, vendas e itens são
  snapshots: não acompanham edições posteriores do cadastro.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any, Dict, Optional, Tuple


SERVICE_STATUSES = ("analyzing", "repairing", "completed", "delivered")
PAYMENT_METHODS = ("cash", "pix", "card", "transfer")
MOVEMENT_TYPES = ("in", "out", "sale", "service")

STATUS_LABELS = {
    "analyzing": "Em Análise",
    "repairing": "Em Reparo",
    "completed": "Concluído",
    "delivered": "Entregue",
}

PAYMENT_LABELS = {
    "cash": "Dinheiro",
    "pix": "PIX",
    "card": "Cartão",
    "transfer": "Transferência",
}

MOVEMENT_LABELS = {
    "in": "Entrada",
    "out": "Saída",
    "sale": "Venda",
    "service": "Serviço",
}


def novo_id() -> str:
    return str(uuid.uuid4())


def agora_iso() -> str:
    """Timestamp ISO-8601 com o fuso local."""
    return datetime.now().astimezone().isoformat()


def parse_iso(ts: str) -> datetime:
    """Converte um timestamp ISO (aceita sufixo 'Z') para datetime local ingênuo."""
    dt = datetime.fromisoformat(str(ts).replace("Z", "+00:00"))
    if dt.tzinfo is not None:
        dt = dt.astimezone().replace(tzinfo=None)
    return dt


def money(valor: float) -> float:
    return round(float(valor), 2)


@dataclass(frozen=True)
class Customer:
    id: str
    name: str
    phone: str
    created_at: str
    email: Optional[str] = None
    last_service: Optional[str] = None


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    category: str
    price: float
    stock: int
    min_stock: int
    created_at: str
    supplier: Optional[str] = None

    @property
    def estoque_baixo(self) -> bool:
        return self.stock <= self.min_stock


@dataclass(frozen=True)
class ServiceOrder:
    id: str
    customer_id: str
    customer_name: str
    device: str
    issue: str
    status: str
    created_at: str
    estimated_cost: Optional[float] = None
    final_cost: Optional[float] = None
    completed_at: Optional[str] = None
    notes: Optional[str] = None

    @property
    def numero(self) -> str:
        """Número curto exibido nos documentos."""
        return self.id[-6:].upper()


@dataclass(frozen=True)
class SaleItem:
    product_id: str
    product_name: str
    quantity: int
    unit_price: float
    total: float


@dataclass(frozen=True)
class Sale:
    id: str
    items: Tuple[SaleItem, ...]
    total: float
    payment_method: str
    created_at: str
    customer_id: Optional[str] = None
    customer_name: Optional[str] = None


@dataclass(frozen=True)
class StockMovement:
    id: str
    product_id: str
    type: str                 # 'in' | 'out' | 'sale' | 'service'
    quantity: int             # positivo para entrada, negativo para saída/venda
    reason: str
    created_at: str


@dataclass(frozen=True)
class AppState:
    """Estado completo da aplicação: as cinco coleções persistidas juntas."""
    customers: Tuple[Customer, ...] = field(default_factory=tuple)
    service_orders: Tuple[ServiceOrder, ...] = field(default_factory=tuple)
    products: Tuple[Product, ...] = field(default_factory=tuple)
    sales: Tuple[Sale, ...] = field(default_factory=tuple)
    stock_movements: Tuple[StockMovement, ...] = field(default_factory=tuple)

    def customer(self, customer_id: Optional[str]) -> Optional[Customer]:
        return next((c for c in self.customers if c.id == customer_id), None)

    def product(self, product_id: Optional[str]) -> Optional[Product]:
        return next((p for p in self.products if p.id == product_id), None)

    def service_order(self, order_id: Optional[str]) -> Optional[ServiceOrder]:
        return next((o for o in self.service_orders if o.id == order_id), None)

    def sale(self, sale_id: Optional[str]) -> Optional[Sale]:
        return next((s for s in self.sales if s.id == sale_id), None)


# -------------------------
# Codec JSON (camelCase)
# -------------------------

def camel_case(nome: str) -> str:
    head, *rest = nome.split("_")
    return head + "".join(p.capitalize() for p in rest)


_INT_FIELDS = {"stock", "min_stock", "quantity"}
_FLOAT_FIELDS = {"price", "estimated_cost", "final_cost", "unit_price", "total"}


def record_to_dict(rec: Any) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for f in fields(rec):
        val = getattr(rec, f.name)
        if val is None:
            continue
        if f.name == "items":
            val = [record_to_dict(i) for i in val]
        out[camel_case(f.name)] = val
    return out


def record_from_dict(cls, data: Dict[str, Any]):
    """Reconstrói um registro a partir do dicionário camelCase.

    Levanta ``ValueError`` se ``data`` não for um objeto ou se faltar algum
    campo obrigatório.
    """
    if not isinstance(data, dict):
        raise ValueError(f"{cls.__name__}: esperado objeto, recebido {type(data).__name__}")
    kwargs: Dict[str, Any] = {}
    for f in fields(cls):
        chave = camel_case(f.name)
        if chave not in data or data[chave] is None:
            continue
        val = data[chave]
        try:
            if f.name == "items":
                if not isinstance(val, list):
                    raise ValueError("items deve ser lista")
                val = tuple(record_from_dict(SaleItem, i) for i in val)
            elif f.name in _INT_FIELDS:
                val = int(val)
            elif f.name in _FLOAT_FIELDS:
                val = float(val)
        except (TypeError, ValueError) as e:
            raise ValueError(f"{cls.__name__}.{chave}: {e}") from e
        kwargs[f.name] = val
    try:
        return cls(**kwargs)
    except TypeError as e:
        raise ValueError(f"{cls.__name__}: {e}") from e


# coleção (chave JSON) -> (atributo do AppState, classe do registro)
COLLECTIONS: Dict[str, Tuple[str, type]] = {
    "customers": ("customers", Customer),
    "serviceOrders": ("service_orders", ServiceOrder),
    "products": ("products", Product),
    "sales": ("sales", Sale),
    "stockMovements": ("stock_movements", StockMovement),
}


def state_to_dict(state: AppState) -> Dict[str, Any]:
    return {
        chave: [record_to_dict(r) for r in getattr(state, attr)]
        for chave, (attr, _cls) in COLLECTIONS.items()
    }


_ENUM_FIELDS = {
    ServiceOrder: ("status", SERVICE_STATUSES),
    Sale: ("payment_method", PAYMENT_METHODS),
    StockMovement: ("type", MOVEMENT_TYPES),
}


def validate_record(rec: Any) -> None:
    """Confere timestamps e valores enumerados de um registro decodificado.

    Levanta ``ValueError`` com o campo (camelCase) inválido.
    """
    nome = type(rec).__name__
    for campo in ("created_at", "completed_at"):
        ts = getattr(rec, campo, None)
        if ts is None:
            continue
        try:
            parse_iso(ts)
        except (TypeError, ValueError):
            raise ValueError(f"{nome}.{camel_case(campo)}: data inválida {ts!r}")
    if type(rec) in _ENUM_FIELDS:
        campo, validos = _ENUM_FIELDS[type(rec)]
        valor = getattr(rec, campo)
        if valor not in validos:
            raise ValueError(f"{nome}.{camel_case(campo)}: valor desconhecido {valor!r}")


def decode_collection(chave: str, itens: Any, strict: bool = False) -> tuple:
    """Decodifica uma coleção; com ``strict`` cada registro passa por ``validate_record``."""
    _attr, cls = COLLECTIONS[chave]
    if not isinstance(itens, list):
        raise ValueError(f"{chave}: esperado lista")
    registros = tuple(record_from_dict(cls, i) for i in itens)
    if strict:
        for rec in registros:
            validate_record(rec)
    return registros


def state_from_dict(data: Dict[str, Any]) -> AppState:
    """Monta o AppState; coleções ausentes ficam vazias."""
    if not isinstance(data, dict):
        raise ValueError("estado: esperado objeto")
    kwargs = {}
    for chave, (attr, _cls) in COLLECTIONS.items():
        if chave in data:
            kwargs[attr] = decode_collection(chave, data[chave])
    return AppState(**kwargs)
