# assistencia/usecases/clientes.py
"""
UC: cadastro e consulta de clientes.
- cadastrar_cliente(): valida o formulário e inclui o cliente.
- atualizar_cliente(): valida e substitui o cliente pelo id (mantém createdAt).
- buscar_clientes(): filtro por nome, telefone ou e-mail.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Dict, List, Optional

from assistencia.domain.erros import RegistroNaoEncontrado, ValidacaoError
from assistencia.domain.models import AppState, Customer, agora_iso, novo_id
from assistencia.domain.policies import validar_cliente
from assistencia.infra.logger import log_transaction
from assistencia.usecases.estado import AppStateContainer


def _opcional(x: Optional[str]) -> Optional[str]:
    s = (x or "").strip()
    return s or None


def cadastrar_cliente(
    container: AppStateContainer,
    name: str,
    phone: str,
    email: Optional[str] = None,
) -> Customer:
    """Valida e inclui um novo cliente."""
    erros = validar_cliente(name, phone, email)
    if erros:
        log_transaction("cadastrar_cliente", {"name": name}, error=str(erros))
        raise ValidacaoError(erros)
    cliente = Customer(
        id=novo_id(),
        name=name.strip(),
        phone=phone.strip(),
        email=_opcional(email),
        created_at=agora_iso(),
    )
    container.add_customer(cliente)
    log_transaction("cadastrar_cliente", {"id": cliente.id, "name": cliente.name}, result="success")
    return cliente


def atualizar_cliente(
    container: AppStateContainer,
    customer_id: str,
    name: str,
    phone: str,
    email: Optional[str] = None,
) -> Customer:
    """Atualiza os dados do cliente; ordens e vendas antigas mantêm o nome original."""
    atual = container.state.customer(customer_id)
    if atual is None:
        raise RegistroNaoEncontrado("customers", customer_id)
    erros = validar_cliente(name, phone, email)
    if erros:
        raise ValidacaoError(erros)
    cliente = replace(atual, name=name.strip(), phone=phone.strip(), email=_opcional(email))
    container.update_customer(cliente)
    log_transaction("atualizar_cliente", {"id": customer_id}, result="success")
    return cliente


def buscar_clientes(state: AppState, termo: str = "") -> List[Customer]:
    t = (termo or "").strip().lower()
    if not t:
        return list(state.customers)
    return [
        c for c in state.customers
        if t in c.name.lower() or t in c.phone or (c.email and t in c.email.lower())
    ]


def ordens_por_cliente(state: AppState) -> Dict[str, int]:
    """Quantidade de ordens de serviço de cada cliente (id -> total)."""
    out: Dict[str, int] = {c.id: 0 for c in state.customers}
    for o in state.service_orders:
        out[o.customer_id] = out.get(o.customer_id, 0) + 1
    return out
