# assistencia/usecases/ordens_servico.py
"""
UC: ordens de serviço (abertura, atualização e consulta).

Fluxo: analyzing -> repairing -> completed -> delivered.

Obs.:
- ``completed_at`` é preenchido uma única vez, na primeira vez que a ordem
  passa para ``completed``; salvamentos posteriores não o alteram.
- O nome do cliente é copiado na abertura e atualizado apenas quando a
  ordem é salva novamente (refletindo o cliente selecionado).
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from assistencia.domain.erros import ClienteInexistente, RegistroNaoEncontrado, ValidacaoError
from assistencia.domain.models import AppState, ServiceOrder, agora_iso, money, novo_id
from assistencia.domain.policies import data_conclusao, validar_ordem_servico
from assistencia.infra.logger import log_system_event, log_transaction
from assistencia.usecases.estado import AppStateContainer


def _opcional(x: Optional[str]) -> Optional[str]:
    s = (x or "").strip()
    return s or None


def _custo(x: Optional[float]) -> Optional[float]:
    return money(x) if x is not None else None


def salvar_ordem_servico(
    container: AppStateContainer,
    customer_id: str,
    device: str,
    issue: str,
    status: str = "analyzing",
    estimated_cost: Optional[float] = None,
    final_cost: Optional[float] = None,
    notes: Optional[str] = None,
    order_id: Optional[str] = None,
    agora: Optional[str] = None,
) -> ServiceOrder:
    """Abre (``order_id=None``) ou atualiza uma ordem de serviço."""
    data: Dict[str, Any] = {"order_id": order_id, "customer_id": customer_id, "status": status}
    try:
        erros = validar_ordem_servico(customer_id, device, issue, status, estimated_cost, final_cost, notes)
        if erros:
            raise ValidacaoError(erros)
        cliente = container.state.customer(customer_id)
        if cliente is None:
            raise ClienteInexistente(customer_id)

        agora = agora or agora_iso()
        anterior = None
        if order_id is not None:
            anterior = container.state.service_order(order_id)
            if anterior is None:
                raise RegistroNaoEncontrado("serviceOrders", order_id)

        ordem = ServiceOrder(
            id=anterior.id if anterior else novo_id(),
            customer_id=customer_id,
            customer_name=cliente.name,
            device=device.strip(),
            issue=issue.strip(),
            status=status,
            estimated_cost=_custo(estimated_cost),
            final_cost=_custo(final_cost),
            created_at=anterior.created_at if anterior else agora,
            completed_at=data_conclusao(status, anterior.completed_at if anterior else None, agora),
            notes=_opcional(notes),
        )
        if anterior:
            container.update_service_order(ordem)
        else:
            container.add_service_order(ordem)
        log_transaction("salvar_ordem_servico", data, result={"id": ordem.id, "status": ordem.status})
        return ordem
    except Exception as e:
        log_transaction("salvar_ordem_servico", data, error=str(e))
        log_system_event("ordem_servico_error", {"error": str(e)}, level="error")
        raise


def alterar_status(container: AppStateContainer, order_id: str, status: str, agora: Optional[str] = None) -> ServiceOrder:
    """Atalho para mudar apenas o status, mantendo os demais campos."""
    o = container.state.service_order(order_id)
    if o is None:
        raise RegistroNaoEncontrado("serviceOrders", order_id)
    return salvar_ordem_servico(
        container,
        customer_id=o.customer_id,
        device=o.device,
        issue=o.issue,
        status=status,
        estimated_cost=o.estimated_cost,
        final_cost=o.final_cost,
        notes=o.notes,
        order_id=o.id,
        agora=agora,
    )


def buscar_ordens(state: AppState, termo: str = "") -> List[ServiceOrder]:
    """Filtra por nome do cliente, aparelho ou problema relatado."""
    t = (termo or "").strip().lower()
    if not t:
        return list(state.service_orders)
    return [
        o for o in state.service_orders
        if t in o.customer_name.lower() or t in o.device.lower() or t in o.issue.lower()
    ]


def ordens_pendentes(state: AppState) -> List[ServiceOrder]:
    return [o for o in state.service_orders if o.status in ("analyzing", "repairing")]
