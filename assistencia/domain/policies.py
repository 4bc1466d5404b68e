"""
Políticas de validação e regras de negócio da assistência.

Este módulo concentra as regras que os formulários e o contêiner de estado
aplicam antes de qualquer alteração: validação de campos (retornando um
mapa campo -> mensagem), cálculo de novo estoque e a regra de conclusão
das ordens de serviço. As funções são puras; quem as chama decide se
levanta ``ValidacaoError`` ou ``RegraNegocioError``.
"""

from __future__ import annotations

import re
from typing import Dict, Optional

from assistencia.config import LIMITS
from assistencia.domain.models import (
    MOVEMENT_TYPES,
    PAYMENT_METHODS,
    SERVICE_STATUSES,
)


EMAIL_RE = re.compile(r"\S+@\S+\.\S+")


def _obrigatorio(erros: Dict[str, str], campo: str, valor: Optional[str], msg: str, maximo: Optional[int] = None) -> None:
    s = (valor or "").strip()
    if not s:
        erros[campo] = msg
    elif maximo is not None and len(s) > maximo:
        erros[campo] = f"Máximo {maximo} caracteres"


def validar_cliente(name: Optional[str], phone: Optional[str], email: Optional[str]) -> Dict[str, str]:
    """Valida os campos do cadastro de cliente.

    Regras:
        - ``name`` e ``phone`` não podem ser vazios (após ``strip``).
        - ``email``, se informado, deve ter o formato ``x@y.z``.
    """
    erros: Dict[str, str] = {}
    _obrigatorio(erros, "name", name, "Nome é obrigatório")
    _obrigatorio(erros, "phone", phone, "Telefone é obrigatório")
    if email and email.strip() and not EMAIL_RE.search(email.strip()):
        erros["email"] = "Email inválido"
    return erros


def validar_produto(
    name: Optional[str],
    category: Optional[str],
    price: Optional[float],
    stock: Optional[int],
    min_stock: Optional[int],
    supplier: Optional[str] = None,
) -> Dict[str, str]:
    """Valida o cadastro de produto (preço e quantidades já convertidos)."""
    erros: Dict[str, str] = {}
    _obrigatorio(erros, "name", name, "Nome é obrigatório", LIMITS.product_name)
    _obrigatorio(erros, "category", category, "Categoria é obrigatória", LIMITS.product_category)
    if price is None:
        erros["price"] = "Preço é obrigatório"
    elif price < 0:
        erros["price"] = "Preço não pode ser negativo"
    if stock is None:
        erros["stock"] = "Estoque inicial é obrigatório"
    elif stock < 0:
        erros["stock"] = "Estoque não pode ser negativo"
    if min_stock is None:
        erros["min_stock"] = "Estoque mínimo é obrigatório"
    elif min_stock < 0:
        erros["min_stock"] = "Estoque mínimo não pode ser negativo"
    if supplier and len(supplier.strip()) > LIMITS.product_supplier:
        erros["supplier"] = f"Máximo {LIMITS.product_supplier} caracteres"
    return erros


def validar_ordem_servico(
    customer_id: Optional[str],
    device: Optional[str],
    issue: Optional[str],
    status: Optional[str],
    estimated_cost: Optional[float] = None,
    final_cost: Optional[float] = None,
    notes: Optional[str] = None,
) -> Dict[str, str]:
    erros: Dict[str, str] = {}
    if not (customer_id or "").strip():
        erros["customer_id"] = "Selecione um cliente"
    _obrigatorio(erros, "device", device, "Informe o aparelho", LIMITS.device)
    _obrigatorio(erros, "issue", issue, "Descreva o problema", LIMITS.issue)
    if status not in SERVICE_STATUSES:
        erros["status"] = f"Status inválido (use: {', '.join(SERVICE_STATUSES)})"
    if estimated_cost is not None and estimated_cost < 0:
        erros["estimated_cost"] = "Valor não pode ser negativo"
    if final_cost is not None and final_cost < 0:
        erros["final_cost"] = "Valor não pode ser negativo"
    if notes and len(notes.strip()) > LIMITS.notes:
        erros["notes"] = f"Máximo {LIMITS.notes} caracteres"
    return erros


def validar_movimentacao(tipo: Optional[str], quantidade: Optional[int], motivo: Optional[str]) -> Dict[str, str]:
    """Valida o formulário de movimentação manual (somente 'in' e 'out')."""
    erros: Dict[str, str] = {}
    if tipo not in ("in", "out"):
        erros["type"] = "Tipo inválido (use: in, out)"
    if quantidade is None:
        erros["quantity"] = "Quantidade é obrigatória"
    elif quantidade <= 0:
        erros["quantity"] = "Quantidade deve ser maior que zero"
    _obrigatorio(erros, "reason", motivo, "Motivo é obrigatório", LIMITS.movement_reason)
    return erros


def validar_pagamento(payment_method: Optional[str]) -> Dict[str, str]:
    if payment_method not in PAYMENT_METHODS:
        return {"payment_method": "Método de pagamento é obrigatório"}
    return {}


def sinal_movimentacao(tipo: str, quantidade: int) -> int:
    """Quantidade com sinal: positiva para entrada, negativa para as demais."""
    if tipo not in MOVEMENT_TYPES:
        raise ValueError(f"tipo de movimentação desconhecido: {tipo}")
    q = abs(int(quantidade))
    return q if tipo == "in" else -q


def novo_estoque(estoque_atual: int, delta: int) -> int:
    return int(estoque_atual) + int(delta)


def estoque_suficiente(estoque_atual: int, solicitado: int) -> bool:
    return int(solicitado) <= int(estoque_atual)


def data_conclusao(status: str, anterior: Optional[str], agora: str) -> Optional[str]:
    """Regra do ``completed_at``: definido uma única vez.

    - Se a ordem já tem data de conclusão, ela é mantida.
    - Caso contrário, é definida com ``agora`` quando o status é ``completed``.
    """
    if anterior:
        return anterior
    if status == "completed":
        return agora
    return None
