# assistencia/usecases/movimentacao.py
"""
UC: registrar movimentação manual de estoque (entrada/reposição ou
saída/ajuste).

Obs.:
- 'in' soma ao estoque; 'out' subtrai e é rejeitada se a quantidade for
  maior que o estoque atual.
- Cada movimentação aceita gera exatamente um registro de movimentação e
  uma atualização do produto, aplicados juntos pelo contêiner.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from assistencia.domain.erros import ProdutoInexistente, ValidacaoError
from assistencia.domain.models import AppState, Product, StockMovement, agora_iso, novo_id
from assistencia.domain.policies import novo_estoque, sinal_movimentacao, validar_movimentacao
from assistencia.infra.logger import log_system_event, log_transaction
from assistencia.usecases.estado import AppStateContainer


def prever_estoque(produto: Product, tipo: str, quantidade: int) -> int:
    """Estoque resultante exibido antes de confirmar a movimentação."""
    return novo_estoque(produto.stock, sinal_movimentacao(tipo, quantidade))


def registrar_movimentacao(
    container: AppStateContainer,
    product_id: str,
    tipo: str,
    quantidade: Optional[int],
    motivo: str,
) -> Tuple[StockMovement, Product]:
    """Valida e registra a movimentação; retorna (movimentação, produto atualizado)."""
    data: Dict[str, Any] = {"product_id": product_id, "type": tipo, "quantity": quantidade}
    log_system_event("movimentacao_start", data)
    try:
        erros = validar_movimentacao(tipo, quantidade, motivo)
        if erros:
            raise ValidacaoError(erros)
        if container.state.product(product_id) is None:
            raise ProdutoInexistente(product_id)

        mov = StockMovement(
            id=novo_id(),
            product_id=product_id,
            type=tipo,
            quantity=sinal_movimentacao(tipo, quantidade),
            reason=motivo.strip(),
            created_at=agora_iso(),
        )
        state = container.register_stock_movement(mov)
        produto = state.product(product_id)
        log_transaction("registrar_movimentacao", data, result={"stock": produto.stock})
        return mov, produto
    except Exception as e:
        log_transaction("registrar_movimentacao", data, error=str(e))
        log_system_event("movimentacao_error", {"error": str(e)}, level="error")
        raise


def historico_movimentacoes(state: AppState, product_id: Optional[str] = None) -> List[StockMovement]:
    """Movimentações (mais recentes primeiro), opcionalmente de um produto."""
    movs = [m for m in state.stock_movements if product_id is None or m.product_id == product_id]
    return list(reversed(movs))
