"""
Exceções do domínio.

- ValidacaoError: campos de formulário inválidos (mapa campo -> mensagem).
- RegraNegocioError: operação rejeitada por regra de negócio, antes de
  qualquer alteração de estado.
- BackupInvalido: arquivo de backup malformado (nenhuma escrita realizada).
- ReinicioNecessario: contêiner bloqueado após importar backup.
"""

from __future__ import annotations

from typing import Dict, Optional


class AssistenciaError(Exception):
    pass


class ValidacaoError(AssistenciaError):
    def __init__(self, erros: Dict[str, str]):
        self.erros = dict(erros)
        detalhes = "; ".join(f"{campo}: {msg}" for campo, msg in self.erros.items())
        super().__init__(f"Dados inválidos - {detalhes}")


class RegraNegocioError(AssistenciaError):
    pass


class EstoqueInsuficiente(RegraNegocioError):
    def __init__(self, produto: str, disponivel: int, solicitado: int):
        self.produto = produto
        self.disponivel = disponivel
        self.solicitado = solicitado
        super().__init__(
            f"Estoque insuficiente para '{produto}': "
            f"apenas {disponivel} unidades disponíveis (solicitado: {solicitado})"
        )


class ClienteInexistente(RegraNegocioError):
    def __init__(self, customer_id: Optional[str]):
        self.customer_id = customer_id
        super().__init__(f"Cliente não encontrado: {customer_id}")


class ProdutoInexistente(RegraNegocioError):
    def __init__(self, product_id: Optional[str]):
        self.product_id = product_id
        super().__init__(f"Produto não encontrado: {product_id}")


class RegistroNaoEncontrado(RegraNegocioError):
    def __init__(self, colecao: str, record_id: str):
        self.colecao = colecao
        self.record_id = record_id
        super().__init__(f"Registro {record_id} não existe em {colecao}")


class RegistroDuplicado(RegraNegocioError):
    def __init__(self, colecao: str, record_id: str):
        self.colecao = colecao
        self.record_id = record_id
        super().__init__(f"Registro {record_id} já existe em {colecao}")


class CarrinhoVazio(RegraNegocioError):
    def __init__(self):
        super().__init__("Adicione pelo menos um produto ao carrinho")


class BackupInvalido(AssistenciaError):
    pass


class ReinicioNecessario(RegraNegocioError):
    def __init__(self, motivo: str):
        self.motivo = motivo
        super().__init__(f"{motivo}. Reinicie o sistema antes de alterar dados.")
