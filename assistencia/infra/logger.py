"""
Sistema de logging para as operações da assistência.

Este módulo configura e fornece loggers para registrar as operações
críticas do sistema: movimentações de estoque, vendas, gravações no
armazenamento e eventos gerais.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, Optional


# Flag global para habilitar/desabilitar logging
ENABLE_LOGGING = False
# Flag global para habilitar/desabilitar prints/output
ENABLE_OUTPUT = False

def print_system(*args, **kwargs):
    """Print controlado pelo ENABLE_OUTPUT."""
    if ENABLE_OUTPUT:
        print(*args, **kwargs)

# Configuração base dos loggers
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

def setup_logger(name: str, log_file: str, level: int = logging.INFO) -> logging.Logger:
    """
    Configura um logger específico com arquivo de saída.

    O arquivo só é aberto na primeira mensagem (``delay=True``), de modo
    que nada é criado em disco enquanto o logging estiver desabilitado.

    Args:
        name: Nome do logger
        log_file: Caminho do arquivo de log
        level: Nível de logging (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Logger configurado
    """
    log_path = Path(log_file)

    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False

    while logger.handlers:
        logger.removeHandler(logger.handlers[0])

    class _DirFileHandler(logging.FileHandler):
        def _open(self):
            log_path.parent.mkdir(parents=True, exist_ok=True)
            return super()._open()

    file_handler = _DirFileHandler(log_file, encoding='utf-8', delay=True)
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    logger.addHandler(file_handler)

    return logger

# Diretório base para logs (na pasta do projeto)
BASE_DIR = Path(__file__).parent.parent
LOGS_DIR = BASE_DIR / "logs"

LOG_FILES = {
    "transactions": LOGS_DIR / "transactions.log",
    "estoque": LOGS_DIR / "estoque.log",
    "vendas": LOGS_DIR / "vendas.log",
    "database": LOGS_DIR / "database.log",
    "system": LOGS_DIR / "system.log",
}

# Loggers específicos para cada operação
transaction_logger = setup_logger('assistencia.transactions', str(LOG_FILES["transactions"]))
estoque_logger = setup_logger('assistencia.estoque', str(LOG_FILES["estoque"]))
venda_logger = setup_logger('assistencia.vendas', str(LOG_FILES["vendas"]))
database_logger = setup_logger('assistencia.database', str(LOG_FILES["database"]))
system_logger = setup_logger('assistencia.system', str(LOG_FILES["system"]))

def _enabled() -> bool:
    return ENABLE_LOGGING or ENABLE_OUTPUT

def log_transaction(operation: str, data: Dict[str, Any], result: Optional[Any] = None, error: Optional[str] = None) -> None:
    """
    Registra uma transação completa no log.

    Args:
        operation: Tipo de operação (cadastrar_cliente, finalizar_venda, ...)
        data: Dados da transação
        result: Resultado da operação (opcional)
        error: Mensagem de erro (opcional)
    """
    if not _enabled():
        return
    if error:
        transaction_logger.error(f"TRANSACTION_FAILED: {operation} - {error} - Data: {data}")
    else:
        transaction_logger.info(f"TRANSACTION_SUCCESS: {operation} - Result: {result} - Data: {data}")

def log_estoque(action: str, product_id: str, quantidade: int, **kwargs) -> None:
    """
    Log específico para movimentações de estoque.

    Args:
        action: Tipo da movimentação (in, out, sale)
        product_id: Identificador do produto
        quantidade: Quantidade movimentada (com sinal)
        **kwargs: Dados adicionais
    """
    if not _enabled():
        return
    log_data = {"action": action, "product_id": product_id, "quantidade": quantidade, **kwargs}
    estoque_logger.info(f"ESTOQUE_{action.upper()}: {log_data}")

def log_venda(action: str, sale_id: str, total: float, **kwargs) -> None:
    """Log específico para vendas."""
    if not _enabled():
        return
    log_data = {"action": action, "sale_id": sale_id, "total": total, **kwargs}
    venda_logger.info(f"VENDA_{action.upper()}: {log_data}")

def log_database_operation(table: str, operation: str, affected_rows: int = 0, **kwargs) -> None:
    """
    Log específico para operações no armazenamento.

    Args:
        table: Chave ou tabela afetada
        operation: Operação (GET, SET, SET_MANY)
        affected_rows: Número de registros afetados
        **kwargs: Dados adicionais
    """
    if not _enabled():
        return
    log_data = {"table": table, "operation": operation, "affected_rows": affected_rows, **kwargs}
    database_logger.info(f"DB_{operation}: {log_data}")

def log_system_event(event: str, details: Dict[str, Any] = None, level: str = "info") -> None:
    """
    Log para eventos do sistema.

    Args:
        event: Descrição do evento
        details: Detalhes adicionais (opcional)
        level: Nível do log (info, warning, error)
    """
    if not _enabled():
        return
    log_data = {"event": event, "details": details or {}}
    log_method = getattr(system_logger, level.lower(), system_logger.info)
    log_method(f"SYSTEM_EVENT: {event} - {log_data}")

def log_file_operation(operation: str, file_path: str, rows_processed: int = 0, **kwargs) -> None:
    """Log para operações de arquivo (exportação/importação de backup)."""
    if not _enabled():
        return
    log_data = {"operation": operation, "file_path": file_path, "rows_processed": rows_processed, **kwargs}
    system_logger.info(f"FILE_{operation.upper()}: {log_data}")

def get_log_summary(log_type: str = "transactions", lines: int = 100) -> Optional[str]:
    """
    Obtém um resumo dos logs recentes.

    Args:
        log_type: Tipo de log (transactions, estoque, vendas, database, system)
        lines: Número de linhas a retornar

    Returns:
        Conteúdo do log como string
    """
    if not _enabled():
        return None

    log_file = LOG_FILES.get(log_type)
    if not log_file or not log_file.exists():
        return f"Log {log_type} não encontrado."

    try:
        with open(log_file, 'r', encoding='utf-8') as f:
            all_lines = f.readlines()
            return ''.join(all_lines[-lines:])
    except OSError as e:
        return f"Erro ao ler log {log_type}: {e}"

def carimbo() -> str:
    return datetime.now().isoformat(timespec="seconds")
