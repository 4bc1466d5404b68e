"""
Armazenamento chave/valor de documentos JSON.

- SqliteStore: tabela ``armazenamento`` no arquivo SQLite do sistema.
- MemoryStore: dicionário em memória (testes e execuções descartáveis).

Os valores são strings (texto JSON). ``set_many`` grava todas as chaves na
mesma transação: ou todas são gravadas, ou nenhuma.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, List, Mapping, Optional

from .db import connect
from .logger import carimbo, log_database_operation


class KeyValueStore(ABC):
    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        self.set_many({key: value})

    @abstractmethod
    def set_many(self, items: Mapping[str, str]) -> None:
        ...

    @abstractmethod
    def keys(self) -> List[str]:
        ...


class SqliteStore(KeyValueStore):
    def __init__(self, db_path: str):
        self.db_path = db_path

    def get(self, key: str) -> Optional[str]:
        with connect(self.db_path) as c:
            row = c.execute("SELECT valor FROM armazenamento WHERE chave = ?", (key,)).fetchone()
        log_database_operation(key, "GET", 1 if row else 0)
        return row[0] if row else None

    def set_many(self, items: Mapping[str, str]) -> None:
        agora = carimbo()
        rows = [(k, v, agora) for k, v in items.items()]
        with connect(self.db_path) as c:
            c.executemany(
                """
                INSERT INTO armazenamento (chave, valor, atualizado_em)
                VALUES (?, ?, ?)
                ON CONFLICT(chave) DO UPDATE SET
                    valor=excluded.valor,
                    atualizado_em=excluded.atualizado_em
                """,
                rows,
            )
        log_database_operation(",".join(items), "SET_MANY", len(rows))

    def keys(self) -> List[str]:
        with connect(self.db_path) as c:
            return [r[0] for r in c.execute("SELECT chave FROM armazenamento ORDER BY chave")]


class MemoryStore(KeyValueStore):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})
        self.writes = 0

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set_many(self, items: Mapping[str, str]) -> None:
        self.data.update(items)
        self.writes += 1

    def keys(self) -> List[str]:
        return sorted(self.data)
