# assistencia/infra/repositories.py
"""
Repositórios sobre o armazenamento chave/valor.

Classes:
- StateRepo     -> documento principal com as cinco coleções
- SettingsRepo  -> documentos de configuração (empresa, usuário, sistema)
"""

from __future__ import annotations

import json
from dataclasses import asdict, fields
from typing import Any, Dict, Type, TypeVar

from assistencia.config import (
    COMPANY_SETTINGS_KEY,
    STATE_KEY,
    SYSTEM_SETTINGS_KEY,
    USER_SETTINGS_KEY,
    CompanySettings,
    SystemSettings,
    UserSettings,
)
from assistencia.domain.models import AppState, camel_case, state_from_dict, state_to_dict
from .logger import log_system_event
from .storage import KeyValueStore


T = TypeVar("T")


def dumps(obj: Any) -> str:
    return json.dumps(obj, ensure_ascii=False)


# -------------------------
# Estado principal
# -------------------------

class StateRepo:
    def __init__(self, store: KeyValueStore, key: str = STATE_KEY):
        self.store = store
        self.key = key

    def load(self) -> AppState:
        """Carrega o estado salvo.

        Documento ausente ou corrompido equivale a "sem dados anteriores":
        retorna o estado vazio e apenas registra um aviso.
        """
        raw = self.store.get(self.key)
        if raw is None:
            return AppState()
        try:
            return state_from_dict(json.loads(raw))
        except ValueError as e:  # JSONDecodeError é subclasse de ValueError
            log_system_event("state_load_corrupt", {"key": self.key, "error": str(e)}, level="warning")
            return AppState()

    def save(self, state: AppState) -> None:
        self.store.set(self.key, dumps(state_to_dict(state)))


# -------------------------
# Configurações
# -------------------------

class SettingsRepo:
    def __init__(self, store: KeyValueStore):
        self.store = store

    def _load(self, key: str, cls: Type[T]) -> T:
        raw = self.store.get(key)
        if raw is None:
            return cls()
        try:
            data = json.loads(raw)
        except ValueError:
            log_system_event("settings_load_corrupt", {"key": key}, level="warning")
            return cls()
        if not isinstance(data, dict):
            return cls()
        kwargs = {f.name: data[camel_case(f.name)] for f in fields(cls) if camel_case(f.name) in data}
        return cls(**kwargs)

    def _save(self, key: str, obj: Any) -> None:
        data: Dict[str, Any] = {camel_case(k): v for k, v in asdict(obj).items()}
        self.store.set(key, dumps(data))

    def company(self) -> CompanySettings:
        return self._load(COMPANY_SETTINGS_KEY, CompanySettings)

    def save_company(self, settings: CompanySettings) -> None:
        self._save(COMPANY_SETTINGS_KEY, settings)

    def user(self) -> UserSettings:
        return self._load(USER_SETTINGS_KEY, UserSettings)

    def save_user(self, settings: UserSettings) -> None:
        self._save(USER_SETTINGS_KEY, settings)

    def system(self) -> SystemSettings:
        return self._load(SYSTEM_SETTINGS_KEY, SystemSettings)

    def save_system(self, settings: SystemSettings) -> None:
        self._save(SYSTEM_SETTINGS_KEY, settings)
