# assistencia/usecases/configuracoes.py
"""
UC: configurações e backup.
- carregar/salvar configurações (empresa, usuário, sistema), cada uma na
  sua própria chave de armazenamento;
- exportar_backup(): grava as cinco coleções num arquivo JSON;
- importar_backup(): valida o arquivo inteiro e só então grava.

Obs.:
- A importação não reinicializa o contêiner em uso: os dados importados
  passam a valer na próxima inicialização.
- Arquivo malformado -> BackupInvalido, sem nenhuma escrita.
"""

from __future__ import annotations

import json
from dataclasses import fields, replace
from datetime import date
from pathlib import Path
from typing import Any, Dict, Optional, Union

from assistencia.config import BACKUP_KEYS, CompanySettings, SystemSettings, UserSettings
from assistencia.domain.erros import BackupInvalido, ValidacaoError
from assistencia.domain.models import COLLECTIONS, decode_collection, state_to_dict
from assistencia.domain.policies import EMAIL_RE
from assistencia.infra.logger import log_file_operation, log_system_event, log_transaction, print_system
from assistencia.infra.repositories import SettingsRepo, StateRepo
from assistencia.infra.storage import KeyValueStore


PathLike = Union[str, Path]


# -------------------------
# Configurações
# -------------------------

def _atualizar(atual, valores: Dict[str, Any]):
    """Aplica somente os campos informados (None = manter)."""
    nomes = {f.name for f in fields(atual)}
    desconhecidos = set(valores) - nomes
    if desconhecidos:
        raise ValidacaoError({k: "Campo desconhecido" for k in sorted(desconhecidos)})
    return replace(atual, **{k: v for k, v in valores.items() if v is not None})


def salvar_empresa(store: KeyValueStore, **valores) -> CompanySettings:
    repo = SettingsRepo(store)
    novo = _atualizar(repo.company(), valores)
    if novo.email and not EMAIL_RE.search(novo.email):
        raise ValidacaoError({"email": "Email inválido"})
    repo.save_company(novo)
    log_transaction("salvar_empresa", valores, result="success")
    return novo


def salvar_usuario(store: KeyValueStore, **valores) -> UserSettings:
    repo = SettingsRepo(store)
    novo = _atualizar(repo.user(), valores)
    repo.save_user(novo)
    log_transaction("salvar_usuario", valores, result="success")
    return novo


def salvar_sistema(store: KeyValueStore, **valores) -> SystemSettings:
    repo = SettingsRepo(store)
    novo = _atualizar(repo.system(), valores)
    erros = {}
    if novo.low_stock_alert < 0:
        erros["low_stock_alert"] = "Valor não pode ser negativo"
    if novo.default_service_warranty < 0:
        erros["default_service_warranty"] = "Valor não pode ser negativo"
    if erros:
        raise ValidacaoError(erros)
    repo.save_system(novo)
    log_transaction("salvar_sistema", valores, result="success")
    return novo


# -------------------------
# Backup
# -------------------------

def nome_backup_padrao(hoje: Optional[date] = None) -> str:
    return f"techassist-backup-{(hoje or date.today()).isoformat()}.json"


def exportar_backup(store: KeyValueStore, destino: PathLike) -> Dict[str, int]:
    """Grava as cinco coleções persistidas num arquivo JSON (indentado)."""
    state = StateRepo(store).load()
    data = state_to_dict(state)
    path = Path(destino)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
    contagem = {k: len(v) for k, v in data.items()}
    log_file_operation("export", str(path), rows_processed=sum(contagem.values()))
    return contagem


def ler_backup(origem: PathLike) -> Dict[str, tuple]:
    """Lê e valida o arquivo de backup inteiro.

    Retorna somente as coleções presentes no arquivo, já decodificadas.
    """
    path = Path(origem)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise BackupInvalido(f"Não foi possível ler o arquivo: {e}") from e
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise BackupInvalido(f"Arquivo inválido ou corrompido: {e}") from e
    if not isinstance(data, dict):
        raise BackupInvalido("Arquivo inválido: esperado um objeto JSON")
    presentes = [k for k in BACKUP_KEYS if k in data]
    if not presentes:
        raise BackupInvalido(f"Arquivo sem nenhuma das chaves esperadas ({', '.join(BACKUP_KEYS)})")
    out: Dict[str, tuple] = {}
    for chave in presentes:
        try:
            out[chave] = decode_collection(chave, data[chave], strict=True)
        except ValueError as e:
            raise BackupInvalido(f"Coleção '{chave}' inválida: {e}") from e
    return out


def importar_backup(store: KeyValueStore, origem: PathLike) -> Dict[str, int]:
    """Substitui, no armazenamento, cada coleção presente no arquivo.

    Coleções ausentes no arquivo são mantidas. A gravação é única: ou tudo
    é gravado, ou nada.
    """
    try:
        colecoes = ler_backup(origem)
    except BackupInvalido as e:
        log_file_operation("import", str(origem), error=str(e))
        log_transaction("importar_backup", {"file": str(origem)}, error=str(e))
        raise

    repo = StateRepo(store)
    atual = repo.load()
    kwargs = {}
    for chave, itens in colecoes.items():
        attr, _cls = COLLECTIONS[chave]
        kwargs[attr] = itens
    novo = replace(atual, **kwargs) if kwargs else atual
    repo.save(novo)

    contagem = {k: len(v) for k, v in colecoes.items()}
    log_file_operation("import", str(origem), rows_processed=sum(contagem.values()))
    log_system_event("backup_importado", {"colecoes": contagem, "reinicio_necessario": True})
    print_system(f">> Backup importado: {sum(contagem.values())} registros de {origem}")
    return contagem
