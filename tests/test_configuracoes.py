import json

import pytest

from assistencia.config import STATE_KEY
from assistencia.domain.erros import BackupInvalido, ValidacaoError
from assistencia.infra.repositories import SettingsRepo, StateRepo
from assistencia.infra.storage import MemoryStore
from assistencia.usecases.clientes import cadastrar_cliente
from assistencia.usecases.configuracoes import (
    exportar_backup,
    importar_backup,
    ler_backup,
    nome_backup_padrao,
    salvar_empresa,
    salvar_sistema,
    salvar_usuario,
)
from assistencia.usecases.estado import criar_container
from assistencia.usecases.produtos import cadastrar_produto


def test_atualizacao_parcial_mantem_demais_campos(store):
    salvar_empresa(store, name="Loja X", phone="(11) 3333-4444")
    salvar_empresa(store, cnpj="12.345.678/0001-90", phone=None)
    empresa = SettingsRepo(store).company()
    assert (empresa.name, empresa.phone, empresa.cnpj) == ("Loja X", "(11) 3333-4444", "12.345.678/0001-90")

    salvar_sistema(store, default_service_warranty=30, dark_mode=True)
    sistema = SettingsRepo(store).system()
    assert sistema.default_service_warranty == 30
    assert sistema.dark_mode is True
    assert sistema.print_receipts is True

    salvar_usuario(store, sound_effects=True)
    assert SettingsRepo(store).user().sound_effects is True
    assert SettingsRepo(store).user().name == "Admin"


def test_configuracoes_invalidas(store):
    with pytest.raises(ValidacaoError):
        salvar_empresa(store, email="sem-arroba")
    with pytest.raises(ValidacaoError):
        salvar_sistema(store, low_stock_alert=-1)
    with pytest.raises(ValidacaoError):
        salvar_usuario(store, apelido="x")
    assert store.writes == 0


def test_nome_backup_padrao():
    from datetime import date
    assert nome_backup_padrao(date(2024, 3, 15)) == "techassist-backup-2024-03-15.json"


def test_exportar_e_importar_backup(tmp_path, container, store):
    cadastrar_cliente(container, "Maria", "11999990000")
    cadastrar_produto(container, "Cabo", "Acessórios", 15.0, 4, 1)
    destino = tmp_path / "backup.json"

    contagem = exportar_backup(store, destino)
    assert contagem == {"customers": 1, "serviceOrders": 0, "products": 1, "sales": 0, "stockMovements": 0}
    data = json.loads(destino.read_text(encoding="utf-8"))
    assert data["customers"][0]["name"] == "Maria"
    assert "createdAt" in data["products"][0]

    novo = MemoryStore()
    importar_backup(novo, destino)
    assert novo.writes == 1
    assert criar_container(store=novo).state == container.state


def test_importacao_substitui_somente_colecoes_presentes(tmp_path, container, store):
    cliente = cadastrar_cliente(container, "Maria", "11999990000")
    arquivo = tmp_path / "parcial.json"
    arquivo.write_text(json.dumps({"products": [{
        "id": "p1", "name": "Tela", "category": "Peças", "price": 200, "stock": 1,
        "minStock": 1, "createdAt": "2024-01-01T00:00:00",
    }]}), encoding="utf-8")

    assert importar_backup(store, arquivo) == {"products": 1}
    state = StateRepo(store).load()
    assert state.customers == (cliente,)
    assert [p.id for p in state.products] == ["p1"]
    # o contêiner em uso não é recarregado
    assert container.state.products == ()


_ORDEM = {
    "id": "o1", "customerId": "c1", "customerName": "Maria", "device": "iPhone",
    "issue": "Tela", "status": "analyzing", "createdAt": "2024-01-01T10:00:00",
}
_VENDA = {
    "id": "s1", "items": [], "total": 0, "paymentMethod": "pix", "createdAt": "2024-01-01T10:00:00",
}
_MOVIMENTO = {
    "id": "m1", "productId": "p1", "type": "in", "quantity": 1, "reason": "Compra",
    "createdAt": "2024-01-01T10:00:00",
}


@pytest.mark.parametrize(
    "conteudo",
    [
        "{isto não é json",
        "[1, 2, 3]",
        json.dumps({"outra": []}),
        json.dumps({"customers": {"id": "c1"}}),
        json.dumps({"customers": [{"id": "c1"}]}),
        json.dumps({"customers": [], "products": [{"id": "p1", "price": "caro"}]}),
        json.dumps({"serviceOrders": [dict(_ORDEM, createdAt="ontem")]}),
        json.dumps({"serviceOrders": [dict(_ORDEM, status="perdido")]}),
        json.dumps({"serviceOrders": [dict(_ORDEM, status="completed", completedAt="amanhã")]}),
        json.dumps({"sales": [dict(_VENDA, paymentMethod="cheque")]}),
        json.dumps({"stockMovements": [dict(_MOVIMENTO, type="ajuste")]}),
    ],
)
def test_backup_malformado_nao_grava_nada(tmp_path, conteudo):
    arquivo = tmp_path / "ruim.json"
    arquivo.write_text(conteudo, encoding="utf-8")
    store = MemoryStore({STATE_KEY: json.dumps({"customers": []})})
    with pytest.raises(BackupInvalido):
        importar_backup(store, arquivo)
    assert store.writes == 0


def test_backup_inexistente(tmp_path):
    with pytest.raises(BackupInvalido):
        ler_backup(tmp_path / "nao-existe.json")


def test_backup_valido_com_registros_completos(tmp_path, store):
    arquivo = tmp_path / "ok.json"
    arquivo.write_text(json.dumps({
        "serviceOrders": [dict(_ORDEM, status="completed", completedAt="2024-01-02T09:00:00Z")],
        "sales": [_VENDA],
        "stockMovements": [dict(_MOVIMENTO, type="service")],
    }), encoding="utf-8")
    assert importar_backup(store, arquivo) == {"serviceOrders": 1, "sales": 1, "stockMovements": 1}
    assert StateRepo(store).load().service_orders[0].completed_at == "2024-01-02T09:00:00Z"
