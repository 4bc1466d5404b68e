from assistencia.infra import logger


def test_logging_desabilitado_por_padrao(capsys):
    assert logger.get_log_summary("transactions") is None
    logger.print_system("não aparece")
    assert capsys.readouterr().out == ""


def test_log_transaction_grava_em_arquivo(tmp_path, monkeypatch):
    arquivo = tmp_path / "transactions.log"
    monkeypatch.setattr(logger, "ENABLE_LOGGING", True)
    monkeypatch.setattr(
        logger, "transaction_logger", logger.setup_logger("assistencia.test.transactions", str(arquivo))
    )
    monkeypatch.setitem(logger.LOG_FILES, "transactions", arquivo)

    logger.log_transaction("finalizar_venda", {"itens": 2}, result={"total": 25.5})
    logger.log_transaction("finalizar_venda", {"itens": 0}, error="Adicione pelo menos um produto")

    resumo = logger.get_log_summary("transactions")
    assert "TRANSACTION_SUCCESS: finalizar_venda" in resumo
    assert "TRANSACTION_FAILED: finalizar_venda - Adicione pelo menos um produto" in resumo
    assert logger.get_log_summary("inexistente") == "Log inexistente não encontrado."


def test_print_system_com_saida_habilitada(capsys, monkeypatch):
    monkeypatch.setattr(logger, "ENABLE_OUTPUT", True)
    logger.print_system("olá")
    assert capsys.readouterr().out == "olá\n"
