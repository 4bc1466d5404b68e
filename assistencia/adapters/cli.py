# assistencia/adapters/cli.py
"""
CLI da assistência técnica (Typer).

Comandos principais:
- migrate                                   -> aplica migrações
- clientes add/update/list                  -> cadastro de clientes
- produtos add/update/list                  -> cadastro de produtos
- produtos movimentar/movimentos            -> ajuste manual e histórico de estoque
- vendas nova/list/recibo                   -> venda no balcão e recibos
- os nova/atualizar/list/imprimir           -> ordens de serviço
- rel gerencial/dashboard                   -> relatórios
- config show/empresa/sistema/usuario       -> configurações
- backup exportar/importar                  -> backup em JSON
- tui                                       -> interface interativa

Identificadores podem ser informados pelo prefixo (desde que único).
"""

from __future__ import annotations

import json
from contextlib import contextmanager
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import typer
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from assistencia.config import DB_PATH
from assistencia.domain.erros import AssistenciaError, ProdutoInexistente, RegistroNaoEncontrado
from assistencia.domain.models import (
    MOVEMENT_LABELS,
    PAYMENT_LABELS,
    STATUS_LABELS,
    parse_iso,
)
from assistencia.domain.periodos import PERIODOS
from assistencia.infra.migrations import apply_migrations
from assistencia.infra.repositories import SettingsRepo
from assistencia.infra.storage import SqliteStore
from assistencia.adapters.parsers import parse_data, parse_dinheiro, parse_item_venda
from assistencia.usecases.clientes import atualizar_cliente, buscar_clientes, cadastrar_cliente, ordens_por_cliente
from assistencia.usecases.configuracoes import (
    exportar_backup,
    importar_backup,
    nome_backup_padrao,
    salvar_empresa,
    salvar_sistema,
    salvar_usuario,
)
from assistencia.usecases.documentos import (
    gerar_ordem_servico,
    gerar_recibo_venda,
    gerar_relatorio_gerencial,
    html_para_impressao,
)
from assistencia.usecases.estado import criar_container
from assistencia.usecases.movimentacao import historico_movimentacoes, registrar_movimentacao
from assistencia.usecases.ordens_servico import buscar_ordens, ordens_pendentes, salvar_ordem_servico
from assistencia.usecases.produtos import atualizar_produto, buscar_produtos, cadastrar_produto
from assistencia.usecases.relatorios import (
    painel_do_dia,
    relatorio_gerencial,
    tabela_estoque_baixo,
    tabela_top_clientes,
    tabela_top_produtos,
)
from assistencia.usecases.vendas import Carrinho, buscar_vendas, finalizar_venda, total_vendido


app = typer.Typer(help="Assistência Técnica — CLI")
console = Console()

DB_OPTION = typer.Option(DB_PATH, "--db", help="Caminho do SQLite")


# -----------------------
# util
# -----------------------

def _print_json(obj) -> None:
    typer.echo(json.dumps(obj, ensure_ascii=False, indent=2))


@contextmanager
def _tratar_erros():
    """Converte erros de domínio em mensagem vermelha e código de saída 1."""
    try:
        yield
    except AssistenciaError as e:
        console.print(f"[bold red]Erro:[/bold red] {e}")
        raise typer.Exit(code=1)


def _fmt(val: Any) -> str:
    if val is None:
        return ""
    if isinstance(val, bool):
        return "Sim" if val else "Não"
    if isinstance(val, float):
        return f"{val:,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")
    return str(val)


def _data(ts: Optional[str]) -> str:
    if not ts:
        return ""
    try:
        return parse_iso(ts).strftime("%d/%m/%Y %H:%M")
    except ValueError:
        return str(ts)


def _display_table(data: List[Dict[str, Any]], title: str = "Resultado", vazio: str = "Nenhum dado encontrado") -> None:
    """Exibe uma lista de registros em tabela Rich."""
    if not data:
        console.print(Panel(vazio, title=title, border_style="yellow"))
        return
    table = Table(title=title, box=box.ROUNDED)
    columns = list(data[0].keys())
    for column in columns:
        sample = data[0][column]
        if isinstance(sample, (int, float)) and not isinstance(sample, bool):
            table.add_column(column, justify="right")
        else:
            table.add_column(column)
    for row in data:
        table.add_row(*[_fmt(row.get(col)) for col in columns])
    console.print(table)


def _display_rows(columns: Sequence[str], rows: Sequence[Sequence[Any]], msg: Optional[str], title: str) -> None:
    """Exibe o retorno (colunas, linhas, mensagem) dos relatórios."""
    _display_table([dict(zip(columns, r)) for r in rows], title=title, vazio=msg or "Nenhum dado encontrado")


def _display_campos(obj: Dict[str, Any], title: str) -> None:
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("Campo")
    table.add_column("Valor")
    for k, v in obj.items():
        table.add_row(k, _fmt(v))
    console.print(table)


def _resolver(itens: Sequence, ref: str, colecao: str):
    """Encontra o registro pelo id completo ou por um prefixo único."""
    exato = [i for i in itens if i.id == ref]
    if exato:
        return exato[0]
    candidatos = [i for i in itens if i.id.startswith(ref)]
    if len(candidatos) == 1:
        return candidatos[0]
    raise RegistroNaoEncontrado(colecao, ref)


def _store(db_path: str) -> SqliteStore:
    apply_migrations(db_path)
    return SqliteStore(db_path)


def _salvar_html(texto: str, titulo: str, destino: str) -> None:
    path = Path(destino)
    path.write_text(html_para_impressao(texto, titulo), encoding="utf-8")
    typer.echo(f">> Documento para impressão salvo em: {path}")


# -----------------------
# comandos de infra
# -----------------------

@app.command("migrate")
def cmd_migrate(db_path: str = DB_OPTION):
    """Aplica as migrações do banco."""
    apply_migrations(db_path)
    typer.echo(f">> Migrações aplicadas em: {db_path}")


@app.command("tui")
def cmd_tui(db_path: str = DB_OPTION):
    """Inicia a interface terminal interativa (TUI)."""
    from assistencia.adapters.tui import main_tui
    try:
        main_tui(db_path)
    except KeyboardInterrupt:
        typer.echo("\nSaindo...")
        raise typer.Exit(0)


# -----------------------
# clientes
# -----------------------

clientes_app = typer.Typer(help="Cadastro de clientes.")
app.add_typer(clientes_app, name="clientes")


@clientes_app.command("add")
def cmd_clientes_add(
    nome: str = typer.Option(..., "--nome", help="Nome completo"),
    telefone: str = typer.Option(..., "--telefone", help="Ex.: (11) 99999-9999"),
    email: Optional[str] = typer.Option(None, "--email"),
    db_path: str = DB_OPTION,
):
    """Cadastra um cliente."""
    with _tratar_erros():
        c = cadastrar_cliente(criar_container(db_path), nome, telefone, email)
    typer.echo(f">> Cliente cadastrado: {c.id} - {c.name}")


@clientes_app.command("update")
def cmd_clientes_update(
    customer_id: str = typer.Argument(..., help="Id (ou prefixo) do cliente"),
    nome: Optional[str] = typer.Option(None, "--nome"),
    telefone: Optional[str] = typer.Option(None, "--telefone"),
    email: Optional[str] = typer.Option(None, "--email"),
    db_path: str = DB_OPTION,
):
    """Atualiza o cadastro (apenas os campos informados são alterados)."""
    with _tratar_erros():
        container = criar_container(db_path)
        atual = _resolver(container.state.customers, customer_id, "customers")
        c = atualizar_cliente(
            container,
            atual.id,
            nome if nome is not None else atual.name,
            telefone if telefone is not None else atual.phone,
            email if email is not None else atual.email,
        )
    typer.echo(f">> Cliente atualizado: {c.id} - {c.name}")


@clientes_app.command("list")
def cmd_clientes_list(
    busca: str = typer.Option("", "--busca", help="Filtro por nome, telefone ou e-mail"),
    db_path: str = DB_OPTION,
):
    """Lista os clientes cadastrados."""
    state = criar_container(db_path).state
    ordens = ordens_por_cliente(state)
    rows = [
        {
            "id": c.id,
            "nome": c.name,
            "telefone": c.phone,
            "email": c.email or "",
            "ordens": ordens.get(c.id, 0),
            "cadastro": _data(c.created_at),
        }
        for c in buscar_clientes(state, busca)
    ]
    _display_table(rows, title="Clientes", vazio="Nenhum cliente encontrado")


# -----------------------
# produtos e estoque
# -----------------------

produtos_app = typer.Typer(help="Cadastro de produtos e movimentação de estoque.")
app.add_typer(produtos_app, name="produtos")


@produtos_app.command("add")
def cmd_produtos_add(
    nome: str = typer.Option(..., "--nome"),
    categoria: str = typer.Option(..., "--categoria"),
    preco: str = typer.Option(..., "--preco", help="Ex.: 10,50"),
    estoque: int = typer.Option(0, "--estoque", help="Estoque inicial"),
    minimo: int = typer.Option(0, "--minimo", help="Estoque mínimo"),
    fornecedor: Optional[str] = typer.Option(None, "--fornecedor"),
    db_path: str = DB_OPTION,
):
    """Cadastra um produto."""
    with _tratar_erros():
        p = cadastrar_produto(
            criar_container(db_path), nome, categoria, parse_dinheiro(preco, "price"), estoque, minimo, fornecedor
        )
    typer.echo(f">> Produto cadastrado: {p.id} - {p.name}")


@produtos_app.command("update")
def cmd_produtos_update(
    product_id: str = typer.Argument(..., help="Id (ou prefixo) do produto"),
    nome: Optional[str] = typer.Option(None, "--nome"),
    categoria: Optional[str] = typer.Option(None, "--categoria"),
    preco: Optional[str] = typer.Option(None, "--preco"),
    estoque: Optional[int] = typer.Option(None, "--estoque"),
    minimo: Optional[int] = typer.Option(None, "--minimo"),
    fornecedor: Optional[str] = typer.Option(None, "--fornecedor"),
    db_path: str = DB_OPTION,
):
    """Atualiza o cadastro do produto (apenas os campos informados)."""
    with _tratar_erros():
        container = criar_container(db_path)
        atual = _resolver(container.state.products, product_id, "products")
        p = atualizar_produto(
            container,
            atual.id,
            nome if nome is not None else atual.name,
            categoria if categoria is not None else atual.category,
            parse_dinheiro(preco, "price") if preco is not None else atual.price,
            estoque if estoque is not None else atual.stock,
            minimo if minimo is not None else atual.min_stock,
            fornecedor if fornecedor is not None else atual.supplier,
        )
    typer.echo(f">> Produto atualizado: {p.id} - {p.name}")


@produtos_app.command("list")
def cmd_produtos_list(
    busca: str = typer.Option("", "--busca", help="Filtro por nome, categoria ou fornecedor"),
    baixo: bool = typer.Option(False, "--estoque-baixo", help="Somente produtos com estoque baixo"),
    db_path: str = DB_OPTION,
):
    """Lista os produtos cadastrados."""
    state = criar_container(db_path).state
    produtos = [p for p in buscar_produtos(state, busca) if p.estoque_baixo or not baixo]
    rows = [
        {
            "id": p.id,
            "nome": p.name,
            "categoria": p.category,
            "preco": p.price,
            "estoque": p.stock,
            "minimo": p.min_stock,
            "status": "[bold red]Estoque Baixo[/]" if p.estoque_baixo else "[green]Normal[/]",
        }
        for p in produtos
    ]
    _display_table(rows, title="Produtos", vazio="Nenhum produto encontrado")


@produtos_app.command("movimentar")
def cmd_produtos_movimentar(
    product_id: str = typer.Argument(..., help="Id (ou prefixo) do produto"),
    tipo: str = typer.Option(..., "--tipo", help="in (entrada/reposição) | out (saída/ajuste)"),
    quantidade: int = typer.Option(..., "--quantidade"),
    motivo: str = typer.Option(..., "--motivo"),
    db_path: str = DB_OPTION,
):
    """Registra entrada ou saída manual de estoque."""
    with _tratar_erros():
        container = criar_container(db_path)
        produto = _resolver(container.state.products, product_id, "products")
        mov, atualizado = registrar_movimentacao(container, produto.id, tipo, quantidade, motivo)
    typer.echo(
        f">> {MOVEMENT_LABELS[mov.type]} registrada: {atualizado.name} "
        f"({produto.stock} -> {atualizado.stock})"
    )


@produtos_app.command("movimentos")
def cmd_produtos_movimentos(
    product_id: Optional[str] = typer.Option(None, "--produto", help="Id (ou prefixo) do produto"),
    db_path: str = DB_OPTION,
):
    """Histórico de movimentações de estoque (mais recentes primeiro)."""
    with _tratar_erros():
        state = criar_container(db_path).state
        pid = _resolver(state.products, product_id, "products").id if product_id else None
    nomes = {p.id: p.name for p in state.products}
    rows = [
        {
            "data": _data(m.created_at),
            "produto": nomes.get(m.product_id, m.product_id),
            "tipo": MOVEMENT_LABELS.get(m.type, m.type),
            "quantidade": m.quantity,
            "motivo": m.reason,
        }
        for m in historico_movimentacoes(state, pid)
    ]
    _display_table(rows, title="Movimentações de Estoque", vazio="Nenhuma movimentação registrada")


# -----------------------
# vendas
# -----------------------

vendas_app = typer.Typer(help="Vendas no balcão.")
app.add_typer(vendas_app, name="vendas")


@vendas_app.command("nova")
def cmd_vendas_nova(
    itens: List[str] = typer.Option(..., "--item", "-i", help="PRODUTO:QTD (repita para vários itens)"),
    pagamento: str = typer.Option(..., "--pagamento", help="cash | pix | card | transfer"),
    cliente: Optional[str] = typer.Option(None, "--cliente", help="Id (ou prefixo) do cliente"),
    db_path: str = DB_OPTION,
):
    """Finaliza uma venda com os itens informados."""
    with _tratar_erros():
        container = criar_container(db_path)
        state = container.state
        carrinho = Carrinho()
        for txt in itens:
            ref, qtd = parse_item_venda(txt)
            try:
                produto = _resolver(state.products, ref, "products")
            except RegistroNaoEncontrado:
                raise ProdutoInexistente(ref)
            carrinho.adicionar(produto, qtd)
        customer_id = _resolver(state.customers, cliente, "customers").id if cliente else None
        venda = finalizar_venda(container, carrinho, pagamento, customer_id)
    typer.echo(f">> Venda registrada: {venda.id} - Total R$ {venda.total:.2f}")
    if SettingsRepo(_store(db_path)).system().print_receipts:
        typer.echo("")
        typer.echo(gerar_recibo_venda(venda))


@vendas_app.command("list")
def cmd_vendas_list(
    busca: str = typer.Option("", "--busca", help="Filtro por cliente ou produto"),
    db_path: str = DB_OPTION,
):
    """Lista as vendas registradas."""
    state = criar_container(db_path).state
    rows = [
        {
            "id": s.id,
            "data": _data(s.created_at),
            "cliente": s.customer_name or "Cliente não informado",
            "itens": sum(i.quantity for i in s.items),
            "pagamento": PAYMENT_LABELS.get(s.payment_method, s.payment_method),
            "total": s.total,
        }
        for s in buscar_vendas(state, busca)
    ]
    _display_table(rows, title="Vendas", vazio="Nenhuma venda encontrada")
    if not busca and rows:
        console.print(f"[bold]Total vendido:[/bold] R$ {total_vendido(state):.2f}")


@vendas_app.command("recibo")
def cmd_vendas_recibo(
    sale_id: str = typer.Argument(..., help="Id (ou prefixo) da venda"),
    html_path: Optional[str] = typer.Option(None, "--html", help="Salva também uma página HTML para impressão"),
    db_path: str = DB_OPTION,
):
    """Imprime o recibo de uma venda."""
    with _tratar_erros():
        venda = _resolver(criar_container(db_path).state.sales, sale_id, "sales")
    texto = gerar_recibo_venda(venda)
    typer.echo(texto)
    if html_path:
        _salvar_html(texto, "Recibo de Venda", html_path)


# -----------------------
# ordens de serviço
# -----------------------

os_app = typer.Typer(help="Ordens de serviço.")
app.add_typer(os_app, name="os")


@os_app.command("nova")
def cmd_os_nova(
    cliente: str = typer.Option(..., "--cliente", help="Id (ou prefixo) do cliente"),
    aparelho: str = typer.Option(..., "--aparelho", help="Ex.: iPhone 12 Pro"),
    problema: str = typer.Option(..., "--problema"),
    status: str = typer.Option("analyzing", "--status", help="analyzing | repairing | completed | delivered"),
    orcamento: Optional[str] = typer.Option(None, "--orcamento"),
    valor_final: Optional[str] = typer.Option(None, "--valor-final"),
    obs: Optional[str] = typer.Option(None, "--obs"),
    db_path: str = DB_OPTION,
):
    """Abre uma ordem de serviço."""
    with _tratar_erros():
        container = criar_container(db_path)
        c = _resolver(container.state.customers, cliente, "customers")
        o = salvar_ordem_servico(
            container,
            customer_id=c.id,
            device=aparelho,
            issue=problema,
            status=status,
            estimated_cost=parse_dinheiro(orcamento, "estimated_cost"),
            final_cost=parse_dinheiro(valor_final, "final_cost"),
            notes=obs,
        )
    typer.echo(f">> Ordem de serviço #{o.numero} aberta: {o.id}")


@os_app.command("atualizar")
def cmd_os_atualizar(
    order_id: str = typer.Argument(..., help="Id (ou prefixo) da ordem"),
    status: Optional[str] = typer.Option(None, "--status"),
    cliente: Optional[str] = typer.Option(None, "--cliente"),
    aparelho: Optional[str] = typer.Option(None, "--aparelho"),
    problema: Optional[str] = typer.Option(None, "--problema"),
    orcamento: Optional[str] = typer.Option(None, "--orcamento"),
    valor_final: Optional[str] = typer.Option(None, "--valor-final"),
    obs: Optional[str] = typer.Option(None, "--obs"),
    db_path: str = DB_OPTION,
):
    """Atualiza a ordem (apenas os campos informados)."""
    with _tratar_erros():
        container = criar_container(db_path)
        atual = _resolver(container.state.service_orders, order_id, "serviceOrders")
        customer_id = _resolver(container.state.customers, cliente, "customers").id if cliente else atual.customer_id
        o = salvar_ordem_servico(
            container,
            customer_id=customer_id,
            device=aparelho if aparelho is not None else atual.device,
            issue=problema if problema is not None else atual.issue,
            status=status or atual.status,
            estimated_cost=parse_dinheiro(orcamento, "estimated_cost") if orcamento is not None else atual.estimated_cost,
            final_cost=parse_dinheiro(valor_final, "final_cost") if valor_final is not None else atual.final_cost,
            notes=obs if obs is not None else atual.notes,
            order_id=atual.id,
        )
    typer.echo(f">> Ordem #{o.numero} atualizada: {STATUS_LABELS[o.status]}")


@os_app.command("list")
def cmd_os_list(
    busca: str = typer.Option("", "--busca", help="Filtro por cliente, aparelho ou problema"),
    pendentes: bool = typer.Option(False, "--pendentes", help="Somente em análise ou em reparo"),
    db_path: str = DB_OPTION,
):
    """Lista as ordens de serviço."""
    state = criar_container(db_path).state
    ordens = buscar_ordens(state, busca)
    if pendentes:
        ids = {o.id for o in ordens_pendentes(state)}
        ordens = [o for o in ordens if o.id in ids]
    rows = [
        {
            "numero": o.numero,
            "id": o.id,
            "cliente": o.customer_name,
            "aparelho": o.device,
            "status": STATUS_LABELS.get(o.status, o.status),
            "valor": o.final_cost if o.final_cost is not None else o.estimated_cost,
            "abertura": _data(o.created_at),
        }
        for o in ordens
    ]
    _display_table(rows, title="Ordens de Serviço", vazio="Nenhuma ordem de serviço encontrada")


@os_app.command("imprimir")
def cmd_os_imprimir(
    order_id: str = typer.Argument(..., help="Id (ou prefixo) da ordem"),
    html_path: Optional[str] = typer.Option(None, "--html", help="Salva também uma página HTML para impressão"),
    db_path: str = DB_OPTION,
):
    """Imprime a ordem de serviço com cabeçalho da empresa e termos de garantia."""
    with _tratar_erros():
        ordem = _resolver(criar_container(db_path).state.service_orders, order_id, "serviceOrders")
    settings = SettingsRepo(_store(db_path))
    texto = gerar_ordem_servico(ordem, settings.company(), settings.system())
    typer.echo(texto)
    if html_path:
        _salvar_html(texto, f"Ordem de Serviço #{ordem.numero}", html_path)


# -----------------------
# relatórios
# -----------------------

rel_app = typer.Typer(help="Relatórios")
app.add_typer(rel_app, name="rel")


@rel_app.command("gerencial")
def rel_gerencial(
    periodo: str = typer.Option("month", "--periodo", help=" | ".join(PERIODOS)),
    inicio: Optional[str] = typer.Option(None, "--inicio", help="dd/mm/aaaa (período custom)"),
    fim: Optional[str] = typer.Option(None, "--fim", help="dd/mm/aaaa (período custom)"),
    texto: bool = typer.Option(False, "--texto", help="Imprime o relatório em texto"),
    html_path: Optional[str] = typer.Option(None, "--html", help="Salva uma página HTML para impressão"),
    db_path: str = DB_OPTION,
):
    """Relatório gerencial do período (vendas, serviços, rankings e estoque)."""
    with _tratar_erros():
        state = criar_container(db_path).state
        try:
            rel = relatorio_gerencial(state, periodo, inicio=parse_data(inicio, "inicio"), fim=parse_data(fim, "fim"))
        except ValueError as e:
            console.print(f"[bold red]Erro:[/bold red] {e}")
            raise typer.Exit(code=1)

    if texto or html_path:
        doc = gerar_relatorio_gerencial(rel)
        if texto:
            typer.echo(doc)
        if html_path:
            _salvar_html(doc, "Relatório Gerencial", html_path)
        return

    resumo = [
        f"Período: {rel.periodo.label}",
        f"Vendas: {rel.total_sales} | Faturamento: R$ {rel.total_revenue:.2f} | Ticket Médio: R$ {rel.average_ticket:.2f}",
        f"Serviços: {rel.services_total} | Faturamento Serviços: R$ {rel.service_revenue:.2f}",
        f"Faturamento Total: R$ {rel.grand_total:.2f}",
    ]
    console.print(Panel("\n".join(resumo), title="Relatório Gerencial", border_style="blue"))
    if rel.payment_methods:
        _display_table(
            [{"pagamento": PAYMENT_LABELS.get(k, k), "vendas": v} for k, v in rel.payment_methods.items()],
            title="Formas de Pagamento",
        )
    if rel.service_status:
        _display_table(
            [{"status": STATUS_LABELS.get(k, k), "ordens": v} for k, v in rel.service_status.items()],
            title="Status dos Serviços",
        )
    _display_rows(*tabela_top_produtos(rel), title="Produtos Mais Vendidos")
    _display_rows(*tabela_top_clientes(rel), title="Melhores Clientes")
    _display_rows(*tabela_estoque_baixo(rel.low_stock), title="Estoque Baixo")


@rel_app.command("dashboard")
def rel_dashboard(db_path: str = DB_OPTION):
    """Resumo do dia: serviços, vendas, pendências e estoque baixo."""
    painel = painel_do_dia(criar_container(db_path).state)
    resumo = [
        f"Serviços hoje: {painel.servicos_hoje}",
        f"Vendas hoje: {painel.vendas_hoje}",
        f"Faturamento hoje: R$ {painel.faturamento_hoje:.2f}",
        f"Serviços pendentes: {len(painel.pendentes)}",
        f"Produtos com estoque baixo: {len(painel.estoque_baixo)}",
    ]
    console.print(Panel("\n".join(resumo), title="Dashboard", border_style="green"))
    rows = [
        {
            "numero": o.numero,
            "cliente": o.customer_name,
            "aparelho": o.device,
            "status": STATUS_LABELS.get(o.status, o.status),
        }
        for o in painel.ordens_recentes
    ]
    _display_table(rows, title="Ordens Recentes", vazio="Nenhuma ordem de serviço")
    _display_rows(*tabela_estoque_baixo(painel.estoque_baixo), title="Estoque Baixo")


# -----------------------
# configurações
# -----------------------

config_app = typer.Typer(help="Configurações da empresa, do usuário e do sistema.")
app.add_typer(config_app, name="config")


@config_app.command("show")
def cmd_config_show(
    as_json: bool = typer.Option(False, "--json", help="Saída em JSON"),
    db_path: str = DB_OPTION,
):
    """Exibe as configurações efetivas (com fallback para os padrões)."""
    repo = SettingsRepo(_store(db_path))
    out = {"empresa": asdict(repo.company()), "usuario": asdict(repo.user()), "sistema": asdict(repo.system())}
    if as_json:
        _print_json(out)
        return
    _display_campos(out["empresa"], "Empresa")
    _display_campos(out["usuario"], "Usuário")
    _display_campos(out["sistema"], "Sistema")


@config_app.command("empresa")
def cmd_config_empresa(
    nome: Optional[str] = typer.Option(None, "--nome"),
    endereco: Optional[str] = typer.Option(None, "--endereco"),
    telefone: Optional[str] = typer.Option(None, "--telefone"),
    email: Optional[str] = typer.Option(None, "--email"),
    cnpj: Optional[str] = typer.Option(None, "--cnpj"),
    logo: Optional[str] = typer.Option(None, "--logo"),
    db_path: str = DB_OPTION,
):
    """Altera os dados da empresa (apenas os informados)."""
    with _tratar_erros():
        salvar_empresa(
            _store(db_path), name=nome, address=endereco, phone=telefone, email=email, cnpj=cnpj, logo=logo
        )
    typer.echo(">> Configurações da empresa salvas.")


@config_app.command("usuario")
def cmd_config_usuario(
    nome: Optional[str] = typer.Option(None, "--nome"),
    email: Optional[str] = typer.Option(None, "--email"),
    notificacoes: Optional[bool] = typer.Option(None, "--notificacoes/--sem-notificacoes"),
    alertas_email: Optional[bool] = typer.Option(None, "--alertas-email/--sem-alertas-email"),
    sons: Optional[bool] = typer.Option(None, "--sons/--sem-sons"),
    db_path: str = DB_OPTION,
):
    """Altera as preferências do usuário (apenas as informadas)."""
    with _tratar_erros():
        salvar_usuario(
            _store(db_path),
            name=nome,
            email=email,
            notifications=notificacoes,
            email_alerts=alertas_email,
            sound_effects=sons,
        )
    typer.echo(">> Preferências do usuário salvas.")


@config_app.command("sistema")
def cmd_config_sistema(
    backup_automatico: Optional[bool] = typer.Option(None, "--backup-automatico/--sem-backup-automatico"),
    alerta_estoque: Optional[int] = typer.Option(None, "--alerta-estoque", help="Limite padrão de estoque baixo"),
    garantia: Optional[int] = typer.Option(None, "--garantia", help="Garantia padrão do serviço (dias)"),
    imprimir_recibos: Optional[bool] = typer.Option(None, "--imprimir-recibos/--sem-imprimir-recibos"),
    modo_escuro: Optional[bool] = typer.Option(None, "--modo-escuro/--sem-modo-escuro"),
    db_path: str = DB_OPTION,
):
    """Altera os parâmetros do sistema (apenas os informados)."""
    with _tratar_erros():
        salvar_sistema(
            _store(db_path),
            auto_backup=backup_automatico,
            low_stock_alert=alerta_estoque,
            default_service_warranty=garantia,
            print_receipts=imprimir_recibos,
            dark_mode=modo_escuro,
        )
    typer.echo(">> Configurações do sistema salvas.")


# -----------------------
# backup
# -----------------------

backup_app = typer.Typer(help="Exportação e importação de dados (JSON).")
app.add_typer(backup_app, name="backup")


@backup_app.command("exportar")
def cmd_backup_exportar(
    destino: Optional[str] = typer.Argument(None, help="Arquivo de saída (padrão: techassist-backup-AAAA-MM-DD.json)"),
    db_path: str = DB_OPTION,
):
    """Exporta clientes, ordens, produtos, vendas e movimentações."""
    destino = destino or nome_backup_padrao()
    contagem = exportar_backup(_store(db_path), destino)
    typer.echo(f">> Backup exportado para: {destino}")
    _display_table([{"colecao": k, "registros": v} for k, v in contagem.items()], title="Backup")


@backup_app.command("importar")
def cmd_backup_importar(
    origem: str = typer.Argument(..., help="Arquivo JSON exportado anteriormente"),
    db_path: str = DB_OPTION,
):
    """Importa um backup (substitui as coleções presentes no arquivo)."""
    with _tratar_erros():
        contagem = importar_backup(_store(db_path), origem)
    _display_table([{"colecao": k, "registros": v} for k, v in contagem.items()], title="Backup Importado")
    typer.echo(">> Dados importados. Reinicie o sistema para carregar os dados.")


# Entry point opcional:
def main():
    app()


if __name__ == "__main__":
    main()
