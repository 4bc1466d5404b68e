# assistencia/adapters/tui.py
"""
TUI (Text User Interface) da assistência técnica usando Rich.

Interface interativa baseada em menus:
- Clientes
- Produtos e estoque
- Vendas (PDV)
- Ordens de serviço
- Relatórios
- Configurações e backup
"""

from __future__ import annotations

from typing import List, Optional

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from assistencia.config import DB_PATH
from assistencia.domain.erros import AssistenciaError, RegistroNaoEncontrado
from assistencia.domain.models import MOVEMENT_LABELS, PAYMENT_LABELS, PAYMENT_METHODS, SERVICE_STATUSES, STATUS_LABELS
from assistencia.infra.repositories import SettingsRepo
from assistencia.infra.storage import SqliteStore
from assistencia.adapters.parsers import parse_dinheiro, parse_inteiro
from assistencia.usecases.clientes import atualizar_cliente, buscar_clientes, cadastrar_cliente
from assistencia.usecases.configuracoes import exportar_backup, importar_backup, nome_backup_padrao
from assistencia.usecases.documentos import gerar_ordem_servico, gerar_recibo_venda, gerar_relatorio_gerencial
from assistencia.usecases.estado import criar_container
from assistencia.usecases.movimentacao import historico_movimentacoes, prever_estoque, registrar_movimentacao
from assistencia.usecases.ordens_servico import alterar_status, buscar_ordens, salvar_ordem_servico
from assistencia.usecases.produtos import atualizar_produto, buscar_produtos, cadastrar_produto, produtos_disponiveis
from assistencia.usecases.relatorios import painel_do_dia, relatorio_gerencial
from assistencia.usecases.vendas import Carrinho, buscar_vendas, finalizar_venda


class AssistenciaTUI:
    """Text User Interface para a assistência técnica."""

    def __init__(self, db_path: str = DB_PATH, console: Optional[Console] = None):
        self.console = console or Console()
        self.db_path = db_path
        self.container = criar_container(db_path)

    def run(self) -> None:
        """Inicia a interface principal."""
        self.show_banner()
        acoes = {
            "1": self.menu_clientes,
            "2": self.menu_produtos,
            "3": self.menu_vendas,
            "4": self.menu_ordens,
            "5": self.menu_relatorios,
            "6": self.menu_sistema,
        }
        while True:
            try:
                choice = self.show_main_menu()
                if choice == "0":
                    self.console.print("\n[green]Saindo do sistema...[/green]")
                    break
                acoes[choice]()
                if self.container.bloqueado:
                    self.console.print("\n[yellow]Reinicie o sistema para carregar os dados importados.[/yellow]")
                    break
            except KeyboardInterrupt:
                self.console.print("\n[red]Saindo...[/red]")
                break

    def show_banner(self) -> None:
        nome = SettingsRepo(SqliteStore(self.db_path)).company().name
        banner = Panel.fit(
            f"[bold blue]{nome}[/bold blue]\n"
            "[cyan]Assistência Técnica - PDV e Ordens de Serviço[/cyan]",
            border_style="blue",
        )
        self.console.print("\n")
        self.console.print(Align.center(banner))
        self.console.print("\n")

    def show_main_menu(self) -> str:
        menu = Panel(
            "[bold]MENU PRINCIPAL[/bold]\n\n"
            "[yellow]1.[/yellow] Clientes\n"
            "[yellow]2.[/yellow] Produtos e Estoque\n"
            "[yellow]3.[/yellow] Vendas (PDV)\n"
            "[yellow]4.[/yellow] Ordens de Serviço\n"
            "[yellow]5.[/yellow] Relatórios\n"
            "[yellow]6.[/yellow] Configurações e Backup\n"
            "[yellow]0.[/yellow] Sair\n",
            title="Opções",
            border_style="green",
        )
        self.console.print(menu)
        return Prompt.ask("Escolha uma opção", choices=["0", "1", "2", "3", "4", "5", "6"])

    def _submenu(self, titulo: str, opcoes: List[tuple], cor: str) -> None:
        """Laço genérico de submenu: opcoes = [(rótulo, ação), ...]."""
        while True:
            linhas = [f"[bold]{titulo.upper()}[/bold]\n"]
            linhas += [f"[yellow]{i}.[/yellow] {rotulo}" for i, (rotulo, _) in enumerate(opcoes, start=1)]
            linhas.append("[yellow]0.[/yellow] Voltar\n")
            self.console.print(Panel("\n".join(linhas), title=titulo, border_style=cor))
            choice = Prompt.ask("Escolha uma opção", choices=[str(i) for i in range(len(opcoes) + 1)])
            if choice == "0":
                break
            try:
                opcoes[int(choice) - 1][1]()
            except AssistenciaError as e:
                self.console.print(f"[red]Erro: {e}[/red]")
            if self.container.bloqueado:
                break

    # ---------------- util ----------------

    def _tabela(self, titulo: str, colunas: List[str], linhas: List[List], vazio: str) -> None:
        if not linhas:
            self.console.print(f"[yellow]{vazio}[/yellow]")
            return
        table = Table(title=titulo, show_header=True, header_style="bold magenta")
        for coluna in colunas:
            table.add_column(coluna, style="cyan")
        for linha in linhas:
            table.add_row(*["" if c is None else str(c) for c in linha])
        self.console.print(table)

    def _escolher(self, itens, ref: str, colecao: str):
        ref = ref.strip()
        candidatos = [i for i in itens if i.id == ref] or [i for i in itens if ref and i.id.startswith(ref)]
        if len(candidatos) != 1:
            raise RegistroNaoEncontrado(colecao, ref)
        return candidatos[0]

    @property
    def state(self):
        return self.container.state

    # ---------------- clientes ----------------

    def menu_clientes(self) -> None:
        self._submenu("Clientes", [
            ("Listar / Buscar", self.listar_clientes),
            ("Novo Cliente", self.novo_cliente),
            ("Editar Cliente", self.editar_cliente),
        ], "cyan")

    def listar_clientes(self) -> None:
        termo = Prompt.ask("Buscar (vazio = todos)", default="")
        self._tabela(
            "Clientes",
            ["Id", "Nome", "Telefone", "E-mail"],
            [[c.id[:8], c.name, c.phone, c.email] for c in buscar_clientes(self.state, termo)],
            "Nenhum cliente encontrado",
        )

    def novo_cliente(self) -> None:
        nome = Prompt.ask("Nome")
        telefone = Prompt.ask("Telefone")
        email = Prompt.ask("E-mail (opcional)", default="")
        c = cadastrar_cliente(self.container, nome, telefone, email)
        self.console.print(f"[green]✓ Cliente cadastrado: {c.name}[/green]")

    def editar_cliente(self) -> None:
        atual = self._escolher(self.state.customers, Prompt.ask("Cliente (id ou prefixo)"), "customers")
        nome = Prompt.ask("Nome", default=atual.name)
        telefone = Prompt.ask("Telefone", default=atual.phone)
        email = Prompt.ask("E-mail (opcional)", default=atual.email or "")
        c = atualizar_cliente(self.container, atual.id, nome, telefone, email)
        self.console.print(f"[green]✓ Cliente atualizado: {c.name}[/green]")

    # ---------------- produtos ----------------

    def menu_produtos(self) -> None:
        self._submenu("Produtos e Estoque", [
            ("Listar / Buscar", self.listar_produtos),
            ("Novo Produto", self.novo_produto),
            ("Editar Produto", self.editar_produto),
            ("Movimentar Estoque", self.movimentar_estoque),
            ("Histórico de Movimentações", self.historico),
        ], "magenta")

    def listar_produtos(self) -> None:
        termo = Prompt.ask("Buscar (vazio = todos)", default="")
        self._tabela(
            "Produtos",
            ["Id", "Nome", "Categoria", "Preço", "Estoque", "Mínimo", "Status"],
            [
                [p.id[:8], p.name, p.category, f"R$ {p.price:.2f}", p.stock, p.min_stock,
                 "[red]Estoque Baixo[/red]" if p.estoque_baixo else "Normal"]
                for p in buscar_produtos(self.state, termo)
            ],
            "Nenhum produto encontrado",
        )

    def novo_produto(self) -> None:
        nome = Prompt.ask("Nome")
        categoria = Prompt.ask("Categoria")
        preco = parse_dinheiro(Prompt.ask("Preço (R$)"), "price")
        estoque = parse_inteiro(Prompt.ask("Estoque inicial", default="0"), "stock")
        minimo = parse_inteiro(Prompt.ask("Estoque mínimo", default="0"), "min_stock")
        fornecedor = Prompt.ask("Fornecedor (opcional)", default="")
        p = cadastrar_produto(self.container, nome, categoria, preco, estoque, minimo, fornecedor)
        self.console.print(f"[green]✓ Produto cadastrado: {p.name}[/green]")

    def editar_produto(self) -> None:
        atual = self._escolher(self.state.products, Prompt.ask("Produto (id ou prefixo)"), "products")
        nome = Prompt.ask("Nome", default=atual.name)
        categoria = Prompt.ask("Categoria", default=atual.category)
        preco = parse_dinheiro(Prompt.ask("Preço (R$)", default=f"{atual.price:.2f}"), "price")
        estoque = parse_inteiro(Prompt.ask("Estoque", default=str(atual.stock)), "stock")
        minimo = parse_inteiro(Prompt.ask("Estoque mínimo", default=str(atual.min_stock)), "min_stock")
        fornecedor = Prompt.ask("Fornecedor (opcional)", default=atual.supplier or "")
        p = atualizar_produto(self.container, atual.id, nome, categoria, preco, estoque, minimo, fornecedor)
        self.console.print(f"[green]✓ Produto atualizado: {p.name}[/green]")

    def movimentar_estoque(self) -> None:
        produto = self._escolher(self.state.products, Prompt.ask("Produto (id ou prefixo)"), "products")
        tipo = Prompt.ask("Tipo (in = entrada, out = saída)", choices=["in", "out"])
        quantidade = parse_inteiro(Prompt.ask("Quantidade"))
        motivo = Prompt.ask("Motivo")
        if quantidade is not None and quantidade > 0:
            self.console.print(f"Estoque: {produto.stock} -> {prever_estoque(produto, tipo, quantidade)}")
        _, atualizado = registrar_movimentacao(self.container, produto.id, tipo, quantidade, motivo)
        self.console.print(f"[green]✓ Movimentação registrada. Estoque atual: {atualizado.stock}[/green]")

    def historico(self) -> None:
        nomes = {p.id: p.name for p in self.state.products}
        self._tabela(
            "Movimentações",
            ["Produto", "Tipo", "Quantidade", "Motivo"],
            [
                [nomes.get(m.product_id, m.product_id), MOVEMENT_LABELS.get(m.type, m.type), m.quantity, m.reason]
                for m in historico_movimentacoes(self.state)[:20]
            ],
            "Nenhuma movimentação registrada",
        )

    # ---------------- vendas ----------------

    def menu_vendas(self) -> None:
        self._submenu("Vendas", [
            ("Nova Venda", self.nova_venda),
            ("Listar Vendas", self.listar_vendas),
        ], "green")

    def nova_venda(self) -> None:
        ref_cliente = Prompt.ask("Cliente (id ou prefixo, vazio = não informado)", default="")
        cliente = self._escolher(self.state.customers, ref_cliente, "customers") if ref_cliente.strip() else None

        carrinho = Carrinho()
        disponiveis = produtos_disponiveis(self.state)
        while True:
            ref = Prompt.ask("Produto (id ou prefixo, vazio para finalizar)", default="")
            if not ref.strip():
                break
            try:
                produto = self._escolher(disponiveis, ref, "products")
                carrinho.adicionar(produto, parse_inteiro(Prompt.ask("Quantidade", default="1")))
            except AssistenciaError as e:
                self.console.print(f"[red]{e}[/red]")
                continue
            self.console.print(f"Carrinho: {len(carrinho)} item(ns) - Total R$ {carrinho.total:.2f}")

        if not carrinho.itens:
            self.console.print("[yellow]Venda cancelada: carrinho vazio[/yellow]")
            return
        pagamento = Prompt.ask("Forma de pagamento", choices=list(PAYMENT_METHODS), default="cash")
        venda = finalizar_venda(self.container, carrinho, pagamento, cliente.id if cliente else None)
        self.console.print(f"[green]✓ Venda finalizada: R$ {venda.total:.2f}[/green]")
        if SettingsRepo(SqliteStore(self.db_path)).system().print_receipts:
            self.console.print(Panel(gerar_recibo_venda(venda), border_style="dim"))

    def listar_vendas(self) -> None:
        self._tabela(
            "Vendas",
            ["Id", "Cliente", "Itens", "Pagamento", "Total"],
            [
                [s.id[:8], s.customer_name or "Cliente não informado", len(s.items),
                 PAYMENT_LABELS.get(s.payment_method, s.payment_method), f"R$ {s.total:.2f}"]
                for s in buscar_vendas(self.state)
            ],
            "Nenhuma venda registrada",
        )

    # ---------------- ordens de serviço ----------------

    def menu_ordens(self) -> None:
        self._submenu("Ordens de Serviço", [
            ("Listar / Buscar", self.listar_ordens),
            ("Nova Ordem", self.nova_ordem),
            ("Alterar Status", self.status_ordem),
            ("Imprimir Ordem", self.imprimir_ordem),
        ], "yellow")

    def listar_ordens(self) -> None:
        termo = Prompt.ask("Buscar (vazio = todas)", default="")
        self._tabela(
            "Ordens de Serviço",
            ["Nº", "Cliente", "Aparelho", "Status"],
            [[o.numero, o.customer_name, o.device, STATUS_LABELS[o.status]] for o in buscar_ordens(self.state, termo)],
            "Nenhuma ordem de serviço encontrada",
        )

    def nova_ordem(self) -> None:
        cliente = self._escolher(self.state.customers, Prompt.ask("Cliente (id ou prefixo)"), "customers")
        aparelho = Prompt.ask("Aparelho")
        problema = Prompt.ask("Problema relatado")
        orcamento = parse_dinheiro(Prompt.ask("Orçamento (opcional)", default=""), "estimated_cost")
        obs = Prompt.ask("Observações (opcional)", default="")
        o = salvar_ordem_servico(
            self.container, cliente.id, aparelho, problema, estimated_cost=orcamento, notes=obs
        )
        self.console.print(f"[green]✓ Ordem #{o.numero} aberta[/green]")

    def status_ordem(self) -> None:
        ordem = self._escolher(self.state.service_orders, Prompt.ask("Ordem (id ou prefixo)"), "serviceOrders")
        status = Prompt.ask("Novo status", choices=list(SERVICE_STATUSES), default=ordem.status)
        o = alterar_status(self.container, ordem.id, status)
        self.console.print(f"[green]✓ Ordem #{o.numero}: {STATUS_LABELS[o.status]}[/green]")

    def imprimir_ordem(self) -> None:
        ordem = self._escolher(self.state.service_orders, Prompt.ask("Ordem (id ou prefixo)"), "serviceOrders")
        settings = SettingsRepo(SqliteStore(self.db_path))
        self.console.print(Panel(gerar_ordem_servico(ordem, settings.company(), settings.system())))

    # ---------------- relatórios ----------------

    def menu_relatorios(self) -> None:
        self._submenu("Relatórios", [
            ("Dashboard do Dia", self.dashboard),
            ("Relatório Gerencial", self.relatorio),
        ], "red")

    def dashboard(self) -> None:
        p = painel_do_dia(self.state)
        self.console.print(Panel(
            f"Serviços hoje: {p.servicos_hoje}\n"
            f"Vendas hoje: {p.vendas_hoje}\n"
            f"Faturamento hoje: R$ {p.faturamento_hoje:.2f}\n"
            f"Serviços pendentes: {len(p.pendentes)}\n"
            f"Produtos com estoque baixo: {len(p.estoque_baixo)}",
            title="Dashboard",
            border_style="green",
        ))

    def relatorio(self) -> None:
        periodo = Prompt.ask("Período", choices=["today", "week", "month"], default="month")
        rel = relatorio_gerencial(self.state, periodo)
        self.console.print(Panel(gerar_relatorio_gerencial(rel), border_style="blue"))

    # ---------------- sistema ----------------

    def menu_sistema(self) -> None:
        self._submenu("Configurações e Backup", [
            ("Ver Configurações", self.ver_configuracoes),
            ("Exportar Backup", self.exportar),
            ("Importar Backup", self.importar),
        ], "blue")

    def ver_configuracoes(self) -> None:
        repo = SettingsRepo(SqliteStore(self.db_path))
        for titulo, obj in (("Empresa", repo.company()), ("Usuário", repo.user()), ("Sistema", repo.system())):
            self._tabela(titulo, ["Campo", "Valor"], [[k, v] for k, v in vars(obj).items()], "")

    def exportar(self) -> None:
        destino = Prompt.ask("Arquivo de destino", default=nome_backup_padrao())
        contagem = exportar_backup(SqliteStore(self.db_path), destino)
        self.console.print(f"[green]✓ Backup exportado ({sum(contagem.values())} registros): {destino}[/green]")

    def importar(self) -> None:
        origem = Prompt.ask("Arquivo de backup")
        contagem = importar_backup(SqliteStore(self.db_path), origem)
        self.container.bloquear("Backup importado")
        self.console.print(f"[green]✓ {sum(contagem.values())} registros importados.[/green]")


def main_tui(db_path: str = DB_PATH) -> None:
    """Função principal para iniciar a TUI."""
    AssistenciaTUI(db_path).run()


if __name__ == "__main__":
    main_tui()
