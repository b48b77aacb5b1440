"""Output formatting for the command line interface."""

import json
from typing import Any, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from .models import LabelNode


class OutputFormatter:
    """Writes CLI output as rich text or as JSON."""

    def __init__(
        self,
        json_output: bool = False,
        quiet: bool = False,
        console: Optional[Console] = None,
        err_console: Optional[Console] = None,
    ):
        """Initialize the formatter.

        Args:
            json_output: Emit machine-readable JSON instead of tables
            quiet: Suppress informational messages
            console: Console for regular output (default: stdout)
            err_console: Console for errors and warnings (default: stderr)
        """
        self.json_output = json_output
        self.quiet = quiet
        self.console = console or Console(highlight=False)
        self.err_console = err_console or Console(stderr=True, highlight=False)

    def print(self, message: str) -> None:
        self.console.print(message)

    def info(self, message: str) -> None:
        if not self.quiet and not self.json_output:
            self.console.print(message)

    def success(self, message: str) -> None:
        if not self.quiet and not self.json_output:
            self.console.print(f"[green]{message}[/green]")

    def warning(self, message: str) -> None:
        if not self.quiet:
            self.err_console.print(f"[yellow]{message}[/yellow]")

    def error(self, message: str) -> None:
        self.err_console.print(f"[bold red]Error:[/bold red] {message}")

    def output_json(self, data: Any) -> None:
        self.console.print_json(json.dumps(data, default=str))

    def output_table(
        self,
        rows: list[dict[str, Any]],
        columns: list[str],
        headers: Optional[dict[str, str]] = None,
        title: Optional[str] = None,
    ) -> None:
        """Print rows as a table, or as a JSON list in JSON mode.

        Args:
            rows: Row dicts
            columns: Keys to show, in order
            headers: Display names for the columns (default: the keys)
            title: Optional table title
        """
        if self.json_output:
            self.output_json([{col: row.get(col) for col in columns} for row in rows])
            return

        headers = headers or {}
        table = Table(title=title)
        for col in columns:
            table.add_column(headers.get(col, col))
        for row in rows:
            table.add_row(
                *["" if row.get(col) is None else escape(str(row.get(col))) for col in columns]
            )
        self.console.print(table)

    def output_label_tree(self, tree: dict[str, LabelNode], title: str = "Labels") -> None:
        """Print a label hierarchy as a tree, or as nested JSON."""
        if self.json_output:
            self.output_json({label_id: node.to_dict() for label_id, node in tree.items()})
            return

        root = Tree(f"[bold]{title}[/bold]")

        def add_nodes(parent: Tree, nodes: dict[str, LabelNode]) -> None:
            for label_id, node in nodes.items():
                branch = parent.add(f"{escape(node.name or '')} [dim]({escape(label_id)})[/dim]")
                add_nodes(branch, node.children)

        add_nodes(root, tree)
        self.console.print(root)

    def print_summary(self, title: str, items: list[tuple[str, str]]) -> None:
        """Print a titled list of key/value pairs."""
        if self.json_output:
            self.output_json(dict(items))
            return
        if self.quiet:
            return
        table = Table(title=title, show_header=False)
        table.add_column("Key", style="bold")
        table.add_column("Value")
        for key, value in items:
            table.add_row(key, value)
        self.console.print(table)
