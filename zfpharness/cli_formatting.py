"""Rich CLI formatting helpers for harness commands."""

from rich.console import Console
from rich.markup import escape
from rich.table import Table

console = Console()
err_console = Console(stderr=True)


def print_options(options):
    """Print the recognized options with current values and descriptions."""
    table = Table(title="Options", border_style="cyan", padding=(0, 2))
    table.add_column("Option", style="bold")
    table.add_column("Value", style="green")
    table.add_column("Description", style="dim")
    for name, value, help_text in options:
        shown = f'"{value}"' if isinstance(value, str) else f"{value:g}" if isinstance(value, float) else str(value)
        table.add_row(f"{name}=", shown, help_text)
    console.print(table)


def print_cd_values(line: str):
    """Print the filter parameter line (usable with ``h5repack -f UD=32013,...``)."""
    console.print(line, highlight=False)


def print_roundtrip_results(report, comparisons):
    """Print written datasets and the original-vs-compressed comparison."""
    table = Table(title="Round-Trip Results", border_style="cyan", padding=(0, 2))
    table.add_column("Dataset", style="bold")
    table.add_column("Shape")
    table.add_column("Dtype", style="dim")
    table.add_column("Max |err|", justify="right")
    table.add_column("Stored", justify="right")
    table.add_column("Ratio", justify="right", style="green")

    for c in comparisons:
        table.add_row(
            c.compressed,
            str(c.shape),
            c.dtype,
            f"{c.max_abs_error:.3g}",
            f"{c.stored_bytes:,} bytes",
            f"{c.ratio:.1f}x",
        )

    console.print(table)
    console.print(f"\n  [dim]Mode: {report.mode} | Output: {escape(report.output)}[/dim]")


def print_error(message: str):
    err_console.print(f"[bold red]{escape(message)}[/bold red]", highlight=False)
