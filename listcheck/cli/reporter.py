"""Rich console rendering of session progress."""

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from listcheck.models import DivergenceKind, Result, StepOutcome
from listcheck.operations import Operation
from listcheck.session import RunListener

KIND_COLORS = {
    DivergenceKind.VALUE: "yellow",
    DivergenceKind.STATE: "magenta",
    DivergenceKind.FAILURE: "red",
    DivergenceKind.HARNESS: "cyan",
}


class ConsoleReporter(RunListener):
    """Prints one line per operation and a diagnostic panel on failure.

    Args:
        console: Rich console to print to
        quiet: Only print the per-run summary line
    """

    def __init__(self, console: Optional[Console] = None, quiet: bool = False):
        self.console = console or Console()
        self.quiet = quiet

    def run_started(self, seed: int) -> None:
        super().run_started(seed)
        if not self.quiet:
            self.console.print(f"[bold cyan]Running test {seed}[/bold cyan]")

    def step_started(self, operation: Operation) -> None:
        super().step_started(operation)
        if not self.quiet:
            self.console.print(f"{operation.signature}..", end="", markup=False, highlight=False)

    def step_finished(self, operation: Operation, outcome: StepOutcome) -> None:
        super().step_finished(operation, outcome)
        if self.quiet:
            return
        if outcome.ok:
            self.console.print(" [green]ok[/green]")
            return

        self.console.print(" [red bold]fail[/red bold]")
        self.console.print(
            f"returned same: {outcome.returned_same}, post-values same: {outcome.state_same}"
        )

    def run_finished(self, result: Result) -> None:
        super().run_finished(result)

        if result.succeeded:
            self.console.print(
                f"[green]✓[/green] Run {result.seed}: all {result.steps_completed} operations passed"
            )
            return

        self.console.print(
            f"[red]✗[/red] Run {result.seed} failed on "
            f"[bold]{result.failed_on}[/bold] after {result.steps_completed} passing operations"
        )
        if not self.quiet:
            self.console.print(self._divergence_panel(result))

    def run_aborted(self, seed: int) -> None:
        super().run_aborted(seed)
        self.console.print(f"\n[yellow]Aborting test {seed}[/yellow]")

    def _divergence_panel(self, result: Result) -> Panel:
        divergence = result.divergence
        color = KIND_COLORS.get(divergence.kind, "red")

        content = Text()
        content.append(divergence.message, style="bold")
        content.append("\n")

        if divergence.reference_value is not None or divergence.candidate_value is not None:
            content.append("\nreference: ", style="dim")
            content.append(str(divergence.reference_value))
            content.append("\ncandidate: ", style="dim")
            content.append(str(divergence.candidate_value))
            content.append("\n")

        content.append(f"\nRe-run with: listcheck run TARGET --seed {result.seed}", style="cyan")

        traceback_text = divergence.format_error()
        if traceback_text:
            content.append("\n\n")
            content.append(traceback_text.rstrip(), style="dim")

        return Panel(
            content,
            title=f"[{color} bold]{divergence.kind.value} divergence[/{color} bold]",
            border_style=color,
            padding=(1, 2),
        )


def operations_table(operations: tuple[Operation, ...]) -> Table:
    """Table of operations with their parameter kinds and return shapes."""
    table = Table(title="List Operations")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Operation", style="cyan")
    table.add_column("Parameters", style="white")
    table.add_column("Returns", style="green")

    for position, operation in enumerate(operations, start=1):
        params = ", ".join(f"{p.name}: {p.kind.value}" for p in operation.params)
        table.add_row(
            str(position),
            operation.name,
            params or "[dim]-[/dim]",
            operation.return_shape.value,
        )

    return table


def summary_table(results: list[Result]) -> Table:
    """Per-run summary for multi-run invocations."""
    table = Table(title="Run Summary")
    table.add_column("Seed", style="cyan", justify="right")
    table.add_column("Result", style="white")
    table.add_column("Passed", justify="right")
    table.add_column("Failed On", style="white")

    for result in results:
        status = "[green]passed[/green]" if result.succeeded else "[red]failed[/red]"
        table.add_row(
            str(result.seed),
            status,
            str(result.steps_completed),
            str(result.failed_on) if result.failed_on else "[dim]-[/dim]",
        )

    return table
