"""Command-line interface for listcheck."""

import json
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from listcheck import __version__
from listcheck.cli.errors import handle_errors
from listcheck.cli.reporter import ConsoleReporter, operations_table, summary_table
from listcheck.config import (
    ConfigError,
    HarnessConfig,
    ListCheckConfig,
    generate_config_template,
    load_config,
    validate_config,
)
from listcheck.containers import ReferenceList
from listcheck.logging_config import LogContext, configure_logging, get_logger
from listcheck.models import Result
from listcheck.operations import enumerate_operations
from listcheck.session import ListTestSession
from listcheck.validation import (
    validate_output_path,
    validate_runs,
    validate_seed,
    validate_seed_lengths,
    validate_target,
)

console = Console()
logger = get_logger(__name__)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    default=None,
    help="Path to config file (.listcheckrc or listcheck.toml)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default=None,
    help="Set logging level (overrides config file)",
)
@click.option(
    "--log-format",
    type=click.Choice(["json", "human"], case_sensitive=False),
    default=None,
    help="Log output format (overrides config file)",
)
@click.option(
    "--log-file",
    type=click.Path(),
    default=None,
    help="Write logs to file (overrides config file)",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[str],
    log_level: Optional[str],
    log_format: Optional[str],
    log_file: Optional[str],
) -> None:
    """listcheck - differential testing for list implementations

    Configuration priority (highest to lowest):
    1. Command-line options
    2. Environment variables (LISTCHECK_*)
    3. Config file (--config, .listcheckrc, listcheck.toml)
    4. Built-in defaults
    """
    try:
        loaded = load_config(config_file=config)
    except ConfigError as e:
        console.print(f"[yellow]Config error: {e}[/yellow]")
        console.print("[dim]Using default configuration[/dim]\n")
        loaded = ListCheckConfig()

    configure_logging(
        level=log_level or loaded.logging.level,
        json_output=((log_format or loaded.logging.format).lower() == "json"),
        log_file=log_file or loaded.logging.file,
    )

    ctx.ensure_object(dict)
    ctx.obj["config"] = loaded


@cli.command()
@click.argument("target")
@click.option(
    "--reference",
    "-r",
    default=None,
    help="Import path of the trusted implementation (default: builtin-list reference)",
)
@click.option("--seed", "-s", type=int, default=None, help="Seed of the first run (reproduces a previous run)")
@click.option("--runs", "-n", type=int, default=None, help="Number of runs (overrides config)")
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default=None,
    help="Write run results as JSON to this file",
)
@click.option("--quiet", "-q", is_flag=True, default=False, help="Only print run summaries")
@click.pass_context
@handle_errors()
def run(
    ctx: click.Context,
    target: str,
    reference: Optional[str],
    seed: Optional[int],
    runs: Optional[int],
    output: Optional[str],
    quiet: bool,
) -> None:
    """Run differential tests of TARGET against the reference list.

    TARGET is a module:attribute import path of a class or zero-argument
    factory producing the list implementation under test. With --seed and
    --runs N, run i uses seed + i, so a batch is reproducible from its
    first seed.

    Exit code is 0 when every run passes and 1 otherwise.

    Examples:
        listcheck run listcheck.containers:DynamicArray
        listcheck run mypackage.lists:MyList --seed 1234 --runs 5 -o results.json
    """
    config: ListCheckConfig = ctx.obj["config"]
    for warning in validate_config(config):
        console.print(f"[yellow]Warning: {warning}[/yellow]")

    factory = validate_target(target)
    reference_factory = validate_target(reference) if reference else ReferenceList
    seed = validate_seed(seed)
    runs = validate_runs(runs if runs is not None else config.harness.runs)
    min_length, max_length = validate_seed_lengths(
        config.harness.min_seed_length, config.harness.max_seed_length
    )
    validated_output = validate_output_path(output) if output else None

    harness = HarnessConfig(
        min_seed_length=min_length,
        max_seed_length=max_length,
        max_array_length=config.harness.max_array_length,
        runs=runs,
    )

    session = ListTestSession(
        factory=factory,
        reference_factory=reference_factory,
        config=harness,
        listener=ConsoleReporter(console, quiet=quiet),
    )

    results: list[Result] = []
    with LogContext(operation="run", target=target):
        for position in range(runs):
            run_seed = seed + position if seed is not None else None
            results.append(session.run(run_seed))

    failed = [result for result in results if not result.succeeded]

    if runs > 1:
        console.print()
        console.print(summary_table(results))

    if validated_output:
        payload = {
            "target": target,
            "reference": reference,
            "runs": [result.to_dict() for result in results],
        }
        with open(validated_output, "w") as f:
            json.dump(payload, f, indent=2)
        logger.info(f"JSON results saved to {validated_output}")
        console.print(f"\nResults saved to {validated_output}")

    if failed:
        logger.info(f"{len(failed)} of {runs} runs failed")
        ctx.exit(1)


@cli.command()
def operations() -> None:
    """List the operations exercised on each run, in invocation order."""
    console.print(operations_table(enumerate_operations()))


@cli.command(name="config")
@click.option(
    "--template",
    "-t",
    "template_format",
    type=click.Choice(["yaml", "json", "toml"], case_sensitive=False),
    default=None,
    help="Print a config file template in this format",
)
@click.pass_context
@handle_errors()
def config_command(ctx: click.Context, template_format: Optional[str]) -> None:
    """Display the effective configuration, or print a template.

    Examples:
        listcheck config
        listcheck config --template yaml > .listcheckrc
        listcheck config --template toml > listcheck.toml
    """
    if template_format:
        click.echo(generate_config_template(format=template_format.lower()))
        return

    config: ListCheckConfig = ctx.obj["config"]

    harness_table = Table(title="Harness Configuration")
    harness_table.add_column("Setting", style="cyan")
    harness_table.add_column("Value", style="green")
    harness_table.add_row("Min Seed Length", str(config.harness.min_seed_length))
    harness_table.add_row("Max Seed Length", str(config.harness.max_seed_length))
    harness_table.add_row("Max Array Length", str(config.harness.max_array_length))
    harness_table.add_row("Runs", str(config.harness.runs))
    console.print(harness_table)

    logging_table = Table(title="Logging Configuration")
    logging_table.add_column("Setting", style="cyan")
    logging_table.add_column("Value", style="green")
    logging_table.add_row("Level", config.logging.level)
    logging_table.add_row("Format", config.logging.format)
    logging_table.add_row("File", config.logging.file or "[dim]none[/dim]")
    console.print(logging_table)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
