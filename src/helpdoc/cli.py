"""helpdoc command line interface.

Usage:
    helpdoc bundle Tools ./src ./out --exclude "*.Tests.ps1"
    helpdoc command-pages Tools ./docs/cmdlets --header header.html --footer footer.html
    helpdoc module-summary Tools ./docs --format markdown --base-url https://example.org/cmdlets
    helpdoc config init
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import fields
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from helpdoc import __version__
from helpdoc.bundler import bundle_module
from helpdoc.command_pages import CommandPageRenderer, ProgressCallback
from helpdoc.config_manager import ConfigManager, HelpDocConfig
from helpdoc.errors import HelpDocError
from helpdoc.host import PowerShellHost
from helpdoc.models import PageResult
from helpdoc.module_summary import ModuleSummaryRenderer

logger = logging.getLogger(__name__)
console = Console()

DIRECTORY = click.Path(file_okay=False, path_type=Path)


def _fail(error: Exception) -> None:
    console.print(f"[red]Error:[/red] {escape(str(error))}")
    sys.exit(1)


def _make_host(config: HelpDocConfig) -> PowerShellHost:
    return PowerShellHost(executable=config.pwsh_executable, timeout=config.command_timeout)


def _read_template(path: Path | None, config: HelpDocConfig, which: str) -> str:
    if path is not None:
        return path.read_text(encoding="utf-8")
    return config.read_template(which)


@click.group()
@click.option("--config", "config_path", help="Path to config file (default: ./helpdoc.toml)")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.version_option(__version__, prog_name="helpdoc")
@click.pass_context
def main(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """Build module bundles and documentation pages from command help text.

    \b
    COMMANDS:
        bundle          Concatenate script files into one module file
        command-pages   Render one HTML page per command
        module-summary  Render a module summary (HTML or Markdown)
        config          Show or create the configuration file
    """
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format="%(message)s")

    ctx.ensure_object(dict)
    try:
        ctx.obj["config"] = ConfigManager.load_config(config_path)
    except HelpDocError as e:
        _fail(e)


@main.command()
@click.argument("module_name")
@click.argument("source_dir", type=DIRECTORY)
@click.argument("output_dir", type=DIRECTORY)
@click.option("--exclude", help="Glob of script file names to leave out (e.g. '*.Tests.ps1')")
@click.option(
    "--manifest",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the per-file SHA-256 hashes to this JSON file",
)
@click.option("--no-reload", is_flag=True, help="Do not import the bundled module afterwards")
@click.pass_context
def bundle(
    ctx: click.Context,
    module_name: str,
    source_dir: Path,
    output_dir: Path,
    exclude: str | None,
    manifest: Path | None,
    no_reload: bool,
) -> None:
    """Concatenate SOURCE_DIR scripts into OUTPUT_DIR/MODULE_NAME.psm1."""
    config: HelpDocConfig = ctx.obj["config"]
    try:
        result = bundle_module(
            module_name,
            source_dir,
            output_dir,
            exclude=exclude,
            script_extension=config.script_extension,
            bundle_extension=config.bundle_extension,
        )
        if manifest:
            result.write_manifest(manifest)
        if not no_reload:
            _make_host(config).reload_module(module_name, result.output_path)
    except HelpDocError as e:
        _fail(e)

    console.print(
        f"[green]✓[/green] Bundled {len(result.sources)} file(s) into {escape(str(result.output_path))}"
    )


@contextmanager
def _batch_progress(description: str) -> Iterator[ProgressCallback]:
    """Show a progress bar driven by a renderer's progress callback."""
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        console=console,
    ) as progress:
        task = progress.add_task(description, total=None)

        def report(index: int, total: int, command: str) -> None:
            progress.update(task, description=command, total=total, completed=index - 1)

        yield report
        progress.update(task, completed=progress.tasks[0].total or 0)


def _print_results(results: list[PageResult]) -> None:
    table = Table(title="Command Pages")
    table.add_column("Command", style="cyan")
    table.add_column("Status")
    table.add_column("Output / Error", style="white")

    for result in results:
        if result.success:
            table.add_row(result.command_name, "[green]written[/green]", str(result.output_path))
        else:
            table.add_row(result.command_name, "[red]failed[/red]", escape(result.error or ""))

    console.print(table)


@main.command(name="command-pages")
@click.argument("name")
@click.argument("output_dir", type=DIRECTORY)
@click.option("--header", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--footer", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--exclude", multiple=True, help="Command to skip (repeatable)")
@click.option("--fail-fast", is_flag=True, help="Stop at the first command that fails")
@click.pass_context
def command_pages(
    ctx: click.Context,
    name: str,
    output_dir: Path,
    header: Path | None,
    footer: Path | None,
    exclude: tuple[str, ...],
    fail_fast: bool,
) -> None:
    """Render OUTPUT_DIR/<command>.html for a command or every command of a module."""
    config: HelpDocConfig = ctx.obj["config"]
    try:
        renderer = CommandPageRenderer(
            _make_host(config),
            header=_read_template(header, config, "header"),
            footer=_read_template(footer, config, "footer"),
            help_width=config.help_width,
        )
        with _batch_progress(f"Resolving {name}...") as report:
            results = renderer.render_all(
                name,
                output_dir,
                exclude=(*config.exclude, *exclude),
                progress=report,
                fail_fast=fail_fast,
            )
    except HelpDocError as e:
        _fail(e)

    _print_results(results)
    if not all(r.success for r in results):
        sys.exit(1)


@main.command(name="module-summary")
@click.argument("module")
@click.argument("output_dir", type=DIRECTORY)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["html", "markdown"]),
    default="html",
    show_default=True,
)
@click.option("--file-name", help="Output file name (default: <MODULE>.html or README.md)")
@click.option("--exclude", multiple=True, help="Command to leave out (repeatable)")
@click.option("--in-progress", multiple=True, help="Command to flag as IN PROGRESS (repeatable)")
@click.option("--base-url", help="Documentation URL prefix for Markdown links")
@click.option("--fail-fast", is_flag=True, help="Stop at the first command that fails")
@click.pass_context
def module_summary(
    ctx: click.Context,
    module: str,
    output_dir: Path,
    output_format: str,
    file_name: str | None,
    exclude: tuple[str, ...],
    in_progress: tuple[str, ...],
    base_url: str | None,
    fail_fast: bool,
) -> None:
    """Render a summary page listing every command of MODULE."""
    config: HelpDocConfig = ctx.obj["config"]
    excluded = (*config.exclude, *exclude)
    flagged = (*config.in_progress, *in_progress)

    try:
        renderer = ModuleSummaryRenderer(_make_host(config), help_width=config.help_width)
        if output_format == "markdown":
            base_url = base_url or config.docs_base_url
            if not base_url:
                raise click.UsageError(
                    "Markdown summaries need --base-url or docs_base_url in the config file"
                )
        with _batch_progress(f"Listing {module}...") as report:
            if output_format == "markdown":
                output_path = renderer.write_markdown(
                    module,
                    output_dir,
                    base_url,
                    excluded,
                    flagged,
                    file_name,
                    progress=report,
                    fail_fast=fail_fast,
                )
            else:
                output_path = renderer.write_html(
                    module,
                    output_dir,
                    excluded,
                    flagged,
                    file_name,
                    progress=report,
                    fail_fast=fail_fast,
                )
    except HelpDocError as e:
        _fail(e)

    console.print(f"[green]✓[/green] Wrote {escape(str(output_path))}")


@main.group(name="config")
def config_group() -> None:
    """Show or create the helpdoc configuration file."""
    pass


@config_group.command(name="show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Show the effective configuration."""
    config: HelpDocConfig = ctx.obj["config"]
    table = Table(title="helpdoc configuration")
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="white")
    for item in fields(config):
        table.add_row(item.name, escape(repr(getattr(config, item.name))))
    console.print(table)


@config_group.command(name="init")
@click.option(
    "--path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path(ConfigManager.LOCAL_CONFIG_NAME),
    show_default=True,
)
@click.option("--force", is_flag=True, help="Overwrite an existing file")
def config_init(path: Path, force: bool) -> None:
    """Write a configuration file with default values."""
    if path.exists() and not force:
        console.print(f"[yellow]{escape(str(path))} already exists (use --force)[/yellow]")
        sys.exit(1)
    try:
        ConfigManager.save_config(HelpDocConfig(), path)
    except HelpDocError as e:
        _fail(e)
    console.print(f"[green]✓[/green] Wrote {escape(str(path))}")


__all__ = ["main"]
