"""Command-line interface: scaffold a configuration or translate one key."""
import asyncio
from pathlib import Path
from typing import NoReturn, Optional

import typer

from ddtr import __version__
from ddtr.app_config import load_app_config, write_default_config
from ddtr.baidu_client import BaiduTranslateClient
from ddtr.batch import BatchReport, run_batch
from ddtr.errors import ConfigurationError

app = typer.Typer(
    name="ddtr",
    help="Translate a text with the Baidu API and append it to Java .properties bundles.",
    add_completion=False,
)

CONFIG_OPTION_HELP = "Configuration file (default: $DDTR_CONFIG_FILE or ./.ddtr.json)."


def _fail(message: str) -> NoReturn:
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(code=1)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"ddtr {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show the version and exit."
    ),
) -> None:
    """Translate a text with the Baidu API and append it to Java .properties bundles."""


@app.command()
def init(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing configuration file."),
) -> None:
    """Write a configuration file with default settings."""
    try:
        path = write_default_config(str(config) if config else None, force=force)
    except ConfigurationError as exc:
        _fail(str(exc))
    typer.echo(f"Created configuration file: {path}")
    typer.echo("Fill in apiId and apiKey before running 'ddtr tran'.")


def _print_report(report: BatchReport) -> None:
    for language_report in report.languages:
        line = f"  {language_report.language.code:<5} {language_report.status:<19} {language_report.path}"
        if language_report.detail:
            line += f"  ({language_report.detail})"
        typer.echo(line)
    if report.default_file is not None:
        default = report.default_file
        line = f"  {'*':<5} {default.status:<19} {default.path}"
        if default.detail:
            line += f"  ({default.detail})"
        typer.echo(line)
    typer.echo(f"Elapsed: {report.elapsed:.2f} seconds")


@app.command()
def tran(
    text: str = typer.Argument(..., help="The text to translate, in the default language."),
    key: str = typer.Option(..., "--key", "-k", help="The resource key written as key=translation."),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Hide the progress bar."),
) -> None:
    """Translate TEXT into every target language and append it under KEY."""
    if not text:
        _fail("The text to translate must not be empty.")
    if not key:
        _fail("The key must not be empty.")

    try:
        app_config = load_app_config(str(config) if config else None)
    except ConfigurationError as exc:
        _fail(str(exc))

    translator = BaiduTranslateClient(app_config.api_id, app_config.api_key)
    try:
        report = asyncio.run(run_batch(app_config, text, key, translator, show_progress=not quiet))
    except ConfigurationError as exc:
        _fail(str(exc))

    _print_report(report)
