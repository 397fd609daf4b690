from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer

from lintbridge.analyzer import run_analyzer
from lintbridge.config import AnalyzerConfig, resolve_analyzer_config
from lintbridge.exceptions import LintBridgeError
from lintbridge.parse import extract_error_lines, parse_errors
from lintbridge.schema import CheckResponse, DiagnosticDTO

app = typer.Typer(add_completion=False)

_EXIT_CLEAN = 0
_EXIT_FINDINGS = 1
_EXIT_FAILURE = 2


def _configure_logging(log_file: Optional[Path], log_level: str) -> None:
    level = getattr(logging, log_level.upper(), None)
    if not isinstance(level, int):
        raise typer.BadParameter(f"Unknown log level: {log_level}")
    if log_file is None:
        # stdout carries the LSP stream; without a file only warnings reach stderr.
        logging.basicConfig(level=max(level, logging.WARNING))
        return
    logging.basicConfig(
        filename=str(log_file),
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _write_text_to_target(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text + "\n", encoding="utf-8")


@app.command("lsp")
def lsp(
    tcp: bool = typer.Option(False, "--tcp", help="Serve over TCP instead of stdio."),
    host: str = typer.Option("127.0.0.1", "--host"),
    port: int = typer.Option(2087, "--port"),
    log_file: Optional[Path] = typer.Option(None, "--log-file"),
    log_level: str = typer.Option("info", "--log-level"),
) -> None:
    """Run the language server."""
    from lintbridge import server

    _configure_logging(log_file, log_level)
    if tcp:
        server.start(lambda: server.server.start_tcp(host, port))
    else:
        server.start()


def build_check_response(
    path: Path,
    config: AnalyzerConfig,
    *,
    analyzer_output: Optional[Path] = None,
    runner=run_analyzer,
) -> CheckResponse:
    text = path.read_text(encoding="utf-8")
    try:
        if analyzer_output is not None:
            raw_lines = extract_error_lines(analyzer_output.read_text(encoding="utf-8"))
        else:
            raw_lines = runner(config, text, suffix=path.suffix or None)
    except LintBridgeError as exc:
        return CheckResponse(path=str(path), errors=[str(exc)])
    diagnostics = [
        DiagnosticDTO(
            range=error.range.to_json(),
            rule=error.rule,
            message=error.message,
            source=f"{config.display_name}: {error.rule}",
        )
        for error in parse_errors(text, raw_lines)
    ]
    return CheckResponse(path=str(path), diagnostics=diagnostics)


@app.command("check")
def check(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True),
    config_path: Optional[Path] = typer.Option(None, "--config"),
    binary: Optional[str] = typer.Option(None, "--binary"),
    analyzer_output: Optional[Path] = typer.Option(
        None,
        "--analyzer-output",
        exists=True,
        dir_okay=False,
        help="Reparse captured analyzer stdout instead of running the analyzer.",
    ),
    output_path: Optional[Path] = typer.Option(
        None, "--output", help="Write the JSON report to this path."
    ),
) -> None:
    """Lint one file and print its diagnostics as JSON."""
    try:
        config = resolve_analyzer_config(
            root=path.resolve().parent,
            config_path=config_path,
            overrides={"binary": binary},
        )
    except LintBridgeError as exc:
        raise typer.BadParameter(str(exc)) from exc
    response = build_check_response(path, config, analyzer_output=analyzer_output)
    output = json.dumps(response.model_dump(), indent=2, sort_keys=True)
    if output_path is None:
        typer.echo(output)
    else:
        _write_text_to_target(output_path, output)
    if response.errors:
        raise typer.Exit(code=_EXIT_FAILURE)
    if response.diagnostics:
        raise typer.Exit(code=_EXIT_FINDINGS)
    raise typer.Exit(code=_EXIT_CLEAN)
