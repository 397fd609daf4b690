from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Callable, Iterable, List, Optional
from urllib.parse import unquote, urlparse

from pygls.lsp.server import LanguageServer
from pydantic import ValidationError
from lsprotocol import types

from lintbridge import __version__
from lintbridge.analyzer import document_suffix, run_analyzer
from lintbridge.config import (
    SETTINGS_SECTION,
    AnalyzerConfig,
    TomlTable,
    resolve_analyzer_config,
)
from lintbridge.exceptions import ConfigError, LintBridgeError
from lintbridge.fixes import CHANGE_COMMAND, synthesize
from lintbridge.model import LintDiagnostic, Position, Range
from lintbridge.parse import parse_errors
from lintbridge.schema import ChangeRequest
from lintbridge.store import CommandStore

logger = logging.getLogger(__name__)

STALE_FIX_MESSAGE = "Lint fixes are outdated and can't be applied to the document."


class LintBridgeServer(LanguageServer):
    """Language server that owns the diagnostics store for its session."""

    def __init__(
        self,
        *args,
        process_factory: Callable[..., subprocess.Popen] = subprocess.Popen,
        **kwargs,
    ) -> None:
        super().__init__(*args, **kwargs)
        self.store = CommandStore()
        self.analyzer_config: Optional[AnalyzerConfig] = None
        self.settings_overrides: TomlTable = {}
        self.process_factory = process_factory
        self.reported_errors: set[str] = set()


server = LintBridgeServer("lintbridge", __version__)


def _uri_to_path(uri: str) -> Path:
    parsed = urlparse(uri)
    if parsed.scheme == "file":
        return Path(unquote(parsed.path))
    return Path(uri)


def _workspace_root(ls) -> Optional[Path]:
    root_path = getattr(ls.workspace, "root_path", None)
    return Path(root_path) if root_path else None


def _lsp_range(value: Range) -> types.Range:
    return types.Range(
        start=types.Position(line=value.start.line, character=value.start.character),
        end=types.Position(line=value.end.line, character=value.end.character),
    )


def _model_range(value: types.Range) -> Range:
    return Range(
        start=Position(line=value.start.line, character=value.start.character),
        end=Position(line=value.end.line, character=value.end.character),
    )


def to_lsp_diagnostic(diagnostic: LintDiagnostic, display_name: str) -> types.Diagnostic:
    return types.Diagnostic(
        range=_lsp_range(diagnostic.range),
        message=diagnostic.message,
        severity=types.DiagnosticSeverity.Error,
        code=diagnostic.rule,
        source=f"{display_name}: {diagnostic.rule}",
    )


def configure(ls, root: Optional[Path] = None) -> None:
    try:
        config = resolve_analyzer_config(root=root, overrides=ls.settings_overrides)
    except ConfigError as exc:
        logger.error("%s", exc)
        _warn_once(ls, str(exc))
        return
    ls.analyzer_config = config
    ls.store.tool_name = config.tool_name
    logger.info("using analyzer %s (platform %s)", config.binary, config.platform)


def _analyzer_config(ls) -> AnalyzerConfig:
    if ls.analyzer_config is None:
        ls.analyzer_config = resolve_analyzer_config(
            root=_workspace_root(ls), overrides=ls.settings_overrides
        )
        ls.store.tool_name = ls.analyzer_config.tool_name
    return ls.analyzer_config


def _warn_once(ls, message: str) -> None:
    if message in ls.reported_errors:
        return
    ls.reported_errors.add(message)
    ls.window_show_message(
        types.ShowMessageParams(type=types.MessageType.Warning, message=message)
    )


def _publish(ls, uri: str, version: Optional[int], diagnostics: List[types.Diagnostic]) -> None:
    ls.text_document_publish_diagnostics(
        types.PublishDiagnosticsParams(uri=uri, version=version, diagnostics=diagnostics)
    )


def _store_result(
    ls, uri: str, version: int, text: str, errors: List[LintDiagnostic]
) -> bool:
    # Validation runs off the main loop; the document may close meanwhile.
    if uri not in ls.workspace.text_documents:
        return False
    return ls.store.record(uri, version, text, errors)


def validate_document(ls, uri: str) -> List[LintDiagnostic]:
    """Lint the current buffer of `uri`, store the results and publish them.

    Columns are counted in the client's position encoding. Results for an
    older version than the stored one are neither stored nor published.
    """
    doc = ls.workspace.get_text_document(uri)
    text = doc.source
    version = doc.version if doc.version is not None else 0
    try:
        config = _analyzer_config(ls)
        raw_lines = run_analyzer(
            config,
            text,
            suffix=document_suffix(uri, config.default_extension),
            process_factory=ls.process_factory,
        )
    except LintBridgeError as exc:
        logger.warning("validation of %s failed: %s", uri, exc)
        if _store_result(ls, uri, version, text, []):
            _publish(ls, uri, version, [])
        _warn_once(ls, str(exc))
        return []
    ls.reported_errors.clear()
    errors = parse_errors(text, raw_lines, doc.position_codec.client_num_units)
    if not _store_result(ls, uri, version, text, errors):
        return []
    logger.info("%s v%s: %d diagnostics", uri, version, len(errors))
    _publish(
        ls,
        uri,
        version,
        [to_lsp_diagnostic(error, config.display_name) for error in errors],
    )
    return errors


def code_action_commands(ls, uri: str, requested: types.Range) -> List[types.Command]:
    return [
        types.Command(title=fix.title, command=fix.command, arguments=fix.arguments())
        for fix in synthesize(ls.store, uri, _model_range(requested))
    ]


def _text_edits(request: ChangeRequest) -> Iterable[types.TextEdit]:
    for edit in request.edits:
        yield types.TextEdit(
            range=types.Range(
                start=types.Position(
                    line=edit.range.start.line, character=edit.range.start.character
                ),
                end=types.Position(
                    line=edit.range.end.line, character=edit.range.end.character
                ),
            ),
            new_text=edit.newText,
        )


def apply_fix(ls, arguments: list) -> dict:
    """Apply a quick fix, refusing it if the document changed since it was computed."""
    try:
        request = ChangeRequest.from_arguments(arguments)
    except ValidationError as exc:
        return {"applied": False, "reason": "invalid", "errors": [str(exc)]}
    doc = ls.workspace.text_documents.get(request.uri)
    if doc is None or doc.version != request.version:
        ls.window_show_message(
            types.ShowMessageParams(type=types.MessageType.Info, message=STALE_FIX_MESSAGE)
        )
        return {"applied": False, "reason": "stale"}
    edit = types.WorkspaceEdit(
        document_changes=[
            types.TextDocumentEdit(
                text_document=types.OptionalVersionedTextDocumentIdentifier(
                    uri=request.uri, version=request.version
                ),
                edits=list(_text_edits(request)),
            )
        ]
    )
    ls.workspace_apply_edit(types.ApplyWorkspaceEditParams(edit=edit, label="lintbridge"))
    return {"applied": True}


@server.feature(types.INITIALIZE)
def initialize(ls: LintBridgeServer, params: types.InitializeParams) -> None:
    options = params.initialization_options
    if isinstance(options, dict):
        ls.settings_overrides = dict(options)
    root = None
    if params.root_uri:
        root = _uri_to_path(params.root_uri)
    elif params.root_path:
        root = Path(params.root_path)
    configure(ls, root)


@server.thread()
@server.feature(types.WORKSPACE_DID_CHANGE_CONFIGURATION)
def did_change_configuration(
    ls: LintBridgeServer, params: types.DidChangeConfigurationParams
) -> None:
    settings = params.settings
    if isinstance(settings, dict) and isinstance(settings.get(SETTINGS_SECTION), dict):
        ls.settings_overrides = dict(settings[SETTINGS_SECTION])
    configure(ls, _workspace_root(ls))
    for uri in list(ls.workspace.text_documents):
        validate_document(ls, uri)


@server.thread()
@server.feature(types.TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LintBridgeServer, params: types.DidOpenTextDocumentParams) -> None:
    validate_document(ls, params.text_document.uri)


@server.thread()
@server.feature(types.TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LintBridgeServer, params: types.DidChangeTextDocumentParams) -> None:
    validate_document(ls, params.text_document.uri)


@server.feature(types.TEXT_DOCUMENT_DID_CLOSE)
def did_close(ls: LintBridgeServer, params: types.DidCloseTextDocumentParams) -> None:
    uri = params.text_document.uri
    ls.store.forget(uri)
    _publish(ls, uri, None, [])


@server.feature(types.TEXT_DOCUMENT_CODE_ACTION)
def code_action(ls: LintBridgeServer, params: types.CodeActionParams) -> List[types.Command]:
    return code_action_commands(ls, params.text_document.uri, params.range)


@server.command(CHANGE_COMMAND)
def execute_change(ls: LintBridgeServer, uri=None, version=None, edits=None) -> dict:
    return apply_fix(ls, [uri, version, edits])


def start(start_fn: Callable[[], None] | None = None) -> None:
    """Serve over stdio unless another start function is given."""
    (start_fn or server.start_io)()


if __name__ == "__main__":  # pragma: no cover
    start()  # pragma: no cover
