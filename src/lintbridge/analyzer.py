from __future__ import annotations

import logging
import os
import subprocess
import tempfile
from pathlib import PurePosixPath
from typing import Callable, List
from urllib.parse import unquote, urlparse

from lintbridge.config import AnalyzerConfig
from lintbridge.exceptions import AnalyzerError
from lintbridge.parse import extract_error_lines

logger = logging.getLogger(__name__)


def document_suffix(uri: str, default: str) -> str:
    path = unquote(urlparse(uri).path) or uri
    return PurePosixPath(path).suffix or default


def _write_temp_document(text: str, suffix: str) -> str:
    fd, path = tempfile.mkstemp(prefix="lintbridge-", suffix=suffix)
    with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
        handle.write(text)
    return path


def run_analyzer(
    config: AnalyzerConfig,
    text: str,
    *,
    suffix: str | None = None,
    process_factory: Callable[..., subprocess.Popen] = subprocess.Popen,
) -> List[str]:
    """Lint `text` with the external analyzer and return its finding lines.

    The analyzer only reads files, so the buffer is written to a temporary
    file that is removed afterwards. A non-zero exit status is expected when
    findings are reported and is not treated as a failure.
    """
    path = _write_temp_document(text, suffix or config.default_extension)
    try:
        try:
            proc = process_factory(
                [config.binary, path],
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as exc:
            raise AnalyzerError(f"failed to start analyzer {config.binary}: {exc}") from exc
        try:
            out, err = proc.communicate(timeout=config.timeout_seconds)
        except subprocess.TimeoutExpired as exc:
            proc.kill()
            proc.communicate(timeout=1.0)
            raise AnalyzerError(
                f"analyzer timed out after {config.timeout_seconds:g}s"
            ) from exc
    finally:
        try:
            os.unlink(path)
        except OSError:
            logger.warning("could not remove temporary file %s", path)
    detail = (err or b"").decode("utf-8", errors="replace").strip()
    if detail:
        logger.warning("analyzer stderr: %s", detail)
    return extract_error_lines((out or b"").decode("utf-8", errors="replace"))
