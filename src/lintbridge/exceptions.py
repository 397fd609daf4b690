"""Exception hierarchy for lintbridge."""

from __future__ import annotations


class LintBridgeError(RuntimeError):
    pass


class AnalyzerError(LintBridgeError):
    """The external analyzer could not be run to completion.

    Raised by the analyzer runner; the language server catches it, clears the
    document's diagnostics and keeps serving.
    """


class ConfigError(LintBridgeError):
    pass
