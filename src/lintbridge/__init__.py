"""lintbridge package root."""

from lintbridge.exceptions import AnalyzerError, ConfigError, LintBridgeError

__all__ = ["__version__", "AnalyzerError", "ConfigError", "LintBridgeError"]

__version__ = "0.1.0"
