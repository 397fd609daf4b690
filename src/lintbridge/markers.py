from __future__ import annotations

DEFAULT_TOOL_NAME = "tsqllint"


def disable_marker(rule: str, tool_name: str = DEFAULT_TOOL_NAME) -> str:
    return f"/* {tool_name}-disable {rule} */"


def enable_marker(rule: str, tool_name: str = DEFAULT_TOOL_NAME) -> str:
    return f"/* {tool_name}-enable {rule} */"


def wrap_line(line: str, indent: str, rule: str, tool_name: str = DEFAULT_TOOL_NAME) -> str:
    """Return `line` bracketed by disable/enable markers at the line's indent."""
    return (
        f"{indent}{disable_marker(rule, tool_name)}\n"
        f"{line}\n"
        f"{indent}{enable_marker(rule, tool_name)}\n"
    )
