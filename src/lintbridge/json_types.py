from __future__ import annotations

"""JSON-like value types used at the LSP command boundary.

Command arguments travel through the client untouched and come back on
`workspace/executeCommand`, so their value space is declared as plain JSON.
"""

from typing import TypeAlias


JSONScalar: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONScalar | list["JSONValue"] | dict[str, "JSONValue"]
JSONObject: TypeAlias = dict[str, JSONValue]
JSONArray: TypeAlias = list[JSONValue]
