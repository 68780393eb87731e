"""
JSON formatting utilities.

Provides helpers for formatting JSON output with specific styling requirements,
such as compact arrays while maintaining overall indentation.
"""

import json
import re
from typing import Any, List, Optional

# A multi-line array holding only numbers
_NUMBER_ARRAY = r'\[\s*\n\s*([\d\.\-\+eE,\s]+)\n\s*\]'


def _compact(match: 're.Match') -> str:
    return '[' + re.sub(r'\s+', ' ', match.group(1).strip()) + ']'


def dumps_compact_arrays(
    data: Any,
    indent: int = 2,
    array_fields: Optional[List[str]] = None
) -> str:
    """
    Format JSON with numeric arrays kept on single lines.

    Standard json.dumps() with indent puts every element of an attribute
    array on its own line, which turns a mesh with a few thousand vertices
    into tens of thousands of lines. This keeps the surrounding structure
    indented but writes those arrays as one line each.

    Args:
        data: Data structure to serialize
        indent: Number of spaces for indentation (default: 2)
        array_fields: Field names whose arrays should be compacted.
                     If None, compacts all arrays of numbers.

    Returns:
        JSON string with compact arrays and indented structure

    Example:
        >>> print(dumps_compact_arrays({"uv": {"array": [0.5, 1.0]}}, array_fields=["array"]))
        {
          "uv": {
            "array": [0.5, 1.0]
          }
        }
    """
    json_str = json.dumps(data, indent=indent, ensure_ascii=False)

    if array_fields is None:
        return re.sub(_NUMBER_ARRAY, _compact, json_str)

    for field in array_fields:
        pattern = rf'("{re.escape(field)}":\s*)' + _NUMBER_ARRAY
        json_str = re.sub(
            pattern,
            lambda m: m.group(1) + '[' + re.sub(r'\s+', ' ', m.group(2).strip()) + ']',
            json_str
        )

    return json_str


def rounded(values, precision: int) -> List[float]:
    """Round a flat sequence of numbers for text output."""
    return [round(float(v), precision) for v in values]
