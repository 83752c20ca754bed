"""Annotations embedded in key descriptions."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

_COMMENT_PREFIX = re.compile(r"^[^\S\n]*#[^\S\n]?")
_OVERRIDE_LINE = re.compile(r"^(type|default):(.*)$")


@dataclass
class Annotations:
    """A description split into its ``type:``/``default:`` overrides and its text."""

    kind: str | None = None
    default: str | None = None
    lines: list[str] = field(default_factory=list)


def parse_annotations(description: str) -> Annotations:
    """Strip comment markers from *description* and pull out override lines.

    A line reading ``type: X`` overrides the documented kind and a line
    reading ``default: Y`` the documented default; the last occurrence of
    each wins. Override lines never appear in the returned text lines.
    """
    annotations = Annotations()
    for raw_line in description.split("\n"):
        line = _COMMENT_PREFIX.sub("", raw_line)
        match = _OVERRIDE_LINE.match(line)
        if match is None:
            annotations.lines.append(line)
            continue
        value = match.group(2).strip()
        if not value:
            continue
        if match.group(1) == "type":
            annotations.kind = value
        else:
            annotations.default = value
    return annotations
