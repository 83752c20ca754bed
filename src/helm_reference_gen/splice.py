"""Keep a generated section of an existing reference page up to date."""

from __future__ import annotations

DEFAULT_START_MARKER = "<!-- codegen: start -->"
DEFAULT_END_MARKER = "<!-- codegen: end -->"


def splice(
    document: str,
    generated: str,
    start_marker: str = DEFAULT_START_MARKER,
    end_marker: str = DEFAULT_END_MARKER,
) -> str:
    """Replace the text between the markers in *document* with *generated*.

    The markers themselves are kept so the page can be regenerated again.
    """
    start, end = _section_bounds(document, start_marker, end_marker)
    return f"{document[:start]}\n\n{generated}\n\n{document[end:]}"


def is_up_to_date(
    document: str,
    generated: str,
    start_marker: str = DEFAULT_START_MARKER,
    end_marker: str = DEFAULT_END_MARKER,
) -> bool:
    """Return whether *document* already contains *generated* between the markers."""
    return splice(document, generated, start_marker, end_marker) == document


def _section_bounds(document: str, start_marker: str, end_marker: str) -> tuple[int, int]:
    for marker in (start_marker, end_marker):
        count = document.count(marker)
        if count == 0:
            raise ValueError(f"marker '{marker}' not found in document")
        if count > 1:
            raise ValueError(f"marker '{marker}' occurs {count} times in document")
    start = document.index(start_marker) + len(start_marker)
    end = document.index(end_marker)
    if end < start:
        raise ValueError(f"marker '{end_marker}' must come after '{start_marker}'")
    return start, end
