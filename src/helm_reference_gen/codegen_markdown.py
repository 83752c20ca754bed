"""Markdown documentation generation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError

from helm_reference_gen.errors import RenderError
from helm_reference_gen.overrides import Annotations, parse_annotations
from helm_reference_gen.tree import DocNode, build

logger = logging.getLogger(__name__)

_TEMPLATE_ENV = Environment(
    loader=FileSystemLoader(Path(__file__).resolve().parent / "templates"),
    trim_blocks=True,
    lstrip_blocks=False,
    keep_trailing_newline=False,
    undefined=StrictUndefined,
)

_KINDS_BY_TAG = {
    "str": "string",
    "int": "integer",
    "bool": "boolean",
    "map": "map",
}

ARRAY_OF_MAPS = "array<map>"
_MAX_DEFAULT_LINES = 2


@dataclass
class ValueEntry:
    """Template context for a single documented key."""

    leading_indent: str
    key: str
    anchor: str
    kind: str
    default: str
    description: str


def generate_docs(yaml_text: str, output: str | Path) -> None:
    """Generate Markdown docs for the values document *yaml_text* at *output*."""
    rendered = render_docs(yaml_text)

    output_path = Path(output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(rendered + "\n", encoding="utf-8")
    logger.info("wrote %s", output_path)


def render_docs(yaml_text: str) -> str:
    """Return the Markdown reference for the values document *yaml_text*."""
    return render(build(yaml_text))


def render(root: DocNode) -> str:
    """Render every node below *root*, parents before their children."""
    template = _TEMPLATE_ENV.get_template("value_entry.md.j2")
    fragments: list[str] = []
    for node in _walk(root):
        try:
            fragments.append(template.render(entry=value_entry(node)))
        except TemplateError as exc:
            raise RenderError(f"failed to render '{node.anchor}': {exc}") from exc
    logger.debug("rendered %d entries", len(fragments))
    return "\n\n".join(fragments)


def value_entry(node: DocNode) -> ValueEntry:
    """Resolve the displayed kind, default and description of *node*."""
    annotations = parse_annotations(node.description)
    kind = kind_of(node, annotations)
    return ValueEntry(
        leading_indent=leading_indent(node),
        key=node.key,
        anchor=node.anchor,
        kind=kind,
        default=format_default(node, annotations, kind),
        description=format_description(node, annotations),
    )


def kind_of(node: DocNode, annotations: Annotations) -> str:
    """Return the documented kind of *node*, preferring a ``type:`` override."""
    if annotations.kind is not None:
        return annotations.kind
    tag = node.kind_tag.lstrip("!")
    if tag == "seq" and node.children:
        return ARRAY_OF_MAPS
    if tag in _KINDS_BY_TAG:
        return _KINDS_BY_TAG[tag]
    return f"unknown kind '{node.kind_tag}'"


def format_default(node: DocNode, annotations: Annotations, kind: str) -> str:
    """Return the default shown for *node*, or an empty string to show none."""
    if annotations.default is not None:
        return annotations.default
    if kind == ARRAY_OF_MAPS:
        return ""
    if node.raw_default:
        # Long block values such as affinity rules would not fit inline.
        if len(node.raw_default.split("\n")) > _MAX_DEFAULT_LINES:
            return ""
        return node.raw_default.strip()
    return '""'


def format_description(node: DocNode, annotations: Annotations) -> str:
    """Return the description text with continuation lines indented under the entry."""
    if not annotations.lines:
        return ""
    indent = " " * (node.indent_level if node.parent_was_sequence_of_maps else node.indent_level + 1)
    first, *rest = annotations.lines
    lines = [first]
    for line in rest:
        lines.append(f"{indent}{line}" if line else "")
    return "\n".join(lines)


def leading_indent(node: DocNode) -> str:
    """Return the padding that nests the entry of *node* under its parent."""
    if node.parent_was_sequence_of_maps:
        return " " * (node.indent_level - 3)
    return " " * (node.indent_level - 1)


def _walk(root: DocNode) -> Iterator[DocNode]:
    for child in root.children:
        yield child
        yield from _walk(child)
