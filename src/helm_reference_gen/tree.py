"""Documentation tree construction from commented values documents."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass

import yaml

from helm_reference_gen.errors import ParseError

logger = logging.getLogger(__name__)

_TAG_PREFIX = "tag:yaml.org,2002:"
_BLOCK_SCALAR_STYLES = ("|", ">")


@dataclass(frozen=True)
class DocNode:
    """A configuration key together with everything needed to document it."""

    indent_level: int = 0
    parent_anchor: str = ""
    parent_was_sequence_of_maps: bool = False
    key: str = ""
    raw_default: str = ""
    description: str = ""
    kind_tag: str = ""
    children: tuple[DocNode, ...] = ()

    @property
    def anchor(self) -> str:
        """Stable cross-reference target derived from the key path."""
        return _anchor(self.parent_anchor, self.key)


def build(yaml_text: str) -> DocNode:
    """Parse *yaml_text* and return the synthetic root of its documentation tree."""
    try:
        document = yaml.compose(yaml_text, Loader=yaml.SafeLoader)
    except yaml.YAMLError as exc:
        raise ParseError(str(exc)) from exc

    if document is None:
        logger.warning("values document is empty, nothing to document")
        return DocNode()
    if not isinstance(document, yaml.MappingNode):
        logger.warning(
            "values document root is %s rather than a mapping, nothing to document",
            short_tag(document.tag),
        )
        return DocNode()

    builder = _TreeBuilder(yaml_text)
    children = builder.mapping_children(document, parent_anchor="", unwrapped=False)
    logger.debug("built documentation tree with %d top-level keys", len(children))
    return DocNode(children=children)


def short_tag(tag: str) -> str:
    """Return the ``!!name`` form of a standard YAML tag."""
    if tag.startswith(_TAG_PREFIX):
        return "!!" + tag[len(_TAG_PREFIX) :]
    return tag


def unwrap_sequence_of_maps(node: yaml.SequenceNode) -> yaml.MappingNode | None:
    """Return the sole mapping of a one-element sequence, if that is its shape.

    A list holding exactly one mapping documents the shape of its items, so
    the mapping's keys are listed directly under the sequence key. Nodes
    built from those keys are flagged with ``parent_was_sequence_of_maps``
    so the renderer can compensate for the ``- `` the item adds to their
    column. Only one level is ever unwrapped.
    """
    if len(node.value) == 1 and isinstance(node.value[0], yaml.MappingNode):
        return node.value[0]
    return None


class _TreeBuilder:
    def __init__(self, yaml_text: str) -> None:
        self._comments = _HeadComments(yaml_text)

    def mapping_children(
        self, node: yaml.MappingNode, parent_anchor: str, unwrapped: bool
    ) -> tuple[DocNode, ...]:
        children: list[DocNode] = []
        for key_node, value_node in node.value:
            if not isinstance(key_node, yaml.ScalarNode):
                mark = key_node.start_mark
                raise ParseError(
                    f"mapping key at line {mark.line + 1}, column {mark.column + 1} "
                    "is not a scalar"
                )
            children.append(
                self._entry(key_node.value, key_node.start_mark, value_node, parent_anchor, unwrapped)
            )
        return tuple(children)

    def sequence_children(
        self, node: yaml.SequenceNode, anchor: str, indent_level: int
    ) -> tuple[DocNode, ...]:
        item_map = unwrap_sequence_of_maps(node)
        if item_map is not None:
            return self.mapping_children(item_map, anchor, unwrapped=True)

        children: list[DocNode] = []
        for index, item in enumerate(node.value):
            children.append(
                self._entry(str(index), item.start_mark, item, anchor, False, indent_level + 2)
            )
        return tuple(children)

    def _entry(
        self,
        key: str,
        mark: yaml.Mark,
        value: yaml.Node,
        parent_anchor: str,
        unwrapped: bool,
        indent_level: int | None = None,
    ) -> DocNode:
        if indent_level is None:
            indent_level = mark.column + 1
        description = self._comments.take(mark.line)
        anchor = _anchor(parent_anchor, key)
        raw_default = ""
        children: tuple[DocNode, ...] = ()

        if isinstance(value, yaml.ScalarNode):
            raw_default = value.value
        elif isinstance(value, yaml.MappingNode):
            children = self.mapping_children(value, anchor, unwrapped=False)
        elif not value.value:
            raw_default = "[]"
        elif all(isinstance(item, yaml.ScalarNode) for item in value.value):
            raw_default = _flow_sequence(value)
        else:
            children = self.sequence_children(value, anchor, indent_level)

        self._comments.consume(value)
        return DocNode(
            indent_level=indent_level,
            parent_anchor=parent_anchor,
            parent_was_sequence_of_maps=unwrapped,
            key=key,
            raw_default=raw_default,
            description=description,
            kind_tag=short_tag(value.tag),
            children=children,
        )


class _HeadComments:
    """Hands out the comment block above each key, in document order.

    Lines before ``_floor`` already belong to earlier nodes, which keeps
    ``#`` lines inside block scalars from being read as comments.
    """

    def __init__(self, yaml_text: str) -> None:
        self._lines = yaml_text.splitlines()
        self._floor = 0

    def take(self, line: int) -> str:
        start = line
        while start > self._floor and self._lines[start - 1].lstrip().startswith("#"):
            start -= 1
        self._floor = max(self._floor, line)
        return "\n".join(self._lines[start:line])

    def consume(self, node: yaml.Node) -> None:
        self._floor = max(self._floor, _end_line(node))


def _anchor(parent_anchor: str, key: str) -> str:
    return f"{parent_anchor}-{key.lower()}"


def _end_line(node: yaml.Node) -> int:
    # First line not owned by *node*.
    if isinstance(node, yaml.ScalarNode):
        if node.style in _BLOCK_SCALAR_STYLES:
            return node.end_mark.line
        return node.end_mark.line + 1
    if node.flow_style or not node.value:
        return node.end_mark.line + 1
    last = node.value[-1]
    if isinstance(node, yaml.MappingNode):
        last = last[1]
    return _end_line(last)


def _flow_sequence(node: yaml.SequenceNode) -> str:
    flow = yaml.SequenceNode(node.tag, node.value, flow_style=True)
    rendered = yaml.serialize(flow, Dumper=yaml.SafeDumper, width=sys.maxsize, allow_unicode=True)
    return rendered.rstrip("\n")
