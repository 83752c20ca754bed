"""Tests for documentation tree construction."""

from __future__ import annotations

import pytest

from helm_reference_gen.errors import ParseError
from helm_reference_gen.tree import DocNode, build


def test_build_preserves_source_order_and_nesting() -> None:
    root = build("zeta: 1\nalpha:\n  beta: true\n  gamma: x\nmiddle: y\n")

    assert [child.key for child in root.children] == ["zeta", "alpha", "middle"]
    alpha = root.children[1]
    assert [child.key for child in alpha.children] == ["beta", "gamma"]
    assert alpha.kind_tag == "!!map"
    assert alpha.raw_default == ""


def test_build_records_columns_and_anchors() -> None:
    root = build("foo:\n  # the foo setting\n  bar: 1\n")

    foo = root.children[0]
    bar = foo.children[0]
    assert foo.indent_level == 1
    assert bar.indent_level == 3
    assert foo.anchor == "-foo"
    assert bar.parent_anchor == "-foo"
    assert bar.anchor == "-foo-bar"
    assert bar.description == "  # the foo setting"
    assert bar.kind_tag == "!!int"
    assert bar.raw_default == "1"
    assert foo.description == ""


def test_anchor_lowercases_key() -> None:
    root = build("Server:\n  extraConfig: x\n")

    assert root.children[0].children[0].anchor == "-server-extraconfig"


def test_anchors_are_stable_across_builds() -> None:
    text = "a:\n  b:\n    c: 1\n  d: [x]\n"

    def anchors(node: DocNode) -> list[str]:
        found = []
        for child in node.children:
            found.append(child.anchor)
            found.extend(anchors(child))
        return found

    assert anchors(build(text)) == anchors(build(text))
    assert anchors(build(text)) == ["-a", "-a-b", "-a-b-c", "-a-d"]


def test_head_comment_requires_adjacent_lines() -> None:
    text = "# detached\n\n# attached\n# twice\nkey: 1\n"

    node = build(text).children[0]

    assert node.description == "# attached\n# twice"


def test_trailing_comment_is_not_a_description() -> None:
    node = build("key: 1 # inline\n").children[0]

    assert node.description == ""


def test_hash_lines_inside_block_scalars_are_not_comments() -> None:
    text = (
        "script: |\n"
        "  #!/bin/sh\n"
        "  # still the script\n"
        "after: 1\n"
        "# real comment\n"
        "last: 2\n"
    )

    root = build(text)

    assert root.children[1].description == ""
    assert root.children[2].description == "# real comment"
    assert root.children[0].raw_default == "#!/bin/sh\n# still the script\n"


def test_comment_after_nested_block_scalar_belongs_to_next_key() -> None:
    text = "server:\n  affinity: |\n    a: b\n  # about tolerations\n  tolerations: x\n"

    tolerations = build(text).children[0].children[1]

    assert tolerations.description == "  # about tolerations"


def test_empty_sequence_is_a_leaf() -> None:
    node = build("extraVolumes: []\n").children[0]

    assert node.raw_default == "[]"
    assert node.kind_tag == "!!seq"
    assert node.children == ()


def test_scalar_sequence_is_rendered_inline() -> None:
    node = build("tags:\n  - a\n  - b\n  - c\n").children[0]

    assert node.raw_default == "[a, b, c]"
    assert node.children == ()


def test_single_map_sequence_is_unwrapped() -> None:
    text = "sidecars:\n  - name: proxy\n    port:\n      number: 1\n"

    sidecars = build(text).children[0]

    assert [child.key for child in sidecars.children] == ["name", "port"]
    name, port = sidecars.children
    assert name.parent_was_sequence_of_maps
    assert name.anchor == "-sidecars-name"
    assert name.indent_level == 5
    assert port.parent_was_sequence_of_maps
    assert not port.children[0].parent_was_sequence_of_maps


def test_multi_element_sequence_is_keyed_by_index() -> None:
    text = "hosts:\n  - name: a\n  - name: b\n"

    hosts = build(text).children[0]

    assert [child.key for child in hosts.children] == ["0", "1"]
    first = hosts.children[0]
    assert first.anchor == "-hosts-0"
    assert first.indent_level == hosts.indent_level + 2
    assert first.children[0].indent_level == 5
    assert first.kind_tag == "!!map"
    assert not first.parent_was_sequence_of_maps
    assert first.children[0].anchor == "-hosts-0-name"


def test_unknown_tags_are_kept() -> None:
    node = build("ratio: 0.5\n").children[0]

    assert node.kind_tag == "!!float"


def test_empty_document_has_no_children() -> None:
    assert build("").children == ()
    assert build("# only a comment\n").children == ()


def test_non_mapping_root_has_no_children() -> None:
    assert build("- a\n- b\n").children == ()


def test_malformed_yaml_raises_parse_error() -> None:
    with pytest.raises(ParseError, match=r".*mapping values are not allowed"):
        build("key: value: other\n")


def test_complex_keys_raise_parse_error() -> None:
    with pytest.raises(ParseError, match=r".*is not a scalar"):
        build("? [a, b]\n: value\n")
