"""Unit tests for core/render/lists.py"""

from chatsaver.core.render.lists import ListBlock, ListItem, build_list, indent_of, is_list_line, strip_marker


def _fmt(text: str) -> str:
    return text


def test_is_list_line():
    assert is_list_line("- a")
    assert is_list_line("  * a")
    assert is_list_line("12. a")
    assert not is_list_line("-a")
    assert not is_list_line("1.a")
    assert not is_list_line("text - a")


def test_indent_of():
    assert indent_of("- a") == 0
    assert indent_of("   1. a") == 3
    assert indent_of("\t- a") == 1


def test_strip_marker_only_once():
    assert strip_marker("- - a") == "- a"
    assert strip_marker("  3. b") == "b"


def test_build_list_flat():
    block, end = build_list(["- a", "- b"], 0, _fmt)
    assert end == 2
    assert block == ListBlock(ordered=False, items=[ListItem("a"), ListItem("b")])


def test_build_list_ordered_kind_from_first_line():
    block, _ = build_list(["1. a", "- b"], 0, _fmt)
    assert block.ordered
    assert block.to_html() == "<ol><li>a</li><li>b</li></ol>"


def test_build_list_nesting_uses_relative_indent():
    # four-space nesting is read the same as two-space
    block, _ = build_list(["- a", "    - b", "- c"], 0, _fmt)
    assert block.to_html() == "<ul><li>a<ul><li>b</li></ul></li><li>c</li></ul>"


def test_build_list_stops_at_shallower_line():
    block, end = build_list(["  - a", "- b"], 0, _fmt)
    assert end == 1
    assert block.to_html() == "<ul><li>a</li></ul>"


def test_build_list_deep_run_attaches_to_last_item():
    # b folds back to an intermediate indent with no sibling at that level
    lines = ["- a", "    - b", "  - c"]
    block, end = build_list(lines, 0, _fmt)
    assert end == 3
    assert block.to_html() == "<ul><li>a<ul><li>b</li></ul><ul><li>c</li></ul></li></ul>"


def test_build_list_from_offset_returns_its_level_only():
    block, end = build_list(["- a", "    - b", "  - c"], 1, _fmt)
    assert end == 2
    assert block.to_html() == "<ul><li>b</li></ul>"


def test_build_list_formats_item_text():
    block, _ = build_list(["- *x*"], 0, lambda t: t.upper())
    assert block.items[0].html == "*X*"
