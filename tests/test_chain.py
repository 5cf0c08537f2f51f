"""Unit tests for chain parsing.

WHY: The chain is hand-written configuration. Misreading one item
either drops code from the bundle or turns glue code into a handler
call, and both are silent at build time.

HOW: One class per accepted item shape, plus the error cases.

RULES:
- Parsed entries are compared structurally (frozen dataclasses)
"""

import pytest

from chain_transpiler.core.chain import ChainConfigError, parse_chain, uses_handler
from chain_transpiler.core.ir import HandlerCall, HandlerName, InlineText


class TestBareStrings:
    """Bare strings are handler calls when they name a handler."""

    @pytest.mark.parametrize("name", ["ym", "source"])
    def test_handler_names(self, name):
        assert parse_chain([name]) == [HandlerCall(HandlerName(name))]

    def test_other_strings_are_inline(self):
        assert parse_chain(["const x = 1"]) == [InlineText("const x = 1")]

    def test_handler_name_lookalikes_are_inline(self):
        assert parse_chain(["Source", " ym"]) == [InlineText("Source"), InlineText(" ym")]

    def test_order_preserved(self):
        entries = parse_chain(["a", "ym", "b", "source"])
        assert entries == [
            InlineText("a"),
            HandlerCall(HandlerName.YM),
            InlineText("b"),
            HandlerCall(HandlerName.SOURCE),
        ]


class TestPairs:
    """[name, args] pairs call the named handler with args."""

    def test_target_with_mask(self):
        assert parse_chain([["target", "?.lib.js"]]) == [
            HandlerCall(HandlerName.TARGET, "?.lib.js")
        ]

    def test_tuple_pair(self):
        assert parse_chain([("target", "?.lib.js")]) == [
            HandlerCall(HandlerName.TARGET, "?.lib.js")
        ]

    def test_single_element_list(self):
        assert parse_chain([["ym"]]) == [HandlerCall(HandlerName.YM)]

    def test_unknown_name_becomes_inline_name(self):
        assert parse_chain([["var a;", "ignored"]]) == [InlineText("var a;")]

    def test_source_args_kept_for_resolver_to_replace(self):
        assert parse_chain([["source", ["x"]]]) == [HandlerCall(HandlerName.SOURCE, ["x"])]


class TestExplicitMappings:
    """{"inline": ...} and {"handler": ...} remove all guessing."""

    def test_inline_can_spell_a_handler_name(self):
        assert parse_chain([{"inline": "source"}]) == [InlineText("source")]

    def test_explicit_handler(self):
        assert parse_chain([{"handler": "target", "args": "?.css"}]) == [
            HandlerCall(HandlerName.TARGET, "?.css")
        ]

    def test_explicit_handler_without_args(self):
        assert parse_chain([{"handler": "ym"}]) == [HandlerCall(HandlerName.YM)]


class TestTypedEntries:
    """Already-typed entries pass through (and are normalized)."""

    def test_passthrough(self):
        entries = [InlineText("x"), HandlerCall(HandlerName.YM)]
        assert parse_chain(entries) == entries

    def test_string_handler_name_normalized_to_enum(self):
        (entry,) = parse_chain([HandlerCall("target", "?.js")])
        assert entry.name is HandlerName.TARGET


class TestErrors:
    """Malformed items raise ChainConfigError with the item position."""

    def test_chain_must_not_be_a_string(self):
        with pytest.raises(ChainConfigError):
            parse_chain("source")

    def test_empty_pair(self):
        with pytest.raises(ChainConfigError, match="chain item 0"):
            parse_chain([[]])

    def test_too_long_pair(self):
        with pytest.raises(ChainConfigError):
            parse_chain([["target", "a", "b"]])

    def test_non_string_name(self):
        with pytest.raises(ChainConfigError):
            parse_chain([[42, "x"]])

    def test_target_without_mask(self):
        with pytest.raises(ChainConfigError, match="target mask"):
            parse_chain(["target"])

    def test_target_with_non_string_mask(self):
        with pytest.raises(ChainConfigError):
            parse_chain([["target", ["?.js"]]])

    def test_unknown_explicit_handler(self):
        with pytest.raises(ChainConfigError, match="unknown handler"):
            parse_chain(["ok", {"handler": "webpack"}])

    def test_unknown_mapping_shape(self):
        with pytest.raises(ChainConfigError):
            parse_chain([{"text": "x"}])

    def test_non_string_inline(self):
        with pytest.raises(ChainConfigError):
            parse_chain([{"inline": 3}])

    def test_unsupported_type(self):
        with pytest.raises(ChainConfigError, match="chain item 1"):
            parse_chain(["a", 3.5])

    def test_is_value_error(self):
        assert issubclass(ChainConfigError, ValueError)


class TestUsesHandler:
    def test_detects_source(self):
        assert uses_handler(parse_chain(["a", "source"]), HandlerName.SOURCE)

    def test_inline_source_text_does_not_count(self):
        assert not uses_handler(parse_chain([{"inline": "source"}]), HandlerName.SOURCE)
