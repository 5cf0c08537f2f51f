"""Chain configuration parsing.

WHY: Chains are written by hand in build configs, as bare strings and
``[name, args]`` pairs. The resolver should only ever see typed entries,
so the guessing ("is this string a handler name or literal code?")
happens once, here, with clear errors for shapes that make no sense.

HOW: parse_chain() maps each raw item to InlineText or HandlerCall:
  "ym" / "target" / "source"      → HandlerCall (bare handler name)
  any other string                → InlineText
  [name] or [name, args]          → HandlerCall when name is a handler,
                                    else InlineText(name)
  {"inline": text}                → InlineText, even for "source"
  {"handler": name, "args": ...}  → HandlerCall, unknown name is an error

RULES:
- Output order equals input order
- Bare strings equal to a handler name are always handler calls;
  use {"inline": ...} to emit such a string literally
- A target call must carry a string mask
- Malformed items raise ChainConfigError (a ValueError)
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterable, List

from chain_transpiler.core.ir import ChainEntry, HandlerCall, HandlerName, InlineText


class ChainConfigError(ValueError):
    """Raised when a chain item cannot be interpreted.

    RULES:
    - Message names the offending item and its position in the chain
    """


def parse_chain(raw: Iterable[Any]) -> List[ChainEntry]:
    """Convert raw chain configuration into typed entries.

    Args:
        raw: Sequence of chain items as written in the build config.

    Returns:
        List of InlineText / HandlerCall in the same order.

    Raises:
        ChainConfigError: An item has an unsupported shape.
    """
    if isinstance(raw, (str, bytes)):
        raise ChainConfigError("chain must be a list of items, not a string")
    return [parse_entry(item, index) for index, item in enumerate(raw)]


def parse_entry(item: Any, index: int = 0) -> ChainEntry:
    """Convert one raw chain item; ``index`` is used in error messages."""
    if isinstance(item, (InlineText, HandlerCall)):
        return _checked(item, index)

    if isinstance(item, str):
        name = HandlerName.lookup(item)
        return HandlerCall(name) if name is not None else InlineText(item)

    if isinstance(item, (list, tuple)):
        if not item or len(item) > 2:
            raise ChainConfigError(
                "chain item {}: expected [name] or [name, args], got {!r}".format(index, item)
            )
        head = item[0]
        args = item[1] if len(item) == 2 else None
        if not isinstance(head, str):
            raise ChainConfigError(
                "chain item {}: handler name must be a string, got {!r}".format(index, head)
            )
        name = HandlerName.lookup(head)
        if name is None:
            return InlineText(head)
        return _checked(HandlerCall(name, args), index)

    if isinstance(item, Mapping):
        return _parse_mapping(item, index)

    raise ChainConfigError(
        "chain item {}: unsupported value of type {}".format(index, type(item).__name__)
    )


def _parse_mapping(item: Mapping, index: int) -> ChainEntry:
    keys = set(item)
    if keys == {"inline"}:
        text = item["inline"]
        if not isinstance(text, str):
            raise ChainConfigError(
                "chain item {}: inline text must be a string, got {!r}".format(index, text)
            )
        return InlineText(text)

    if "handler" in keys and keys <= {"handler", "args"}:
        name = HandlerName.lookup(item["handler"])
        if name is None:
            available = ", ".join(member.value for member in HandlerName)
            raise ChainConfigError(
                "chain item {}: unknown handler {!r}. Available handlers: {}".format(
                    index, item["handler"], available
                )
            )
        return _checked(HandlerCall(name, item.get("args")), index)

    raise ChainConfigError(
        "chain item {}: expected {{'inline': ...}} or {{'handler': ..., 'args': ...}}, "
        "got keys {}".format(index, sorted(keys))
    )


def _checked(entry: ChainEntry, index: int) -> ChainEntry:
    if isinstance(entry, InlineText):
        if not isinstance(entry.text, str):
            raise ChainConfigError(
                "chain item {}: inline text must be a string, got {!r}".format(index, entry.text)
            )
        return entry
    if not isinstance(entry.name, HandlerName):
        name = HandlerName.lookup(entry.name)
        if name is None:
            raise ChainConfigError(
                "chain item {}: unknown handler {!r}".format(index, entry.name)
            )
        entry = HandlerCall(name, entry.args)
    if entry.name is HandlerName.TARGET:
        if not isinstance(entry.args, str) or not entry.args:
            raise ChainConfigError(
                "chain item {}: 'target' needs a target mask, got {!r}".format(index, entry.args)
            )
    return entry


def uses_handler(entries: Iterable[ChainEntry], name: HandlerName) -> bool:
    """Return True when any entry calls the handler ``name``."""
    return any(isinstance(e, HandlerCall) and e.name is name for e in entries)
