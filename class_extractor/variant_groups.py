"""Grouped-variant expansion (``hover:(a b)`` -> ``hover:a hover:b``)."""

from __future__ import annotations

from .constants import MAX_VARIANT_GROUP_DEPTH, WHITESPACE_CHARS


def split_candidates(text: str) -> list[str]:
    """Split text on whitespace that is not inside parentheses.

    Keeps ``hover:(a b)`` together as one candidate. When an opening
    parenthesis is never closed, the unbalanced tail is split on plain
    whitespace instead so the classes after it are not lost.

    Args:
        text: Attribute or string-literal value.

    Returns:
        list[str]: Non-empty pieces in their original order.

    Examples:
        split_candidates("p-4 hover:(a b)")  # ["p-4", "hover:(a b)"]
        split_candidates("a (b c")  # ["a", "(b", "c"]
    """
    pieces: list[str] = []
    start: int | None = None
    depth = 0

    for index, character in enumerate(text):
        if depth == 0 and character in WHITESPACE_CHARS:
            if start is not None:
                pieces.append(text[start:index])
                start = None
            continue
        if start is None:
            start = index
        if character == "(":
            depth += 1
        elif character == ")" and depth > 0:
            depth -= 1

    if start is not None:
        tail = text[start:]
        if depth == 0:
            pieces.append(tail)
        else:
            pieces.extend(tail.split())

    return pieces


def _match_group(token: str) -> tuple[str, str] | None:
    """Return ``(prefix, body)`` when `token` is a complete grouped variant."""
    if len(token) < 4 or token[-1] != ")":
        return None

    open_index = token.find("(")
    if open_index < 2 or token[open_index - 1] != ":":
        return None

    prefix = token[:open_index]
    if ")" in prefix or any(character in WHITESPACE_CHARS for character in prefix):
        return None

    # The opening parenthesis must be the one closed by the last character.
    depth = 0
    last = len(token) - 1
    for index in range(open_index, len(token)):
        character = token[index]
        if character == "(":
            depth += 1
        elif character == ")":
            depth -= 1
            if depth == 0 and index != last:
                return None
    if depth != 0:
        return None

    return prefix, token[open_index + 1 : last]


def expand_variant_group(token: str, max_depth: int = MAX_VARIANT_GROUP_DEPTH) -> list[str]:
    """Expand a grouped variant into one class per grouped utility.

    The variant prefix (everything up to and including the ``:`` before the
    parenthesis) is re-attached to each whitespace-separated piece of the
    group, preserving order. Nested groups are expanded recursively up to
    `max_depth` levels. A token that is not a well-formed group is returned
    unchanged as a single-element list.

    Args:
        token: Raw candidate class name.
        max_depth: Maximum number of nested group levels to expand.

    Returns:
        list[str]: Expanded class names, or ``[token]``.

    Examples:
        expand_variant_group("hover:(bg-1 text-2)")  # ["hover:bg-1", "hover:text-2"]
        expand_variant_group("dark:hover:(a b)")  # ["dark:hover:a", "dark:hover:b"]
        expand_variant_group("md:(p-4 hover:(a b))")  # ["md:p-4", "md:hover:a", "md:hover:b"]
        expand_variant_group("p-4")  # ["p-4"]
    """
    return _expand(token, max_depth, 0)


def _expand(token: str, max_depth: int, depth: int) -> list[str]:
    if depth >= max_depth:
        return [token]

    group = _match_group(token)
    if group is None:
        return [token]

    prefix, body = group
    expanded = [
        f"{prefix}{inner}"
        for piece in split_candidates(body)
        for inner in _expand(piece, max_depth, depth + 1)
    ]
    return expanded or [token]
