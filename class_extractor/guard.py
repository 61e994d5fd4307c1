"""Resource limits applied around the scanners."""

from __future__ import annotations

from collections.abc import Callable, Iterator

from .config import ConfigError
from .constants import MAX_CLASS_NAME, MAX_INPUT_BYTES, MAX_MATCHES


def bound_input(
    text: str,
    max_input_bytes: int = MAX_INPUT_BYTES,
    warn: Callable[[str], None] | None = None,
) -> tuple[str, bool]:
    """Truncate text so its UTF-8 encoding fits within a byte budget.

    The cut never splits a code point: a partial trailing sequence is dropped.
    Lone surrogates before the cut are kept.

    Args:
        text: Source text to bound.
        max_input_bytes: Maximum number of UTF-8 bytes kept.
        warn: Optional callback receiving a message when truncation happens.

    Returns:
        tuple[str, bool]: The bounded text and whether it was truncated.

    Raises:
        ConfigError: If `max_input_bytes` is not a positive integer.

    Examples:
        bound_input("héllo", 2)  # ("h", True)
    """
    _check_limit("max_input_bytes", max_input_bytes)

    # UTF-8 needs at most four bytes per code point.
    if len(text) * 4 <= max_input_bytes:
        return text, False

    encoded = text.encode("utf-8", "surrogatepass")
    if len(encoded) <= max_input_bytes:
        return text, False

    if warn is not None:
        warn(
            f"Warning: input of {len(encoded)} bytes exceeds the maximum of "
            f"{max_input_bytes} bytes; only the first {max_input_bytes} bytes are scanned"
        )
    cut = max_input_bytes
    # Back up over continuation bytes to the first byte of a split code point.
    while cut > 0 and encoded[cut] & 0xC0 == 0x80:
        cut -= 1
    return encoded[:cut].decode("utf-8", "surrogatepass"), True


class CandidateTokenSet:
    """Deduplicated, size-capped collection of candidate class names.

    Tokens that are empty or longer than `max_class_name` are rejected. Once
    `max_matches` unique tokens are held, new tokens are ignored and
    `capacity_reached` is set; nothing is ever raised for a rejected token.

    Args:
        max_matches: Maximum number of unique tokens retained.
        max_class_name: Maximum length of a single token.

    Examples:
        tokens = CandidateTokenSet(max_matches=2)
        tokens.add("p-4")  # True
    """

    def __init__(self, max_matches: int = MAX_MATCHES, max_class_name: int = MAX_CLASS_NAME):
        _check_limit("max_matches", max_matches)
        _check_limit("max_class_name", max_class_name)
        self.max_matches = max_matches
        self.max_class_name = max_class_name
        self.capacity_reached = False
        # dict keeps scan order, which makes results stable between runs
        self._tokens: dict[str, None] = {}

    def add(self, token: str) -> bool:
        """Insert a token, returning True only when it was newly stored."""
        if not token or len(token) > self.max_class_name:
            return False
        if token in self._tokens:
            return False
        if len(self._tokens) >= self.max_matches:
            self.capacity_reached = True
            return False
        self._tokens[token] = None
        return True

    def to_list(self) -> list[str]:
        return list(self._tokens)

    def __contains__(self, token: object) -> bool:
        return token in self._tokens

    def __iter__(self) -> Iterator[str]:
        return iter(self._tokens)

    def __len__(self) -> int:
        return len(self._tokens)


def _check_limit(name: str, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigError(f"`{name}` must be a positive integer")
