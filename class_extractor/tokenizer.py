"""Single-pass class-name tokenizer for markup, templates and scripts."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from .config import ExtractorConfig, normalize_config, validate_config
from .constants import (
    APPLY_DIRECTIVE,
    APPLY_TERMINATORS,
    ATTRIBUTIFY_GROUPS,
    IDENTIFIER_CHARS,
    QUOTE_CHARS,
    VARIANT_GROUP_LENGTH_FACTOR,
    WHITESPACE_CHARS,
)
from .exceptions import ExtractFileError
from .filesystem import check_regular_file, read_source
from .guard import CandidateTokenSet, bound_input
from .models import ExtractionResult, ScanContext, ScanState
from .variant_groups import expand_variant_group, split_candidates

_ATTRIBUTE = "attribute"
_ATTRIBUTIFY = "attributify"
_CALL = "call"
_TEMPLATE_TAG = "template_tag"
_APPLY = "apply"

_ATTRIBUTE_OPENERS = {
    '"': ScanState.IN_DOUBLE_QUOTE_ATTR,
    "'": ScanState.IN_SINGLE_QUOTE_ATTR,
    "`": ScanState.IN_TEMPLATE_ATTR,
}
# Either quote character closes a quoted attribute value.
_ATTRIBUTE_CLOSERS = frozenset("\"'")

Triggers = dict[str, list[tuple[str, str]]]


def _build_triggers(config: ExtractorConfig) -> Triggers:
    """Index trigger words by their first character, longest first."""
    words = [(name, _ATTRIBUTE) for name in config.attribute_names]
    words += [(name, _CALL) for name in config.call_names]
    words += [(name, _TEMPLATE_TAG) for name in config.template_tags]
    if config.extract_apply:
        words.append((APPLY_DIRECTIVE, _APPLY))
    if config.attributify:
        words += [(name, _ATTRIBUTIFY) for name in ATTRIBUTIFY_GROUPS]

    triggers: Triggers = {}
    for name, kind in sorted(words, key=lambda word: len(word[0]), reverse=True):
        triggers.setdefault(name[0], []).append((name, kind))
    return triggers


def _candidates_for(piece: str, config: ExtractorConfig) -> list[str]:
    """Turn one split piece into class names, expanding grouped variants."""
    if config.expand_variant_groups and len(piece) <= (
        config.max_class_name * VARIANT_GROUP_LENGTH_FACTOR
    ):
        expanded = expand_variant_group(piece, config.max_variant_group_depth)
    else:
        expanded = [piece]

    # Parenthesized text that was not a group must not leak whitespace into names.
    candidates: list[str] = []
    for candidate in expanded:
        if any(character in WHITESPACE_CHARS for character in candidate):
            candidates.extend(candidate.split())
        else:
            candidates.append(candidate)
    return candidates


def _with_prefix(candidate: str, prefix: str) -> str:
    """Put an attributify prefix after the variants: ``hover:red-1`` -> ``hover:bg-red-1``."""
    variants, separator, utility = candidate.rpartition(":")
    return f"{variants}{separator}{prefix}-{utility}"


def _emit_value(
    value: str,
    tokens: CandidateTokenSet,
    config: ExtractorConfig,
    exclude: frozenset[str] = frozenset(),
    prefix: str = "",
) -> None:
    for piece in split_candidates(value):
        if piece in exclude:
            continue
        for candidate in _candidates_for(piece, config):
            tokens.add(_with_prefix(candidate, prefix) if prefix else candidate)


def _flush(ctx: ScanContext, tokens: CandidateTokenSet, config: ExtractorConfig) -> None:
    """Emit the pending buffer and reset it."""
    if not ctx.buffer:
        return
    value = "".join(ctx.buffer)
    ctx.buffer.clear()
    _emit_value(value, tokens, config, prefix=ctx.attribute_prefix)


def _blank_interpolations(value: str) -> str:
    """Replace ``${...}`` segments of a template literal with a space.

    An interpolation that never closes drops the rest of the value.
    """
    parts: list[str] = []
    start = 0
    index = 0
    length = len(value)

    while index < length:
        if value[index] == "$" and index + 1 < length and value[index + 1] == "{":
            parts.append(value[start:index])
            parts.append(" ")
            depth = 1
            index += 2
            while index < length and depth:
                if value[index] == "{":
                    depth += 1
                elif value[index] == "}":
                    depth -= 1
                index += 1
            start = index
            continue
        index += 1

    if start < length:
        parts.append(value[start:])
    return "".join(parts)


def _try_enter_attribute(ctx: ScanContext, text: str, end: int, prefix: str = "") -> bool:
    """Enter an attribute value state after ``class=``.

    Args:
        ctx: Scan context to update.
        text: Source text.
        end: Offset just past the attribute name.
        prefix: Attributify prefix for the value's utilities. Prefixed values
            must be plain quoted strings.

    Returns:
        bool: True when the attribute opens a quoted or template value.

    Examples:
        ctx = ScanContext()
        _try_enter_attribute(ctx, 'class="a"', 5)  # True, IN_DOUBLE_QUOTE_ATTR
        _try_enter_attribute(ctx, 'bg="red-1"', 2, prefix="bg")  # True
    """
    length = len(text)
    if end >= length or text[end] != "=":
        return False

    position = end + 1
    # JSX: className={"..."} or className={`...`}
    if (
        not prefix
        and position + 1 < length
        and text[position] == "{"
        and text[position + 1] in QUOTE_CHARS
    ):
        position += 1
    if position >= length:
        return False

    state = _ATTRIBUTE_OPENERS.get(text[position])
    if state is None or (prefix and state is ScanState.IN_TEMPLATE_ATTR):
        return False

    ctx.state = state
    ctx.cursor = position + 1
    ctx.attribute_prefix = prefix
    ctx.buffer.clear()
    return True


def _try_enter_bound_attribute(ctx: ScanContext, text: str, end: int) -> bool:
    """Enter expression scanning for a bound attribute such as ``:class="..."``.

    The value is a script expression, so it is scanned like helper-call
    arguments: only its string literals hold classes. The outer quote ends it.
    """
    position = end + 1
    if position >= len(text) or text[end] != "=" or text[position] not in _ATTRIBUTE_CLOSERS:
        return False

    ctx.state = ScanState.IN_FUNCTION_CALL_ARGS
    ctx.expression_quote = text[position]
    ctx.call_depth = 0
    ctx.cursor = position + 1
    ctx.buffer.clear()
    return True


def _try_enter_call(ctx: ScanContext, text: str, end: int) -> bool:
    """Enter call-argument state after a helper name such as ``clsx``.

    Whitespace between the name and ``(`` is allowed.
    """
    length = len(text)
    position = end
    while position < length and text[position] in WHITESPACE_CHARS:
        position += 1
    if position >= length or text[position] != "(":
        return False

    ctx.state = ScanState.IN_FUNCTION_CALL_ARGS
    ctx.call_depth = 1
    ctx.cursor = position + 1
    ctx.buffer.clear()
    return True


def _try_enter_template_tag(ctx: ScanContext, text: str, end: int) -> bool:
    """Enter template state for a tagged template such as ``tw`...```."""
    if end >= len(text) or text[end] != "`":
        return False

    ctx.state = ScanState.IN_TEMPLATE_ATTR
    ctx.cursor = end + 1
    ctx.buffer.clear()
    return True


def _try_scan_apply(
    ctx: ScanContext,
    text: str,
    end: int,
    tokens: CandidateTokenSet,
    config: ExtractorConfig,
) -> bool:
    """Emit the classes of an ``@apply`` directive.

    The directive runs to the next ``;``, ``}`` or newline; one that reaches end
    of input is discarded.

    Returns:
        bool: True when the directive was consumed (the cursor moved).
    """
    length = len(text)
    if end >= length or text[end] not in WHITESPACE_CHARS:
        return False

    position = end
    while position < length and text[position] not in APPLY_TERMINATORS:
        position += 1

    if position < length:
        _emit_value(text[end:position], tokens, config, exclude=frozenset({"!important"}))
    ctx.cursor = position
    return True


def _scan_normal(
    ctx: ScanContext,
    text: str,
    triggers: Triggers,
    tokens: CandidateTokenSet,
    config: ExtractorConfig,
) -> None:
    """Skip ahead to the next trigger and enter the state it opens.

    Returns once a trigger is consumed or at end of input.
    """
    length = len(text)
    index = ctx.cursor

    while index < length:
        candidates = triggers.get(text[index])
        if candidates is None or (index > 0 and text[index - 1] in IDENTIFIER_CHARS):
            index += 1
            continue

        for name, kind in candidates:
            if not text.startswith(name, index):
                continue
            end = index + len(name)
            if kind == _ATTRIBUTE:
                # Vue binding: :class="..." and v-bind:class="..."
                if index > 0 and text[index - 1] == ":":
                    consumed = _try_enter_bound_attribute(ctx, text, end)
                else:
                    consumed = _try_enter_attribute(ctx, text, end)
            elif kind == _ATTRIBUTIFY:
                consumed = (
                    index == 0 or text[index - 1] in WHITESPACE_CHARS
                ) and _try_enter_attribute(ctx, text, end, prefix=name)
            elif kind == _CALL:
                consumed = _try_enter_call(ctx, text, end)
            elif kind == _TEMPLATE_TAG:
                consumed = _try_enter_template_tag(ctx, text, end)
            else:
                consumed = _try_scan_apply(ctx, text, end, tokens, config)
            if consumed:
                return

        index += 1

    ctx.cursor = length


def _scan_quoted_attr(
    ctx: ScanContext, text: str, tokens: CandidateTokenSet, config: ExtractorConfig
) -> None:
    """Collect a quoted attribute value and emit it at the closing quote."""
    length = len(text)
    start = index = ctx.cursor

    while index < length:
        if text[index] in _ATTRIBUTE_CLOSERS:
            ctx.buffer.append(text[start:index])
            _flush(ctx, tokens, config)
            ctx.attribute_prefix = ""
            ctx.state = ScanState.NORMAL
            ctx.cursor = index + 1
            return
        index += 1

    ctx.buffer.append(text[start:])
    ctx.cursor = length


def _scan_template_attr(
    ctx: ScanContext, text: str, tokens: CandidateTokenSet, config: ExtractorConfig
) -> None:
    """Collect static template text up to ``${`` or the closing backtick."""
    length = len(text)
    start = index = ctx.cursor

    while index < length:
        character = text[index]
        if character == "`":
            ctx.buffer.append(text[start:index])
            _flush(ctx, tokens, config)
            ctx.state = ScanState.NORMAL
            ctx.cursor = index + 1
            return
        if character == "$" and index + 1 < length and text[index + 1] == "{":
            ctx.buffer.append(text[start:index])
            ctx.template_depth = 1
            ctx.state = ScanState.IN_TEMPLATE_EXPRESSION
            ctx.cursor = index + 2
            return
        index += 1

    ctx.buffer.append(text[start:])
    ctx.cursor = length


def _scan_template_expression(ctx: ScanContext, text: str) -> None:
    """Skip a ``${...}`` interpolation, tracking brace depth."""
    length = len(text)
    index = ctx.cursor

    while index < length:
        character = text[index]
        if character == "{":
            ctx.template_depth += 1
        elif character == "}":
            ctx.template_depth -= 1
            if ctx.template_depth == 0:
                # Keeps the static text on both sides from being joined.
                ctx.buffer.append(" ")
                ctx.state = ScanState.IN_TEMPLATE_ATTR
                ctx.cursor = index + 1
                return
        index += 1

    ctx.cursor = length


def _scan_call_args(
    ctx: ScanContext, text: str, tokens: CandidateTokenSet, config: ExtractorConfig
) -> None:
    """Emit the string literals of a helper call or a bound attribute value."""
    length = len(text)
    index = ctx.cursor

    while index < length:
        character = text[index]
        if character == ctx.expression_quote:
            _flush(ctx, tokens, config)
            ctx.expression_quote = None
            ctx.state = ScanState.NORMAL
            ctx.cursor = index + 1
            return
        if character == "(":
            ctx.call_depth += 1
        elif character == ")":
            ctx.call_depth -= 1
            if ctx.call_depth == 0 and ctx.expression_quote is None:
                _flush(ctx, tokens, config)
                ctx.state = ScanState.NORMAL
                ctx.cursor = index + 1
                return
        elif character == ",":
            _flush(ctx, tokens, config)
        elif character in QUOTE_CHARS:
            close = text.find(character, index + 1)
            if close < 0:
                break
            value = text[index + 1 : close]
            if character == "`":
                value = _blank_interpolations(value)
            _emit_value(value, tokens, config)
            index = close + 1
            continue
        index += 1

    ctx.cursor = length


def extract_classes(
    content: str,
    config: ExtractorConfig | None = None,
    warn: Callable[[str], None] | None = None,
) -> ExtractionResult:
    """Extract candidate utility class names from source text.

    Scans the text once from left to right. Classes are taken from ``class``
    and ``className`` attribute values (quoted, JSX-braced or template
    literals), string literals in Vue bindings such as
    ``:class="{ 'a': on }"``, string arguments of helpers such as
    ``clsx(...)``, ``cn(...)`` and ``el.classList.add(...)``, tagged templates
    such as ``tw`...``` and ``@apply`` directives. With `attributify` on,
    ``bg="red-500 hover:red-600"`` yields ``bg-red-500`` and
    ``hover:bg-red-600``. Template interpolations are never read as classes.
    Grouped variants are expanded before the classes are stored.

    Malformed input never raises: unterminated quotes, templates and calls
    simply contribute nothing from their open value.

    Args:
        content: Source text (markup, template or script).
        config: Limits and triggers. Defaults to a new `ExtractorConfig`.
        warn: Optional callback receiving a message when the input is truncated.

    Returns:
        ExtractionResult: Unique class names plus truncation and capacity flags.

    Raises:
        ConfigError: If the configuration fails validation.

    Examples:
        extract_classes('<div class="p-4 hover:(bg-1 text-2)">').classes
        # ["p-4", "hover:bg-1", "hover:text-2"]
    """
    config = normalize_config(config or ExtractorConfig())
    validate_config(config)

    text, truncated = bound_input(content, config.max_input_bytes, warn)
    tokens = CandidateTokenSet(config.max_matches, config.max_class_name)
    triggers = _build_triggers(config)
    ctx = ScanContext()
    length = len(text)

    while ctx.cursor < length:
        match ctx.state:
            case ScanState.NORMAL:
                _scan_normal(ctx, text, triggers, tokens, config)
            case ScanState.IN_DOUBLE_QUOTE_ATTR | ScanState.IN_SINGLE_QUOTE_ATTR:
                _scan_quoted_attr(ctx, text, tokens, config)
            case ScanState.IN_TEMPLATE_ATTR:
                _scan_template_attr(ctx, text, tokens, config)
            case ScanState.IN_TEMPLATE_EXPRESSION:
                _scan_template_expression(ctx, text)
            case ScanState.IN_FUNCTION_CALL_ARGS:
                _scan_call_args(ctx, text, tokens, config)

    # Whatever is still buffered belongs to a construct that never closed.
    ctx.buffer.clear()

    return ExtractionResult(
        classes=tokens.to_list(),
        truncated=truncated,
        capacity_reached=tokens.capacity_reached,
    )


def extract_file(
    filepath: Path,
    config: ExtractorConfig | None = None,
    warn: Callable[[str], None] | None = None,
) -> ExtractionResult:
    """Extract candidate class names from a UTF-8 source file.

    At most `max_input_bytes` bytes are read; a longer file is truncated and
    reported through `warn` and `ExtractionResult.truncated`.

    Args:
        filepath: Path to the source file.
        config: Limits and triggers. Defaults to a new `ExtractorConfig`.
        warn: Optional callback for truncation warnings.

    Returns:
        ExtractionResult: Classes found in the file.

    Raises:
        ConfigError: If the configuration fails validation.
        ExtractFileError: If the file cannot be read or is not valid UTF-8.

    Examples:
        extract_file(Path("src/App.tsx")).classes
    """
    config = normalize_config(config or ExtractorConfig())
    validate_config(config)

    try:
        # Special files such as FIFOs would block the read.
        check_regular_file(filepath)
        content, truncated = read_source(filepath, config.max_input_bytes)
    except UnicodeDecodeError as error:
        raise ExtractFileError(filepath, f"Invalid UTF-8 sequence: {error}") from error
    except IOError as error:
        raise ExtractFileError(filepath, str(error)) from error

    if truncated and warn is not None:
        warn(
            f"Warning: {filepath} exceeds the maximum of {config.max_input_bytes} bytes; "
            "only the beginning of the file is scanned"
        )

    result = extract_classes(content, config, warn)
    result.truncated = result.truncated or truncated
    return result
