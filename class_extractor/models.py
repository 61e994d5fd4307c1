"""Data models for class-extractor."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class ScanState(Enum):
    """Tokenizer states used while scanning source text.

    Exactly one state is active at any position of the scan.

    Attributes:
        NORMAL: Outside any tracked construct, looking for triggers.
        IN_DOUBLE_QUOTE_ATTR: Inside a ``class="..."`` value.
        IN_SINGLE_QUOTE_ATTR: Inside a ``class='...'`` value.
        IN_TEMPLATE_ATTR: Inside a backtick template holding classes.
        IN_TEMPLATE_EXPRESSION: Inside a ``${...}`` interpolation of a template.
        IN_FUNCTION_CALL_ARGS: Inside the arguments of ``clsx(...)`` and friends,
            or inside a bound ``:class="..."`` expression.
    """

    NORMAL = auto()
    IN_DOUBLE_QUOTE_ATTR = auto()
    IN_SINGLE_QUOTE_ATTR = auto()
    IN_TEMPLATE_ATTR = auto()
    IN_TEMPLATE_EXPRESSION = auto()
    IN_FUNCTION_CALL_ARGS = auto()


class NormalizerState(Enum):
    """CSS normalizer states.

    Attributes:
        NORMAL: Copying CSS and collapsing whitespace.
        IN_COMMENT: Skipping until the closing ``*/``.
        IN_STRING: Copying a quoted string verbatim.
    """

    NORMAL = auto()
    IN_COMMENT = auto()
    IN_STRING = auto()


@dataclass
class ScanContext:
    """Encapsulate tokenizer state while walking source text.

    Attributes:
        state: Current scan state.
        cursor: Offset of the next character to read; never moves backwards.
        buffer: Characters of the attribute or literal value being collected.
        template_depth: Open ``{`` count inside a template interpolation.
        call_depth: Open ``(`` count inside a helper call.
        expression_quote: Quote that closes a bound attribute such as
            ``:class="..."``, whose value is scanned as an expression; None
            inside a helper call.
        attribute_prefix: Utility prefix for the attributify value being
            collected, empty for class attributes.
    """

    state: ScanState = ScanState.NORMAL
    cursor: int = 0
    buffer: list[str] = field(default_factory=list)
    template_depth: int = 0
    call_depth: int = 0
    expression_quote: str | None = None
    attribute_prefix: str = ""


@dataclass
class ExtractionResult:
    """Structured result of one extraction call.

    Attributes:
        classes: Unique candidate class names. Order carries no meaning.
        truncated: Whether the input was cut to the size limit before scanning.
        capacity_reached: Whether further candidates were dropped because the
            match limit was reached.
    """

    classes: list[str]
    truncated: bool = False
    capacity_reached: bool = False
