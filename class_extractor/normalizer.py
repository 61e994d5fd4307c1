"""Comment and whitespace stripping for generated CSS."""

from __future__ import annotations

from .constants import CSS_TIGHT_PUNCTUATION, WHITESPACE_CHARS
from .models import NormalizerState

# (text, is_string_literal)
Segment = tuple[str, bool]


def _strip_comments(css: str) -> list[Segment]:
    """Drop comments and collapse whitespace runs in one forward pass.

    String literals are returned as separate segments, copied verbatim, so
    comment markers and spacing inside them survive. An unterminated comment
    swallows the rest of the input; an unterminated string is kept as is.

    Args:
        css: CSS text.

    Returns:
        list[Segment]: Alternating CSS and string-literal segments.

    Examples:
        _strip_comments('a  /* x */ { content: "/* y */" }')
        # [("a { content: ", False), ('"/* y */"', True), (" }", False)]
    """
    segments: list[Segment] = []
    chunk: list[str] = []
    state = NormalizerState.NORMAL
    quote = ""
    string_start = 0
    index = 0
    length = len(css)

    while index < length:
        character = css[index]
        match state:
            case NormalizerState.NORMAL:
                if character == "/" and index + 1 < length and css[index + 1] == "*":
                    state = NormalizerState.IN_COMMENT
                    index += 2
                    continue
                if character in WHITESPACE_CHARS:
                    if not chunk or chunk[-1] != " ":
                        chunk.append(" ")
                elif character in "\"'":
                    if chunk:
                        segments.append(("".join(chunk), False))
                        chunk = []
                    state = NormalizerState.IN_STRING
                    quote = character
                    string_start = index
                else:
                    chunk.append(character)
            case NormalizerState.IN_COMMENT:
                if character == "*" and index + 1 < length and css[index + 1] == "/":
                    state = NormalizerState.NORMAL
                    index += 2
                    continue
            case NormalizerState.IN_STRING:
                if character == "\\":
                    index += 2
                    continue
                if character == quote:
                    segments.append((css[string_start : index + 1], True))
                    state = NormalizerState.NORMAL
        index += 1

    if state is NormalizerState.IN_STRING:
        segments.append((css[string_start:], True))
    elif chunk:
        segments.append(("".join(chunk), False))

    return segments


def _is_tight(character: str, paren_depth: int) -> bool:
    # "+" inside calc() and friends is an operator and needs its spaces.
    if character == "+" and paren_depth > 0:
        return False
    return character in CSS_TIGHT_PUNCTUATION


def _tighten(segments: list[Segment]) -> str:
    """Remove spaces around structural punctuation and ``;`` before ``}``."""
    output: list[str] = []
    paren_depth = 0

    for text, is_literal in segments:
        if is_literal:
            output.append(text)
            continue

        last = len(text) - 1
        for index, character in enumerate(text):
            if character == " ":
                previous = output[-1][-1] if output else ""
                following = text[index + 1] if index < last else ""
                if _is_tight(previous, paren_depth) or _is_tight(following, paren_depth):
                    continue
                output.append(" ")
                continue

            if character == "(":
                paren_depth += 1
            elif character == ")" and paren_depth > 0:
                paren_depth -= 1
            elif character == "}" and output and output[-1] == ";":
                output.pop()
            output.append(character)

    return "".join(output).strip()


def minify_css(css: str) -> str:
    """Strip comments and redundant whitespace from CSS.

    Runs in linear time without regular expressions: a forward-only scan
    removes comments and collapses whitespace, then a cleanup pass drops spaces
    next to ``{ } : ; , > + ~`` and semicolons right before ``}``.

    Args:
        css: CSS text, typically produced by the generator.

    Returns:
        str: Minified CSS.

    Examples:
        minify_css(".a {\\n  color: red;\\n}\\n/* done */")  # ".a{color:red}"
        minify_css(".b { width: calc(1px + 2px); }")  # ".b{width:calc(1px + 2px)}"
    """
    return _tighten(_strip_comments(css))
