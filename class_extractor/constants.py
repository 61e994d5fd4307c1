"""Constants used across the class-extractor package."""

from __future__ import annotations

from .config import ExtractorConfig

DEFAULT_CONFIG = ExtractorConfig()

# Resource limits
MAX_INPUT_BYTES = DEFAULT_CONFIG.max_input_bytes
MAX_MATCHES = DEFAULT_CONFIG.max_matches
MAX_CLASS_NAME = DEFAULT_CONFIG.max_class_name
MAX_VARIANT_GROUP_DEPTH = DEFAULT_CONFIG.max_variant_group_depth
# A grouped variant may be this many times longer than a single class name
VARIANT_GROUP_LENGTH_FACTOR = 10

# Scanner alphabet
QUOTE_CHARS = frozenset("\"'`")
WHITESPACE_CHARS = frozenset(" \t\n\r\f\v")
IDENTIFIER_CHARS = frozenset(
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_$-"
)
APPLY_DIRECTIVE = "@apply"
APPLY_TERMINATORS = frozenset(";}\n")

# Attributes read as utility prefixes when attributify is on
ATTRIBUTIFY_GROUPS = (
    "p",
    "m",
    "w",
    "h",
    "size",
    "bg",
    "text",
    "border",
    "ring",
    "shadow",
    "font",
    "leading",
    "tracking",
    "flex",
    "grid",
    "gap",
    "pos",
    "inset",
    "z",
    "opacity",
    "blur",
    "rounded",
    "transition",
    "duration",
    "ease",
    "delay",
    "scale",
    "rotate",
    "translate",
)

# CSS punctuation that never needs surrounding whitespace
CSS_TIGHT_PUNCTUATION = frozenset("{}:;,>+~")

SOURCE_EXTENSIONS = (
    ".html",
    ".htm",
    ".vue",
    ".svelte",
    ".astro",
    ".js",
    ".jsx",
    ".mjs",
    ".cjs",
    ".ts",
    ".tsx",
    ".mdx",
    ".md",
    ".php",
    ".erb",
    ".css",
)
CSS_EXTENSIONS = (".css",)
