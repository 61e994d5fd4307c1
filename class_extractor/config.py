"""Extractor settings and their lookup in TOML files."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
import tomllib


@dataclass(frozen=True)
class ExtractorConfig:
    """Configuration for extracting utility class names from source text.

    Attributes:
        max_input_bytes: Maximum UTF-8 size of the text that will be scanned;
            longer input is truncated before scanning.
        max_matches: Maximum number of unique classes kept per extraction.
        max_class_name: Maximum length of a single class name.
        max_variant_group_depth: Maximum nesting of grouped variants that will
            be expanded.
        attribute_names: Attribute names whose value holds classes.
        call_names: Helper functions whose string arguments hold classes. A
            dotted name such as ``classList.add`` matches a member call.
        template_tags: Tagged-template identifiers whose body holds classes.
        expand_variant_groups: Whether ``hover:(a b)`` is expanded.
        extract_apply: Whether ``@apply`` directives are scanned.
        attributify: Whether attributify attributes such as ``bg="red-500"``
            are read as prefixed utilities (``bg-red-500``).

    Examples:
        ExtractorConfig(max_matches=1_000, call_names=("clsx",))
    """

    # Limits
    max_input_bytes: int = 10_000_000
    max_matches: int = 50_000
    max_class_name: int = 200
    max_variant_group_depth: int = 10

    # Triggers
    attribute_names: tuple[str, ...] = ("class", "className")
    call_names: tuple[str, ...] = (
        "clsx",
        "cn",
        "cva",
        "classnames",
        "twMerge",
        "classList.add",
        "classList.remove",
        "classList.toggle",
    )
    template_tags: tuple[str, ...] = ("tw",)

    # Features
    expand_variant_groups: bool = True
    extract_apply: bool = True
    attributify: bool = False


class ConfigError(ValueError):
    """Raised when a setting has the wrong type or an out-of-range value.

    Examples:
        raise ConfigError("`max_matches` must be a positive integer")
    """


_NAME_FIELDS = ("attribute_names", "call_names", "template_tags")
_LIMIT_FIELDS = ("max_input_bytes", "max_matches", "max_class_name", "max_variant_group_depth")
_FLAG_FIELDS = ("expand_variant_groups", "extract_apply", "attributify")

# Checked in this order in every directory, nearest directory first.
_CONFIG_SOURCES = (
    ("pyproject.toml", (("tool", "class-extractor"),)),
    (".class-extractor.toml", (("class-extractor",), ("tool", "class-extractor"))),
)

_MISSING = object()


def load_config(search_path: Path) -> ExtractorConfig:
    """Load settings from the nearest directory that defines them.

    Each directory from `search_path` up to the filesystem root is checked for
    a ``[tool.class-extractor]`` table in `pyproject.toml`, then for a
    ``[class-extractor]`` (or ``[tool.class-extractor]``) table in
    `.class-extractor.toml`. The first table found wins, even an empty one.
    Unreadable or malformed TOML files are skipped.

    Args:
        search_path: Directory where the lookup starts.

    Returns:
        ExtractorConfig: Settings from the table found, or the defaults.

    Raises:
        ConfigError: If the table found is not a table or names an unknown
            setting.

    Examples:
        load_config(Path("src"))
    """
    start = search_path.resolve()

    for directory in (start, *start.parents):
        for filename, table_paths in _CONFIG_SOURCES:
            config = _read_config_table(directory / filename, table_paths)
            if config is not None:
                return normalize_config(config)

    return ExtractorConfig()


def _read_config_table(
    config_file: Path, table_paths: tuple[tuple[str, ...], ...]
) -> ExtractorConfig | None:
    try:
        with open(config_file, "rb") as stream:
            document = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    for table_path in table_paths:
        table = document
        for key in table_path:
            table = table.get(key, _MISSING) if isinstance(table, dict) else _MISSING
        if table is not _MISSING:
            return _config_from_table(table, config_file, ".".join(table_path))

    return None


def _config_from_table(table: object, config_file: Path, table_name: str) -> ExtractorConfig:
    if not isinstance(table, dict):
        raise ConfigError(f"`[{table_name}]` in {config_file} must be a table")

    # TOML keys use dashes more often than not
    settings = {key.replace("-", "_"): value for key, value in table.items()}
    unknown = sorted(set(settings) - {field.name for field in fields(ExtractorConfig)})
    if unknown:
        raise ConfigError(
            f"Unknown setting in `[{table_name}]` of {config_file}: {', '.join(unknown)}"
        )
    return ExtractorConfig(**settings)


def normalize_config(config: ExtractorConfig) -> ExtractorConfig:
    """Coerce list-valued name settings into tuples.

    A single string is treated as a one-element list so ``call_names = "cn"``
    does not turn into ``("c", "n")``.
    """
    changes = {}
    for name in _NAME_FIELDS:
        value = getattr(config, name)
        if isinstance(value, str):
            changes[name] = (value,)
        elif isinstance(value, list):
            changes[name] = tuple(value)
    if not changes:
        return config
    return replace(config, **changes)


def validate_config(config: ExtractorConfig) -> None:
    """Check every setting of an `ExtractorConfig`.

    Raises:
        ConfigError: If a limit is not a positive integer, a trigger name is
            empty or not an identifier, no attribute name is left, or a feature
            flag is not a boolean.

    Examples:
        validate_config(ExtractorConfig(max_matches=10))
    """
    config = normalize_config(config)

    for name in _LIMIT_FIELDS:
        value = getattr(config, name)
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{name}` must be an integer")
        if value <= 0:
            raise ConfigError(f"`{name}` must be a positive integer")

    for name in _NAME_FIELDS:
        values = getattr(config, name)
        if not isinstance(values, tuple):
            raise ConfigError(f"`{name}` must be a list of names")
        for value in values:
            if not isinstance(value, str) or not value:
                raise ConfigError(f"`{name}` must not contain empty names")
            if not _is_trigger_name(value, dotted=name == "call_names"):
                raise ConfigError(f"`{name}` contains an invalid name: {value!r}")

    if not config.attribute_names:
        raise ConfigError("`attribute_names` must not be empty")

    for name in _FLAG_FIELDS:
        if not isinstance(getattr(config, name), bool):
            raise ConfigError(f"`{name}` must be a boolean")


def apply_overrides(config: ExtractorConfig, **overrides: object) -> ExtractorConfig:
    """Return `config` with the given fields replaced, skipping None values.

    Raises:
        TypeError: If an override does not name an `ExtractorConfig` field.

    Examples:
        apply_overrides(config, max_matches=500, max_input_bytes=None)
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> ExtractorConfig:
    """Load settings for `search_path`, apply overrides and validate the result.

    Args:
        search_path: Directory where the configuration lookup starts.
        overrides: Field values that take precedence over the files; None
            values are ignored.

    Returns:
        ExtractorConfig: Validated configuration ready for extraction.

    Raises:
        ConfigError: If a configuration file or the final settings are invalid.

    Examples:
        config = build_config(Path.cwd(), max_matches=1_000)
    """
    config = normalize_config(apply_overrides(load_config(search_path), **overrides))
    validate_config(config)
    return config


def _is_trigger_name(value: str, dotted: bool = False) -> bool:
    # Scanner triggers must not contain characters that open a construct.
    if dotted and "." in value:
        return all(part and _is_trigger_name(part) for part in value.split("."))
    return all(character.isalnum() or character in "_$-" for character in value)
