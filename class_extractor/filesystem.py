"""Filesystem helpers: source path checks, limits from the environment, bounded reads."""

from __future__ import annotations

import codecs
import os
import stat
from pathlib import Path
from typing import BinaryIO

from .constants import MAX_INPUT_BYTES, MAX_MATCHES, SOURCE_EXTENSIONS

MAX_INPUT_BYTES_ENV_VAR = "CLASS_EXTRACTOR_MAX_INPUT_BYTES"
MAX_MATCHES_ENV_VAR = "CLASS_EXTRACTOR_MAX_MATCHES"


def _limit_from_env(env_var: str, default: int) -> int:
    raw_value = os.environ.get(env_var)
    if raw_value is None:
        return default

    error_message = f"{env_var} must be a positive integer, got {raw_value!r}"
    try:
        value = int(raw_value)
    except ValueError as error:
        raise ValueError(error_message) from error
    if value <= 0:
        raise ValueError(error_message)
    return value


def get_max_input_bytes(default: int = MAX_INPUT_BYTES) -> int:
    """Resolve the per-file byte limit, honouring ``CLASS_EXTRACTOR_MAX_INPUT_BYTES``.

    Args:
        default: Limit used when the environment variable is unset.

    Returns:
        int: Maximum number of bytes scanned per file.

    Raises:
        ValueError: If the environment value is not a positive integer.

    Examples:
        os.environ["CLASS_EXTRACTOR_MAX_INPUT_BYTES"] = "204800"
        get_max_input_bytes()  # 204800
    """
    return _limit_from_env(MAX_INPUT_BYTES_ENV_VAR, default)


def get_max_matches(default: int = MAX_MATCHES) -> int:
    """Resolve the per-file class limit, honouring ``CLASS_EXTRACTOR_MAX_MATCHES``."""
    return _limit_from_env(MAX_MATCHES_ENV_VAR, default)


def has_symlink(path: Path) -> bool:
    """Tell whether `path` or any of its parents is a symlink.

    Components that cannot be inspected are skipped.
    """
    for component in (path, *path.parents):
        try:
            linked = component.is_symlink()
        except OSError:
            continue
        if linked:
            return True
    return False


def resolve_source_path(
    raw_path: str, base_dir: Path, extensions: tuple[str, ...] = SOURCE_EXTENSIONS
) -> Path:
    """Resolve a user-supplied path to a source file inside `base_dir`.

    Args:
        raw_path: Absolute or relative path as typed by the user.
        base_dir: Resolved working directory; files outside it are refused.
        extensions: Accepted suffixes, lowercase with a leading dot.

    Returns:
        Path: Absolute, resolved path to a regular file.

    Raises:
        ValueError: If the path crosses a symlink, is missing, is not a regular
            file, lies outside `base_dir`, or has an unsupported suffix.

    Examples:
        resolve_source_path("src/App.tsx", Path.cwd().resolve())
        resolve_source_path("dist/app.css", Path.cwd().resolve(), (".css",))
    """
    path = Path(raw_path).expanduser()
    if has_symlink(path):
        raise ValueError(f"{path}: symlinks are not followed")

    try:
        resolved = path.resolve(strict=True)
    except FileNotFoundError as error:
        raise ValueError(f"{path}: no such file") from error
    except OSError as error:
        raise ValueError(f"{path}: cannot resolve ({error})") from error

    if not resolved.is_file():
        raise ValueError(f"{resolved}: not a regular file")
    if not resolved.is_relative_to(base_dir):
        raise ValueError(f"{resolved}: outside the working directory {base_dir}")

    suffix = resolved.suffix.lower()
    if suffix not in extensions:
        error_message = f"{resolved}: unsupported file type {suffix or '(none)'}; "
        error_message += f"expected one of {', '.join(extensions)}"
        raise ValueError(error_message)

    return resolved


def check_regular_file(filepath: Path, max_size: int | None = None) -> os.stat_result:
    """Stat a file without following symlinks and check it can be read whole.

    Messages do not repeat the path; callers add it.

    Args:
        filepath: File to inspect.
        max_size: Optional size limit in bytes.

    Returns:
        os.stat_result: Metadata of the file itself.

    Raises:
        IOError: If the file cannot be stat'ed, is a symlink or special file,
            or is larger than `max_size`.
    """
    try:
        stat_result = os.stat(filepath, follow_symlinks=False)
    except OSError as error:
        raise IOError(f"cannot stat file ({error.strerror or error})") from error

    if stat.S_ISLNK(stat_result.st_mode):
        raise IOError("symlinks are not followed")
    if not stat.S_ISREG(stat_result.st_mode):
        raise IOError("not a regular file")
    if max_size is not None and stat_result.st_size > max_size:
        raise IOError(f"larger than the {max_size}-byte limit")

    return stat_result


def open_source(filepath: Path) -> BinaryIO:
    """Open a file for binary reading, turning OS errors into a short IOError."""
    try:
        return open(filepath, "rb")
    except OSError as error:
        raise IOError(f"cannot open file ({error.strerror or error})") from error


def read_source(filepath: Path, max_bytes: int = MAX_INPUT_BYTES) -> tuple[str, bool]:
    """Read at most `max_bytes` bytes of a UTF-8 file.

    Never loads more than ``max_bytes + 1`` bytes. A multi-byte character cut
    by the limit is dropped rather than reported as invalid.

    Args:
        filepath: Path to the file.
        max_bytes: Maximum number of bytes decoded.

    Returns:
        tuple[str, bool]: Decoded text and whether the file was truncated.

    Raises:
        IOError: If the file cannot be opened or read.
        UnicodeDecodeError: If the bytes read are not valid UTF-8.

    Examples:
        text, truncated = read_source(Path("index.html"), 1_000_000)
    """
    with open_source(filepath) as handle:
        data = handle.read(max_bytes + 1)

    if len(data) <= max_bytes:
        return data.decode("utf-8"), False

    decoder = codecs.getincrementaldecoder("utf-8")()
    # final=False holds back an incomplete trailing sequence instead of failing.
    return decoder.decode(data[:max_bytes], final=False), True


def read_text(filepath: Path, max_bytes: int = MAX_INPUT_BYTES) -> str:
    """Read a whole UTF-8 file that must be a regular file within `max_bytes`.

    Raises:
        IOError: If the file is special, too large, or unreadable.
        UnicodeDecodeError: If the file is not valid UTF-8.
    """
    check_regular_file(filepath, max_bytes)
    with open_source(filepath) as handle:
        return handle.read().decode("utf-8")
