"""Caller-owned session state and batch extraction over many files."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from concurrent.futures import ProcessPoolExecutor
from functools import partial
from pathlib import Path

from .config import ExtractorConfig, normalize_config, validate_config
from .models import ExtractionResult
from .tokenizer import extract_file


class ClassAccumulator:
    """Collect classes across files for one build or watch session.

    The accumulator belongs to the caller; nothing in the package keeps
    classes between calls. `merge` reports which classes are new so an
    integration can decide whether CSS must be regenerated.

    Examples:
        session = ClassAccumulator()
        session.merge(["p-4", "m-2"])  # {"p-4", "m-2"}
        session.merge(["p-4"])  # set()
    """

    def __init__(self, classes: Iterable[str] = ()):
        self._seen: set[str] = set(classes)

    def merge(self, classes: Iterable[str]) -> set[str]:
        """Add classes and return the ones not seen before."""
        new_classes = {name for name in classes if name not in self._seen}
        self._seen.update(new_classes)
        return new_classes

    @property
    def classes(self) -> list[str]:
        """Sorted snapshot of every class seen so far."""
        return sorted(self._seen)

    def clear(self) -> None:
        self._seen.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._seen

    def __iter__(self) -> Iterator[str]:
        return iter(self.classes)

    def __len__(self) -> int:
        return len(self._seen)


def extract_files(
    paths: Sequence[Path],
    config: ExtractorConfig | None = None,
    max_workers: int | None = None,
) -> dict[Path, ExtractionResult]:
    """Extract classes from several files, spread over worker processes.

    Each file is scanned independently, so results do not depend on worker
    count or completion order. ``max_workers=1`` (or a single path) runs in the
    current process.

    Args:
        paths: Files to scan.
        config: Limits and triggers shared by every file.
        max_workers: Worker process count; None lets the executor decide.

    Returns:
        dict[Path, ExtractionResult]: Result per input path.

    Raises:
        ConfigError: If the configuration fails validation.
        ExtractFileError: If any file cannot be read or decoded.

    Examples:
        results = extract_files([Path("a.html"), Path("b.tsx")], max_workers=2)
    """
    config = normalize_config(config or ExtractorConfig())
    validate_config(config)
    scan = partial(extract_file, config=config)

    if max_workers == 1 or len(paths) <= 1:
        return {path: scan(path) for path in paths}

    with ProcessPoolExecutor(max_workers=max_workers) as executor:
        return dict(zip(paths, executor.map(scan, paths)))
