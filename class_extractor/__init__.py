"""
class-extractor: utility class-name extraction for CSS generators.

Scans markup, component templates and scripts in linear time and returns the
class names they reference, so a utility-CSS generator only builds what is
used. Also ships a linear-time CSS minifier for the generated output.

CLI Usage:
    class-extractor scan index.html src/App.tsx
    class-extractor minify dist/app.css

Library Usage:
    from class_extractor import extract_classes, minify_css

    result = extract_classes('<div class="p-4 hover:(bg-1 text-2)">')
    result.classes  # ["p-4", "hover:bg-1", "hover:text-2"]
"""

from .accumulator import ClassAccumulator, extract_files
from .config import ConfigError, ExtractorConfig
from .exceptions import ExtractFileError, ExtractionError
from .guard import CandidateTokenSet, bound_input
from .models import ExtractionResult, ScanState
from .normalizer import minify_css
from .tokenizer import extract_classes, extract_file
from .variant_groups import expand_variant_group, split_candidates

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "extract_classes",
    "extract_file",
    "extract_files",
    "expand_variant_group",
    "split_candidates",
    "minify_css",
    # Limits
    "bound_input",
    "CandidateTokenSet",
    # Data models
    "ClassAccumulator",
    "ExtractionResult",
    "ExtractorConfig",
    "ScanState",
    # Exceptions
    "ConfigError",
    "ExtractFileError",
    "ExtractionError",
    # Version
    "__version__",
]
