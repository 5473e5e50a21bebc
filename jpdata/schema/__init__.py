"""Universal Export Schema modules.

Handles:
- Timestamp normalization
- Test type mapping
- Breakdown/attempt conversion
- Document validation
- Legacy migration
- Export assembly and import
"""

from .timestamps import to_canonical, to_epoch, now, now_epoch
from .test_types import (
    ConsumerVocabulary,
    VOCABULARIES,
    to_canonical_type,
    to_internal_type,
    is_test_type,
    is_jlpt_level,
)
from .breakdown import (
    is_answer_correct,
    flatten_breakdown,
    nest_attempts,
    from_claude_breakdown,
    to_claude_breakdown,
    from_codex_breakdown,
    to_codex_breakdown,
    from_gemini_attempt,
    to_gemini_attempt,
)
from .validate import (
    ValidationResult,
    ValidationState,
    check_export,
    ensure_valid,
    validate_export,
)
from .migrate import migrate_legacy, to_legacy
from .export import (
    compute_score,
    make_test_record,
    make_attempt_record,
    build_export,
    export_filename,
    import_export,
)

__all__ = [
    # Timestamps
    "to_canonical",
    "to_epoch",
    "now",
    "now_epoch",
    # Test types
    "ConsumerVocabulary",
    "VOCABULARIES",
    "to_canonical_type",
    "to_internal_type",
    "is_test_type",
    "is_jlpt_level",
    # Breakdown conversion
    "is_answer_correct",
    "flatten_breakdown",
    "nest_attempts",
    "from_claude_breakdown",
    "to_claude_breakdown",
    "from_codex_breakdown",
    "to_codex_breakdown",
    "from_gemini_attempt",
    "to_gemini_attempt",
    # Validation
    "ValidationResult",
    "ValidationState",
    "check_export",
    "ensure_valid",
    "validate_export",
    # Migration
    "migrate_legacy",
    "to_legacy",
    # Export / import
    "compute_score",
    "make_test_record",
    "make_attempt_record",
    "build_export",
    "export_filename",
    "import_export",
]
