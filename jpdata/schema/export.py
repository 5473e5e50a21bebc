"""Export document assembly and the import pipeline.

Export: consumer records -> canonical records -> export document.
Import: validate -> migrate (legacy only) -> current export document.
"""

import logging
import uuid
from typing import Any, Iterable, Optional

from jpdata.errors import ExportSchemaError, UnknownApplication
from jpdata.schema.breakdown import is_answer_correct
from jpdata.schema.constants import APPLICATIONS, CURRENT_VERSION, PLATFORMS
from jpdata.schema.migrate import migrate_legacy
from jpdata.schema.test_types import is_test_type, to_canonical_type
from jpdata.schema.timestamps import TimestampInput, now, now_epoch, to_canonical
from jpdata.schema.validate import ValidationState, check_export
from jpdata.utils.pipeline_logger import PipelineLogger, timed_operation

logger = logging.getLogger(__name__)


def compute_score(correct_answers: int, total_questions: int) -> int:
    """Percentage score rounded half up; 0 when there are no questions."""
    if total_questions <= 0:
        return 0
    return (correct_answers * 200 + total_questions) // (total_questions * 2)


def make_test_record(
    test_id: str,
    timestamp: TimestampInput,
    test_type: str,
    total_questions: int,
    correct_answers: int,
    consumer: Optional[str] = None,
    jlpt_level: Optional[str] = None,
    difficulty: Optional[str] = None,
) -> dict:
    """Build a canonical test record from raw consumer values.

    Args:
        test_id: Unique test id
        timestamp: Completion time in any form accepted by to_canonical
        test_type: Canonical test type, or an internal label of ``consumer``
        total_questions: Number of questions
        correct_answers: Number of correct answers
        consumer: Application whose vocabulary ``test_type`` belongs to
        jlpt_level: Optional JLPT level
        difficulty: Optional free-form difficulty or mode label

    Returns:
        Test record dict
    """
    if consumer is None and is_test_type(test_type):
        canonical_type = test_type
    else:
        canonical_type = to_canonical_type(test_type, consumer)

    record = {
        "id": test_id,
        "timestamp": to_canonical(timestamp),
        "testType": canonical_type,
        "score": compute_score(correct_answers, total_questions),
        "totalQuestions": total_questions,
        "correctAnswers": correct_answers,
    }
    if jlpt_level is not None:
        record["jlptLevel"] = jlpt_level
    if difficulty is not None:
        record["difficulty"] = difficulty
    return record


def make_attempt_record(
    attempt_id: str,
    test_id: str,
    timestamp: TimestampInput,
    prompt: str,
    expected: Iterable[str],
    response: str,
    correct: Optional[bool] = None,
    script_type: Optional[str] = None,
    jlpt_level: Optional[str] = None,
    character_type: Optional[str] = None,
) -> dict:
    """Build a canonical attempt record.

    ``correct`` is computed from ``response`` and ``expected`` when omitted.
    """
    expected = list(expected)
    if correct is None:
        correct = is_answer_correct(response, expected)

    record = {
        "id": attempt_id,
        "testId": test_id,
        "timestamp": to_canonical(timestamp),
        "prompt": prompt,
        "expected": expected,
        "response": response,
        "correct": correct,
    }
    optional = {
        "scriptType": script_type,
        "jlptLevel": jlpt_level,
        "characterType": character_type,
    }
    record.update({k: v for k, v in optional.items() if v is not None})
    return record


def build_export(
    tests: list[dict],
    attempts: list[dict],
    exported_by: str,
    platform: str,
    settings: Optional[dict] = None,
    exported_at: Optional[TimestampInput] = None,
    **meta_extra: Any,
) -> dict:
    """Wrap canonical records into a current export document.

    Args:
        tests: Test records
        attempts: Attempt records
        exported_by: Exporting application
        platform: "web" or "mobile"
        settings: App settings (default: empty)
        exported_at: Export time (default: now)
        **meta_extra: Additional meta keys

    Returns:
        Export document dict

    Raises:
        UnknownApplication: If exported_by is not a known application
        ValueError: If platform is not a known platform
    """
    if exported_by not in APPLICATIONS:
        raise UnknownApplication(exported_by)
    if platform not in PLATFORMS:
        raise ValueError(f"Unknown platform: {platform!r}")

    return {
        "version": CURRENT_VERSION,
        "exportedAt": now() if exported_at is None else to_canonical(exported_at),
        "tests": list(tests),
        "attempts": list(attempts),
        "settings": dict(settings or {}),
        "meta": {"exportedBy": exported_by, "platform": platform, **meta_extra},
    }


def export_filename(prefix: str, epoch_ms: Optional[int] = None) -> str:
    """File name following the ``<prefix>-tests-<epoch-ms>.json`` convention."""
    if epoch_ms is None:
        epoch_ms = now_epoch()
    return f"{prefix}-tests-{epoch_ms}.json"


def _document_source(data: Any) -> str:
    if not isinstance(data, dict):
        return "unknown"
    meta = data.get("meta")
    if isinstance(meta, dict) and isinstance(meta.get("exportedBy"), str):
        return meta["exportedBy"]
    if isinstance(data.get("source"), str):
        return data["source"]
    return "unknown"


def import_export(
    data: Any,
    strict_references: bool = True,
    batch_id: Optional[str] = None,
) -> dict:
    """Full import pipeline: validate -> migrate if legacy.

    Args:
        data: Decoded JSON document of either schema version
        strict_references: If False, dangling attempt references are tolerated
        batch_id: Identifier for log correlation (auto-generated if not provided)

    Returns:
        Current export document

    Raises:
        ExportSchemaError: The first validation failure
    """
    if batch_id is None:
        batch_id = uuid.uuid4().hex[:12]

    plog = PipelineLogger(_document_source(data), batch_id)

    plog.start("validate")
    try:
        state, warnings = check_export(data, strict_references)
    except ExportSchemaError as e:
        plog.error("validate", e, extra={"reason": e.reason})
        raise
    plog.success(
        "validate",
        record_count=len(data["tests"]),
        extra={"state": state.value, "warnings": warnings},
    )

    if state is ValidationState.VALID_V1:
        return data

    plog.start("migrate")
    with timed_operation("migrate_legacy", logger) as timer:
        document = migrate_legacy(data)
    plog.success(
        "migrate",
        record_count=len(document["tests"]),
        extra={"attempt_count": len(document["attempts"]), "migrate_ms": timer.duration_ms},
    )
    return document
