"""Conversion between the legacy nested format (1.0.0) and the flat format (1.0)."""

import logging
from typing import Optional

from jpdata.schema.breakdown import flatten_breakdown, nest_attempts
from jpdata.schema.constants import CURRENT_VERSION, LEGACY_VERSION
from jpdata.schema.timestamps import now_epoch

logger = logging.getLogger(__name__)


def migrate_legacy(doc: dict, now_ms: Optional[int] = None) -> dict:
    """Convert a legacy nested export into the current flat format.

    Test ids are synthesized as ``test-<now_ms>-<index>``; they are unique
    within one call but not across calls made in the same millisecond.
    Legacy documents carry no settings, so ``settings`` is always empty.

    The input must already have passed legacy validation.

    Args:
        doc: Legacy export document
        now_ms: Epoch milliseconds used in synthesized ids (default: now)

    Returns:
        Current export document
    """
    if now_ms is None:
        now_ms = now_epoch()

    tests = []
    attempts = []

    for index, legacy_test in enumerate(doc["tests"]):
        test_id = f"test-{now_ms}-{index}"

        test = {
            "id": test_id,
            "timestamp": legacy_test["timestamp"],
            "testType": legacy_test["testType"],
            "score": legacy_test["scorePercentage"],
            "totalQuestions": legacy_test["totalQuestions"],
            "correctAnswers": legacy_test["correctAnswers"],
        }
        if legacy_test.get("jlptLevel") is not None:
            test["jlptLevel"] = legacy_test["jlptLevel"]
        tests.append(test)

        if legacy_test.get("breakdown"):
            attempts.extend(
                flatten_breakdown(
                    legacy_test["breakdown"],
                    test_id,
                    timestamp=legacy_test["timestamp"],
                    script_type=legacy_test["testType"],
                )
            )

    logger.info(
        f"Migrated legacy export: {len(tests)} tests, {len(attempts)} attempts",
        extra={
            "source": doc.get("source"),
            "test_count": len(tests),
            "attempt_count": len(attempts),
        },
    )

    return {
        "version": CURRENT_VERSION,
        "exportedAt": doc["exportedAt"],
        "tests": tests,
        "attempts": attempts,
        "settings": {},
        "meta": {
            "exportedBy": doc["source"],
            "platform": doc["platform"],
        },
    }


def to_legacy(doc: dict) -> dict:
    """Convert a current flat export into the legacy nested format.

    Attempts are nested under the test they reference; tests without
    attempts get no ``breakdown``. Test ids, difficulty and attempt-level
    tags have no legacy field and are dropped.

    Args:
        doc: Current export document (validated)

    Returns:
        Legacy export document
    """
    tests = []

    for test in doc["tests"]:
        legacy_test = {
            "testType": test["testType"],
            "timestamp": test["timestamp"],
            "totalQuestions": test["totalQuestions"],
            "correctAnswers": test["correctAnswers"],
            "scorePercentage": test["score"],
        }
        if test.get("jlptLevel") is not None:
            legacy_test["jlptLevel"] = test["jlptLevel"]

        breakdown = nest_attempts(doc["attempts"], test["id"])
        if breakdown:
            legacy_test["breakdown"] = breakdown
        tests.append(legacy_test)

    logger.info(
        f"Converted export to legacy format: {len(tests)} tests",
        extra={"exported_by": doc["meta"]["exportedBy"], "test_count": len(tests)},
    )

    return {
        "version": LEGACY_VERSION,
        "exportedAt": doc["exportedAt"],
        "source": doc["meta"]["exportedBy"],
        "platform": doc["meta"]["platform"],
        "tests": tests,
        "preferences": dict(doc.get("settings") or {}),
    }
