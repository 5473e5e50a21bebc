"""Structural validation of export documents.

A document is discriminated on its ``version`` field and checked against
either the current flat schema ("1.0") or the legacy nested schema
("1.0.0"). Checks stop at the first failure.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from numbers import Real
from typing import Any, Optional

from jpdata.errors import (
    ExportSchemaError,
    ReferentialViolation,
    StructuralViolation,
    UnsupportedVersion,
)
from jpdata.schema.constants import (
    APPLICATIONS,
    ATTEMPT_REQUIRED_FIELDS,
    CHARACTER_TYPES,
    CURRENT_VERSION,
    JLPT_LEVELS,
    LEGACY_BREAKDOWN_REQUIRED_FIELDS,
    LEGACY_TEST_REQUIRED_FIELDS,
    LEGACY_VERSION,
    PLATFORMS,
    ROMAJI_SYSTEMS,
    SCRIPT_TYPES,
    TEST_REQUIRED_FIELDS,
    TEST_TYPES,
)

logger = logging.getLogger(__name__)


class ValidationState(Enum):
    """Terminal states of a validation call."""

    VALID_V1 = "valid_v1"
    VALID_LEGACY = "valid_legacy"
    INVALID = "invalid"


@dataclass
class ValidationResult:
    """Result of document validation."""

    is_valid: bool
    state: ValidationState
    version: Optional[str] = None
    reason: Optional[str] = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


# ============================================
# Field checks
# ============================================

def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _is_count(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _require_object(value: Any, path: str) -> dict:
    if not isinstance(value, dict):
        raise StructuralViolation(path, "must be an object")
    return value


def _require_array(value: Any, path: str) -> list:
    if not isinstance(value, list):
        raise StructuralViolation(path, "must be an array")
    return value


def _require_fields(record: dict, required_fields: list[str], path: str) -> None:
    for field_name in required_fields:
        if field_name not in record:
            raise StructuralViolation(f"{path}.{field_name}", "missing required field")


def _require_string(value: Any, path: str) -> None:
    if not isinstance(value, str):
        raise StructuralViolation(path, "must be a string")


def _require_choice(value: Any, choices: tuple, path: str) -> None:
    if not isinstance(value, str) or value not in choices:
        raise StructuralViolation(path, f"must be one of {', '.join(choices)}")


def _require_optional_choice(record: dict, key: str, choices: tuple, path: str) -> None:
    if key in record:
        _require_choice(record[key], choices, f"{path}.{key}")


def _require_percentage(value: Any, path: str) -> None:
    if not _is_number(value) or not 0 <= value <= 100:
        raise StructuralViolation(path, "must be a number between 0 and 100")


def _require_counts(record: dict, path: str) -> None:
    total = record["totalQuestions"]
    correct = record["correctAnswers"]
    if not _is_count(total):
        raise StructuralViolation(f"{path}.totalQuestions", "must be a non-negative integer")
    if not _is_count(correct):
        raise StructuralViolation(f"{path}.correctAnswers", "must be a non-negative integer")
    if correct > total:
        raise StructuralViolation(f"{path}.correctAnswers", "must not exceed totalQuestions")


def _require_answers(value: Any, path: str) -> None:
    if not isinstance(value, list) or not value:
        raise StructuralViolation(path, "must be a non-empty array")
    if not all(isinstance(answer, str) for answer in value):
        raise StructuralViolation(path, "must contain only strings")


def _require_unique_ids(records: list[dict], path: str) -> None:
    seen = set()
    for i, record in enumerate(records):
        record_id = record["id"]
        if record_id in seen:
            raise StructuralViolation(f"{path}[{i}].id", f"duplicate id {record_id!r}")
        seen.add(record_id)


# ============================================
# Current schema (1.0)
# ============================================

def _check_settings(settings: dict) -> None:
    _require_optional_choice(settings, "romajiSystem", ROMAJI_SYSTEMS, "settings")

    if "audioSettings" not in settings:
        return
    audio = _require_object(settings["audioSettings"], "settings.audioSettings")
    if not isinstance(audio.get("enabled"), bool):
        raise StructuralViolation("settings.audioSettings.enabled", "must be a boolean")
    for key in ("rate", "volume"):
        if key in audio and not _is_number(audio[key]):
            raise StructuralViolation(f"settings.audioSettings.{key}", "must be a number")


def _check_meta(meta: dict) -> None:
    _require_fields(meta, ["exportedBy", "platform"], "meta")
    _require_choice(meta["exportedBy"], APPLICATIONS, "meta.exportedBy")
    _require_choice(meta["platform"], PLATFORMS, "meta.platform")


def _check_test(test: Any, path: str) -> None:
    test = _require_object(test, path)
    _require_fields(test, TEST_REQUIRED_FIELDS, path)
    _require_string(test["id"], f"{path}.id")
    _require_string(test["timestamp"], f"{path}.timestamp")
    _require_choice(test["testType"], TEST_TYPES, f"{path}.testType")
    _require_percentage(test["score"], f"{path}.score")
    _require_counts(test, path)
    _require_optional_choice(test, "jlptLevel", JLPT_LEVELS, path)
    if "difficulty" in test:
        _require_string(test["difficulty"], f"{path}.difficulty")


def _check_attempt(attempt: Any, path: str) -> None:
    attempt = _require_object(attempt, path)
    _require_fields(attempt, ATTEMPT_REQUIRED_FIELDS, path)
    for key in ("id", "testId", "timestamp", "prompt", "response"):
        _require_string(attempt[key], f"{path}.{key}")
    _require_answers(attempt["expected"], f"{path}.expected")
    if not isinstance(attempt["correct"], bool):
        raise StructuralViolation(f"{path}.correct", "must be a boolean")
    _require_optional_choice(attempt, "scriptType", SCRIPT_TYPES, path)
    _require_optional_choice(attempt, "jlptLevel", JLPT_LEVELS, path)
    _require_optional_choice(attempt, "characterType", CHARACTER_TYPES, path)


def find_dangling_references(tests: list[dict], attempts: list[dict]) -> list[ReferentialViolation]:
    """Return one violation per attempt whose testId names no test."""
    test_ids = {test["id"] for test in tests}
    return [
        ReferentialViolation(f"attempts[{i}].testId", attempt["testId"])
        for i, attempt in enumerate(attempts)
        if attempt["testId"] not in test_ids
    ]


def _check_current(data: dict, strict_references: bool) -> list[str]:
    _require_string(data.get("exportedAt"), "exportedAt")
    tests = _require_array(data.get("tests"), "tests")
    attempts = _require_array(data.get("attempts"), "attempts")
    _check_settings(_require_object(data.get("settings"), "settings"))
    _check_meta(_require_object(data.get("meta"), "meta"))

    for i, test in enumerate(tests):
        _check_test(test, f"tests[{i}]")
    for i, attempt in enumerate(attempts):
        _check_attempt(attempt, f"attempts[{i}]")
    _require_unique_ids(tests, "tests")
    _require_unique_ids(attempts, "attempts")

    dangling = find_dangling_references(tests, attempts)
    if dangling and strict_references:
        raise dangling[0]
    return [str(violation) for violation in dangling]


# ============================================
# Legacy schema (1.0.0)
# ============================================

def _check_breakdown_item(item: Any, path: str) -> None:
    item = _require_object(item, path)
    _require_fields(item, LEGACY_BREAKDOWN_REQUIRED_FIELDS, path)
    _require_string(item["character"], f"{path}.character")
    _require_answers(item["expected"], f"{path}.expected")
    _require_string(item["response"], f"{path}.response")
    if not isinstance(item["correct"], bool):
        raise StructuralViolation(f"{path}.correct", "must be a boolean")


def _check_legacy_test(test: Any, path: str) -> None:
    test = _require_object(test, path)
    _require_fields(test, LEGACY_TEST_REQUIRED_FIELDS, path)
    _require_choice(test["testType"], TEST_TYPES, f"{path}.testType")
    _require_string(test["timestamp"], f"{path}.timestamp")
    _require_counts(test, path)
    _require_percentage(test["scorePercentage"], f"{path}.scorePercentage")
    # Legacy exporters write null for tests without a level
    if test.get("jlptLevel") is not None:
        _require_choice(test["jlptLevel"], JLPT_LEVELS, f"{path}.jlptLevel")

    if "breakdown" in test:
        breakdown = _require_array(test["breakdown"], f"{path}.breakdown")
        for j, item in enumerate(breakdown):
            _check_breakdown_item(item, f"{path}.breakdown[{j}]")


def _check_legacy(data: dict) -> list[str]:
    _require_choice(data.get("source"), APPLICATIONS, "source")
    _require_choice(data.get("platform"), PLATFORMS, "platform")
    _require_string(data.get("exportedAt"), "exportedAt")
    tests = _require_array(data.get("tests"), "tests")
    for i, test in enumerate(tests):
        _check_legacy_test(test, f"tests[{i}]")
    return []


# ============================================
# Entry points
# ============================================

def check_export(
    data: Any,
    strict_references: bool = True,
) -> tuple[ValidationState, list[str]]:
    """Run all checks, returning the accept state and any warnings.

    Raises:
        UnsupportedVersion: If the version is missing or unknown
        StructuralViolation: If a field is missing or mistyped
        ReferentialViolation: If strict and an attempt references an unknown test
    """
    version = data.get("version") if isinstance(data, dict) else None

    if version == CURRENT_VERSION:
        return ValidationState.VALID_V1, _check_current(data, strict_references)
    if version == LEGACY_VERSION:
        return ValidationState.VALID_LEGACY, _check_legacy(data)
    raise UnsupportedVersion(version)


def ensure_valid(data: Any, strict_references: bool = True) -> ValidationState:
    """Validate a decoded document, raising the first failure.

    Args:
        data: Decoded JSON value
        strict_references: If False, dangling attempt references are tolerated

    Returns:
        ValidationState.VALID_V1 or ValidationState.VALID_LEGACY
    """
    state, _ = check_export(data, strict_references)
    return state


def validate_export(data: Any, strict_references: bool = True) -> ValidationResult:
    """Validate a decoded document without raising.

    Args:
        data: Decoded JSON value
        strict_references: If False, dangling attempt references become warnings

    Returns:
        ValidationResult describing the accept state or the first failure
    """
    version = data.get("version") if isinstance(data, dict) else None
    if not isinstance(version, str):
        version = None

    try:
        state, warnings = check_export(data, strict_references)
    except ExportSchemaError as e:
        logger.warning(
            f"Export validation failed: {e}",
            extra={"version": version, "reason": e.reason},
        )
        return ValidationResult(
            is_valid=False,
            state=ValidationState.INVALID,
            version=version,
            reason=e.reason,
            errors=[str(e)],
        )

    for warning in warnings:
        logger.warning(f"Export validation warning: {warning}", extra={"version": version})

    logger.info(
        f"Export validated as {state.value}",
        extra={"version": version, "warning_count": len(warnings)},
    )
    return ValidationResult(
        is_valid=True,
        state=state,
        version=version,
        warnings=warnings,
    )
