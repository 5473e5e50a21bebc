"""Conversion between nested answer breakdowns and flat attempt records.

The legacy breakdown item is ``{position, character, expected, response,
correct}``. Flat attempt records carry ``id``, ``testId`` and
``timestamp`` instead of ``position``.
"""

import logging
from typing import Any, Callable, Iterable, Optional

from jpdata.schema.constants import SCRIPT_TYPES
from jpdata.schema.timestamps import now, to_canonical

logger = logging.getLogger(__name__)


def is_answer_correct(response: str, expected: Iterable[str]) -> bool:
    """Check a response against acceptable answers, ignoring case and padding."""
    answer = (response or "").strip().lower()
    return answer in {e.strip().lower() for e in expected}


def default_attempt_id(test_id: str, index: int) -> str:
    return f"{test_id}-attempt-{index}"


def flatten_breakdown(
    breakdown: list[dict],
    test_id: str,
    timestamp: Optional[str] = None,
    script_type: Optional[str] = None,
    id_factory: Optional[Callable[[str, int], str]] = None,
) -> list[dict]:
    """Flatten a legacy breakdown into attempt records.

    Order is preserved and ``position`` is dropped.

    Args:
        breakdown: Legacy breakdown items
        test_id: Id of the owning test
        timestamp: Attempt timestamp (defaults to now)
        script_type: Script type tag, kept only if it is a known script type
        id_factory: Callable(test_id, index) returning the attempt id

    Returns:
        List of attempt records

    Example:
        >>> flatten_breakdown(
        ...     [{"position": 0, "character": "か", "expected": ["ka"],
        ...       "response": "ka", "correct": True}],
        ...     "t1", "2026-01-15T10:00:00.000Z")
        [{"id": "t1-attempt-0", "testId": "t1", "timestamp": "2026-01-15T10:00:00.000Z",
          "prompt": "か", "expected": ["ka"], "response": "ka", "correct": True}]
    """
    make_id = id_factory or default_attempt_id
    timestamp = timestamp or now()
    attempts = []

    for index, item in enumerate(breakdown):
        attempt = {
            "id": make_id(test_id, index),
            "testId": test_id,
            "timestamp": timestamp,
            "prompt": item["character"],
            "expected": list(item["expected"]),
            "response": item["response"],
            "correct": item["correct"],
        }
        if script_type in SCRIPT_TYPES:
            attempt["scriptType"] = script_type
        attempts.append(attempt)

    logger.debug(f"Flattened {len(attempts)} breakdown items", extra={"test_id": test_id})
    return attempts


def nest_attempts(attempts: list[dict], test_id: str) -> list[dict]:
    """Collect the attempts of one test back into a legacy breakdown.

    Positions are re-derived from the order of the matching attempts.
    """
    owned = [a for a in attempts if a.get("testId") == test_id]
    return [
        {
            "position": position,
            "character": attempt["prompt"],
            "expected": list(attempt["expected"]),
            "response": attempt["response"],
            "correct": attempt["correct"],
        }
        for position, attempt in enumerate(owned)
    ]


# ============================================
# Consumer native shapes
# ============================================

def from_claude_breakdown(items: list[dict]) -> list[dict]:
    """Convert Claude's characterBreakdown items to legacy breakdown items."""
    return [
        {
            "position": index,
            "character": item["character"],
            "expected": list(item["correctSyllables"]),
            "response": item["userSyllable"],
            "correct": is_answer_correct(item["userSyllable"], item["correctSyllables"]),
        }
        for index, item in enumerate(items)
    ]


def to_claude_breakdown(breakdown: list[dict]) -> list[dict]:
    """Convert legacy breakdown items to Claude's characterBreakdown items."""
    return [
        {
            "character": item["character"],
            "userSyllable": item["response"],
            "correctSyllables": list(item["expected"]),
        }
        for item in breakdown
    ]


def from_codex_breakdown(
    subprompts: list[str],
    subresponses: list[str],
    expected: list[str],
) -> list[dict]:
    """Convert Codex's parallel sub-prompt lists to legacy breakdown items.

    Missing responses are treated as empty answers.

    Raises:
        ValueError: If a sub-prompt has no expected answer
    """
    if len(expected) < len(subprompts):
        raise ValueError(
            f"Expected {len(subprompts)} answers for sub-prompts, got {len(expected)}"
        )

    breakdown = []
    for index, character in enumerate(subprompts):
        response = subresponses[index] if index < len(subresponses) else ""
        answers = [expected[index]]
        breakdown.append({
            "position": index,
            "character": character,
            "expected": answers,
            "response": response or "",
            "correct": is_answer_correct(response, answers),
        })
    return breakdown


def to_codex_breakdown(breakdown: list[dict]) -> dict:
    """Convert legacy breakdown items to Codex's parallel lists.

    Only the first acceptable answer of each item survives.
    """
    return {
        "subprompts": [item["character"] for item in breakdown],
        "subresponses": [item["response"] for item in breakdown],
        "expected": [item["expected"][0] if item["expected"] else "" for item in breakdown],
    }


def from_gemini_attempt(attempt: dict) -> dict:
    """Convert a Gemini character attempt to a canonical attempt record."""
    record: dict[str, Any] = {
        "id": attempt["id"],
        "testId": attempt["testId"],
        "timestamp": to_canonical(attempt["timestamp"]),
        "prompt": attempt["character"],
        "expected": list(attempt["correctAnswers"]),
        "response": attempt["userAnswer"],
        "correct": attempt["isCorrect"],
    }
    script_type = (attempt.get("scriptType") or "").lower()
    if script_type in SCRIPT_TYPES:
        record["scriptType"] = script_type
    for key in ("jlptLevel", "characterType"):
        if attempt.get(key):
            record[key] = attempt[key]
    return record


def to_gemini_attempt(record: dict) -> dict:
    """Convert a canonical attempt record to Gemini's character attempt."""
    attempt = {
        "id": record["id"],
        "testId": record["testId"],
        "timestamp": record["timestamp"],
        "character": record["prompt"],
        "scriptType": record.get("scriptType"),
        "userAnswer": record["response"],
        "correctAnswers": list(record["expected"]),
        "isCorrect": record["correct"],
    }
    for key in ("jlptLevel", "characterType"):
        if key in record:
            attempt[key] = record[key]
    return attempt
