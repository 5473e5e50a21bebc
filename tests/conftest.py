"""Pytest configuration and fixtures."""

import json

import pytest


@pytest.fixture
def empty_export():
    """Minimal current-format export."""
    return {
        "version": "1.0",
        "exportedAt": "2026-01-15T10:00:00.000Z",
        "tests": [],
        "attempts": [],
        "settings": {},
        "meta": {"exportedBy": "claude", "platform": "web"},
    }


@pytest.fixture
def current_export():
    """Current-format export with one test and two attempts."""
    return {
        "version": "1.0",
        "exportedAt": "2026-01-15T10:00:00.000Z",
        "tests": [
            {
                "id": "t1",
                "timestamp": "2026-01-15T09:55:00.000Z",
                "testType": "hiragana",
                "score": 50,
                "totalQuestions": 2,
                "correctAnswers": 1,
                "jlptLevel": "N5",
                "difficulty": "3-character",
            },
        ],
        "attempts": [
            {
                "id": "a1",
                "testId": "t1",
                "timestamp": "2026-01-15T09:54:00.000Z",
                "prompt": "か",
                "expected": ["ka"],
                "response": "ka",
                "correct": True,
                "scriptType": "hiragana",
                "characterType": "basic",
            },
            {
                "id": "a2",
                "testId": "t1",
                "timestamp": "2026-01-15T09:55:00.000Z",
                "prompt": "し",
                "expected": ["shi", "si"],
                "response": "chi",
                "correct": False,
                "scriptType": "hiragana",
            },
        ],
        "settings": {
            "romajiSystem": "hepburn",
            "audioSettings": {"enabled": True, "rate": 1.0, "volume": 0.8},
        },
        "meta": {"exportedBy": "gemini", "platform": "mobile", "appVersion": "2.3.0"},
    }


@pytest.fixture
def legacy_breakdown():
    """Three-character legacy breakdown."""
    return [
        {"position": 0, "character": "き", "expected": ["ki"], "response": "ki", "correct": True},
        {"position": 1, "character": "し", "expected": ["shi", "si"], "response": "si", "correct": True},
        {"position": 2, "character": "つ", "expected": ["tsu", "tu"], "response": "su", "correct": False},
    ]


@pytest.fixture
def legacy_export(legacy_breakdown):
    """Legacy nested export with one test carrying a breakdown."""
    return {
        "version": "1.0.0",
        "exportedAt": "2026-01-11T08:00:00.000Z",
        "source": "claude",
        "platform": "web",
        "tests": [
            {
                "testType": "hiragana",
                "timestamp": "2026-01-10T20:00:00.000Z",
                "totalQuestions": 3,
                "correctAnswers": 2,
                "scorePercentage": 67,
                "jlptLevel": "N5",
                "breakdown": legacy_breakdown,
            },
        ],
        "preferences": {},
    }


@pytest.fixture
def write_dataset(tmp_path):
    """Write a dataset file under tmp_path and return the root."""

    def _write(group: str, name: str, data) -> None:
        path = tmp_path / group / f"{name}.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")

    return _write


def make_kana(count: int = 104) -> dict:
    return {
        "meta": {"version": "1.0.0", "type": "kana", "itemCount": count},
        "characters": [{"kana": "あ", "romaji": ["a"]} for _ in range(count)],
    }


def make_kanji(count: int, level: str) -> dict:
    return {
        "meta": {"version": "1.0.0", "type": "kanji", "jlptLevel": level, "itemCount": count},
        "kanji": [{"kanji": "日", "meaning": "day"} for _ in range(count)],
    }


def make_vocabulary(count: int, level: str) -> dict:
    return {
        "meta": {"version": "1.0.0", "type": "vocabulary", "jlptLevel": level, "itemCount": count},
        "words": [{"word": "水", "romaji": "mizu"} for _ in range(count)],
    }


@pytest.fixture
def small_manifest():
    """Manifest with small item counts for fast dataset tests."""
    return {
        "kana": {"hiragana": 3},
        "kanji": {"n5": 2},
        "vocabulary": {"n5": 2},
    }


@pytest.fixture
def valid_datasets(write_dataset, tmp_path):
    """Dataset root matching small_manifest."""
    write_dataset("kana", "hiragana", make_kana(3))
    write_dataset("kanji", "n5", make_kanji(2, "N5"))
    write_dataset("vocabulary", "n5", make_vocabulary(2, "N5"))
    return tmp_path
