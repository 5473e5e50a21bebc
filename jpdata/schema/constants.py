"""Closed enumerations and field lists of the export schema."""

CURRENT_VERSION = "1.0"
LEGACY_VERSION = "1.0.0"

TEST_TYPES = ("hiragana", "katakana", "kanji", "vocabulary", "mixed")
SCRIPT_TYPES = ("hiragana", "katakana", "kanji", "vocabulary")
JLPT_LEVELS = ("N5", "N4", "N3", "N2", "N1")
CHARACTER_TYPES = ("basic", "dakuten", "combo")

APPLICATIONS = ("claude", "gemini", "codex")
PLATFORMS = ("web", "mobile")
ROMAJI_SYSTEMS = ("hepburn", "kunrei", "nihon")

TEST_REQUIRED_FIELDS = [
    "id",
    "timestamp",
    "testType",
    "score",
    "totalQuestions",
    "correctAnswers",
]

ATTEMPT_REQUIRED_FIELDS = [
    "id",
    "testId",
    "timestamp",
    "prompt",
    "expected",
    "response",
    "correct",
]

LEGACY_TEST_REQUIRED_FIELDS = [
    "testType",
    "timestamp",
    "totalQuestions",
    "correctAnswers",
    "scorePercentage",
]

LEGACY_BREAKDOWN_REQUIRED_FIELDS = [
    "character",
    "expected",
    "response",
    "correct",
]
