"""Tests for legacy <-> current format conversion."""

from jpdata.schema.migrate import migrate_legacy, to_legacy
from jpdata.schema.validate import ValidationState, ensure_valid

NOW_MS = 1736956876332


class TestMigrateLegacy:
    """Tests for nested -> flat migration."""

    def test_migrates_single_test(self, legacy_export):
        """Test a three-character breakdown becomes one test and three attempts."""
        doc = migrate_legacy(legacy_export, now_ms=NOW_MS)

        assert doc["version"] == "1.0"
        assert doc["exportedAt"] == legacy_export["exportedAt"]
        assert len(doc["tests"]) == 1

        test = doc["tests"][0]
        assert test["id"] == f"test-{NOW_MS}-0"
        assert test["score"] == 67
        assert test["testType"] == "hiragana"
        assert test["totalQuestions"] == 3
        assert test["correctAnswers"] == 2
        assert test["jlptLevel"] == "N5"
        assert "scorePercentage" not in test
        assert "breakdown" not in test

    def test_attempts_reference_test(self, legacy_export):
        """Test every attempt points at the migrated test with derived ids."""
        doc = migrate_legacy(legacy_export, now_ms=NOW_MS)
        test_id = doc["tests"][0]["id"]

        assert len(doc["attempts"]) == 3
        assert all(a["testId"] == test_id for a in doc["attempts"])
        assert [a["id"] for a in doc["attempts"]] == [
            f"{test_id}-attempt-0",
            f"{test_id}-attempt-1",
            f"{test_id}-attempt-2",
        ]

    def test_attempts_inherit_test_timestamp_and_script(self, legacy_export):
        """Test attempts take the test timestamp and its script type."""
        doc = migrate_legacy(legacy_export, now_ms=NOW_MS)

        assert all(a["timestamp"] == "2026-01-10T20:00:00.000Z" for a in doc["attempts"])
        assert all(a["scriptType"] == "hiragana" for a in doc["attempts"])
        assert [a["prompt"] for a in doc["attempts"]] == ["き", "し", "つ"]
        assert [a["correct"] for a in doc["attempts"]] == [True, True, False]

    def test_meta_and_settings(self, legacy_export):
        """Test source and platform move into meta; settings start empty."""
        doc = migrate_legacy(legacy_export, now_ms=NOW_MS)

        assert doc["meta"] == {"exportedBy": "claude", "platform": "web"}
        assert doc["settings"] == {}

    def test_output_validates(self, legacy_export):
        """Test migrated output passes current-format validation."""
        doc = migrate_legacy(legacy_export, now_ms=NOW_MS)
        assert ensure_valid(doc) is ValidationState.VALID_V1

    def test_mixed_test_has_no_script_type(self, legacy_export):
        """Test attempts of a mixed test carry no scriptType and still validate."""
        legacy_export["tests"][0]["testType"] = "mixed"
        doc = migrate_legacy(legacy_export, now_ms=NOW_MS)

        assert all("scriptType" not in a for a in doc["attempts"])
        assert ensure_valid(doc) is ValidationState.VALID_V1

    def test_test_without_breakdown(self, legacy_export):
        """Test a test without breakdown yields no attempts."""
        del legacy_export["tests"][0]["breakdown"]
        doc = migrate_legacy(legacy_export, now_ms=NOW_MS)

        assert len(doc["tests"]) == 1
        assert doc["attempts"] == []

    def test_null_jlpt_level_omitted(self, legacy_export):
        """Test a null jlptLevel is dropped and the document imports cleanly."""
        legacy_export["tests"][0]["jlptLevel"] = None
        assert ensure_valid(legacy_export) is ValidationState.VALID_LEGACY

        doc = migrate_legacy(legacy_export, now_ms=NOW_MS)

        assert "jlptLevel" not in doc["tests"][0]
        assert ensure_valid(doc) is ValidationState.VALID_V1

    def test_multiple_tests_get_indexed_ids(self, legacy_export):
        """Test each legacy test gets its own index in the synthesized id."""
        second = dict(legacy_export["tests"][0], testType="katakana")
        legacy_export["tests"].append(second)
        doc = migrate_legacy(legacy_export, now_ms=NOW_MS)

        assert [t["id"] for t in doc["tests"]] == [f"test-{NOW_MS}-0", f"test-{NOW_MS}-1"]
        assert len(doc["attempts"]) == 6
        assert doc["attempts"][3]["id"] == f"test-{NOW_MS}-1-attempt-0"
        assert ensure_valid(doc) is ValidationState.VALID_V1

    def test_default_clock(self, legacy_export):
        """Test ids use the current time when no clock value is given."""
        doc = migrate_legacy(legacy_export)
        assert doc["tests"][0]["id"].startswith("test-")
        assert doc["tests"][0]["id"].endswith("-0")

    def test_input_not_mutated(self, legacy_export):
        """Test the legacy document is left unchanged."""
        migrate_legacy(legacy_export, now_ms=NOW_MS)
        assert legacy_export["tests"][0]["scorePercentage"] == 67
        assert "id" not in legacy_export["tests"][0]


class TestToLegacy:
    """Tests for flat -> nested conversion."""

    def test_nests_attempts(self, current_export):
        """Test attempts are nested under their test with legacy keys."""
        legacy = to_legacy(current_export)

        assert legacy["version"] == "1.0.0"
        assert legacy["source"] == "gemini"
        assert legacy["platform"] == "mobile"
        assert legacy["preferences"]["romajiSystem"] == "hepburn"

        test = legacy["tests"][0]
        assert test["scorePercentage"] == 50
        assert [item["character"] for item in test["breakdown"]] == ["か", "し"]

    def test_output_validates_as_legacy(self, current_export):
        """Test converted output passes legacy validation."""
        assert ensure_valid(to_legacy(current_export)) is ValidationState.VALID_LEGACY

    def test_test_without_attempts_has_no_breakdown(self, current_export):
        """Test tests with no attempts get no breakdown key."""
        current_export["attempts"] = []
        legacy = to_legacy(current_export)

        assert "breakdown" not in legacy["tests"][0]

    def test_round_trip_preserves_breakdown(self, legacy_export, legacy_breakdown):
        """Test migrating then nesting restores the legacy test content."""
        restored = to_legacy(migrate_legacy(legacy_export, now_ms=NOW_MS))

        assert restored["source"] == legacy_export["source"]
        assert restored["tests"][0]["breakdown"] == legacy_breakdown
        assert restored["tests"][0]["scorePercentage"] == 67
