"""Integrity checks for the static kana, kanji and vocabulary datasets.

Expected layout under the dataset root:

    kana/hiragana.json, kana/katakana.json
    kanji/n5.json .. kanji/n1.json
    vocabulary/n5.json .. vocabulary/n1.json

Every file wraps its items in an object with a ``meta`` block whose
``itemCount`` must match the number of items.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

from jpdata.utils.file_io import read_json

logger = logging.getLogger(__name__)

KANA_ITEM_COUNT = 104

DATASET_MANIFEST = {
    "kana": {"hiragana": KANA_ITEM_COUNT, "katakana": KANA_ITEM_COUNT},
    "kanji": {"n5": 80, "n4": 166, "n3": 367, "n2": 367, "n1": 1232},
    "vocabulary": {"n5": 718, "n4": 668, "n3": 2139, "n2": 1748, "n1": 2699},
}


@dataclass
class DatasetReport:
    """Accumulated outcome of dataset checks."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    passed: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when no errors were recorded; warnings do not fail a run."""
        return not self.errors

    def error(self, message: str) -> None:
        self.errors.append(message)
        logger.error(message)

    def warn(self, message: str) -> None:
        self.warnings.append(message)
        logger.warning(message)

    def success(self, message: str) -> None:
        self.passed.append(message)
        logger.info(message)


def _load(path: Path, label: str, report: DatasetReport) -> Optional[dict]:
    if not path.exists():
        report.error(f"{label} not found")
        return None
    try:
        data = read_json(path)
    except (OSError, json.JSONDecodeError) as e:
        report.error(f"{label} could not be read: {e}")
        return None
    if not isinstance(data, dict):
        report.error(f"{label} must contain a JSON object")
        return None
    if not isinstance(data.get("meta"), dict):
        report.error(f"{label} missing meta object")
        return None
    return data


def _check_items(
    data: dict,
    key: str,
    expected_count: int,
    label: str,
    report: DatasetReport,
) -> Optional[list]:
    item_count = data["meta"].get("itemCount")
    if item_count != expected_count:
        report.error(f"{label} itemCount should be {expected_count}, got {item_count}")

    items = data.get(key)
    if not isinstance(items, list):
        report.error(f"{label} missing {key} array")
        return None

    if len(items) != expected_count:
        report.error(f"{label} should have {expected_count} {key}, got {len(items)}")
    return items


def _check_level(data: dict, level: str, label: str, report: DatasetReport) -> None:
    declared = data["meta"].get("jlptLevel")
    if declared is not None and declared != level.upper():
        report.warn(f"{label} meta.jlptLevel is {declared}, expected {level.upper()}")


def validate_kana(
    root: Union[str, Path],
    script: str,
    report: DatasetReport,
    expected_count: int = KANA_ITEM_COUNT,
) -> None:
    """Check kana/<script>.json: item count and a ``romaji`` array per character."""
    label = f"{script}.json"
    data = _load(Path(root) / "kana" / f"{script}.json", label, report)
    if data is None:
        return

    characters = _check_items(data, "characters", expected_count, label, report)
    if characters is None:
        return

    for i, char in enumerate(characters):
        if not isinstance(char, dict):
            report.error(f"{label} character {i} must be an object")
            continue
        if "romanji" in char:
            report.error(f'{label} character {i} uses "romanji" field (should be "romaji")')
        if not char.get("romaji"):
            report.error(f'{label} character {i} missing "romaji" field')
        if not isinstance(char.get("romaji"), list):
            report.error(f"{label} character {i} romaji should be an array")

    report.success(f"{label} validated ({len(characters)} characters)")


def validate_kanji(
    root: Union[str, Path],
    level: str,
    expected_count: int,
    report: DatasetReport,
) -> None:
    """Check kanji/<level>.json item count."""
    label = f"kanji/{level}.json"
    data = _load(Path(root) / "kanji" / f"{level}.json", label, report)
    if data is None:
        return

    _check_level(data, level, label, report)
    kanji = _check_items(data, "kanji", expected_count, label, report)
    if kanji is None:
        return

    report.success(f"{label} validated ({len(kanji)} kanji)")


def validate_vocabulary(
    root: Union[str, Path],
    level: str,
    expected_count: int,
    report: DatasetReport,
) -> None:
    """Check vocabulary/<level>.json: item count and ``romaji`` on every word."""
    label = f"vocabulary/{level}.json"
    data = _load(Path(root) / "vocabulary" / f"{level}.json", label, report)
    if data is None:
        return

    _check_level(data, level, label, report)
    words = _check_items(data, "words", expected_count, label, report)
    if words is None:
        return

    romanji_count = 0
    for i, word in enumerate(words):
        if not isinstance(word, dict):
            report.error(f"{label} word {i} must be an object")
            continue
        if "romanji" in word:
            romanji_count += 1
        if not word.get("romaji"):
            report.error(f'{label} word {i} ({word.get("word")}) missing "romaji" field')

    if romanji_count:
        report.error(
            f'{label} has {romanji_count} words using "romanji" field (should be "romaji")'
        )

    report.success(f"{label} validated ({len(words)} words)")


def validate_all(
    root: Union[str, Path],
    manifest: Optional[dict[str, dict[str, int]]] = None,
) -> DatasetReport:
    """Run every dataset check listed in the manifest.

    Args:
        root: Dataset root directory
        manifest: Expected item counts per dataset group (default: DATASET_MANIFEST)

    Returns:
        DatasetReport with all errors, warnings and passed datasets
    """
    manifest = DATASET_MANIFEST if manifest is None else manifest
    report = DatasetReport()

    for script, count in manifest.get("kana", {}).items():
        validate_kana(root, script, report, expected_count=count)
    for level, count in manifest.get("kanji", {}).items():
        validate_kanji(root, level, count, report)
    for level, count in manifest.get("vocabulary", {}).items():
        validate_vocabulary(root, level, count, report)

    logger.info(
        f"Dataset validation complete: {len(report.errors)} errors, {len(report.warnings)} warnings",
        extra={
            "dataset_root": str(root),
            "error_count": len(report.errors),
            "warning_count": len(report.warnings),
            "passed_count": len(report.passed),
        },
    )
    return report


def summarize(report: DatasetReport) -> dict[str, Any]:
    return {
        "errors": len(report.errors),
        "warnings": len(report.warnings),
        "passed": len(report.passed),
        "ok": report.ok,
    }
