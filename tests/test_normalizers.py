"""Tests for response normalizers."""

import pytest

from aiflow.workflow.normalizers import normalize_category, normalize_emotion


class TestNormalizeEmotion:
    """Tests for normalize_emotion."""

    def test_matches_inside_sentence(self) -> None:
        assert normalize_emotion("I feel very STRESSED today") == "Stressed"

    def test_empty_is_neutral(self) -> None:
        assert normalize_emotion("") == "Neutral"

    def test_unmatched_is_neutral(self) -> None:
        assert normalize_emotion("excited") == "Neutral"

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("happy", "Happy"), ("  Sad.\n", "Sad"), ("ANGRY!", "Angry"), ("neutral", "Neutral")],
    )
    def test_single_word_replies(self, raw: str, expected: str) -> None:
        assert normalize_emotion(raw) == expected

    def test_priority_order(self) -> None:
        """Stressed wins over happy when both appear."""
        assert normalize_emotion("happy but stressed") == "Stressed"


class TestNormalizeCategory:
    """Tests for normalize_category."""

    def test_matches_inside_sentence(self) -> None:
        result = normalize_category("This is about my Finance & Money situation")
        assert result == "Finance & Money"

    def test_unmatched_is_default(self) -> None:
        assert normalize_category("Sports") == "Personal & General"

    def test_collapses_whitespace(self) -> None:
        assert normalize_category("Work   &\n Career") == "Work & Career"

    def test_declaration_order(self) -> None:
        text = "Health & Wellness, or maybe Work & Career"
        assert normalize_category(text) == "Work & Career"

    def test_numbered_reply(self) -> None:
        assert normalize_category("2. Family & Relationships") == "Family & Relationships"
