"""
Tests for importing tutorial questions from text files.
"""

from pathlib import Path

import pytest

import tutorial_quiz
from tutorial_quiz.core.errors import ConfigurationError
from tutorial_quiz.core.tutorial_importer import (
    TutorialImportError,
    load_tutorial_from_file,
    parse_tutorial_text,
)

SAMPLE_TUTORIAL = Path(tutorial_quiz.__file__).parent / "data" / "sample_tutorial.txt"


class TestParse:
    """Tests for parse_tutorial_text."""

    def test_single_block(self):
        """Test single block."""
        questions = parse_tutorial_text(
            "LABEL: addition\n"
            "Q: What is $2 + 2$?\n"
            "- [ ] 3 :: Too small\n"
            "- [x] 4\n"
            "- [ ] 5\n"
            "ALLOW_RETRY: yes\n"
        )
        assert len(questions) == 1
        q = questions[0]
        assert q.question_id == "addition"
        assert q.type == "radio"
        assert q.allow_retry is True
        assert [a.value for a in q.answers] == ["3", "4", "5"]
        assert q.answers[0].message == "Too small"
        assert q.correct_answers[0].value == "4"

    def test_multi_line_question_and_separators(self):
        """Test multi line question and separators."""
        questions = parse_tutorial_text(
            "Q: First line\n"
            "second line\n"
            "- [x] yes\n"
            "---\n"
            "Q: Another\n"
            "- [x] a\n"
            "- [X] b\n"
            "TYPE: multiple\n"
            "CORRECT: Well done\n"
        )
        assert len(questions) == 2
        assert "second line" in questions[0].prompt
        assert questions[1].type == "checkbox"
        assert questions[1].messages.correct == "Well done"

    def test_missing_question_text(self):
        """Test missing question text."""
        with pytest.raises(TutorialImportError, match="Question text missing"):
            parse_tutorial_text("- [x] 4\n")

    def test_missing_answers(self):
        """Test missing answers."""
        with pytest.raises(TutorialImportError, match="no answers"):
            parse_tutorial_text("Q: What?\n")

    def test_bad_flag(self):
        """Test bad flag."""
        with pytest.raises(TutorialImportError, match="ALLOW_RETRY"):
            parse_tutorial_text("Q: What?\n- [x] a\nALLOW_RETRY: maybe\n")

    def test_text_outside_section(self):
        """Test text outside section."""
        with pytest.raises(TutorialImportError, match="outside"):
            parse_tutorial_text("Q: What?\n- [x] a\nstray text\n")

    def test_configuration_errors_propagate(self):
        """Test configuration errors propagate."""
        with pytest.raises(ConfigurationError):
            parse_tutorial_text("Q: What?\n- [ ] a\n- [ ] b\n")


class TestLoad:
    """Tests for load_tutorial_from_file."""

    def test_sample_tutorial(self):
        """Test sample tutorial."""
        imported = load_tutorial_from_file(SAMPLE_TUTORIAL)
        assert imported.source_path == SAMPLE_TUTORIAL
        assert [q.question_id for q in imported.questions] == ["alphabet", "location", "square"]
        assert [q.type for q in imported.questions] == ["radio", "checkbox", "numeric"]
        assert imported.questions[1].random_answer_order is True

    def test_empty_file(self, tmp_path):
        """Test empty file."""
        path = tmp_path / "empty.txt"
        path.write_text("\n\n", encoding="utf-8")
        with pytest.raises(TutorialImportError, match="did not contain"):
            load_tutorial_from_file(path)
