"""
Tests for services/quiz_service.py: label extraction and question bank loading.
"""

import logging

import pytest

from quiz_bot.services.quiz_service import (
    Question,
    QuestionLoadError,
    extract_label,
    load_question_bank,
    load_topic,
    parse_question,
)


class TestExtractLabel:
    """Tests for extract_label."""

    @pytest.mark.parametrize("text,expected", [
        ("A. Paris", "A"),
        ("b) London", "B"),
        ("C:Berlin", "C"),
        ("x", "X"),
        ("", ""),
        # "." is preferred over ")" even when ")" comes first
        ("d) Mr. Smith", "D) MR"),
        ("  e . spaced", "E"),
        ("AB: two letters", "AB"),
    ])
    def test_extract_label(self, text, expected):
        assert extract_label(text) == expected

    def test_is_deterministic(self):
        assert extract_label("a. one") == extract_label("a. one") == "A"


class TestParseQuestion:
    """Tests for parse_question."""

    def test_mapping_options(self):
        q = parse_question(
            {"id": 7, "question": "Capital?", "options": {"a": "Paris", "B": "Rome"},
             "correct_answer": ["A"]},
            0,
        )
        assert q.id == 7
        assert q.options == {"A": "Paris", "B": "Rome"}
        assert q.correct == ("A",)

    def test_legacy_list_options(self):
        q = parse_question(
            {"question": "Capital?", "options": ["A. Paris", "b) Rome", "C:Berlin"],
             "correct_answer": ["b"]},
            3,
        )
        assert q.id == 3
        assert q.options == {"A": "Paris", "B": "Rome", "C": "Berlin"}
        assert q.correct == ("B",)

    def test_correct_answer_as_prefixed_text(self):
        q = parse_question(
            {"question": "Q", "options": {"A": "x", "B": "y"}, "correct_answer": "B. y"}, 0
        )
        assert q.correct == ("B",)

    def test_multiple_correct_answers(self):
        q = parse_question(
            {"question": "Q", "options": {"A": "x", "B": "y", "C": "z"},
             "correct_answer": ["A", "C"]},
            0,
        )
        assert q.is_correct("c")
        assert q.is_correct(" a ")
        assert not q.is_correct("B")

    @pytest.mark.parametrize("options,correct,expected", [
        ({"10": "ten", "20": "twenty"}, ["10"], ("10",)),
        ({"AB": "first", "CD": "second"}, ["cd"], ("CD",)),
        ({"AB": "first", "CD": "second"}, "AB. first", ("AB",)),
    ])
    def test_multi_character_labels(self, options, correct, expected):
        q = parse_question({"question": "Q", "options": options, "correct_answer": correct}, 0)
        assert q.correct == expected
        assert q.is_correct(expected[0].lower())

    @pytest.mark.parametrize("record", [
        {"question": "Q", "options": {}, "correct_answer": ["A"]},
        {"question": "Q", "options": {"A": "x"}, "correct_answer": []},
        {"question": "Q", "options": {"A": "x"}, "correct_answer": ["B"]},
        {"question": "", "options": {"A": "x"}, "correct_answer": ["A"]},
        {"question": "Q", "options": "A. x", "correct_answer": ["A"]},
        {"question": "Q", "options": ["A. x", "a) y"], "correct_answer": ["A"]},
        {"options": {"A": "x"}, "correct_answer": ["A"]},
        ["not", "an", "object"],
    ])
    def test_malformed_question_raises(self, record):
        with pytest.raises(QuestionLoadError):
            parse_question(record, 0)


class TestQuestion:
    def test_is_hashable_and_read_only(self):
        options = {"A": "a", "B": "b"}
        q = Question(id=1, prompt="Q", options=options, correct=("A",))
        same = Question(id=1, prompt="Q", options={"B": "b", "A": "a"}, correct=("A",))
        assert hash(q) == hash(same)
        assert {q, same} == {q}
        with pytest.raises(TypeError):
            q.options["C"] = "c"
        options["C"] = "c"
        assert "C" not in q.options

    def test_sorted_options(self):
        q = Question(id=1, prompt="Q", options={"C": "c", "A": "a", "B": "b"}, correct=("A",))
        assert q.sorted_options() == [("A", "a"), ("B", "b"), ("C", "c")]

    def test_correct_text(self):
        q = Question(id=1, prompt="Q", options={"A": "a", "B": "b"}, correct=("B",))
        assert q.correct_text() == "b"


class TestLoadQuestionBank:
    """Tests for load_topic and load_question_bank."""

    def test_loads_topics_named_after_files(self, tmp_path, write_topic):
        write_topic("linux.json", [
            {"question": "Q1", "options": {"A": "x", "B": "y"}, "correct_answer": ["A"]},
            {"question": "Q2", "options": ["A. x", "B. y"], "correct_answer": ["B"]},
        ])
        write_topic("Networking.JSON", [
            {"question": "Q", "options": {"A": "x"}, "correct_answer": ["A"]},
        ])

        bank = load_question_bank(tmp_path)

        assert bank.topic_names() == ["Networking", "linux"]
        assert len(bank["linux"]) == 2
        assert bank["linux"].source == tmp_path / "linux.json"

    def test_skips_malformed_files_and_logs(self, tmp_path, write_topic, caplog):
        write_topic("good.json", [
            {"question": "Q", "options": {"A": "x"}, "correct_answer": ["A"]},
        ])
        write_topic("broken.json", "{not json")
        write_topic("bad_answer.json", [
            {"question": "Q", "options": {"A": "x"}, "correct_answer": ["Z"]},
        ])
        write_topic("empty.json", [])
        write_topic("object.json", {"question": "Q"})

        with caplog.at_level(logging.WARNING):
            bank = load_question_bank(tmp_path)

        assert bank.topic_names() == ["good"]
        for name in ("broken.json", "bad_answer.json", "empty.json", "object.json"):
            assert name in caplog.text

    def test_ignores_other_files_and_subdirectories(self, tmp_path, write_topic):
        write_topic("notes.txt", "hello")
        (tmp_path / "nested.json").mkdir()
        write_topic("only.json", [
            {"question": "Q", "options": {"A": "x"}, "correct_answer": ["A"]},
        ])

        assert load_question_bank(tmp_path).topic_names() == ["only"]

    def test_skips_topic_names_too_long_for_a_button(self, tmp_path, write_topic, caplog):
        record = [{"question": "Q", "options": {"A": "x"}, "correct_answer": ["A"]}]
        # 29 Cyrillic letters are 58 bytes: exactly fits next to "topic_"
        write_topic("я" * 29 + ".json", record)
        write_topic("я" * 30 + ".json", record)

        with caplog.at_level(logging.WARNING):
            bank = load_question_bank(tmp_path)

        assert bank.topic_names() == ["я" * 29]
        assert "too long" in caplog.text

    def test_empty_directory_gives_empty_bank(self, tmp_path):
        assert len(load_question_bank(tmp_path)) == 0

    def test_missing_root_raises(self, tmp_path):
        with pytest.raises(QuestionLoadError):
            load_question_bank(tmp_path / "missing")

    def test_root_must_be_directory(self, tmp_path, write_topic):
        path = write_topic("file.json", [])
        with pytest.raises(QuestionLoadError):
            load_question_bank(path)

    def test_load_topic_reports_bad_question(self, write_topic):
        path = write_topic("t.json", [
            {"question": "Q", "options": {"A": "x"}, "correct_answer": ["A"]},
            {"question": "Q", "options": {}, "correct_answer": ["A"]},
        ])
        with pytest.raises(QuestionLoadError, match="#1"):
            load_topic(path)
