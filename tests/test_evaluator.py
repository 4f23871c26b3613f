"""
Tests for chemquiz/services/evaluator.py
"""

import pytest

from chemquiz.services.evaluator import Verdict, evaluate, parse_number


class TestToleranceBoundary:
    """Answers around expected = 18 with tolerance = 0.01."""

    @pytest.mark.parametrize("answer", ["18", "18.0", "17.995", "18.009", "17.99001"])
    def test_inside_tolerance_is_correct(self, answer):
        assert evaluate(answer, 18, 0.01) is Verdict.CORRECT

    @pytest.mark.parametrize("answer", ["17.99", "18.01"])
    def test_exactly_tolerance_is_mismatch(self, answer):
        """The boundary is exclusive on both sides."""
        assert evaluate(answer, 18, 0.01) is Verdict.MISMATCH

    @pytest.mark.parametrize("answer", ["17.98", "17.98999", "18.02", "0", "-18"])
    def test_outside_tolerance_is_mismatch(self, answer):
        assert evaluate(answer, 18, 0.01) is Verdict.MISMATCH

    def test_boundary_not_shifted_by_binary_float(self):
        """44.01 - 44 is slightly below 0.01 in binary floats; it still misses."""
        assert evaluate("44.01", 44, 0.01) is Verdict.MISMATCH
        assert evaluate("43.99", 44, 0.01) is Verdict.MISMATCH

    def test_wider_tolerance(self):
        assert evaluate("17.99", 18, 0.5) is Verdict.CORRECT
        assert evaluate("18.5", 18, 0.5) is Verdict.MISMATCH


class TestParsing:
    """Tests for parse_number and invalid input."""

    @pytest.mark.parametrize("answer", ["  18  ", "+18", "1.8e1", "18.", "\t18\n"])
    def test_accepted_notations(self, answer):
        assert evaluate(answer, 18, 0.01) is Verdict.CORRECT

    @pytest.mark.parametrize(
        "answer",
        ["", "   ", "abc", "18abc", "1,8", "18,0", "nan", "inf", "-Infinity", "0x12", "1_8", "十八", "１８", "18 g"],
    )
    def test_invalid_input(self, answer):
        assert evaluate(answer, 18, 0.01) is Verdict.INVALID

    def test_parse_number_returns_none_for_garbage(self):
        assert parse_number("退出") is None

    def test_parse_fraction_without_leading_digit(self):
        assert float(parse_number(".5")) == 0.5

    def test_huge_exponent_is_a_mismatch(self):
        assert evaluate("1e999999999", 18, 0.01) is Verdict.MISMATCH
