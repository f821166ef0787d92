import pytest

from proposal_wizard.research.numbers import parse_percent, parse_short_number


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("12K", 12_000),
        ("12k", 12_000),
        ("3.4M", 3_400_000),
        ("1,234", 1_234),
        ("1,234,567", 1_234_567),
        ("1 234", 1_234),
        ("50 אלף", 50_000),
        ("2 מיליון", 2_000_000),
        ("2.5 million", 2_500_000),
        ("120K followers", 120_000),
        ("12 months", 12),
        ("₪0.8", 0.8),
        ("  42 ", 42),
        (7, 7),
        (2.5, 2.5),
    ],
)
def test_parse_short_number(raw, expected):
    assert parse_short_number(raw) == expected


def test_integral_results_are_ints():
    assert isinstance(parse_short_number("3.4M"), int)
    assert isinstance(parse_short_number("0.5"), float)


@pytest.mark.parametrize("raw", [None, "", "n/a", True, [], {}, float("nan"), float("inf"), float("-inf")])
def test_unparseable_is_zero(raw):
    assert parse_short_number(raw) == 0


def test_parse_percent():
    assert parse_percent("4.5%") == 4.5
    assert parse_percent(None) == 0.0


def test_huge_percent_is_zero():
    assert parse_percent("9" * 400 + "%") == 0.0
