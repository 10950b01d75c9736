import pytest

from buzz_browser.core.months import month_display_name, month_ordinal, month_ordinals


@pytest.mark.parametrize(
    "label, expected",
    [
        ("1月", 1),
        ("12月", 12),
        ("03", 3),
        ("7", 7),
        ("Sep", 9),
        ("sept", 9),
        ("DECEMBER", 12),
        (5, 5),
    ],
)
def test_month_ordinal_accepts_known_labels(label, expected):
    assert month_ordinal(label) == expected


@pytest.mark.parametrize("label", ["13月", "0", "", "Q1", None, 0, 13, True])
def test_month_ordinal_rejects_unknown_labels(label):
    assert month_ordinal(label) is None


def test_month_ordinals_sorted_deduped_and_skips_unknown():
    assert month_ordinals(["3月", "Jan", "1", "bogus", "Mar"]) == [1, 3]


def test_month_display_name():
    assert month_display_name(1) == "1月"
    assert month_display_name(12) == "12月"
