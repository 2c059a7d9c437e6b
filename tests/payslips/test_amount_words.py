from decimal import Decimal

import pytest

from hrms.payslips.words import amount_in_words, number_to_words


@pytest.mark.parametrize(
    "n, expected",
    [
        (0, "Zero"),
        (19, "Nineteen"),
        (40, "Forty"),
        (105, "One Hundred Five"),
        (13687, "Thirteen Thousand Six Hundred Eighty Seven"),
        (2500000, "Twenty Five Lakh"),
        (123456789, "Twelve Crore Thirty Four Lakh Fifty Six Thousand Seven Hundred Eighty Nine"),
    ],
)
def test_number_to_words_uses_indian_grouping(n, expected):
    assert number_to_words(n) == expected


def test_amount_in_words_includes_paise():
    assert amount_in_words(Decimal("13687.50")) == "Rupees Thirteen Thousand Six Hundred Eighty Seven and Fifty Paise Only"


def test_amount_in_words_whole_rupees():
    assert amount_in_words(Decimal("100000")) == "Rupees One Lakh Only"


def test_amount_in_words_rounds_half_up():
    assert amount_in_words(Decimal("9.995")) == "Rupees Ten Only"
