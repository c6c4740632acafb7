from decimal import Decimal

import pytest

from kubestate.quantity import InvalidQuantityError, Quantity, parse_quantity


def test_decimal_suffix():
    assert parse_quantity("2.1G").milli_value() / 1000 == 2.1e9


def test_binary_suffixes():
    assert float(parse_quantity("5Gi").value()) == 5.36870912e9
    assert float(parse_quantity("1Gi").value()) == 1.073741824e9


def test_plain_decimal():
    assert parse_quantity("4.3").milli_value() / 1000 == 4.3


def test_rounds_away_from_zero():
    assert parse_quantity("1.5m").milli_value() == 2
    assert parse_quantity("-1.5m").milli_value() == -2


def test_exponent_form():
    assert parse_quantity("1e3").value() == 1000
    assert parse_quantity("1E3") == parse_quantity("1k")


def test_equivalent_spellings():
    assert parse_quantity("500m") == parse_quantity("0.5")
    assert parse_quantity("1Ki") == parse_quantity(1024)
    assert parse_quantity("1000") == parse_quantity(1000)


def test_accepts_existing_quantity():
    q = Quantity(Decimal(3))
    assert parse_quantity(q) is q


def test_numbers():
    assert parse_quantity(5).value() == 5
    assert parse_quantity(0.25).milli_value() == 250


@pytest.mark.parametrize("text", ["", "abc", "1Q", "1.2.3", "Gi", "--1"])
def test_invalid(text):
    with pytest.raises(InvalidQuantityError):
        parse_quantity(text)


def test_invalid_types():
    with pytest.raises(InvalidQuantityError):
        parse_quantity(None)
    with pytest.raises(InvalidQuantityError):
        parse_quantity(float("inf"))