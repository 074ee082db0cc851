from __future__ import annotations

import unittest
from decimal import Decimal

from rpn_jax.errors import DivisionByZeroError, InvalidDomainError, MalformedLiteralError
from rpn_jax.values import Number


def num(text: str) -> Number:
    value = Number.parse(text)
    assert value is not None, text
    return value


class NumberParsingTests(unittest.TestCase):
    def test_rejects_non_numeric_text(self) -> None:
        for text in ("fail", "", None, "null", "NaN", "Infinity", "1_000", " 4"):
            with self.subTest(text=text):
                self.assertIsNone(Number.parse(text))

    def test_display_strips_trailing_zeros(self) -> None:
        self.assertEqual(str(num("4")), "4")
        self.assertEqual(str(num("4.0")), "4")
        self.assertEqual(str(num("4.5")), "4.5")
        self.assertEqual(str(num("-4.5")), "-4.5")
        self.assertEqual(str(num("0")), "0")
        self.assertEqual(str(num("0.0000")), "0")

    def test_display_truncates_to_ten_places(self) -> None:
        self.assertEqual(str(num("500000.1234567899")), "500000.1234567899")
        self.assertEqual(str(num("500000.12345678993")), "500000.1234567899")
        self.assertEqual(str(num("500000.12345678996")), "500000.1234567899")
        self.assertEqual(str(num("500000.1234567899355")), "500000.1234567899")
        self.assertEqual(str(num("-500000.1234567899355")), "-500000.1234567899")

    def test_value_keeps_fifteen_places(self) -> None:
        self.assertEqual(str(num("500000.1234567899355").value), "500000.123456789935500")
        self.assertEqual(str(num("500000.12345678").value), "500000.123456780000000")

    def test_custom_precision(self) -> None:
        value = Number.parse("3.14159", precision=2, display_precision=1)
        assert value is not None
        self.assertEqual(value.value, Decimal("3.14"))
        self.assertEqual(str(value), "3.1")


class NumberArithmeticTests(unittest.TestCase):
    def test_integer_operations(self) -> None:
        self.assertEqual(str(num("4").multiply(num("5"))), "20")
        self.assertEqual(str(num("4").add(num("5"))), "9")
        self.assertEqual(str(num("4").subtract(num("5"))), "-1")
        self.assertEqual(str(num("4").divide(num("5"))), "0.8")
        self.assertEqual(str(num("4").sqrt()), "2")

    def test_fractional_operations(self) -> None:
        self.assertEqual(str(num("4.545").multiply(num("5.43"))), "24.67935")
        self.assertEqual(str(num("4.545").add(num("5.43"))), "9.975")
        self.assertEqual(str(num("4.545").subtract(num("5.43"))), "-0.885")
        self.assertEqual(str(num("4.545").divide(num("5.43"))), "0.8370165745")
        self.assertEqual(str(num("4.545").divide(num("5.43")).value), "0.837016574585635")
        self.assertEqual(str(num("4.545").sqrt()), "2.1319005605")
        self.assertEqual(str(num("4.545").sqrt().sqrt()), "1.460102928")

    def test_negative_operations(self) -> None:
        self.assertEqual(str(num("-4.545").multiply(num("5.43"))), "-24.67935")
        self.assertEqual(str(num("-4.545").add(num("5.43"))), "0.885")
        self.assertEqual(str(num("-4.545").subtract(num("5.43"))), "-9.975")
        self.assertEqual(str(num("-4.545").divide(num("5.43"))), "-0.8370165745")
        self.assertEqual(str(num("-4.545").divide(num("5.43")).value), "-0.837016574585635")

    def test_square_root_of_two_is_truncated(self) -> None:
        self.assertEqual(str(num("2").sqrt()), "1.4142135623")

    def test_failures_raise_typed_errors(self) -> None:
        with self.assertRaises(DivisionByZeroError):
            num("-4.545").divide(num("0"))
        with self.assertRaises(InvalidDomainError):
            num("-4.545").sqrt()

    def test_numbers_are_immutable_values(self) -> None:
        left = num("1.5")
        total = left.add(num("1"))
        self.assertEqual(str(left), "1.5")
        self.assertEqual(total, num("2.5"))


class NumberMagnitudeTests(unittest.TestCase):
    def test_large_literals_keep_every_digit(self) -> None:
        self.assertEqual(str(num("1e200")), "1" + "0" * 200)
        self.assertEqual(str(num("123456789012345678901234567890.5")), "123456789012345678901234567890.5")

    def test_large_products_are_exact(self) -> None:
        big = num("1" + "0" * 60)
        self.assertEqual(str(big.multiply(big)), "1" + "0" * 120)
        self.assertEqual(str(big.multiply(big).add(num("0.25"))), "1" + "0" * 120 + ".25")

    def test_large_quotients_keep_their_fraction(self) -> None:
        self.assertEqual(str(num("1e200").divide(num("3"))), "3" * 200 + "." + "3" * 10)

    def test_literals_beyond_range_are_not_numbers(self) -> None:
        self.assertIsNone(Number.parse("1e200000"))

    def test_result_beyond_range_is_a_typed_error(self) -> None:
        huge = num("1e60000")
        with self.assertRaises(MalformedLiteralError):
            huge.multiply(huge)


if __name__ == "__main__":
    unittest.main()
