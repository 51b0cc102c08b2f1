"""
Safe amount handling utilities for totem balances.
Amounts are unsigned integers in the smallest unit; they never go negative
and never wrap.
"""

import re
from decimal import Decimal
from typing import Union

from totems.utils.exceptions import InvalidAmount

AmountLike = Union[int, str, Decimal]


def is_valid_amount(amount: AmountLike) -> bool:
    """Validate that amount is a non-negative integer"""
    if isinstance(amount, bool):
        return False

    if isinstance(amount, int):
        return amount >= 0

    if isinstance(amount, Decimal):
        return amount >= 0 and amount == amount.to_integral_value()

    if isinstance(amount, str):
        return re.match(r"^[0-9]+$", amount) is not None

    return False


def to_amount(amount: AmountLike) -> int:
    if not is_valid_amount(amount):
        raise InvalidAmount(amount)
    return int(amount)


def add_amounts(a: AmountLike, b: AmountLike) -> int:
    """Safely add two amounts"""
    return to_amount(a) + to_amount(b)


def subtract_amounts(a: AmountLike, b: AmountLike) -> int:
    """Safely subtract two amounts

    Raises:
        ValueError: If the result would be negative
    """
    a_int = to_amount(a)
    b_int = to_amount(b)

    if a_int < b_int:
        raise ValueError(f"Insufficient amount: {a} - {b} would be negative")

    return a_int - b_int


def compare_amounts(a: AmountLike, b: AmountLike) -> int:
    a_int = to_amount(a)
    b_int = to_amount(b)

    if a_int < b_int:
        return -1
    elif a_int > b_int:
        return 1
    else:
        return 0


def amount_to_str(amount: AmountLike) -> str:
    return str(to_amount(amount))
