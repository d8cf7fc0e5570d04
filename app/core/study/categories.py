"""
Closed set of exam subject categories.
"""
from enum import Enum
from typing import Union

from app.core.exceptions import ValidationError

# Every question offers exactly four choices
OPTION_COUNT = 4


class Category(str, Enum):
    """Subject buckets of the 宅建 exam."""

    TAKKENGYOUHOU = "takkengyouhou"  # 宅建業法
    MINPOU = "minpou"  # 民法等
    HOUREI = "hourei"  # 法令上の制限
    ZEI = "zei"  # 税・その他


CATEGORY_LABELS = {
    Category.TAKKENGYOUHOU: "宅建業法",
    Category.MINPOU: "民法等",
    Category.HOUREI: "法令上の制限",
    Category.ZEI: "税・その他",
}


def parse_category(value: Union[str, Category]) -> Category:
    """Return the Category for value, rejecting anything outside the enumeration."""
    if isinstance(value, Category):
        return value
    try:
        return Category(value)
    except ValueError:
        allowed = ", ".join(c.value for c in Category)
        raise ValidationError(f"Unknown category '{value}' (expected one of: {allowed})")
