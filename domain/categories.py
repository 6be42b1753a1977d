from enum import Enum


class Category(str, Enum):
    FOOD = "Food"
    TRANSPORT = "Transport"
    SHOPPING = "Shopping"
    BILLS = "Bills"
    ENTERTAINMENT = "Entertainment"
    RENT = "Rent"
    OTHER = "Other"


DEFAULT_CATEGORY = Category.OTHER.value
ALL_CATEGORIES = "All"

_BY_LOWER = {category.value.lower(): category.value for category in Category}


def category_names() -> list[str]:
    return [category.value for category in Category]


def normalize_category(value: object) -> str:
    """Map a raw category to its canonical name, falling back to ``Other``."""
    if isinstance(value, Category):
        return value.value
    if not isinstance(value, str):
        return DEFAULT_CATEGORY
    return _BY_LOWER.get(value.strip().lower(), DEFAULT_CATEGORY)
