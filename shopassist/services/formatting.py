"""
Message formatting helpers shared by the storefront tools
"""
from typing import Union

Number = Union[int, float]


def plural(count: int, word: str) -> str:
    """'1 order', '3 orders'"""
    return f"{count} {word}{'' if count == 1 else 's'}"


def number(value: Number) -> str:
    """Render 50.0 as '50' and 49.5 as '49.5'"""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def money(value: Number) -> str:
    return f"${value:.2f}"
