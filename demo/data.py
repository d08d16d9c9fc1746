"""
Deterministic sample rows for the quick-filter grid demo.
"""

from __future__ import annotations

import random
from typing import Any

DEFAULT_ROW_COUNT = 1000
DEFAULT_SEED = 2021

FIRST_NAMES = (
    "Michael", "Natalie", "Aleksey", "Alicia", "Missy", "Ian", "Leisel",
    "Inge", "Kirsty", "Libby", "Ryan", "Jenny", "Grant", "Larsen", "Petria",
    "Anastasia", "Dara", "Shane", "Eamon", "Carlos",
)
LAST_NAMES = (
    "Phelps", "Coughlin", "Nemov", "Coutts", "Franklin", "Thorpe", "Jones",
    "de Bruijn", "Coventry", "Trickett", "Lochte", "Thompson", "Hackett",
    "Wiegand", "Thomas", "Kuzmina", "Torres", "Gould", "Sullivan", "Silva",
)
COUNTRIES = (
    "United States", "Australia", "Russia", "Germany", "Netherlands",
    "Zimbabwe", "France", "Ireland", "Brazil", "Japan", "Canada", "Italy",
    "Great Britain", "China", "South Korea",
)


def generate_rows(count: int = DEFAULT_ROW_COUNT, seed: int = DEFAULT_SEED) -> list[dict[str, Any]]:
    """Build ``count`` athlete rows shaped ``{name, person: {age, country}}``."""
    if count < 0:
        raise ValueError("count must be >= 0")

    rng = random.Random(seed)
    rows: list[dict[str, Any]] = []
    for _ in range(count):
        rows.append({
            "name": f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}",
            "person": {
                "age": rng.randint(16, 40),
                "country": rng.choice(COUNTRIES),
            },
        })
    return rows


def count_country(rows: list[dict[str, Any]], country: str) -> int:
    return sum(1 for row in rows if row["person"]["country"] == country)
