"""
Price column resolution.

Every catalog row carries one premium per (region, gender bucket, age bucket),
stored in columns named like `2025-AUFCI-NSW-F-20`. This module maps a customer
profile onto the one column to read.
"""

from __future__ import annotations

from coverfinder.domain.models import AgeBracket, Gender, Region

PRICE_COLUMN_PREFIX = "2025-AUFCI"

AGE_SUFFIXES: dict[AgeBracket, str] = {
    AgeBracket.UNDER_25: "20",
    AgeBracket.UNDER_35: "30",
    AgeBracket.UNDER_65: "60",
}

GENDER_PREFIXES: dict[Gender, str] = {
    Gender.MALE: "M",
    Gender.FEMALE: "F",
}


def resolve_price_column(
    region: Region,
    gender: Gender,
    age_bracket: AgeBracket,
    *,
    other_gender_as: Gender = Gender.FEMALE,
) -> str:
    """Return the price attribute name for a customer profile.

    The catalog has no column for `Gender.OTHER`; those customers are quoted
    from the `other_gender_as` column (Female unless configured otherwise via
    `pricing.other_gender_as`).
    """
    region = Region(region)
    gender = Gender(gender)
    age_bracket = AgeBracket(age_bracket)
    if gender is Gender.OTHER:
        gender = Gender(other_gender_as)
        if gender is Gender.OTHER:
            raise ValueError("other_gender_as must be Male or Female")
    return f"{PRICE_COLUMN_PREFIX}-{region.value}-{GENDER_PREFIXES[gender]}-{AGE_SUFFIXES[age_bracket]}"


def all_price_columns() -> list[str]:
    """Every price column the catalog is expected to carry (for quality checks)."""
    return [
        resolve_price_column(region, gender, age)
        for region in Region
        for gender in (Gender.FEMALE, Gender.MALE)
        for age in AgeBracket
    ]
