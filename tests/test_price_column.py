import pytest

from coverfinder.domain.models import AgeBracket, Gender, Region
from coverfinder.scoring.price_column import all_price_columns, resolve_price_column


def test_resolves_region_gender_and_age_suffix():
    assert resolve_price_column(Region.NSW, Gender.MALE, AgeBracket.UNDER_25) == "2025-AUFCI-NSW-M-20"
    assert resolve_price_column(Region.QLD, Gender.FEMALE, AgeBracket.UNDER_35) == "2025-AUFCI-QLD-F-30"
    assert resolve_price_column(Region.WA, Gender.MALE, AgeBracket.UNDER_65) == "2025-AUFCI-WA-M-60"


def test_accepts_plain_enum_values():
    # Adapters may hand over raw strings from JSON/argparse.
    assert resolve_price_column("VIC", "Female", "< 65 years") == "2025-AUFCI-VIC-F-60"


def test_other_gender_defaults_to_female_column():
    assert resolve_price_column(Region.SA, Gender.OTHER, AgeBracket.UNDER_25) == "2025-AUFCI-SA-F-20"


def test_other_gender_column_is_configurable():
    column = resolve_price_column(Region.SA, Gender.OTHER, AgeBracket.UNDER_25, other_gender_as=Gender.MALE)
    assert column == "2025-AUFCI-SA-M-20"


def test_other_gender_cannot_map_to_itself():
    with pytest.raises(ValueError):
        resolve_price_column(Region.SA, Gender.OTHER, AgeBracket.UNDER_25, other_gender_as=Gender.OTHER)


def test_every_profile_has_a_column():
    # The function is total: 6 regions x 3 genders x 3 age brackets all resolve.
    resolved = {
        resolve_price_column(r, g, a) for r in Region for g in Gender for a in AgeBracket
    }
    assert resolved == set(all_price_columns())
    assert len(all_price_columns()) == 36
