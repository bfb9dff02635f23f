"""
Domain models (Pydantic).

These types represent the stable "contract" between layers:
- raw catalog rows (`RawProductRecord`, a read-only string mapping supplied by the loader)
- customer inputs (`CustomerCriteria` and the API request payloads)
- scored output (`ProcessedProduct`, `FeatureDetails`, `QuoteSummary`)

Keeping these models in one place helps:
- validation (unknown regions/features are rejected before any scoring runs),
- typed refactors,
- consistent JSON output across CLI/API.
"""

from __future__ import annotations

from enum import Enum
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel

RawProductRecord = Mapping[str, str]
RatingMap = Mapping[float, float]


class Region(str, Enum):
    NSW = "NSW"
    VIC = "VIC"
    TAS = "TAS"
    WA = "WA"
    SA = "SA"
    QLD = "QLD"


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


class AgeBracket(str, Enum):
    UNDER_25 = "< 25 years"
    UNDER_35 = "< 35 years"
    UNDER_65 = "< 65 years"


class Priority(str, Enum):
    PRICE = "Price"
    FEATURES = "Features"


class Feature(str, Enum):
    """The five coverage features a customer can mark as a priority."""

    STORM = "STORM"
    WINDSCREEN = "WINDSCREEN"
    PERSONAL_EFFECTS = "PERSONAL_EFFECTS"
    ACCIDENTAL_DAMAGE = "ACCIDENTAL_DAMAGE"
    NEW_CAR_REPLACEMENT = "NEW_CAR_REPLACEMENT"


class SortKey(str, Enum):
    PRICE_RATING = "priceRating"
    FINDER_SCORE = "finderScore"


ALL_FEATURES: tuple[Feature, ...] = tuple(Feature)


def ordered_features(features: frozenset[Feature]) -> list[Feature]:
    """Return features in canonical order (stable JSON / URLs)."""
    return [f for f in ALL_FEATURES if f in features]


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class CustomerCriteria(_CamelModel):
    """Who is asking and what they care about; one per comparison request."""

    region: Region
    gender: Gender
    age_bracket: AgeBracket
    priority: Priority = Priority.PRICE
    selected_features: frozenset[Feature] = Field(default_factory=frozenset)

    @field_serializer("selected_features")
    def _serialize_features(self, features: frozenset[Feature]) -> list[str]:
        return [f.value for f in ordered_features(features)]


class FeatureDetails(_CamelModel):
    """Boolean/string facts about a product, used for filtering and display."""

    agreed_or_market_value: str = ""
    choice_of_repairer: bool = False
    lifetime_guarantee: bool = False
    new_car_replacement: bool = False
    new_car_replacement_details: str = ""
    personal_effects: str = ""
    personal_effects_details: str = ""
    roadside_assistance: bool = False
    roadside_assistance_cost: str = "0"
    storm: bool = False
    towing: bool = False
    key_replacement: str = ""
    key_replacement_details: str = ""
    child_seat_replacement: bool = False
    child_seat_details: str = ""
    emergency_transport: bool = False
    emergency_transport_details: str = ""
    essential_repairs: str = ""
    essential_repairs_details: str = ""
    hire_car_after_accident: str = ""
    restricted_driver_option: str = ""
    no_excess_windscreen: bool = False
    windscreen: bool = False
    pay_monthly: bool = False
    reduced_excess_windscreen: str = ""
    accidental_damage: bool = False


class ProcessedProduct(_CamelModel):
    """One scored product for one query. Never mutated after creation."""

    id: str
    name: str
    provider_id: str = ""
    price: float = Field(..., gt=0)
    price_rating: float = Field(..., ge=1.0, le=9.9)

    # Static scores shipped with the catalog (display only).
    price_score: float = 0.0
    cover_score: float = 0.0
    finder_score: float = 0.0

    storm_score: float = Field(..., ge=0, le=10)
    windscreen_score: float = Field(..., ge=0, le=10)
    personal_effects_score: float = Field(..., ge=0, le=10)
    accidental_damage_score: float = Field(..., ge=0, le=10)
    new_car_replacement_score: float = Field(..., ge=0, le=10)

    average_feature_score: float = Field(..., ge=0, le=10)
    dynamic_finder_score: float = Field(..., ge=0, le=10)

    features: FeatureDetails = Field(default_factory=FeatureDetails)
    # Injected by the presentation layer; the scoring engine always leaves it False.
    sponsored: bool = False

    def sub_score(self, feature: Feature) -> float:
        return {
            Feature.STORM: self.storm_score,
            Feature.WINDSCREEN: self.windscreen_score,
            Feature.PERSONAL_EFFECTS: self.personal_effects_score,
            Feature.ACCIDENTAL_DAMAGE: self.accidental_damage_score,
            Feature.NEW_CAR_REPLACEMENT: self.new_car_replacement_score,
        }[feature]


class QuoteSummary(_CamelModel):
    total_products: int
    average_price_rating: float
    average_feature_score: float


class CompareRequest(_CamelModel):
    """POST /api/insurance/compare payload."""

    state: Region
    age_group: AgeBracket
    gender: Gender
    priority: Priority
    selected_features: frozenset[Feature] = Field(default_factory=frozenset)

    def to_criteria(self) -> CustomerCriteria:
        return CustomerCriteria(
            region=self.state,
            gender=self.gender,
            age_bracket=self.age_group,
            priority=self.priority,
            selected_features=self.selected_features,
        )


class QuickQuoteRequest(_CamelModel):
    """POST /api/insurance/quick-quote payload (no feature selection)."""

    state: Region
    age_group: AgeBracket
    gender: Gender
    priority: Priority = Priority.PRICE

    def to_criteria(self) -> CustomerCriteria:
        return CustomerCriteria(
            region=self.state,
            gender=self.gender,
            age_bracket=self.age_group,
            priority=self.priority,
        )
