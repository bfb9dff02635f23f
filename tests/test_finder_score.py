import pytest

from coverfinder.domain.models import Priority
from coverfinder.scoring.composite import clamp, dynamic_finder_score


def test_price_priority_weights_price_rating():
    # 0.85 * 9.9 + 0.15 * 1.0 = 8.565 -> 8.6
    assert dynamic_finder_score(9.9, 1.0, Priority.PRICE) == 8.6


def test_features_priority_weights_feature_score():
    # 0.85 * 1.0 + 0.15 * 9.9 = 2.335 -> 2.3
    assert dynamic_finder_score(9.9, 1.0, Priority.FEATURES) == 2.3


def test_accepts_raw_priority_strings():
    assert dynamic_finder_score(9.9, 1.0, "Price") == 8.6


def test_unknown_priority_is_an_error():
    with pytest.raises(ValueError, match="Unknown priority"):
        dynamic_finder_score(5.0, 5.0, "Cheapest")


def test_finder_score_stays_in_bounds():
    grid = [x / 2 for x in range(0, 21)]
    for priority in Priority:
        for price_rating in grid:
            for feature_score in grid:
                score = dynamic_finder_score(price_rating, feature_score, priority)
                assert 0.0 <= score <= 10.0


def test_clamp():
    assert clamp(-1) == 0.0
    assert clamp(10.04) == 10.0
    assert clamp(0.5, 0.0, 1.0) == 0.5
