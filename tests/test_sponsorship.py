from coverfinder.presentation.sponsorship import display_order, flag_sponsored, sponsored_links


def test_flag_sponsored_returns_copies(product_factory):
    original = product_factory("a", name="Kogan Comprehensive")
    flagged = flag_sponsored([original, product_factory("b")], ["Kogan Comprehensive"])

    assert flagged[0].sponsored is True
    assert original.sponsored is False
    assert flagged[1].sponsored is False


def test_display_order_puts_sponsored_first(product_factory):
    products = [
        product_factory("top", dynamic_finder_score=9.0),
        product_factory("sponsor-low", dynamic_finder_score=2.0, sponsored=True),
        product_factory("mid", dynamic_finder_score=6.0),
        product_factory("sponsor-high", dynamic_finder_score=4.0, sponsored=True),
    ]
    assert [p.id for p in display_order(products)] == ["sponsor-high", "sponsor-low", "top", "mid"]


def test_sponsored_links_fall_back_to_hash(product_factory):
    products = [
        product_factory("a", name="Kogan Comprehensive", sponsored=True, dynamic_finder_score=7.1),
        product_factory("b", name="Mystery Sponsor", sponsored=True),
        product_factory("c", name="Unsponsored"),
    ]
    links = sponsored_links(products, {"Kogan Comprehensive": "https://www.kogan.com/insurance"})
    assert links == [
        {"name": "Kogan Comprehensive", "redirectUrl": "https://www.kogan.com/insurance", "dynamicFinderScore": 7.1},
        {"name": "Mystery Sponsor", "redirectUrl": "#", "dynamicFinderScore": 5.0},
    ]
