from homefinder.utils.formatting import format_price, results_text, status_label, type_label


def test_format_price_for_sale_and_rent():
    assert format_price(1250000, "for-sale") == "$1,250,000"
    assert format_price(2500, "for-rent") == "$2,500/mo"
    assert format_price(None) == "$0"


def test_status_labels_fall_back_to_for_sale():
    assert status_label("pending") == "Pending"
    assert status_label("mystery") == "For Sale"
    assert type_label("townhouse") == "Townhouse"


def test_results_text():
    assert results_text(0) == "No properties found"
    assert results_text(1) == "1 property found"
    assert results_text(1200) == "1,200 properties found"
    assert results_text(2, "favorite property", "") == "2 favorite properties"
    assert results_text(0, "favorite property", "") == "No favorite properties"


def test_log_fields_quote_values_with_spaces():
    from homefinder.utils.logging import fields

    assert fields("favorite_toggled", id=3, is_favorite=True) == "favorite_toggled id=3 is_favorite=True"
    assert fields("failed", error="timed out", url=None) == 'failed error="timed out" url=-'
