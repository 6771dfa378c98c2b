import pytest

from homefinder.services.comparison import (
    AlreadyPresent,
    CapacityExceeded,
    ComparisonSet,
    comparison_rows,
)

from helpers import record


def _full_set():
    selection = ComparisonSet()
    for property_id in (1, 2, 3):
        selection.add(record(property_id))
    return selection


def test_fourth_record_is_rejected_and_set_unchanged():
    selection = _full_set()
    with pytest.raises(CapacityExceeded):
        selection.add(record(4))
    assert selection.ids == [1, 2, 3]
    assert selection.is_full


def test_duplicate_is_rejected_and_set_unchanged():
    selection = ComparisonSet()
    selection.add(record(1))
    with pytest.raises(AlreadyPresent):
        selection.add(record(1, title="Same id, new title"))
    assert selection.ids == [1]
    assert selection.records[0].title == "Listing 1"


def test_duplicate_is_reported_before_capacity():
    selection = _full_set()
    with pytest.raises(AlreadyPresent):
        selection.add(record(2))


def test_remove_and_clear():
    selection = _full_set()
    selection.remove(2)
    assert selection.ids == [1, 3]
    selection.remove(99)
    assert selection.ids == [1, 3]
    assert not selection.contains(2)
    selection.add(record(4))
    assert selection.ids == [1, 3, 4]
    selection.clear()
    assert len(selection) == 0


def test_toggle_adds_then_removes():
    selection = ComparisonSet()
    assert selection.toggle(record(5)) is True
    assert selection.contains(5)
    assert selection.toggle(record(5)) is False
    assert len(selection) == 0


def test_records_snapshot_is_read_only_copy():
    selection = _full_set()
    snapshot = selection.records
    selection.clear()
    assert [r.id for r in snapshot] == [1, 2, 3]


def test_comparison_rows_formatting():
    rows = comparison_rows(
        [
            record(1, price=875000, bathrooms=2.5, lot_size=0.12, garage=2, year_built=1926),
            record(2, price=2850, status="for-rent", property_type="apartment"),
        ]
    )
    table = {row.label: row.values for row in rows}
    assert table["Price"] == ["$875,000", "$2,850/mo"]
    assert table["Location"] == ["Seattle, WA", "Seattle, WA"]
    assert table["Bathrooms"] == ["2.5", "2"]
    assert table["Square Feet"] == ["1,800", "1,800"]
    assert table["Property Type"] == ["House", "Apartment"]
    assert table["Year Built"] == ["1926", "2000"]
    assert table["Lot Size"] == ["0.12 acres", "N/A"]
    assert table["Garage"] == ["2 cars", "None"]
    assert comparison_rows([]) == []
