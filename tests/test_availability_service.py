"""Item availability tests for specialty cutoffs, same-day rules and blackouts."""

from datetime import date, datetime, timezone

from app.core.order_rules import ORDER_RULES
from app.services.availability_service import BLACKOUT_REASON, evaluate_item, list_available_items
from tests.helpers import denver

FRIDAY = date(2026, 10, 23)
WEDNESDAY = date(2026, 10, 21)


def test_specialty_cutoff_is_five_pm_the_day_before() -> None:
    before = evaluate_item("bread-17", FRIDAY, denver(2026, 10, 22, 16, 59))
    at_cutoff = evaluate_item("bread-17", FRIDAY, denver(2026, 10, 22, 17, 0))

    assert before.available is True
    assert before.reason is None
    assert at_cutoff.available is False
    assert at_cutoff.reason == "Order cutoff for Old World Italian has passed (5pm the day before)"


def test_specialty_cutoff_uses_bakery_clock_for_foreign_instants() -> None:
    # 23:00 UTC is 17:00 in Denver while daylight saving is in effect.
    assert evaluate_item("bread-17", FRIDAY, datetime(2026, 10, 22, 22, 59, tzinfo=timezone.utc)).available
    assert not evaluate_item("bread-17", FRIDAY, datetime(2026, 10, 22, 23, 0, tzinfo=timezone.utc)).available


def test_naive_reference_time_is_read_as_bakery_local() -> None:
    assert evaluate_item("bread-17", FRIDAY, datetime(2026, 10, 22, 16, 0)).available
    assert not evaluate_item("bread-17", FRIDAY, datetime(2026, 10, 22, 17, 0)).available


def test_specialty_item_on_wrong_weekday() -> None:
    result = evaluate_item("bread-17", date(2026, 10, 22), denver(2026, 10, 18, 12))

    assert result.available is False
    assert result.reason == "Old World Italian is only available on Wednesday & Friday"


def test_single_day_specialty_names_one_day() -> None:
    result = evaluate_item("bread-16", FRIDAY, denver(2026, 10, 18, 12))

    assert result.reason == "Norwegian Farm is only available on Monday"


def test_same_day_bread_cutoff_at_ten() -> None:
    before = evaluate_item("bread-21", WEDNESDAY, denver(2026, 10, 21, 9, 59))
    at_cutoff = evaluate_item("bread-21", WEDNESDAY, denver(2026, 10, 21, 10, 0))

    assert before.available is True
    assert at_cutoff.available is False
    assert at_cutoff.reason == "Same-day orders for Sourdough must be placed before 10am"


def test_everyday_item_for_a_later_day_is_always_available() -> None:
    assert evaluate_item("bread-21", date(2026, 10, 22), denver(2026, 10, 21, 23, 59)).available
    assert evaluate_item("bread-3", date(2026, 10, 22), denver(2026, 10, 21, 23, 59)).available


def test_items_without_same_day_ordering_need_advance_notice() -> None:
    loaf = evaluate_item("bread-3", WEDNESDAY, denver(2026, 10, 21, 7, 0))
    cookies = evaluate_item("cookie-9", WEDNESDAY, denver(2026, 10, 21, 7, 0))

    assert loaf.reason == "Big Sky Country Loaf requires at least 1 day advance notice"
    assert cookies.reason == "Sugar Cookies - Assorted requires at least 1 day advance notice"


def test_bars_have_no_same_day_cutoff() -> None:
    assert evaluate_item("bar-1", WEDNESDAY, denver(2026, 10, 21, 20, 0)).available


def test_blackout_date_wins_over_every_schedule() -> None:
    thanksgiving = date(2026, 11, 26)
    reference_now = denver(2026, 10, 18, 12)

    for item_id in ("bread-13", "bread-21", "bar-1", "cookie-1"):
        result = evaluate_item(item_id, thanksgiving, reference_now)
        assert result.available is False
        assert result.reason == BLACKOUT_REASON


def test_unknown_item_is_not_found() -> None:
    result = evaluate_item("bread-999", FRIDAY, denver(2026, 10, 18, 12))

    assert result.available is False
    assert result.reason == "Item bread-999 not found"


def test_listing_puts_specialty_breads_first_in_catalog_order() -> None:
    grouped = list_available_items(FRIDAY, denver(2026, 10, 18, 12))

    assert list(grouped) == ["breads", "bars", "cookies"]
    bread_ids = [entry.id for entry in grouped["breads"]]
    assert bread_ids[:3] == ["bread-17", "challah", "bread-7"]
    assert "bread-16" not in bread_ids
    assert all(entry.schedule_kind == "everyday" for entry in grouped["breads"][3:])
    assert len(grouped["bars"]) == 10
    assert len(grouped["cookies"]) == 9
    italian = grouped["breads"][0]
    assert italian.available_days == ["Wednesday", "Friday"]
    assert italian.cutoff_hour == 17
    assert italian.price_cents == 900


def test_same_day_listing_after_bread_cutoff() -> None:
    grouped = list_available_items(WEDNESDAY, denver(2026, 10, 21, 11, 0))

    assert [entry.id for entry in grouped["breads"]] == ["test-1"]
    assert "cookie-9" not in [entry.id for entry in grouped["cookies"]]
    assert len(grouped["bars"]) == 10


def test_blackout_listing_keeps_empty_categories() -> None:
    grouped = list_available_items(date(2026, 12, 25), denver(2026, 10, 18, 12))

    assert grouped == {"breads": [], "bars": [], "cookies": []}


def test_listing_agrees_with_single_item_checks() -> None:
    reference_now = denver(2026, 10, 22, 17, 30)
    grouped = list_available_items(FRIDAY, reference_now)
    listed = {entry.id for entries in grouped.values() for entry in entries}

    for item_id in ORDER_RULES.items:
        assert (item_id in listed) == evaluate_item(item_id, FRIDAY, reference_now).available


def test_listing_is_repeatable_for_the_same_inputs() -> None:
    reference_now = denver(2026, 10, 20, 8, 0)

    assert list_available_items(WEDNESDAY, reference_now) == list_available_items(WEDNESDAY, reference_now)
