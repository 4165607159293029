# tests/test_app_state.py

from datetime import date

import pytest

from mountains import app_state as actions
from mountains.app_state import AppState, DailyLogService
from mountains.utils.db.models import DailyLog, FoodEntry
from mountains.utils.error_handler import ValidationError

DAY = date(2024, 6, 1)


@pytest.fixture
def state():
    return AppState(selected_date=DAY)


def test_logs_sorted_newest_first():
    logs = [DailyLog(date=date(2024, 1, d)) for d in (3, 9, 1)]
    st = AppState(logs)
    assert [l.date.day for l in st.daily_logs] == [9, 3, 1]


def test_first_edit_creates_the_day(state):
    assert state.get_daily_log(DAY) is None
    log = actions.update_weight(state, "180.5")
    assert log.weight == 180.5
    assert state.get_daily_log(DAY) is log


def test_blank_numeric_input_clears_field(state):
    actions.update_miles(state, "4.2")
    log = actions.update_miles(state, "  ")
    assert log.miles_covered is None


def test_bad_numeric_input_raises_and_leaves_value(state):
    actions.update_waist(state, "34")
    with pytest.raises(ValidationError):
        actions.update_waist(state, "thirty")
    assert state.get_daily_log(DAY).waist == 34.0


@pytest.mark.parametrize("raw", ["nan", "inf", "-Infinity"])
def test_non_finite_numbers_rejected(state, raw):
    """Values sqlite cannot hold as REAL never reach the record."""
    actions.update_weight(state, "180")
    with pytest.raises(ValidationError):
        actions.update_weight(state, raw)
    assert state.get_daily_log(DAY).weight == 180.0


def test_finite_weight_survives_save_and_reload(state, manager):
    log = actions.update_weight(state, "1e2")
    manager.save_now(log)
    assert manager.load(DAY).weight == 100.0


def test_elevation_must_be_whole_number(state):
    assert actions.update_elevation(state, "1200").elevation_gain == 1200
    with pytest.raises(ValidationError):
        actions.update_elevation(state, "12.5")


def test_food_add_update_delete(state):
    actions.add_food(state, "oatmeal")
    actions.add_food(state, "banana")
    log = actions.update_food(state, 1, "apple")
    assert [f.name for f in log.food_entries] == ["oatmeal", "apple"]
    log = actions.delete_food(state, 0)
    assert [f.name for f in log.food_entries] == ["apple"]


def test_blank_and_out_of_range_entry_actions_do_nothing(state):
    assert actions.add_food(state, "   ") is None
    assert actions.add_sokay(state, "") is None
    assert actions.update_food(state, 3, "x") is None
    assert actions.delete_sokay(state, 0) is None
    assert state.get_daily_log(DAY) is None


def test_sokay_add_update_delete(state):
    actions.add_sokay(state, "walked")
    log = actions.update_sokay(state, 0, "walked the dog")
    assert log.sokay_entries == ["walked the dog"]
    assert actions.delete_sokay(state, 0).sokay_entries == []


def test_text_fields_blank_to_none(state):
    assert actions.update_notes(state, "legs tired").notes == "legs tired"
    assert actions.update_notes(state, " ").notes is None
    assert actions.update_strength_mobility(state, "").strength_mobility is None


class RecordingManager:
    def __init__(self):
        self.saved = []
        self.deleted = []

    def save(self, log):
        self.saved.append(log.copy())
        return "future"

    def delete(self, day):
        self.deleted.append(day)
        return "future"


def test_service_saves_the_full_record(state):
    mgr = RecordingManager()
    service = DailyLogService(state, mgr)
    service.apply(actions.add_food, "eggs")
    assert service.apply(actions.update_weight, "179") == "future"

    assert len(mgr.saved) == 2
    last = mgr.saved[-1]
    assert last.food_entries == [FoodEntry("eggs")]
    assert last.weight == 179.0


def test_service_skips_noop_actions(state):
    mgr = RecordingManager()
    assert DailyLogService(state, mgr).apply(actions.add_food, "") is None
    assert mgr.saved == []


def test_service_delete_day(state):
    mgr = RecordingManager()
    service = DailyLogService(state, mgr)
    service.apply(actions.add_sokay, "x")
    service.delete_day(DAY)
    assert state.get_daily_log(DAY) is None
    assert mgr.deleted == [DAY]


def test_service_round_trip_through_store(state, manager):
    service = DailyLogService(state, manager)
    service.apply(actions.add_food, "toast")
    service.apply(actions.update_elevation, "1500").result(timeout=5)
    assert manager.load(DAY) == state.get_daily_log(DAY)
