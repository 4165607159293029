# mountains/utils/db/models.py
import copy
from dataclasses import dataclass, field, fields
from datetime import date, datetime
from typing import Any, List, Optional, Sequence

from mountains.utils.error_handler import CorruptDataError

DATE_FORMAT = "%Y-%m-%d"


def format_date(d: date) -> str:
    return d.strftime(DATE_FORMAT)


def parse_date(value: str) -> date:
    """
    Parse a stored ISO date. A value we cannot read means the store itself
    cannot be trusted, so this raises instead of returning None.
    """
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except (TypeError, ValueError) as e:
        raise CorruptDataError(f"Unparseable date in store: {value!r}") from e


class BaseModel:
    def to_dict(self) -> dict:
        """
        Convert dataclass to JSON-serializable dict:
         - date fields → ISO-format strings
         - nested dataclasses and lists of them → dicts
        """
        result = {}
        for f in fields(self.__class__):
            val = getattr(self, f.name)
            if isinstance(val, date):
                result[f.name] = val.isoformat()
            elif hasattr(val, "to_dict") and callable(val.to_dict):
                result[f.name] = val.to_dict()
            elif isinstance(val, list):
                result[f.name] = [
                    item.to_dict() if hasattr(item, "to_dict") else item
                    for item in val
                ]
            else:
                result[f.name] = val
        return result


@dataclass
class FoodEntry(BaseModel):
    name: str
    notes: Optional[str] = None


@dataclass
class DailyLog(BaseModel):
    """
    Everything recorded for one calendar date.

    The date is the only identity. Food and sokay entries are owned by value
    and keep insertion order; a save always writes both lists in full.
    """
    date: date
    food_entries: List[FoodEntry] = field(default_factory=list)
    weight: Optional[float] = None
    waist: Optional[float] = None
    miles_covered: Optional[float] = None
    elevation_gain: Optional[int] = None
    sokay_entries: List[str] = field(default_factory=list)
    strength_mobility: Optional[str] = None
    notes: Optional[str] = None

    def add_food_entry(self, entry: FoodEntry) -> None:
        self.food_entries.append(entry)

    def remove_food_entry(self, index: int) -> None:
        if 0 <= index < len(self.food_entries):
            del self.food_entries[index]

    def add_sokay_entry(self, entry: str) -> None:
        self.sokay_entries.append(entry)

    def remove_sokay_entry(self, index: int) -> None:
        if 0 <= index < len(self.sokay_entries):
            del self.sokay_entries[index]

    def copy(self) -> "DailyLog":
        return copy.deepcopy(self)

    def is_empty(self) -> bool:
        return not (
            self.food_entries or self.sokay_entries
            or self.weight is not None or self.waist is not None
            or self.miles_covered is not None or self.elevation_gain is not None
            or self.strength_mobility or self.notes
        )


def daily_log_from_row(row: Sequence[Any],
                       food_rows: Sequence[Sequence[Any]] = (),
                       sokay_rows: Sequence[Sequence[Any]] = ()) -> DailyLog:
    """
    Build a DailyLog from positional rows:
      row        = (date, weight, waist, miles_covered, elevation_gain,
                    strength_mobility, notes)
      food_rows  = [(name, notes), ...]
      sokay_rows = [(entry_text,), ...]
    Rows are read by position so both sqlite3 and libsql cursors work.
    """
    date_str, weight, waist, miles, elevation, strength, notes = row
    return DailyLog(
        date=parse_date(date_str),
        food_entries=[FoodEntry(name=r[0], notes=r[1]) for r in food_rows],
        weight=float(weight) if weight is not None else None,
        waist=float(waist) if waist is not None else None,
        miles_covered=float(miles) if miles is not None else None,
        elevation_gain=int(elevation) if elevation is not None else None,
        sokay_entries=[r[0] for r in sokay_rows],
        strength_mobility=strength,
        notes=notes,
    )
