# mountains/utils/markdown_backup.py
"""
Human-readable mirror of the store: one markdown file per day.

The database stays the source of truth; StoreManager calls this after each
successful commit and ignores anything it raises.
"""
import logging
from datetime import date
from pathlib import Path
from typing import Union

from mountains.utils.db.models import DailyLog

logger = logging.getLogger(__name__)

FILENAME_PATTERN = "mtslog-{:%m.%d.%Y}.md"


def _fmt_number(value) -> str:
    # 180.0 -> "180", 180.5 -> "180.5"
    return f"{value:g}" if isinstance(value, float) else str(value)


def daily_log_to_markdown(log: DailyLog) -> str:
    lines = [f"# Mountains Training Log - {log.date:%B %d, %Y}", ""]

    if log.weight is not None or log.waist is not None:
        lines.append("## Measurements")
        if log.weight is not None:
            lines.append(f"- **Weight:** {_fmt_number(log.weight)} lbs")
        if log.waist is not None:
            lines.append(f"- **Waist:** {_fmt_number(log.waist)} inches")
        lines.append("")

    if log.food_entries:
        lines.append("## Food")
        lines.extend(f"- {entry.name}" for entry in log.food_entries)
        lines.append("")

    if log.miles_covered is not None or log.elevation_gain is not None:
        lines.append("## Running")
        if log.miles_covered is not None:
            lines.append(f"- **Miles:** {_fmt_number(log.miles_covered)} mi")
        if log.elevation_gain is not None:
            lines.append(f"- **Elevation:** {log.elevation_gain} ft")
        lines.append("")

    if log.sokay_entries:
        lines.append("## Sokay")
        lines.extend(f"- {entry}" for entry in log.sokay_entries)
        lines.append("")

    if log.strength_mobility:
        lines.append("## Strength & Mobility")
        lines.append(log.strength_mobility)

    if log.notes:
        lines.append("## Notes")
        lines.append(log.notes)

    return "\n".join(lines) + "\n"


class MarkdownBackup:
    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def path_for(self, day: date) -> Path:
        return self.directory / FILENAME_PATTERN.format(day)

    def save_daily_log(self, log: DailyLog) -> Path:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.path_for(log.date)
        path.write_text(daily_log_to_markdown(log), encoding="utf-8")
        return path

    def delete_daily_log(self, day: date) -> bool:
        path = self.path_for(day)
        if path.exists():
            path.unlink()
            return True
        return False
