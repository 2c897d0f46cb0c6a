from __future__ import annotations

from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_data_dir

APP_NAME = "HR Calendar"
APP_AUTHOR = "HRCalendar"
DATA_DIR = Path(os.getenv("HR_CALENDAR_DATA_DIR") or user_data_dir(APP_NAME, APP_AUTHOR))
CALENDARS_DIR = DATA_DIR / "calendars"


def ensure_data_dir(path: Path | None = None) -> Path:
    target = path or CALENDARS_DIR
    target.mkdir(parents=True, exist_ok=True)
    return target
