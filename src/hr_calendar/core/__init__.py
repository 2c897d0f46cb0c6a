"""Filesystem locations shared by the local store and logging."""

from .config import APP_NAME, CALENDARS_DIR, DATA_DIR, ensure_data_dir

__all__ = ["APP_NAME", "CALENDARS_DIR", "DATA_DIR", "ensure_data_dir"]
