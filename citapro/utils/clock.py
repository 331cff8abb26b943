from datetime import datetime
from zoneinfo import ZoneInfo

from ..config import APP_TIMEZONE


def local_now() -> datetime:
    """Current wall-clock time in APP_TIMEZONE, naive (availability times are naive too)"""
    return datetime.now(ZoneInfo(APP_TIMEZONE)).replace(tzinfo=None)
