"""
Runtime configuration.

Two settings exist:

- the data file that holds classes and schedules
- the display locale used for month names, weekday names and long dates

Both are resolved in the same order: explicit argument (CLI flag),
then environment variable, then a package default.
"""

from __future__ import annotations

import os
from pathlib import Path

DATA_ENV_VAR = "CLASSCAL_DATA"
LOCALE_ENV_VAR = "CLASSCAL_LOCALE"

DEFAULT_LOCALE = "id"
SUPPORTED_LOCALES = ("id", "en")


def default_data_path() -> Path:
    """
    Return the default location of the JSON store inside the package.

    Using a function instead of a constant makes testing easier,
    because tests can override the path.
    """
    base_dir = Path(__file__).resolve().parent
    return base_dir / "data" / "classcal.json"


def resolve_data_path(path: str | Path | None = None) -> Path:
    if path is not None and str(path).strip():
        return Path(path)
    env = os.environ.get(DATA_ENV_VAR, "").strip()
    if env:
        return Path(env)
    return default_data_path()


def resolve_locale(locale: str | None = None) -> str:
    """
    Pick the display locale. Unknown values fall back to the default.
    """
    for candidate in (locale, os.environ.get(LOCALE_ENV_VAR)):
        if candidate:
            code = candidate.strip().lower().split("-", 1)[0].split("_", 1)[0]
            if code in SUPPORTED_LOCALES:
                return code
    return DEFAULT_LOCALE
