import os
from dataclasses import dataclass

from src.app.selector.errors import InvalidInput

# ---- Minimal knobs
SATURATION_RATIO = 0.05    # stop once a pick gains less than this fraction of the first pick
SATURATION_WINDOW = 1      # consecutive saturated picks needed before stopping
MAX_ITEMS = 10000          # request cap for the HTTP surface


def _env_number(name: str, default, cast):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        raise InvalidInput(f"{name} must be a {cast.__name__}, got {raw!r}")


def validate_saturation(ratio: float, window: int):
    if not (0.0 < float(ratio) <= 1.0):
        raise InvalidInput(f"Saturation ratio must be in (0, 1], got {ratio}")
    if isinstance(window, bool) or int(window) != window or window < 1:
        raise InvalidInput(f"Saturation window must be a positive integer, got {window}")


@dataclass(frozen=True)
class SelectorSettings:
    saturation_ratio: float = SATURATION_RATIO
    saturation_window: int = SATURATION_WINDOW
    max_items: int = MAX_ITEMS

    @classmethod
    def from_env(cls) -> "SelectorSettings":
        settings = cls(
            saturation_ratio=_env_number("SELECT_SATURATION_RATIO", SATURATION_RATIO, float),
            saturation_window=_env_number("SELECT_SATURATION_WINDOW", SATURATION_WINDOW, int),
            max_items=_env_number("SELECT_MAX_ITEMS", MAX_ITEMS, int),
        )
        validate_saturation(settings.saturation_ratio, settings.saturation_window)
        if settings.max_items < 1:
            raise InvalidInput(f"SELECT_MAX_ITEMS must be positive, got {settings.max_items}")
        return settings
