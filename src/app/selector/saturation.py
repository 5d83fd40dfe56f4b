from typing import List, Optional

from src.app.selector.config import SATURATION_RATIO, SATURATION_WINDOW, validate_saturation


class SaturationDetector:
    """
    Decides when automatic-size selection should stop.

    A pick is saturated when its gain falls below `ratio` times the first
    pick's gain. Selection stops once `window` consecutive picks are
    saturated; those trailing picks are not kept.
    """

    ratio: float
    window: int

    def __init__(self, ratio: float = SATURATION_RATIO, window: int = SATURATION_WINDOW):
        validate_saturation(ratio, window)
        self.ratio = float(ratio)
        self.window = int(window)
        self.gains: List[float] = []
        self.first_gain: Optional[float] = None
        self._run = 0

    @property
    def threshold(self) -> Optional[float]:
        if self.first_gain is None:
            return None
        return self.ratio * self.first_gain

    def is_saturated(self, gain: float) -> bool:
        t = self.threshold
        return t is not None and gain < t

    def observe(self, gain: float) -> bool:
        """Record the gain of the latest pick; True means stop."""
        if self.first_gain is None:
            self.first_gain = gain
        self.gains.append(gain)
        self._run = self._run + 1 if self.is_saturated(gain) else 0
        return self._run >= self.window

    @property
    def saturated_tail(self) -> int:
        """Number of trailing saturated picks."""
        return self._run

    @property
    def kept(self) -> int:
        return len(self.gains) - self._run
