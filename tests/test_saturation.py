import pytest

from src.app.selector.errors import InvalidInput
from src.app.selector.saturation import SaturationDetector


@pytest.mark.parametrize("ratio,window", [(0.0, 1), (1.5, 1), (-0.1, 1), (float("nan"), 1), (0.1, 0), (0.1, 1.5), (0.1, True)])
def test_rejects_bad_configuration(ratio, window):
    with pytest.raises(InvalidInput):
        SaturationDetector(ratio, window)


def test_stops_at_first_gain_under_ratio():
    det = SaturationDetector(ratio=0.5, window=1)
    assert det.observe(10.0) is False
    assert det.observe(6.0) is False
    assert det.threshold == pytest.approx(5.0)
    assert det.observe(4.0) is True
    assert det.kept == 2
    assert det.saturated_tail == 1


def test_window_requires_consecutive_saturated_picks():
    det = SaturationDetector(ratio=0.5, window=2)
    assert det.observe(10.0) is False
    assert det.observe(4.0) is False
    assert det.observe(3.0) is True
    assert det.kept == 1
    assert det.gains == [10.0, 4.0, 3.0]


def test_first_pick_is_never_saturated():
    det = SaturationDetector(ratio=1.0, window=1)
    assert det.observe(5.0) is False
    assert det.observe(5.0) is False
    assert det.observe(4.999) is True
    assert det.kept == 2


def test_no_threshold_before_first_gain():
    det = SaturationDetector()
    assert det.threshold is None
    assert det.is_saturated(0.0) is False
