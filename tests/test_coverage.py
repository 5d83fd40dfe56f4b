import numpy as np
import pytest

from src.app.selector.coverage import COVERAGE_FLOOR, CoverageState, mean_coverage
from src.app.selector.errors import InvalidInput
from src.app.selector.similarity import EmbeddingMatrix


def _state(vectors):
    return CoverageState(EmbeddingMatrix.from_vectors(vectors))


def test_initial_gain_is_raw_total_similarity_plus_n():
    st = _state([[1, 0], [1, 0], [0, 1]])
    # raw totals are 2, 2 and 1; every item starts at the -1 floor
    assert st.gain(0) == pytest.approx(5.0)
    assert st.gain(1) == pytest.approx(5.0)
    assert st.gain(2) == pytest.approx(4.0)
    assert st.evaluations == 3


def test_negative_similarity_counts_toward_initial_gain():
    st = _state([[1, 0], [-1, 0], [0, 1]])
    # raw totals: 1 + (-1) + 0 = 0 for the first two, 1 for the third
    assert st.gain(0) == pytest.approx(3.0)
    assert st.gain(2) == pytest.approx(4.0)


def test_accept_updates_best_similarity():
    st = _state([[1, 0], [1, 0], [0, 1]])
    assert st.accept(0) == pytest.approx(5.0)
    assert np.allclose(st.best_sim, [1.0, 1.0, 0.0])
    # the duplicate of a selected item covers nothing new
    assert st.gain(1) == pytest.approx(0.0)
    assert st.gain(2) == pytest.approx(1.0)
    assert st.selected == [0]
    assert st.is_selected(0) and not st.is_selected(2)


def test_accept_rejects_repeats_and_out_of_range():
    st = _state([[1, 0], [0, 1]])
    st.accept(1)
    with pytest.raises(InvalidInput):
        st.accept(1)
    with pytest.raises(InvalidInput):
        st.accept(5)


def test_gains_add_up_to_coverage():
    rng = np.random.default_rng(3)
    st = _state(rng.normal(size=(30, 8)))
    gains = [st.accept(i) for i in (4, 17, 9, 22)]
    assert sum(gains) == pytest.approx(st.best_sim.sum() - 30 * COVERAGE_FLOOR)
    assert mean_coverage(gains, 30) == pytest.approx(st.best_sim.mean())
    assert -1.0 <= mean_coverage(gains, 30) <= 1.0


def test_gain_never_grows_as_selection_grows():
    rng = np.random.default_rng(7)
    st = _state(rng.normal(size=(25, 5)))
    before = [st.gain(c) for c in range(25)]
    st.accept(0)
    st.accept(11)
    after = [st.gain(c) for c in range(25)]
    assert all(a <= b for a, b in zip(after, before))
