from typing import List, Set

import numpy as np

from src.app.selector.errors import InvalidInput
from src.app.selector.similarity import EmbeddingMatrix

# Cosine similarity is bounded below by -1, so every item starts there.
# With nothing selected the gain of c is its raw total similarity plus n.
COVERAGE_FLOOR = -1.0


class CoverageState:
    """
    Facility-location coverage for one selection call.

    f(S) = sum_i max(floor, max_{j in S} sim(i, j))

    best_sim[i] holds the inner max for item i so that the marginal gain of a
    candidate costs one similarity column, independent of |S|.
    """

    matrix: EmbeddingMatrix
    best_sim: np.ndarray
    selected: List[int]
    evaluations: int

    def __init__(self, matrix: EmbeddingMatrix):
        self.matrix = matrix
        self.best_sim = np.full(matrix.n, COVERAGE_FLOOR, dtype=np.float64)
        self.selected = []
        self._selected_set: Set[int] = set()
        self.evaluations = 0

    @property
    def n(self) -> int:
        return self.matrix.n

    def is_selected(self, c: int) -> bool:
        return c in self._selected_set

    def _gain_from(self, sims: np.ndarray) -> float:
        return float(np.maximum(sims - self.best_sim, 0.0).sum())

    def gain(self, c: int) -> float:
        """Marginal gain of adding c to the current selection."""
        self.evaluations += 1
        return self._gain_from(self.matrix.similarities(c))

    def accept(self, c: int) -> float:
        if c in self._selected_set:
            raise InvalidInput(f"Index {c} is already selected")
        if not 0 <= c < self.n:
            raise InvalidInput(f"Index {c} is out of range for {self.n} vectors")
        sims = self.matrix.similarities(c)
        gain = self._gain_from(sims)
        np.maximum(self.best_sim, sims, out=self.best_sim)
        self.selected.append(c)
        self._selected_set.add(c)
        return gain


def mean_coverage(gains: List[float], n: int) -> float:
    """Mean best similarity over all n items for a selection with these gains."""
    # f(S) - f(empty) is the sum of accepted gains, and f(empty) = n * floor
    return sum(gains) / float(n) + COVERAGE_FLOOR
