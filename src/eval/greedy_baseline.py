from typing import List, Tuple

from src.app.selector.coverage import CoverageState
from src.app.selector.similarity import EmbeddingMatrix, VectorBatch


def brute_force_greedy(vectors: VectorBatch, k: int) -> Tuple[List[int], List[float], int]:
    """
    Reference greedy: evaluates every remaining candidate in every round.
    Ties go to the smaller index. Returns (indices, gains, evaluations).
    """
    state = CoverageState(EmbeddingMatrix.from_vectors(vectors))
    picked: List[int] = []
    gains: List[float] = []
    for _ in range(min(k, state.n)):
        best_i, best_val = None, -1.0
        for i in range(state.n):
            if state.is_selected(i):
                continue
            val = state.gain(i)
            if val > best_val:
                best_val, best_i = val, i
        gains.append(state.accept(best_i))
        picked.append(best_i)
    return picked, gains, state.evaluations
