from typing import Sequence, Union

import numpy as np

from src.app.selector.errors import InvalidInput, NumericError

VectorBatch = Union[np.ndarray, Sequence[Sequence[float]]]


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine of the angle between two vectors, clipped to [-1, 1]."""
    va = np.asarray(a, dtype=np.float64).reshape(-1)
    vb = np.asarray(b, dtype=np.float64).reshape(-1)
    if va.shape != vb.shape:
        raise NumericError(f"Dimension mismatch: {va.shape[0]} vs {vb.shape[0]}")
    if not (np.isfinite(va).all() and np.isfinite(vb).all()):
        raise NumericError("Vectors contain non-finite values")
    na, nb = np.linalg.norm(va), np.linalg.norm(vb)
    if na == 0.0 or nb == 0.0 or not np.isfinite(na * nb):
        raise NumericError("Cosine similarity is undefined for zero-norm vectors")
    return float(np.clip((va @ vb) / (na * nb), -1.0, 1.0))


def as_array(vectors: VectorBatch) -> np.ndarray:
    """
    Shape-check a batch of vectors and return it as an (n, d) float64 array.
    Only structural problems are reported here (InvalidInput); the values
    themselves are checked by EmbeddingMatrix.
    """
    if vectors is None:
        raise InvalidInput("No vectors provided for selection")

    if isinstance(vectors, np.ndarray):
        arr = vectors
    else:
        try:
            rows = list(vectors)
        except TypeError:
            raise InvalidInput("Vectors must be a sequence of numeric sequences")
        if not rows:
            raise InvalidInput("No vectors provided for selection")
        try:
            dims = {len(r) for r in rows}
        except TypeError:
            raise InvalidInput("Every vector must be a sequence of numbers")
        if len(dims) > 1:
            raise InvalidInput(f"All vectors must share one dimension, got {sorted(dims)}")
        arr = rows

    try:
        arr = np.asarray(arr, dtype=np.float64)
    except (TypeError, ValueError):
        raise InvalidInput("Vectors must contain only numbers")

    if arr.ndim != 2:
        if arr.ndim == 1 and arr.shape[0] == 0:
            raise InvalidInput("No vectors provided for selection")
        raise InvalidInput(f"Expected a 2-D batch of vectors, got {arr.ndim} dimension(s)")
    n, d = arr.shape
    if n == 0:
        raise InvalidInput("No vectors provided for selection")
    if d == 0:
        raise InvalidInput("Vectors must have at least one dimension")
    return arr


class EmbeddingMatrix:
    """
    Validated, L2-normalised batch of embeddings. Pairwise similarities are
    produced one column at a time so an n x n matrix is never materialised.
    """

    n: int
    dim: int

    def __init__(self, rows: VectorBatch):
        rows = as_array(rows)

        finite = np.isfinite(rows).all(axis=1)
        if not finite.all():
            bad = int(np.flatnonzero(~finite)[0])
            raise NumericError(f"Vector {bad} contains non-finite values")

        norms = np.linalg.norm(rows, axis=1)
        degenerate = (norms == 0.0) | ~np.isfinite(norms)
        if degenerate.any():
            bad = int(np.flatnonzero(degenerate)[0])
            raise NumericError(f"Vector {bad} has zero norm")

        unit = rows / norms[:, None]
        unit.setflags(write=False)
        self._unit = unit
        self.n, self.dim = unit.shape

    @classmethod
    def from_vectors(cls, vectors: VectorBatch) -> "EmbeddingMatrix":
        return cls(vectors)

    def similarities(self, c: int) -> np.ndarray:
        # (n, d) @ (d,) -> (n,)
        col = self._unit @ self._unit[c]
        return np.clip(col, -1.0, 1.0, out=col)
