import numpy as np
import pytest

from src.app.selector.errors import InvalidInput, NumericError
from src.app.selector.similarity import EmbeddingMatrix, as_array, cosine_similarity


def test_cosine_similarity_basic_angles():
    assert cosine_similarity([1, 0], [1, 0]) == pytest.approx(1.0)
    assert cosine_similarity([1, 0], [0, 1]) == pytest.approx(0.0)
    assert cosine_similarity([1, 0], [-1, 0]) == pytest.approx(-1.0)
    # scale does not matter
    assert cosine_similarity([3, 4], [30, 40]) == pytest.approx(1.0)


def test_cosine_similarity_rejects_degenerate_vectors():
    with pytest.raises(NumericError):
        cosine_similarity([0, 0], [1, 0])
    with pytest.raises(NumericError):
        cosine_similarity([1, 0, 0], [1, 0])
    with pytest.raises(NumericError):
        cosine_similarity([float("nan"), 1], [1, 0])


@pytest.mark.parametrize("bad", [
    [],
    None,
    [[1, 0], [1]],          # ragged
    [[]],                   # d = 0
    [1, 2, 3],              # not a batch
    [["a", "b"]],
    np.zeros((0, 3)),
    np.zeros((2, 2, 2)),
])
def test_as_array_rejects_bad_shapes(bad):
    with pytest.raises(InvalidInput):
        as_array(bad)


def test_as_array_returns_float_matrix():
    arr = as_array([[1, 2], [3, 4]])
    assert arr.shape == (2, 2)
    assert arr.dtype == np.float64


def test_embedding_matrix_reports_offending_row():
    with pytest.raises(NumericError, match="Vector 1 has zero norm"):
        EmbeddingMatrix([[1, 0], [0, 0]])
    with pytest.raises(NumericError, match="Vector 0 contains non-finite"):
        EmbeddingMatrix([[float("inf"), 0], [0, 1]])


def test_embedding_matrix_similarity_column():
    m = EmbeddingMatrix.from_vectors([[1, 0], [2, 0], [0, 5], [-1, 0]])
    assert (m.n, m.dim) == (4, 2)
    col = m.similarities(0)
    assert col.shape == (4,)
    assert np.allclose(col, [1.0, 1.0, 0.0, -1.0])
    assert np.all(col <= 1.0) and np.all(col >= -1.0)


def test_embedding_matrix_leaves_input_untouched():
    src = np.array([[3.0, 4.0], [0.0, 2.0]])
    EmbeddingMatrix(src)
    assert np.array_equal(src, [[3.0, 4.0], [0.0, 2.0]])
