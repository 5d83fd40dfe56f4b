from dataclasses import asdict, dataclass
from typing import Dict, List, Optional

import numpy as np
from loguru import logger

from src.app.selector.config import SelectorSettings, validate_saturation
from src.app.selector.coverage import CoverageState, mean_coverage
from src.app.selector.errors import InvalidInput
from src.app.selector.saturation import SaturationDetector
from src.app.selector.scheduler import LazyGreedyScheduler
from src.app.selector.similarity import EmbeddingMatrix, VectorBatch, as_array
from src.logging_setup import span


@dataclass
class SelectionResult:
    indices: List[int]
    gains: List[float]
    k: Optional[int] = None
    mode: str = "fixed"
    n: int = 0
    dim: int = 0
    saturated: bool = False
    cutoff_gain: Optional[float] = None
    evaluations: int = 0
    coverage: float = 0.0

    def to_dict(self) -> Dict:
        return asdict(self)


def check_k(k, n: int) -> Optional[int]:
    if k is None:
        return None
    if isinstance(k, bool) or not isinstance(k, (int, np.integer)) or k <= 0 or k > n:
        raise InvalidInput(f"Invalid k value: {k}. Must be between 1 and {n}")
    return int(k)


class Selector:
    """
    Picks a diverse subset of embeddings by lazy-greedy maximisation of
    facility-location coverage. With `k` the selection has exactly k items;
    without it, selection runs until the SaturationDetector says further picks
    add negligible coverage.

    Holds configuration only, so one instance can serve concurrent calls.
    """

    saturation_ratio: float
    saturation_window: int

    def __init__(self, saturation_ratio: Optional[float] = None, saturation_window: Optional[int] = None,
                 settings: Optional[SelectorSettings] = None):
        settings = settings or SelectorSettings.from_env()
        self.saturation_ratio = settings.saturation_ratio if saturation_ratio is None else saturation_ratio
        self.saturation_window = settings.saturation_window if saturation_window is None else saturation_window
        validate_saturation(self.saturation_ratio, self.saturation_window)

    def select(self, vectors: VectorBatch, k: Optional[int] = None) -> SelectionResult:
        rows = as_array(vectors)
        k = check_k(k, rows.shape[0])
        matrix = EmbeddingMatrix(rows)

        mode = "fixed" if k is not None else "auto"
        with span("select.run", n=matrix.n, dim=matrix.dim, k=k, mode=mode):
            state = CoverageState(matrix)
            scheduler = LazyGreedyScheduler(state)
            if k is not None:
                result = self._select_fixed(scheduler, k)
            else:
                result = self._select_auto(scheduler)

            result.mode = mode
            result.n, result.dim = matrix.n, matrix.dim
            result.evaluations = state.evaluations
            result.coverage = round(mean_coverage(result.gains, matrix.n), 6)
            logger.info("select.done", picked=len(result.indices), evaluations=result.evaluations,
                        saturated=result.saturated)
            return result

    def _select_fixed(self, scheduler: LazyGreedyScheduler, k: int) -> SelectionResult:
        picks = scheduler.select_k(k)
        return SelectionResult(
            indices=[i for i, _ in picks],
            gains=[g for _, g in picks],
            k=k,
        )

    def _select_auto(self, scheduler: LazyGreedyScheduler) -> SelectionResult:
        detector = SaturationDetector(self.saturation_ratio, self.saturation_window)
        picks = []
        for pick in scheduler:
            picks.append(pick)
            if detector.observe(pick[1]):
                break

        # candidates can run out with a saturated tail shorter than the window
        if detector.saturated_tail == 0:
            return SelectionResult(indices=[i for i, _ in picks], gains=[g for _, g in picks])

        kept = picks[:detector.kept]
        cutoff_gain = picks[detector.kept][1]
        logger.debug("saturation.cutoff", kept=len(kept), cutoff_gain=cutoff_gain,
                     threshold=detector.threshold)
        return SelectionResult(
            indices=[i for i, _ in kept],
            gains=[g for _, g in kept],
            saturated=True,
            cutoff_gain=cutoff_gain,
        )


def lazy_greedy_selection(vectors: VectorBatch, k: int) -> List[int]:
    """Indices of k diverse vectors in pick order."""
    if k is None:
        raise InvalidInput("k is required; use lazy_greedy_selection_with_saturation for automatic size")
    return Selector(settings=SelectorSettings()).select(vectors, k=k).indices


def lazy_greedy_selection_with_saturation(vectors: VectorBatch, ratio: Optional[float] = None,
                                          window: Optional[int] = None) -> Dict[str, List]:
    """Automatic-size selection; returns {"selected": [...], "values": [...]} with per-pick gains."""
    res = Selector(saturation_ratio=ratio, saturation_window=window, settings=SelectorSettings()).select(vectors)
    return {"selected": res.indices, "values": res.gains}
