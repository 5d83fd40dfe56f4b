import heapq
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from loguru import logger

from src.app.selector.coverage import CoverageState


@dataclass(order=True)
class PriorityEntry:
    # heapq is a min-heap: negated bound first, then the smaller index wins ties
    neg_bound: float
    index: int
    round: int = field(compare=False)


class LazyGreedyScheduler:
    """
    Lazy greedy (Minoux) over a CoverageState.

    Cached gains are upper bounds because marginal gains only shrink as the
    selection grows. An entry whose bound was computed in the current round is
    exact, so when it reaches the top of the heap it is the greedy pick.
    Produces the same sequence as evaluating every candidate each round.
    """

    state: CoverageState
    round: int
    recomputations: int

    def __init__(self, state: CoverageState):
        self.state = state
        self.round = 0
        self.recomputations = 0
        self._heap: Optional[List[PriorityEntry]] = None

    def _seed(self):
        # with nothing selected the gain is each candidate's raw total similarity plus n
        self.round = 1
        self._heap = [
            PriorityEntry(-self.state.gain(c), c, self.round)
            for c in range(self.state.n)
            if not self.state.is_selected(c)
        ]
        heapq.heapify(self._heap)

    def _accept(self, entry: PriorityEntry) -> Tuple[int, float]:
        gain = self.state.accept(entry.index)
        self.round += 1
        return entry.index, gain

    def next_pick(self) -> Optional[Tuple[int, float]]:
        """Return (index, marginal gain) of the next greedy pick, or None when exhausted."""
        if self._heap is None:
            self._seed()
        heap = self._heap

        while heap:
            top = heapq.heappop(heap)
            if top.round == self.round:
                return self._accept(top)

            fresh = PriorityEntry(-self.state.gain(top.index), top.index, self.round)
            self.recomputations += 1
            if not heap or fresh <= heap[0]:
                return self._accept(fresh)
            heapq.heappush(heap, fresh)
        return None

    def __iter__(self) -> Iterator[Tuple[int, float]]:
        while True:
            pick = self.next_pick()
            if pick is None:
                return
            yield pick

    def select_k(self, k: int) -> List[Tuple[int, float]]:
        picks: List[Tuple[int, float]] = []
        if k <= 0:
            return picks
        for pick in self:
            picks.append(pick)
            if len(picks) >= k:
                break
        logger.debug("lazy_greedy.done", picks=len(picks), recomputations=self.recomputations)
        return picks
