import argparse
import json
import pathlib
import time
from typing import Dict, Optional

import numpy as np

from src.app.selector.config import SelectorSettings
from src.app.selector.orchestrator import Selector
from src.eval.greedy_baseline import brute_force_greedy


def synthetic_clusters(n: int, d: int, clusters: int, spread: float = 0.05, seed: int = 0) -> np.ndarray:
    """n points scattered around `clusters` random unit centres."""
    rng = np.random.default_rng(seed)
    centres = rng.normal(size=(clusters, d))
    centres /= np.linalg.norm(centres, axis=1, keepdims=True)
    labels = rng.integers(0, clusters, size=n)
    return centres[labels] + spread * rng.normal(size=(n, d))


def evaluate(vectors, k: Optional[int] = None) -> Dict:
    """
    Compare lazy greedy against brute-force greedy on the same input.
    Without k, the automatic selection size is used for the comparison.
    """
    selector = Selector(settings=SelectorSettings())

    t0 = time.perf_counter()
    lazy = selector.select(vectors, k=k)
    lazy_ms = (time.perf_counter() - t0) * 1000.0

    k_eff = len(lazy.indices)
    t0 = time.perf_counter()
    ref_idx, ref_gains, ref_evals = brute_force_greedy(vectors, k_eff)
    ref_ms = (time.perf_counter() - t0) * 1000.0

    n = len(vectors)
    summary = {
        "n": n,
        "k": k,
        "selected": k_eff,
        "saturated": lazy.saturated,
        "same_selection": lazy.indices == ref_idx,
        "lazy_evaluations": lazy.evaluations,
        "brute_force_evaluations": ref_evals,
        "evaluation_ratio": round(lazy.evaluations / float(max(1, ref_evals)), 4),
        "lazy_objective": round(sum(lazy.gains), 6),
        "brute_force_objective": round(sum(ref_gains), 6),
        "lazy_ms": round(lazy_ms, 2),
        "brute_force_ms": round(ref_ms, 2),
    }
    return {"summary": summary, "lazy": lazy.to_dict(), "brute_force": {"indices": ref_idx, "gains": ref_gains}}


def main():
    ap = argparse.ArgumentParser(description="Compare lazy greedy selection with brute-force greedy")
    ap.add_argument("--input", default=None, help="JSON list of vectors; synthetic clusters when omitted")
    ap.add_argument("--k", type=int, default=None, help="Selection size; automatic when omitted")
    ap.add_argument("--n", type=int, default=500, help="Synthetic: number of vectors")
    ap.add_argument("--d", type=int, default=64, help="Synthetic: dimension")
    ap.add_argument("--clusters", type=int, default=12, help="Synthetic: number of clusters")
    ap.add_argument("--seed", type=int, default=0)
    ap.add_argument("--out", default="eval/selection_eval_report.json", help="JSON report path")
    args = ap.parse_args()

    if args.input:
        vectors = json.loads(pathlib.Path(args.input).read_text(encoding="utf-8"))
    else:
        vectors = synthetic_clusters(args.n, args.d, args.clusters, seed=args.seed).tolist()

    report = evaluate(vectors, k=args.k)

    s = report["summary"]
    print(f"Items:            {s['n']}")
    print(f"Selected:         {s['selected']} (saturated={s['saturated']})")
    print(f"Same selection:   {s['same_selection']}")
    print(f"Evaluations:      {s['lazy_evaluations']} lazy vs {s['brute_force_evaluations']} brute force ({s['evaluation_ratio']:.4f})")
    print(f"Objective:        {s['lazy_objective']:.4f} lazy vs {s['brute_force_objective']:.4f} brute force")
    print(f"Latency (ms):     {s['lazy_ms']:.2f} lazy vs {s['brute_force_ms']:.2f} brute force")

    out_path = pathlib.Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(json.dumps(report, ensure_ascii=False, indent=2), encoding="utf-8")
    print(f"\nWrote report to: {out_path}")

    if not s["same_selection"]:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
