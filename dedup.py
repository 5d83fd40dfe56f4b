# -----------------------------
# --------- DIVERSE SELECT CLI -
# -----------------------------
import json
import os
import sys

from dotenv import load_dotenv

from src.args_handler import setup_args
from src.logging_setup import setup_logging, span
from src.metrics_setup import init_metrics, record_selection, time_histogram
from src.app.selector.errors import SelectionError
from src.app.selector.loader import load_vectors
from src.app.selector.orchestrator import Selector


def run_select(args, METRICS) -> int:
    mode = "fixed" if args.k is not None else "auto"
    try:
        with span("cli.select", input=args.input, k=args.k):
            vectors = load_vectors(args.input)
            selector = Selector(saturation_ratio=args.ratio, saturation_window=args.window)
            with time_histogram(METRICS["select_latency_ms"], mode=mode):
                result = selector.select(vectors, k=args.k)
    except SelectionError as e:
        METRICS["invalid_requests_total"].add(1, attributes={"mode": mode})
        print(f"error: {e}", file=sys.stderr)
        return 2
    except OSError as e:
        print(f"error: cannot read {args.input}: {e}", file=sys.stderr)
        return 2

    record_selection(METRICS, result, mode=mode)
    print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    return 0


# -----------------------------
# --------------- MAIN --------
# -----------------------------
def main(argv=None) -> int:
    load_dotenv()
    args = setup_args(argv)
    # stdout carries the result
    setup_logging(app_name="diverse_select", level=os.getenv("LOG_LEVEL", "WARNING"), stream=sys.stderr)
    METRICS = init_metrics("diverse_select")

    if args.cmd == "select":
        return run_select(args, METRICS)
    elif args.cmd == "serve":
        from src.main import main as serve
        serve()
    return 0


if __name__ == "__main__":
    sys.exit(main())
