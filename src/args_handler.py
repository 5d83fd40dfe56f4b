import argparse

def setup_args(argv=None):
    ap = argparse.ArgumentParser(description="Diverse subset selection over embedding vectors (lazy-greedy facility location)")
    sub = ap.add_subparsers(dest="cmd", required=True)

    ap_select = sub.add_parser("select", help="Select a diverse subset from a JSON file of vectors")
    ap_select.add_argument("--input", required=True, help="JSON file with vectors ('-' for stdin)")
    ap_select.add_argument("--k", type=int, default=None, help="Number of items; omit to stop at the saturation point")
    ap_select.add_argument("--ratio", type=float, default=None, help="Saturation gain ratio override (0, 1]")
    ap_select.add_argument("--window", type=int, default=None, help="Consecutive saturated picks before stopping")

    sub.add_parser("serve", help="Run the HTTP API")

    args = ap.parse_args(argv)
    return args
