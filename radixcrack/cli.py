# radixcrack/cli.py
# Command line front end. Prints one tab-separated line per N.

from __future__ import annotations
import argparse
import json
import logging
import sys

from .config import EXECUTORS, SearchConfig
from .errors import ConfigurationError
from .scoring import ScoringPolicy
from .search import SearchEngine, SearchResult


def format_result(res: SearchResult) -> str:
    if res.found:
        return f"{res.n}\tfactors\t{res.p}\t{res.q}\t{res.method}"
    return f"{res.n}\t{res.status.value}\tlevels={res.diagnostics.levels_explored}"


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="radixcrack", description="Digit-level beam search for N = P*Q")
    ap.add_argument("N", nargs="*", type=int, help="integers to factor (default: read stdin)")
    ap.add_argument("--radix", type=int, default=None)
    ap.add_argument("--epsilon", type=float, default=None, help="orbit slack")
    ap.add_argument("--width", type=int, default=None, help="base beam width")
    ap.add_argument("--scoring", choices=[p.value for p in ScoringPolicy], default=None)
    ap.add_argument("--adaptive", action="store_true", default=None, help="resize beam from rejection rate")
    ap.add_argument("--min-width", type=int, default=None)
    ap.add_argument("--max-width", type=int, default=None)
    ap.add_argument("--workers", type=int, default=None)
    ap.add_argument("--batch-size", type=int, default=None)
    ap.add_argument("--executor", choices=EXECUTORS, default=None)
    ap.add_argument("--max-levels", type=int, default=None)
    ap.add_argument("--no-peel", action="store_true", help="skip the radix-divisor trial division")
    ap.add_argument("--json", action="store_true", help="print full JSON results")
    ap.add_argument("-v", "--verbose", action="count", default=0)
    return ap


def _numbers(args):
    if args.N:
        yield from args.N
        return
    for line in sys.stdin:
        line = line.strip()
        if not line:
            continue
        try:
            yield int(line, 10)
        except ValueError:
            print(f"# skip: {line}", file=sys.stderr)
            yield None


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.WARNING - 10 * min(args.verbose, 2),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        cfg = SearchConfig.from_env(
            radix=args.radix, epsilon=args.epsilon, width=args.width, scoring=args.scoring,
            adaptive=args.adaptive, min_width=args.min_width, max_width=args.max_width,
            workers=args.workers, batch_size=args.batch_size, executor=args.executor,
            max_levels=args.max_levels, peel_radix_divisors=False if args.no_peel else None,
        )
        engine = SearchEngine(cfg)
    except ConfigurationError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    rc = 0
    for n in _numbers(args):
        if n is None or n < 0:
            rc |= 1
            continue
        res = engine.run(n)
        print(json.dumps(res.to_dict()) if args.json else format_result(res))
        if not res.found:
            rc |= 1
    return rc


if __name__ == "__main__":
    raise SystemExit(main())
