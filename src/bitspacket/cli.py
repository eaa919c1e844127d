from __future__ import annotations
import argparse, json, logging, sys, time
from pydantic import ValidationError
from .binary.errors import DecodeError
from .binary.reader import HexFormatError, load_bytes
from .config import MAX_DEPTH_CEILING, configure_logger, get_decode_limits

logger = logging.getLogger(__name__)

def _micros(start: float) -> int:
    return int((time.perf_counter() - start) * 1_000_000)

def cmd_solve(args):
    from .binary.reader import decode_evaluate, decode_version_sum

    now = time.perf_counter()
    data = load_bytes(args.input)
    print(f"Parse: (time: {_micros(now)}us)")

    now = time.perf_counter()
    result1 = decode_version_sum(data, limits=args.limits)
    print(f"Solution 1: {result1} (time: {_micros(now)}us)")

    now = time.perf_counter()
    result2 = decode_evaluate(data, limits=args.limits)
    print(f"Solution 2: {result2} (time: {_micros(now)}us)")

def cmd_info(args):
    data = load_bytes(args.input)

    # Fast path: counts only, no packet models
    if args.summary:
        from .binary.reader import summarize_transmission
        packets, literals, depth = summarize_transmission(data, limits=args.limits)
        print(f"packets={packets}, literals={literals}, depth={depth}")
        return

    from .models.transmission import Transmission
    t = Transmission.from_binary(data, limits=args.limits)
    print(json.dumps(t.model_dump(mode="json"), indent=2))

def cmd_plot(args):
    from .models.transmission import Transmission
    from .viz import plot_type_counts
    plot_type_counts(Transmission.from_binary(load_bytes(args.input), limits=args.limits))

def build_parser():
    p = argparse.ArgumentParser(prog="bitspacket", description="BITS packet decoder")
    p.add_argument("--log-level", default=None, help="Override LOG_LEVEL (DEBUG, INFO, ...)")
    p.add_argument("--max-depth", type=int, default=None, help="Maximum packet nesting depth (overrides BITS_MAX_DEPTH)")
    sub = p.add_subparsers(dest="cmd", required=True)

    sp = sub.add_parser("solve", help="print the version sum and the evaluated value, with timings")
    sp.add_argument("input", help="Text file holding the hex transmission")
    sp.set_defaults(func=cmd_solve)

    sp = sub.add_parser("info", help="print the packet tree as JSON or a fast summary")
    sp.add_argument("input", help="Text file holding the hex transmission")
    sp.add_argument("--summary", action="store_true", help="Print packet/literal counts and depth without building the tree")
    sp.set_defaults(func=cmd_info)

    sp = sub.add_parser("plot", help="bar chart of packets per type")
    sp.add_argument("input", help="Text file holding the hex transmission")
    sp.set_defaults(func=cmd_plot)

    return p

def main(argv=None):
    p = build_parser()
    ns = p.parse_args(argv)
    configure_logger(ns.log_level)
    try:
        ns.limits = get_decode_limits(ns.max_depth)
    except ValidationError:
        p.error(f"--max-depth must be between 1 and {MAX_DEPTH_CEILING}, got {ns.max_depth}")
    try:
        ns.func(ns)
    except (DecodeError, HexFormatError) as e:
        logger.debug("decode failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
