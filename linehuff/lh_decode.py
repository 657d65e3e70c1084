import argparse
import os
import sys

from lh_bitstream import read_payload
from lh_codec_core import DEFAULT_CHUNKSIZE, PARALLEL_THRESHOLD, decompress_payload
from lh_token_strategies import STRATEGIES, get_strategy, strategy_name_for_id


def main(argv=None):
    ap = argparse.ArgumentParser(description="Restore a text file from a .lhuf container")
    ap.add_argument("--input", required=True, help="path to .lhuf container")
    ap.add_argument("--output", required=True, help="path to output text file")
    ap.add_argument("--tokens", choices=sorted(STRATEGIES), default=None,
                    help="override the token strategy recorded in the container")
    ap.add_argument("--workers", type=int, default=None)
    ap.add_argument("--executor", choices=["thread", "process"], default="process")
    ap.add_argument("--parallel-threshold", type=int, default=PARALLEL_THRESHOLD)
    ap.add_argument("--chunksize", type=int, default=DEFAULT_CHUNKSIZE)
    args = ap.parse_args(argv)

    try:
        with open(args.input, "rb") as f:
            payload = read_payload(f)
        strategy = get_strategy(args.tokens or strategy_name_for_id(payload.flags))
        lines = decompress_payload(
            payload, strategy.join,
            workers=args.workers, executor=args.executor,
            parallel_threshold=args.parallel_threshold, chunksize=args.chunksize,
        )
    except (TypeError, ValueError) as e:
        # CodecError is a ValueError; TypeError/UnicodeDecodeError come from an
        # inverse tokenizer handed tokens of another strategy
        print(f"[decode] error: {e}", file=sys.stderr)
        return 1

    os.makedirs(os.path.dirname(args.output) or ".", exist_ok=True)
    with open(args.output, "w", encoding="utf-8", newline="") as f:
        f.write("\n".join(lines))
    print(f"[decode] wrote {args.output} lines={len(lines)} distinct={len(payload.codes)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
