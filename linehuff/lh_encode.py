import argparse
import os
import sys
from dataclasses import replace

from lh_bitstream import write_payload
from lh_codec_core import DEFAULT_CHUNKSIZE, PARALLEL_THRESHOLD, compress_payload
from lh_codec_errors import CodecError
from lh_metrics import compression_ratio, entropy, expected_code_length
from lh_token_strategies import STRATEGIES, STRATEGY_IDS, get_strategy


def main(argv=None):
    ap = argparse.ArgumentParser(description="Huffman-compress a text file line by line")
    ap.add_argument("--input", required=True, help="path to UTF-8 text file")
    ap.add_argument("--output", required=True, help="path to .lhuf container")
    ap.add_argument("--tokens", choices=sorted(STRATEGIES), default="char", help="token strategy (default char)")
    ap.add_argument("--workers", type=int, default=None, help="worker count (default: cpu count)")
    ap.add_argument("--executor", choices=["thread", "process"], default="process")
    ap.add_argument("--parallel-threshold", type=int, default=PARALLEL_THRESHOLD,
                    help=f"parallelize from this many lines (default {PARALLEL_THRESHOLD})")
    ap.add_argument("--chunksize", type=int, default=DEFAULT_CHUNKSIZE)
    args = ap.parse_args(argv)

    strategy = get_strategy(args.tokens)
    with open(args.input, "r", encoding="utf-8", newline="") as f:
        lines = f.read().split("\n")

    try:
        payload = compress_payload(
            lines, strategy.freqs, strategy.tokenize,
            workers=args.workers, executor=args.executor,
            parallel_threshold=args.parallel_threshold, chunksize=args.chunksize,
        )
        payload = replace(payload, flags=STRATEGY_IDS[args.tokens])
        os.makedirs(os.path.dirname(args.output) or ".", exist_ok=True)
        with open(args.output, "wb") as f:
            write_payload(f, payload)
    except CodecError as e:
        print(f"[encode] error: {e}", file=sys.stderr)
        return 1

    freqs = strategy.freqs(lines)
    orig_size = os.path.getsize(args.input)
    comp_size = os.path.getsize(args.output)
    max_len = max(L for _, L in payload.codes.values())
    print(f"[encode] wrote {args.output}")
    print(f"[encode] lines={len(lines)} tokens={args.tokens} distinct={len(payload.codes)} max_codelen={max_len}")
    print(f"[encode] bits/token={expected_code_length(freqs, payload.codes):.4f} entropy={entropy(freqs):.4f}")
    print(f"[encode] {orig_size}B -> {comp_size}B ratio={compression_ratio(orig_size, comp_size):.3f}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
