import os
from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor
from functools import partial
from typing import Callable, Dict, Hashable, Iterable, List, Sequence

from lh_bitpack import BitReader, BitWriter, EncodedLine
from lh_bitstream import CompressedPayload, dump_payload, load_payload
from lh_codec_errors import MissingCodeError
from lh_huff_codes import build_decode_trie, decode_tokens, derive_codes
from lh_huff_tree import build_tree

# Below this many lines the per-line work runs on the calling thread.
PARALLEL_THRESHOLD = 2048
# Lines handed to a process worker per task; ignored by the thread pool.
DEFAULT_CHUNKSIZE = 64

FrequencyStrategy = Callable[[Sequence[str]], Dict[Hashable, int]]
Tokenizer = Callable[[str], Iterable[Hashable]]
InverseTokenizer = Callable[[List[Hashable]], str]


def _map_lines(fn, items: list, *, workers, executor, parallel_threshold, chunksize):
    """Apply fn to every item; results come back in input order."""
    if executor not in ("thread", "process"):
        raise ValueError(f"Unknown executor kind: {executor!r} (expected 'thread' or 'process')")
    workers = workers or os.cpu_count() or 1
    if workers <= 1 or len(items) < parallel_threshold:
        return [fn(x) for x in items]
    pool_cls = ThreadPoolExecutor if executor == "thread" else ProcessPoolExecutor
    with pool_cls(max_workers=workers) as pool:
        return list(pool.map(fn, items, chunksize=chunksize))


def _encode_line(line: str, *, tokenizer: Tokenizer, codes) -> EncodedLine:
    bw = BitWriter()
    for tok in tokenizer(line):
        try:
            code, L = codes[tok]
        except KeyError:
            raise MissingCodeError(tok) from None
        bw.write_code(code, L)
    return bw.finish()


def _decode_line(enc: EncodedLine, *, trie, inverse_tokenizer: InverseTokenizer) -> str:
    nbits, data = enc
    tokens = decode_tokens(trie, BitReader(data, limit=nbits), nbits)
    return inverse_tokenizer(tokens)


def compress_payload(lines: Sequence[str], frequency_strategy: FrequencyStrategy, tokenizer: Tokenizer, *,
                     workers: int = None, executor: str = "thread",
                     parallel_threshold: int = PARALLEL_THRESHOLD,
                     chunksize: int = DEFAULT_CHUNKSIZE) -> CompressedPayload:
    """
    executor="thread" (default) accepts any callable, lambdas included, but
    the per-line work is pure Python, so on a GIL build threads do not run it
    faster. Pass executor="process" with module-level (picklable) tokenizers
    to spread large corpora over CPU cores; the same holds for
    decompress_payload.

    Returns:
      CompressedPayload with one global code table and one EncodedLine per
      input line, in input order.
    """
    lines = list(lines)
    freqs = frequency_strategy(lines)
    codes = derive_codes(build_tree(freqs))

    encoded = _map_lines(
        partial(_encode_line, tokenizer=tokenizer, codes=codes), lines,
        workers=workers, executor=executor,
        parallel_threshold=parallel_threshold, chunksize=chunksize,
    )
    return CompressedPayload(codes=codes, lines=tuple(encoded))


def decompress_payload(payload: CompressedPayload, inverse_tokenizer: InverseTokenizer, *,
                       workers: int = None, executor: str = "thread",
                       parallel_threshold: int = PARALLEL_THRESHOLD,
                       chunksize: int = DEFAULT_CHUNKSIZE) -> List[str]:
    trie = build_decode_trie(payload.codes)
    return _map_lines(
        partial(_decode_line, trie=trie, inverse_tokenizer=inverse_tokenizer), list(payload.lines),
        workers=workers, executor=executor,
        parallel_threshold=parallel_threshold, chunksize=chunksize,
    )


def compress(lines: Sequence[str], frequency_strategy: FrequencyStrategy, tokenizer: Tokenizer, **options) -> bytes:
    return dump_payload(compress_payload(lines, frequency_strategy, tokenizer, **options))


def decompress(data: bytes, inverse_tokenizer: InverseTokenizer, **options) -> List[str]:
    return decompress_payload(load_payload(data), inverse_tokenizer, **options)
