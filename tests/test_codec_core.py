import pytest

from lh_bitstream import CompressedPayload, load_payload
from lh_codec_core import compress, compress_payload, decompress, decompress_payload
from lh_codec_errors import EmptyInputError, InvalidCodeError, MissingCodeError, SerializationError, TruncatedCodeError
from lh_huff_codes import is_prefix_free
from lh_token_strategies import (
    byte_freqs, byte_tokens, char_freqs, char_tokens, join_bytes, join_chars, join_words, word_freqs, word_tokens,
)


def many_lines(n):
    return [f"{i:05d} req id={i * 7919 % 1000} status={'ok' if i % 3 else 'fail'}" for i in range(n)]


def test_aabbc_roundtrip():
    blob = compress(["aabbc"], char_freqs, char_tokens)
    assert decompress(blob, join_chars) == ["aabbc"]


def test_aaab_uses_two_one_bit_codes():
    payload = compress_payload(["aaab"], char_freqs, char_tokens)
    assert {L for _, L in payload.codes.values()} == {1}
    assert payload.codes == {"b": (0, 1), "a": (1, 1)}
    assert payload.lines == ((4, bytes([0b11100000])),)
    assert decompress_payload(payload, join_chars) == ["aaab"]


def test_single_token_corpus():
    lines = ["aaaa", "", "aa"]
    payload = compress_payload(lines, char_freqs, char_tokens)
    assert payload.codes == {"a": (0, 1)}
    assert [nbits for nbits, _ in payload.lines] == [4, 0, 2]
    assert decompress_payload(payload, join_chars) == lines


@pytest.mark.parametrize("freqs,tokens,join", [
    (char_freqs, char_tokens, join_chars),
    (word_freqs, word_tokens, join_words),
    (byte_freqs, byte_tokens, join_bytes),
])
def test_roundtrip_strategies(log_lines, freqs, tokens, join):
    blob = compress(log_lines, freqs, tokens)
    assert decompress(blob, join) == log_lines


def test_payload_codes_are_prefix_free(log_lines):
    payload = compress_payload(log_lines, char_freqs, char_tokens)
    assert is_prefix_free(payload.codes)
    assert len(payload.lines) == len(log_lines)


def test_compress_is_deterministic(log_lines):
    assert compress(log_lines, word_freqs, word_tokens) == compress(log_lines, word_freqs, word_tokens)


def test_thread_pool_matches_sequential():
    lines = many_lines(400)
    seq = compress_payload(lines, char_freqs, char_tokens, workers=1)
    par = compress_payload(lines, char_freqs, char_tokens, workers=4, parallel_threshold=1)
    assert par == seq
    assert decompress_payload(par, join_chars, workers=4, parallel_threshold=1) == lines


def test_process_pool_roundtrip():
    lines = many_lines(300)
    blob = compress(lines, word_freqs, word_tokens, workers=2, executor="process",
                    parallel_threshold=1, chunksize=16)
    assert blob == compress(lines, word_freqs, word_tokens, workers=1)
    assert decompress(blob, join_words, workers=2, executor="process", parallel_threshold=1, chunksize=16) == lines


def test_default_executor_takes_lambdas_on_the_pool_path():
    lines = many_lines(64)
    payload = compress_payload(lines, lambda corpus: char_freqs(corpus), lambda line: iter(line),
                               workers=3, parallel_threshold=1)
    assert payload == compress_payload(lines, char_freqs, char_tokens, workers=1)
    assert decompress_payload(payload, lambda toks: "".join(toks), workers=3, parallel_threshold=1) == lines


def test_unknown_executor():
    with pytest.raises(ValueError):
        compress_payload(["abc"], char_freqs, char_tokens, executor="fiber")


def test_missing_code_names_token():
    with pytest.raises(MissingCodeError) as exc:
        compress_payload(["hello world"], char_freqs, word_tokens)
    assert exc.value.token == "hello"


def test_missing_code_from_thread_pool():
    lines = ["abc"] * 10 + ["abz"]

    def only_ab(corpus):
        return {"a": 1, "b": 1, "c": 1}

    with pytest.raises(MissingCodeError) as exc:
        compress_payload(lines, only_ab, char_tokens, workers=3, parallel_threshold=1)
    assert exc.value.token == "z"


def test_missing_code_from_process_pool():
    lines = ["héllo"] * 4

    def ascii_only(corpus):
        return {c: 1 for c in "hlo"}

    with pytest.raises(MissingCodeError) as exc:
        compress_payload(lines, ascii_only, char_tokens, workers=2, executor="process", parallel_threshold=1)
    assert exc.value.token == "é"


def test_empty_corpus():
    with pytest.raises(EmptyInputError):
        compress([], char_freqs, char_tokens)
    with pytest.raises(EmptyInputError):
        compress(["", ""], char_freqs, char_tokens)


def test_invalid_code_in_payload():
    payload = CompressedPayload(codes={"a": (0, 1)}, lines=((2, b"\x40"),))
    with pytest.raises(InvalidCodeError):
        decompress_payload(payload, join_chars)


def test_truncated_line_in_payload():
    payload = compress_payload(["abcd" * 3], char_freqs, char_tokens)
    nbits, data = payload.lines[0]
    cut = CompressedPayload(codes=payload.codes, lines=((nbits - 1, data),))
    with pytest.raises(TruncatedCodeError):
        decompress_payload(cut, join_chars)


def test_decompress_garbage():
    with pytest.raises(SerializationError):
        decompress(b"not a payload at all", join_chars)


def test_payload_survives_serialization(log_lines):
    payload = compress_payload(log_lines, byte_freqs, byte_tokens)
    blob = compress(log_lines, byte_freqs, byte_tokens)
    assert load_payload(blob) == payload
