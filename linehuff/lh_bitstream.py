import struct
from dataclasses import dataclass
from typing import Dict, Hashable, Tuple

import msgpack

from lh_bitpack import EncodedLine
from lh_codec_errors import SerializationError

MAGIC = b"LHUF"
VERSION = 1

# Header (little-endian):
# magic(4) version(1) flags(1) body_len(u32)
# body: msgpack map {"codes": [[token, codelen, code_bytes], ...],
#                    "lines": [[nbits, data], ...]}
HDR_FMT = "<4sBBI"
HDR_SIZE = struct.calcsize(HDR_FMT)


@dataclass(frozen=True)
class CompressedPayload:
    codes: Dict[Hashable, Tuple[int, int]]
    lines: Tuple[EncodedLine, ...]
    flags: int = 0  # header byte; the CLI stores its token strategy id here


def _code_bytes(code: int, L: int) -> bytes:
    # code_int can outgrow msgpack's 64-bit ints on deep trees
    return code.to_bytes((L + 7) // 8, "big")


def dump_payload(payload: CompressedPayload) -> bytes:
    if not 0 <= payload.flags <= 0xFF:
        raise SerializationError(f"flags must fit in one byte, got {payload.flags}")
    body_obj = {
        "codes": [[tok, L, _code_bytes(code, L)] for tok, (code, L) in payload.codes.items()],
        "lines": [[nbits, bytes(data)] for nbits, data in payload.lines],
    }
    try:
        body = msgpack.packb(body_obj, use_bin_type=True)
    except (TypeError, ValueError, OverflowError) as e:
        raise SerializationError(f"Cannot serialize payload: {e}") from e
    return struct.pack(HDR_FMT, MAGIC, VERSION, payload.flags, len(body)) + body


def _parse_codes(entries):
    codes = {}
    for entry in entries:
        if not isinstance(entry, tuple) or len(entry) != 3:
            raise SerializationError("Malformed code table entry")
        tok, L, raw = entry
        if not isinstance(L, int) or isinstance(L, bool) or L < 1:
            raise SerializationError(f"Bad code length: {L!r}")
        if not isinstance(raw, bytes) or len(raw) != (L + 7) // 8:
            raise SerializationError(f"Bad code bytes for length {L}")
        try:
            if tok in codes:
                raise SerializationError(f"Duplicate token in code table: {tok!r}")
        except TypeError as e:
            raise SerializationError(f"Unhashable token in code table: {tok!r}") from e
        codes[tok] = (int.from_bytes(raw, "big"), L)
    return codes


def _parse_lines(entries):
    lines = []
    for entry in entries:
        if not isinstance(entry, tuple) or len(entry) != 2:
            raise SerializationError("Malformed line entry")
        nbits, data = entry
        if not isinstance(nbits, int) or isinstance(nbits, bool) or nbits < 0:
            raise SerializationError(f"Bad bit count: {nbits!r}")
        if not isinstance(data, bytes) or nbits > len(data) * 8:
            raise SerializationError(f"Line data too short for {nbits} bits")
        lines.append((nbits, data))
    return tuple(lines)


def load_payload(data: bytes) -> CompressedPayload:
    if len(data) < HDR_SIZE:
        raise SerializationError("Malformed stream: header too short")
    magic, ver, flags, body_len = struct.unpack(HDR_FMT, data[:HDR_SIZE])
    if magic != MAGIC:
        raise SerializationError("Bad magic number (not LHUF)")
    if ver != VERSION:
        raise SerializationError(f"Unsupported version: {ver}")
    body = data[HDR_SIZE:]
    if len(body) != body_len:
        raise SerializationError(f"Malformed stream: body is {len(body)} bytes, header says {body_len}")

    try:
        obj = msgpack.unpackb(body, raw=False, use_list=False, strict_map_key=False)
    except (ValueError, TypeError) as e:
        raise SerializationError(f"Cannot decode payload body: {e}") from e
    if not isinstance(obj, dict) or "codes" not in obj or "lines" not in obj:
        raise SerializationError("Payload body must be a map with 'codes' and 'lines'")
    if not isinstance(obj["codes"], tuple) or not isinstance(obj["lines"], tuple):
        raise SerializationError("'codes' and 'lines' must be arrays")
    return CompressedPayload(codes=_parse_codes(obj["codes"]), lines=_parse_lines(obj["lines"]), flags=flags)


def write_payload(f, payload: CompressedPayload):
    f.write(dump_payload(payload))


def read_payload(f) -> CompressedPayload:
    return load_payload(f.read())
