from __future__ import annotations
from typing import Dict, Hashable, List, Tuple

from lh_codec_errors import InvalidCodeError, SerializationError, TruncatedCodeError
from lh_huff_tree import Leaf, Tree

Token = Hashable
Code = Tuple[int, int]  # (code_int, length), MSB = first bit on the wire


def derive_codes(tree: Tree) -> Dict[Token, Code]:
    """
    Walk the tree with an explicit stack; left edge = 0, right edge = 1.
    A tree that is a single leaf gets the 1-bit code "0".
    """
    if isinstance(tree, Leaf):
        return {tree.token: (0, 1)}

    codes: Dict[Token, Code] = {}
    stack = [(tree, 0, 0)]
    while stack:
        node, code, L = stack.pop()
        if isinstance(node, Leaf):
            codes[node.token] = (code, L)
        else:
            stack.append((node.left, code << 1, L + 1))
            stack.append((node.right, (code << 1) | 1, L + 1))
    return codes


def code_to_str(code: Code) -> str:
    value, L = code
    return format(value, f"0{L}b") if L else ""


def is_prefix_free(codes: Dict[Token, Code]) -> bool:
    # After sorting, a prefix always sorts immediately before some code it prefixes.
    words = sorted(code_to_str(c) for c in codes.values())
    return all(not b.startswith(a) for a, b in zip(words, words[1:]))


def build_decode_trie(codes: Dict[Token, Code]):
    """
    Binary trie for bits -> token. Edges are keyed 0/1, a terminal node
    holds the token under "sym".
    """
    root = {}
    for sym, (code, L) in codes.items():
        if L < 1:
            raise SerializationError(f"Code length must be >= 1, got {L} for {sym!r}")
        if code < 0 or code >> L:
            raise SerializationError(f"Code value {code} does not fit in {L} bits for {sym!r}")
        cur = root
        for i in range(L - 1, -1, -1):
            if "sym" in cur:
                raise SerializationError("Code table is not prefix-free")
            cur = cur.setdefault((code >> i) & 1, {})
        if cur:
            raise SerializationError("Code table is not prefix-free")
        cur["sym"] = sym
    return root


def decode_tokens(trie, reader, nbits: int) -> List[Token]:
    """
    Consume exactly nbits from reader, emitting a token every time a
    terminal is reached.
    """
    out = []
    cur = trie
    for pos in range(nbits):
        try:
            b = reader.read_bit()
        except EOFError as e:
            raise TruncatedCodeError(f"Bitstream ended at bit {pos} of {nbits}") from e
        nxt = cur.get(b)
        if nxt is None:
            raise InvalidCodeError(f"Bit {pos} does not continue any known code (corrupt stream or foreign code table)")
        if "sym" in nxt:
            out.append(nxt["sym"])
            cur = trie
        else:
            cur = nxt
    if cur is not trie:
        raise TruncatedCodeError(f"Line ends in the middle of a code after {nbits} bits")
    return out
