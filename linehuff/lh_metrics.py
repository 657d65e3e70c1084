import numpy as np


def _aligned(freqs, codes):
    toks = list(freqs)
    f = np.array([freqs[t] for t in toks], dtype=np.float64)
    L = np.array([codes[t][1] for t in toks], dtype=np.float64)
    return f, L


def expected_code_length(freqs, codes) -> float:
    """Average bits per token, weighted by frequency."""
    f, L = _aligned(freqs, codes)
    total = f.sum()
    if total == 0:
        return 0.0
    return float(np.dot(f, L) / total)


def entropy(freqs) -> float:
    """Shannon entropy of the token distribution, bits per token."""
    f = np.array(list(freqs.values()), dtype=np.float64)
    f = f[f > 0]
    if f.size == 0:
        return 0.0
    p = f / f.sum()
    return float(-np.sum(p * np.log2(p)))


def kraft_sum(codes) -> float:
    L = np.array([L for _, L in codes.values()], dtype=np.float64)
    return float(np.sum(np.exp2(-L)))


def compression_ratio(original_bytes: int, compressed_bytes: int) -> float:
    if compressed_bytes == 0:
        return float("inf")
    return float(original_bytes) / float(compressed_bytes)
