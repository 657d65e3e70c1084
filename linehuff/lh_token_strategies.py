import re
from collections import Counter
from typing import Callable, Dict, Iterable, List, NamedTuple, Sequence

# Words and the whitespace between them are both tokens, so joining restores the line.
_WORD_RE = re.compile(r"\s+|\S+")


def frequencies_from(tokenizer: Callable[[str], Iterable]) -> Callable[[Sequence[str]], Dict]:
    """Frequency strategy that counts whatever tokenizer yields over the corpus."""
    def count(lines: Sequence[str]) -> Dict:
        freqs = Counter()
        for line in lines:
            freqs.update(tokenizer(line))
        return dict(freqs)
    return count


def char_tokens(line: str) -> Iterable[str]:
    return iter(line)


def join_chars(tokens: List[str]) -> str:
    return "".join(tokens)


def word_tokens(line: str) -> Iterable[str]:
    return _WORD_RE.findall(line)


def join_words(tokens: List[str]) -> str:
    return "".join(tokens)


def byte_tokens(line: str) -> Iterable[int]:
    return line.encode("utf-8")


def join_bytes(tokens: List[int]) -> str:
    return bytes(tokens).decode("utf-8")


def char_freqs(lines: Sequence[str]) -> Dict[str, int]:
    freqs = Counter()
    for line in lines:
        freqs.update(line)
    return dict(freqs)


word_freqs = frequencies_from(word_tokens)
byte_freqs = frequencies_from(byte_tokens)


class Strategy(NamedTuple):
    freqs: Callable[[Sequence[str]], Dict]
    tokenize: Callable[[str], Iterable]
    join: Callable[[List], str]


STRATEGIES = {
    "char": Strategy(char_freqs, char_tokens, join_chars),
    "word": Strategy(word_freqs, word_tokens, join_words),
    "byte": Strategy(byte_freqs, byte_tokens, join_bytes),
}


def get_strategy(name: str) -> Strategy:
    try:
        return STRATEGIES[name]
    except KeyError:
        raise ValueError(f"Unknown token strategy: {name!r} (choose from {', '.join(sorted(STRATEGIES))})") from None


# Container flags byte; 0 means the encoder did not record a strategy.
STRATEGY_IDS = {"char": 1, "word": 2, "byte": 3}


def strategy_name_for_id(strategy_id: int) -> str:
    for name, i in STRATEGY_IDS.items():
        if i == strategy_id:
            return name
    raise ValueError(f"Container does not record a known token strategy (flags={strategy_id}); pass --tokens")
