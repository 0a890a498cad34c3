from __future__ import annotations

from typing import Callable, List, TypeVar

from gauqchem.errors import CountMismatch, MalformedToken

T = TypeVar("T", int, float)


def parse_nums(text: str, n: int, kind: Callable[[str], T]) -> List[T]:
    """
    Split ``text`` on whitespace and parse exactly ``n`` values of type ``kind``.

    Raises MalformedToken on the first token that does not parse and
    CountMismatch when the number of tokens is not ``n``.
    """
    out: List[T] = []
    for tok in text.split():
        # int()/float() accept digit separators ("1_0"); Gaussian never writes them
        if "_" in tok:
            raise MalformedToken(tok, getattr(kind, "__name__", str(kind)))
        try:
            out.append(kind(tok))
        except ValueError:
            raise MalformedToken(tok, getattr(kind, "__name__", str(kind))) from None

    if len(out) != n:
        raise CountMismatch(n, len(out))
    return out


def parse_int(text: str) -> int:
    return parse_nums(text, 1, int)[0]
