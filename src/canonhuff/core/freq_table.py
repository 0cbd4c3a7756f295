from __future__ import annotations

import heapq
from collections import Counter
from collections.abc import Sequence
from typing import List, Tuple

from canonhuff.core.tree import CodeTree, InternalNode, Leaf, Node
from canonhuff.errors import InternalInvariantViolation, InvalidArgument

BYTE_SYMBOLS = 256
EOF_SYMBOL = 256
SYMBOL_LIMIT = 257  # 256 byte + EOF


class FrequencyTable:
    """Histogram over symbols 0..size-1.

    Counts are plain ints, so they never overflow. There is no decrement.
    """

    def __init__(self, freqs: Sequence[int]) -> None:
        if len(freqs) < 2:
            raise InvalidArgument("servono almeno 2 simboli")
        if any(f < 0 for f in freqs):
            raise InvalidArgument("frequenza negativa")
        self._freqs: List[int] = [int(f) for f in freqs]

    @classmethod
    def zeros(cls, size: int = SYMBOL_LIMIT) -> "FrequencyTable":
        return cls([0] * size)

    @property
    def symbol_limit(self) -> int:
        return len(self._freqs)

    def _check(self, symbol: int) -> None:
        if symbol < 0 or symbol >= len(self._freqs):
            raise InvalidArgument(f"simbolo fuori range: {symbol}")

    def get(self, symbol: int) -> int:
        self._check(symbol)
        return self._freqs[symbol]

    def increment(self, symbol: int) -> None:
        self._check(symbol)
        self._freqs[symbol] += 1

    def count_bytes(self, chunk: bytes) -> None:
        """Count pass helper: increment every byte value seen in ``chunk``."""
        if self.symbol_limit < BYTE_SYMBOLS:
            for b in chunk:
                self.increment(b)
            return
        for b, n in Counter(chunk).items():
            self._freqs[b] += n

    def as_list(self) -> List[int]:
        return list(self._freqs)

    def build_code_tree(self) -> CodeTree:
        """Huffman construction, ties broken by the lowest symbol in each subtree.

        Entries are (frequency, lowest_symbol, node). Subtrees are disjoint, so
        lowest_symbol is unique across the heap and nodes are never compared.
        """
        pqueue: List[Tuple[int, int, Node]] = []

        for sym, f in enumerate(self._freqs):
            if f > 0:
                heapq.heappush(pqueue, (f, sym, Leaf(sym)))

        # Caso degenere: meno di 2 foglie => padding con simboli a frequenza 0
        for sym, f in enumerate(self._freqs):
            if len(pqueue) >= 2:
                break
            if f == 0:
                heapq.heappush(pqueue, (0, sym, Leaf(sym)))

        if len(pqueue) < 2:
            raise InternalInvariantViolation("meno di 2 simboli disponibili per l'albero")

        while len(pqueue) > 1:
            fx, lx, x = heapq.heappop(pqueue)
            fy, ly, y = heapq.heappop(pqueue)
            heapq.heappush(pqueue, (fx + fy, min(lx, ly), InternalNode(x, y)))

        root = pqueue[0][2]
        if not isinstance(root, InternalNode):
            raise InternalInvariantViolation("la radice non è un nodo interno")
        return CodeTree(root, len(self._freqs))
