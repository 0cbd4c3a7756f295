"""Canonical Huffman code: length table <-> canonical tree.

A canonical code is fully described by one length per symbol (0 = unused).
``to_code_tree()`` rebuilds the tree from lengths alone, so the encoder only has
to ship the length table and the decoder derives the exact same bit patterns.

Reconstruction, for level i = max_len .. 0:
  - leaves of symbols with length i (i > 0), increasing symbol order
  - then the nodes carried from level i+1, paired left to right
After level 0 exactly one node (the root) must remain.
"""

from __future__ import annotations

from collections.abc import Sequence
from fractions import Fraction
from typing import List

from canonhuff.core.tree import CodeTree, InternalNode, Leaf, Node, iter_leaves
from canonhuff.errors import InternalInvariantViolation, InvalidArgument


class CanonicalCode:
    def __init__(self, code_lengths: Sequence[int]) -> None:
        if len(code_lengths) < 2:
            raise InvalidArgument("servono almeno 2 simboli")
        if any(n < 0 for n in code_lengths):
            raise InvalidArgument("lunghezza di codice negativa")
        self._lengths: List[int] = [int(n) for n in code_lengths]

    @classmethod
    def from_code_tree(cls, tree: CodeTree, symbol_limit: int) -> "CanonicalCode":
        """Each leaf's depth becomes its code length."""
        lengths = [0] * symbol_limit
        for leaf, path in iter_leaves(tree.root):
            if leaf.symbol >= symbol_limit:
                raise InvalidArgument(f"simbolo {leaf.symbol} oltre symbol_limit={symbol_limit}")
            lengths[leaf.symbol] = len(path)
        return cls(lengths)

    @property
    def symbol_limit(self) -> int:
        return len(self._lengths)

    @property
    def code_lengths(self) -> tuple[int, ...]:
        return tuple(self._lengths)

    def get_code_length(self, symbol: int) -> int:
        if symbol < 0 or symbol >= len(self._lengths):
            raise InvalidArgument(f"simbolo fuori range: {symbol}")
        return self._lengths[symbol]

    def kraft_sum(self) -> Fraction:
        """Exact sum of 2**-length over used symbols."""
        return sum((Fraction(1, 1 << n) for n in self._lengths if n > 0), Fraction(0))

    def is_complete(self) -> bool:
        return self.kraft_sum() == 1

    def to_code_tree(self) -> CodeTree:
        nodes: List[Node] = []
        for i in range(max(self._lengths), -1, -1):
            if len(nodes) % 2 != 0:
                raise InternalInvariantViolation(
                    f"violazione invarianti del codice canonico (livello {i + 1}: {len(nodes)} nodi)"
                )
            new_nodes: List[Node] = []
            if i > 0:
                new_nodes.extend(
                    Leaf(sym) for sym, n in enumerate(self._lengths) if n == i
                )
            for j in range(0, len(nodes), 2):
                new_nodes.append(InternalNode(nodes[j], nodes[j + 1]))
            nodes = new_nodes

        if len(nodes) != 1 or not isinstance(nodes[0], InternalNode):
            raise InternalInvariantViolation("violazione invarianti del codice canonico")
        return CodeTree(nodes[0], len(self._lengths))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CanonicalCode):
            return NotImplemented
        return self._lengths == other._lengths

    def __repr__(self) -> str:
        used = {s: n for s, n in enumerate(self._lengths) if n > 0}
        return f"CanonicalCode(symbol_limit={len(self._lengths)}, used={used})"
