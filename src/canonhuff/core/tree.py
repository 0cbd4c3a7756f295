from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from canonhuff.errors import InternalInvariantViolation, InvalidArgument

# -------------------
# Nodi dell'albero di Huffman
# -------------------
@dataclass(frozen=True, slots=True)
class Leaf:
    symbol: int

    def __post_init__(self) -> None:
        if self.symbol < 0:
            raise InvalidArgument(f"simbolo negativo per una foglia: {self.symbol}")


@dataclass(frozen=True, slots=True)
class InternalNode:
    left: "Node"
    right: "Node"


Node = Union[Leaf, InternalNode]

Code = Tuple[int, ...]


def iter_leaves(root: Node):
    """Yield (leaf, path) depth-first, left before right.

    Uses an explicit stack: skewed trees can reach depth ~256.
    """
    stack: List[Tuple[Node, Code]] = [(root, ())]
    while stack:
        node, path = stack.pop()
        if isinstance(node, InternalNode):
            # right pushed first => left visited first
            stack.append((node.right, path + (1,)))
            stack.append((node.left, path + (0,)))
        elif isinstance(node, Leaf):
            yield node, path
        else:
            raise InternalInvariantViolation(f"tipo di nodo illegale: {type(node).__name__}")


class CodeTree:
    """A Huffman tree plus the symbol -> bit path table derived from it.

    Bits are 0 for left and 1 for right. The table is built once at construction
    and is read-only afterwards.
    """

    def __init__(self, root: InternalNode, symbol_limit: int) -> None:
        if not isinstance(root, InternalNode):
            raise InvalidArgument("la radice deve essere un nodo interno")
        if symbol_limit < 2:
            raise InvalidArgument("servono almeno 2 simboli")
        self.root = root
        self.symbol_limit = symbol_limit
        self._codes: List[Optional[Code]] = [None] * symbol_limit
        for leaf, path in iter_leaves(root):
            if leaf.symbol >= symbol_limit:
                raise InvalidArgument(
                    f"simbolo {leaf.symbol} fuori range (symbol_limit={symbol_limit})"
                )
            self._codes[leaf.symbol] = path

    def get_code(self, symbol: int) -> Code:
        if symbol < 0 or symbol >= self.symbol_limit or self._codes[symbol] is None:
            raise InvalidArgument(f"codice assente o simbolo non valido: {symbol}")
        return self._codes[symbol]  # type: ignore[return-value]

    def has_code(self, symbol: int) -> bool:
        return 0 <= symbol < self.symbol_limit and self._codes[symbol] is not None

    def codes(self) -> dict[int, Code]:
        return {sym: c for sym, c in enumerate(self._codes) if c is not None}
