import heapq
from typing import Dict, List, Optional, Tuple

from frequency import FrequencyTable


class HuffmanNode:
    """Node of a binary Huffman tree.

    Nodes are never modified after construction; an internal node owns
    exactly two children.

    :ivar symbol: Byte value stored at a leaf; ``None`` for internal nodes.
    :type symbol: int | None
    :ivar freq: Frequency (weight) of the subtree rooted at this node.
    :type freq: int
    :ivar left: Left child node (``0`` bit).
    :type left: HuffmanNode | None
    :ivar right: Right child node (``1`` bit).
    :type right: HuffmanNode | None
    :ivar order: Tie-break key: the symbol for leaves, the creation
        sequence number for internal nodes.
    :type order: int
    """

    __slots__ = ("symbol", "freq", "left", "right", "order")

    def __init__(self, symbol=None, freq=0, left=None, right=None, order=0):
        """Create a Huffman node.

        :param symbol: Byte value for leaf nodes; ``None`` for internal nodes.
        :type symbol: int | None
        :param int freq: Frequency (weight) associated with this node.
        :param left: Left child node, if any.
        :type left: HuffmanNode|None
        :param right: Right child node, if any.
        :type right: HuffmanNode|None
        :param int order: Sequence number of an internal node; ignored for
            leaves, which are ordered by their symbol.
        :returns: None
        :rtype: None
        """
        self.symbol = symbol
        self.freq = freq
        self.left = left
        self.right = right
        self.order = symbol if symbol is not None else order

    @property
    def is_leaf(self) -> bool:
        return self.symbol is not None

    def sort_key(self) -> Tuple[int, int, int]:
        """Total order used by the priority queue.

        Lower frequency first; at equal frequency leaves come before
        internal nodes, leaves by ascending symbol and internal nodes by
        creation order.

        :returns: ``(freq, kind, order)`` with ``kind`` 0 for leaves.
        :rtype: Tuple[int, int, int]
        """
        return self.freq, 0 if self.is_leaf else 1, self.order

    def __lt__(self, other):
        """Order nodes for the priority queue.

        :param other: Another node to compare with.
        :type other: HuffmanNode
        :returns: ``True`` if this node sorts before ``other``.
        :rtype: bool
        """
        return self.sort_key() < other.sort_key()


class HuffmanTree:
    """Huffman tree and the prefix-code table derived from it.

    The same frequency table always produces the same tree, which is what
    lets the decoder rebuild the encoder's tree from the header alone.

    :ivar root: Root node; ``None`` until built.
    :type root: HuffmanNode | None
    :ivar codes: Mapping from symbol to its bit-string code.
    :type codes: Dict[int, str]
    """

    def __init__(self):
        self.root: Optional[HuffmanNode] = None
        self.codes: Dict[int, str] = {}

    def build_from_frequencies(self, frequencies: FrequencyTable):
        """Build the tree and code table from a symbol frequency table.

        :param frequencies: Mapping from symbol to observed frequency.
        :type frequencies: FrequencyTable
        :returns: None
        :rtype: None
        :raises ValueError: If ``frequencies`` is empty.
        """
        if not frequencies:
            raise ValueError("Cannot build a Huffman tree without symbols")

        heap = [HuffmanNode(symbol=sym, freq=freq) for sym, freq in frequencies.items()]
        heapq.heapify(heap)

        sequence = 0
        while len(heap) > 1:
            left = heapq.heappop(heap)
            right = heapq.heappop(heap)
            merged = HuffmanNode(
                freq=left.freq + right.freq, left=left, right=right, order=sequence
            )
            sequence += 1
            heapq.heappush(heap, merged)

        self.root = heap[0]
        self.codes = {}
        if self.root.is_leaf:
            # a zero-length code cannot be decoded
            self.codes[self.root.symbol] = "0"
        else:
            self._assign_codes(self.root, "")
        self.codes = {sym: self.codes[sym] for sym in sorted(self.codes)}

    def _assign_codes(self, node: HuffmanNode, prefix: str):
        """Record the code of every leaf below ``node``.

        :param node: Current node in the Huffman tree.
        :type node: HuffmanNode
        :param prefix: Bits accumulated on the path from the root.
        :type prefix: str
        :returns: None
        :rtype: None
        """
        if node.is_leaf:
            self.codes[node.symbol] = prefix
        else:
            self._assign_codes(node.left, prefix + "0")
            self._assign_codes(node.right, prefix + "1")

    @property
    def code_lengths(self) -> Dict[int, int]:
        return {sym: len(code) for sym, code in self.codes.items()}

    def encode_symbol(self, symbol: int) -> Tuple[int, int]:
        """Get the code for a symbol in the form the bit writer takes.

        :param symbol: Symbol to encode.
        :type symbol: int
        :returns: Tuple ``(code, length)``.
        :rtype: Tuple[int, int]
        :raises KeyError: If ``symbol`` has no code in this tree.
        """
        code = self.codes[symbol]
        return int(code, 2), len(code)

    def format_tree(self) -> List[str]:
        """Render the tree sideways, right subtree above left subtree.

        :returns: One line per node, indented by depth.
        :rtype: List[str]
        """
        lines: List[str] = []
        self._format_node(self.root, 0, lines)
        return lines

    def _format_node(self, node: Optional[HuffmanNode], indent: int, lines: List[str]):
        if node is None:
            return
        self._format_node(node.right, indent + 4, lines)
        if node.is_leaf:
            lines.append(" " * indent + f"{symbol_label(node.symbol)}: {node.freq}")
        else:
            lines.append(" " * indent + f"Node: {node.freq}")
        self._format_node(node.left, indent + 4, lines)


def symbol_label(symbol: int) -> str:
    """Printable label for a byte value: ``'a'`` or ``0x0a``."""
    if 0x21 <= symbol <= 0x7E:
        return f"'{chr(symbol)}'"
    return f"0x{symbol:02x}"
