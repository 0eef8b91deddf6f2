import heapq
import itertools
import math
from typing import Dict, Iterator, Optional, Tuple

BYTE_COUNTER_MAX = 255 # the 8-bit counter bound; pass as max_count to reproduce it


class HuffmanError(ValueError):
    pass

class InvalidInput(HuffmanError): # empty text, empty frequency table, counter bound exceeded
    pass

class CorruptData(HuffmanError): # bitstring does not line up with root-to-leaf paths
    pass


class HuffmanNode: # Node for Huffman tree
    __slots__ = ("symbol", "frequency", "left", "right")

    def __init__(self, symbol, frequency, left=None, right=None):
        self.symbol = symbol    # character or None
        self.frequency = frequency
        self.left = left
        self.right = right

    @property
    def is_leaf(self) -> bool:
        return self.symbol is not None

    def __eq__(self, other): # structural equality, two builds of the same text compare equal
        if not isinstance(other, HuffmanNode):
            return NotImplemented
        stack = [(self, other)]
        while stack:
            a, b = stack.pop()
            if a is None or b is None:
                if a is not b:
                    return False
                continue
            if a.symbol != b.symbol or a.frequency != b.frequency:
                return False
            stack.append((a.right, b.right))
            stack.append((a.left, b.left))
        return True

    __hash__ = None

    def __repr__(self): # one level deep, skewed trees can be thousands of nodes tall
        if self.is_leaf:
            return f"HuffmanNode({self.symbol!r}, {self.frequency})"
        return f"HuffmanNode(None, {self.frequency}, left={self.left.frequency}, right={self.right.frequency})"


def frequency_table(text: str, max_count: Optional[int] = None) -> Dict[str, int]: # max_count: optional counter bound
    ft: Dict[str, int] = {}
    for ch in text:
        ft[ch] = ft.get(ch, 0) + 1

    if max_count is not None:
        for ch, count in ft.items():
            if count > max_count:
                raise InvalidInput(f"frequency of {ch!r} is {count}, above the counter bound {max_count}")
    return ft

def build_huffman_tree(frequency_table: Dict[str, int]) -> HuffmanNode: # frequency_table: dict of symbol -> frequency
    if not frequency_table:
        raise InvalidInput("cannot build a Huffman tree over zero symbols")

    # Heap entries are (frequency, sequence, node); sequence breaks ties by insertion order
    sequence = itertools.count()
    priority_queue = []
    for symbol in sorted(frequency_table):
        frequency = frequency_table[symbol]
        if frequency <= 0:
            raise InvalidInput(f"frequency of {symbol!r} must be positive, got {frequency}")
        priority_queue.append((frequency, next(sequence), HuffmanNode(symbol, frequency)))
    heapq.heapify(priority_queue)

    # Build the tree
    while len(priority_queue) > 1:
        _, _, left = heapq.heappop(priority_queue)
        _, _, right = heapq.heappop(priority_queue)
        merged_node = HuffmanNode(None, left.frequency + right.frequency, left, right) # internal node with combined frequency
        heapq.heappush(priority_queue, (merged_node.frequency, next(sequence), merged_node))

    return priority_queue[0][2] # root of the tree

def generate_huffman_codes(root: HuffmanNode) -> Dict[str, str]: # root: root of the Huffman tree
    codes = {}
    if root.is_leaf:
        # Single symbol alphabet -> empty path, use "1" so it shows up in the bitstring
        codes[root.symbol] = "1"
        return codes

    # Explicit stack of (node, path so far); depth is bounded by the alphabet, not the recursion limit
    stack = [(root, '')]
    while stack:
        node, current_code = stack.pop()
        # Leaf node -> assign code
        if node.is_leaf:
            codes[node.symbol] = current_code
            continue

        stack.append((node.right, current_code + '1'))
        stack.append((node.left, current_code + '0'))

    return codes # return the mapping of symbols to their corresponding Huffman codes

def encode_with_codes(text: str, code_map: Dict[str, str]) -> str: # text: input to encode, code_map: dict of symbol -> Huffman code
    try:
        return ''.join(code_map[ch] for ch in text)
    except KeyError as exc:
        raise InvalidInput(f"symbol {exc.args[0]!r} has no code in the table") from None

def huffman_encode(text: str, max_count: Optional[int] = None) -> Tuple[str, HuffmanNode]:
    """
    Count, build the tree, derive codes and encode text
    Returns (bitstring, root); the root is the only key needed to decode
    """
    if not text:
        raise InvalidInput("cannot encode empty text")

    root = build_huffman_tree(frequency_table(text, max_count=max_count))
    code_map = generate_huffman_codes(root)
    return encode_with_codes(text, code_map), root

def huffman_decode(bitstring: str, root: HuffmanNode) -> str: # bitstring: the encoded string of '0's and '1's, root: root of the Huffman tree
    decoded = []

    if root.is_leaf:
        # Single symbol alphabet -> one '1' per occurrence
        for index, bit in enumerate(bitstring):
            if bit != '1':
                raise CorruptData(f"unexpected {bit!r} at bit {index} for a single-symbol tree")
            decoded.append(root.symbol)
        return ''.join(decoded)

    current_node = root
    for index, bit in enumerate(bitstring):
        if bit == '0':
            current_node = current_node.left
        elif bit == '1':
            current_node = current_node.right
        else:
            raise CorruptData(f"unexpected {bit!r} at bit {index}, expected '0' or '1'")

        if current_node.is_leaf: # reached a leaf
            decoded.append(current_node.symbol)
            current_node = root # reset to the root for the next symbol

    if current_node is not root:
        raise CorruptData(f"bitstring ends mid-code after {len(bitstring)} bits (truncated input)")

    return ''.join(decoded)


# Tree utilities

def iter_leaves(root: HuffmanNode) -> Iterator[HuffmanNode]: # leaves left to right
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_leaf:
            yield node
        else:
            stack.append(node.right)
            stack.append(node.left)

def code_lengths(root: HuffmanNode) -> Dict[str, int]:
    return {symbol: len(code) for symbol, code in generate_huffman_codes(root).items()}

def average_code_length(code_map: Dict[str, str], frequency_table: Dict[str, int]) -> float:
    total = sum(frequency_table.values())
    if total == 0:
        return 0.0
    return sum(len(code_map[s]) * f for s, f in frequency_table.items()) / total

def entropy(frequency_table: Dict[str, int]) -> float: # Shannon entropy in bits per symbol
    total = sum(frequency_table.values())
    if total == 0:
        return 0.0
    h = 0.0
    for f in frequency_table.values():
        p = f / total
        h -= p * math.log2(p)
    return h
