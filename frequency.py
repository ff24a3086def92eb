from collections import Counter
from types import MappingProxyType
from typing import Iterable, Mapping, Tuple

#: Read-only mapping from byte value to its (positive) occurrence count.
FrequencyTable = Mapping[int, int]


def count_frequencies(data: bytes) -> FrequencyTable:
    """Count occurrences of every byte value in ``data``.

    Keys are ordered by ascending byte value, so iterating the table never
    depends on the order in which bytes first appeared.

    :param data: Input bytes.
    :type data: bytes
    :returns: Frozen frequency table; empty for empty input.
    :rtype: FrequencyTable
    """
    counts = Counter(data)
    return MappingProxyType({sym: counts[sym] for sym in sorted(counts)})


def frequency_table(pairs: Iterable[Tuple[int, int]]) -> FrequencyTable:
    """Freeze ``(symbol, count)`` pairs into a frequency table.

    :param pairs: Symbol/count pairs, in any order.
    :type pairs: Iterable[Tuple[int, int]]
    :returns: Frozen frequency table sorted by symbol.
    :rtype: FrequencyTable
    :raises ValueError: On a symbol outside ``0..255``, a non-positive
        count or a repeated symbol.
    """
    table = {}
    for symbol, count in pairs:
        if not 0 <= symbol <= 255:
            raise ValueError(f"Symbol out of byte range: {symbol}")
        if count <= 0:
            raise ValueError(f"Non-positive frequency {count} for symbol {symbol}")
        if symbol in table:
            raise ValueError(f"Duplicate symbol: {symbol}")
        table[symbol] = count
    return MappingProxyType({sym: table[sym] for sym in sorted(table)})


def total_symbols(table: FrequencyTable) -> int:
    """Return the number of symbols described by ``table``."""
    return sum(table.values())
