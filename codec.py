import os
import struct
from typing import Callable, Dict, NamedTuple, Optional, Tuple

from bitops import BitReader, BitWriter
from errors import (
    CorruptPayloadError,
    EmptyInputError,
    InputNotFoundError,
    InputUnreadableError,
    MalformedHeaderError,
    OutputWriteError,
)
from frequency import FrequencyTable, count_frequencies, frequency_table, total_symbols
from huffman import HuffmanNode, HuffmanTree

END_MARKER = b"--END HEADER--\n"  #: Terminates the frequency records
PROGRESS_STEP = 64 * 1024  #: Symbols between two progress callbacks

_COUNT = struct.Struct(">H")  # number of frequency records
_RECORD = struct.Struct(">BQ")  # symbol, frequency

ProgressCallback = Callable[[int, int], None]


class CodecResult(NamedTuple):
    """Outcome of a file-level encode or decode."""

    input_size: int
    output_size: int
    frequencies: FrequencyTable
    tree: HuffmanTree


class Inspection(NamedTuple):
    """Header-level view of an encoded stream, payload left undecoded."""

    frequencies: FrequencyTable
    codes: Dict[int, str]
    padding: int
    header_size: int
    payload_size: int


def write_header(frequencies: FrequencyTable) -> bytes:
    """Serialize a frequency table.

    Layout: entry count (uint16, big-endian), one ``symbol`` (uint8) +
    ``frequency`` (uint64, big-endian) record per entry in ascending symbol
    order, then :data:`END_MARKER`.

    :param frequencies: Table to serialize; must not be empty.
    :type frequencies: FrequencyTable
    :returns: Header bytes.
    :rtype: bytes
    """
    parts = [_COUNT.pack(len(frequencies))]
    for symbol in sorted(frequencies):
        parts.append(_RECORD.pack(symbol, frequencies[symbol]))
    parts.append(END_MARKER)
    return b"".join(parts)


def parse_header(blob: bytes) -> Tuple[FrequencyTable, int]:
    """Parse the frequency header at the start of ``blob``.

    :param blob: Encoded stream.
    :type blob: bytes
    :returns: The frequency table and the offset of the first byte after
        the end marker.
    :rtype: Tuple[FrequencyTable, int]
    :raises MalformedHeaderError: If the header is truncated, has an
        invalid entry count, zero frequencies, symbols out of order or no
        end marker.
    """
    if len(blob) < _COUNT.size:
        raise MalformedHeaderError("Header is truncated (missing entry count)")
    (count,) = _COUNT.unpack_from(blob, 0)
    if not 1 <= count <= 256:
        raise MalformedHeaderError(f"Invalid header entry count: {count}")

    start = _COUNT.size
    end = start + count * _RECORD.size
    if len(blob) < end:
        raise MalformedHeaderError(
            f"Header is truncated: expected {count} entries"
        )
    pairs = list(_RECORD.iter_unpack(blob[start:end]))

    for (prev, _), (cur, _) in zip(pairs, pairs[1:]):
        if cur <= prev:
            raise MalformedHeaderError(
                f"Header symbols not in ascending order at symbol {cur}"
            )
    try:
        frequencies = frequency_table(pairs)
    except ValueError as e:
        raise MalformedHeaderError(str(e)) from e

    if blob[end:end + len(END_MARKER)] != END_MARKER:
        raise MalformedHeaderError("Missing end-of-header marker")
    return frequencies, end + len(END_MARKER)


def _split_payload(blob: bytes, offset: int) -> Tuple[int, bytes]:
    """Return the padding-bit count and the packed payload after the header."""
    if offset >= len(blob):
        raise CorruptPayloadError("Missing padding byte after header")
    padding = blob[offset]
    if padding > 7:
        raise CorruptPayloadError(f"Padding bit count out of range: {padding}")
    return padding, blob[offset + 1:]


class HuffmanEncoder:
    """Encode one byte string into header + packed payload.

    :ivar frequencies: Frequency table of the last encoded input.
    :type frequencies: FrequencyTable | None
    :ivar tree: Huffman tree built for the last encoded input.
    :type tree: HuffmanTree | None
    """

    def __init__(self):
        self.frequencies: Optional[FrequencyTable] = None
        self.tree: Optional[HuffmanTree] = None

    @property
    def codes(self) -> Dict[int, str]:
        return self.tree.codes if self.tree is not None else {}

    def encode(
        self,
        data: bytes,
        on_progress: Optional[ProgressCallback] = None,
    ) -> bytes:
        """Compress ``data``.

        :param data: Input bytes to compress.
        :type data: bytes
        :param on_progress: Optional callback ``on_progress(done, total)``
                            reporting input bytes processed.
        :type on_progress: Optional[Callable[[int, int], None]]
        :returns: Header, padding byte and packed payload.
        :rtype: bytes
        :raises EmptyInputError: If ``data`` is empty.
        """
        if not data:
            raise EmptyInputError("Cannot encode empty input")

        self.frequencies = count_frequencies(data)
        self.tree = HuffmanTree()
        self.tree.build_from_frequencies(self.frequencies)

        lookup = {sym: self.tree.encode_symbol(sym) for sym in self.frequencies}
        output = BitWriter()
        total = len(data)
        for done, byte in enumerate(data, 1):
            code, code_len = lookup[byte]
            output.write_bits(code, code_len)
            if on_progress is not None and (done % PROGRESS_STEP == 0 or done == total):
                on_progress(done, total)

        payload = output.flush()
        return write_header(self.frequencies) + bytes([output.padding]) + payload


class HuffmanDecoder:
    """Decode a stream produced by :class:`HuffmanEncoder`.

    Nothing is returned unless the whole payload decodes: the stream must
    yield exactly as many symbols as the header counts and end on a code
    boundary.

    :ivar frequencies: Frequency table read from the last header.
    :type frequencies: FrequencyTable | None
    :ivar tree: Huffman tree rebuilt from that table.
    :type tree: HuffmanTree | None
    """

    def __init__(self):
        self.frequencies: Optional[FrequencyTable] = None
        self.tree: Optional[HuffmanTree] = None

    @property
    def codes(self) -> Dict[int, str]:
        return self.tree.codes if self.tree is not None else {}

    def decode(
        self,
        blob: bytes,
        on_progress: Optional[ProgressCallback] = None,
    ) -> bytes:
        """Decompress ``blob``.

        :param blob: Encoded stream.
        :type blob: bytes
        :param on_progress: Optional callback ``on_progress(done, total)``
                            reporting decoded symbols.
        :type on_progress: Optional[Callable[[int, int], None]]
        :returns: Original bytes.
        :rtype: bytes
        :raises MalformedHeaderError: If the header cannot be parsed.
        :raises CorruptPayloadError: If the payload does not decode to
            exactly the symbols the header describes.
        """
        self.frequencies, offset = parse_header(blob)
        self.tree = HuffmanTree()
        self.tree.build_from_frequencies(self.frequencies)

        padding, payload = _split_payload(blob, offset)
        try:
            reader = BitReader(payload, padding)
        except ValueError as e:
            raise CorruptPayloadError(str(e)) from e

        total = total_symbols(self.frequencies)
        output = bytearray()
        while len(output) < total:
            output.append(self._decode_symbol(reader, self.tree.root))
            done = len(output)
            if on_progress is not None and (done % PROGRESS_STEP == 0 or done == total):
                on_progress(done, total)

        if reader.bits_remaining:
            raise CorruptPayloadError(
                f"{reader.bits_remaining} unexpected bit(s) after the last symbol"
            )
        return bytes(output)

    @staticmethod
    def _decode_symbol(reader: BitReader, root: HuffmanNode) -> int:
        """Walk from ``root`` to a leaf, one bit per step.

        :param reader: Bit reader to consume bits from.
        :type reader: BitReader
        :param root: Root of the rebuilt tree.
        :type root: HuffmanNode
        :returns: Decoded symbol value.
        :rtype: int
        :raises CorruptPayloadError: If the bits run out before a leaf is
            reached, or a single-symbol stream contains a ``1`` bit.
        """
        node = root
        try:
            if node.is_leaf:
                if reader.read_bit():
                    raise CorruptPayloadError("Invalid code in single-symbol stream")
                return node.symbol
            while not node.is_leaf:
                node = node.right if reader.read_bit() else node.left
        except EOFError as e:
            raise CorruptPayloadError("Bitstream ends in the middle of a code") from e
        return node.symbol


def encode(data: bytes) -> bytes:
    return HuffmanEncoder().encode(data)


def decode(blob: bytes) -> bytes:
    return HuffmanDecoder().decode(blob)


def inspect(blob: bytes) -> Inspection:
    """Describe an encoded stream without decoding its payload.

    :param blob: Encoded stream.
    :type blob: bytes
    :returns: Header contents and payload sizes.
    :rtype: Inspection
    :raises MalformedHeaderError: If the header cannot be parsed.
    :raises CorruptPayloadError: If the padding byte is missing or invalid.
    """
    frequencies, offset = parse_header(blob)
    tree = HuffmanTree()
    tree.build_from_frequencies(frequencies)
    padding, payload = _split_payload(blob, offset)
    return Inspection(
        frequencies=frequencies,
        codes=tree.codes,
        padding=padding,
        header_size=offset,
        payload_size=len(payload),
    )


def read_input(path: str) -> bytes:
    """Read a whole input file.

    :param path: Input file path.
    :type path: str
    :returns: File contents.
    :rtype: bytes
    :raises InputNotFoundError: If ``path`` does not exist.
    :raises InputUnreadableError: If ``path`` cannot be opened or read.
    """
    if not os.path.exists(path):
        raise InputNotFoundError(f"Input file not found: {path}")
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise InputUnreadableError(
            f"Cannot read input file {path}: {e.strerror or e}"
        ) from e


def write_output(path: str, data: bytes) -> None:
    """Write ``data`` to ``path``, replacing any existing file.

    :raises OutputWriteError: If the file cannot be written.
    """
    try:
        with open(path, "wb") as f:
            f.write(data)
    except OSError as e:
        raise OutputWriteError(
            f"Cannot write output file {path}: {e.strerror or e}"
        ) from e


def encode_file(
    input_path: str,
    output_path: str,
    on_progress: Optional[ProgressCallback] = None,
) -> CodecResult:
    """Encode ``input_path`` into ``output_path``.

    The output file is only created once encoding has succeeded.

    :param input_path: File to compress.
    :type input_path: str
    :param output_path: Destination of the encoded stream.
    :type output_path: str
    :param on_progress: Optional progress callback, see
        :meth:`HuffmanEncoder.encode`.
    :type on_progress: Optional[Callable[[int, int], None]]
    :returns: Sizes, frequency table and tree of this run.
    :rtype: CodecResult
    """
    data = read_input(input_path)
    encoder = HuffmanEncoder()
    encoded = encoder.encode(data, on_progress=on_progress)
    write_output(output_path, encoded)
    return CodecResult(len(data), len(encoded), encoder.frequencies, encoder.tree)


def decode_file(
    input_path: str,
    output_path: str,
    on_progress: Optional[ProgressCallback] = None,
) -> CodecResult:
    """Decode ``input_path`` into ``output_path``.

    A malformed or corrupt input leaves ``output_path`` untouched.

    :param input_path: Encoded file.
    :type input_path: str
    :param output_path: Destination of the decoded bytes.
    :type output_path: str
    :param on_progress: Optional progress callback, see
        :meth:`HuffmanDecoder.decode`.
    :type on_progress: Optional[Callable[[int, int], None]]
    :returns: Sizes, frequency table and tree of this run.
    :rtype: CodecResult
    """
    blob = read_input(input_path)
    decoder = HuffmanDecoder()
    data = decoder.decode(blob, on_progress=on_progress)
    write_output(output_path, data)
    return CodecResult(len(blob), len(data), decoder.frequencies, decoder.tree)
