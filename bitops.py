class BitWriter:
    """Bit-packing writer.

    Accumulates individual bits into bytes and buffers them until
    flushed. Bits are packed most-significant first within each byte.

    :ivar buffer: Internal byte buffer holding fully written bytes.
    :type buffer: bytearray
    :ivar bit_buffer: 8-bit scratch register for accumulating pending bits.
    :type bit_buffer: int
    :ivar bit_count: Number of valid bits currently stored in ``bit_buffer`` (0-7).
    :type bit_count: int
    :ivar bit_length: Total number of bits written so far.
    :type bit_length: int
    """

    def __init__(self):
        """Initialize an empty bit writer.

        :returns: None
        :rtype: None
        """
        self.buffer = bytearray()
        self.bit_buffer = 0
        self.bit_count = 0
        self.bit_length = 0

    def write_bits(self, value: int, nbits: int):
        """Write the lowest ``nbits`` of ``value`` to the buffer, MSB first.

        :param value: Integer whose bits will be written.
        :type value: int
        :param nbits: Number of bits from ``value`` to write.
        :type nbits: int
        :returns: None
        :rtype: None
        """
        for i in range(nbits - 1, -1, -1):
            self.bit_buffer = (self.bit_buffer << 1) | ((value >> i) & 1)
            self.bit_count += 1
            if self.bit_count == 8:
                self.buffer.append(self.bit_buffer)
                self.bit_buffer = 0
                self.bit_count = 0
        self.bit_length += nbits

    def write_code(self, code: str):
        """Write a bit-string such as ``"0110"``.

        :param code: String made of ``"0"`` and ``"1"`` characters.
        :type code: str
        :returns: None
        :rtype: None
        :raises ValueError: If ``code`` contains anything but ``0``/``1``.
        """
        if code.strip("01"):
            raise ValueError(f"Not a bit string: {code!r}")
        if code:
            self.write_bits(int(code, 2), len(code))

    @property
    def padding(self) -> int:
        """Number of zero bits ``flush`` adds to complete the last byte."""
        return (8 - self.bit_length % 8) % 8

    def flush(self) -> bytes:
        """Flush remaining bits (if any) and return the full byte buffer.

        Any partial byte in ``bit_buffer`` is padded with zeros to complete the
        byte before being appended. ``bit_length`` and ``padding`` keep
        describing the data written before the flush.

        :returns: The accumulated bytes written so far.
        :rtype: bytes
        """
        if self.bit_count > 0:
            self.bit_buffer <<= (8 - self.bit_count)
            self.buffer.append(self.bit_buffer)
            self.bit_buffer = 0
            self.bit_count = 0
        return bytes(self.buffer)


class BitReader:
    """Bit-unpacking reader.

    Reads bits MSB-first from a bytes-like object, ignoring the last
    ``padding`` bits of the final byte.

    :ivar data: Input data to read bits from.
    :type data: bytes
    :ivar pos: Index of the next bit to read.
    :type pos: int
    :ivar bit_length: Number of readable bits (padding excluded).
    :type bit_length: int
    """

    def __init__(self, data: bytes, padding: int = 0):
        """Create a bit reader for the given input ``data``.

        :param data: Source data to read from.
        :type data: bytes
        :param padding: Number of trailing padding bits to drop (0-7).
        :type padding: int
        :returns: None
        :rtype: None
        :raises ValueError: If ``padding`` is outside ``0..7`` or longer
            than ``data``.
        """
        if not 0 <= padding <= 7:
            raise ValueError(f"Padding bit count out of range: {padding}")
        if padding > len(data) * 8:
            raise ValueError(
                f"Padding of {padding} bits exceeds {len(data)} byte(s) of data"
            )
        self.data = data
        self.pos = 0
        self.bit_length = len(data) * 8 - padding

    @property
    def bits_remaining(self) -> int:
        return self.bit_length - self.pos

    def read_bit(self) -> int:
        """Read a single bit.

        :returns: ``0`` or ``1``.
        :rtype: int
        :raises EOFError: If every readable bit has been consumed.
        """
        if self.pos >= self.bit_length:
            raise EOFError("Unexpected end of data")
        byte = self.data[self.pos >> 3]
        bit = (byte >> (7 - (self.pos & 7))) & 1
        self.pos += 1
        return bit

    def read_bits(self, nbits: int) -> int:
        """Read ``nbits`` bits from the stream and return them as an integer.

        Bits are returned MSB-first in the integer.

        :param nbits: Number of bits to read.
        :type nbits: int
        :returns: The integer value composed of the next ``nbits`` bits.
        :rtype: int
        :raises EOFError: If the end of data is reached before reading ``nbits``.
        """
        if nbits > self.bits_remaining:
            raise EOFError("Unexpected end of data")
        result = 0
        for _ in range(nbits):
            result = (result << 1) | self.read_bit()
        return result
