import pytest

from bitops import BitWriter, BitReader


def test_bitwriter_write_bits_and_flush_basic():
    bw = BitWriter()
    bw.write_bits(0b1010, 4)
    bw.write_bits(0b11110000, 8)
    assert bw.bit_length == 12
    assert bw.padding == 4
    out = bw.flush()
    assert isinstance(out, (bytes, bytearray))
    assert len(out) == 2
    assert out[0] == 0b10101111
    assert out[1] == 0b00000000


def test_bitwriter_write_code_strings():
    bw = BitWriter()
    for code in ["1", "01", "110"]:
        bw.write_code(code)
    assert bw.bit_length == 6
    assert bw.padding == 2
    assert bw.flush() == bytes([0b10111000])


def test_bitwriter_write_code_rejects_non_bits():
    bw = BitWriter()
    with pytest.raises(ValueError):
        bw.write_code("102")


def test_write_zero_bits_is_noop_and_no_padding_on_full_byte():
    bw = BitWriter()
    bw.write_bits(0xAA, 8)
    bw.write_bits(0, 0)
    assert bw.padding == 0
    out = bw.flush()
    assert out == bytes([0xAA])


def test_bitreader_read_bits_msb_first():
    data = bytes([0b11001010, 0xFF, 0x00])
    br = BitReader(data)
    assert br.read_bits(3) == 0b110
    assert br.read_bits(5) == 0b01010
    assert br.read_bits(8) == 0xFF
    assert br.bits_remaining == 8


def test_bitreader_drops_padding_bits():
    br = BitReader(bytes([0b10100000]), padding=5)
    assert br.bit_length == 3
    assert [br.read_bit() for _ in range(3)] == [1, 0, 1]
    with pytest.raises(EOFError):
        _ = br.read_bit()


def test_bitreader_eoferror_on_insufficient_bits():
    br = BitReader(b"\xF0")
    with pytest.raises(EOFError):
        _ = br.read_bits(9)


@pytest.mark.parametrize("padding", [-1, 8])
def test_bitreader_rejects_out_of_range_padding(padding):
    with pytest.raises(ValueError):
        _ = BitReader(b"\x00", padding=padding)


def test_bitreader_rejects_padding_longer_than_data():
    with pytest.raises(ValueError):
        _ = BitReader(b"", padding=3)
