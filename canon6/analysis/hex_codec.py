# lowercase base16 alphabet
ENCODING_TABLE = b"0123456789abcdef"


def encode_nibble(nibble):
    return ENCODING_TABLE[nibble & 0x0F]


def encode_segment_into(buffer, value, suppress_leading_zeros=True):
    """
    Appends the hex digits of a 16-bit value to a bytearray

    - most significant nibble first
    - with suppress_leading_zeros the digits start at the first nonzero
      nibble, and zero is written as a single '0'
    """
    nibbles = (
        (value >> 12) & 0x0F,
        (value >> 8) & 0x0F,
        (value >> 4) & 0x0F,
        value & 0x0F,
    )

    start = 0
    if suppress_leading_zeros:
        # keep at least the last nibble so zero renders as '0'
        while start < 3 and nibbles[start] == 0:
            start += 1

    for nibble in nibbles[start:]:
        buffer.append(ENCODING_TABLE[nibble])
    return buffer


def encode_segment(value, suppress_leading_zeros=True):
    return bytes(encode_segment_into(bytearray(), value, suppress_leading_zeros))
