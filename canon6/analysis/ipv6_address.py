from functools import total_ordering

from canon6.analysis.ipv6_formatter import SEGMENT_COUNT, canonical_bytes, canonical_text

MAX_SEGMENT = 0xFFFF
PACKED_LENGTH = 16


class InvalidAddressError(ValueError):
    pass


@total_ordering
class IPv6Address:
    """
    Immutable IPv6 address made of 8 16-bit segments, most significant first.

    Construction is the only place segments are checked, so every instance
    can be handed to the formatter as is.
    """

    __slots__ = ("_segments",)

    UNSPECIFIED = None
    LOOPBACK = None

    def __init__(self, *segments):
        if len(segments) != SEGMENT_COUNT:
            raise InvalidAddressError(
                f"IPv6 address needs {SEGMENT_COUNT} segments, got {len(segments)}"
            )
        for index, segment in enumerate(segments):
            # bool is an int subclass but never a valid segment
            if not isinstance(segment, int) or isinstance(segment, bool):
                raise InvalidAddressError(
                    f"Segment {index} is not an integer: {segment!r}"
                )
            if not 0 <= segment <= MAX_SEGMENT:
                raise InvalidAddressError(
                    f"Segment {index} out of range 0-{MAX_SEGMENT:#x}: {segment}"
                )
        object.__setattr__(self, "_segments", tuple(segments))

    @classmethod
    def from_bytes(cls, packed):
        if not isinstance(packed, (bytes, bytearray, memoryview)):
            raise InvalidAddressError(f"Packed IPv6 address must be bytes, got {type(packed).__name__}")
        packed = bytes(packed)
        if len(packed) != PACKED_LENGTH:
            raise InvalidAddressError(
                f"Packed IPv6 address must be {PACKED_LENGTH} bytes, got {len(packed)}"
            )
        return cls(*(
            (packed[i] << 8) | packed[i + 1] for i in range(0, PACKED_LENGTH, 2)
        ))

    @classmethod
    def from_int(cls, value):
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidAddressError(f"Not an integer: {value!r}")
        if not 0 <= value < (1 << 128):
            raise InvalidAddressError(f"Value out of IPv6 range: {value}")
        return cls(*(
            (value >> shift) & MAX_SEGMENT for shift in range(112, -1, -16)
        ))

    @property
    def segments(self):
        return self._segments

    @property
    def packed(self):
        return b"".join(segment.to_bytes(2, "big") for segment in self._segments)

    def canonical_bytes(self):
        return canonical_bytes(self._segments)

    def canonical(self):
        return canonical_text(self._segments)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __int__(self):
        return int.from_bytes(self.packed, "big")

    def __str__(self):
        return self.canonical()

    def __repr__(self):
        return f"{type(self).__name__}('{self.canonical()}')"

    def __eq__(self, other):
        if not isinstance(other, IPv6Address):
            return NotImplemented
        return self._segments == other._segments

    def __lt__(self, other):
        if not isinstance(other, IPv6Address):
            return NotImplemented
        return self._segments < other._segments

    def __hash__(self):
        return hash(self._segments)


IPv6Address.UNSPECIFIED = IPv6Address(0, 0, 0, 0, 0, 0, 0, 0)
IPv6Address.LOOPBACK = IPv6Address(0, 0, 0, 0, 0, 0, 0, 1)
