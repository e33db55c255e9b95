"""
RFC 5952 canonical text form of an IPv6 address

    4.1   leading zeros suppressed
    4.2   '::' replaces the longest run of zero segments (2 or more)
    4.2.3 the first run wins when two runs have the same length
    4.3   lowercase hex digits
"""
from collections import namedtuple

from canon6.analysis.hex_codec import encode_segment_into

ZeroRun = namedtuple("ZeroRun", ["start", "length"])

SEGMENT_COUNT = 8
# "ffff:ffff:ffff:ffff:ffff:ffff:ffff:ffff"
MAX_TEXT_LENGTH = 39
COLON = ord(":")


def find_longest_zero_run(segments):
    longest = ZeroRun(0, 0)
    current_start = 0
    current_length = 0

    for index, segment in enumerate(segments):
        if segment == 0:
            if current_length == 0:
                current_start = index
            current_length += 1
            # strictly greater, so an equal later run never replaces the first one
            if current_length > longest.length:
                longest = ZeroRun(current_start, current_length)
        else:
            current_length = 0

    return longest


def canonical_bytes(segments):
    run = find_longest_zero_run(segments)
    compress = run.length > 1
    run_end = run.start + run.length

    buffer = bytearray()

    after_compression = False
    for index, segment in enumerate(segments):
        if compress and run.start <= index < run_end:
            if index == run.start:
                buffer.append(COLON)
                buffer.append(COLON)
                after_compression = True
            continue

        if index > 0 and not after_compression:
            buffer.append(COLON)
        after_compression = False

        encode_segment_into(buffer, segment)

    return bytes(buffer)


def canonical_text(segments):
    # output alphabet is 0-9a-f and ':', always valid ascii
    return canonical_bytes(segments).decode("ascii")
