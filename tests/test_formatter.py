import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

import itertools
import re

import pytest

from canon6.analysis.ipv6_formatter import (
    MAX_TEXT_LENGTH,
    ZeroRun,
    canonical_bytes,
    canonical_text,
    find_longest_zero_run,
)


@pytest.mark.parametrize("segments, expected", [
    ((0x2001, 0x0db8, 0, 0, 0, 0, 0, 0x0001), "2001:db8::1"),
    ((0x2001, 0x0db8, 0, 0, 0, 0x0001, 0, 0x0001), "2001:db8::1:0:1"),
    ((0x2001, 0x0db8, 0, 0x0001, 0, 0x0002, 0, 0x0003), "2001:db8:0:1:0:2:0:3"),
    ((0x2001, 0, 0, 0x0001, 0, 0, 0x0001, 0x0001), "2001::1:0:0:1:1"),
    ((0, 0, 0, 0, 0, 0, 0, 0), "::"),
    ((0xffff,) * 8, "ffff:ffff:ffff:ffff:ffff:ffff:ffff:ffff"),
    ((0, 0, 0, 0, 0, 0, 0, 1), "::1"),
    ((0, 0, 0, 0, 0, 0xffff, 0xc000, 0x0201), "::ffff:c000:201"),
    ((0xfe80, 0, 0, 0, 0, 0, 0, 1), "fe80::1"),
    ((0xff02, 0, 0, 0, 0, 0, 0, 1), "ff02::1"),
    ((0, 0, 0, 1, 2, 3, 4, 5), "::1:2:3:4:5"),
    ((1, 2, 3, 4, 5, 0, 0, 0), "1:2:3:4:5::"),
    ((0x2001, 0x0db8, 0x0abc, 0x0def, 0, 0, 0, 1), "2001:db8:abc:def::1"),
    ((0x2001, 0x0db8, 1, 2, 3, 4, 5, 6), "2001:db8:1:2:3:4:5:6"),
    ((1, 0, 0, 2, 0, 0, 0, 3), "1:0:0:2::3"),
    ((0, 1, 2, 3, 4, 5, 6, 0), "0:1:2:3:4:5:6:0"),
])
def test_canonical_text(segments, expected):
    assert canonical_text(segments) == expected


def test_canonical_bytes_is_ascii():
    out = canonical_bytes((0x2001, 0x0db8, 0, 0, 0, 0, 0, 1))
    assert isinstance(out, bytes)
    assert out == b"2001:db8::1"


def test_deterministic():
    segments = (0x2001, 0x0db8, 0, 0, 0x00ff, 0, 0, 0xabcd)
    first = canonical_bytes(segments)
    assert all(canonical_bytes(segments) == first for _ in range(10))


def test_lowercase_only():
    text = canonical_text((0xABCD, 0xEF01, 0xDEAD, 0xBEEF, 0xCAFE, 0xF00D, 0xFACE, 0xB00C))
    assert text == "abcd:ef01:dead:beef:cafe:f00d:face:b00c"
    assert not re.search("[A-F]", text)


def test_leading_zeros_suppressed():
    text = canonical_text((0x0db8, 0x00ab, 0x000c, 0x0100, 1, 1, 1, 1))
    assert text == "db8:ab:c:100:1:1:1:1"
    for group in text.split(":"):
        assert group == "0" or not group.startswith("0")


def test_single_zeros_not_compressed():
    text = canonical_text((1, 0, 2, 0, 3, 0, 4, 0))
    assert "::" not in text
    assert text == "1:0:2:0:3:0:4:0"


def test_first_run_wins_on_tie():
    assert canonical_text((0, 0, 1, 1, 1, 1, 0, 0)) == "::1:1:1:1:0:0"
    assert canonical_text((1, 0, 0, 0, 1, 0, 0, 0)) == "1::1:0:0:0"


def test_no_zero_has_seven_separators():
    text = canonical_text((1, 2, 3, 4, 5, 6, 7, 8))
    assert "::" not in text
    assert text.count(":") == 7


def test_longest_output_fits_buffer_size():
    assert len(canonical_bytes((0xffff,) * 8)) == MAX_TEXT_LENGTH


def test_at_most_one_compression_for_all_zero_patterns():
    # every combination of zero / nonzero segments
    for mask in itertools.product((0, 0x10), repeat=8):
        text = canonical_text(mask)
        assert text.count("::") <= 1
        run = find_longest_zero_run(mask)
        assert ("::" in text) == (run.length > 1)


@pytest.mark.parametrize("segments, expected", [
    ((1, 2, 3, 4, 5, 6, 7, 8), ZeroRun(0, 0)),
    ((1, 0, 3, 4, 5, 6, 7, 8), ZeroRun(1, 1)),
    ((0, 0, 1, 0, 0, 0, 1, 1), ZeroRun(3, 3)),
    ((0, 0, 1, 0, 0, 1, 1, 1), ZeroRun(0, 2)),
    ((0,) * 8, ZeroRun(0, 8)),
])
def test_find_longest_zero_run(segments, expected):
    assert find_longest_zero_run(segments) == expected
