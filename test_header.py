from __future__ import annotations

import os
import unittest
from datetime import datetime, timezone

from arstream.constants import HEADER_SIZE
from arstream.errors import (
    FieldTooLargeError,
    FormatError,
    HeaderFieldError,
    HeaderTerminatorError,
    TruncatedArchiveError,
)
from arstream.header import Header, pack_header, unpack_header


def _record(name=b"a", date=b"0", uid=b"0", gid=b"0", mode=b"100644", size=b"0", term=b"`\n") -> bytes:
    return (
        name.ljust(16)
        + date.ljust(12)
        + uid.ljust(6)
        + gid.ljust(6)
        + mode.ljust(8)
        + size.ljust(10)
        + term
    )


class PackHeaderTests(unittest.TestCase):
    def test_layout_is_space_padded_fixed_width(self):
        h = Header(name="debian-binary", date=1650000000, uid=0, gid=0, mode=0o100644, size=4)
        raw = pack_header(h)
        self.assertEqual(len(raw), HEADER_SIZE)
        self.assertEqual(
            raw,
            b"debian-binary   "
            b"1650000000  "
            b"0     "
            b"0     "
            b"100644  "
            b"4         "
            b"`\n",
        )

    def test_mode_is_octal(self):
        raw = pack_header(Header(name="x", mode=0o755))
        self.assertEqual(raw[40:48], b"755     ")

    def test_widest_values_fit(self):
        h = Header(name="n" * 16, date=10**12 - 1, uid=999999, gid=999999, mode=0o77777777, size=10**10 - 1)
        raw = pack_header(h)
        self.assertEqual(len(raw), HEADER_SIZE)
        self.assertEqual(unpack_header(raw), h)

    def test_field_overflow_names_field(self):
        cases = [
            (Header(name="n" * 17), "name"),
            (Header(name="x", date=10**12), "date"),
            (Header(name="x", uid=10**6), "uid"),
            (Header(name="x", gid=10**6), "gid"),
            (Header(name="x", mode=0o777777777), "mode"),
            (Header(name="x", size=10**10), "size"),
        ]
        for h, field in cases:
            with self.assertRaises(FieldTooLargeError) as cm:
                pack_header(h)
            self.assertEqual(cm.exception.field, field)

    def test_multibyte_name_counts_encoded_bytes(self):
        # 9 characters, 18 bytes
        with self.assertRaises(FieldTooLargeError):
            pack_header(Header(name="é" * 9))
        raw = pack_header(Header(name="é" * 8))
        self.assertEqual(unpack_header(raw).name, "é" * 8)

    def test_non_int_numeric_fields_rejected(self):
        cases = [
            (Header(name="x", date=1650000000.5), "date"),
            (Header(name="x", uid=True), "uid"),
            (Header(name="x", gid=None), "gid"),
            (Header(name="x", mode="644"), "mode"),
            (Header(name="x", size=4.0), "size"),
        ]
        for h, field in cases:
            with self.assertRaises(TypeError) as cm:
                pack_header(h)
            self.assertIn(repr(field), str(cm.exception))

    def test_non_str_name_rejected(self):
        with self.assertRaises(TypeError):
            pack_header(Header(name=b"debian-binary"))

    def test_negative_size_or_mode_rejected(self):
        with self.assertRaises(ValueError):
            pack_header(Header(name="x", size=-1))
        with self.assertRaises(ValueError):
            pack_header(Header(name="x", mode=-1))


class UnpackHeaderTests(unittest.TestCase):
    def test_parses_fields(self):
        h = unpack_header(_record(name=b"control.tar.xz", date=b"1650000000", uid=b"1000", gid=b"100", size=b"6584"))
        self.assertEqual(h.name, "control.tar.xz")
        self.assertEqual(h.date, 1650000000)
        self.assertEqual(h.uid, 1000)
        self.assertEqual(h.gid, 100)
        self.assertEqual(h.mode, 33188)
        self.assertEqual(h.size, 6584)

    def test_short_record(self):
        with self.assertRaises(TruncatedArchiveError):
            unpack_header(_record()[:59])

    def test_terminator_both_bytes_checked(self):
        for term in (b"`x", b"x\n", b"\n`", b"  "):
            with self.assertRaises(HeaderTerminatorError):
                unpack_header(_record(term=term))

    def test_terminator_error_is_format_error(self):
        with self.assertRaises(FormatError):
            unpack_header(_record(term=b"``"))
        with self.assertRaises(ValueError):
            unpack_header(_record(term=b"``"))

    def test_bad_numeric_fields(self):
        cases = [
            ({"date": b"12ab"}, "date"),
            ({"uid": b"x"}, "uid"),
            ({"gid": b" 1"}, "gid"),
            ({"mode": b"100648"}, "mode"),
            ({"mode": b"-644"}, "mode"),
            ({"size": b""}, "size"),
            ({"size": b"-1"}, "size"),
            ({"size": b"1 2"}, "size"),
        ]
        for kwargs, field in cases:
            with self.assertRaises(HeaderFieldError) as cm:
                unpack_header(_record(**kwargs))
            self.assertEqual(cm.exception.field, field)

    def test_negative_date_allowed(self):
        self.assertEqual(unpack_header(_record(date=b"-86400")).date, -86400)

    def test_name_padding(self):
        self.assertEqual(unpack_header(_record(name=b"")).name, "")
        self.assertEqual(unpack_header(_record(name=b"0123456789abcdef")).name, "0123456789abcdef")
        self.assertEqual(unpack_header(_record(name=b"a b")).name, "a b")


class HeaderTests(unittest.TestCase):
    def test_name_roundtrip_edges(self):
        for name in ("", "0123456789abcdef", "data.tar.gz"):
            self.assertEqual(unpack_header(pack_header(Header(name=name))).name, name)

    def test_trailing_spaces_are_lost(self):
        self.assertEqual(unpack_header(pack_header(Header(name="abc  "))).name, "abc")

    def test_padded_size(self):
        self.assertEqual(Header(name="x", size=0).padded_size, 0)
        self.assertEqual(Header(name="x", size=5).padded_size, 6)
        self.assertEqual(Header(name="x", size=6).padded_size, 6)

    def test_mtime(self):
        h = Header(name="x", date=86400)
        self.assertEqual(h.mtime, datetime(1970, 1, 2, tzinfo=timezone.utc))

    def test_from_stat(self):
        st = os.stat_result((0o100755, 1, 2, 1, 1000, 1001, 42, 0, 1650000000, 0))
        h = Header.from_stat("tool", st)
        self.assertEqual(h, Header(name="tool", date=1650000000, uid=1000, gid=1001, mode=0o100755, size=42))
        self.assertEqual(Header.from_stat("tool", st, size=7).size, 7)

    def test_frozen(self):
        h = Header(name="x")
        with self.assertRaises(AttributeError):
            h.size = 3


if __name__ == "__main__":
    unittest.main()
