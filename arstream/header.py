from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from .constants import (
    DEFAULT_MODE,
    FIELD_FILL,
    FIELD_LAYOUT,
    HEADER_SIZE,
    HEADER_STRUCT,
    HEADER_TERMINATOR,
)
from .errors import (
    FieldTooLargeError,
    HeaderFieldError,
    HeaderTerminatorError,
    TruncatedArchiveError,
)


_NAME_ENCODING = "utf-8"
_NAME_ERRORS = "surrogateescape"

_NUMBER_RE = {
    10: re.compile(rb"-?[0-9]+"),
    8: re.compile(rb"[0-7]+"),
}


@dataclass(frozen=True)
class Header:
    """Metadata record preceding each member of an ar archive.

    Trailing spaces in ``name`` cannot be told apart from field padding and
    are lost on a round trip.
    """

    name: str
    date: int = 0
    uid: int = 0
    gid: int = 0
    mode: int = DEFAULT_MODE
    size: int = 0

    @property
    def mtime(self) -> datetime:
        return datetime.fromtimestamp(self.date, tz=timezone.utc)

    @property
    def padded_size(self) -> int:
        """Bytes the payload occupies on the wire, including the pad byte."""
        return self.size + self.size % 2

    @classmethod
    def from_stat(cls, name: str, st, size: Optional[int] = None) -> "Header":
        """Build a header from an ``os.stat_result``.

        Args:
            name: Member name to record (at most 16 bytes once encoded).
            st: Result of ``os.stat``/``os.fstat`` for the member's source.
            size: Payload length override; defaults to ``st.st_size``.
        """
        return cls(
            name=name,
            date=int(st.st_mtime),
            uid=st.st_uid,
            gid=st.st_gid,
            mode=st.st_mode,
            size=st.st_size if size is None else size,
        )


def _pad_field(field: str, raw: bytes, width: int) -> bytes:
    if len(raw) > width:
        raise FieldTooLargeError(field, raw, width)
    return raw.ljust(width, FIELD_FILL)


def _render_number(field: str, value: int, width: int, base: int) -> bytes:
    if base == 8:
        raw = format(value, "o").encode("ascii")
    else:
        raw = str(value).encode("ascii")
    return _pad_field(field, raw, width)


def _parse_number(field: str, raw: bytes, base: int) -> int:
    digits = raw.rstrip(FIELD_FILL)
    if not _NUMBER_RE[base].fullmatch(digits):
        raise HeaderFieldError(field, raw)
    return int(digits, base)


def pack_header(header: Header) -> bytes:
    """Serialize ``header`` into its 60-byte on-disk record."""
    if not isinstance(header.name, str):
        raise TypeError(f"Header field 'name' must be str, got {type(header.name).__name__}")
    for field, _width, base in FIELD_LAYOUT:
        value = getattr(header, field)
        # bool is an int subclass but would render as "True"
        if base is not None and (isinstance(value, bool) or not isinstance(value, int)):
            raise TypeError(f"Header field {field!r} must be int, got {type(value).__name__}")
    if header.size < 0:
        raise ValueError("Header size must be non-negative")
    if header.mode < 0:
        raise ValueError("Header mode must be non-negative")
    fields = []
    for field, width, base in FIELD_LAYOUT:
        value = getattr(header, field)
        if base is None:
            fields.append(_pad_field(field, value.encode(_NAME_ENCODING, _NAME_ERRORS), width))
        else:
            fields.append(_render_number(field, value, width, base))
    return HEADER_STRUCT.pack(*fields, HEADER_TERMINATOR)


def unpack_header(buf: bytes) -> Header:
    """Parse a 60-byte header record.

    Raises:
        TruncatedArchiveError: ``buf`` is shorter than a full record.
        HeaderTerminatorError: bytes 58..59 are not the terminator.
        HeaderFieldError: a numeric field does not parse in its base.
    """
    if len(buf) != HEADER_SIZE:
        raise TruncatedArchiveError("header read", HEADER_SIZE, len(buf))
    *raw_fields, terminator = HEADER_STRUCT.unpack(buf)
    # Both terminator bytes must match
    if terminator != HEADER_TERMINATOR:
        raise HeaderTerminatorError(f"invalid header terminator: {terminator!r}")
    values = {}
    for (field, _width, base), raw in zip(FIELD_LAYOUT, raw_fields):
        if base is None:
            values[field] = raw.rstrip(FIELD_FILL).decode(_NAME_ENCODING, _NAME_ERRORS)
        else:
            values[field] = _parse_number(field, raw, base)
    if values["size"] < 0:
        raise HeaderFieldError("size", raw_fields[-1])
    return Header(**values)
