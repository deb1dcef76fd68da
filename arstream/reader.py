from __future__ import annotations

from typing import BinaryIO, Iterator, Optional

from .constants import ARCHIVE_MAGIC, DISCARD_BLOCK_SIZE, HEADER_SIZE
from .errors import (
    BadMagicError,
    FormatError,
    ReaderStateError,
    TruncatedArchiveError,
)
from .header import Header, unpack_header


def _read_full(f: BinaryIO, n: int) -> bytes:
    # Loop over short reads; returns fewer than n bytes only at end of stream
    parts = []
    got = 0
    while got < n:
        b = f.read(n - got)
        if not b:
            break
        parts.append(b)
        got += len(b)
    return b"".join(parts)


class ArchiveReader:
    """Sequential reader for ar archives.

    ``next()`` advances to the following member (including the first) and
    returns its :class:`Header`, or ``None`` once the archive is exhausted.
    The member's payload is then available through ``read``/``readinto``,
    which stop at the member boundary. Unread payload is skipped by the
    next call to ``next()``.

    The reader never seeks and never closes ``stream``. ``next()`` needs a
    blocking stream; ``read``/``readinto`` pass a non-blocking stream's None
    through.
    """

    def __init__(self, stream: BinaryIO):
        self.stream = stream
        self._remaining = 0
        self._pad = 0
        self._broken = False
        magic = _read_full(stream, len(ARCHIVE_MAGIC))
        if magic != ARCHIVE_MAGIC:
            raise BadMagicError(f"not an ar archive: expected magic {ARCHIVE_MAGIC!r}, got {magic!r}")

    def __iter__(self) -> Iterator[Header]:
        while True:
            header = self.next()
            if header is None:
                return
            yield header

    @property
    def remaining(self) -> int:
        """Unread payload bytes of the current member."""
        return self._remaining

    def next(self) -> Optional[Header]:
        """Advance to the next member.

        Returns:
            The member's header, or None when no bytes remain at a header
            boundary.

        Raises:
            FormatError: the archive is malformed or truncated. The reader
                cannot be used afterwards.
        """
        self._check_usable()
        try:
            self._skip_unread()
            buf = _read_full(self.stream, HEADER_SIZE)
            if not buf:
                return None
            header = unpack_header(buf)
        except FormatError:
            self._broken = True
            raise
        self._remaining = header.size
        self._pad = header.size % 2
        return header

    def readinto(self, buffer) -> Optional[int]:
        """Read payload of the current member into ``buffer``.

        Performs at most one underlying read of ``min(len(buffer),
        remaining)`` bytes and returns the count transferred. Returns 0 at
        the end of the member, and None when a non-blocking stream has no
        data available yet.
        """
        self._check_usable()
        view = memoryview(buffer).cast("B")
        n = min(len(view), self._remaining)
        if n == 0:
            return 0
        readinto = getattr(self.stream, "readinto", None)
        if readinto is not None:
            got = readinto(view[:n])
        else:
            data = self.stream.read(n)
            got = None if data is None else len(data)
            if got:
                view[:got] = data
        if got is None:
            return None
        if got == 0:
            self._fail_payload(n)
        self._remaining -= got
        return got

    def read(self, size: int = -1) -> Optional[bytes]:
        """Read payload of the current member.

        With a negative ``size`` the rest of the member is returned.
        Otherwise a single underlying read of at most ``size`` bytes is
        made. Returns ``b""`` at the end of the member, and None when a
        non-blocking stream has no data available yet.
        """
        self._check_usable()
        if size is None or size < 0:
            out = []
            while self._remaining:
                data = self.read(self._remaining)
                if data is None:
                    return b"".join(out) if out else None
                out.append(data)
            return b"".join(out)
        n = min(size, self._remaining)
        if n == 0:
            return b""
        data = self.stream.read(n)
        if data is None:
            return None
        if not data:
            self._fail_payload(n)
        self._remaining -= len(data)
        return data

    def _check_usable(self) -> None:
        if self._broken:
            raise ReaderStateError("Reader unusable after a format error")

    def _fail_payload(self, wanted: int):
        self._broken = True
        raise TruncatedArchiveError("payload read", wanted, 0)

    def _skip_unread(self) -> None:
        # Discard the rest of the current payload and its pad byte
        total = self._remaining + self._pad
        skipped = 0
        while skipped < total:
            b = self.stream.read(min(DISCARD_BLOCK_SIZE, total - skipped))
            if not b:
                raise TruncatedArchiveError("payload skip", total, skipped)
            skipped += len(b)
        self._remaining = 0
        self._pad = 0
