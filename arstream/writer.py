from __future__ import annotations

from typing import BinaryIO

from .constants import ARCHIVE_MAGIC, PAD_BYTE
from .errors import WriterStateError, WriteTooLongError
from .header import Header, pack_header


# Writer states
STATE_FRESH = 0
STATE_ENTRY_OPEN = 1
STATE_ERROR = 2


class ArchiveWriter:
    """Sequential writer for ar archives.

    Call ``write_magic_bytes()`` once, then for each member ``write_header()``
    followed by ``write()`` calls supplying exactly ``header.size`` bytes.
    The pad byte after odd-sized payloads is emitted automatically.

    The writer never closes ``stream``; ``close()`` only checks that the last
    member is complete and flushes.
    """

    def __init__(self, stream: BinaryIO):
        self.stream = stream
        self._remaining = 0
        self._pad = 0
        self._state = STATE_FRESH

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is None:
            self.close()

    @property
    def remaining(self) -> int:
        """Payload bytes still owed for the current member."""
        return self._remaining

    @property
    def state(self) -> int:
        return self._state

    def write_magic_bytes(self) -> None:
        self._write(ARCHIVE_MAGIC)

    def write_header(self, header: Header) -> None:
        """Write ``header`` and prepare to accept ``header.size`` payload bytes.

        Raises:
            WriterStateError: the previous member is incomplete, or an
                earlier write to the stream failed.
            FieldTooLargeError: a field does not fit its fixed-width slot.
        """
        self._check_usable()
        if self._state == STATE_ENTRY_OPEN and self._remaining:
            raise WriterStateError(f"Previous member has {self._remaining} unwritten bytes")
        record = pack_header(header)
        self._write(record)
        self._remaining = header.size
        self._pad = header.size % 2
        self._state = STATE_ENTRY_OPEN

    def write(self, data) -> int:
        """Write payload bytes for the current member.

        Raises WriteTooLongError, writing nothing, if ``data`` is longer than
        the bytes still owed for the member. Returns ``len(data)``; the pad
        byte is never counted.
        """
        self._check_usable()
        if self._state != STATE_ENTRY_OPEN:
            raise WriterStateError("No member header written")
        n = len(data)
        if n > self._remaining:
            raise WriteTooLongError(f"Write of {n} bytes exceeds the {self._remaining} bytes left in member")
        if n == 0:
            return 0
        if n == self._remaining and self._pad:
            data = bytes(data) + PAD_BYTE
        self._write(data)
        self._remaining -= n
        if not self._remaining:
            self._pad = 0
        return n

    def close(self) -> None:
        if self._state == STATE_ERROR:
            return
        if self._state == STATE_ENTRY_OPEN and self._remaining:
            raise WriterStateError(f"Last member has {self._remaining} unwritten bytes")
        flush = getattr(self.stream, "flush", None)
        if flush is not None:
            flush()

    def _check_usable(self) -> None:
        if self._state == STATE_ERROR:
            raise WriterStateError("Writer unusable after a failed stream write")

    def _write(self, data) -> None:
        # Raw streams and sockets may accept only part of the buffer
        view = memoryview(data).cast("B")
        try:
            while view:
                n = self.stream.write(view)
                if not n:
                    raise OSError("Stream accepted no bytes")
                view = view[n:]
        except OSError:
            self._state = STATE_ERROR
            raise
