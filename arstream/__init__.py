"""
arstream: sequential reader and writer for Unix ar archives

Handles the common ar subset used by Debian packages and similar formats:

- ``!<arch>\\n`` magic followed by 60-byte fixed-width member headers
- decimal date/uid/gid/size fields and an octal mode field, space padded
- a single ``\\n`` pad byte after odd-sized member payloads

Both directions work on any sequential binary stream (files, pipes, sockets,
``io.BytesIO``) without seeking. Extended name tables (GNU ``//`` and BSD
``#1/``) are not supported.
"""

__version__ = "0.1"

from .constants import ARCHIVE_MAGIC, HEADER_SIZE
from .errors import (
    ArError,
    FormatError,
    BadMagicError,
    HeaderTerminatorError,
    HeaderFieldError,
    TruncatedArchiveError,
    WriteTooLongError,
    FieldTooLargeError,
    WriterStateError,
    ReaderStateError,
)
from .header import Header, pack_header, unpack_header
from .reader import ArchiveReader
from .writer import ArchiveWriter

__all__ = [
    "ARCHIVE_MAGIC",
    "HEADER_SIZE",
    "ArError",
    "FormatError",
    "BadMagicError",
    "HeaderTerminatorError",
    "HeaderFieldError",
    "TruncatedArchiveError",
    "WriteTooLongError",
    "FieldTooLargeError",
    "WriterStateError",
    "ReaderStateError",
    "Header",
    "pack_header",
    "unpack_header",
    "ArchiveReader",
    "ArchiveWriter",
]
