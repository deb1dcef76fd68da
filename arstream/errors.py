class ArError(Exception):
    """Base class for ar archive errors."""


# Malformed input; a reader that raised one of these should be abandoned
class FormatError(ArError, ValueError):
    pass


class BadMagicError(FormatError):
    pass


class HeaderTerminatorError(FormatError):
    pass


class HeaderFieldError(FormatError):
    def __init__(self, field: str, raw: bytes):
        super().__init__(f"cannot parse header field {field!r}: {raw!r}")
        self.field = field
        self.raw = raw


class TruncatedArchiveError(FormatError, EOFError):
    def __init__(self, phase: str, expected: int, got: int):
        super().__init__(f"unexpected end of archive during {phase}: expected {expected} bytes, got {got}")
        self.phase = phase
        self.expected = expected
        self.got = got


# Caller errors
class WriteTooLongError(ArError):
    pass


class FieldTooLargeError(ArError, ValueError):
    def __init__(self, field: str, rendered: bytes, width: int):
        super().__init__(f"header field {field!r} does not fit in {width} bytes: {rendered!r}")
        self.field = field
        self.width = width


class WriterStateError(ArError):
    pass


class ReaderStateError(ArError):
    pass
