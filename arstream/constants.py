import struct


# Archive magic, written once at the start of the stream
ARCHIVE_MAGIC = b"!<arch>\n"  # 8 bytes

# Per-entry header (fixed 60 bytes, ASCII, space padded)
# struct: 16s 12s 6s 6s 8s 10s 2s
#  - name[16]
#  - date[12]   decimal seconds since epoch
#  - uid[6]     decimal
#  - gid[6]     decimal
#  - mode[8]    octal
#  - size[10]   decimal payload length
#  - terminator[2] "`\n"
HEADER_STRUCT = struct.Struct("16s12s6s6s8s10s2s")
HEADER_SIZE = HEADER_STRUCT.size  # 60

HEADER_TERMINATOR = b"`\n"
PAD_BYTE = b"\n"
FIELD_FILL = b" "

# (field name, width, base); order matches HEADER_STRUCT minus the terminator
FIELD_LAYOUT = (
    ("name", 16, None),
    ("date", 12, 10),
    ("uid", 6, 10),
    ("gid", 6, 10),
    ("mode", 8, 8),
    ("size", 10, 10),
)

DEFAULT_MODE = 0o100644

# Block size used when skipping unread payload on non-seekable streams
DISCARD_BLOCK_SIZE = 65536
