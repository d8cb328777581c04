"""
SSH wire encoding helpers (RFC 4251 section 5).
"""

from __future__ import annotations

import struct

from sshare.common.exceptions import SshareError


class WireFormatError(SshareError):
    """Exception for truncated or malformed SSH wire data."""


def pack_uint32(value: int) -> bytes:
    return struct.pack(">I", value)


def pack_string(value: bytes) -> bytes:
    return pack_uint32(len(value)) + value


def read_uint32(data: bytes, offset: int) -> tuple[int, int]:
    """Read a big-endian uint32 at offset, returning it with the next offset."""
    if offset + 4 > len(data):
        msg = "truncated uint32"
        raise WireFormatError(msg)
    (value,) = struct.unpack_from(">I", data, offset)
    return value, offset + 4


def read_string(data: bytes, offset: int) -> tuple[bytes, int]:
    """Read a length-prefixed string at offset, returning it with the next offset."""
    length, offset = read_uint32(data, offset)
    end = offset + length
    if end > len(data):
        msg = f"truncated string: need {length} bytes, have {len(data) - offset}"
        raise WireFormatError(msg)
    return data[offset:end], end
