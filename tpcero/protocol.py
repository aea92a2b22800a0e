"""Wire format shared by the client and the server.

Every frame starts with two little-endian 32-bit integers, the operation
code and the payload size, followed by the payload. A package payload is
a sequence of values, each preceded by its own 32-bit length.
"""

from __future__ import annotations

import socket
import struct
from dataclasses import dataclass, field
from enum import IntEnum

_INT = struct.Struct("<i")


class OpCode(IntEnum):
    """Operation codes understood by the server."""

    MESSAGE = 0
    PACKAGE = 1


def _to_bytes(value: str | bytes | bytearray) -> bytes:
    """Strings travel as NUL-terminated UTF-8; bytes travel unchanged."""
    if isinstance(value, str):
        return value.encode("utf-8") + b"\0"
    return bytes(value)


@dataclass
class Packet:
    """A frame under construction: an operation code and its payload."""

    op_code: OpCode = OpCode.PACKAGE
    buffer: bytearray = field(default_factory=bytearray)

    def add(self, value: str | bytes | bytearray) -> None:
        """Append one length-prefixed value to the payload."""
        data = _to_bytes(value)
        self.buffer += _INT.pack(len(data))
        self.buffer += data

    def serialize(self) -> bytes:
        """Return the complete frame ready to be sent."""
        return _INT.pack(int(self.op_code)) + _INT.pack(len(self.buffer)) + bytes(self.buffer)


def encode_message(message: str | bytes) -> bytes:
    """Return the frame carrying a single text message."""
    return Packet(OpCode.MESSAGE, bytearray(_to_bytes(message))).serialize()


def _c_string(data: bytes) -> str:
    return data.split(b"\0", 1)[0].decode("utf-8", errors="replace")


def decode_values(payload: bytes) -> list[str]:
    """Split a package payload into its values.

    Raises ValueError when the payload is truncated or holds a negative length.
    """
    values: list[str] = []
    offset = 0
    end = len(payload)
    while offset < end:
        if offset + _INT.size > end:
            raise ValueError(f"truncated length prefix at offset {offset}")
        (size,) = _INT.unpack_from(payload, offset)
        offset += _INT.size
        if size < 0:
            raise ValueError(f"negative value length {size} at offset {offset}")
        if offset + size > end:
            raise ValueError(f"value of {size} bytes runs past the end of the payload")
        values.append(_c_string(payload[offset:offset + size]))
        offset += size
    return values


def recv_exact(sock: socket.socket, size: int) -> bytes:
    """Read exactly ``size`` bytes; raise ConnectionError if the peer closes first."""
    chunks: list[bytes] = []
    remaining = size
    while remaining > 0:
        data = sock.recv(remaining)
        if not data:
            raise ConnectionError(
                f"connection closed after {size - remaining} of {size} bytes"
            )
        chunks.append(data)
        remaining -= len(data)
    return b"".join(chunks)