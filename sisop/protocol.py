"""Wire protocol shared by every module: operation codes, buffers and packets.

A packet travels as ``[op_code][size][stream]`` where ``stream`` is a
sequence of ``[length][content]`` fields. Integers are 32-bit little-endian.
"""

from __future__ import annotations

import socket
import struct
from dataclasses import dataclass, field
from enum import IntEnum

_INT = struct.Struct("<i")
_UINT32 = struct.Struct("<I")


class OpCode(IntEnum):
    """Operation codes understood by the modules."""

    MESSAGE = 0
    PACKET = 1
    HANDSHAKE = 2
    HANDSHAKE_REPLY = 3
    CREATE_PROCESS = 4


class ProtocolError(Exception):
    """Raised when a buffer or a stream does not follow the protocol."""


@dataclass
class Buffer:
    """A growable payload made of length-prefixed fields."""

    stream: bytearray = field(default_factory=bytearray)

    def __post_init__(self) -> None:
        self.stream = bytearray(self.stream)

    @property
    def size(self) -> int:
        return len(self.stream)

    def __len__(self) -> int:
        return len(self.stream)

    def add_bytes(self, content: bytes) -> None:
        """Append ``content`` preceded by its length."""
        self.stream += _INT.pack(len(content))
        self.stream += content

    def add_int(self, value: int) -> None:
        self.add_bytes(_INT.pack(value))

    def add_uint32(self, value: int) -> None:
        self.add_bytes(_UINT32.pack(value))

    def add_string(self, value: str) -> None:
        """Append a string, NUL-terminated as it travels on the wire."""
        self.add_bytes(value.encode("utf-8") + b"\0")

    def extract_bytes(self) -> bytes:
        """Remove and return the first field of the buffer."""
        if not self.stream:
            raise ProtocolError("the buffer has no content")
        if len(self.stream) < _INT.size:
            raise ProtocolError("the buffer is too short to hold a field length")
        (length,) = _INT.unpack_from(self.stream)
        end = _INT.size + length
        if length < 0 or end > len(self.stream):
            raise ProtocolError(f"field of length {length} does not fit in the buffer")
        content = bytes(self.stream[_INT.size:end])
        del self.stream[:end]
        return content

    def _extract_fixed(self, layout: struct.Struct) -> int:
        content = self.extract_bytes()
        if len(content) != layout.size:
            raise ProtocolError(
                f"expected a field of {layout.size} bytes, got {len(content)}"
            )
        return layout.unpack(content)[0]

    def extract_int(self) -> int:
        return self._extract_fixed(_INT)

    def extract_uint32(self) -> int:
        return self._extract_fixed(_UINT32)

    def extract_string(self) -> str:
        content = self.extract_bytes()
        if content.endswith(b"\0"):
            content = content[:-1]
        return content.decode("utf-8")


@dataclass
class Packet:
    """An operation code together with its payload."""

    op_code: OpCode | int
    buffer: Buffer = field(default_factory=Buffer)

    def serialize(self) -> bytes:
        header = _INT.pack(int(self.op_code)) + _INT.pack(self.buffer.size)
        return header + bytes(self.buffer.stream)


def _recv_exact(sock: socket.socket, count: int) -> bytes:
    chunks = bytearray()
    while len(chunks) < count:
        chunk = sock.recv(count - len(chunks))
        if not chunk:
            break
        chunks += chunk
    return bytes(chunks)


def receive_operation(sock: socket.socket) -> OpCode | int | None:
    """Read the next operation code.

    Returns an ``OpCode`` for known codes and the bare integer otherwise.
    When the peer has gone away the socket is closed and ``None`` returned.
    """
    try:
        data = _recv_exact(sock, _INT.size)
    except OSError:
        data = b""
    if len(data) < _INT.size:
        print("Error al recibir el codigo de operacion")
        sock.close()
        return None
    (code,) = _INT.unpack(data)
    try:
        return OpCode(code)
    except ValueError:
        return code


def receive_buffer(sock: socket.socket) -> Buffer:
    """Read a ``[size][stream]`` payload from the socket."""
    header = _recv_exact(sock, _INT.size)
    if len(header) < _INT.size:
        raise ProtocolError("could not receive the size of the buffer")
    (size,) = _INT.unpack(header)
    if size < 0:
        raise ProtocolError(f"negative buffer size {size}")
    stream = _recv_exact(sock, size)
    if len(stream) < size:
        raise ProtocolError("could not receive the content of the buffer")
    return Buffer(stream)


def send_packet(sock: socket.socket, packet: Packet) -> None:
    """Send a whole packet through the socket."""
    sock.sendall(packet.serialize())