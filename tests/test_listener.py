import logging
import socket

import pytest

from sisop.listener import attend
from sisop.protocol import Buffer, OpCode, Packet, receive_buffer, send_packet


@pytest.fixture
def pair():
    left, right = socket.socketpair()
    yield left, right
    left.close()
    right.close()


def _messages(caplog, level):
    return [r.getMessage() for r in caplog.records if r.levelno == level]


def test_ignores_messages_and_stops_on_disconnect(pair, caplog):
    caplog.set_level(logging.INFO)
    left, right = pair
    send_packet(left, Packet(OpCode.MESSAGE))
    send_packet(left, Packet(OpCode.PACKET))
    left.close()
    attend(right, logging.getLogger("test.listener"), "CPU")
    assert _messages(caplog, logging.ERROR) == ["El CPU se desconecto."]
    assert _messages(caplog, logging.WARNING) == ["Operacion desconocida de CPU."]


def test_unknown_code_is_warned(pair, caplog):
    caplog.set_level(logging.INFO)
    left, right = pair
    send_packet(left, Packet(42))
    left.close()
    attend(right, logging.getLogger("test.listener"), "KERNEL")
    warnings = _messages(caplog, logging.WARNING)
    assert warnings.count("Operacion desconocida de KERNEL.") == 2


def test_handler_reads_payload(pair, caplog):
    caplog.set_level(logging.INFO)
    left, right = pair
    received = []

    def create_process(sock):
        buffer = receive_buffer(sock)
        received.append((buffer.extract_int(), buffer.extract_string()))

    buffer = Buffer()
    buffer.add_int(3)
    buffer.add_string("proceso")
    send_packet(left, Packet(OpCode.CREATE_PROCESS, buffer))
    left.close()
    attend(
        right,
        logging.getLogger("test.listener"),
        "KERNEL",
        {OpCode.CREATE_PROCESS: create_process},
    )
    assert received == [(3, "proceso")]
    assert _messages(caplog, logging.WARNING) == ["Operacion desconocida de KERNEL."]