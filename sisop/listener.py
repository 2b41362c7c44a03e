"""The receive loop that every module runs for each of its peers."""

from __future__ import annotations

import logging
import socket
from collections.abc import Callable, Mapping

from .protocol import OpCode, receive_operation

Handler = Callable[[socket.socket], None]

_IGNORED = frozenset({OpCode.MESSAGE, OpCode.PACKET})


def attend(
    sock: socket.socket,
    logger: logging.Logger,
    peer: str,
    handlers: Mapping[OpCode | int, Handler] | None = None,
) -> None:
    """Serve operations arriving on ``sock`` until the peer disconnects.

    ``handlers`` maps operation codes to callables taking the socket. Plain
    messages and packets without a handler are accepted and ignored; any
    other code is logged as unknown.
    """
    handlers = handlers or {}
    while True:
        op = receive_operation(sock)
        if op is None:
            logger.error("El %s se desconecto.", peer)
            logger.warning("Operacion desconocida de %s.", peer)
            return
        handler = handlers.get(op)
        if handler is not None:
            handler(sock)
        elif op not in _IGNORED:
            logger.warning("Operacion desconocida de %s.", peer)