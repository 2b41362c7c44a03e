"""TCP helpers used to connect the modules to each other."""

from __future__ import annotations

import logging
import socket


def greet(who: str) -> None:
    """Print the start-up greeting of a module."""
    print(f"Hola desde {who}!!")


def create_connection(ip: str, port: str | int) -> socket.socket:
    """Connect to ``ip:port`` over IPv4 TCP and return the socket."""
    family, socktype, proto, _, address = socket.getaddrinfo(
        ip, port, socket.AF_INET, socket.SOCK_STREAM, 0, socket.AI_PASSIVE
    )[0]
    sock = socket.socket(family, socktype, proto)
    try:
        sock.connect(address)
    except OSError:
        sock.close()
        raise
    return sock


def start_server(
    port: str | int, logger: logging.Logger, server_name: str
) -> socket.socket:
    """Open a listening IPv4 TCP socket on ``port``."""
    family, socktype, proto, _, address = socket.getaddrinfo(
        None, port, socket.AF_INET, socket.SOCK_STREAM, 0, socket.AI_PASSIVE
    )[0]
    server = socket.socket(family, socktype, proto)
    try:
        server.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        server.bind(address)
        server.listen(socket.SOMAXCONN)
    except OSError:
        server.close()
        raise
    logger.info("Server %s escuchando en el puerto %s", server_name, port)
    return server


def wait_client(
    server: socket.socket, logger: logging.Logger, client_name: str
) -> socket.socket:
    """Accept one client on ``server`` and return its socket."""
    client, _ = server.accept()
    logger.info("Se conecto el cliente %s!", client_name)
    return client