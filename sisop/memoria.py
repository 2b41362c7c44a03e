"""The memory module: a server for the kernel and the CPU."""

from __future__ import annotations

import argparse
import logging
import socket
import sys
import threading
from dataclasses import dataclass

from .config import Config, ConfigError, create_logger
from .listener import attend
from .net import greet, start_server, wait_client
from .protocol import OpCode, ProtocolError, receive_buffer

DEFAULT_CONFIG = "memoria.config"
LOG_FILE = "memoria.log"
LOG_NAME = "MEMORIA_LOG"


@dataclass(frozen=True)
class MemoriaSettings:
    """Configuration values of the memory."""

    puerto_escucha: str
    tam_memoria: int
    tam_pagina: int
    entradas_por_tabla: int
    cantidad_niveles: int
    retardo_memoria: int
    path_swapfile: str
    retardo_swap: int
    dump_path: str

    @classmethod
    def from_config(cls, config: Config) -> "MemoriaSettings":
        return cls(
            puerto_escucha=config.string("PUERTO_ESCUCHA"),
            tam_memoria=config.integer("TAM_MEMORIA"),
            tam_pagina=config.integer("TAM_PAGINA"),
            entradas_por_tabla=config.integer("ENTRADAS_POR_TABLA"),
            cantidad_niveles=config.integer("CANTIDAD_NIVELES"),
            retardo_memoria=config.integer("RETARDO_MEMORIA"),
            path_swapfile=config.string("PATH_SWAPFILE"),
            retardo_swap=config.integer("RETARDO_SWAP"),
            dump_path=config.string("DUMP_PATH"),
        )

    def log(self, logger: logging.Logger) -> None:
        """Log every setting, one per line."""
        logger.info("PUERTO_ESCUCHA: %s", self.puerto_escucha)
        logger.info("TAM_MEMORIA: %d", self.tam_memoria)
        logger.info("TAM_PAGINA: %d", self.tam_pagina)
        logger.info("ENTRADAS_POR_TABLA: %d", self.entradas_por_tabla)
        logger.info("CANTIDAD_NIVELES: %d", self.cantidad_niveles)
        logger.info("RETARDO_MEMORIA: %d", self.retardo_memoria)
        logger.info("PATH_SWAPFILE: %s", self.path_swapfile)
        logger.info("RETARDO_SWAP: %d", self.retardo_swap)
        logger.info("DUMP_PATH: %s", self.dump_path)


@dataclass(frozen=True)
class _ProcessRequest:
    pid: int
    path: str
    size: int


def _receive_process_request(sock: socket.socket) -> _ProcessRequest:
    """Read a process creation payload: [int pid][string path][int size]."""
    buffer = receive_buffer(sock)
    pid = buffer.extract_int()
    path = buffer.extract_string()
    size = buffer.extract_int()
    return _ProcessRequest(pid=pid, path=path, size=size)


def attend_kernel(sock: socket.socket, logger: logging.Logger) -> None:
    """Serve the kernel until it disconnects."""

    def create_process(conn: socket.socket) -> None:
        logger.info("Recibi el mensaje de crear proceso.")
        try:
            request = _receive_process_request(conn)
        except (ProtocolError, OSError) as exc:
            logger.error("Mensaje de crear proceso invalido: %s", exc)
            return
        logger.info(
            "Crear proceso PID: %d - Path: %s - Tamanio: %d",
            request.pid,
            request.path,
            request.size,
        )

    attend(sock, logger, "KERNEL", {OpCode.CREATE_PROCESS: create_process})


def attend_cpu(sock: socket.socket, logger: logging.Logger) -> None:
    """Serve the CPU until it disconnects."""
    attend(sock, logger, "CPU")


def run(settings: MemoriaSettings, logger: logging.Logger) -> None:
    """Accept the kernel and then the CPU, serving both until the CPU leaves."""
    with start_server(settings.puerto_escucha, logger, "MEMORIA") as server:
        logger.info("Esperando conexion de KERNEL")
        kernel = wait_client(server, logger, "KERNEL")

        logger.info("Esperando conexion de CPU")
        cpu = wait_client(server, logger, "CPU")

    threading.Thread(
        target=attend_kernel, args=(kernel, logger), name="memoria-kernel", daemon=True
    ).start()
    attend_cpu(cpu, logger)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="memoria", description="Run the memory module.")
    parser.add_argument("config", nargs="?", default=DEFAULT_CONFIG)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    greet("memoria")
    try:
        logger = create_logger(LOG_FILE, LOG_NAME)
    except OSError as exc:
        print(f"No se pudo crear el log: {exc}", file=sys.stderr)
        return 1
    try:
        settings = MemoriaSettings.from_config(Config.load(args.config))
    except ConfigError as exc:
        print(exc, file=sys.stderr)
        return 1
    settings.log(logger)
    try:
        run(settings, logger)
    except OSError as exc:
        logger.error("Error de conexion: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())