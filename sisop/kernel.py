"""The kernel module: connects to the memory and serves CPU and IO."""

from __future__ import annotations

import argparse
import logging
import sys
import threading
from contextlib import ExitStack
from dataclasses import dataclass

from .config import Config, ConfigError, create_logger
from .listener import attend
from .net import create_connection, greet, start_server, wait_client

DEFAULT_CONFIG = "kernel.config"
LOG_FILE = "kernel.log"
LOG_NAME = "KERNEL_LOG"


@dataclass(frozen=True)
class KernelSettings:
    """Configuration values of the kernel."""

    ip_memoria: str
    puerto_memoria: str
    puerto_escucha_dispatch: str
    puerto_escucha_interrupt: str
    puerto_escucha_io: str
    algoritmo_corto_plazo: str
    algoritmo_ingreso_a_ready: str
    alfa: float
    tiempo_suspension: int
    log_level: str

    @classmethod
    def from_config(cls, config: Config) -> "KernelSettings":
        return cls(
            ip_memoria=config.string("IP_MEMORIA"),
            puerto_memoria=config.string("PUERTO_MEMORIA"),
            puerto_escucha_dispatch=config.string("PUERTO_ESCUCHA_DISPATCH"),
            puerto_escucha_interrupt=config.string("PUERTO_ESCUCHA_INTERRUPT"),
            puerto_escucha_io=config.string("PUERTO_ESCUCHA_IO"),
            algoritmo_corto_plazo=config.string("ALGORITMO_CORTO_PLAZO"),
            algoritmo_ingreso_a_ready=config.string("ALGORITMO_INGRESO_A_READY"),
            alfa=config.real("ALFA"),
            tiempo_suspension=config.integer("TIEMPO_SUSPENSION"),
            log_level=config.string("LOG_LEVEL"),
        )

    def log(self, logger: logging.Logger) -> None:
        """Log every setting, one per line."""
        logger.info("IP_MEMORIA: %s", self.ip_memoria)
        logger.info("PUERTO_MEMORIA: %s", self.puerto_memoria)
        logger.info("PUERTO_ESCUCHA_DISPATCH: %s", self.puerto_escucha_dispatch)
        logger.info("PUERTO_ESCUCHA_INTERRUPT: %s", self.puerto_escucha_interrupt)
        logger.info("PUERTO_ESCUCHA_IO: %s", self.puerto_escucha_io)
        logger.info("ALGORITMO_CORTO_PLAZO: %s", self.algoritmo_corto_plazo)
        logger.info("ALGORITMO_INGRESO_A_READY: %s", self.algoritmo_ingreso_a_ready)
        logger.info("ALFA: %f", self.alfa)
        logger.info("TIEMPO_SUSPENSION: %d", self.tiempo_suspension)
        logger.info("LOG_LEVEL: %s", self.log_level)


def run(settings: KernelSettings, logger: logging.Logger) -> None:
    """Connect to the memory, accept CPU and IO, and serve them.

    Returns once the CPU dispatch channel disconnects.
    """
    memoria = create_connection(settings.ip_memoria, settings.puerto_memoria)
    logger.info("Conexion exitosa con MEMORIA")

    with ExitStack() as servers:
        dispatch_server = servers.enter_context(
            start_server(settings.puerto_escucha_dispatch, logger, "KERNEL_DISPATCH")
        )
        interrupt_server = servers.enter_context(
            start_server(settings.puerto_escucha_interrupt, logger, "KERNEL_INTERRUPT")
        )
        io_server = servers.enter_context(
            start_server(settings.puerto_escucha_io, logger, "KERNEL_IO")
        )

        logger.info("Esperando conexion de CPU_DISPATCH")
        cpu_dispatch = wait_client(dispatch_server, logger, "CPU_DISPATCH")

        logger.info("Esperando conexion de CPU_INTERRUPT")
        cpu_interrupt = wait_client(interrupt_server, logger, "CPU_INTERRUPT")

        logger.info("Esperando conexion de IO")
        io = wait_client(io_server, logger, "IO")

    for sock, peer in (
        (memoria, "MEMORIA"),
        (io, "IO"),
        (cpu_interrupt, "CPU INTERRUPT"),
    ):
        threading.Thread(
            target=attend, args=(sock, logger, peer), name=f"kernel-{peer}", daemon=True
        ).start()

    attend(cpu_dispatch, logger, "CPU DISPATCH")


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="kernel", description="Run the kernel module.")
    parser.add_argument("config", nargs="?", default=DEFAULT_CONFIG)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    greet("kernel")
    try:
        logger = create_logger(LOG_FILE, LOG_NAME)
    except OSError as exc:
        print(f"No se pudo crear el log: {exc}", file=sys.stderr)
        return 1
    try:
        settings = KernelSettings.from_config(Config.load(args.config))
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