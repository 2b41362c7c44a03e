"""The CPU module: connects to the memory and to both kernel channels."""

from __future__ import annotations

import argparse
import logging
import sys
import threading
from dataclasses import dataclass

from .config import Config, ConfigError, create_logger
from .listener import attend
from .net import create_connection, greet

DEFAULT_CONFIG = "cpu.config"
LOG_FILE = "cpu.log"
LOG_NAME = "CPU_LOG"


@dataclass(frozen=True)
class CpuSettings:
    """Configuration values of the CPU."""

    ip_memoria: str
    puerto_memoria: str
    ip_kernel: str
    puerto_kernel_dispatch: str
    puerto_kernel_interrupt: str
    entradas_tlb: int
    reemplazo_tlb: str
    entradas_cache: int
    reemplazo_cache: str
    retardo_cache: int
    log_level: str

    @classmethod
    def from_config(cls, config: Config) -> "CpuSettings":
        return cls(
            ip_memoria=config.string("IP_MEMORIA"),
            puerto_memoria=config.string("PUERTO_MEMORIA"),
            ip_kernel=config.string("IP_KERNEL"),
            puerto_kernel_dispatch=config.string("PUERTO_KERNEL_DISPATCH"),
            puerto_kernel_interrupt=config.string("PUERTO_KERNEL_INTERRUPT"),
            entradas_tlb=config.integer("ENTRADAS_TLB"),
            reemplazo_tlb=config.string("REEMPLAZO_TLB"),
            entradas_cache=config.integer("ENTRADAS_CACHE"),
            reemplazo_cache=config.string("REEMPLAZO_CACHE"),
            retardo_cache=config.integer("RETARDO_CACHE"),
            log_level=config.string("LOG_LEVEL"),
        )

    def log(self, logger: logging.Logger) -> None:
        """Log every setting, one per line."""
        logger.info("IP_MEMORIA: %s", self.ip_memoria)
        logger.info("PUERTO_MEMORIA: %s", self.puerto_memoria)
        logger.info("IP_KERNEL: %s", self.ip_kernel)
        logger.info("PUERTO_KERNEL_DISPATCH: %s", self.puerto_kernel_dispatch)
        logger.info("PUERTO_KERNEL_INTERRUPT: %s", self.puerto_kernel_interrupt)
        logger.info("ENTRADAS_TLB: %d", self.entradas_tlb)
        logger.info("REEMPLAZO_TLB: %s", self.reemplazo_tlb)
        logger.info("ENTRADAS_CACHE: %d", self.entradas_cache)
        logger.info("REEMPLAZO_CACHE: %s", self.reemplazo_cache)
        logger.info("RETARDO_CACHE: %d", self.retardo_cache)
        logger.info("LOG_LEVEL: %s", self.log_level)


def run(settings: CpuSettings, logger: logging.Logger) -> None:
    """Connect to its peers and serve them until the interrupt channel closes."""
    memoria = create_connection(settings.ip_memoria, settings.puerto_memoria)
    logger.info("Conexion exitosa con MEMORIA")

    dispatch = create_connection(settings.ip_kernel, settings.puerto_kernel_dispatch)
    logger.info("Conexion exitosa con KERNEL_DISPATCH")

    interrupt = create_connection(settings.ip_kernel, settings.puerto_kernel_interrupt)
    logger.info("Conexion exitosa con KERNEL_INTERRUPT")

    for sock, peer in ((memoria, "MEMORIA"), (dispatch, "KERNEL DISPATCH")):
        threading.Thread(
            target=attend, args=(sock, logger, peer), name=f"cpu-{peer}", daemon=True
        ).start()

    attend(interrupt, logger, "KERNEL INTERRUPT")


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="cpu", description="Run the CPU module.")
    parser.add_argument("config", nargs="?", default=DEFAULT_CONFIG)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    greet("cpu")
    try:
        logger = create_logger(LOG_FILE, LOG_NAME)
    except OSError as exc:
        print(f"No se pudo crear el log: {exc}", file=sys.stderr)
        return 1
    try:
        settings = CpuSettings.from_config(Config.load(args.config))
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