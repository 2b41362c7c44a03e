"""The IO module: connects to the kernel and serves its requests."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass

from .config import Config, ConfigError, create_logger
from .listener import attend
from .net import create_connection, greet

DEFAULT_CONFIG = "io.config"
LOG_FILE = "io.log"
LOG_NAME = "IO_LOG"


@dataclass(frozen=True)
class IoSettings:
    """Configuration values of the IO module."""

    ip_kernel: str
    puerto_kernel: str
    log_level: str

    @classmethod
    def from_config(cls, config: Config) -> "IoSettings":
        return cls(
            ip_kernel=config.string("IP_KERNEL"),
            puerto_kernel=config.string("PUERTO_KERNEL"),
            log_level=config.string("LOG_LEVEL"),
        )

    def log(self, logger: logging.Logger) -> None:
        """Log every setting, one per line."""
        logger.info("IP_KERNEL: %s", self.ip_kernel)
        logger.info("PUERTO_KERNEL: %s", self.puerto_kernel)
        logger.info("LOG_LEVEL: %s", self.log_level)


def run(settings: IoSettings, logger: logging.Logger) -> None:
    """Connect to the kernel and serve it until it disconnects."""
    kernel = create_connection(settings.ip_kernel, settings.puerto_kernel)
    logger.info("Conexion exitosa con KERNEL")
    attend(kernel, logger, "KERNEL")


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="io", description="Run the IO module.")
    parser.add_argument("config", nargs="?", default=DEFAULT_CONFIG)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    greet("io")
    try:
        settings = IoSettings.from_config(Config.load(args.config))
    except ConfigError as exc:
        print(exc, file=sys.stderr)
        return 1
    try:
        logger = create_logger(LOG_FILE, LOG_NAME)
    except OSError as exc:
        print(f"No se pudo crear el log: {exc}", file=sys.stderr)
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