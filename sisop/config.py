"""Reading ``KEY=VALUE`` configuration files and creating module loggers."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path

_LOG_FORMAT = "[%(levelname)s] %(asctime)s %(name)s/(%(process)d:%(thread)d): %(message)s"


class ConfigError(Exception):
    """Raised when a configuration cannot be read or a key is unusable."""


def parse_config(text: str) -> dict[str, str]:
    """Parse ``KEY=VALUE`` lines, skipping blank lines and ``#`` comments."""
    values: dict[str, str] = {}
    for number, raw in enumerate(text.splitlines(), start=1):
        line = raw.rstrip("\r")
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            raise ConfigError(f"line {number} is not KEY=VALUE: {line!r}")
        values[key] = value
    return values


@dataclass
class Config:
    """A set of configuration values read from a file."""

    values: dict[str, str] = field(default_factory=dict)

    @classmethod
    def load(cls, path: str | Path) -> "Config":
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"No se pudo crear el config: {exc}") from exc
        return cls(parse_config(text))

    def __contains__(self, key: object) -> bool:
        return key in self.values

    def string(self, key: str) -> str:
        try:
            return self.values[key]
        except KeyError:
            raise ConfigError(f"missing configuration key {key}") from None

    def integer(self, key: str) -> int:
        value = self.string(key)
        try:
            return int(value)
        except ValueError:
            raise ConfigError(f"{key} is not an integer: {value!r}") from None

    def real(self, key: str) -> float:
        value = self.string(key)
        try:
            return float(value)
        except ValueError:
            raise ConfigError(f"{key} is not a number: {value!r}") from None


def create_logger(path: str | Path, name: str) -> logging.Logger:
    """Return an INFO logger writing both to ``path`` and to the console."""
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    formatter = logging.Formatter(_LOG_FORMAT)
    for handler in (
        logging.FileHandler(path, encoding="utf-8"),
        logging.StreamHandler(sys.stdout),
    ):
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    logger.propagate = False
    return logger