"""Kernel, CPU, memory and I/O processes connected by a small TCP protocol."""

__version__ = "0.1.0"