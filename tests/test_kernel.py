import logging
import socket
import threading
import time

import pytest

from sisop.config import Config, ConfigError, parse_config
from sisop.kernel import KernelSettings, main, run

SAMPLE = """IP_MEMORIA=127.0.0.1
PUERTO_MEMORIA=8002
PUERTO_ESCUCHA_DISPATCH=8001
PUERTO_ESCUCHA_INTERRUPT=8004
PUERTO_ESCUCHA_IO=8003
ALGORITMO_CORTO_PLAZO=FIFO
ALGORITMO_INGRESO_A_READY=PMCP
ALFA=0.5
TIEMPO_SUSPENSION=4500
LOG_LEVEL=TRACE
"""


def _settings(**overrides):
    base = KernelSettings.from_config(Config(parse_config(SAMPLE)))
    return KernelSettings(**{**base.__dict__, **overrides})


def _free_port():
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def _connect_retry(port, timeout=5.0):
    deadline = time.monotonic() + timeout
    while True:
        try:
            return socket.create_connection(("127.0.0.1", port), timeout=timeout)
        except ConnectionRefusedError:
            if time.monotonic() > deadline:
                raise
            time.sleep(0.02)


def test_from_config():
    settings = KernelSettings.from_config(Config(parse_config(SAMPLE)))
    assert settings.alfa == 0.5
    assert settings.tiempo_suspension == 4500
    assert settings.algoritmo_corto_plazo == "FIFO"
    assert settings.puerto_escucha_io == "8003"


def test_from_config_bad_alfa():
    text = SAMPLE.replace("ALFA=0.5", "ALFA=half")
    with pytest.raises(ConfigError):
        KernelSettings.from_config(Config(parse_config(text)))


def test_log_formats_alfa(caplog):
    caplog.set_level(logging.INFO, logger="sisop.test.kernel")
    _settings().log(logging.getLogger("sisop.test.kernel"))
    assert len(caplog.messages) == 10
    assert "ALFA: 0.500000" in caplog.messages
    assert "TIEMPO_SUSPENSION: 4500" in caplog.messages


def test_run_accepts_cpu_and_io(caplog):
    caplog.set_level(logging.INFO, logger="sisop.test.kernel")
    logger = logging.getLogger("sisop.test.kernel")
    dispatch_port, interrupt_port, io_port = _free_port(), _free_port(), _free_port()
    with socket.create_server(("127.0.0.1", 0)) as memoria:
        memoria.settimeout(5)
        settings = _settings(
            puerto_memoria=str(memoria.getsockname()[1]),
            puerto_escucha_dispatch=str(dispatch_port),
            puerto_escucha_interrupt=str(interrupt_port),
            puerto_escucha_io=str(io_port),
        )
        worker = threading.Thread(target=run, args=(settings, logger), daemon=True)
        worker.start()
        memoria_conn, _ = memoria.accept()
        dispatch = _connect_retry(dispatch_port)
        interrupt = _connect_retry(interrupt_port)
        io = _connect_retry(io_port)
        dispatch.close()
        worker.join(5)
        assert not worker.is_alive()
        for sock in (memoria_conn, interrupt, io):
            sock.close()
    messages = caplog.messages
    assert "Conexion exitosa con MEMORIA" in messages
    assert "Se conecto el cliente CPU_DISPATCH!" in messages
    assert "Se conecto el cliente CPU_INTERRUPT!" in messages
    assert "Se conecto el cliente IO!" in messages
    assert messages.index("Esperando conexion de CPU_DISPATCH") < messages.index(
        "Esperando conexion de IO"
    )
    assert "El CPU DISPATCH se desconecto." in messages


def test_run_fails_without_memory():
    with pytest.raises(OSError):
        run(_settings(puerto_memoria=str(_free_port())), logging.getLogger("sisop.test.kernel"))


def test_main_missing_config(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    assert main([str(tmp_path / "missing.config")]) == 1
    assert "Hola desde kernel!!" in capsys.readouterr().out
    assert (tmp_path / "kernel.log").exists()