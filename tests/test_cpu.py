import logging
import socket
import threading

import pytest

from sisop.config import Config, ConfigError, parse_config
from sisop.cpu import CpuSettings, main, run

SAMPLE = """IP_MEMORIA=127.0.0.1
PUERTO_MEMORIA=8002
IP_KERNEL=127.0.0.1
PUERTO_KERNEL_DISPATCH=8001
PUERTO_KERNEL_INTERRUPT=8004
ENTRADAS_TLB=4
REEMPLAZO_TLB=LRU
ENTRADAS_CACHE=2
REEMPLAZO_CACHE=CLOCK
RETARDO_CACHE=250
LOG_LEVEL=TRACE
"""


def _settings(**overrides):
    base = CpuSettings.from_config(Config(parse_config(SAMPLE)))
    values = {**base.__dict__, **overrides}
    return CpuSettings(**values)


def _listener():
    return socket.create_server(("127.0.0.1", 0))


def _closed_port():
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def test_from_config_reads_every_key():
    settings = CpuSettings.from_config(Config(parse_config(SAMPLE)))
    assert settings.ip_memoria == "127.0.0.1"
    assert settings.puerto_kernel_interrupt == "8004"
    assert settings.entradas_tlb == 4
    assert settings.reemplazo_cache == "CLOCK"
    assert settings.retardo_cache == 250


def test_from_config_missing_key():
    text = SAMPLE.replace("ENTRADAS_TLB=4\n", "")
    with pytest.raises(ConfigError):
        CpuSettings.from_config(Config(parse_config(text)))


def test_from_config_bad_integer():
    text = SAMPLE.replace("RETARDO_CACHE=250", "RETARDO_CACHE=slow")
    with pytest.raises(ConfigError):
        CpuSettings.from_config(Config(parse_config(text)))


def test_log_writes_every_setting(caplog):
    caplog.set_level(logging.INFO, logger="sisop.test.cpu")
    _settings().log(logging.getLogger("sisop.test.cpu"))
    assert len(caplog.messages) == 11
    assert caplog.messages[0] == "IP_MEMORIA: 127.0.0.1"
    assert "ENTRADAS_TLB: 4" in caplog.messages
    assert caplog.messages[-1] == "LOG_LEVEL: TRACE"


def test_run_connects_and_stops_when_interrupt_closes(caplog):
    caplog.set_level(logging.INFO, logger="sisop.test.cpu")
    logger = logging.getLogger("sisop.test.cpu")
    with _listener() as mem, _listener() as disp, _listener() as intr:
        for listener in (mem, disp, intr):
            listener.settimeout(5)
        settings = _settings(
            puerto_memoria=str(mem.getsockname()[1]),
            puerto_kernel_dispatch=str(disp.getsockname()[1]),
            puerto_kernel_interrupt=str(intr.getsockname()[1]),
        )
        worker = threading.Thread(target=run, args=(settings, logger), daemon=True)
        worker.start()
        mem_conn, _ = mem.accept()
        disp_conn, _ = disp.accept()
        intr_conn, _ = intr.accept()
        intr_conn.close()
        worker.join(5)
        assert not worker.is_alive()
        mem_conn.close()
        disp_conn.close()
    assert "Conexion exitosa con MEMORIA" in caplog.messages
    assert "Conexion exitosa con KERNEL_DISPATCH" in caplog.messages
    assert "Conexion exitosa con KERNEL_INTERRUPT" in caplog.messages
    assert "El KERNEL INTERRUPT se desconecto." in caplog.messages


def test_run_fails_without_memory():
    settings = _settings(puerto_memoria=str(_closed_port()))
    with pytest.raises(OSError):
        run(settings, logging.getLogger("sisop.test.cpu"))


def test_main_missing_config(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    assert main([str(tmp_path / "missing.config")]) == 1
    out = capsys.readouterr()
    assert "Hola desde cpu!!" in out.out
    assert (tmp_path / "cpu.log").exists()