import logging
import socket

import pytest

from tpcero.client import (
    ConfigError,
    build_packet,
    create_connection,
    load_config,
    main,
    read_console,
    send_message,
    send_packet,
    start_logger,
)
from tpcero.protocol import OpCode, decode_values, encode_message


def _close(logger):
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def test_load_config_parses_pairs(tmp_path):
    path = tmp_path / "cliente.config"
    path.write_text("# comentario\nCLAVE=hola\n\nIP=127.0.0.1\nPUERTO=4444\n")
    assert load_config(str(path)) == {"CLAVE": "hola", "IP": "127.0.0.1", "PUERTO": "4444"}


def test_load_config_missing_file(tmp_path):
    with pytest.raises(ConfigError):
        load_config(str(tmp_path / "nope.config"))


def test_start_logger_writes_file(tmp_path):
    path = tmp_path / "tp0.log"
    logger = start_logger(str(path))
    logger.info("Hola soy un logger")
    _close(logger)
    assert "Hola soy un logger" in path.read_text()


def test_read_console_returns_and_logs(caplog):
    logger = logging.getLogger("test-console")
    with caplog.at_level(logging.INFO, logger="test-console"):
        line = read_console(logger, lambda prompt: "linea")
    assert line == "linea"
    assert "linea" in caplog.messages


def test_read_console_eof():
    def reader(prompt):
        raise EOFError

    assert read_console(logging.getLogger("test-console"), reader) == ""


def test_build_packet_round_trip():
    packet = build_packet(["a", "bc"])
    assert packet.op_code == OpCode.PACKAGE
    assert decode_values(bytes(packet.buffer)) == ["a", "bc"]


def test_send_message_and_packet():
    a, b = socket.socketpair()
    with a, b:
        send_message("hola", a)
        assert b.recv(1024) == encode_message("hola")
        packet = build_packet(["x"])
        send_packet(packet, a)
        assert b.recv(1024) == packet.serialize()


def test_create_connection_connects():
    with socket.socket() as listener:
        listener.bind(("127.0.0.1", 0))
        listener.listen()
        port = listener.getsockname()[1]
        with create_connection("127.0.0.1", str(port)) as sock:
            assert sock.getpeername() == ("127.0.0.1", port)
            conn, _ = listener.accept()
            with conn:
                sock.sendall(b"ping")
                assert conn.recv(4) == b"ping"


def test_create_connection_refused():
    with socket.socket() as probe:
        probe.bind(("127.0.0.1", 0))
        port = probe.getsockname()[1]
    with pytest.raises(ConnectionError):
        create_connection("127.0.0.1", port)


def test_main_missing_config(tmp_path, monkeypatch):
    monkeypatch.setattr("builtins.input", lambda prompt="": "")
    rc = main(["--config", str(tmp_path / "none.config"), "--log", str(tmp_path / "tp0.log")])
    assert rc == 1


def test_main_end_to_end(tmp_path, monkeypatch):
    with socket.socket() as listener:
        listener.bind(("127.0.0.1", 0))
        listener.listen()
        port = listener.getsockname()[1]
        config = tmp_path / "cliente.config"
        config.write_text(f"CLAVE=hola\nIP=127.0.0.1\nPUERTO={port}\n")
        log = tmp_path / "tp0.log"
        answers = iter(["consola", "paquete"])
        monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))

        assert main(["--config", str(config), "--log", str(log)]) == 0

        conn, _ = listener.accept()
        with conn:
            received = b""
            while chunk := conn.recv(4096):
                received += chunk
    assert received == encode_message("hola") + build_packet(["paquete"]).serialize()
    assert "consola" in log.read_text()