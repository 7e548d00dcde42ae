import socket
import threading

import pytest

from kvnet.client import TCPClient, main
from kvnet.server import TCPServer


@pytest.fixture
def ack_server():
    srv = TCPServer("0", socket.AF_INET)
    port = srv.sock.getsockname()[1]

    def run():
        conn, _ = srv.accept()
        with conn:
            srv.handle_request(conn)

    thread = threading.Thread(target=run, daemon=True)
    thread.start()
    yield str(port)
    thread.join(timeout=2)
    srv.close()


@pytest.fixture
def echo_server():
    listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    listener.bind(("127.0.0.1", 0))
    listener.listen(1)
    port = listener.getsockname()[1]

    def run():
        conn, _ = listener.accept()
        with conn:
            while data := conn.recv(4096):
                conn.sendall(data)

    thread = threading.Thread(target=run, daemon=True)
    thread.start()
    yield str(port)
    thread.join(timeout=2)
    listener.close()


def _closed_port():
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        return str(sock.getsockname()[1])


def test_query_returns_ack(ack_server, capsys):
    with TCPClient("127.0.0.1", ack_server) as client:
        assert client.query("Hello") == b"Message Received"
    out = capsys.readouterr().out
    assert "Sent Message: Hello" in out
    assert "Received: Message Received" in out


def test_send_all_and_recv_exactly_round_trip(echo_server):
    payload = b"abc" * 1000
    with TCPClient("127.0.0.1", echo_server) as client:
        client.send_all(payload)
        assert client.recv_exactly(len(payload)) == payload


def test_send_and_recv(echo_server):
    with TCPClient("127.0.0.1", echo_server) as client:
        assert client.send(b"hi") == 2
        assert client.recv_exactly(2) == b"hi"


def test_close_resets_fileno(echo_server):
    client = TCPClient("127.0.0.1", echo_server)
    assert client.fileno() >= 0
    client.close()
    assert client.fileno() == -1


def test_connection_refused():
    with pytest.raises(ConnectionError):
        TCPClient("127.0.0.1", _closed_port())


def test_main_usage_error(capsys):
    assert main([]) == 1
    assert "Usage" in capsys.readouterr().err


def test_main_queries_server(ack_server, capsys):
    assert main(["127.0.0.1", ack_server]) == 0
    assert "Received: Message Received" in capsys.readouterr().out


def test_main_reports_failure():
    assert main(["127.0.0.1", _closed_port()]) == 1