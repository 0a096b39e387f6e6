import socket
import threading
import time

import pytest

STX = b"\x02"
ETX = b"\x03"

SETTINGS_XML = (
    "<ZEBRA-ELTRON-PERSONALITY><SAVED-SETTINGS><NAME>P1</NAME>"
    "<PRINT-MODE><MODE><CURRENT>TEAR OFF</CURRENT><STORED>TEAR OFF</STORED></MODE>"
    "</PRINT-MODE></SAVED-SETTINGS></ZEBRA-ELTRON-PERSONALITY>"
)


class FakePrinter:
    """
    Impressora simulada: aceita uma conexão, lê a linha de comando e
    responde com os blocos do roteiro [(atraso_s, bytes), ...]. Depois
    fica calada até o cliente fechar.
    """

    def __init__(self, script=()):
        self.script = script
        self.received = b""
        self.client_closed = threading.Event()
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._sock.bind(("127.0.0.1", 0))
        self._sock.listen(1)
        self.host, self.port = self._sock.getsockname()
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()

    def _serve(self):
        try:
            conn, _ = self._sock.accept()
        except OSError:
            return
        with conn:
            conn.settimeout(10)
            try:
                while not self.received.endswith(b"\r\n"):
                    data = conn.recv(1024)
                    if not data:
                        break
                    self.received += data
                for delay, data in self.script:
                    time.sleep(delay)
                    conn.sendall(data)
                while conn.recv(1024):
                    pass
            except OSError:
                return
            self.client_closed.set()

    def close(self):
        self._sock.close()


@pytest.fixture
def fake_printer():
    printers = []

    def _make(*script):
        p = FakePrinter(script)
        printers.append(p)
        return p

    yield _make
    for p in printers:
        p.close()


@pytest.fixture
def closed_port():
    # porta livre sem ninguém escutando
    s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    s.bind(("127.0.0.1", 0))
    port = s.getsockname()[1]
    s.close()
    return port
