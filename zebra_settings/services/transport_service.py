import selectors
import socket
import time
from typing import Optional, Tuple

from ..constants import (
    DEFAULT_PORTA, CONNECT_TIMEOUT_MS, READ_TIMEOUT_MS, POLL_INTERVAL_MS,
    DEADLINE_MS, CHUNK_SIZE, LINE_TERMINATOR, ENCODING, STX, ETX,
)
from ..exceptions import PrinterConnectionError, PrinterTimeoutError


def frame_chunk(chunk: bytes) -> Tuple[str, bool]:
    """
    Recorta o trecho útil de um bloco lido do socket.

    Vale o último STX e o primeiro ETX do bloco. Se o ETX vier antes do
    STX (end <= begin) o bloco inteiro é mantido. Só um par por bloco:
    duas respostas coladas no mesmo bloco não são separadas.

    Retorna (texto, achou_fim).
    """
    begin = 0
    end = len(chunk)
    end_found = False
    for i, b in enumerate(chunk):
        if b == STX:
            begin = i + 1
        elif b == ETX and not end_found:
            end = i
            end_found = True

    if end > begin:
        chunk = chunk[begin:end]
    return chunk.decode(ENCODING), end_found


def _open(host: str, port: int, timeout_ms: int) -> socket.socket:
    try:
        sock = socket.create_connection((host, port), timeout=timeout_ms / 1000)
    except socket.timeout:
        raise PrinterConnectionError(host, port, f"timeout após {timeout_ms} ms") from None
    except OSError as e:
        raise PrinterConnectionError(host, port, str(e)) from e
    # Sem Nagle: o comando sai na hora
    sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
    return sock


def _check_timings(connect_timeout_ms, read_timeout_ms, poll_interval_ms, deadline_ms):
    if connect_timeout_ms <= 0:
        raise ValueError(f"connect_timeout_ms deve ser positivo: {connect_timeout_ms}")
    if read_timeout_ms <= 0:
        raise ValueError(f"read_timeout_ms deve ser positivo: {read_timeout_ms}")
    if poll_interval_ms <= 0:
        raise ValueError(f"poll_interval_ms deve ser positivo: {poll_interval_ms}")
    if deadline_ms is not None and deadline_ms < 0:
        raise ValueError(f"deadline_ms não pode ser negativo: {deadline_ms}")


def send_command(
    command: str,
    host: str,
    port: int = DEFAULT_PORTA,
    end_text: str = "",
    *,
    connect_timeout_ms: int = CONNECT_TIMEOUT_MS,
    read_timeout_ms: int = READ_TIMEOUT_MS,
    poll_interval_ms: int = POLL_INTERVAL_MS,
    chunk_size: int = CHUNK_SIZE,
    deadline_ms: Optional[int] = DEADLINE_MS,
) -> str:
    """
    Envia um comando para a impressora e devolve a resposta como texto.

    O timeout de leitura conta silêncio consecutivo: cada bloco recebido
    zera o contador. Uma impressora que manda um byte a cada 1,9 s mantém
    a chamada viva indefinidamente, a menos que deadline_ms seja informado
    (limite absoluto contado a partir do envio).

    A leitura termina quando um bloco traz ETX ou quando end_text aparece
    na resposta acumulada.

    Levanta PrinterConnectionError se a conexão não abrir e
    PrinterTimeoutError se a impressora não terminar de responder.
    Tempos não positivos (ou deadline negativo) levantam ValueError.
    """
    _check_timings(connect_timeout_ms, read_timeout_ms, poll_interval_ms, deadline_ms)

    with _open(host, port, connect_timeout_ms) as sock, selectors.DefaultSelector() as sel:
        try:
            sock.sendall((command + LINE_TERMINATOR).encode(ENCODING))
        except OSError as e:
            raise PrinterConnectionError(host, port, str(e)) from e
        sel.register(sock, selectors.EVENT_READ)
        started = time.monotonic()

        response = ""
        idle_ms = 0
        while idle_ms < read_timeout_ms:
            if deadline_ms and (time.monotonic() - started) * 1000 >= deadline_ms:
                raise PrinterTimeoutError(host, port, deadline_ms)

            try:
                # select com timeout 0: só verifica se já há bytes
                chunk = sock.recv(chunk_size) if sel.select(timeout=0) else b""
            except OSError as e:
                raise PrinterConnectionError(host, port, str(e)) from e
            if not chunk:
                # Nada disponível (ou a impressora fechou o lado dela)
                idle_ms += poll_interval_ms
                time.sleep(poll_interval_ms / 1000)
                continue

            idle_ms = 0
            text, end_found = frame_chunk(chunk)
            response += text
            if end_text and end_text in response:
                end_found = True
            if end_found:
                return response

        raise PrinterTimeoutError(host, port, read_timeout_ms)
