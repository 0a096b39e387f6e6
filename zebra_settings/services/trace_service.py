import uuid, time
from flask import g, has_request_context


class RequestTrace:
    def __init__(self, action: str):
        self.id = str(uuid.uuid4())
        self.action = action
        self.start = time.time()
        self.events = []

    def add(self, event: str, **meta):
        self.events.append({
            "t": time.strftime("%Y-%m-%d %H:%M:%S"),
            "event": event,
            **meta
        })

    def count(self, event: str) -> int:
        return sum(1 for e in self.events if e["event"] == event)

    def finish(self, status=None):
        # Sem status explícito: "falha" se alguma impressora falhou
        if status is None:
            status = "falha" if self.count("poll_falha") else "ok"
        self.end = time.time()
        self.status = status
        self.duration = round(self.end - self.start, 3)
        return {
            "trace_id": self.id,
            "action": self.action,
            "duration": self.duration,
            "status": status,
            "events": self.events
        }


def start_trace(action: str) -> RequestTrace:
    """
    Cria um novo trace; dentro de uma requisição fica disponível em g.trace
    """
    trace = RequestTrace(action)
    if has_request_context():
        g.trace = trace
    return trace
