import threading

import pytest

from zebra_settings.exceptions import PrinterConnectionError, PrinterTimeoutError
from zebra_settings.services.inventory_service import PrinterTarget
from zebra_settings.services.poll_service import PollResult, poll_printer, poll_printers
from zebra_settings.services.settings_service import parse_settings
from zebra_settings.services.trace_service import RequestTrace

from conftest import SETTINGS_XML

INCOMPLETE_XML = "<ZEBRA-ELTRON-PERSONALITY><SAVED-SETTINGS/></ZEBRA-ELTRON-PERSONALITY>"

TARGETS = (
    PrinterTarget("17", "Expedição 01", "10.0.0.1"),
    PrinterTarget("17", "Expedição 02", "10.0.0.2"),
    PrinterTarget("23", "Balcão", "10.0.0.3", 6101),
    PrinterTarget("23", "Doca", "10.0.0.4"),
)


def fake_fetch(host, port):
    if host == "10.0.0.2":
        raise PrinterTimeoutError(host, port, 2000)
    if host == "10.0.0.3":
        raise PrinterConnectionError(host, port, "recusada")
    if host == "10.0.0.4":
        return parse_settings(INCOMPLETE_XML)
    return parse_settings(SETTINGS_XML)


def test_poll_printer_success():
    res = poll_printer(TARGETS[0], fake_fetch)
    assert res == PollResult(TARGETS[0], "P1", "TEAR OFF", "TEAR OFF", None)
    assert res.ok


def test_poll_printer_failure_uses_sentinel():
    res = poll_printer(TARGETS[1], fake_fetch)
    assert not res.ok
    assert (res.name, res.current_mode, res.stored_mode) == ("N/A", "N/A", "N/A")
    assert res.error.startswith("PrinterTimeoutError: ")


def test_poll_printer_missing_field_is_isolated():
    res = poll_printer(TARGETS[3], fake_fetch)
    assert res.error.startswith("FieldMissingError: ")


def test_poll_printer_unexpected_errors_propagate():
    def broken(host, port):
        raise RuntimeError("bug")

    with pytest.raises(RuntimeError):
        poll_printer(TARGETS[0], broken)


def test_poll_printers_isolates_failures_and_keeps_order():
    results = poll_printers(TARGETS, fake_fetch, max_workers=4)

    assert [r.target for r in results] == list(TARGETS)
    assert [r.ok for r in results] == [True, False, False, False]
    assert results[0].name == "P1"
    assert "10.0.0.3:6101" in results[2].error


def test_poll_printers_passes_port_and_reports_progress():
    seen = []
    lock = threading.Lock()

    def fetch(host, port):
        with lock:
            seen.append((host, port))
        return parse_settings(SETTINGS_XML)

    progress = []
    poll_printers(TARGETS, fetch, max_workers=2, on_result=progress.append)

    assert sorted(seen) == sorted((t.ip, t.porta) for t in TARGETS)
    assert len(progress) == len(TARGETS)


def test_poll_printers_records_trace():
    trace = RequestTrace("teste")
    poll_printers(TARGETS, fake_fetch, trace=trace)

    assert trace.count("poll_ok") == 1
    assert trace.count("poll_falha") == 3
    assert trace.finish()["status"] == "falha"


def test_poll_printers_empty():
    assert poll_printers((), fake_fetch) == []
