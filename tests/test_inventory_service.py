import pytest

from zebra_settings.services.inventory_service import (
    PrinterTarget, load_printers_from, parse_porta, save_printers_to,
)


def test_missing_file_gives_empty_inventory(tmp_path):
    assert load_printers_from(tmp_path) == ()


def test_save_and_load(tmp_path):
    targets = (
        PrinterTarget("17", "Expedição 01", "10.17.30.119"),
        PrinterTarget("23", "Balcão", "10.23.30.101", 6101),
    )
    save_printers_to(tmp_path, targets)
    assert load_printers_from(tmp_path) == targets


def test_load_normalizes_rows(tmp_path):
    (tmp_path / "printers.csv").write_text(
        "loja,nome,ip,porta\n"
        " 17 , Expedição ,10.17.30.119,\n"
        "18,Sem IP,,9100\n"
        "19,,10.19.30.5,6101\n",
        encoding="utf-8",
    )
    targets = load_printers_from(tmp_path)

    assert targets == (
        PrinterTarget("17", "Expedição", "10.17.30.119", 9100),
        PrinterTarget("19", "", "10.19.30.5", 6101),
    )
    assert targets[1].label == "10.19.30.5:6101"


def test_parse_porta():
    assert parse_porta(None) == 9100
    assert parse_porta(" 6101 ") == 6101
    with pytest.raises(ValueError):
        parse_porta("abc")
    with pytest.raises(ValueError):
        parse_porta("70000")
