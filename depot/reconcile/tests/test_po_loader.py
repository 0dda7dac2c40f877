"""
Tests for loading purchase-order lines from supplier exports.

Run with: pytest depot/reconcile/tests/test_po_loader.py -v
"""

import pytest
from decimal import Decimal
from pathlib import Path

from openpyxl import Workbook

from depot.reconcile.po_loader import _find_column_index, load_po_lines, parse_amount


FIXTURES_DIR = Path(__file__).parent / "fixtures"
SAMPLE_CSV = FIXTURES_DIR / "asmodee_po.csv"
SAMPLE_JSON = FIXTURES_DIR / "extracted_po.json"


class TestParseAmount:

    @pytest.mark.parametrize("raw, expected", [
        ("£6.50", Decimal("6.50")),
        ("1,020.00", Decimal("1020.00")),
        (" 3 ", Decimal("3")),
        ("$12", Decimal("12")),
        (4, Decimal("4")),
        (2.5, Decimal("2.5")),
    ])
    def test_numbers(self, raw, expected):
        assert parse_amount(raw) == expected

    def test_blank_is_none(self):
        assert parse_amount("") is None
        assert parse_amount(None) is None

    def test_garbage_passed_through(self):
        assert parse_amount("n/a") == "n/a"


class TestFindColumnIndex:

    def test_case_insensitive(self):
        assert _find_column_index(["Code", "QTY"], ["qty"]) == 1

    def test_first_pattern_wins(self):
        headers = ["Product", "Description"]
        assert _find_column_index(headers, ["description", "product"]) == 1

    def test_none_headers(self):
        assert _find_column_index([None, "Qty"], ["qty"]) == 1
        assert _find_column_index([None], ["qty"]) is None


class TestLoadCsv:

    def test_lines_in_file_order(self):
        lines = load_po_lines(SAMPLE_CSV)
        assert [line.description for line in lines] == [
            "Dragon Shield Matte Sleeves Black",
            "Ultimate Guard Boulder Deck Case 100+",
            "Chess Clock Digital",
            "Spare Dice Bag",
        ]

    def test_values_parsed(self):
        first, _, clock, dice = load_po_lines(SAMPLE_CSV)

        assert first.supplier_sku == "AT-11002"
        assert first.quantity == Decimal("10")
        assert first.unit_cost_ex_vat == Decimal("6.50")
        assert first.line_total_ex_vat == Decimal("65.00")

        assert clock.supplier_sku is None
        assert clock.unit_cost_ex_vat == Decimal("1020.00")

        # Left for the ledger to sanitize
        assert dice.quantity == "n/a"
        assert dice.line_total_ex_vat is None

    def test_missing_description_column(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("SKU,Qty\nA-1,2\n")
        with pytest.raises(ValueError, match="description"):
            load_po_lines(path)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("")
        assert load_po_lines(path) == []


class TestLoadJson:

    def test_camel_case_keys(self):
        first, second = load_po_lines(SAMPLE_JSON)

        assert first.supplier_sku == "PKM-SV1-BB"
        assert first.unit_cost_ex_vat == Decimal("89.99")
        assert first.line_total_ex_vat == Decimal("539.94")

        assert second.description == "Pokemon Scarlet Violet Elite Trainer Box"
        assert second.supplier_sku is None
        assert second.quantity == Decimal("3")
        assert second.unit_cost_ex_vat == Decimal("32.50")
        assert second.line_total_ex_vat is None

    def test_bare_list(self, tmp_path):
        path = tmp_path / "lines.json"
        path.write_text('[{"description": "Sleeves", "quantity": 2}]')
        lines = load_po_lines(path)
        assert lines[0].quantity == Decimal("2")

    def test_not_a_list(self, tmp_path):
        path = tmp_path / "lines.json"
        path.write_text('"sleeves"')
        with pytest.raises(ValueError):
            load_po_lines(path)


class TestLoadXlsx:

    @pytest.fixture
    def workbook_path(self, tmp_path):
        wb = Workbook()
        ws = wb.active
        ws.append(["Code", "Description", "Quantity", "Unit Cost"])
        ws.append(["UGD-1", "Deck Case Black", 3, 4.2])
        ws.append([None, None, None, None])
        ws.append([None, "Playmat Stitched", 1, "£12.00"])
        path = tmp_path / "po.xlsx"
        wb.save(path)
        return path

    def test_reads_active_sheet(self, workbook_path):
        lines = load_po_lines(workbook_path)

        assert len(lines) == 2
        assert lines[0].supplier_sku == "UGD-1"
        assert lines[0].quantity == Decimal("3")
        assert lines[0].unit_cost_ex_vat == Decimal("4.2")
        assert lines[1].supplier_sku is None
        assert lines[1].unit_cost_ex_vat == Decimal("12.00")


class TestLoadErrors:

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_po_lines(tmp_path / "nope.csv")

    def test_unsupported_format(self, tmp_path):
        path = tmp_path / "po.pdf"
        path.write_bytes(b"%PDF")
        with pytest.raises(ValueError, match="Unsupported"):
            load_po_lines(path)
