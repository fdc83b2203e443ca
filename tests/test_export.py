"""Tests for export formatting."""

import csv
import io
import json
import sys
import os
from datetime import datetime
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import openpyxl
import pytest

from rnpv.engines import compose_valuation
from rnpv.engines.cashflow import build_cashflow_schedule
from rnpv.exporting import (
    CSV_COLUMNS, build_workbook, flatten_valuation, to_csv, to_json, workbook_bytes,
)


class TestFlatExport:
    def test_flatten_has_every_column(self, simple_inputs):
        outputs = compose_valuation(simple_inputs, 2030)
        row = flatten_valuation(simple_inputs, outputs, timestamp=datetime(2026, 1, 2))
        assert list(row) == CSV_COLUMNS
        assert row["timestamp"] == "2026-01-02T00:00:00"
        assert row["role"] == "OWNER"
        assert row["roi"] == 54
        assert row["average_royalty_pct"] == 10.0

    def test_csv_header_and_row(self, simple_inputs):
        outputs = compose_valuation(simple_inputs, 2030)
        text = to_csv([flatten_valuation(simple_inputs, outputs)])
        rows = list(csv.DictReader(io.StringIO(text)))
        assert len(rows) == 1
        assert rows[0]["phase"] == "Phase II"
        assert float(rows[0]["owner_pv"]) == pytest.approx(800)

    def test_json_document(self, simple_inputs):
        outputs = compose_valuation(simple_inputs, 2030)
        doc = json.loads(to_json(simple_inputs, outputs))
        assert doc["inputs"]["peak_sales"] == 400
        assert doc["outputs"]["roi"] == 54


class TestWorkbookExport:
    def test_sheets_and_cashflow_rows(self, simple_inputs):
        outputs = compose_valuation(simple_inputs, 2030)
        schedule = build_cashflow_schedule(simple_inputs, 2030)
        wb = openpyxl.load_workbook(workbook_bytes(build_workbook(simple_inputs, outputs, schedule)))
        assert wb.sheetnames == ["Summary", "Inputs", "Cashflows"]
        cashflows = list(wb["Cashflows"].iter_rows(values_only=True))
        assert cashflows[0][0] == "Year"
        assert [r[0] for r in cashflows[1:]] == [2030, 2031, 2032, 2033, 2034]
        summary = {r[0]: r[1] for r in wb["Summary"].iter_rows(values_only=True)}
        assert summary["ROI (%)"] == 54
