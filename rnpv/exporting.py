"""
rNPV Valuator — Export Formatting

Serialises an Inputs + Outputs pair (and optionally its cashflow
schedule) to a flat CSV row, JSON document, or Excel workbook.
Pure formatting: nothing here computes valuation results.
"""

import csv
import io
import json
from datetime import datetime

import openpyxl

# Column order of the flat export row
CSV_COLUMNS = [
    "timestamp", "role", "phase", "indication",
    "peak_sales", "launch_year", "loe_year", "discount_rate", "tax_rate",
    "cogs_fraction", "commercial_spend_fraction", "working_capital_fraction",
    "potency_nm", "selectivity_fold", "half_life_hr", "molecular_weight_da",
    "log_p", "bioavailability", "target_validation", "target_novelty",
    "mechanism_bonus", "ptrs", "dev_cost_pv", "owner_pv", "licensor_pv",
    "rnpv", "roi", "baseline_probability", "average_royalty_pct",
    "royalty_min_pct", "royalty_max_pct", "royalty_ramp_years",
]

CASHFLOW_COLUMNS = [
    ("Year", "year"),
    ("Sales ($M)", "sales"),
    ("Royalty (%)", "royalty_pct"),
    ("Owner CF ($M)", "owner_cf"),
    ("Licensor CF ($M)", "licensor_cf"),
    ("Discount Factor", "discount_factor"),
    ("Owner PV ($M)", "owner_pv"),
    ("Licensor PV ($M)", "licensor_pv"),
]


def flatten_valuation(inputs, outputs, timestamp=None) -> dict:
    """Flat record of one valuation keyed by CSV_COLUMNS."""
    merged = {**inputs.model_dump(mode="json"), **outputs.model_dump(mode="json")}
    merged["timestamp"] = (timestamp or datetime.utcnow()).isoformat()
    merged["average_royalty_pct"] = round(outputs.average_royalty_pct, 2)
    return {column: merged.get(column) for column in CSV_COLUMNS}


def to_csv(rows) -> str:
    """Renders flat rows as CSV text with a header line."""
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=CSV_COLUMNS, lineterminator="\n")
    writer.writeheader()
    for row in rows:
        writer.writerow(row)
    return buf.getvalue()


def to_json(inputs, outputs) -> str:
    return json.dumps(
        {"inputs": inputs.model_dump(mode="json"), "outputs": outputs.model_dump(mode="json")},
        indent=2,
    )


def build_workbook(inputs, outputs, schedule) -> openpyxl.Workbook:
    """
    Builds an Excel workbook with three sheets:
        Summary   — headline outputs
        Inputs    — every input field
        Cashflows — the year-by-year schedule
    """
    wb = openpyxl.Workbook()

    ws = wb.active
    ws.title = "Summary"
    ws.append(["Role", inputs.role.value])
    ws.append(["Phase", inputs.phase])
    ws.append(["Indication", inputs.indication])
    ws.append(["Current Year", outputs.current_year])
    ws.append(["Mechanism Bonus", outputs.mechanism_bonus])
    ws.append(["Baseline Probability", outputs.baseline_probability])
    ws.append(["PTRS", outputs.ptrs])
    ws.append(["Dev Cost PV ($M)", outputs.dev_cost_pv])
    ws.append(["Owner PV ($M)", outputs.owner_pv])
    ws.append(["Licensor PV ($M)", outputs.licensor_pv])
    ws.append(["Selected PV ($M)", outputs.selected_pv])
    ws.append(["rNPV ($M)", outputs.rnpv])
    ws.append(["ROI (%)", outputs.roi])
    ws.append(["Average Royalty (%)", outputs.average_royalty_pct])

    ws2 = wb.create_sheet("Inputs")
    ws2.append(["Field", "Value"])
    for field, value in inputs.model_dump(mode="json").items():
        ws2.append([field, value])

    ws3 = wb.create_sheet("Cashflows")
    ws3.append([header for header, _ in CASHFLOW_COLUMNS])
    for row in schedule:
        ws3.append([row[key] for _, key in CASHFLOW_COLUMNS])

    return wb


def workbook_bytes(wb: openpyxl.Workbook) -> io.BytesIO:
    buf = io.BytesIO()
    wb.save(buf)
    buf.seek(0)
    return buf
