"""Tests for the LOE and trial collaborators."""

import json
import sys
import os
from datetime import date
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from rnpv.lookups import (
    PlaceholderLoeSource, RecordLoeSource, StaticTrialSource,
    is_valid_nct_id, parse_trial_payload,
)

V2_STUDY = {
    "protocolSection": {
        "identificationModule": {"nctId": "NCT01234567"},
        "statusModule": {"overallStatus": "RECRUITING", "startDateStruct": {"date": "2023-04"}},
        "sponsorCollaboratorsModule": {"leadSponsor": {"name": "Acme Bio"}},
        "designModule": {"phases": ["PHASE2", "PHASE3"]},
    }
}


class TestLoeSources:
    def test_placeholder_is_ten_years_out(self):
        source = PlaceholderLoeSource(today=lambda: date(2026, 3, 1))
        result = source.lookup("anything")
        assert result.loe_year == 2036
        assert result.source == "placeholder"

    def test_record_source_resolves_latest_expiry(self):
        source = RecordLoeSource({
            "Imatinib": [
                {"applicationNumber": "N021588", "patentExpiry": "2028-05-01"},
                {"exclusivityExpiry": "2030-11-15"},
            ],
        })
        result = source.lookup("imatinib ")
        assert result.loe_year == 2030
        assert result.source == "orange_book"

    def test_record_source_unknown_drug(self):
        assert RecordLoeSource({}).lookup("nothing") is None

    def test_record_source_from_file(self, tmp_path):
        path = tmp_path / "loe.json"
        path.write_text(json.dumps({"drugx": [{"patentExpiry": "2041-01-01"}]}))
        result = RecordLoeSource.from_file(path).lookup("DrugX")
        assert result.loe_year == 2041
        assert result.source == "file:loe.json"

    def test_bad_file_names_path(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(ValueError, match="broken.json"):
            RecordLoeSource.from_file(path)


class TestTrialSources:
    def test_nct_id_format(self):
        assert is_valid_nct_id("NCT01234567")
        assert not is_valid_nct_id("NCT123")
        assert not is_valid_nct_id("")

    def test_parse_v2_payload(self):
        trial = parse_trial_payload("NCT01234567", V2_STUDY)
        assert trial.phase == "PHASE2/PHASE3"
        assert trial.mapped_phase == "Phase III"
        assert trial.sponsor == "Acme Bio"
        assert trial.start_date == "2023-04"
        assert trial.status == "RECRUITING"

    def test_parse_wrapped_payloads(self):
        assert parse_trial_payload("NCT01234567", {"study": V2_STUDY}).sponsor == "Acme Bio"
        assert parse_trial_payload("NCT01234567", {"studies": [V2_STUDY]}).sponsor == "Acme Bio"

    def test_parse_legacy_phase_shape(self):
        payload = {"protocolSection": {"designModule": {"phase": {"phase": "Phase 1"}}}}
        trial = parse_trial_payload("NCT01234567", payload)
        assert trial.mapped_phase == "Phase I"
        assert trial.sponsor is None

    def test_static_source(self):
        source = StaticTrialSource({"NCT01234567": V2_STUDY})
        assert source.fetch("NCT01234567").mapped_phase == "Phase III"
        assert source.fetch("NCT07654321") is None
