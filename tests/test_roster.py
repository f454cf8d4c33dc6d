"""Tests for roster loading, validation and sample data."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pandas as pd
import pytest

from data.loader import (
    build_roster,
    load_csv_path,
    load_multi_sheet_excel,
    parse_batch,
    parse_employees,
    parse_squads,
    roster_from_frames,
)
from data.validator import validate_cross_file, validate_employees, validate_squads
from data.sample_data import generate_employees_df, generate_sample_csvs, generate_sample_excel, generate_squads_df
from models.booking import Batch


def make_squads_df(rows=None):
    return pd.DataFrame(rows or [
        {"Squad Name": "Squad Alpha", "Batch": "BATCH_1", "Max Members": 2},
        {"Squad Name": "Squad Bravo", "Batch": "Batch 2", "Max Members": 2},
    ])


def make_employees_df(rows=None):
    return pd.DataFrame(rows or [
        {"Employee ID": "E1", "Name": "Ann", "Email": "ann@company.com", "Squad Name": "Squad Alpha"},
        {"Employee ID": "E2", "Name": "Ben", "Email": "ben@company.com", "Squad Name": "Squad Bravo"},
        {"Employee ID": "E3", "Name": "Cal", "Email": "cal@company.com", "Squad Name": None},
    ])


class TestParseBatch:
    @pytest.mark.parametrize("value,expected", [
        ("BATCH_1", Batch.BATCH_1),
        ("Batch 2", Batch.BATCH_2),
        ("batch1", Batch.BATCH_1),
        (2, Batch.BATCH_2),
        (1.0, Batch.BATCH_1),
        ("3", None),
        (None, None),
        (float("nan"), None),
    ])
    def test_aliases(self, value, expected):
        assert parse_batch(value) is expected


class TestLoader:
    def test_parse_squads(self):
        squads = parse_squads(make_squads_df())
        assert [s.name for s in squads] == ["Squad Alpha", "Squad Bravo"]
        assert squads[1].batch is Batch.BATCH_2
        assert squads[0].max_members == 2

    def test_parse_employees_defaults(self):
        employees = parse_employees(make_employees_df())
        assert employees[2].squad_name is None
        assert employees[0].role == "employee"

    def test_build_roster_resolves_batches(self):
        roster = build_roster(parse_squads(make_squads_df()), parse_employees(make_employees_df()))
        assert roster.batch_for("E1") is Batch.BATCH_1
        assert roster.batch_for("E2") is Batch.BATCH_2
        assert roster.batch_for("E3") is None
        assert roster.batch_for("nobody") is None
        assert roster.squads["Squad Alpha"].members == ["E1"]
        assert roster.assigned_count == 2
        assert roster.members_in_batch(Batch.BATCH_1) == 1

    def test_csv_and_excel_round_trip(self, tmp_path):
        generate_sample_csvs(str(tmp_path))
        generate_sample_excel(str(tmp_path))
        squads_df = load_csv_path(str(tmp_path / "squads.csv"))
        assert len(squads_df) == 10

        with open(tmp_path / "sample_roster.xlsx", "rb") as fh:
            s_df, e_df = load_multi_sheet_excel(fh)
        roster = roster_from_frames(s_df, e_df)
        assert len(roster.squads) == 10
        assert roster.employee_count == 80

    def test_missing_sheet(self, tmp_path):
        path = tmp_path / "wrong.xlsx"
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            make_squads_df().to_excel(writer, sheet_name="Squads", index=False)
        with pytest.raises(ValueError):
            load_multi_sheet_excel(str(path))


class TestValidator:
    def test_valid_roster(self):
        assert validate_squads(make_squads_df()).is_valid
        assert validate_employees(make_employees_df()).is_valid
        cross = validate_cross_file(make_squads_df(), make_employees_df())
        assert cross.is_valid
        assert any("no squad" in w for w in cross.warnings)

    def test_missing_columns(self):
        result = validate_squads(pd.DataFrame([{"Squad Name": "X"}]))
        assert not result.is_valid
        assert "Batch" in result.errors[0]

    def test_unknown_batch(self):
        df = make_squads_df([{"Squad Name": "X", "Batch": "BATCH_3"}])
        assert not validate_squads(df).is_valid

    def test_duplicate_squads(self):
        df = make_squads_df([
            {"Squad Name": "X", "Batch": "BATCH_1"},
            {"Squad Name": "X", "Batch": "BATCH_2"},
        ])
        assert not validate_squads(df).is_valid

    def test_too_many_squads(self):
        df = make_squads_df([{"Squad Name": f"S{i}", "Batch": "BATCH_1"} for i in range(11)])
        result = validate_squads(df)
        assert not result.is_valid
        assert any("exceed" in e for e in result.errors)

    def test_duplicate_employee_ids(self):
        df = make_employees_df([
            {"Employee ID": "E1", "Name": "Ann", "Email": "a@company.com"},
            {"Employee ID": "E1", "Name": "Bob", "Email": "b@company.com"},
        ])
        assert not validate_employees(df).is_valid

    def test_unknown_role(self):
        df = make_employees_df([
            {"Employee ID": "E1", "Name": "Ann", "Email": "a@company.com", "Role": "owner"},
        ])
        assert not validate_employees(df).is_valid

    def test_unknown_squad_reference(self):
        employees = make_employees_df([
            {"Employee ID": "E1", "Name": "Ann", "Email": "a@company.com", "Squad Name": "Squad Zulu"},
        ])
        result = validate_cross_file(make_squads_df(), employees)
        assert not result.is_valid

    def test_squad_over_capacity(self):
        employees = make_employees_df([
            {"Employee ID": f"E{i}", "Name": f"N{i}", "Email": f"e{i}@company.com", "Squad Name": "Squad Alpha"}
            for i in range(3)
        ])
        result = validate_cross_file(make_squads_df(), employees)
        assert not result.is_valid
        assert any("max 2" in e for e in result.errors)


class TestSampleData:
    def test_sample_roster_shape(self):
        squads = generate_squads_df()
        employees = generate_employees_df()
        assert len(squads) == 10
        assert (squads["Batch"] == "BATCH_1").sum() == 5
        assert validate_squads(squads).is_valid
        assert validate_employees(employees).is_valid
        assert validate_cross_file(squads, employees).is_valid
        roster = roster_from_frames(squads, employees)
        assert roster.members_in_batch(Batch.BATCH_1) == 40
        assert roster.employees["E001"].email == "employee1@company.com"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
