"""Schema validation for uploaded roster files."""

from dataclasses import dataclass, field
from typing import List
import pandas as pd

from data.loader import parse_batch
from config.defaults import TOTAL_SQUADS, MEMBERS_PER_SQUAD, ROLES


@dataclass
class ValidationResult:
    is_valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


SQUAD_REQUIRED_COLUMNS = [
    "Squad Name",
    "Batch",
]

EMPLOYEE_REQUIRED_COLUMNS = [
    "Employee ID",
    "Name",
    "Email",
]


def _check_required_columns(df: pd.DataFrame, required: List[str], file_label: str) -> ValidationResult:
    result = ValidationResult()
    missing = [col for col in required if col not in df.columns]
    if missing:
        result.is_valid = False
        result.errors.append(f"{file_label}: Missing required columns: {', '.join(missing)}")
    if df.empty:
        result.is_valid = False
        result.errors.append(f"{file_label}: File contains no data rows.")
    return result


def validate_squads(df: pd.DataFrame) -> ValidationResult:
    result = _check_required_columns(df, SQUAD_REQUIRED_COLUMNS, "Squads")
    if not result.is_valid:
        return result

    bad_batches = [v for v in df["Batch"].tolist() if parse_batch(v) is None]
    if bad_batches:
        result.is_valid = False
        result.errors.append(f"Squads: Unknown batch values {bad_batches}. Use BATCH_1 or BATCH_2.")

    names = df["Squad Name"].astype(str).str.strip()
    dupes = names.duplicated(keep=False)
    if dupes.any():
        result.is_valid = False
        result.errors.append(f"Squads: Duplicate squad names: {names[dupes].unique().tolist()}")

    if len(df) > TOTAL_SQUADS:
        result.is_valid = False
        result.errors.append(f"Squads: {len(df)} squads exceed the limit of {TOTAL_SQUADS}.")

    if "Max Members" in df.columns and (df["Max Members"].dropna() < 1).any():
        result.is_valid = False
        result.errors.append("Squads: Max Members must be at least 1.")

    if not bad_batches:
        per_batch = df["Batch"].map(parse_batch).value_counts()
        if per_batch.nunique() > 1:
            counts = {b.value: int(n) for b, n in per_batch.items()}
            result.warnings.append(f"Squads: Batches are unevenly sized {counts}.")

    return result


def validate_employees(df: pd.DataFrame) -> ValidationResult:
    result = _check_required_columns(df, EMPLOYEE_REQUIRED_COLUMNS, "Employees")
    if not result.is_valid:
        return result

    ids = df["Employee ID"].astype(str).str.strip()
    dupes = ids.duplicated(keep=False)
    if dupes.any():
        result.is_valid = False
        result.errors.append(f"Employees: Duplicate employee IDs: {ids[dupes].unique().tolist()}")

    emails = df["Email"].astype(str).str.strip().str.lower()
    if emails.duplicated().any():
        result.is_valid = False
        result.errors.append("Employees: Email addresses must be unique.")

    if "Role" in df.columns:
        roles = df["Role"].dropna().astype(str).str.strip()
        unknown = sorted(set(roles) - set(ROLES))
        if unknown:
            result.is_valid = False
            result.errors.append(f"Employees: Unknown roles {unknown}. Use one of {ROLES}.")

    return result


def validate_cross_file(squads_df: pd.DataFrame, employees_df: pd.DataFrame) -> ValidationResult:
    """Check that employee squad references resolve and squads are not over capacity."""
    result = ValidationResult()
    if "Squad Name" not in employees_df.columns:
        result.warnings.append("Employees: No 'Squad Name' column. Nobody will be scheduled.")
        return result

    squad_names = set(squads_df["Squad Name"].astype(str).str.strip())
    refs = employees_df["Squad Name"].dropna().astype(str).str.strip()
    refs = refs[refs != ""]

    unknown = sorted(set(refs) - squad_names)
    if unknown:
        result.is_valid = False
        result.errors.append(f"Employees reference unknown squads: {', '.join(unknown)}")

    capacity = {}
    for _, row in squads_df.iterrows():
        limit = MEMBERS_PER_SQUAD
        if "Max Members" in squads_df.columns and pd.notna(row.get("Max Members")):
            limit = int(row["Max Members"])
        capacity[str(row["Squad Name"]).strip()] = limit

    for name, count in refs.value_counts().items():
        if name in capacity and count > capacity[name]:
            result.is_valid = False
            result.errors.append(f"Squad {name} has {count} members (max {capacity[name]}).")

    unassigned = len(employees_df) - len(refs)
    if unassigned:
        result.warnings.append(
            f"{unassigned} employees have no squad and cannot book until assigned."
        )
    return result
