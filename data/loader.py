"""File upload parsing — CSV/XLSX into the squad roster."""

import pandas as pd
from typing import Dict, List, Optional, Tuple
from models.booking import Batch
from models.squad import Employee, Roster, Squad
from config.defaults import MEMBERS_PER_SQUAD, ROLE_EMPLOYEE

# Accepted spellings of each batch in uploaded files (compared upper-cased, spaces stripped)
BATCH_ALIASES = {
    "BATCH_1": Batch.BATCH_1, "BATCH1": Batch.BATCH_1, "1": Batch.BATCH_1,
    "BATCH_2": Batch.BATCH_2, "BATCH2": Batch.BATCH_2, "2": Batch.BATCH_2,
}


def parse_batch(value) -> Optional[Batch]:
    """Batch from 'BATCH_1', 'Batch 1', '1' and the like. None when unrecognised."""
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    key = str(value).strip().upper().replace(" ", "")
    if key.endswith(".0"):
        key = key[:-2]
    return BATCH_ALIASES.get(key)


def _optional_str(row, df: pd.DataFrame, column: str) -> Optional[str]:
    if column in df.columns and pd.notna(row.get(column)):
        text = str(row[column]).strip()
        return text or None
    return None


def parse_squads(df: pd.DataFrame) -> List[Squad]:
    """Convert a squads DataFrame into Squad objects."""
    squads = []
    for _, row in df.iterrows():
        max_members = MEMBERS_PER_SQUAD
        if "Max Members" in df.columns and pd.notna(row.get("Max Members")):
            max_members = int(row["Max Members"])
        squads.append(Squad(
            name=str(row["Squad Name"]).strip(),
            batch=parse_batch(row["Batch"]),
            max_members=max_members,
        ))
    return squads


def parse_employees(df: pd.DataFrame) -> List[Employee]:
    """Convert an employees DataFrame into Employee objects."""
    employees = []
    for _, row in df.iterrows():
        employees.append(Employee(
            employee_id=str(row["Employee ID"]).strip(),
            name=str(row["Name"]).strip(),
            email=str(row["Email"]).strip(),
            squad_name=_optional_str(row, df, "Squad Name"),
            role=_optional_str(row, df, "Role") or ROLE_EMPLOYEE,
        ))
    return employees


def build_roster(squads: List[Squad], employees: List[Employee]) -> Roster:
    """Index squads and employees and fill squad membership from each employee's squad."""
    squad_map: Dict[str, Squad] = {s.name: s for s in squads}
    employee_map: Dict[str, Employee] = {}
    for emp in employees:
        employee_map[emp.employee_id] = emp
        squad = squad_map.get(emp.squad_name) if emp.squad_name else None
        if squad is not None and emp.employee_id not in squad.members:
            squad.members.append(emp.employee_id)
    return Roster(squads=squad_map, employees=employee_map)


def roster_from_frames(squads_df: pd.DataFrame, employees_df: pd.DataFrame) -> Roster:
    return build_roster(parse_squads(squads_df), parse_employees(employees_df))


def load_file(uploaded_file) -> pd.DataFrame:
    """Load an uploaded file (CSV or XLSX) into a DataFrame."""
    name = uploaded_file.name.lower()
    if name.endswith(".csv"):
        return pd.read_csv(uploaded_file)
    elif name.endswith(".xlsx") or name.endswith(".xls"):
        return pd.read_excel(uploaded_file, engine="openpyxl")
    else:
        raise ValueError(f"Unsupported file format: {name}. Use CSV or XLSX.")


# Expected sheet names for multi-tab Excel (case-insensitive matching)
SHEET_ALIASES = {
    "squads": ["squads", "squad", "squad master", "teams"],
    "employees": ["employees", "employee", "users", "people", "members"],
}


def _match_sheet(sheet_names: List[str], category: str) -> str:
    """Find a sheet name matching the given category. Returns the matched name or raises."""
    aliases = SHEET_ALIASES[category]
    lower_map = {s.lower().strip(): s for s in sheet_names}
    for alias in aliases:
        if alias in lower_map:
            return lower_map[alias]
    raise ValueError(
        f"Could not find a sheet for '{category}'. "
        f"Expected one of: {aliases}. "
        f"Found sheets: {sheet_names}"
    )


def load_multi_sheet_excel(uploaded_file) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Load a single Excel file with 2 tabs: Squads, Employees.

    Sheet names are matched case-insensitively. Accepted names include:
    - Squads: 'Squads', 'Squad Master', 'Teams', etc.
    - Employees: 'Employees', 'Users', 'Members', etc.

    Returns (squads_df, employees_df).
    """
    xl = pd.ExcelFile(uploaded_file, engine="openpyxl")
    sheet_names = xl.sheet_names

    squads_df = pd.read_excel(xl, sheet_name=_match_sheet(sheet_names, "squads"))
    employees_df = pd.read_excel(xl, sheet_name=_match_sheet(sheet_names, "employees"))

    return squads_df, employees_df


def load_csv_path(path: str) -> pd.DataFrame:
    """Load a CSV file from a local path."""
    return pd.read_csv(path)
