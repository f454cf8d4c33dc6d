"""Generate a synthetic squad roster for the Hybrid Seat Booking platform."""

import pandas as pd
import os

from models.booking import Batch
from config.defaults import TOTAL_SQUADS, MEMBERS_PER_SQUAD, SQUADS_PER_BATCH

SQUAD_NAMES = [
    "Alpha", "Bravo", "Charlie", "Delta", "Echo",
    "Foxtrot", "Golf", "Hotel", "India", "Juliet",
]

FIRST_NAMES = [
    "Aarav", "Priya", "Rohan", "Ananya", "Vikram", "Meera", "Kabir", "Isha",
    "Arjun", "Diya", "Nikhil", "Sara", "Karan", "Tara", "Dev", "Nisha",
]
LAST_NAMES = ["Sharma", "Iyer", "Mehta", "Rao", "Kapoor", "Nair", "Bose", "Gupta"]


def generate_squads_df() -> pd.DataFrame:
    """10 squads; the first SQUADS_PER_BATCH go to Batch 1, the rest to Batch 2."""
    rows = []
    for idx, name in enumerate(SQUAD_NAMES[:TOTAL_SQUADS]):
        batch = Batch.BATCH_1 if idx < SQUADS_PER_BATCH else Batch.BATCH_2
        rows.append({
            "Squad Name": f"Squad {name}",
            "Batch": batch.value,
            "Max Members": MEMBERS_PER_SQUAD,
        })
    return pd.DataFrame(rows)


def generate_employees_df() -> pd.DataFrame:
    """MEMBERS_PER_SQUAD employees per squad plus one unassigned admin."""
    rows = []
    n = 0
    for name in SQUAD_NAMES[:TOTAL_SQUADS]:
        for _ in range(MEMBERS_PER_SQUAD):
            n += 1
            first = FIRST_NAMES[n % len(FIRST_NAMES)]
            last = LAST_NAMES[(n // len(FIRST_NAMES)) % len(LAST_NAMES)]
            rows.append({
                "Employee ID": f"E{n:03d}",
                "Name": f"{first} {last}",
                "Email": f"employee{n}@company.com",
                "Squad Name": f"Squad {name}",
                "Role": "employee",
            })
    rows.append({
        "Employee ID": "ADMIN",
        "Name": "Office Admin",
        "Email": "admin@company.com",
        "Squad Name": None,
        "Role": "admin",
    })
    return pd.DataFrame(rows)


def generate_sample_csvs(output_dir: str):
    """Write sample CSV files to the given directory."""
    os.makedirs(output_dir, exist_ok=True)
    generate_squads_df().to_csv(os.path.join(output_dir, "squads.csv"), index=False)
    generate_employees_df().to_csv(os.path.join(output_dir, "employees.csv"), index=False)


def generate_sample_excel(output_dir: str):
    """Write a single multi-tab Excel file with both datasets."""
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, "sample_roster.xlsx")
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        generate_squads_df().to_excel(writer, sheet_name="Squads", index=False)
        generate_employees_df().to_excel(writer, sheet_name="Employees", index=False)


if __name__ == "__main__":
    out = os.path.join(os.path.dirname(__file__), "..", "sample_files")
    generate_sample_csvs(out)
    generate_sample_excel(out)
    print("Sample CSV and Excel files generated in sample_files/")
