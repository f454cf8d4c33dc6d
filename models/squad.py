from dataclasses import dataclass, field
from typing import Dict, List, Optional

from models.booking import Batch


@dataclass
class Squad:
    name: str
    batch: Batch
    members: List[str] = field(default_factory=list)   # employee ids
    max_members: int = 8
    is_active: bool = True

    @property
    def member_count(self) -> int:
        return len(self.members)

    def is_full(self) -> bool:
        return self.member_count >= self.max_members


@dataclass
class Employee:
    employee_id: str
    name: str
    email: str
    squad_name: Optional[str] = None
    role: str = "employee"


@dataclass
class Roster:
    """Squads and employees keyed by name / id. Batch membership is resolved through the squad."""
    squads: Dict[str, Squad] = field(default_factory=dict)
    employees: Dict[str, Employee] = field(default_factory=dict)

    def batch_for(self, employee_id: str) -> Optional[Batch]:
        emp = self.employees.get(employee_id)
        if not emp or not emp.squad_name:
            return None
        squad = self.squads.get(emp.squad_name)
        return squad.batch if squad else None

    def squads_in_batch(self, batch: Batch) -> List[Squad]:
        return [s for s in self.squads.values() if s.batch is batch]

    def members_in_batch(self, batch: Batch) -> int:
        return sum(s.member_count for s in self.squads_in_batch(batch))

    @property
    def assigned_count(self) -> int:
        return sum(1 for e in self.employees.values() if e.squad_name and e.role == "employee")

    @property
    def employee_count(self) -> int:
        return sum(1 for e in self.employees.values() if e.role == "employee")
