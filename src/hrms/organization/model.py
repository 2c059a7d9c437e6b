from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class Department:
    id: int
    name: str

    def to_dict(self) -> dict:
        return {"department_id": self.id, "department_name": self.name}


@dataclass(frozen=True)
class Holiday:
    id: int
    holiday_date: date
    description: str
    type: str = "Public"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "holiday_date": self.holiday_date.isoformat(),
            "description": self.description,
            "type": self.type,
        }


@dataclass(frozen=True)
class Company:
    name: str
    address: Optional[str] = None
    pan: Optional[str] = None
    gstin: Optional[str] = None
    website: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)
