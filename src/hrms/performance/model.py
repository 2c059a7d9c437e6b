from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Tuple

from ..core.enums import GoalStatus


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class Task:
    task_id: str
    goal_id: str
    employee_id: str
    title: str
    due_date: date
    description: Optional[str] = None
    priority: str = "Medium"

    def to_dict(self) -> dict:
        return {
            "task_id": self.task_id,
            "goal_id": self.goal_id,
            "title": self.title,
            "description": self.description,
            "due_date": _iso(self.due_date),
            "priority": self.priority,
        }


@dataclass(frozen=True)
class Goal:
    goal_id: str
    employee_id: str
    title: str
    due_date: date
    created_by: str
    description: Optional[str] = None
    progress: int = 0
    status: GoalStatus = GoalStatus.NOT_STARTED
    tasks: Tuple[Task, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "goal_id": self.goal_id,
            "employee_id": self.employee_id,
            "title": self.title,
            "description": self.description,
            "due_date": _iso(self.due_date),
            "progress": self.progress,
            "status": self.status.value,
            "created_by": self.created_by,
            "tasks": [t.to_dict() for t in self.tasks],
        }


@dataclass(frozen=True)
class Competency:
    competency_id: str
    employee_id: str
    skill: str
    manager_rating: Decimal
    feedback: Optional[str] = None
    appraisal_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "competency_id": self.competency_id,
            "skill": self.skill,
            "manager_rating": float(self.manager_rating),
            "feedback": self.feedback,
            "appraisal_id": self.appraisal_id,
        }


@dataclass(frozen=True)
class Achievement:
    achievement_id: str
    employee_id: str
    title: str
    date: date
    type: str = "Achievement"
    appraisal_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "achievement_id": self.achievement_id,
            "title": self.title,
            "date": _iso(self.date),
            "type": self.type,
            "appraisal_id": self.appraisal_id,
        }


@dataclass(frozen=True)
class Feedback:
    feedback_id: str
    employee_id: str
    source: str
    comment: str
    timestamp: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "feedback_id": self.feedback_id,
            "source": self.source,
            "comment": self.comment,
            "timestamp": _iso(self.timestamp),
        }


@dataclass(frozen=True)
class Appraisal:
    appraisal_id: str
    employee_id: str
    performance_score: Decimal
    reviewer_id: str
    manager_comments: Optional[str] = None
    bonus_eligible: bool = False
    promotion_recommended: bool = False
    salary_hike_percentage: Decimal = Decimal("0")
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "appraisal_id": self.appraisal_id,
            "performance_score": float(self.performance_score),
            "manager_comments": self.manager_comments,
            "bonus_eligible": self.bonus_eligible,
            "promotion_recommended": self.promotion_recommended,
            "salary_hike_percentage": float(self.salary_hike_percentage),
            "reviewer_id": self.reviewer_id,
            "created_at": _iso(self.created_at),
        }


@dataclass(frozen=True)
class PerformanceView:
    employee_id: str
    goals: Tuple[Goal, ...] = ()
    competencies: Tuple[Competency, ...] = ()
    achievements: Tuple[Achievement, ...] = ()
    feedback: Tuple[Feedback, ...] = ()
    appraisals: Tuple[Appraisal, ...] = ()

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "goals": [g.to_dict() for g in self.goals],
            "competencies": [c.to_dict() for c in self.competencies],
            "achievements": [a.to_dict() for a in self.achievements],
            "feedback": [f.to_dict() for f in self.feedback],
            "appraisals": [a.to_dict() for a in self.appraisals],
        }
