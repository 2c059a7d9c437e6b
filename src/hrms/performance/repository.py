from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import GoalStatus
from .model import Achievement, Appraisal, Competency, Feedback, Goal, PerformanceView, Task


class PerformanceRepository(Protocol):
    def create_goal(self, goal: Goal, tasks: Sequence[Task]) -> None:
        raise NotImplementedError

    def get_goal(self, goal_id: str) -> Optional[Goal]:
        raise NotImplementedError

    def update_goal_progress(self, *, goal_id: str, progress: int, status: GoalStatus) -> bool:
        raise NotImplementedError

    def create_appraisal(
        self,
        appraisal: Appraisal,
        competencies: Sequence[Competency],
        achievements: Sequence[Achievement],
        feedback: Optional[Feedback],
    ) -> None:
        raise NotImplementedError

    def add_feedback(self, feedback: Feedback) -> None:
        raise NotImplementedError

    def fetch(self, employee_id: str) -> PerformanceView:
        raise NotImplementedError
