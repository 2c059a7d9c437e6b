from __future__ import annotations

import uuid
from decimal import Decimal
from typing import Any, Callable, List, Mapping, Optional, Sequence

from ..auth.model import CurrentUser
from ..common.datetime_utils import require_iso_date
from ..common.logging import get_logger
from ..common.validators import parse_flag, require_choice, require_enum, require_non_empty, require_range
from ..core.enums import GoalStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .model import Achievement, Appraisal, Competency, Feedback, Goal, PerformanceView, Task
from .repository import PerformanceRepository

logger = get_logger(__name__)

TASK_PRIORITIES = ("Low", "Medium", "High")


def _new_id() -> str:
    return str(uuid.uuid4())


def _as_list(value: Any, field_name: str) -> List[Mapping[str, Any]]:
    if value in (None, ""):
        return []
    if not isinstance(value, list) or not all(isinstance(v, Mapping) for v in value):
        raise ValidationError(f"{field_name} must be an array of objects")
    return value


class PerformanceService:
    """Goals, appraisals and feedback."""

    def __init__(
        self,
        performance: PerformanceRepository,
        employees: EmployeeRepository,
        *,
        id_factory: Callable[[], str] = _new_id,
    ):
        self._performance = performance
        self._employees = employees
        self._new_id = id_factory

    @staticmethod
    def _require_approver(actor: CurrentUser, action: str) -> None:
        if not actor.is_approver:
            raise AuthorizationError(f"Only super admin or HR can {action}")

    def _employee(self, employee_id: Any) -> Employee:
        employee = self._employees.get_by_employee_id(require_non_empty(employee_id, "employee_id"))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def _ensure_can_view(self, actor: CurrentUser, employee: Employee) -> None:
        if actor.is_approver or actor.employee_id == employee.employee_id:
            return
        if actor.role is Role.DEPT_HEAD and actor.department_id and actor.department_id == employee.department_id:
            return
        raise AuthorizationError("Unauthorized access to this employee's performance")

    def set_goal(self, *, actor: CurrentUser, payload: Mapping[str, Any]) -> Goal:
        self._require_approver(actor, "set goals")
        employee = self._employee(payload.get("employee_id"))
        title = require_non_empty(payload.get("title"), "title")
        due_date = require_iso_date(payload.get("due_date"), "due_date")

        goal_id = self._new_id()
        tasks = []
        for idx, raw in enumerate(_as_list(payload.get("tasks"), "tasks"), start=1):
            tasks.append(
                Task(
                    task_id=self._new_id(),
                    goal_id=goal_id,
                    employee_id=employee.employee_id,
                    title=require_non_empty(raw.get("title"), f"tasks[{idx}].title"),
                    due_date=require_iso_date(raw.get("due_date"), f"tasks[{idx}].due_date"),
                    description=(raw.get("description") or None),
                    priority=require_choice(raw.get("priority") or "Medium", TASK_PRIORITIES, f"tasks[{idx}].priority"),
                )
            )

        goal = Goal(
            goal_id=goal_id,
            employee_id=employee.employee_id,
            title=title,
            due_date=due_date,
            created_by=actor.employee_id,
            description=(payload.get("description") or None),
            tasks=tuple(tasks),
        )
        self._performance.create_goal(goal, tasks)
        logger.info("goal %s set for %s by %s with %d task(s)", goal_id, employee.employee_id, actor.employee_id, len(tasks))
        return goal

    def update_goal_progress(self, *, actor: CurrentUser, goal_id: str, progress: Any, status: Any) -> Goal:
        goal = self._performance.get_goal(goal_id)
        if not goal:
            raise NotFoundError("Goal not found")
        pct = require_range(progress, "progress", 0, 100)
        new_status = require_enum(status, GoalStatus, "status")

        if not actor.is_approver and goal.employee_id != actor.employee_id:
            if actor.role is not Role.DEPT_HEAD:
                raise AuthorizationError("You can only update your own goals")
            owner = self._employees.get_by_employee_id(goal.employee_id)
            if not owner or not actor.department_id or owner.department_id != actor.department_id:
                raise AuthorizationError("Goal does not belong to your department")

        if not self._performance.update_goal_progress(goal_id=goal.goal_id, progress=int(pct), status=new_status):
            raise NotFoundError("Goal not found")
        return self._performance.get_goal(goal.goal_id) or goal

    def conduct_appraisal(self, *, actor: CurrentUser, payload: Mapping[str, Any]) -> Appraisal:
        self._require_approver(actor, "conduct appraisals")
        employee = self._employee(payload.get("employee_id"))
        score = require_range(payload.get("performance_score"), "performance_score", 0, 100)
        comments = require_non_empty(payload.get("manager_comments"), "manager_comments")
        hike_raw = payload.get("salary_hike_percentage")
        hike = require_range(hike_raw, "salary_hike_percentage", 0, 100) if hike_raw not in (None, "") else 0.0

        reviewer_id = (payload.get("reviewer_id") or "").strip() or actor.employee_id
        if reviewer_id != actor.employee_id and not self._employees.get_by_employee_id(reviewer_id):
            raise NotFoundError("Reviewer not found")

        appraisal_id = self._new_id()
        competencies = [
            Competency(
                competency_id=self._new_id(),
                employee_id=employee.employee_id,
                appraisal_id=appraisal_id,
                skill=require_non_empty(raw.get("skill"), f"competencies[{idx}].skill"),
                manager_rating=Decimal(
                    str(require_range(raw.get("manager_rating"), f"competencies[{idx}].manager_rating", 0, 10))
                ),
                feedback=(raw.get("feedback") or None),
            )
            for idx, raw in enumerate(_as_list(payload.get("competencies"), "competencies"), start=1)
        ]
        achievements = [
            Achievement(
                achievement_id=self._new_id(),
                employee_id=employee.employee_id,
                appraisal_id=appraisal_id,
                title=require_non_empty(raw.get("title"), f"achievements[{idx}].title"),
                date=require_iso_date(raw.get("date"), f"achievements[{idx}].date"),
                type=(raw.get("type") or "Achievement"),
            )
            for idx, raw in enumerate(_as_list(payload.get("achievements"), "achievements"), start=1)
        ]

        appraisal = Appraisal(
            appraisal_id=appraisal_id,
            employee_id=employee.employee_id,
            performance_score=Decimal(str(score)),
            reviewer_id=reviewer_id,
            manager_comments=comments,
            bonus_eligible=parse_flag(payload.get("bonus_eligible")),
            promotion_recommended=parse_flag(payload.get("promotion_recommended")),
            salary_hike_percentage=Decimal(str(hike)),
        )
        feedback = Feedback(
            feedback_id=self._new_id(),
            employee_id=employee.employee_id,
            source="Manager",
            comment=comments,
        )
        self._performance.create_appraisal(appraisal, competencies, achievements, feedback)
        logger.info("appraisal %s recorded for %s by %s", appraisal_id, employee.employee_id, reviewer_id)
        return appraisal

    def submit_self_review(self, *, actor: CurrentUser, employee_id: Optional[str], comments: Any) -> Feedback:
        target = (employee_id or "").strip() or actor.employee_id
        if target != actor.employee_id:
            raise AuthorizationError("You can only submit your own self review")
        feedback = Feedback(
            feedback_id=self._new_id(),
            employee_id=actor.employee_id,
            source="Self",
            comment=require_non_empty(comments, "comments"),
        )
        self._performance.add_feedback(feedback)
        return feedback

    def fetch_performance(self, *, actor: CurrentUser, employee_id: Optional[str] = None) -> PerformanceView:
        employee = self._employee(employee_id or actor.employee_id)
        self._ensure_can_view(actor, employee)
        return self._performance.fetch(employee.employee_id)

    def list_goals(self, *, actor: CurrentUser, employee_id: Optional[str] = None) -> Sequence[Goal]:
        return self.fetch_performance(actor=actor, employee_id=employee_id).goals
