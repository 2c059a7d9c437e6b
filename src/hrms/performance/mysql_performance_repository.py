from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from ..core.enums import GoalStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, db_transaction, fetchall, fetchone, to_date, to_decimal
from .model import Achievement, Appraisal, Competency, Feedback, Goal, PerformanceView, Task
from .repository import PerformanceRepository


def _row_to_task(r: dict) -> Task:
    return Task(
        task_id=r["task_id"],
        goal_id=r["goal_id"],
        employee_id=r["employee_id"],
        title=r["title"],
        due_date=to_date(r.get("due_date")),
        description=r.get("description"),
        priority=r.get("priority") or "Medium",
    )


def _row_to_goal(r: dict, tasks: Sequence[Task] = ()) -> Goal:
    return Goal(
        goal_id=r["goal_id"],
        employee_id=r["employee_id"],
        title=r["title"],
        due_date=to_date(r["due_date"]),
        created_by=r["created_by"],
        description=r.get("description"),
        progress=int(r.get("progress") or 0),
        status=GoalStatus(r.get("status") or GoalStatus.NOT_STARTED.value),
        tasks=tuple(tasks),
    )


def _insert_feedback(cur, feedback: Feedback) -> None:
    cur.execute(
        "INSERT INTO feedback (feedback_id, employee_id, source, comment) VALUES (%s, %s, %s, %s)",
        (feedback.feedback_id, feedback.employee_id, feedback.source, feedback.comment),
    )


class MySQLPerformanceRepository(PerformanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_goal(self, goal: Goal, tasks: Sequence[Task]) -> None:
        with db_transaction(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO goals (goal_id, employee_id, title, description, due_date, progress, status, created_by)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                """,
                (
                    goal.goal_id,
                    goal.employee_id,
                    goal.title,
                    goal.description,
                    goal.due_date,
                    goal.progress,
                    goal.status.value,
                    goal.created_by,
                ),
            )
            for t in tasks:
                cur.execute(
                    """
                    INSERT INTO tasks (task_id, goal_id, employee_id, title, description, due_date, priority)
                    VALUES (%s, %s, %s, %s, %s, %s, %s)
                    """,
                    (t.task_id, t.goal_id, t.employee_id, t.title, t.description, t.due_date, t.priority),
                )

    def get_goal(self, goal_id: str) -> Optional[Goal]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT goal_id, employee_id, title, description, due_date, progress, status, created_by
                FROM goals WHERE goal_id=%s
                """,
                (goal_id,),
            )
            row = fetchone(cur)
            if not row:
                return None
            cur.execute("SELECT * FROM tasks WHERE goal_id=%s ORDER BY due_date", (goal_id,))
            return _row_to_goal(row, [_row_to_task(t) for t in fetchall(cur)])

    def update_goal_progress(self, *, goal_id: str, progress: int, status: GoalStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE goals SET progress=%s, status=%s WHERE goal_id=%s",
                (progress, status.value, goal_id),
            )
            return cur.rowcount > 0

    def create_appraisal(
        self,
        appraisal: Appraisal,
        competencies: Sequence[Competency],
        achievements: Sequence[Achievement],
        feedback: Optional[Feedback],
    ) -> None:
        with db_transaction(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO appraisals
                    (appraisal_id, employee_id, performance_score, manager_comments, bonus_eligible,
                     promotion_recommended, salary_hike_percentage, reviewer_id)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                """,
                (
                    appraisal.appraisal_id,
                    appraisal.employee_id,
                    appraisal.performance_score,
                    appraisal.manager_comments,
                    1 if appraisal.bonus_eligible else 0,
                    1 if appraisal.promotion_recommended else 0,
                    appraisal.salary_hike_percentage,
                    appraisal.reviewer_id,
                ),
            )
            for c in competencies:
                cur.execute(
                    """
                    INSERT INTO competencies (competency_id, employee_id, appraisal_id, skill, manager_rating, feedback)
                    VALUES (%s, %s, %s, %s, %s, %s)
                    """,
                    (c.competency_id, c.employee_id, c.appraisal_id, c.skill, c.manager_rating, c.feedback),
                )
            for a in achievements:
                cur.execute(
                    """
                    INSERT INTO achievements (achievement_id, employee_id, appraisal_id, title, date, type)
                    VALUES (%s, %s, %s, %s, %s, %s)
                    """,
                    (a.achievement_id, a.employee_id, a.appraisal_id, a.title, a.date, a.type),
                )
            if feedback:
                _insert_feedback(cur, feedback)

    def add_feedback(self, feedback: Feedback) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            _insert_feedback(cur, feedback)

    def fetch(self, employee_id: str) -> PerformanceView:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT goal_id, employee_id, title, description, due_date, progress, status, created_by
                FROM goals WHERE employee_id=%s ORDER BY due_date
                """,
                (employee_id,),
            )
            goal_rows = fetchall(cur)
            cur.execute("SELECT * FROM tasks WHERE employee_id=%s ORDER BY due_date", (employee_id,))
            tasks: Dict[str, List[Task]] = {}
            for t in fetchall(cur):
                tasks.setdefault(t["goal_id"], []).append(_row_to_task(t))

            cur.execute("SELECT * FROM competencies WHERE employee_id=%s ORDER BY skill", (employee_id,))
            competencies = tuple(
                Competency(
                    competency_id=r["competency_id"],
                    employee_id=r["employee_id"],
                    skill=r["skill"],
                    manager_rating=to_decimal(r["manager_rating"]),
                    feedback=r.get("feedback"),
                    appraisal_id=r.get("appraisal_id"),
                )
                for r in fetchall(cur)
            )
            cur.execute("SELECT * FROM achievements WHERE employee_id=%s ORDER BY date DESC", (employee_id,))
            achievements = tuple(
                Achievement(
                    achievement_id=r["achievement_id"],
                    employee_id=r["employee_id"],
                    title=r["title"],
                    date=to_date(r["date"]),
                    type=r.get("type") or "Achievement",
                    appraisal_id=r.get("appraisal_id"),
                )
                for r in fetchall(cur)
            )
            cur.execute("SELECT * FROM feedback WHERE employee_id=%s ORDER BY timestamp DESC", (employee_id,))
            feedback = tuple(
                Feedback(
                    feedback_id=r["feedback_id"],
                    employee_id=r["employee_id"],
                    source=r["source"],
                    comment=r["comment"],
                    timestamp=r.get("timestamp"),
                )
                for r in fetchall(cur)
            )
            cur.execute("SELECT * FROM appraisals WHERE employee_id=%s ORDER BY created_at DESC", (employee_id,))
            appraisals = tuple(
                Appraisal(
                    appraisal_id=r["appraisal_id"],
                    employee_id=r["employee_id"],
                    performance_score=to_decimal(r["performance_score"]),
                    reviewer_id=r["reviewer_id"],
                    manager_comments=r.get("manager_comments"),
                    bonus_eligible=bool(r.get("bonus_eligible")),
                    promotion_recommended=bool(r.get("promotion_recommended")),
                    salary_hike_percentage=to_decimal(r.get("salary_hike_percentage")),
                    created_at=r.get("created_at"),
                )
                for r in fetchall(cur)
            )
            return PerformanceView(
                employee_id=employee_id,
                goals=tuple(_row_to_goal(g, tasks.get(g["goal_id"], ())) for g in goal_rows),
                competencies=competencies,
                achievements=achievements,
                feedback=feedback,
                appraisals=appraisals,
            )
