"""
Task Service — status changes on planned tasks and their side effects.

Marking a task done stamps completed_at and refreshes the owning goal's
progress counter; moving it back to pending clears the stamp. Also builds
the completion heatmap shown on the dashboard.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional

from lifeplanner.data.models import AgentAction, Task, TaskStatus
from lifeplanner.data.repository import Repository
from lifeplanner.errors import InvalidInput, TaskNotFound

logger = logging.getLogger(__name__)


class TaskService:
    def __init__(self, repo: Repository) -> None:
        self.repo = repo

    def update_task_status(
        self,
        task_id: str,
        status: str,
        actual_minutes: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> Task:
        """Apply a status change and return the updated task."""
        if status not in TaskStatus.ALL:
            raise InvalidInput(
                f"Unknown status '{status}'; expected one of {', '.join(TaskStatus.ALL)}."
            )
        task = self.repo.get_task(task_id)
        if task is None:
            raise TaskNotFound(task_id)

        now = datetime.now()
        task.status = status
        if actual_minutes is not None:
            task.actual_minutes = actual_minutes
        if notes is not None:
            task.notes = notes
        if status == TaskStatus.DONE:
            task.completed_at = now
        elif status == TaskStatus.PENDING:
            task.completed_at = None
        self.repo.save_task(task)

        if status == TaskStatus.DONE and task.goal_id:
            self._refresh_goal_progress(task.goal_id)

        self.repo.append_agent_action(AgentAction(
            id=f"action-{int(now.timestamp() * 1000)}",
            type="check_progress",
            timestamp=now,
            input="Task Completed" if status == TaskStatus.DONE else "Task Updated",
            output=f'Task "{task.title}" marked as {status}',
            status="completed",
        ))
        logger.info("Task %s marked %s", task.id, status)
        return task

    def activity_heatmap(
        self, weeks: int = 12, today: Optional[date] = None
    ) -> List[List[Dict[str, object]]]:
        """
        Done-task counts per scheduled date, as `weeks` rows of 7 days.

        Oldest week first; the last cell is today.
        """
        today = today or date.today()
        counts: Dict[str, int] = {}
        for task in self.repo.get_tasks():
            if task.status == TaskStatus.DONE and task.scheduled_date:
                day = task.scheduled_date[:10]
                counts[day] = counts.get(day, 0) + 1

        grid: List[List[Dict[str, object]]] = []
        for week in range(weeks - 1, -1, -1):
            row = []
            for offset in range(6, -1, -1):
                day = (today - timedelta(days=week * 7 + offset)).isoformat()
                row.append({"date": day, "count": counts.get(day, 0)})
            grid.append(row)
        return grid

    # ── Internal ────────────────────────────────────────────────────────────

    def _refresh_goal_progress(self, goal_id: str) -> None:
        if self.repo.get_goal(goal_id) is None:
            logger.warning("Task references missing goal %s", goal_id)
            return
        done = self.repo.count_done_tasks(goal_id)
        self.repo.update_goal(goal_id, {"current_value": done})
        logger.debug("Goal %s progress now %d", goal_id, done)
