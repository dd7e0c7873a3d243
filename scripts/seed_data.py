"""
Seed Data Generator — creates realistic fake data for development and demos.

Run: python scripts/seed_data.py [days]
"""

import random
import sys
from datetime import date, datetime, timedelta
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from lifeplanner.analysis.fitness import estimate_distance_km
from lifeplanner.data.database import Database
from lifeplanner.data.models import FitnessData, Goal, Task, TaskStatus
from lifeplanner.data.repository import Repository


def seed(num_days: int = 14) -> None:
    db = Database()
    db.connect()
    repo = Repository(db.conn)
    repo.reset_all_data()

    # ── Goals & task templates ──────────────────────────────────────────
    goals_tasks = {
        ("goal-fitness", "Run a 10k", "health"): [
            ("Interval run", "hard", 45), ("Stretching", "easy", 15),
        ],
        ("goal-spanish", "Learn Spanish", "learning"): [
            ("Vocabulary drill", "easy", 20), ("Grammar chapter", "medium", 40),
        ],
        ("goal-book", "Write a novel draft", "creative"): [
            ("Write 500 words", "hard", 60), ("Outline next chapter", "medium", 30),
        ],
    }
    start_times = ["07:30", "09:00", "11:00", "13:30", "15:00", "18:00", "20:30"]

    today = date.today()
    task_count = 0
    for (goal_id, title, category), templates in goals_tasks.items():
        repo.add_goal(Goal(id=goal_id, title=title, category=category,
                           target_value=num_days * len(templates)))

        for day_offset in range(num_days - 1, -2, -1):  # history, today, tomorrow
            day = today - timedelta(days=day_offset)
            for name, difficulty, minutes in templates:
                task_count += 1
                status = _pick_status(day_offset, difficulty)
                done = status == TaskStatus.DONE
                repo.add_task(Task(
                    id=f"task-{task_count}",
                    goal_id=goal_id,
                    title=name,
                    day_index=-day_offset,
                    scheduled_date=day.isoformat(),
                    start_time=random.choice(start_times),
                    estimated_minutes=minutes,
                    actual_minutes=(
                        max(5, int(minutes * random.uniform(0.7, 1.4))) if done else None
                    ),
                    status=status,
                    difficulty=difficulty,
                    completed_at=(
                        datetime.combine(day, datetime.min.time()) + timedelta(hours=20)
                        if done else None
                    ),
                ))

        repo.update_goal(goal_id, {"current_value": repo.count_done_tasks(goal_id)})

    # ── Fitness history ─────────────────────────────────────────────────
    for day_offset in range(num_days - 1, -1, -1):
        steps = random.randint(3000, 13000)
        repo.record_fitness(FitnessData(
            date=(today - timedelta(days=day_offset)).isoformat(),
            steps=steps,
            steps_goal=10000,
            distance_km=estimate_distance_km(steps),
            active_minutes=steps // 120,
            calories_burned=int(steps * 0.04),
        ))

    db.close()
    print(f"Seeded {task_count} tasks and {num_days} days of fitness data.")


def _pick_status(day_offset: int, difficulty: str) -> str:
    if day_offset < 0:
        return TaskStatus.PENDING        # tomorrow
    if day_offset == 0:
        return random.choice([TaskStatus.PENDING, TaskStatus.DONE, TaskStatus.IN_PROGRESS])
    skip_chance = 0.35 if difficulty == "hard" else 0.15
    roll = random.random()
    if roll < skip_chance:
        return random.choice([TaskStatus.SKIPPED, TaskStatus.RESCHEDULED])
    return TaskStatus.DONE if roll < 0.85 else TaskStatus.PENDING


if __name__ == "__main__":
    count = int(sys.argv[1]) if len(sys.argv) > 1 else 14
    seed(count)
