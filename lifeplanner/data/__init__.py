from .database import Database
from .models import (
    AgentAction, AnalysisResult, BehaviorPattern, DailyInsight, FitnessData,
    FitnessProgress, Goal, Task,
)
from .repository import Repository

__all__ = [
    "Database", "Repository", "AgentAction", "AnalysisResult", "BehaviorPattern",
    "DailyInsight", "FitnessData", "FitnessProgress", "Goal", "Task",
]
