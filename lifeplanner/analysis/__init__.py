from .fitness import analyze_fitness_progress, estimate_distance_km
from .insights import calculate_daily_insight, compute_streak_days
from .patterns import analyze_productivity_patterns
from .recommendations import generate_recommendations

__all__ = [
    "analyze_fitness_progress", "estimate_distance_km", "calculate_daily_insight",
    "compute_streak_days", "analyze_productivity_patterns", "generate_recommendations",
]
