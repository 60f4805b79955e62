"""
Plan analytics and adaptation.

Modules:
- effectiveness: StudyPlanAnalytics from executed sessions
- plan_adapter: major revision / minor adjustment of a plan
"""
from src.analytics.effectiveness import EffectivenessAnalyzer
from src.analytics.plan_adapter import PlanAdapter

__all__ = ["EffectivenessAnalyzer", "PlanAdapter"]
