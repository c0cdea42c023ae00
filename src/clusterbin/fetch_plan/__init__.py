"""
Fetch planning.

This package handles:
1. Building per-component fetch plans from the registry and a resolved version
2. Applying the outbound URL transform
3. Recording the outcome of every component in a run
"""

from .plan_manager import ComponentState, FetchPlan, FetchPlanManager, FetchStatus

__all__ = ["ComponentState", "FetchPlan", "FetchPlanManager", "FetchStatus"]
