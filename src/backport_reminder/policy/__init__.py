"""
Reminder Policy

Per-candidate reminder decision logic.
"""

from .evaluator import PolicyEvaluator, units_between

__all__ = ['PolicyEvaluator', 'units_between']
