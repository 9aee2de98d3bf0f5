"""
Backport Reminder

Scheduled helper that reminds authors and reviewers of pull requests
left carrying a backport label for too long.
"""

__version__ = "1.0.0"

from .runner import BackportReminder, RunSummary

__all__ = ["BackportReminder", "RunSummary"]
