"""
Comment Formatting

Reminder comment composition.
"""

from .reminder import ReminderFormatter

__all__ = ['ReminderFormatter']
