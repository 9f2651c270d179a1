"""Persistence and notification boundaries.

These protocols define what the scan cycle needs from its collaborators.
Implementations live in core.storage and core.notifications.
"""

from .interfaces import Notifier, WeightStore
