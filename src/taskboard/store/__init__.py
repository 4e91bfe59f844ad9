"""Snapshot, views and feedback.

``SyncStore`` lives in ``src.taskboard.store.store``; it is not re-exported
here because the services package imports the snapshot types from this
package.
"""

from src.taskboard.store.feedback import Feedback, FeedbackChannel, FeedbackLevel
from src.taskboard.store.snapshot import SessionPhase, Snapshot, SnapshotView

__all__ = [
    "Feedback",
    "FeedbackChannel",
    "FeedbackLevel",
    "SessionPhase",
    "Snapshot",
    "SnapshotView",
]
