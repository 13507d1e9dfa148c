"""
Commit-once, push-to-many orchestration and its data model.
"""

from .models import PushReport, PushResult, RemoteGroup, RemoteTarget, RunConfig  # noqa: F401
from .orchestrator import CommitError, PushAbortedError, PushOrchestrator, StageError  # noqa: F401
