"""Worker process execution."""

from .subprocess_runner import SubprocessRunner, MODEL_LOADING_BUFFER_SECONDS, KILL_ESCALATION_SECONDS

__all__ = ["SubprocessRunner", "MODEL_LOADING_BUFFER_SECONDS", "KILL_ESCALATION_SECONDS"]
