"""
Analysis scope carried through context-local storage.

An analysis scope names the run (analysis_id), the engine operation
that opened it, and the thread currently being processed. Formatters
read the active scope so every log line from a channel scan can be
traced back to the thread that produced it.
"""

import contextvars
import uuid
from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True)
class AnalysisScope:
    analysis_id: str
    operation: Optional[str] = None
    thread_ts: Optional[str] = None

    def log_fields(self) -> dict[str, str]:
        """Scope fields that are set, keyed as they appear in log records."""
        fields = {"analysis_id": self.analysis_id}
        if self.operation:
            fields["operation"] = self.operation
        if self.thread_ts:
            fields["thread_ts"] = self.thread_ts
        return fields


_scope_var: contextvars.ContextVar[Optional[AnalysisScope]] = contextvars.ContextVar(
    "analysis_scope", default=None
)


def get_analysis_scope() -> Optional[AnalysisScope]:
    return _scope_var.get()


def get_analysis_id() -> Optional[str]:
    scope = _scope_var.get()
    return scope.analysis_id if scope else None


def generate_analysis_id() -> str:
    return f"ana-{uuid.uuid4().hex[:16]}"


class AnalysisContext:
    """
    Open an analysis scope for the duration of a `with` block.

    A nested context without its own analysis_id stays on the enclosing
    run, so per-thread scopes inside a scan share one ID and differ
    only by thread_ts. Fields not given are inherited the same way.

    Usage:
        with AnalysisContext(operation="identify_important_threads"):
            for thread in threads:
                with AnalysisContext(thread_ts=thread.thread_ts):
                    logger.debug("Scoring thread")
    """

    def __init__(
        self,
        analysis_id: Optional[str] = None,
        operation: Optional[str] = None,
        thread_ts: Optional[str] = None,
    ):
        parent = _scope_var.get()
        if parent is None:
            scope = AnalysisScope(analysis_id=analysis_id or generate_analysis_id())
        else:
            scope = replace(parent, analysis_id=analysis_id or parent.analysis_id)
        if operation is not None:
            scope = replace(scope, operation=operation)
        if thread_ts is not None:
            scope = replace(scope, thread_ts=thread_ts)

        self.scope = scope
        self._token: Optional[contextvars.Token] = None

    @property
    def analysis_id(self) -> str:
        return self.scope.analysis_id

    def __enter__(self) -> "AnalysisContext":
        self._token = _scope_var.set(self.scope)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._token is not None:
            _scope_var.reset(self._token)
            self._token = None
