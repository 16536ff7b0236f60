"""
Test configuration — ensures repo root is in sys.path + shared thread fixtures.

This allows tests to import threadsense without installing the package.
Root logger handlers are restored after every test because the CLI
reconfigures logging globally.
"""

import logging
import sys
from pathlib import Path

import pytest

# Add repo root to sys.path so tests can import threadsense.*
REPO_ROOT = Path(__file__).parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from threadsense.models import ConversationThread, Message, coerce_messages  # noqa: E402

# =============================================================================
# LOGGING ISOLATION
# =============================================================================


@pytest.fixture(autouse=True)
def _restore_root_logging():
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


# =============================================================================
# MESSAGE FIXTURES
# =============================================================================


def make_message(ts: str, user: str | None, text: str | None, **kwargs) -> Message:
    return Message(ts=ts, user=user, text=text, **kwargs)


@pytest.fixture
def english_thread() -> list[Message]:
    """A short incident thread: urgent fix, follow-up, resolution."""
    return coerce_messages(
        [
            {
                "ts": "1700000000.000100",
                "user": "U1",
                "text": "Urgent: the deployment pipeline is broken in production <@U2>",
            },
            {
                "ts": "1700000060.000200",
                "user": "U2",
                "text": "- TODO: fix the deployment script and review the rollback plan",
            },
            {
                "ts": "1700000300.000300",
                "user": "U1",
                "text": "Thanks, the customer release is blocked until then",
            },
            {
                "ts": "1700003900.000400",
                "user": "U2",
                "text": "Fixed the deployment script, done",
            },
        ]
    )


@pytest.fixture
def japanese_thread() -> list[Message]:
    return coerce_messages(
        [
            {"ts": "1700000000", "user": "U1", "text": "至急レビューをお願いします"},
            {"ts": "1700000120", "user": "U2", "text": "実装しています。明日までに修正します"},
            {"ts": "1700000240", "user": "U1", "text": "予算を正式に承認しました"},
        ]
    )


@pytest.fixture
def timed_messages() -> list[Message]:
    """Three messages at t=1000, 1060, 1300 seconds."""
    return [
        make_message("1000", "A", "first"),
        make_message("1060", "B", "second"),
        make_message("1300", "A", "third"),
    ]


@pytest.fixture
def sample_threads() -> list[ConversationThread]:
    return [
        ConversationThread(
            thread_ts="1700000000.000100",
            messages=(
                make_message("1700000000.000100", "U1", "deploy pipeline failing again <@U2>"),
                make_message("1700000100.000100", "U2", "urgent: rollback the deploy now"),
                make_message("1700000200.000100", "U3", "rollback finished, deploy pipeline green"),
            ),
        ),
        ConversationThread(
            thread_ts="1700003600.000100",
            messages=(
                make_message("1700003600.000100", "U1", "deploy pipeline flaky again"),
                make_message("1700003700.000100", "U2", "looking into the pipeline logs"),
            ),
        ),
        ConversationThread(
            thread_ts="1690000000.000100",
            messages=(make_message("1690000000.000100", "U9", "lunch options for friday"),),
        ),
    ]
