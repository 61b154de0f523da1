# tests/conftest.py
# This file is part of Regrada - A DCR Choreography Toolkit
#
# Test configuration and shared fixtures for pytest

"""Test configuration and shared fixtures for Regrada tests.

The configuration handles:
- Python path setup for module imports
- A fresh advisory log for every test
- Common fixtures: empty and sample editors
"""

import sys
import pytest
from pathlib import Path

# Ensure project modules can be imported
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment():
    """Verify the project packages import before any test runs."""
    try:
        import core
        import codegen
        import logic
        import model
        import parser
        import utils
    except ImportError as e:
        pytest.skip(f"Cannot import required modules: {e}")

    yield


@pytest.fixture(autouse=True)
def fresh_logs():
    """Empty the advisory history around each test."""
    from utils.logger import LogLevel, get_logger

    logger = get_logger()
    logger.set_level(LogLevel.INFO)
    logger.clear_logs()
    yield logger
    logger.clear_logs()


@pytest.fixture
def sample():
    """Provide the starter choreography (e0 -->* e1 *--> e2).

    Returns:
        Choreography: A fresh copy per test
    """
    from model import build_sample_choreography

    return build_sample_choreography()


@pytest.fixture
def editor(sample):
    """Provide an editor over the sample choreography."""
    from core import ChoreographyEditor

    return ChoreographyEditor(sample)


@pytest.fixture
def empty_editor():
    """Provide an editor over an empty choreography."""
    from core import ChoreographyEditor

    return ChoreographyEditor()


@pytest.fixture
def add_events():
    """Create ``count`` unit input events through an editor and return their ids."""

    def _add(editor, count, parent=None):
        from model import EventKind

        return [
            editor.create_event(EventKind.INPUT, ["P(id=1)"], parent=parent)
            for _ in range(count)
        ]

    return _add
