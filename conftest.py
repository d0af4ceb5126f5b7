"""Shared fixtures for the function header tool tests."""

import pytest

from function_header import FunctionHeaderCommand
from ui_thread import UIThreadExecutor


@pytest.fixture
def executor():
    ui = UIThreadExecutor(thread_name='test-ui')
    yield ui
    ui.shutdown()


@pytest.fixture
def command():
    """Live command registration, torn down after the test."""
    live = FunctionHeaderCommand.initialize()
    yield live
    FunctionHeaderCommand.shutdown()
