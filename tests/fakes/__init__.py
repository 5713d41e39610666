"""Test doubles for corpsite."""

from .steps import RecordingStep, failing_action, make_step, table_step

__all__ = ["RecordingStep", "failing_action", "make_step", "table_step"]
