"""Smoke test to verify the project is set up correctly."""

from py_sched import __doc__


def test_package_is_importable() -> None:
    """Verify that py_sched can be imported."""
    assert __doc__ is not None
