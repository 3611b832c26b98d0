"""Testing – in-memory doubles for the connection ports."""
from txunit.testing.fakes import FakeConnection, FakeTransaction

__all__ = ["FakeConnection", "FakeTransaction"]
