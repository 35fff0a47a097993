"""Deterministic random sources for driving the growth rule in tests."""


class FixedChoice:
    """Always picks the same candidate index and records each request."""

    def __init__(self, index=0):
        self.index = index
        self.calls = []

    def integers(self, high):
        self.calls.append(high)
        return self.index


class Scripted:
    """Returns the given values in order."""

    def __init__(self, values):
        self.values = list(values)

    def integers(self, high):
        value = self.values.pop(0)
        assert 0 <= value < high
        return value


class NoRandom:
    def integers(self, high):
        raise AssertionError("random source should not be consulted")
