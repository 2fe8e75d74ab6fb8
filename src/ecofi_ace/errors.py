"""Exceptions raised while translating an Ecofi database."""


class EcofiAceError(Exception):
    """Base class for translation errors."""


class RelationshipError(EcofiAceError, ValueError):
    """The station and daily tables cannot be joined on the station code."""


class CellTypeError(EcofiAceError, ValueError):
    """A cell does not hold the type its transform needs."""

    def __init__(self, column: str, value: object, expected: str):
        self.column = column
        self.value = value
        self.expected = expected
        super().__init__(f"Column {column!r}: expected {expected}, got {value!r}")
