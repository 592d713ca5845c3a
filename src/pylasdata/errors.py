"""Exceptions raised by dataset construction and mutation.

Every error is a local precondition failure: it is raised before anything is
committed, so the dataset that raised it is left exactly as it was.
"""

from __future__ import annotations


class DatasetError(ValueError):
    """Base class for all pylasdata errors."""


class SchemaMismatchError(DatasetError):
    """Table columns don't fit the point format declared in the header."""


class InvariantViolationError(DatasetError):
    """An operation would break a documented layout invariant."""


class CountMismatchError(InvariantViolationError):
    """Declared point/record counts disagree with the supplied collections."""


class InvalidUnitScaleError(DatasetError):
    """A unit-scale or coordinate-scale component is not usable."""


class UnsupportedFieldTypeError(DatasetError, TypeError):
    """A user column's element type can't be stored as an extra field."""


class DuplicateRegistrySingletonError(DatasetError):
    """More than one Extra Bytes record was found."""


class NotFoundError(DatasetError, KeyError):
    """A record or column targeted by an operation doesn't exist."""

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0]) if self.args else ""


class SizeMismatchError(DatasetError):
    """Column length disagrees with the number of points."""


class InvalidCrsError(DatasetError):
    """A coordinate reference system couldn't be parsed."""
