"""Exceptions raised by the tagging engine.

Lookups that find nothing are not errors: they come back as a
``LookupStatus.NOT_FOUND`` result. Storage failures are SQLAlchemy's own
exceptions and are passed through untouched.
"""

from typing import Optional


class TagggError(Exception):
    """Base class for all taggg errors"""

    def __init__(self, message: str, role: Optional[str] = None):
        super().__init__(message)
        self.role = role


class InvalidTableNameError(TagggError, ValueError):
    """Table identifier is not a plain word"""


class InvalidSpecifierError(TagggError, TypeError):
    """Resource specifier has an unsupported type"""


class InvalidIdError(TagggError, ValueError):
    """Resource id is malformed, or names a resource that does not exist"""


class InvalidClassError(TagggError, ValueError):
    """Resource class is neither a positive id nor a class name"""


class InvalidRoleIdError(TagggError, ValueError):
    """Relation role is not None or a non-negative integer id"""


class CreationFailedError(TagggError):
    """A resource row could not be inserted"""


class InvalidQueryError(TagggError, ValueError):
    """Reporting query names an unknown column or direction"""
