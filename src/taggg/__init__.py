"""taggg - multiuser quad-style metadata tagging over a relational store."""

from loguru import logger

from .config import AppSettings, get_settings
from .engine import TagEngine
from .errors import (
    CreationFailedError,
    InvalidClassError,
    InvalidIdError,
    InvalidQueryError,
    InvalidRoleIdError,
    InvalidSpecifierError,
    InvalidTableNameError,
    TagggError,
)
from .logging_config import setup_logging
from .store.models import LookupStatus, Relation, Resource, ResourceIntent, ResourceLookup

logger.disable("taggg")

__version__ = "0.1.0"

__all__ = [
    "AppSettings",
    "CreationFailedError",
    "InvalidClassError",
    "InvalidIdError",
    "InvalidQueryError",
    "InvalidRoleIdError",
    "InvalidSpecifierError",
    "InvalidTableNameError",
    "LookupStatus",
    "Relation",
    "Resource",
    "ResourceIntent",
    "ResourceLookup",
    "TagEngine",
    "TagggError",
    "get_settings",
    "setup_logging",
]
