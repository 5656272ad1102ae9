from .models import (
    RES_CLASS,
    RES_EMPTY,
    RES_TAGGG,
    LookupStatus,
    Relation,
    Resource,
    ResourceIntent,
    ResourceLookup,
)
from .relations import RelationStore
from .resolver import ResourceResolver
from .schema import TagTables, build_tables, destroy_schema, init_schema

__all__ = [
    "RES_CLASS",
    "RES_EMPTY",
    "RES_TAGGG",
    "LookupStatus",
    "Relation",
    "Resource",
    "ResourceIntent",
    "ResourceLookup",
    "RelationStore",
    "ResourceResolver",
    "TagTables",
    "build_tables",
    "destroy_schema",
    "init_schema",
]
