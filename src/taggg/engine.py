from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import sqlalchemy as sa
from loguru import logger

from .config import AppSettings, get_settings
from .errors import CreationFailedError, InvalidIdError, InvalidQueryError
from .specifier import parse_intent
from .store.models import RELATION_ROLES, RES_EMPTY, RESOURCE_FIELDS, Resource, ResourceLookup
from .store.relations import RelationStore
from .store.resolver import ResourceResolver
from .store.schema import build_tables, destroy_schema, init_schema


Order = Union[str, Tuple[str, str]]


class TagEngine:
    """
    Multiuser meta tagging over two relational tables.
    
    A tag links four resources: subject, predicate, object and creator.
    Each of them can be given as:
        int                  - resource id
        dict                 - attributes {uri, class, value, content}
        "uri:<uri>"          - resource by URI
        "[<class>:]<value>"  - value, optionally prefixed with a class name
                               (escape literal colons as "\\:")
        None                 - the empty resource
    
    write() reuses matching resources and creates missing ones (never ids);
    erase() and exists() only look resources up.
    
    Example:
        tags = TagEngine(sa.create_engine("sqlite:///tags.db"))
        tags.init()
        tags.write("uri:http://google.com/", "dc:description", "web search engine", 1)
    """
    
    def __init__(
        self,
        engine: sa.Engine,
        resource_table: str = "res",
        relation_table: str = "rel",
        refetch_on_conflict: bool = True,
        filters: Optional[Dict[str, Any]] = None,
        orders: Optional[Sequence[Order]] = None,
        limit: int = 0,
        offset: int = 0
    ):
        self.engine = engine
        self.tables = build_tables(resource_table, relation_table)
        
        self.resolver = ResourceResolver(
            engine, self.tables.resources, refetch_on_conflict=refetch_on_conflict
        )
        self.relations = RelationStore(engine, self.tables.relations)
        
        # Reporting defaults
        self.filters = dict(filters or {})
        self.orders = list(orders or [])
        self.limit = limit
        self.offset = offset
    
    @classmethod
    def from_settings(cls, settings: Optional[AppSettings] = None) -> "TagEngine":
        """Build an engine (and its database connection) from configuration"""
        settings = settings or get_settings()
        db = settings.database
        
        logger.debug(f"Connecting to {db.url}")
        engine = sa.create_engine(db.url, echo=db.echo)
        
        return cls(
            engine,
            resource_table=db.resource_table,
            relation_table=db.relation_table,
            refetch_on_conflict=settings.refetch_on_conflict,
            limit=settings.fetch.limit,
            offset=settings.fetch.offset
        )
    
    def init(self) -> "TagEngine":
        """Create the tables (if missing) and the reserved resources"""
        init_schema(self.engine, self.tables)
        return self
    
    def destroy(self) -> "TagEngine":
        """Drop the tables and ALL tag data"""
        destroy_schema(self.engine, self.tables)
        return self
    
    def close(self) -> None:
        """Release pooled database connections"""
        self.engine.dispose()
    
    def write(self, subject=None, predicate=None, object=None, creator=None) -> "TagEngine":
        """
        Create a tag, creating any missing resources on the way.
        
        The relation row is only written when the subject is set and at
        least one of predicate/object is set; otherwise this is a silent
        no-op. Resources created before a failure are kept.
        
        Raises:
            InvalidIdError: a role names a resource id that does not exist
            CreationFailedError: a role's resource could not be created
        """
        ids = [
            self._resolve_for_write(role, spec)
            for role, spec in zip(RELATION_ROLES, (subject, predicate, object, creator))
        ]
        s, p, o, c = ids
        
        if s != RES_EMPTY and (p != RES_EMPTY or o != RES_EMPTY):
            self.relations.create(s, p, o, c)
        else:
            logger.debug(f"Tag {tuple(ids)} lacks a subject or a predicate/object, not written")
        
        return self
    
    def erase(self, subject=None, predicate=None, object=None, creator=None) -> "TagEngine":
        """
        Remove a tag. Does nothing when a referenced resource does not exist.
        """
        ids = self._resolve_existing(subject, predicate, object, creator)
        if ids is None:
            return self
        
        self.relations.delete(*ids)
        return self
    
    def exists(self, subject=None, predicate=None, object=None, creator=None) -> bool:
        """Check whether a tag exists"""
        ids = self._resolve_existing(subject, predicate, object, creator)
        if ids is None:
            return False
        
        return self.relations.fetch(*ids) is not None
    
    def lookup(self, spec: Any) -> ResourceLookup:
        """Find the resource a specifier refers to, without creating anything"""
        intent = parse_intent(spec)
        return self.resolver.fetch(intent)
    
    def resolve(self, spec: Any) -> ResourceLookup:
        """Find the resource a specifier refers to, creating it when missing"""
        intent = parse_intent(spec)
        if intent.id is not None:
            return self.resolver.fetch(intent)
        return self.resolver.resolve_or_create(intent)
    
    def fetch(
        self,
        filters: Optional[Dict[str, Any]] = None,
        orders: Optional[Sequence[Order]] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None
    ) -> List[Resource]:
        """
        Query the resource table.
        
        Args:
            filters: column -> exact value, ANDed ("class" also takes a class name)
            orders: column names or (column, "asc"|"desc") pairs
            limit: max rows, 0 for no limit
            offset: rows to skip
        
        Arguments left as None fall back to the engine's filters/orders/limit/offset.
        """
        filters = self.filters if filters is None else filters
        orders = self.orders if orders is None else orders
        limit = self.limit if limit is None else limit
        offset = self.offset if offset is None else offset
        
        if limit < 0 or offset < 0:
            raise InvalidQueryError(f"limit and offset must be >= 0 (got {limit}, {offset})")
        
        table = self.tables.resources
        query = sa.select(table)
        
        for column, value in filters.items():
            _check_column(column)
            if column == "class" and isinstance(value, str):
                class_lookup = self.resolver.fetch_class(value)
                if not class_lookup:
                    return []
                value = class_lookup.id
            if value is None:
                query = query.where(table.c[column].is_(None))
            else:
                query = query.where(table.c[column] == value)
        
        for order in orders:
            if isinstance(order, str):
                order = (order, "asc")
            if not isinstance(order, (tuple, list)) or len(order) != 2:
                raise InvalidQueryError(f"Order must be a column or a (column, direction) pair: {order!r}")
            column, direction = order
            _check_column(column)
            if direction not in ("asc", "desc"):
                raise InvalidQueryError(f"Unknown order direction: {direction!r}")
            query = query.order_by(getattr(table.c[column], direction)())
        query = query.order_by(table.c.id.asc())
        
        if limit:
            query = query.limit(limit)
        if offset:
            query = query.offset(offset)
        
        with self.engine.connect() as conn:
            rows = conn.execute(query).mappings().all()
        
        return [Resource.model_validate(dict(row)) for row in rows]
    
    def _resolve_for_write(self, role: str, spec: Any) -> int:
        intent = parse_intent(spec)
        
        if intent.id is not None:
            try:
                found = self.resolver.fetch(intent)
            except InvalidIdError as e:
                raise InvalidIdError(f"Invalid {role} id ({intent.id})", role=role) from e
            if not found:
                raise InvalidIdError(f"Invalid {role} id ({intent.id})", role=role)
            return found.id
        
        if intent.has_attributes():
            try:
                return self.resolver.resolve_or_create(intent).id
            except CreationFailedError as e:
                raise CreationFailedError(f"{role} resource creation failed: {e}", role=role) from e
        
        return RES_EMPTY
    
    def _resolve_existing(self, *specs) -> Optional[tuple]:
        """Role ids for erase/exists, or None when a named resource is missing"""
        ids = []
        for role, spec in zip(RELATION_ROLES, specs):
            intent = parse_intent(spec)
            if intent.has_attributes():
                found = self.resolver.fetch(intent)
                if not found:
                    logger.debug(f"No resource for {role} {spec!r}, nothing to match")
                    return None
                ids.append(found.id)
            elif intent.id is not None:
                ids.append(intent.id)
            else:
                ids.append(RES_EMPTY)
        return tuple(ids)


def _check_column(column: str) -> None:
    if column not in RESOURCE_FIELDS:
        raise InvalidQueryError(f"Unknown resource column: {column!r}")
