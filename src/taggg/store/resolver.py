from typing import Optional

import sqlalchemy as sa
from loguru import logger

from ..errors import CreationFailedError, InvalidClassError, InvalidIdError
from .models import (
    RES_CLASS,
    RESERVED_RESOURCES,
    LookupStatus,
    Resource,
    ResourceIntent,
    ResourceLookup,
)
from .schema import insert_ignore


class ResourceResolver:
    """
    Finds resource rows matching an intent, creating them on request.
    
    Two separate entry points:
    - fetch(): read only, FOUND or NOT_FOUND
    - resolve_or_create(): fetch, then insert when nothing matched,
      FOUND or CREATED
    
    Class names are turned into class resource ids (resources of class
    RES_CLASS whose value is the name). fetch() gives up when the class does
    not exist; resolve_or_create() creates it first.
    """
    
    def __init__(
        self,
        engine: sa.Engine,
        table: sa.Table,
        refetch_on_conflict: bool = True
    ):
        self.engine = engine
        self.table = table
        self.refetch_on_conflict = refetch_on_conflict
    
    def fetch(self, intent: ResourceIntent) -> ResourceLookup:
        """
        Look up the resource matching every set field of the intent.
        
        Reserved ids asked for on their own are answered without a query.
        Never writes.
        """
        if intent.id is not None:
            _check_id(intent.id)
        
        if isinstance(intent.class_, str):
            class_lookup = self.fetch_class(intent.class_)
            if not class_lookup:
                logger.debug(f"Class '{intent.class_}' not found, cannot fetch {intent}")
                return ResourceLookup.not_found()
            intent = intent.with_class(class_lookup.id)
        elif intent.class_ is not None:
            _check_class(intent.class_)
        
        if intent.only_id() and intent.id in RESERVED_RESOURCES:
            return ResourceLookup.found(RESERVED_RESOURCES[intent.id])
        
        filters = intent.set_fields()
        if not filters:
            return ResourceLookup.not_found()
        
        query = sa.select(self.table).where(
            *(self.table.c[column] == value for column, value in filters.items())
        ).limit(1)
        
        with self.engine.connect() as conn:
            row = conn.execute(query).mappings().first()
        
        if row is None:
            return ResourceLookup.not_found()
        return ResourceLookup.found(Resource.model_validate(dict(row)))
    
    def fetch_class(self, name: str) -> ResourceLookup:
        """Look up a class resource by name"""
        return self.fetch(ResourceIntent(class_=RES_CLASS, value=name))
    
    def resolve_or_create(self, intent: ResourceIntent) -> ResourceLookup:
        """
        Reuse the resource matching the intent, or insert a new one.
        
        Raises:
            CreationFailedError: the row (or its class) could not be inserted
        """
        existing = self.fetch(intent)
        if existing:
            return existing
        
        return self._create(intent)
    
    def update(self, resource_id: int, intent: ResourceIntent) -> int:
        """
        Overwrite the set uri/class/value/content fields of a resource.
        
        Returns:
            Number of rows affected (0 when there is nothing to set)
        """
        _check_id(resource_id)
        values = self._insertable_fields(intent)
        if not values:
            return 0
        
        with self.engine.begin() as conn:
            result = conn.execute(
                sa.update(self.table)
                .where(self.table.c.id == resource_id)
                .values(values)
            )
        logger.debug(f"Updated resource #{resource_id}: {values}")
        return result.rowcount
    
    def delete(self, resource_id: int) -> int:
        """Delete a resource row by id, returning the rows affected"""
        _check_id(resource_id)
        with self.engine.begin() as conn:
            result = conn.execute(
                sa.delete(self.table).where(self.table.c.id == resource_id)
            )
        logger.debug(f"Deleted resource #{resource_id} ({result.rowcount} row)")
        return result.rowcount
    
    def _create(self, intent: ResourceIntent) -> ResourceLookup:
        values = self._insertable_fields(intent)
        if not values:
            raise CreationFailedError(f"Nothing to create for {intent!r}")
        
        with self.engine.begin() as conn:
            result = conn.execute(insert_ignore(self.table, conn.dialect.name).values(values))
            new_id: Optional[int] = None
            if result.rowcount:
                new_id = result.inserted_primary_key[0]
        
        if new_id is not None:
            created = Resource.model_validate({"id": new_id, **values})
            logger.debug(f"Created resource {created} {values}")
            return ResourceLookup.created(created)
        
        # insert ignored: another writer got the same uri in first
        if self.refetch_on_conflict:
            retry = self.fetch(ResourceIntent.model_validate(values))
            if retry:
                logger.debug(f"Insert of {values} ignored, reusing {retry.resource}")
                return retry
        
        raise CreationFailedError(f"Resource creation failed for {values}")
    
    def _insertable_fields(self, intent: ResourceIntent) -> dict:
        """uri/class/value/content of the intent, class names resolved to ids"""
        values = intent.set_fields()
        values.pop("id", None)
        
        class_ = values.get("class")
        if isinstance(class_, str):
            values["class"] = self._class_id(class_)
        elif class_ is not None:
            _check_class(class_)
            if not self.fetch(ResourceIntent(id=class_)):
                raise InvalidClassError(f"Class resource #{class_} does not exist")
        return values
    
    def _class_id(self, name: str) -> int:
        try:
            lookup = self.resolve_or_create(ResourceIntent(class_=RES_CLASS, value=name))
        except CreationFailedError as e:
            raise CreationFailedError(f"Class resource creation failed for '{name}'") from e
        if lookup.status is LookupStatus.CREATED:
            logger.debug(f"Created class '{name}' as {lookup.resource}")
        return lookup.id


def _check_id(resource_id) -> None:
    if isinstance(resource_id, bool) or not isinstance(resource_id, int) or resource_id < 0:
        raise InvalidIdError(f"Invalid resource id: {resource_id!r}")


def _check_class(class_id) -> None:
    if isinstance(class_id, bool) or not isinstance(class_id, int) or class_id < 1:
        raise InvalidClassError(f"Invalid class specified: {class_id!r}")
