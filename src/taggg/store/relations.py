from typing import Optional

import sqlalchemy as sa
from loguru import logger

from ..errors import InvalidRoleIdError
from .models import RELATION_ROLES, RES_EMPTY, Relation
from .schema import insert_ignore


class RelationStore:
    """
    Exact-tuple access to the relation table.
    
    Every role is either None or a non-negative resource id; None and 0 both
    mean "no resource" and are stored as 0. Roles are matched literally,
    never as wildcards.
    """
    
    def __init__(self, engine: sa.Engine, table: sa.Table):
        self.engine = engine
        self.table = table
    
    def fetch(
        self,
        subject: Optional[int] = None,
        predicate: Optional[int] = None,
        object: Optional[int] = None,
        creator: Optional[int] = None
    ) -> Optional[Relation]:
        """Get the relation with exactly these roles, or None"""
        key = _role_key(subject, predicate, object, creator)
        query = sa.select(self.table).where(*self._match(key)).limit(1)
        
        with self.engine.connect() as conn:
            row = conn.execute(query).mappings().first()
        
        return Relation.model_validate(dict(row)) if row is not None else None
    
    def create(
        self,
        subject: Optional[int] = None,
        predicate: Optional[int] = None,
        object: Optional[int] = None,
        creator: Optional[int] = None
    ) -> int:
        """Insert the relation unless it exists; returns rows affected (0 or 1)"""
        key = _role_key(subject, predicate, object, creator)
        
        with self.engine.begin() as conn:
            result = conn.execute(
                insert_ignore(self.table, conn.dialect.name)
                .values(dict(zip(RELATION_ROLES, key)))
            )
        
        logger.debug(f"Create relation {key}: {result.rowcount} row(s)")
        return result.rowcount
    
    def delete(
        self,
        subject: Optional[int] = None,
        predicate: Optional[int] = None,
        object: Optional[int] = None,
        creator: Optional[int] = None
    ) -> int:
        """Delete the relation with exactly these roles; returns rows affected"""
        key = _role_key(subject, predicate, object, creator)
        
        with self.engine.begin() as conn:
            result = conn.execute(sa.delete(self.table).where(*self._match(key)))
        
        logger.debug(f"Delete relation {key}: {result.rowcount} row(s)")
        return result.rowcount
    
    def count(self) -> int:
        """Total number of stored relations"""
        with self.engine.connect() as conn:
            return conn.execute(
                sa.select(sa.func.count()).select_from(self.table)
            ).scalar_one()
    
    def _match(self, key: tuple) -> list:
        return [self.table.c[role] == value for role, value in zip(RELATION_ROLES, key)]


def _role_key(*ids) -> tuple:
    key = []
    for role, value in zip(RELATION_ROLES, ids):
        if value is None:
            key.append(RES_EMPTY)
        elif isinstance(value, int) and not isinstance(value, bool) and value >= 0:
            key.append(value)
        else:
            raise InvalidRoleIdError(
                f"Non-negative int or None required for {role} id, got {value!r}",
                role=role,
            )
    return tuple(key)
