"""
Relational layout of the tag store.

Tables:
  res  - resources {id, uri, class, value, content}; uri unique
  rel  - relations {subject, predicate, object, creator, created};
         primary key over the four roles, 0 standing for "no resource"

Both names are configurable; they must be plain words.
"""

import re
from dataclasses import dataclass

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql
from loguru import logger

from ..errors import InvalidTableNameError
from .models import RES_CLASS, RES_EMPTY, RES_TAGGG, RESERVED_RESOURCES


_TABLE_NAME = re.compile(r"^\w+$")


@dataclass(frozen=True)
class TagTables:
    """Resource and relation tables bound to one MetaData"""
    metadata: sa.MetaData
    resources: sa.Table
    relations: sa.Table


def validate_table_name(name: str, label: str) -> str:
    if not isinstance(name, str) or not _TABLE_NAME.match(name):
        raise InvalidTableNameError(f"Invalid name for {label}: {name!r}")
    return name


def build_tables(resource_table: str = "res", relation_table: str = "rel") -> TagTables:
    """Define the resource and relation tables under the given names"""
    validate_table_name(resource_table, "resource table")
    validate_table_name(relation_table, "relation table")
    
    metadata = sa.MetaData()
    
    resources = sa.Table(
        resource_table,
        metadata,
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("uri", sa.String(255), nullable=True, unique=True),
        sa.Column("class", sa.Integer(), nullable=True, index=True),
        sa.Column("value", sa.String(255), nullable=True, index=True),
        sa.Column("content", sa.Text(), nullable=True),
    )
    
    role_columns = [
        sa.Column(
            role,
            sa.Integer(),
            nullable=False,
            primary_key=True,
            autoincrement=False,
            default=RES_EMPTY,
            server_default=sa.text(str(RES_EMPTY)),
        )
        for role in ("subject", "predicate", "object", "creator")
    ]
    relations = sa.Table(
        relation_table,
        metadata,
        *role_columns,
        sa.Column(
            "created",
            sa.DateTime(),
            nullable=False,
            server_default=sa.func.current_timestamp(),
            index=True,
        ),
    )
    
    return TagTables(metadata=metadata, resources=resources, relations=relations)


def insert_ignore(table: sa.Table, dialect: str = "sqlite") -> sa.Insert:
    """INSERT that silently skips rows violating a unique or primary key"""
    if dialect == "postgresql":
        return postgresql.insert(table).on_conflict_do_nothing()
    return (
        sa.insert(table)
        .prefix_with("OR IGNORE", dialect="sqlite")
        .prefix_with("IGNORE", dialect="mysql")
        .prefix_with("IGNORE", dialect="mariadb")
    )


def init_schema(engine: sa.Engine, tables: TagTables) -> None:
    """Create the tables if missing and make sure the reserved resources exist"""
    logger.info(
        f"Creating tag tables '{tables.resources.name}' and '{tables.relations.name}'"
    )
    tables.metadata.create_all(engine, checkfirst=True)
    
    rows = [
        {"id": r.id, "class": r.class_, "value": r.value}
        for r in (RESERVED_RESOURCES[RES_TAGGG], RESERVED_RESOURCES[RES_CLASS],
                  RESERVED_RESOURCES[RES_EMPTY])
    ]
    with engine.begin() as conn:
        conn.execute(insert_ignore(tables.resources, conn.dialect.name), rows)
        if conn.dialect.name == "postgresql":
            # explicit ids leave the serial sequence behind
            conn.execute(sa.select(sa.func.setval(
                sa.func.pg_get_serial_sequence(tables.resources.name, "id"),
                sa.select(sa.func.max(tables.resources.c.id)).scalar_subquery(),
            )))
    logger.info("Reserved resources in place")


def destroy_schema(engine: sa.Engine, tables: TagTables) -> None:
    """Drop both tables and all their data"""
    logger.info(
        f"Dropping tag tables '{tables.resources.name}' and '{tables.relations.name}'"
    )
    tables.metadata.drop_all(engine, checkfirst=True)
