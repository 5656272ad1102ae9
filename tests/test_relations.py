"""
Test Suite for the Relation Store

Exact 4-tuple create/fetch/delete with 0 as the empty role.
"""

from datetime import datetime

import pytest

from sqlalchemy.dialects import mysql, postgresql, sqlite

from taggg.errors import InvalidRoleIdError
from taggg.store.schema import build_tables, insert_ignore


@pytest.fixture
def relations(tags):
    return tags.relations


def test_create_is_idempotent(relations):
    assert relations.create(1, 2, 3, 1) == 1
    assert relations.create(1, 2, 3, 1) == 0, "duplicate tuple must be ignored"
    assert relations.count() == 1


def test_fetch_exact_tuple(relations):
    relations.create(1, 2, 3, 1)
    
    rel = relations.fetch(1, 2, 3, 1)
    
    assert rel is not None
    assert rel.key() == (1, 2, 3, 1)
    assert isinstance(rel.created, datetime)


def test_roles_are_not_wildcards(relations):
    relations.create(1, 2, 3, 1)
    
    assert relations.fetch(1, 2, 3) is None, "creator 0 is not 'any creator'"
    assert relations.fetch(1, 2, 3, 2) is None


def test_none_and_zero_are_the_same(relations):
    relations.create(1, None, 3, None)
    
    assert relations.fetch(1, 0, 3, 0) is not None
    assert relations.create(1, 0, 3, 0) == 0
    assert relations.fetch(1, 0, 3, 0).key() == (1, 0, 3, 0)


def test_delete_is_idempotent(relations):
    relations.create(1, 2, 3, 1)
    
    assert relations.delete(1, 2, 3, 1) == 1
    assert relations.delete(1, 2, 3, 1) == 0
    assert relations.fetch(1, 2, 3, 1) is None


def test_delete_only_exact_tuple(relations):
    relations.create(1, 2, 3, 1)
    relations.create(1, 2, 3, 2)
    
    relations.delete(1, 2, 3, 1)
    
    assert relations.count() == 1
    assert relations.fetch(1, 2, 3, 2) is not None


@pytest.mark.parametrize("roles,bad_role", [
    ((-1, 2, 3, 1), "subject"),
    ((1, "2", 3, 1), "predicate"),
    ((1, 2, 3.0, 1), "object"),
    ((1, 2, 3, True), "creator"),
])
def test_invalid_roles_rejected(relations, roles, bad_role):
    for operation in (relations.fetch, relations.create, relations.delete):
        with pytest.raises(InvalidRoleIdError) as exc_info:
            operation(*roles)
        assert exc_info.value.role == bad_role
    
    assert relations.count() == 0


@pytest.mark.parametrize("dialect, expected", [
    (sqlite.dialect(), "INSERT OR IGNORE INTO rel"),
    (mysql.dialect(), "INSERT IGNORE INTO rel"),
    (postgresql.dialect(), "ON CONFLICT DO NOTHING"),
])
def test_insert_ignore_per_dialect(dialect, expected):
    table = build_tables().relations
    
    statement = insert_ignore(table, dialect.name).values(subject=1, predicate=2)
    
    assert expected in str(statement.compile(dialect=dialect))
