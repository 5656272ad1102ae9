import pytest
import sqlalchemy as sa

from taggg.config import reset_settings
from taggg.engine import TagEngine


@pytest.fixture
def db_url(tmp_path):
    """SQLite database file private to one test"""
    return f"sqlite:///{tmp_path / 'taggg.db'}"


@pytest.fixture
def engine(db_url):
    engine = sa.create_engine(db_url)
    yield engine
    engine.dispose()


@pytest.fixture
def tags(engine):
    """Tag engine over freshly initialized tables"""
    return TagEngine(engine).init()


@pytest.fixture
def statements(engine):
    """Records every SQL statement sent to the database"""
    seen = []
    
    def record(conn, cursor, statement, parameters, context, executemany):
        seen.append(statement)
    
    sa.event.listen(engine, "before_cursor_execute", record)
    yield seen
    sa.event.remove(engine, "before_cursor_execute", record)


@pytest.fixture(autouse=True)
def fresh_settings():
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def row_count(engine):
    """Callable giving the current number of rows in a table"""
    def count(table) -> int:
        with engine.connect() as conn:
            return conn.execute(sa.select(sa.func.count()).select_from(table)).scalar_one()
    return count
