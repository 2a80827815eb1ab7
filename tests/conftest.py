import os

import pytest
import sqlalchemy

os.environ.setdefault("SQLFACTORIES_SETTINGS_MODULE", "tests.settings.TestSettings")


@pytest.fixture
def engine():
    from tests.schema import metadata

    engine = sqlalchemy.create_engine("sqlite://")
    metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def connection(engine):
    with engine.connect() as connection:
        transaction = connection.begin()
        yield connection
        transaction.rollback()
