"""Schema sanity: mappers configure and every table compiles for PostgreSQL."""

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.orm import configure_mappers
from sqlalchemy.schema import CreateTable

from app.db.base import Base


def test_orm_mappings_are_valid():
    configure_mappers()


@pytest.mark.parametrize("table_name", sorted(Base.metadata.tables))
def test_table_compiles_for_postgres(table_name):
    table = Base.metadata.tables[table_name]
    ddl = str(CreateTable(table).compile(dialect=postgresql.dialect()))
    assert "CREATE TABLE" in ddl
    assert table_name in ddl


def test_reservation_snapshots_do_not_reference_live_seats():
    columns = Base.metadata.tables["reservation_seats"].c
    assert not columns.original_seat_id.foreign_keys
