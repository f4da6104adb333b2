"""Unit tests for Table and IndexManager."""

import pytest

from minirdbms import (
    Column,
    ColumnCountMismatchError,
    DuplicateValueError,
    SchemaError,
    Table,
    UnknownColumnError,
)
from minirdbms.index_manager import IndexManager
from minirdbms.parser import WhereClause


def make_table(refresh_indexes=False) -> Table:
    return Table(
        'users',
        [
            Column('id', 'INT', primary=True),
            Column('email', 'TEXT', unique=True),
            Column('name', 'TEXT'),
        ],
        refresh_indexes=refresh_indexes,
    )


@pytest.fixture
def table() -> Table:
    t = make_table()
    t.insert([1, 'a@x', 'Alice'])
    t.insert([2, 'b@x', 'Bob'])
    return t


class TestInsert:
    def test_row_built_positionally(self):
        t = make_table()
        row = t.insert([1, 'a@x', 'Alice'])

        assert row == {'id': 1, 'email': 'a@x', 'name': 'Alice'}
        assert t.rows == [row]
        assert t.indexes['id'][1] is row
        assert t.indexes['email']['a@x'] is row

    @pytest.mark.parametrize('values', [[], [1], [1, 'a', 'b', 'c']])
    def test_column_count_mismatch(self, table, values):
        with pytest.raises(ColumnCountMismatchError) as exc_info:
            table.insert(values)

        assert exc_info.value.expected == 3
        assert len(table.rows) == 2

    def test_duplicate_primary(self, table):
        with pytest.raises(DuplicateValueError) as exc_info:
            table.insert([1, 'c@x', 'Carol'])

        assert exc_info.value.column == 'id'
        assert [row['name'] for row in table.rows] == ['Alice', 'Bob']

    def test_duplicate_on_second_index_leaves_nothing_behind(self, table):
        with pytest.raises(DuplicateValueError) as exc_info:
            table.insert([3, 'a@x', 'Carol'])

        assert exc_info.value.column == 'email'
        assert len(table.rows) == 2
        assert 3 not in table.indexes['id']

    def test_text_and_number_are_distinct_keys(self, table):
        table.insert(['1', 'c@x', 'Carol'])
        assert len(table.rows) == 3

    def test_unindexed_columns_allow_duplicates(self, table):
        table.insert([3, 'c@x', 'Alice'])
        assert [row['name'] for row in table.rows].count('Alice') == 2


class TestSelect:
    def test_all_rows_in_order(self, table):
        assert [row['id'] for row in table.select()] == [1, 2]

    def test_where_same_type_only(self, table):
        table.insert(['1', 'c@x', 'Carol'])

        assert [row['name'] for row in table.select(WhereClause('id', 1))] == ['Alice']
        assert [row['name'] for row in table.select(WhereClause('id', '1'))] == ['Carol']

    def test_results_are_copies(self, table):
        rows = table.select()
        rows[0]['name'] = 'Mallory'
        rows.clear()

        assert table.rows[0]['name'] == 'Alice'
        assert len(table.rows) == 2


class TestUpdateDelete:
    def test_update_all(self, table):
        assert table.update_rows('name', 'Zed') == 2
        assert all(row['name'] == 'Zed' for row in table.rows)

    def test_update_where(self, table):
        assert table.update_rows('name', 'Carol', WhereClause('id', 2)) == 1
        assert [row['name'] for row in table.rows] == ['Alice', 'Carol']

    def test_update_unknown_column(self, table):
        with pytest.raises(UnknownColumnError):
            table.update_rows('age', 30)
        assert all('age' not in row for row in table.rows)

    def test_delete_all(self, table):
        assert table.delete_rows() == 2
        assert table.rows == []

    def test_delete_where(self, table):
        assert table.delete_rows(WhereClause('id', 1)) == 1
        assert [row['id'] for row in table.rows] == [2]


class TestStaleIndexes:
    """UPDATE and DELETE leave index entries untouched by default."""

    def test_updated_value_still_reserved(self, table):
        table.update_rows('id', 5, WhereClause('id', 1))

        assert table.rows[0]['id'] == 5
        assert table.index_manager.lookup('id', 5) is None
        with pytest.raises(DuplicateValueError):
            table.insert([1, 'c@x', 'Carol'])

    def test_deleted_value_still_reserved(self, table):
        table.delete_rows(WhereClause('id', 1))

        with pytest.raises(DuplicateValueError):
            table.insert([1, 'a2@x', 'Alice'])

    def test_update_can_create_duplicates(self, table):
        table.update_rows('id', 7)
        assert [row['id'] for row in table.rows] == [7, 7]


class TestRefreshedIndexes:
    @pytest.fixture
    def table(self) -> Table:
        t = make_table(refresh_indexes=True)
        t.insert([1, 'a@x', 'Alice'])
        t.insert([2, 'b@x', 'Bob'])
        return t

    def test_delete_frees_value(self, table):
        table.delete_rows(WhereClause('id', 1))
        table.insert([1, 'a@x', 'Alice'])
        assert [row['id'] for row in table.rows] == [2, 1]

    def test_update_moves_entry(self, table):
        table.update_rows('id', 5, WhereClause('id', 1))

        assert table.index_manager.lookup('id', 5) is table.rows[0]
        table.insert([1, 'c@x', 'Carol'])

    def test_update_creating_duplicate_is_rejected(self, table):
        with pytest.raises(DuplicateValueError):
            table.update_rows('id', 1, WhereClause('id', 2))
        assert [row['id'] for row in table.rows] == [1, 2]


class TestIndexes:
    def test_registration_order(self):
        t = Table('t', [
            Column('a', 'INT', unique=True),
            Column('b', 'INT'),
            Column('c', 'INT', primary=True),
        ])

        assert [info.to_dict() for info in t.show_indexes()] == [
            {'column': 'a', 'unique': True},
            {'column': 'c', 'unique': True},
        ]

    def test_no_indexed_columns(self):
        t = Table('t', [Column('a', 'INT')])
        assert t.show_indexes() == []
        assert t.indexes == {}

    def test_lookup_unindexed_column(self):
        manager = IndexManager('t', [Column('a', 'INT')])
        assert manager.lookup('a', 1) is None


class TestSnapshot:
    def test_round_trip(self, table):
        restored = Table.from_snapshot(table.to_snapshot())

        assert restored.rows == table.rows
        assert restored.columns == table.columns
        with pytest.raises(DuplicateValueError):
            restored.insert([2, 'z@x', 'Zed'])

    def test_snapshot_has_no_indexes(self, table):
        assert set(table.to_snapshot()) == {'name', 'columns', 'rows'}

    def test_duplicate_rows_abort_load(self, table):
        data = table.to_snapshot()
        data['rows'].append(dict(data['rows'][0]))

        with pytest.raises(DuplicateValueError):
            Table.from_snapshot(data)

    def test_row_shape_checked(self, table):
        data = table.to_snapshot()
        del data['rows'][0]['email']

        with pytest.raises(SchemaError):
            Table.from_snapshot(data)

    @pytest.mark.parametrize('data', [
        5,
        {'columns': [], 'rows': []},
        {'name': 't', 'rows': []},
        {'name': 't', 'columns': 'id', 'rows': []},
        {'name': 't', 'columns': [{'type': 'INT'}], 'rows': []},
        {'name': 't', 'columns': ['id'], 'rows': []},
        {'name': 't', 'columns': [{'name': 'id', 'type': 'INT'}], 'rows': [5]},
        {'name': 't', 'columns': [{'name': 'id', 'type': 'INT'}], 'rows': [{'id': [1]}]},
    ])
    def test_malformed_entry(self, data):
        with pytest.raises(SchemaError):
            Table.from_snapshot(data)

    def test_stats(self, table):
        assert table.get_stats() == {
            'name': 'users',
            'row_count': 2,
            'columns': ['id INT PRIMARY', 'email TEXT UNIQUE', 'name TEXT'],
            'indexes': ['id', 'email'],
        }
