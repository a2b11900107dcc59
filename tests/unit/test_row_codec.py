"""
Unit tests for sqlite_storage.row_codec
"""

import pytest

from item_types import PersonWithAgeAndHeight, RecordWithDynamicColumns, UserWithPrimaryKey
from sqlite_storage.row_codec import (
    EncodedColumn,
    Schema,
    SqlType,
    columns_of,
    decode,
    encode,
    encode_params,
    is_record,
)


class TestSqlType:
    """Test storage class tagging"""

    @pytest.mark.parametrize(
        "value, expected",
        [
            (25, SqlType.INTEGER),
            (True, SqlType.INTEGER),
            (5.9, SqlType.REAL),
            ("name1", SqlType.TEXT),
            (None, SqlType.TEXT),
            (b"\x00", SqlType.TEXT),
        ],
    )
    def test_of(self, value, expected):
        assert SqlType.of(value) is expected

    def test_is_str(self):
        """Test the enum compares equal to its SQL name"""
        assert SqlType.REAL == "REAL"

    def test_adapt_keeps_null(self):
        for sql_type in SqlType:
            assert sql_type.adapt(None) is None

    def test_adapt_bool_to_integer(self):
        assert SqlType.INTEGER.adapt(True) == 1
        assert type(SqlType.INTEGER.adapt(True)) is int

    def test_adapt_text_stringifies_objects(self):
        assert SqlType.TEXT.adapt(["a"]) == "['a']"
        assert SqlType.TEXT.adapt(b"raw") == b"raw"


class TestIsRecord:
    """Test record detection"""

    def test_dataclass_instance(self):
        assert is_record(UserWithPrimaryKey("id1", "name1")) is True

    def test_plain_object(self):
        assert is_record(RecordWithDynamicColumns(id=1)) is True

    @pytest.mark.parametrize("value", [1, "text", 2.5, None, ("id", 1)])
    def test_scalars(self, value):
        assert is_record(value) is False

    def test_class_is_not_a_record(self):
        assert is_record(UserWithPrimaryKey) is False


class TestColumns:
    """Test column enumeration and schema capture"""

    def test_dataclass_declaration_order(self):
        person = PersonWithAgeAndHeight("id1", "name1", 25, 5.9)

        assert columns_of(person) == ("id", "name", "age", "height")

    def test_plain_object_assignment_order(self):
        record = RecordWithDynamicColumns(name="n", id=3)

        assert columns_of(record) == ("name", "id")

    def test_schema_from_item(self):
        schema = Schema.from_item(PersonWithAgeAndHeight("id1", "name1", 25, 5.9))

        assert schema.names == ("id", "name", "age", "height")
        assert schema == Schema(("id", "name", "age", "height"))


class TestEncode:
    """Test item encoding"""

    def test_encode_tags_each_value(self):
        """Test every value carries its own storage class"""
        person = PersonWithAgeAndHeight("id1", "name1", 25, 5.9)
        schema = Schema.from_item(person)

        assert encode(person, schema) == [
            EncodedColumn("id", "id1", SqlType.TEXT),
            EncodedColumn("name", "name1", SqlType.TEXT),
            EncodedColumn("age", 25, SqlType.INTEGER),
            EncodedColumn("height", 5.9, SqlType.REAL),
        ]

    def test_null_does_not_change_later_rows(self):
        """Test a NULL in the schema item does not force later values to text"""
        schema = Schema.from_item(PersonWithAgeAndHeight("id1", "name1", None, None))

        encoded = encode(PersonWithAgeAndHeight("id2", "name2", 30, 6.1), schema)

        assert encoded[2] == EncodedColumn("age", 30, SqlType.INTEGER)
        assert encoded[3] == EncodedColumn("height", 6.1, SqlType.REAL)

    def test_encode_params(self):
        person = PersonWithAgeAndHeight("id1", "name1", 25, 5.9)

        params = encode_params(person, Schema.from_item(person))

        assert params == {"id": "id1", "name": "name1", "age": 25, "height": 5.9}


class TestDecode:
    """Test row decoding"""

    def test_decode_dataclass(self):
        item = decode({"id": "id1", "name": "name1"}, UserWithPrimaryKey)

        assert item == UserWithPrimaryKey("id1", "name1")

    def test_decode_plain_class(self):
        item = decode({"id": 4, "title": "t"}, RecordWithDynamicColumns)

        assert item.id == 4
        assert item.title == "t"

    def test_unknown_column_fails(self):
        """Test columns must match constructor parameters"""
        with pytest.raises(TypeError):
            decode({"id": "id1", "name": "name1", "extra": 1}, UserWithPrimaryKey)
