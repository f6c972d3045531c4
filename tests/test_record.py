import pytest

from ogclient.record.column import ColVal
from ogclient.record.field import Field, FieldType
from ogclient.record.record import TIME_FIELD, Record, check_record, check_schema


def _int_schema(*names):
    return [Field(name=n, type=FieldType.INT) for n in names]


def test_new_record():
    schema = [
        Field(name="field1", type=FieldType.INT),
        Field(name="field2", type=FieldType.STRING),
        Field(name=TIME_FIELD, type=FieldType.INT),
    ]
    rec = Record(schema)
    assert len(rec.schema) == 3
    assert len(rec.col_vals) == 3
    assert list(rec.schema) == schema


def test_less_swap_len():
    rec = Record(
        [
            Field(name="field1", type=FieldType.INT),
            Field(name="field2", type=FieldType.STRING),
            Field(name=TIME_FIELD, type=FieldType.INT),
        ]
    )
    assert rec.less(2, 1) is False
    assert rec.less(1, 2) is True
    assert rec.less(0, 1) is True

    rec.swap(0, 1)
    assert [f.name for f in rec.schema] == ["field2", "field1", TIME_FIELD]
    assert len(rec) == 3


def test_record_string():
    rec = Record(
        [
            Field(name="int_field", type=FieldType.INT),
            Field(name="float_field", type=FieldType.FLOAT),
            Field(name="bool_field", type=FieldType.BOOLEAN),
            Field(name="string_field", type=FieldType.STRING),
            Field(name=TIME_FIELD, type=FieldType.INT),
        ]
    )
    rec.col_vals[0].append_integer(123)
    rec.col_vals[1].append_float(3.14)
    rec.col_vals[2].append_boolean(True)
    rec.col_vals[3].append_string("test")
    rec.append_time(1000)

    text = str(rec)
    for name in ("int_field", "float_field", "bool_field", "string_field", "time"):
        assert name in text
    assert "field(int_field):[123]" in text
    assert "field(string_field):['test']" in text
    assert "field(time):[1000]" in text


def test_reset():
    rec = Record(_int_schema("field1", TIME_FIELD))
    rec.append_time(100)
    rec.reset()
    assert len(rec.schema) == 0
    assert len(rec.col_vals) == 0
    assert rec.row_nums() == 0


def test_reset_with_schema():
    rec = Record(_int_schema("field1", TIME_FIELD))
    rec.col_vals[0].append_integer(1)
    rec.append_time(100)
    rec.reset_with_schema(_int_schema("a", "b", TIME_FIELD))
    assert [f.name for f in rec.schema] == ["a", "b", TIME_FIELD]
    assert len(rec.col_vals) == 3
    assert all(col.length == 0 for col in rec.col_vals)


def test_reset_with_own_schema_keeps_fields():
    rec = Record(_int_schema("field1", TIME_FIELD))
    rec.reset_with_schema(rec.schema)
    assert [f.name for f in rec.schema] == ["field1", TIME_FIELD]


def test_reserve_col_val():
    rec = Record(_int_schema("field1"))
    rec.reserve_col_val(1)
    assert len(rec.col_vals) == 2
    rec.reserve_col_val(10)
    assert len(rec.col_vals) == 12
    assert all(col.length == 0 for col in rec.col_vals)


def test_init_col_val():
    rec = Record(_int_schema("a", "b"))
    rec.col_vals[0].append_integer(1)
    rec.col_vals[1].append_integer(2)
    rec.init_col_val(0, 1)
    assert rec.col_vals[0].length == 0
    assert rec.col_vals[1].integer_values() == [2]


def test_times():
    rec = Record(_int_schema("field1", TIME_FIELD))
    assert len(rec) == 2
    rec.append_time(100, 200, 300)
    assert rec.times() == [100, 200, 300]


def test_times_empty_record():
    assert Record().times() == []


def test_marshal():
    rec = Record(_int_schema("field1", TIME_FIELD))
    rec.append_time(100)
    result = rec.marshal(bytearray())
    assert bytes(result[:4]) == b"\x00\x00\x00\x02"
    expected = 4 + sum(4 + f.size() for f in rec.schema)
    expected += 4 + sum(4 + c.size() for c in rec.col_vals)
    assert len(result) == expected


def test_marshal_keeps_prefix():
    rec = Record(_int_schema("field1", TIME_FIELD))
    result = rec.marshal(b"\x09\x09")
    assert bytes(result[:2]) == b"\x09\x09"


def test_row_nums():
    assert Record().row_nums() == 0
    rec = Record(_int_schema("field1", TIME_FIELD))
    rec.append_time(100, 200, 300)
    assert rec.row_nums() == 3


def test_check_record_valid():
    rec = Record(_int_schema("field1", TIME_FIELD))
    rec.col_vals[0].append_integer(123)
    rec.append_time(100)
    check_record(rec)
    assert [f.name for f in rec.schema] == ["field1", TIME_FIELD]


def test_check_record_time_not_last():
    rec = Record(_int_schema(TIME_FIELD, "field1"))
    rec.col_vals[0].append_integer(100)
    rec.col_vals[1].append_integer(123)
    with pytest.raises(ValueError, match="invalid schema"):
        check_record(rec)


def test_check_record_duplicate_names():
    rec = Record(_int_schema("field1", "field1", TIME_FIELD))
    rec.col_vals[0].append_integer(123)
    rec.col_vals[1].append_integer(456)
    rec.append_time(100)
    with pytest.raises(ValueError, match="same schema"):
        check_record(rec)


def test_check_record_nil_in_time():
    rec = Record(_int_schema("field1", TIME_FIELD))
    rec.col_vals[0].append_integer(123)
    rec.col_vals[1].append_null()
    with pytest.raises(ValueError, match="invalid colvals"):
        check_record(rec)


def test_check_record_inconsistent_lengths():
    rec = Record(_int_schema("field1", TIME_FIELD))
    rec.col_vals[0].append_integer(123)
    rec.col_vals[0].append_integer(456)
    rec.append_time(100)
    with pytest.raises(ValueError, match="invalid colvals length"):
        check_record(rec)


def test_check_record_incorrect_data_length():
    rec = Record(_int_schema("field1", TIME_FIELD))
    rec.col_vals[0] = ColVal(val=bytearray(4), bitmap=bytearray([1]), length=1)
    rec.append_time(100)
    with pytest.raises(ValueError, match="is incorrect"):
        check_record(rec)


def test_check_record_empty():
    with pytest.raises(ValueError, match="invalid schema"):
        check_record(Record(None))


def test_check_record_string_field():
    rec = Record(
        [Field(name="str_field", type=FieldType.STRING), Field(name=TIME_FIELD, type=FieldType.INT)]
    )
    rec.col_vals[0].append_string("test")
    rec.append_time(100)
    check_record(rec)
    assert rec.col_vals[0].string_values() == ["test"]


def test_check_record_multiple_types():
    rec = Record(
        [
            Field(name="int_field", type=FieldType.INT),
            Field(name="float_field", type=FieldType.FLOAT),
            Field(name="bool_field", type=FieldType.BOOLEAN),
            Field(name="string_field", type=FieldType.STRING),
            Field(name=TIME_FIELD, type=FieldType.INT),
        ]
    )
    rec.col_vals[0].append_integer(123)
    rec.col_vals[1].append_float(3.14)
    rec.col_vals[2].append_boolean(True)
    rec.col_vals[3].append_string("test")
    rec.append_time(100)
    check_record(rec)
    # "int_field" sorts before "float_field" is false, so the schema gets reordered.
    assert [f.name for f in rec.schema] == [
        "bool_field",
        "float_field",
        "int_field",
        "string_field",
        TIME_FIELD,
    ]
    assert rec.col_vals[0].boolean_values() == [True]
    assert rec.col_vals[2].integer_values() == [123]


def test_check_record_sorts_unordered_schema():
    rec = Record(_int_schema("b", "a", TIME_FIELD))
    rec.col_vals[0].append_integer(1)
    rec.col_vals[1].append_integer(2)
    rec.append_time(100)
    check_record(rec)
    assert [f.name for f in rec.schema] == ["a", "b", TIME_FIELD]
    assert rec.col_vals[0].integer_values() == [2]
    assert rec.col_vals[1].integer_values() == [1]
    assert rec.times() == [100]


def test_check_schema():
    rec = Record(_int_schema("b", "a", TIME_FIELD))
    assert check_schema(0, rec, True) is True
    assert check_schema(1, rec, True) is False
    assert check_schema(2, rec, False) is False
    ordered = Record(_int_schema("a", "b", TIME_FIELD))
    assert check_schema(1, ordered, True) is True