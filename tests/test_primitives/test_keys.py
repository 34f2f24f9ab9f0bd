import pytest

from redisbank.primitives import (
    IndexKey,
    RecordKey,
    escape_glob,
    index_key,
    primary_key,
    type_pattern,
)


class TestRecordKey:
    """Tests for primary key derivation."""

    def test_primary_key_format(self):
        assert RecordKey("widget", "w1").primary_key == "widget:w1"

    def test_id_is_stringified(self):
        assert RecordKey("widget", 42).primary_key == "widget:42"

    def test_empty_type_raises_error(self):
        with pytest.raises(ValueError, match="Type name must be non-empty"):
            RecordKey("", "w1")

    def test_parse_splits_on_first_separator(self):
        key = RecordKey.parse("widget:a:b")
        assert key.type_name == "widget"
        assert key.record_id == "a:b"

    def test_parse_rejects_non_key(self):
        with pytest.raises(ValueError, match="Not a primary key"):
            RecordKey.parse("nocolon")

    def test_equality_and_hash(self):
        assert RecordKey("widget", "w1") == RecordKey("widget", "w1")
        assert RecordKey("widget", "w1") != RecordKey("widget", "w2")
        assert RecordKey("widget", "w1") != "widget:w1"
        assert len({RecordKey("widget", "w1"), RecordKey("widget", "w1")}) == 1

    def test_shorthand(self):
        assert primary_key("person", "p9") == "person:p9"

    def test_str(self):
        assert str(RecordKey("widget", "w1")) == "widget:w1"


class TestTypePattern:
    """Tests for full-type enumeration patterns."""

    def test_plain_type(self):
        assert type_pattern("widget") == "widget:*"

    def test_glob_characters_are_escaped(self):
        assert type_pattern("w*d[x]") == "w\\*d\\[x\\]:*"

    def test_escape_glob_leaves_plain_text(self):
        assert escape_glob("abc") == "abc"


class TestIndexKey:
    """Tests for index-set key derivation."""

    def test_key_format(self):
        assert IndexKey("widget", "color", "red").key == "databank:index:widget:color:red"

    def test_nested_path(self):
        assert index_key("person", "profile.email", "a@b") == \
            "databank:index:person:profile.email:a@b"

    def test_value_is_canonicalized(self):
        assert IndexKey("widget", "size", 3) == IndexKey("widget", "size", "3")
        assert IndexKey("widget", "size", 3.0).key == "databank:index:widget:size:3"

    def test_missing_value_marker(self):
        from redisbank.codec import MISSING
        assert index_key("widget", "color", MISSING) == "databank:index:widget:color:undefined"

    def test_none_value(self):
        assert index_key("widget", "color", None) == "databank:index:widget:color:null"

    def test_distinct_properties_differ(self):
        assert IndexKey("widget", "color", "red") != IndexKey("widget", "paint", "red")
