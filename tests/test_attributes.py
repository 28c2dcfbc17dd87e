"""
Tests for the attribute and parameter maps.
"""

import threading

import pytest

from flowtest.attributes import (
    AttributeMap, MockMultipartFile, MockParameterMap, ParameterMap, SharedAttributeMap
)
from flowtest.errors import AttributeNotFoundError, AttributeTypeError


class TestAttributeMap:
    """Test the AttributeMap mapping."""

    def test_put_returns_previous(self):
        """Test put hands back the replaced value."""
        attributes = AttributeMap()

        assert attributes.put("a", 1) is None
        assert attributes.put("a", 2) == 1
        assert attributes["a"] == 2

    def test_remove(self):
        """Test remove returns the removed value or None."""
        attributes = AttributeMap({"a": 1})

        assert attributes.remove("a") == 1
        assert attributes.remove("a") is None
        assert "a" not in attributes

    def test_wraps_backing_without_copy(self):
        """Test the backing mapping is shared, not copied."""
        backing = {}
        attributes = AttributeMap(backing)
        attributes["a"] = 1

        assert backing == {"a": 1}

    def test_put_all_and_as_dict(self):
        """Test bulk puts and plain dict copies."""
        attributes = AttributeMap().put_all({"a": 1, "b": 2})
        copy = attributes.as_dict()
        copy["c"] = 3

        assert attributes.as_dict() == {"a": 1, "b": 2}

    def test_union(self):
        """Test union builds a new overlaid map."""
        left = AttributeMap({"a": 1, "b": 2})
        merged = left.union({"b": 3, "c": 4})

        assert merged == {"a": 1, "b": 3, "c": 4}
        assert left == {"a": 1, "b": 2}

    def test_get_required(self):
        """Test required lookups."""
        attributes = AttributeMap({"count": 3})

        assert attributes.get_required("count") == 3
        assert attributes.get_required("count", int) == 3

    def test_get_required_missing(self):
        """Test a missing required attribute raises."""
        attributes = AttributeMap({"other": 1})

        with pytest.raises(AttributeNotFoundError) as exc_info:
            attributes.get_required("count")

        assert isinstance(exc_info.value, KeyError)
        assert exc_info.value.key == "count"
        assert "count" in str(exc_info.value)

    def test_get_required_wrong_type(self):
        """Test a present attribute of the wrong type raises."""
        attributes = AttributeMap({"count": "three"})

        with pytest.raises(AttributeTypeError) as exc_info:
            attributes.get_required("count", int)

        assert isinstance(exc_info.value, TypeError)
        assert exc_info.value.debug_info["expected_type"] == "int"
        assert exc_info.value.debug_info["actual_type"] == "str"


class TestSharedAttributeMap:
    """Test the SharedAttributeMap."""

    def test_mutex(self):
        """Test the mutex is a reentrant lock."""
        shared = SharedAttributeMap()

        with shared.mutex:
            with shared.mutex:
                shared["a"] = 1

        assert isinstance(shared.mutex, type(threading.RLock()))
        assert shared.get("a") == 1


class TestParameterMap:
    """Test reading request parameters."""

    def test_get_first_value(self):
        """Test get collapses lists to their first value."""
        parameters = ParameterMap({"ids": ["1", "2"], "name": "keith", "empty": []})

        assert parameters.get("ids") == "1"
        assert parameters.get("name") == "keith"
        assert parameters.get("empty") is None
        assert parameters.get("missing", "default") == "default"
        assert parameters["ids"] == ("1", "2")

    def test_get_array(self):
        """Test get_array always returns a list."""
        parameters = ParameterMap({"ids": ["1", "2"], "name": "keith"})

        assert parameters.get_array("ids") == ["1", "2"]
        assert parameters.get_array("name") == ["keith"]
        assert parameters.get_array("missing") == []

    def test_get_required(self):
        """Test required parameter lookups."""
        parameters = ParameterMap({"name": "keith"})

        assert parameters.get_required("name") == "keith"
        with pytest.raises(AttributeNotFoundError) as exc_info:
            parameters.get_required("missing")

        assert "put_request_parameter('missing', ...)" in exc_info.value.suggestions[0]

    def test_get_number(self):
        """Test numeric conversion."""
        parameters = ParameterMap({"page": "2", "ratio": "0.5", "bad": "two"})

        assert parameters.get_number("page") == 2
        assert parameters.get_number("ratio", float) == 0.5
        assert parameters.get_number("missing", default=1) == 1
        with pytest.raises(AttributeTypeError):
            parameters.get_number("bad")

    def test_get_boolean(self):
        """Test boolean conversion."""
        parameters = ParameterMap({"a": "true", "b": "Off", "c": "1", "d": "maybe"})

        assert parameters.get_boolean("a") is True
        assert parameters.get_boolean("b") is False
        assert parameters.get_boolean("c") is True
        assert parameters.get_boolean("missing", default=False) is False
        with pytest.raises(AttributeTypeError):
            parameters.get_boolean("d")

    def test_multipart_file(self):
        """Test reading multipart files."""
        upload = MockMultipartFile("file", b"data", "data.txt", "text/plain")
        parameters = ParameterMap({"file": upload, "name": "keith"})

        assert parameters.get_multipart_file("file") is upload
        assert parameters.get_required_multipart_file("file") is upload
        assert parameters.get_multipart_file("missing") is None
        with pytest.raises(AttributeTypeError):
            parameters.get_multipart_file("name")
        with pytest.raises(AttributeNotFoundError):
            parameters.get_required_multipart_file("missing")

    def test_rejects_unsupported_values(self):
        """Test only strings, files and lists of either are accepted."""
        with pytest.raises(AttributeTypeError):
            ParameterMap({"page": 2})
        with pytest.raises(AttributeTypeError):
            ParameterMap({"mixed": ["a", MockMultipartFile("f")]})
        with pytest.raises(AttributeTypeError):
            ParameterMap({"raw": b"bytes"})

    def test_read_only(self):
        """Test a plain ParameterMap cannot be written to."""
        parameters = ParameterMap({"name": "keith"})

        with pytest.raises(TypeError):
            parameters["name"] = "erwin"

    def test_multi_valued_parameters_immutable(self):
        """Test indexing cannot change a multi-valued parameter."""
        parameters = ParameterMap({"ids": ["1", "2"]})

        with pytest.raises(AttributeError):
            parameters["ids"].append("3")

        parameters.get_array("ids").append("3")
        assert parameters.get_array("ids") == ["1", "2"]

    def test_source_list_not_shared(self):
        """Test changing the seeding list leaves the map alone."""
        ids = ["1", "2"]
        parameters = ParameterMap({"ids": ids})
        ids.append("3")

        assert parameters.get_array("ids") == ["1", "2"]


class TestMockParameterMap:
    """Test writing request parameters."""

    def test_put_and_delete(self):
        """Test put, item assignment and deletion."""
        parameters = MockParameterMap()
        parameters.put("name", "keith")
        parameters["ids"] = ("1", "2")

        assert parameters.get("name") == "keith"
        assert parameters["ids"] == ("1", "2")

        del parameters["name"]
        assert "name" not in parameters

    def test_as_dict_copies_lists(self):
        """Test as_dict does not expose the stored lists."""
        parameters = MockParameterMap({"ids": ["1"]})
        parameters.as_dict()["ids"].append("2")

        assert parameters.get_array("ids") == ["1"]


class TestMockMultipartFile:
    """Test the multipart file stand-in."""

    def test_content_access(self):
        """Test size, emptiness and streams."""
        upload = MockMultipartFile("file", b"hello", "hello.txt", "text/plain")

        assert upload.size == 5
        assert not upload.is_empty()
        assert upload.get_bytes() == b"hello"
        assert upload.open().read() == b"hello"
        assert MockMultipartFile("empty").is_empty()
