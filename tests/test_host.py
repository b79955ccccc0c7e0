"""
Tests for the generated Python classes.
"""

from enum import Enum

import pytest

from jschema import JsonModel, ModelHost, TransportError, infer_types
from jschema.values import JsonList, JsonMap


@pytest.fixture
def host(widget_registry):
    return ModelHost(widget_registry)


@pytest.fixture
def Widget(host):
    return host["com.example.Widget"]


# =============================================================================
# STRUCT CLASSES
# =============================================================================

class TestStructClasses:

    def test_class_shape(self, Widget):
        assert issubclass(Widget, JsonModel)
        assert issubclass(Widget, JsonMap)
        assert Widget.__name__ == "Widget"
        assert Widget.__qualname__ == "com.example.Widget"

    def test_classes_are_cached(self, host, Widget):
        assert host["com.example.Widget"] is Widget
        assert "com.example.Widget" in host
        assert "com.example.Nope" not in host

    def test_parse(self, Widget):
        widget = Widget.parse('{"name": "bolt", "tags": ["a", "b"]}')

        assert isinstance(widget, Widget)
        assert widget.name == "bolt"
        assert widget.tags == ["a", "b"]

    def test_instance_get_is_dict_get(self, Widget):
        widget = Widget.parse('{"name": "bolt"}')
        assert widget.get("name") == "bolt"
        assert widget.get("missing", 1) == 1

    def test_keyword_constructor(self, Widget):
        widget = Widget(name="bolt", tags=["x"])
        assert widget == {"name": "bolt", "tags": ["x"]}
        assert isinstance(widget["tags"], JsonList)

    def test_unknown_constructor_argument(self, Widget):
        with pytest.raises(TypeError):
            Widget(colour="red")

    def test_nested_instances_use_nested_classes(self, host, Widget):
        Address = host["com.example.Widget.address"]
        widget = Widget.parse('{"address": {"street": "Main"}}')

        assert isinstance(widget.address, Address)
        assert widget.address.street == "Main"

    def test_autocreate_chain(self):
        registry = infer_types({"a": {"b": {"c": "int"}}}, "x.Deep")
        Deep = ModelHost(registry)["x.Deep"]

        deep = Deep()
        deep.a.b.c = 5

        assert deep == {"a": {"b": {"c": 5}}}
        assert deep.a is deep.a

    def test_list_autocreate(self, Widget):
        widget = Widget()
        widget.parts.append({"id": 1})
        assert widget.write() == '{"parts":[{"id":1}]}'

    def test_appended_items_are_bound_to_element_class(self, host, Widget):
        Element = host["com.example.Widget.parts.Element"]
        widget = Widget()

        widget.parts.append({"id": 1, "label": "x"})
        widget.parts.insert(0, {"id": 0})
        widget.parts[1] = {"id": 2}

        assert all(isinstance(p, Element) for p in widget.parts)
        assert [p.id for p in widget.parts] == [0, 2]
        assert widget.parts[1].parent() is widget
        assert widget.parts[0].write() == '{"id":0}'

    def test_lists_of_parsed_documents_bind_appends(self, host, Widget):
        Element = host["com.example.Widget.parts.Element"]
        widget = Widget.parse('{"parts": [{"id": 1}]}')

        widget.parts.append({"id": 2})

        assert isinstance(widget.parts[1], Element)
        assert widget.parts[1].parent() is widget

    def test_assigned_plain_list_binds_later_appends(self, host, Widget):
        Element = host["com.example.Widget.parts.Element"]
        widget = Widget(parts=[{"id": 1}])
        widget.parts.extend([{"id": 2}])

        assert [type(p) for p in widget.parts] == [Element, Element]

    def test_escaped_property_names(self):
        registry = infer_types({"class": "string", "get": "int", "first-name": "string"}, "x.K")
        K = ModelHost(registry)["x.K"]

        k = K(class_="c", get_=1, first_name="Ada")
        assert k == {"class": "c", "get": 1, "first-name": "Ada"}
        assert k.get_ == 1

    def test_serialize_methods(self, Widget):
        widget = Widget.parse('{"name": "bolt"}')
        assert widget.write() == '{"name":"bolt"}'
        assert widget.pretty_print() == '{\n  "name": "bolt"\n}'
        assert widget.as_json() is widget

    def test_parent_and_descendents(self, Widget):
        widget = Widget.parse('{"parts": [{"id": 1}, {"id": 2}]}')
        part = widget.parts[1]

        assert part.parent() is widget
        assert widget.parent() is None
        assert [p.id for p in widget.descendents()] == [1, 2]

    def test_repr(self, Widget):
        assert repr(Widget(name="x")) == "Widget({'name': 'x'})"


# =============================================================================
# ENUM CLASSES
# =============================================================================

class TestEnumClasses:

    def test_members(self, host):
        Status = host["com.example.Widget.status"]

        assert issubclass(Status, Enum)
        assert Status.IN_PROGRESS.value == "in-progress"
        assert [m.name for m in Status] == ["ACTIVE", "IN_PROGRESS"]

    def test_read_returns_member(self, host, Widget):
        Status = host["com.example.Widget.status"]
        widget = Widget.parse('{"status": "in-progress"}')
        assert widget.status is Status.IN_PROGRESS

    def test_assign_member_stores_literal(self, host, Widget):
        Status = host["com.example.Widget.status"]
        widget = Widget()
        widget.status = Status.ACTIVE

        assert widget["status"] == "active"
        assert widget.write() == '{"status":"active"}'

    def test_unknown_literal_stays_raw(self, Widget):
        widget = Widget.parse('{"status": "retired"}')
        assert widget.status == "retired"


# =============================================================================
# LIST WRAPPER CLASSES
# =============================================================================

class TestListClasses:

    def test_cannot_instantiate(self, host):
        Tags = host["com.example.Widget.tags"]
        with pytest.raises(TypeError):
            Tags()

    def test_static_methods(self, host):
        Parts = host["com.example.Widget.parts"]
        Element = host["com.example.Widget.parts.Element"]

        parts = Parts.parse('[{"id": 1, "label": "x"}]')
        assert isinstance(parts, JsonList)
        assert isinstance(parts[0], Element)
        assert parts[0].label == "x"
        assert Parts.write(parts) == '[{"id":1,"label":"x"}]'


# =============================================================================
# FETCHING
# =============================================================================

class TestFetch:

    def test_class_get_fetches(self, fake_http, Widget):
        fake_http["response"] = fake_http["make"]('{"name": "bolt"}')

        widget = Widget.get("http://example.com/widget", {"id": 3})

        assert isinstance(widget, Widget)
        assert widget.name == "bolt"
        assert fake_http["calls"][0][2]["params"] == {"id": "3"}

    def test_class_post(self, fake_http, Widget):
        fake_http["response"] = fake_http["make"]('{"name": "made"}')
        assert Widget.post("http://example.com/widget", {"name": "made"}).name == "made"

    def test_http_error_raises(self, fake_http, Widget):
        fake_http["response"] = fake_http["make"]("not found", status_code=404)

        with pytest.raises(TransportError) as info:
            Widget.get("http://example.com/missing")
        assert info.value.url == "http://example.com/missing"

    def test_malformed_body_raises(self, fake_http, Widget):
        from jschema import MalformedDocumentError

        fake_http["response"] = fake_http["make"]("<html>")
        with pytest.raises(MalformedDocumentError):
            Widget.get("http://example.com/widget")
