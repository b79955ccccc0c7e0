"""
Tests for the JSON value tree: parent wiring, auto-creation and descendents.
"""

import gc

from jschema.values import Descendents, JsonList, JsonMap


# =============================================================================
# JSON MAP
# =============================================================================

class TestJsonMap:
    """Maps adopt nested containers and keep a weak link to their parent."""

    def test_plain_dict_is_adopted_and_wired_to_parent(self):
        """Storing a plain dict converts it and points it back at the map."""
        root = JsonMap()
        root["child"] = {"a": 1}

        assert isinstance(root["child"], JsonMap)
        assert root["child"].get_parent() is root

    def test_constructor_adopts_nested_values(self):
        """Nested dicts and lists passed to the constructor are wired too."""
        root = JsonMap({"a": {"b": [{"c": 1}]}})

        inner = root["a"]["b"][0]
        assert isinstance(root["a"]["b"], JsonList)
        assert inner.get_parent() is root["a"]["b"]
        assert root["a"]["b"].get_parent() is root["a"]

    def test_put_get_remove(self):
        """put/get/remove work on raw keys."""
        root = JsonMap()
        root.put("k", "v")
        assert root.get("k") == "v"
        assert root.remove("k") == "v"
        assert "k" not in root
        assert root.remove("k") is None

    def test_removed_child_loses_its_parent(self):
        """Removing a container detaches it."""
        root = JsonMap({"child": {}})
        child = root.remove("child")
        assert child.get_parent() is None

    def test_replaced_child_loses_its_parent(self):
        """Overwriting a key detaches the previous container."""
        root = JsonMap({"child": {}})
        old = root["child"]
        root["child"] = {}
        assert old.get_parent() is None
        assert root["child"].get_parent() is root

    def test_autocreate_is_idempotent(self):
        """Auto-creation stores the created value, so reads return the same instance."""
        root = JsonMap()
        first = root.autocreate("x", JsonMap)
        second = root.autocreate("x", JsonMap)

        assert first is second
        assert root["x"] is first
        assert first.get_parent() is root

    def test_autocreate_keeps_existing_value(self):
        """An existing value is returned untouched."""
        root = JsonMap({"x": 5})
        assert root.autocreate("x", JsonMap) == 5

    def test_parent_reference_is_weak(self):
        """A child does not keep its parent alive."""
        root = JsonMap()
        child = JsonMap()
        root["c"] = child
        del root
        gc.collect()
        assert child.get_parent() is None

    def test_equals_plain_dict(self):
        """Maps compare like dicts."""
        assert JsonMap({"a": [1, {"b": 2}]}) == {"a": [1, {"b": 2}]}

    def test_intrinsic_type_defaults_to_none(self):
        assert JsonMap().intrinsic_type is None
        assert JsonMap(intrinsic_type="T").intrinsic_type == "T"


# =============================================================================
# JSON LIST
# =============================================================================

class TestJsonList:
    """Lists wire every container they hold."""

    def test_append_and_insert_adopt(self):
        items = JsonList()
        items.append({"a": 1})
        items.insert(0, [1, 2])

        assert isinstance(items[0], JsonList)
        assert isinstance(items[1], JsonMap)
        assert items[0].get_parent() is items
        assert items[1].get_parent() is items

    def test_pop_detaches(self):
        items = JsonList([{"a": 1}])
        popped = items.pop()
        assert popped.get_parent() is None
        assert len(items) == 0

    def test_get_and_put_by_index(self):
        items = JsonList(["a", "b"])
        items.put(1, {"x": 1})
        assert items.get(0) == "a"
        assert items.get(5) is None
        assert items[1].get_parent() is items

    def test_slice_assignment_adopts(self):
        items = JsonList([1, 2, 3])
        items[0:2] = [{"a": 1}]
        assert items == [{"a": 1}, 3]
        assert items[0].get_parent() is items


# =============================================================================
# DESCENDENTS
# =============================================================================

class TestDescendents:
    """Descendents are every map below a node in document order."""

    def _doc(self):
        return JsonMap({
            "a": {"b": {"c": 1}},
            "items": [{"x": 1}, [{"y": 2}]],
            "s": "text",
        })

    def test_document_order(self):
        doc = self._doc()
        expected = [doc["a"], doc["a"]["b"], doc["items"][0], doc["items"][1][0]]

        assert [id(m) for m in doc.descendents()] == [id(m) for m in expected]

    def test_root_is_not_included(self):
        doc = self._doc()
        assert all(m is not doc for m in doc.descendents())

    def test_restartable(self):
        """Iterating twice walks the tree twice."""
        descendents = self._doc().descendents()
        assert isinstance(descendents, Descendents)
        assert len(list(descendents)) == 4
        assert len(list(descendents)) == 4

    def test_sees_changes_between_walks(self):
        doc = self._doc()
        descendents = doc.descendents()
        doc["new"] = {}
        assert len(list(descendents)) == 5

    def test_leaf_map_has_no_descendents(self):
        assert list(JsonMap({"a": 1}).descendents()) == []
