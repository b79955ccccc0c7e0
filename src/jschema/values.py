"""
In-memory tree for parsed JSON documents.

``JsonMap`` and ``JsonList`` behave like ``dict`` and ``list`` but keep a weak
reference to the container holding them, and optionally the inferred type that
classifies them. Plain dicts and lists stored into a container are converted
on the way in so every nested container knows its parent.
"""

import weakref
from typing import Any, Callable, Iterator, List, Optional


class _Node:
    _parent_ref = None
    intrinsic_type = None

    def get_parent(self) -> Optional["_Node"]:
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    def _set_parent(self, parent: Optional["_Node"]):
        self._parent_ref = weakref.ref(parent) if parent is not None else None

    def descendents(self) -> "Descendents":
        """All maps below this node, depth first in document order."""
        return Descendents(self)


def adopt(value: Any, parent: Optional[_Node] = None) -> Any:
    """Wrap plain containers as JsonMap/JsonList and wire them to ``parent``."""
    if isinstance(value, _Node):
        value._set_parent(parent)
        return value
    if isinstance(value, dict):
        converted = JsonMap(value)
        converted._set_parent(parent)
        return converted
    if isinstance(value, (list, tuple)):
        converted = JsonList(value)
        converted._set_parent(parent)
        return converted
    return value


def _orphan(value: Any):
    if isinstance(value, _Node):
        value._set_parent(None)


class JsonMap(_Node, dict):
    """Ordered JSON object."""

    def __init__(self, *args, intrinsic_type=None, **kwargs):
        dict.__init__(self)
        self.intrinsic_type = intrinsic_type
        self._parent_ref = None
        if args or kwargs:
            self.update(*args, **kwargs)

    def __setitem__(self, key: str, value: Any):
        if key in self:
            _orphan(dict.__getitem__(self, key))
        dict.__setitem__(self, key, adopt(value, self))

    def __delitem__(self, key: str):
        _orphan(dict.get(self, key))
        dict.__delitem__(self, key)

    def update(self, *args, **kwargs):
        for key, value in dict(*args, **kwargs).items():
            self[key] = value

    def setdefault(self, key: str, default: Any = None) -> Any:
        if key not in self:
            self[key] = default
        return dict.__getitem__(self, key)

    def pop(self, key: str, *default) -> Any:
        value = dict.pop(self, key, *default)
        _orphan(value)
        return value

    def put(self, key: str, value: Any):
        self[key] = value

    def remove(self, key: str) -> Any:
        return self.pop(key, None)

    def autocreate(self, key: str, factory: Callable[[], Any]) -> Any:
        """
        Return the value under ``key``, creating it with ``factory`` first if
        the key is absent. The created value is stored, so repeated reads see
        the same instance.
        """
        if key in self:
            return dict.__getitem__(self, key)
        self[key] = factory()
        return dict.__getitem__(self, key)


class JsonList(_Node, list):
    """JSON array."""

    def __init__(self, iterable=(), intrinsic_type=None):
        list.__init__(self)
        self.intrinsic_type = intrinsic_type
        self._parent_ref = None
        self.extend(iterable)

    def _adopt(self, value: Any) -> Any:
        # Every item stored into the list passes through here
        return adopt(value, self)

    def append(self, value: Any):
        list.append(self, self._adopt(value))

    def insert(self, index: int, value: Any):
        list.insert(self, index, self._adopt(value))

    def extend(self, values):
        for value in values:
            self.append(value)

    def __iadd__(self, values):
        self.extend(values)
        return self

    def __setitem__(self, index, value):
        if isinstance(index, slice):
            for old in list.__getitem__(self, index):
                _orphan(old)
            list.__setitem__(self, index, [self._adopt(v) for v in value])
        else:
            _orphan(list.__getitem__(self, index))
            list.__setitem__(self, index, self._adopt(value))

    def __delitem__(self, index):
        if isinstance(index, slice):
            for old in list.__getitem__(self, index):
                _orphan(old)
        else:
            _orphan(list.__getitem__(self, index))
        list.__delitem__(self, index)

    def pop(self, index: int = -1) -> Any:
        value = list.pop(self, index)
        _orphan(value)
        return value

    def remove(self, value: Any):
        index = self.index(value)
        del self[index]

    def get(self, index: int, default: Any = None) -> Any:
        try:
            return self[index]
        except IndexError:
            return default

    def put(self, index: int, value: Any):
        self[index] = value


def _child_nodes(node: Any) -> List[_Node]:
    if isinstance(node, dict):
        children = node.values()
    elif isinstance(node, list):
        children = node
    else:
        return []
    return [c for c in children if isinstance(c, (dict, list))]


class Descendents:
    """
    Restartable view over every map below a node. Each call to ``iter`` walks
    the tree again, so changes made between walks are visible.
    """

    def __init__(self, root: Any):
        self._root = root

    def __iter__(self) -> Iterator[JsonMap]:
        stack = list(reversed(_child_nodes(self._root)))
        while stack:
            node = stack.pop()
            if isinstance(node, dict):
                yield node
            stack.extend(reversed(_child_nodes(node)))

    def __repr__(self) -> str:
        return f"Descendents({len(list(self))} maps)"
