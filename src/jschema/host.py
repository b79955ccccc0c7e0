"""
Materializes reflective models as Python classes.

Struct types become ``JsonModel`` subclasses: the instance is the JsonMap
itself, properties read and write the raw JSON keys, and the parse/fetch
methods are available on the class. Enum types become ``enum.Enum`` classes
and list wrapper types become classes that only carry static methods.

Usage:
    host = ModelHost(registry)
    Widget = host["com.example.Widget"]
    widget = Widget.parse('{"name": "bolt"}')
    widget.name
"""

from enum import Enum
from typing import Any, Dict, Optional

from .config import DEFAULT_OPTIONS, InferenceOptions
from .reflection import MethodDescriptor, ModelGenerator, TypeModel
from .registry import TypeRegistry
from .types import EnumType, InferredType, ListWrapperType, StructType, describe
from .values import JsonMap


class _ClassOrInstanceMethod:
    """Dispatches to ``on_class`` when looked up on the class and ``on_instance`` on instances."""

    def __init__(self, on_class, on_instance):
        self.on_class = on_class
        self.on_instance = on_instance

    def __get__(self, obj, objtype=None):
        if obj is None:
            return self.on_class
        return self.on_instance.__get__(obj, objtype)


class JsonModel(JsonMap):
    """Base class of every generated struct class."""

    _jschema_type: Optional[StructType] = None
    _jschema_model: Optional[TypeModel] = None

    def __init__(self, **properties):
        super().__init__(intrinsic_type=type(self)._jschema_type)
        model = type(self)._jschema_model
        for name, value in properties.items():
            if model is None or model.find_property(name) is None:
                raise TypeError(f"{type(self).__name__} has no property {name!r}")
            setattr(self, name, value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict.__repr__(self)})"


class ListModel:
    """Base class of generated list wrapper classes; instances are plain JsonLists."""

    _jschema_type: Optional[ListWrapperType] = None

    def __init__(self, *args, **kwargs):
        raise TypeError(f"{type(self).__name__} is a list type and cannot be instantiated")


def _static(method: MethodDescriptor):
    def call(*args, **kwargs):
        return method.call(None, *args, **kwargs)
    call.__name__ = method.name
    return call


def _instance(method: MethodDescriptor):
    def call(self, *args, **kwargs):
        return method.call(self, *args, **kwargs)
    call.__name__ = method.name
    return call


class ModelHost:
    """Creates (and caches) one Python class per type of a registry."""

    def __init__(self, registry: TypeRegistry, options: InferenceOptions = DEFAULT_OPTIONS):
        self.registry = registry
        self.generator = ModelGenerator(registry, options, factory=self._new_struct,
                                        enum_value=self._enum_value)
        self._classes: Dict[str, type] = {}

    def __getitem__(self, name: str) -> type:
        return self.class_for(self.registry[name])

    def __contains__(self, name: str) -> bool:
        return name in self.registry

    def model(self, name: str) -> TypeModel:
        return self.generator.model_for(name)

    def class_for(self, t: InferredType) -> type:
        cls = self._classes.get(t.name)
        if cls is None:
            cls = self._create_class(t)
            self._classes[t.name] = cls
        return cls

    def _new_struct(self, t: StructType) -> JsonMap:
        return self.class_for(t)()

    def _enum_value(self, t: EnumType, literal: Any) -> Any:
        try:
            return self.class_for(t)(literal)
        except ValueError:
            # A literal that is not a member stays raw
            return literal

    def _create_class(self, t: InferredType) -> type:
        if isinstance(t, EnumType):
            cls = Enum(t.relative_name, [(code, literal) for code, literal in t.values],
                       module=__name__, qualname=t.name)
            cls._jschema_type = t
            return cls

        model = self.generator.model_for(t)
        namespace: Dict[str, Any] = {
            "_jschema_type": t,
            "_jschema_model": model,
            "__module__": __name__,
            "__qualname__": t.name,
            "__doc__": f"{t.name} (inferred from {t.source})",
        }
        for p in model.properties:
            namespace[p.name] = property(p.getter, p.setter, doc=f"{p.json_key}: {describe(p.type)}")
        for m in model.methods:
            namespace[m.name] = staticmethod(_static(m)) if m.static else _instance(m)

        if isinstance(t, StructType):
            # Model.get(url) fetches, model_instance.get(key) is dict.get
            namespace["get"] = _ClassOrInstanceMethod(namespace["get"].__func__, dict.get)
            return type(t.relative_name, (JsonModel,), namespace)
        return type(t.relative_name, (ListModel,), namespace)
