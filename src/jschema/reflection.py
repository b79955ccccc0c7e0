"""
Reflective models for inferred types.

For every type in a registry the generator produces a ``TypeModel``: property
descriptors (typed accessors over the underlying JsonMap, with auto-creation
of unset map and list fields), method descriptors (parse, fetch, serialize and
navigate) and constructors. The descriptors are host neutral; ``jschema.host``
turns them into Python classes.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from .config import DEFAULT_OPTIONS, InferenceOptions
from .parser import loads
from .registry import TypeRegistry
from .serializer import serialize
from .transport import http_get, http_post
from .types import (
    OBJECT,
    AutoCreate,
    EnumType,
    FieldDescriptor,
    InferredType,
    ListWrapperType,
    StructType,
    describe,
)
from .values import Descendents, JsonList, JsonMap

_REQUIRED = object()


@dataclass
class ParameterDescriptor:
    name: str
    type: str
    default: Any = _REQUIRED

    @property
    def required(self) -> bool:
        return self.default is _REQUIRED


@dataclass
class PropertyDescriptor:
    name: str
    type: InferredType
    getter: Callable[[Any], Any]
    setter: Optional[Callable[[Any, Any], None]] = None
    json_key: Optional[str] = None
    autocreate: AutoCreate = AutoCreate.NONE
    static: bool = False

    @property
    def writable(self) -> bool:
        return self.setter is not None

    def get(self, ctx: Any = None) -> Any:
        return self.getter(ctx)

    def set(self, ctx: Any, value: Any):
        if self.setter is None:
            raise AttributeError(f"Property {self.name} is read-only")
        self.setter(ctx, value)


@dataclass
class MethodDescriptor:
    name: str
    return_type: Union[InferredType, str]
    handler: Callable[..., Any]
    parameters: List[ParameterDescriptor] = field(default_factory=list)
    static: bool = False

    def call(self, ctx: Any, *args, **kwargs) -> Any:
        """Invoke the method; ``ctx`` is the instance, ignored for static methods."""
        return self.handler(ctx, *args, **kwargs)


@dataclass
class TypeModel:
    type: InferredType
    properties: List[PropertyDescriptor] = field(default_factory=list)
    methods: List[MethodDescriptor] = field(default_factory=list)
    constructors: List[Callable[[], Any]] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.type.name

    def find_property(self, name: str) -> Optional[PropertyDescriptor]:
        for p in self.properties:
            if p.name == name:
                return p
        return None

    def find_method(self, name: str) -> Optional[MethodDescriptor]:
        for m in self.methods:
            if m.name == name:
                return m
        return None

    def new_instance(self) -> Any:
        if not self.constructors:
            raise TypeError(f"{self.name} cannot be instantiated")
        return self.constructors[0]()


class BoundList(JsonList):
    """
    List of a list wrapper type. Plain dicts and lists stored into it are
    bound to the element type first, so appended items are typed like parsed ones.
    """

    def __init__(self, iterable=(), intrinsic_type=None, bind_item: Optional[Callable[[Any], Any]] = None):
        self._bind_item = bind_item
        super().__init__(iterable, intrinsic_type)

    def _adopt(self, value: Any) -> Any:
        if self._bind_item is not None and isinstance(value, (dict, list)) \
                and not isinstance(value, (JsonMap, JsonList)):
            value = self._bind_item(value)
        return super()._adopt(value)


def default_factory(t: StructType) -> JsonMap:
    return JsonMap(intrinsic_type=t)


def default_enum_value(t: EnumType, literal: Any) -> Any:
    return literal


def typed_parent(node: Any) -> Optional[JsonMap]:
    """Nearest ancestor map classified by a struct type, or None."""
    parent = node.get_parent()
    while parent is not None and not (isinstance(parent, JsonMap) and isinstance(parent.intrinsic_type, StructType)):
        parent = parent.get_parent()
    return parent


class ModelGenerator:
    """
    Builds (and caches) a TypeModel per type of one registry.

    ``factory`` creates the map instance for a struct type and ``enum_value``
    converts a stored enum literal into whatever the host uses for enum
    values; both default to plain JsonMap / the raw literal.
    """

    def __init__(self, registry: TypeRegistry, options: InferenceOptions = DEFAULT_OPTIONS,
                 factory: Callable[[StructType], JsonMap] = default_factory,
                 enum_value: Callable[[EnumType, Any], Any] = default_enum_value):
        self.registry = registry
        self.options = options
        self.factory = factory
        self.enum_value = enum_value
        self._models: Dict[str, TypeModel] = {}

    def model_for(self, t: Union[str, InferredType]) -> TypeModel:
        if isinstance(t, str):
            t = self.registry[t]
        model = self._models.get(t.name)
        if model is None:
            model = self._build(t)
            self._models[t.name] = model
        return model

    def models(self) -> List[TypeModel]:
        return [self.model_for(t) for t in self.registry.types.values()]

    def _build(self, t: InferredType) -> TypeModel:
        if isinstance(t, EnumType):
            return TypeModel(t, properties=self._enum_properties(t))
        if isinstance(t, ListWrapperType):
            methods = self._production_methods(t) + self._list_methods(t)
            return TypeModel(t, methods=methods)
        if isinstance(t, StructType):
            methods = self._production_methods(t) + self._instance_methods(t)
            return TypeModel(t, self._struct_properties(t), methods, [lambda: self.factory(t)])
        raise TypeError(f"No model for {t!r}")

    # -- properties ---------------------------------------------------------

    def _struct_properties(self, t: StructType) -> List[PropertyDescriptor]:
        return [self._field_property(f) for f in t.fields]

    def _field_property(self, f: FieldDescriptor) -> PropertyDescriptor:
        key = f.json_key

        def getter(ctx):
            if f.autocreate is AutoCreate.NONE or key in ctx:
                value = dict.get(ctx, key)
            else:
                value = ctx.autocreate(key, lambda: self.empty_value(f.type))
            if isinstance(f.type, EnumType) and value is not None:
                return self.enum_value(f.type, value)
            return value

        def setter(ctx, value):
            if isinstance(value, Enum):
                value = value.value
            elif isinstance(value, (dict, list)) and not isinstance(value, (JsonMap, JsonList)):
                value = self.bind(value, f.type)
            ctx[key] = value

        return PropertyDescriptor(f.property_name, f.type, getter, setter,
                                  json_key=key, autocreate=f.autocreate)

    def _enum_properties(self, t: EnumType) -> List[PropertyDescriptor]:
        props = []
        for code, literal in t.values:
            value = self.enum_value(t, literal)
            props.append(PropertyDescriptor(code, t, lambda ctx, v=value: v, static=True))
        return props

    def empty_value(self, t: Optional[InferredType]) -> Any:
        """The structure an unset field auto-creates: one level only, never recursive."""
        if isinstance(t, StructType):
            return self.factory(t)
        if isinstance(t, ListWrapperType):
            return BoundList(intrinsic_type=t, bind_item=self._item_binder(t, t.depth))
        if t is OBJECT:
            return JsonMap()
        return None

    # -- methods ------------------------------------------------------------

    def _production_methods(self, t: InferredType) -> List[MethodDescriptor]:
        timeout = self.options.http_timeout

        def parse(ctx, content):
            return self.bind(loads(content), t)

        def parse_url(ctx, url):
            """
            Fetch ``url`` with requests and parse the body. Only http and https
            URLs are supported; read local files and hand the text to ``parse``.
            """
            return parse(ctx, http_get(str(url), timeout=timeout))

        def get(ctx, url, args=None):
            return parse(ctx, http_get(url, args, timeout=timeout))

        def post(ctx, url, args=None):
            return parse(ctx, http_post(url, args, timeout=timeout))

        url_args = [ParameterDescriptor("url", "string"),
                    ParameterDescriptor("args", "Mapping[str, Any]", None)]
        return [
            MethodDescriptor("parse", t, parse, [ParameterDescriptor("content", "string")], static=True),
            MethodDescriptor("parse_url", t, parse_url, [ParameterDescriptor("url", "uri")], static=True),
            MethodDescriptor("get", t, get, list(url_args), static=True),
            MethodDescriptor("post", t, post, list(url_args), static=True),
        ]

    def _instance_methods(self, t: StructType) -> List[MethodDescriptor]:
        default_indent = self.options.default_indent

        def write(ctx):
            return serialize(ctx)

        def pretty_print(ctx, indent=None):
            return serialize(ctx, default_indent if indent is None else indent)

        def as_json(ctx):
            return ctx

        def parent(ctx):
            return typed_parent(ctx)

        def descendents(ctx):
            return Descendents(ctx)

        return [
            MethodDescriptor("write", "string", write),
            MethodDescriptor("pretty_print", "string", pretty_print,
                             [ParameterDescriptor("indent", "int", None)]),
            MethodDescriptor("as_json", OBJECT, as_json),
            MethodDescriptor("parent", self.parent_type(t), parent),
            MethodDescriptor("descendents", "Iterable[object]", descendents),
        ]

    def _list_methods(self, t: ListWrapperType) -> List[MethodDescriptor]:
        default_indent = self.options.default_indent

        def write(ctx, value):
            return serialize(value)

        def pretty_print(ctx, value, indent=None):
            return serialize(value, default_indent if indent is None else indent)

        return [
            MethodDescriptor("write", "string", write, [ParameterDescriptor("value", describe(t))], static=True),
            MethodDescriptor("pretty_print", "string", pretty_print,
                             [ParameterDescriptor("value", describe(t)),
                              ParameterDescriptor("indent", "int", None)], static=True),
        ]

    def parent_type(self, t: StructType) -> InferredType:
        """
        Declared return type of ``parent()``: the enclosing struct, skipping
        list levels, unless this type is one of that struct's typedefs.
        """
        namespace = t.namespace
        while namespace:
            outer = self.registry.get(namespace)
            if isinstance(outer, StructType):
                return OBJECT if outer.is_typedef_target(t.name) else outer
            if not isinstance(outer, ListWrapperType):
                break
            namespace = outer.namespace
        return OBJECT

    # -- binding ------------------------------------------------------------

    def bind(self, value: Any, t: Optional[InferredType]) -> Any:
        """
        Rebuild ``value`` so that every map and list carries its inferred type;
        maps of struct types are created through ``factory``.
        """
        if isinstance(t, StructType) and isinstance(value, dict):
            instance = self.factory(t)
            for key, child in value.items():
                f = t.field_for_key(key)
                instance[key] = self.bind(child, f.type if f is not None else None)
            return instance
        if isinstance(t, ListWrapperType) and isinstance(value, list):
            return self._bind_list(value, t, t.depth)
        if isinstance(value, dict):
            return JsonMap({k: self.bind(v, None) for k, v in value.items()})
        if isinstance(value, list):
            return JsonList(self.bind(v, None) for v in value)
        return value

    def _item_binder(self, t: ListWrapperType, depth: int) -> Callable[[Any], Any]:
        def bind_item(item):
            if depth > 1 and isinstance(item, list):
                return self._bind_list(item, t, depth - 1)
            return self.bind(item, t.element)
        return bind_item

    def _bind_list(self, value: list, t: ListWrapperType, depth: int) -> JsonList:
        bind_item = self._item_binder(t, depth)
        result = BoundList(intrinsic_type=t if depth == t.depth else None, bind_item=bind_item)
        for item in value:
            # parsed items are already JsonMap/JsonList, so bind them explicitly
            result.append(bind_item(item))
        return result
