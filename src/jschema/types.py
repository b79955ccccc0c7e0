"""
The type graph produced by inference: structs, enums, list wrappers and the
primitive kinds scalar samples are classified as.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .errors import Diagnostic
from .naming import NameMapping


class AutoCreate(str, Enum):
    """What a property read produces when the field is unset."""
    NONE = "none"
    MAP = "map"
    LIST = "list"


class InferredType:
    kind = "type"

    def __init__(self, name: str, source: Optional[str] = None):
        self.name = name
        self.source = source
        self.errors: List[Diagnostic] = []
        # Types whose namespace is this type, keyed by their last name segment
        self.inner_types: Dict[str, "InferredType"] = {}

    @property
    def namespace(self) -> str:
        return self.name.rpartition(".")[0]

    @property
    def relative_name(self) -> str:
        return self.name.rpartition(".")[2]

    def add_errors(self, errors):
        if errors:
            self.errors.extend(errors)

    def add_inner_type(self, inner: "InferredType"):
        self.inner_types[inner.relative_name] = inner

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class PrimitiveType(InferredType):
    kind = "primitive"

    def __init__(self, name: str, python_type: type):
        super().__init__(name)
        self.python_type = python_type


PRIMITIVES: Dict[str, PrimitiveType] = {
    p.name: p for p in (
        PrimitiveType("string", str),
        PrimitiveType("boolean", bool),
        PrimitiveType("int", int),
        PrimitiveType("number", float),
        PrimitiveType("date", str),
        PrimitiveType("uri", str),
        PrimitiveType("object", dict),
        PrimitiveType("*", object),
    )
}

ANY = PRIMITIVES["*"]
OBJECT = PRIMITIVES["object"]


def primitive(name: Any) -> Optional[PrimitiveType]:
    if isinstance(name, str):
        return PRIMITIVES.get(name)
    return None


@dataclass
class FieldDescriptor:
    json_key: str
    property_name: str
    # The value the sample document held for this key
    sample: Any = None
    type: Optional[InferredType] = None
    autocreate: AutoCreate = AutoCreate.NONE


class StructType(InferredType):
    kind = "struct"

    def __init__(self, name: str, fields: List[FieldDescriptor],
                 typedefs: Optional[Dict[str, str]] = None, source: Optional[str] = None):
        super().__init__(name, source)
        self.fields = list(fields)
        self.typedefs: Dict[str, str] = dict(typedefs or {})
        self.mapping = NameMapping()
        for f in self.fields:
            self.mapping.bind(f.json_key, f.property_name)

    def field(self, property_name: str) -> Optional[FieldDescriptor]:
        for f in self.fields:
            if f.property_name == property_name:
                return f
        return None

    def field_for_key(self, json_key: str) -> Optional[FieldDescriptor]:
        property_name = self.mapping.property_for(json_key)
        return self.field(property_name) if property_name else None

    def is_typedef_target(self, type_name: str) -> bool:
        return type_name in self.typedefs.values()


class EnumType(InferredType):
    kind = "enum"

    def __init__(self, name: str, values: List[Tuple[str, Any]], source: Optional[str] = None):
        super().__init__(name, source)
        # (code, literal) pairs in declaration order
        self.values = list(values)

    @property
    def codes(self) -> List[str]:
        return [code for code, _ in self.values]

    def literal_for(self, code: str) -> Any:
        for c, literal in self.values:
            if c == code:
                return literal
        raise KeyError(code)

    def code_for(self, literal: Any) -> Optional[str]:
        for code, lit in self.values:
            if lit == literal:
                return code
        return None


class ListWrapperType(InferredType):
    kind = "list"

    def __init__(self, name: str, depth: int, element_sample: Any = None,
                 element: Optional[InferredType] = None, source: Optional[str] = None):
        super().__init__(name, source)
        self.depth = depth
        self.element_sample = element_sample
        self.element = element

    @property
    def element_name(self) -> str:
        return f"{self.name}.Element"


def autocreate_policy(t: Optional[InferredType]) -> AutoCreate:
    if isinstance(t, StructType) or t is OBJECT:
        return AutoCreate.MAP
    if isinstance(t, ListWrapperType):
        return AutoCreate.LIST
    return AutoCreate.NONE


def describe(t: Optional[InferredType]) -> str:
    """Short human readable form, e.g. ``List[string]`` or ``Widget.Address``."""
    if t is None:
        return "?"
    if isinstance(t, ListWrapperType):
        inner = describe(t.element)
        for _ in range(max(t.depth, 1)):
            inner = f"List[{inner}]"
        return inner
    return t.name
