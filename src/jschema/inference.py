"""
Schema inference: walks sample documents and derives named types.

A document is walked depth first. Maps become struct types (or enum types when
they carry the enum marker), lists become list wrapper types over their first
element, and scalars are left for the finishing pass, which classifies them as
primitives, typedef aliases or references to other registered types.

    "customers" : [{ "name" : "string", "id" : "int" }]

registers ``Root.customers`` (a list wrapper, depth 1) over the struct
``Root.customers.Element``.
"""

from typing import Any, Dict, List, Optional, Tuple

from rich.console import Console

from .config import DEFAULT_OPTIONS, InferenceOptions
from .errors import Diagnostic, DiagnosticKind
from .naming import NameMapping, to_enum_code, to_identifier
from .types import (
    ANY,
    OBJECT,
    EnumType,
    FieldDescriptor,
    InferredType,
    ListWrapperType,
    StructType,
    autocreate_policy,
    primitive,
)
from .values import JsonList, JsonMap

console = Console(stderr=True)


class TypedefScope:
    """
    Stack of alias tables. Entering a struct pushes a table, leaving pops it,
    so aliases declared further out stay visible below but never leak up.
    """

    def __init__(self):
        self._stack: List[Dict[str, str]] = []

    def push(self, aliases: Optional[Dict[str, str]] = None):
        self._stack.append(dict(aliases or {}))

    def pop(self) -> Dict[str, str]:
        return self._stack.pop()

    def declare(self, alias: str, type_name: str):
        self._stack[-1][alias] = type_name

    def resolve(self, alias: str) -> Optional[str]:
        for aliases in reversed(self._stack):
            if alias in aliases:
                return aliases[alias]
        return None

    def snapshot(self) -> Dict[str, str]:
        """Flattened view of every table on the stack; inner tables win."""
        flattened: Dict[str, str] = {}
        for aliases in self._stack:
            flattened.update(aliases)
        return flattened

    def __len__(self) -> int:
        return len(self._stack)


def json_to_jschema(value: Any) -> Any:
    """
    Turn a plain JSON sample into JSchema form by replacing every scalar with
    the name of its primitive type.
    """
    if isinstance(value, dict):
        return JsonMap({k: json_to_jschema(v) for k, v in value.items()})
    if isinstance(value, list):
        return JsonList(json_to_jschema(v) for v in value)
    return _primitive_name(value)


def _primitive_name(value: Any) -> str:
    # bool first: it is a subclass of int
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "int"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    return "*"


class SchemaInferrer:
    """
    Collects types from one or more documents. Call ``add_document`` for each
    source, then ``finish`` once to link inner types and resolve field types.
    """

    def __init__(self, options: InferenceOptions = DEFAULT_OPTIONS):
        self.options = options
        self.types: Dict[str, InferredType] = {}
        self.files: Dict[str, List[str]] = {}
        self._scope = TypedefScope()
        self._markers = True
        self._finished = False

    def add_document(self, root_name: str, value: Any, source: Optional[str] = None,
                     errors: Optional[List[Diagnostic]] = None, plain_json: bool = False) -> InferredType:
        """
        Infer every type ``value`` defines under ``root_name`` and return the
        root type. ``errors`` found while reading the document are attached to
        the root type.
        """
        source = source or root_name
        if value is None:
            value = JsonMap()
        if plain_json:
            value = json_to_jschema(value)
        # Markers only mean something in JSchema documents
        self._markers = not plain_json

        self._infer(root_name, value, source)

        root = self.types.get(root_name)
        if root is None or root.source != source:
            # Scalar documents define nothing; give their errors a home
            root = StructType(root_name, [], source=source)
            self._put(root)
        root.add_errors(errors)
        return root

    def _infer(self, name: str, value: Any, source: str):
        if isinstance(value, list):
            self._infer_list(name, value, source)
        elif isinstance(value, dict):
            if self._markers and value.get(self.options.enum_key) is not None:
                self._put(EnumType(name, self._enum_values(value[self.options.enum_key]), source))
            elif self._markers and value.get(self.options.map_of_key) is not None:
                # map_of does not introduce a nesting level
                self._infer(name, value[self.options.map_of_key], source)
            else:
                self._infer_struct(name, value, source)

    def _infer_list(self, name: str, value: list, source: str):
        depth = 0
        element = value
        while isinstance(element, list) and element:
            depth += 1
            element = element[0]

        wrapper = ListWrapperType(name, depth, element_sample=element, source=source)
        if not isinstance(element, list):
            self._infer(wrapper.element_name, element, source)
        self._put(wrapper)

    def _infer_struct(self, name: str, value: dict, source: str):
        typedefs_key = self.options.typedefs_key if self._markers else None
        keys = [k for k in value if k is not None and k != typedefs_key]
        mapping = NameMapping.for_keys(keys)

        self._scope.push()
        try:
            if typedefs_key is not None and isinstance(value.get(typedefs_key), dict):
                self._declare_typedefs(name, value[typedefs_key], source)

            fields = []
            for key in keys:
                property_name = mapping.property_for(key)
                # Field types are looked up by this name in the finishing pass
                self._infer(f"{name}.{property_name}", value[key], source)
                fields.append(FieldDescriptor(key, property_name, value[key]))

            self._put(StructType(name, fields, self._scope.snapshot(), source))
        finally:
            self._scope.pop()

    def _declare_typedefs(self, name: str, typedefs: dict, source: str):
        for alias, target in typedefs.items():
            if isinstance(target, (dict, list)):
                type_name = f"{name}.{to_identifier(alias)}"
                self._scope.declare(alias, type_name)
                self._infer(type_name, target, source)
            else:
                # Names visible from enclosing scopes are bound now; anything else,
                # e.g. a later alias of this block, is chased when fields are resolved
                target = str(target)
                self._scope.declare(alias, self._scope.resolve(target) or target)

    def _enum_values(self, literals: Any) -> List[Tuple[str, Any]]:
        if not isinstance(literals, list):
            literals = [literals]
        mapping = NameMapping()
        values = []
        for literal in literals:
            key = str(literal)
            if key in mapping:
                continue
            values.append((mapping.add(key, to_enum_code), literal))
        return values

    def _put(self, t: InferredType):
        existing = self.types.get(t.name)
        if existing is not None:
            message = (f"Type {t.name} from {t.source} replaces the definition "
                       f"from {existing.source}")
            t.add_errors([Diagnostic(DiagnosticKind.NAME_COLLISION, message)])
            console.print(f"[yellow]{message}[/yellow]")
        self.types[t.name] = t
        self.files.setdefault(t.source, []).append(t.name)

    def finish(self) -> Dict[str, InferredType]:
        """Link inner types and resolve field and element types. Runs once."""
        if self._finished:
            return self.types
        self._finished = True

        for t in self.types.values():
            outer = self.types.get(t.namespace)
            if outer is not None:
                outer.add_inner_type(t)

        resolver = TypeResolver(self.types)
        for t in self.types.values():
            if isinstance(t, StructType):
                for f in t.fields:
                    f.type = resolver.field_type(t, f)
                    f.autocreate = autocreate_policy(f.type)
            elif isinstance(t, ListWrapperType):
                t.element = resolver.element_type(t)
        return self.types


class TypeResolver:
    """Resolves scalar samples to types once every document has been read."""

    def __init__(self, types: Dict[str, InferredType]):
        self.types = types

    def field_type(self, struct: StructType, f: FieldDescriptor) -> InferredType:
        nested = self.types.get(f"{struct.name}.{f.property_name}")
        if nested is not None:
            return nested
        resolved = self.classify(f.sample, struct)
        if resolved is None:
            struct.add_errors([Diagnostic(
                DiagnosticKind.UNRESOLVED_TYPE,
                f"Unknown type {f.sample!r} for field {f.json_key!r} of {struct.name}",
            )])
            return ANY
        return resolved

    def element_type(self, wrapper: ListWrapperType) -> InferredType:
        registered = self.types.get(wrapper.element_name)
        if registered is not None:
            return registered
        context = self.enclosing_struct(wrapper.name)
        resolved = self.classify(wrapper.element_sample, context)
        if resolved is None:
            wrapper.add_errors([Diagnostic(
                DiagnosticKind.UNRESOLVED_TYPE,
                f"Unknown element type {wrapper.element_sample!r} for {wrapper.name}",
            )])
            return ANY
        return resolved

    def enclosing_struct(self, name: str) -> Optional[StructType]:
        namespace = name.rpartition(".")[0]
        while namespace:
            t = self.types.get(namespace)
            if isinstance(t, StructType):
                return t
            namespace = namespace.rpartition(".")[0]
        return None

    def classify(self, sample: Any, context: Optional[StructType]) -> Optional[InferredType]:
        """
        Classify a scalar sample. Strings are type names: a primitive, an alias
        from the enclosing typedefs, a fully qualified type, or a type relative
        to one of the enclosing types (innermost first).
        """
        if isinstance(sample, dict):
            # e.g. {"map_of": "string"}: values are untyped
            return OBJECT
        if isinstance(sample, list) or sample is None:
            return ANY
        if not isinstance(sample, str):
            return primitive(_primitive_name(sample))

        found = primitive(sample)
        if found is not None:
            return found
        if context is not None and sample in context.typedefs:
            target = self.dealias(sample, context)
            return primitive(target) or self.lookup(target, context)
        return self.lookup(sample, context)

    def dealias(self, alias: str, context: StructType) -> str:
        """Follow an alias chain through the typedefs visible in ``context``; stops on cycles."""
        seen = set()
        name = alias
        while name in context.typedefs and name not in seen:
            seen.add(name)
            name = context.typedefs[name]
        return name

    def lookup(self, name: str, context: Optional[StructType]) -> Optional[InferredType]:
        if name in self.types:
            return self.types[name]
        prefix = context.name if context is not None else ""
        while prefix:
            candidate = self.types.get(f"{prefix}.{name}")
            if candidate is not None:
                return candidate
            prefix = prefix.rpartition(".")[0]
        return None
