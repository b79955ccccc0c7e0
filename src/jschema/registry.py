"""
Type registry and the build/publish lifecycle around it.

A registry is built in one pass over all sources and never modified after it
is published. When sources change, a new registry is built from scratch and
swapped in; readers keep using the previous one until then.
"""

import threading
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Set, Tuple

from rich.console import Console
from tqdm import tqdm

from .config import DEFAULT_OPTIONS, JSCHEMA_EXT, JSON_EXT, InferenceOptions
from .errors import BuildInProgressError, Diagnostic, UnknownTypeError, io_error
from .inference import SchemaInferrer
from .parser import ParseResult, parse_document
from .sources import SourceUnit
from .types import EnumType, InferredType, ListWrapperType, StructType
from .values import JsonMap

console = Console(stderr=True)


class TypeRegistry:
    """Read-only mapping from dotted type name to inferred type."""

    def __init__(self, types: Mapping[str, InferredType], files: Mapping[str, Sequence[str]]):
        self._types = MappingProxyType(dict(types))
        self._files = MappingProxyType({k: tuple(v) for k, v in files.items()})

    @classmethod
    def empty(cls) -> "TypeRegistry":
        return cls({}, {})

    def get(self, name: str) -> Optional[InferredType]:
        return self._types.get(name)

    def __getitem__(self, name: str) -> InferredType:
        try:
            return self._types[name]
        except KeyError:
            raise UnknownTypeError(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __iter__(self) -> Iterator[str]:
        return iter(self._types)

    def __len__(self) -> int:
        return len(self._types)

    @property
    def types(self) -> Mapping[str, InferredType]:
        return self._types

    @property
    def sources(self) -> Mapping[str, Tuple[str, ...]]:
        return self._files

    def types_for_source(self, identity: str) -> Tuple[str, ...]:
        return self._files.get(identity, ())

    def structs(self) -> List[StructType]:
        return [t for t in self._types.values() if isinstance(t, StructType)]

    def enums(self) -> List[EnumType]:
        return [t for t in self._types.values() if isinstance(t, EnumType)]

    def list_wrappers(self) -> List[ListWrapperType]:
        return [t for t in self._types.values() if isinstance(t, ListWrapperType)]

    def namespaces(self) -> Set[str]:
        """Every dotted prefix of every type name."""
        namespaces = set()
        for name in self._types:
            namespace = name.rpartition(".")[0]
            while namespace:
                namespaces.add(namespace)
                namespace = namespace.rpartition(".")[0]
        return namespaces

    def errors(self) -> Dict[str, List[Diagnostic]]:
        """Diagnostics per type name, only for types that have any."""
        return {name: list(t.errors) for name, t in self._types.items() if t.errors}

    def __repr__(self) -> str:
        return f"TypeRegistry({len(self._types)} types)"


def load_source(source: SourceUnit) -> ParseResult:
    """Read and parse one source; an unreadable source yields an empty map and one IO error."""
    try:
        data = source.read()
    except OSError as e:
        return ParseResult(JsonMap(), [io_error(f"Unable to open JSON file {source.identity}: {e}")])
    return parse_document(data)


class RegistryBuilder:
    """
    Builds registries from sources and publishes them.

    Only one build may run at a time; starting another one while a build is
    running raises BuildInProgressError. ``registry`` always returns the last
    published registry and never blocks.
    """

    def __init__(self, options: InferenceOptions = DEFAULT_OPTIONS):
        self.options = options
        self._lock = threading.Lock()
        self._building = False
        self._published = TypeRegistry.empty()
        self.generation = 0

    @property
    def registry(self) -> TypeRegistry:
        return self._published

    @property
    def building(self) -> bool:
        return self._building

    def build(self, sources: Iterable[SourceUnit]) -> TypeRegistry:
        with self._lock:
            if self._building:
                raise BuildInProgressError("A type registry build is already in progress")
            self._building = True
        try:
            registry = self._build(list(sources))
            with self._lock:
                self._published = registry
                self.generation += 1
        finally:
            with self._lock:
                self._building = False
        return registry

    def _build(self, sources: List[SourceUnit]) -> TypeRegistry:
        # JSchema definitions first, then plain JSON samples; sorted() is stable
        ordered = sorted(sources, key=lambda s: s.is_plain_json)
        inferrer = SchemaInferrer(self.options)

        if self.options.show_progress:
            console.print(f"[bold blue]Inferring types from {len(ordered)} sources...[/bold blue]")

        for source in tqdm(ordered, desc="Inferring", unit=" sources", disable=not self.options.show_progress):
            result = load_source(source)
            inferrer.add_document(source.name, result.value, source.identity, result.errors,
                                  plain_json=source.is_plain_json)

        types = inferrer.finish()
        registry = TypeRegistry(types, inferrer.files)
        if self.options.show_progress:
            console.print(f"[bold green]Inferred {len(registry)} types.[/bold green]")
        return registry


def infer_types(value: Any, root_name: str, plain_json: bool = False,
                options: InferenceOptions = DEFAULT_OPTIONS) -> TypeRegistry:
    """Infer a registry from a single already parsed document."""
    inferrer = SchemaInferrer(options)
    inferrer.add_document(root_name, value, plain_json=plain_json)
    return TypeRegistry(inferrer.finish(), inferrer.files)


def infer_text(text: str, root_name: str, plain_json: bool = False,
               options: InferenceOptions = DEFAULT_OPTIONS) -> TypeRegistry:
    """Parse ``text`` leniently and infer a registry; parse errors land on the root type."""
    kind = JSON_EXT if plain_json else JSCHEMA_EXT
    return RegistryBuilder(options).build([SourceUnit(root_name, text, kind)])
