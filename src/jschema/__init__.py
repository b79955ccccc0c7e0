"""
jschema - Infer named, typed models from JSON and JSchema sample documents.

Sample documents are walked to build a registry of struct, enum and list
types; every type can then be exposed as a reflective model or as a Python
class with typed properties and parse/serialize/fetch helpers.
"""

from .config import InferenceOptions
from .errors import (
    BuildInProgressError,
    Diagnostic,
    DiagnosticKind,
    JSchemaError,
    MalformedDocumentError,
    SourceNameError,
    TransportError,
    UnknownTypeError,
)
from .host import JsonModel, ModelHost
from .inference import SchemaInferrer, TypedefScope, json_to_jschema
from .naming import NameMapping, to_identifier
from .parser import ParseResult, loads, parse_document
from .reflection import ModelGenerator, TypeModel
from .registry import RegistryBuilder, TypeRegistry, infer_text, infer_types
from .serializer import serialize
from .sources import SourceUnit, discover_sources
from .types import (
    AutoCreate,
    EnumType,
    FieldDescriptor,
    InferredType,
    ListWrapperType,
    PrimitiveType,
    StructType,
)
from .values import JsonList, JsonMap

__version__ = "0.1.0"

__all__ = [
    "AutoCreate",
    "BuildInProgressError",
    "Diagnostic",
    "DiagnosticKind",
    "EnumType",
    "FieldDescriptor",
    "InferenceOptions",
    "InferredType",
    "JSchemaError",
    "JsonList",
    "JsonMap",
    "JsonModel",
    "ListWrapperType",
    "MalformedDocumentError",
    "ModelGenerator",
    "ModelHost",
    "NameMapping",
    "ParseResult",
    "PrimitiveType",
    "RegistryBuilder",
    "SchemaInferrer",
    "SourceNameError",
    "SourceUnit",
    "StructType",
    "TransportError",
    "TypeModel",
    "TypeRegistry",
    "TypedefScope",
    "UnknownTypeError",
    "discover_sources",
    "infer_text",
    "infer_types",
    "json_to_jschema",
    "loads",
    "parse_document",
    "serialize",
    "to_identifier",
    "__version__",
]
