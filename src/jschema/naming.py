"""
Translation between raw JSON keys and Python identifiers.

Keys may contain anything; properties need to be valid identifiers that do not
shadow keywords or the methods every generated model carries. The mapping
built for one struct is a bijection, so the raw key used for storage can
always be recovered from the property name.
"""

import keyword
import re
import unicodedata
from typing import Dict, Iterable, List, Optional

# Methods attached to every struct model; properties must not hide them
MODEL_METHOD_NAMES = frozenset({
    "parse", "parse_url", "get", "post", "write", "pretty_print",
    "as_json", "parent", "descendents",
})

# Generated classes are dicts underneath, so the dict and JsonMap API is off limits too
RESERVED_NAMES = MODEL_METHOD_NAMES | frozenset(
    name for name in dir(dict) if not name.startswith("_")
) | frozenset({
    "put", "remove", "autocreate", "intrinsic_type", "get_parent",
    "_parent_ref", "_jschema_type", "_jschema_model",
})

_ILLEGAL = re.compile(r"[^0-9A-Za-z_]")


def _sanitize(key) -> str:
    ascii_key = unicodedata.normalize("NFKD", str(key)).encode("ascii", "ignore").decode("ascii")
    name = _ILLEGAL.sub("_", ascii_key)
    if len(name) > 4 and name.startswith("__") and name.endswith("__"):
        # never produce dunder names such as __init__
        name = name.strip("_")
    if not name:
        return "_"
    if name[0].isdigit():
        name = f"_{name}"
    return name


def to_identifier(key: str) -> str:
    """Convert an arbitrary JSON key into an identifier-safe property name."""
    name = _sanitize(key)
    if keyword.iskeyword(name) or keyword.issoftkeyword(name) or name in RESERVED_NAMES:
        name = f"{name}_"
    return name


def to_enum_code(literal) -> str:
    """Accessor name for an enum literal, e.g. ``in-progress`` -> ``IN_PROGRESS``."""
    name = _sanitize(literal).upper()
    # enum.Enum treats leading underscores specially
    if name.startswith("_"):
        name = f"V{name}"
    return name


def _disambiguate(name: str, taken: set) -> str:
    if name not in taken:
        return name
    counter = 2
    while f"{name}_{counter}" in taken:
        counter += 1
    return f"{name}_{counter}"


class NameMapping:
    """Per-struct bijection between JSON keys and property names."""

    def __init__(self):
        self._key_to_property: Dict[str, str] = {}
        self._property_to_key: Dict[str, str] = {}

    @classmethod
    def for_keys(cls, keys: Iterable[str], convert=to_identifier) -> "NameMapping":
        mapping = cls()
        for key in keys:
            mapping.add(key, convert)
        return mapping

    def add(self, key: str, convert=to_identifier) -> str:
        if key in self._key_to_property:
            return self._key_to_property[key]
        name = _disambiguate(convert(key), set(self._property_to_key))
        self._key_to_property[key] = name
        self._property_to_key[name] = key
        return name

    def bind(self, key: str, property_name: str):
        """Record an already chosen pair, e.g. when rebuilding from field descriptors."""
        self._key_to_property[key] = property_name
        self._property_to_key[property_name] = key

    def property_for(self, key: str) -> Optional[str]:
        return self._key_to_property.get(key)

    def key_for(self, property_name: str) -> Optional[str]:
        return self._property_to_key.get(property_name)

    def items(self):
        return self._key_to_property.items()

    @property
    def properties(self) -> List[str]:
        return list(self._property_to_key)

    def __len__(self) -> int:
        return len(self._key_to_property)

    def __contains__(self, key: str) -> bool:
        return key in self._key_to_property
