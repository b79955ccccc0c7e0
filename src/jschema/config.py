"""
Options shared by the inference engine, the registry builder and the CLI.
"""

from dataclasses import dataclass, replace


ENUM_KEY = "enum"
MAP_OF_KEY = "map_of"
TYPEDEFS_KEY = "__typedefs"

JSCHEMA_EXT = "jschema"
JSON_EXT = "json"


@dataclass(frozen=True)
class InferenceOptions:
    enum_key: str = ENUM_KEY
    map_of_key: str = MAP_OF_KEY
    typedefs_key: str = TYPEDEFS_KEY
    # Indent used by pretty_print when the caller passes none
    default_indent: int = 2
    # Seconds, handed straight to requests
    http_timeout: float = 30.0
    show_progress: bool = False

    def with_changes(self, **changes) -> "InferenceOptions":
        return replace(self, **changes)


DEFAULT_OPTIONS = InferenceOptions()
