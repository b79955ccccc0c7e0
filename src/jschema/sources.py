"""
Source units fed to the registry builder, and discovery of them on disk.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

from rich.console import Console

from .config import JSCHEMA_EXT, JSON_EXT
from .errors import SourceNameError

console = Console(stderr=True)

Content = Union[bytes, str, Path, Callable[[], bytes]]


@dataclass
class SourceUnit:
    """
    One document to infer types from.

    ``name`` is the dotted root type name, ``content`` is anything that can
    produce the document bytes. Reading is deferred to the build so that an
    unreadable source only affects its own types.
    """
    name: str
    content: Content
    kind: str = JSCHEMA_EXT
    origin: Optional[str] = None

    @property
    def identity(self) -> str:
        return self.origin or self.name

    @property
    def is_plain_json(self) -> bool:
        return self.kind == JSON_EXT

    def read(self) -> bytes:
        content = self.content
        if isinstance(content, Path):
            return content.read_bytes()
        if isinstance(content, str):
            return content.encode("utf-8")
        if callable(content):
            return content()
        return content

    @classmethod
    def from_path(cls, name: str, path: Union[str, Path]) -> "SourceUnit":
        path = Path(path)
        kind = JSON_EXT if path.suffix == f".{JSON_EXT}" else JSCHEMA_EXT
        return cls(name=name, content=path, kind=kind, origin=str(path))


def type_name_for(relative_path: str, extension: str) -> str:
    """Map ``com/example/Widget.jschema`` to ``com.example.Widget``."""
    trimmed = relative_path[: len(relative_path) - len(extension) - 1]
    type_name = trimmed.replace("/", ".").replace("\\", ".")
    if "." not in type_name:
        raise SourceNameError(
            f"Cannot define {relative_path!r} outside a namespace; move it into a sub-directory"
        )
    return type_name


def discover_sources(root: Union[str, Path],
                     extensions: Sequence[str] = (JSCHEMA_EXT, JSON_EXT)) -> List[SourceUnit]:
    """
    Walk ``root`` for schema files. JSchema files come first, then plain JSON
    samples, each group in path order.
    """
    root = Path(root)
    if not root.is_dir():
        raise FileNotFoundError(f"Directory not found: {root}")

    sources = []
    for ext in extensions:
        for path in sorted(root.rglob(f"*.{ext}")):
            if not path.is_file():
                continue
            relative = path.relative_to(root).as_posix()
            sources.append(SourceUnit(type_name_for(relative, ext), path, ext, origin=str(path)))

    console.print(f"[bold blue]Found {len(sources)} schema sources under {root}[/bold blue]")
    return sources
