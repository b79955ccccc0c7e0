"""
Command-line interface for jschema.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

console = Console()


def _collect_sources(paths: List[str], namespace: str):
    from jschema.sources import SourceUnit, discover_sources

    sources = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            sources.extend(discover_sources(path))
        elif path.exists():
            sources.append(SourceUnit.from_path(f"{namespace}.{path.stem}", path))
        else:
            raise FileNotFoundError(f"File not found: {path}")
    return sources


def _build(args):
    from jschema import InferenceOptions, RegistryBuilder

    options = InferenceOptions(show_progress=args.progress)
    return RegistryBuilder(options).build(_collect_sources(args.paths, args.namespace))


def print_types(registry):
    from jschema.types import EnumType, ListWrapperType, StructType, describe

    table = Table(title="Inferred Types")
    table.add_column("Type", style="cyan")
    table.add_column("Kind", style="green")
    table.add_column("Shape", style="magenta")
    table.add_column("Errors", style="red", justify="right")

    for name in sorted(registry):
        t = registry[name]
        if isinstance(t, StructType):
            shape = ", ".join(f"{f.property_name}: {describe(f.type)}" for f in t.fields)
        elif isinstance(t, EnumType):
            shape = ", ".join(t.codes)
        elif isinstance(t, ListWrapperType):
            shape = describe(t)
        else:
            shape = ""
        table.add_row(name, t.kind, escape(shape), str(len(t.errors)) if t.errors else "")

    console.print(table)


def print_model(registry, type_name: str):
    from jschema.reflection import ModelGenerator
    from jschema.types import describe

    model = ModelGenerator(registry).model_for(type_name)

    table = Table(title=f"{type_name} ({model.type.kind})")
    table.add_column("Member", style="cyan")
    table.add_column("Kind", style="green")
    table.add_column("Type", style="magenta")
    table.add_column("Notes")

    for p in model.properties:
        notes = []
        if p.json_key is not None and p.json_key != p.name:
            notes.append(f"key {p.json_key!r}")
        if p.autocreate.value != "none":
            notes.append(f"autocreate {p.autocreate.value}")
        if p.static:
            notes.append("static")
        table.add_row(p.name, "property", escape(describe(p.type)), escape(", ".join(notes)))

    for m in model.methods:
        params = ", ".join(p.name if p.required else f"{p.name}=None" for p in m.parameters)
        return_type = m.return_type if isinstance(m.return_type, str) else describe(m.return_type)
        table.add_row(f"{m.name}({params})", "method", escape(return_type), "static" if m.static else "")

    console.print(table)


def print_errors(registry) -> int:
    errors = registry.errors()
    if not errors:
        console.print("[bold green]No problems found.[/bold green]")
        return 0

    table = Table(title="Diagnostics")
    table.add_column("Type", style="cyan")
    table.add_column("Kind", style="yellow")
    table.add_column("Line", justify="right")
    table.add_column("Column", justify="right")
    table.add_column("Message")

    count = 0
    for name, diagnostics in sorted(errors.items()):
        for d in diagnostics:
            table.add_row(name, d.kind.value, str(d.line), str(d.column), escape(d.message))
            count += 1

    console.print(table)
    return count


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        prog="jschema",
        description="jschema - Infer typed models from JSON and JSchema samples",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version and exit",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    def add_source_args(sub):
        sub.add_argument("paths", nargs="+", help="Schema files or directories to scan")
        sub.add_argument(
            "-n", "--namespace",
            default="schema",
            help="Namespace for files given directly (default: schema)",
        )
        sub.add_argument(
            "--progress",
            action="store_true",
            help="Show a progress bar while inferring",
        )

    # Types command
    types_parser = subparsers.add_parser("types", help="List inferred types")
    add_source_args(types_parser)

    # Show command
    show_parser = subparsers.add_parser("show", help="Show properties and methods of one type")
    add_source_args(show_parser)
    show_parser.add_argument("-t", "--type", dest="type_name", required=True, help="Fully qualified type name")

    # Errors command
    errors_parser = subparsers.add_parser("errors", help="Print diagnostics found while inferring")
    add_source_args(errors_parser)

    # Format command
    format_parser = subparsers.add_parser("format", help="Re-serialize a JSON file")
    format_parser.add_argument("file", help="JSON file to format")
    format_parser.add_argument(
        "-i", "--indent",
        type=int,
        default=None,
        help="Indent width; compact output when omitted",
    )

    args = parser.parse_args(argv)

    if args.version:
        from jschema import __version__
        console.print(f"jschema version {__version__}")
        return 0

    if not args.command:
        parser.print_help()
        return 0

    # Import here to avoid slow startup for --help
    from jschema import JSchemaError, parse_document, serialize

    try:
        if args.command == "types":
            print_types(_build(args))

        elif args.command == "show":
            print_model(_build(args), args.type_name)

        elif args.command == "errors":
            if print_errors(_build(args)):
                return 1

        elif args.command == "format":
            result = parse_document(Path(args.file).read_bytes())
            if not result.ok:
                for error in result.errors:
                    console.print(f"[bold red]{args.file}:{error.line}:{error.column}: {escape(error.message)}[/bold red]")
                return 1
            console.print(serialize(result.value, args.indent), markup=False, highlight=False, soft_wrap=True)

    except FileNotFoundError as e:
        console.print(f"[bold red]Error: {escape(str(e))}[/bold red]")
        return 1
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted.[/yellow]")
        return 130
    except JSchemaError as e:
        console.print(f"[bold red]Error: {escape(str(e))}[/bold red]")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
