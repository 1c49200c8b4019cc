"""archgraph command line: build views and summaries from dumped query records.

The records file is the JSON the query layer produced, with ``parents``,
``children``, ``dependencies``, ``dependents`` and ``cycles`` lists for
``build``, the domain-level path records under ``domains`` and the
containment label pairs under ``layers``.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from archgraph import __version__
from archgraph.config import Range, load_query_options
from archgraph.errors import ArchGraphError
from archgraph.logging import configure_cli_logging, get_logger
from archgraph.models import PathRecord
from archgraph.properties import LayerRecord, summarize_domains, summarize_layers
from archgraph.visualization import GraphVisualizationService, StaticRecordSource

_LOG = get_logger("cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="archgraph",
        description="archgraph: depth-bounded architecture graphs from traversal records",
    )
    parser.add_argument("--version", "-V", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--quiet", "-q", action="store_true", help="Only log errors")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log processing details")
    subparsers = parser.add_subparsers(dest="command")

    build_parser_ = subparsers.add_parser("build", help="Build the graph with violations for a selected node")
    build_parser_.add_argument("records", type=Path, help="JSON file with the query records")
    build_parser_.add_argument("--id", required=True, dest="node_id", help="Element id of the selected node")
    build_parser_.add_argument("--layer-depth", type=int, default=None, help="Containment cutoff (default: ARCHGRAPH_LAYER_DEPTH or 1)")
    build_parser_.add_argument("--dependency-depth", type=int, default=None, help="Longest dependency chain (default: ARCHGRAPH_DEPENDENCY_DEPTH or 1)")
    build_parser_.add_argument("--dependents", action="store_true", help="Also show dependents")
    build_parser_.add_argument("--no-dependencies", action="store_true", help="Do not show dependencies")
    build_parser_.add_argument("--no-self-edges", action="store_true", help="Drop self edges")
    scope = build_parser_.add_mutually_exclusive_group()
    scope.add_argument("--only-internal", action="store_true", help="Only relations inside the selected domain")
    scope.add_argument("--only-external", action="store_true", help="Only relations leaving the selected domain")
    build_parser_.add_argument("--domain-id", default=None, help="Domain of the selected node (default: its outermost parent)")
    build_parser_.add_argument("--min-dependencies", type=int, default=None)
    build_parser_.add_argument("--max-dependencies", type=int, default=None)
    build_parser_.add_argument("--min-dependents", type=int, default=None)
    build_parser_.add_argument("--max-dependents", type=int, default=None)
    build_parser_.add_argument("--indent", type=int, default=2, help="JSON indent (default: 2)")

    domains_parser = subparsers.add_parser("domains", help="Summarize dependencies per domain")
    domains_parser.add_argument("records", type=Path, help="JSON file with a 'domains' record list")
    domains_parser.add_argument("--json", action="store_true", help="Print JSON instead of a table")

    layers_parser = subparsers.add_parser("layers", help="Print the layer hierarchy")
    layers_parser.add_argument("records", type=Path, help="JSON file with a 'layers' record list")
    return parser


def _load(path: Path) -> Dict[str, Any]:
    with path.open(encoding="utf-8") as fh:
        return json.load(fh)


def handle_build(args: argparse.Namespace) -> int:
    options = load_query_options(
        args.node_id,
        layer_depth=args.layer_depth,
        dependency_depth=args.dependency_depth,
        show_dependencies=not args.no_dependencies,
        show_dependents=args.dependents,
        self_edges=False if args.no_self_edges else None,
        only_internal_relations=args.only_internal,
        only_external_relations=args.only_external,
        domain_id=args.domain_id,
        dependency_range=Range(args.min_dependencies, args.max_dependencies),
        dependent_range=Range(args.min_dependents, args.max_dependents),
    )
    source = StaticRecordSource.from_dict(_load(args.records))
    result = GraphVisualizationService(source).get_graph_from_selected_node(options)
    print(json.dumps(result.to_dict(), indent=args.indent or None))
    return 0


def handle_domains(args: argparse.Namespace) -> int:
    raw = _load(args.records)
    summaries = summarize_domains(PathRecord.from_dict(r) for r in raw.get("domains") or ())
    if args.json:
        print(json.dumps([s.to_dict() for s in summaries], indent=2))
        return 0
    table = Table(title="Domains")
    table.add_column("Domain")
    table.add_column("Outgoing", justify="right")
    table.add_column("Incoming", justify="right")
    table.add_column("Internal", justify="right")
    for s in sorted(summaries, key=lambda s: s.node.label):
        table.add_row(
            s.node.label or s.node.id,
            str(s.nr_outgoing_dependencies),
            str(s.nr_incoming_dependencies),
            str(s.nr_internal_dependencies),
        )
    Console().print(table)
    return 0


def handle_layers(args: argparse.Namespace) -> int:
    raw = _load(args.records)
    layers = summarize_layers(LayerRecord.from_dict(r) for r in raw.get("layers") or ())
    for depth, layer in enumerate(layers):
        classes = f" ({', '.join(layer.classes)})" if layer.classes else ""
        print(f"{'  ' * depth}{layer.label}{classes}")
    return 0


_HANDLERS = {
    "build": handle_build,
    "domains": handle_domains,
    "layers": handle_layers,
}


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv(Path.cwd() / ".env")
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_cli_logging(quiet=args.quiet, verbose=args.verbose)
    handler = _HANDLERS.get(args.command or "")
    if handler is None:
        parser.print_help()
        return 1
    try:
        return handler(args)
    except ArchGraphError as exc:
        _LOG.error("archgraph: %s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
