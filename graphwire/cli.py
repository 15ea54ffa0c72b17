"""Command line tool to build and inspect encoded graphs.

Example:
    graphwire build --edges data/edges.jsonl --output data/graph.bin
    graphwire inspect data/graph.bin
"""

import argparse
import os
import sys
from pathlib import Path

import numpy as np

from graphwire.codec import GraphCodec
from graphwire.errors import DecodeError
from graphwire.index import index_type_by_name
from graphwire.loader import build_graph_from_jsonl
from graphwire.primitives import MSGPACK, codec_by_name


def env_flag(value: str) -> bool:
    """Interpret an environment variable as a boolean, case-insensitively."""
    return value.strip().lower() not in ("0", "false", "no")


# Configuration via environment variables
INDEX_TYPE = os.environ.get("GRAPHWIRE_INDEX_TYPE", "u32")
DIRECTED = env_flag(os.environ.get("GRAPHWIRE_DIRECTED", "1"))


def print_graph_stats(graph) -> None:
    """Print counts and degree statistics for a decoded graph."""
    print("\nGraph statistics:")
    print(f"  Type: {'directed' if graph.is_directed() else 'undirected'}, "
          f"{graph.index_type.name} indices")
    print(f"  Nodes: {graph.node_count():,}")
    print(f"  Edges: {graph.edge_count():,}")

    if graph.node_count() == 0:
        return

    endpoints = graph.edge_endpoints_array().astype(np.int64)
    out_degrees = np.bincount(endpoints[:, 0], minlength=graph.node_count())
    in_degrees = np.bincount(endpoints[:, 1], minlength=graph.node_count())
    print(f"  Avg out-degree: {np.mean(out_degrees):.1f}")
    print(f"  Max out-degree: {np.max(out_degrees)}")
    print(f"  Max in-degree: {np.max(in_degrees)}")
    print(f"  Isolated nodes: {int(np.sum((out_degrees + in_degrees) == 0)):,}")
    if graph.edge_count():
        self_loops = int(np.sum(endpoints[:, 0] == endpoints[:, 1]))
        print(f"  Self-loops: {self_loops:,}")


def build(args) -> int:
    if not args.edges.exists():
        print(f"Error: Edge file not found: {args.edges}", file=sys.stderr)
        return 1
    if args.nodes and not args.nodes.exists():
        print(f"Error: Node file not found: {args.nodes}", file=sys.stderr)
        return 1

    args.output.parent.mkdir(parents=True, exist_ok=True)

    index_type = index_type_by_name(args.index_type)
    try:
        graph = build_graph_from_jsonl(
            args.edges,
            args.nodes,
            directed=not args.undirected,
            index_type=index_type,
        )
        codec = GraphCodec(
            MSGPACK, MSGPACK, directed=graph.is_directed(), index_type=index_type
        )
        codec.save(graph, args.output)
    except Exception as e:
        print(f"Error building graph: {e}", file=sys.stderr)
        return 1
    return 0


def inspect(args) -> int:
    if not args.path.exists():
        print(f"Error: Graph file not found: {args.path}", file=sys.stderr)
        return 1

    codec = GraphCodec(
        codec_by_name(args.node_weight),
        codec_by_name(args.edge_weight),
        directed=not args.undirected,
        index_type=index_type_by_name(args.index_type),
    )
    try:
        graph = codec.load(args.path)
    except DecodeError as e:
        print(f"Error: {type(e).__name__}: {e}", file=sys.stderr)
        return 1

    print_graph_stats(graph)
    return 0


def _add_type_arguments(parser):
    parser.add_argument(
        "--index-type",
        default=INDEX_TYPE,
        choices=["u8", "u16", "u32", "u64"],
        help=f"Index width (default: {INDEX_TYPE}, env GRAPHWIRE_INDEX_TYPE)",
    )
    parser.add_argument(
        "--undirected",
        action="store_true",
        default=not DIRECTED,
        help="Treat the graph as undirected (env GRAPHWIRE_DIRECTED=0)",
    )


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Build and inspect binary-encoded graphs"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    build_parser = subparsers.add_parser(
        "build", help="Encode a graph built from JSONL files"
    )
    build_parser.add_argument(
        "--edges", required=True, type=Path, help="Path to edges JSONL file"
    )
    build_parser.add_argument(
        "--nodes", type=Path, help="Path to nodes JSONL file (optional)"
    )
    build_parser.add_argument(
        "--output", "-o", required=True, type=Path, help="Output path for encoded graph"
    )
    _add_type_arguments(build_parser)

    inspect_parser = subparsers.add_parser(
        "inspect", help="Decode an encoded graph and print statistics"
    )
    inspect_parser.add_argument("path", type=Path, help="Path to encoded graph")
    inspect_parser.add_argument(
        "--node-weight", default="msgpack", help="Node weight codec (default: msgpack)"
    )
    inspect_parser.add_argument(
        "--edge-weight", default="msgpack", help="Edge weight codec (default: msgpack)"
    )
    _add_type_arguments(inspect_parser)

    args = parser.parse_args(argv)

    if args.command == "build":
        sys.exit(build(args))
    elif args.command == "inspect":
        sys.exit(inspect(args))
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
