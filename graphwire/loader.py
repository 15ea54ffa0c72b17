"""Build a Graph from JSONL node and edge files.

Two-pass streaming loader:

Pass 1: Stream the edge JSONL to collect the node vocabulary and edge count.
Pass 2: Stream it again, converting each edge to integer endpoints stored in
        pre-allocated numpy arrays, then insert nodes (sorted by id) and edges
        (in file order).

Node weights are property dicts (``{"id": ...}`` plus whatever nodes.jsonl
holds for that id). Edge weights are the edge dict without ``subject`` and
``object``. Both encode with graphwire.primitives.MSGPACK.
"""

import json

import numpy as np

from graphwire.graph import Graph
from graphwire.index import DEFAULT_INDEX_TYPE, IndexType

# Fields that are structural (not stored in the edge weight)
_ENDPOINT_FIELDS = {"subject", "object"}


def _edge_weight(data):
    return {k: v for k, v in data.items() if k not in _ENDPOINT_FIELDS}


def build_graph_from_jsonl(
    edge_jsonl_path,
    node_jsonl_path=None,
    directed: bool = True,
    index_type: IndexType = DEFAULT_INDEX_TYPE,
    verbose: bool = True,
) -> Graph:
    """Build a Graph from JSONL files.

    Each edge line needs ``subject`` and ``object``; each node line needs
    ``id``. Nodes only listed in nodes.jsonl are still added.
    """
    edge_jsonl_path = str(edge_jsonl_path)
    node_jsonl_path = str(node_jsonl_path) if node_jsonl_path else None

    # =================================================================
    # Pass 1: Vocabulary collection
    # =================================================================
    if verbose:
        print(f"Pass 1: Collecting node vocabulary from {edge_jsonl_path}...")

    node_ids = set()
    edge_count = 0

    with open(edge_jsonl_path, "r", encoding="utf-8") as f:
        for line in f:
            if not line.strip():
                continue
            data = json.loads(line)
            node_ids.add(data["subject"])
            node_ids.add(data["object"])
            edge_count += 1

            if verbose and edge_count % 1_000_000 == 0:
                print(f"  {edge_count:,} edges scanned...")

    node_properties = {}
    if node_jsonl_path:
        if verbose:
            print(f"Reading node properties from {node_jsonl_path}...")
        with open(node_jsonl_path, "r", encoding="utf-8") as f:
            for line in f:
                if not line.strip():
                    continue
                node_data = json.loads(line)
                node_id = node_data.get("id")
                if node_id:
                    node_ids.add(node_id)
                    node_properties[node_id] = node_data
        if verbose:
            print(f"  Loaded properties for {len(node_properties):,} nodes")

    if verbose:
        print(f"  Found {len(node_ids):,} unique nodes, {edge_count:,} edges")

    node_id_to_idx = {nid: idx for idx, nid in enumerate(sorted(node_ids))}
    del node_ids

    # =================================================================
    # Pass 2: Endpoint arrays, then graph assembly
    # =================================================================
    if verbose:
        print(f"Pass 2: Building graph ({edge_count:,} edges)...")

    src_indices = np.empty(edge_count, dtype=index_type.dtype)
    dst_indices = np.empty(edge_count, dtype=index_type.dtype)
    edge_weights = []

    with open(edge_jsonl_path, "r", encoding="utf-8") as f:
        i = 0
        for line in f:
            if not line.strip():
                continue
            data = json.loads(line)
            src_indices[i] = node_id_to_idx[data["subject"]]
            dst_indices[i] = node_id_to_idx[data["object"]]
            edge_weights.append(_edge_weight(data))
            i += 1

    graph = Graph(directed=directed, index_type=index_type)
    for node_id in node_id_to_idx:
        graph.add_node(node_properties.get(node_id, {"id": node_id}))

    for i, weight in enumerate(edge_weights):
        graph.add_edge(int(src_indices[i]), int(dst_indices[i]), weight)

        if verbose and (i + 1) % 1_000_000 == 0:
            print(f"  {i + 1:,}/{edge_count:,} edges inserted...")

    if verbose:
        print(f"  Graph built: {graph.node_count():,} nodes, {graph.edge_count():,} edges")

    return graph
