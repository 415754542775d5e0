from nodestore.store.documents import DocumentStore, split_nodes
from nodestore.store.identity import (
    MAX_NODE_ID,
    NODE_SUFFIX,
    next_node_id,
    node_filename,
    node_stem,
    parse_node_id,
    scan_node_filenames,
)
from nodestore.store.paths import Component, append_normal, first_component

__all__ = [
    "DocumentStore",
    "split_nodes",
    "MAX_NODE_ID",
    "NODE_SUFFIX",
    "next_node_id",
    "node_filename",
    "node_stem",
    "parse_node_id",
    "scan_node_filenames",
    "Component",
    "append_normal",
    "first_component",
]
