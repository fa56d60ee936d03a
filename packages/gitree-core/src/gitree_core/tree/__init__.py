"""In-memory trees: data model, path walking and persistence."""

from gitree_core.tree.loader import create_tree, load_tree
from gitree_core.tree.models import (
    BlobEntry,
    Pending,
    Stored,
    SubtreeEntry,
    Tree,
    TreeEntry,
    blob_id_ref,
    blob_ref,
    blob_ref_with_mode,
    exe_blob_ref,
    tree_id_ref,
    tree_ref,
)
from gitree_core.tree.paths import split_path
from gitree_core.tree.serializer import TreeWriter, persist_tree
from gitree_core.tree.walker import (
    lookup_entry,
    materialize_entry,
    modify_tree,
    remove_from_tree,
    update_tree,
)

__all__ = [
    "BlobEntry",
    "Pending",
    "Stored",
    "SubtreeEntry",
    "Tree",
    "TreeEntry",
    "TreeWriter",
    "blob_id_ref",
    "blob_ref",
    "blob_ref_with_mode",
    "create_tree",
    "exe_blob_ref",
    "load_tree",
    "lookup_entry",
    "materialize_entry",
    "modify_tree",
    "persist_tree",
    "remove_from_tree",
    "split_path",
    "tree_id_ref",
    "tree_ref",
    "update_tree",
]
