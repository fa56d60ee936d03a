"""gitree core - content-addressed, copy-on-write directory trees."""

from gitree_core.blob import MODE_BLOB, MODE_BLOB_EXECUTABLE, MODE_TREE, Blob, load_blob
from gitree_core.config import GitreeConfig, load_config
from gitree_core.errors import (
    BlobWriteFailed,
    GitreeError,
    InvalidOidForReference,
    InvalidPathError,
    ObjectLookupFailed,
    ObjectRefRequiresFullOid,
    TreeBuilderCreateFailed,
    TreeBuilderInsertFailed,
    TreeBuilderWriteFailed,
    TreeCannotTraverseBlob,
    TreeLookupFailed,
)
from gitree_core.oid import Oid
from gitree_core.refs import ById, ByObject, materialize, resolve
from gitree_core.result import Err, Ok
from gitree_core.store import DulwichObjectStore, open_store
from gitree_core.tree import (
    BlobEntry,
    Pending,
    Stored,
    SubtreeEntry,
    Tree,
    TreeEntry,
    TreeWriter,
    blob_id_ref,
    blob_ref,
    blob_ref_with_mode,
    create_tree,
    exe_blob_ref,
    load_tree,
    lookup_entry,
    modify_tree,
    persist_tree,
    remove_from_tree,
    split_path,
    tree_id_ref,
    tree_ref,
    update_tree,
)

__version__ = "0.1.0"

__all__ = [
    "MODE_BLOB",
    "MODE_BLOB_EXECUTABLE",
    "MODE_TREE",
    "Blob",
    "BlobEntry",
    "BlobWriteFailed",
    "ById",
    "ByObject",
    "DulwichObjectStore",
    "Err",
    "GitreeConfig",
    "GitreeError",
    "InvalidOidForReference",
    "InvalidPathError",
    "ObjectLookupFailed",
    "ObjectRefRequiresFullOid",
    "Ok",
    "Oid",
    "Pending",
    "Stored",
    "SubtreeEntry",
    "Tree",
    "TreeBuilderCreateFailed",
    "TreeBuilderInsertFailed",
    "TreeBuilderWriteFailed",
    "TreeCannotTraverseBlob",
    "TreeEntry",
    "TreeLookupFailed",
    "TreeWriter",
    "blob_id_ref",
    "blob_ref",
    "blob_ref_with_mode",
    "create_tree",
    "exe_blob_ref",
    "load_blob",
    "load_config",
    "load_tree",
    "lookup_entry",
    "materialize",
    "modify_tree",
    "open_store",
    "persist_tree",
    "remove_from_tree",
    "resolve",
    "split_path",
    "tree_id_ref",
    "tree_ref",
    "update_tree",
]
