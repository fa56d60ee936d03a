"""Shared test fixtures for gitree."""

import pytest

from gitree_core.blob import Blob
from gitree_core.config.models import GitreeConfig
from gitree_core.store import DulwichObjectStore
from gitree_core.tree import blob_ref, create_tree, exe_blob_ref


@pytest.fixture
def store():
    """A fresh in-memory object store."""
    s = DulwichObjectStore()
    yield s
    s.close()


@pytest.fixture
def empty_tree(store):
    return create_tree(store)


@pytest.fixture
def readme_entry():
    return blob_ref(Blob(b"# Widget API\n"))


@pytest.fixture
def script_entry():
    return exe_blob_ref(Blob(b"#!/bin/sh\necho hi\n"))


@pytest.fixture
def sample_config():
    return GitreeConfig()
