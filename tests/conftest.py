"""Shared fixtures for did:sol decoder tests."""

import pytest

from tests.fixtures.documents import (
    encode_document,
    make_key,
    minimal_document,
    sample_document,
)


@pytest.fixture
def document():
    return sample_document()


@pytest.fixture
def encoded(document):
    return encode_document(document)


@pytest.fixture
def empty_document():
    return minimal_document()


@pytest.fixture
def account_keys():
    """Five distinct keys, enough for any instruction layout."""
    return [make_key(seed) for seed in (20, 21, 22, 23, 24)]
