"""Shared fixtures for the face auth tests."""
import pytest

from faceauth.infrastructure.storage import InMemoryIdentityStore
from faceauth.services import (
    AuthenticationWorkflow,
    DescriptorCodec,
    IdentityRepository,
    Matcher,
)
from helpers import DESCRIPTOR_LENGTH


@pytest.fixture
def codec():
    return DescriptorCodec(length=DESCRIPTOR_LENGTH)


@pytest.fixture
def store():
    return InMemoryIdentityStore()


@pytest.fixture
def repository(store, codec):
    repo = IdentityRepository(store=store, codec=codec)
    repo.load()
    return repo


@pytest.fixture
def matcher():
    return Matcher(threshold=0.6)


@pytest.fixture
def authentication(repository, matcher):
    return AuthenticationWorkflow(repository=repository, matcher=matcher)
