"""Shared registries for the typegraph test suite."""

import asyncio

import pytest

from typegraph import SpecRegistry


FRIENDS = [
    {"id": "1", "name": "one", "isAdmin": False},
    {"id": "2", "name": "two", "isAdmin": True, "adminId": "three"},
]


def build_people_registry(viewer_data=None, friends=None, **overrides):
    """Person/viewer registry used across engine and API tests."""
    viewer = viewer_data if viewer_data is not None else {"id": "123", "name": "Sam Jones"}
    friend_list = FRIENDS if friends is None else friends

    async def resolve_viewer(info):
        return viewer

    async def resolve_friends(info):
        return info.data.get("friends", friend_list)

    types = {
        "Person": {
            "id": {"type": "String", "resolve": lambda info: info.data["id"]},
            "name": {"type": "String", "resolve": lambda info: info.data["name"]},
            "isAdmin": {"type": "Boolean", "resolve": lambda info: info.data.get("isAdmin", False)},
            "adminId": {"type": "String", "resolve": lambda info: info.data.get("adminId")},
            "friends": {"type": ["Person!"], "resolve": resolve_friends},
        },
    }
    queries = {
        "viewer": {"type": "Person!", "resolve": resolve_viewer},
        "people": {"type": ["Person!"], "resolve": lambda info: friend_list},
        "greeting": {
            "type": "String!",
            "expect": {"name": "String!"},
            "resolve": lambda info: f"hello {info.args['name']}",
        },
        "fauxCall": {"type": "Object!", "resolve": lambda info: {"thing1": "x", "thing2": "x"}},
    }
    queries.update(overrides)
    return SpecRegistry.from_dicts(types, queries)


@pytest.fixture
def registry():
    return build_people_registry()


@pytest.fixture
def delayed():
    """Factory for async resolvers that finish after a delay."""
    def make(value, delay):
        async def resolve(info):
            await asyncio.sleep(delay)
            return value
        return resolve
    return make


@pytest.fixture
def make_registry():
    return build_people_registry
