"""
Development server - minimal registry example.

Usage:
    uvicorn example.server.main:app --reload
    # or
    typegraph serve example.server.main:registry --ui

Try:
    GET /graph?graph=["viewer","name",["friends","id","isAdmin",["::when",{"eql":["isAdmin",true]},"adminId"]]]
    GET /graph/ui
"""

from typegraph import GraphApp, Settings, SpecRegistry

PEOPLE = {
    "123": {
        "id": "123",
        "name": "Sam Jones",
        "friends": [
            {"id": "1", "name": "one", "isAdmin": False},
            {"id": "2", "name": "two", "isAdmin": True, "adminId": "three"},
        ],
    },
}


async def load_viewer(info):
    return PEOPLE["123"]


async def load_person(info):
    return PEOPLE.get(info.args["id"])


types = {
    "Person": {
        "id": {"type": "String", "resolve": lambda info: info.data["id"]},
        "name": {"type": "String", "resolve": lambda info: info.data["name"]},
        "isAdmin": {"type": "Boolean", "resolve": lambda info: info.data.get("isAdmin", False)},
        "friends": {"type": ["Person!"], "resolve": lambda info: info.data.get("friends", [])},
        "adminId": {"type": "String", "resolve": lambda info: info.data.get("adminId")},
    },
}

queries = {
    # Native type: returned as-is, no child resolution
    "fauxCall": {
        "type": "Object!",
        "resolve": lambda info: {"thing1": "x", "thing2": "x"},
    },
    "viewer": {
        "type": "Person!",
        "resolve": load_viewer,
    },
    "person": {
        "type": "Person",
        "expect": {"id": "String!"},
        "resolve": load_person,
    },
}

registry = SpecRegistry.from_dicts(types, queries)

graph_app = GraphApp(registry, Settings(ui=True))

app = graph_app.app
