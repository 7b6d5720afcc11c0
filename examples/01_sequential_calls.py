"""Example 1: Sequential calls.

A signup flow: register -> log in -> fetch profile, each traced through one
engine, then printed as a tree.

Validates: frontier edges chain consecutive calls, labels follow creation
order.
"""

from __future__ import annotations

from tracegraph import EngineEdge, TraceableEngine
from tracegraph.renderers import render_trace


def register_user(username: str, password: str) -> str:
    return f"User {username} successfully registered"


def login_user(username: str, password: str) -> str:
    if not password:
        raise PermissionError("Invalid login credentials")
    return f"User {username} successfully logged in"


def get_user_information(username: str) -> dict[str, str]:
    return {"username": username, "email": f"{username}@example.com", "role": "User"}


def main() -> None:
    engine = TraceableEngine()

    engine.run(register_user, ["john_doe", "secure_password"])
    engine.run(login_user, ["john_doe", "secure_password"])
    engine.run(get_user_information, ["john_doe"], {"narratives": ["profile loaded for the dashboard"]})

    trace = engine.get_trace()
    nodes = engine.get_trace_nodes()
    edges = [element for element in trace if isinstance(element, EngineEdge)]

    # -- Assertions --
    assert len(nodes) == 3, f"Expected 3 nodes, got {len(nodes)}"
    assert [edge.data.target for edge in edges] == [nodes[1].data.id, nodes[2].data.id]
    assert engine.get_narratives() == ["profile loaded for the dashboard"]

    print(render_trace(trace, verbosity="full"))
    print("Example 1 PASSED: Sequential calls")


if __name__ == "__main__":
    main()
