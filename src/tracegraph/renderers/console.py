"""Rich-based trace console rendering."""

from __future__ import annotations

import json
from collections import defaultdict
from io import StringIO
from typing import Any, Literal

from rich.console import Console
from rich.tree import Tree

from ..models import EngineNode, Trace, split_trace

Verbosity = Literal["minimal", "standard", "full"]
_MAX_VALUE_LEN = 200


def render_trace(trace: Trace, *, verbosity: Verbosity = "standard") -> str:
    """Render nodes nested under their parents, in placement order."""
    nodes, edges = split_trace(list(trace))
    known_ids = {node.data.id for node in nodes}
    children_by_parent: dict[str | None, list[EngineNode]] = defaultdict(list)
    for node in nodes:
        parent = node.data.parent if node.data.parent in known_ids else None
        children_by_parent[parent].append(node)

    labels = {node.data.id: node.data.label or node.data.id for node in nodes}
    successors: dict[str, list[str]] = defaultdict(list)
    for edge in edges:
        if edge.data.target in labels:
            successors[edge.data.source].append(labels[edge.data.target])

    tree = Tree(f"Trace ({len(nodes)} nodes, {len(edges)} edges)")
    for root in children_by_parent[None]:
        _add_node_branch(tree, root, children_by_parent, successors, verbosity)

    console = Console(record=True, width=120, markup=False, file=StringIO())
    console.print(tree)
    return console.export_text()


def _add_node_branch(
    parent_tree: Tree,
    node: EngineNode,
    children_by_parent: dict[str | None, list[EngineNode]],
    successors: dict[str, list[str]],
    verbosity: Verbosity,
) -> None:
    data = node.data
    icon = "✗" if data.errors else "✓"
    if data.abstract:
        icon = "·"
    elapsed = data.elapsed_time or "no timing"
    line = f"{data.label or data.id} ({elapsed}) {icon}"
    if data.parallel:
        line += " [parallel]" if data.parallel is True else f" [parallel: {data.parallel}]"
    for target in successors.get(data.id, []):
        line += f" [→ {target}]"
    branch = parent_tree.add(line)

    if verbosity in ("standard", "full"):
        for narrative in data.narratives or []:
            branch.add(f'narrative: "{narrative}"')
        for error in _as_list(data.errors):
            branch.add(f"error: {_format_error(error)}")

    if verbosity == "full":
        if data.inputs:
            branch.add(f"inputs: {_format_data(data.inputs)}")
        if data.outputs is not None:
            branch.add(f"outputs: {_format_data(data.outputs)}")

    for child in children_by_parent.get(data.id, []):
        _add_node_branch(branch, child, children_by_parent, successors, verbosity)


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    return value if isinstance(value, list) else [value]


def _format_error(error: Any) -> str:
    if isinstance(error, dict) and "message" in error:
        name = error.get("name")
        return f"{name}: {error['message']}" if name else str(error["message"])
    return _format_data(error)


def _format_data(data: Any) -> str:
    """Format a value for display, truncating large values."""
    try:
        s = json.dumps(data, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        s = str(data)
    if len(s) <= _MAX_VALUE_LEN:
        return s
    return s[:_MAX_VALUE_LEN] + "... [truncated]"
