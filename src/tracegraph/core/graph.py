"""Incremental construction of the trace graph."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from ..models import (
    DEFAULT_TRACE_CONFIG,
    EdgeData,
    EngineEdge,
    EngineNode,
    ExecutionTrace,
    NodeData,
    Trace,
    TraceConfig,
    split_trace,
)
from .extraction import extract_node_fields

logger = logging.getLogger(__name__)


class TraceGraphBuilder:
    """Owns the node list, the edge list and the narrative queue.

    Calls complete in arbitrary order, so placement is incremental and
    idempotent per node id: a parent referenced before it finished gets an
    abstract placeholder that its own completion later fills in place.
    """

    def __init__(self, initial_trace: Trace | None = None) -> None:
        self.reset(initial_trace)

    def reset(self, initial_trace: Trace | None = None) -> None:
        nodes, edges = split_trace(list(initial_trace or []))
        self.nodes: list[EngineNode] = nodes
        self.edges: list[EngineEdge] = edges
        self._node_index: dict[str, EngineNode] = {node.data.id: node for node in nodes}
        self._edge_ids: set[str] = {edge.data.id for edge in edges}
        self._queued_narratives: dict[str, list[str]] = {}

    @property
    def queued_narratives(self) -> dict[str, list[str]]:
        return self._queued_narratives

    def find_node(self, node_id: str) -> EngineNode | None:
        return self._node_index.get(node_id)

    def push_narratives(self, node_id: str, narratives: str | list[str]) -> None:
        items = [narratives] if isinstance(narratives, str) else list(narratives)
        existing = self.find_node(node_id)
        if existing is not None:
            existing.data.narratives = [*(existing.data.narratives or []), *items]
            return
        self._queued_narratives.setdefault(node_id, []).extend(items)

    def place(
        self,
        node: NodeData,
        execution: ExecutionTrace,
        config: TraceConfig = DEFAULT_TRACE_CONFIG,
        *,
        is_placeholder: bool = False,
    ) -> NodeData:
        """Fold one finished call into the graph and return the stored node."""
        if node.parent and self.find_node(node.parent) is None:
            logger.debug("Creating abstract placeholder %s for %s", node.parent, node.id)
            self.place(
                NodeData(id=node.parent, label=node.parent),
                ExecutionTrace(errors=execution.errors),
                is_placeholder=True,
            )

        queued = self._queued_narratives.get(node.id, [])
        if is_placeholder:
            fields: dict[str, object] = {"errors": execution.errors, "narratives": list(queued) or None}
        else:
            fields = extract_node_fields(node, execution, config.trace_execution, queued)
        self._queued_narratives.pop(node.id, None)

        if not is_placeholder:
            for edge in self._infer_edges(node, config.parallel):
                self._add_edge(edge)

        return self._merge(node, fields, config.parallel, is_placeholder)

    def _infer_edges(self, node: NodeData, parallel: bool | str) -> list[EdgeData]:
        anchor: EngineEdge | None = None
        if parallel is True:
            anchor = next(
                (edge for edge in self.edges if edge.data.parallel and edge.data.parent == node.parent),
                None,
            )
        elif isinstance(parallel, str) and parallel:
            anchor = next((edge for edge in self.edges if edge.data.parallel == parallel), None)

        if anchor is not None:
            return [
                EdgeData.between(anchor.data.source, node.id, parent=node.parent, parallel=parallel)
            ]

        sources = {edge.data.source for edge in self.edges}
        predecessors = [
            candidate.data
            for candidate in self.nodes
            if not candidate.data.abstract
            and candidate.data.parent == node.parent
            and not (parallel and candidate.data.parallel and candidate.data.parent and node.parent)
            and candidate.data.id != node.id
            and candidate.data.parent != node.id
            and candidate.data.id != node.parent
            and candidate.data.id not in sources
        ]
        return [
            EdgeData.between(previous.id, node.id, parent=node.parent, parallel=parallel)
            for previous in predecessors
        ]

    def _add_edge(self, edge: EdgeData) -> None:
        if edge.id in self._edge_ids:
            return
        logger.debug("Adding edge %s", edge.id)
        self.edges.append(EngineEdge(data=edge))
        self._edge_ids.add(edge.id)

    def _merge(
        self,
        node: NodeData,
        fields: dict[str, object],
        parallel: bool | str,
        is_placeholder: bool,
    ) -> NodeData:
        now = datetime.now(UTC)
        existing = self.find_node(node.id)
        if existing is None:
            stored = NodeData(
                id=node.id,
                label=node.label,
                parent=node.parent,
                **fields,
                parallel=parallel,
                abstract=is_placeholder,
                create_time=now,
            )
            engine_node = EngineNode(data=stored)
            self.nodes.append(engine_node)
            self._node_index[node.id] = engine_node
            return stored

        update = dict(fields)
        previous_narratives = existing.data.narratives
        if previous_narratives and "narratives" in update:
            update["narratives"] = [*previous_narratives, *(update["narratives"] or [])]
        update.update(
            label=node.label,
            parent=node.parent,
            parallel=parallel,
            abstract=is_placeholder,
            update_time=now,
        )
        existing.data = existing.data.model_copy(update=update)
        return existing.data
