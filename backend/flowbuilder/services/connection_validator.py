"""ConnectionValidator - decides whether a proposed edge is well-formed.

Ports by node kind:
- trigger: no input, one unlabelled output
- action: one unlabelled input, one unlabelled output
- condition: one unlabelled input, two labelled outputs ("true"/"false")

Self-loops and duplicate edges are accepted; cycle detection is left to
whatever eventually executes the graph.
"""

import logging

from flowbuilder.models.edge import CONDITION_HANDLES, EdgeDraft
from flowbuilder.models.node import NodeKind
from flowbuilder.models.workflow import NodeGraph
from flowbuilder.services.errors import ValidationFailure

logger = logging.getLogger(__name__)


class ConnectionValidator:
    """Validates connection requests against a graph."""

    def validate(
        self,
        graph: NodeGraph,
        source_id: str,
        target_id: str,
        source_handle: str | None = None,
    ) -> EdgeDraft:
        """Validate a connection and return an edge draft.

        Args:
            graph: The graph the edge would be added to
            source_id: ID of the node the edge leaves
            target_id: ID of the node the edge enters
            source_handle: Output port on the source node (condition nodes only)

        Returns:
            EdgeDraft ready for id assignment and insertion

        Raises:
            ValidationFailure: if the connection breaks a port rule
        """
        source = graph.get_node(source_id)
        if source is None:
            raise ValidationFailure(f"Source node '{source_id}' not found")
        target = graph.get_node(target_id)
        if target is None:
            raise ValidationFailure(f"Target node '{target_id}' not found")

        if target.kind == NodeKind.TRIGGER:
            raise ValidationFailure(
                f"Trigger node '{target_id}' has no input port and cannot be a connection target"
            )

        if source.kind == NodeKind.CONDITION:
            if source_handle not in CONDITION_HANDLES:
                raise ValidationFailure(
                    f"Connections from condition node '{source_id}' need a source handle "
                    f"of 'true' or 'false' (got {source_handle!r})"
                )
        elif source_handle is not None:
            logger.debug(
                f"Ignoring source handle {source_handle!r} on {source.kind} node {source_id}"
            )
            source_handle = None

        return EdgeDraft(
            source_node_id=source_id,
            target_node_id=target_id,
            source_handle=source_handle,
        )
