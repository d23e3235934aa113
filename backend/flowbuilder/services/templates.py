"""Built-in workflow templates and graph cloning."""

import json
from pathlib import Path

from pydantic import BaseModel

from flowbuilder.models.edge import Edge
from flowbuilder.models.workflow import NodeGraph
from flowbuilder.services.errors import NotFound
from flowbuilder.utils.identifiers import generate_edge_id, generate_node_id

TEMPLATES_DIR = Path(__file__).parent.parent / "templates"


class WorkflowTemplate(BaseModel):
    """A starter graph a new workflow can be cloned from."""

    id: str
    name: str
    description: str = ""
    category: str = ""
    graph: NodeGraph


def _load_template(template_file: Path) -> WorkflowTemplate:
    with open(template_file) as f:
        data = json.load(f)
    return WorkflowTemplate(id=template_file.stem.replace(".workflow", ""), **data)


def list_templates() -> list[WorkflowTemplate]:
    """Load all template files from the templates directory."""
    if not TEMPLATES_DIR.exists():
        return []
    return [_load_template(f) for f in sorted(TEMPLATES_DIR.glob("*.workflow.json"))]


def get_template(template_id: str) -> WorkflowTemplate:
    """Get a specific template.

    Raises:
        NotFound: if no template file exists for ``template_id``
    """
    template_file = TEMPLATES_DIR / f"{template_id}.workflow.json"
    if not template_file.exists():
        raise NotFound(f"Template '{template_id}' not found")
    return _load_template(template_file)


def clone_graph(graph: NodeGraph) -> NodeGraph:
    """Copy a graph with fresh node and edge IDs.

    Edges are rewired to the new node IDs; handles, positions and payloads
    are carried over unchanged.
    """
    id_map: dict[str, str] = {}
    nodes = []
    for node in graph.nodes:
        new_id = generate_node_id(node.kind, id_map.values())
        id_map[node.id] = new_id
        nodes.append(node.model_copy(update={"id": new_id}, deep=True))

    edges: list[Edge] = []
    taken: set[str] = set()
    for edge in graph.edges:
        new_id = generate_edge_id(taken)
        taken.add(new_id)
        edges.append(
            edge.model_copy(
                update={
                    "id": new_id,
                    "source_node_id": id_map[edge.source_node_id],
                    "target_node_id": id_map[edge.target_node_id],
                }
            )
        )

    return NodeGraph(nodes=nodes, edges=edges)
