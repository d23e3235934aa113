"""Template and node-type catalogue API routes."""

from typing import Any

from fastapi import APIRouter

from flowbuilder.services import node_registry
from flowbuilder.services.templates import WorkflowTemplate, get_template, list_templates

router = APIRouter()


@router.get("/templates")
async def list_all_templates() -> list[dict[str, Any]]:
    """List all available workflow templates."""
    return [
        {
            "id": template.id,
            "name": template.name,
            "description": template.description,
            "category": template.category,
            "node_count": len(template.graph.nodes),
            "edge_count": len(template.graph.edges),
        }
        for template in list_templates()
    ]


@router.get("/templates/{template_id}")
async def get_one_template(template_id: str) -> WorkflowTemplate:
    """Get a specific template, including its graph."""
    return get_template(template_id)


@router.get("/node-types")
async def list_node_types() -> list[dict[str, Any]]:
    """Describe node kinds, their default payloads and config fields."""
    return node_registry.describe_node_types()
