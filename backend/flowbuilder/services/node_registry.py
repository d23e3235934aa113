"""NodeTypeRegistry - node kinds, default payloads and config field catalogue.

The registry is the single place that knows which payload type belongs to
which node kind. Everything that builds or patches ``Node.data`` goes
through it, so adding a kind means adding it here (the module refuses to
import if a ``NodeKind`` has no payload or default).
"""

from collections.abc import Callable
from typing import Any, Literal

from pydantic import BaseModel, ValidationError

from flowbuilder.models.node import (
    NODE_DATA_MODELS,
    ActionData,
    ActionType,
    Condition,
    ConditionData,
    ConditionOperator,
    NodeData,
    NodeKind,
    TriggerData,
    TriggerType,
)
from flowbuilder.services.errors import ValidationFailure


class ConfigField(BaseModel):
    """A config key rendered by the config-editing surface."""

    key: str
    label: str
    kind: Literal["string", "enum", "text"] = "string"
    values: list[str] | None = None  # For enum fields
    placeholder: str | None = None
    default: str | None = None


_DEFAULT_FACTORIES: dict[NodeKind, Callable[[], NodeData]] = {
    NodeKind.TRIGGER: lambda: TriggerData(
        name="New Trigger", trigger_type=TriggerType.WEBHOOK, config={}
    ),
    NodeKind.ACTION: lambda: ActionData(
        name="New Action", action_type=ActionType.HTTP, config={}
    ),
    NodeKind.CONDITION: lambda: ConditionData(
        name="New Condition",
        condition=Condition(left="", operator=ConditionOperator.EQUALS, right=""),
    ),
}

# Config fields per (kind, subtype). Condition nodes carry no free-form config.
_CONFIG_FIELDS: dict[str, list[ConfigField]] = {
    TriggerType.WEBHOOK.value: [
        ConfigField(key="path", label="Webhook Path", placeholder="/webhook-path"),
    ],
    TriggerType.SCHEDULE.value: [
        ConfigField(key="cron", label="Cron Expression", placeholder="* * * * *"),
    ],
    TriggerType.EVENT.value: [
        ConfigField(key="eventName", label="Event Name", placeholder="event.name"),
    ],
    ActionType.HTTP.value: [
        ConfigField(key="url", label="URL", placeholder="https://api.example.com"),
        ConfigField(
            key="method",
            label="Method",
            kind="enum",
            values=["GET", "POST", "PUT", "DELETE"],
            default="GET",
        ),
    ],
    ActionType.EMAIL.value: [
        ConfigField(key="to", label="To", placeholder="recipient@example.com"),
        ConfigField(key="subject", label="Subject", placeholder="Email subject"),
        ConfigField(key="body", label="Body", kind="text", placeholder="Email content..."),
    ],
    ActionType.DATABASE.value: [
        ConfigField(
            key="operation",
            label="Operation",
            kind="enum",
            values=["select", "insert", "update", "delete"],
            default="select",
        ),
        ConfigField(key="table", label="Table", placeholder="table_name"),
    ],
}


def _check_exhaustive() -> None:
    missing = [k.value for k in NodeKind if k not in NODE_DATA_MODELS or k not in _DEFAULT_FACTORIES]
    if missing:
        raise RuntimeError(f"Node kinds without a registered payload: {', '.join(missing)}")


_check_exhaustive()


def default_data(kind: NodeKind | str) -> NodeData:
    """Return a freshly allocated default payload for ``kind``."""
    return _DEFAULT_FACTORIES[NodeKind(kind)]()


def data_model(kind: NodeKind | str) -> type[BaseModel]:
    """Return the payload type for ``kind``."""
    return NODE_DATA_MODELS[NodeKind(kind)]


def parse_data(kind: NodeKind | str, raw: dict[str, Any]) -> NodeData:
    """Validate a raw payload against the schema of ``kind``.

    Raises:
        ValidationFailure: if the payload does not fit the kind
    """
    try:
        return data_model(kind).model_validate(raw)  # type: ignore[return-value]
    except ValidationError as e:
        raise ValidationFailure(f"Invalid {NodeKind(kind).value} data: {e}") from e


def merge_data(kind: NodeKind | str, current: NodeData, patch: dict[str, Any]) -> NodeData:
    """Shallow-merge ``patch`` onto ``current``.

    Keys in the patch replace the top-level keys of the payload (``config``
    and ``condition`` are replaced as a whole); keys absent from the patch
    keep their current values.
    """
    aliases = {
        name: field.alias for name, field in data_model(kind).model_fields.items() if field.alias
    }
    patch = {aliases.get(key, key): value for key, value in patch.items()}
    merged = {**current.model_dump(by_alias=True), **patch}
    return parse_data(kind, merged)


def config_fields(kind: NodeKind | str, subtype: str | None = None) -> list[ConfigField]:
    """List the config fields rendered for a node of ``kind``/``subtype``."""
    kind = NodeKind(kind)
    if kind == NodeKind.CONDITION:
        return []
    if subtype is None:
        defaults = default_data(kind)
        subtype = defaults.trigger_type if kind == NodeKind.TRIGGER else defaults.action_type  # type: ignore[union-attr]
    return [f.model_copy() for f in _CONFIG_FIELDS.get(str(subtype), [])]


def describe_node_types() -> list[dict[str, Any]]:
    """Describe every kind with its default payload and config fields."""
    described = []
    for kind in NodeKind:
        subtypes: list[str] = []
        if kind == NodeKind.TRIGGER:
            subtypes = [t.value for t in TriggerType]
        elif kind == NodeKind.ACTION:
            subtypes = [t.value for t in ActionType]
        described.append(
            {
                "kind": kind.value,
                "defaultData": default_data(kind).model_dump(mode="json", by_alias=True),
                "configFields": {
                    subtype: [f.model_dump(exclude_none=True) for f in config_fields(kind, subtype)]
                    for subtype in subtypes
                },
            }
        )
    return described
