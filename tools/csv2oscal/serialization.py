"""
Component definition serialization

One-way encoding of a ComponentDefinition to YAML (canonical) or JSON.
Keys keep declaration order, so equal documents encode to identical text.
"""

import json
import logging
from typing import Any, Dict

import yaml

from .exceptions import SerializationFailure
from .models import ComponentDefinition

logger = logging.getLogger(__name__)

FORMATS = {
    "yaml": ".yaml",
    "json": ".json"
}


def to_dict(document: ComponentDefinition) -> Dict[str, Any]:
    """Plain nested dict wrapped under the component-definition root key"""
    return {
        ComponentDefinition.ROOT_KEY: document.model_dump(by_alias=True, mode="json")
    }


def to_yaml(document: ComponentDefinition) -> str:
    try:
        return yaml.safe_dump(
            to_dict(document),
            sort_keys=False,
            default_flow_style=False,
            allow_unicode=True
        )
    except yaml.YAMLError as e:
        raise SerializationFailure(f"Failed to encode YAML: {e}") from e


def to_json(document: ComponentDefinition) -> str:
    try:
        return json.dumps(to_dict(document), indent=2, ensure_ascii=False) + "\n"
    except (TypeError, ValueError) as e:
        raise SerializationFailure(f"Failed to encode JSON: {e}") from e


def dump(document: ComponentDefinition, fmt: str = "yaml") -> str:
    """Encode a component definition in the requested format"""
    fmt = fmt.lower()
    if fmt not in FORMATS:
        raise SerializationFailure(
            f"Unsupported output format '{fmt}'. Expected one of: {', '.join(FORMATS)}"
        )

    logger.debug(f"Serializing component definition {document.uuid} as {fmt}")
    if fmt == "yaml":
        return to_yaml(document)
    return to_json(document)
