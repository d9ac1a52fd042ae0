"""Encode an assembled :class:`~insomnia_sync.models.Workspace` as YAML.

Key order follows the model field order (which mirrors Insomnia's own
exports) and the omission rules for optional keys are applied by the models'
serializers, so this module only converts the model to plain data and hands it
to PyYAML. The embedded source tree is written as-is.
"""

from __future__ import annotations

from typing import Any

import yaml
from pydantic_core import PydanticSerializationError

from insomnia_sync.exceptions import SerializationError
from insomnia_sync.models import Workspace


class _WorkspaceDumper(yaml.SafeDumper):
    """SafeDumper that writes repeated nodes out in full instead of as anchors."""

    def ignore_aliases(self, data: Any) -> bool:
        return True


def workspace_to_dict(workspace: Workspace) -> dict[str, Any]:
    """Return the export document as plain Python data."""
    try:
        return workspace.model_dump(by_alias=True)
    except PydanticSerializationError as exc:
        raise SerializationError(f"Failed to serialise workspace: {exc}") from exc


def dump_workspace(workspace: Workspace) -> str:
    """Encode *workspace* as a YAML document.

    Raises:
        SerializationError: If a value in the tree cannot be represented.
    """
    data = workspace_to_dict(workspace)
    try:
        return yaml.dump(
            data,
            Dumper=_WorkspaceDumper,
            sort_keys=False,
            allow_unicode=True,
            default_flow_style=False,
        )
    except (yaml.YAMLError, RecursionError) as exc:
        raise SerializationError(f"Failed to encode workspace as YAML: {exc}") from exc
