"""Shared building blocks for the endpoint modules."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_pascal

if TYPE_CHECKING:
    from .client import Nomad


class NomadModel(BaseModel):
    """Base model for Nomad API objects.

    Python attributes are snake_case; on the wire every field uses Nomad's
    PascalCase name. Acronym fields (`ID`, `JobID`, `CPU`, ...) declare their
    alias explicitly.
    """

    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True)

    def to_api(self) -> dict[str, Any]:
        """Serializes the model to a Nomad API request body, skipping unset fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Endpoint:
    """A group of Nomad API operations bound to a client."""

    def __init__(self, client: "Nomad"):
        self._client = client


def escape(segment: str) -> str:
    """Percent-encodes a caller-supplied value for use as a URL path segment."""
    return quote(segment, safe="")


def sort_by_create_index(items: list[Any]) -> list[Any]:
    """Sorts API objects newest first."""
    return sorted(items, key=lambda item: item.create_index, reverse=True)
