# nametag/models/asset_model.py
"""
Asset models - resolved external images and the metadata exposed about them.
"""

from dataclasses import dataclass, field
from typing import Optional, Set

from pydantic import BaseModel, ConfigDict, Field

from ..enums import AssetKind


@dataclass(eq=False)
class Asset:
    """
    An externally-sourced image resolved from an opaque numeric id.

    Instances are compared by identity: two requested ids that resolve to the
    same content share one Asset. Only ``requested_id`` (filled when absent),
    ``linked_ids`` and ``kind`` (backfilled when unclassified) change after
    creation, and only through the asset cache.
    """

    resolved_id: int
    content: bytes
    kind: AssetKind = AssetKind.UNCLASSIFIED
    requested_id: Optional[int] = None
    # Further requested ids that resolved to this content after requested_id was set
    linked_ids: Set[int] = field(default_factory=set)

    def matches(self, asset_id: int) -> bool:
        """Check whether this asset answers to the given id."""
        return (
            asset_id == self.requested_id
            or asset_id == self.resolved_id
            or asset_id in self.linked_ids
        )

    @property
    def size_bytes(self) -> int:
        return len(self.content)

    def __repr__(self) -> str:
        return (
            f"Asset(requested_id={self.requested_id}, resolved_id={self.resolved_id}, "
            f"kind={self.kind.value}, size={self.size_bytes}B)"
        )


@dataclass(frozen=True)
class AssetDescriptor:
    """Parsed indirection record naming the true location of an image."""

    content_url: str
    declared_class: Optional[str] = None


class AssetSummary(BaseModel):
    """Asset metadata returned by the HTTP API (content omitted)."""

    requestedId: Optional[int] = Field(None, description="Originally requested id")
    resolvedId: int = Field(..., description="Id naming the image content")
    kind: AssetKind = Field(..., description="Semantic role of the asset")
    sizeBytes: int = Field(..., ge=0, description="Size of the image content")

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_asset(cls, asset: Asset) -> "AssetSummary":
        return cls(
            requestedId=asset.requested_id,
            resolvedId=asset.resolved_id,
            kind=asset.kind,
            sizeBytes=asset.size_bytes,
        )
