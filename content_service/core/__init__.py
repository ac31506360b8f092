"""Core orchestration: envelope dual writes and the asset pipeline."""

from content_service.core.assets import Asset, AssetPipeline, AssetRecord
from content_service.core.coordinator import EnvelopeCoordinator
from content_service.core.forkjoin import gather_settled

__all__ = [
    "Asset",
    "AssetPipeline",
    "AssetRecord",
    "EnvelopeCoordinator",
    "gather_settled",
]
