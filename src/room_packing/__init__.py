"""
Room Packing

Deterministic placement of rectangular footprints inside grid rooms:
a single footprint tucked into a corner, edge or the center, or many
footprints packed into rows with corridors and door clearance.
"""

__version__ = "0.1.0"

# Lazy imports keep plotting dependencies out of algorithm-only callers
__all__ = [
    "__version__",
    "Rect",
    "Door",
    "Rotation",
    "WallSegment",
    "FootprintPlacer",
    "PlacementResult",
    "PlacementType",
    "PlacerConfig",
    "StripPackingPlanner",
    "PackingConfig",
    "PackingInput",
    "PackingResult",
    "LayoutRenderer",
    "RenderConfig",
    "Pipeline",
    "PipelineConfig",
    "RoomSpec",
]

_LAZY = {
    "Rect": "room_packing.geometry",
    "Door": "room_packing.geometry",
    "Rotation": "room_packing.geometry",
    "WallSegment": "room_packing.geometry",
    "FootprintPlacer": "room_packing.placement",
    "PlacementResult": "room_packing.placement",
    "PlacementType": "room_packing.placement",
    "PlacerConfig": "room_packing.placement",
    "StripPackingPlanner": "room_packing.packing",
    "PackingConfig": "room_packing.packing",
    "PackingInput": "room_packing.packing",
    "PackingResult": "room_packing.packing",
    "LayoutRenderer": "room_packing.renderer",
    "RenderConfig": "room_packing.renderer",
    "Pipeline": "room_packing.pipeline",
    "PipelineConfig": "room_packing.pipeline",
    "RoomSpec": "room_packing.pipeline",
}


def __getattr__(name):
    """Lazy import to avoid loading all dependencies at once."""
    if name in _LAZY:
        import importlib

        module = importlib.import_module(_LAZY[name])
        return getattr(module, name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
