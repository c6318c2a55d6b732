"""
Pipeline orchestration - plans rooms and writes every output.
"""

from pathlib import Path
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
import json
import logging

from room_packing.diagram import describe_placement, packing_diagram, placement_diagram
from room_packing.geometry import Door, Rect
from room_packing.packing import PackingConfig, PackingInput, StripPackingPlanner
from room_packing.placement import FootprintPlacer, PlacerConfig
from room_packing.renderer import LayoutRenderer, RenderConfig
from room_packing.utils.paths import PathManager
from room_packing.utils.validation import validate_packing_result, validate_placement_result

logger = logging.getLogger(__name__)

MODES = ("single", "strips")


def _parse_door(door) -> Door:
    if isinstance(door, dict):
        return Door(int(door["x"]), int(door["z"]))
    x, z = door
    return Door(int(x), int(z))


@dataclass
class RoomSpec:
    """One room to plan, as described in a batch file or on the command line."""

    name: str
    mode: str
    room: Rect
    doors: List[Door]
    footprint_size: Optional[int] = None
    widths: Optional[List[int]] = None
    depths: Optional[List[int]] = None

    @classmethod
    def from_dict(cls, config: dict) -> "RoomSpec":
        """
        Create a room spec from dictionary (loaded from YAML).

        Raises:
            ValueError: On an unknown mode or a missing footprint size
        """
        mode = config.get("mode", "strips")
        if mode not in MODES:
            raise ValueError(f"Unknown mode '{mode}', expected one of {MODES}")

        room = config["room"]
        spec = cls(
            name=str(config["name"]),
            mode=mode,
            room=Rect(room.get("min_x", 0), room.get("min_z", 0), room["width"], room["height"]),
            doors=[_parse_door(door) for door in config.get("doors", [])],
            footprint_size=config.get("footprint_size"),
            widths=config.get("widths"),
            depths=config.get("depths"),
        )

        if mode == "single" and spec.footprint_size is None:
            raise ValueError(f"Room '{spec.name}' uses single mode but has no footprint_size")

        return spec


@dataclass
class PipelineConfig:
    """High-level pipeline configuration."""

    paths: dict
    outputs: dict = field(default_factory=dict)
    validation: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, config: dict) -> "PipelineConfig":
        """Create config from dictionary."""
        return cls(
            paths=config.get("paths", {}),
            outputs=config.get("outputs", {}),
            validation=config.get("validation", {}),
        )


class Pipeline:
    """
    Plan rooms and write their JSON result, diagram and render.
    """

    def __init__(
        self,
        packing_config: PackingConfig,
        placer_config: PlacerConfig,
        render_config: RenderConfig,
        pipeline_config: PipelineConfig,
        base_dir: Path,
    ):
        """
        Initialize pipeline.

        Args:
            packing_config: Strip packing configuration
            placer_config: Single footprint placement configuration
            render_config: Rendering configuration
            pipeline_config: Pipeline configuration
            base_dir: Base directory for all outputs
        """
        self.packing_config = packing_config
        self.placer_config = placer_config
        self.render_config = render_config
        self.pipeline_config = pipeline_config

        self.paths = PathManager(base_dir, pipeline_config.paths)

        self.planner = StripPackingPlanner(packing_config)
        self.placer = FootprintPlacer(placer_config)
        self.renderer = LayoutRenderer(render_config)

        logger.info("Pipeline initialized")

    def plan_room(self, spec: RoomSpec) -> Optional[Dict[str, Path]]:
        """
        Plan one room through the full pipeline.

        Args:
            spec: Room to plan

        Returns:
            Mapping of output kind to written path (or None if failed)
        """
        logger.info("=" * 60)
        logger.info(f"Planning room '{spec.name}' ({spec.mode})")
        logger.info("=" * 60)

        try:
            # Step 1: Compute layout
            logger.info("Step 1: Computing layout...")
            data, diagram, layout = self._compute(spec)

            # Step 2: Validate
            if self.pipeline_config.validation.get("enabled", True):
                logger.info("Step 2: Validating layout...")
                if not self._validate(spec, layout):
                    raise RuntimeError(f"Layout validation failed for room '{spec.name}'")

            outputs = {}
            wanted = self.pipeline_config.outputs

            # Step 3: Write JSON result
            if wanted.get("json", True):
                logger.info("Step 3: Writing JSON result...")
                result_path = self.paths.get_result_path(spec.name)
                with open(result_path, "w") as f:
                    json.dump(data, f, indent=2)
                outputs["json"] = result_path

            # Step 4: Write ASCII diagram
            if wanted.get("diagram", True):
                logger.info("Step 4: Writing diagram...")
                diagram_path = self.paths.get_diagram_path(spec.name)
                diagram_path.write_text(diagram + "\n", encoding="utf-8")
                outputs["diagram"] = diagram_path

            # Step 5: Render PNG
            if wanted.get("render", True):
                logger.info("Step 5: Rendering PNG...")
                render_path = self.paths.get_render_path(spec.name)
                if spec.mode == "single":
                    self.renderer.render_placement(spec.room, layout, spec.doors, render_path)
                else:
                    self.renderer.render_packing(self._packing_input(spec), layout, render_path)
                outputs["render"] = render_path

            logger.info(f"Room '{spec.name}' complete")
            return outputs

        except Exception as e:
            logger.error(f"Room '{spec.name}' failed: {e}", exc_info=True)
            return None

    def _compute(self, spec: RoomSpec) -> Tuple[dict, str, object]:
        """Run the placer or the planner; returns (json data, diagram, result)."""
        data = {
            "name": spec.name,
            "mode": spec.mode,
            "room": spec.room.to_dict(),
            "doors": [door.to_dict() for door in spec.doors],
        }

        if spec.mode == "single":
            result = self.placer.place(spec.room, spec.footprint_size, spec.doors)
            logger.info(f"Placement: {result.placement_type.value}")
            data["placement"] = result.to_dict()
            diagram = "\n".join(
                [
                    describe_placement(spec.room, result),
                    "",
                    placement_diagram(spec.room, result, spec.doors, show_coordinates=True),
                ]
            )
            return data, diagram, result

        packing_input = self._packing_input(spec)
        result = self.planner.pack(packing_input)
        if result.is_empty:
            logger.warning(f"Nothing fits in room '{spec.name}'")
        else:
            logger.info(
                f"Packed {len(result.footprints)} footprints, {len(result.walls)} walls, "
                f"{len(result.waste_areas)} waste areas"
            )
        data["packing"] = result.to_dict()
        diagram = packing_diagram(packing_input, result, show_coordinates=True)
        return data, diagram, result

    def _packing_input(self, spec: RoomSpec) -> PackingInput:
        return PackingInput.create(
            spec.room,
            spec.doors,
            spec.widths or self.packing_config.default_widths,
            spec.depths or self.packing_config.default_depths,
        )

    def _validate(self, spec: RoomSpec, layout) -> bool:
        if spec.mode == "single":
            return validate_placement_result(layout, spec.room, spec.doors)
        return validate_packing_result(layout, self._packing_input(spec), self.packing_config)

    def plan_batch(self, specs: List[RoomSpec]) -> Dict[str, Optional[Dict[str, Path]]]:
        """
        Plan every room in a batch.

        Returns:
            Mapping of room name to its outputs (None for failed rooms)

        Raises:
            ValueError: If two rooms share a name, since their outputs would collide
        """
        names = [spec.name for spec in specs]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate room names in batch: {duplicates}")

        results = {}
        for i, spec in enumerate(specs):
            logger.info(f"Room {i + 1}/{len(specs)}: {spec.name}")
            results[spec.name] = self.plan_room(spec)
        return results
