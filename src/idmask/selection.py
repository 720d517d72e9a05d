"""Consumer-side selection of the regions to redact."""

import logging
import uuid

from .core.exceptions import UnknownRegionError
from .core.models import BoundingBox, FieldKind, MaskingRegion, MaskingResult

logger = logging.getLogger(__name__)


class SelectionState:
    """
    Per-session map of region id to selected flag.

    Starts from the result's default selection. Manual regions added here
    live only in this state; the result's regions are never modified.
    """

    def __init__(self, result: MaskingResult):
        self._regions: dict[str, MaskingRegion] = {region.id: region for region in result.regions}
        self._selected: dict[str, bool] = {
            region.id: region.selected_by_default for region in result.regions
        }

    def _require(self, region_id: str) -> None:
        if region_id not in self._regions:
            raise UnknownRegionError(region_id)

    def is_selected(self, region_id: str) -> bool:
        self._require(region_id)
        return self._selected[region_id]

    def toggle(self, region_id: str) -> bool:
        """Flip one region and return its new state."""
        self._require(region_id)
        self._selected[region_id] = not self._selected[region_id]
        return self._selected[region_id]

    def select(self, region_id: str) -> None:
        self._require(region_id)
        self._selected[region_id] = True

    def deselect(self, region_id: str) -> None:
        self._require(region_id)
        self._selected[region_id] = False

    def select_all(self) -> None:
        for region_id in self._selected:
            self._selected[region_id] = True

    def clear(self) -> None:
        for region_id in self._selected:
            self._selected[region_id] = False

    def add_manual(self, bbox: BoundingBox) -> MaskingRegion:
        """Register a user-drawn box as a selected ManualSelection region."""
        region = MaskingRegion(
            id=f"manual-{uuid.uuid4().hex}",
            kind=FieldKind.MANUAL_SELECTION,
            bbox=bbox,
        )
        self._regions[region.id] = region
        self._selected[region.id] = True
        logger.debug(f"Added manual region {region.id} at {bbox}")
        return region

    def selected_regions(self) -> list[MaskingRegion]:
        """Selected regions, result regions first, then manual ones in insertion order."""
        return [self._regions[rid] for rid, selected in self._selected.items() if selected]

    @property
    def regions(self) -> list[MaskingRegion]:
        return list(self._regions.values())

    def __len__(self) -> int:
        return sum(self._selected.values())
