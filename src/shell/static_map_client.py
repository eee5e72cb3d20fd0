"""Static Map Client - Imperative Shell.

This module renders map snapshots (plate boundaries plus event circles)
using OpenStreetMap tiles. All I/O is contained here; layer styling is in
the core module.
"""

import io
import logging
from dataclasses import dataclass

from staticmap import StaticMap, CircleMarker, Line

from src.core.config import OSM_TILE_URL
from src.core.static_map import CircleSpec, LineSpec, MapConfig


logger = logging.getLogger(__name__)


@dataclass
class MapImageResult:
    """Result of map image generation.

    Attributes:
        success: Whether the image was generated successfully
        image_bytes: PNG image data if successful
        error: Error message if failed
    """
    success: bool
    image_bytes: bytes | None = None
    error: str | None = None


class StaticMapClient:
    """Client for generating static map images.

    This is part of the imperative shell - it handles I/O (fetching map tiles
    and rendering images).
    """

    def __init__(self, tile_url: str | None = None) -> None:
        """Initialize static map client.

        Args:
            tile_url: Custom tile URL template. Defaults to OpenStreetMap.
        """
        self.tile_url = tile_url or OSM_TILE_URL

    def generate_map(
        self,
        config: MapConfig,
        circles: list[CircleSpec],
        lines: list[LineSpec] | None = None,
    ) -> MapImageResult:
        """Render a snapshot of the map layers.

        This method performs I/O (fetches map tiles from tile server).

        Args:
            config: Snapshot center, zoom and size
            circles: Styled event circles
            lines: Styled boundary lines, drawn beneath the circles

        Returns:
            MapImageResult with image bytes or error
        """
        logger.info(
            "Generating static map for (%.4f, %.4f) at zoom %d with %d events",
            config.latitude,
            config.longitude,
            config.zoom,
            len(circles),
        )

        try:
            static_map = StaticMap(
                config.width,
                config.height,
                url_template=self.tile_url,
            )

            for spec in lines or []:
                for path in spec.paths:
                    # staticmap takes (lon, lat) pairs, same as GeoJSON
                    static_map.add_line(Line(list(path), spec.color, spec.weight))

            for spec in circles:
                static_map.add_marker(CircleMarker(
                    (spec.longitude, spec.latitude),
                    spec.color,
                    spec.radius_px,
                ))

            image = static_map.render(
                zoom=config.zoom,
                center=(config.longitude, config.latitude),
            )

            buffer = io.BytesIO()
            image.save(buffer, format="PNG")
            image_bytes = buffer.getvalue()

            logger.info(
                "Generated map image: %d bytes",
                len(image_bytes),
            )

            return MapImageResult(
                success=True,
                image_bytes=image_bytes,
            )

        except Exception as e:
            logger.error("Failed to generate map: %s", str(e))
            return MapImageResult(
                success=False,
                error=str(e),
            )
