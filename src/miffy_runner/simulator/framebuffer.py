"""
Flat-color rendering of a run snapshot into a numpy RGB buffer.

Every entity is drawn as its bounding box in a per-kind color. The buffer
is (height, width, 3) uint8, the same layout pygame's surfarray expects
after ``swapaxes(0, 1)``.
"""

from typing import Any, Dict, Tuple

import numpy as np
from numpy.typing import NDArray

Color = Tuple[int, int, int]

SEASON_COLORS: Dict[str, Dict[str, Color]] = {
    "spring": {"sky": (225, 245, 255), "ground": (144, 200, 120)},
    "summer": {"sky": (200, 235, 255), "ground": (120, 190, 90)},
    "autumn": {"sky": (255, 236, 210), "ground": (190, 140, 80)},
    "winter": {"sky": (235, 240, 250), "ground": (245, 248, 255)},
}

KIND_COLORS: Dict[str, Color] = {
    "tulip": (230, 70, 90),
    "tulip_cluster": (230, 70, 90),
    "bear": (150, 100, 60),
    "butterfly": (250, 170, 60),
    "heart": (255, 20, 147),
    "cake": (246, 194, 209),
    "cloud": (255, 255, 255),
    "decoration": (90, 90, 110),
    "falling_decoration": (250, 180, 200),
}

PLAYER_COLORS: Dict[str, Color] = {
    "waiting": (250, 250, 250),
    "running": (250, 250, 250),
    "jumping": (250, 250, 250),
    "ducking": (235, 235, 235),
    "crashed": (255, 160, 160),
}

# Draw order, back to front
LAYERS = ("clouds", "decorations", "falling_decorations", "hearts", "cakes", "obstacles")


def fill_rect(buffer: NDArray[np.uint8], x: float, y: float, width: float, height: float,
              color: Color) -> None:
    """Fill an axis-aligned rectangle, clipped to the buffer."""
    h, w = buffer.shape[:2]
    x0 = max(0, int(round(x)))
    y0 = max(0, int(round(y)))
    x1 = min(w, int(round(x + width)))
    y1 = min(h, int(round(y + height)))
    if x0 >= x1 or y0 >= y1:
        return
    buffer[y0:y1, x0:x1] = color


class FrameRenderer:
    """Turns ``RunController.snapshot()`` into pixels."""

    def __init__(self, width: int, height: int, ground_y: int):
        self.width = width
        self.height = height
        self.ground_y = ground_y
        self._buffer = np.zeros((height, width, 3), dtype=np.uint8)

    def render(self, snapshot: Dict[str, Any]) -> NDArray[np.uint8]:
        colors = SEASON_COLORS.get(snapshot.get("season"), SEASON_COLORS["spring"])
        buffer = self._buffer
        buffer[:, :] = colors["sky"]
        buffer[self.ground_y:, :] = colors["ground"]

        entities = snapshot.get("entities", {})
        for layer in LAYERS:
            for info in entities.get(layer, []):
                self._draw_entity(buffer, info)

        player = snapshot.get("player")
        if player:
            color = PLAYER_COLORS.get(player["status"], PLAYER_COLORS["running"])
            fill_rect(buffer, player["x"], player["y"], player["width"], player["height"], color)

        for particle in snapshot.get("particles", []):
            size = particle["size"]
            fill_rect(buffer, particle["x"] - size / 2, particle["y"] - size / 2, size, size,
                      particle["color"])

        if snapshot.get("milestone_flash"):
            # invert the top strip as a score flash
            buffer[:4, :] = 255 - buffer[:4, :]

        return buffer

    def _draw_entity(self, buffer: NDArray[np.uint8], info: Dict[str, Any]) -> None:
        color = KIND_COLORS.get(info["kind"], (0, 0, 0))
        members = info.get("members")
        if members:
            for member in members:
                fill_rect(buffer, info["x"] + member["offset_x"], self.ground_y - member["height"],
                          member["width"], member["height"], color)
            return
        fill_rect(buffer, info["x"], info["y"], info["width"], info["height"], color)

    def get_buffer(self) -> NDArray[np.uint8]:
        return self._buffer.copy()
