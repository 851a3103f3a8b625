from typing import Tuple, Optional
from .track_generator import Track
from .constants import (
    CAMERA_MARGIN_FACTOR,
    MIN_ZOOM_FACTOR,
    MAX_ZOOM_FACTOR,
    DEFAULT_TRACK_WIDTH_FALLBACK,
    DEFAULT_TRACK_HEIGHT_FALLBACK,
    LEADER_FOLLOW_ZOOM,
    CAMERA_MODE_TRACK_VIEW,
    CAMERA_MODE_LEADER_FOLLOW
)


class Camera:
    """Maps track coordinates to window pixels. Both use y pointing down."""

    def __init__(self, window_size: Tuple[int, int]):
        self.window_size = window_size
        self.track = None
        self.scale = 1.0  # pixels per world unit
        self.offset = (0.0, 0.0)  # screen position of the world origin

        self.camera_mode = CAMERA_MODE_TRACK_VIEW
        self.follow_zoom = LEADER_FOLLOW_ZOOM

    def set_window_size(self, window_size: Tuple[int, int]):
        """Update window size and recalculate camera parameters"""
        self.window_size = window_size
        if self.track and self.camera_mode == CAMERA_MODE_TRACK_VIEW:
            self.calculate_auto_fit()

    def set_track(self, track: Optional[Track]):
        """Set the track and fit it into the window"""
        self.track = track
        if track:
            self.calculate_auto_fit()
        else:
            self.scale = 1.0
            self.offset = (0.0, 0.0)

    def calculate_auto_fit(self):
        """Calculate scale and offset so the whole track is visible and centered"""
        if not self.track:
            return

        min_pos, max_pos = self.track.get_track_bounds()
        track_width = max_pos[0] - min_pos[0]
        track_height = max_pos[1] - min_pos[1]

        # Margins as a fraction of the track size
        total_width = track_width * (1 + 2 * CAMERA_MARGIN_FACTOR)
        total_height = track_height * (1 + 2 * CAMERA_MARGIN_FACTOR)
        if total_width <= 0:
            total_width = DEFAULT_TRACK_WIDTH_FALLBACK
        if total_height <= 0:
            total_height = DEFAULT_TRACK_HEIGHT_FALLBACK

        # The smaller scale fits both dimensions
        scale = min(self.window_size[0] / total_width, self.window_size[1] / total_height)
        self.scale = max(MIN_ZOOM_FACTOR, min(MAX_ZOOM_FACTOR, scale))

        self._center_on(((min_pos[0] + max_pos[0]) / 2, (min_pos[1] + max_pos[1]) / 2))

    def _center_on(self, world_pos: Tuple[float, float]):
        self.offset = (
            self.window_size[0] / 2 - world_pos[0] * self.scale,
            self.window_size[1] / 2 - world_pos[1] * self.scale
        )

    def world_to_screen(self, world_pos: Tuple[float, float]) -> Tuple[int, int]:
        """Convert world coordinates to screen coordinates"""
        screen_x = int(world_pos[0] * self.scale + self.offset[0])
        screen_y = int(world_pos[1] * self.scale + self.offset[1])
        return (screen_x, screen_y)

    def screen_to_world(self, screen_pos: Tuple[int, int]) -> Tuple[float, float]:
        """Convert screen coordinates to world coordinates"""
        world_x = (screen_pos[0] - self.offset[0]) / self.scale
        world_y = (screen_pos[1] - self.offset[1]) / self.scale
        return (world_x, world_y)

    def get_scale_factor(self) -> float:
        return self.scale

    def toggle_camera_mode(self):
        """Toggle between whole-track view and following the leader"""
        if self.camera_mode == CAMERA_MODE_TRACK_VIEW:
            self.camera_mode = CAMERA_MODE_LEADER_FOLLOW
        else:
            self.camera_mode = CAMERA_MODE_TRACK_VIEW
            if self.track:
                self.calculate_auto_fit()

    def update_follow(self, leader_position: Tuple[float, float]):
        """Center on the leader at the follow zoom. No effect in track view."""
        if self.camera_mode != CAMERA_MODE_LEADER_FOLLOW:
            return
        self.scale = max(MIN_ZOOM_FACTOR, min(MAX_ZOOM_FACTOR, self.follow_zoom))
        self._center_on(leader_position)
