import logging
from typing import List, Optional, Sequence, Tuple

import pygame

from .constants import (
    DEFAULT_WINDOW_SIZE,
    DEFAULT_RENDER_FPS,
    WINDOW_CAPTION,
    BACKGROUND_COLOR,
    TRACK_COLOR,
    WALL_COLOR,
    WALL_WIDTH,
    CHECKPOINT_COLOR,
    CHECKPOINT_RADIUS,
    HIGHLIGHT_COLOR,
    SENSOR_RAY_COLOR,
    DEAD_CAR_ALPHA,
    HUD_TEXT_COLOR,
    HUD_BG_COLOR,
    HUD_BG_ALPHA,
    GENERATION_TIERS,
    TIER_COLORS,
    FONT_SIZE,
    HUD_PADDING,
    HUD_LINE_HEIGHT,
    DEBUG_TOGGLE_KEY,
    CHECKPOINT_TOGGLE_KEY,
    DEBUG_PANEL_WIDTH,
    CAMERA_TOGGLE_KEY,
    CAMERA_MODE_LEADER_FOLLOW
)
from .camera import Camera
from .track_boundary import TrackBoundary
from .track_generator import Track

# Setup module logger
logger = logging.getLogger(__name__)


def generation_tier(generation: int) -> str:
    """Colour tier name for a generation: red, then yellow above 5, orange above 15, green above 30"""
    for threshold, tier in GENERATION_TIERS:
        if generation > threshold:
            return tier
    return GENERATION_TIERS[-1][1]


def _vector_rows(values: Sequence[float], per_row: int = 6) -> List[str]:
    values = list(values)
    return ["  " + " ".join(f"{value:+.2f}" for value in values[start:start + per_row])
            for start in range(0, len(values), per_row)]


class Renderer:
    """pygame viewer for a running Simulation. Reads state only."""

    def __init__(self, window_size=DEFAULT_WINDOW_SIZE, render_fps=DEFAULT_RENDER_FPS,
                 track: Optional[Track] = None, enable_fps_limit: bool = True):
        self.window_size = window_size
        self.render_fps = render_fps
        self.enable_fps_limit = enable_fps_limit
        self.window = None
        self.clock = None
        self.font = None
        self._initialized_pygame = False

        self.camera = Camera(window_size)
        self.track_boundary = TrackBoundary()
        self.track = None
        self.show_debug = False
        self.show_checkpoints = False

        # Screen-space track outlines, rebuilt when the camera changes
        self._track_cache_key = None
        self._track_outlines: Tuple[List[Tuple[int, int]], List[Tuple[int, int]]] = ([], [])

        if track:
            self.set_track(track)

    def init_pygame(self):
        if not self._initialized_pygame:
            pygame.init()
            pygame.display.init()
            pygame.font.init()
            self._initialized_pygame = True

    def set_track(self, track: Track):
        self.track = track
        self.camera.set_track(track)
        self._track_cache_key = None

    def toggle_debug(self):
        self.show_debug = not self.show_debug
        logger.info(f"Debug panel {'enabled' if self.show_debug else 'disabled'}")

    def toggle_checkpoints(self):
        self.show_checkpoints = not self.show_checkpoints

    def _toggle_camera_mode(self):
        self.camera.toggle_camera_mode()
        self._track_cache_key = None
        logger.info(f"Camera mode: {self.camera.camera_mode}")

    def resize(self, window_size: Tuple[int, int]):
        """Follow a window resize: refit the camera and recreate the surface"""
        self.window_size = window_size
        self.camera.set_window_size(window_size)
        self._track_cache_key = None
        if self.window is not None:
            self.window = pygame.display.set_mode(window_size, pygame.RESIZABLE)
        logger.info(f"Window resized to {window_size[0]}x{window_size[1]}")

    def _handle_events(self):
        """Handle viewer keys and resizes; every other event is re-posted for the host loop"""
        for event in pygame.event.get():
            if event.type == pygame.VIDEORESIZE:
                self.resize(event.size)
            elif event.type == pygame.KEYDOWN and event.unicode.lower() == DEBUG_TOGGLE_KEY:
                self.toggle_debug()
            elif event.type == pygame.KEYDOWN and event.unicode.lower() == CAMERA_TOGGLE_KEY:
                self._toggle_camera_mode()
            elif event.type == pygame.KEYDOWN and event.unicode.lower() == CHECKPOINT_TOGGLE_KEY:
                self.toggle_checkpoints()
            else:
                pygame.event.post(event)

    def render_frame(self, simulation):
        """
        Draw one frame of the simulation.

        Args:
            simulation: Simulation to visualize; nothing on it is modified
        """
        self.init_pygame()

        if self.window is None:
            self.window = pygame.display.set_mode(self.window_size, pygame.RESIZABLE)
            pygame.display.set_caption(WINDOW_CAPTION)
        if self.clock is None:
            self.clock = pygame.time.Clock()
        if self.font is None:
            self.font = pygame.font.Font(None, FONT_SIZE)

        self._handle_events()

        cars = simulation.cars
        leader = simulation.best_car
        if self.camera.camera_mode == CAMERA_MODE_LEADER_FOLLOW:
            self.camera.update_follow(leader.position)

        self.window.fill(BACKGROUND_COLOR)
        if self.track:
            self._render_track()
        self._render_cars(cars, leader)
        self._render_sensor_rays(simulation.sensor, leader)
        self._render_hud(simulation)
        if self.show_debug:
            self._render_debug_panel(simulation.get_debug_data())

        pygame.display.flip()

        if self.enable_fps_limit:
            self.clock.tick(self.render_fps)
        else:
            self.clock.tick()

    def _to_screen(self, points) -> List[Tuple[int, int]]:
        return [self.camera.world_to_screen(point) for point in points]

    def _render_track(self):
        cache_key = (self.camera.scale, self.camera.offset)
        if cache_key != self._track_cache_key:
            fill, hole = self.track_boundary.create_track_polygon(self.track.inner_wall, self.track.outer_wall)
            self._track_outlines = (self._to_screen(fill), self._to_screen(hole))
            self._track_cache_key = cache_key

        fill, hole = self._track_outlines
        pygame.draw.polygon(self.window, TRACK_COLOR, fill)
        pygame.draw.polygon(self.window, BACKGROUND_COLOR, hole)
        pygame.draw.lines(self.window, WALL_COLOR, True, fill, WALL_WIDTH)
        pygame.draw.lines(self.window, WALL_COLOR, True, hole, WALL_WIDTH)

        if self.show_checkpoints:
            for checkpoint in self.track.checkpoints:
                pygame.draw.circle(self.window, CHECKPOINT_COLOR,
                                   self.camera.world_to_screen(checkpoint), CHECKPOINT_RADIUS)

    def _render_cars(self, cars, leader):
        # Dead cars are faded on an overlay so the living stay readable
        overlay = pygame.Surface(self.window_size, pygame.SRCALPHA)
        for car in cars:
            if not car.alive:
                color = TIER_COLORS[generation_tier(car.generation)] + (DEAD_CAR_ALPHA,)
                pygame.draw.polygon(overlay, color, self._to_screen(car.get_corners()))
        self.window.blit(overlay, (0, 0))

        for car in cars:
            if car.alive and car is not leader:
                color = TIER_COLORS[generation_tier(car.generation)]
                pygame.draw.polygon(self.window, color, self._to_screen(car.get_corners()))

        corners = self._to_screen(leader.get_corners())
        pygame.draw.polygon(self.window, TIER_COLORS[generation_tier(leader.generation)], corners)
        pygame.draw.polygon(self.window, HIGHLIGHT_COLOR, corners, 2)

    def _render_sensor_rays(self, sensor, leader):
        if not leader.alive:
            return
        origin = self.camera.world_to_screen(leader.position)
        hit_points = sensor.get_hit_points(leader.position, leader.heading, leader.sensor_readings)
        for point in hit_points:
            end = self.camera.world_to_screen(point)
            pygame.draw.line(self.window, SENSOR_RAY_COLOR, origin, end, 1)
            pygame.draw.circle(self.window, SENSOR_RAY_COLOR, end, 3)

    def _render_panel(self, lines: List[str], x: int, y: int, width: int):
        height = HUD_PADDING * 2 + HUD_LINE_HEIGHT * len(lines)
        background = pygame.Surface((width, height), pygame.SRCALPHA)
        background.fill(HUD_BG_COLOR + (HUD_BG_ALPHA,))
        self.window.blit(background, (x, y))
        for index, line in enumerate(lines):
            text = self.font.render(line, True, HUD_TEXT_COLOR)
            self.window.blit(text, (x + HUD_PADDING, y + HUD_PADDING + index * HUD_LINE_HEIGHT))

    def _render_hud(self, simulation):
        config = simulation.config
        best_ever = simulation.best_fitness_ever
        lines = [
            f"Generation: {simulation.generation}",
            f"Alive: {simulation.alive_count}/{len(simulation.cars)}",
            f"Leader fitness: {simulation.best_car.fitness:.2f}",
            f"Best ever: {'-' if best_ever is None else f'{best_ever:.2f}'}",
            f"Speed: x{config.ticks_per_frame}",
            f"Mutation: {config.mutation_rate:.2f}  Crossover: {config.crossover_rate:.2f}",
            f"{'Running' if simulation.running else 'Paused'}  FPS: {self.clock.get_fps():.0f}",
        ]
        self._render_panel(lines, HUD_PADDING, HUD_PADDING, 320)

    def _render_debug_panel(self, debug_data: dict):
        brain = debug_data['brain']
        fitness = debug_data['fitness']
        lines = [
            f"Leader {debug_data['car_id']}  speed {debug_data['speed']:.2f}",
            f"Steer {debug_data['controls']['steer']:+.2f}  Throttle {debug_data['controls']['throttle']:.2f}",
            "Inputs:",
            *_vector_rows(brain['inputs']),
            "Hidden:",
            *_vector_rows(brain['hidden']),
            "Outputs:",
            *_vector_rows(brain['outputs']),
            "Weights:",
            *_vector_rows(brain['weights']),
            f"Checkpoints: {fitness['checkpoints']}",
            f"Dist score: {fitness['distance_score']:.3f}",
            f"Total: {fitness['total']:.3f}",
        ]
        x = self.window_size[0] - DEBUG_PANEL_WIDTH - HUD_PADDING
        self._render_panel(lines, x, HUD_PADDING, DEBUG_PANEL_WIDTH)

    def close(self):
        if self.window is not None:
            pygame.display.quit()
            pygame.quit()
            self.window = None
            self.clock = None
            self.font = None
            self._initialized_pygame = False
