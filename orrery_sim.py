#!/usr/bin/env python3
"""
Orrery application entry point and UI/renderer coordination.

What this module does
- Starts two event loops: a Pygame rendering thread (top-down viewport) and the
  Dear PyGui UI (running on the main thread).
- Maintains a shared SimulationController that owns the orrery Simulation; all
  access is guarded by a re-entrant lock, so control calls from the UI land
  between two ticks and never in the middle of one.
- The viewport follows a focused body by translating the camera by the body's
  per-tick delta ("towing"), keeping any pan offset and zoom the user chose.

Threading model
- PygameRenderer runs in a background thread and performs: input handling (for
  the viewport), one Simulation.tick() per frame, and drawing. It locks the
  SimulationController around short critical sections to read/update state.
- The UI class runs in the main thread via Dear PyGui. It refreshes its readouts
  on a periodic frame callback and invokes SimulationController methods, which
  are lock-protected.

Units and conventions
- Everything drawn is in visual units produced by orrery.scaling; the camera
  stores visual units per pixel. The view looks down the y axis onto the (x, z)
  orbital plane.
- Colors are RGB tuples in 0..255.

Running
1) Install: `pip install -e .`
2) Run this module: `python orrery_sim.py [--dataset FILE] [--time-scale X] [--seed N]`

Keys (viewport)
- Space: pause/play | +/-: faster/slower | R: reverse time | T: toggle trails
- Left-click: focus body | Esc: clear focus | Wheel: zoom | Right/Middle-drag, arrows: pan
"""

import argparse
import logging
import math
import threading
import time
from typing import List, Optional, Tuple

# GUI and Rendering libs
import pygame
from pygame import gfxdraw
import dearpygui.dearpygui as dpg

from orrery.bodies import CelestialBody
from orrery.camera import Camera2D
from orrery.constants import (
    BACKGROUND_COLOR,
    DEFAULT_UNITS_PER_PIXEL,
    HUD_COLOR,
    MAX_UNITS_PER_PIXEL,
    MIN_UNITS_PER_PIXEL,
    ORBIT_GUIDE_COLOR,
    SAFE_COORD_LIMIT,
    SELECTION_COLOR,
    TRAIL_COLOR,
    VIEW_HEIGHT,
    VIEW_WIDTH,
)
from orrery.dataset_loader import DEFAULT_DATASET, list_datasets, load_dataset
from orrery.errors import DatasetError, UnknownBodyError
from orrery.focus import FocusTracker
from orrery.simulation import Simulation
from orrery.utils import try_float
from orrery.vector_utils import ORIGIN, clamp, vec_add, vec_len, vec_sub

logger = logging.getLogger("orrery_sim")

NO_FOCUS = "(none)"
ORBIT_GUIDE_SEGMENTS = 180

# ============================================================
# Simulation Controller (Shared State)
# ============================================================


class SimulationController:
    """
    Shared state between UI thread (DearPyGui) and rendering thread (Pygame).
    Wraps one orrery Simulation; every method takes the lock.
    """

    def __init__(self, sim: Simulation, dataset_name: str = ""):
        self.lock = threading.RLock()
        self.sim = sim
        self.dataset_name = dataset_name
        self.running = True  # app running
        self.show_orbit_guides = True
        self.trails_on = False
        self.focus_requested = False  # renderer reframes the camera when set
        self._pending_delta = ORIGIN  # focus delta of manual steps, applied on the next frame

    def replace_simulation(self, sim: Simulation, dataset_name: str) -> None:
        with self.lock:
            self.sim = sim
            self.dataset_name = dataset_name
            self.trails_on = False
            self.focus_requested = False
            self._pending_delta = ORIGIN

    def tick(self) -> Tuple[float, float]:
        with self.lock:
            delta = vec_add(self.sim.tick(), self._pending_delta)
            self._pending_delta = ORIGIN
            return delta

    def step_once(self) -> None:
        """Advance one tick even while paused, then restore the pause flag."""
        with self.lock:
            was_paused = self.sim.time.paused
            self.sim.time.resume()
            try:
                self._pending_delta = vec_add(self._pending_delta, self.sim.tick())
            finally:
                self.sim.time.paused = was_paused

    def set_time_scale(self, s: float) -> None:
        with self.lock:
            self.sim.set_time_scale(s)

    def toggle_pause(self) -> bool:
        with self.lock:
            return self.sim.toggle_pause()

    def set_focus(self, name: Optional[str]) -> Optional[CelestialBody]:
        with self.lock:
            body = self.sim.set_focus(name)
            self.focus_requested = body is not None
            return body

    def toggle_trail(self, name: str, enabled: bool) -> None:
        with self.lock:
            self.sim.toggle_trail(name, enabled)

    def set_all_trails(self, enabled: bool) -> None:
        with self.lock:
            self.trails_on = bool(enabled)
            self.sim.set_all_trails(enabled)

    def get_focused_body(self) -> Optional[CelestialBody]:
        with self.lock:
            return self.sim.focus.focused

    def body_names(self) -> List[str]:
        with self.lock:
            return self.sim.body_names()

    def select_body_at(self, world_pos: Tuple[float, float], pick_radius: float) -> Optional[str]:
        with self.lock:
            name = None
            min_d = float("inf")
            for b in self.sim.bodies:
                d = vec_len(vec_sub(b.position, world_pos))
                # Use larger of visual radius and pick radius for usability
                pr = max(b.visual_radius * 2, pick_radius)
                if d < pr and d < min_d:
                    min_d = d
                    name = b.name
            return name


# ============================================================
# Pygame Renderer Thread
# ============================================================


class PygameRenderer(threading.Thread):
    """
    Pygame loop: ticks the simulation and draws orbits, trails, bodies and moons.
    Handles focus picking, camera panning and zoom.
    """

    def __init__(self, ctrl: SimulationController):
        super().__init__(daemon=True)
        self.ctrl = ctrl
        self.camera = Camera2D(center=(0.0, 0.0))
        self.surface = None
        self.clock = None
        self.dragging_background = False
        self.drag_start_screen = (0, 0)
        self.pan_speed_keys = 600  # pixels per second
        self.running = True

    def auto_frame_camera(self):
        """
        Adjust camera to fit every orbit into view with margin.
        """
        with self.ctrl.lock:
            bodies = list(self.ctrl.sim.bodies)
        if not bodies:
            self.camera.center = [0.0, 0.0]
            self.camera.upp = DEFAULT_UNITS_PER_PIXEL
            return
        extent = max(max(b.apoapsis_visual, b.visual_radius) for b in bodies) * 1.1
        self.camera.center = [0.0, 0.0]
        half_px = max(min(self.camera.viewport_size) / 2, 1)
        self.camera.upp = clamp(extent / half_px, MIN_UNITS_PER_PIXEL, MAX_UNITS_PER_PIXEL)

    def _frame_focused(self):
        with self.ctrl.lock:
            body = self.ctrl.sim.focus.focused
            requested = self.ctrl.focus_requested
            self.ctrl.focus_requested = False
        if requested and body is not None:
            self.camera.frame(body.position, FocusTracker.frame_extent(body))

    def run(self):
        pygame.init()
        pygame.display.set_caption("Orrery - Viewport")
        self.surface = pygame.display.set_mode((VIEW_WIDTH, VIEW_HEIGHT), pygame.RESIZABLE)
        self.camera.set_viewport_size(VIEW_WIDTH, VIEW_HEIGHT)
        self.clock = pygame.time.Clock()
        self.auto_frame_camera()

        last_time = time.perf_counter()
        while self.running and self.ctrl.running:
            now = time.perf_counter()
            real_dt = now - last_time
            last_time = now

            self.handle_events(real_dt)
            self._frame_focused()

            # One tick per frame; a paused simulation returns a zero delta
            delta = self.ctrl.tick()
            if delta != ORIGIN:
                self.camera.translate(delta)

            self.draw()

            # Limit FPS
            self.clock.tick(60)

        pygame.quit()

    def handle_events(self, real_dt):
        keys = pygame.key.get_pressed()
        if keys[pygame.K_LEFT]:
            self.camera.pan_pixels(self.pan_speed_keys * real_dt, 0)
        if keys[pygame.K_RIGHT]:
            self.camera.pan_pixels(-self.pan_speed_keys * real_dt, 0)
        if keys[pygame.K_UP]:
            self.camera.pan_pixels(0, self.pan_speed_keys * real_dt)
        if keys[pygame.K_DOWN]:
            self.camera.pan_pixels(0, -self.pan_speed_keys * real_dt)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.ctrl.running = False
                self.running = False

            elif event.type == pygame.VIDEORESIZE:
                self.surface = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                self.camera.set_viewport_size(event.w, event.h)

            elif event.type == pygame.MOUSEWHEEL:
                factor = 1.1 if event.y > 0 else 1.0 / 1.1
                self.camera.zoom(factor, pygame.mouse.get_pos())

            elif event.type == pygame.KEYDOWN:
                self._on_key(event.key)

            elif event.type == pygame.MOUSEBUTTONDOWN:
                if event.button == 1:  # left click focuses the body under the cursor
                    world = self.camera.screen_to_world(pygame.mouse.get_pos())
                    name = self.ctrl.select_body_at(world, pick_radius=self.camera.upp * 10)
                    if name is not None:
                        self.ctrl.set_focus(name)
                elif event.button in (2, 3):  # middle/right pan
                    self.dragging_background = True
                    self.drag_start_screen = pygame.mouse.get_pos()

            elif event.type == pygame.MOUSEBUTTONUP:
                if event.button in (2, 3):
                    self.dragging_background = False

            elif event.type == pygame.MOUSEMOTION:
                if self.dragging_background:
                    mouse = pygame.mouse.get_pos()
                    dx = mouse[0] - self.drag_start_screen[0]
                    dy = mouse[1] - self.drag_start_screen[1]
                    self.camera.pan_pixels(dx, dy)
                    self.drag_start_screen = mouse

    def _on_key(self, key):
        if key == pygame.K_SPACE:
            self.ctrl.toggle_pause()
        elif key == pygame.K_ESCAPE:
            self.ctrl.set_focus(None)
        elif key == pygame.K_t:
            self.ctrl.set_all_trails(not self.ctrl.trails_on)
        elif key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS):
            with self.ctrl.lock:
                self.ctrl.sim.set_time_scale(self.ctrl.sim.time.time_scale * 2.0)
        elif key in (pygame.K_MINUS, pygame.K_KP_MINUS):
            with self.ctrl.lock:
                self.ctrl.sim.set_time_scale(self.ctrl.sim.time.time_scale / 2.0)
        elif key == pygame.K_r:
            with self.ctrl.lock:
                self.ctrl.sim.set_time_scale(-self.ctrl.sim.time.time_scale)

    def _pixel_radius(self, visual_radius: float) -> int:
        return int(clamp(visual_radius / self.camera.upp, 2, 400))

    def draw_orbit_guide(self, surf, body: CelestialBody):
        pts = []
        for i in range(ORBIT_GUIDE_SEGMENTS + 1):
            angle = 2 * math.pi * i / ORBIT_GUIDE_SEGMENTS
            r = body.radius_at(angle)
            sp = _safe_point(self.camera.world_to_screen((math.cos(angle) * r, math.sin(angle) * r)))
            if sp:
                pts.append(sp)
        if len(pts) > 1:
            pygame.draw.aalines(surf, ORBIT_GUIDE_COLOR, False, pts)

    def draw_body(self, surf, body: CelestialBody, focused: bool):
        sp = _safe_point(self.camera.world_to_screen(body.position))
        if sp is None:
            return
        vis_r = self._pixel_radius(body.visual_radius)
        gfxdraw.filled_circle(surf, sp[0], sp[1], vis_r, body.color)
        gfxdraw.aacircle(surf, sp[0], sp[1], vis_r, (0, 0, 0))

        # Spin marker: a meridian that turns with the body; tilt shortens it
        if body.rotation_angular_rate_base and vis_r >= 4:
            reach = vis_r * max(abs(math.cos(body.axial_tilt_radians)), 0.3)
            end = (int(sp[0] + math.cos(body.rotation_angle) * reach),
                   int(sp[1] + math.sin(body.rotation_angle) * reach))
            pygame.draw.line(surf, (0, 0, 0), sp, end, 1)

        if focused:
            gfxdraw.aacircle(surf, sp[0], sp[1], vis_r + 4, SELECTION_COLOR)

        for sat in body.satellites:
            # Satellite positions are parent-local; place them here
            ssp = _safe_point(self.camera.world_to_screen(body.satellite_world_position(sat)))
            if ssp is None:
                continue
            orbit_px = int(sat.distance_from_parent_visual / self.camera.upp)
            if 0 < orbit_px < SAFE_COORD_LIMIT:
                gfxdraw.aacircle(surf, sp[0], sp[1], orbit_px, ORBIT_GUIDE_COLOR)
            gfxdraw.filled_circle(surf, ssp[0], ssp[1], self._pixel_radius(sat.visual_radius), (180, 180, 190))

    def draw(self):
        surf = self.surface
        surf.fill(BACKGROUND_COLOR)

        # Snapshot under the lock for consistency during draw
        with self.ctrl.lock:
            sim = self.ctrl.sim
            bodies = list(sim.bodies)
            focused = sim.focus.focused
            trails = [(b.trail.points, b.color) for b in bodies if b.trail.enabled and b.trail.count > 1]
            ts = sim.time.time_scale
            paused = sim.time.paused
            show_guides = self.ctrl.show_orbit_guides
            dataset_name = self.ctrl.dataset_name

        if show_guides:
            for b in bodies:
                if not b.is_central:
                    self.draw_orbit_guide(surf, b)

        for points, color in trails:
            pts = [p for p in (_safe_point(self.camera.world_to_screen(pt)) for pt in points) if p]
            if len(pts) > 1:
                pygame.draw.aalines(surf, _blend(color, TRAIL_COLOR), False, pts)

        # Draw the central body last so it covers the inner orbit guides
        for b in sorted(bodies, key=lambda bb: not bb.is_central):
            self.draw_body(surf, b, b is focused)

        draw_text(surf, "Click: focus | Esc: unfocus | Wheel: zoom | Right-drag/arrows: pan | Space: pause | +/-: speed | R: reverse | T: trails", 10, 10, HUD_COLOR)
        focus_name = focused.name if focused is not None else "-"
        draw_text(surf, f"{dataset_name}  Speed: {ts:.2f}x  [{'Paused' if paused else 'Playing'}]  Focus: {focus_name}", 10, 30, HUD_COLOR)

        pygame.display.flip()


def _blend(a, b):
    return tuple((x + y) // 2 for x, y in zip(a, b))


_cached_font = None


def draw_text(surface, text, x, y, color):
    global _cached_font
    if not pygame.font.get_init():
        pygame.font.init()
    if _cached_font is None:
        _cached_font = pygame.font.SysFont("consolas", 16)
    img = _cached_font.render(text, True, color)
    surface.blit(img, (x, y))


def _safe_point(pt):
    try:
        x, y = int(pt[0]), int(pt[1])
    except (TypeError, ValueError, OverflowError):
        return None
    if -SAFE_COORD_LIMIT <= x <= SAFE_COORD_LIMIT and -SAFE_COORD_LIMIT <= y <= SAFE_COORD_LIMIT:
        return (x, y)
    return None


# ============================================================
# Dear PyGui UI
# ============================================================


class UI:
    """
    Dear PyGui interface: dataset picker, time controls, focus and trail toggles,
    and a readout of the focused body.
    """

    def __init__(self, ctrl: SimulationController, renderer: PygameRenderer, seed: Optional[int] = None):
        self.ctrl = ctrl
        self.renderer = renderer
        self.seed = seed

        self.status_msg_id = None
        self.focus_combo_id = None
        self.focus_trail_id = None
        self.readout_id = None

        self._dataset_map = {}
        self._build_ui()
        self._schedule_sync()

    def _schedule_sync(self):
        """Reschedule the periodic sync callback using frame callbacks (approx ~10Hz)."""
        current = dpg.get_frame_count()
        dpg.set_frame_callback(current + 6, self._sync_ui_with_sim)

    # -----------------------
    # UI Construction
    # -----------------------

    def _build_ui(self):
        dpg.create_context()
        dpg.create_viewport(title="Orrery - Controls", width=460, height=560)

        with dpg.window(label="Controls", width=440, height=540, pos=(10, 10), tag="main_window"):
            with dpg.group(horizontal=True):
                dpg.add_text("Dataset:")
                for fn, display in list_datasets():
                    self._dataset_map[display] = fn
                items = list(self._dataset_map.keys()) or [DEFAULT_DATASET]
                dpg.add_combo(items, default_value=self.ctrl.dataset_name if self.ctrl.dataset_name in items else items[0],
                              width=200, tag="dataset_combo")
                dpg.add_button(label="Load", callback=lambda: self.load_dataset(dpg.get_value("dataset_combo")))
                dpg.add_button(label="Fit", callback=self.renderer.auto_frame_camera)

            dpg.add_separator()
            dpg.add_text("Time")
            with dpg.group(horizontal=True):
                dpg.add_button(label="Play/Pause", callback=self._toggle_play)
                dpg.add_button(label="Step", callback=self._step_once)
                dpg.add_button(label="Reverse", callback=self._reverse)
            with dpg.group(horizontal=True):
                dpg.add_text("Speed (x):")
                with self.ctrl.lock:
                    ts = self.ctrl.sim.time.time_scale
                dpg.add_slider_float(min_value=-20.0, max_value=20.0, default_value=ts, width=260,
                                     callback=lambda s, a, u: self._set_time_scale(a), tag="speed_slider")

            dpg.add_separator()
            dpg.add_text("Focus")
            with dpg.group(horizontal=True):
                self.focus_combo_id = dpg.add_combo([NO_FOCUS] + self.ctrl.body_names(), default_value=NO_FOCUS,
                                                    width=200, callback=lambda s, a, u: self._on_focus(a))
                self.focus_trail_id = dpg.add_checkbox(label="Trail", default_value=False,
                                                       callback=lambda s, a, u: self._toggle_focus_trail(a))
            dpg.add_checkbox(label="All trails", default_value=False, tag="all_trails_checkbox",
                             callback=lambda s, a, u: self._toggle_all_trails(a))
            dpg.add_checkbox(label="Orbit guides", default_value=True,
                             callback=lambda s, a, u: self._toggle_guides(a))

            dpg.add_separator()
            self.readout_id = dpg.add_text("")
            self.status_msg_id = dpg.add_text("")

        dpg.setup_dearpygui()
        dpg.show_viewport()
        dpg.set_primary_window("main_window", True)

    # -----------------------
    # UI Callbacks
    # -----------------------

    def _set_status(self, msg: str, color=(180, 220, 180)):
        dpg.set_value(self.status_msg_id, msg)
        dpg.configure_item(self.status_msg_id, color=color)

    def _set_error(self, msg: str):
        self._set_status(msg, color=(255, 120, 120))

    def _toggle_play(self):
        paused = self.ctrl.toggle_pause()
        self._set_status(f"Simulation {'Paused' if paused else 'Playing'}.")

    def _step_once(self):
        self.ctrl.step_once()
        self._set_status("Stepped one tick.")

    def _reverse(self):
        with self.ctrl.lock:
            ts = -self.ctrl.sim.time.time_scale
        self._set_time_scale(ts)
        dpg.set_value("speed_slider", ts)

    def _set_time_scale(self, value):
        val = try_float(value)
        if val is None:
            self._set_error(f"Invalid speed {value!r}.")
            return
        self.ctrl.set_time_scale(val)

    def _on_focus(self, name):
        try:
            body = self.ctrl.set_focus(None if name == NO_FOCUS else name)
        except UnknownBodyError as exc:
            self._set_error(str(exc))
            return
        if body is None:
            self._set_status("Focus cleared.")
            return
        dpg.set_value(self.focus_trail_id, body.trail.enabled)
        self._set_status(f"Following {body.name}.")

    def _toggle_focus_trail(self, value):
        body = self.ctrl.get_focused_body()
        if body is None:
            self._set_error("No body focused.")
            dpg.set_value(self.focus_trail_id, False)
            return
        self.ctrl.toggle_trail(body.name, bool(value))
        self._set_status(f"Trail for {body.name} {'ON' if value else 'OFF'}.")

    def _toggle_all_trails(self, value):
        self.ctrl.set_all_trails(bool(value))
        self._set_status(f"Trails {'ON' if value else 'OFF'}.")

    def _toggle_guides(self, value):
        with self.ctrl.lock:
            self.ctrl.show_orbit_guides = bool(value)

    def load_dataset(self, display_name: str):
        file_name = self._dataset_map.get(display_name, display_name)
        try:
            dataset = load_dataset(file_name)
        except DatasetError as exc:
            self._set_error(str(exc))
            return
        self.ctrl.replace_simulation(Simulation.from_dataset(dataset, seed=self.seed), dataset.name)
        dpg.configure_item(self.focus_combo_id, items=[NO_FOCUS] + self.ctrl.body_names())
        dpg.set_value(self.focus_combo_id, NO_FOCUS)
        dpg.set_value("all_trails_checkbox", False)
        with self.ctrl.lock:
            dpg.set_value("speed_slider", self.ctrl.sim.time.time_scale)
        self.renderer.auto_frame_camera()
        self._set_status(f"Loaded dataset: {dataset.name}")

    def _sync_ui_with_sim(self):
        """
        Periodic UI update of the focused body's readout.
        """
        with self.ctrl.lock:
            b = self.ctrl.sim.focus.focused
            if b is None:
                text = f"Ticks: {self.ctrl.sim.tick_count}"
                dpg.set_value(self.focus_combo_id, NO_FOCUS)
            else:
                text = (
                    f"{b.name}\n"
                    f"  radius: {b.real_radius_km:,.0f} km (visual {b.visual_radius:.2f})\n"
                    f"  orbit: a={b.orbit_distance_visual:.1f}  e={b.eccentricity:.4f}  r={b.orbital_radius:.1f}\n"
                    f"  angle: {math.degrees(b.current_angle) % 360.0:.2f} deg  "
                    f"tilt: {math.degrees(b.axial_tilt_radians):.2f} deg\n"
                    f"  trail: {b.trail.count}/{b.trail.capacity} {'(on)' if b.trail.enabled else '(off)'}\n"
                    f"  moons: {', '.join(s.name for s in b.satellites) or '-'}"
                )
                dpg.set_value(self.focus_combo_id, b.name)
        dpg.set_value(self.readout_id, text)
        # Reschedule next sync
        self._schedule_sync()


# ============================================================
# Application Entry
# ============================================================


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Animated, scaled model of a planetary system.")
    parser.add_argument("--dataset", default=DEFAULT_DATASET,
                        help="dataset JSON path or bundled file name (default: %(default)s)")
    parser.add_argument("--time-scale", type=float, default=None,
                        help="initial time multiplier (overrides the dataset)")
    parser.add_argument("--seed", type=int, default=None,
                        help="seed for random starting phases, for reproducible runs")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s  %(levelname)-7s  %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        dataset = load_dataset(args.dataset)
    except DatasetError:
        return 1
    sim = Simulation.from_dataset(dataset, seed=args.seed)
    if args.time_scale is not None:
        sim.set_time_scale(args.time_scale)
    ctrl = SimulationController(sim, dataset.name)

    renderer = PygameRenderer(ctrl)

    # Start Pygame renderer thread
    renderer.start()

    ui = UI(ctrl, renderer, seed=args.seed)

    # Keyboard shortcut in UI window to toggle play/pause (Space)
    with dpg.handler_registry():
        def key_down(sender, app_data):
            if app_data == dpg.mvKey_Spacebar:
                ui._toggle_play()
        dpg.add_key_press_handler(callback=key_down)

    # Run Dear PyGui event loop
    try:
        dpg.start_dearpygui()
    finally:
        ctrl.running = False
        renderer.running = False
        renderer.join(timeout=2.0)
        dpg.destroy_context()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
