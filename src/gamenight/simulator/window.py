"""
Desktop host window using pygame.

Hosts the selection wheel next to a small game list, pumps the
wheel's frame scheduler from the pygame clock and disposes the wheel
when the window closes. Spin requests go through the event bus queue;
the status line follows the wheel's lifecycle events.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

import pygame

from ..animation.scheduler import FramePump
from ..config.settings import Settings, get_settings
from ..core.events import Event, EventBus, EventType, button_press_event, tick_event
from ..graphics.images import ImageCache
from ..graphics.wheel_renderer import WheelRenderer
from ..library.games import DuplicateGameError, Game, GameLibrary
from ..wheel.models import Item
from ..wheel.selection import SelectionWheel

logger = logging.getLogger(__name__)

SAMPLE_GAMES = [
    "Catan",
    "Ticket to Ride",
    "Wingspan",
    "Azul",
    "Carcassonne",
    "Pandemic",
    "Codenames",
    "7 Wonders",
    "Splendor",
    "Terraforming Mars",
]


@dataclass
class WindowConfig:
    """Simulator window configuration."""
    width: int = 960
    height: int = 640
    title: str = "Game Night"
    fullscreen: bool = False
    fps: int = 60

    # Colors
    bg_color: tuple[int, int, int] = (44, 24, 16)
    panel_color: tuple[int, int, int] = (74, 52, 41)
    text_color: tuple[int, int, int] = (245, 245, 220)
    accent_color: tuple[int, int, int] = (218, 165, 32)

    @classmethod
    def from_settings(cls, settings: Settings) -> "WindowConfig":
        return cls(
            width=settings.simulator.window_width,
            height=settings.simulator.window_height,
            title=settings.simulator.title,
            fullscreen=settings.simulator.fullscreen,
            fps=settings.display.fps,
        )


class SimulatorWindow:
    """
    Main window: wheel on the left, game list and status on the right.

    Keyboard Mapping:
        SPACE / RETURN / click: Spin
        X: Cancel the running spin
        A: Add the next sample game
        BACKSPACE: Remove the last game in the list
        C: Clear all games
        D: Toggle debug panel
        L: Toggle log viewer
        ESC / Q: Exit
    """

    def __init__(
        self,
        config: WindowConfig | None = None,
        settings: Settings | None = None,
        library: GameLibrary | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.config = config or WindowConfig.from_settings(self.settings)
        self.library = library or GameLibrary()
        self.event_bus = event_bus or EventBus()

        self.scheduler = FramePump()
        self.wheel = SelectionWheel(
            scheduler=self.scheduler,
            on_resolved=self._on_resolved,
            settings=self.settings.wheel,
            event_bus=self.event_bus,
            items=self.library.as_items(),
        )
        self.renderer = WheelRenderer(
            display=self.settings.display,
            pointer_angle=self.settings.wheel.pointer_angle,
            images=ImageCache(size=self.settings.display.thumbnail_size),
        )
        self._unsubscribers = [
            self.library.subscribe(self._on_library_changed),
            self.event_bus.subscribe(EventType.BUTTON_PRESS, self._on_button_press),
            self.event_bus.subscribe(EventType.SPIN_STARTED, self._on_spin_started),
            self.event_bus.subscribe(EventType.SPIN_RESOLVED, self._on_spin_resolved),
            self.event_bus.subscribe(EventType.SPIN_CANCELLED, self._on_spin_cancelled),
            self.event_bus.subscribe(EventType.ERROR, self._on_error),
        ]

        # Pygame setup
        self._screen: pygame.Surface | None = None
        self._clock: pygame.time.Clock | None = None
        self._running = False
        self._frame_count = 0
        self._show_debug = False
        self._sample_index = 0
        self._status = "Press SPACE to spin"

        # Layout
        self._wheel_rect: pygame.Rect | None = None
        self._font: pygame.font.Font | None = None
        self._small_font: pygame.font.Font | None = None

        # Log viewer
        self._show_log = False
        self._log_buffer: list[str] = []
        self._max_log_lines = 20
        self._log_handler: logging.Handler | None = None
        self._setup_log_capture()

        logger.info("SimulatorWindow created")

    def _setup_log_capture(self) -> None:
        """Setup log capturing for the log viewer."""
        class SimulatorLogHandler(logging.Handler):
            def __init__(self, window: 'SimulatorWindow'):
                super().__init__()
                self.window = window

            def emit(self, record):
                msg = self.format(record)
                self.window._log_buffer.append(msg)
                # Keep buffer size limited
                if len(self.window._log_buffer) > self.window._max_log_lines * 2:
                    self.window._log_buffer = self.window._log_buffer[-self.window._max_log_lines:]

        handler = SimulatorLogHandler(self)
        handler.setFormatter(logging.Formatter('%(levelname).1s %(name)s: %(message)s'))
        logging.getLogger().addHandler(handler)
        self._log_handler = handler

    def _init_pygame(self) -> None:
        """Initialize pygame and create window."""
        pygame.init()
        pygame.display.set_caption(self.config.title)

        flags = pygame.DOUBLEBUF
        if self.config.fullscreen:
            flags |= pygame.FULLSCREEN

        self._screen = pygame.display.set_mode(
            (self.config.width, self.config.height),
            flags
        )
        self._clock = pygame.time.Clock()

        pygame.font.init()
        self._font = pygame.font.SysFont("DejaVu Serif", 20)
        self._small_font = pygame.font.SysFont("DejaVu Sans", 14)

        self._calculate_layout()
        logger.info(f"Pygame initialized: {self.config.width}x{self.config.height}")

    def _calculate_layout(self) -> None:
        """Wheel canvas vertically centered on the left."""
        size = self.renderer.size
        y = max(0, (self.config.height - size) // 2)
        self._wheel_rect = pygame.Rect(30, y, size, size)

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False
            elif event.type == pygame.KEYDOWN:
                self._handle_keydown(event)
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                if self._wheel_rect and self._wheel_rect.collidepoint(event.pos):
                    self._request_spin("mouse")

    def _handle_keydown(self, event: pygame.event.Event) -> None:
        """Handle key press."""
        key = event.key

        if key in (pygame.K_ESCAPE, pygame.K_q):
            self._running = False
        elif key in (pygame.K_SPACE, pygame.K_RETURN):
            self._request_spin("keyboard")
        elif key == pygame.K_x:
            self.wheel.cancel()
        elif key == pygame.K_a:
            self._add_sample_game()
        elif key == pygame.K_BACKSPACE:
            self._remove_last_game()
        elif key == pygame.K_c:
            self.library.clear()
            self._status = "Library cleared"
        elif key == pygame.K_d:
            self._show_debug = not self._show_debug
        elif key == pygame.K_l:
            self._show_log = not self._show_log

    def _request_spin(self, source: str) -> None:
        """Queue a spin request; handled on the next frame."""
        self.event_bus.queue_event(button_press_event(source))

    def _add_sample_game(self) -> None:
        for _ in range(len(SAMPLE_GAMES)):
            name = SAMPLE_GAMES[self._sample_index % len(SAMPLE_GAMES)]
            self._sample_index += 1
            try:
                self.library.add_game(name)
            except DuplicateGameError:
                continue
            self._status = f"Added {name}"
            return
        self._status = "All sample games added"

    def _remove_last_game(self) -> None:
        games = self.library.games
        if not games:
            return
        removed = self.library.remove_game(games[-1].id)
        self._status = f"Removed {removed.name}"

    def _on_library_changed(self, games: list[Game]) -> None:
        self.wheel.configure(g.to_item() for g in games)
        self.event_bus.emit(Event(EventType.LIBRARY_CHANGED, data={"count": len(games)}, source="library"))

    def _on_resolved(self, item: Item) -> None:
        self.library.select(item)

    # ------------------------------------------------------------------
    # Event bus handlers
    # ------------------------------------------------------------------

    def _on_button_press(self, event: Event) -> None:
        if not self.wheel.spin() and not self.wheel.items:
            self._status = "Add games first (A)"

    def _on_spin_started(self, event: Event) -> None:
        self._status = "Spinning..."

    def _on_spin_resolved(self, event: Event) -> None:
        self._status = f"Tonight: {event.data['item'].display_name}!"

    def _on_spin_cancelled(self, event: Event) -> None:
        self._status = "Spin cancelled"

    def _on_error(self, event: Event) -> None:
        self._status = f"Error: {event.data.get('message', 'unknown')}"

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _render(self) -> None:
        """Render all UI elements."""
        if not self._screen:
            return

        self._screen.fill(self.config.bg_color)
        self._render_wheel()
        self._render_side_panel()
        if self._show_debug:
            self._render_debug_panel()
        if self._show_log:
            self._render_log_panel()

        pygame.display.flip()

    def _render_wheel(self) -> None:
        buffer = self.renderer.render_wheel(self.wheel)
        surface = pygame.surfarray.make_surface(buffer.swapaxes(0, 1))
        self._screen.blit(surface, self._wheel_rect.topleft)

    def _render_side_panel(self) -> None:
        if not self._font or not self._small_font:
            return

        x = self._wheel_rect.right + 40
        y = self._wheel_rect.top

        title = self._font.render("The Game Table", True, self.config.accent_color)
        self._screen.blit(title, (x, y))
        y += 36

        status = self._font.render(self._status, True, self.config.text_color)
        self._screen.blit(status, (x, y))
        y += 40

        selection = self.library.current_selection
        for game in self.library.games:
            marker = "> " if selection is not None and selection.id == game.id else "  "
            line = self._small_font.render(marker + game.name, True, self.config.text_color)
            self._screen.blit(line, (x, y))
            y += 20

        hint = self._small_font.render(
            "SPACE spin  X cancel  A add  BKSP remove  C clear  D debug  L log  Q quit",
            True, self.config.accent_color,
        )
        self._screen.blit(hint, (20, self.config.height - 28))

    def _render_debug_panel(self) -> None:
        """Render the debug information panel."""
        if not self._small_font:
            return

        plan = self.wheel.spin_plan
        lines = [
            f"FPS: {self._clock.get_fps():.1f}" if self._clock else "FPS: --",
            f"Frame: {self._frame_count}",
            f"Phase: {self.wheel.phase.name}",
            f"Rotation: {self.wheel.rotation:.1f}",
            f"Progress: {self.wheel.progress:.2f}",
            f"Items: {len(self.wheel.items)}",
            f"Snapshot: {len(self.wheel.snapshot)}",
            f"Target: {plan.spin_target:.1f}" if plan else "Target: --",
        ]

        rect = pygame.Rect(self.config.width - 220, 20, 200, 20 + 18 * len(lines))
        pygame.draw.rect(self._screen, self.config.panel_color, rect, border_radius=5)
        y = rect.y + 10
        for line in lines:
            text_surface = self._small_font.render(line, True, self.config.text_color)
            self._screen.blit(text_surface, (rect.x + 10, y))
            y += 18

    def _render_log_panel(self) -> None:
        """Render the log viewer panel."""
        if not self._small_font:
            return

        rect = pygame.Rect(10, 50, 420, self.config.height - 150)
        surf = pygame.Surface((rect.width, rect.height), pygame.SRCALPHA)
        surf.fill((20, 12, 8, 230))
        self._screen.blit(surf, rect.topleft)

        y = rect.y + 8
        for line in self._log_buffer[-self._max_log_lines:]:
            if line.startswith('E'):
                color = (255, 100, 100)
            elif line.startswith('W'):
                color = (255, 200, 100)
            else:
                color = (200, 190, 170)

            display_line = line[:60] + "..." if len(line) > 63 else line
            text_surf = self._small_font.render(display_line, True, color)
            self._screen.blit(text_surf, (rect.x + 8, y))
            y += 16
            if y > rect.bottom - 10:
                break

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------

    async def run(self) -> None:
        """Main simulator loop."""
        self._init_pygame()
        self._running = True
        logger.info("Simulator started")

        try:
            while self._running:
                self._handle_events()

                delta_ms = self._clock.get_time() if self._clock else 0
                self.event_bus.emit(tick_event(delta_ms / 1000.0, self._frame_count))
                self.scheduler.advance(delta_ms)

                await self.event_bus.process_queue()
                self._render()

                if self._clock:
                    self._clock.tick(self.config.fps)
                self._frame_count += 1

                # Yield to other tasks
                await asyncio.sleep(0)
        finally:
            self._cleanup()

    def _cleanup(self) -> None:
        """Release the wheel, listeners and pygame."""
        self.wheel.dispose()
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self.event_bus.emit(Event(EventType.SHUTDOWN, source="simulator"))
        if self._log_handler is not None:
            logging.getLogger().removeHandler(self._log_handler)
            self._log_handler = None
        pygame.quit()
        logger.info("Simulator stopped")

    def stop(self) -> None:
        """Stop the simulator."""
        self._running = False
