"""Pygame front end: window, level select, rendering and modal dialogs."""

from __future__ import annotations

import logging
import math
import random
from typing import Callable, Optional

import pygame

from .config import GameConfig, RenderingConfig
from .entities import draw_entity
from .input import KeyboardInput
from .loop import GameLoop, GameState, LossReason
from .progress import LevelProgress
from .puzzle import FallbackPuzzleSource, HttpPuzzleSource, PuzzleSource
from .session import Session
from .terminal import LineStyle, TerminalLine, TerminalPrompt

logger = logging.getLogger(__name__)

LINE_COLORS: dict[LineStyle, tuple[int, int, int]] = {
    LineStyle.MESSAGE: (148, 163, 184),
    LineStyle.USER: (226, 232, 240),
    LineStyle.SUCCESS: (74, 222, 128),
    LineStyle.WARNING: (250, 204, 21),
    LineStyle.ERROR: (248, 113, 113),
    LineStyle.PUZZLE_HEADER: (45, 212, 191),
    LineStyle.QUESTION: (241, 245, 249),
    LineStyle.OPTION: (125, 211, 252),
}

LEVELS_PER_ROW = 6


class Renderer:
    """Handles all rendering operations."""

    def __init__(self, surface: pygame.Surface, config: RenderingConfig) -> None:
        self.surface = surface
        self.cfg = config
        self.font, self.large_font = self._load_fonts()
        self.small_font = pygame.font.Font(None, max(12, config.font_size - 4))

    def _load_fonts(self) -> tuple[pygame.font.Font, pygame.font.Font]:
        return pygame.font.Font(None, self.cfg.font_size), pygame.font.Font(None, self.cfg.large_font_size)

    def play_width(self) -> int:
        return max(1, self.surface.get_width() - self.cfg.terminal_width)

    def draw_session(self, session: Session, prompt: TerminalPrompt, now: float) -> None:
        self.surface.fill(self.cfg.background_color)
        for entity in session.projectiles:
            draw_entity(self.surface, entity)
        for entity in session.enemies:
            draw_entity(self.surface, entity)
        for entity in session.enemy_projectiles:
            draw_entity(self.surface, entity)
        self._draw_player(session, now)
        self._draw_hud(session)
        self._draw_terminal(session, prompt, now)

    def _draw_player(self, session: Session, now: float) -> None:
        player = session.player
        centre = (round(player.x), round(player.y))
        tip = (
            round(player.x + math.cos(player.angle) * self.cfg.cannon_length),
            round(player.y + math.sin(player.angle) * self.cfg.cannon_length),
        )
        pygame.draw.line(self.surface, (230, 230, 230), centre, tip, 10)

        if session.shield_active:
            pulse = (math.sin(now / 0.15) + 1) / 2
            r, g, b = self.cfg.shield_color
            scale = 0.5 + pulse * 0.5
            ring = (round(r * scale), round(g * scale), round(b * scale))
            pygame.draw.circle(self.surface, ring, centre, round(player.radius + 12), 4)
            pygame.draw.circle(self.surface, ring, centre, round(player.radius + 15), 1)

        draw_entity(self.surface, player)

    def _draw_hud(self, session: Session) -> None:
        health = session.health_display
        max_health = session.config.player.max_health
        bar_w, bar_h = 180, 12
        x0, y0 = 16, 16
        pygame.draw.rect(self.surface, self.cfg.health_back_color, (x0, y0, bar_w, bar_h))
        fill = round(bar_w * health / max_health) if max_health else 0
        if fill > 0:
            pygame.draw.rect(self.surface, self.cfg.health_color, (x0, y0, fill, bar_h))

        remaining = session.spawner.cap - session.spawner.spawned + len(session.enemies)
        texts = [
            f"HP: {round(100 * health / max_health) if max_health else 0}%",
            f"Level {session.level}",
            f"Time {session.countdown.display}",
            f"Enemies: {remaining}",
        ]
        if session.shield_active:
            texts.append("Shield up")
        for idx, text in enumerate(texts):
            surf = self.font.render(text, True, self.cfg.ui_color)
            self.surface.blit(surf, (x0, y0 + bar_h + 8 + idx * 24))

        hint = "Move: WASD/Arrows  Fire: Space  Aim: Mouse  Answer: Enter  Pause: P/Esc"
        surf = self.small_font.render(hint, True, self.cfg.muted_color)
        rect = surf.get_rect()
        rect.bottomleft = (x0, self.surface.get_height() - 12)
        self.surface.blit(surf, rect)

    def _draw_terminal(self, session: Session, prompt: TerminalPrompt, now: float) -> None:
        height = self.surface.get_height()
        left = self.play_width()
        if session.terminal.shaking:
            left += round(math.sin(now * 60.0) * self.cfg.shake_amplitude)
        panel = pygame.Rect(left, 0, self.cfg.terminal_width, height)
        pygame.draw.rect(self.surface, self.cfg.panel_color, panel)
        pygame.draw.line(self.surface, self.cfg.panel_border_color, panel.topleft, panel.bottomleft, 2)

        title = self.font.render("TERMINAL", True, self.cfg.panel_border_color)
        self.surface.blit(title, (panel.x + 12, 12))

        line_height = self.small_font.get_linesize()
        prompt_top = height - line_height - 16
        visible = max(0, (prompt_top - 48) // line_height)
        y = 44
        lines = self._wrap(session.terminal.tail(visible), panel.width - 24)[-visible:] if visible else []
        for text, style in lines:
            surf = self.small_font.render(text, True, LINE_COLORS[style])
            self.surface.blit(surf, (panel.x + 12, y))
            y += line_height

        cursor = "_" if prompt.focused and int(now * 2) % 2 == 0 else ""
        label = f"> {prompt.text}{cursor}" if prompt.focused or prompt.text else "> press Enter to answer"
        color = self.cfg.ui_color if prompt.focused else self.cfg.muted_color
        surf = self.small_font.render(label, True, color)
        self.surface.blit(surf, (panel.x + 12, prompt_top))

    def _wrap(self, lines: list[TerminalLine], max_width: int) -> list[tuple[str, LineStyle]]:
        wrapped: list[tuple[str, LineStyle]] = []
        for line in lines:
            current = ""
            for word in line.text.split(" "):
                candidate = f"{current} {word}" if current else word
                if current and self.small_font.size(candidate)[0] > max_width:
                    wrapped.append((current, line.style))
                    current = word
                else:
                    current = candidate
            wrapped.append((current, line.style))
        return wrapped

    def draw_modal(self, title: str, subtitle: str, options: list[tuple[str, str]]) -> dict[str, pygame.Rect]:
        width, height = self.surface.get_size()
        overlay = pygame.Surface((width, height), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 170))
        self.surface.blit(overlay, (0, 0))

        centre_x = self.play_width() // 2
        text = self.large_font.render(title, True, self.cfg.ui_color)
        self.surface.blit(text, text.get_rect(center=(centre_x, height // 2 - 90)))
        if subtitle:
            sub = self.font.render(subtitle, True, self.cfg.muted_color)
            self.surface.blit(sub, sub.get_rect(center=(centre_x, height // 2 - 40)))

        buttons: dict[str, pygame.Rect] = {}
        for idx, (key, label) in enumerate(options):
            surf = self.font.render(label, True, self.cfg.ui_color)
            rect = surf.get_rect(center=(centre_x, height // 2 + 10 + idx * 40))
            pygame.draw.rect(self.surface, self.cfg.panel_border_color, rect.inflate(24, 12), 1)
            self.surface.blit(surf, rect)
            buttons[key] = rect.inflate(24, 12)
        return buttons

    def draw_level_select(self, progress: LevelProgress, level_count: int, selected: int) -> dict[int, pygame.Rect]:
        width, height = self.surface.get_size()
        self.surface.fill(self.cfg.background_color)
        title = self.large_font.render("NEUROBREAK", True, self.cfg.panel_border_color)
        self.surface.blit(title, title.get_rect(center=(width // 2, 70)))
        hint = self.font.render("Arrows select, Enter plays, Esc quits", True, self.cfg.muted_color)
        self.surface.blit(hint, hint.get_rect(center=(width // 2, 120)))

        tile, gap = 64, 16
        grid_w = LEVELS_PER_ROW * tile + (LEVELS_PER_ROW - 1) * gap
        x0 = (width - grid_w) // 2
        tiles: dict[int, pygame.Rect] = {}
        for level in range(1, level_count + 1):
            row, col = divmod(level - 1, LEVELS_PER_ROW)
            rect = pygame.Rect(x0 + col * (tile + gap), 160 + row * (tile + gap), tile, tile)
            unlocked = progress.is_unlocked(level)
            color = self.cfg.panel_border_color if unlocked else self.cfg.locked_color
            pygame.draw.rect(self.surface, self.cfg.panel_color, rect)
            pygame.draw.rect(self.surface, color, rect, 3 if level == selected else 1)
            label = str(level) if unlocked else "--"
            surf = self.font.render(label, True, color)
            self.surface.blit(surf, surf.get_rect(center=rect.center))
            tiles[level] = rect
        return tiles


class NeurobreakGame:
    """High-level game orchestration."""

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        source: Optional[PuzzleSource] = None,
        progress: Optional[LevelProgress] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        pygame.init()
        pygame.font.init()

        self.config = config or GameConfig()
        self.screen = pygame.display.set_mode(self.config.window_size, pygame.RESIZABLE)
        pygame.display.set_caption("Neurobreak")

        self.clock = pygame.time.Clock()
        self.renderer = Renderer(self.screen, self.config.render)
        self.progress = progress or LevelProgress(self.config.progress_path, self.config.session.level_count)
        if source is None:
            if self.config.puzzle.offline:
                source = FallbackPuzzleSource(self.config.puzzle)
            else:
                source = HttpPuzzleSource(self.config.puzzle)
        self.loop = GameLoop(
            self.config,
            source,
            progress=self.progress,
            bounds=(self.renderer.play_width(), self.screen.get_height()),
            rng=rng,
        )
        self.input_provider = KeyboardInput()
        self.prompt = TerminalPrompt()

        self.running = True
        self.in_menu = True
        self.selected_level = self.progress.highest
        self.elapsed = 0.0
        self.level_tiles: dict[int, pygame.Rect] = {}
        self.modal_buttons: dict[str, pygame.Rect] = {}
        self.loop.listeners.append(self._on_state_change)

    def run(self) -> None:
        while self.running:
            dt = self.clock.tick(self.config.target_fps) / 1000.0
            self.step(dt, pygame.event.get())
            pygame.display.flip()
        self.loop.exit()
        pygame.quit()

    def step(self, dt: float, events: list[pygame.event.Event]) -> None:
        """Process one display refresh: events, simulation, drawing."""
        self.elapsed += dt
        self._handle_events(events)
        if self.in_menu:
            self.level_tiles = self.renderer.draw_level_select(
                self.progress, self.config.session.level_count, self.selected_level
            )
            return
        self.loop.pump(dt, self.input_provider.poll())
        session = self.loop.session
        if session is None:
            return
        self.renderer.draw_session(session, self.prompt, self.elapsed)
        self.modal_buttons = self._draw_modal()

    # ----------------------------
    # Actions
    # ----------------------------

    def start_level(self, level: int) -> None:
        if not self.progress.is_unlocked(level):
            return
        self.in_menu = False
        self.prompt.clear()
        self.prompt.blur()
        self.input_provider.reset()
        self.loop.start(level)
        self.selected_level = level

    def exit_to_levels(self) -> None:
        self.loop.exit()
        self.prompt.clear()
        self.prompt.blur()
        self.input_provider.reset()
        self.in_menu = True
        self.selected_level = self.progress.highest

    def _restart(self) -> None:
        self.prompt.clear()
        self.prompt.blur()
        self.input_provider.reset()
        self.loop.restart()

    def _next_level(self) -> None:
        self.prompt.clear()
        self.input_provider.reset()
        session = self.loop.next_level()
        self.selected_level = session.level

    def _actions(self) -> dict[str, Callable[[], object]]:
        return {
            "resume": self.loop.resume,
            "restart": self._restart,
            "next": self._next_level,
            "home": self.exit_to_levels,
        }

    def _on_state_change(self, previous: GameState, state: GameState) -> None:
        if state is not GameState.RUNNING:
            self.prompt.blur()
            self.input_provider.enabled = True
            self.input_provider.reset()

    def _focus_prompt(self) -> None:
        if self.loop.state is GameState.RUNNING:
            self.prompt.focus()
            self.input_provider.reset()
            self.input_provider.enabled = False

    def _submit(self, text: Optional[str]) -> None:
        self.input_provider.enabled = True
        if text is not None:
            self.loop.submit_answer(text)

    # ----------------------------
    # Events
    # ----------------------------

    def _handle_events(self, events: list[pygame.event.Event]) -> None:
        for event in events:
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.VIDEORESIZE:
                self._apply_resize(event.w, event.h)
            elif event.type == pygame.KEYDOWN:
                self._handle_key(event)
            elif event.type == pygame.KEYUP:
                self.input_provider.handle_event(event)
            elif event.type == pygame.MOUSEMOTION:
                self.input_provider.handle_event(event)
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self._handle_click(event.pos)

    def _apply_resize(self, width: int, height: int) -> None:
        self.screen = pygame.display.get_surface() or self.screen
        self.renderer.surface = self.screen
        self.loop.resize(self.renderer.play_width(), height)

    def _handle_key(self, event: pygame.event.Event) -> None:
        if self.in_menu:
            self._menu_key(event.key)
            return
        if self.prompt.focused:
            submitted = self.prompt.handle_key(event)
            if not self.prompt.focused:
                self._submit(submitted)
            return

        state = self.loop.state
        if event.key in (pygame.K_ESCAPE, pygame.K_p):
            if state in (GameState.RUNNING, GameState.PAUSED):
                self.loop.toggle_pause()
            elif event.key == pygame.K_ESCAPE:
                self.exit_to_levels()
        elif state is GameState.RUNNING and event.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
            self._focus_prompt()
        elif state is GameState.RUNNING:
            self.input_provider.handle_event(event)
        elif event.key == pygame.K_r:
            self._restart()
        elif event.key == pygame.K_h:
            self.exit_to_levels()
        elif event.key == pygame.K_n and state is GameState.WON:
            self._next_level()

    def _menu_key(self, key: int) -> None:
        count = self.config.session.level_count
        if key == pygame.K_ESCAPE:
            self.running = False
        elif key == pygame.K_LEFT:
            self.selected_level = max(1, self.selected_level - 1)
        elif key == pygame.K_RIGHT:
            self.selected_level = min(count, self.selected_level + 1)
        elif key == pygame.K_UP:
            self.selected_level = max(1, self.selected_level - LEVELS_PER_ROW)
        elif key == pygame.K_DOWN:
            self.selected_level = min(count, self.selected_level + LEVELS_PER_ROW)
        elif key in (pygame.K_RETURN, pygame.K_SPACE):
            self.start_level(self.selected_level)

    def _handle_click(self, pos: tuple[int, int]) -> None:
        if self.in_menu:
            for level, rect in self.level_tiles.items():
                if rect.collidepoint(pos):
                    self.selected_level = level
                    self.start_level(level)
                    break
            return
        for name, rect in self.modal_buttons.items():
            if rect.collidepoint(pos):
                self._actions()[name]()
                return
        if pos[0] >= self.renderer.play_width():
            self._focus_prompt()

    def _draw_modal(self) -> dict[str, pygame.Rect]:
        state = self.loop.state
        if state is GameState.PAUSED:
            return self.renderer.draw_modal(
                "PAUSED",
                "",
                [("resume", "Resume"), ("restart", "Restart"), ("home", "Levels")],
            )
        if state is GameState.LOST:
            reasons = {
                LossReason.HEALTH: "Hull integrity lost.",
                LossReason.LOCKDOWN: "Maximum attempts exceeded.",
                LossReason.TIME_UP: "Time is up.",
            }
            subtitle = reasons.get(self.loop.loss_reason, "") if self.loop.loss_reason else ""
            return self.renderer.draw_modal(
                "SYSTEM FAILURE",
                subtitle,
                [("restart", "Restart (R)"), ("home", "Levels (H)")],
            )
        if state is GameState.WON:
            options = [("restart", "Replay (R)"), ("home", "Levels (H)")]
            if self.loop.level < self.config.session.level_count:
                options.insert(0, ("next", "Next level (N)"))
            return self.renderer.draw_modal("LEVEL CLEARED", f"Level {self.loop.level} secured.", options)
        return {}
