"""Plays a chapter script: dialogue, character sprites, backgrounds, titles and sound."""

from __future__ import annotations

import logging
import os
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union

from jfegal.script import (
    CharacterDef,
    CharacterInstance,
    Command,
    Dialogue,
    DialogueKind,
    GameScript,
    ScriptItem,
)

logger = logging.getLogger(__name__)

FADE_MS = 400
TITLE_MS = 4000
SCREEN_RECT = (0.0, 0.0, 1600.0, 900.0)
SPRITE_WIDTH = 300.0
SPRITE_HEIGHT = 500.0
ALPHA_SHOWN = 255
ALPHA_DIMMED = 150
ALPHA_HIDDEN = 0

RectF = tuple[float, float, float, float]
ImageLoader = Callable[[str], Optional[Any]]


def _default_loader(path: str) -> Optional[str]:
    return path or None


def character_position(definition: CharacterDef, instance: CharacterInstance) -> RectF:
    """Where a character's sprite goes; the instance offset wins over the definition's."""
    offset = instance.offset or definition.offset
    if definition.base_pos == "left":
        x = 100.0
    elif definition.base_pos == "right":
        x = 800.0
    else:
        x = 450.0
    return (x + offset[0], 300.0 + offset[1], SPRITE_WIDTH, SPRITE_HEIGHT)


def fade_alphas(elapsed_ms: float) -> tuple[int, int]:
    """Alphas of the incoming and outgoing background after elapsed_ms of a fade."""
    progress = min(max(elapsed_ms / FADE_MS, 0.0), 1.0)
    ease = progress * progress
    return int(255.0 * ease), int(255.0 * (1.0 - ease))


@dataclass
class Layer:
    """An image drawn into a rectangle with some opacity."""

    image: Any = None
    rect: RectF = (0.0, 0.0, 0.0, 0.0)
    alpha: int = ALPHA_SHOWN
    visible: bool = True


@dataclass
class AudioChannel:
    """The state of one sound channel: what is loaded, whether it plays, how loud."""

    path: str = ""
    playing: bool = False
    looping: bool = False
    volume: float = 1.0

    def load(self, path: str) -> None:
        self.path = path
        self.playing = False

    def play(self, loop: bool) -> None:
        self.playing = True
        self.looping = loop

    def pause(self) -> None:
        self.playing = False

    def set_volume(self, volume: float) -> None:
        self.volume = volume


@dataclass
class _Fade:
    fade_in: Layer
    fade_out: Layer
    elapsed: float = 0.0


class ScenePlayer:
    """Steps through the scenes of a chapter and keeps the visible state of the game screen.

    Images are obtained through ``loader``, which maps a path to an image or
    returns None when it cannot be loaded.
    """

    def __init__(self, loader: Optional[ImageLoader] = None) -> None:
        self.script = GameScript()
        self.loader: ImageLoader = loader or _default_loader
        self.queue: deque[ScriptItem] = deque()
        self.characters: dict[str, Layer] = {}
        self.background_a = Layer(rect=SCREEN_RECT, alpha=ALPHA_HIDDEN)
        self.background_b = Layer(rect=SCREEN_RECT, alpha=ALPHA_SHOWN)
        self.character_name = ""
        self.dialogue_text = ""
        self.animating = False
        self.dialog_visible = True
        self.title_text = ""
        self.title_visible = False
        self.bgm = AudioChannel()
        self.voice = AudioChannel()
        self.sfx = AudioChannel()
        self._fade: Optional[_Fade] = None
        self._title_remaining = 0.0

    # loading

    def load_script(self, path: Union[str, os.PathLike]) -> None:
        """Load a script file; raises ScriptError when it cannot be read."""
        self.script.load_file(path)

    def load_scene(self, scene_id: int) -> bool:
        """Start a scene; returns False if the chapter has no scene with that id."""
        self.queue.clear()
        self._clear_characters()
        logger.info("loading scene %s", scene_id)
        scene = next((s for s in self.script.chapter.scenes if s.scene_id == scene_id), None)
        if scene is None:
            return False

        background = self.loader(scene.background)
        if background is None:
            logger.warning("background failed to load: %s", scene.background)
        else:
            self.switch_background(background)

        for instance in scene.characters:
            self._place_character(instance)

        self.queue.extend(scene.script)
        self.process_next()
        return True

    def _place_character(self, instance: CharacterInstance) -> None:
        definition = self.script.character_def(instance.ref_name)
        if definition is None:
            logger.warning("no definition for character: %s", instance.ref_name)
            return
        if not definition.has_sprites:
            return
        try:
            path = definition.sprites[instance.current_sprite]
            rect = character_position(definition, instance)
        except (KeyError, IndexError) as exc:
            logger.warning("cannot place %s: %r", instance.ref_name, exc)
            return
        image = self.loader(path)
        if image is None:
            logger.warning("sprite failed to load: %s", path)
            return
        self.characters[instance.ref_name] = Layer(image=image, rect=rect, alpha=ALPHA_HIDDEN)

    # stepping

    def process_next(self) -> None:
        """Run queued commands until a line of dialogue is at the front, then show it."""
        while self.queue:
            item = self.queue[0]
            if isinstance(item, Command):
                self.queue.popleft()
                try:
                    self.execute(item)
                except Exception:
                    logger.exception("command failed: %r", item)
                continue
            self._show(item)
            return

    def _show(self, dialogue: Dialogue) -> None:
        if dialogue.kind is DialogueKind.DIALOGUE:
            self.character_name = dialogue.displayname or dialogue.character
            self._show_dialogue(f"「{dialogue.text}」")
        else:
            self.character_name = ""
            self._show_dialogue(dialogue.text)

        layer = self.characters.get(dialogue.character)
        if layer is not None:
            layer.alpha = ALPHA_SHOWN
        if dialogue.sprite:
            self._update_sprite(dialogue.character, dialogue.sprite)
        self._update_highlight(dialogue.character)

    def _show_dialogue(self, text: str) -> None:
        self.dialogue_text = text
        self.animating = True

    def advance(self) -> None:
        """Move past the current line; when the dialog is hidden, show it instead."""
        if not self.dialog_visible:
            self.toggle_dialog()
            return
        if self.queue:
            self.animating = False
            self.queue.popleft()
            self.process_next()

    def execute(self, command: Command) -> None:
        """Carry out one script command."""
        if command.type == "sound":
            self._execute_sound(command)
        elif command.type == "bg":
            if command.action == "change":
                self.switch_background(self.loader(command.param))
            elif command.action == "title":
                self.title_text = command.param
                self.title_visible = True
                self._title_remaining = float(TITLE_MS)
        elif command.type == "character":
            layer = self.characters.get(command.param)
            if layer is None:
                return
            if command.action == "show":
                layer.alpha = ALPHA_SHOWN
                self._update_highlight(command.param)
            elif command.action == "hide":
                layer.alpha = ALPHA_HIDDEN
        elif command.type == "chapter" and command.action == "drop":
            try:
                scene_id = int(command.param)
            except ValueError:
                logger.error("bad scene id: %r", command.param)
                return
            self.load_scene(scene_id)

    def _execute_sound(self, command: Command) -> None:
        channels = {"bgm": (self.bgm, True), "voice": (self.voice, False), "sfx": (self.sfx, False)}
        entry = channels.get(command.soundtype)
        if entry is None:
            return
        channel, loop = entry
        if command.action == "play":
            channel.load(command.param)
            channel.play(loop)
        elif command.action == "pause":
            channel.pause()
        elif command.action == "volumn":
            channel.set_volume(float(command.param))

    # characters

    def _update_highlight(self, speaking: str) -> None:
        for name, layer in self.characters.items():
            if name == speaking:
                if layer.alpha == ALPHA_HIDDEN:
                    layer.alpha = ALPHA_SHOWN
            elif layer.alpha > ALPHA_HIDDEN:
                layer.alpha = ALPHA_DIMMED

    def _update_sprite(self, name: str, sprite: str) -> None:
        layer = self.characters.get(name)
        if layer is None:
            return
        definition = self.script.character_def(name)
        if definition is None or sprite not in definition.sprites:
            return
        layer.image = self.loader(definition.sprites[sprite])

    def _clear_characters(self) -> None:
        self.characters.clear()

    # input

    def toggle_dialog(self) -> None:
        self.dialog_visible = not self.dialog_visible

    def on_key(self, key: str) -> None:
        """Escape hides or shows the dialog; space and return advance."""
        name = key.lower()
        if name == "escape":
            self.toggle_dialog()
        elif name in ("space", "return"):
            self.advance()

    def on_right_click(self) -> None:
        self.toggle_dialog()

    # timed effects

    def switch_background(self, image: Any) -> None:
        """Put an image on the hidden background layer and start fading it in."""
        if self.background_a.alpha == ALPHA_HIDDEN:
            fade_in, fade_out = self.background_a, self.background_b
        else:
            fade_in, fade_out = self.background_b, self.background_a
        fade_in.image = image
        self._fade = _Fade(fade_in, fade_out)
        fade_in.alpha, fade_out.alpha = fade_alphas(0.0)

    def update_fade(self, elapsed_ms: float) -> bool:
        """Advance the background fade; returns whether it is still running."""
        fade = self._fade
        if fade is None:
            return False
        fade.elapsed += elapsed_ms
        fade.fade_in.alpha, fade.fade_out.alpha = fade_alphas(fade.elapsed)
        if fade.elapsed >= FADE_MS:
            self._fade = None
            return False
        return True

    def update_title(self, elapsed_ms: float) -> bool:
        """Count down the chapter title; returns whether it is still shown."""
        if not self.title_visible:
            return False
        self._title_remaining -= elapsed_ms
        if self._title_remaining <= 0:
            self.title_visible = False
        return self.title_visible