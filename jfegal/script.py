"""Chapter scripts: characters, scenes, dialogue lines and commands, read from YAML."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Callable, Iterator, Mapping, Optional, Union

from jfegal.yaml.errors import InvalidNode, YamlError
from jfegal.yaml.node import Node
from jfegal.yaml.node import load as load_yaml
from jfegal.yaml.node import load_file as load_yaml_file


class ScriptError(Exception):
    """A script could not be read or did not have the expected shape."""


class DialogueKind(IntEnum):
    DIALOGUE = 0
    NARRATION = 1


@dataclass
class CharacterDef:
    """A character as declared once for the whole chapter."""

    id: str = ""
    base_pos: str = "left"
    offset: list[int] = field(default_factory=lambda: [0, 0])
    sprites: dict[str, str] = field(default_factory=dict)

    @property
    def has_sprites(self) -> bool:
        return bool(self.sprites)


@dataclass
class CharacterInstance:
    """A character placed in a scene; an empty offset defers to the definition."""

    ref_name: str = ""
    current_sprite: str = "normal"
    offset: list[int] = field(default_factory=list)


@dataclass
class Dialogue:
    character: str = ""
    displayname: str = ""
    text: str = ""
    sprite: str = ""
    kind: DialogueKind = DialogueKind.DIALOGUE


@dataclass
class Command:
    type: str = ""
    action: str = ""
    param: str = ""
    soundtype: str = ""


ScriptItem = Union[Command, Dialogue]


@dataclass
class Scene:
    scene_id: int = 0
    background: str = ""
    characters: list[CharacterInstance] = field(default_factory=list)
    script: list[ScriptItem] = field(default_factory=list)


@dataclass
class Chapter:
    title: str = ""
    character_defs: dict[str, CharacterDef] = field(default_factory=dict)
    scenes: list[Scene] = field(default_factory=list)


def _text(node: Node, key: str) -> str:
    return node[key].as_(str)


def _pairs(node: Node) -> Iterator[tuple[Node, Node]]:
    if node.is_sequence() and len(node):
        raise InvalidNode()
    return node.items()


def parse_dialogue(node: Node, id_to_name: Mapping[str, str]) -> Dialogue:
    """Build a dialogue or narration line; speaker ids are mapped to names."""
    dialogue = Dialogue()
    if _text(node, "type") == "dialogue":
        speaker = _text(node, "speaker")
        dialogue.character = id_to_name.get(speaker, speaker)
        if node["sprite"]:
            dialogue.sprite = _text(node, "sprite")
        dialogue.kind = DialogueKind.DIALOGUE
    else:
        dialogue.kind = DialogueKind.NARRATION
    if node["displayname"]:
        dialogue.displayname = _text(node, "displayname")
    dialogue.text = _text(node, "text")
    return dialogue


def parse_command(node: Node) -> Command:
    command = Command(type=_text(node, "cmd"), action=_text(node, "action"))
    if node["param"]:
        command.param = _text(node, "param")
    if node["soundtype"]:
        command.soundtype = _text(node, "soundtype")
    return command


def parse_character_def(node: Node) -> CharacterDef:
    definition = CharacterDef()
    if node["id"]:
        definition.id = _text(node, "id")
    if node["base_pos"]:
        definition.base_pos = _text(node, "base_pos")
    if node["offset"]:
        definition.offset = node["offset"].as_(list[int])
    sprites = node["sprites"]
    if sprites:
        for key, value in _pairs(sprites):
            definition.sprites.setdefault(key.as_(str), value.as_(str))
    return definition


def parse_character_instance(node: Node) -> CharacterInstance:
    instance = CharacterInstance(ref_name=_text(node, "name"))
    if node["sprite"]:
        instance.current_sprite = _text(node, "sprite")
    if node["offset"]:
        instance.offset = node["offset"].as_(list[int])
    return instance


class GameScript:
    """A chapter loaded from one or more script documents.

    Each load adds its scenes to the chapter and replaces its character
    definitions by name.
    """

    def __init__(self) -> None:
        self.chapter = Chapter()
        self.id_to_name: dict[str, str] = {}

    def load_file(self, path: Union[str, os.PathLike]) -> None:
        """Load a script file; raises ScriptError on any failure."""
        self._ingest(lambda: load_yaml_file(path))

    def loads(self, text: str) -> None:
        """Load a script from text; raises ScriptError on any failure."""
        self._ingest(lambda: load_yaml(text))

    def character_def(self, name: str) -> Optional[CharacterDef]:
        return self.chapter.character_defs.get(name)

    def character_def_by_id(self, character_id: str) -> Optional[CharacterDef]:
        name = self.id_to_name.get(character_id)
        return None if name is None else self.character_def(name)

    def _ingest(self, read: Callable[[], Node]) -> None:
        try:
            self._apply(read())
        except (YamlError, ValueError, TypeError) as exc:
            raise ScriptError(f"cannot load script: {exc}") from exc

    def _apply(self, config: Node) -> None:
        characters = config["characters"]
        if characters:
            self.id_to_name.clear()
            for key, value in _pairs(characters):
                name = key.as_(str)
                definition = parse_character_def(value)
                self.chapter.character_defs[name] = definition
                if definition.id:
                    self.id_to_name.setdefault(definition.id, name)

        chapter = config["chapter"]
        if not chapter:
            return
        title = chapter["title"]
        if title:
            self.chapter.title = title.as_(str)
        scenes = chapter["scenes"]
        if scenes:
            for scene_node in scenes:
                self.chapter.scenes.append(self._parse_scene(scene_node))

    def _parse_scene(self, node: Node) -> Scene:
        scene = Scene(
            scene_id=node["scene_id"].get(int, 0),
            background=node["background"].get(str, ""),
        )
        characters = node["characters"]
        if characters:
            scene.characters = [parse_character_instance(item) for item in characters]
        dialogues = node["dialogues"]
        if dialogues:
            for item in dialogues:
                kind = _text(item, "type")
                if kind in ("dialogue", "narration"):
                    scene.script.append(parse_dialogue(item, self.id_to_name))
                elif kind == "command":
                    scene.script.append(parse_command(item))
        return scene