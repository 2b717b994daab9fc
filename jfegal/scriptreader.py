"""A simpler, stricter chapter format with inline character placement."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Callable, Union

from jfegal.yaml.errors import YamlError
from jfegal.yaml.node import Node
from jfegal.yaml.node import load as load_yaml
from jfegal.yaml.node import load_file as load_yaml_file


class ScriptReaderError(Exception):
    """A chapter document could not be read or lacked a required field."""


@dataclass
class SimpleDialogue:
    character: str = ""
    text: str = ""
    effect: str = ""


@dataclass
class SimpleCharacter:
    name: str = ""
    sprite: str = ""
    base_position: str = ""
    offset: list[int] = field(default_factory=list)


@dataclass
class SimpleScene:
    scene_id: int = 0
    background: str = ""
    characters: list[SimpleCharacter] = field(default_factory=list)
    dialogues: list[SimpleDialogue] = field(default_factory=list)


@dataclass
class SimpleChapter:
    title: str = ""
    scenes: list[SimpleScene] = field(default_factory=list)


def _parse_character(node: Node) -> SimpleCharacter:
    character = SimpleCharacter(name=node["name"].as_(str))
    if node["sprite"]:
        character.sprite = node["sprite"].as_(str)
    character.base_position = node["base_position"].as_(str)
    character.offset = node["offset"].as_(list[int])
    return character


def _parse_dialogue(node: Node) -> SimpleDialogue:
    dialogue = SimpleDialogue(
        character=node["character"].as_(str), text=node["text"].as_(str)
    )
    if node["effect"]:
        dialogue.effect = node["effect"].as_(str)
    return dialogue


class GameScriptParser:
    """Reads chapters whose scenes list characters and dialogue lines directly.

    Each load replaces the title and adds its scenes.
    """

    def __init__(self) -> None:
        self.chapter = SimpleChapter()

    def load_file(self, path: Union[str, os.PathLike]) -> None:
        """Load a chapter file; raises ScriptReaderError on failure."""
        self._ingest(lambda: load_yaml_file(path))

    def loads(self, text: str) -> None:
        """Load a chapter from text; raises ScriptReaderError on failure."""
        self._ingest(lambda: load_yaml(text))

    def _ingest(self, read: Callable[[], Node]) -> None:
        try:
            self._apply(read())
        except YamlError as exc:
            raise ScriptReaderError(f"YAML parsing error: {exc}") from exc

    def _apply(self, config: Node) -> None:
        chapter = config["chapter"]
        self.chapter.title = chapter["title"].as_(str)
        for scene_node in chapter["scenes"]:
            scene = SimpleScene(
                scene_id=scene_node["scene_id"].as_(int),
                background=scene_node["background"].as_(str),
            )
            scene.characters = [_parse_character(n) for n in scene_node["characters"]]
            scene.dialogues = [_parse_dialogue(n) for n in scene_node["dialogues"]]
            self.chapter.scenes.append(scene)