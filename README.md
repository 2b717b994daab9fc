# jfegal

`jfegal` is a small engine for visual novels. A chapter is written as a YAML
document: a library of characters with their sprites, and a list of scenes,
each with a background, the characters on stage and a sequence of dialogue
lines, narration and commands. The package reads such chapters, steps through
them scene by scene, and keeps the state a renderer needs: which background
is fading in, which characters are shown or dimmed, what name and text sit in
the dialogue box, whether a chapter title is showing, and what each audio
channel has been told to do.

## What it does not do

`jfegal` draws nothing and plays no sound. There is no window, no
command-line program and no save or load of game progress. Images are
obtained through a loader function you pass to `ScenePlayer` (by default the
path string itself stands in for the image), and `AudioChannel` only records
the path, play state, looping and volume it was given. Wiring these to a
screen and a sound system is up to you.

## Contents

- `jfegal.script` – the chapter model (`Chapter`, `Scene`, `CharacterDef`,
  `CharacterInstance`, `Dialogue`, `DialogueKind`, `Command`) and
  `GameScript`, which loads a chapter from a file (`load_file`) or a string
  (`loads`) and raises `ScriptError` when it cannot.
- `jfegal.scriptreader` – `GameScriptParser`, a stricter reader for a simpler
  chapter layout where each scene lists its characters and lines directly;
  it raises `ScriptReaderError` on failure.
- `jfegal.player` – `ScenePlayer`, which runs a loaded chapter, plus
  `Layer`, `AudioChannel`, `character_position` and `fade_alphas`.
- `jfegal.controls` – `Control`, `Rect` and `ClickPaper`: bounds,
  hit-testing and mouse hooks for on-screen widgets.
- `jfegal.yaml` – a YAML node model with shared-handle semantics and typed
  access (`jfegal.yaml.node`: `Node`, `load`, `load_file`, `load_all`,
  `load_all_from_file`, `clone`), scalar conversion helpers
  (`jfegal.yaml.convert`), base64 `Binary` data (`jfegal.yaml.binary`),
  emitter enums and manipulator values (`jfegal.yaml.style`,
  `jfegal.yaml.manip`) and the error classes (`jfegal.yaml.errors`).

## Writing a chapter

```yaml
characters:
  Shino:
    id: shino
    base_pos: right
    offset: [0, 20]
    sprites:
      normal: images/shino_normal.png
      smile: images/shino_smile.png

chapter:
  title: First Day
  scenes:
    - scene_id: 1
      background: images/campus.png
      characters:
        - name: Shino
          sprite: normal
      dialogues:
        - type: command
          cmd: sound
          soundtype: bgm
          action: play
          param: audio/theme.ogg
        - type: narration
          text: The campus is quiet this morning.
        - type: dialogue
          speaker: shino
          sprite: smile
          text: Good morning!
```

A `dialogue` line names its speaker by character `id`, which is mapped to
the character's name; it is shown under that name unless a `displayname` is
given, and its text is wrapped in 「」. Narration has no speaker. Entries of
any other `type` are ignored.

Commands carry `cmd`, `action` and, where needed, `param` and `soundtype`:

- `sound` with `soundtype` `bgm` (looping), `voice` or `sfx`, and action
  `play`, `pause` or `volumn` (the volume is read from `param`).
- `bg` with action `change` (new background image) or `title` (shows `param`
  as the chapter title for four seconds).
- `character` with action `show` or `hide`; `param` is the character name.
- `chapter` with action `drop`; `param` is the id of the scene to jump to.

A character's sprite is placed 100 (left), 800 (right) or 450 (any other
`base_pos`) pixels across and 300 down, moved by its offset; an instance's
offset replaces the definition's.

## Loading a chapter

```python
from jfegal.script import GameScript

script = GameScript()
script.load_file("chapter1.yaml")

shino = script.character_def("Shino")
same = script.character_def_by_id("shino")
print(shino.base_pos, shino.offset, sorted(shino.sprites))
print([scene.scene_id for scene in script.chapter.scenes])
```

Each load adds its scenes to `script.chapter` and replaces character
definitions of the same name.

## Playing it back

```python
from jfegal.player import ScenePlayer

player = ScenePlayer(loader=my_image_loader)   # path -> image, or None
player.load_script("chapter1.yaml")
player.load_scene(1)          # False if there is no such scene

print(player.character_name, player.dialogue_text)
player.advance()              # next line, as a click would do
player.on_key("space")        # "space"/"return" advance, "escape" toggles the box
player.on_right_click()       # hide or show the dialogue box
player.update_fade(200)       # advance the background cross-fade by 200 ms
player.update_title(200)      # count down a showing chapter title
```

`load_scene` runs commands until the first line of dialogue and shows it;
`advance` moves to the next line, or shows the dialogue box again if it was
hidden. The speaking character is shown at full opacity and others on stage
are dimmed. Backgrounds cross-fade over 400 ms between
`player.background_a` and `player.background_b`.

## Working with YAML nodes

```python
from jfegal.yaml.node import load

doc = load("offset: [10, -5]\nname: Shino\n")
print(doc.is_map())
print(doc["offset"].as_(list[int]))      # [10, -5]
print(doc["missing"].get(str, "none"))   # a missed lookup falls back
for key, value in doc.items():
    print(key.as_(str), value)
```

## Running the tests

Install the package with its `test` extra and run `pytest`.