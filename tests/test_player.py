import pytest

from jfegal.player import (
    AudioChannel,
    Layer,
    ScenePlayer,
    character_position,
    fade_alphas,
)
from jfegal.script import CharacterDef, CharacterInstance, Command, ScriptError

SCRIPT = """
characters:
  Alice:
    id: a
    base_pos: left
    offset: [10, 20]
    sprites:
      normal: alice_normal.png
      smile: alice_smile.png
  Bob:
    id: b
    base_pos: right
    sprites:
      normal: bob.png
  Narrator:
    id: nar
chapter:
  title: First
  scenes:
    - scene_id: 1
      background: bg1.png
      characters:
        - name: Alice
        - name: Bob
          offset: [5, -5]
        - name: Narrator
        - name: Ghost
      dialogues:
        - type: command
          cmd: sound
          soundtype: bgm
          action: play
          param: theme.ogg
        - type: dialogue
          speaker: a
          sprite: smile
          text: Hello
        - type: dialogue
          speaker: b
          displayname: Robert
          text: Hi
        - type: narration
          text: Quiet.
        - type: command
          cmd: chapter
          action: drop
          param: "2"
    - scene_id: 2
      background: bg2.png
      dialogues:
        - type: narration
          text: Scene two.
    - scene_id: 3
      dialogues:
        - type: command
          cmd: sound
          soundtype: sfx
          action: volumn
          param: loud
        - type: narration
          text: After.
"""


def _loader(path):
    if not path or path.startswith("missing"):
        return None
    return path


@pytest.fixture
def player():
    p = ScenePlayer(loader=_loader)
    p.script.loads(SCRIPT)
    return p


def test_character_position_bases():
    inst = CharacterInstance(ref_name="x")
    assert character_position(CharacterDef(base_pos="left"), inst) == (100.0, 300.0, 300.0, 500.0)
    assert character_position(CharacterDef(base_pos="right"), inst) == (800.0, 300.0, 300.0, 500.0)
    assert character_position(CharacterDef(base_pos="center"), inst) == (450.0, 300.0, 300.0, 500.0)


def test_character_position_instance_offset_wins():
    with_instance = character_position(
        CharacterDef(base_pos="right"), CharacterInstance(offset=[7, -3])
    )
    with_definition = character_position(
        CharacterDef(base_pos="right", offset=[7, -3]), CharacterInstance()
    )
    assert with_instance == with_definition


def test_fade_alphas_endpoints_and_clamp():
    assert fade_alphas(0) == (0, 255)
    assert fade_alphas(400) == (255, 0)
    assert fade_alphas(10_000) == (255, 0)
    assert fade_alphas(-50) == (0, 255)


def test_fade_alphas_monotonic():
    steps = [fade_alphas(ms) for ms in range(0, 401, 16)]
    ins = [a for a, _ in steps]
    outs = [b for _, b in steps]
    assert ins == sorted(ins)
    assert outs == sorted(outs, reverse=True)
    assert all(254 <= a + b <= 255 for a, b in steps)


def test_audio_channel_state():
    channel = AudioChannel()
    channel.load("song.ogg")
    channel.play(True)
    assert (channel.path, channel.playing, channel.looping) == ("song.ogg", True, True)
    channel.pause()
    assert channel.playing is False
    channel.set_volume(0.25)
    assert channel.volume == 0.25


def test_load_scene_shows_first_line(player):
    assert player.load_scene(1) is True
    assert player.bgm.path == "theme.ogg"
    assert player.bgm.playing and player.bgm.looping
    assert player.character_name == "Alice"
    assert player.dialogue_text == "「Hello」"
    assert player.animating is True
    assert set(player.characters) == {"Alice", "Bob"}


def test_load_scene_places_and_highlights(player):
    player.load_scene(1)
    alice = player.characters["Alice"]
    bob = player.characters["Bob"]
    assert alice.alpha == 255
    assert bob.alpha == 0
    assert alice.image == "alice_smile.png"
    assert alice.rect == character_position(
        player.script.character_def("Alice"), CharacterInstance(ref_name="Alice")
    )
    assert bob.rect == character_position(
        player.script.character_def("Bob"), CharacterInstance(ref_name="Bob", offset=[5, -5])
    )


def test_advance_through_scene(player):
    player.load_scene(1)
    player.advance()
    assert player.character_name == "Robert"
    assert player.dialogue_text == "「Hi」"
    assert player.characters["Bob"].alpha == 255
    assert player.characters["Alice"].alpha == 150

    player.advance()
    assert player.character_name == ""
    assert player.dialogue_text == "Quiet."
    assert player.characters["Bob"].alpha == 150

    player.advance()
    assert player.dialogue_text == "Scene two."
    assert player.characters == {}


def test_backgrounds_alternate_and_fade(player):
    player.load_scene(1)
    assert player.background_a.image == "bg1.png"
    assert player.update_fade(200) is True
    assert 254 <= player.background_a.alpha + player.background_b.alpha <= 255
    assert player.update_fade(200) is False
    assert (player.background_a.alpha, player.background_b.alpha) == (255, 0)

    player.load_scene(2)
    assert player.background_b.image == "bg2.png"
    player.update_fade(400)
    assert (player.background_a.alpha, player.background_b.alpha) == (0, 255)


def test_missing_background_keeps_layers(player):
    player.load_scene(3)
    assert player.background_a.image is None
    assert player.background_b.image is None
    assert player.update_fade(100) is False


def test_failing_command_is_skipped(player):
    player.load_scene(3)
    assert player.dialogue_text == "After."
    assert player.sfx.volume == 1.0


def test_execute_bad_volume_raises(player):
    with pytest.raises(ValueError):
        player.execute(Command(type="sound", action="volumn", param="loud", soundtype="voice"))


def test_execute_volume(player):
    player.execute(Command(type="sound", action="volumn", param="0.5", soundtype="voice"))
    assert player.voice.volume == 0.5


def test_execute_voice_play_does_not_loop(player):
    player.execute(Command(type="sound", action="play", param="line.wav", soundtype="voice"))
    assert player.voice.playing is True
    assert player.voice.looping is False


def test_character_show_and_hide(player):
    player.load_scene(1)
    player.execute(Command(type="character", action="hide", param="Alice"))
    assert player.characters["Alice"].alpha == 0
    player.execute(Command(type="character", action="show", param="Bob"))
    assert player.characters["Bob"].alpha == 255


def test_title_timer(player):
    player.execute(Command(type="bg", action="title", param="Chapter One"))
    assert player.title_visible is True
    assert player.title_text == "Chapter One"
    assert player.update_title(3999) is True
    assert player.update_title(1) is False
    assert player.title_visible is False


def test_bad_drop_param_is_ignored(player):
    player.load_scene(1)
    player.execute(Command(type="chapter", action="drop", param="x"))
    assert player.dialogue_text == "「Hello」"


def test_unknown_scene(player):
    assert player.load_scene(99) is False
    assert player.characters == {}
    assert len(player.queue) == 0


def test_hidden_dialog_is_shown_before_advancing(player):
    player.load_scene(1)
    player.on_right_click()
    assert player.dialog_visible is False
    player.advance()
    assert player.dialog_visible is True
    assert player.dialogue_text == "「Hello」"


def test_keys(player):
    player.load_scene(1)
    player.on_key("escape")
    assert player.dialog_visible is False
    player.on_key("Escape")
    assert player.dialog_visible is True
    player.on_key("space")
    assert player.dialogue_text == "「Hi」"
    player.on_key("return")
    assert player.dialogue_text == "Quiet."


def test_switch_background_direct():
    p = ScenePlayer()
    p.switch_background("one.png")
    assert p.background_a.image == "one.png"
    assert (p.background_a.alpha, p.background_b.alpha) == (0, 255)
    p.update_fade(400)
    p.switch_background("two.png")
    assert p.background_b.image == "two.png"


def test_layer_defaults():
    layer = Layer(image="x.png")
    assert (layer.alpha, layer.visible) == (255, True)


def test_load_script_from_file(tmp_path):
    path = tmp_path / "chapter.yaml"
    path.write_text(SCRIPT, encoding="utf-8")
    p = ScenePlayer(loader=_loader)
    p.load_script(path)
    assert p.load_scene(2) is True
    assert p.dialogue_text == "Scene two."


def test_load_script_missing_file(tmp_path):
    with pytest.raises(ScriptError):
        ScenePlayer().load_script(tmp_path / "absent.yaml")