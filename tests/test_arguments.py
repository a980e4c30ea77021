"""Tests for argument template rendering."""

import pytest

from mclaunch.core.arguments import ArgumentTemplater, substitute
from mclaunch.versions.models import ArgumentEntry, PlatformRule

BINDINGS = {
    "auth_player_name": "Steve",
    "version_name": "1.21.5",
    "game_directory": "/games/mc",
    "assets_root": "/games/mc/assets",
    "assets_index_name": "24",
    "auth_uuid": "00000000-0000-0000-0000-000000000000",
    "auth_access_token": "0",
    "user_type": "legacy",
    "version_type": "release",
    "natives_directory": "/games/mc/versions/1.21.5/natives",
}


def test_substitution_in_single_entry():
    rendered = ArgumentTemplater("linux").render(
        [ArgumentEntry(values=["--username ${auth_player_name}"])], BINDINGS)
    assert rendered == ["--username Steve"]


def test_entries_without_placeholders_pass_through():
    rendered = ArgumentTemplater("linux").render([ArgumentEntry(values=["--fullscreen"])], BINDINGS)
    assert rendered == ["--fullscreen"]


def test_every_occurrence_is_replaced():
    assert substitute("${version_name}-${version_name}", BINDINGS) == "1.21.5-1.21.5"


def test_unknown_placeholders_are_left_alone():
    assert substitute("--width ${resolution_width}", BINDINGS) == "--width ${resolution_width}"


def test_conditional_entries_use_platform_rules():
    template = [
        ArgumentEntry(values=["-XstartOnFirstThread"], rules=[PlatformRule(action="allow", os_name="osx")]),
        ArgumentEntry(values=["--demo"], rules=[PlatformRule(action="allow", features={"is_demo_user": True})]),
        ArgumentEntry(values=["-Dos.name=Linux"], rules=[PlatformRule(action="allow", os_name="linux")]),
    ]
    assert ArgumentTemplater("linux").render(template, BINDINGS) == ["-Dos.name=Linux"]
    assert ArgumentTemplater("osx").render(template, BINDINGS) == ["-XstartOnFirstThread"]


def test_missing_jvm_template_uses_default():
    rendered = ArgumentTemplater("linux").render_jvm(None, BINDINGS)
    assert rendered == ["-Djava.library.path=/games/mc/versions/1.21.5/natives"]


def test_required_bindings_are_enforced():
    bindings = dict(BINDINGS)
    del bindings["auth_uuid"]
    with pytest.raises(KeyError):
        ArgumentTemplater("linux").render([], bindings)
