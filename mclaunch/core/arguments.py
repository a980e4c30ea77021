"""Argument template rendering."""

import re
from typing import List, Mapping, Optional, Sequence

from ..versions.models import ArgumentEntry
from ..versions.rules import evaluate_rules

PLACEHOLDER = re.compile(r"\$\{([A-Za-z0-9_]+)\}")

# Offline placeholders
OFFLINE_UUID = "00000000-0000-0000-0000-000000000000"
OFFLINE_ACCESS_TOKEN = "0"
LEGACY_USER_TYPE = "legacy"
RELEASE_VERSION_TYPE = "release"

REQUIRED_BINDINGS = (
    "auth_player_name",
    "version_name",
    "game_directory",
    "assets_root",
    "assets_index_name",
    "auth_uuid",
    "auth_access_token",
    "user_type",
    "version_type",
)

DEFAULT_JVM_TEMPLATE = [ArgumentEntry(values=["-Djava.library.path=${natives_directory}"])]


def substitute(value: str, bindings: Mapping[str, str]) -> str:
    """Replace every bound ``${name}`` in ``value``; unknown names are left alone."""
    return PLACEHOLDER.sub(lambda m: bindings.get(m.group(1), m.group(0)), value)


class ArgumentTemplater:
    def __init__(self, target_os: str, features: Optional[Mapping[str, bool]] = None):
        self.target_os = target_os
        self.features = features or {}

    def render(self, template: Sequence[ArgumentEntry], bindings: Mapping[str, str]) -> List[str]:
        missing = [name for name in REQUIRED_BINDINGS if name not in bindings]
        if missing:
            raise KeyError(f"Missing argument bindings: {', '.join(missing)}")

        rendered = []
        for entry in template:
            if not evaluate_rules(entry.rules, self.target_os, self.features):
                continue
            rendered.extend(substitute(value, bindings) for value in entry.values)
        return rendered

    def render_jvm(self, template: Optional[Sequence[ArgumentEntry]],
                   bindings: Mapping[str, str]) -> List[str]:
        """Render the jvm template, or the built-in default when there is none."""
        if template is None:
            template = DEFAULT_JVM_TEMPLATE
        return self.render(template, bindings)

    def render_game(self, template: Sequence[ArgumentEntry], bindings: Mapping[str, str]) -> List[str]:
        return self.render(template, bindings)
