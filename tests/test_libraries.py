"""Tests for library resolution."""

import pytest

from conftest import descriptor_json, dumps, library
from mclaunch.versions.libraries import LibraryResolver
from mclaunch.versions.models import VersionDescriptor


def _descriptor(libraries):
    return VersionDescriptor.from_json(dumps(descriptor_json(libraries=libraries)), "linux")


def test_resolution_keeps_declaration_order(settings):
    descriptor = _descriptor([
        library("a", "a/a.jar"),
        library("b", "shared/x.jar"),
        library("c", "shared/x.jar"),
    ])
    resolved = LibraryResolver(settings).resolve(descriptor, "linux")

    assert [a.name for a in resolved.artifacts] == ["a", "b", "c"]
    assert resolved.artifacts[1].path == resolved.artifacts[2].path == settings.libraries_dir / "shared/x.jar"


def test_platform_rules_filter_libraries(settings):
    descriptor = _descriptor([
        library("win", "win.jar", rules=[{"action": "allow", "os": {"name": "windows"}}]),
        library("any", "any.jar"),
        library("linux", "linux.jar", rules=[{"action": "allow", "os": {"name": "linux"}}]),
    ])
    resolved = LibraryResolver(settings).resolve(descriptor, "linux")

    assert [a.name for a in resolved.artifacts] == ["any", "linux"]


def test_library_may_contribute_artifact_and_native(settings):
    descriptor = _descriptor([library("lwjgl", "lwjgl.jar", native_os="linux")])
    resolved = LibraryResolver(settings).resolve(descriptor, "linux")

    assert [a.name for a in resolved.artifacts] == ["lwjgl"]
    assert [n.name for n in resolved.natives] == ["lwjgl"]
    assert resolved.natives[0].path == settings.libraries_dir / "natives/lwjgl-natives-linux.jar"


def test_native_only_library_is_not_on_classpath(settings):
    descriptor = _descriptor([library("platform", native_os="linux")])
    resolved = LibraryResolver(settings).resolve(descriptor, "linux")

    assert resolved.artifacts == []
    assert len(resolved.natives) == 1


def test_resolve_defaults_to_descriptor_os(settings):
    descriptor = _descriptor([library("lwjgl", "lwjgl.jar", native_os="linux")])

    resolved = LibraryResolver(settings).resolve(descriptor)

    assert resolved.natives[0].path == settings.libraries_dir / "natives/lwjgl-natives-linux.jar"


def test_resolve_rejects_other_os_than_decoded_for(settings):
    descriptor = _descriptor([library("lwjgl", "lwjgl.jar", native_os="linux")])

    with pytest.raises(ValueError, match="decoded for linux, not windows"):
        LibraryResolver(settings).resolve(descriptor, "windows")
