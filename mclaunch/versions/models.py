"""Data models for version documents.

Raw JSON is decoded exactly once, at the boundary where a document is read
(``VersionManager`` for descriptors, ``AssetCache`` for asset indexes).
Everything downstream works with these typed values.
"""

import json
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import DescriptorParseError


# Wire models: the version index

class VersionInfo(BaseModel):
    id: str
    type: str = "release"
    url: str
    time: Optional[datetime] = None
    releaseTime: Optional[datetime] = None
    sha1: Optional[str] = None
    complianceLevel: int = 0


class VersionManifest(BaseModel):
    latest: Dict[str, str] = Field(default_factory=dict)
    versions: List[VersionInfo]

    @classmethod
    def from_json(cls, raw: Union[str, bytes], source: str = "version index") -> "VersionManifest":
        return _decode(cls, raw, source)

    def find(self, version_id: str) -> Optional[VersionInfo]:
        for version in self.versions:
            if version.id == version_id:
                return version
        return None


# Wire models: the per-version descriptor

class Download(BaseModel):
    path: Optional[str] = None
    sha1: Optional[str] = None
    size: Optional[int] = None
    url: Optional[str] = None


class RawLibraryDownloads(BaseModel):
    artifact: Optional[Download] = None
    classifiers: Dict[str, Download] = Field(default_factory=dict)


class RawRuleOs(BaseModel):
    name: Optional[str] = None
    version: Optional[str] = None
    arch: Optional[str] = None


class RawRule(BaseModel):
    action: str = "allow"
    os: Optional[RawRuleOs] = None
    features: Optional[Dict[str, bool]] = None


class RawLibrary(BaseModel):
    name: str = ""
    downloads: Optional[RawLibraryDownloads] = None
    rules: List[RawRule] = Field(default_factory=list)
    natives: Optional[Dict[str, str]] = None


class RawArgument(BaseModel):
    rules: List[RawRule] = Field(default_factory=list)
    value: Union[str, List[str]]


class RawArguments(BaseModel):
    game: List[Union[str, RawArgument]] = Field(default_factory=list)
    jvm: Optional[List[Union[str, RawArgument]]] = None


class RawAssetIndexRef(BaseModel):
    id: str
    url: str
    sha1: Optional[str] = None
    size: Optional[int] = None
    totalSize: Optional[int] = None


class RawClientDownloads(BaseModel):
    client: Download


class RawVersion(BaseModel):
    id: str
    type: str = "release"
    mainClass: str
    assetIndex: RawAssetIndexRef
    downloads: RawClientDownloads
    libraries: List[RawLibrary] = Field(default_factory=list)
    arguments: Optional[RawArguments] = None
    minecraftArguments: Optional[str] = None


# Typed domain values

class PlatformRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    action: str = "allow"
    os_name: Optional[str] = None
    features: Optional[Dict[str, bool]] = None

    @classmethod
    def from_raw(cls, raw: RawRule) -> "PlatformRule":
        return cls(
            action=raw.action,
            os_name=raw.os.name if raw.os else None,
            features=raw.features,
        )


class LibraryEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = ""
    artifact_path: Optional[str] = None
    artifact_url: Optional[str] = None
    native_classifier_path: Optional[str] = None
    native_classifier_url: Optional[str] = None
    rules: List[PlatformRule] = Field(default_factory=list)

    @property
    def has_artifact(self) -> bool:
        return bool(self.artifact_path and self.artifact_url)

    @property
    def has_native(self) -> bool:
        return bool(self.native_classifier_path and self.native_classifier_url)


class ArgumentEntry(BaseModel):
    """One template entry: plain strings have no rules."""

    model_config = ConfigDict(frozen=True)

    values: List[str]
    rules: List[PlatformRule] = Field(default_factory=list)


class AssetIndexRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    url: str


class VersionDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    type: str = "release"
    main_class: str
    asset_index: AssetIndexRef
    client_download_url: str
    libraries: List[LibraryEntry] = Field(default_factory=list)
    jvm_arg_template: Optional[List[ArgumentEntry]] = None
    game_arg_template: List[ArgumentEntry] = Field(default_factory=list)
    # Native classifiers in ``libraries`` were picked for this OS
    target_os: str

    @classmethod
    def from_json(cls, raw: Union[str, bytes], target_os: str,
                  source: str = "version descriptor") -> "VersionDescriptor":
        """Decode a descriptor document, picking native classifiers for ``target_os``."""
        version = _decode(RawVersion, raw, source)
        if not version.downloads.client.url:
            raise DescriptorParseError(source, "missing downloads.client.url")

        arguments = version.arguments
        if arguments is not None:
            jvm = [_argument_entry(a) for a in arguments.jvm] if arguments.jvm is not None else None
            game = [_argument_entry(a) for a in arguments.game]
        else:
            # Older schema: a single whitespace separated string, no jvm template
            jvm = None
            game = [ArgumentEntry(values=[part]) for part in (version.minecraftArguments or "").split()]

        return cls(
            id=version.id,
            type=version.type,
            main_class=version.mainClass,
            asset_index=AssetIndexRef(id=version.assetIndex.id, url=version.assetIndex.url),
            client_download_url=version.downloads.client.url,
            libraries=[_library_entry(lib, target_os) for lib in version.libraries],
            jvm_arg_template=jvm,
            game_arg_template=game,
            target_os=target_os,
        )


class AssetObject(BaseModel):
    model_config = ConfigDict(frozen=True)

    hash: str = Field(pattern=r"^[0-9a-fA-F]{40}$")
    size: int = 0


class AssetIndex(BaseModel):
    model_config = ConfigDict(frozen=True)

    objects: Dict[str, AssetObject] = Field(default_factory=dict)

    @classmethod
    def from_json(cls, raw: Union[str, bytes], source: str = "asset index") -> "AssetIndex":
        return _decode(cls, raw, source)


def native_classifier_key(raw: RawLibrary, target_os: str) -> str:
    """Classifier key holding the native bundle for ``target_os``.

    Legacy descriptors map each OS to a classifier name that may contain an
    ``${arch}`` token; newer ones use ``natives-<os>`` directly.
    """
    if raw.natives and target_os in raw.natives:
        return raw.natives[target_os].replace("${arch}", "64")
    return f"natives-{target_os}"


def _library_entry(raw: RawLibrary, target_os: str) -> LibraryEntry:
    artifact = raw.downloads.artifact if raw.downloads else None
    native = None
    if raw.downloads:
        native = raw.downloads.classifiers.get(native_classifier_key(raw, target_os))
    return LibraryEntry(
        name=raw.name,
        artifact_path=artifact.path if artifact else None,
        artifact_url=artifact.url if artifact else None,
        native_classifier_path=native.path if native else None,
        native_classifier_url=native.url if native else None,
        rules=[PlatformRule.from_raw(rule) for rule in raw.rules],
    )


def _argument_entry(raw: Union[str, RawArgument]) -> ArgumentEntry:
    if isinstance(raw, str):
        return ArgumentEntry(values=[raw])
    values = [raw.value] if isinstance(raw.value, str) else list(raw.value)
    return ArgumentEntry(values=values, rules=[PlatformRule.from_raw(rule) for rule in raw.rules])


def _decode(model: Any, raw: Union[str, bytes], source: str):
    try:
        data = json.loads(raw)
        return model.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise DescriptorParseError(source, e) from e
