"""Library resolution: which libraries apply and where they live."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from ..config import LauncherSettings
from .models import VersionDescriptor
from .rules import evaluate_rules

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedArtifact:
    name: str
    path: Path
    url: str


@dataclass(frozen=True)
class ResolvedNative:
    name: str
    path: Path
    url: str


@dataclass
class ResolvedLibraries:
    artifacts: List[ResolvedArtifact] = field(default_factory=list)
    natives: List[ResolvedNative] = field(default_factory=list)


class LibraryResolver:
    def __init__(self, settings: LauncherSettings):
        self.settings = settings

    def resolve(self, descriptor: VersionDescriptor,
                target_os: Optional[str] = None) -> ResolvedLibraries:
        """Partition applicable libraries into classpath artifacts and native bundles.

        Both lists keep the order the descriptor declares, which later
        becomes classpath order. Native classifiers are fixed when the
        descriptor is decoded, so ``target_os`` must match the OS it was
        decoded for.
        """
        target_os = target_os or descriptor.target_os
        if target_os != descriptor.target_os:
            raise ValueError(
                f"Descriptor {descriptor.id} was decoded for {descriptor.target_os}, not {target_os}"
            )
        resolved = ResolvedLibraries()
        for lib in descriptor.libraries:
            if not evaluate_rules(lib.rules, target_os):
                log.debug("Skipping %s: rules exclude %s", lib.name, target_os)
                continue
            if lib.has_artifact:
                resolved.artifacts.append(ResolvedArtifact(
                    name=lib.name,
                    path=self.settings.library_path(lib.artifact_path),
                    url=lib.artifact_url,
                ))
            if lib.has_native:
                resolved.natives.append(ResolvedNative(
                    name=lib.name,
                    path=self.settings.library_path(lib.native_classifier_path),
                    url=lib.native_classifier_url,
                ))

        log.info("Resolved %d libraries and %d native bundles for %s",
                 len(resolved.artifacts), len(resolved.natives), target_os)
        return resolved
