"""Watch events and the event-to-action policy table."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from app_compiler.contexts.build_pipeline.domain.classifier import PathClassifier
from app_compiler.contexts.build_pipeline.domain.models import BuildDomain


class WatchEventKind(str, Enum):
    ADD = "add"
    CHANGE = "change"
    UNLINK = "unlink"
    ADD_DIR = "addDir"
    UNLINK_DIR = "unlinkDir"

    @property
    def is_dir_event(self) -> bool:
        return self in (WatchEventKind.ADD_DIR, WatchEventKind.UNLINK_DIR)


@dataclass(frozen=True)
class WatchEvent:
    kind: WatchEventKind
    path: Path


class WatchAction(str, Enum):
    REBUILD_STYLES = "rebuild_styles"
    MIRROR_FILE = "mirror_file"
    REMOVE_FILE = "remove_file"
    MIRROR_DIR = "mirror_dir"
    REMOVE_DIR = "remove_dir"


class WatchState(str, Enum):
    IDLE = "idle"
    HANDLING = "handling"


def plan_actions(event: WatchEvent, classifier: PathClassifier) -> list[WatchAction]:
    """
    Minimal actions keeping the output tree consistent with one event.

    | Event        | Script | Style          | Asset       |
    |--------------|--------|----------------|-------------|
    | add / change | -      | rebuild styles | mirror file |
    | unlink       | -      | rebuild styles | remove file |
    | addDir       | -      | -              | mirror dir  |
    | unlinkDir    | -      | rebuild styles | remove dir  |

    Script events need nothing: the compiler's own watch mode picks them up.
    A removed directory under the style root may have held sources, so it
    triggers a rebuild as well.
    """
    if event.kind is WatchEventKind.ADD_DIR:
        if classifier.classify_dir(event.path).domain is BuildDomain.ASSET:
            return [WatchAction.MIRROR_DIR]
        return []

    if event.kind is WatchEventKind.UNLINK_DIR:
        actions = []
        if classifier.classify_dir(event.path).domain is BuildDomain.ASSET:
            actions.append(WatchAction.REMOVE_DIR)
        if classifier.is_in_style_root(event.path):
            actions.append(WatchAction.REBUILD_STYLES)
        return actions

    domain = classifier.classify(event.path).domain
    if domain is BuildDomain.STYLE:
        return [WatchAction.REBUILD_STYLES]
    if domain is BuildDomain.ASSET:
        if event.kind is WatchEventKind.UNLINK:
            return [WatchAction.REMOVE_FILE]
        return [WatchAction.MIRROR_FILE]
    return []
