"""Layer grammar and tag-matching rules.

A layer is a compose fragment whose file name encodes the tags it
applies to. Three forms are recognized (with the default naming)::

    compose.yml                  base   — always included, first
    compose.<t1>[.<tN>].yml      simple — included if ANY tag is active
    compose.x.<t1>.<t2>[...].yml cross  — included only if ALL tags are active

The marker ``x`` only makes a cross layer when it is followed by two or
more tags; ``compose.x.a.yml`` parses as a simple layer tagged
``("x", "a")``.

INVARIANT: the wildcard tag satisfies every simple layer and no cross
layer.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

WILDCARD = "*"
GPU_TAG = "nvidia"


class LayerKind(StrEnum):
    """Grammar form of a layer file name."""

    BASE = "base"
    SIMPLE = "simple"
    CROSS = "cross"


@dataclass(frozen=True)
class Layer:
    """A compose fragment discovered on disk."""

    path: Path
    kind: LayerKind
    tags: tuple[str, ...] = ()

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def is_base(self) -> bool:
        return self.kind is LayerKind.BASE

    @property
    def is_cross(self) -> bool:
        return self.kind is LayerKind.CROSS

    @property
    def specificity(self) -> int:
        """Number of tag segments; the base layer has none."""
        return len(self.tags)


def parse_layer(
    path: Path,
    *,
    base_name: str = "compose.yml",
    prefix: str = "compose",
    cross_marker: str = "x",
    suffix: str = ".yml",
) -> Layer | None:
    """Parse a file name into a :class:`Layer`, or None if it is not one.

    Examples:
        >>> parse_layer(Path("compose.yml")).kind
        <LayerKind.BASE: 'base'>
        >>> parse_layer(Path("compose.nvidia.ollama.yml")).tags
        ('nvidia', 'ollama')
        >>> parse_layer(Path("compose.x.langflow.postgres.yml")).is_cross
        True
        >>> parse_layer(Path("README.md")) is None
        True
    """
    name = path.name
    if name == base_name:
        return Layer(path=path, kind=LayerKind.BASE)

    head = f"{prefix}."
    if not name.startswith(head) or not name.endswith(suffix):
        return None
    middle = name[len(head) : len(name) - len(suffix)]
    if not middle:
        return None

    segments = tuple(middle.split("."))
    if any(not segment for segment in segments):
        return None

    if segments[0] == cross_marker and len(segments) >= 3:
        return Layer(path=path, kind=LayerKind.CROSS, tags=segments[1:])
    return Layer(path=path, kind=LayerKind.SIMPLE, tags=segments)


def layer_sort_key(layer: Layer) -> tuple[int, str]:
    """Merge-order key: base first, then ascending specificity.

    Ties are broken lexicographically by file name so the order never
    depends on directory listing order.
    """
    if layer.is_base:
        return (-1, "")
    return (layer.specificity, layer.name)


@dataclass(frozen=True)
class OptionSet:
    """Active tags for a single resolution pass."""

    tags: tuple[str, ...] = ()
    wildcard: str = WILDCARD

    @classmethod
    def build(
        cls,
        explicit: Iterable[str] = (),
        defaults: Iterable[str] = (),
        *,
        gpu: bool = False,
        gpu_tag: str = GPU_TAG,
        wildcard: str = WILDCARD,
    ) -> OptionSet:
        """Merge default, explicit, and capability tags.

        First-seen order is kept; blanks and duplicates are dropped.
        """
        seen: dict[str, None] = {}
        candidates = [*defaults, *explicit]
        if gpu:
            candidates.append(gpu_tag)
        for tag in candidates:
            tag = tag.strip()
            if tag:
                seen.setdefault(tag, None)
        return cls(tags=tuple(seen), wildcard=wildcard)

    @property
    def has_wildcard(self) -> bool:
        return self.wildcard in self.tags

    def __contains__(self, tag: object) -> bool:
        return tag in self.tags

    def includes(self, layer: Layer) -> bool:
        """Whether *layer* belongs in a plan built from this option set."""
        if layer.is_base:
            return True
        if layer.is_cross:
            return all(tag in self.tags for tag in layer.tags)
        if self.has_wildcard:
            return True
        return any(tag in self.tags for tag in layer.tags)


def select_layers(layers: Iterable[Layer], options: OptionSet) -> list[Layer]:
    """Filter non-base *layers* by *options* and sort them into merge order."""
    matched = [layer for layer in layers if not layer.is_base and options.includes(layer)]
    return sorted(matched, key=layer_sort_key)
