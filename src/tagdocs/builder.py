"""Fold per-file extraction results into one DocumentModel."""

from __future__ import annotations

import logging
import re
from collections.abc import Collection, Iterable
from concurrent.futures import ThreadPoolExecutor

from .extractors import DEFAULT_RETURN_TYPES, extract_file
from .models import (
    BuildResult,
    ClassDoc,
    Diagnostic,
    DocumentModel,
    FunctionDoc,
    ParsedFile,
)

log = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(name: str, class_name: str = "") -> str:
    """Lower-case URL-safe slug for ``class/name`` (or just ``name``)."""
    raw = f"{class_name}/{name}" if class_name else name
    slug = _NON_ALNUM.sub("-", raw.lower()).strip("-")
    return slug or "function"


class AnchorRegistry:
    """Hands out anchors that are unique across the whole model."""

    def __init__(self) -> None:
        self._used: set[str] = set()

    def claim(self, slug: str) -> str:
        anchor = slug
        n = 2
        while anchor in self._used:
            anchor = f"{slug}-{n}"
            n += 1
        self._used.add(anchor)
        return anchor


def parse_sources(
    sources: Iterable[tuple[str, str]],
    workers: int = 4,
    return_types: Collection[str] = DEFAULT_RETURN_TYPES,
) -> list[ParsedFile]:
    """Extract every file, possibly in parallel, and return results in path order."""
    unique: dict[str, str] = {}
    for path, text in sources:
        unique.setdefault(path, text)

    def _extract(item: tuple[str, str]) -> ParsedFile:
        path, text = item
        return extract_file(text, path, return_types)

    if workers <= 1 or len(unique) <= 1:
        parsed = [_extract(item) for item in unique.items()]
    else:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            parsed = list(pool.map(_extract, unique.items()))

    return sorted(parsed, key=lambda p: p.source_file)


def build_model(parsed_files: Iterable[ParsedFile]) -> BuildResult:
    """Merge parsed files into a DocumentModel.

    Files are folded in path order and blocks in line order, so the model,
    its anchors and everything rendered from it are deterministic.
    """
    model = DocumentModel()
    classes: dict[str, ClassDoc] = {}
    anchors = AnchorRegistry()
    diagnostics: list[Diagnostic] = []
    count = 0

    for parsed in sorted(parsed_files, key=lambda p: p.source_file):
        count += 1
        diagnostics.extend(parsed.diagnostics)

        for matched in parsed.matches:
            class_name = matched.block.class_name or ""
            func = FunctionDoc(
                name=matched.name,
                class_name=class_name,
                description=matched.block.description,
                params=list(matched.params),
                returns=list(matched.returns),
                anchor_id=anchors.claim(slugify(matched.name, class_name)),
            )

            if class_name:
                cls = classes.get(class_name)
                if cls is None:
                    cls = classes[class_name] = ClassDoc(name=class_name)
                    model.classes.append(cls)
                cls.functions.append(func)
            else:
                model.top_level_functions.append(func)

    diagnostics.sort(key=lambda d: (d.source_file, d.line_number))
    log.info(
        "Built model: %d classes, %d functions from %d files",
        len(model.classes),
        len(model.all_functions()),
        count,
    )
    return BuildResult(model=model, diagnostics=diagnostics, files_scanned=count)


def build_from_sources(
    sources: Iterable[tuple[str, str]],
    workers: int = 4,
    return_types: Collection[str] = DEFAULT_RETURN_TYPES,
) -> BuildResult:
    """Parse ``(path, text)`` pairs and build the model in one step."""
    return build_model(parse_sources(sources, workers, return_types))
