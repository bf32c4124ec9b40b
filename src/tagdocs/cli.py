"""Documentation generator for tag-annotated source files.

Usage:
    tagdocs SOURCE_ROOT              - scan, write docs.json and render the site
    tagdocs --from-json docs.json    - render the site from an existing docs.json

Generates:
    docs.json                 - the document model
    dist/index.html           - rendered documentation (or one page per class)
    dist/search-index.json    - client-side search index
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from .builder import build_from_sources
from .config import Settings
from .errors import NoSourceFilesError, TagdocsError
from .generators import (
    SiteOptions,
    check_output_root,
    default_template_dir,
    load_template_env,
    render_site,
)
from .models import Diagnostic, DocumentModel
from .scanner import discover_files, read_sources
from .serializer import read_docs_json, write_docs_json
from .validators import compute_coverage, validate_model

log = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tagdocs",
        description="Generate a static documentation site from @tag comments.",
    )
    parser.add_argument("source", nargs="?", type=Path, help="source root to scan")
    parser.add_argument("--from-json", type=Path, help="render an existing docs.json")
    parser.add_argument("-o", "--output", type=Path, dest="output_dir")
    parser.add_argument("--docs-json", type=Path)
    parser.add_argument("--template", type=Path, dest="template_dir")
    parser.add_argument("--multi-page", action="store_true", default=None)
    parser.add_argument("--scroll-mode", choices=["baseline", "enhanced"])
    parser.add_argument("--workers", type=int)
    parser.add_argument("--title")
    parser.add_argument("--footer")
    parser.add_argument(
        "--strict", action="store_true", help="fail on undocumented functions"
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def _scan(source: Path, settings: Settings) -> tuple[DocumentModel, list[Diagnostic]]:
    root = source.resolve()
    files = discover_files(root, settings.extensions)
    sources, diagnostics = read_sources(files, root)
    if not sources:
        raise NoSourceFilesError(f"No readable source files under {root}", root)

    result = build_from_sources(sources, settings.workers, settings.return_types)
    print(f"  ✓ {len(sources)}/{len(files)} files scanned")
    diagnostics = sorted(
        diagnostics + result.diagnostics, key=lambda d: (d.source_file, d.line_number)
    )
    return result.model, diagnostics


def main(argv: list[str] | None = None) -> int:
    """Generate all documentation."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.source is None and args.from_json is None:
        parser.error("a source root or --from-json is required")

    try:
        settings = Settings.from_env(
            output_dir=args.output_dir,
            docs_json=args.docs_json,
            template_dir=args.template_dir,
            multi_page=args.multi_page,
            scroll_mode=args.scroll_mode,
            workers=args.workers,
            title=args.title,
            footer=args.footer,
            log_level="DEBUG" if args.verbose else None,
        )
    except ValidationError as e:
        print(f"✗ Invalid settings:\n{e}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    log.debug("Settings: %s", settings)

    try:
        # Fail on a broken bundle or an unsafe output root before anything is written
        load_template_env(settings.template_dir, settings.multi_page)
        check_output_root(
            settings.output_dir,
            args.source,
            args.from_json,
            settings.template_dir or default_template_dir(),
        )

        if args.from_json:
            print(f"Loading {args.from_json}...")
            model = read_docs_json(args.from_json)
            diagnostics: list[Diagnostic] = []
        else:
            print(f"Scanning {args.source}...")
            model, diagnostics = _scan(args.source, settings)

        validation = validate_model(model, strict=args.strict)
        if validation.errors:
            print("\nValidation errors:", file=sys.stderr)
            for err in validation.errors:
                print(f"  ✗ {err}", file=sys.stderr)
            return 1

        written = render_site(
            model,
            settings.output_dir,
            SiteOptions(
                title=settings.title,
                footer=settings.footer,
                multi_page=settings.multi_page,
                scroll_mode=settings.scroll_mode,
                template_dir=settings.template_dir,
                workers=settings.workers,
            ),
        )
        if not args.from_json:
            write_docs_json(model, settings.docs_json)
    except TagdocsError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 1

    for warning in validation.warnings:
        print(f"  ⚠ {warning}")

    funcs = model.all_functions()
    print(
        f"\n{len(model.classes)} classes, {len(funcs)} functions, "
        f"coverage {compute_coverage(model):.0%}"
    )

    if diagnostics:
        print(f"\n{len(diagnostics)} diagnostics:")
        for diag in diagnostics:
            print(f"  ⚠ [{diag.kind}] {diag}")

    print("\nGenerated:")
    if not args.from_json:
        print(f"  {settings.docs_json}")
    for path in written:
        print(f"  {path}")

    print("\nDone!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
