"""Static site generation from a DocumentModel.

Generates, under the output root:
    index.html          - all entries (single-page) or a redirect (multi-page)
    {class}.html        - one page per class (multi-page only)
    globals.html        - top-level functions (multi-page only)
    search-index.json   - name/description index for external search tools
    ...                 - every non-.html file of the template bundle

Pages carry their own index in data-name/data-description attributes, which
search.js filters on, so the site works from file:// without fetching
search-index.json.
"""

from __future__ import annotations

import json
import logging
import shutil
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, TemplateError

from .builder import AnchorRegistry, slugify
from .errors import OutputRootError, TemplateBundleError
from .models import DocumentModel, FunctionDoc

log = logging.getLogger(__name__)

PAGE_TEMPLATE = "page.html"
REDIRECT_TEMPLATE = "redirect.html"
SEARCH_INDEX = "search-index.json"
GLOBAL_SECTION = "Global"

# Scroll-spy presets exposed to search.js through <body> data attributes
SCROLL_MODES: dict[str, dict[str, Any]] = {
    "baseline": {"threshold": 0.5, "margin": "0px", "smooth": False},
    "enhanced": {"threshold": 0.0, "margin": "-20% 0px -70% 0px", "smooth": True},
}


def default_template_dir() -> Path:
    return Path(__file__).resolve().parent / "template"


@dataclass
class SiteOptions:
    title: str = "Documentation"
    footer: str = ""
    multi_page: bool = False
    scroll_mode: str = "baseline"
    template_dir: Path | None = None
    workers: int = 4


@dataclass
class Section:
    """A heading plus the entries rendered under it."""

    title: str
    class_name: str
    functions: list[FunctionDoc]


@dataclass
class Page:
    filename: str
    title: str
    sections: list[Section] = field(default_factory=list)


@dataclass
class NavLink:
    name: str
    href: str
    anchor_id: str
    description: str


@dataclass
class NavSection:
    title: str
    class_name: str
    links: list[NavLink]
    collapsed: bool = False


def load_template_env(
    template_dir: Path | None, multi_page: bool = False
) -> Environment:
    """Open the template bundle, failing before anything is written."""
    template_dir = template_dir or default_template_dir()
    if not template_dir.is_dir():
        raise TemplateBundleError(
            f"Template bundle not found: {template_dir}", template_dir
        )

    required = [PAGE_TEMPLATE] + ([REDIRECT_TEMPLATE] if multi_page else [])
    for name in required:
        if not (template_dir / name).is_file():
            raise TemplateBundleError(
                f"Template bundle {template_dir} has no {name}", template_dir
            )

    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=True,
        keep_trailing_newline=True,
    )
    for name in required:
        try:
            env.get_template(name)
        except TemplateError as e:
            raise TemplateBundleError(
                f"Template {template_dir / name} is invalid: {e}", template_dir
            ) from e
    return env


def plan_pages(model: DocumentModel, title: str, multi_page: bool) -> list[Page]:
    """Decide which entries go on which page."""
    class_sections = [
        Section(cls.name, cls.name, cls.functions) for cls in model.classes
    ]
    global_section = (
        [Section(GLOBAL_SECTION, "", model.top_level_functions)]
        if model.top_level_functions
        else []
    )

    if not multi_page:
        return [Page("index.html", title, class_sections + global_section)]

    filenames = AnchorRegistry()
    filenames.claim("index")
    filenames.claim("globals")
    pages = [
        Page(f"{filenames.claim(slugify(s.title))}.html", s.title, [s])
        for s in class_sections
    ]
    if global_section:
        pages.append(Page("globals.html", GLOBAL_SECTION, global_section))
    return pages


def build_nav(
    pages: list[Page], current: str, multi_page: bool = False
) -> list[NavSection]:
    """Navigation tree: one collapsible section per class, then Global."""
    nav: list[NavSection] = []
    for page in pages:
        for section in page.sections:
            links = [
                NavLink(
                    name=f.name,
                    href=(
                        f"#{f.anchor_id}"
                        if page.filename == current
                        else f"{page.filename}#{f.anchor_id}"
                    ),
                    anchor_id=f.anchor_id,
                    description=f.description,
                )
                for f in section.functions
            ]
            nav.append(
                NavSection(
                    title=section.title,
                    class_name=section.class_name,
                    links=links,
                    collapsed=multi_page and page.filename != current,
                )
            )
    return nav


def build_search_index(pages: list[Page]) -> list[dict[str, str]]:
    """Entries in model order, searchable by name and description."""
    return [
        {
            "name": f.name,
            "className": f.class_name,
            "description": f.description,
            "anchorId": f.anchor_id,
            "page": page.filename,
        }
        for page in pages
        for section in page.sections
        for f in section.functions
    ]


def check_output_root(output_dir: Path, *protected: Path | None) -> None:
    """Refuse an output root that would wipe one of ``protected``.

    Raises:
        OutputRootError: if the output root is, or contains, a protected path.
    """
    out = output_dir.resolve()
    for path in protected:
        if path is None:
            continue
        resolved = path.resolve()
        if resolved == out or out in resolved.parents:
            raise OutputRootError(
                f"Output root {output_dir} would overwrite {path}", output_dir
            )


def _prepare_output_root(output_dir: Path) -> None:
    try:
        if output_dir.is_dir():
            shutil.rmtree(output_dir)
        elif output_dir.exists():
            raise OutputRootError(
                f"Output root is not a directory: {output_dir}", output_dir
            )
        output_dir.mkdir(parents=True)
    except OSError as e:
        raise OutputRootError(
            f"Cannot prepare output root {output_dir}: {e}", output_dir
        ) from e


def copy_static_assets(template_dir: Path, output_dir: Path) -> list[Path]:
    """Copy every non-template file of the bundle, keeping relative paths."""
    copied = []
    for src in sorted(template_dir.rglob("*")):
        if not src.is_file() or src.suffix == ".html":
            continue
        dest = output_dir / src.relative_to(template_dir)
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src, dest)
        copied.append(dest)
    return copied


def render_page(
    env: Environment,
    page: Page,
    pages: list[Page],
    options: SiteOptions,
) -> str:
    try:
        return env.get_template(PAGE_TEMPLATE).render(
            site_title=options.title,
            page=page,
            sections=page.sections,
            nav_sections=build_nav(pages, page.filename, options.multi_page),
            scroll_mode=options.scroll_mode,
            scroll=SCROLL_MODES[options.scroll_mode],
            footer=options.footer,
        )
    except TemplateError as e:
        raise TemplateBundleError(f"Cannot render {page.filename}: {e}") from e


def render_site(
    model: DocumentModel, output_dir: Path, options: SiteOptions | None = None
) -> list[Path]:
    """Render the model into ``output_dir``, replacing whatever was there.

    The model is only read. Partial output is left behind if a write fails.

    Returns:
        Paths of all files written, in a stable order.
    """
    options = options or SiteOptions()
    if options.scroll_mode not in SCROLL_MODES:
        raise ValueError(f"Unknown scroll mode: {options.scroll_mode!r}")

    template_dir = options.template_dir or default_template_dir()
    env = load_template_env(template_dir, options.multi_page)
    pages = plan_pages(model, options.title, options.multi_page)

    check_output_root(output_dir, template_dir)
    _prepare_output_root(output_dir)
    written = copy_static_assets(template_dir, output_dir)

    def _write(page: Page) -> Path:
        path = output_dir / page.filename
        path.write_text(render_page(env, page, pages, options), encoding="utf-8")
        log.debug("Rendered %s", path)
        return path

    # Each page is a disjoint file that only reads the shared model
    with ThreadPoolExecutor(max_workers=max(1, options.workers)) as pool:
        written.extend(pool.map(_write, pages))

    if options.multi_page:
        index = output_dir / "index.html"
        if pages:
            redirect = env.get_template(REDIRECT_TEMPLATE)
            index.write_text(
                redirect.render(site_title=options.title, target=pages[0].filename),
                encoding="utf-8",
            )
        else:
            empty = Page("index.html", options.title)
            index.write_text(render_page(env, empty, pages, options), encoding="utf-8")
        written.append(index)

    search_path = output_dir / SEARCH_INDEX
    search_path.write_text(
        json.dumps(build_search_index(pages), indent=2, ensure_ascii=False) + "\n",
        encoding="utf-8",
    )
    written.append(search_path)

    log.info("Rendered %d pages into %s", len(pages), output_dir)
    return written
