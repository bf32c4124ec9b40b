from tagdocs.builder import build_from_sources, build_model, parse_sources, slugify
from tagdocs.errors import (
    ModelLoadError,
    NoSourceFilesError,
    OutputRootError,
    SourceRootError,
    TagdocsError,
    TemplateBundleError,
)
from tagdocs.extractors import extract_file, match_signature, parse_param, parse_return
from tagdocs.generators import SiteOptions, render_site
from tagdocs.models import (
    ClassDoc,
    Diagnostic,
    DocumentModel,
    FunctionDoc,
    ParamDoc,
    ReturnDoc,
)
from tagdocs.serializer import dumps_model, loads_model, read_docs_json, write_docs_json

__all__ = [
    "ClassDoc",
    "Diagnostic",
    "DocumentModel",
    "FunctionDoc",
    "ModelLoadError",
    "NoSourceFilesError",
    "OutputRootError",
    "ParamDoc",
    "ReturnDoc",
    "SiteOptions",
    "SourceRootError",
    "TagdocsError",
    "TemplateBundleError",
    "build_from_sources",
    "build_model",
    "dumps_model",
    "extract_file",
    "loads_model",
    "match_signature",
    "parse_param",
    "parse_return",
    "parse_sources",
    "read_docs_json",
    "render_site",
    "slugify",
    "write_docs_json",
]
