"""Data models for documentation extraction."""

from __future__ import annotations

from dataclasses import dataclass, field

KNOWN_TAGS = frozenset({"class", "desc", "param", "return"})


@dataclass(frozen=True)
class Tag:
    """A single ``@key value`` directive from a comment line."""

    key: str  # Lower-cased: "class" | "desc" | "param" | "return" | anything else
    value: str  # Raw text after the key
    line_number: int = 0


@dataclass
class CommentBlock:
    """Contiguous run of tag lines preceding a source line."""

    source_file: str
    line_number: int  # First line of the block (1-based)
    tags: list[Tag] = field(default_factory=list)

    @property
    def class_name(self) -> str | None:
        """Class association for this block only (last non-empty @class wins)."""
        name = None
        for tag in self.tags:
            if tag.key == "class" and tag.value.strip():
                name = tag.value.strip()
        return name

    @property
    def description(self) -> str:
        """All @desc values, trimmed and joined with single spaces."""
        parts = [t.value.strip() for t in self.tags if t.key == "desc"]
        return " ".join(p for p in parts if p)

    @property
    def passthrough(self) -> list[Tag]:
        """Tags with keys the core does not interpret."""
        return [t for t in self.tags if t.key not in KNOWN_TAGS]


@dataclass(frozen=True)
class ParamDoc:
    name: str
    type: str
    description: str


@dataclass(frozen=True)
class ReturnDoc:
    type: str
    description: str


@dataclass
class FunctionDoc:
    """Documentation for one matched function definition."""

    name: str  # Literal signature name, e.g. "Add" or "Array.max"
    class_name: str  # "" for top-level functions
    description: str
    params: list[ParamDoc] = field(default_factory=list)
    returns: list[ReturnDoc] = field(default_factory=list)
    anchor_id: str = ""


@dataclass
class ClassDoc:
    name: str
    functions: list[FunctionDoc] = field(default_factory=list)


@dataclass
class DocumentModel:
    """Everything rendered into docs.json and the site."""

    classes: list[ClassDoc] = field(default_factory=list)
    top_level_functions: list[FunctionDoc] = field(default_factory=list)

    def all_functions(self) -> list[FunctionDoc]:
        """Functions in model order: classes first, then top-level."""
        funcs = [f for cls in self.classes for f in cls.functions]
        funcs.extend(self.top_level_functions)
        return funcs


@dataclass(frozen=True)
class Diagnostic:
    """A recoverable problem found while scanning or parsing."""

    kind: str  # "orphan-block" | "unreadable-file" | "malformed-param" | ...
    message: str
    source_file: str = ""
    line_number: int = 0

    def __str__(self) -> str:
        if self.source_file and self.line_number:
            return f"{self.source_file}:{self.line_number}: {self.message}"
        if self.source_file:
            return f"{self.source_file}: {self.message}"
        return self.message


@dataclass
class MatchedBlock:
    """A comment block paired with the definition name it documents."""

    block: CommentBlock
    name: str
    params: list[ParamDoc] = field(default_factory=list)
    returns: list[ReturnDoc] = field(default_factory=list)


@dataclass
class ParsedFile:
    """Results from extracting documentation from one file."""

    source_file: str
    matches: list[MatchedBlock] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)


@dataclass
class BuildResult:
    """Results from building the document model."""

    model: DocumentModel
    diagnostics: list[Diagnostic] = field(default_factory=list)
    files_scanned: int = 0


@dataclass
class ValidationResult:
    """Results from documentation validation."""

    errors: list[str] = field(default_factory=list)  # Build fails if non-empty
    warnings: list[str] = field(default_factory=list)  # Printed but allowed
