"""Comment-tag extraction and signature matching.

A doc block is a run of ``--@key value`` (or ``-- @key value``) lines. The
block ends at the first line that is not a tag line; the next non-blank line
must then be a function definition, otherwise the block is an orphan.

    --@ class Math
    --@ desc Subtracts the second number from the first
    --@ param x: number The first number
    --@ return number The result of x - y
    function Math.subtract(x, y)
"""

from __future__ import annotations

import enum
import logging
import re
from collections.abc import Collection

from .models import (
    CommentBlock,
    Diagnostic,
    MatchedBlock,
    ParamDoc,
    ParsedFile,
    ReturnDoc,
    Tag,
)

log = logging.getLogger(__name__)

# "--@key" and "-- @key" are interchangeable; "---@" (three dashes) is not a tag line
_TAG_LINE = re.compile(r"^\s*--(?:@|\s+@)(.*)$")

_IDENT = r"[A-Za-z_][A-Za-z0-9_]*"
_DOTTED = rf"{_IDENT}(?:\.{_IDENT})*"

# function Name(  /  local function Name(  /  function Obj.inner:method(
_DEFINITION = re.compile(rf"^\s*(?:local\s+)?function\s+({_DOTTED}(?::{_IDENT})?)\s*\(")
# Name = function(  /  local Name = function(
_ASSIGNMENT = re.compile(rf"^\s*(?:local\s+)?({_DOTTED})\s*=\s*function\s*\(")

# "name:" as the first token of a param value
_COLON_HEAD = re.compile(r"^([^\s:,]+)\s*:(.*)$", re.DOTALL)

DEFAULT_RETURN_TYPES = frozenset(
    {"number", "string", "boolean", "table", "nil", "function"}
)


class ParamForm(enum.Enum):
    COMMA = "comma"  # name, type, description
    COLON = "colon"  # name: type description
    SPACE = "space"  # name type description


def is_tag_line(line: str) -> bool:
    return _TAG_LINE.match(line) is not None


def parse_tag(line: str, line_number: int = 0) -> Tag | None:
    """Split a comment line into a Tag, or None if it is not a tag line."""
    match = _TAG_LINE.match(line)
    if not match:
        return None
    parts = match.group(1).strip().split(None, 1)
    if not parts:
        return Tag(key="", value="", line_number=line_number)
    key = parts[0].lower()
    value = parts[1].strip() if len(parts) > 1 else ""
    return Tag(key=key, value=value, line_number=line_number)


def detect_param_form(value: str) -> ParamForm:
    """Pick the param grammar for one raw value.

    A comma before any colon means comma form; a colon straight after the
    first token means colon form; anything else is space separated.
    """
    comma = value.find(",")
    colon = value.find(":")
    if comma != -1 and (colon == -1 or comma < colon):
        return ParamForm.COMMA
    if _COLON_HEAD.match(value):
        return ParamForm.COLON
    return ParamForm.SPACE


def _parse_comma_param(value: str) -> ParamDoc | None:
    parts = [p.strip() for p in value.split(",", 2)]
    if not parts[0]:
        return None
    type_ = parts[1] if len(parts) > 1 else ""
    description = parts[2] if len(parts) > 2 else ""
    return ParamDoc(name=parts[0], type=type_, description=description)


def _parse_colon_param(value: str) -> ParamDoc | None:
    match = _COLON_HEAD.match(value)
    if not match:
        return None
    rest = match.group(2).strip().split(None, 1)
    type_ = rest[0] if rest else ""
    description = rest[1].strip() if len(rest) > 1 else ""
    return ParamDoc(name=match.group(1), type=type_, description=description)


def _parse_space_param(value: str) -> ParamDoc | None:
    words = value.split(None, 2)
    if len(words) < 2:
        return None
    description = words[2].strip() if len(words) > 2 else ""
    return ParamDoc(name=words[0], type=words[1], description=description)


_PARAM_PARSERS = {
    ParamForm.COMMA: _parse_comma_param,
    ParamForm.COLON: _parse_colon_param,
    ParamForm.SPACE: _parse_space_param,
}


def parse_param(value: str) -> tuple[ParamDoc, bool]:
    """Parse an @param value.

    Returns:
        (param, ok). When no grammar applies, ``ok`` is False and the
        param carries the raw text as its description.
    """
    value = value.strip()
    param = _PARAM_PARSERS[detect_param_form(value)](value) if value else None
    if param is None:
        return ParamDoc(name="", type="", description=value), False
    return param, True


def parse_return(
    value: str, return_types: Collection[str] = DEFAULT_RETURN_TYPES
) -> ReturnDoc:
    """Parse an @return value.

    The first word is a type only when it is one of ``return_types``
    (a trailing comma or colon is allowed); otherwise the whole value is
    the description.
    """
    value = value.strip()
    words = value.split(None, 1)
    if words:
        candidate = words[0].rstrip(",:")
        if candidate in return_types:
            description = words[1].strip() if len(words) > 1 else ""
            return ReturnDoc(type=candidate, description=description)
    return ReturnDoc(type="", description=value)


def match_signature(line: str) -> str | None:
    """Return the defined function's name if ``line`` is a definition."""
    for pattern in (_DEFINITION, _ASSIGNMENT):
        match = pattern.match(line)
        if match:
            return match.group(1)
    return None


def parse_blocks(text: str, source_file: str = "") -> list[tuple[CommentBlock, int]]:
    """Split a file into comment blocks.

    Returns:
        (block, next_line) pairs, where ``next_line`` is the 0-based index of
        the first non-blank line after the block, or -1 at end of file.
    """
    lines = text.splitlines()
    blocks: list[tuple[CommentBlock, int]] = []
    i = 0
    while i < len(lines):
        tag = parse_tag(lines[i], i + 1)
        if tag is None:
            i += 1
            continue

        block = CommentBlock(source_file=source_file, line_number=i + 1)
        while tag is not None:
            block.tags.append(tag)
            i += 1
            tag = parse_tag(lines[i], i + 1) if i < len(lines) else None

        while i < len(lines) and not lines[i].strip():
            i += 1
        blocks.append((block, i if i < len(lines) else -1))
    return blocks


def extract_file(
    text: str,
    source_file: str = "",
    return_types: Collection[str] = DEFAULT_RETURN_TYPES,
) -> ParsedFile:
    """Extract matched doc blocks from one file's text.

    Never raises on content: malformed tags degrade to empty fields and
    orphan blocks are dropped with a diagnostic.
    """
    result = ParsedFile(source_file=source_file)
    lines = text.splitlines()

    def _report(kind: str, message: str, line_number: int) -> None:
        diag = Diagnostic(kind, message, source_file, line_number)
        log.debug("%s", diag)
        result.diagnostics.append(diag)

    for block, next_line in parse_blocks(text, source_file):
        if next_line == -1:
            _report("orphan-block", "doc block at end of file", block.line_number)
            continue
        if is_tag_line(lines[next_line]):
            _report(
                "orphan-block",
                f"doc block is cut off from the block at line {next_line + 1}",
                block.line_number,
            )
            continue

        name = match_signature(lines[next_line])
        if name is None:
            _report(
                "orphan-block",
                f"no function definition after doc block: {lines[next_line].strip()!r}",
                block.line_number,
            )
            continue

        matched = MatchedBlock(block=block, name=name)
        for tag in block.tags:
            if tag.key == "param":
                param, ok = parse_param(tag.value)
                if not ok:
                    _report(
                        "malformed-param",
                        f"cannot parse @param {tag.value!r}",
                        tag.line_number,
                    )
                matched.params.append(param)
            elif tag.key == "return":
                if not tag.value.strip():
                    _report("malformed-return", "empty @return", tag.line_number)
                matched.returns.append(parse_return(tag.value, return_types))
            elif tag.key == "class" and not tag.value.strip():
                _report("empty-class", "@class without a name", tag.line_number)

        log.debug("Found function %s in %s:%d", name, source_file, next_line + 1)
        result.matches.append(matched)

    return result
