"""docs.json serialization.

The artifact keeps the model's field and array order exactly, so dumping
the same model always yields the same bytes, and loading it back yields an
equal model.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .errors import ModelLoadError
from .models import ClassDoc, DocumentModel, FunctionDoc, ParamDoc, ReturnDoc
from .schemas import DocsSchema, FunctionSchema

log = logging.getLogger(__name__)


def _function_to_dict(func: FunctionDoc) -> dict[str, Any]:
    return {
        "name": func.name,
        "className": func.class_name,
        "description": func.description,
        "params": [
            {"name": p.name, "type": p.type, "description": p.description}
            for p in func.params
        ],
        "returns": [
            {"type": r.type, "description": r.description} for r in func.returns
        ],
        "anchorId": func.anchor_id,
    }


def model_to_dict(model: DocumentModel) -> dict[str, Any]:
    return {
        "classes": [
            {
                "name": cls.name,
                "functions": [_function_to_dict(f) for f in cls.functions],
            }
            for cls in model.classes
        ],
        "topLevelFunctions": [_function_to_dict(f) for f in model.top_level_functions],
    }


def dumps_model(model: DocumentModel) -> str:
    return json.dumps(model_to_dict(model), indent=2, ensure_ascii=False) + "\n"


def write_docs_json(model: DocumentModel, path: Path) -> Path:
    """Write docs.json, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dumps_model(model), encoding="utf-8")
    log.info("Wrote %s", path)
    return path


def _function_from_schema(func: FunctionSchema) -> FunctionDoc:
    return FunctionDoc(
        name=func.name,
        class_name=func.class_name,
        description=func.description,
        params=[ParamDoc(p.name, p.type, p.description) for p in func.params],
        returns=[ReturnDoc(r.type, r.description) for r in func.returns],
        anchor_id=func.anchor_id,
    )


def loads_model(text: str) -> DocumentModel:
    """Parse docs.json text back into a DocumentModel.

    Raises:
        ModelLoadError: on invalid JSON, schema mismatch, duplicate anchors or
            functions whose className disagrees with their position.
    """
    try:
        schema = DocsSchema.model_validate_json(text)
    except ValidationError as e:
        raise ModelLoadError(f"docs.json does not match the schema: {e}") from e

    model = DocumentModel(
        classes=[
            ClassDoc(cls.name, [_function_from_schema(f) for f in cls.functions])
            for cls in schema.classes
        ],
        top_level_functions=[
            _function_from_schema(f) for f in schema.top_level_functions
        ],
    )

    seen_classes: set[str] = set()
    for cls in model.classes:
        if cls.name in seen_classes:
            raise ModelLoadError(f"class {cls.name!r} appears more than once")
        seen_classes.add(cls.name)
        for func in cls.functions:
            if func.class_name != cls.name:
                raise ModelLoadError(
                    f"{func.name}: className {func.class_name!r} "
                    f"inside class {cls.name!r}"
                )
    for func in model.top_level_functions:
        if func.class_name:
            raise ModelLoadError(f"{func.name}: top-level function has a className")

    anchors: set[str] = set()
    for func in model.all_functions():
        if func.anchor_id in anchors:
            raise ModelLoadError(f"duplicate anchorId {func.anchor_id!r}")
        anchors.add(func.anchor_id)

    return model


def read_docs_json(path: Path) -> DocumentModel:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ModelLoadError(f"Cannot read {path}: {e}", path) from e
    return loads_model(text)
