"""Documentation quality checks."""

from __future__ import annotations

from .models import DocumentModel, ValidationResult


def _label(class_name: str, name: str) -> str:
    return f"{class_name}/{name}" if class_name else name


def validate_model(model: DocumentModel, strict: bool = False) -> ValidationResult:
    """Validate a built model.

    Checks:
    1. Functions should have @desc (warning in normal mode, error in strict)
    2. Params should carry a name and a type (warning)

    Args:
        model: The document model to check
        strict: If True, missing descriptions are errors instead of warnings

    Returns:
        ValidationResult with errors and warnings
    """
    result = ValidationResult()

    for func in model.all_functions():
        label = _label(func.class_name, func.name)

        if not func.description:
            msg = f"{label}: missing @desc (undocumented)"
            if strict:
                result.errors.append(msg)
            else:
                result.warnings.append(msg)

        for param in func.params:
            if not param.name:
                result.warnings.append(f"{label}: @param without a name")
            elif not param.type:
                result.warnings.append(f"{label}: @param {param.name} has no type")

    return result


def compute_coverage(model: DocumentModel) -> float:
    """Share of functions with a description (0.0 - 1.0, 1.0 when empty)."""
    funcs = model.all_functions()
    if not funcs:
        return 1.0
    return sum(1 for f in funcs if f.description) / len(funcs)
