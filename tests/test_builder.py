"""Tests for folding parsed files into the document model."""

import pytest

from tagdocs.builder import (
    AnchorRegistry,
    build_from_sources,
    build_model,
    parse_sources,
    slugify,
)
from tagdocs.models import ReturnDoc
from tagdocs.serializer import dumps_model


class TestSlugify:
    """Anchor slugs from function and class names."""

    def test_top_level(self):
        assert slugify("greet") == "greet"

    def test_class_member(self):
        assert slugify("Add", "Math") == "math-add"

    def test_dotted_and_colon_names(self):
        assert slugify("Array.max", "Array") == "array-array-max"
        assert slugify("Stack:push") == "stack-push"

    def test_runs_collapse(self):
        assert slugify("__private__fn") == "private-fn"

    def test_nothing_alphanumeric(self):
        assert slugify("_") == "function"


class TestAnchorRegistry:
    """Unique anchors with numeric suffixes."""

    def test_suffixes_in_claim_order(self):
        anchors = AnchorRegistry()
        assert [anchors.claim("add") for _ in range(3)] == ["add", "add-2", "add-3"]

    def test_suffix_skips_taken_slugs(self):
        anchors = AnchorRegistry()
        anchors.claim("add-2")
        anchors.claim("add")
        assert anchors.claim("add") == "add-3"


class TestBuildModel:
    """Folding matched blocks into the document model."""

    def test_classes_and_top_level(self, model):
        assert [c.name for c in model.classes] == ["Math", "Array"]
        assert [f.name for f in model.classes[0].functions] == ["Add", "Math.subtract"]
        assert [f.name for f in model.top_level_functions] == ["greet"]

    def test_class_grouping_keeps_literal_name(self, model):
        add = model.classes[0].functions[0]
        assert add.name == "Add"
        assert add.class_name == "Math"
        assert add.anchor_id == "math-add"
        assert add.description == "My Add function is very cool!"

    def test_multi_return(self, model):
        array_max = model.classes[1].functions[0]
        assert array_max.name == "Array.max"
        assert array_max.returns == [
            ReturnDoc("number", "The maximum value found"),
            ReturnDoc("boolean", "True if array was not empty, false otherwise"),
        ]

    def test_top_level_has_no_class(self, model):
        greet = model.top_level_functions[0]
        assert greet.class_name == ""
        assert greet.anchor_id == "greet"

    def test_class_aggregates_across_files(self):
        result = build_from_sources(
            [
                ("a.lua", "--@ class Math\nfunction one()\n"),
                ("b.lua", "--@ class Vec\nfunction len()\n"),
                ("c.lua", "--@ class Math\nfunction two()\n"),
            ]
        )
        classes = result.model.classes
        assert [c.name for c in classes] == ["Math", "Vec"]
        assert [f.name for f in classes[0].functions] == ["one", "two"]

    def test_same_name_in_different_classes(self):
        result = build_from_sources(
            [
                ("a.lua", "--@ class Math\nfunction add()\n"),
                ("b.lua", "--@ class Vec\nfunction add()\n"),
            ]
        )
        anchors = [f.anchor_id for f in result.model.all_functions()]
        assert anchors == ["math-add", "vec-add"]

    def test_forced_collision_suffixes_in_encounter_order(self):
        result = build_from_sources(
            [
                ("b.lua", "--@ desc second\nfunction add()\n"),
                ("a.lua", "--@ desc first\nfunction add()\n\n--@ desc third\nfunction add()\n"),
            ]
        )
        funcs = result.model.top_level_functions
        assert [(f.description, f.anchor_id) for f in funcs] == [
            ("first", "add"),
            ("third", "add-2"),
            ("second", "add-3"),
        ]

    def test_anchors_unique(self, model):
        anchors = [f.anchor_id for f in model.all_functions()]
        assert len(anchors) == len(set(anchors))

    def test_orphans_are_diagnostics_not_functions(self):
        result = build_from_sources(
            [("a.lua", "--@ desc orphan\nlocal x = 5\n--@ desc ok\nfunction f()\n")]
        )
        assert [f.name for f in result.model.all_functions()] == ["f"]
        assert [d.kind for d in result.diagnostics] == ["orphan-block"]

    def test_files_scanned(self, sources):
        assert build_from_sources(sources).files_scanned == 2


class TestDeterminism:
    """Identical output regardless of worker count or input order."""

    def test_idempotent(self, sources):
        first = dumps_model(build_from_sources(sources).model)
        second = dumps_model(build_from_sources(sources).model)
        assert first == second

    @pytest.mark.parametrize("workers", [1, 2, 8])
    def test_order_independent_of_input_order_and_workers(self, sources, workers):
        expected = dumps_model(build_from_sources(sources, workers=1).model)
        shuffled = list(reversed(sources))
        assert dumps_model(build_from_sources(shuffled, workers=workers).model) == expected

    def test_parse_sources_sorted_by_path(self):
        parsed = parse_sources([("z.lua", ""), ("a/b.lua", ""), ("m.lua", "")], workers=3)
        assert [p.source_file for p in parsed] == ["a/b.lua", "m.lua", "z.lua"]

    def test_duplicate_paths_parsed_once(self):
        text = "--@ desc d\nfunction f()\n"
        result = build_from_sources([("a.lua", text), ("a.lua", text)])
        assert len(result.model.top_level_functions) == 1

    def test_build_model_sorts_unsorted_input(self):
        parsed = parse_sources(
            [("b.lua", "--@ desc b\nfunction b()\n"), ("a.lua", "--@ desc a\nfunction a()\n")]
        )
        result = build_model(reversed(parsed))
        assert [f.name for f in result.model.top_level_functions] == ["a", "b"]

    def test_diagnostics_sorted_by_location(self):
        result = build_from_sources(
            [
                ("b.lua", "--@ desc orphan\n"),
                ("a.lua", "--@ desc orphan\n\n\n--@ desc orphan\n"),
            ]
        )
        assert [(d.source_file, d.line_number) for d in result.diagnostics] == [
            ("a.lua", 1),
            ("a.lua", 4),
            ("b.lua", 1),
        ]
