"""Tests for envmake.registry."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from envmake.errors import UnknownTarget
from envmake.registry import Registry
from envmake.targets import Target


class TestRegistryConstruction:
    def test_empty(self):
        reg = Registry()
        assert len(reg) == 0
        assert list(reg) == []
        assert reg.default_goal is None

    def test_from_targets(self):
        reg = Registry([Target(name="a"), Target(name="b")])
        assert list(reg) == ["a", "b"]

    def test_default_goal_is_first_declared(self):
        reg = Registry([Target(name="help"), Target(name="docs")])
        assert reg.default_goal == "help"

    def test_repr(self):
        assert repr(Registry([Target(name="a")])) == "Registry(targets=1)"


class TestLookup:
    def test_lookup(self):
        t = Target(name="docs")
        assert Registry([t]).lookup("docs") is t

    def test_unknown_raises(self):
        with pytest.raises(UnknownTarget, match="bogus") as info:
            Registry().lookup("bogus")
        assert info.value.name == "bogus"

    def test_unknown_is_value_error(self):
        with pytest.raises(ValueError):
            Registry().lookup("bogus")

    def test_mapping_access(self):
        reg = Registry([Target(name="a")])
        assert "a" in reg
        assert reg.get("missing") is None
        with pytest.raises(KeyError):
            reg["missing"]


class TestAmend:
    def test_second_declaration_merges(self):
        reg = Registry()
        reg.add(Target(name="cleanup", depends_on=["cleanup-tests"]))
        reg.add(Target(name="cleanup", depends_on=["cleanup-cache"], description="All"))
        cleanup = reg.lookup("cleanup")
        assert cleanup.depends_on == ["cleanup-tests", "cleanup-cache"]
        assert cleanup.description == "All"
        assert len(reg) == 1

    def test_merge_keeps_declaration_position(self):
        reg = Registry([Target(name="a"), Target(name="b"), Target(name="a", recipe=["x"])])
        assert list(reg) == ["a", "b"]
        assert reg["a"].recipe == ["x"]


class TestLoad:
    def test_load_target_blocks(self):
        reg = Registry()
        reg.load(
            {
                "target": [
                    {"docs": {"description": "Docs", "recipe": ["${interpreter} guides"]}},
                    {"vendor": {"phony": False, "prerequisites": ["composer.json"]}},
                ]
            }
        )
        assert reg["docs"].recipe == ["${interpreter} guides"]
        assert reg["vendor"].phony is False

    def test_load_ignores_other_blocks(self):
        reg = Registry()
        reg.load({"variable": [{"x": {}}]})
        assert len(reg) == 0

    def test_load_invalid_attribute_raises(self):
        with pytest.raises(ValidationError):
            Registry().load({"target": [{"docs": {"command": "x"}}]})


class TestDescribed:
    def test_sorted_and_filtered(self):
        reg = Registry(
            [
                Target(name="zeta", description="Z"),
                Target(name="hidden"),
                Target(name="alpha", description="A"),
            ]
        )
        assert reg.described() == [("alpha", "A"), ("zeta", "Z")]


class TestLoadValidation:
    def test_name_attribute_rejected(self):
        with pytest.raises(ValueError, match="'x'"):
            Registry().load({"target": [{"x": {"name": "y"}}]})

    def test_unlabelled_block_rejected(self):
        with pytest.raises(ValueError, match="name label"):
            Registry().load({"target": [{"recipe": ["true"]}]})

    def test_non_mapping_block_rejected(self):
        with pytest.raises(ValueError, match="name label"):
            Registry().load({"target": [["true"]]})
