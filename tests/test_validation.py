"""
Tests for request validation — schema checks and target preparation.
"""

import os
from pathlib import Path

import pytest

from starterkit.core.operations import get_operation
from starterkit.core.validation import validate


@pytest.fixture
def base_op():
    return get_operation("create_nextjs_base")


class TestSchema:
    def test_missing_project_path(self, base_op):
        result = validate(base_op, {})
        assert not result.valid
        assert any("projectPath" in e for e in result.errors)

    def test_empty_project_path(self, base_op):
        result = validate(base_op, {"projectPath": ""})
        assert not result.valid

    def test_wrong_type(self, base_op, tmp_path: Path):
        result = validate(base_op, {"projectPath": str(tmp_path), "includeShadcn": "definitely"})
        assert not result.valid
        assert any("includeShadcn" in e for e in result.errors)

    def test_bad_enum(self, tmp_path: Path):
        result = validate(get_operation("setup_drizzle_orm"), {"projectPath": str(tmp_path), "provider": "oracle"})
        assert not result.valid
        assert any("provider" in e for e in result.errors)

    def test_defaults_filled(self, base_op, tmp_path: Path):
        result = validate(base_op, {"projectPath": str(tmp_path)})
        assert result.valid
        assert result.params.include_shadcn is True
        assert result.params.include_all_components is True

    def test_unknown_fields_ignored(self, base_op, tmp_path: Path):
        result = validate(base_op, {"projectPath": str(tmp_path), "colour": "blue"})
        assert result.valid

    def test_schema_failure_has_no_side_effects(self, base_op, tmp_path: Path):
        target = tmp_path / "never-created"
        result = validate(base_op, {"projectPath": str(target), "includeShadcn": "nope"})
        assert not result.valid
        assert not target.exists()


class TestTargetPreparation:
    def test_creates_missing_directory(self, base_op, tmp_path: Path):
        target = tmp_path / "a" / "b"
        result = validate(base_op, {"projectPath": str(target)})
        assert result.valid
        assert target.is_dir()

    def test_resolves_absolute(self, base_op, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = validate(base_op, {"projectPath": "rel"})
        assert result.params.project_path == str((tmp_path / "rel").resolve())

    def test_path_is_a_file(self, base_op, tmp_path: Path):
        target = tmp_path / "file"
        target.write_text("x")
        result = validate(base_op, {"projectPath": str(target)})
        assert not result.valid

    @pytest.mark.skipif(os.geteuid() == 0, reason="root ignores directory permissions")
    def test_not_writable(self, base_op, tmp_path: Path):
        target = tmp_path / "locked"
        target.mkdir()
        target.chmod(0o500)
        try:
            result = validate(base_op, {"projectPath": str(target)})
        finally:
            target.chmod(0o700)
        assert not result.valid
        assert "Cannot access or write" in result.errors[0]

    def test_non_empty_warning(self, base_op, tmp_path: Path):
        (tmp_path / "notes.txt").write_text("")
        result = validate(base_op, {"projectPath": str(tmp_path)})
        assert result.valid
        assert result.warnings and "not empty" in result.warnings[0]

    def test_hidden_files_do_not_warn(self, base_op, tmp_path: Path):
        (tmp_path / ".git").mkdir()
        result = validate(base_op, {"projectPath": str(tmp_path)})
        assert result.warnings == []

    def test_capability_ops_do_not_warn(self, tmp_path: Path):
        (tmp_path / "package.json").write_text("{}")
        result = validate(get_operation("setup_biome_linting"), {"projectPath": str(tmp_path)})
        assert result.warnings == []


class TestOptionalProject:
    def test_analytics_without_path(self):
        result = validate(get_operation("analyze_token_usage"), {})
        assert result.valid
        assert result.params.project_path is None


class TestAppFeatures:
    def test_core_cannot_be_disabled(self, tmp_path: Path):
        result = validate(get_operation("create_nextjs_app"), {"projectPath": str(tmp_path), "features": {"core": False}})
        assert not result.valid
        assert any("core" in e for e in result.errors)

    def test_camel_case_features(self, tmp_path: Path):
        result = validate(
            get_operation("create_nextjs_app"),
            {"projectPath": str(tmp_path), "features": {"teamManagement": False, "devExperience": False}},
        )
        assert result.valid
        assert result.params.features.team_management is False
        assert result.params.features.dev_experience is False
        assert result.params.features.payments is True


class TestLanguages:
    def test_normalized(self, tmp_path: Path):
        result = validate(
            get_operation("setup_internationalization"),
            {"projectPath": str(tmp_path), "languages": [" EN", "es", "en"]},
        )
        assert result.valid
        assert result.params.languages == ["en", "es"]

    def test_empty_rejected(self, tmp_path: Path):
        result = validate(get_operation("setup_internationalization"), {"projectPath": str(tmp_path), "languages": []})
        assert not result.valid

    @pytest.mark.parametrize("code", ["../../escaped", "en/us", "e", "en_US", "english-language-pack"])
    def test_path_like_codes_rejected(self, tmp_path: Path, code):
        target = tmp_path / "app"
        result = validate(get_operation("setup_internationalization"), {"projectPath": str(target), "languages": ["en", code]})
        assert not result.valid
        assert any("invalid language code" in e for e in result.errors)
        assert not target.exists()

    def test_region_subtags_accepted(self, tmp_path: Path):
        result = validate(
            get_operation("setup_internationalization"),
            {"projectPath": str(tmp_path), "languages": ["pt-BR", "zh-hant-tw"]},
        )
        assert result.valid
        assert result.params.languages == ["pt-br", "zh-hant-tw"]
