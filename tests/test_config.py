"""Tests for configuration presets, validation and TOML loading."""

from dataclasses import replace
from pathlib import Path

import pytest

from typetokens.config import (
    CJK,
    LATIN,
    CompilerConfig,
    LineHeightConfig,
    load_compiler_config,
)
from typetokens.errors import ConfigurationError
from typetokens.validation import (
    advisory_warnings,
    validate_compiler_config,
    validate_labels,
)


class TestPresets:
    def test_label_counts_match_steps(self):
        for script in (LATIN, CJK):
            tc, sc = script.type_config, script.space_config
            assert len(tc.type_labels) == tc.positive_steps + tc.negative_steps + 1
            assert len(sc.space_labels) == sc.positive_steps + sc.negative_steps + 1

    def test_scripts_differ_only_in_line_height(self):
        assert LATIN.type_config.line_height_config.increment_step == "quarter"
        assert CJK.type_config.line_height_config.increment_step == "whole"
        assert replace(CJK.type_config, line_height_config=LATIN.type_config.line_height_config) == LATIN.type_config

    def test_defaults_are_valid_and_quiet(self):
        config = CompilerConfig()
        validate_compiler_config(config)
        assert advisory_warnings(config) == []

    def test_configs_are_immutable(self):
        with pytest.raises(AttributeError):
            LATIN.type_config.line_height_config.base_font_size = 20

    def test_unknown_script_lookup(self):
        with pytest.raises(ConfigurationError, match="latin, cjk"):
            CompilerConfig().script("arabic")


class TestValidation:
    def test_labels_must_match_steps(self):
        with pytest.raises(ConfigurationError, match="require 4"):
            validate_labels(["a", "b", "c"], 2, 1, "Type")

    def test_negative_steps(self):
        with pytest.raises(ConfigurationError, match="non-negative"):
            validate_labels(["a"], -1, 1, "Type")

    def test_duplicate_labels(self):
        with pytest.raises(ConfigurationError, match="unique"):
            validate_labels(["a", "a", "b"], 1, 1, "Space")

    def test_bad_relative_to(self):
        bad = replace(LATIN, space_config=replace(LATIN.space_config, relative_to="page"))
        with pytest.raises(ConfigurationError, match="relative_to"):
            validate_compiler_config(CompilerConfig(scripts=(bad, CJK)))

    def test_non_positive_base_line_height(self):
        lh = LineHeightConfig(18, 0, 0.5, "half", "latin")
        bad = replace(LATIN, type_config=replace(LATIN.type_config, line_height_config=lh))
        with pytest.raises(ConfigurationError, match="base_line_height"):
            validate_compiler_config(CompilerConfig(scripts=(bad, CJK)))

    def test_base_line_height_rounding_to_zero_pixels(self):
        lh = LineHeightConfig(18, 0.02, 0, "whole", "latin")
        bad = replace(LATIN, type_config=replace(LATIN.type_config, line_height_config=lh))
        with pytest.raises(ConfigurationError, match="rounds to 0px"):
            validate_compiler_config(CompilerConfig(scripts=(bad, CJK)))

    def test_non_numeric_width(self):
        bad = replace(LATIN, type_config=replace(LATIN.type_config, min_width="abc"))
        with pytest.raises(ConfigurationError, match="min_width must be a number"):
            validate_compiler_config(CompilerConfig(scripts=(bad, CJK)))

    def test_non_integer_steps(self):
        with pytest.raises(ConfigurationError, match="positive_steps must be an integer"):
            validate_labels(["a", "b"], "1", 0, "Type")

    def test_advisory_warnings(self):
        lh = LineHeightConfig(16, 1.5, 0.5, "third", "latin")
        odd = replace(LATIN, type_config=replace(LATIN.type_config, line_height_config=lh))
        warnings = advisory_warnings(CompilerConfig(scripts=(odd, CJK), override_script="latin"))
        assert any("increment_step 'third'" in w for w in warnings)
        assert any("differs from the type scale base" in w for w in warnings)
        assert any("override block changes nothing" in w for w in warnings)


class TestLoadCompilerConfig:
    def write(self, tmp_path, text: str) -> Path:
        path = tmp_path / "typetokens.toml"
        path.write_text(text, encoding="utf-8")
        return path

    def test_compiler_table(self, tmp_path):
        path = self.write(
            tmp_path,
            """
[compiler]
output_path = "build/_typography.css"
override_selector = ':lang(ja)'
use_px = true
""",
        )
        config = load_compiler_config(path)
        assert config.output_path == tmp_path / "build" / "_typography.css"
        assert config.override_selector == ":lang(ja)"
        assert config.use_px is True
        assert config.default_script == "latin"

    def test_absolute_paths_are_kept(self, tmp_path):
        path = self.write(tmp_path, '[compiler]\nweb_root = "/srv/static"\n')
        assert load_compiler_config(path).web_root == Path("/srv/static")

    def test_script_override_only_touches_named_keys(self, tmp_path):
        path = self.write(
            tmp_path,
            """
[scripts.latin.line_height]
increment_step = "half"

[scripts.latin.space]
space_labels = ["l", "m", "s"]
positive_steps = 1
negative_steps = 1
""",
        )
        config = load_compiler_config(path)
        latin = config.script("latin")
        assert latin.type_config.line_height_config.increment_step == "half"
        assert latin.type_config.line_height_config.base_line_height == 1.5555
        assert latin.space_config.space_labels == ("l", "m", "s")
        assert latin.space_config.min_space_size == 16
        assert config.script("cjk") == CJK

    def test_new_script(self, tmp_path):
        path = self.write(
            tmp_path,
            """
[scripts.hangul]
title = "Hangul"

[scripts.hangul.line_height]
base_font_size = 18
base_line_height = 1.8
increment_step = "half"
increment_method = "cjk"

[scripts.hangul.type]
min_width = 320
max_width = 1440
min_font_size = 18
max_font_size = 20
min_type_scale = 1.2
max_type_scale = 1.25
positive_steps = 1
negative_steps = 1
type_labels = ["1xl", "md", "1xs"]

[scripts.hangul.space]
min_width = 320
max_width = 1440
min_space_size = 16
max_space_size = 20
min_space_scale = 1.5
max_space_scale = 2
positive_steps = 0
negative_steps = 0
space_labels = ["md"]
""",
        )
        config = load_compiler_config(path)
        hangul = config.script("hangul")
        assert hangul.title == "Hangul"
        assert hangul.type_config.type_labels == ("1xl", "md", "1xs")
        assert [s.name for s in config.scripts] == ["latin", "cjk", "hangul"]
        validate_compiler_config(config)

    def test_incomplete_new_script(self, tmp_path):
        path = self.write(tmp_path, '[scripts.hangul.space]\nmin_width = 320\n')
        with pytest.raises(ConfigurationError, match="Incomplete"):
            load_compiler_config(path)

    def test_unknown_key(self, tmp_path):
        path = self.write(tmp_path, '[compiler]\noutput = "x.css"\n')
        with pytest.raises(ConfigurationError, match="output"):
            load_compiler_config(path)

    def test_unknown_script_table(self, tmp_path):
        path = self.write(tmp_path, "[scripts.latin.typ]\nmin_width = 400\n")
        with pytest.raises(ConfigurationError, match=r"\[scripts.latin\]: typ"):
            load_compiler_config(path)

    def test_script_value_that_is_not_a_table(self, tmp_path):
        path = self.write(tmp_path, '[scripts.latin]\nspace = "wide"\n')
        with pytest.raises(ConfigurationError, match="must be a table"):
            load_compiler_config(path)

    def test_non_numeric_value_fails_validation(self, tmp_path):
        path = self.write(tmp_path, '[scripts.latin.type]\nmin_width = "abc"\n')
        config = load_compiler_config(path)
        with pytest.raises(ConfigurationError, match="min_width must be a number"):
            validate_compiler_config(config)

    def test_invalid_toml(self, tmp_path):
        path = self.write(tmp_path, "[compiler\n")
        with pytest.raises(ConfigurationError, match="Could not read configuration"):
            load_compiler_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_compiler_config(tmp_path / "missing.toml")
