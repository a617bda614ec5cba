"""Tests for the typetokens command line."""

import json

import pytest

from typetokens import cli
from typetokens.config import CompilerConfig


class TestParseArgs:
    def test_css_defaults(self):
        args = cli.parse_args(["css"])
        assert args.command == "css"
        assert args.output is None
        assert args.px is False
        assert args.verbose == 0

    def test_verbosity_count(self):
        assert cli.parse_args(["-vv", "css"]).verbose == 2

    def test_subcommand_required(self):
        with pytest.raises(SystemExit):
            cli.parse_args([])


class TestBuildConfig:
    def test_no_overrides_gives_presets(self):
        assert cli.build_config(cli.parse_args(["css"])) == CompilerConfig()

    def test_flags_override_config(self, tmp_path):
        args = cli.parse_args(
            ["css", "-o", str(tmp_path / "out.css"), "--metrics", "m.json", "--px"]
        )
        config = cli.build_config(args)
        assert config.output_path == tmp_path / "out.css"
        assert str(config.metrics_path) == "m.json"
        assert config.use_px is True


class TestMain:
    def test_metrics_command(self, fontface_css, web_root, tmp_path):
        output = tmp_path / "font-metrics.json"
        status = cli.main(["metrics", str(fontface_css), str(output), "--web-root", str(web_root)])
        assert status == 0
        assert set(json.loads(output.read_text())) == {"cheee-small", "noto-sans-jp"}

    def test_css_command(self, fontface_css, web_root, tmp_path):
        output = tmp_path / "css" / "_typography.css"
        status = cli.main(
            [
                "css",
                "-o",
                str(output),
                "--fontface",
                str(fontface_css),
                "--web-root",
                str(web_root),
            ]
        )
        assert status == 0
        css = output.read_text()
        assert "--cheee-small-cap-height: 0.64;" in css
        assert 'html[lang="ja"] {' in css

    def test_dry_run_writes_nothing(self, tmp_path, capsys):
        output = tmp_path / "out.css"
        assert cli.main(["css", "-n", "-o", str(output)]) == 0
        assert not output.exists()
        assert "/* Latin Typography Variables */" in capsys.readouterr().out

    def test_missing_stylesheet_fails(self, tmp_path, capsys):
        status = cli.main(["metrics", str(tmp_path / "nonexistent.css"), str(tmp_path / "m.json")])
        assert status == 1
        assert "CSSParsingError" in capsys.readouterr().out

    def test_bad_config_fails(self, tmp_path):
        config_path = tmp_path / "typetokens.toml"
        config_path.write_text('[compiler]\ndefault_script = "greek"\n')
        assert cli.main(["css", "--config", str(config_path), "-o", str(tmp_path / "x.css")]) == 1
