"""Integration tests for the CLI using Typer's CliRunner."""
import json
from unittest.mock import patch

from typer.testing import CliRunner

from ddtr import __version__
from ddtr.cli import app
from ddtr.errors import BaiduApiError

runner = CliRunner()


class TestCLIInit:

    def test_init_creates_config(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(app, ["init"])

        assert result.exit_code == 0
        assert "Created configuration file" in result.output
        with open(tmp_path / ".ddtr.json", 'r', encoding='utf-8') as f:
            assert json.load(f)["targetLanguages"] == ["en", "hk", "ja", "ko"]

    def test_init_refuses_to_overwrite(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".ddtr.json").write_text('{"keep": true}', encoding='utf-8')

        result = runner.invoke(app, ["init"])

        assert result.exit_code == 1
        assert (tmp_path / ".ddtr.json").read_text(encoding='utf-8') == '{"keep": true}'

    def test_init_force_and_custom_path(self, tmp_path):
        target = tmp_path / "custom.json"
        target.write_text("{}", encoding='utf-8')

        result = runner.invoke(app, ["init", "--config", str(target), "--force"])

        assert result.exit_code == 0
        with open(target, 'r', encoding='utf-8') as f:
            assert json.load(f)["baseFilename"] == "pluginBundle"


class TestCLITran:

    def test_tran_writes_files_and_reports(self, write_config, output_dir, fake_translator, lines_of):
        write_config()
        translator = fake_translator(results={"en": ["Hello"], "ja": BaiduApiError("Invalid Sign", code="54001")})

        with patch("ddtr.cli.BaiduTranslateClient", return_value=translator) as mock_client:
            result = runner.invoke(app, ["tran", "你好", "--key", "greeting", "--quiet"])

        assert result.exit_code == 0, result.output
        mock_client.assert_called_once_with("test-id", "test-key")
        assert "written" in result.output
        assert "translation_failed" in result.output
        assert "Invalid Sign" in result.output
        assert "Elapsed:" in result.output
        assert lines_of(output_dir / "bundle_en.properties") == ["greeting=Hello"]
        assert lines_of(output_dir / "bundle_ja.properties") is None
        assert lines_of(output_dir / "bundle.properties") == ["greeting=你好"]

    def test_tran_with_explicit_config_path(self, write_config, output_dir, fake_translator, lines_of):
        config_path = write_config(targetLanguages=["en"])
        translator = fake_translator(results={"en": ["Hello"]})

        with patch("ddtr.cli.BaiduTranslateClient", return_value=translator):
            result = runner.invoke(app, ["tran", "你好", "-k", "greeting", "-c", config_path, "-q"])

        assert result.exit_code == 0, result.output
        assert lines_of(output_dir / "bundle_en.properties") == ["greeting=Hello"]

    def test_unknown_language_halts_before_any_call(self, write_config, output_dir, fake_translator):
        write_config(targetLanguages=["en", "xx"])
        translator = fake_translator()

        with patch("ddtr.cli.BaiduTranslateClient", return_value=translator) as mock_client:
            result = runner.invoke(app, ["tran", "你好", "--key", "greeting"])

        assert result.exit_code == 1
        assert "xx" in result.output
        mock_client.assert_not_called()
        assert translator.calls == []
        assert list(output_dir.iterdir()) == []

    def test_missing_config_exits_with_error(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        with patch("ddtr.cli.BaiduTranslateClient") as mock_client:
            result = runner.invoke(app, ["tran", "你好", "--key", "greeting"])

        assert result.exit_code == 1
        assert "not found" in result.output
        mock_client.assert_not_called()

    def test_missing_output_directory_exits_with_error(self, write_config):
        write_config(outputDir="nowhere")

        result = runner.invoke(app, ["tran", "你好", "--key", "greeting"])

        assert result.exit_code == 1
        assert "Output directory does not exist" in result.output

    def test_key_is_required(self, write_config):
        write_config()

        result = runner.invoke(app, ["tran", "你好"])

        assert result.exit_code != 0

    def test_empty_text_is_rejected(self, write_config):
        write_config()

        result = runner.invoke(app, ["tran", "", "--key", "greeting"])

        assert result.exit_code == 1


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output
