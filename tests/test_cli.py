import json
from pathlib import Path

import yaml
from click.testing import CliRunner

from collection_openapi.cli import main

FIXTURES = Path(__file__).parent / "fixtures"
SAMPLE = FIXTURES / "sample.collection.json"


class TestCliExport:
    def test_export_json(self, tmp_path):
        output_file = tmp_path / "out" / "api.json"
        runner = CliRunner()
        result = runner.invoke(main, ["export", str(SAMPLE), "-o", str(output_file), "--env", "Prod"])

        assert result.exit_code == 0, result.output
        doc = json.loads(output_file.read_text(encoding="utf-8"))
        assert doc["openapi"] == "3.0.3"
        assert doc["servers"][0]["variables"]["host"]["default"] == "api.example.com"
        assert "Converted 4 operations." in result.output

    def test_export_yaml_with_var_override(self, tmp_path):
        output_file = tmp_path / "api.yaml"
        runner = CliRunner()
        result = runner.invoke(main, [
            "export", str(SAMPLE),
            "-o", str(output_file),
            "--format", "yaml",
            "--var", "host=staging.example.com",
        ])

        assert result.exit_code == 0, result.output
        doc = yaml.safe_load(output_file.read_text(encoding="utf-8"))
        assert doc["servers"][0]["variables"]["host"]["default"] == "staging.example.com"

    def test_default_output_name(self, tmp_path):
        runner = CliRunner()
        with runner.isolated_filesystem(temp_dir=tmp_path):
            result = runner.invoke(main, ["export", str(SAMPLE), "--env", "Prod", "--format", "yaml"])
            assert result.exit_code == 0, result.output
            assert Path("Sample Collection.Prod.openapi.yaml").exists()

    def test_bad_var_is_usage_error(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, ["export", str(SAMPLE), "-o", str(tmp_path / "x.json"), "--var", "novalue"])
        assert result.exit_code == 2
        assert "KEY=VALUE" in result.output

    def test_openapi_input_is_refused(self, tmp_path):
        spec = tmp_path / "api.json"
        spec.write_text('{"openapi": "3.0.3", "paths": {}}')
        runner = CliRunner()
        result = runner.invoke(main, ["export", str(spec), "-o", str(tmp_path / "out.json")])
        assert result.exit_code == 1
        assert "already an OpenAPI" in result.output
        assert not (tmp_path / "out.json").exists()

    def test_verbose_flag(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, ["-v", "export", str(SAMPLE), "-o", str(tmp_path / "x.json")])
        assert result.exit_code == 0, result.output


class TestCliDetect:
    def test_detect_collection(self):
        result = CliRunner().invoke(main, ["detect", str(SAMPLE)])
        assert result.exit_code == 0
        assert result.output.strip() == "collection"


class TestCliUnreadableInput:
    def test_undecodable_file_is_refused(self, tmp_path):
        broken = tmp_path / "broken.json"
        broken.write_bytes(b'{"items": [], "name": "\xff"}')
        result = CliRunner().invoke(main, ["export", str(broken), "-o", str(tmp_path / "out.json")])
        assert result.exit_code == 1
        assert "Cannot read" in result.output
        assert not isinstance(result.exception, UnicodeDecodeError)

    def test_detect_undecodable_file(self, tmp_path):
        binary = tmp_path / "blob.bin"
        binary.write_bytes(b"\xff\xfe\x00")
        result = CliRunner().invoke(main, ["detect", str(binary)])
        assert result.exit_code == 0
        assert result.output.strip() == "unknown"
