from typer.testing import CliRunner

from scalar_kiota.cache import spec_hash
from scalar_kiota.cli import app
from scalar_kiota.errors import SpecUnavailableError
from scalar_kiota.generator import SdkGenerator
from scalar_kiota.schema import GenerationResult

# The generator is monkeypatched so no HTTP calls or processes happen.

captured = {}


async def fake_generate_if_needed(self):
    captured["options"] = self.options
    captured["server_url"] = self.server_url
    return GenerationResult(spec_hash="abc", regenerated=True, languages=self.options.languages, duration_s=1.0)


async def fake_cached(self):
    return GenerationResult(spec_hash="abc", regenerated=False, languages=self.options.languages)


async def fake_unavailable(self):
    raise SpecUnavailableError("http://localhost:5000/openapi/v1.json", "connection refused")


def test_generate_passes_options(monkeypatch, tmp_path):
    monkeypatch.setattr(SdkGenerator, "generate_if_needed", fake_generate_if_needed)
    monkeypatch.chdir(tmp_path)
    result = CliRunner().invoke(app, [
        "generate",
        "--server-url", "http://localhost:8000",
        "--output", str(tmp_path / "out"),
        "--language", "TypeScript",
        "--language", "Python",
        "--sdk-name", "TodosClient",
        "--no-bundle",
    ])
    assert result.exit_code == 0, result.output
    assert "Generated TypeScript, Python SDK(s)" in result.output
    options = captured["options"]
    assert options.languages == ("TypeScript", "Python")
    assert options.sdk_name == "TodosClient"
    assert options.bundle_typescript is False
    assert options.output_path == str(tmp_path / "out")
    assert captured["server_url"] == "http://localhost:8000"


def test_generate_reads_yaml_config(monkeypatch, tmp_path):
    monkeypatch.setattr(SdkGenerator, "generate_if_needed", fake_generate_if_needed)
    cfg = tmp_path / "opts.yaml"
    cfg.write_text("sdk_name: FromYaml\nlanguages: [Go]\n", encoding="utf-8")
    result = CliRunner().invoke(app, ["generate", "--config", str(cfg), "--output", str(tmp_path / "out")])
    assert result.exit_code == 0, result.output
    assert captured["options"].sdk_name == "FromYaml"
    assert captured["options"].languages == ("Go",)
    assert captured["options"].bundle_typescript is True


def test_generate_reports_up_to_date(monkeypatch, tmp_path):
    monkeypatch.setattr(SdkGenerator, "generate_if_needed", fake_cached)
    result = CliRunner().invoke(app, ["generate", "--output", str(tmp_path)])
    assert result.exit_code == 0, result.output
    assert "SDKs are up-to-date" in result.output


def test_generate_failure_exits_nonzero(monkeypatch, tmp_path):
    monkeypatch.setattr(SdkGenerator, "generate_if_needed", fake_unavailable)
    result = CliRunner().invoke(app, ["generate", "--output", str(tmp_path)])
    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)


def test_status_reports_stale_cache(monkeypatch, tmp_path):
    async def fake_download(self):
        return "spec"

    monkeypatch.setattr(SdkGenerator, "download_spec", fake_download)
    result = CliRunner().invoke(app, ["status", "--output", str(tmp_path)])
    assert result.exit_code == 0, result.output
    assert "Spec hash: " in result.output
    assert "Cache: stale" in result.output


def test_generate_missing_config_file_exits_cleanly(tmp_path):
    result = CliRunner().invoke(app, ["generate", "--config", str(tmp_path / "missing.yaml")])
    assert result.exit_code == 1
    assert "Options file not found" in result.output
    assert not isinstance(result.exception, FileNotFoundError)


def test_status_invalid_config_exits_cleanly(tmp_path):
    cfg = tmp_path / "bad.yaml"
    cfg.write_text("theme: not-a-theme\n", encoding="utf-8")
    result = CliRunner().invoke(app, ["status", "--config", str(cfg)])
    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)


def test_status_reports_up_to_date_cache(monkeypatch, tmp_path):
    async def fake_download(self):
        return "spec"

    monkeypatch.setattr(SdkGenerator, "download_spec", fake_download)
    (tmp_path / ".spec.hash").write_text(spec_hash("spec"), encoding="utf-8")
    (tmp_path / "config.js").write_text("export default {};", encoding="utf-8")
    (tmp_path / "sdk.js").write_text("export{};", encoding="utf-8")

    result = CliRunner().invoke(app, ["status", "--output", str(tmp_path)])
    assert result.exit_code == 0, result.output
    assert f"Spec hash: {spec_hash('spec')}" in result.output
    assert "Cache: up-to-date" in result.output


def test_status_spec_unavailable_exits_nonzero(monkeypatch, tmp_path):
    async def fake_download(self):
        raise SpecUnavailableError("http://localhost:5000/openapi/v1.json", "connection refused")

    monkeypatch.setattr(SdkGenerator, "download_spec", fake_download)
    result = CliRunner().invoke(app, ["status", "--output", str(tmp_path)])
    assert result.exit_code == 1
    assert "connection refused" in result.output
    assert "Cache:" not in result.output
