import json
import os
import tempfile

import pytest
from conftest import requires_jq

from goplssetting import generate as generate_module
from goplssetting.errors import ManifestError, MergeError, OutOfDateError, SchemaError
from goplssetting.generate import GenerateConfig, generate, write_output


@pytest.fixture
def work_dirs(monkeypatch, tmp_path):
    """Record the work directories the pipeline creates."""
    created = []
    base = tmp_path / "work"
    base.mkdir()
    real_mkdtemp = tempfile.mkdtemp

    def mkdtemp(prefix=""):
        path = real_mkdtemp(prefix=prefix, dir=base)
        created.append(path)
        return path

    monkeypatch.setattr(generate_module.tempfile, "mkdtemp", mkdtemp)
    return created


def fake_rewrite(settings_file, manifest, jq="jq", indent=2):
    with open(settings_file, encoding="utf-8") as f:
        settings = json.load(f)
    return json.dumps({"settings": settings}, indent=indent)


def test_generate_requires_manifest(tmp_path, api_file, work_dirs):
    config = GenerateConfig(manifest=tmp_path / "missing.json", api_source=str(api_file))
    with pytest.raises(ManifestError):
        generate(config)
    assert work_dirs == []


def test_generate_cleans_up(monkeypatch, manifest, api_file, work_dirs):
    monkeypatch.setattr(generate_module, "rewrite_manifest", fake_rewrite)

    out = generate(GenerateConfig(manifest=manifest, api_source=str(api_file)))

    settings = json.loads(out)["settings"]
    assert "gopls" in settings
    assert "go.diagnostic.vulncheck" in settings
    assert out.endswith("}\n")
    assert len(work_dirs) == 1
    assert not os.path.exists(work_dirs[0])


def test_generate_keeps_work_dir(monkeypatch, manifest, api_file, work_dirs):
    monkeypatch.setattr(generate_module, "rewrite_manifest", fake_rewrite)

    generate(GenerateConfig(manifest=manifest, api_source=str(api_file), keep_work_dir=True))

    assert os.path.exists(os.path.join(work_dirs[0], "gopls.settings.json"))


def test_generate_cleans_up_on_error(monkeypatch, tmp_path, manifest, api_data, work_dirs):
    api_data["Options"]["User"][0]["Status"] = "bogus"
    api_file = tmp_path / "bad-api.json"
    api_file.write_text(json.dumps(api_data), encoding="utf-8")

    with pytest.raises(SchemaError, match="bogus"):
        generate(GenerateConfig(manifest=manifest, api_source=str(api_file)))
    assert not os.path.exists(work_dirs[0])


def test_generate_merge_failure_writes_nothing(monkeypatch, tmp_path, manifest, api_file, work_dirs):
    def failing_rewrite(*args, **kwargs):
        raise MergeError("jq run failed")

    monkeypatch.setattr(generate_module, "rewrite_manifest", failing_rewrite)
    before = manifest.read_text(encoding="utf-8")

    with pytest.raises(MergeError):
        generate(GenerateConfig(manifest=manifest, output=manifest, api_source=str(api_file)))

    assert manifest.read_text(encoding="utf-8") == before
    assert not os.path.exists(work_dirs[0])


def test_generate_passes_manifest_indentation(monkeypatch, tmp_path, api_file, work_dirs):
    manifest = tmp_path / "package.json"
    manifest.write_text('{\n    "contributes": {}\n}\n', encoding="utf-8")
    seen = {}

    def rewrite(settings_file, manifest, jq="jq", indent=2):
        seen["indent"] = indent
        return "{}"

    monkeypatch.setattr(generate_module, "rewrite_manifest", rewrite)
    generate(GenerateConfig(manifest=manifest, api_source=str(api_file)))
    assert seen["indent"] == 4


@requires_jq
def test_generate_is_idempotent(manifest, api_file):
    config = GenerateConfig(manifest=manifest, output=manifest, api_source=str(api_file))

    first = generate(config)
    write_output(config, first)
    second = generate(config)

    assert first == second
    properties = json.loads(first)["contributes"]["configuration"]["properties"]
    assert "gopls.removedSetting" not in properties
    assert properties["go.buildTags"]["type"] == "string"
    assert properties["gopls"]["properties"]["ui.codelenses"]["properties"]["generate"]["default"] is True


def test_write_output_to_stdout(capsys):
    assert write_output(GenerateConfig(manifest="package.json"), "{}\n") is False
    assert capsys.readouterr().out == "{}\n"


def test_write_output_writes_file(tmp_path):
    output = tmp_path / "package.json"
    output.write_text("{}\n", encoding="utf-8")

    assert write_output(GenerateConfig(manifest=output, output=output), '{"a": 1}\n') is True
    assert output.read_text(encoding="utf-8") == '{"a": 1}\n'


def test_write_output_unchanged(tmp_path):
    output = tmp_path / "package.json"
    output.write_text("{}\n", encoding="utf-8")
    assert write_output(GenerateConfig(manifest=output, output=output, check=True), "{}\n") is False


def test_write_output_check_mode(tmp_path):
    output = tmp_path / "package.json"
    output.write_text("{}\n", encoding="utf-8")

    with pytest.raises(OutOfDateError, match="out of date"):
        write_output(GenerateConfig(manifest=output, output=output, check=True), '{"a": 1}\n')
    assert output.read_text(encoding="utf-8") == "{}\n"


def test_write_output_confirm(monkeypatch, tmp_path):
    output = tmp_path / "package.json"
    output.write_text("{}\n", encoding="utf-8")
    monkeypatch.setattr("click.confirm", lambda *args, **kwargs: True)

    assert write_output(GenerateConfig(manifest=output, output=output, confirm=True), '{"a": 1}\n') is True
    assert output.read_text(encoding="utf-8") == '{"a": 1}\n'
    backups = list(tmp_path.glob("package.*.backup.json"))
    assert len(backups) == 1
    assert backups[0].read_text(encoding="utf-8") == "{}\n"


def test_write_output_confirm_cancelled(monkeypatch, tmp_path):
    output = tmp_path / "package.json"
    output.write_text("{}\n", encoding="utf-8")
    monkeypatch.setattr("click.confirm", lambda *args, **kwargs: False)

    assert write_output(GenerateConfig(manifest=output, output=output, confirm=True), '{"a": 1}\n') is False
    assert output.read_text(encoding="utf-8") == "{}\n"
    assert list(tmp_path.glob("*.backup.json")) == []
