"""
The gopls settings pipeline: read the gopls API, order and place its
options, build VS Code settings and merge them into package.json.
"""
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path

import click

from .api import DEFAULT_FETCH_TIMEOUT, load_api, read_api
from .errors import OutOfDateError
from .merge import detect_indentation, read_manifest, rewrite_manifest
from .normalize import arrange, extract_options
from .output import backup, changed_lines, show_diff, show_diff_and_confirm, write_text
from .schema import build_settings, settings_json


@dataclass
class GenerateConfig:
    manifest: Path
    # None writes the result to stdout.
    output: Path | None = None
    # Saved api-json file or URL; None runs gopls.
    api_source: str | None = None
    gopls: str = "gopls"
    jq: str = "jq"
    keep_work_dir: bool = False
    # Fail instead of writing when output is out of date.
    check: bool = False
    # Show a diff and ask before overwriting output.
    confirm: bool = False
    timeout: float = DEFAULT_FETCH_TIMEOUT


def build(api):
    """Return the generated configuration properties for api."""
    return build_settings(arrange(extract_options(api)))


def generate(config: GenerateConfig) -> str:
    """Return the content of the manifest with regenerated gopls settings."""
    content = read_manifest(config.manifest)

    work_dir = tempfile.mkdtemp(prefix="goplssettings")
    click.echo(f"WORK={work_dir}", err=True)
    try:
        if config.api_source:
            api = load_api(config.api_source, timeout=config.timeout)
        else:
            api = read_api(config.gopls)
        properties = build(api)

        settings_file = Path(work_dir) / "gopls.settings.json"
        write_text(settings_file, settings_json(properties))

        return rewrite_manifest(
            settings_file, config.manifest, jq=config.jq, indent=detect_indentation(content)
        ) + "\n"
    finally:
        if not config.keep_work_dir:
            shutil.rmtree(work_dir, ignore_errors=True)


def write_output(config: GenerateConfig, content: str):
    """Write generated content where config says. Returns True if a file changed."""
    if config.output is None:
        click.echo(content, nl=False)
        return False

    output = Path(config.output).expanduser()
    old_content = ""
    if output.exists():
        with open(output, 'r', encoding='utf-8') as f:
            old_content = f.read()

    if old_content == content:
        click.echo("No changes detected.", err=True)
        return False

    if config.check:
        show_diff(changed_lines(old_content, content), output)
        raise OutOfDateError(
            f"gopls settings in {output} are out of date. "
            "To update them, run `goplssetting settings --in <package.json> --out <package.json>`."
        )

    if config.confirm:
        decision = show_diff_and_confirm(old_content, content, output)
        if decision == 'unchanged':
            return False
        if decision == 'cancel':
            click.echo("❌ Operation cancelled by user", err=True)
            return False
        if output.exists():
            backup(output)

    write_text(output, content)
    click.echo(f"✅ Updated {output}", err=True)
    return True
