"""
gopls settings generator for the VS Code Go extension

Generates the `gopls` section of the extension's package.json from the
options reported by `gopls api-json`, and the settings/commands reference
documentation from package.json.

Features:
- Settings schema generated from a live gopls binary or a saved/published api-json
- Replaces previously generated gopls settings, leaving hand-written settings alone
- Keeps the indentation of the existing package.json
- Diff preview, confirmation and dated backups before overwriting files
- Check mode for CI: exits non-zero when generated files are stale

Usage:
    goplssetting settings --in ./package.json --out ./package.json
    goplssetting docs --root .

License: MIT
"""
import json
import sys
from pathlib import Path

import click
import requests

from .api import DEFAULT_FETCH_TIMEOUT, load_api, read_api
from .docs import DocsConfig, generate_docs
from .errors import GenerationError, OutOfDateError
from .generate import GenerateConfig, build, generate, write_output
from .schema import settings_to_json


def fail(message):
    click.echo(f"❌ Error: {message}", err=True)
    sys.exit(1)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
def main():
    """Generators for the VS Code Go extension's gopls settings and docs."""


@main.command()
@click.option(
    '--in', 'manifest',
    metavar='PACKAGE_JSON',
    type=click.Path(dir_okay=False, path_type=Path),
    help='Input package.json location.',
)
@click.option(
    '--out', 'output',
    metavar='PACKAGE_JSON',
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help='Output package.json location (prints to stdout if not provided).',
)
@click.option(
    '--api-json', 'api_source',
    metavar='PATH_OR_URL',
    default=None,
    help='Read the gopls API from a saved `gopls api-json` output or URL instead of running gopls.',
)
@click.option(
    '--gopls',
    envvar='GOPLSSETTING_GOPLS',
    default='gopls',
    show_default=True,
    help='gopls binary to query.',
)
@click.option(
    '--jq',
    envvar='GOPLSSETTING_JQ',
    default='jq',
    show_default=True,
    help='jq binary used to patch package.json.',
)
@click.option(
    '-w', '--keep-work-dir',
    is_flag=True,
    help='Do not delete intermediate files.',
)
@click.option(
    '--check',
    is_flag=True,
    help='Exit with an error instead of writing when --out is out of date.',
)
@click.option(
    '--confirm',
    is_flag=True,
    help='Show a diff and ask before overwriting --out (a backup is kept).',
)
@click.option(
    '--dump',
    is_flag=True,
    help='Print only the generated settings and exit.',
)
@click.option(
    '--timeout',
    type=float,
    default=DEFAULT_FETCH_TIMEOUT,
    show_default=True,
    help='Timeout in seconds when --api-json is a URL.',
)
def settings(manifest, output, api_source, gopls, jq, keep_work_dir, check, confirm, dump, timeout):
    """
    Update the gopls.* configurations in package.json.

    \b
    EXAMPLES:

    # Regenerate the settings in place
    goplssetting settings --in ./package.json --out ./package.json

    # Fail in CI when package.json is stale
    goplssetting settings --in ./package.json --out ./package.json --check

    # Use the API of a published gopls release
    goplssetting settings --in ./package.json --api-json ./api.json
    """
    config = GenerateConfig(
        manifest=manifest,
        output=output,
        api_source=api_source,
        gopls=gopls,
        jq=jq,
        keep_work_dir=keep_work_dir,
        check=check,
        confirm=confirm,
        timeout=timeout,
    )

    try:
        if dump:
            api = load_api(api_source, timeout=timeout) if api_source else read_api(gopls)
            click.echo(json.dumps(settings_to_json(build(api)), indent=2, ensure_ascii=False))
            return

        if manifest is None:
            fail("--in file must be specified")

        write_output(config, generate(config))

    except requests.exceptions.RequestException as e:
        fail(f"could not fetch gopls API from {api_source}: {e}")
    except OutOfDateError as e:
        click.echo(str(e), err=True)
        sys.exit(1)
    except (GenerationError, OSError) as e:
        fail(e)


@main.command()
@click.option(
    '--root',
    metavar='DIR',
    type=click.Path(file_okay=False, exists=True, path_type=Path),
    default='.',
    show_default=True,
    help='Extension directory holding package.json and docs/.',
)
@click.option(
    '--write/--no-write',
    default=True,
    show_default=True,
    help='Write new file contents to disk; with --no-write, fail if docs are stale.',
)
def docs(root, write):
    """Regenerate docs/commands.md and docs/settings.md from package.json."""
    try:
        changed = generate_docs(DocsConfig(root=root, write=write))
    except OutOfDateError as e:
        click.echo(str(e), err=True)
        sys.exit(1)
    except (GenerationError, OSError) as e:
        fail(e)

    if not changed:
        click.echo("No changes detected.", err=True)


if __name__ == "__main__":
    main()
