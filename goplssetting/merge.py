"""Patching package.json with generated settings."""
import shutil
import subprocess
from pathlib import Path

import json5

from .errors import ManifestError, MergeError, ToolNotFoundError

# Drop previously generated gopls.* settings, then add the new ones. Keys
# from $GOPLS_SETTINGS win over hand-written ones; an existing `gopls` key is
# overwritten in place. A missing properties object is created.
JQ_PROGRAM = (
    ".contributes.configuration.properties |= "
    '((. // {}) | with_entries(select(.key | startswith("gopls.") | not))'
    " + $GOPLS_SETTINGS[0])"
)


def read_manifest(path) -> str:
    """Return the manifest's content after checking it is a JSON object."""
    manifest = Path(path).expanduser()
    if not manifest.is_file():
        raise ManifestError(f"failed to find input package.json ({manifest})")

    with open(manifest, "r", encoding="utf-8") as f:
        content = f.read()
    try:
        data = json5.loads(content)
    except ValueError as e:
        raise ManifestError(f"could not parse {manifest}: {e}") from e
    if not isinstance(data, dict):
        raise ManifestError(f"{manifest}: expected a JSON object")
    return content


def detect_indentation(content):
    """Detect the indentation of existing content: a tab or a number of spaces."""
    for line in content.splitlines():
        if line and line[0] in (' ', '\t'):
            indent = line[:len(line) - len(line.lstrip(' \t'))]
            if indent.startswith('\t'):
                return '\t'
            return len(indent)
    # Default to 2 spaces if we can't detect
    return 2


def jq_indent_flags(indent):
    if indent == '\t':
        return ["--tab"]
    # jq accepts at most 7 spaces
    return ["--indent", str(min(indent, 7))]


def find_jq(jq="jq") -> str:
    path = shutil.which(jq)
    if path is None:
        raise ToolNotFoundError(f"missing `{jq}`: not found in PATH")
    return path


def rewrite_manifest(settings_file, manifest, jq="jq", indent=2) -> str:
    """
    Run jq to replace the gopls settings of the manifest with the ones in
    settings_file. Returns the patched manifest.
    """
    cmd = [
        find_jq(jq),
        *jq_indent_flags(indent),
        "--slurpfile", "GOPLS_SETTINGS", str(settings_file),
        JQ_PROGRAM,
        str(manifest),
    ]
    try:
        proc = subprocess.run(cmd, capture_output=True, text=True, encoding="utf-8")
    except OSError as e:
        raise MergeError(f"jq run failed: {e}") from e
    if proc.returncode != 0:
        raise MergeError(f"jq run failed (exit status {proc.returncode}): {proc.stderr.strip()}")
    return proc.stdout.strip()
