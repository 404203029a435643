"""Diff previews, confirmation and backups for generated files."""
import difflib
import shutil
from datetime import datetime
from pathlib import Path

import click


def changed_lines(old_content, new_content):
    """Return the +/- lines of an ndiff between two contents."""
    old_lines = old_content.splitlines(keepends=True)
    new_lines = new_content.splitlines(keepends=True)
    return [line for line in difflib.ndiff(old_lines, new_lines) if line and line[0] in ('+', '-')]


def show_diff(changes, file_path):
    click.echo(f"\nDiff preview for: {file_path}\n")
    for line in changes:
        if not line.endswith('\n'):
            line += '\n'
        if line[0] == '+':
            # Green for additions
            click.echo(click.style(line, fg='green'), nl=False)
        else:
            # Red for deletions
            click.echo(click.style(line, fg='red'), nl=False)
    click.echo()


def show_diff_and_confirm(old_content, new_content, file_path):
    """Show diff between old and new content and ask for confirmation.

    Returns: 'unchanged', 'apply', or 'cancel'.
    """
    changes = changed_lines(old_content, new_content)
    if not changes:
        click.echo("No changes detected.")
        return 'unchanged'

    show_diff(changes, file_path)
    if click.confirm("Apply these changes?", default=False):
        return 'apply'
    return 'cancel'


def backup(path):
    """Copy path next to itself, e.g. package.250924-0.backup.json."""
    path = Path(path)
    date_tag = datetime.now().strftime("%y%m%d")
    stem = path.stem or "settings"

    index = 0
    while True:
        backup_path = path.with_name(f"{stem}.{date_tag}-{index}.backup.json")
        if not backup_path.exists():
            break
        index += 1

    shutil.copy2(path, backup_path)
    click.echo(f"📋 Created backup at {backup_path}", err=True)
    return backup_path


def write_text(path, content):
    with open(path, 'w', encoding='utf-8') as f:
        f.write(content)
