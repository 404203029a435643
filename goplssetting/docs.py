"""
Documentation generated from package.json.

docs/commands.md lists the contributed commands and docs/settings.md every
configuration property, including the settings inside the `gopls` object.
Only the part of each file below MARKER is rewritten.
"""
import json
from dataclasses import dataclass, field
from pathlib import Path

import click
import json5

from .errors import DocsError, OutOfDateError
from .output import changed_lines, show_diff, write_text

MARKER = "<!-- Everything below this line is generated. DO NOT EDIT. -->"

GOPLS_USAGE = (
    "Customize `gopls` behavior by specifying the gopls' settings in this section. "
    "For example, \n```\n\"gopls\" : {\n\t\"build.directoryFilters\": [\"-node_modules\"]\n\t...\n}\n```\n"
    "This section is directly read by `gopls`. See the [`gopls` section](#settings-for-gopls) section "
    "for the full list of `gopls` settings."
)


@dataclass
class DocsConfig:
    root: Path
    # False reports out of date docs instead of rewriting them.
    write: bool = True


@dataclass
class Property:
    name: str
    type: str | list | None = None
    description: str = ""
    deprecation: str = ""
    enum: list = field(default_factory=list)
    enum_descriptions: list = field(default_factory=list)
    properties: dict = field(default_factory=dict)
    default: object = None

    @classmethod
    def from_json(cls, name, data):
        if not isinstance(data, dict):
            return cls(name=name)
        return cls(
            name=name,
            type=data.get("type"),
            description=data.get("markdownDescription") or data.get("description", ""),
            deprecation=data.get("markdownDeprecationMessage") or data.get("deprecationMessage", ""),
            enum=data.get("enum") or [],
            enum_descriptions=data.get("markdownEnumDescriptions") or data.get("enumDescriptions") or [],
            properties=data.get("properties") or {},
            default=data.get("default"),
        )

    @property
    def title(self):
        if self.deprecation:
            return f"{self.name} (deprecated)"
        return self.name

    @property
    def full_description(self):
        if self.deprecation:
            return f"{self.deprecation}\n{self.description}"
        return self.description


def format_value(v):
    """Render a JSON value the way it reads in prose."""
    if isinstance(v, bool):
        return "true" if v else "false"
    if isinstance(v, str):
        return v
    return json.dumps(v)


def format_map_object(obj, indent=""):
    lines = [f"{indent}{{"]
    for k in sorted(obj):
        v = obj[k]
        if isinstance(v, dict):
            value = format_map_object(v, indent + "\t").lstrip("\t")
        elif isinstance(v, str):
            value = json.dumps(v)
        else:
            value = format_value(v)
        lines.append(f"{indent}\t{json.dumps(k)} :\t{value},")
    lines.append(f"{indent}}}")
    return "\n".join(lines)


def default_snippet(p: Property) -> str:
    if p.default is None:
        return ""
    if p.type == "object":
        if isinstance(p.default, dict) and p.default:
            return format_map_object(p.default)
        return ""
    if p.type == "string":
        return json.dumps(p.default)
    if p.type in ("boolean", "number", "integer"):
        return format_value(p.default)
    if p.type == "array":
        if isinstance(p.default, list) and p.default:
            return format_value(p.default)
        return ""
    if isinstance(p.type, list):
        return format_value(p.default)
    raise DocsError(f"cannot describe the default of {p.name!r} with type {p.type!r}")


def default_block(p: Property) -> str:
    snippet = default_snippet(p)
    if not snippet:
        return ""
    if p.type == "object":
        return f"Default:\n```\n{snippet}\n```"
    return f"Default: `{snippet}`"


def enum_snippet(p: Property) -> str:
    """Return the list of allowed values for an enum property."""
    if not p.enum:
        return ""
    descriptions = p.enum_descriptions
    if any(descriptions) and len(descriptions) == len(p.enum):
        lines = ["Allowed Options:", ""]
        for value, desc in zip(p.enum, descriptions):
            line = f"* `{format_value(value)}`"
            if desc:
                line += ": " + desc.replace("\n\n", "<br/>").rstrip("\n")
            lines.append(line)
        return "\n".join(lines) + "\n"
    return "Allowed Options: " + ", ".join(f"`{format_value(v)}`" for v in p.enum)


def gocomment_to_markdown(s: str) -> str:
    """
    Make text written as Go doc comments fit in a markdown table cell.

    Indented lines become <pre> blocks, blank lines become <br/> and other
    newlines are folded into spaces.
    """
    lines = s.split("\n")
    out = []
    in_pre = False
    last = len(lines) - 1
    for i, line in enumerate(lines):
        if line.startswith("\t"):
            out.append("<br/>" if in_pre else "<pre>")
            in_pre = True
            line = line[1:]
        elif in_pre:
            in_pre = False
            out.append("</pre>")

        if line == "" and i != last:
            out.append("<br/>")
        else:
            out.append(line)
        if i != last and not in_pre:
            out.append(" ")
    return "".join(out)


def object_properties_table(properties: dict) -> str:
    if not properties:
        return ""
    rows = ["| Properties | Description |", "| --- | --- |"]
    for name in sorted(properties):
        if not isinstance(properties[name], dict):
            rows.append(f"| `{name}` |   |")
            continue
        p = Property.from_json(name, properties[name])
        desc = p.full_description
        enum = enum_snippet(p)
        if enum:
            desc += "\n\n" + enum
        defaults = default_block(p)
        if defaults:
            desc += "\n\n" + defaults
        rows.append(f"| `{p.title}` | {gocomment_to_markdown(desc)} |")
    return "\n".join(rows)


def property_section(p: Property, heading="###") -> str:
    text = f"{heading} `{p.title}`\n\n{p.full_description}"
    enum = enum_snippet(p)
    if enum:
        text += f"<br/>\n{enum}"
    if p.type == "object":
        table = object_properties_table(p.properties)
        if table:
            text += "\n" + table
    defaults = default_block(p)
    if defaults:
        text += "\n\n" + defaults
    return text + "\n"


def commands_markdown(commands) -> str:
    return "\n\n".join(f"### `{c.get('title', '')}`\n\n{c.get('description', '')}" for c in commands)


def settings_markdown(properties: dict) -> str:
    sections = []
    for name in sorted(properties):
        if name == "gopls":
            sections.append(f"### `gopls`\n\n{GOPLS_USAGE}\n\n")
        else:
            sections.append(property_section(Property.from_json(name, properties[name])) + "\n")

    gopls = Property.from_json("gopls", properties.get("gopls", {}))
    sections.append("## Settings for `gopls`\n\n")
    sections.append(gopls.description + "\n\n")
    for name in sorted(gopls.properties):
        data = gopls.properties[name]
        if not isinstance(data, dict):
            sections.append(f"### `{name}`\n")
            continue
        sections.append(property_section(Property.from_json(name, data)) + "\n")
    return "".join(sections)


def splice(old_content: str, generated: str, filename) -> str:
    """Replace everything after MARKER in old_content with generated."""
    head, sep, _ = old_content.partition(MARKER)
    if not sep:
        raise DocsError(f"expected to find {MARKER!r} in {filename}, not found")
    return f"{head.strip()}\n\n{MARKER}\n\n{generated}\n"


def rewrite(path: Path, generated: str, config: DocsConfig) -> bool:
    """Update the generated part of path. Returns True if the file changed."""
    if not path.exists():
        raise DocsError(f"{path} does not exist")
    with open(path, 'r', encoding='utf-8') as f:
        old_content = f.read()

    new_content = splice(old_content, generated, path)
    if old_content == new_content:
        return False

    if not config.write:
        show_diff(changed_lines(old_content, new_content), path)
        base = f"docs/{path.name}"
        raise OutOfDateError(
            f"{path.stem} have changed in the package.json, but documentation in {base} was not updated.\n"
            "To update the settings, run `goplssetting docs --write`."
        )

    write_text(path, new_content)
    click.echo(f"updated {path}", err=True)
    return True


def load_package_json(root: Path) -> dict:
    path = root / "package.json"
    if not path.exists():
        raise DocsError(f"{path} does not exist")
    with open(path, 'r', encoding='utf-8') as f:
        try:
            data = json5.loads(f.read())
        except ValueError as e:
            raise DocsError(f"could not parse {path}: {e}") from e
    if not isinstance(data, dict):
        raise DocsError(f"{path}: expected a JSON object")
    return data


def generate_docs(config: DocsConfig) -> list[Path]:
    """Regenerate docs/commands.md and docs/settings.md. Returns the changed files."""
    root = Path(config.root).expanduser()
    contributes = load_package_json(root).get("contributes", {})
    commands = contributes.get("commands", [])
    properties = contributes.get("configuration", {}).get("properties", {})

    changed = []
    for path, generated in (
        (root / "docs" / "commands.md", commands_markdown(commands)),
        (root / "docs" / "settings.md", settings_markdown(properties)),
    ):
        if rewrite(path, generated, config):
            changed.append(path)
    return changed
