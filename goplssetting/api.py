"""
Reading the gopls API description.

`gopls api-json` prints a JSON document describing every option, code lens,
analyzer and inlay hint the language server supports. The types below
mirror that document; field names follow the Python convention and are
mapped from the server's CamelCase keys in parse_api().
"""
import json
import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

import click
import requests

from .errors import APIError, ToolNotFoundError

DEFAULT_FETCH_TIMEOUT = 30.0


@dataclass(frozen=True)
class EnumKey:
    name: str  # quoted, in JSON syntax
    doc: str = ""
    default: str = ""


@dataclass(frozen=True)
class EnumKeys:
    value_type: str = ""
    keys: tuple[EnumKey, ...] = ()


@dataclass(frozen=True)
class EnumValue:
    value: str  # JSON literal
    doc: str = ""


@dataclass(frozen=True)
class Option:
    name: str
    type: str  # bool | string | enum | any | []T | map[T]T | time.Duration
    doc: str = ""
    enum_keys: EnumKeys = field(default_factory=EnumKeys)
    enum_values: tuple[EnumValue, ...] = ()
    default: str = ""
    status: str = ""
    hierarchy: str = ""
    deprecation_message: str = ""

    @property
    def key(self) -> str:
        if self.hierarchy:
            return f"{self.hierarchy}.{self.name}"
        return self.name


@dataclass(frozen=True)
class Lens:
    file_type: str
    lens: str
    title: str = ""
    doc: str = ""
    default: bool = False


@dataclass(frozen=True)
class Analyzer:
    name: str
    doc: str = ""
    url: str = ""
    default: bool = False


@dataclass(frozen=True)
class Hint:
    name: str
    doc: str = ""
    default: bool = False


@dataclass(frozen=True)
class API:
    options: dict[str, tuple[Option, ...]]
    lenses: tuple[Lens, ...] = ()
    analyzers: tuple[Analyzer, ...] = ()
    hints: tuple[Hint, ...] = ()

    def all_options(self):
        for section in self.options.values():
            yield from section


def _object(value, what):
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise APIError(f"{what}: expected a JSON object, got {type(value).__name__}")
    return value


def _array(value, what):
    if value is None:
        return []
    if not isinstance(value, list):
        raise APIError(f"{what}: expected a JSON array, got {type(value).__name__}")
    return value


def _objects(value, what):
    """Yield the objects of a JSON array of objects."""
    for i, item in enumerate(_array(value, what)):
        yield _object(item, f"{what}[{i}]")


def _parse_option(raw, where):
    raw = _object(raw, where)
    enum_keys = _object(raw.get("EnumKeys"), f"{where}.EnumKeys")
    keys = tuple(
        EnumKey(name=k.get("Name", ""), doc=k.get("Doc", ""), default=k.get("Default", ""))
        for k in _objects(enum_keys.get("Keys"), f"{where}.EnumKeys.Keys")
    )
    values = tuple(
        EnumValue(value=v.get("Value", ""), doc=v.get("Doc", ""))
        for v in _objects(raw.get("EnumValues"), f"{where}.EnumValues")
    )
    return Option(
        name=raw.get("Name", ""),
        type=raw.get("Type", ""),
        doc=raw.get("Doc", ""),
        enum_keys=EnumKeys(value_type=enum_keys.get("ValueType", ""), keys=keys),
        enum_values=values,
        default=raw.get("Default", ""),
        status=raw.get("Status", ""),
        hierarchy=raw.get("Hierarchy", ""),
        deprecation_message=raw.get("DeprecationMessage", ""),
    )


def parse_api(data) -> API:
    """Convert a decoded `gopls api-json` document into an API."""
    data = _object(data, "api-json")
    options = {}
    for section, entries in _object(data.get("Options"), "Options").items():
        options[section] = tuple(
            _parse_option(raw, f"Options.{section}") for raw in _objects(entries, f"Options.{section}")
        )
    lenses = tuple(
        Lens(
            file_type=raw.get("FileType", ""),
            lens=raw.get("Lens", ""),
            title=raw.get("Title", ""),
            doc=raw.get("Doc", ""),
            default=bool(raw.get("Default", False)),
        )
        for raw in _objects(data.get("Lenses"), "Lenses")
    )
    analyzers = tuple(
        Analyzer(
            name=raw.get("Name", ""),
            doc=raw.get("Doc", ""),
            url=raw.get("URL", ""),
            default=bool(raw.get("Default", False)),
        )
        for raw in _objects(data.get("Analyzers"), "Analyzers")
    )
    hints = tuple(
        Hint(name=raw.get("Name", ""), doc=raw.get("Doc", ""), default=bool(raw.get("Default", False)))
        for raw in _objects(data.get("Hints"), "Hints")
    )
    return API(options=options, lenses=lenses, analyzers=analyzers, hints=hints)


def decode_api(text, source):
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise APIError(f"failed to decode API from {source}: {e}") from e
    return parse_api(data)


def _run_gopls(gopls, *args):
    try:
        proc = subprocess.run([gopls, *args], capture_output=True, text=True)
    except FileNotFoundError as e:
        raise ToolNotFoundError(f"missing `{gopls}`: {e}") from e
    if proc.returncode != 0:
        raise APIError(
            f"`{gopls} {' '.join(args)}` exited with status {proc.returncode}: {proc.stderr.strip()}"
        )
    return proc.stdout


def read_api(gopls="gopls") -> API:
    """Return the API reported by `gopls api-json`."""
    if shutil.which(gopls) is None:
        raise ToolNotFoundError(f"missing `{gopls}`: not found in PATH")

    version = _run_gopls(gopls, "-v", "version")
    click.echo(f"Reading settings of gopls....\nversion:\n{version}", err=True)

    return decode_api(_run_gopls(gopls, "api-json"), f"`{gopls} api-json`")


def fetch_api(url, timeout=DEFAULT_FETCH_TIMEOUT) -> API:
    """Download a published api-json document."""
    resp = requests.get(url, timeout=timeout)
    resp.raise_for_status()
    return decode_api(resp.text, url)


def load_api(source, timeout=DEFAULT_FETCH_TIMEOUT) -> API:
    """Load the API from a saved api-json file or an http(s) URL."""
    source = str(source)
    if source.startswith(("http://", "https://")):
        click.echo(f"Fetching gopls API from {source}", err=True)
        return fetch_api(source, timeout=timeout)

    path = Path(source).expanduser()
    if not path.exists():
        raise APIError(f"API file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        return decode_api(f.read(), path)
