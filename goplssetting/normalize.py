"""
Ordering and placement of gopls options.

extract_options() sorts options for presentation and tags their docs with
the option's status. arrange() decides where each option lands in the
generated settings: inside the `gopls` object, or as a top-level `go.*`
setting when a rule in RULES says so.
"""
import dataclasses
from dataclasses import dataclass

from .api import API, EnumKey, Option
from .errors import SchemaError
from .values import unquote

PRIORITIES = {
    "": 10,
    "advanced": 10,
    "experimental": 100,
    "debug": 1000,
}

STATUS_TAGS = {
    "experimental": "(Experimental)",
    "advanced": "(Advanced)",
    "debug": "(For Debugging)",
}


@dataclass(frozen=True)
class Flatten:
    """Promote every key of a key-enum option to its own top-level setting."""

    prefix: str


@dataclass(frozen=True)
class Relocate:
    """Move an option out of the gopls object to a fixed top-level key."""

    key: str


# (hierarchy, option name) -> transformation. A name of None matches every
# option in the hierarchy.
RULES = {
    ("ui.inlayhint", None): Flatten("go.inlayHints."),
    ("ui.diagnostic", "vulncheck"): Relocate("go.diagnostic.vulncheck"),
}


@dataclass(frozen=True)
class Setting:
    """One property of the generated settings.

    key is relative to the gopls object unless toplevel is set. enum_key is
    set for settings produced by flattening a key-enum option.
    """

    key: str
    option: Option
    toplevel: bool = False
    enum_key: EnumKey | None = None


def _check_status(opt: Option):
    if opt.status not in PRIORITIES:
        raise SchemaError(f"unexpected status {opt.status!r} for option {opt.name!r}")


def priority(opt: Option) -> int:
    _check_status(opt)
    return PRIORITIES[opt.status]


def status_tag(opt: Option) -> str:
    _check_status(opt)
    return STATUS_TAGS.get(opt.status, "")


def extract_options(api: API) -> list[Option]:
    """
    Return all options in presentation order: by status priority, then by
    name. Docs of non-stable options are prefixed with their status tag.
    """
    options = sorted(api.all_options(), key=lambda opt: (priority(opt), opt.name))

    result = []
    for opt in options:
        tag = status_tag(opt)
        if tag:
            opt = dataclasses.replace(opt, doc=f"{tag} {opt.doc}")
        result.append(opt)
    return result


def rule_for(opt: Option):
    return RULES.get((opt.hierarchy, opt.name)) or RULES.get((opt.hierarchy, None))


def _flatten(opt: Option, rule: Flatten):
    for k in opt.enum_keys.keys:
        try:
            name = unquote(k.name)
        except ValueError as e:
            raise SchemaError(f"option {opt.key!r}: bad key {k.name}: {e}") from e
        yield Setting(key=rule.prefix + name, option=opt, toplevel=True, enum_key=k)


def arrange(options: list[Option]) -> list[Setting]:
    """
    Group options by hierarchy and place them.

    Hierarchies are visited in sorted order with the unnamed hierarchy last;
    options in a hierarchy are sorted by name.
    """
    groups = {}
    for opt in options:
        groups.setdefault(opt.hierarchy, []).append(opt)

    hierarchies = sorted(h for h in groups if h)
    if "" in groups:
        hierarchies.append("")

    settings = []
    seen = set()
    for hierarchy in hierarchies:
        for opt in sorted(groups[hierarchy], key=lambda o: o.name):
            rule = rule_for(opt)
            if isinstance(rule, Flatten):
                placed = list(_flatten(opt, rule))
            elif isinstance(rule, Relocate):
                placed = [Setting(key=rule.key, option=opt, toplevel=True)]
            else:
                placed = [Setting(key=opt.key, option=opt)]

            for s in placed:
                if (s.toplevel, s.key) in seen:
                    raise SchemaError(f"duplicate setting {s.key!r}")
                seen.add((s.toplevel, s.key))
            settings.extend(placed)
    return settings
