"""
Conversion of gopls options into VS Code configuration properties.

The result of build_settings() is the object that goes into
`contributes.configuration.properties` of the extension's package.json.
"""
import json
from dataclasses import dataclass, field

from .api import EnumKey, Option
from .errors import SchemaError
from .normalize import Setting
from .values import ArrayValue, BoolValue, NullValue, StringValue, Value, decode_literal, unquote

GOPLS_DESCRIPTION = (
    "Configure the default Go language server ('gopls'). In most cases, configuring this section "
    "is unnecessary. See [the documentation](https://github.com/golang/tools/blob/master/gopls/doc/settings.md) "
    "for all available settings."
)

TYPES = {
    "string": "string",
    "bool": "boolean",
    "time.Duration": "string",
    "[]string": "array",
    "map[string]string": "object",
    "map[string]bool": "object",
    "map[enum]string": "object",
    "map[enum]bool": "object",
    # Not accurate, but what the extension has always shipped.
    "any": "boolean",
}

# Extension settings whose values gopls picks up when the option is unset.
ASSOCIATED_EXTENSION_PROPERTIES = {
    "buildFlags": ["go.buildFlags", "go.buildTags"],
}


@dataclass
class SchemaProperty:
    """A VS Code settings object."""

    type: str | list[str] | None = None
    markdown_description: str = ""
    additional_properties: bool = False
    enum: list[Value] = field(default_factory=list)
    markdown_enum_descriptions: list[str] = field(default_factory=list)
    default: Value | None = None
    scope: str = ""
    properties: dict[str, "SchemaProperty"] = field(default_factory=dict)
    deprecation_message: str = ""

    def to_json(self):
        """Return a JSON-ready dict, omitting empty fields."""
        out = {}
        if self.type:
            out["type"] = self.type
        if self.markdown_description:
            out["markdownDescription"] = self.markdown_description
        if self.additional_properties:
            out["additionalProperties"] = True
        if self.enum:
            out["enum"] = [v.to_json() for v in self.enum]
        if self.markdown_enum_descriptions:
            out["markdownEnumDescriptions"] = list(self.markdown_enum_descriptions)
        if self.default is not None:
            out["default"] = self.default.to_json()
        if self.scope:
            out["scope"] = self.scope
        if self.properties:
            out["properties"] = {k: self.properties[k].to_json() for k in sorted(self.properties)}
        if self.deprecation_message:
            out["deprecationMessage"] = self.deprecation_message
        return out


def map_type(t: str) -> str:
    try:
        return TYPES[t]
    except KeyError:
        raise SchemaError(f"unknown type {t!r}") from None


def property_type(*types: str) -> str | list[str]:
    """Map gopls types to a schema type: a string for one, a list for several."""
    if not types:
        raise SchemaError("no types to map")
    if len(types) == 1:
        return map_type(types[0])
    return [map_type(t) for t in types]


def format_default(default: str, typ: str) -> Value | None:
    """
    Convert a string-encoded default into a value, or None when the default
    should not be emitted.
    """
    if typ in ("enum", "string", "time.Duration"):
        try:
            default = unquote(default)
        except ValueError:
            pass
    elif typ == "[]string":
        try:
            items = json.loads(default)
        except ValueError:
            pass
        else:
            if items is None:
                return NullValue()
            if isinstance(items, list) and all(isinstance(x, str) for x in items):
                if not items:
                    return None
                return ArrayValue(tuple(StringValue(x) for x in items))

    if default in ("{}", "[]"):
        return None
    if default == "true":
        return BoolValue(True)
    if default == "false":
        return BoolValue(False)
    return StringValue(default)


def _enum_values(opt: Option):
    values, docs, kinds = [], [], set()
    for v in opt.enum_values:
        try:
            value = decode_literal(v.value)
        except ValueError as e:
            raise SchemaError(f"option {opt.key!r}: failed to decode enum value {v.value!r}: {e}") from e

        if isinstance(value, StringValue):
            kinds.add("string")
        elif isinstance(value, BoolValue):
            kinds.add("bool")
        else:
            raise SchemaError(
                f"option {opt.key!r}: enum value {v.value} ({type(value).__name__}) is not supported"
            )
        values.append(value)
        docs.append(v.doc)
    return values, docs, sorted(kinds)


def build_key_property(k: EnumKey, value_type: str) -> SchemaProperty:
    """Build the property for one key of a key-enum option."""
    return SchemaProperty(
        type=property_type(value_type),
        markdown_description=k.doc,
        default=format_default(k.default, value_type),
    )


def build_property(opt: Option) -> SchemaProperty:
    doc = opt.doc
    if opt.name in ASSOCIATED_EXTENSION_PROPERTIES:
        related = ", ".join(ASSOCIATED_EXTENSION_PROPERTIES[opt.name])
        doc = f"{doc}\nIf unspecified, values of `{related}` will be propagated.\n"

    prop = SchemaProperty(
        markdown_description=doc,
        scope="resource",
        deprecation_message=opt.deprecation_message,
    )

    if opt.type == "enum":
        prop.enum, prop.markdown_enum_descriptions, kinds = _enum_values(opt)
        prop.type = property_type(*kinds)
    else:
        prop.type = property_type(opt.type)

    # Keys are either strings or string enums; both become plain object
    # properties.
    for k in opt.enum_keys.keys:
        try:
            name = unquote(k.name)
        except ValueError as e:
            raise SchemaError(f"option {opt.key!r}: bad key {k.name}: {e}") from e
        prop.properties[name] = build_key_property(k, opt.enum_keys.value_type)

    # Each key carries its own default.
    if not opt.enum_keys.keys:
        prop.default = format_default(opt.default, opt.type)

    return prop


def build_settings(settings: list[Setting]) -> dict[str, SchemaProperty]:
    """
    Build the configuration properties for the arranged settings: the
    `gopls` object holding every gopls setting, plus the top-level ones.
    """
    gopls_properties = {}
    top_level = {}
    for s in settings:
        if s.enum_key is not None:
            prop = build_key_property(s.enum_key, "bool")
        else:
            prop = build_property(s.option)

        if s.toplevel:
            top_level[s.key] = prop
        else:
            gopls_properties[s.key] = prop

    top_level["gopls"] = SchemaProperty(
        type="object",
        markdown_description=GOPLS_DESCRIPTION,
        scope="resource",
        properties=gopls_properties,
    )
    return top_level


def settings_to_json(properties: dict[str, SchemaProperty]) -> dict:
    return {key: properties[key].to_json() for key in sorted(properties)}


def settings_json(properties: dict[str, SchemaProperty], indent=None) -> str:
    """Serialize generated properties with sorted keys."""
    return json.dumps(settings_to_json(properties), indent=indent, ensure_ascii=False)
