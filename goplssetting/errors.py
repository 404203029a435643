"""Errors raised while generating gopls settings and documentation."""


class GenerationError(Exception):
    """Base class for every failure that aborts a generation run."""


class ToolNotFoundError(GenerationError):
    """A required external tool (gopls, jq) is not installed."""


class APIError(GenerationError):
    """The gopls API description could not be read or decoded."""


class SchemaError(GenerationError):
    """An option cannot be represented as a VS Code setting."""


class ManifestError(GenerationError):
    """The package.json manifest is missing or malformed."""


class MergeError(GenerationError):
    """Patching the manifest with jq failed."""


class DocsError(GenerationError):
    """Documentation could not be generated."""


class OutOfDateError(GenerationError):
    """Check mode found a generated file that is not up to date."""
