class ShowcaseError(Exception):
    """Base for everything the loaders raise."""


class NotFoundError(ShowcaseError):
    """A file, project or template that is expected to be optional is absent."""


class MalformedError(ShowcaseError):
    """A hand-authored JSON file exists but does not parse or has the wrong shape."""


class StorageError(ShowcaseError):
    """Any other I/O failure."""
