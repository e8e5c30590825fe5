"""Exception hierarchy shared by the services and the HTTP layer."""


class RecipeBookError(Exception):
    """Base class for errors raised by this application."""


class ConfigurationError(RecipeBookError):
    """A required setting (e.g. an API key) is missing or invalid."""


class UpstreamServiceError(RecipeBookError):
    """The language-model call failed or returned nothing usable."""


class MalformedResponseError(UpstreamServiceError):
    """The language model replied, but not with the JSON we asked for."""
