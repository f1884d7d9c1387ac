class NewsFetchError(Exception):
    pass


class SourceError(NewsFetchError):
    """A provider call failed, returned an error payload or malformed data."""

    def __init__(self, provider_name: str, message: str):
        self.provider_name = provider_name
        self.message = message
        super().__init__(f"{provider_name}: {message}")


class ConfigurationError(SourceError):
    pass


class NormalizationError(NewsFetchError):
    pass


class PersistenceError(NewsFetchError):
    pass
