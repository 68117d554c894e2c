"""Error types raised while configuring or sampling delay distributions."""


class DelaySimError(Exception):
    """Base class for delay simulator errors."""

    pass


class InvalidConfigurationError(DelaySimError, ValueError):
    """Raised when a distribution descriptor or its parameters are invalid."""

    pass


class DistributionFileNotFoundError(DelaySimError, FileNotFoundError):
    """Raised when a distribution or mapping file cannot be located."""

    pass


class DistributionLookupError(DelaySimError, LookupError):
    """Raised when a file-based distribution key is not defined in the registry."""

    def __init__(self, key: str):
        super().__init__(f"Cannot find file based distribution with key {key}")
        self.key = key


class MissingDistributionKeysError(DelaySimError, ValueError):
    """Raised when mappings reference file-based distribution keys that do not exist."""

    def __init__(self, keys: list[str]):
        self.keys = sorted(set(keys))
        super().__init__(
            "The following distribution keys are configured in mappings but do not "
            f"exist in the distribution config files: {', '.join(self.keys)}"
        )
