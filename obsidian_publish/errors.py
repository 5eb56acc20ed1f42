from pathlib import Path


class PublishError(Exception):
    """Base class for everything the publisher raises on purpose."""


class ConfigError(PublishError):
    pass


class UnsafePathError(PublishError):
    def __init__(self, target: Path, root: Path):
        super().__init__(f"Refusing to modify outside output root: {target} (root={root})")
        self.target = target
        self.root = root


class ConversionError(PublishError):
    def __init__(self, source: Path | str, reason: str):
        super().__init__(f"{source}: {reason}")
        self.source = source
        self.reason = reason
