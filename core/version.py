from importlib import metadata

try:
    __version__ = metadata.version("lendwise")
except metadata.PackageNotFoundError:  # pragma: no cover - running from a checkout
    __version__ = "0.1.0"
