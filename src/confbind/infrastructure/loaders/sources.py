"""Configuration sources - where loaders read their raw text from."""
from pathlib import Path
from typing import Callable, Union

from confbind.domain.ports import ConfigSource


class StringConfigSource(ConfigSource):
    """Fixed in-memory text."""

    def __init__(self, text: str):
        self.text = text

    def read(self) -> str:
        return self.text


class FileConfigSource(ConfigSource):
    """
    A file re-read on every call.

    Read errors (missing file, permissions) propagate, which turns them into
    reload failures when they happen during a reload.
    """

    def __init__(self, path: Union[str, Path], encoding: str = "utf-8"):
        self.path = Path(path)
        self.encoding = encoding

    def read(self) -> str:
        return self.path.read_text(encoding=self.encoding)

    def __repr__(self) -> str:
        return f"FileConfigSource({str(self.path)!r})"


class CallableConfigSource(ConfigSource):
    """Text produced by a callable, e.g. a remote fetch."""

    def __init__(self, supplier: Callable[[], str]):
        self.supplier = supplier

    def read(self) -> str:
        return self.supplier()
