"""Plugin manifest definitions for parsers and hosts."""

from collections.abc import Callable
from contextlib import AbstractContextManager
from dataclasses import dataclass

from pydantic import BaseModel

from failure_inspector.services.base import HostServices, TraceParser


@dataclass(frozen=True, kw_only=True)
class ParserManifest[ConfigT: BaseModel]:
    """Manifest describing a trace parser plugin."""

    config_cls: type[ConfigT]
    parser_factory: Callable[[ConfigT], TraceParser]


@dataclass(frozen=True, kw_only=True)
class HostManifest[ConfigT: BaseModel]:
    """Manifest describing a host plugin.

    The host factory is a context manager so hosts can acquire and release
    resources (files, processes) around an inspection session.
    """

    config_cls: type[ConfigT]
    host_factory: Callable[[ConfigT], AbstractContextManager[HostServices]]
