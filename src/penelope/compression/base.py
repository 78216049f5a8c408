from __future__ import annotations
from abc import ABC, abstractmethod
from typing import ClassVar, Dict, List, Protocol, Type


class Compressor(Protocol):
    def compress(self, data: bytes) -> bytes: ...
    def flush(self) -> bytes: ...


class Decompressor(Protocol):
    eof: bool
    def decompress(self, data: bytes) -> bytes: ...


class CompressionBackend(ABC):
    # --- required by subclasses ---
    algorithm: ClassVar[str]                 # registry key
    extension: ClassVar[str]                 # with leading dot
    multi_stream: ClassVar[bool] = False     # concatenated streams decode as one

    # --- one-shot ---
    @classmethod
    @abstractmethod
    def compress(cls, data: bytes, level: int) -> bytes:
        ...

    @classmethod
    @abstractmethod
    def decompress(cls, data: bytes) -> bytes:
        """Decode ``data``; decoder errors propagate unchanged."""
        ...

    # --- incremental ---
    @classmethod
    @abstractmethod
    def compressor(cls, level: int) -> Compressor:
        ...

    @classmethod
    @abstractmethod
    def decompressor(cls) -> Decompressor:
        ...

    # --- registry hook ---
    def __init_subclass__(cls, **kw):
        super().__init_subclass__(**kw)
        _REGISTRY.register(cls)


class BackendRegistry:
    def __init__(self) -> None:
        self._backends: Dict[str, Type[CompressionBackend]] = {}

    # called from CompressionBackend.__init_subclass__
    def register(self, backend_cls: Type[CompressionBackend]) -> None:
        self._backends[backend_cls.algorithm] = backend_cls

    def get(self, algorithm: str) -> Type[CompressionBackend] | None:
        return self._backends.get(algorithm)

    def names(self) -> List[str]:
        return sorted(self._backends)


# singleton used project-wide
_REGISTRY = BackendRegistry()
