"""
Kernel lookup by logical name.

Stages ask the provider for their compute kernel once, at construction.
A kernel is any callable; it can be registered directly or as a
``"package.module:attribute"`` reference that is imported on first use.
Lookups that fail are logged and answered with ``None`` so every caller
degrades to pass-through instead of failing.
"""

import importlib
import logging
import threading
from typing import Callable, Dict, Mapping, Optional, Union


logger = logging.getLogger(__name__)

JULIA_WARP = "julia_warp"
CHROMATIC_ABERRATION = "chromatic_aberration"

BUILTIN_KERNELS: Dict[str, str] = {
    JULIA_WARP: "juliascope.effects.julia:julia_warp",
    CHROMATIC_ABERRATION: "juliascope.effects.aberration:radial_chromatic_aberration",
}

KernelSource = Union[str, Callable]


class KernelUnavailableError(LookupError):
    """Raised by ``KernelProvider.require`` when a kernel cannot be resolved."""

    def __init__(self, name: str, reason: str = "not registered"):
        super().__init__(f"Kernel {name!r} unavailable: {reason}")
        self.name = name
        self.reason = reason


class KernelProvider:
    """
    Resolves and caches kernels.

    Args:
        sources: Mapping of logical name to a callable or an import
            reference. Defaults to the built-in numpy kernels.

    Example:
        provider = KernelProvider()
        warp = provider.get(JULIA_WARP)          # callable or None

        provider = KernelProvider({})            # nothing available
        provider.require(JULIA_WARP)             # KernelUnavailableError
    """

    def __init__(self, sources: Optional[Mapping[str, KernelSource]] = None):
        self._sources: Dict[str, KernelSource] = dict(
            BUILTIN_KERNELS if sources is None else sources
        )
        self._resolved: Dict[str, Optional[Callable]] = {}
        self._failures: Dict[str, str] = {}
        self._lock = threading.Lock()

    def names(self) -> list[str]:
        """Logical names with a registered source (resolvable or not)."""
        with self._lock:
            return sorted(self._sources)

    def register(self, name: str, source: KernelSource) -> None:
        """Add or replace a kernel source; drops any cached resolution."""
        with self._lock:
            self._sources[name] = source
            self._resolved.pop(name, None)
            self._failures.pop(name, None)

    def remove(self, name: str) -> None:
        """Forget a kernel so later lookups report it unavailable."""
        with self._lock:
            self._sources.pop(name, None)
            self._resolved.pop(name, None)
            self._failures.pop(name, None)

    def get(self, name: str) -> Optional[Callable]:
        """Return the kernel for ``name``, or ``None`` if it cannot be resolved."""
        with self._lock:
            if name in self._resolved:
                return self._resolved[name]

            kernel, reason = self._resolve(name)
            self._resolved[name] = kernel
            if kernel is None:
                self._failures[name] = reason
                logger.warning(f"Kernel {name!r} unavailable ({reason}); stage will pass frames through")
            else:
                logger.info(f"Kernel {name!r} resolved")
            return kernel

    def require(self, name: str) -> Callable:
        """
        Like ``get`` but raises.

        Raises:
            KernelUnavailableError: If the kernel cannot be resolved.
        """
        kernel = self.get(name)
        if kernel is None:
            raise KernelUnavailableError(name, self._failures.get(name, "not registered"))
        return kernel

    def _resolve(self, name: str) -> tuple[Optional[Callable], str]:
        source = self._sources.get(name)
        if source is None:
            return None, "not registered"

        if callable(source):
            return source, ""

        module_name, _, attr = str(source).partition(":")
        if not module_name or not attr:
            return None, f"malformed reference {source!r}"
        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            return None, f"cannot import {module_name}: {e}"

        kernel = getattr(module, attr, None)
        if kernel is None:
            return None, f"{module_name} has no attribute {attr!r}"
        if not callable(kernel):
            return None, f"{source} is not callable"
        return kernel, ""
