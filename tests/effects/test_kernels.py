"""Tests for kernel lookup."""

import logging

import pytest

from juliascope.effects.aberration import radial_chromatic_aberration
from juliascope.effects.julia import julia_warp
from juliascope.effects.kernels import (
    CHROMATIC_ABERRATION,
    JULIA_WARP,
    KernelProvider,
    KernelUnavailableError,
)


class TestKernelProvider:
    def test_builtins_resolve(self):
        provider = KernelProvider()
        assert provider.get(JULIA_WARP) is julia_warp
        assert provider.get(CHROMATIC_ABERRATION) is radial_chromatic_aberration
        assert provider.names() == [CHROMATIC_ABERRATION, JULIA_WARP]

    def test_empty_provider(self):
        provider = KernelProvider({})
        assert provider.get(JULIA_WARP) is None
        with pytest.raises(KernelUnavailableError) as exc:
            provider.require(JULIA_WARP)
        assert exc.value.name == JULIA_WARP
        assert exc.value.reason == "not registered"

    def test_unavailable_is_lookup_error(self):
        with pytest.raises(LookupError):
            KernelProvider({}).require(CHROMATIC_ABERRATION)

    @pytest.mark.parametrize(
        "reference",
        [
            "no_colon_here",
            "juliascope.does_not_exist:kernel",
            "juliascope.effects.julia:missing_kernel",
            "juliascope.effects.aberration:DEFAULT_STRENGTH",
        ],
    )
    def test_bad_references(self, reference):
        provider = KernelProvider({JULIA_WARP: reference})
        assert provider.get(JULIA_WARP) is None
        with pytest.raises(KernelUnavailableError):
            provider.require(JULIA_WARP)

    def test_register_callable(self):
        provider = KernelProvider({})

        def kernel(pixels, **kwargs):
            return pixels

        provider.register(JULIA_WARP, kernel)
        assert provider.require(JULIA_WARP) is kernel

    def test_register_replaces_cached_failure(self):
        provider = KernelProvider({})
        assert provider.get(JULIA_WARP) is None
        provider.register(JULIA_WARP, "juliascope.effects.julia:julia_warp")
        assert provider.get(JULIA_WARP) is julia_warp

    def test_remove(self):
        provider = KernelProvider()
        assert provider.get(JULIA_WARP) is not None
        provider.remove(JULIA_WARP)
        assert provider.get(JULIA_WARP) is None
        assert JULIA_WARP not in provider.names()

    def test_failure_logged_once(self, caplog):
        provider = KernelProvider({})
        with caplog.at_level(logging.WARNING, logger="juliascope.effects.kernels"):
            provider.get(JULIA_WARP)
            provider.get(JULIA_WARP)
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert JULIA_WARP in warnings[0].getMessage()
