"""Public API boundary tests.

Validates the names exported at package level and the version metadata.
"""

import seqcheck
from seqcheck import diagnostics, generators, model, runtime


class TestPublicExports:
    """Test __all__ of the public packages."""

    def test_all_names_resolve(self) -> None:
        """Every exported name exists."""
        for module in (seqcheck, diagnostics, generators, model, runtime):
            for name in module.__all__:
                assert hasattr(module, name), f"{module.__name__}.{name} missing"

    def test_core_api(self) -> None:
        """The everyday API is importable from the top level."""
        for name in ("command", "SystemSpec", "Driver", "RunConfig", "check", "Step"):
            assert name in seqcheck.__all__

    def test_version(self) -> None:
        """__version__ is a non-empty string."""
        assert isinstance(seqcheck.__version__, str)
        assert seqcheck.__version__
