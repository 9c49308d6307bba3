"""
Exception taxonomy.

User-correctable problems derive from ValueError; internal or platform
failures derive from RuntimeError. Nothing in the core retries.
"""

from __future__ import annotations


class RandkeepError(Exception):
    """Base class for all randkeep errors."""


class InvalidSpecError(RandkeepError, ValueError):
    """A generation spec or configuration value is invalid."""

    def __init__(self, problems: list[str] | str):
        if isinstance(problems, str):
            problems = [problems]
        self.problems = list(problems)
        super().__init__("; ".join(self.problems))


class InconsistentConfigurationError(RandkeepError, ValueError):
    """A plan carrying error diagnostics was handed to apply."""

    def __init__(self, address: str, diagnostics: list):
        self.address = address
        self.diagnostics = list(diagnostics)
        lines = "\n".join(f"  {d}" for d in self.diagnostics)
        super().__init__(f"Cannot apply {address}: planning reported errors\n{lines}")


class RandomSourceError(RandkeepError, RuntimeError):
    """The secure random source returned fewer values than requested."""


class HashGenerationError(RandkeepError, RuntimeError):
    """A bcrypt hash could not be generated or compared."""


class UpgradeChainBrokenError(RandkeepError, RuntimeError):
    """No transform exists from a stored schema version to the current one."""


class UpgradeError(RandkeepError, RuntimeError):
    """A state upgrade step failed; no partially upgraded state is returned."""


class ImportStateError(RandkeepError, ValueError):
    """An import identifier could not be parsed."""


class UnresolvedValuesError(RandkeepError, RuntimeError):
    """Apply finished with attribute values still unknown; nothing may be persisted."""
