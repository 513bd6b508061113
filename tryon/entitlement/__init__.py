"""Free quota and premium tracking."""

from .gate import EntitlementGate, EntitlementState

__all__ = ["EntitlementGate", "EntitlementState"]
