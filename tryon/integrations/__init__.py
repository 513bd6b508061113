"""Integration check helpers."""

from .checks import IntegrationCheckResult, check_generation_service, run_all_checks

__all__ = ["IntegrationCheckResult", "check_generation_service", "run_all_checks"]
