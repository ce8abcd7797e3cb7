"""Settings loading and validation for shipctl."""

from shipctl.config.loader import load_settings, resolve_region
from shipctl.config.validator import flatten_pydantic_errors

__all__ = ["flatten_pydantic_errors", "load_settings", "resolve_region"]
