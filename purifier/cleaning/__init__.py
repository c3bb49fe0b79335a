from __future__ import annotations

# Public API re-exports (keep small & stable)
from .sanitizer import Sanitizer, SanitizedResult
from .filters import compile_filter_registry, active_filters, apply_filters
