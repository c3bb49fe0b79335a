from __future__ import annotations

# Public API re-exports (keep small & stable)
from .validator import Validator
from .errors import ErrorEntry, ErrorCollection
from .checks import Check, CHECKS, compile_check_registry
