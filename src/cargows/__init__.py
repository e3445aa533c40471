"""cargows - consolidate the crates in a directory tree into one Cargo workspace."""

from cargows.foundation.errors import CargowsError, ErrorCode
from cargows.workspace import InitResult, Resolver, initialize_workspace

__version__ = "0.1.0"

__all__ = [
    "CargowsError",
    "ErrorCode",
    "InitResult",
    "Resolver",
    "initialize_workspace",
]
