"""Reference-counted object lifetime management, script-class reflection and JSON validation."""

__version__ = "0.1.0"
__all__ = [
    "util",
    "id_generator",
    "objects",
    "registry",
    "aqueue",
    "garbage_collector",
    "context",
    "validator",
    "reflection",
]