"""
C# target language support.

The external generator emits C#, so generated namespaces follow C# rules.
"""

from .naming import (
    CSHARP_RESERVED_WORDS,
    create_csharp_sanitizer,
    sanitize_namespace,
    is_valid_namespace,
)

__all__ = [
    "CSHARP_RESERVED_WORDS",
    "create_csharp_sanitizer",
    "sanitize_namespace",
    "is_valid_namespace",
]
