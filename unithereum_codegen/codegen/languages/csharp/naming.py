"""
C#-specific naming utilities and sanitization.

Handles C# reserved keywords and the `@` verbatim identifier prefix.
"""

from ...core.naming import NamespaceSanitizer


# C# reserved keywords (contextual keywords are valid identifiers)
CSHARP_RESERVED_WORDS = {
    "abstract",
    "as",
    "base",
    "bool",
    "break",
    "byte",
    "case",
    "catch",
    "char",
    "checked",
    "class",
    "const",
    "continue",
    "decimal",
    "default",
    "delegate",
    "do",
    "double",
    "else",
    "enum",
    "event",
    "explicit",
    "extern",
    "false",
    "finally",
    "fixed",
    "float",
    "for",
    "foreach",
    "goto",
    "if",
    "implicit",
    "in",
    "int",
    "interface",
    "internal",
    "is",
    "lock",
    "long",
    "namespace",
    "new",
    "null",
    "object",
    "operator",
    "out",
    "override",
    "params",
    "private",
    "protected",
    "public",
    "readonly",
    "ref",
    "return",
    "sbyte",
    "sealed",
    "short",
    "sizeof",
    "stackalloc",
    "static",
    "string",
    "struct",
    "switch",
    "this",
    "throw",
    "true",
    "try",
    "typeof",
    "uint",
    "ulong",
    "unchecked",
    "unsafe",
    "ushort",
    "using",
    "virtual",
    "void",
    "volatile",
    "while",
}

CSHARP_ESCAPE_MARKER = "@"


def create_csharp_sanitizer() -> NamespaceSanitizer:
    """Create a namespace sanitizer configured for C#."""
    return NamespaceSanitizer(CSHARP_RESERVED_WORDS, CSHARP_ESCAPE_MARKER)


_default_sanitizer = create_csharp_sanitizer()


def sanitize_namespace(name: str) -> str:
    """Sanitize a display name into a C# namespace."""
    return _default_sanitizer.sanitize(name)


def is_valid_namespace(name: str) -> bool:
    """Check that a namespace is unchanged by sanitization."""
    return _default_sanitizer.is_valid(name)
