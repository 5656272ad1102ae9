from .models import ById, ByClassValue, ByFields, ByUri, Specifier
from .parser import escape, parse_intent, parse_specifier, unescape

__all__ = [
    "ById",
    "ByClassValue",
    "ByFields",
    "ByUri",
    "Specifier",
    "escape",
    "parse_intent",
    "parse_specifier",
    "unescape",
]
