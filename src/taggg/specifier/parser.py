import re
from collections.abc import Mapping
from typing import Any

from ..errors import InvalidClassError, InvalidSpecifierError
from ..store.models import ResourceIntent
from .models import ById, ByClassValue, ByFields, ByUri, Specifier


URI_PREFIX = "uri:"

# first colon not preceded by a backslash
_UNESCAPED_COLON = re.compile(r"(?<!\\):")

_FIELD_KEYS = ("uri", "class", "value", "content")


def unescape(text: str) -> str:
    """Decode escaped colons"""
    return text.replace("\\:", ":")


def escape(text: str) -> str:
    """Escape colons so a class or value survives the specifier grammar"""
    return text.replace(":", "\\:")


def parse_specifier(spec: Any) -> Specifier:
    """
    Parse a resource specifier.
    
    Accepted shapes:
        None                  -> ByFields() (the empty resource)
        int                   -> ById
        mapping               -> ByFields (keys uri/class/value/content, id dropped)
        "uri:<uri>"           -> ByUri
        "[<class>:]<value>"   -> ByClassValue (split on first unescaped colon)
    
    Already parsed specifiers pass through unchanged.
    """
    if spec is None:
        return ByFields()
    
    if isinstance(spec, (ById, ByFields, ByUri, ByClassValue)):
        return spec
    
    if isinstance(spec, ResourceIntent):
        if spec.id is not None:
            return ById(id=spec.id)
        return _parse_fields(spec.set_fields())
    
    # bool is an int subclass but never an id
    if isinstance(spec, bool):
        raise InvalidSpecifierError(f"Unsupported resource specifier: {spec!r}")
    
    if isinstance(spec, int):
        return ById(id=spec)
    
    if isinstance(spec, Mapping):
        return _parse_fields(spec)
    
    if isinstance(spec, str):
        if spec.startswith(URI_PREFIX):
            return ByUri(uri=spec[len(URI_PREFIX):])
        
        parts = _UNESCAPED_COLON.split(spec, maxsplit=1)
        if len(parts) == 2:
            return ByClassValue(class_=unescape(parts[0]), value=unescape(parts[1]))
        return ByClassValue(value=unescape(spec))
    
    raise InvalidSpecifierError(
        f"Unsupported resource specifier type: {type(spec).__name__}"
    )


def parse_intent(spec: Any) -> ResourceIntent:
    """Parse a specifier straight to its resource intent"""
    return parse_specifier(spec).intent()


def _parse_fields(data: Mapping) -> ByFields:
    fields = {}
    for key in _FIELD_KEYS:
        value = data.get(key)
        if value is None:
            continue
        if key == "class":
            if isinstance(value, bool) or not isinstance(value, (int, str)):
                raise InvalidClassError(f"Invalid class specified: {value!r}")
            fields["class_"] = value
        else:
            fields[key] = str(value)
    return ByFields(**fields)
