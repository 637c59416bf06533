import re
from typing import Dict, Optional, Pattern

# Builtin types, by their one or two character code
BUILTIN_TYPES: Dict[str, str] = {
    "v": "void",
    "w": "wchar_t",
    "b": "bool",
    "c": "char",
    "a": "signed char",
    "h": "unsigned char",
    "s": "short",
    "t": "unsigned short",
    "i": "int",
    "j": "unsigned int",
    "l": "long",
    "m": "unsigned long",
    "x": "long long",
    "y": "unsigned long long",
    "n": "__int128",
    "o": "unsigned __int128",
    "f": "float",
    "d": "double",
    "e": "long double",
    "g": "__float128",
    "z": "...",
    "Dn": "decltype(nullptr)",
    "Ds": "char16_t",
    "Di": "char32_t",
}

# Standard library abbreviations. These can also start an object chain.
STD_ABBREVIATIONS: Dict[str, str] = {
    "St": "std",
    "Sa": "std::allocator",
    "Sb": "std::basic_string",
    "Ss": "std::string",
    "Si": "std::istream",
    "So": "std::ostream",
    "Sd": "std::iostream",
}

TYPES: Dict[str, str] = {**BUILTIN_TYPES, **STD_ABBREVIATIONS}


def _alternation(tokens: Dict[str, str]) -> str:
    # Longest first, so that "Ds" is never read as "D" followed by "s"
    return "|".join(re.escape(t) for t in sorted(tokens, key=lambda t: -len(t)))


TYPE_TOKEN_RE: str = _alternation(TYPES)
STD_TOKEN_RE: Pattern[str] = re.compile(_alternation(STD_ABBREVIATIONS))


def lookup(token: str) -> Optional[str]:
    return TYPES.get(token)
