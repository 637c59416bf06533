from .decode import parse
from .error import MalformedInputError
from .render import render
from .symbol import CxxObject, CxxParameter, DemangledSymbol, SpecialKind

__all__ = [
    "CxxObject",
    "CxxParameter",
    "DemangledSymbol",
    "MalformedInputError",
    "SpecialKind",
    "demangle",
    "parse",
    "render",
]


def demangle(mangled: str) -> str:
    try:
        return render(parse(mangled))
    except MalformedInputError:
        return mangled
