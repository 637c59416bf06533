from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class CxxObject:
    """One segment of a scope chain, e.g. `vector<int>` in `std::vector<int>`"""

    name: str
    template_args: Tuple["CxxParameter", ...] = ()


ObjectChain = Tuple[CxxObject, ...]


@dataclass(frozen=True)
class CxxParameter:
    type_chain: ObjectChain = ()
    is_const: bool = False
    is_complex: bool = False
    # Pointer/reference markers, outermost first, e.g. "*&"
    indirection: str = ""


# An entry in the substitution table
Substitution = Union[ObjectChain, CxxParameter]


class SpecialKind(Enum):
    NONE = ""
    VIRTUAL_TABLE = "V"
    TYPE_INFO_STRUCTURE = "I"
    TYPE_INFO_NAME = "S"
    NON_VIRTUAL_THUNK = "hn"

    @staticmethod
    def from_code(code: Optional[str]) -> "SpecialKind":
        if code is None:
            return SpecialKind.NONE
        if code.startswith("hn"):
            return SpecialKind.NON_VIRTUAL_THUNK
        return SpecialKind(code)


@dataclass(frozen=True)
class DemangledSymbol:
    objects: ObjectChain
    parameters: Tuple[CxxParameter, ...] = ()
    special_kind: SpecialKind = SpecialKind.NONE
    thunk_offset: Optional[int] = None
    is_const: bool = False
    is_constructor: bool = False
    is_destructor: bool = False
    substitutions: Tuple[Substitution, ...] = ()

    @property
    def is_bare_type(self) -> bool:
        return self.special_kind != SpecialKind.NONE

    @property
    def is_thunk(self) -> bool:
        return self.special_kind == SpecialKind.NON_VIRTUAL_THUNK

    def __str__(self) -> str:
        from .render import render

        return render(self)
