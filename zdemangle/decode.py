"""Decoder for `_Z`-prefixed mangled names.

The grammar is a reduced subset of the Itanium C++ ABI:

    MangledName   := "_Z" SpecialPrefix? "N"? "K"? BaseTypeToken? ObjectChain
    SpecialPrefix := "T" ("V" | "I" | "S" | "hn" Digits "_")
    ObjectChain   := (Digits NameChars TemplateArgs?)+ SpecialMember?
    TemplateArgs  := "I" Parameter+ "E"
    Parameter     := ("P" | "R")* "K"? "C"? PrimitiveToken TemplateArgs?
                   | ("P" | "R")* "K"? "C"? ObjectChain
                   | ("P" | "R")* "K"? "C"? "S" Digits? "_"
    SpecialMember := "C" | "D"

Object chains and parameter lists are mutually recursive (templates contain
parameters, parameters contain object chains), and both feed the same
substitution table, so the order in which things are decoded matters.
"""
import logging
import re
from dataclasses import dataclass, field, replace
from typing import List, Optional

from .cursor import Cursor
from .error import MalformedInputError
from .substitutions import SubstitutionTable, soft_merge
from .symbol import (
    CxxObject,
    CxxParameter,
    DemangledSymbol,
    ObjectChain,
    SpecialKind,
    Substitution,
)
from .type_table import STD_ABBREVIATIONS, STD_TOKEN_RE, TYPE_TOKEN_RE, lookup

HEADER_RE = re.compile(r"_Z(?:T(V|I|S|hn([0-9]+)_))?N?(K)?([0-9]*)")
LENGTH_RE = re.compile(r"[0-9]+")
TEMPLATE_OPEN_RE = re.compile(r"I")
END_RE = re.compile(r"E")
OPTIONAL_END_RE = re.compile(r"E?")
# `C1`, `D0` etc. A bare `C` or `D` only counts at the end of a nested name.
SPECIAL_MEMBER_RE = re.compile(r"([CD])(?:[0-9]+|(?=E)|$)")
PARAMETER_RE = re.compile(
    rf"([PR]*)(K)?(C)?(N)?(?:({TYPE_TOKEN_RE})|S([0-9]*)_|(?=[0-9]))"
)

VOID = CxxParameter(type_chain=(CxxObject("void"),))

# Longer numbers can't be valid lengths, indexes or offsets for any real input
MAX_NUMBER_DIGITS = 9
# Nesting limit for template argument lists, well below the recursion limit
MAX_TEMPLATE_DEPTH = 64


@dataclass
class SpecialMember:
    is_constructor: bool = False
    is_destructor: bool = False


@dataclass
class DecodeState:
    cursor: Cursor
    table: SubstitutionTable = field(default_factory=SubstitutionTable)
    # The symbol's own object chain, once it has been decoded
    objects: ObjectChain = ()
    template_depth: int = 0


def _parse_number(digits: str) -> int:
    if len(digits) > MAX_NUMBER_DIGITS:
        raise MalformedInputError(
            f"Number is too long: {digits[:MAX_NUMBER_DIGITS]}..."
        )
    return int(digits)


def _name_re(length: int) -> str:
    return rf"[0-9A-Za-z_]{{{length}}}"


def _parse_template_args(state: DecodeState, objects: List[CxxObject]) -> None:
    # Attach a template argument list to the last object, if one follows
    if not objects or not state.cursor.peek_matches(TEMPLATE_OPEN_RE):
        return
    state.cursor.consume(TEMPLATE_OPEN_RE)
    if state.template_depth >= MAX_TEMPLATE_DEPTH:
        raise MalformedInputError(
            "Template arguments are nested too deeply",
            remaining=state.cursor.remaining(),
        )
    state.template_depth += 1
    try:
        args = parse_parameters(state)
    finally:
        state.template_depth -= 1
    if not args:
        raise MalformedInputError(
            "Empty template argument list", remaining=state.cursor.remaining()
        )
    objects[-1] = replace(objects[-1], template_args=tuple(args))


def _parse_segment_tail(
    state: DecodeState, objects: List[CxxObject], special: Optional[SpecialMember]
) -> Optional[int]:
    """Handle whatever follows a name segment.

    Returns the length of the next segment, or None if the chain ends here."""
    cursor = state.cursor
    _parse_template_args(state, objects)

    if cursor.peek_matches(LENGTH_RE):
        return _parse_number(cursor.consume(LENGTH_RE).group(0))

    if cursor.peek_matches(SPECIAL_MEMBER_RE):
        marker = cursor.consume(SPECIAL_MEMBER_RE).group(1)
        class_name = objects[-1].name
        if marker == "C":
            objects.append(CxxObject(class_name))
        else:
            objects.append(CxxObject(f"~{class_name}"))
        if special is not None:
            special.is_constructor = marker == "C"
            special.is_destructor = marker == "D"

    return None


def parse_object_chain(
    state: DecodeState,
    length: Optional[int],
    special: Optional[SpecialMember] = None,
) -> ObjectChain:
    """Parse a chain of length-prefixed names, e.g. `3Foo3BarIiE`.

    `length` is the already-consumed length of the first segment. If it is
    None, the chain may only start with a standard library abbreviation such
    as `St`; otherwise the chain is empty."""
    cursor = state.cursor
    objects: List[CxxObject] = []

    if length is None:
        if not cursor.peek_matches(STD_TOKEN_RE):
            return ()
        token = cursor.consume(STD_TOKEN_RE).group(0)
        objects.append(CxxObject(STD_ABBREVIATIONS[token]))
        length = _parse_segment_tail(state, objects, special)

    while length is not None:
        if length <= 0:
            raise MalformedInputError(
                "Name length must be positive", remaining=cursor.remaining()
            )
        if length > cursor.remaining_length():
            raise MalformedInputError(
                f"Name length {length} exceeds the remaining input",
                remaining=cursor.remaining(),
            )
        name = cursor.consume(_name_re(length)).group(0)
        objects.append(CxxObject(name))
        length = _parse_segment_tail(state, objects, special)

    return tuple(objects)


def _resolve_substitution(state: DecodeState, index_str: str) -> Substitution:
    # `S_` inside a nested symbol name refers to its outermost scope
    if not index_str and len(state.objects) > 1:
        logging.debug(f"Substitution refers to enclosing scope {state.objects[0]}")
        return (state.objects[0],)
    return state.table.resolve(_parse_number(index_str) if index_str else None)


def parse_parameters(state: DecodeState) -> List[CxxParameter]:
    """Parse parameters until an `E` end marker or the end of the input.

    Every parameter is added to the substitution table as soon as it is
    complete, so later parameters in the same list may refer to it."""
    cursor = state.cursor
    parameters: List[CxxParameter] = []

    while cursor.remaining_length():
        if cursor.peek_matches(END_RE):
            cursor.consume(END_RE)
            break

        match = cursor.consume(PARAMETER_RE)
        markers, const, complex_, nested, token, substitute = match.groups()
        parameter = CxxParameter(
            is_const=bool(const),
            is_complex=bool(complex_),
            indirection=markers.replace("P", "*").replace("R", "&"),
        )
        objects: List[CxxObject] = []

        if token is not None:
            objects.append(CxxObject(lookup(token) or token))
        elif substitute is not None:
            entry = _resolve_substitution(state, substitute)
            if isinstance(entry, CxxParameter):
                parameter = soft_merge(parameter, entry)
            else:
                parameter = replace(parameter, type_chain=entry)
            objects.extend(parameter.type_chain)

        _parse_template_args(state, objects)

        # Continue into a nested name: `N...E`, `St3foo`, or a plain `3foo`
        if cursor.peek_matches(LENGTH_RE) and (
            nested or token == "St" or not objects
        ):
            length = _parse_number(cursor.consume(LENGTH_RE).group(0))
            objects.extend(parse_object_chain(state, length))
        if nested:
            cursor.consume(OPTIONAL_END_RE)

        if not objects:
            raise MalformedInputError(
                "Parameter has no type", remaining=cursor.remaining()
            )

        parameter = replace(parameter, type_chain=tuple(objects))
        parameters.append(parameter)
        state.table.append_parameter(parameter)

    return parameters


def parse(mangled: str) -> DemangledSymbol:
    state = DecodeState(cursor=Cursor(mangled))
    cursor = state.cursor

    special_code, offset, const, initial_length = cursor.consume(HEADER_RE).groups()
    special_kind = SpecialKind.from_code(special_code)

    special = SpecialMember()
    objects = parse_object_chain(
        state, _parse_number(initial_length) if initial_length else None, special
    )
    if not objects:
        raise MalformedInputError("Missing symbol name", remaining=cursor.remaining())
    state.objects = objects
    state.table.append_prefixes(objects)

    parameters: List[CxxParameter] = []
    if special_kind in (SpecialKind.NONE, SpecialKind.NON_VIRTUAL_THUNK):
        # Skip the end of the nested name, if any
        cursor.consume(OPTIONAL_END_RE)
        parameters = parse_parameters(state)
        if parameters == [VOID]:
            parameters = []

    return DemangledSymbol(
        objects=objects,
        parameters=tuple(parameters),
        special_kind=special_kind,
        thunk_offset=_parse_number(offset) if offset is not None else None,
        is_const=bool(const),
        is_constructor=special.is_constructor,
        is_destructor=special.is_destructor,
        substitutions=state.table.entries(),
    )
