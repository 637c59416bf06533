from typing import Sequence

from .symbol import CxxParameter, DemangledSymbol, ObjectChain, SpecialKind

PREFIXES = {
    SpecialKind.VIRTUAL_TABLE: "struct ",
    SpecialKind.TYPE_INFO_NAME: "struct ",
    SpecialKind.TYPE_INFO_STRUCTURE: "struct : public struct ",
}


def render_chain(objects: ObjectChain, full: bool = False) -> str:
    """Render `a::b<T>::c`. If `full` is set, the template arguments of the
    last segment are given placeholder names (`T0`, `T1`, ...)."""
    names = []
    for index, obj in enumerate(objects):
        if not obj.template_args:
            names.append(obj.name)
            continue
        is_last = index == len(objects) - 1
        args = render_parameters(obj.template_args, full and is_last, template=True)
        names.append(f"{obj.name}<{args}>")
    return "::".join(names)


def render_parameter(
    parameter: CxxParameter, placeholder: str = "", full: bool = False
) -> str:
    text = "complex " if parameter.is_complex else ""
    text += render_chain(parameter.type_chain)
    if full:
        text += f" {placeholder}"
    if parameter.is_const:
        text += " const"
    elif parameter.indirection:
        text += " "
    return text + parameter.indirection


def render_parameters(
    parameters: Sequence[CxxParameter], full: bool, template: bool = False
) -> str:
    prefix = "T" if template else "p"
    return ", ".join(
        render_parameter(parameter, f"{prefix}{index}", full)
        for index, parameter in enumerate(parameters)
    )


def render_call_target(objects: ObjectChain) -> str:
    # Like render_chain, but the last segment only lists its placeholders
    *scope, last = objects
    text = render_chain(tuple(scope))
    if text:
        text += "::"
    text += last.name
    if last.template_args:
        placeholders = ", ".join(f"T{i}" for i in range(len(last.template_args)))
        text += f"<{placeholders}>"
    return text


def render_thunk_body(symbol: DemangledSymbol) -> str:
    args = ", ".join(f"p{i}" for i in range(len(symbol.parameters)))
    target = render_call_target(symbol.objects)
    return f" {{\n\t(this - {symbol.thunk_offset})->{target}({args});\n}}"


def render(symbol: DemangledSymbol) -> str:
    text = PREFIXES.get(symbol.special_kind, "")
    text += render_chain(symbol.objects, full=symbol.is_thunk)
    if symbol.special_kind == SpecialKind.VIRTUAL_TABLE:
        text += " : public struct"

    if symbol.is_bare_type and not symbol.is_thunk:
        return text + " { }"

    text += f"({render_parameters(symbol.parameters, full=True)})"
    if symbol.is_const:
        text += " const"
    if symbol.is_thunk:
        text += render_thunk_body(symbol)
    return text
