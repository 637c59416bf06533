import logging
from dataclasses import replace
from typing import List, Optional, Tuple

from .error import MalformedInputError
from .symbol import CxxObject, CxxParameter, ObjectChain, Substitution


def soft_merge(target: CxxParameter, source: CxxParameter) -> CxxParameter:
    """Fill in the fields of `target` which are not set yet from `source`.

    Flags that are already true and a non-empty indirection on `target` are
    kept. The type chain of `source` is appended to that of `target`."""
    return CxxParameter(
        type_chain=target.type_chain + source.type_chain,
        is_const=target.is_const or source.is_const,
        is_complex=target.is_complex or source.is_complex,
        indirection=target.indirection or source.indirection,
    )


def decompose(parameter: CxxParameter) -> List[CxxParameter]:
    """Split a parameter into the substitution candidates it introduces.

    Candidates are ordered from least to most qualified:

    - the type chain without any template arguments
    - the type chain with its template arguments, if there are any
    - then one entry per qualifier: complex, const, and each prefix of the
      pointer/reference markers

    Each qualified entry builds on the one before it. For a type chain with a
    single segment, the first (unqualified, untemplated) entry is left out."""
    base = CxxParameter(
        type_chain=tuple(CxxObject(obj.name) for obj in parameter.type_chain)
    )
    candidates = [base]

    if any(obj.template_args for obj in parameter.type_chain):
        candidates.append(replace(base, type_chain=parameter.type_chain))

    if parameter.is_complex:
        candidates.append(replace(candidates[-1], is_complex=True))
    if parameter.is_const:
        candidates.append(replace(candidates[-1], is_const=True))
    unreferenced = candidates[-1]
    for i in range(1, len(parameter.indirection) + 1):
        candidates.append(replace(unreferenced, indirection=parameter.indirection[:i]))

    if len(parameter.type_chain) == 1:
        candidates.pop(0)
    return candidates


class SubstitutionTable:
    """Append-only log of name fragments that later substitutions may refer to.

    `S_` refers to the most recent entry, and `S<n>_` to the n-th entry,
    counting from 0."""

    def __init__(self) -> None:
        self._entries: List[Substitution] = []

    def __len__(self) -> int:
        return len(self._entries)

    def entries(self) -> Tuple[Substitution, ...]:
        return tuple(self._entries)

    def append_prefixes(self, chain: ObjectChain) -> None:
        # Only the strict prefixes with at least two segments are candidates
        for end in range(2, len(chain)):
            self._append(chain[:end])

    def append_parameter(self, parameter: CxxParameter) -> None:
        for candidate in decompose(parameter):
            self._append(candidate)

    def resolve(self, index: Optional[int]) -> Substitution:
        if not self._entries:
            raise MalformedInputError("Substitution with an empty table")
        if index is None:
            index = len(self._entries) - 1
        elif index >= len(self._entries):
            raise MalformedInputError(
                f"Substitution index {index} is out of range "
                f"(table has {len(self._entries)} entries)"
            )
        logging.debug(f"Resolved substitution {index}: {self._entries[index]}")
        return self._entries[index]

    def _append(self, entry: Substitution) -> None:
        logging.debug(f"Substitution {len(self._entries)}: {entry}")
        self._entries.append(entry)
