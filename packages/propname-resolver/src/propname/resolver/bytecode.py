"""
Code object introspection used to infer the owner of an accessor reference.

Nothing here executes the inspected code: everything is read from the code
object, its closure cells, its defaults and the globals it was defined in.
"""

import builtins
import dis
import types
from typing import Any, Iterator, List, Optional

from propname.proxy import is_stand_in

# Every variant the compiler emits for reading a local (3.11 - 3.14)
_LOCAL_LOADS = frozenset(
    {
        "LOAD_FAST",
        "LOAD_FAST_CHECK",
        "LOAD_FAST_BORROW",
        "LOAD_FAST_LOAD_FAST",
        "LOAD_FAST_BORROW_LOAD_FAST_BORROW",
        "LOAD_DEREF",
    }
)
_ATTRIBUTE_LOADS = frozenset({"LOAD_ATTR", "LOAD_METHOD"})


def first_parameter(code: types.CodeType) -> Optional[str]:
    if code.co_argcount + code.co_posonlyargcount == 0:
        return None
    return code.co_varnames[0]


def _loads(instruction: dis.Instruction, name: str) -> bool:
    if instruction.opname not in _LOCAL_LOADS:
        return False
    value = instruction.argval
    if isinstance(value, tuple):
        # Superinstructions push both locals; the last one ends up on top
        return value[-1] == name
    return value == name


def first_attribute(code: types.CodeType) -> Optional[str]:
    """
    Returns the first attribute loaded directly off the first parameter,
    e.g. `getCustomer` for `lambda c: c.getCustomer().getLegalName()`.
    """
    param = first_parameter(code)
    if param is None:
        return None

    instructions = list(dis.get_instructions(code))
    for current, following in zip(instructions, instructions[1:]):
        # Loads passing the parameter along (calls, closures) are skipped
        if _loads(current, param) and following.opname in _ATTRIBUTE_LOADS:
            return following.argval
    return None


def _code_objects(code: types.CodeType) -> Iterator[types.CodeType]:
    yield code
    for const in code.co_consts:
        if isinstance(const, types.CodeType):
            yield from _code_objects(const)


def _referenced_values(func: types.FunctionType) -> Iterator[Any]:
    namespace = func.__globals__
    names = [n for code in _code_objects(func.__code__) for n in code.co_names]

    modules = []
    for name in names:
        if name in namespace:
            value = namespace[name]
        elif hasattr(builtins, name):
            value = getattr(builtins, name)
        else:
            continue
        if isinstance(value, types.ModuleType):
            modules.append(value)
        yield value

    # `models.Contract` names `models` and `Contract`
    for module in modules:
        for name in names:
            value = getattr(module, name, None)
            if value is not None:
                yield value

    for cell in func.__closure__ or ():
        try:
            yield cell.cell_contents
        except ValueError:
            # Cell not bound yet
            continue

    yield from func.__defaults__ or ()
    yield from (func.__kwdefaults__ or {}).values()


def embedded_types(func: types.FunctionType) -> List[type]:
    """
    Classes a function refers to by name, through a closure cell or through a
    default value, in first-seen order. Stand-in classes are never reported.
    """
    found: List[type] = []
    for value in _referenced_values(func):
        if isinstance(value, type) and not is_stand_in(value) and value not in found:
            found.append(value)
    return found
