"""
Benchmark scenarios: one single-step name, one chain and one chain through a
collection. The model methods all raise, so a scenario only succeeds if every
access goes through a stand-in.
"""

from typing import Callable, Collection, Dict

from propname.builder import PropertyNames


class A:
    def getA(self) -> int:
        raise AssertionError()

    def getB(self) -> "B":
        raise AssertionError()

    def getC(self) -> str:
        raise AssertionError()

    def getBs(self) -> Collection["B"]:
        raise AssertionError()


class B:
    def getA(self) -> A:
        raise AssertionError()

    def getB(self) -> "B":
        raise AssertionError()


def single(names: PropertyNames) -> str:
    return names.name_of(A.getA)


def chain(names: PropertyNames) -> str:
    return names.name(names.of(A.getB))


def collection(names: PropertyNames) -> str:
    return names.name(names.any_(names.of(A.getB).getA().getBs()))


SCENARIOS: Dict[str, Callable[[PropertyNames], str]] = {
    "single": single,
    "chain": chain,
    "collection": collection,
}
