"""
Fixture domain models shared by the test suites.

Two flavours live here: a getter-style model whose methods all raise (so a
test fails loudly if a real accessor body ever runs), and a dataclass model
using fields, properties and snake_case getters.
"""

import datetime
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from functools import cached_property
from typing import FrozenSet, Generic, List, Optional, Set, Tuple, TypeVar

V = TypeVar("V")

# --- Getter-style model ---


class AbstractEntity(Generic[V]):
    def __init__(self):
        raise AssertionError()

    def getVersion(self) -> V:
        raise AssertionError()

    def isArchived(self) -> bool:
        raise AssertionError()

    def __str__(self) -> str:
        raise AssertionError()

    def __eq__(self, other) -> bool:
        raise AssertionError()

    def __hash__(self) -> int:
        raise AssertionError()


class Address(AbstractEntity[int]):
    def isArchived(self) -> bool:
        raise AssertionError()

    def getCity(self) -> str:
        raise AssertionError()

    def getNumbers(self) -> List[int]:
        raise AssertionError()


class BusinessPartner(AbstractEntity[int]):
    def getLegalName(self) -> str:
        raise AssertionError()

    def getAddresses(self) -> Set[Address]:
        raise AssertionError()

    def getAcronym(self) -> str:
        raise AssertionError()


class ContractPosition(AbstractEntity[int]):
    def getPrice(self) -> Decimal:
        raise AssertionError()


class Shipment(ABC):
    @abstractmethod
    def getDestination(self) -> Address: ...


class Contract(AbstractEntity[int]):
    def getVersion(self) -> int:
        raise AssertionError()

    def getShipment(self) -> Shipment:
        raise AssertionError()

    def getCustomer(self) -> BusinessPartner:
        raise AssertionError()

    def getPositions(self) -> List[ContractPosition]:
        raise AssertionError()

    def getCreationDay(self) -> datetime.date:
        raise AssertionError()


class SalesContract(Contract):
    def __init__(self):
        raise AssertionError()

    def nonGetterMethod(self) -> str:
        return ""


# --- Dataclass model ---


class Currency(Enum):
    EUR = "EUR"
    USD = "USD"


@dataclass
class Country:
    code: str
    name: str


@dataclass
class PostalAddress:
    street: str
    city: str
    country: Country
    lines: List[str] = field(default_factory=list)


@dataclass
class Customer:
    legal_name: str
    addresses: List[PostalAddress] = field(default_factory=list)
    tags: FrozenSet[str] = frozenset()

    @property
    def primary_address(self) -> Optional[PostalAddress]:
        raise AssertionError()

    def get_rating(self) -> int:
        raise AssertionError()

    def is_vip(self) -> bool:
        raise AssertionError()

    def rename(self, new_name: str) -> None:
        raise AssertionError()

    def _internal_code(self) -> str:
        return "internal"


@dataclass(frozen=True)
class OrderLine:
    sku: str
    quantity: int
    unit_price: Decimal
    currency: Currency = Currency.EUR


@dataclass
class Order:
    number: str
    customer: Customer
    lines: Tuple[OrderLine, ...] = ()
    created_at: Optional[datetime.datetime] = None

    @cached_property
    def total(self) -> Decimal:
        raise AssertionError()

    def get_notes(self) -> list:
        raise AssertionError()

    def get_pair(self) -> Tuple[OrderLine, Customer]:
        raise AssertionError()

    def cancel(self) -> None:
        raise AssertionError()
