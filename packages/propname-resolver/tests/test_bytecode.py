from propname.resolver import embedded_types, first_attribute
from propname.test_utils import models


def test_first_attribute_of_method_chain():
    assert first_attribute((lambda c: c.getCustomer().getLegalName()).__code__) == "getCustomer"


def test_first_attribute_of_field_chain():
    assert first_attribute((lambda o: o.customer.legal_name).__code__) == "customer"


def test_first_attribute_skips_unrelated_loads():
    def accessor(contract):
        models.Contract
        return contract.getShipment()

    assert first_attribute(accessor.__code__) == "getShipment"


def test_first_attribute_of_captured_parameter():
    def accessor(contract):
        def inner():
            return contract

        return contract.getVersion()

    assert first_attribute(accessor.__code__) == "getVersion"


def test_no_attribute_when_parameter_is_passed_along():
    assert first_attribute((lambda c: str(c)).__code__) is None
    assert first_attribute((lambda: 1).__code__) is None


def test_embedded_types_through_module_attributes():
    found = embedded_types(lambda c: c.getVersion() if models.SalesContract else None)
    assert models.SalesContract in found


def test_embedded_types_through_closures_and_defaults():
    kind = models.Address

    def accessor(c, fallback=models.Country):
        return kind and c.getCity()

    found = embedded_types(accessor)
    assert models.Address in found
    assert models.Country in found


def test_embedded_types_include_nested_code():
    def accessor(c):
        return [models.OrderLine for _ in c.lines]

    assert models.OrderLine in embedded_types(accessor)
