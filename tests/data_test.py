import pytest

from faultline.core.classify import warning
from faultline.core.data import LEVEL_KEY
from faultline.core.data import add_log_data
from faultline.core.data import get_log_data
from faultline.core.exceptions import MetadataError


class PaymentError(Exception):
    __slots__ = ("amount",)

    def __init__(self, amount):
        super().__init__(f"could not charge {amount}")
        self.amount = amount


@pytest.mark.unit
class TestErrorData:
    def test_reading_does_not_create_the_map(self):
        exc = ValueError("FAIL")
        assert get_log_data(exc) == {}
        assert vars(exc) == {}

    def test_add_log_data_is_fluent(self):
        exc = ValueError("FAIL")
        assert add_log_data(exc, "User Id", "42") is exc
        assert get_log_data(exc) == {"User Id": "42"}

    def test_values_are_strings(self):
        exc = add_log_data(ValueError("FAIL"), "attempt", 3)
        assert get_log_data(exc) == {"attempt": "3"}

    def test_chaining_and_overwrite(self):
        exc = add_log_data(
            add_log_data(RuntimeError("FAIL"), "region", "eu"),
            "region",
            "us",
        )
        assert get_log_data(exc) == {"region": "us"}

    def test_reserved_key_is_rejected(self):
        with pytest.raises(MetadataError, match="reserved"):
            add_log_data(ValueError("FAIL"), LEVEL_KEY, "CRITICAL")

    def test_plain_level_key_does_not_collide(self):
        exc = warning(add_log_data(ValueError("FAIL"), "Level", "custom"))
        assert get_log_data(exc) == {"Level": "custom", LEVEL_KEY: "WARNING"}

    def test_snapshot_is_a_copy(self):
        exc = add_log_data(ValueError("FAIL"), "key", "value")
        get_log_data(exc)["key"] = "changed"
        assert get_log_data(exc) == {"key": "value"}

    def test_errors_are_independent(self):
        first, second = ValueError("first"), ValueError("second")
        add_log_data(first, "key", "value")
        assert get_log_data(second) == {}

    def test_slotted_error_subclass(self):
        exc = add_log_data(PaymentError(10), "currency", "EUR")
        assert exc.amount == 10
        assert get_log_data(exc) == {"currency": "EUR"}
