"""Tests for schema configuration shared by the API models."""

from foodorder.core.config import Settings
from foodorder.models.food import FoodItemOut
from foodorder.models.order import DeliveryTimeUpdate, OrderOut, PaymentMethod
from foodorder.models.user import UserPublic

from .conftest import order_values


class TestOrderSchemas:
    def test_delivery_time_accepts_both_key_styles(self):
        assert DeliveryTimeUpdate(estimatedDeliveryTime=50).estimated_delivery_time == 50
        assert DeliveryTimeUpdate(estimated_delivery_time=50).estimated_delivery_time == 50

    def test_order_dumps_camel_case(self):
        values = order_values(id="o1", payment_method=PaymentMethod.CASH.value)
        data = OrderOut(**values).model_dump(by_alias=True)
        assert data["paymentMethod"] == "cash"
        assert data["estimatedDeliveryTime"] == 35
        assert "payment_method" not in data


class TestModelConfig:
    def test_orm_snapshots_read_attributes(self):
        assert UserPublic.model_config["from_attributes"] is True
        assert FoodItemOut.model_config["from_attributes"] is True

    def test_settings_read_env_file(self):
        assert Settings.model_config["env_file"] == ".env"
        assert Settings.model_config["case_sensitive"] is True
