"""
Unit tests for model helpers that need no database.
"""

import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from keyhost.models.image import PropertyImage
from keyhost.models.property import Property
from keyhost.models.setting import (
    SettingType,
    coerce_setting_value,
    infer_setting_type,
    serialize_setting_value,
)
from keyhost.models.user import User, UserType


class TestUserModel:
    """Tests for User helpers."""

    def test_email_normalized(self):
        assert User.validate_email_format("Guest@Example.COM") == "guest@example.com"

    def test_invalid_email(self):
        with pytest.raises(ValueError, match="Invalid email format"):
            User.validate_email_format("not-an-email")

    def test_short_password_rejected(self):
        with pytest.raises(ValueError):
            User.hash_password("short")

    def test_password_round_trip(self):
        user = User(email="a@example.com", first_name="A", last_name="B")
        user.set_password("correct-horse")
        assert user.verify_password("correct-horse")
        assert not user.verify_password("wrong-horse")

    def test_lock_window(self):
        now = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
        user = User(locked_until=now + timedelta(minutes=5))
        assert user.is_locked(now) is True
        assert user.is_locked(now + timedelta(minutes=6)) is False

    def test_naive_lock_read_as_utc(self):
        now = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
        user = User(locked_until=datetime(2024, 6, 1, 12, 30))
        assert user.is_locked(now) is True

    def test_unlocked_by_default(self):
        assert User().is_locked() is False

    def test_can_manage_property(self):
        owner_id = uuid.uuid4()
        owner = User(id=owner_id, user_type=UserType.PROPERTY_OWNER)
        stranger = User(id=uuid.uuid4(), user_type=UserType.PROPERTY_OWNER)
        admin = User(id=uuid.uuid4(), user_type=UserType.ADMIN)

        assert owner.can_manage_property(owner_id)
        assert not stranger.can_manage_property(owner_id)
        assert admin.can_manage_property(owner_id)


class TestPropertyModel:
    """Tests for Property validation."""

    def test_price_must_be_positive(self):
        with pytest.raises(ValueError, match="greater than 0"):
            Property(base_price=Decimal("0")).validate_price()

    def test_coordinates(self):
        Property(latitude=Decimal("23.78"), longitude=Decimal("90.40")).validate_coordinates()
        with pytest.raises(ValueError, match="Latitude"):
            Property(latitude=Decimal("95")).validate_coordinates()

    def test_stay_rules(self):
        with pytest.raises(ValueError, match="Maximum stay"):
            Property(minimum_stay=3, maximum_stay=2).validate_stay_rules()

    def test_inline_image(self):
        assert PropertyImage(image_url="data:image/png;base64,AAAA").is_inline
        assert not PropertyImage(image_url="https://cdn.example.com/a.png").is_inline


class TestSettingValues:
    """Tests for typed setting values."""

    @pytest.mark.parametrize("raw, setting_type, expected", [
        ("12.5", SettingType.NUMBER, 12.5),
        ("true", SettingType.BOOLEAN, True),
        ("false", SettingType.BOOLEAN, False),
        ('{"bdt": 1}', SettingType.JSON, {"bdt": 1}),
        ("{broken", SettingType.JSON, "{broken"),
        ("Keyhost", SettingType.STRING, "Keyhost"),
        (None, SettingType.STRING, None),
    ])
    def test_coerce(self, raw, setting_type, expected):
        assert coerce_setting_value(raw, setting_type) == expected

    @pytest.mark.parametrize("value, text, setting_type", [
        (True, "true", SettingType.BOOLEAN),
        (3, "3", SettingType.NUMBER),
        (["en", "bn"], '["en", "bn"]', SettingType.JSON),
        ("BDT", "BDT", SettingType.STRING),
    ])
    def test_serialize_and_infer(self, value, text, setting_type):
        assert serialize_setting_value(value) == text
        assert infer_setting_type(value) == setting_type
