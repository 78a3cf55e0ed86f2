"""
Property form state for owner tools.

Mirrors the add/edit listing page: numeric inputs are coerced as they are
entered and the whole form is validated before anything is sent.
"""

import math
from typing import Any, Dict, List, Optional

from keyhost.utils.text import TextUtils


class FormValidationError(Exception):
    """Raised when a form is submitted with field errors."""

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        summary = "; ".join(f"{field}: {message}" for field, message in self.errors.items())
        super().__init__(f"Form has errors: {summary}")


INTEGER_FIELDS = {"bedrooms", "bathrooms", "max_guests", "size_sqft", "minimum_stay", "maximum_stay"}
DECIMAL_FIELDS = {"base_price", "cleaning_fee", "security_deposit", "extra_guest_fee", "latitude", "longitude"}
NUMERIC_FIELDS = INTEGER_FIELDS | DECIMAL_FIELDS

REQUIRED_FIELDS = ("title", "description", "address", "city", "state", "country", "base_price")

# Sanitized on input; property_type and the time fields are passed through
FREE_TEXT_FIELDS = {"title", "description", "address", "city", "state", "country", "postal_code"}

FORM_DEFAULTS: Dict[str, Any] = {
    "title": "",
    "description": "",
    "property_type": "apartment",
    "address": "",
    "city": "",
    "state": "",
    "country": "Bangladesh",
    "postal_code": "",
    "latitude": None,
    "longitude": None,
    "bedrooms": 1,
    "bathrooms": 1,
    "max_guests": 2,
    "size_sqft": None,
    "base_price": None,
    "cleaning_fee": 0,
    "security_deposit": 0,
    "extra_guest_fee": 0,
    "minimum_stay": 1,
    "maximum_stay": None,
    "check_in_time": "15:00",
    "check_out_time": "11:00",
    "is_instant_book": False,
}


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class PropertyForm:
    """
    Editable listing form.

    ``data`` holds the field values, ``errors`` the per-field messages and
    ``images`` the data URLs to submit. ``images = None`` leaves the
    listing's gallery untouched on update.
    """

    def __init__(self, images: Optional[List[str]] = None, **initial: Any):
        self.data: Dict[str, Any] = dict(FORM_DEFAULTS)
        self.errors: Dict[str, str] = {}
        self.images = images
        for name, value in initial.items():
            self.set_field(name, value)

    @classmethod
    def from_property(cls, listing: Dict[str, Any]) -> "PropertyForm":
        """Prefill a form from a property returned by the API."""
        values = {name: listing[name] for name in FORM_DEFAULTS if listing.get(name) is not None}
        return cls(**values)

    def _coerce_number(self, name: str, value: Any) -> Any:
        if _is_blank(value):
            return None
        if isinstance(value, bool):
            self.errors[name] = "Must be a number"
            return value

        try:
            number = float(value)
        except (TypeError, ValueError):
            self.errors[name] = "Must be a number"
            return value

        if not math.isfinite(number):
            self.errors[name] = "Must be a number"
            return value

        if name in INTEGER_FIELDS:
            if not number.is_integer():
                self.errors[name] = "Must be a whole number"
                return value
            return int(number)
        return int(number) if isinstance(value, int) else number

    def set_field(self, name: str, value: Any) -> None:
        """
        Change handler for one input.

        Raises:
            KeyError: If the form has no such field
        """
        if name not in FORM_DEFAULTS:
            raise KeyError(f"Unknown form field: {name}")

        self.errors.pop(name, None)

        if name in NUMERIC_FIELDS:
            value = self._coerce_number(name, value)
        elif name in FREE_TEXT_FIELDS and isinstance(value, str):
            value = TextUtils.sanitize_text(value)

        self.data[name] = value

    def set_location(self, latitude: float, longitude: float) -> None:
        """Map pin handler."""
        self.set_field("latitude", round(float(latitude), 8))
        self.set_field("longitude", round(float(longitude), 8))

    def validate(self) -> Dict[str, str]:
        """
        Check the whole form.

        Returns:
            Field errors, empty when the form can be submitted
        """
        errors = {name: message for name, message in self.errors.items()}

        for name in REQUIRED_FIELDS:
            if name not in errors and _is_blank(self.data.get(name)):
                errors[name] = "This field is required"

        price = self.data.get("base_price")
        if "base_price" not in errors:
            if not isinstance(price, (int, float)) or isinstance(price, bool):
                errors["base_price"] = "Must be a number"
            elif price <= 0:
                errors["base_price"] = "Must be greater than 0"

        for name, bound in (("latitude", 90), ("longitude", 180)):
            value = self.data.get(name)
            if name in errors or value is None:
                continue
            if not -bound <= value <= bound:
                errors[name] = f"Must be between -{bound} and {bound}"

        minimum, maximum = self.data.get("minimum_stay"), self.data.get("maximum_stay")
        if (
            "maximum_stay" not in errors
            and isinstance(minimum, int)
            and isinstance(maximum, int)
            and maximum < minimum
        ):
            errors["maximum_stay"] = "Must not be less than the minimum stay"

        return errors

    @property
    def is_valid(self) -> bool:
        return not self.validate()

    @staticmethod
    def _time_value(value: str) -> str:
        return f"{value}:00" if len(value) == 5 else value

    def to_payload(self) -> Dict[str, Any]:
        """
        Flat JSON body for the owner property endpoints.

        Raises:
            FormValidationError: If the form has errors
        """
        errors = self.validate()
        if errors:
            raise FormValidationError(errors)

        data = self.data
        payload = {
            "title": data["title"],
            "description": data["description"],
            "property_type": (data["property_type"] or "apartment").lower(),
            "address": data["address"],
            "city": data["city"],
            "state": data["state"],
            "country": data["country"],
            "postal_code": data["postal_code"] or None,
            "latitude": data["latitude"],
            "longitude": data["longitude"],
            "bedrooms": data["bedrooms"] if data["bedrooms"] is not None else 1,
            "bathrooms": data["bathrooms"] if data["bathrooms"] is not None else 1,
            "max_guests": data["max_guests"] or 2,
            "size_sqft": data["size_sqft"],
            "base_price": data["base_price"],
            "cleaning_fee": data["cleaning_fee"] or 0,
            "security_deposit": data["security_deposit"] or 0,
            "extra_guest_fee": data["extra_guest_fee"] or 0,
            "check_in_time": self._time_value(data["check_in_time"] or "15:00"),
            "check_out_time": self._time_value(data["check_out_time"] or "11:00"),
            "minimum_stay": data["minimum_stay"] or 1,
            "maximum_stay": data["maximum_stay"],
            "is_instant_book": bool(data["is_instant_book"]),
        }
        if self.images is not None:
            payload["images"] = list(self.images)
        return payload
