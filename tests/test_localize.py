"""
Tests for the display transformer.

Core principle: same shape out as in, only eligible leaves rewritten.
"""

import copy
from datetime import datetime, timezone

import pytest

from agribridge.i18n.glossary import LocalizationConfig
from agribridge.i18n.localize import localize

from tests.conftest import OBJECT_ID


def shape(value):
    """Keys, lengths and nesting, without leaf values."""
    if isinstance(value, dict):
        return {k: shape(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [shape(v) for v in value]
    return None


@pytest.fixture
def market_price():
    """A market price payload as the API returns it."""
    return {
        "_id": OBJECT_ID,
        "__v": 0,
        "cropId": {"_id": OBJECT_ID, "name": "Matpe", "category": "Crops"},
        "marketId": "65a1b2c3d4e5f60718293a4b",
        "price": 125000,
        "unit": "Bag",
        "season": "Rainy Season",
        "note": "Price for 50 Bags",
        "image": "https://res.cloudinary.com/agri/image/upload/v1712/matpe.jpg",
        "color": "#22c55e",
        "isVerified": True,
        "contact": {"email": "admin1@agribridge.com", "phone": "09421234567"},
        "createdAt": "2025-03-01T08:00:00.000Z",
        "history": [
            {"price": 120000, "recordedAt": "2025-02-01"},
            {"price": 118500, "recordedAt": "2025-01-01"},
        ],
    }


# =============================================================================
# Target Locale
# =============================================================================


class TestTargetLocale:
    def test_worked_example(self):
        config = LocalizationConfig(glossary={"Bag": "X"}, digits={d: d + "\u0304" for d in "0123456789"})
        result = localize(
            {"name": "Wheat", "price": 15000, "unit": "Bag", "_id": OBJECT_ID},
            "target",
            config,
        )
        assert result == {
            "name": "Wheat",
            "price": "1\u03045\u0304,0\u03040\u03040\u0304",
            "unit": "X",
            "_id": OBJECT_ID,
        }

    def test_market_price(self, market_price):
        result = localize(market_price, "mm")

        assert result["_id"] == OBJECT_ID
        assert result["__v"] == 0
        assert result["marketId"] == market_price["marketId"]
        assert result["price"] == "၁၂၅,၀၀၀"
        assert result["unit"] == "အိတ်"
        assert result["season"] == "မိုးရာသီ"
        assert result["note"] == "Price for ၅၀ အိတ်"
        assert result["cropId"] == {"_id": OBJECT_ID, "name": "မတ်ပဲ", "category": "သီးနှံများ"}
        assert result["history"][1]["price"] == "၁၁၈,၅၀၀"
        assert result["history"][1]["recordedAt"] == "2025-01-01"

    def test_literals_pass_through(self, market_price):
        result = localize(market_price, "mm")
        assert result["image"] == market_price["image"]
        assert result["color"] == "#22c55e"
        assert result["isVerified"] is True
        assert result["createdAt"] == market_price["createdAt"]

    def test_email_pass_through(self):
        for locale in ("en", "mm"):
            assert localize({"userEmail": "a1@b.com"}, locale) == {"userEmail": "a1@b.com"}

    def test_nested_email_field(self, market_price):
        result = localize(market_price, "mm")
        assert result["contact"]["email"] == "admin1@agribridge.com"
        assert result["contact"]["phone"] == "၀၉၄၂၁၂၃၄၅၆၇"

    def test_strings_are_trimmed(self):
        assert localize({"name": "  Seeds "}, "mm") == {"name": "မျိုးစေ့များ"}

    def test_top_level_string(self):
        assert localize("150 Bags", "mm") == "၁၅၀ အိတ်"

    def test_opaque_values(self):
        when = datetime(2025, 6, 1, tzinfo=timezone.utc)
        oid = {"$oid": OBJECT_ID}
        result = localize({"harvest": when, "ref": oid, "amount": 5000}, "mm")
        assert result["harvest"] is when
        assert result["ref"] is oid
        assert result["amount"] == "၅,၀၀၀"

    def test_top_level_opaque(self):
        oid = {"$oid": OBJECT_ID}
        assert localize(oid, "mm") is oid


# =============================================================================
# Source Locale
# =============================================================================


class TestSourceLocale:
    def test_numbers_grouped(self, market_price):
        result = localize(market_price, "en")
        assert result["price"] == "125,000"
        assert result["history"][0]["price"] == "120,000"

    def test_numeric_strings_grouped(self):
        assert localize({"quantity": "25000"}, "en") == {"quantity": "25,000"}
        assert localize("25000") == "25,000"

    def test_text_unchanged(self, market_price):
        result = localize(market_price, "en")
        assert result["unit"] == "Bag"
        assert result["note"] == "Price for 50 Bags"

    def test_non_numeric_text_not_trimmed(self):
        assert localize({"name": " Wheat "}, "en") == {"name": " Wheat "}

    def test_years_not_grouped(self):
        assert localize({"season_year": 2025}, "en") == {"season_year": "2025"}

    def test_unknown_locale_falls_back_to_source(self):
        assert localize({"price": 12500}, "fr") == {"price": "12,500"}


# =============================================================================
# Contract
# =============================================================================


class TestContract:
    @pytest.mark.parametrize("locale", ["en", "mm"])
    def test_structure_preserved(self, market_price, locale):
        assert shape(localize(market_price, locale)) == shape(market_price)

    @pytest.mark.parametrize("locale", ["en", "mm"])
    def test_input_not_mutated(self, market_price, locale):
        before = copy.deepcopy(market_price)
        localize(market_price, locale)
        assert market_price == before

    def test_array_order_preserved(self):
        result = localize([{"price": 3000}, {"price": 4000}], "mm")
        assert result == [{"price": "၃,၀၀၀"}, {"price": "၄,၀၀၀"}]

    @pytest.mark.parametrize("value", [None, "", 0, [], {}, True])
    def test_falsy_and_scalars(self, value):
        assert localize(value, "mm") == value

    def test_identifier_fields_untouched(self):
        payload = {"_id": OBJECT_ID, "id": "42", "__v": 3, "farmerId": "12345"}
        assert localize(payload, "mm") == payload

    def test_very_large_numbers_english(self):
        result = localize({"price": 1e300, "note": "9" * 250, "total": 1e200}, "en")
        assert result == {
            "price": "1" + ",000" * 100,
            "note": "9" + ",999" * 83,
            "total": "1" + ",000" * 66,
        }

    def test_very_large_numbers_myanmar(self):
        result = localize({"price": 1e300, "note": "9" * 250}, "mm")
        assert result == {"price": "၁" + ",၀၀၀" * 100, "note": "၉" * 250}
