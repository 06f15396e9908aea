# tests/common/test_constants.py
"""
Тесты для модуля констант.
"""

from uytop.common.constants import (
    DEFAULT_PAGE_SIZE,
    Language,
    ListingStatus,
    ListingType,
    PropertyType,
    SessionReason,
    SortMode,
    TypeMsg,
)


class TestTypeMsg:
    """Тесты для enum TypeMsg."""

    def test_type_msg_values(self) -> None:
        assert TypeMsg.DEBUG.value == "debug"
        assert TypeMsg.INFO.value == "info"
        assert TypeMsg.WARNING.value == "warning"
        assert TypeMsg.ERROR.value == "error"
        assert TypeMsg.CRITICAL.value == "critical"

    def test_type_msg_is_str_enum(self) -> None:
        assert isinstance(TypeMsg.INFO, str)
        assert TypeMsg.INFO == "info"


class TestDomainEnums:
    """Значения перечислений совпадают со значениями в БД."""

    def test_languages(self) -> None:
        assert [item.value for item in Language] == ["ru", "uz"]

    def test_property_types(self) -> None:
        assert {item.value for item in PropertyType} == {"apartment", "house", "land", "commercial"}

    def test_listing_types_and_statuses(self) -> None:
        assert {item.value for item in ListingType} == {"sale", "rent"}
        assert {item.value for item in ListingStatus} == {"pending", "approved", "rejected"}

    def test_sort_modes(self) -> None:
        assert SortMode("date_desc") is SortMode.DATE_DESC
        assert {item.value for item in SortMode} == {"price_asc", "price_desc", "date_desc", "popularity"}

    def test_session_reasons_are_serializable(self) -> None:
        assert SessionReason.SIGNED_OUT == "signed_out"
        assert SessionReason.NOT_EMBEDDED.value == "not_embedded"

    def test_page_size(self) -> None:
        assert DEFAULT_PAGE_SIZE == 20
