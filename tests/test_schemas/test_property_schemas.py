"""Tests for property request schemas and list-field normalisation."""

import pytest
from pydantic import ValidationError

from app.schemas.property import PropertyCreate, PropertyUpdate, normalize_list_field


class TestNormalizeListField:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (None, None),
            ("", []),
            ("   ", []),
            (["wifi", " pileta "], ["wifi", "pileta"]),
            (("wifi",), ["wifi"]),
            ('["wifi", "parrilla"]', ["wifi", "parrilla"]),
            ("wifi, pileta,,  cochera", ["wifi", "pileta", "cochera"]),
            ("mascotas", ["mascotas"]),
            ('"solo un item"', ["solo un item"]),
            (["wifi", "", "  "], ["wifi"]),
        ],
    )
    def test_normalises(self, value, expected):
        assert normalize_list_field(value) == expected

    def test_rejects_other_types(self):
        with pytest.raises(ValueError):
            normalize_list_field(42)


class TestPropertyCreate:
    def test_defaults_to_temporary_rental(self):
        body = PropertyCreate(title="Casa", property_type="casa")
        assert body.transaction_type == "alquiler_temporario"

    def test_lists_are_normalised(self):
        body = PropertyCreate(title="Casa", property_type="casa", amenities="wifi,pileta", rules='["no fiestas"]')
        assert body.amenities == ["wifi", "pileta"]
        assert body.rules == ["no fiestas"]

    def test_non_list_amenities_rejected(self):
        with pytest.raises(ValidationError):
            PropertyCreate(title="Casa", property_type="casa", amenities=42)

    def test_unknown_transaction_type_rejected(self):
        with pytest.raises(ValidationError):
            PropertyCreate(title="Casa", property_type="casa", transaction_type="permuta")


class TestPropertyUpdate:
    def test_only_set_fields_are_dumped(self):
        body = PropertyUpdate(title="Nuevo titulo")
        assert body.model_dump(exclude_unset=True) == {"title": "Nuevo titulo"}

    def test_status_is_not_a_field(self):
        body = PropertyUpdate(status="ocupado_temp")
        assert "status" not in body.model_dump(exclude_unset=True)
