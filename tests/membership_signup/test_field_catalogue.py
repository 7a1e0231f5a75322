"""Tests for membership-signup/app/field_catalogue.py -- steps, descriptors, consistency."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent / "membership-signup"))

from app.field_catalogue import (
    MEMBERSHIP_CATALOGUE,
    MEMBERSHIP_TIERS,
    TERMS_AND_CONDITIONS,
    Catalogue,
    CatalogueError,
    FieldDescriptor,
    FieldKind,
    FieldOption,
    Step,
    check_catalogue,
)


def _text(name: str, required: bool = False) -> FieldDescriptor:
    return FieldDescriptor(name=name, label=name.title(), kind=FieldKind.TEXT, required=required)


# ── Consistency checks ───────────────────────────────────────────────────


class TestCheckCatalogue:
    def test_consistent_catalogue_has_no_problems(self):
        fields = [_text("a"), _text("b")]
        steps = [Step("One", "", ("a",)), Step("Two", "", ("b",))]
        assert check_catalogue(fields, steps) == []

    def test_unknown_field_reference(self):
        problems = check_catalogue([_text("a")], [Step("One", "", ("a", "ghost"))])
        assert any("unknown field: ghost" in p for p in problems)

    def test_field_on_no_step(self):
        problems = check_catalogue([_text("a"), _text("orphan")], [Step("One", "", ("a",))])
        assert any("orphan is not placed" in p for p in problems)

    def test_field_on_two_steps(self):
        steps = [Step("One", "", ("a",)), Step("Two", "", ("a",))]
        problems = check_catalogue([_text("a")], steps)
        assert any("more than one step" in p for p in problems)

    def test_duplicate_field_name(self):
        problems = check_catalogue([_text("a"), _text("a")], [Step("One", "", ("a",))])
        assert any("Duplicate" in p for p in problems)

    def test_choice_field_without_options(self):
        f = FieldDescriptor(name="tier", label="Tier", kind=FieldKind.SELECT)
        problems = check_catalogue([f], [Step("One", "", ("tier",))])
        assert any("has no options" in p for p in problems)

    def test_unknown_input_subtype(self):
        f = FieldDescriptor(name="a", label="A", kind=FieldKind.TEXT, input_subtype="telex")
        problems = check_catalogue([f], [Step("One", "", ("a",))])
        assert any("telex" in p for p in problems)

    def test_no_steps(self):
        assert "Catalogue has no steps" in check_catalogue([], [])


class TestCatalogue:
    def test_construction_rejects_inconsistent_steps(self):
        with pytest.raises(CatalogueError):
            Catalogue([_text("a")], [Step("One", "", ("a", "missing"))])

    def test_field_lookup(self):
        cat = Catalogue([_text("a")], [Step("One", "", ("a",))])
        assert cat.field("a").label == "A"
        assert "a" in cat
        assert len(cat) == 1

    def test_unknown_field_raises_key_error(self):
        cat = Catalogue([_text("a")], [Step("One", "", ("a",))])
        with pytest.raises(KeyError):
            cat.field("nope")

    def test_step_fields_in_display_order(self):
        cat = Catalogue([_text("a"), _text("b")], [Step("One", "", ("b", "a"))])
        assert [f.name for f in cat.step_fields(0)] == ["b", "a"]

    def test_step_fields_out_of_range(self):
        cat = Catalogue([_text("a")], [Step("One", "", ("a",))])
        with pytest.raises(IndexError):
            cat.step_fields(1)


# ── Descriptors ──────────────────────────────────────────────────────────


class TestFieldDescriptor:
    def test_checkbox_group_is_multi_valued(self):
        f = FieldDescriptor(name="c", label="C", kind=FieldKind.CHECKBOX,
                            options=(FieldOption("X", "x"),))
        assert f.is_multi_valued

    def test_single_checkbox_is_not_multi_valued(self):
        f = FieldDescriptor(name="c", label="C", kind=FieldKind.CHECKBOX)
        assert not f.is_multi_valued

    def test_option_label_falls_back_to_value(self):
        f = FieldDescriptor(name="s", label="S", kind=FieldKind.SELECT,
                            options=(FieldOption("Gold", "gold"),))
        assert f.option_label("gold") == "Gold"
        assert f.option_label("tin") == "tin"


# ── Hotel membership application ─────────────────────────────────────────


class TestMembershipCatalogue:
    def test_nine_steps(self):
        assert MEMBERSHIP_CATALOGUE.step_count == 9
        assert MEMBERSHIP_CATALOGUE.steps[0].title == "Personal Information"
        assert MEMBERSHIP_CATALOGUE.steps[-1].title == "Signatures & Declaration"

    def test_every_kind_is_used(self):
        for kind in FieldKind:
            assert MEMBERSHIP_CATALOGUE.fields_of_kind(kind), kind

    def test_tiers(self):
        assert [t.value for t in MEMBERSHIP_TIERS] == [
            "bronze", "silver", "gold", "platinum", "diamond",
        ]

    def test_contact_email_is_required_email(self):
        f = MEMBERSHIP_CATALOGUE.field("contactEmail")
        assert f.required
        assert f.input_subtype == "email"

    def test_member_signature_is_on_last_step(self):
        last = MEMBERSHIP_CATALOGUE.steps[-1]
        assert "memberSignature" in last.field_names

    def test_terms_present(self):
        assert len(TERMS_AND_CONDITIONS) >= 5
        assert all(title and text for title, text in TERMS_AND_CONDITIONS)
