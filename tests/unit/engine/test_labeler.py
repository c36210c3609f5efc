"""
Tests for label resolution and signatures.
"""

from autoform_filler.engine.labeler import (
    attribute_hints,
    build_signature,
    normalize_text,
    resolve_label,
    sibling_label,
)
from autoform_filler.interfaces.browser import FieldSnapshot, SiblingText


def test_normalize_text():
    assert normalize_text("  Work\n\tEMAIL  Address ") == "work email address"
    assert normalize_text(None) == ""
    assert normalize_text("") == ""


class TestResolveLabel:
    """Test label source priority."""

    def test_label_for_wins(self):
        snapshot = FieldSnapshot(
            tag_name="input",
            attributes={"id": "e1"},
            label_for_text="Work Email",
            wrapping_label_text="Wrapper",
            preceding_siblings=[SiblingText("span", "Sibling")],
            labelledby_text="Described",
        )
        assert resolve_label(snapshot) == "Work Email"

    def test_label_for_needs_id(self):
        snapshot = FieldSnapshot(
            tag_name="input",
            label_for_text="Stray",
            wrapping_label_text="Phone number",
        )
        assert resolve_label(snapshot) == "Phone number"

    def test_wrapping_label(self):
        snapshot = FieldSnapshot(
            tag_name="input",
            attributes={"id": "x"},
            wrapping_label_text="  City  ",
            preceding_siblings=[SiblingText("span", "Sibling")],
        )
        assert resolve_label(snapshot) == "City"

    def test_sibling(self):
        snapshot = FieldSnapshot(
            tag_name="input",
            preceding_siblings=[SiblingText("div", ""), SiblingText("span", "Notice period")],
            labelledby_text="Described",
        )
        assert resolve_label(snapshot) == "Notice period"

    def test_labelledby(self):
        snapshot = FieldSnapshot(tag_name="input", labelledby_text="Expected CTC")
        assert resolve_label(snapshot) == "Expected CTC"

    def test_nothing(self):
        assert resolve_label(FieldSnapshot(tag_name="input")) == ""


class TestSiblingLabel:
    """Test preceding-sibling scanning."""

    def test_empty_label_stops_scan(self):
        siblings = [SiblingText("label", ""), SiblingText("span", "Far away")]
        assert sibling_label(siblings) == ""

    def test_only_three_siblings(self):
        siblings = [SiblingText("br"), SiblingText("br"), SiblingText("br"), SiblingText("span", "Too far")]
        assert sibling_label(siblings) == ""

    def test_nearest_first(self):
        siblings = [SiblingText("label", "Near"), SiblingText("label", "Far")]
        assert sibling_label(siblings) == "Near"


class TestSignature:
    """Test signature assembly."""

    def test_label_before_attributes(self):
        snapshot = FieldSnapshot(
            tag_name="input",
            label_for_text="Work Email",
            attributes={"id": "e1", "name": "personal_email"},
        )
        assert build_signature(snapshot) == "work email personal_email e1"

    def test_attribute_order(self):
        snapshot = FieldSnapshot(
            tag_name="input",
            attributes={
                "data-qa": "qa",
                "autocomplete": "tel",
                "placeholder": "Your  Phone",
                "name": "phone",
            },
        )
        assert attribute_hints(snapshot) == ["phone", "Your  Phone", "tel", "qa"]
        assert build_signature(snapshot) == "phone your phone tel qa"

    def test_empty(self):
        assert build_signature(FieldSnapshot(tag_name="input")) == ""
