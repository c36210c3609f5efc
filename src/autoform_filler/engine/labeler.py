"""
Semantic Labeler - Turns a form control into a normalized text signature.

The signature is the resolved label text followed by the attribute hints
(name, id, placeholder, aria-label, autocomplete, test ids), lowercased
with whitespace collapsed. Label text comes first so that what the user
sees outranks what the developer named the field.

Label resolution order (first non-empty wins):
1. <label for="id">
2. Ancestor <label> wrapping the control
3. Up to 3 preceding siblings: a <label>, else the first with visible text
4. aria-labelledby targets
"""

import re
from typing import List, Optional

from autoform_filler.interfaces.browser import FieldSnapshot, HINT_ATTRIBUTES, SiblingText

_WHITESPACE = re.compile(r"\s+")

MAX_SIBLINGS = 3


def normalize_text(text: Optional[str]) -> str:
    """Lowercase, collapse whitespace, trim."""
    if not text:
        return ""
    return _WHITESPACE.sub(" ", text).strip().lower()


def sibling_label(siblings: List[SiblingText]) -> str:
    """
    Label text from preceding siblings, nearest first.

    Stops at the first sibling that is a <label> or has visible text.
    """
    for sibling in siblings[:MAX_SIBLINGS]:
        text = sibling.text.strip()
        if sibling.tag_name == "label" or text:
            return text
    return ""


def resolve_label(snapshot: FieldSnapshot) -> str:
    """Resolved label text for a control, empty when nothing matched."""
    candidates = (
        snapshot.label_for_text if snapshot.attributes.get("id") else "",
        snapshot.wrapping_label_text,
        sibling_label(snapshot.preceding_siblings),
        snapshot.labelledby_text,
    )
    for text in candidates:
        if text and text.strip():
            return text.strip()
    return ""


def attribute_hints(snapshot: FieldSnapshot) -> List[str]:
    """Non-empty hint attribute values in signature order."""
    return [snapshot.attributes[name] for name in HINT_ATTRIBUTES if snapshot.attributes.get(name)]


def build_signature(snapshot: FieldSnapshot) -> str:
    """
    Build the normalized signature of a control.

    Example:
        >>> snap = FieldSnapshot(tag_name="input", label_for_text="Work Email",
        ...                      attributes={"id": "e1", "name": "personal_email"})
        >>> build_signature(snap)
        'work email personal_email e1'
    """
    parts = [resolve_label(snapshot), *attribute_hints(snapshot)]
    return normalize_text(" ".join(part for part in parts if part))
