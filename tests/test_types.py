import pytest

from scripture.exceptions import InvalidResponseShape
from scripture.types import (
    Scripture,
    date_key,
    is_month_key,
    month_key,
    normalize_reference,
    parse_scripture,
)
from tests.conftest import versions_for


def test_keys_are_zero_padded():
    from datetime import date
    assert month_key(2025, 3) == "2025-03"
    assert date_key(date(2025, 3, 1)) == "2025-03-01"


@pytest.mark.parametrize("value,expected", [
    ("2025-03", True),
    ("2025-12", True),
    ("2025-13", False),
    ("2025-3", False),
    ("", False),
    ("march", False),
])
def test_is_month_key(value, expected):
    assert is_month_key(value) is expected


def test_normalize_reference_ignores_case_and_spacing():
    assert normalize_reference("  John   3:16 ") == normalize_reference("john 3:16")


def test_parse_scripture_full_payload():
    payload = {
        "reference": " John 3:16 ",
        "versions": versions_for("John 3:16"),
        "expandedReference": "John 3:14-18",
        "expandedVersions": versions_for("John 3:14-18"),
    }
    scripture = parse_scripture(payload)
    assert scripture.reference == "John 3:16"
    assert set(scripture.versions) == {"KJV", "NKJV", "NIV", "MSG", "NLT", "AMP"}
    assert scripture.has_expanded
    assert scripture.expanded_reference == "John 3:14-18"


def test_parse_scripture_drops_unknown_codes():
    versions = versions_for("Psalm 23:1")
    versions["ESV"] = "extra"
    scripture = parse_scripture({"reference": "Psalm 23:1", "versions": versions})
    assert "ESV" not in scripture.versions


def test_parse_scripture_drops_incomplete_expanded_context():
    expanded = versions_for("Psalm 23:1-4")
    del expanded["AMP"]
    scripture = parse_scripture({
        "reference": "Psalm 23:1",
        "versions": versions_for("Psalm 23:1"),
        "expandedReference": "Psalm 23:1-4",
        "expandedVersions": expanded,
    })
    assert scripture.expanded_reference is None
    assert scripture.expanded_versions is None
    assert "expandedReference" not in scripture.to_dict()


@pytest.mark.parametrize("payload", [
    [],
    "John 3:16",
    {"versions": versions_for("John 3:16")},
    {"reference": "   ", "versions": versions_for("John 3:16")},
    {"reference": "John 3:16"},
    {"reference": "John 3:16", "versions": {"KJV": "For God so loved"}},
    {"reference": "John 3:16", "versions": {**versions_for("John 3:16"), "MSG": ""}},
])
def test_parse_scripture_rejects_bad_shapes(payload):
    with pytest.raises(InvalidResponseShape):
        parse_scripture(payload)


def test_to_dict_uses_wire_keys():
    scripture = Scripture(
        reference="John 3:16",
        versions={"KJV": "For God so loved the world"},
        expanded_reference="John 3:14-18",
        expanded_versions={"KJV": "And as Moses lifted up the serpent"},
    )
    data = scripture.to_dict()
    assert data == {
        "reference": "John 3:16",
        "versions": {"KJV": "For God so loved the world"},
        "expandedReference": "John 3:14-18",
        "expandedVersions": {"KJV": "And as Moses lifted up the serpent"},
    }
    assert Scripture.from_dict(data) == scripture


def test_parse_scripture_rejects_overlong_reference():
    reference = "John 3:16 " + "and more " * 20
    with pytest.raises(InvalidResponseShape):
        parse_scripture({"reference": reference, "versions": versions_for("John 3:16")})


def test_parse_scripture_drops_overlong_expanded_reference():
    expanded = "John 3:1-36 " * 15
    scripture = parse_scripture({
        "reference": "John 3:16",
        "versions": versions_for("John 3:16"),
        "expandedReference": expanded,
        "expandedVersions": versions_for("John 3:1-36"),
    })
    assert scripture.reference == "John 3:16"
    assert not scripture.has_expanded


def test_from_dict_of_foreign_shape_is_incomplete():
    legacy = {"title": "The Eagles Ark", "passages": ["Psalm 91:1"], "reflection": "Rest in Him."}
    scripture = Scripture.from_dict(legacy)
    assert scripture.reference == ""
    assert not scripture.is_complete()
    assert Scripture.from_dict({"reference": "John 3:16", "versions": versions_for("John 3:16")}).is_complete()
