"""Tests for the message format catalog."""

import pytest

from ndc_codec.errors import ConfigError
from ndc_codec.protocol.catalog import Catalog
from ndc_codec.protocol.commands import DEFAULT_MESSAGE_FORMAT, Mtid


def test_default_catalog_indexes_terminal_messages():
    """Terminal-originated messages are found by classification key."""
    catalog = Catalog.build()
    assert catalog.by_classification("22").method == "solicitedStatus"
    assert catalog.by_classification("12").method == "unsolicitedStatus"
    assert catalog.by_classification("11").method == "transaction"
    assert catalog.by_classification("23").method == "encryptorIniData"
    assert catalog.by_classification("61").method == "uploadEjData"


def test_lookup_by_method():
    """Every default method is found by name with its mtid."""
    catalog = Catalog.build()
    assert len(catalog) == len(DEFAULT_MESSAGE_FORMAT)
    fmt = catalog.by_method("solicitedStatus")
    assert fmt.mtid is Mtid.RESPONSE
    assert fmt.classification == "22"
    assert catalog.by_method("unsolicitedStatus").mtid is Mtid.UNSOLICITED
    assert "goInService" in catalog


def test_lookup_not_found():
    """Unknown keys and names return None."""
    catalog = Catalog.build()
    assert catalog.by_classification("ZZ") is None
    assert catalog.by_method("noSuchMethod") is None


def test_fields_split_in_order():
    """The field list keeps wire order, FS tokens included."""
    fmt = Catalog.build().by_method("solicitedStatus")
    assert fmt.fields == (
        "messageClass", "messageSubclass", "FS", "luno", "FS", "FS",
        "descriptor", "FS", "status",
    )


def test_override_replaces_per_key():
    """Override keys win; the rest of the default definition remains."""
    catalog = Catalog.build(overrides={
        "goInService": {"values": {"luno": "999"}},
    })
    fmt = catalog.by_method("goInService")
    assert fmt.values["luno"] == "999"
    assert fmt.values["commandCode"] == "1"
    assert fmt.fields[0] == "messageClass"


def test_override_adds_method():
    """New methods are indexed by their classification key."""
    catalog = Catalog.build(overrides={
        "ready": {
            "fields": "messageClass,FS,luno",
            "mtid": "unsolicited",
            "values": {"messageClass": "A"},
        },
    })
    assert catalog.by_classification("A").method == "ready"


def test_duplicate_classification_last_wins():
    """Two methods with one classification key: the later one is indexed."""
    catalog = Catalog.build(
        defaults={
            "first": {"fields": "", "values": {"messageClass": "9"}},
            "second": {"fields": "", "values": {"messageClass": "9"}},
        }
    )
    assert catalog.by_classification("9").method == "second"
    assert catalog.by_method("first") is not None


def test_empty_classification():
    """Formats without class values are indexed under the empty key."""
    catalog = Catalog.build(defaults={"bare": {"fields": "a"}})
    assert catalog.by_classification("").method == "bare"


def test_non_string_class_is_config_error():
    """Classification pieces must be strings."""
    with pytest.raises(ConfigError):
        Catalog.build(overrides={"bad": {"fields": "", "values": {"messageClass": 1}}})


def test_unknown_mtid_is_config_error():
    """Unknown message types are rejected at build time."""
    with pytest.raises(ConfigError):
        Catalog.build(overrides={"bad": {"fields": "", "mtid": "sometimes"}})


def test_non_mapping_definition_is_config_error():
    with pytest.raises(ConfigError):
        Catalog.build(overrides={"bad": "messageClass,FS,luno"})


def test_values_are_read_only():
    """Built formats cannot be modified."""
    fmt = Catalog.build().by_method("goInService")
    with pytest.raises(TypeError):
        fmt.values["commandCode"] = "2"


def test_defaults_not_mutated():
    """Building with overrides leaves the default data untouched."""
    Catalog.build(overrides={"goInService": {"values": {"commandCode": "X"}}})
    assert DEFAULT_MESSAGE_FORMAT["goInService"]["values"]["commandCode"] == "1"
