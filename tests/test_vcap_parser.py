import json
import logging

import pytest

from vcap_parser import (
    BindingCatalog,
    BindingRecord,
    FIELD_TABLE,
    coerce_credential,
    parse,
    parse_environment,
)


@pytest.mark.parametrize("raw", [None, "", "   "])
def test_absent_or_empty_input_gives_empty_catalog(raw, caplog) -> None:
    with caplog.at_level(logging.WARNING):
        catalog = parse(raw)
    assert len(catalog) == 0
    assert catalog.diagnostics == ()
    assert caplog.records == []


def test_non_azure_brokers_are_ignored() -> None:
    raw = json.dumps({
        "p-mysql": [{"name": "db", "tags": [], "volume_mounts": [], "credentials": {}}],
        "user-provided": [{"name": "ups", "credentials": {"uri": "x"}}],
    })
    catalog = parse(raw)
    assert list(catalog) == []
    assert catalog.diagnostics == ()


def test_parses_redis_binding(redis_service) -> None:
    catalog = parse(json.dumps({"azure-rediscache": [redis_service]}))

    assert len(catalog) == 1
    record = catalog[0]
    assert record.service_broker_name == "azure-rediscache"
    assert record.service_instance_name == "myredis"
    assert record.label == "azure-rediscache"
    assert record.service_plan == "basic"
    assert record.provider is None
    assert record.syslog_drain_url is None
    assert record.tags == ()
    assert record.volume_mounts == ()
    assert dict(record.credentials) == {
        "hostname": "foo.redis.cache.windows.net",
        "sslPort": "6380",
        "primaryKey": "ABC123",
    }
    assert catalog.diagnostics == ()


def test_keeps_key_then_array_order() -> None:
    def service(name):
        return {"name": name, "tags": [], "volume_mounts": [], "credentials": {}}

    raw = json.dumps({
        "azure-storage": [service("s1"), service("s2")],
        "other": [service("ignored")],
        "azure-rediscache": [service("r1")],
    })
    catalog = parse(raw)
    assert [r.service_instance_name for r in catalog] == ["s1", "s2", "r1"]
    assert catalog.broker_names() == ["azure-storage", "azure-rediscache"]
    assert [r.service_instance_name for r in catalog.find("azure-storage")] == ["s1", "s2"]


def test_parsing_twice_gives_equal_catalogs(vcap_services) -> None:
    assert parse(vcap_services) == parse(vcap_services)


@pytest.mark.parametrize("raw", ["{not json", "[1, 2]", '"text"'])
def test_malformed_document_gives_empty_catalog_with_diagnostic(raw, caplog) -> None:
    with caplog.at_level(logging.WARNING):
        catalog = parse(raw)
    assert len(catalog) == 0
    assert len(catalog.diagnostics) == 1
    assert catalog.diagnostics[0].field == "<document>"
    assert "Error parsing VCAP_SERVICES" in caplog.text


def test_bad_credential_value_does_not_stop_sibling_fields(redis_service) -> None:
    redis_service["tags"] = ["cache"]
    redis_service["credentials"]["bad"] = ["nested", "array"]
    catalog = parse(json.dumps({"azure-rediscache": [redis_service]}))

    record = catalog[0]
    assert record.label == "azure-rediscache"
    assert record.tags == ("cache",)
    assert "bad" not in record.credentials
    assert record.credentials["hostname"] == "foo.redis.cache.windows.net"
    assert [(d.field, d.broker, d.index) for d in catalog.diagnostics] == [
        ("credentials.bad", "azure-rediscache", 0),
    ]


def test_numeric_and_boolean_credentials_are_coerced(redis_service) -> None:
    redis_service["credentials"]["sslPort"] = 6380
    redis_service["credentials"]["ssl"] = True
    redis_service["credentials"]["missing"] = None
    record = parse(json.dumps({"azure-rediscache": [redis_service]}))[0]
    assert record.credentials["sslPort"] == "6380"
    assert record.credentials["ssl"] == "true"
    assert "missing" not in record.credentials


def test_missing_required_arrays_are_reported(redis_service) -> None:
    del redis_service["tags"]
    del redis_service["volume_mounts"]
    catalog = parse(json.dumps({"azure-rediscache": [redis_service]}))

    record = catalog[0]
    assert record.tags == ()
    assert record.volume_mounts == ()
    assert record.service_instance_name == "myredis"
    assert len(record.credentials) == 3
    assert sorted(d.field for d in catalog.diagnostics) == ["tags", "volume_mounts"]


def test_missing_credentials_gives_empty_mapping(redis_service) -> None:
    del redis_service["credentials"]
    catalog = parse(json.dumps({"azure-rediscache": [redis_service]}))
    assert dict(catalog[0].credentials) == {}
    assert catalog.diagnostics[0].field == "credentials"


def test_non_string_items_are_skipped(redis_service) -> None:
    redis_service["tags"] = ["a", 1, "b"]
    redis_service["label"] = 42
    catalog = parse(json.dumps({"azure-rediscache": [redis_service]}))
    assert catalog[0].tags == ("a", "b")
    assert catalog[0].label is None
    assert sorted(d.field for d in catalog.diagnostics) == ["label", "tags[1]"]


def test_bad_entries_are_skipped_and_rest_parsed(redis_service) -> None:
    raw = json.dumps({
        "azure-storage": "not-an-array",
        "azure-rediscache": ["not-an-object", redis_service],
    })
    catalog = parse(raw)
    assert [r.service_instance_name for r in catalog] == ["myredis"]
    assert [(d.broker, d.index, d.field) for d in catalog.diagnostics] == [
        ("azure-storage", None, "<broker>"),
        ("azure-rediscache", 0, "<entry>"),
    ]
    assert str(catalog.diagnostics[1]).startswith("azure-rediscache[0].<entry>")


def test_records_are_immutable(redis_service) -> None:
    record = parse(json.dumps({"azure-rediscache": [redis_service]}))[0]
    with pytest.raises(AttributeError):
        record.label = "changed"
    with pytest.raises(TypeError):
        record.credentials["hostname"] = "changed"


def test_record_equality_ignores_credential_order() -> None:
    first = BindingRecord("azure-x", credentials={"a": "1", "b": "2"})
    second = BindingRecord("azure-x", credentials={"b": "2", "a": "1"})
    assert first == second
    assert hash(first) == hash(second)
    assert BindingCatalog([first]) == BindingCatalog([second])


def test_field_table_covers_every_record_attribute() -> None:
    attributes = {spec.attribute for spec in FIELD_TABLE}
    assert attributes == {
        "label", "provider", "service_instance_name", "service_plan",
        "syslog_drain_url", "tags", "volume_mounts", "credentials",
    }


def test_coerce_credential() -> None:
    assert coerce_credential("x") == "x"
    assert coerce_credential(1.5) == "1.5"
    assert coerce_credential(False) == "false"
    assert coerce_credential({"a": 1}) is None


def test_parse_environment_reads_vcap_services(vcap_services) -> None:
    catalog = parse_environment({"VCAP_SERVICES": vcap_services})
    assert catalog.broker_names() == ["azure-rediscache", "azure-documentdb"]
    assert len(parse_environment({})) == 0


def test_parse_environment_defaults_to_os_environ(monkeypatch, vcap_services) -> None:
    monkeypatch.setenv("VCAP_SERVICES", vcap_services)
    assert len(parse_environment()) == 2


def test_too_deep_document_gives_empty_catalog() -> None:
    catalog = parse("[" * 100000)
    assert len(catalog) == 0
    assert [d.field for d in catalog.diagnostics] == ["<document>"]


def test_too_deep_credential_gives_empty_catalog() -> None:
    raw = (
        '{"azure-x": [{"tags": [], "volume_mounts": [], "credentials": {"k": '
        + "[" * 100000 + "]" * 100000
        + '}}]}'
    )
    catalog = parse(raw)
    assert len(catalog) == 0
    assert [d.field for d in catalog.diagnostics] == ["<document>"]


def test_nested_credential_is_skipped_and_siblings_kept(redis_service) -> None:
    redis_service["credentials"]["nested"] = json.loads("[" * 50 + "]" * 50)
    redis_service["tags"] = ["cache"]
    catalog = parse(json.dumps({"azure-rediscache": [redis_service]}))
    record = catalog[0]
    assert record.tags == ("cache",)
    assert record.credentials["primaryKey"] == "ABC123"
    assert [d.field for d in catalog.diagnostics] == ["credentials.nested"]


def test_invalid_json_log_does_not_include_document_head(caplog) -> None:
    raw = '{"azure-rediscache": [{"credentials": {"primaryKey": "SECRETVALUE123"}}], oops}'
    with caplog.at_level(logging.WARNING):
        catalog = parse(raw)
    assert len(catalog.diagnostics) == 1
    assert "SECRETVALUE123" not in caplog.text
    assert "oops" in caplog.text


def test_non_array_tags_gives_empty_tuple(redis_service) -> None:
    redis_service["tags"] = "x"
    catalog = parse(json.dumps({"azure-rediscache": [redis_service]}))
    assert catalog[0].tags == ()
    assert catalog[0].service_instance_name == "myredis"
    assert [d.field for d in catalog.diagnostics] == ["tags"]


def test_non_string_volume_mounts_are_skipped(redis_service) -> None:
    redis_service["volume_mounts"] = [{"path": "/data"}, "/mnt"]
    catalog = parse(json.dumps({"azure-rediscache": [redis_service]}))
    assert catalog[0].volume_mounts == ("/mnt",)
    assert [d.field for d in catalog.diagnostics] == ["volume_mounts[0]"]


def test_null_credentials_gives_empty_mapping(redis_service) -> None:
    redis_service["credentials"] = None
    catalog = parse(json.dumps({"azure-rediscache": [redis_service]}))
    assert dict(catalog[0].credentials) == {}
    assert catalog[0].label == "azure-rediscache"
    assert [d.field for d in catalog.diagnostics] == ["credentials"]
