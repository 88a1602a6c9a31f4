"""
VCAP_SERVICES Parser
Turns the platform service-binding document into immutable binding records
"""
import json
import logging
import os
from dataclasses import dataclass, field
from types import MappingProxyType


logger = logging.getLogger(__name__)

VCAP_SERVICES = "VCAP_SERVICES"
AZURE_PREFIX = "azure-"

STRING = "string"
STRING_LIST = "string_list"
STRING_MAP = "string_map"


@dataclass(frozen=True)
class FieldSpec:
    """One row of the extraction table: where a record attribute comes from."""
    attribute: str
    json_key: str
    kind: str
    required: bool = False


FIELD_TABLE = (
    FieldSpec("label", "label", STRING),
    FieldSpec("provider", "provider", STRING),
    FieldSpec("service_instance_name", "name", STRING),
    FieldSpec("service_plan", "plan", STRING),
    FieldSpec("syslog_drain_url", "syslog_drain_url", STRING),
    FieldSpec("tags", "tags", STRING_LIST, required=True),
    FieldSpec("volume_mounts", "volume_mounts", STRING_LIST, required=True),
    FieldSpec("credentials", "credentials", STRING_MAP, required=True),
)


@dataclass(frozen=True)
class ParseDiagnostic:
    """A recovered problem found while parsing the binding document."""
    field: str
    problem: str
    broker: str = None
    index: int = None

    def __str__(self):
        where = self.broker or "<document>"
        if self.index is not None:
            where = f"{where}[{self.index}]"
        return f"{where}.{self.field}: {self.problem}"


@dataclass(frozen=True, eq=False)
class BindingRecord:
    """A single bound service instance found under an azure- broker name."""
    service_broker_name: str
    label: str = None
    provider: str = None
    service_instance_name: str = None
    service_plan: str = None
    syslog_drain_url: str = None
    tags: tuple = ()
    volume_mounts: tuple = ()
    credentials: MappingProxyType = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self):
        object.__setattr__(self, "tags", tuple(self.tags))
        object.__setattr__(self, "volume_mounts", tuple(self.volume_mounts))
        object.__setattr__(self, "credentials", MappingProxyType(dict(self.credentials)))

    def __eq__(self, other):
        if not isinstance(other, BindingRecord):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self):
        return hash(self._key())

    def _key(self):
        # MappingProxyType is not hashable
        return (
            self.service_broker_name,
            self.label,
            self.provider,
            self.service_instance_name,
            self.service_plan,
            self.syslog_drain_url,
            self.tags,
            self.volume_mounts,
            tuple(sorted(self.credentials.items())),
        )


@dataclass(frozen=True)
class BindingCatalog:
    """
    Ordered, immutable result of one parse.

    Records keep broker key order, then array order. Diagnostics list every
    anomaly the parser recovered from while building the records.
    """
    records: tuple = ()
    diagnostics: tuple = ()

    def __post_init__(self):
        object.__setattr__(self, "records", tuple(self.records))
        object.__setattr__(self, "diagnostics", tuple(self.diagnostics))

    def __iter__(self):
        return iter(self.records)

    def __len__(self):
        return len(self.records)

    def __getitem__(self, index):
        return self.records[index]

    def find(self, broker_name):
        """
        Return the records bound under a broker name.

        Args:
            broker_name (str): Exact broker name, e.g. "azure-rediscache"

        Returns:
            list: Matching records in catalog order
        """
        return [record for record in self.records if record.service_broker_name == broker_name]

    def broker_names(self):
        """Distinct broker names in first-seen order."""
        return list(dict.fromkeys(record.service_broker_name for record in self.records))


class _EntryParser:
    """Collects diagnostics for one broker array entry."""

    def __init__(self, broker, index, diagnostics):
        self.broker = broker
        self.index = index
        self.diagnostics = diagnostics

    def report(self, field_name, problem):
        diagnostic = ParseDiagnostic(field_name, problem, self.broker, self.index)
        logger.warning("Error parsing %s: %s", VCAP_SERVICES, diagnostic)
        self.diagnostics.append(diagnostic)

    def parse(self, service):
        values = {}
        for spec in FIELD_TABLE:
            present = spec.json_key in service and service[spec.json_key] is not None
            if not present:
                if spec.required:
                    self.report(spec.json_key, "missing required field")
                continue
            extract = getattr(self, f"_extract_{spec.kind}")
            value = extract(spec.json_key, service[spec.json_key])
            if value is not None:
                values[spec.attribute] = value
        return BindingRecord(service_broker_name=self.broker, **values)

    def _extract_string(self, key, value):
        if isinstance(value, str):
            return value
        self.report(key, f"expected a string, got {_fragment(value)}")
        return None

    def _extract_string_list(self, key, value):
        if not isinstance(value, list):
            self.report(key, f"expected an array of strings, got {_fragment(value)}")
            return None
        strings = []
        for position, item in enumerate(value):
            if isinstance(item, str):
                strings.append(item)
            else:
                self.report(f"{key}[{position}]", f"expected a string, got {_fragment(item)}")
        return tuple(strings)

    def _extract_string_map(self, key, value):
        if not isinstance(value, dict):
            self.report(key, f"expected an object, got {_fragment(value)}")
            return None
        result = {}
        for name, item in value.items():
            text = coerce_credential(item)
            if text is None:
                self.report(f"{key}.{name}", f"cannot use {_fragment(item)} as a string value")
                continue
            result[name] = text
        return result


def coerce_credential(value):
    """
    Convert a JSON credential value to text.

    Strings pass through; numbers and booleans become their JSON text.

    Args:
        value: Decoded JSON value

    Returns:
        str: Text value, or None when the value has no scalar text form
    """
    if isinstance(value, str):
        return value
    if isinstance(value, (bool, int, float)):
        return json.dumps(value)
    return None


def _fragment(value, limit=80):
    try:
        text = json.dumps(value)
    except (ValueError, RecursionError):
        return f"<{type(value).__name__}>"
    if len(text) > limit:
        text = text[:limit - 3] + "..."
    return text


def _excerpt(raw, pos, width=10):
    # only a few characters either side, the document carries secrets
    if pos is None:
        return ""
    return raw[max(pos - width, 0):pos + width]


def parse(raw):
    """
    Parse a VCAP_SERVICES document into a binding catalog.

    Only top-level keys starting with "azure-" are read. Problems are logged
    and recorded as diagnostics; this function never raises.

    Args:
        raw (str): Raw VCAP_SERVICES value, or None when unset

    Returns:
        BindingCatalog: Records and diagnostics
    """
    if raw is None or not raw.strip():
        return BindingCatalog()

    diagnostics = []
    try:
        document = json.loads(raw)
    except (ValueError, RecursionError) as e:
        diagnostics.append(ParseDiagnostic("<document>", f"invalid JSON: {e}"))
        logger.warning("Error parsing %s near %r: %s", VCAP_SERVICES, _excerpt(raw, getattr(e, "pos", None)), e)
        return BindingCatalog((), diagnostics)

    if not isinstance(document, dict):
        diagnostics.append(ParseDiagnostic("<document>", f"expected an object, got {_fragment(document)}"))
        logger.warning("Error parsing %s: top-level value is not an object", VCAP_SERVICES)
        return BindingCatalog((), diagnostics)

    records = []
    for broker, instances in document.items():
        if not broker.startswith(AZURE_PREFIX):
            continue
        if not isinstance(instances, list):
            diagnostic = ParseDiagnostic("<broker>", f"expected an array, got {_fragment(instances)}", broker)
            logger.warning("Error parsing %s: %s", VCAP_SERVICES, diagnostic)
            diagnostics.append(diagnostic)
            continue
        for index, service in enumerate(instances):
            entry = _EntryParser(broker, index, diagnostics)
            if not isinstance(service, dict):
                entry.report("<entry>", f"expected an object, got {_fragment(service)}")
                continue
            records.append(entry.parse(service))

    logger.debug("Parsed %d azure service binding(s) from %s", len(records), VCAP_SERVICES)
    return BindingCatalog(records, diagnostics)


def read_vcap_services(environ=None):
    """Return the raw VCAP_SERVICES value from environ (default os.environ)."""
    if environ is None:
        environ = os.environ
    return environ.get(VCAP_SERVICES)


def parse_environment(environ=None):
    """Read and parse VCAP_SERVICES from the environment."""
    return parse(read_vcap_services(environ))
