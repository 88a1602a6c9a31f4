"""
Service Property Populator
Copies credentials from a parsed binding into a per-service configuration
"""
import logging
from dataclasses import dataclass
from types import MappingProxyType


logger = logging.getLogger(__name__)

SENTINEL = "TBD"

AZURE_REDISCACHE = "azure-rediscache"
AZURE_DOCUMENTDB = "azure-documentdb"

# configuration field -> credential key
REDIS_FIELD_MAP = MappingProxyType({
    "hostname": "hostname",
    "ssl_port": "sslPort",
    "primary_key": "primaryKey",
})

DOCUMENTDB_FIELD_MAP = MappingProxyType({
    "host_endpoint": "documentdb_host_endpoint",
    "master_key": "documentdb_master_key",
    "database_id": "documentdb_database_id",
})


@dataclass(frozen=True, eq=False)
class ServiceConfiguration:
    """
    Flat, read-only configuration for one bound service.

    Every field holds either a value copied from the binding or the "TBD"
    sentinel, which means the field was never configured.
    """
    service_broker_name: str
    values: MappingProxyType

    def __post_init__(self):
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    def __getitem__(self, name):
        return self.values[name]

    def __contains__(self, name):
        return name in self.values

    def __eq__(self, other):
        if not isinstance(other, ServiceConfiguration):
            return NotImplemented
        return (self.service_broker_name, dict(self.values)) == (other.service_broker_name, dict(other.values))

    def __hash__(self):
        return hash((self.service_broker_name, tuple(sorted(self.values.items()))))

    def __repr__(self):
        return f"ServiceConfiguration({self.service_broker_name!r}, fields={sorted(self.values)!r})"

    def get(self, name, default=None):
        """Return a field value, or default when the field is unknown."""
        return self.values.get(name, default)

    def is_configured(self, name):
        """Check if a field holds a real value rather than the sentinel."""
        value = self.values.get(name, SENTINEL)
        return value is not None and value != SENTINEL

    def missing_fields(self):
        """Return the names of fields still at the sentinel."""
        return [name for name in self.values if not self.is_configured(name)]

    def is_complete(self):
        """Check if every field holds a real value."""
        return not self.missing_fields()

    def as_dict(self):
        """Return the fields as a plain dict."""
        return dict(self.values)


def populate(catalog, target_broker_name, field_map, defaults=None):
    """
    Build a service configuration from the first matching binding.

    Fields whose credential key is absent keep their default, which is the
    "TBD" sentinel unless the caller supplies another value in defaults.
    A catalog without a matching binding is not an error.

    Args:
        catalog (BindingCatalog): Parsed bindings
        target_broker_name (str): Broker name to match, e.g. "azure-rediscache"
        field_map (dict): Configuration field name -> credential key
        defaults (dict): Optional per-field fallbacks replacing the sentinel

    Returns:
        ServiceConfiguration: Populated configuration
    """
    defaults = defaults or {}
    values = {}
    for name in field_map:
        fallback = defaults.get(name)
        values[name] = fallback if fallback else SENTINEL

    matches = catalog.find(target_broker_name)
    if not matches:
        logger.debug("No %s binding found, keeping defaults", target_broker_name)
        return ServiceConfiguration(target_broker_name, values)

    if len(matches) > 1:
        logger.warning(
            "Found %d %s bindings, using the first (%s)",
            len(matches), target_broker_name, matches[0].service_instance_name,
        )

    record = matches[0]
    logger.debug("Found the %s binding %s", target_broker_name, record.service_instance_name)
    for name, credential_key in field_map.items():
        if credential_key in record.credentials:
            values[name] = record.credentials[credential_key]
        else:
            logger.debug("Binding %s has no %s credential", target_broker_name, credential_key)

    return ServiceConfiguration(target_broker_name, values)


def populate_redis(catalog, defaults=None):
    """Populate hostname, ssl_port and primary_key from the azure-rediscache binding."""
    return populate(catalog, AZURE_REDISCACHE, REDIS_FIELD_MAP, defaults)


def populate_documentdb(catalog, defaults=None):
    """Populate host_endpoint, master_key and database_id from the azure-documentdb binding."""
    return populate(catalog, AZURE_DOCUMENTDB, DOCUMENTDB_FIELD_MAP, defaults)
