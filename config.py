"""
Azure Configuration Manager
Resolves bound Azure service credentials and builds their clients
"""
import logging
import os
import redis
from dotenv import load_dotenv
from azure.cosmos import CosmosClient
from vcap_parser import parse, read_vcap_services
from service_properties import populate_documentdb, populate_redis


logger = logging.getLogger(__name__)

# configuration field -> environment variable used when no binding supplies it
REDIS_ENV_DEFAULTS = {
    "hostname": "AZURE_REDIS_HOSTNAME",
    "ssl_port": "AZURE_REDIS_SSL_PORT",
    "primary_key": "AZURE_REDIS_PRIMARY_KEY",
}

DOCUMENTDB_ENV_DEFAULTS = {
    "host_endpoint": "AZURE_DOCUMENTDB_HOST_ENDPOINT",
    "master_key": "AZURE_DOCUMENTDB_MASTER_KEY",
    "database_id": "AZURE_DOCUMENTDB_DATABASE_ID",
}


def _env_defaults(names, environ):
    return {field: environ.get(var) for field, var in names.items() if environ.get(var)}


class AzureConfig:
    """
    Loads the VCAP_SERVICES binding once and manages Azure service configuration.
    Provides clients for Redis Cache and DocumentDB.
    """

    def __init__(self, environ=None, use_dotenv=True):
        """
        Initialize Azure configuration from environment variables.

        Args:
            environ (dict): Environment to read, defaults to os.environ
            use_dotenv (bool): Load a local .env file into os.environ first
        """
        if use_dotenv:
            load_dotenv()
        if environ is None:
            environ = os.environ

        self.catalog = parse(read_vcap_services(environ))
        if self.catalog.diagnostics:
            logger.warning("VCAP_SERVICES parsed with %d problem(s)", len(self.catalog.diagnostics))

        self.redis = populate_redis(self.catalog, _env_defaults(REDIS_ENV_DEFAULTS, environ))
        self.documentdb = populate_documentdb(self.catalog, _env_defaults(DOCUMENTDB_ENV_DEFAULTS, environ))
        logger.info(
            "Azure services configured: redis=%s documentdb=%s",
            self.has_redis(), self.has_documentdb(),
        )

    def has_redis(self):
        """Check if Redis Cache credentials are configured."""
        return all(self.redis.is_configured(name) for name in ("hostname", "ssl_port", "primary_key"))

    def has_documentdb(self):
        """Check if DocumentDB credentials are configured."""
        return all(self.documentdb.is_configured(name) for name in ("host_endpoint", "master_key"))

    def get_redis_client(self):
        """Create and return a Redis client over TLS if credentials available."""
        if not self.has_redis():
            return None
        try:
            port = int(self.redis["ssl_port"])
        except ValueError:
            raise ValueError(f"Invalid Redis SSL port: {self.redis['ssl_port']!r}")
        try:
            return redis.Redis(
                host=self.redis["hostname"],
                port=port,
                password=self.redis["primary_key"],
                ssl=True,
            )
        except Exception as e:
            raise RuntimeError(f"Failed to create Redis client: {e}")

    def get_document_client(self):
        """Create and return CosmosClient instance if credentials available."""
        if not self.has_documentdb():
            return None
        try:
            return CosmosClient(
                self.documentdb["host_endpoint"],
                credential=self.documentdb["master_key"],
                consistency_level="Session",
            )
        except Exception as e:
            raise RuntimeError(f"Failed to create DocumentDB client: {e}")

    def get_database_id(self, default="todos"):
        """Return the bound database id, or default when the binding has none."""
        if self.documentdb.is_configured("database_id"):
            return self.documentdb["database_id"]
        return default
