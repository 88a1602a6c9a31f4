import json

import pytest


REDIS_SERVICE = {
    "name": "myredis",
    "label": "azure-rediscache",
    "plan": "basic",
    "provider": None,
    "syslog_drain_url": None,
    "tags": [],
    "volume_mounts": [],
    "credentials": {
        "hostname": "foo.redis.cache.windows.net",
        "sslPort": "6380",
        "primaryKey": "ABC123",
    },
}

DOCUMENTDB_SERVICE = {
    "name": "mydocdb",
    "label": "azure-documentdb",
    "plan": "standard",
    "tags": ["Azure", "DocumentDB"],
    "volume_mounts": [],
    "credentials": {
        "documentdb_host_endpoint": "https://mydocdb.documents.azure.com:443/",
        "documentdb_master_key": "bWFzdGVya2V5",
        "documentdb_database_id": "todos",
    },
}


@pytest.fixture
def redis_service():
    return json.loads(json.dumps(REDIS_SERVICE))


@pytest.fixture
def documentdb_service():
    return json.loads(json.dumps(DOCUMENTDB_SERVICE))


@pytest.fixture
def vcap_services(redis_service, documentdb_service):
    return json.dumps({
        "azure-rediscache": [redis_service],
        "azure-documentdb": [documentdb_service],
        "p-mysql": [{"name": "mysql", "tags": [], "volume_mounts": [], "credentials": {}}],
    })
