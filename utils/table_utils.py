"""
Binding Table Utilities
Converts parsed bindings and configurations into DataFrames for display
"""
import pandas as pd
from utils.credential_utils import display_value


CATALOG_COLUMNS = ['Broker', 'Instance', 'Label', 'Plan', 'Provider', 'Tags', 'Credential_Keys']
DIAGNOSTIC_COLUMNS = ['Broker', 'Index', 'Field', 'Problem']
CONFIGURATION_COLUMNS = ['Field', 'Value', 'Configured']


def catalog_to_dataframe(catalog):
    """
    Create one row per binding record.

    Credential values are never included, only their key names.

    Args:
        catalog (BindingCatalog): Parsed bindings

    Returns:
        pandas.DataFrame: Binding overview
    """
    rows = []
    for record in catalog:
        rows.append({
            'Broker': record.service_broker_name,
            'Instance': record.service_instance_name or "",
            'Label': record.label or "",
            'Plan': record.service_plan or "",
            'Provider': record.provider or "",
            'Tags': ", ".join(record.tags),
            'Credential_Keys': ", ".join(sorted(record.credentials)),
        })
    return pd.DataFrame(rows, columns=CATALOG_COLUMNS)


def diagnostics_to_dataframe(catalog):
    """Create one row per parse diagnostic."""
    rows = [
        {
            'Broker': diagnostic.broker or "",
            'Index': "" if diagnostic.index is None else diagnostic.index,
            'Field': diagnostic.field,
            'Problem': diagnostic.problem,
        }
        for diagnostic in catalog.diagnostics
    ]
    return pd.DataFrame(rows, columns=DIAGNOSTIC_COLUMNS)


def configuration_to_dataframe(configuration):
    """
    Create one row per configuration field with secrets masked.

    Args:
        configuration (ServiceConfiguration): Populated configuration

    Returns:
        pandas.DataFrame: Field overview
    """
    rows = []
    for name, value in configuration.values.items():
        rows.append({
            'Field': name,
            'Value': display_value(name, value),
            'Configured': "Yes" if configuration.is_configured(name) else "No",
        })
    return pd.DataFrame(rows, columns=CONFIGURATION_COLUMNS)
