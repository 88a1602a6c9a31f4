"""
Streamlit UI Components
Handles the binding inspector's interface elements
"""
import streamlit as st
from utils.table_utils import (
    catalog_to_dataframe,
    configuration_to_dataframe,
    diagnostics_to_dataframe
)


class UIHandler:
    """
    Manages all Streamlit UI components for the binding inspector.
    """

    def __init__(self):
        """Initialize UI handler."""
        self.setup_page_config()

    def setup_page_config(self):
        """Configure Streamlit page settings."""
        st.set_page_config(page_title="Azure Service Bindings", layout="wide")
        st.title("Azure Service Bindings")

    def render_broker_filter(self, broker_names):
        """
        Render broker name filter.

        Args:
            broker_names (list): Broker names present in the catalog

        Returns:
            list: Selected broker names
        """
        if not broker_names:
            st.sidebar.info("No azure- bindings found in VCAP_SERVICES")
            return []
        return st.sidebar.multiselect("Brokers:", broker_names, default=broker_names)

    def render_check_connections_button(self):
        """
        Render connection check button.

        Returns:
            bool: True if button was clicked
        """
        return st.sidebar.button("Check Connections")

    def display_catalog(self, catalog, selected_brokers):
        """
        Display bindings for the selected brokers.

        Args:
            catalog (BindingCatalog): Parsed bindings
            selected_brokers (list): Broker names to show
        """
        df = catalog_to_dataframe(catalog)
        df = df[df['Broker'].isin(selected_brokers)]
        if df.empty:
            st.info("No service bindings to show.")
            return False
        st.subheader("Service Bindings")
        st.dataframe(df, use_container_width=True)
        return True

    def display_diagnostics(self, catalog):
        """Display parse problems, if any."""
        if not catalog.diagnostics:
            return False
        st.subheader("Parse Problems")
        st.warning(f"{len(catalog.diagnostics)} problem(s) found while reading VCAP_SERVICES")
        st.dataframe(diagnostics_to_dataframe(catalog), use_container_width=True)
        return True

    def display_configuration(self, title, configuration):
        """
        Display a service configuration with secrets masked.

        Args:
            title (str): Section title
            configuration (ServiceConfiguration): Populated configuration
        """
        with st.expander(f"{title} ({configuration.service_broker_name})", expanded=True):
            st.dataframe(configuration_to_dataframe(configuration), use_container_width=True)
            missing = configuration.missing_fields()
            if missing:
                st.info(f"Not configured: {', '.join(missing)}")

    def show_success(self, message):
        st.success(message)

    def show_error(self, message):
        """
        Show error message to user.

        Args:
            message (str): Error message to display
        """
        st.error(message)

    def show_warning(self, message):
        """
        Show warning message to user.

        Args:
            message (str): Warning message to display
        """
        st.warning(message)
