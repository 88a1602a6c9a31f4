"""
Main Application Entry Point
Binding inspector that shows what the application resolved from VCAP_SERVICES
"""
import logging
import streamlit as st
from config import AzureConfig
from ui_handler import UIHandler
from utils.todo_repository import TodoRepository


logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)


def initialize_services():
    """
    Initialize configuration and UI.

    Returns:
        tuple: (config, ui_handler)
    """
    ui_handler = UIHandler()
    try:
        config = AzureConfig()
        return config, ui_handler
    except Exception as e:
        st.error(f"Failed to initialize services: {e}")
        st.stop()


def check_redis(config, ui_handler):
    """Ping the bound Redis cache."""
    if not config.has_redis():
        ui_handler.show_warning("Redis Cache not configured.")
        return
    try:
        config.get_redis_client().ping()
        ui_handler.show_success("Redis Cache reachable.")
    except Exception as e:
        logger.warning("Redis check failed: %s", e)
        ui_handler.show_error(f"Redis Cache check failed: {e}")


def check_documentdb(config, ui_handler):
    """List todo items from the bound DocumentDB account."""
    if not config.has_documentdb():
        ui_handler.show_warning("DocumentDB not configured.")
        return
    try:
        repository = TodoRepository(config.get_document_client(), config.get_database_id())
        items = repository.list_items()
        ui_handler.show_success(f"DocumentDB reachable, {len(items)} todo item(s).")
    except Exception as e:
        logger.warning("DocumentDB check failed: %s", e)
        ui_handler.show_error(f"DocumentDB check failed: {e}")


def main():
    """Main application function."""
    config, ui_handler = initialize_services()

    selected_brokers = ui_handler.render_broker_filter(config.catalog.broker_names())

    ui_handler.display_catalog(config.catalog, selected_brokers)
    ui_handler.display_diagnostics(config.catalog)

    ui_handler.display_configuration("Redis Cache", config.redis)
    ui_handler.display_configuration("DocumentDB", config.documentdb)

    if ui_handler.render_check_connections_button():
        check_redis(config, ui_handler)
        check_documentdb(config, ui_handler)


if __name__ == "__main__":
    main()
