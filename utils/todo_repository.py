"""
DocumentDB Todo Repository
Handles todo item storage operations
"""
from azure.cosmos import PartitionKey
from azure.core.exceptions import ResourceNotFoundError
from todo_item import TodoItem


class TodoRepository:
    """
    Manages todo items in a DocumentDB container.
    """

    def __init__(self, document_client, database_id, container_name="todoitems"):
        """
        Initialize todo repository.

        Args:
            document_client: Azure CosmosClient instance
            database_id (str): Database name
            container_name (str): Container name
        """
        if document_client is None:
            raise ValueError("DocumentDB client is required")

        self.database_id = database_id
        self.container_name = container_name
        self.database = document_client.create_database_if_not_exists(id=database_id)
        self.container = self.database.create_container_if_not_exists(
            id=container_name,
            partition_key=PartitionKey(path="/id"),
        )

    def list_items(self):
        """
        List all todo items.

        Returns:
            list: TodoItem instances
        """
        try:
            documents = self.container.query_items(
                query="SELECT * FROM c",
                enable_cross_partition_query=True,
            )
            return [TodoItem.from_document(doc) for doc in documents]
        except Exception as e:
            raise RuntimeError(f"Failed to list todo items: {e}")

    def find_by_category(self, category):
        """
        List todo items in one category.

        Args:
            category (str): Category to match

        Returns:
            list: TodoItem instances
        """
        try:
            documents = self.container.query_items(
                query="SELECT * FROM c WHERE c.category = @category",
                parameters=[{"name": "@category", "value": category}],
                enable_cross_partition_query=True,
            )
            return [TodoItem.from_document(doc) for doc in documents]
        except Exception as e:
            raise RuntimeError(f"Failed to query todo items in '{category}': {e}")

    def get_item(self, item_id):
        """
        Read a todo item.

        Args:
            item_id (str): Item id

        Returns:
            TodoItem: The item, or None if it does not exist
        """
        try:
            return TodoItem.from_document(self.container.read_item(item=item_id, partition_key=item_id))
        except ResourceNotFoundError:
            return None
        except Exception as e:
            raise RuntimeError(f"Failed to read todo item '{item_id}': {e}")

    def save_item(self, item):
        """Create or replace a todo item and return the stored version."""
        try:
            return TodoItem.from_document(self.container.upsert_item(item.to_document()))
        except Exception as e:
            raise RuntimeError(f"Failed to save todo item '{item.id}': {e}")

    def delete_item(self, item_id):
        """
        Delete a todo item.

        Returns:
            bool: True if the item existed
        """
        try:
            self.container.delete_item(item=item_id, partition_key=item_id)
            return True
        except ResourceNotFoundError:
            return False
        except Exception as e:
            raise RuntimeError(f"Failed to delete todo item '{item_id}': {e}")
