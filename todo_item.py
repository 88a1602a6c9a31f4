"""
Todo Item Model
Document record stored in the DocumentDB todo collection
"""
import uuid
from dataclasses import asdict, dataclass


@dataclass
class TodoItem:
    """A todo entry as stored in DocumentDB."""
    name: str
    category: str = None
    complete: bool = False
    id: str = None

    def __post_init__(self):
        if not self.id:
            self.id = str(uuid.uuid4())

    def to_document(self):
        """Return the item as a DocumentDB document."""
        return asdict(self)

    @classmethod
    def from_document(cls, document):
        """
        Build an item from a DocumentDB document.

        System properties such as _rid and _etag are ignored.

        Args:
            document (dict): Stored document

        Returns:
            TodoItem: Parsed item
        """
        return cls(
            name=document.get("name"),
            category=document.get("category"),
            complete=bool(document.get("complete", False)),
            id=document.get("id"),
        )
