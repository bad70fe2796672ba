"""
Document serializer / persistence adapter
=========================================

Flattens a Document into a JSON body, derives the record's top-level
fields and hands the record to the record store. The inverse
(from_record / deserialize) hydrates a Document for load-by-id.
Saving never retries; PersistenceError propagates to the caller.
"""
import json
import logging
import uuid

from .errors import BlockValidationError

logger = logging.getLogger(__name__)


class DocumentSerializer:
    """Base serializer. Subclasses set the table, the document class and
    the names used inside the JSON body and the record."""
    table = None
    record_prefix = 'record'
    document_class = None
    blocks_key = 'blocks'
    settings_key = 'settings'
    body_column = 'content'

    # ---- body ---------------------------------------------------------

    def serialize(self, document):
        """In-memory document -> JSON-serializable body"""
        return {
            self.blocks_key: [document.registry.encode(block) for block in document.blocks],
            self.settings_key: document.metadata.model_dump(mode='json'),
        }

    def deserialize(self, body, status='draft', record_id=None):
        """Body (as produced by serialize) -> Document"""
        if not isinstance(body, dict):
            raise BlockValidationError("Document body must be a JSON object")
        registry = self.document_class.registry
        blocks = [registry.decode(item) for item in body.get(self.blocks_key) or []]
        return self.document_class(
            metadata=body.get(self.settings_key) or {},
            blocks=blocks,
            status=status,
            record_id=record_id,
        )

    def dumps(self, document):
        return json.dumps(self.serialize(document))

    def loads(self, text, **kwargs):
        try:
            body = json.loads(text) if text else {}
        except (json.JSONDecodeError, TypeError) as e:
            raise BlockValidationError(f"Invalid document JSON: {e}") from e
        return self.deserialize(body, **kwargs)

    # ---- record -------------------------------------------------------

    def new_record_id(self):
        return f"{self.record_prefix}_{uuid.uuid4().hex}"

    def record_fields(self, document):
        """Top-level fields derived from the document (subject, trigger_type, ...)"""
        return {'name': document.metadata.name, 'status': document.status}

    def to_record(self, document, user):
        record = {
            'id': document.record_id or self.new_record_id(),
            'user_id': user['id'],
            self.body_column: self.dumps(document),
        }
        record.update(self.record_fields(document))
        return record

    def from_record(self, record):
        return self.loads(
            record.get(self.body_column),
            status=record.get('status') or 'draft',
            record_id=record.get('id'),
        )

    # ---- persistence --------------------------------------------------

    def save(self, document, user, store):
        """Create the record, or update it if the document was loaded/saved before."""
        record = self.to_record(document, user)
        if document.record_id:
            fields = {k: v for k, v in record.items() if k not in ('id', 'user_id')}
            saved = store.update_record(self.table, document.record_id, fields)
        else:
            saved = store.create_record(self.table, record)
        logger.info(f"Saved {self.table} record {record['id']}")
        return saved or record

    def load(self, record_id, store):
        record = store.get_record(self.table, record_id)
        if record is None:
            return None
        return self.from_record(record)
