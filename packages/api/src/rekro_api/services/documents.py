# This project was developed with assistance from AI tools.
"""Document registry stored on the applicant's intent record.

Maps a document type (e.g. ``passport``) to a DocumentRef. Only presence
matters to the completeness scorer; binary storage lives elsewhere.
"""

from collections.abc import Mapping
from typing import Any

from rekro_db.enums import DocumentType

from ..core.errors import ValidationError
from ..schemas.profile import DocumentRef


def parse_document_type(value: str) -> DocumentType:
    try:
        return DocumentType(value)
    except ValueError as exc:
        allowed = ", ".join(t.value for t in DocumentType)
        raise ValidationError(f"Unknown document type '{value}'. Allowed: {allowed}") from exc


class DocumentRegistry:
    """Copy-on-read view over the ``documents`` JSON column.

    ``as_dict()`` always returns a new dict, so assigning it back to the
    column is seen as a change by the ORM.
    """

    def __init__(self, raw: Mapping[str, Any] | None = None):
        self._entries: dict[str, dict[str, Any]] = {
            k: dict(v) for k, v in (raw or {}).items() if isinstance(v, Mapping)
        }

    def __contains__(self, doc_type: str | DocumentType) -> bool:
        return _key(doc_type) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, doc_type: str | DocumentType) -> DocumentRef | None:
        entry = self._entries.get(_key(doc_type))
        return DocumentRef.model_validate(entry) if entry is not None else None

    def register(self, doc_type: str | DocumentType, ref: DocumentRef) -> None:
        self._entries[parse_document_type(_key(doc_type)).value] = ref.model_dump()

    def remove(self, doc_type: str | DocumentType) -> bool:
        return self._entries.pop(_key(doc_type), None) is not None

    def as_dict(self) -> dict[str, dict[str, Any]]:
        return {k: dict(v) for k, v in self._entries.items()}

    def refs(self) -> dict[str, DocumentRef]:
        return {k: DocumentRef.model_validate(v) for k, v in self._entries.items()}


def _key(doc_type: str | DocumentType) -> str:
    return getattr(doc_type, "value", doc_type)
