"""Workflow document model.

A workflow is one row holding the editor's node and edge arrays as JSON.
The engine reads ``nodes`` and ``edges``; the other columns are metadata
for the editor and listings.
"""

import uuid
from typing import Any

from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from aioffice.models.base import GUID, Base, JSONType, TimestampMixin, UUIDMixin


class Workflow(UUIDMixin, TimestampMixin, Base):
    """An office's saved graph document.

    ``nodes`` entries look like ``{id, type, position, data}`` and
    ``edges`` entries like ``{id, source, target, sourceHandle}``. Neither
    is validated on save.
    """

    __tablename__ = "workflows"

    office_id: Mapped[uuid.UUID] = mapped_column(GUID(), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)

    nodes: Mapped[list[dict[str, Any]]] = mapped_column(
        JSONType, nullable=False, default=list, server_default="[]"
    )
    edges: Mapped[list[dict[str, Any]]] = mapped_column(
        JSONType, nullable=False, default=list, server_default="[]"
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default="true"
    )
    # Bumped by the editor on save; runs do not pin a version
    version: Mapped[int] = mapped_column(
        Integer, nullable=False, default=1, server_default="1"
    )

    @property
    def has_nodes(self) -> bool:
        return bool(self.nodes)

    def __repr__(self) -> str:
        return f"<Workflow {self.id} {self.name!r} v{self.version}>"
