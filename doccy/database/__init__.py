"""
The `database` package holds everything Doccy persists.

Contents
--------
- config
    Pydantic settings loaded from the environment / `.env`.
- core
    The :class:`Database` handle (engine + session factory).
- entities
    SQLAlchemy ORM models.
- daos
    Data access objects over the entities.
- vector_store
    The append-only embedding store backed by a persisted LlamaIndex index.
"""
