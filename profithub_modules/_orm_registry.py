"""
Module ORM Registry (``profithub_modules._orm_registry``).

Responsibility
--------------
Ensure every module-level SQLAlchemy ORM model is imported so that
``Base.metadata`` contains its table before tables are created, and
provide ``create_all_tables()`` as the one entry point for a complete
schema.

Architecture position
---------------------
**Modules layer** -- utility.  Imports sibling ``profithub_modules``
packages and ``profithub_kernel.db.engine`` (allowed: modules -> kernel).
MUST NOT be imported by ``profithub_kernel``.

Usage
-----
Scripts and ``tests/conftest.py`` call ``create_all_tables()``.
"""


def import_all_orm_models() -> None:
    """Import every ``profithub_modules.*.orm`` module (idempotent)."""
    # projects first: the other modules hold foreign keys to projects.id
    import profithub_modules.projects.orm  # noqa: F401
    import profithub_modules.receivables.orm  # noqa: F401
    import profithub_modules.budget.orm  # noqa: F401
    import profithub_modules.treasury.orm  # noqa: F401


def create_all_tables() -> None:
    """Register all module ORM models and create every table."""
    from profithub_kernel.db.engine import create_tables

    import_all_orm_models()
    create_tables()
