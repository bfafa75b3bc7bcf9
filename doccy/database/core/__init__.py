from doccy.database.core.connection import Database

__all__ = ["Database"]
