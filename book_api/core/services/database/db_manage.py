"""Schema bootstrap for the Book table."""

from loguru import logger
from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel

from book_api.entities.service.book import BookTable


class DbManageService:
    """Creates missing tables and columns; never drops or alters existing ones."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def create_all(self) -> None:
        """Create the books table if absent, then add any missing columns."""
        table = BookTable.__table__
        SQLModel.metadata.create_all(self._engine, tables=[table])

        existing = {column["name"] for column in inspect(self._engine).get_columns(table.name)}
        missing = [column for column in table.columns if column.name not in existing]

        if missing:
            preparer = self._engine.dialect.identifier_preparer
            with self._engine.begin() as connection:
                for column in missing:
                    column_type = column.type.compile(dialect=self._engine.dialect)
                    connection.execute(
                        text(
                            f"ALTER TABLE {preparer.format_table(table)} "
                            f"ADD COLUMN {preparer.format_column(column)} {column_type}"
                        )
                    )
                    logger.info("Added column {}.{}", table.name, column.name)

        logger.info("Database initialized with table {}", table.name)
