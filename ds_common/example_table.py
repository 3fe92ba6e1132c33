import random

from sqlalchemy import text
from sqlalchemy.engine import Connection

from ds_common.config import logger
from ds_common.utils import sql_identifier


class ExampleTable:
    """
    The demo table whose row changes feed the replication task.

    Statements run on a connection the caller supplies, inside the caller's transaction.
    """

    def __init__(self, config):
        self.config = config

    @property
    def qualified_name(self) -> str:
        return f'{sql_identifier(self.config.db_name)}.{sql_identifier(self.config.table_name)}'

    @staticmethod
    def _example_value() -> str:
        return f'hello {random.randrange(1000)}'

    def set_binlog_retention(self, connection: Connection) -> None:
        # DMS reads the binlog, so RDS must keep it around long enough for the task to catch up
        connection.execute(
            text("CALL mysql.rds_set_configuration('binlog retention hours', :hours)"),
            {'hours': self.config.binlog_retention_hours},
        )

    def recreate(self, connection: Connection) -> None:
        logger.info('Recreating example table', table=self.qualified_name)
        connection.execute(text(f'DROP TABLE IF EXISTS {self.qualified_name}'))
        connection.execute(
            text(
                f'CREATE TABLE {self.qualified_name} '
                '(id INT NOT NULL AUTO_INCREMENT, example VARCHAR(255) NOT NULL, PRIMARY KEY (id))'
            )
        )

    def insert(self, connection: Connection) -> str:
        example = self._example_value()
        connection.execute(text(f'INSERT INTO {self.qualified_name} (example) VALUES (:example)'), {'example': example})
        logger.info('Inserted example row', table=self.qualified_name, example=example)
        return example

    def update(self, connection: Connection, example_id: int) -> str:
        example = self._example_value()
        connection.execute(
            text(f'UPDATE {self.qualified_name} SET example = :example WHERE id = :id'),
            {'example': example, 'id': example_id},
        )
        logger.info('Updated example row', table=self.qualified_name, example_id=example_id, example=example)
        return example

    def delete(self, connection: Connection, example_id: int) -> None:
        connection.execute(text(f'DELETE FROM {self.qualified_name} WHERE id = :id'), {'id': example_id})
        logger.info('Deleted example row', table=self.qualified_name, example_id=example_id)
