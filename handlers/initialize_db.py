from custom_resource_handler import CustomResourceHandler, CustomResourceResponse
from ds_common.config import config, logger
from ds_common.example_table import ExampleTable


class InitializeDbHandler(CustomResourceHandler):
    """One-time setup of the source database: binlog retention and a fresh example table"""

    def __init__(self, handler_config):
        super().__init__('InitializeDb', 'init-db')
        self.config = handler_config

    def on_create(self, properties: dict) -> CustomResourceResponse | None:  # noqa: ARG002 unused-argument
        example_table = ExampleTable(self.config)
        logger.info('Initializing database', table=example_table.qualified_name)
        engine = self.config.connection_manager.acquire()
        try:
            with engine.begin() as connection:
                example_table.set_binlog_retention(connection)
                example_table.recreate(connection)
        finally:
            engine.dispose()
        logger.info('Database initialized', table=example_table.qualified_name)

    def on_update(self, properties: dict) -> CustomResourceResponse | None:
        """
        No-op on update, the table is only created once.
        """

    def on_delete(self, properties: dict) -> CustomResourceResponse | None:
        """
        No-op on delete, the database goes away with the stack.
        """


on_event = InitializeDbHandler(config)
