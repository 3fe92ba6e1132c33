from custom_resource_handler import CustomResourceHandler, CustomResourceResponse
from ds_common.config import config
from ds_common.example_table import ExampleTable


class SeedDbHandler(CustomResourceHandler):
    """Writes a first row once replication is running, so the stream sees a change event on deploy"""

    def __init__(self, handler_config):
        super().__init__('SeedDb', 'seed-db')
        self.config = handler_config

    def on_create(self, properties: dict) -> CustomResourceResponse | None:  # noqa: ARG002 unused-argument
        engine = self.config.connection_manager.acquire()
        try:
            with engine.begin() as connection:
                ExampleTable(self.config).insert(connection)
        finally:
            engine.dispose()

    def on_update(self, properties: dict) -> CustomResourceResponse | None:
        """
        No-op on update.
        """

    def on_delete(self, properties: dict) -> CustomResourceResponse | None:
        """
        No-op on delete.
        """


on_event = SeedDbHandler(config)
