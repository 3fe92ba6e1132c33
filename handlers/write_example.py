from aws_lambda_powertools.utilities.typing import LambdaContext

from ds_common.config import config, logger
from ds_common.example_table import ExampleTable


@logger.inject_lambda_context
def handler(event: dict, context: LambdaContext):  # noqa: ARG001 unused-argument
    """
    Write to the example table on demand, to generate change events.

    - {"exampleId": 1, "delete": 1} deletes the row
    - {"exampleId": 1} updates the row with a new value
    - {} inserts a new row
    """
    example_id = event.get('exampleId')
    example_table = ExampleTable(config)
    engine = config.connection_manager.acquire()
    try:
        with engine.begin() as connection:
            if not example_id:
                example_table.insert(connection)
            elif event.get('delete'):
                example_table.delete(connection, int(example_id))
            else:
                example_table.update(connection, int(example_id))
    finally:
        engine.dispose()
