from marshmallow import ValidationError

from ds_common.change_event import ChangeEventRecord, ChangeEventSchema, decode_change_event
from ds_common.config import config, logger
from ds_common.exceptions import DSParseException
from ds_common.utils import kinesis_handler


@kinesis_handler
def handle_change_events(record: ChangeEventRecord):
    """Decode each row-level change DMS writes to the stream and log it"""
    partition_key = config.stream_partition_key
    if partition_key and record.partition_key != partition_key:
        logger.debug('Skipping record for another partition key', expected_partition_key=partition_key)
        return

    parsed = decode_change_event(record)
    logger.debug('Decoded payload', payload=parsed)
    try:
        change_event = ChangeEventSchema().load(parsed)
    except ValidationError as e:
        raise DSParseException(f'Invalid change record {record.sequence_number}: {e.messages}') from e

    metadata = change_event.get('metadata') or {}
    logger.info(
        'Received change event',
        operation=metadata.get('operation'),
        record_type=metadata.get('record_type'),
        schema_name=metadata.get('schema_name'),
        table_name=metadata.get('table_name'),
        change_event=parsed,
    )
