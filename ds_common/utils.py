import re
from collections.abc import Callable
from functools import wraps

from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from ds_common.change_event import ChangeEventRecord
from ds_common.config import logger, metrics

_SQL_IDENTIFIER = re.compile(r'^[A-Za-z_][A-Za-z0-9_$]{0,63}$')


def kinesis_handler(fn: Callable) -> Callable:
    """Process change event records from the Kinesis stream.

    This handler uses batch item failure reporting:
    https://docs.aws.amazon.com/lambda/latest/dg/services-kinesis-batchfailurereporting.html
    A record that can't be processed is reported by sequence number instead of failing the whole batch. Kinesis
    checkpoints up to that record and redelivers it along with every record after it in the shard, so a record
    that never succeeds holds up the shard until the event source mapping's retry attempts or maximum record age
    run out. Configure bisect-on-error and an on-failure destination on the mapping to set such records aside.
    """

    @wraps(fn)
    @metrics.log_metrics
    @logger.inject_lambda_context
    def process_records(event, context: LambdaContext):  # noqa: ARG001 unused-argument
        records = event['Records']
        logger.info('Starting batch', batch_count=len(records))
        batch_failures = []
        for record in records:
            sequence_number = record.get('kinesis', {}).get('sequenceNumber')
            try:
                change_event_record = ChangeEventRecord.from_kinesis_record(record)
                with logger.append_context_keys(
                    partition_key=change_event_record.partition_key,
                    sequence_number=change_event_record.sequence_number,
                ):
                    # No exception here means success
                    fn(change_event_record)
            # Letting an exception escape back to AWS would fail and retry the whole batch. Instead, we catch
            # _almost_ any exception raised, note which record we were processing, and report it back to AWS.
            except Exception as e:  # noqa: BLE001 broad-exception-caught
                logger.error('Failed to process record', sequence_number=sequence_number, exc_info=e)
                batch_failures.append({'itemIdentifier': sequence_number})
        processed_count = len(records) - len(batch_failures)
        metrics.add_metric(name='ChangeEventsProcessed', unit=MetricUnit.Count, value=processed_count)
        metrics.add_metric(name='ChangeEventsFailed', unit=MetricUnit.Count, value=len(batch_failures))
        logger.info('Completed batch', batch_failures=len(batch_failures))
        return {'batchItemFailures': batch_failures}

    return process_records


def sql_identifier(name: str) -> str:
    """
    Validate a database or table name before it is written into a statement.

    Identifiers can't be bound as query parameters, so we only accept plain names.
    """
    if not _SQL_IDENTIFIER.match(name):
        raise ValueError(f'Invalid SQL identifier: {name!r}')
    return name
