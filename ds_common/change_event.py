import base64
import binascii
import json
from dataclasses import dataclass

from marshmallow import EXCLUDE, Schema
from marshmallow.fields import Dict, Nested, Raw, String

from ds_common.exceptions import DSDecodeException, DSParseException


@dataclass(frozen=True)
class ChangeEventRecord:
    partition_key: str
    sequence_number: str
    data: str

    @classmethod
    def from_kinesis_record(cls, record: dict) -> 'ChangeEventRecord':
        kinesis = record['kinesis']
        return cls(
            partition_key=kinesis['partitionKey'],
            sequence_number=kinesis['sequenceNumber'],
            data=kinesis['data'],
        )


class ForgivingSchema(Schema):
    """Base schema that will silently remove any unknown fields that are included"""

    class Meta:
        unknown = EXCLUDE


class ChangeEventMetadataSchema(ForgivingSchema):
    timestamp = String(allow_none=True)
    record_type = String(data_key='record-type', allow_none=True)
    operation = String(allow_none=True)
    partition_key_type = String(data_key='partition-key-type', allow_none=True)
    schema_name = String(data_key='schema-name', allow_none=True)
    table_name = String(data_key='table-name', allow_none=True)
    # A number in DMS output for MySQL sources
    transaction_id = Raw(data_key='transaction-id', allow_none=True)


class ChangeEventSchema(ForgivingSchema):
    """
    The change record DMS writes for each row mutation

    Every field is optional so that control records and anything else DMS emits still load.
    """

    data = Dict(allow_none=True)
    before_image = Dict(data_key='before-image', allow_none=True)
    metadata = Nested(ChangeEventMetadataSchema, allow_none=True)


def decode_change_event(record: ChangeEventRecord) -> dict:
    """
    Turn the base64 payload of a stream record into the JSON object it carries.

    :raises DSDecodeException: If the payload is not base64-encoded UTF-8 text
    :raises DSParseException: If the text is not a JSON object
    """
    try:
        payload = base64.b64decode(record.data, validate=True).decode('utf-8')
    except (binascii.Error, UnicodeDecodeError) as e:
        raise DSDecodeException(f'Could not decode record {record.sequence_number}: {e}') from e

    try:
        parsed = json.loads(payload)
    except json.JSONDecodeError as e:
        raise DSParseException(f'Could not parse record {record.sequence_number}: {e}') from e
    if not isinstance(parsed, dict):
        raise DSParseException(f'Record {record.sequence_number} is not a JSON object')
    return parsed
