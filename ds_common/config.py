import logging
import os
from functools import cached_property

import boto3
from aws_lambda_powertools import Metrics
from aws_lambda_powertools.logging import Logger
from botocore.config import Config as BotoConfig

logging.basicConfig()
logger = Logger()
logger.setLevel(logging.DEBUG if os.environ.get('DEBUG', 'false').lower() == 'true' else logging.INFO)

metrics = Metrics(namespace='dms-stream', service='common')


class _Config:
    status_max_attempts = 24
    status_poll_interval_seconds = 10
    connection_max_attempts = 3
    connection_retry_delay_seconds = 10
    connection_pool_size = 100
    binlog_retention_hours = 24

    @cached_property
    def dms_client(self):
        return boto3.client('dms', config=BotoConfig(retries={'mode': 'standard'}))

    @cached_property
    def cloudformation_client(self):
        return boto3.client('cloudformation', config=BotoConfig(retries={'mode': 'standard'}))

    @cached_property
    def secrets_manager_client(self):
        return boto3.client('secretsmanager')

    @cached_property
    def replication_task_client(self):
        from ds_common.replication_task import ReplicationTaskClient

        return ReplicationTaskClient(self)

    @cached_property
    def resource_resolver(self):
        """
        Resolved physical ids are memoized on this instance, so they live as long as the warm
        Lambda container does and are dropped on a cold start.
        """
        from ds_common.stack_resources import ResourceResolver

        return ResourceResolver(self)

    @cached_property
    def change_set_inspector(self):
        from ds_common.change_set import ChangeSetInspector

        return ChangeSetInspector(self)

    @cached_property
    def connection_manager(self):
        from ds_common.connection import ConnectionManager

        return ConnectionManager(self)

    @property
    def stack_name(self):
        return os.environ['STACK_NAME']

    @property
    def replication_task_arn(self):
        """
        The task ARN handed to the post-deploy hook by the stack, it is stable across a deploy
        """
        return os.environ['DMS_TASK']

    @property
    def wait_for_running(self):
        return os.environ.get('WAIT_FOR_RUNNING', 'true').lower() == 'true'

    @property
    def secret_arn(self):
        return os.environ['SECRET_ARN']

    @property
    def db_name(self):
        return os.environ['DB_NAME']

    @property
    def table_name(self):
        return os.environ['TABLE_NAME']

    @property
    def stream_partition_key(self):
        """
        Partition key the stream handler accepts. Normally the event source mapping already filters
        on this, so it is optional.
        """
        return os.environ.get('STREAM_PARTITION_KEY') or None


config = _Config()
