import time
from enum import StrEnum

from botocore.exceptions import ClientError

from ds_common.config import logger
from ds_common.exceptions import DSResourceNotFoundException, DSStatusTimeoutException


class ReplicationTaskStatus(StrEnum):
    """
    Statuses DMS reports for a replication task. The watcher only compares strings, so statuses
    missing from this list still flow through untouched.
    """

    CREATING = 'creating'
    READY = 'ready'
    STARTING = 'starting'
    RUNNING = 'running'
    STOPPING = 'stopping'
    STOPPED = 'stopped'
    FAILED = 'failed'
    MODIFYING = 'modifying'
    DELETING = 'deleting'


class ReplicationTaskClient:
    """
    Thin wrapper over the DMS API for the few commands we issue against a replication task.
    AWS errors are allowed to propagate unchanged, other than a task DMS does not know about.
    """

    def __init__(self, config):
        self.config = config

    def describe(self, task_arn: str) -> dict:
        try:
            resp = self.config.dms_client.describe_replication_tasks(
                Filters=[{'Name': 'replication-task-arn', 'Values': [task_arn]}],
                WithoutSettings=True,
            )
        except ClientError as e:
            if e.response['Error']['Code'] == 'ResourceNotFoundFault':
                raise DSResourceNotFoundException(f'Replication task not found: {task_arn}') from e
            raise
        tasks = resp.get('ReplicationTasks', [])
        if not tasks:
            raise DSResourceNotFoundException(f'Replication task not found: {task_arn}')
        return tasks[0]

    def get_status(self, task_arn: str) -> str:
        return self.describe(task_arn)['Status']

    def stop(self, task_arn: str) -> None:
        logger.info('Stopping replication task', task_arn=task_arn)
        self.config.dms_client.stop_replication_task(ReplicationTaskArn=task_arn)

    def start(self, task_arn: str, current_status: str) -> None:
        """
        Start the task, picking up where it left off if it has run before.

        DMS will not resume a task that has never been started, so a task still in the 'ready' state
        gets a fresh start instead.
        """
        if current_status == ReplicationTaskStatus.READY:
            start_type = 'start-replication'
        else:
            start_type = 'resume-processing'
        logger.info('Starting replication task', task_arn=task_arn, start_type=start_type)
        self.config.dms_client.start_replication_task(ReplicationTaskArn=task_arn, StartReplicationTaskType=start_type)


class TaskStatusWatcher:
    """Polls a replication task until it reports a target status"""

    def __init__(self, task_client: ReplicationTaskClient, max_attempts: int = 24, interval_seconds: int = 10):
        self.task_client = task_client
        self.max_attempts = max_attempts
        self.interval_seconds = interval_seconds

    def wait_for_status(self, task_arn: str, target_status: str) -> str:
        """
        Block until the task reports target_status.

        Polls once per interval for up to max_attempts polls. Errors raised while polling are not retried.

        :param task_arn: The replication task ARN
        :param target_status: The status to wait for
        :return: The matched status
        :raises DSStatusTimeoutException: If the status was never observed
        """
        status = None
        for attempt in range(1, self.max_attempts + 1):
            status = self.task_client.get_status(task_arn)
            logger.info('Replication task status', task_arn=task_arn, status=status, attempt=attempt)
            if status == target_status:
                return status
            if attempt < self.max_attempts:
                time.sleep(self.interval_seconds)
        raise DSStatusTimeoutException(f'Replication task not {target_status}: {status}', last_status=status)
