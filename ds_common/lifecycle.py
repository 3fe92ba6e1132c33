from dataclasses import dataclass

from ds_common.config import logger
from ds_common.exceptions import DSResourceNotFoundException
from ds_common.replication_task import ReplicationTaskStatus, TaskStatusWatcher


@dataclass(frozen=True)
class PauseOutcome:
    task_arn: str | None
    initial_status: str | None
    stopped: bool


@dataclass(frozen=True)
class ResumeOutcome:
    task_arn: str
    initial_status: str
    started: bool
    final_status: str | None


class LifecycleCoordinator:
    """
    Pauses the replication task around deployments that would reconfigure it.

    The config object supplies every collaborator, so nothing here reaches for module state.
    """

    def __init__(self, config):
        self.config = config
        self.task_client = config.replication_task_client
        self.resolver = config.resource_resolver
        self.change_set_inspector = config.change_set_inspector
        self.watcher = TaskStatusWatcher(
            self.task_client,
            max_attempts=config.status_max_attempts,
            interval_seconds=config.status_poll_interval_seconds,
        )

    def _find_task(self, stack_name: str) -> tuple[str, str]:
        """Resolve the task id and its current status, resolving again if a cached id has gone stale."""
        task_arn = self.resolver.find_physical_id(stack_name)
        try:
            return task_arn, self.task_client.get_status(task_arn)
        except DSResourceNotFoundException:
            # A deployment that replaced the task leaves the old id cached in a warm container
            logger.info('Replication task not found, resolving the task id again', task_arn=task_arn)
            self.resolver.reset()
            task_arn = self.resolver.find_physical_id(stack_name)
            return task_arn, self.task_client.get_status(task_arn)

    def pause_for_deployment(self, stack_name: str, request_type: str) -> PauseOutcome:
        """
        Stop the replication task if the pending deployment would change it, or if the stack is being torn down.

        A task that is not running is left alone, which keeps repeated invocations harmless.
        """
        try:
            task_arn, status = self._find_task(stack_name)
        except DSResourceNotFoundException:
            if request_type not in ('Create', 'Delete'):
                raise
            # The task doesn't exist yet on the first deployment, and is already gone on teardown
            logger.info(
                'Replication task not found, nothing to pause', stack_name=stack_name, request_type=request_type
            )
            return PauseOutcome(task_arn=None, initial_status=None, stopped=False)

        logger.info('Replication task status before deployment', task_arn=task_arn, status=status)
        # Transitional statuses such as stopping or starting are reported as found, without waiting
        if status != ReplicationTaskStatus.RUNNING:
            return PauseOutcome(task_arn=task_arn, initial_status=status, stopped=False)

        if request_type == 'Delete':
            logger.info('Stack is being deleted, pausing replication task', task_arn=task_arn)
        elif self.change_set_inspector.has_relevant_changes(stack_name):
            logger.info('Deployment changes replication resources, pausing replication task', task_arn=task_arn)
        else:
            return PauseOutcome(task_arn=task_arn, initial_status=status, stopped=False)

        self.task_client.stop(task_arn)
        self.watcher.wait_for_status(task_arn, ReplicationTaskStatus.STOPPED)
        return PauseOutcome(task_arn=task_arn, initial_status=status, stopped=True)

    def resume_after_deployment(self, task_arn: str, wait: bool = True) -> ResumeOutcome:
        status = self.task_client.get_status(task_arn)
        logger.info('Replication task status after deployment', task_arn=task_arn, status=status)
        if status in (ReplicationTaskStatus.RUNNING, ReplicationTaskStatus.STARTING):
            return ResumeOutcome(task_arn=task_arn, initial_status=status, started=False, final_status=status)

        self.task_client.start(task_arn, status)
        final_status = None
        if wait:
            final_status = self.watcher.wait_for_status(task_arn, ReplicationTaskStatus.RUNNING)
        return ResumeOutcome(task_arn=task_arn, initial_status=status, started=True, final_status=final_status)
