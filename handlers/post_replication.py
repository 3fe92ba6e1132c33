"""
Custom resource handler that runs after the replication task is updated.

Resumes the task that the pre-deployment hook may have stopped. The task ARN is handed to us by the stack,
since it does not change across a deployment.
"""

from custom_resource_handler import CustomResourceHandler, CustomResourceResponse
from ds_common.config import config, logger
from ds_common.lifecycle import LifecycleCoordinator


class PostReplicationHandler(CustomResourceHandler):
    """Resumes the replication task once a deployment has been applied"""

    def __init__(self, handler_config):
        super().__init__('PostReplication', 'post-dms')
        self.config = handler_config
        self.coordinator = LifecycleCoordinator(handler_config)

    def _resume(self) -> CustomResourceResponse:
        outcome = self.coordinator.resume_after_deployment(
            self.config.replication_task_arn, wait=self.config.wait_for_running
        )
        logger.info(
            'Replication task resumed',
            task_arn=outcome.task_arn,
            started=outcome.started,
            final_status=outcome.final_status,
        )
        return {'Data': {'taskStarted': outcome.started}}

    def on_create(self, properties: dict) -> CustomResourceResponse | None:  # noqa: ARG002 unused-argument
        return self._resume()

    def on_update(self, properties: dict) -> CustomResourceResponse | None:  # noqa: ARG002 unused-argument
        return self._resume()

    def on_delete(self, properties: dict) -> CustomResourceResponse | None:  # noqa: ARG002 unused-argument
        """
        No-op on delete, the pre-deployment hook has already stopped the task.
        """


on_event = PostReplicationHandler(config)
