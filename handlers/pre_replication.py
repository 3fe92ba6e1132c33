"""
Custom resource handler that runs before the replication task is updated.

Deployed so that CloudFormation applies it ahead of the DMS resources on every deployment. If the pending
change set touches the replication task, its endpoints or its instance, or the stack is being deleted, the
running task is stopped and we wait for DMS to report it stopped before letting the deployment continue.
"""

from custom_resource_handler import CustomResourceHandler, CustomResourceResponse
from ds_common.config import config, logger
from ds_common.lifecycle import LifecycleCoordinator


class PreReplicationHandler(CustomResourceHandler):
    """Pauses the replication task ahead of deployments that would reconfigure it"""

    def __init__(self, handler_config):
        super().__init__('PreReplication', 'pre-dms')
        self.config = handler_config
        self.coordinator = LifecycleCoordinator(handler_config)

    def _pause(self, request_type: str) -> CustomResourceResponse:
        outcome = self.coordinator.pause_for_deployment(self.config.stack_name, request_type)
        logger.info('Replication task ready for deployment', task_arn=outcome.task_arn, stopped=outcome.stopped)
        return {'Data': {'taskStopped': outcome.stopped}}

    def on_create(self, properties: dict) -> CustomResourceResponse | None:  # noqa: ARG002 unused-argument
        return self._pause('Create')

    def on_update(self, properties: dict) -> CustomResourceResponse | None:  # noqa: ARG002 unused-argument
        return self._pause('Update')

    def on_delete(self, properties: dict) -> CustomResourceResponse | None:  # noqa: ARG002 unused-argument
        return self._pause('Delete')


on_event = PreReplicationHandler(config)
