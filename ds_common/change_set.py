from dataclasses import dataclass

from botocore.exceptions import ClientError

from ds_common.config import logger

# Resources whose changes require the replication task to be paused first
REPLICATION_RESOURCE_TYPES = frozenset(
    {
        'AWS::DMS::ReplicationTask',
        'AWS::DMS::Endpoint',
        'AWS::DMS::ReplicationInstance',
    }
)
RELEVANT_ACTIONS = frozenset({'Add', 'Modify', 'Remove', 'Dynamic'})
PENDING_EXECUTION_STATUSES = frozenset({'AVAILABLE', 'EXECUTE_IN_PROGRESS'})


@dataclass(frozen=True)
class ResourceChange:
    logical_id: str
    resource_type: str
    action: str | None

    @property
    def is_relevant(self) -> bool:
        return self.resource_type in REPLICATION_RESOURCE_TYPES and self.action in RELEVANT_ACTIONS


class ChangeSetInspector:
    """Reads the pending CloudFormation change sets of a stack"""

    def __init__(self, config):
        self.config = config

    def _pending_change_set_ids(self, stack_name: str) -> list[str]:
        change_set_ids = []
        pagination = {}
        while True:
            resp = self.config.cloudformation_client.list_change_sets(StackName=stack_name, **pagination)
            change_set_ids.extend(
                summary['ChangeSetId']
                for summary in resp.get('Summaries', [])
                if summary.get('ExecutionStatus') in PENDING_EXECUTION_STATUSES
            )

            next_token = resp.get('NextToken')
            if not next_token:
                break
            pagination = {'NextToken': next_token}
        return change_set_ids

    def get_changes(self, stack_name: str, change_set_id: str) -> list[ResourceChange]:
        changes = []
        pagination = {}
        while True:
            resp = self.config.cloudformation_client.describe_change_set(
                StackName=stack_name, ChangeSetName=change_set_id, **pagination
            )
            for change in resp.get('Changes', []):
                if change.get('Type') != 'Resource':
                    continue
                resource_change = change['ResourceChange']
                changes.append(
                    ResourceChange(
                        logical_id=resource_change['LogicalResourceId'],
                        resource_type=resource_change['ResourceType'],
                        action=resource_change.get('Action'),
                    )
                )

            next_token = resp.get('NextToken')
            if not next_token:
                break
            pagination = {'NextToken': next_token}
        return changes

    def has_relevant_changes(self, stack_name: str) -> bool:
        """
        Report whether any pending change set touches the replication task, its endpoints or its instance.

        A stack with no pending change set has nothing relevant.
        """
        try:
            for change_set_id in self._pending_change_set_ids(stack_name):
                relevant = [change for change in self.get_changes(stack_name, change_set_id) if change.is_relevant]
                if relevant:
                    logger.info(
                        'Pending change set modifies replication resources',
                        change_set_id=change_set_id,
                        logical_ids=[change.logical_id for change in relevant],
                    )
                    return True
        except ClientError as e:
            if e.response['Error']['Code'] == 'ChangeSetNotFound':
                logger.info('Change set disappeared before it could be inspected', stack_name=stack_name)
                return False
            raise
        logger.info('No pending replication changes', stack_name=stack_name)
        return False
