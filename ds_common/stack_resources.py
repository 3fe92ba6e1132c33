from dataclasses import dataclass

from ds_common.config import logger
from ds_common.exceptions import DSResourceNotFoundException

REPLICATION_TASK_RESOURCE_TYPE = 'AWS::DMS::ReplicationTask'


@dataclass(frozen=True)
class StackResource:
    logical_id: str
    physical_id: str | None
    resource_type: str


class ResourceResolver:
    """
    Finds physical resource ids in a CloudFormation stack.

    Lookups are memoized on the instance for as long as it lives.
    """

    def __init__(self, config):
        self.config = config
        self._resolved: dict[tuple[str, str], str] = {}

    def reset(self) -> None:
        self._resolved.clear()

    def list_stack_resources(self, stack_name: str) -> list[StackResource]:
        resources = []
        pagination = {}
        while True:
            resp = self.config.cloudformation_client.list_stack_resources(StackName=stack_name, **pagination)
            resources.extend(
                StackResource(
                    logical_id=summary['LogicalResourceId'],
                    physical_id=summary.get('PhysicalResourceId'),
                    resource_type=summary['ResourceType'],
                )
                for summary in resp.get('StackResourceSummaries', [])
            )

            next_token = resp.get('NextToken')
            if not next_token:
                break
            pagination = {'NextToken': next_token}
        logger.debug('Listed stack resources', stack_name=stack_name, resource_count=len(resources))
        return resources

    def find_physical_id(self, stack_name: str, resource_type: str = REPLICATION_TASK_RESOURCE_TYPE) -> str:
        key = (stack_name, resource_type)
        if key in self._resolved:
            return self._resolved[key]

        matches = [
            resource
            for resource in self.list_stack_resources(stack_name)
            if resource.resource_type == resource_type and resource.physical_id
        ]
        if not matches:
            raise DSResourceNotFoundException(f'No {resource_type} resource found in stack {stack_name}')
        if len(matches) > 1:
            # No tie-breaker beyond listing order
            logger.warning(
                'Multiple matching resources found, using the first',
                stack_name=stack_name,
                resource_type=resource_type,
                logical_ids=[resource.logical_id for resource in matches],
            )

        physical_id = matches[0].physical_id
        logger.info(
            'Resolved stack resource', stack_name=stack_name, resource_type=resource_type, physical_id=physical_id
        )
        self._resolved[key] = physical_id
        return physical_id
