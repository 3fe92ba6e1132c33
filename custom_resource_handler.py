#!/usr/bin/env python3
from abc import ABC, abstractmethod
from typing import TypedDict

from aws_lambda_powertools.logging.lambda_context import build_lambda_context_model
from aws_lambda_powertools.utilities.typing import LambdaContext
from ds_common.config import logger


class CustomResourceResponse(TypedDict, total=False):
    """Optional values a handler method can return to override the defaults."""

    PhysicalResourceId: str
    Data: dict
    NoEcho: bool


class CustomResourceHandler(ABC):
    """Base class for deployment lifecycle hooks.

    This class provides a framework for implementing CloudFormation custom resources.
    It routes CloudFormation events to the appropriate method and converts the outcome into the structured
    result the deployment tooling reads: the original event echoed back with a stable PhysicalResourceId and
    either Status: SUCCESS, or Status: FAILED with a Reason.

    Exceptions never escape the handler. The tooling decides whether a failure should roll back the deployment.

    Subclasses must implement the on_create, on_update, and on_delete methods.

    Instances of this class are callable and can be used directly as Lambda handlers.
    """

    def __init__(self, handler_name: str, physical_resource_id: str):
        """Initialize the custom resource handler.

        :type handler_name: str
        :param physical_resource_id: Reported for every invocation unless a handler method overrides it
        :type physical_resource_id: str
        """
        self.handler_name = handler_name
        self.physical_resource_id = physical_resource_id

    def __call__(self, event: dict, _context: LambdaContext) -> dict:
        return self._on_event(event, _context)

    def _on_event(self, event: dict, _context: LambdaContext) -> dict:
        """CloudFormation event handler using the CDK provider framework.
        See: https://docs.aws.amazon.com/cdk/api/v2/python/aws_cdk.custom_resources/README.html

        This method routes the event to the appropriate handler method based on the request type.

        :param event: The lambda event with properties in ResourceProperties
        :type event: dict
        :param _context: Lambda context
        :type _context: LambdaContext
        :return: The event, with PhysicalResourceId, Status and, on failure, Reason added
        :rtype: dict
        """

        # @logger.inject_lambda_context doesn't work on instance methods, so we'll build the context manually
        lambda_context = build_lambda_context_model(_context)
        logger.structure_logs(**lambda_context.__dict__)

        logger.info(f'{self.handler_name} handler started')

        properties = event.get('ResourceProperties', {})
        request_type = event.get('RequestType')

        try:
            match request_type:
                case 'Create':
                    resp = self.on_create(properties)
                case 'Update':
                    resp = self.on_update(properties)
                case 'Delete':
                    resp = self.on_delete(properties)
                case _:
                    raise ValueError(f'Unexpected request type: {request_type}')
        except Exception as e:  # noqa: BLE001 broad-exception-caught
            logger.error(f'Error in {self.handler_name} {request_type}', request_type=request_type, exc_info=e)
            return {
                **event,
                'PhysicalResourceId': self.physical_resource_id,
                'Reason': getattr(e, 'message', None) or str(e) or type(e).__name__,
                'Status': 'FAILED',
            }

        logger.info(f'{self.handler_name} handler complete')
        return {**event, 'PhysicalResourceId': self.physical_resource_id, **(resp or {}), 'Status': 'SUCCESS'}

    @abstractmethod
    def on_create(self, properties: dict) -> CustomResourceResponse | None:
        """Handle Create events.

        :param properties: The ResourceProperties from the CloudFormation event
        :type properties: dict
        :return: Optional overrides for the response
        :rtype: Optional[CustomResourceResponse]
        """

    @abstractmethod
    def on_update(self, properties: dict) -> CustomResourceResponse | None:
        """Handle Update events.

        :param properties: The ResourceProperties from the CloudFormation event
        :type properties: dict
        :return: Optional overrides for the response
        :rtype: Optional[CustomResourceResponse]
        """

    @abstractmethod
    def on_delete(self, properties: dict) -> CustomResourceResponse | None:
        """Handle Delete events.

        In many cases this can be a no-op.

        :param properties: The ResourceProperties from the CloudFormation event
        :type properties: dict
        :return: Optional overrides for the response
        :rtype: Optional[CustomResourceResponse]
        """
