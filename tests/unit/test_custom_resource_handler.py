from custom_resource_handler import CustomResourceHandler, CustomResourceResponse

from tests import TstLambdas


class RecordingHandler(CustomResourceHandler):
    """Test implementation of CustomResourceHandler."""

    def __init__(self):
        super().__init__('recording-handler', 'recording-resource')
        self.create_called = False
        self.update_called = False
        self.delete_called = False
        self.properties_received = None

    def on_create(self, properties: dict) -> CustomResourceResponse | None:
        self.create_called = True
        self.properties_received = properties
        return {'Data': {'test': 'value'}}

    def on_update(self, properties: dict) -> CustomResourceResponse | None:
        self.update_called = True
        self.properties_received = properties
        return {'Data': {'test': 'updated'}}

    def on_delete(self, properties: dict) -> CustomResourceResponse | None:
        self.delete_called = True
        self.properties_received = properties
        return None


class FailingHandler(CustomResourceHandler):
    def __init__(self):
        super().__init__('failing-handler', 'failing-resource')

    def on_create(self, _properties: dict):
        raise ValueError('Test exception')

    def on_update(self, _properties: dict):
        raise RuntimeError()

    def on_delete(self, _properties: dict):
        return None


class TestCustomResourceHandler(TstLambdas):
    """Tests for the CustomResourceHandler base class."""

    def setUp(self):
        super().setUp()
        self.handler = RecordingHandler()

    def test_on_event_create(self):
        """Test that Create events are routed to on_create and reported as a success."""
        event = {'RequestType': 'Create', 'RequestId': 'abc', 'ResourceProperties': {'test': 'value'}}

        result = self.handler(event, self.mock_context)

        self.assertTrue(self.handler.create_called)
        self.assertFalse(self.handler.update_called)
        self.assertFalse(self.handler.delete_called)
        self.assertEqual(self.handler.properties_received, {'test': 'value'})
        self.assertEqual(
            {
                'RequestType': 'Create',
                'RequestId': 'abc',
                'ResourceProperties': {'test': 'value'},
                'PhysicalResourceId': 'recording-resource',
                'Data': {'test': 'value'},
                'Status': 'SUCCESS',
            },
            result,
        )

    def test_on_event_update(self):
        """Test that Update events are routed to on_update."""
        event = {'RequestType': 'Update', 'ResourceProperties': {'test': 'updated'}}

        result = self.handler(event, self.mock_context)

        self.assertFalse(self.handler.create_called)
        self.assertTrue(self.handler.update_called)
        self.assertFalse(self.handler.delete_called)
        self.assertEqual({'test': 'updated'}, result['Data'])
        self.assertEqual('SUCCESS', result['Status'])

    def test_on_event_delete(self):
        """Test that Delete events are routed to on_delete."""
        event = {'RequestType': 'Delete', 'ResourceProperties': {'test': 'delete'}}

        result = self.handler(event, self.mock_context)

        self.assertTrue(self.handler.delete_called)
        self.assertEqual('recording-resource', result['PhysicalResourceId'])
        self.assertEqual('SUCCESS', result['Status'])
        self.assertNotIn('Data', result)

    def test_physical_resource_id_is_stable(self):
        """The id we report must not change when the event carries a different one."""
        event = {'RequestType': 'Update', 'PhysicalResourceId': 'something-else', 'ResourceProperties': {}}

        result = self.handler(event, self.mock_context)

        self.assertEqual('recording-resource', result['PhysicalResourceId'])

    def test_on_event_invalid_request_type(self):
        """Test that invalid request types are reported as a failure."""
        event = {'RequestType': 'InvalidType', 'ResourceProperties': {}}

        result = self.handler(event, self.mock_context)

        self.assertEqual('FAILED', result['Status'])
        self.assertEqual('Unexpected request type: InvalidType', result['Reason'])

    def test_on_event_create_exception(self):
        """Test that exceptions in on_create are converted to a failed result."""
        event = {'RequestType': 'Create', 'ResourceProperties': {}}

        result = FailingHandler()(event, self.mock_context)

        self.assertEqual(
            {
                'RequestType': 'Create',
                'ResourceProperties': {},
                'PhysicalResourceId': 'failing-resource',
                'Reason': 'Test exception',
                'Status': 'FAILED',
            },
            result,
        )

    def test_exception_without_message_still_has_a_reason(self):
        event = {'RequestType': 'Update', 'ResourceProperties': {}}

        result = FailingHandler()(event, self.mock_context)

        self.assertEqual('FAILED', result['Status'])
        self.assertEqual('RuntimeError', result['Reason'])

    def test_empty_resource_properties(self):
        """Test handling of events with no ResourceProperties."""
        event = {
            'RequestType': 'Create'
            # No ResourceProperties
        }

        result = self.handler(event, self.mock_context)

        self.assertTrue(self.handler.create_called)
        self.assertEqual(self.handler.properties_received, {})
        self.assertEqual('SUCCESS', result['Status'])
