import os
from unittest import TestCase
from unittest.mock import MagicMock

from aws_lambda_powertools.utilities.typing import LambdaContext


class TstLambdas(TestCase):
    @classmethod
    def setUpClass(cls):
        os.environ.update(
            {
                # Set to 'true' to enable debug logging
                'DEBUG': 'false',
                'AWS_DEFAULT_REGION': 'us-east-1',
                'STACK_NAME': 'BlogDmsStreamStack',
                'DMS_TASK': 'arn:aws:dms:us-east-1:123456789012:task:task-abc',
                'SECRET_ARN': 'arn:aws:secretsmanager:us-east-1:123456789012:secret:db-secret',
                'DB_NAME': 'blog',
                'TABLE_NAME': 'examples',
                'WAIT_FOR_RUNNING': 'true',
            },
        )
        os.environ.pop('STREAM_PARTITION_KEY', None)
        cls.mock_context = MagicMock(name='MockLambdaContext', spec=LambdaContext)

    def setUp(self):
        super().setUp()
        # Monkey-patch config object to be sure we have it based on the env vars we set above, with none of
        # the clients or resolved ids another test may have cached
        import ds_common.config

        self.config = ds_common.config._Config()  # noqa: SLF001 protected-access
        ds_common.config.config = self.config
