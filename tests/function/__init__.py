import json
import logging
import os

import boto3
from moto import mock_aws

from tests import TstLambdas

logger = logging.getLogger(__name__)
logging.basicConfig()
logger.setLevel(logging.DEBUG if os.environ.get('DEBUG', 'false') == 'true' else logging.INFO)


@mock_aws
class TstFunction(TstLambdas):
    """Base class to set up Moto mocking and create mock AWS resources for functional testing"""

    def setUp(self):  # noqa: N801 invalid-name
        super().setUp()

        self.build_resources()

        self.addCleanup(self.delete_resources)

    def build_resources(self):
        self.create_db_secret()

    def create_db_secret(self, secret: dict | None = None):
        if secret is None:
            secret = {
                'host': 'db.cluster-abc.us-east-1.rds.amazonaws.com',
                'username': 'admin',
                'password': 'hunter2',
                'dbname': 'blog',
            }
        self._secret_arn = boto3.client('secretsmanager').create_secret(
            Name='db-secret', SecretString=json.dumps(secret)
        )['ARN']
        os.environ['SECRET_ARN'] = self._secret_arn

    def delete_resources(self):
        boto3.client('secretsmanager').delete_secret(SecretId=self._secret_arn, ForceDeleteWithoutRecovery=True)
