import json
import time

from botocore.exceptions import ClientError
from pymysql.constants import CLIENT
from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, Engine
from sqlalchemy.exc import SQLAlchemyError

from ds_common.config import logger
from ds_common.exceptions import DSConnectionException, DSSecretUnavailableException

REQUIRED_SECRET_KEYS = ('host', 'username', 'password', 'dbname')


class ConnectionManager:
    """
    Builds pooled connections to the source database from the credentials in Secrets Manager.

    The engine returned by acquire() belongs to the caller, who should dispose of it when finished.
    """

    def __init__(self, config):
        self.config = config

    def get_db_details(self) -> dict:
        try:
            secret_string = self.config.secrets_manager_client.get_secret_value(SecretId=self.config.secret_arn).get(
                'SecretString'
            )
        except ClientError as e:
            if e.response['Error']['Code'] == 'ResourceNotFoundException':
                raise DSSecretUnavailableException('Unable to fetch secret!') from e
            raise
        if not secret_string:
            raise DSSecretUnavailableException('Unable to fetch secret!')

        try:
            details = json.loads(secret_string)
        except json.JSONDecodeError as e:
            raise DSSecretUnavailableException('Database secret is not valid JSON') from e
        if not isinstance(details, dict):
            raise DSSecretUnavailableException('Database secret is not a JSON object')
        missing = [key for key in REQUIRED_SECRET_KEYS if not details.get(key)]
        if missing:
            raise DSSecretUnavailableException(f'Database secret is missing keys: {missing}')
        return details

    def create_pool(self, database_name_override: str | None = None) -> Engine:
        details = self.get_db_details()
        url = URL.create(
            'mysql+pymysql',
            username=details['username'],
            password=details['password'],
            host=details['host'],
            port=details.get('port'),
            database=database_name_override or details['dbname'],
        )
        return create_engine(
            url,
            pool_size=self.config.connection_pool_size,
            connect_args={'client_flag': CLIENT.MULTI_STATEMENTS},
        )

    @staticmethod
    def check_connection(engine: Engine) -> None:
        with engine.connect() as connection:
            connection.execute(text('select 1'))

    def acquire(self, database_name_override: str | None = None) -> Engine:
        """
        Get a health-checked connection pool.

        A pool that fails its health check is thrown away and rebuilt from scratch, waiting a little longer
        before each new attempt.

        :param database_name_override: Connect to this database instead of the secret's default
        :return: A usable SQLAlchemy engine
        :raises DSSecretUnavailableException: If the secret cannot be read
        :raises DSConnectionException: If every attempt fails its health check
        """
        max_attempts = self.config.connection_max_attempts
        for attempt in range(1, max_attempts + 1):
            engine = self.create_pool(database_name_override)
            try:
                self.check_connection(engine)
            except SQLAlchemyError as e:
                engine.dispose()
                logger.warning(f"Couldn't connect on try #{attempt}", exc_info=e)
                if attempt < max_attempts:
                    time.sleep(attempt * self.config.connection_retry_delay_seconds)
                continue
            logger.debug('Database connection established', attempt=attempt)
            return engine
        raise DSConnectionException('Could not connect!')
