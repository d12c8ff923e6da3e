"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.database.db_setting import Database, get_session_maker
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.platform.state.redis_client import redis_client
from src.service.group_ticketing.driven_adapter.message_queue.redis_job_publisher_impl import (
    RedisJobPublisherImpl,
)
from src.service.group_ticketing.driven_adapter.security.bcrypt_password_hasher import (
    BcryptPasswordHasher,
)
from src.service.group_ticketing.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


class Container(containers.DeclarativeContainer):
    config_service = providers.Singleton(Settings)

    database = providers.Singleton(Database)

    # A fresh UoW per use case; the session maker follows the running event loop
    unit_of_work = providers.Factory(
        SqlAlchemyUnitOfWork,
        session_factory=providers.Callable(get_session_maker),
    )

    redis_client = providers.Object(redis_client)

    password_hasher = providers.Singleton(BcryptPasswordHasher)
    jwt_auth = providers.Singleton(JwtAuth)

    job_publisher = providers.Singleton(RedisJobPublisherImpl, redis_client=redis_client)


container = Container()


def setup() -> None:
    container.config_service()


def cleanup() -> None:
    container.reset_singletons()
