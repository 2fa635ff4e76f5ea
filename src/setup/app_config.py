import inject

from src.kanban.application.auth import AuthService
from src.kanban.domain.repositories import TaskRepository
from src.kanban.infrastructure.sql.orm import DatabaseOrm
from src.kanban.infrastructure.sql.repositories import SqlTaskRepository
from src.setup.auth_config import AuthSettings, get_auth_settings
from src.setup.db_config import DatabaseSettings, get_database_settings


def build_binder(
    db_settings: DatabaseSettings | None = None,
    auth_settings: AuthSettings | None = None,
):
    """Return an ``inject`` config callable wiring the ORM, repository and auth gate."""
    if db_settings is None:
        db_settings = get_database_settings()
    if auth_settings is None:
        auth_settings = get_auth_settings()

    orm = DatabaseOrm(db_settings.DATABASE_URL, echo=db_settings.DATABASE_ECHO)
    repository = SqlTaskRepository(orm)
    auth_service = AuthService(auth_settings)

    def _config(binder: inject.Binder) -> None:
        binder.bind(DatabaseOrm, orm)
        binder.bind(TaskRepository, repository)
        binder.bind(AuthService, auth_service)

    return _config


def configure_di(
    db_settings: DatabaseSettings | None = None,
    auth_settings: AuthSettings | None = None,
) -> None:
    """Configure the process-wide injector. Later calls replace the bindings."""
    inject.clear_and_configure(build_binder(db_settings, auth_settings))
