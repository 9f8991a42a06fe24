from typing import Any, Optional

from fastapi import FastAPI

from likeable.config import LikeableConfig, load_config, settings
from likeable.database import DatabaseSessionManager
from likeable.dependencies import LikeableState
from likeable.logger import logger
from likeable.migrations import MIGRATIONS_DIR
from likeable.routes import router
from likeable.services.like import Authorizer, build_authorizer
from likeable.utils.exceptions import register_exception_handlers


class LikeablePlugin:
    """Like/unlike system for posts, comments and users"""

    name = "likeable"

    def __init__(self):
        self.config: Optional[LikeableConfig] = None
        self.authorizer: Optional[Authorizer] = None

    def dependencies(self) -> list[str]:
        return ["auth"]

    def initialize(self, options: Optional[dict[str, Any]] = None, authorizer: Optional[Authorizer] = None) -> LikeableConfig:
        """Validate options; a ConfigurationError here must stop the host from starting"""
        self.config = load_config(options)
        self.authorizer = build_authorizer(self.config, authorizer)
        logger.info(
            f"likeable initialized: types={self.config.allowed_types} "
            f"user_likes={self.config.enable_user_likes} authorizer={type(self.authorizer).__name__}"
        )
        if not settings.SECRET_KEY:
            logger.warning("SECRET_KEY is not set, bearer tokens will be rejected")
        return self.config

    def setup_endpoints(self, app: FastAPI, sessionmanager: Optional[DatabaseSessionManager]) -> None:
        if sessionmanager is None:
            logger.warning("likeable has no database, endpoints are not mounted")
            return
        if self.config is None:
            self.initialize()

        app.state.likeable = LikeableState(
            config=self.config,
            authorizer=self.authorizer,
            sessionmanager=sessionmanager,
        )
        register_exception_handlers(app)
        app.include_router(router)

    def migration_source(self) -> str:
        return str(MIGRATIONS_DIR)

    def migration_dependencies(self) -> list[str]:
        return ["auth"]
