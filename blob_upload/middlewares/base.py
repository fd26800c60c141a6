"""Base middleware architecture for Robyn applications."""

from abc import ABC, abstractmethod
from collections.abc import Callable

from robyn import Request, Response, Robyn

from blob_upload.core.logger import LogIcon, logger


class BaseMiddleware(ABC):
    """Abstract base class for middlewares with before/after hooks."""

    endpoints: frozenset[str] = frozenset()

    def __init__(self, endpoints: frozenset[str] | list[str] | None = None) -> None:
        if endpoints:
            self.endpoints = frozenset(endpoints)

    def __init_subclass__(cls, **kwargs) -> None:
        super().__init_subclass__(**kwargs)
        # Check that at least one of before/after is implemented
        if not (cls.has_hook("before") or cls.has_hook("after")):
            raise TypeError(f"{cls.__name__} must implement at least one of before/after")

    @classmethod
    def has_hook(cls, name: str) -> bool:
        """Check whether a hook was overridden."""
        return getattr(cls, name) is not getattr(BaseMiddleware, name)

    def before(self, request: Request) -> Request | Response:
        """Called before request handling. Return Request to continue or Response to short-circuit."""
        return request

    def after(self, response: Response) -> Response:
        """Called after request handling. Return modified Response."""
        return response


class MiddlewareHandler:
    """Manages middleware registration for a Robyn application."""

    def __init__(self, app: Robyn) -> None:
        self._app = app
        self._middlewares: list[BaseMiddleware] = []

    @property
    def middlewares(self) -> list[BaseMiddleware]:
        return self._middlewares

    def register(self, middleware: BaseMiddleware | type[BaseMiddleware]) -> "MiddlewareHandler":
        """Register a middleware instance or class. Returns self for chaining."""
        instance = middleware() if isinstance(middleware, type) else middleware
        self._middlewares.append(instance)
        self._apply_middleware(instance)
        logger.info(f"Registered middleware: {instance.__class__.__name__}", icon=LogIcon.ADAPTER)
        return self

    def _apply_middleware(self, middleware: BaseMiddleware) -> None:
        """Apply middleware hooks to its endpoints, or every route when it names none."""
        endpoints = middleware.endpoints or self._get_all_routes()

        for endpoint in endpoints:
            if middleware.has_hook("before"):
                self._register_before(endpoint, middleware.before)
            if middleware.has_hook("after"):
                self._register_after(endpoint, middleware.after)

    def _get_all_routes(self) -> frozenset[str]:
        """Get all registered routes from the app."""
        routes = self._app.get_all_routes()
        return frozenset(route[1] for route in routes)

    def _register_before(self, endpoint: str, handler: Callable) -> None:
        @self._app.before_request(endpoint)
        async def before_wrapper(request: Request) -> Request | Response:
            return handler(request)

    def _register_after(self, endpoint: str, handler: Callable) -> None:
        @self._app.after_request(endpoint)
        def after_wrapper(response: Response) -> Response:
            return handler(response)
