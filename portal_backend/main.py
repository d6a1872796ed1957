import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from portal_backend.auth.sessions import SessionManager
from portal_backend.core import config
from portal_backend.core.exceptions import PortalError
from portal_backend.database import dispose_database, initialize_database
from portal_backend.routes import admin_routes, auth_routes, content_routes

logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)

logger = logging.getLogger(__name__)


def portal_error_handler(request: Request, exc: PortalError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info('Rejected malformed request to %s: %s', request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={'success': False, 'message': 'Invalid request body'})


def create_app() -> FastAPI:
    app = FastAPI(title='Portal API')

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    app.state.sessions = SessionManager(idle_timeout_seconds=config.SESSION_IDLE_MINUTES * 60)

    app.add_exception_handler(PortalError, portal_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    @app.on_event('startup')
    def startup() -> None:
        try:
            config.validate_runtime_config()
            initialize_database()
        except (RuntimeError, SQLAlchemyError):
            logger.exception('Startup failed. Check database settings (DATABASE_URL or DB_*) and SESSION_SECRET.')
            raise

    @app.on_event('shutdown')
    def shutdown() -> None:
        app.state.sessions.clear()
        dispose_database()

    @app.get('/')
    def root():
        return {'status': 'Portal API Running'}

    app.include_router(auth_routes.router, prefix='/api')
    app.include_router(content_routes.router, prefix='/api')
    app.include_router(admin_routes.router, prefix='/api/admin')

    return app


app = create_app()
