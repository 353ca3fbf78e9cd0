"""
FastAPI main application for the Book Library API.
"""

from typing import List, Optional

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.access import BookNotFoundError, OwnedBookAccess
from api.auth import AuthError, TokenService, get_current_subject, get_token_service
from api.config import APIConfig, config as default_config
from api.models import Book, BookCreate, BookDeleteResponse, ErrorResponse, TokenResponse
from api.service import BookService
from api.store import BookStore
from utilities.logger import get_logger, setup_logging

logger = get_logger(__name__)

AUTH_FAILED_DETAIL = "Invalid or missing authentication credentials"

LANDING_HTML = """<html>
<head><title>Book Library</title></head>
<body>
<h1>Hello World!</h1>
<p><a href="/test-login">Log in as a test user</a></p>
</body>
</html>
"""

TEST_LOGIN_HTML = """<html>
<head><title>Test login</title></head>
<body>
<form method="get" action="/test-login">
<label for="email">Email</label>
<input id="email" name="email" type="email" value="user1@example.com">
<button type="submit">Get token</button>
</form>
</body>
</html>
"""


def get_store(request: Request) -> BookStore:
    return request.app.state.store


def get_book_service(store: BookStore = Depends(get_store)) -> BookService:
    return BookService(store)


def get_owned_access(store: BookStore = Depends(get_store)) -> OwnedBookAccess:
    return OwnedBookAccess(store)


async def read_book_payload(
    request: Request,
    subject: str = Depends(get_current_subject)
) -> BookCreate:
    """
    Parse the creation payload once the caller is authenticated.

    Raises:
        RequestValidationError: If the body is not JSON or not a valid payload
    """
    try:
        body = await request.json()
    except ValueError:
        raise RequestValidationError([
            {"type": "json_invalid", "loc": ("body",), "msg": "JSON decode error", "input": None}
        ])
    try:
        return BookCreate.model_validate(body)
    except ValidationError as e:
        raise RequestValidationError([
            {**error, "loc": ("body", *error["loc"])} for error in e.errors()
        ])


def format_validation_errors(errors) -> str:
    """Flatten validation errors into one line per field."""
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in errors
    )


def error_response(status_code: int, error: str, detail: Optional[str] = None, headers=None) -> JSONResponse:
    """Render an error in the common response shape."""
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error=error,
            detail=detail,
            status_code=status_code
        ).model_dump(),
        headers=headers
    )


def create_app(config: Optional[APIConfig] = None, store: Optional[BookStore] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Settings to use, the environment-derived defaults when omitted
        store: Book store to serve from, a new empty store when omitted

    Returns:
        Configured FastAPI application
    """
    config = config or default_config

    setup_logging(
        log_level=config.log_level,
        log_format=config.log_format,
        log_file=config.log_file,
        debug=config.debug
    )

    app = FastAPI(
        title=config.api_title,
        description="""
    A minimal REST API for managing a personal collection of books.

    ## Authentication

    All book endpoints require a bearer token. Include it in the Authorization header:

    ```
    Authorization: Bearer your_token_here
    ```

    Books are only visible to the user that created them.
    """,
        version=config.api_version,
    )
    app.state.config = config
    app.state.store = store if store is not None else BookStore()
    app.state.token_service = TokenService(config)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=config.cors_allow_credentials,
        allow_methods=config.cors_allow_methods,
        allow_headers=config.cors_allow_headers,
    )

    register_exception_handlers(app)
    register_routes(app)

    logger.info(
        "Book Library API created",
        test_login=config.enable_test_login.value,
        store_size=len(app.state.store)
    )
    return app


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain and HTTP errors onto responses."""

    @app.exception_handler(AuthError)
    async def auth_error_handler(request: Request, exc: AuthError):
        """Every authentication failure looks the same to the client."""
        return error_response(
            status.HTTP_401_UNAUTHORIZED,
            AUTH_FAILED_DETAIL,
            headers={"WWW-Authenticate": "Bearer"}
        )

    @app.exception_handler(BookNotFoundError)
    async def book_not_found_handler(request: Request, exc: BookNotFoundError):
        """Missing and foreign books share one response."""
        return error_response(status.HTTP_404_NOT_FOUND, str(exc))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        """Handle invalid request input."""
        return error_response(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "Validation error",
            detail=format_validation_errors(exc.errors())
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions."""
        return error_response(
            exc.status_code,
            str(exc.detail),
            headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle general exceptions."""
        logger.error("Unhandled exception", error=str(exc), path=request.url.path)
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Internal server error",
            detail=str(exc) if request.app.state.config.debug else None
        )


def register_routes(app: FastAPI) -> None:
    """Attach the landing, test login and book routes."""

    @app.get("/", tags=["Landing"])
    async def landing(request: Request):
        """Landing page."""
        if request.app.state.config.test_login_enabled:
            return HTMLResponse(LANDING_HTML)
        return PlainTextResponse("Hello World!")

    @app.get("/test-login", tags=["Landing"])
    async def test_login(request: Request, email: Optional[str] = None):
        """
        Issue a token for any email, for manual testing only.

        - **email**: Subject to issue the token for; the login form is shown when omitted
        """
        config = request.app.state.config
        if not config.test_login_enabled:
            raise StarletteHTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
        if not email:
            return HTMLResponse(TEST_LOGIN_HTML)

        token = get_token_service(request).issue(email)
        logger.info("Test login token issued", user=email)
        return TokenResponse(
            access_token=token,
            expires_in=config.access_token_expire_minutes * 60
        )

    @app.post("/books", response_model=Book, status_code=status.HTTP_201_CREATED, tags=["Books"])
    async def create_book(
        subject: str = Depends(get_current_subject),
        payload: BookCreate = Depends(read_book_payload),
        service: BookService = Depends(get_book_service)
    ):
        """
        Create a book owned by the caller.

        - **name**: Book title
        """
        return service.create(payload, user=subject)

    @app.get("/books", response_model=List[Book], tags=["Books"])
    async def list_books(
        subject: str = Depends(get_current_subject),
        access: OwnedBookAccess = Depends(get_owned_access)
    ):
        """List the caller's books."""
        return access.list_owned(subject)

    @app.get("/books/{book_id}", response_model=Book, tags=["Books"])
    async def get_book(
        book_id: str,
        subject: str = Depends(get_current_subject),
        access: OwnedBookAccess = Depends(get_owned_access)
    ):
        """
        Get one of the caller's books by ID.

        - **book_id**: Book identifier
        """
        return access.get_owned(subject, book_id)

    @app.delete("/books/{book_id}", response_model=BookDeleteResponse, tags=["Books"])
    async def delete_book(
        book_id: str,
        subject: str = Depends(get_current_subject),
        access: OwnedBookAccess = Depends(get_owned_access)
    ):
        """
        Delete one of the caller's books by ID.

        - **book_id**: Book identifier
        """
        access.delete_owned(subject, book_id)
        return BookDeleteResponse(id=book_id)


# Create FastAPI application
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=default_config.host,
        port=default_config.port,
        reload=default_config.debug,
        log_level=default_config.log_level.lower()
    )
