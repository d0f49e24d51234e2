"""FastAPI application exposing the compiler over HTTP."""

from typing import Any

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from .. import __version__
from ..adapters.raw_export import to_raw
from ..core.errors import BlockastError


class CompileRequest(BaseModel):
    ast: list[Any]


def create_app(runtime: Any) -> FastAPI:
    """
    Create FastAPI application with runtime injected.

    Args:
        runtime: Runtime instance with schema, key generator and config

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="blockast API",
        description="Compile document ASTs into rich-text blocks",
        version=__version__,
    )

    @app.get("/health")  # type: ignore[misc]
    async def health() -> dict[str, Any]:
        """Health check endpoint."""
        return {"status": "ok", "version": __version__}

    @app.post("/compile")  # type: ignore[misc]
    async def compile_ast(request: CompileRequest) -> dict[str, Any]:
        """Compile an AST and return the raw document."""
        try:
            document = runtime.compile(request.ast)
        except BlockastError as e:
            raise HTTPException(status_code=422, detail=str(e)) from e
        return to_raw(document)

    return app
