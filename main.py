from fastapi import FastAPI, Depends, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from typing import List
import json
import logging

import database, schemas, static
from logging_setup import setup_logging
from settings import Settings, get_settings

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE",
    "Access-Control-Allow-Headers": "Content-Type",
}


def create_app() -> FastAPI:
    app = FastAPI(title="Todo App", version="1.0.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type"],
    )

    # Added last so it runs first: every OPTIONS request is answered here.
    @app.middleware("http")
    async def preflight(request: Request, call_next):
        if request.method == "OPTIONS":
            return Response(status_code=204, headers=CORS_HEADERS)
        return await call_next(request)

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse({"error": exc.detail}, status_code=exc.status_code)

    # Unparseable JSON, wrong field types and a missing `text` all land here
    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError):
        logger.info("Rejected request body on %s %s: %s", request.method, request.url.path, exc.errors())
        return JSONResponse({"error": "Invalid request"}, status_code=400)

    # --- [Todo CRUD API] ---
    not_found = {404: {"model": schemas.ErrorResponse}}
    bad_request = {400: {"model": schemas.ErrorResponse}}

    @app.get("/api/todos", response_model=List[schemas.TodoResponse])
    def read_todos(store: database.TodoStore = Depends(database.get_store)):
        return store.list_all()

    @app.post("/api/todos", response_model=schemas.TodoResponse, status_code=201, responses=bad_request)
    def create_todo(todo: schemas.TodoCreate, store: database.TodoStore = Depends(database.get_store)):
        return store.create(todo.text)

    # The body is read by hand so an unknown id answers 404 before the body is looked at.
    @app.put(
        "/api/todos/{todo_id:int}",
        response_model=schemas.TodoResponse,
        responses={**not_found, **bad_request},
    )
    async def update_todo(
        todo_id: int,
        request: Request,
        store: database.TodoStore = Depends(database.get_store),
    ):
        try:
            await run_in_threadpool(store.get, todo_id)
        except database.TodoNotFound:
            raise HTTPException(status_code=404, detail="Todo not found")

        raw = await request.body()
        try:
            # An empty body means "no changes"
            payload = json.loads(raw) if raw.strip() else {}
            if not isinstance(payload, dict):
                raise ValueError("body is not a JSON object")
            changes = schemas.TodoUpdate.model_validate(payload)
        except (ValueError, ValidationError) as e:
            logger.info("Rejected request body on PUT %s: %s", request.url.path, e)
            raise HTTPException(status_code=400, detail="Invalid request")

        fields = changes.model_dump(exclude_unset=True, exclude_none=True)
        try:
            return await run_in_threadpool(store.update, todo_id, fields)
        except database.TodoNotFound:
            raise HTTPException(status_code=404, detail="Todo not found")

    @app.delete("/api/todos/{todo_id:int}", response_model=schemas.DeleteResponse, responses=not_found)
    def delete_todo(todo_id: int, store: database.TodoStore = Depends(database.get_store)):
        try:
            store.delete(todo_id)
        except database.TodoNotFound:
            raise HTTPException(status_code=404, detail="Todo not found")
        return {"success": True}

    # --- [Everything else: files under the public dir] ---
    @app.api_route(
        "/{asset_path:path}",
        methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE"],
        include_in_schema=False,
    )
    def public_asset(asset_path: str, settings: Settings = Depends(get_settings)):
        return static.serve_asset(settings.public_dir, "/" + asset_path)

    return app


app = create_app()


def run() -> None:
    import uvicorn

    settings = get_settings()
    setup_logging(settings.log_level)
    logger.info("Todo server starting on http://%s:%s", settings.host, settings.port)
    logger.info("Todos are stored in %s", settings.data_file)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
