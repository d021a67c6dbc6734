"""
This file customizes the generated OpenAPI schema.
Routes decorated with `@raises` get their RFC 7807 problem responses documented next to the success response.

Approach: https://github.com/fastapi/fastapi/issues/1198#issuecomment-609019113
"""

import http
from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from starlette.routing import BaseRoute

from preference_service.core.exceptions import ServiceException


# Override FastAPI's default OpenAPI generation
# ----------------------------------------------------------------------------------------------------------------------


def custom(app: FastAPI):
    """Override the default FastAPI OpenAPI generation to include service exception documentation."""

    def wrapper() -> dict[str, object]:
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title=app.title,
            version=app.version,
            description=app.description,
            routes=app.routes,
        )

        for route in app.routes:
            if getattr(route, "include_in_schema", None):
                endpoint = getattr(route, "endpoint")
                raised: dict[int, list[type[ServiceException]]] = getattr(
                    endpoint, "__raised_service_exceptions", {}
                )
                for status_code, exceptions in raised.items():
                    add_service_exception_documentation(route, openapi_schema, status_code, exceptions)

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    return wrapper


def add_service_exception_documentation(
    route: BaseRoute, openapi_schema: dict[str, object], status_code: int, exceptions: list[type[ServiceException]]
):
    route_path: str = getattr(route, "path")
    route_methods = [method.lower() for method in getattr(route, "methods")]
    for method in route_methods:
        assert isinstance(openapi_schema["paths"], dict)
        responses = openapi_schema["paths"][route_path][method]["responses"]
        assert isinstance(responses, dict)
        if str(status_code) in responses:
            continue
        responses[str(status_code)] = {
            "description": http.HTTPStatus(status_code).phrase,
            "content": {
                "application/json": {
                    "schema": {
                        "type": "object",
                        "properties": {
                            "type": {"type": "string"},
                            "title": {"type": "string"},
                            "status": {"type": "integer"},
                            "detail": {"type": "string"},
                            "trace_id": {"type": "string"},
                        },
                    },
                    "examples": {exc.type: {"value": exc.build_problem_details()} for exc in exceptions},
                },
            },
        }
