"""Storage endpoint for FastAPI.

A single route dispatching on an `action` field (`list`, `get`, `upload`,
`delete`). Credentials never come from the request: the `StorageService`
is injected from the dishka container built at startup.
"""

import base64
import binascii
import json
import logging
from typing import Any

from dishka.integrations.fastapi import FromDishka, inject
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError
from starlette.datastructures import UploadFile

from s3gate.configs.storage import StorageApiConfig
from s3gate.exceptions.schemas.fastapi import FastAPIErrorSchema
from s3gate.exceptions.storage import (
    InvalidActionException,
    MalformedInputException,
    MissingFieldException,
    StorageOperationFailedException,
)
from s3gate.files.s3.pydantic import S3FailedOutcome
from s3gate.services.storage import StorageService
from s3gate.web.storage.schemas import (
    DEFAULT_UPLOAD_CONTENT_TYPE,
    StorageDeleteResponse,
    StorageFileRequest,
    StorageFileSchema,
    StorageGetResponse,
    StorageListRequest,
    StorageListResponse,
    StorageMultipartUploadFields,
    StorageUploadRequest,
    StorageUploadResponse,
)

logger = logging.getLogger(__name__)

LIST_QUERY_PARAMETERS = ("prefix", "limit", "continuationToken")


def _validate[T: BaseModel](schema: type[T], payload: dict[str, Any]) -> T:
    """Validate a payload, turning validation errors into 400 responses."""
    try:
        return schema.model_validate(payload)
    except ValidationError as exc:
        error = exc.errors(include_input=False, include_url=False)[0]
        field = ".".join(str(part) for part in error["loc"]) or "body"
        if error["type"] == "missing":
            raise MissingFieldException(field=field) from exc
        raise MalformedInputException(detail=f"Invalid {field}: {error['msg']}") from exc


def _decode_base64(file_data: str) -> bytes:
    try:
        return base64.b64decode(file_data.strip(), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise MalformedInputException(detail="fileData is not valid base64") from exc


def _raise_if_failed[T](outcome: T | S3FailedOutcome) -> T:
    if isinstance(outcome, S3FailedOutcome):
        raise StorageOperationFailedException.from_failure(outcome)
    return outcome


def _respond(schema: BaseModel) -> JSONResponse:
    return JSONResponse(content=schema.model_dump(mode="json", by_alias=True))


async def _read_payload(request: Request) -> tuple[dict[str, Any], UploadFile | None]:
    """Read the JSON body or the multipart form of a POST request."""
    if request.method != "POST":
        return {}, None

    content_type = request.headers.get("content-type", "")
    if content_type.startswith("multipart/form-data"):
        form = await request.form()
        payload: dict[str, Any] = {}
        upload_file: UploadFile | None = None
        for name, value in form.multi_items():
            if isinstance(value, UploadFile):
                if name == "file":
                    upload_file = value
            else:
                payload[name] = value
        return payload, upload_file

    raw = await request.body()
    if not raw.strip():
        return {}, None
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise MalformedInputException(detail="Request body is not valid JSON") from exc
    if not isinstance(payload, dict):
        raise MalformedInputException(detail="Request body must be a JSON object")
    return payload, None


async def handle_list(
    storage: StorageService,
    payload: dict[str, Any],
    request: Request,
    config: StorageApiConfig,
) -> JSONResponse:
    """List files."""
    query = {name: request.query_params[name] for name in LIST_QUERY_PARAMETERS if name in request.query_params}
    list_request = _validate(StorageListRequest, payload | query)

    limit = list_request.limit or config.default_list_limit
    if limit > config.max_list_limit:
        raise MalformedInputException(detail=f"Invalid limit: must be between 1 and {config.max_list_limit}")

    outcome = _raise_if_failed(
        await storage.list(
            prefix=list_request.prefix,
            limit=limit,
            continuation_token=list_request.continuation_token,
        )
    )
    return _respond(
        StorageListResponse(
            files=[StorageFileSchema.from_descriptor(descriptor) for descriptor in outcome.objects],
            is_truncated=outcome.is_truncated,
            next_continuation_token=outcome.next_continuation_token,
        )
    )


async def handle_get(storage: StorageService, payload: dict[str, Any]) -> JSONResponse:
    """Download a file as base64."""
    file_request = _validate(StorageFileRequest, payload)
    outcome = _raise_if_failed(await storage.get(file_request.file_name))
    return _respond(StorageGetResponse(file_data=outcome.as_base64(), content_type=outcome.content_type))


async def handle_upload(
    storage: StorageService,
    payload: dict[str, Any],
    upload_file: UploadFile | None,
) -> JSONResponse:
    """Upload a base64 JSON payload or a multipart file."""
    if upload_file is not None:
        fields = _validate(StorageMultipartUploadFields, payload)
        file_name = fields.file_name or upload_file.filename
        if not file_name:
            raise MissingFieldException(field="fileName")
        body = await upload_file.read()
        content_type = upload_file.content_type or DEFAULT_UPLOAD_CONTENT_TYPE
        folder, preserve_name = fields.folder or "", fields.preserve_name
    else:
        if "fileData" not in payload and "fileName" not in payload:
            raise MissingFieldException(field="file")
        upload_request = _validate(StorageUploadRequest, payload)
        body = _decode_base64(upload_request.file_data)
        file_name = upload_request.file_name
        content_type = upload_request.content_type or DEFAULT_UPLOAD_CONTENT_TYPE
        folder, preserve_name = upload_request.folder or "", upload_request.preserve_name

    if not file_name.lstrip("/"):
        raise MissingFieldException(field="fileName")

    outcome = _raise_if_failed(
        await storage.upload(file_name, body, content_type, folder=folder, preserve_name=preserve_name)
    )
    return _respond(StorageUploadResponse(url=outcome.public_url, file_name=outcome.key))


async def handle_delete(storage: StorageService, payload: dict[str, Any]) -> JSONResponse:
    """Delete a file."""
    file_request = _validate(StorageFileRequest, payload)
    _raise_if_failed(await storage.delete(file_request.file_name))
    return _respond(StorageDeleteResponse())


def build_storage_router(config: StorageApiConfig | None = None) -> APIRouter:
    """Build the router exposing the storage endpoint.

    Args:
        config: Endpoint configuration. If None, uses default configuration.

    """
    config = config or StorageApiConfig()
    router = APIRouter(tags=["storage"])

    @router.api_route(
        config.route_path,
        methods=["GET", "POST"],
        response_model=None,
        responses={
            400: {"model": FastAPIErrorSchema, "description": "Malformed input"},
            500: {"model": FastAPIErrorSchema, "description": "Storage provider or transport failure"},
        },
        summary="Storage operations",
        description="List, get, upload or delete objects. The operation is chosen by the `action` field.",
    )
    @inject
    async def storage_endpoint(request: Request, storage: FromDishka[StorageService]) -> JSONResponse:
        """Storage endpoint."""
        payload, upload_file = await _read_payload(request)
        action = payload.get("action") or request.query_params.get("action")
        logger.info("Storage action: %s, method: %s", action, request.method)

        if action == "list":
            return await handle_list(storage, payload, request, config)

        if request.method != "POST":
            raise InvalidActionException

        match action:
            case "get":
                return await handle_get(storage, payload)
            case "upload":
                return await handle_upload(storage, payload, upload_file)
            case "delete":
                return await handle_delete(storage, payload)
            case _:
                raise InvalidActionException

    return router
