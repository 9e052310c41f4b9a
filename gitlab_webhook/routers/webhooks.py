"""Catch-all GitLab push webhook router.

Every path and every method lands here. The response is always an empty
200: parse and execution failures only show up in the logs.
"""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Request, Response, status
from pydantic import ValidationError
from starlette.requests import ClientDisconnect

from gitlab_webhook.config import ConfigStore
from gitlab_webhook.dependencies import get_command_executor, get_config_store
from gitlab_webhook.schemas.webhooks import PushEvent
from gitlab_webhook.services.dispatcher import derive_branch, dispatch
from gitlab_webhook.services.executor import CommandExecutor

logger = structlog.get_logger()

router = APIRouter(tags=["webhooks"])

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


@router.api_route("/{full_path:path}", methods=ALL_METHODS)
async def push_webhook(
    request: Request,
    config_store: Annotated[ConfigStore, Depends(get_config_store)],
    executor: Annotated[CommandExecutor, Depends(get_command_executor)],
) -> Response:
    """Receive a push event and run the commands of every matching rule.

    Detached commands keep running after the response has been sent;
    synchronous ones are finished before it.
    """
    try:
        try:
            body = await request.body()
        except ClientDisconnect:
            logger.warning("request_read_failed", path=request.url.path)
            return Response(status_code=status.HTTP_200_OK)

        try:
            event = PushEvent.model_validate_json(body)
        except ValidationError as exc:
            logger.warning(
                "request_decode_failed",
                path=request.url.path,
                errors=exc.error_count(),
            )
            return Response(status_code=status.HTTP_200_OK)

        branch = derive_branch(event.ref)
        logger.info(
            "webhook_received",
            repository=event.repository.name,
            ref=event.ref,
            branch=branch,
        )

        # One snapshot per request, even if a reload lands mid-dispatch.
        config = config_store.current
        started = await dispatch(event, config, executor)
        logger.info("webhook_processed", repository=event.repository.name, commands=started)
    except Exception:
        logger.exception("webhook_failed", path=request.url.path)

    return Response(status_code=status.HTTP_200_OK)
