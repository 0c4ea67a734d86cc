"""Producer and consumer endpoints for named queues."""

from fastapi import APIRouter, HTTPException, Query, Request, Response, status

from pollqueue.api.dependencies import QueueServiceDep
from pollqueue.api.schemas.queues import MessageResponse, SubmitResponse

router = APIRouter(prefix="/api", tags=["queues"])


@router.post("/{queue_name}", response_model=SubmitResponse)
async def submit_message(
    queue_name: str,
    request: Request,
    service: QueueServiceDep,
) -> SubmitResponse:
    """Add a message to a queue.

    The body may be a raw string or a JSON object with a ``content`` field.
    Queues are created on first use.

    Args:
        queue_name: Target queue
        request: Incoming request (body read raw)
        service: Queue service instance

    Returns:
        SubmitResponse: Success flag and the new message id

    Raises:
        HTTPException: 400 if the JSON body cannot be parsed
    """
    body = await request.body()
    try:
        message_id = service.submit(queue_name, body, request.headers.get("content-type"))
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    return SubmitResponse(message_id=message_id)


@router.get(
    "/{queue_name}",
    response_model=MessageResponse,
    responses={status.HTTP_204_NO_CONTENT: {"description": "No message arrived before the timeout"}},
)
async def receive_message(
    queue_name: str,
    service: QueueServiceDep,
    timeout: str | None = Query(default=None, description="Milliseconds to wait for a message"),
) -> MessageResponse | Response:
    """Take the oldest message from a queue, long polling up to ``timeout`` ms.

    Args:
        queue_name: Queue to consume from
        service: Queue service instance
        timeout: Raw ``timeout`` query parameter

    Returns:
        MessageResponse with the message, or an empty 204 on timeout
    """
    message = await service.receive(queue_name, timeout)
    if message is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return MessageResponse(**message.to_dict())
