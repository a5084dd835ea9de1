import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from starlette.concurrency import run_in_threadpool

from harness.api.deps import get_listener
from harness.core.errors import StoreWriteError
from harness.services.payments.webhooks import NotificationListener

logger = logging.getLogger(__name__)

router = APIRouter(tags=["webhooks"])


@router.post("/event-listener/{tenant}")
async def event_listener(tenant: str, request: Request, listener: NotificationListener = Depends(get_listener)):
    """
    Receive a provider event notification for one account structure.

    200 once stored, 401 for a bad signature or unknown account structure
    (same flat body either way), 500 if the store write fails.
    """
    # hash exactly what came over the wire, never request.json()
    raw_body = await request.body()
    try:
        result = await run_in_threadpool(
            listener.receive, tenant, request.url.path, request.headers, raw_body
        )
    except StoreWriteError as e:
        logger.error(f"event store write failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to store event")

    if not result.accepted:
        raise HTTPException(status_code=401, detail="Rejected")
    return Response(status_code=200)
