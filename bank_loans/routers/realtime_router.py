# bank_loans/routers/realtime_router.py
import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect, status
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from bank_loans.core.security import Principal, principal_from_token
from bank_loans.services.notifications import BalanceChanged, balance_notifier
from bank_loans.utils.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Realtime"])


def balance_message(event: BalanceChanged) -> dict:
    return {
        "event": "balanceChanged",
        "branch_id": event.branch_id,
        "balance": float(event.new_balance),
    }


def can_watch(principal: Principal, event: BalanceChanged) -> bool:
    """Directors watch every branch, everyone else only their own."""
    return principal.is_director or event.branch_id == principal.branch_id


async def _forward(websocket: WebSocket, queue: asyncio.Queue) -> None:
    while True:
        event = await queue.get()
        await websocket.send_json(balance_message(event))


@router.websocket("/ws/balance")
async def balance_updates(
        websocket: WebSocket,
        token: Optional[str] = Query(None),
        db: Session = Depends(get_db),
):
    principal = await run_in_threadpool(principal_from_token, db, token)
    # the socket outlives the request; hand the connection back to the pool
    db.rollback()
    if principal is None:
        logger.warning("Balance socket refused: %s", websocket.client)
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue()

    def enqueue(event: BalanceChanged) -> None:
        # publishers run in the sync route threadpool; hop onto this socket's loop
        if can_watch(principal, event):
            loop.call_soon_threadsafe(queue.put_nowait, event)

    # subscribed before accept so no change published after the handshake is missed
    unsubscribe = balance_notifier.subscribe(enqueue)
    sender = None
    try:
        await websocket.accept()
        sender = asyncio.create_task(_forward(websocket, queue))
        logger.info("Balance socket connected: staff %s", principal.staff_id)

        while True:
            # inbound frames are ignored; receiving surfaces the disconnect
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.info("Balance socket disconnected: staff %s", principal.staff_id)
    finally:
        if sender is not None:
            sender.cancel()
        unsubscribe()
