import asyncio
import logging
from datetime import datetime
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, WebSocket, WebSocketDisconnect
from fastapi.responses import HTMLResponse, PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession

from cloud_kitchen.config import settings
from cloud_kitchen.crud.order import create_order, delete_order, get_order_by_id, get_orders
from cloud_kitchen.crud.order import get_orders_summary_stats, update_order
from cloud_kitchen.crud.restaurant import get_restaurant_or_default
from cloud_kitchen.db.session import AsyncSessionLocal, get_async_session
from cloud_kitchen.schemas.order import OrderCreate, OrderRead, OrderUpdate
from cloud_kitchen.services.order_feed import OrderWatcher
from cloud_kitchen.services.receipts import build_bill, build_kot
from cloud_kitchen.services.thermal_printer import generate_print_html

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/orders", tags=["orders"])

# сколько последних заказов сравнивает live-лента
LIVE_FEED_WINDOW = 50


@router.get("/", response_model=List[OrderRead])
async def list_orders(
    status: Optional[str] = Query(None, description="Фильтр по статусу"),
    date_from: Optional[datetime] = Query(None, description="Начальная дата"),
    date_to: Optional[datetime] = Query(None, description="Конечная дата"),
    limit: Optional[int] = Query(None, description="Количество записей для вывода"),
    offset: Optional[int] = Query(None, description="Смещение для пагинации"),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Возвращает список заказов, новые первыми.
    Поддерживает фильтрацию по статусу и диапазону дат и пагинацию.
    """
    orders = await get_orders(
        db, status=status, date_from=date_from, date_to=date_to, limit=limit, offset=offset
    )
    return [OrderRead.from_orm_with_count(o) for o in orders]


@router.get("/stats/summary")
async def get_orders_summary(db: AsyncSession = Depends(get_async_session)):
    """
    Общая статистика по заказам:
    - количество заказов
    - общая выручка
    - средний чек
    - непросмотренные заказы и разбивка по статусам
    """
    return await get_orders_summary_stats(db)


@router.websocket("/live")
async def orders_live_feed(websocket: WebSocket):
    """
    Live-лента для админки: сначала snapshot последних заказов,
    затем {"type": "new_orders", "orders": [...]} при появлении новых.
    Любое сообщение от клиента только продлевает соединение.
    """
    await websocket.accept()
    watcher = OrderWatcher()
    try:
        while True:
            async with AsyncSessionLocal() as db:
                orders = await get_orders(db, limit=LIVE_FEED_WINDOW)
            payload = [OrderRead.from_orm_with_count(o).model_dump(mode="json") for o in orders]

            if not watcher.primed:
                watcher.diff(o.id for o in orders)
                await websocket.send_json({"type": "snapshot", "orders": payload})
            else:
                new_ids = set(watcher.diff(o.id for o in orders))
                if new_ids:
                    logger.info("Live feed: %s new order(s)", len(new_ids))
                    await websocket.send_json(
                        {"type": "new_orders", "orders": [o for o in payload if o["id"] in new_ids]}
                    )

            try:
                await asyncio.wait_for(websocket.receive_text(), timeout=settings.ORDER_FEED_INTERVAL)
            except asyncio.TimeoutError:
                pass
    except WebSocketDisconnect:
        logger.debug("Live feed client disconnected")


@router.get("/{order_id}", response_model=OrderRead)
async def get_order(
    order_id: int = Path(..., description="ID заказа"),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Возвращает детализацию заказа по id.
    """
    order = await get_order_by_id(db, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return OrderRead.from_orm_with_count(order)


@router.post("/", response_model=OrderRead, status_code=201)
async def create_order_endpoint(order_in: OrderCreate, db: AsyncSession = Depends(get_async_session)):
    """
    Заказ из админки. Номер и суммы, если не заданы, считаются на сервере.
    """
    restaurant = await get_restaurant_or_default(db)
    try:
        order = await create_order(db, order_in, restaurant=restaurant, tax_rate=settings.TAX_RATE)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return OrderRead.from_orm_with_count(order)


@router.patch("/{order_id}", response_model=OrderRead)
async def patch_order_endpoint(
    order_id: int,
    order_in: OrderUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    """
    Частичное обновление заказа: статус, оплата, is_viewed, позиции и т.д.
    """
    order = await update_order(db, order_id, order_in)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return OrderRead.from_orm_with_count(order)


@router.delete("/{order_id}", status_code=204)
async def remove_order(order_id: int, session: AsyncSession = Depends(get_async_session)):
    """
    Удаляет заказ вместе с позициями.
    """
    deleted = await delete_order(session, order_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Order not found")


def _print_response(content: str, fmt: str):
    if fmt == "html":
        return HTMLResponse(content=generate_print_html(content))
    return PlainTextResponse(content)


@router.get("/{order_id}/bill")
async def print_bill(
    order_id: int,
    format: Literal["text", "html"] = Query("text", description="text | html (страница для печати)"),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Счёт (tax invoice) для термопринтера 58 мм.
    """
    order = await get_order_by_id(db, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    restaurant = await get_restaurant_or_default(db)
    return _print_response(build_bill(order, restaurant, tax_rate=settings.TAX_RATE), format)


@router.get("/{order_id}/kot")
async def print_kot(
    order_id: int,
    format: Literal["text", "html"] = Query("text", description="text | html (страница для печати)"),
    db: AsyncSession = Depends(get_async_session),
):
    """
    KOT для кухни: позиции, опции и пожелания без цен.
    """
    order = await get_order_by_id(db, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    restaurant = await get_restaurant_or_default(db)
    return _print_response(build_kot(order, restaurant), format)
