import random
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from cloud_kitchen.crud.base import model_values
from cloud_kitchen.models import Order, OrderItem, OrderStatusEnum, OrderTypeEnum, PaymentMethodEnum
from cloud_kitchen.schemas.cart import CartTotals
from cloud_kitchen.schemas.order import OrderCreate, OrderItemCreate, OrderUpdate
from cloud_kitchen.services.cart import Cart, compute_totals

ITEM_JSON_FIELDS = ("selected_customizations",)
ORDER_NUMBER_ATTEMPTS = 3


def generate_order_number(now: Optional[datetime] = None, rng: Optional[random.Random] = None) -> str:
    """
    Номер заказа: ORD-YYYYMMDD-HHMMSS-XXX, XXX - случайный суффикс 000-999.
    """
    now = now or datetime.now()
    suffix = (rng or random).randint(0, 999)
    return f"ORD-{now:%Y%m%d}-{now:%H%M%S}-{suffix:03d}"


def _build_items(items_in: List[OrderItemCreate]) -> List[OrderItem]:
    return [OrderItem(**model_values(item, ITEM_JSON_FIELDS)) for item in items_in]


async def get_orders(
    db: AsyncSession,
    status: Optional[str] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
) -> List[Order]:
    """
    Возвращает список заказов с опциональной фильтрацией по статусу и дате.
    Сортируем по created_at (новые первыми).
    """
    stmt = (
        select(Order)
        .options(selectinload(Order.items))
        .order_by(Order.created_at.desc(), Order.id.desc())
    )

    if status:
        stmt = stmt.where(Order.status == status)
    if date_from:
        stmt = stmt.where(Order.created_at >= date_from)
    if date_to:
        stmt = stmt.where(Order.created_at <= date_to)
    if limit:
        stmt = stmt.limit(limit)
    if offset:
        stmt = stmt.offset(offset)

    result = await db.execute(stmt)
    return result.scalars().unique().all()


async def get_order_by_id(db: AsyncSession, order_id: int) -> Optional[Order]:
    """
    Возвращает заказ по ID с подгруженными items.
    """
    stmt = select(Order).where(Order.id == order_id).options(selectinload(Order.items))
    result = await db.execute(stmt)
    return result.scalars().unique().first()


async def _insert_order(db: AsyncSession, order: Order, generated_number: bool) -> Order:
    """
    Сохраняет заказ. Сгенерированный номер при коллизии перегенерируется,
    номер, заданный вручную, даёт ValueError.
    """
    for attempt in range(ORDER_NUMBER_ATTEMPTS):
        db.add(order)
        try:
            await db.commit()
            return order
        except IntegrityError:
            await db.rollback()
            if not generated_number or attempt == ORDER_NUMBER_ATTEMPTS - 1:
                raise ValueError(f"Order number '{order.order_number}' already exists")
            order.order_number = generate_order_number()
    return order


async def create_order(
    db: AsyncSession,
    order_in: OrderCreate,
    restaurant: Optional[Any] = None,
    tax_rate: Decimal = Decimal("0.05"),
) -> Order:
    """
    Создаём заказ из админки вместе с позициями.
    Отсутствующие суммы считаем по позициям (скидка по discount_type/value, налог по GST ресторана).
    """
    data = order_in.model_dump(exclude={"items"})
    items = _build_items(order_in.items)

    computed = compute_totals(
        sum((item.price * item.quantity for item in order_in.items), Decimal("0")),
        restaurant,
        tax_rate,
        discount_type=order_in.discount_type,
        discount_value=order_in.discount_value,
        coupon_code=order_in.coupon_code,
    )
    for field in ("subtotal", "discount", "tax", "total"):
        if data[field] is None:
            data[field] = getattr(computed, field)

    generated = not data.get("order_number")
    if generated:
        data["order_number"] = generate_order_number()

    order = Order(**data, items=items)
    return await _insert_order(db, order, generated)


async def create_order_from_cart(
    db: AsyncSession,
    cart: Cart,
    totals: CartTotals,
    customer_name: str,
    customer_phone: Optional[str],
    customer_address: Optional[str],
    online_payment: bool = False,
) -> Order:
    """
    Заказ с витрины. Онлайн-оплата: статус payment_pending до ответа шлюза,
    иначе pending и оплата наличными.
    """
    items = [
        OrderItem(
            dish_id=line.dish_id,
            dish_name=line.dish_name,
            quantity=line.quantity,
            price=line.price,
            original_price=line.original_price if line.original_price != line.price else None,
            dish_discount_type=line.dish_discount_type,
            dish_discount_value=line.dish_discount_value,
            is_veg=line.is_veg,
            notes=line.notes,
            variant_id=line.variant_id,
            variant_name=line.variant_name,
            selected_customizations=[c.model_dump(mode="json") for c in line.selected_customizations],
        )
        for line in cart.lines
    ]

    order = Order(
        order_number=generate_order_number(),
        customer_name=customer_name or "Customer",
        customer_phone=customer_phone,
        customer_address=customer_address,
        items=items,
        subtotal=totals.subtotal,
        discount=totals.discount,
        discount_type=totals.discount_type,
        discount_value=totals.discount_value,
        coupon_code=totals.coupon_code,
        tax=totals.tax,
        total=totals.total,
        status=OrderStatusEnum.payment_pending if online_payment else OrderStatusEnum.pending,
        order_type=OrderTypeEnum.delivery,
        notes="Order placed via Customer Web",
        created_by="customer",
        is_paid=False,
        is_viewed=False,
        payment_method=PaymentMethodEnum.online if online_payment else PaymentMethodEnum.cash,
    )
    return await _insert_order(db, order, generated_number=True)


async def update_order(db: AsyncSession, order_id: int, order_in: OrderUpdate) -> Optional[Order]:
    """
    Частичное обновление заказа. items, если переданы, заменяют позиции целиком.
    Переходы статусов не ограничены.
    """
    order = await get_order_by_id(db, order_id)
    if not order:
        return None

    update_data = order_in.model_dump(exclude_unset=True, exclude={"items"})
    for field, value in update_data.items():
        setattr(order, field, value)

    if order_in.items is not None:
        order.items = _build_items(order_in.items)

    await db.commit()
    return order


async def set_payment_result(
    db: AsyncSession,
    order_id: int,
    paid: bool,
    details: Dict[str, Any],
) -> Optional[Order]:
    """
    Результат онлайн-оплаты: успех - оплачен и pending для кухни,
    неудача - payment_failed и is_paid=False.
    """
    order = await get_order_by_id(db, order_id)
    if not order:
        return None

    if paid:
        order.status = OrderStatusEnum.pending
        order.is_paid = True
        order.payment_method = PaymentMethodEnum.online
    else:
        order.status = OrderStatusEnum.payment_failed
        order.is_paid = False
    order.payment_details = {**details, "provider": "phonepe", "updated_at": datetime.now().isoformat()}

    await db.commit()
    return order


async def delete_order(db: AsyncSession, order_id: int) -> bool:
    order = await db.get(Order, order_id)
    if not order:
        return False
    await db.delete(order)
    await db.commit()
    return True


async def get_orders_summary_stats(db: AsyncSession) -> Dict[str, Any]:
    """
    Общая статистика по заказам (отменённые и неоплаченные онлайн не считаем):
    - количество заказов
    - общая выручка
    - средний чек
    - новые (непросмотренные) заказы
    """
    excluded = (OrderStatusEnum.cancelled, OrderStatusEnum.payment_failed, OrderStatusEnum.payment_pending)
    stmt = select(
        func.count(Order.id).label("count_orders"),
        func.sum(Order.total).label("total_revenue"),
    ).where(Order.status.notin_(excluded))
    row = (await db.execute(stmt)).first()

    count_orders = row.count_orders or 0
    total_revenue = Decimal(str(row.total_revenue or 0))
    average_check = total_revenue / count_orders if count_orders > 0 else Decimal(0)

    unviewed = await db.scalar(select(func.count(Order.id)).where(Order.is_viewed.is_(False)))
    by_status_rows = await db.execute(select(Order.status, func.count(Order.id)).group_by(Order.status))

    return {
        "count_orders": count_orders,
        "total_revenue": total_revenue.quantize(Decimal("0.01")),
        "average_check": round(average_check, 2),
        "unviewed_orders": unviewed or 0,
        "by_status": {getattr(status, "value", status): count for status, count in by_status_rows.all()},
    }


async def attach_payment_transaction(db: AsyncSession, order: Order, transaction_id: str) -> Order:
    order.payment_transaction_id = transaction_id
    await db.commit()
    return order


async def get_order_by_transaction(db: AsyncSession, transaction_id: str) -> Optional[Order]:
    stmt = select(Order).where(Order.payment_transaction_id == transaction_id)
    result = await db.execute(stmt)
    return result.scalars().first()
