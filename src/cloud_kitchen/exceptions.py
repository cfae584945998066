class KitchenError(Exception):
    """Базовая ошибка предметной области."""


class CartError(KitchenError):
    """Некорректная позиция корзины: нет блюда, варианта, опции или нарушен min/max."""


class CheckoutError(KitchenError):
    """Оформление заказа невозможно (нет телефона, не настроен WhatsApp и т.п.)."""


class PaymentGatewayError(KitchenError):
    """Платёжный шлюз вернул ошибку или не ответил."""


class NotificationError(KitchenError):
    """Не удалось получить токен доступа к push-сервису."""
