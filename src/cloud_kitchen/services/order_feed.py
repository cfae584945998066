from typing import Iterable, List, Optional, Set


class OrderWatcher:
    """
    Определяет новые заказы между двумя снимками списка.

    Первый вызов diff() только запоминает ID и ничего не возвращает:
    заказы, уже существовавшие при открытии экрана, новыми не считаются.
    """

    def __init__(self, known_ids: Optional[Iterable[int]] = None):
        self._known: Optional[Set[int]] = set(known_ids) if known_ids is not None else None

    @property
    def primed(self) -> bool:
        return self._known is not None

    def diff(self, order_ids: Iterable[int]) -> List[int]:
        current = list(order_ids)
        if self._known is None:
            self._known = set(current)
            return []
        new_ids = [order_id for order_id in current if order_id not in self._known]
        self._known.update(new_ids)
        return new_ids
