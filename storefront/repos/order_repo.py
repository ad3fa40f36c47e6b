# storefront/repos/order_repo.py
from sqlalchemy import select
from sqlalchemy.orm import Session
from storefront.data.models.order import OrderModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_order(self, order: OrderModel) -> OrderModel:
        #bez commita, zamowienie i zmiany stanow magazynu ida w jednej transakcji
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: str) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def get_order_by_number(self, order_number: str) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel).where(OrderModel.order_number == order_number)
        ).scalar_one_or_none()

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
