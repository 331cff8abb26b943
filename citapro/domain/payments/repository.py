"""Payment repository"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Payment


class PaymentRepository:
    @staticmethod
    def create(db: Session, appointment_id: int, amount: float, payment_reference: str) -> Payment:
        payment = Payment(
            appointment_id=appointment_id, amount=amount, payment_reference=payment_reference
        )
        db.add(payment)
        db.commit()
        db.refresh(payment)
        return payment

    @staticmethod
    def get_for_appointment(db: Session, appointment_id: int) -> Optional[Payment]:
        return (
            db.query(Payment)
            .filter(Payment.appointment_id == appointment_id)
            .order_by(Payment.id.desc())
            .first()
        )
