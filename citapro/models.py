from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

ROLE_CLIENT = "cliente"
ROLE_PROFESSIONAL = "profesional"
USER_ROLES = (ROLE_CLIENT, ROLE_PROFESSIONAL)

# Python weekday() order: Monday == 0
DAYS_OF_WEEK = ("lunes", "martes", "miercoles", "jueves", "viernes", "sabado", "domingo")

# Keep in step with appointments.state_machine.SLOT_HOLDING_STATUSES
SLOT_HOLDING_FILTER = "status IN ('pendiente_pago', 'pagada', 'pendiente_aceptacion', 'aceptada')"

NOTIFICATION_TYPES = (
    "pago_realizado",
    "cita_aceptada",
    "cita_rechazada",
    "cita_cancelada",
    "recordatorio_cita",
    "cita_completada",
)


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True, index=True)
    firebase_uid = Column(String(255), unique=True, index=True, nullable=False)
    full_name = Column(String(255), nullable=False, default="")
    email = Column(String(255), unique=True, index=True, nullable=False)
    role = Column(String(20), nullable=False, default=ROLE_CLIENT)  # cliente | profesional
    avatar_url = Column(String(500), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    professional = relationship("Professional", back_populates="user", uselist=False)
    google_calendar = relationship(
        "GoogleCalendarIntegration", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<Profile id={self.id} {self.email} role={self.role}>"


class Professional(Base):
    __tablename__ = "professionals"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("profiles.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    profession = Column(String(255), nullable=False)
    bio = Column(Text, nullable=True)
    price_per_hour = Column(Float, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("Profile", back_populates="professional", lazy="joined")
    availabilities = relationship(
        "Availability", back_populates="professional", cascade="all, delete-orphan"
    )

    __table_args__ = (Index("ix_professionals_is_active", "is_active"),)

    def __repr__(self):
        return f"<Professional id={self.id} user={self.user_id} [{self.profession}]>"


class Availability(Base):
    """Recurring weekly window a professional takes bookings in"""

    __tablename__ = "availabilities"

    id = Column(Integer, primary_key=True, index=True)
    professional_id = Column(
        Integer, ForeignKey("professionals.id", ondelete="CASCADE"), nullable=False
    )
    day_of_week = Column(String(10), nullable=False)  # lunes..domingo
    start_time = Column(String(5), nullable=False)  # "HH:MM"
    end_time = Column(String(5), nullable=False)  # "HH:MM"
    slot_duration_minutes = Column(Integer, nullable=False, default=60)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    professional = relationship("Professional", back_populates="availabilities")

    __table_args__ = (Index("ix_availabilities_professional_active", "professional_id", "is_active"),)


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    professional_id = Column(
        Integer, ForeignKey("professionals.id", ondelete="CASCADE"), nullable=False
    )
    appointment_date = Column(Date, nullable=False)
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)
    status = Column(String(30), nullable=False, default="pendiente_pago")
    cancellation_reason = Column(Text, nullable=True)
    google_event_id = Column(String(255), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    client = relationship("Profile", foreign_keys=[client_id], lazy="joined")
    professional = relationship("Professional", foreign_keys=[professional_id], lazy="joined")
    payments = relationship("Payment", back_populates="appointment", cascade="all, delete-orphan")

    __table_args__ = (
        Index("ix_appointments_professional_date", "professional_id", "appointment_date"),
        Index("ix_appointments_client", "client_id"),
        Index("ix_appointments_status", "status"),
        # One slot-holding appointment per professional and start time
        Index(
            "uq_appointments_held_slot",
            "professional_id",
            "appointment_date",
            "start_time",
            unique=True,
            sqlite_where=text(SLOT_HOLDING_FILTER),
            postgresql_where=text(SLOT_HOLDING_FILTER),
        ),
    )

    def __repr__(self):
        return (
            f"<Appointment id={self.id} pro={self.professional_id} client={self.client_id} "
            f"at={self.appointment_date} {self.start_time} status={self.status}>"
        )


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    appointment_id = Column(
        Integer, ForeignKey("appointments.id", ondelete="CASCADE"), nullable=False
    )
    amount = Column(Float, nullable=False)
    payment_reference = Column(String(100), unique=True, nullable=False)
    payment_date = Column(DateTime, server_default=func.now())

    appointment = relationship("Appointment", back_populates="payments")


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    type = Column(String(30), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)
    appointment_id = Column(
        Integer, ForeignKey("appointments.id", ondelete="SET NULL"), nullable=True
    )
    created_at = Column(DateTime, server_default=func.now())

    __table_args__ = (
        Index("ix_notifications_user_read", "user_id", "is_read"),
        Index("ix_notifications_created_at", "created_at"),
    )


class ChatMessage(Base):
    __tablename__ = "chat_messages"

    id = Column(Integer, primary_key=True, index=True)
    appointment_id = Column(
        Integer, ForeignKey("appointments.id", ondelete="CASCADE"), nullable=False
    )
    sender_id = Column(Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    message = Column(Text, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    sender = relationship("Profile", lazy="joined")

    __table_args__ = (Index("ix_chat_messages_appointment_created", "appointment_id", "created_at"),)


# Registered here so Profile.google_calendar resolves without importing main
from .models_google_calendar import GoogleCalendarIntegration  # noqa: E402,F401
