"""Shipment, milestone and container models."""
from datetime import datetime
from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from models.database import Base


class Shipment(Base):
    """Forwarding process with its route and commercial parties."""

    __tablename__ = "shipments"

    id = Column(Integer, primary_key=True, index=True)

    # Process reference shown to operators (e.g. "PROC-00123")
    reference = Column(String(50), unique=True, nullable=False, index=True)

    # Parties
    customer_id = Column(Integer, index=True)
    customer_name = Column(String(255), nullable=False)
    carrier = Column(String(100), nullable=False)

    # Route ("Santos, BR")
    origin = Column(String(255), nullable=False)
    destination = Column(String(255), nullable=False)

    # Schedule
    etd = Column(Date)
    eta = Column(Date)

    # Free text as agreed with the carrier ("7 days", "14 dias")
    free_time = Column(String(50))

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    milestones = relationship("Milestone", back_populates="shipment", order_by="Milestone.id")
    containers = relationship("Container", back_populates="shipment", order_by="Container.id")

    def __repr__(self):
        return f"<Shipment(reference='{self.reference}', carrier='{self.carrier}')>"


class Milestone(Base):
    """Named shipment event with planned and effective dates."""

    __tablename__ = "milestones"

    id = Column(Integer, primary_key=True, index=True)
    shipment_id = Column(Integer, ForeignKey("shipments.id"), nullable=False)

    name = Column(String(255), nullable=False)
    planned_date = Column(Date)
    effective_date = Column(Date)

    shipment = relationship("Shipment", back_populates="milestones")

    def __repr__(self):
        return f"<Milestone(name='{self.name}', effective='{self.effective_date}')>"


class Container(Base):
    """Physical container moved under a shipment."""

    __tablename__ = "containers"
    __table_args__ = (
        UniqueConstraint("shipment_id", "number", name="uq_container_shipment_number"),
    )

    id = Column(Integer, primary_key=True, index=True)
    shipment_id = Column(Integer, ForeignKey("shipments.id"), nullable=False)

    number = Column(String(20), nullable=False, index=True)
    # Free-form type as written on the booking ("40'RF", "20'OT", "40HC")
    container_type = Column(String(50))

    # Overrides the shipment free time when set
    free_time = Column(String(50))

    # Clock dates
    empty_pickup_date = Column(Date)
    effective_return_date = Column(Date)
    gate_in_date = Column(Date)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    shipment = relationship("Shipment", back_populates="containers")

    def __repr__(self):
        return f"<Container(number='{self.number}', type='{self.container_type}')>"
