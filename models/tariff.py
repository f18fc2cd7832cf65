"""Cost and sale tariff models."""
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, JSON, UniqueConstraint

from models.database import Base


class CostTariff(Base):
    """Carrier demurrage/detention schedule charged to the company."""

    __tablename__ = "cost_tariffs"
    __table_args__ = (
        UniqueConstraint("carrier", "container_class", name="uq_cost_tariff_carrier_class"),
    )

    id = Column(Integer, primary_key=True, index=True)

    carrier = Column(String(100), nullable=False, index=True)
    container_class = Column(String(20), nullable=False)

    # [{"start": 1, "end": 5, "rate": 75.0}, {"start": 6, "end": null, "rate": 150.0}]
    tiers = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<CostTariff(carrier='{self.carrier}', class='{self.container_class}')>"


class SaleTariff(Base):
    """Schedule charged to customers, one per container class."""

    __tablename__ = "sale_tariffs"

    id = Column(Integer, primary_key=True, index=True)

    container_class = Column(String(20), nullable=False, unique=True)
    tiers = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<SaleTariff(class='{self.container_class}')>"
