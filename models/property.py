from sqlalchemy import Column, DateTime, Integer, Numeric, String, func

from database import Base, utcnow


class Property(Base):
    __tablename__ = "properties"

    id = Column(String(64), primary_key=True, index=True)
    address = Column(String(512), nullable=False)
    city = Column(String(128), nullable=False)
    postcode = Column(String(16), nullable=False, index=True)
    landlord_name = Column(String(256), nullable=False)
    landlord_email = Column(String(320), nullable=True)
    monthly_rent = Column(Numeric(12, 2), nullable=False)
    bedrooms = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
