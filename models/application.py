from sqlalchemy import Column, DateTime, Numeric, String, func

from database import Base, utcnow


class TenantApplication(Base):
    __tablename__ = "tenant_applications"

    id = Column(String(64), primary_key=True, index=True)
    applicant_name = Column(String(256), nullable=False)
    applicant_phone = Column(String(32), nullable=False)
    # One application per email is enforced at submission, not by the schema
    applicant_email = Column(String(320), nullable=False, index=True)
    card_number = Column(String(64), nullable=False)
    card_expiry_date = Column(String(16), nullable=False)
    amount_paid = Column(Numeric(12, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
