"""Order model definition."""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, Integer, Boolean
from sqlalchemy.orm import relationship

from .base import Base

class Order(Base):
    """Order model.

    ``paymentType`` holds the serialized payment ledger.
    """
    
    __tablename__ = 'orders'
    
    id = Column(String, primary_key=True)
    orderId = Column(Integer)
    status = Column(String, nullable=False, default='pending')
    orderType = Column(String)
    paymentType = Column(String, nullable=False, default='pending')
    isPaid = Column(Boolean, nullable=False, default=False)
    deliveryPersonId = Column(String, index=True)
    createdAt = Column(DateTime, nullable=False, default=datetime.utcnow)
    updatedAt = Column(DateTime)
    
    items = relationship(
        'OrderItem',
        back_populates='order',
        order_by='OrderItem.lineIndex',
        cascade='all, delete-orphan'
    )
    
    def __repr__(self):
        """Return string representation."""
        return f'<Order(id="{self.id}", number="{self.orderId}", paymentType="{self.paymentType}")>'
