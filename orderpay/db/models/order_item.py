"""OrderItem model definition."""

from sqlalchemy import Column, String, Numeric, Integer, ForeignKey, JSON
from sqlalchemy.orm import relationship

from .base import Base

class OrderItem(Base):
    """OrderItem model. Menu columns are null for standalone products."""
    
    __tablename__ = 'order_items'
    
    id = Column(String, primary_key=True)
    orderId = Column(String, ForeignKey('orders.id'), nullable=False)
    lineIndex = Column(Integer, nullable=False, default=0)
    productId = Column(String)
    productName = Column(String)
    productPrice = Column(Numeric, nullable=False, default=0)
    productTax = Column(Numeric, nullable=False, default=0)
    productDiscount = Column(Numeric, nullable=False, default=0)
    productPriority = Column(Integer, default=0)
    variantId = Column(String)
    variantName = Column(String)
    variantPrice = Column(Numeric, nullable=False, default=0)
    complements = Column(JSON)
    printers = Column(JSON)
    quantity = Column(Integer, nullable=False, default=1)
    totalPrice = Column(Numeric, default=0)
    menuId = Column(String)
    menuSecondaryId = Column(Integer)
    menuName = Column(String)
    menuPrice = Column(Numeric)
    menuTax = Column(Numeric)
    supplement = Column(Numeric)
    menuPageId = Column(String)
    menuPageName = Column(String)
    
    order = relationship('Order', back_populates='items')
    
    def __repr__(self):
        """Return string representation."""
        return f'<OrderItem(id="{self.id}", order="{self.orderId}", product="{self.productName}")>'
