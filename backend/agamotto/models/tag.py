# agamotto/models/tag.py
from sqlalchemy import Column, String, Integer, BigInteger
from ..database import Base

class Tag(Base):
    """
    Named, uniquely-colored category attachable to a session
    """
    __tablename__ = "tags"
    
    # Primary key (case-sensitive)
    name = Column(String(100), primary_key=True)
    
    # Hex color from the fixed palette
    color = Column(String(7), nullable=False, unique=True)
    
    # Unix epoch milliseconds
    date_created = Column(BigInteger, nullable=False)
    date_last_used = Column(BigInteger, nullable=False, index=True)
    
    # Number of completed sessions carrying this tag
    total_instances = Column(Integer, nullable=False, default=0)
    
    def __repr__(self):
        return f"<Tag {self.name} color={self.color}>"
