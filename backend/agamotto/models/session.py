# agamotto/models/session.py
from sqlalchemy import Column, String, BigInteger, Float, Text, Enum as SQLEnum, JSON
import uuid
import enum
from ..database import Base

class SessionState(str, enum.Enum):
    """Lifecycle state of a tracked session"""
    NOT_STARTED = "not_started"
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    ABORTED = "aborted"

# Only one session may be in one of these states at any time
LIVE_STATES = (SessionState.ACTIVE, SessionState.PAUSED)

class Session(Base):
    """
    Represents one tracked unit of time
    The tag is stored by value: a snapshot of the Tag at assignment time
    """
    __tablename__ = "sessions"
    
    # Primary key
    id = Column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    
    title = Column(String(255), nullable=False, default="")
    duration = Column(BigInteger, nullable=False, default=0)  # Milliseconds
    rating = Column(Float, nullable=False, default=0)  # 0-5
    comment = Column(Text, nullable=False, default="")
    
    # Session start, Unix epoch milliseconds (de-duplication key for imports)
    timestamp = Column(BigInteger, nullable=False, index=True)
    
    state = Column(SQLEnum(SessionState), nullable=False, default=SessionState.NOT_STARTED, index=True)
    
    # Embedded tag snapshot (JSON field)
    tag = Column(JSON, nullable=True)
    # Example structure:
    # {
    #   "name": "fitness",
    #   "color": "#DC2626",
    #   "date_created": 1769500800000,
    #   "date_last_used": 1769500800000,
    #   "total_instances": 0
    # }
    
    def __repr__(self):
        return f"<Session {self.id} state={self.state} timestamp={self.timestamp}>"
