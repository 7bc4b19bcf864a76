from sqlalchemy import Column, BigInteger, String
from .config import settings
from .database import Base

class TimeRecord(Base):
    __tablename__ = settings.TABLE_NAME
    user_id = Column(String(255), primary_key=True, index=True)
    total_watchtime = Column(BigInteger, nullable=False, default=0)
