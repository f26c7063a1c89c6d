"""Record model definitions."""

from sqlalchemy import Column, Date, ForeignKey, Integer, Text

from productivity_backend.database import Base


class Record(Base):
    """A task completed by a user on a given day."""
    __tablename__ = "records"

    id = Column(Integer, primary_key=True)
    date = Column(Date, nullable=False)
    task = Column(Text, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
