# FILE: rxdesk/models/misc.py
from sqlalchemy import Column, Integer, String, UniqueConstraint

from rxdesk.db.base import Base

MISC_TYPES = ("drug", "dose", "frequency", "day", "remarks", "test")


class MiscItem(Base):
    """
    Reference vocabulary used by the prescription form pickers.
    """

    __tablename__ = "misc_items"
    __table_args__ = (UniqueConstraint("type", "name",
                                       name="uq_misc_type_name"), )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(191), nullable=False)
    type = Column(String(16), index=True, nullable=False)
