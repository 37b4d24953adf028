import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean, CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from journey_share.database import Base
from journey_share.visuals import Icon, IconVisual, ImageVisual, Visual


def _new_id():
    return str(uuid.uuid4())


def _utcnow():
    return datetime.now(timezone.utc)


class Journey(Base):
    __tablename__ = "journeys"

    id = Column(String, primary_key=True, default=_new_id)
    title = Column(String, nullable=False)
    paid = Column(Boolean, nullable=False, default=False)
    shareable_token = Column(String, unique=True, index=True, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)

    stops = relationship(
        "Stop",
        back_populates="journey",
        order_by="Stop.order",
        cascade="all, delete-orphan",
    )


class Stop(Base):
    __tablename__ = "stops"
    __table_args__ = (
        UniqueConstraint("journey_id", "order", name="uq_stops_journey_order"),
        CheckConstraint(
            "(image_url IS NULL) <> (icon_name IS NULL)",
            name="ck_stops_image_xor_icon",
        ),
    )

    id = Column(String, primary_key=True, default=_new_id)
    journey_id = Column(String, ForeignKey("journeys.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    note = Column(Text, nullable=True)
    image_url = Column(String, nullable=True)
    icon_name = Column(String, nullable=True)     # canonical Icon value
    external_url = Column(String, nullable=True)
    order = Column(Integer, nullable=False)

    journey = relationship("Journey", back_populates="stops")

    @property
    def visual(self) -> Visual:
        if self.image_url is not None:
            return ImageVisual(url=self.image_url)
        return IconVisual(icon=Icon(self.icon_name))

    @visual.setter
    def visual(self, value: Visual):
        if isinstance(value, ImageVisual):
            self.image_url, self.icon_name = value.url, None
        else:
            self.image_url, self.icon_name = None, value.icon.value
