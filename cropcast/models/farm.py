"""Farm, Field and farm-scoped Crop models."""
import enum
import uuid

from sqlalchemy import CheckConstraint, Column, Date, DateTime, Enum, Float, ForeignKey, String, Uuid
from sqlalchemy.orm import relationship

from cropcast.database import Base
from cropcast.models.base import JSONType, utcnow


class SoilType(str, enum.Enum):
    CLAY = "Clay"
    SANDY = "Sandy"
    LOAMY = "Loamy"
    SILTY = "Silty"
    PEATY = "Peaty"
    CHALKY = "Chalky"
    MIXED = "Mixed"


class CropStage(str, enum.Enum):
    PLANNING = "planning"
    PLANTING = "planting"
    GROWING = "growing"
    FLOWERING = "flowering"
    HARVESTING = "harvesting"


class Farm(Base):
    __tablename__ = "farms"
    __table_args__ = (CheckConstraint("area_size >= 0", name="ck_farms_area_size"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    location = Column(String(255), nullable=False, default="")
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    area_size = Column(Float, nullable=False, default=0)
    soil_type = Column(String(100), nullable=False, default="")  # free text on farms
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    owner = relationship("User", back_populates="farms")
    fields = relationship("Field", back_populates="farm", cascade="all, delete-orphan", passive_deletes=True)
    crops = relationship("Crop", back_populates="farm", cascade="all, delete-orphan", passive_deletes=True)

    def __repr__(self):
        return f"<Farm(id={self.id}, name='{self.name}')>"


class Field(Base):
    __tablename__ = "fields"
    __table_args__ = (CheckConstraint("area_size >= 0", name="ck_fields_area_size"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    farm_id = Column(Uuid, ForeignKey("farms.id", ondelete="CASCADE"), nullable=False, index=True)
    field_name = Column(String(200), nullable=False)
    soil_type = Column(
        Enum(
            SoilType,
            name="soil_type",
            native_enum=False,
            values_callable=lambda enum_cls: [e.value for e in enum_cls],
        ),
        nullable=False,
    )
    field_location = Column(String(255), nullable=False, default="")
    area_size = Column(Float, nullable=False, default=0)
    # ordered, duplicates allowed
    previous_crops = Column(JSONType, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    farm = relationship("Farm", back_populates="fields")
    recommendations = relationship(
        "CropRecommendation", back_populates="field", cascade="all, delete-orphan", passive_deletes=True
    )

    def __repr__(self):
        return f"<Field(id={self.id}, field_name='{self.field_name}')>"


class Crop(Base):
    __tablename__ = "crops"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    farm_id = Column(Uuid, ForeignKey("farms.id", ondelete="CASCADE"), nullable=False, index=True)
    crop_type = Column(String(100), nullable=False)
    variety = Column(String(100), nullable=False, default="")
    current_stage = Column(
        Enum(
            CropStage,
            name="crop_stage",
            native_enum=False,
            values_callable=lambda enum_cls: [e.value for e in enum_cls],
        ),
        nullable=False,
        default=CropStage.PLANNING,
    )
    planting_date = Column(Date, nullable=True)
    expected_harvest_date = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    farm = relationship("Farm", back_populates="crops")
