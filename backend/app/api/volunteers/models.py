import enum
import uuid
from sqlalchemy import (
    Column,
    Date,
    Enum,
    Integer,
    String,
    Uuid,
)
from sqlalchemy.orm import relationship

from app.db.base import AbstractSQLModel
from app.db.mixins import ActiveFlagMixin, TimestampsMixin


class Branches(enum.Enum):
    EXCS = "EXCS"
    CMPN = "CMPN"
    IT = "IT"
    BIO_MED = "BIO-MED"
    EXTC = "EXTC"


class StudyYears(enum.Enum):
    FE = "FE"
    SE = "SE"
    TE = "TE"


class Genders(enum.Enum):
    male = "M"
    female = "F"
    undisclosed = "Prefer not to say"


def enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Volunteers(AbstractSQLModel, TimestampsMixin, ActiveFlagMixin):
    __tablename__ = "volunteers"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    auth_user_id = Column(Uuid, nullable=True, unique=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    roll_number = Column(String(20), nullable=False, unique=True)
    email = Column(String(255), nullable=False, unique=True)
    branch = Column(
        Enum(Branches, name="branch", values_callable=enum_values), nullable=False
    )
    year = Column(
        Enum(StudyYears, name="study_year", values_callable=enum_values),
        nullable=False,
    )
    phone_no = Column(String(10), nullable=True)
    birth_date = Column(Date, nullable=True)
    gender = Column(
        Enum(Genders, name="gender", values_callable=enum_values), nullable=True
    )
    nss_join_year = Column(Integer, nullable=True)
    address = Column(String, nullable=True)
    profile_pic = Column(String, nullable=True)

    roles = relationship(
        "UserRoles",
        back_populates="volunteer",
        foreign_keys="UserRoles.volunteer_id",
        uselist=True,
    )
    participations = relationship(
        "EventParticipation",
        back_populates="volunteer",
        foreign_keys="EventParticipation.volunteer_id",
        uselist=True,
    )

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"

    def __repr__(self):
        return f"<Volunteer {self.roll_number}>"
