from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy import (
    String, Integer, Boolean, Text, Date, DateTime, Numeric, ForeignKey,
    Index, UniqueConstraint, func
)
from sqlalchemy.dialects.postgresql import TIMESTAMP

class Base(DeclarativeBase):
    pass

# Postgres TIMESTAMP with a generic fallback (for SQLite tests)
TIMESTAMP_TYPE = DateTime(timezone=True).with_variant(TIMESTAMP(timezone=True), 'postgresql')
HOURS_TYPE = Numeric(10, 2)
RATE_TYPE = Numeric(12, 2)

# --- Team Roles ---

class TeamRoleModel(Base):
    __tablename__ = "team_roles"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    billing_rate: Mapped[Decimal] = mapped_column(RATE_TYPE, nullable=False)
    cost_rate: Mapped[Decimal] = mapped_column(RATE_TYPE, nullable=False)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP_TYPE, server_default=func.now())

# --- Users ---

class UserModel(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    email: Mapped[str] = mapped_column(String, nullable=False, unique=True, index=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    role: Mapped[str] = mapped_column(String, server_default='TEAM_MEMBER')
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP_TYPE, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(TIMESTAMP_TYPE, server_default=func.now(), onupdate=func.now())

    # Relationships
    skills: Mapped[List["UserSkillModel"]] = relationship(back_populates="user")
    team_roles: Mapped[List["UserTeamRoleModel"]] = relationship(back_populates="user")


class UserTeamRoleModel(Base):
    """History of team roles held by a user; one row per user is current."""
    __tablename__ = "user_team_roles"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    team_role_id: Mapped[str] = mapped_column(ForeignKey("team_roles.id"), nullable=False)
    is_current: Mapped[bool] = mapped_column(Boolean, server_default='1')
    start_date: Mapped[Optional[date]] = mapped_column(Date)
    end_date: Mapped[Optional[date]] = mapped_column(Date)

    user: Mapped["UserModel"] = relationship(back_populates="team_roles")
    team_role: Mapped["TeamRoleModel"] = relationship()

# --- Skills ---

class SkillModel(Base):
    __tablename__ = "skills"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    category: Mapped[Optional[str]] = mapped_column(String)
    description: Mapped[Optional[str]] = mapped_column(Text)


class UserSkillModel(Base):
    __tablename__ = "user_skills"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    skill_id: Mapped[str] = mapped_column(ForeignKey("skills.id"), nullable=False)
    proficiency_level: Mapped[str] = mapped_column(String, server_default='BEGINNER')
    certified: Mapped[bool] = mapped_column(Boolean, server_default='0')

    user: Mapped["UserModel"] = relationship(back_populates="skills")
    skill: Mapped["SkillModel"] = relationship()

    __table_args__ = (
        UniqueConstraint('user_id', 'skill_id', name='uq_user_skill'),
    )

# --- Activities ---

class ActivityModel(Base):
    __tablename__ = "activities"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    type: Mapped[str] = mapped_column(String, server_default='PROJECT', index=True)
    status: Mapped[str] = mapped_column(String, server_default='PLANNING', index=True)
    start_date: Mapped[Optional[date]] = mapped_column(Date)
    end_date: Mapped[Optional[date]] = mapped_column(Date)
    budget_hours: Mapped[Optional[Decimal]] = mapped_column(HOURS_TYPE)
    budget_cost: Mapped[Optional[Decimal]] = mapped_column(RATE_TYPE)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP_TYPE, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(TIMESTAMP_TYPE, server_default=func.now(), onupdate=func.now())

    scopes: Mapped[List["ScopeModel"]] = relationship(back_populates="activity")
    requirements: Mapped[List["ProjectRequirementModel"]] = relationship(back_populates="activity")


class ScopeModel(Base):
    __tablename__ = "scopes"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    activity_id: Mapped[str] = mapped_column(ForeignKey("activities.id"), nullable=False, index=True)
    team_role_id: Mapped[str] = mapped_column(ForeignKey("team_roles.id"), nullable=False)
    allocated_hours: Mapped[Decimal] = mapped_column(HOURS_TYPE, nullable=False)
    billing_rate_override: Mapped[Optional[Decimal]] = mapped_column(RATE_TYPE)
    cost_rate_override: Mapped[Optional[Decimal]] = mapped_column(RATE_TYPE)

    activity: Mapped["ActivityModel"] = relationship(back_populates="scopes")
    team_role: Mapped["TeamRoleModel"] = relationship()


class ProjectRequirementModel(Base):
    __tablename__ = "project_requirements"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    activity_id: Mapped[str] = mapped_column(ForeignKey("activities.id"), nullable=False, index=True)
    skill_name: Mapped[str] = mapped_column(String, nullable=False)
    required_level: Mapped[str] = mapped_column(String, nullable=False)
    priority: Mapped[int] = mapped_column(Integer, server_default='1')
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP_TYPE, server_default=func.now())

    activity: Mapped["ActivityModel"] = relationship(back_populates="requirements")

# --- Assignments ---

class AssignmentModel(Base):
    __tablename__ = "assignments"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    activity_id: Mapped[str] = mapped_column(ForeignKey("activities.id"), nullable=False, index=True)
    # Hours per week
    allocated_hours: Mapped[Decimal] = mapped_column(HOURS_TYPE, nullable=False)
    start_date: Mapped[Optional[date]] = mapped_column(Date)
    end_date: Mapped[Optional[date]] = mapped_column(Date)
    status: Mapped[str] = mapped_column(String, server_default='PENDING', index=True)
    billing_rate_override: Mapped[Optional[Decimal]] = mapped_column(RATE_TYPE)
    cost_rate_override: Mapped[Optional[Decimal]] = mapped_column(RATE_TYPE)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP_TYPE, server_default=func.now())

    __table_args__ = (
        Index('ix_assignments_user_window', 'user_id', 'start_date', 'end_date'),
    )

# --- Time Entries ---

class TimeEntryModel(Base):
    __tablename__ = "time_entries"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    activity_id: Mapped[str] = mapped_column(ForeignKey("activities.id"), nullable=False, index=True)
    entry_date: Mapped[date] = mapped_column("date", Date, nullable=False, index=True)
    hours: Mapped[Decimal] = mapped_column(HOURS_TYPE, nullable=False)
    status: Mapped[str] = mapped_column(String, server_default='DRAFT', index=True)
    billable_amount: Mapped[Optional[Decimal]] = mapped_column(RATE_TYPE)
    cost_amount: Mapped[Optional[Decimal]] = mapped_column(RATE_TYPE)
    description: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP_TYPE, server_default=func.now())
