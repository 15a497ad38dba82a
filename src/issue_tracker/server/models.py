"""Pydantic request models for the HTTP API."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from ..domain.models import TaskPriority, TaskStatus, UserRole


class LoginRequest(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class CreateUserRequest(BaseModel):
    email: str = Field(min_length=1)
    name: str = Field(min_length=1)
    password: str = Field(min_length=1)
    role: UserRole
    team_id: Optional[str] = None


class UpdateUserRequest(BaseModel):
    email: Optional[str] = None
    name: Optional[str] = None
    password: Optional[str] = None
    role: Optional[UserRole] = None
    team_id: Optional[str] = None
    is_active: Optional[bool] = None


class CreateTeamRequest(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    team_lead_id: str = Field(min_length=1)


class UpdateTeamRequest(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    team_lead_id: Optional[str] = None
    is_active: Optional[bool] = None


class CreateTaskRequest(BaseModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    priority: TaskPriority
    team_id: str = Field(min_length=1)
    assignee_id: Optional[str] = None
    estimated_hours: Optional[float] = None
    due_date: Optional[str] = None


class UpdateTaskRequest(BaseModel):
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    assignee_id: Optional[str] = None
    estimated_hours: Optional[float] = None
    actual_hours: Optional[float] = None
    due_date: Optional[str] = None


class CommentRequest(BaseModel):
    content: str
