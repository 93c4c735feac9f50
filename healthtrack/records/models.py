# -*- coding: utf-8 -*-
"""Health records — Pydantic models."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class _Record(BaseModel):
    id: int
    user_id: int
    created_at: str


class WorkoutRecord(_Record):
    type: str
    duration: int = Field(..., gt=0, description="minutes")
    intensity: str
    calories_burned: int = Field(0, ge=0)
    notes: Optional[str] = None
    date: str = Field(..., description="YYYY-MM-DD")


class NutritionRecord(_Record):
    meal_type: str
    food_item: str
    calories: int = Field(..., ge=0)
    protein: float = Field(0.0, ge=0)
    carbs: float = Field(0.0, ge=0)
    fats: float = Field(0.0, ge=0)
    date: str = Field(..., description="YYYY-MM-DD")


class MetricRecord(_Record):
    weight: float = Field(0.0, ge=0)
    height: float = Field(0.0, ge=0)
    blood_pressure: Optional[str] = None
    heart_rate: int = Field(0, ge=0)
    sleep_hours: float = Field(0.0, ge=0)
    water_intake: int = Field(0, ge=0)
    mood: Optional[str] = None
    notes: Optional[str] = None
    date: str = Field(..., description="YYYY-MM-DD")


class MedicationRecord(_Record):
    name: str
    dosage: str
    frequency: str
    purpose: Optional[str] = None
    start_date: str = Field(..., description="YYYY-MM-DD")
    end_date: Optional[str] = None
    is_active: bool = True


class RecordCreatedResponse(BaseModel):
    id: int
    message: str


class RecordDeletedResponse(BaseModel):
    message: str
    deleted: bool
