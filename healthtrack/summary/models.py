# -*- coding: utf-8 -*-
"""Dashboard summary — Pydantic models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class WorkoutsToday(BaseModel):
    count: int = Field(0, ge=0)
    calories: int = Field(0, ge=0)


class NutritionToday(BaseModel):
    calories: int = Field(0, ge=0)


class SummaryResponse(BaseModel):
    date: str = Field(..., description="YYYY-MM-DD")
    workouts_today: WorkoutsToday
    nutrition_today: NutritionToday
    active_medications: int = Field(0, ge=0)
