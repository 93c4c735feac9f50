# -*- coding: utf-8 -*-
"""Health records (workouts, nutrition, metrics, medications).

All four kinds share one owner-scoped CRUD shape; per-kind rules live in
``kinds.KINDS``.
"""
