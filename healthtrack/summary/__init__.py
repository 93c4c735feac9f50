# -*- coding: utf-8 -*-
"""Dashboard summary (today's workouts, calories eaten, active medications)."""
