# -*- coding: utf-8 -*-
"""User preferences (history window, target reps, weight unit, health sync)."""
