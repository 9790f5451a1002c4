# -*- coding: utf-8 -*-
"""Health-data sync — push completed workouts to a health platform endpoint."""
