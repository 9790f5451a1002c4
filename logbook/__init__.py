# -*- coding: utf-8 -*-
"""Beat the Logbook backend: workouts, nutrition and nicotine tracking."""
