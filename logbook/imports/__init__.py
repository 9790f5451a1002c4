# -*- coding: utf-8 -*-
"""Workout imports from third-party app exports."""
