# -*- coding: utf-8 -*-
"""Nutrition domain (food lookup, diary, favorites, trends)."""
