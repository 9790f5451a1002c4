# -*- coding: utf-8 -*-
"""Nicotine intake tracking against a daily goal."""
