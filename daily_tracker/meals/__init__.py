# -*- coding: utf-8 -*-
"""Meal logging with estimated macros."""
