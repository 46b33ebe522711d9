# -*- coding: utf-8 -*-
"""Daily tracker backend: meals, activity, intestinal health and weight logging."""
