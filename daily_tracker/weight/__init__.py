# -*- coding: utf-8 -*-
"""Body weight, one entry per local date."""
