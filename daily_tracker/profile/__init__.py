# -*- coding: utf-8 -*-
"""Profile attributes feeding the energy calculator."""
