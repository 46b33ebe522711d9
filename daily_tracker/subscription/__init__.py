# -*- coding: utf-8 -*-
"""Free-tier usage limits and Stripe billing."""
