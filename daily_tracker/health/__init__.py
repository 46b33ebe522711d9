# -*- coding: utf-8 -*-
"""Intestinal health observations."""
