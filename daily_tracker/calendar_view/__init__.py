# -*- coding: utf-8 -*-
"""Month and day views across every entry kind."""
