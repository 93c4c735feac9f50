# -*- coding: utf-8 -*-
"""Personal health tracker: session auth plus per-user health records."""
