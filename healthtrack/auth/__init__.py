# -*- coding: utf-8 -*-
"""Credential store, server-side sessions and the request gate."""
