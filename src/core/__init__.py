#!/usr/bin/env python3
"""
Core link checking engine: probing, per-item checking, scheduling and run control.
"""
