"""
Combat system module for the resolution engine.

This module handles turn-based encounters: combatants, initiative ordering,
attack resolution, encounter outcomes and opponent decision making.
"""
