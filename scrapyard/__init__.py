"""
Scrapyard - Simulation engine for a turn-based bot squad survival game.

A squad of salvaged bots explores an endless procedurally generated
scrapyard, fights and recruits the machines it meets, and works through a
quest chain to repair and launch an escape pod.
"""

__version__ = "0.1.0"
