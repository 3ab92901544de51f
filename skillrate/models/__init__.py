"""
Models Module
=============

Rating engines. Glicko2 implements Mark Glickman's Glicko-2 system: every
competitor carries a rating, a rating deviation and a volatility, and all
competitors of a rating period are updated together against the ratings they
held when the period began.
"""
