"""
Takeoff measurement engine.

Pure Python math. No I/O, no storage, no HTTP.
Given raw user-drawn geometry plus engineering parameters, produce
dimensionally-consistent derived quantities and constraint checks.
"""
